"""
Bitbucket Cloud API client for vcsupdate.

Uses the 2.0 REST API. Tags come back newest-first by target date, paginated
under ``values``. File contents are served raw rather than as JSON.
Access tokens travel as a Bearer header for API calls and as an
``access_token`` query parameter on archive URLs.
"""

import logging
from typing import Any, Dict, List, Optional

from ..domain.reference import Reference
from ..identity import RepositoryIdentity, parse_repository_url
from ..versions import sort_tags_by_version
from .base import VcsApi, first_item

logger = logging.getLogger(__name__)

API_BASE = 'https://api.bitbucket.org/2.0/repositories'
WEB_BASE = 'https://bitbucket.org'


class BitbucketApi(VcsApi):
    """Bitbucket Cloud API client."""

    provider = 'Bitbucket'
    auth_parameter = 'access_token'
    auth_in_query = False

    @classmethod
    def parse_identity(cls, repository_url: str) -> RepositoryIdentity:
        return parse_repository_url(repository_url, provider='Bitbucket')

    def _api_url(self, path: str) -> str:
        return f"{API_BASE}/{self.namespace}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        if self.credentials:
            return {'Authorization': f'Bearer {self.credentials}'}
        return {}

    def _list_tags(self) -> List[Dict[str, Any]]:
        tags = self._fetch('/refs/tags', {'sort': '-target.date', 'pagelen': 100})
        values = tags.get('values') if isinstance(tags, dict) else None
        if not isinstance(values, list):
            return []
        return [t for t in values if isinstance(t, dict) and t.get('name')]

    def get_latest_tag(self) -> Optional[Reference]:
        """Get the tag that looks like the highest version number."""
        version_tags = sort_tags_by_version(self._list_tags())
        if not version_tags:
            return None
        return self._tag_reference(version_tags[0])

    def get_tag(self, tag_name: str) -> Optional[Reference]:
        """Get a specific tag."""
        tag = self._fetch(f'/refs/tags/{self._quote(tag_name)}')
        if not isinstance(tag, dict) or not tag.get('name'):
            return None
        return self._tag_reference(tag)

    def get_branch(self, branch_name: str) -> Optional[Reference]:
        """Get a branch by name."""
        branch = self._fetch(f'/refs/branches/{self._quote(branch_name)}')
        if not isinstance(branch, dict) or not branch.get('name'):
            return None

        return Reference(
            name=branch['name'],
            download_url=self.build_archive_download_url(branch['name']),
            updated=self._dig(branch, 'target', 'date'),
        )

    def get_latest_commit(self, path: str, ref: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get the latest commit that changed ``path`` on ``ref``."""
        ref = ref or self.default_branch
        return first_item(self._fetch(f'/commits/{self._quote(ref)}', {'path': path, 'pagelen': 1}))

    def get_latest_commit_time(self, ref: str) -> Optional[str]:
        """Get the timestamp of the latest commit on a branch or tag."""
        commit = first_item(self._fetch(f'/commits/{self._quote(ref)}', {'pagelen': 1}))
        if commit is None:
            return None
        return commit.get('date')

    def get_remote_file(self, path: str, ref: Optional[str] = None) -> Optional[str]:
        """Get the contents of a file from a branch or tag."""
        ref = ref or self.default_branch
        content = self._fetch(f"/src/{self._quote(ref)}/{path.lstrip('/')}", raw=True)
        return content if isinstance(content, str) else None

    def build_archive_download_url(self, ref: Optional[str] = None) -> str:
        """Generate a URL to download a ZIP archive of a branch or tag."""
        url = f"{WEB_BASE}/{self.namespace}/get/{self._quote(ref or self.default_branch)}.zip"
        return self.sign_download_url(url)

    def _tag_reference(self, tag: Dict[str, Any]) -> Reference:
        return Reference.for_tag(
            tag['name'],
            self.build_archive_download_url(tag['name']),
            updated=self._dig(tag, 'target', 'date'),
        )
