"""
GitHub API client for vcsupdate.

API calls send the token in an ``Authorization`` header; archive download
URLs are signed with an ``access_token`` query parameter. GitHub Enterprise
hosts are reached through their ``/api/v3`` endpoint.

GitHub has no single-tag lookup here: ``get_tag`` is unsupported, and the
readme "Stable tag" is matched against the tag list instead.
"""

import logging
from typing import Any, Dict, List, Optional

from ..domain.reference import Reference
from ..errors import UnsupportedOperationError
from ..identity import RepositoryIdentity, parse_repository_url
from ..readme import opts_out_of_tags
from ..versions import sort_tags_by_version
from .base import VcsApi, first_item

logger = logging.getLogger(__name__)

PUBLIC_HOST = 'github.com'
PUBLIC_API = 'https://api.github.com'


class GitHubApi(VcsApi):
    """GitHub REST API v3 client."""

    provider = 'GitHub'
    auth_parameter = 'access_token'
    auth_in_query = False

    @classmethod
    def parse_identity(cls, repository_url: str) -> RepositoryIdentity:
        return parse_repository_url(repository_url, provider='GitHub')

    @property
    def api_base(self) -> str:
        host = self.identity.host
        if not host or host in (PUBLIC_HOST, 'www.github.com'):
            return PUBLIC_API
        return f"{self.identity.scheme}://{self.identity.netloc}/api/v3"

    def _api_url(self, path: str) -> str:
        return f"{self.api_base}/repos/{self.namespace}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/vnd.github.v3+json'}
        if self.credentials:
            headers['Authorization'] = f'token {self.credentials}'
        return headers

    def _list_tags(self) -> List[Dict[str, Any]]:
        tags = self._fetch('/tags', {'per_page': 100})
        if not isinstance(tags, list):
            return []
        return [t for t in tags if isinstance(t, dict) and t.get('name')]

    def get_latest_tag(self) -> Optional[Reference]:
        """Get the tag that looks like the highest version number."""
        version_tags = sort_tags_by_version(self._list_tags())
        if not version_tags:
            return None
        name = version_tags[0]['name']
        return Reference.for_tag(name, self.build_archive_download_url(name))

    def get_tag(self, tag_name: str) -> Optional[Reference]:
        raise UnsupportedOperationError(self.provider, 'get_tag')

    def get_stable_tag(self, branch: str) -> Optional[Reference]:
        """Resolve the readme "Stable tag" by scanning the tag list."""
        stable_tag = self.get_remote_readme(branch).get('stable_tag')
        if not stable_tag:
            return None
        if opts_out_of_tags(stable_tag, branch):
            return self.get_branch(branch)
        for tag in self._list_tags():
            if tag['name'] == stable_tag:
                return Reference.for_tag(stable_tag, self.build_archive_download_url(stable_tag))
        logger.debug(f"GitHub: stable tag {stable_tag!r} not found in {self.namespace}")
        return None

    def get_branch(self, branch_name: str) -> Optional[Reference]:
        """Get a branch by name."""
        branch = self._fetch(f'/branches/{self._quote(branch_name)}')
        if not isinstance(branch, dict) or not branch.get('name'):
            return None

        return Reference(
            name=branch['name'],
            download_url=self.build_archive_download_url(branch['name']),
            updated=self._dig(branch, 'commit', 'commit', 'author', 'date'),
        )

    def get_latest_commit(self, path: str, ref: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get the latest commit that changed ``path`` on ``ref``."""
        return first_item(self._fetch('/commits', {'path': path, 'sha': ref or self.default_branch}))

    def get_latest_commit_time(self, ref: str) -> Optional[str]:
        """Get the timestamp of the latest commit on a branch or tag."""
        commit = first_item(self._fetch('/commits', {'sha': ref}))
        return self._dig(commit, 'commit', 'author', 'date')

    def get_remote_file(self, path: str, ref: Optional[str] = None) -> Optional[str]:
        """Get the contents of a file from a branch or tag."""
        document = self._fetch(f"/contents/{path.lstrip('/')}", {'ref': ref or self.default_branch})
        return self._decode_base64_file(document, path)

    def build_archive_download_url(self, ref: Optional[str] = None) -> str:
        """Generate a URL to download a ZIP archive of a branch or tag."""
        url = f"{self.api_base}/repos/{self.namespace}/zipball/{self._quote(ref or self.default_branch)}"
        return self.sign_download_url(url)
