"""
GitLab API client for vcsupdate.

Works against gitlab.com and self-hosted instances; the API host is taken
from the repository URL. Nested group namespaces are supported, e.g.
https://gitlab.example.com/group/subgroup/project.

Private repositories authenticate with a ``private_token`` query parameter,
both for API calls and for archive downloads.
"""

import logging
from typing import Any, Dict, List, Optional

from ..domain.reference import Reference
from ..identity import RepositoryIdentity, parse_gitlab_url
from ..versions import sort_tags_by_version
from .base import VcsApi, first_item

logger = logging.getLogger(__name__)

DEFAULT_HOST = 'gitlab.com'


class GitLabApi(VcsApi):
    """
    GitLab REST API v4 client.

    Example:
        client = GitLabApi("https://gitlab.com/group/sub/project")
        tag = client.get_latest_tag()
    """

    provider = 'GitLab'
    auth_parameter = 'private_token'

    @classmethod
    def parse_identity(cls, repository_url: str) -> RepositoryIdentity:
        return parse_gitlab_url(repository_url)

    @property
    def host(self) -> str:
        """Host (and explicit port) of the GitLab instance."""
        return self.identity.netloc or DEFAULT_HOST

    @property
    def base_url(self) -> str:
        return f"{self.identity.scheme}://{self.host}"

    def _api_url(self, path: str) -> str:
        path = path.replace('/:namespace', '/' + self._quote(self.namespace))
        return f"{self.base_url}/api/v4{path}"

    def _list_tags(self) -> List[Dict[str, Any]]:
        tags = self._fetch('/projects/:namespace/repository/tags', {'per_page': 100})
        if not isinstance(tags, list):
            return []
        return [t for t in tags if isinstance(t, dict) and t.get('name')]

    def get_latest_tag(self) -> Optional[Reference]:
        """Get the tag that looks like the highest version number."""
        version_tags = sort_tags_by_version(self._list_tags())
        if not version_tags:
            return None

        return self._tag_reference(version_tags[0])

    def get_tag(self, tag_name: str) -> Optional[Reference]:
        """Get a specific tag."""
        tag = self._fetch(f'/projects/:namespace/repository/tags/{self._quote(tag_name)}')
        if not isinstance(tag, dict) or not tag.get('name'):
            return None
        return self._tag_reference(tag)

    def get_branch(self, branch_name: str) -> Optional[Reference]:
        """Get a branch by name."""
        branch = self._fetch(f'/projects/:namespace/repository/branches/{self._quote(branch_name)}')
        if not isinstance(branch, dict) or not branch.get('name'):
            return None

        return Reference(
            name=branch['name'],
            download_url=self.build_archive_download_url(branch['name']),
            updated=self._dig(branch, 'commit', 'committed_date'),
        )

    def get_latest_commit(self, path: str, ref: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get the latest commit that changed ``path`` on ``ref``."""
        commits = self._fetch(
            '/projects/:namespace/repository/commits',
            {'ref_name': ref or self.default_branch, 'path': path},
        )
        return first_item(commits)

    def get_latest_commit_time(self, ref: str) -> Optional[str]:
        """Get the timestamp of the latest commit on a branch or tag."""
        commit = first_item(self._fetch('/projects/:namespace/repository/commits', {'ref_name': ref}))
        if commit is None:
            return None
        return commit.get('committed_date')

    def get_remote_file(self, path: str, ref: Optional[str] = None) -> Optional[str]:
        """Get the contents of a file from a branch or tag."""
        document = self._fetch(
            f'/projects/:namespace/repository/files/{self._quote(path)}',
            {'ref': ref or self.default_branch},
        )
        return self._decode_base64_file(document, path)

    def build_archive_download_url(self, ref: Optional[str] = None) -> str:
        """Generate a URL to download a ZIP archive of a branch or tag."""
        url = (
            f"{self.base_url}/{self.namespace}/repository/archive.zip"
            f"?ref={self._quote(ref or self.default_branch)}"
        )
        return self.sign_download_url(url)

    def _tag_reference(self, tag: Dict[str, Any]) -> Reference:
        return Reference.for_tag(
            tag['name'],
            self.build_archive_download_url(tag['name']),
            updated=self._dig(tag, 'commit', 'committed_date'),
        )
