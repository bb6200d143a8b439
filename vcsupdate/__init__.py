"""
vcsupdate - Update checks against version-control hosted repositories.

Given a repository on GitHub, GitLab or Bitbucket, vcsupdate works out which
tag or branch holds the latest release and returns a Reference with its
version and a ZIP archive download URL.

Quick Start:
    import vcsupdate

    ref = vcsupdate.resolve("https://gitlab.com/group/project")
    if ref:
        print(ref.version, ref.download_url)

    # Private repository, tracking a non-default branch
    client = vcsupdate.create_client("https://github.com/owner/repo", "ghp_...")
    ref = client.choose_reference("develop")

Resolution order:
    1. readme "Stable tag" (a tag, or the branch / "trunk" to opt out of tags)
    2. highest version tag (default branch only)
    3. the branch itself
"""

__version__ = "0.3.0"

from .domain import Reference
from .errors import (
    VcsUpdateError,
    InvalidRepositoryUrlError,
    RequestError,
    TransportError,
    ApiHttpError,
    MalformedResponseError,
    UnsupportedOperationError,
)
from .identity import RepositoryIdentity, parse_repository_url, parse_gitlab_url
from .infra import HttpTransport, HttpResponse
from .vcs import VcsApi, GitHubApi, GitLabApi, BitbucketApi, create_client, detect_provider
from .resolver import choose_reference, resolve
from .versions import looks_like_version, sort_tags_by_version, is_version_newer
from .config import load_config, save_config

__all__ = [
    "__version__",
    # Domain
    "Reference",
    "RepositoryIdentity",
    # Errors
    "VcsUpdateError",
    "InvalidRepositoryUrlError",
    "RequestError",
    "TransportError",
    "ApiHttpError",
    "MalformedResponseError",
    "UnsupportedOperationError",
    # Parsing and versions
    "parse_repository_url",
    "parse_gitlab_url",
    "looks_like_version",
    "sort_tags_by_version",
    "is_version_newer",
    # Clients
    "HttpTransport",
    "HttpResponse",
    "VcsApi",
    "GitHubApi",
    "GitLabApi",
    "BitbucketApi",
    "create_client",
    "detect_provider",
    # Resolution
    "choose_reference",
    "resolve",
    # Configuration
    "load_config",
    "save_config",
]
