"""
VCS provider clients for vcsupdate.

Contains one client per supported hosting provider:
- GitLabApi: gitlab.com and self-hosted GitLab
- GitHubApi: github.com and GitHub Enterprise
- BitbucketApi: bitbucket.org

``create_client`` picks the provider from the repository host, or from an
explicit ``provider`` name for short forms and unusual host names.
"""

from typing import Any, Dict, Optional, Type
from urllib.parse import urlparse

from ..errors import InvalidRepositoryUrlError
from .base import VcsApi
from .bitbucket import BitbucketApi
from .github import GitHubApi
from .gitlab import GitLabApi

PROVIDERS: Dict[str, Type[VcsApi]] = {
    'github': GitHubApi,
    'gitlab': GitLabApi,
    'bitbucket': BitbucketApi,
}


def detect_provider(repository_url: str) -> Optional[str]:
    """
    Guess the provider name from a repository URL's host.

    Returns:
        "github", "gitlab", "bitbucket", or None if the host is not recognized
    """
    url = (repository_url or '').strip()
    if url.startswith('git@'):
        host = url[len('git@'):].split(':', 1)[0].split('/', 1)[0]
    else:
        host = urlparse(url).hostname or ''
    host = host.lower()
    for name in PROVIDERS:
        if name in host:
            return name
    return None


def create_client(
    repository_url: str,
    credentials: Optional[Any] = None,
    provider: Optional[str] = None,
    **options: Any,
) -> VcsApi:
    """
    Construct the client for a repository.

    Args:
        repository_url: Repository URL or short "owner/repo" form
        credentials: Access token, or None
        provider: Force a provider ("github", "gitlab", "bitbucket")
        **options: Passed through to the client constructor
            (transport, default_branch, timeout, stable_tag_detection, readme_name)

    Returns:
        Provider-specific VcsApi instance

    Raises:
        InvalidRepositoryUrlError: Unknown provider or unparseable URL
    """
    name = (provider or detect_provider(repository_url) or '').lower()
    client_class = PROVIDERS.get(name)
    if client_class is None:
        raise InvalidRepositoryUrlError(repository_url, provider or 'supported VCS')
    return client_class(repository_url, credentials, **options)


__all__ = [
    'VcsApi',
    'GitHubApi',
    'GitLabApi',
    'BitbucketApi',
    'PROVIDERS',
    'detect_provider',
    'create_client',
]
