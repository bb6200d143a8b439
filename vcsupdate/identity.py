"""
Repository identity parsing for vcsupdate.

Turns a repository URL (or a short "owner/repo" form) into the namespace a
provider API expects:

    https://github.com/owner/repo          -> owner/repo
    https://gitlab.com/group/sub/project   -> group/sub/project
    git@gitlab.com:group/project.git       -> group/project

Parsing happens once, when a client is constructed. A URL that does not fit
the provider's path grammar raises InvalidRepositoryUrlError.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern
from urllib.parse import urlparse

from .errors import InvalidRepositoryUrlError

# owner/name, exactly two path segments
OWNER_REPO_PATTERN = re.compile(r'^/?(?P<namespace>[^/]+?)/(?P<repository>[^/#?&]+?)/?$')

# GitLab allows nested groups: group/subgroup/.../project
GITLAB_PATTERN = re.compile(r'^/?(?P<namespace>[^#?&]+?)/(?P<repository>[^/#?&]+?)/?$')

# scp-like remote: git@host:path (ssh:// URLs go through urlparse)
_SCP_URL = re.compile(r'^git@(?P<host>[^:/]+):(?P<path>.+)$')


@dataclass(frozen=True)
class RepositoryIdentity:
    """
    Provider-specific repository path.

    Attributes:
        namespace: Full path such as "owner/repo" or "group/sub/project"
        host: Host name taken from the URL, or None for short forms
        scheme: URL scheme, "https" unless the URL said otherwise
        port: Explicit web port from the URL, or None for the scheme default
    """

    namespace: str
    host: Optional[str] = None
    scheme: str = 'https'
    port: Optional[int] = None

    @property
    def netloc(self) -> Optional[str]:
        """Host with the explicit port appended, or None for short forms."""
        if not self.host:
            return None
        if self.port:
            return f"{self.host}:{self.port}"
        return self.host

    def __str__(self) -> str:
        return self.namespace


def parse_repository_url(
    repository_url: str,
    pattern: Pattern[str] = OWNER_REPO_PATTERN,
    provider: str = 'repository',
) -> RepositoryIdentity:
    """
    Parse a repository URL against a provider path grammar.

    Args:
        repository_url: Full URL, SSH remote, or short "owner/repo" form
        pattern: Compiled regex with ``namespace`` and ``repository`` groups
        provider: Provider label used in the error message

    Returns:
        RepositoryIdentity for the URL

    Raises:
        InvalidRepositoryUrlError: If the path does not match ``pattern``
    """
    if not repository_url or not repository_url.strip():
        raise InvalidRepositoryUrlError(repository_url or '', provider)

    url = repository_url.strip()
    scp = _SCP_URL.match(url)
    if scp:
        url = f"ssh://git@{scp.group('host')}/{scp.group('path')}"

    parsed = urlparse(url)
    try:
        port = parsed.port
    except ValueError:
        raise InvalidRepositoryUrlError(repository_url, provider) from None

    scheme = parsed.scheme
    if scheme not in ('http', 'https'):
        # An SSH port says nothing about where the web API lives
        scheme, port = 'https', None

    # GitLab web URLs put pages after "/-/": group/project/-/tree/main
    path = (parsed.path or '').split('/-/', 1)[0]
    if path.endswith('.git'):
        path = path[:-len('.git')]

    match = pattern.match(path)
    if not match:
        raise InvalidRepositoryUrlError(repository_url, provider)

    namespace = f"{match.group('namespace').strip('/')}/{match.group('repository')}"
    if '//' in namespace:
        raise InvalidRepositoryUrlError(repository_url, provider)

    return RepositoryIdentity(
        namespace=namespace,
        host=parsed.hostname or None,
        scheme=scheme,
        port=port,
    )


def parse_gitlab_url(repository_url: str) -> RepositoryIdentity:
    """Parse a GitLab URL; nested group paths are allowed."""
    return parse_repository_url(repository_url, GITLAB_PATTERN, 'GitLab')
