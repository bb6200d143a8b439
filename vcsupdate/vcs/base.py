"""
Common VCS API client for vcsupdate.

Every provider client exposes the same small operation set (latest tag,
single tag, branch, latest commit time, remote file, archive URL) on top of
one request pattern:

1. Substitute the repository namespace into a provider path template
2. Attach credentials (query parameter or header, depending on provider)
3. GET through the transport
4. Non-200 -> ApiHttpError, transport failure -> TransportError,
   unparseable body -> MalformedResponseError

Public read operations absorb those errors, log them, and return None. The
resolver treats None as "try the next strategy".
"""

import base64
import binascii
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from ..domain.reference import Reference
from ..errors import (
    ApiHttpError,
    MalformedResponseError,
    RequestError,
)
from ..identity import RepositoryIdentity
from ..infra.transport import DEFAULT_TIMEOUT, HttpTransport
from ..readme import opts_out_of_tags, parse_readme_headers
from ..versions import sort_tags_by_version

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = 'master'
DEFAULT_README = 'readme.txt'
CHANGELOG_NAMES = ('CHANGES.md', 'CHANGELOG.md', 'changes.md', 'changelog.md')


class VcsApi(ABC):
    """
    Base class for provider API clients.

    Subclasses set ``provider`` and ``auth_parameter``, implement
    ``parse_identity`` and the abstract read operations, and build their
    endpoints on ``_fetch``.

    Example:
        client = GitLabApi("https://gitlab.com/group/project", "glpat-...")
        ref = client.choose_reference("master")
        if ref:
            print(ref.version, ref.download_url)
    """

    provider = 'VCS'
    auth_parameter = 'access_token'
    # False: credentials travel in a header for API calls (see _auth_headers)
    auth_in_query = True

    def __init__(
        self,
        repository_url: str,
        credentials: Optional[Any] = None,
        *,
        transport: Optional[Any] = None,
        default_branch: str = DEFAULT_BRANCH,
        timeout: float = DEFAULT_TIMEOUT,
        stable_tag_detection: bool = True,
        readme_name: str = DEFAULT_README,
    ):
        """
        Initialize the client.

        Args:
            repository_url: Repository URL or short "owner/repo" form
            credentials: Access token, or None for public repositories
            transport: Object with ``get(url, options)``; defaults to HttpTransport
            default_branch: Name of the repository's primary branch
            timeout: Request timeout in seconds
            stable_tag_detection: Whether the resolver reads the readme "Stable tag"
            readme_name: Readme file consulted for the stable tag

        Raises:
            InvalidRepositoryUrlError: If the URL has no usable namespace
        """
        self.repository_url = repository_url
        self.identity = self.parse_identity(repository_url)
        self.transport = transport if transport is not None else HttpTransport(timeout=timeout)
        self.default_branch = default_branch or DEFAULT_BRANCH
        self.timeout = timeout
        self.stable_tag_detection = stable_tag_detection
        self.readme_name = readme_name or DEFAULT_README
        self.credentials: Optional[Any] = None
        self.set_authentication(credentials)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.namespace!r})"

    @property
    def namespace(self) -> str:
        """Repository path as the provider knows it."""
        return self.identity.namespace

    # ------------------------------------------------------------------
    # Provider contract
    # ------------------------------------------------------------------

    @classmethod
    @abstractmethod
    def parse_identity(cls, repository_url: str) -> RepositoryIdentity:
        """Parse ``repository_url`` into this provider's identity."""

    @abstractmethod
    def _list_tags(self) -> List[Dict[str, Any]]:
        """Fetch the provider-native tag objects (each has a "name")."""

    @abstractmethod
    def get_latest_tag(self) -> Optional[Reference]:
        """Return the tag that looks like the highest version number."""

    @abstractmethod
    def get_tag(self, tag_name: str) -> Optional[Reference]:
        """Return a specific tag."""

    @abstractmethod
    def get_branch(self, branch_name: str) -> Optional[Reference]:
        """Return the head of a branch."""

    @abstractmethod
    def get_latest_commit_time(self, ref: str) -> Optional[str]:
        """Return the timestamp of the latest commit on a branch or tag."""

    @abstractmethod
    def get_latest_commit(self, path: str, ref: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Return the provider's record of the latest commit that touched ``path``."""

    @abstractmethod
    def get_remote_file(self, path: str, ref: Optional[str] = None) -> Optional[str]:
        """Return the text of a file at ``ref``, or None."""

    @abstractmethod
    def build_archive_download_url(self, ref: Optional[str] = None) -> str:
        """Return a (signed) URL for a ZIP archive of ``ref``."""

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def set_authentication(self, credentials: Optional[Any]) -> None:
        """Replace the stored credentials; empty values clear them."""
        self.credentials = credentials if credentials else None

    def sign_download_url(self, url: str) -> str:
        """
        Append the auth query parameter to a download URL.

        Returns ``url`` unchanged when no credentials are set or when the URL
        already carries this exact token.
        """
        if not self.credentials:
            return url
        token = str(self.credentials)
        parts = urlsplit(url)
        if (self.auth_parameter, token) in parse_qsl(parts.query, keep_blank_values=True):
            return url
        # The existing query is kept byte for byte
        param = f"{self.auth_parameter}={quote(token, safe='')}"
        query = f"{parts.query}&{param}" if parts.query else param
        return urlunsplit(parts._replace(query=query))

    def _auth_query(self) -> Dict[str, str]:
        if self.credentials and self.auth_in_query:
            return {self.auth_parameter: str(self.credentials)}
        return {}

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    # ------------------------------------------------------------------
    # Resolution helpers
    # ------------------------------------------------------------------

    def get_version_tags(self) -> List[str]:
        """Names of the version-like tags, highest version first."""
        return [tag['name'] for tag in sort_tags_by_version(self._list_tags())]

    def get_remote_readme(self, ref: Optional[str] = None) -> Dict[str, str]:
        """Parse the header block of the remote readme at ``ref``."""
        return parse_readme_headers(self.get_remote_file(self.readme_name, ref))

    def get_stable_tag(self, branch: str) -> Optional[Reference]:
        """
        Get the tag or branch named by the readme's "Stable tag" header.

        A stable tag equal to ``branch`` or "trunk" resolves to the branch
        itself; any other value is looked up as a tag.
        """
        stable_tag = self.get_remote_readme(branch).get('stable_tag')
        if not stable_tag:
            return None
        if opts_out_of_tags(stable_tag, branch):
            return self.get_branch(branch)
        return self.get_tag(stable_tag)

    def get_remote_changelog(self, ref: Optional[str] = None) -> Optional[str]:
        """Return the first changelog file found at ``ref``."""
        for filename in CHANGELOG_NAMES:
            content = self.get_remote_file(filename, ref)
            if content is not None:
                return content
        return None

    def choose_reference(self, config_branch: Optional[str] = None) -> Optional[Reference]:
        """Figure out which tag or branch holds the latest version."""
        from ..resolver import choose_reference
        return choose_reference(self, config_branch)

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    @abstractmethod
    def _api_url(self, path: str) -> str:
        """Expand a provider path template into an absolute API URL."""

    def _build_url(self, path: str, query: Optional[Dict[str, Any]] = None) -> str:
        url = self._api_url(path)
        params = {k: v for k, v in (query or {}).items() if v is not None}
        params.update(self._auth_query())
        if params:
            separator = '&' if '?' in url else '?'
            url = f"{url}{separator}{urlencode(params)}"
        return url

    def _request(self, url: str) -> str:
        """GET ``url`` and return the body of a 200 response."""
        options: Dict[str, Any] = {'timeout': self.timeout}
        headers = self._auth_headers()
        if headers:
            options['headers'] = headers

        response = self.transport.get(url, options)
        if response.status_code != 200:
            raise ApiHttpError(response.status_code, url, self.provider)
        return response.body

    def _api(self, path: str, query: Optional[Dict[str, Any]] = None, raw: bool = False) -> Any:
        """
        Perform an API request.

        Args:
            path: Endpoint path, relative to the provider API base
            query: Extra query parameters
            raw: Return the body text instead of decoded JSON

        Raises:
            RequestError: On transport failure, non-200 status or bad JSON
        """
        url = self._build_url(path, query)
        body = self._request(url)
        if raw:
            return body
        try:
            return json.loads(body)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(f"invalid JSON ({e})", url) from e

    def _fetch(self, path: str, query: Optional[Dict[str, Any]] = None, raw: bool = False) -> Any:
        """Like ``_api`` but logs failures and returns None instead of raising."""
        try:
            return self._api(path, query, raw=raw)
        except ApiHttpError as e:
            log = logger.debug if e.status_code == 404 else logger.warning
            log(f"{self.provider} API returned {e.status_code} for {self._redact(e.url)}")
        except RequestError as e:
            logger.warning(f"{self.provider} request failed for {self._redact(e.url)}: {e}")
        return None

    def _redact(self, url: Optional[str]) -> str:
        if not url or not self.credentials:
            return url or ''
        return url.replace(quote(str(self.credentials), safe=''), '***').replace(str(self.credentials), '***')

    def _decode_base64_file(self, document: Any, path: str) -> Optional[str]:
        """Decode a ``{"content": ..., "encoding": "base64"}`` file document."""
        if not isinstance(document, dict) or 'content' not in document:
            return None
        if document.get('encoding') != 'base64':
            logger.warning(f"{self.provider}: unexpected encoding {document.get('encoding')!r} for {path}")
            return None
        try:
            return base64.b64decode(document['content']).decode('utf-8')
        except (binascii.Error, TypeError, UnicodeDecodeError) as e:
            logger.warning(f"{self.provider}: could not decode {path}: {e}")
            return None

    @staticmethod
    def _quote(value: str) -> str:
        """URL-encode a single path segment (slashes included)."""
        return quote(value, safe='')

    @staticmethod
    def _dig(data: Any, *keys: str) -> Any:
        """Walk nested dicts, returning None on the first missing key."""
        for key in keys:
            if not isinstance(data, dict):
                return None
            data = data.get(key)
        return data


def first_item(data: Any) -> Optional[Dict[str, Any]]:
    """First element of a JSON list (or of a paginated ``values`` list)."""
    if isinstance(data, dict):
        data = data.get('values')
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return None

