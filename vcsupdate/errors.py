"""
Error taxonomy for vcsupdate.

Only InvalidRepositoryUrlError and UnsupportedOperationError ever reach the
host. Request-level failures (TransportError, ApiHttpError,
MalformedResponseError) are raised inside the clients and absorbed by the
public read operations, which return None instead.
"""

from typing import Optional


class VcsUpdateError(Exception):
    """Base class for all vcsupdate errors."""


class InvalidRepositoryUrlError(VcsUpdateError, ValueError):
    """Raised when a repository URL cannot be parsed into a namespace."""

    def __init__(self, url: str, provider: str = "repository"):
        super().__init__(f'Invalid {provider} repository URL: "{url}"')
        self.url = url
        self.provider = provider


class RequestError(VcsUpdateError):
    """A single API request produced no usable result."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TransportError(RequestError):
    """Network or connection failure before any HTTP status was received."""


class ApiHttpError(RequestError):
    """The API answered with a status other than 200."""

    def __init__(self, status_code: int, url: Optional[str] = None, provider: str = "VCS"):
        super().__init__(f"{provider} API error. HTTP status: {status_code}", url)
        self.status_code = status_code


class MalformedResponseError(RequestError):
    """The response body could not be turned into the expected shape."""

    def __init__(self, reason: str, url: Optional[str] = None):
        super().__init__(f"Malformed API response: {reason}", url)
        self.reason = reason


class UnsupportedOperationError(VcsUpdateError, NotImplementedError):
    """A provider does not implement the requested operation."""

    def __init__(self, provider: str, operation: str):
        super().__init__(f"{provider} client does not support {operation}()")
        self.provider = provider
        self.operation = operation
