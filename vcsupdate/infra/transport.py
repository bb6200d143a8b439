"""
HTTP transport for vcsupdate.

The VCS clients never talk to the network directly; they hand a URL and an
options dict to a transport and get back a status code and a body. The
default transport is a thin wrapper over a requests Session. Tests and
hosts can pass any object with a compatible ``get(url, options)`` method.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from ..errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

OptionsFilter = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass
class HttpResponse:
    """Status code and raw text body of a completed request."""
    status_code: int
    body: str = ''


class HttpTransport:
    """
    Blocking HTTP GET over requests.

    Example:
        transport = HttpTransport(timeout=5)
        response = transport.get("https://gitlab.com/api/v4/projects/a%2Fb")
        print(response.status_code)
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        options_filter: Optional[OptionsFilter] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HttpTransport.

        Args:
            timeout: Default request timeout in seconds
            options_filter: Hook that may rewrite the request options before dispatch
            session: Session to reuse (a new one is created if omitted)
        """
        self.timeout = timeout
        self.options_filter = options_filter
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'vcsupdate',
        })

    def get(self, url: str, options: Optional[Dict[str, Any]] = None) -> HttpResponse:
        """
        Perform a GET request.

        Args:
            url: Fully built URL, query string included
            options: Request options; ``timeout`` and ``headers`` are honored

        Returns:
            HttpResponse with whatever status the server sent

        Raises:
            TransportError: If no response was received
        """
        options = dict(options or {})
        options.setdefault('timeout', self.timeout)
        if self.options_filter is not None:
            options = self.options_filter(options)

        try:
            response = self.session.get(
                url,
                headers=options.get('headers') or None,
                timeout=options.get('timeout', self.timeout),
            )
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}", url) from e

        return HttpResponse(
            status_code=response.status_code,
            body=response.text,
        )
