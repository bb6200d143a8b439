"""
Shared fixtures for vcsupdate tests.

FakeTransport stands in for HttpTransport: it maps URLs to canned
responses and records every request, so no test touches the network.
"""

import base64
import json

import pytest

from vcsupdate.infra.transport import HttpResponse


class FakeTransport:
    """Route table of URL -> HttpResponse (or exception to raise)."""

    def __init__(self, default_status=404):
        self.routes = {}
        self.requests = []
        self.default_status = default_status

    def add(self, url, body=None, status=200, raw=None):
        """Register a response; ``body`` is JSON-encoded, ``raw`` is sent as-is."""
        text = raw if raw is not None else json.dumps(body)
        self.routes[url] = HttpResponse(status_code=status, body=text)
        return self

    def fail(self, url, exc):
        self.routes[url] = exc
        return self

    def get(self, url, options=None):
        self.requests.append((url, options or {}))
        # Exact URL first, then URL without its query string
        response = self.routes.get(url)
        if response is None:
            response = self.routes.get(url.split('?', 1)[0])
        if response is None:
            return HttpResponse(status_code=self.default_status, body='{"message": "404 Not Found"}')
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def urls(self):
        return [url for url, _ in self.requests]


def base64_file(text, encoding='base64'):
    """A GitLab/GitHub style file document."""
    return {
        'file_name': 'readme.txt',
        'encoding': encoding,
        'content': base64.b64encode(text.encode('utf-8')).decode('ascii'),
    }


@pytest.fixture
def transport():
    return FakeTransport()
