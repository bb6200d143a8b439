"""
Infrastructure layer for vcsupdate.

Contains abstractions for external systems:
- HttpTransport: blocking HTTP GET (requests)

These provide clean interfaces that can be replaced with fakes for testing.
"""

from .transport import HttpTransport, HttpResponse, DEFAULT_TIMEOUT

__all__ = [
    'HttpTransport',
    'HttpResponse',
    'DEFAULT_TIMEOUT',
]
