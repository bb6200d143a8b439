"""
Domain layer for vcsupdate.

Contains pure value objects with no I/O:
- Reference: the resolved tag or branch a host should update to
"""

from .reference import Reference, strip_version_prefix

__all__ = [
    'Reference',
    'strip_version_prefix',
]
