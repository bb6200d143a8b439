"""
Reference domain object for vcsupdate.

A Reference is the resolved "latest" pointer into a repository: a tag or a
branch head, plus the archive URL a host can download to install it.
References are immutable value objects created fresh on every resolution.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class Reference:
    """
    Resolved update source.

    Attributes:
        name: Tag or branch name as the provider reports it (e.g. "v1.2.0")
        download_url: Archive URL for the ref, already signed if needed
        version: Tag name without a leading "v", or None for branches
        updated: Provider timestamp string of the last change, if known
    """

    name: str
    download_url: str
    version: Optional[str] = None
    updated: Optional[str] = None

    @classmethod
    def for_tag(cls, name: str, download_url: str, updated: Optional[str] = None) -> 'Reference':
        """Build a reference for a tag, deriving the display version."""
        return cls(
            name=name,
            download_url=download_url,
            version=strip_version_prefix(name),
            updated=updated,
        )

    @property
    def updated_datetime(self) -> Optional[datetime]:
        """Parse ``updated`` as an ISO-8601 datetime, or None."""
        if not self.updated:
            return None
        try:
            return datetime.fromisoformat(self.updated.replace('Z', '+00:00'))
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            'name': self.name,
            'version': self.version,
            'updated': self.updated,
            'download_url': self.download_url,
        }


def strip_version_prefix(name: str) -> str:
    """Strip leading "v" characters from a tag name ("v1.2" -> "1.2")."""
    return name.lstrip('v')
