"""
Version-aware tag handling for vcsupdate.

Tag names are filtered down to the ones that look like version numbers
("1.2.3", "v2.0", "3.1-beta") and ordered highest first. Ordering is
numeric per segment, so 1.10.0 sorts above 1.9.0 and 1.2.0.

PEP 440 parsing (packaging.version) is used when both sides parse; other
version-like strings fall back to a segment-by-segment comparison.
"""

import re
from functools import cmp_to_key
from itertools import zip_longest
from typing import Any, Iterable, List, Mapping, Union

from packaging.version import Version, InvalidVersion

from .domain.reference import strip_version_prefix

# Up to five numeric segments, then end of string or a pre-release/build marker
_VERSION_LIKE = re.compile(r'^(\d{1,5})(\.\d{1,10}){0,4}($|[abrdp+_\-]|\s)', re.IGNORECASE)

TagLike = Union[str, Mapping[str, Any]]


def looks_like_version(name: str) -> bool:
    """
    Check whether a tag name looks like a version number.

    Examples:
        looks_like_version("v1.2.0")        -> True
        looks_like_version("2.0-beta1")     -> True
        looks_like_version("release-notes") -> False
    """
    if not isinstance(name, str):
        return False
    name = strip_version_prefix(name.strip())
    if not name or not name[0].isdigit():
        return False
    return _VERSION_LIKE.match(name) is not None


def _segments(version: str) -> List[Any]:
    parts: List[Any] = []
    for chunk in re.split(r'[.\-+_\s]', strip_version_prefix(version.strip())):
        if not chunk:
            continue
        # "10rc1" -> 10, "rc", 1
        for piece in re.findall(r'\d+|[a-zA-Z]+', chunk):
            parts.append(int(piece) if piece.isdigit() else piece.lower())
    return parts


def _compare_segments(left: List[Any], right: List[Any]) -> int:
    for a, b in zip_longest(left, right, fillvalue=0):
        if a == b:
            continue
        if isinstance(a, int) and isinstance(b, int):
            return -1 if a < b else 1
        # A number outranks a pre-release word at the same position: 1.0.1 > 1.0.rc
        if isinstance(a, int):
            return 1
        if isinstance(b, int):
            return -1
        return -1 if a < b else 1
    return 0


def compare_versions(left: str, right: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if left < right, 0 if equal, 1 if left > right
    """
    try:
        lv = Version(strip_version_prefix(left.strip()))
        rv = Version(strip_version_prefix(right.strip()))
    except InvalidVersion:
        return _compare_segments(_segments(left), _segments(right))
    if lv == rv:
        return 0
    return -1 if lv < rv else 1


def is_version_newer(current: str, candidate: str) -> bool:
    """
    Return True if ``candidate`` is newer than ``current``.

    An empty candidate is never newer; an empty current always loses.
    """
    if not candidate or not looks_like_version(candidate):
        return False
    if not current or not looks_like_version(current):
        return True
    return compare_versions(current, candidate) < 0


def _tag_name(tag: TagLike, name_key: str) -> str:
    if isinstance(tag, str):
        return tag
    value = tag.get(name_key) if isinstance(tag, Mapping) else None
    return value if isinstance(value, str) else ''


def sort_tags_by_version(tags: Iterable[TagLike], name_key: str = 'name') -> List[TagLike]:
    """
    Keep only version-like tags and sort them highest version first.

    Args:
        tags: Tag names, or provider tag objects carrying the name under ``name_key``
        name_key: Key holding the tag name in provider tag objects

    Returns:
        New list of the version-like tags, highest first
    """
    version_tags = [tag for tag in tags if looks_like_version(_tag_name(tag, name_key))]
    return sorted(
        version_tags,
        key=cmp_to_key(lambda a, b: compare_versions(_tag_name(a, name_key), _tag_name(b, name_key))),
        reverse=True,
    )
