"""
Readme header parsing for vcsupdate.

Packages can pin their release in a WordPress-style readme:

    === My Plugin ===
    Contributors: someone
    Requires at least: 5.0
    Stable tag: 1.4.2

A "Stable tag" of "trunk" or of the tracked branch name opts the package out
of tag-based updates.
"""

import re
from typing import Dict, Optional

TRUNK = 'trunk'

KNOWN_HEADERS = {
    'contributors': 'contributors',
    'donate link': 'donate_link',
    'tags': 'tags',
    'requires at least': 'requires_at_least',
    'requires php': 'requires_php',
    'tested up to': 'tested_up_to',
    'stable tag': 'stable_tag',
    'license': 'license',
    'license uri': 'license_uri',
}

_TITLE = re.compile(r'^[=#\s]*=+\s*(?P<name>.+?)\s*=+\s*$')
_SECTION = re.compile(r'^\s*==\s*[^=].*?==\s*$')
# Plain "Key: value" plus markdown emphasis like "**Stable tag:** 1.0"
_HEADER = re.compile(r'^\s*[*_]*\s*(?P<key>[A-Za-z][A-Za-z ]*?)\s*[*_]*\s*:\s*[*_]*\s*(?P<value>.*?)\s*$')


def parse_readme_headers(text: Optional[str]) -> Dict[str, str]:
    """
    Parse the header block of a readme.

    Args:
        text: Readme contents; None or empty yields an empty dict

    Returns:
        Dict keyed by normalized header names ("stable_tag", "tested_up_to", ...)
        plus "name" when the readme has a "=== Name ===" title line
    """
    headers: Dict[str, str] = {}
    if not text:
        return headers

    for index, line in enumerate(text.splitlines()):
        if index > 0 and _SECTION.match(line):
            break
        title = _TITLE.match(line)
        if title and 'name' not in headers and line.strip().startswith('==='):
            headers['name'] = title.group('name')
            continue
        match = _HEADER.match(line)
        if not match:
            continue
        key = KNOWN_HEADERS.get(match.group('key').strip().lower())
        value = match.group('value').strip()
        if key and value and key not in headers:
            headers[key] = value

    return headers


def read_stable_tag(text: Optional[str]) -> Optional[str]:
    """Return the "Stable tag" value of a readme, or None."""
    return parse_readme_headers(text).get('stable_tag')


def opts_out_of_tags(stable_tag: str, branch: str) -> bool:
    """True when the stable tag names the branch itself or the trunk sentinel."""
    return stable_tag == branch or stable_tag == TRUNK
