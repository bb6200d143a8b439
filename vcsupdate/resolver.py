"""
Reference resolution for vcsupdate.

Decides which tag or branch is the "latest" release of a repository. The
strategies run strictly in order and stop at the first hit:

1. Stable tag: the readme on the configured branch names a tag ("Stable tag:
   1.2.3"), or opts out of tags by naming the branch itself or "trunk".
2. Highest version tag: only when the configured branch is the repository's
   default branch.
3. The configured branch itself. Always attempted last.

Request failures inside a strategy just mean "nothing found here".
"""

import logging
from typing import Any, Optional

from .domain.reference import Reference
from .vcs import create_client
from .vcs.base import VcsApi

logger = logging.getLogger(__name__)


def choose_reference(
    client: VcsApi,
    config_branch: Optional[str] = None,
    default_branch: Optional[str] = None,
) -> Optional[Reference]:
    """
    Figure out which reference (tag or branch) contains the latest version.

    Args:
        client: Provider client for the repository
        config_branch: Branch the host tracks; defaults to the default branch
        default_branch: Overrides ``client.default_branch`` for the tag check

    Returns:
        The chosen Reference, or None if even the branch could not be read
    """
    default_branch = default_branch or client.default_branch
    branch = config_branch or default_branch

    update_source = None

    if client.stable_tag_detection:
        update_source = client.get_stable_tag(branch)
        if update_source:
            logger.debug(f"{client.namespace}: using stable tag {update_source.name!r}")
            return update_source

    if branch == default_branch:
        update_source = client.get_latest_tag()
        if update_source:
            logger.debug(f"{client.namespace}: using latest version tag {update_source.name!r}")
            return update_source

    update_source = client.get_branch(branch)
    if update_source:
        logger.debug(f"{client.namespace}: using branch {branch!r}")
    else:
        logger.info(f"{client.namespace}: no update source found on branch {branch!r}")
    return update_source


def resolve(
    repository_url: str,
    branch: Optional[str] = None,
    credentials: Optional[Any] = None,
    provider: Optional[str] = None,
    **options: Any,
) -> Optional[Reference]:
    """
    Resolve the latest reference for a repository URL.

    Builds the provider client and runs ``choose_reference``.

    Raises:
        InvalidRepositoryUrlError: If the URL cannot be parsed
    """
    client = create_client(repository_url, credentials, provider=provider, **options)
    return choose_reference(client, branch)
