"""
Check command for vcsupdate.

Resolves the latest release reference of a repository and prints it as JSON
(or as a table with --pretty).
"""

import json
from typing import Optional

import click

from ..cli_utils import make_client, standard_command
from ..exit_codes import ReferenceNotFoundError
from ..render import render_reference
from ..resolver import choose_reference
from ..versions import is_version_newer


@click.command('check')
@click.argument('repository_url')
@click.option('--branch', '-b', help='Branch to track (default: configured default branch)')
@click.option('--default-branch', help="Repository's primary branch name (e.g. main)")
@click.option('--token', '-t', envvar='VCSUPDATE_TOKEN', help='Access token for private repositories')
@click.option('--provider', type=click.Choice(['github', 'gitlab', 'bitbucket']),
              help='Provider, when it cannot be guessed from the URL')
@click.option('--current', '-c', help='Installed version; adds "update_available" to the output')
@click.option('--no-stable-tag', is_flag=True, help='Ignore the readme "Stable tag" header')
@click.option('--pretty', '-p', is_flag=True, help='Human-readable table output')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging on stderr')
@standard_command
def check_handler(repository_url: str, branch: Optional[str], default_branch: Optional[str],
                  token: Optional[str], provider: Optional[str], current: Optional[str],
                  no_stable_tag: bool, pretty: bool, verbose: bool):
    """
    Find the latest release of a repository.

    Looks for a readme "Stable tag", then the highest version tag (on the
    default branch only), then falls back to the branch itself.

    \b
    Examples:
        vcsupdate check https://gitlab.com/group/project
        vcsupdate check https://github.com/owner/repo --branch main --default-branch main
        vcsupdate check owner/repo --provider bitbucket --current 1.2.0
    """
    client = make_client(
        repository_url,
        token=token,
        provider=provider,
        default_branch=default_branch,
        stable_tag_detection=False if no_stable_tag else None,
    )
    reference = choose_reference(client, branch)
    if reference is None:
        raise ReferenceNotFoundError(f"No update reference found for {client.namespace}")

    update_available = None
    if current is not None:
        update_available = is_version_newer(current, reference.version or '')

    if pretty:
        render_reference(reference, title=client.namespace, update_available=update_available)
        return

    result = reference.to_dict()
    result['repository'] = client.namespace
    if update_available is not None:
        result['current'] = current
        result['update_available'] = update_available
    click.echo(json.dumps(result, ensure_ascii=False))
