"""
Tags command for vcsupdate.

Lists a repository's version-like tags, highest version first.
"""

import json
from typing import Optional

import click

from ..cli_utils import make_client, standard_command
from ..render import render_tags


@click.command('tags')
@click.argument('repository_url')
@click.option('--token', '-t', envvar='VCSUPDATE_TOKEN', help='Access token for private repositories')
@click.option('--provider', type=click.Choice(['github', 'gitlab', 'bitbucket']),
              help='Provider, when it cannot be guessed from the URL')
@click.option('--limit', '-n', type=int, default=0, help='Show at most N tags (default: all)')
@click.option('--pretty', '-p', is_flag=True, help='Human-readable table output')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging on stderr')
@standard_command
def tags_handler(repository_url: str, token: Optional[str], provider: Optional[str],
                 limit: int, pretty: bool, verbose: bool):
    """
    List version tags, highest first.

    Tags that do not look like version numbers are left out.
    """
    client = make_client(repository_url, token=token, provider=provider)
    tags = client.get_version_tags()
    if limit > 0:
        tags = tags[:limit]

    if pretty:
        render_tags(tags, title=client.namespace)
        return

    for tag in tags:
        click.echo(json.dumps({'name': tag}))
