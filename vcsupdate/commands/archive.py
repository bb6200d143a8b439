"""
Archive URL command for vcsupdate.

Prints the (signed) ZIP download URL for a branch or tag.
"""

from typing import Optional

import click

from ..cli_utils import make_client, standard_command


@click.command('archive-url')
@click.argument('repository_url')
@click.argument('ref', required=False)
@click.option('--token', '-t', envvar='VCSUPDATE_TOKEN', help='Access token for private repositories')
@click.option('--provider', type=click.Choice(['github', 'gitlab', 'bitbucket']),
              help='Provider, when it cannot be guessed from the URL')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging on stderr')
@standard_command
def archive_url_handler(repository_url: str, ref: Optional[str], token: Optional[str],
                        provider: Optional[str], verbose: bool):
    """
    Print the archive download URL for REF (default: the default branch).

    No request is made; the URL is built from the repository path.
    """
    client = make_client(repository_url, token=token, provider=provider)
    click.echo(client.build_archive_download_url(ref))
