#!/usr/bin/env python3

import click

from vcsupdate.commands.archive import archive_url_handler
from vcsupdate.commands.check import check_handler
from vcsupdate.commands.config import config_cmd
from vcsupdate.commands.tags import tags_handler


@click.group()
@click.version_option(package_name='vcsupdate')
def cli():
    """vcsupdate - Find the latest release of a GitHub, GitLab or Bitbucket repository.

    Resolves a readme "Stable tag", the highest version tag, or a branch
    head into a downloadable archive reference.
    """
    pass


cli.add_command(check_handler, name='check')
cli.add_command(tags_handler, name='tags')
cli.add_command(archive_url_handler, name='archive-url')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
