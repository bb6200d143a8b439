import json

import click

from ..config import get_config_path, load_config

# Keys whose values are never printed
_SECRET_KEYS = {"token"}


def _redact(config):
    if isinstance(config, dict):
        return {
            key: ("***" if key in _SECRET_KEYS and value else _redact(value))
            for key, value in config.items()
        }
    return config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
def show_config(pretty):
    """Show the current configuration with all merges applied.

    Tokens are masked.
    """
    config = _redact(load_config())
    if pretty:
        click.echo(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        click.echo(json.dumps(config, ensure_ascii=False))


@config_cmd.command("path")
def config_path():
    """Show the config file path being used."""
    path = get_config_path()
    click.echo(json.dumps({"config_path": str(path), "exists": path.exists()}))
