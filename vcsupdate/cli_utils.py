"""
Common CLI utilities for consistent command behavior.
"""

import logging
import sys
from functools import wraps
from typing import Any, Optional

import click

from .config import (
    get_client_options,
    get_provider_token,
    load_config,
    logger,
    override_log_level,
)
from .errors import VcsUpdateError
from .exit_codes import CommandError, INTERRUPTED, get_exit_code_for_exception
from .vcs import VcsApi, create_client, detect_provider


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - --verbose switches the package logger to DEBUG
    - Errors go to stderr and map to exit codes
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose')
        if verbose:
            previous_level = logger.level
            override_log_level(logging.DEBUG)
        try:
            return func(*args, **kwargs)
        except CommandError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(e.exit_code)
        except VcsUpdateError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(get_exit_code_for_exception(e))
        except KeyboardInterrupt:
            click.echo("Interrupted", err=True)
            sys.exit(INTERRUPTED)
        finally:
            if verbose:
                override_log_level(None)
                logger.setLevel(previous_level)

    return wrapper


def make_client(
    repository_url: str,
    token: Optional[str] = None,
    provider: Optional[str] = None,
    config: Optional[dict] = None,
    **overrides: Any,
) -> VcsApi:
    """
    Build a provider client from CLI arguments and configuration.

    An explicit ``token`` wins over the configured one; ``overrides`` win
    over the ``general`` config section.

    Raises:
        InvalidRepositoryUrlError: If the URL or provider is not usable
    """
    if config is None:
        config = load_config()
    provider = provider or detect_provider(repository_url)
    if token is None and provider:
        token = get_provider_token(config, provider)

    options = get_client_options(config)
    options.update({k: v for k, v in overrides.items() if v is not None})
    return create_client(repository_url, token, provider=provider, **options)
