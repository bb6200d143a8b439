#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("vcsupdate")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']

# Conventional token variables, consulted when no token is configured
TOKEN_ENV_VARS = {
    "github": "GITHUB_TOKEN",
    "gitlab": "GITLAB_TOKEN",
    "bitbucket": "BITBUCKET_TOKEN",
}


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. VCSUPDATE_CONFIG environment variable
    2. ~/.vcsupdate/ directory
    """
    if 'VCSUPDATE_CONFIG' in os.environ:
        path = Path(os.environ['VCSUPDATE_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.vcsupdate'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            suffix = config_path.suffix.lower()
            if suffix == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif suffix in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)
    configure_logging(config)
    return config


def save_config(config):
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            with open(config_path, 'w') as f:
                toml.dump(config, f)
        elif suffix in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "default_branch": "master",
            "timeout_seconds": 10,
            "stable_tag_detection": True,
            "readme_name": "readme.txt"
        },
        "github": {
            "token": ""
        },
        "gitlab": {
            "token": ""
        },
        "bitbucket": {
            "token": ""
        },
        "logging": {
            "level": "INFO"
        }
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: VCSUPDATE_SECTION_KEY
    For example: VCSUPDATE_GENERAL_DEFAULT_BRANCH=main
    """
    env_prefix = "VCSUPDATE_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "VCSUPDATE_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key matching the remaining parts ("default_branch" spans two)
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config


# Level forced from the command line (--verbose); wins over ``logging.level``
_level_override = None


def override_log_level(level):
    """Pin the package logger to ``level`` until called again with None."""
    global _level_override
    _level_override = level
    if level is not None:
        logger.setLevel(level)


def configure_logging(config):
    """Apply ``logging.level`` from the configuration to the package logger."""
    if _level_override is not None:
        logger.setLevel(_level_override)
        return
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = getattr(logging, level_name, None)
    if isinstance(level, int):
        logger.setLevel(level)


def get_provider_token(config, provider):
    """
    Get the configured token for a provider.

    Falls back to the conventional environment variable (GITHUB_TOKEN, ...).
    """
    token = config.get(provider, {}).get("token") or ""
    if not token:
        token = os.environ.get(TOKEN_ENV_VARS.get(provider, ""), "")
    return token or None


def get_client_options(config):
    """Keyword options for VcsApi constructors from the ``general`` section."""
    general = config.get("general", {})
    return {
        "default_branch": general.get("default_branch") or "master",
        "timeout": general.get("timeout_seconds", 10),
        "stable_tag_detection": bool(general.get("stable_tag_detection", True)),
        "readme_name": general.get("readme_name") or "readme.txt",
    }
