"""
settings.py

This module provides configuration management for the placeholder engine.

Features:
- Centralized engine configuration using Pydantic settings
- Constants for application-wide use
- Optional user config file holding a default processing context

Usage:
Import appsettings for configuration values.
"""

import json
from pathlib import Path
from typing import Any, Final
from appdirs import user_config_dir
from pydantic_settings import BaseSettings, SettingsConfigDict
from phengine.lib.log import LOG
from rich.console import Console

# Console instance for rich output
console: Final[Console] = Console(stderr=True)

# Set up the configuration directory and file using appdirs
CONFIG_DIR: Final[Path] = Path(user_config_dir("phengine", ""))
CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.json"


class App(BaseSettings):
    """
    Engine settings model.

    Settings can be overridden through environment variables with PHE_ prefix.

    Attributes:
        beQuiet: Suppress detailed logging output
        maxIterations: Pass limit of the fixed-point substitution loop
        strictIterations: Raise instead of returning best effort when the
            pass limit is hit
        jsonIndent: Indentation used when serializing JSON output
        concurrentLeaves: Resolve sibling document leaves concurrently by default
    """

    beQuiet: bool = False
    maxIterations: int = 10
    strictIterations: bool = False
    jsonIndent: int = 2
    concurrentLeaves: bool = False

    model_config = SettingsConfigDict(
        env_prefix="PHE_",
        case_sensitive=False,
        extra="allow",
    )


def config_load(config_file: Path = CONFIG_FILE) -> dict[str, Any]:
    """
    Read the user config file.

    A missing file is not an error; an unreadable or malformed one is logged
    and treated as empty.

    Args:
        config_file: Path of the JSON config file

    Returns:
        dict: Parsed configuration, or an empty dict
    """
    if not config_file.exists():
        return {}
    try:
        data: Any = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        LOG(f"Could not read config file {config_file}: {e}")
        return {}
    if not isinstance(data, dict):
        LOG(f"Config file {config_file} does not hold a JSON object")
        return {}
    return data


def context_loadDefault(config_file: Path = CONFIG_FILE) -> dict[str, Any]:
    """
    Return the default processing context from the user config file.

    Args:
        config_file: Path of the JSON config file

    Returns:
        dict: The "context" object of the config file, or an empty dict
    """
    context: Any = config_load(config_file).get("context", {})
    if not isinstance(context, dict):
        LOG(f"Ignoring non-object 'context' in {config_file}")
        return {}
    return context


# Create the application settings instance
appsettings: Final[App] = App()
