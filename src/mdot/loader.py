"""
Configuration loader: locates the user's manifest and evaluates it.

The manifest lives in a per-platform config root:

    Linux/BSD   $XDG_CONFIG_HOME/<app>   (default ~/.config/<app>)
    macOS       ~/Library/Application Support/<app>
    Windows     %APPDATA%\\<app>

<app> defaults to "mdot" and can be overridden with MDOT_APPNAME, which
lets several independent setups live side by side.

The entry file (main.yaml / main.yml) is read with PyYAML and converted into
a Config Value Tree. A top-level list is a plain package list; a mapping may
mix positional entries (integer keys) with named ones:

    1: fish
    2: ly
    git:
      excludes: ["*.swp"]
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import platformdirs
import yaml

from mdot.values import ConfigValue, from_python

logger = logging.getLogger(__name__)

APP_NAME = "mdot"
APP_NAME_ENV = "MDOT_APPNAME"
CONFIG_FILENAMES = ("main.yaml", "main.yml")


class ConfigError(Exception):
    """Raised when the manifest file is missing, unreadable or not valid YAML."""


def app_name() -> str:
    """Application name, honoring the MDOT_APPNAME override."""
    return os.environ.get(APP_NAME_ENV) or APP_NAME


def user_config_dir() -> Path:
    """Platform base directory for per-user configuration (roaming on Windows)."""
    return Path(platformdirs.user_config_dir(roaming=True))


def config_root(name: str | None = None) -> Path:
    """Directory holding the manifest for the given (or current) app name."""
    return user_config_dir() / (name or app_name())


def find_config_file(root: Path | None = None) -> Path | None:
    """Return the first existing entry file under root, or None."""
    root = root or config_root()
    for filename in CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def parse_config(source: str) -> ConfigValue:
    """
    Evaluate manifest text into a Config Value Tree.

    Raises:
        ConfigError: invalid YAML or a value with no config equivalent
    """
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e

    if data is None:
        data = []

    try:
        return from_python(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Unsupported value in manifest: {e}") from e


def load_config(path: Path | None = None) -> ConfigValue:
    """
    Load the manifest and return its Config Value Tree.

    Args:
        path: Explicit manifest file. If None, searches the config root.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        names = " or ".join(CONFIG_FILENAMES)
        raise ConfigError(f"No {names} found in {config_root()}. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: invalid UTF-8 at byte {e.start}") from e

    try:
        return parse_config(raw)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e
