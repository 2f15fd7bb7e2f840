"""
Configuration for launchagent.

Tool paths, the agent directory override and the property list
format live in a small YAML file. Every field has a default, so a
missing file simply means "use the macOS defaults".

Example ~/.config/launchagent/config.yaml:

    plist_format: xml
    native_status: true
    agents_dir: ~/Library/LaunchAgents
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from . import CONFIG_PATH

logger = logging.getLogger("launchagent.config")


class PlistFormat(str, Enum):
    """On-disk property list encoding."""

    XML = "xml"
    BINARY = "binary"


class LaunchConfig(BaseModel):
    """Settings shared by the agent store and the control channel."""

    launchctl: str = "/bin/launchctl"
    grep: str = "/usr/bin/grep"
    cut: str = "/usr/bin/cut"
    agents_dir: Optional[Path] = None
    plist_format: PlistFormat = PlistFormat.XML
    native_status: bool = False
    chunk_size: int = Field(default=8192, gt=0)


def load_config(path: Optional[Path] = None) -> LaunchConfig:
    """Load configuration from a YAML file.

    Args:
        path: Config file. Defaults to $LAUNCHAGENT_CONFIG or
            ~/.config/launchagent/config.yaml.

    Returns:
        LaunchConfig loaded from the file, or defaults.
    """
    config_file = Path(path or CONFIG_PATH).expanduser()
    if not config_file.exists():
        return LaunchConfig()

    try:
        data = yaml.safe_load(config_file.read_text()) or {}
        config = LaunchConfig(**data)
    except (OSError, yaml.YAMLError, TypeError, ValidationError) as exc:
        logger.warning("Failed to load config %s: %s — using defaults", config_file, exc)
        return LaunchConfig()

    if config.agents_dir is not None:
        config.agents_dir = config.agents_dir.expanduser()
    return config
