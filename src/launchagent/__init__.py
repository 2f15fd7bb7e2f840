"""
launchagent — launchd user agent control.

Reads and writes LaunchAgent property lists in ~/Library/LaunchAgents
and drives launchctl to start, stop, load and query them.

Usage:
    from launchagent import AgentRecord, AgentStore, LaunchControl
    record = AgentRecord(label="com.example.job", payload={"RunAtLoad": True})
    AgentStore().write_if_changed(record)
    LaunchControl().bootstrap(record)
"""

import os

__version__ = "0.1.0"

CONFIG_PATH = os.environ.get("LAUNCHAGENT_CONFIG", "~/.config/launchagent/config.yaml")

from .config import LaunchConfig, PlistFormat, load_config  # noqa: E402
from .control import LaunchControl, parse_listing, parse_status  # noqa: E402
from .digest import digest_bytes, digest_file  # noqa: E402
from .errors import (  # noqa: E402
    DeserializationError,
    DirectoryResolutionError,
    LaunchAgentError,
    LocationNotSetError,
    SerializationError,
    StatusParseError,
)
from .models import AgentRecord, JobState, Loaded, Running, Status, Unloaded, WriteResult  # noqa: E402
from .pipeline import CommandPipeline, CommandResult, SpawnedCommand, spawn  # noqa: E402
from .store import AgentStore, deserialize, resolve_agent_directory, serialize  # noqa: E402

__all__ = [
    "AgentRecord",
    "AgentStore",
    "CommandPipeline",
    "CommandResult",
    "CONFIG_PATH",
    "DeserializationError",
    "DirectoryResolutionError",
    "JobState",
    "LaunchAgentError",
    "LaunchConfig",
    "LaunchControl",
    "Loaded",
    "LocationNotSetError",
    "PlistFormat",
    "Running",
    "SerializationError",
    "SpawnedCommand",
    "Status",
    "StatusParseError",
    "Unloaded",
    "WriteResult",
    "deserialize",
    "digest_bytes",
    "digest_file",
    "load_config",
    "parse_listing",
    "parse_status",
    "resolve_agent_directory",
    "serialize",
    "spawn",
]
