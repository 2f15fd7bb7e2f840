"""Errors raised by launchagent.

File system failures are not wrapped: they surface as the built-in
OSError so callers can handle them the usual way.
"""

from __future__ import annotations


class LaunchAgentError(Exception):
    """Base class for every launchagent error."""


class SerializationError(LaunchAgentError):
    """Raised when an agent payload cannot be encoded as a property list."""


class DeserializationError(LaunchAgentError):
    """Raised when a document is not a valid agent property list."""


class DirectoryResolutionError(LaunchAgentError):
    """Raised when the owning user's home directory cannot be determined."""


class LocationNotSetError(LaunchAgentError):
    """Raised when an operation needs the agent's on-disk path and it is unset."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Location is not set for agent {label}")


class StatusParseError(LaunchAgentError):
    """Raised when launchctl status output matches no known shape."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Unrecognized launchctl status output: {raw!r}")
