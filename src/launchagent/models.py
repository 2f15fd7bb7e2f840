"""
Data types for launchd agents.

An AgentRecord is one agent definition. Its payload is the property
list content minus the Label key and is treated as opaque: whatever
launchd accepts is allowed, nothing is validated here.

Status is what `launchctl list` reports for a label, one of Running,
Loaded or Unloaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

LABEL_KEY = "Label"
PLIST_SUFFIX = ".plist"


class AgentRecord(BaseModel):
    """A launchd agent definition.

    Attributes:
        label: Unique job identifier, also the default file name.
        payload: Remaining property list keys (ProgramArguments, RunAtLoad, ...).
        location: Document this record was read from or last written to.
    """

    label: str
    payload: dict[str, Any] = Field(default_factory=dict)
    location: Optional[Path] = None

    @property
    def filename(self) -> str:
        """Canonical file name, `<label>.plist`."""
        return f"{self.label}{PLIST_SUFFIX}"

    def document(self) -> dict[str, Any]:
        """Full property list mapping with Label included."""
        doc = {k: v for k, v in self.payload.items() if k != LABEL_KEY}
        doc[LABEL_KEY] = self.label
        return doc


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a change-aware write.

    Attributes:
        existed: Whether a document was already at the target path.
        modified: Whether the document was (re)written.
    """

    existed: bool
    modified: bool

    def __post_init__(self) -> None:
        if not self.existed and not self.modified:
            raise ValueError("a write to a new file is always a modification")


class JobState(str, Enum):
    """Kind of status reported by launchctl."""

    RUNNING = "running"
    LOADED = "loaded"
    UNLOADED = "unloaded"


@dataclass(frozen=True)
class Running:
    """The job is loaded and running with the given PID."""

    pid: int

    @property
    def state(self) -> JobState:
        return JobState.RUNNING


@dataclass(frozen=True)
class Loaded:
    """The job is loaded but not running."""

    @property
    def state(self) -> JobState:
        return JobState.LOADED


@dataclass(frozen=True)
class Unloaded:
    """The job is not known to launchd."""

    @property
    def state(self) -> JobState:
        return JobState.UNLOADED


Status = Union[Running, Loaded, Unloaded]
