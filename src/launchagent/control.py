"""
launchctl control channel.

Issues lifecycle commands for an agent and reads its status back
from `launchctl list`. Each LaunchControl is an ordinary object
owned by its caller; the console user's uid is looked up once when
it is created and used for the `gui/<uid>` domain.

Usage:
    from launchagent import AgentStore, LaunchControl
    control = LaunchControl()
    record = AgentStore().read("com.example.job")
    control.bootstrap(record).wait()
    control.status(record)      # Running(pid=482), Loaded() or Unloaded()
"""

from __future__ import annotations

import logging
import os
import shlex
import warnings
from pathlib import Path
from typing import Callable, Optional, Sequence

from .config import LaunchConfig, load_config
from .errors import LocationNotSetError, StatusParseError
from .models import AgentRecord, Loaded, Running, Status, Unloaded
from .pipeline import CommandPipeline, SpawnedCommand, spawn

logger = logging.getLogger("launchagent.control")

CONSOLE_DEVICE = "/dev/console"


def console_uid() -> int:
    """Uid of the user logged in at the console.

    Falls back to the process's own uid when the console device
    cannot be inspected.
    """
    try:
        return os.stat(CONSOLE_DEVICE).st_uid
    except OSError:
        return os.getuid()


def parse_status(text: str) -> Status:
    """Interpret the PID column reported for a job.

    Args:
        text: `-` for loaded, empty for unloaded, or a PID.

    Raises:
        StatusParseError: For any other output.
    """
    if text == "-":
        return Loaded()
    if text == "":
        return Unloaded()
    if not (text.isascii() and text.isdigit()):
        raise StatusParseError(text)
    return Running(pid=int(text))


def parse_listing(text: str, label: str) -> str:
    """Extract the PID column for a label from `launchctl list` output.

    Only an exact label match counts. Returns an empty string when the
    label is not listed.
    """
    for line in text.splitlines():
        fields = line.split(None, 2)
        if len(fields) == 3 and fields[2].strip() == label:
            return fields[0]
    return ""


def _require_location(record: AgentRecord) -> Path:
    if record.location is None:
        raise LocationNotSetError(record.label)
    return record.location


class LaunchControl:
    """Drive launchctl for agent records.

    Args:
        config: Tool paths and status mode; loaded from disk when omitted.
        uid: Uid for the gui domain. Defaults to the console user.
        spawner: Starts a single command, returning a SpawnedCommand.
        pipeline_factory: Builds a runnable pipeline from argv stages.
    """

    def __init__(
        self,
        config: Optional[LaunchConfig] = None,
        uid: Optional[int] = None,
        spawner: Callable[[Sequence[str]], SpawnedCommand] = spawn,
        pipeline_factory: Callable[[Sequence[Sequence[str]]], CommandPipeline] = CommandPipeline,
    ):
        self.config = config or load_config()
        self.uid = console_uid() if uid is None else uid
        self._spawn = spawner
        self._pipeline = pipeline_factory

    @property
    def domain(self) -> str:
        """The console user's graphical session domain."""
        return f"gui/{self.uid}"

    def _launchctl(self, *args: str) -> SpawnedCommand:
        argv = [self.config.launchctl, *args]
        logger.info("Running %s", shlex.join(argv))
        return self._spawn(argv)

    # ------------------------------------------------------------------
    # Job control
    # ------------------------------------------------------------------

    def start(self, record: AgentRecord) -> SpawnedCommand:
        """Run `launchctl start <label>`. Check the outcome with status()."""
        return self._launchctl("start", record.label)

    def stop(self, record: AgentRecord) -> SpawnedCommand:
        """Run `launchctl stop <label>`. Check the outcome with status()."""
        return self._launchctl("stop", record.label)

    def load(self, record: AgentRecord) -> SpawnedCommand:
        """Run `launchctl load <path>`.

        Legacy interface, superseded by bootstrap().

        Raises:
            LocationNotSetError: If the record has no location.
        """
        path = _require_location(record)
        warnings.warn(
            "launchctl load is a legacy interface, use bootstrap()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self._launchctl("load", str(path))

    def unload(self, record: AgentRecord) -> SpawnedCommand:
        """Run `launchctl unload <path>`.

        Legacy interface, superseded by bootout().

        Raises:
            LocationNotSetError: If the record has no location.
        """
        path = _require_location(record)
        warnings.warn(
            "launchctl unload is a legacy interface, use bootout()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self._launchctl("unload", str(path))

    def bootstrap(self, record: AgentRecord) -> SpawnedCommand:
        """Run `launchctl bootstrap gui/<uid> <path>`.

        Raises:
            LocationNotSetError: If the record has no location.
        """
        path = _require_location(record)
        return self._launchctl("bootstrap", self.domain, str(path))

    def bootout(self, record: AgentRecord) -> SpawnedCommand:
        """Run `launchctl bootout gui/<uid> <path>`.

        Raises:
            LocationNotSetError: If the record has no location.
        """
        path = _require_location(record)
        return self._launchctl("bootout", self.domain, str(path))

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status_stages(self, record: AgentRecord) -> list[list[str]]:
        """Pipeline used to query a job's status."""
        list_stage = [self.config.launchctl, "list"]
        if self.config.native_status:
            return [list_stage]
        return [
            list_stage,
            [self.config.grep, "-F", "-e", record.label],
            [self.config.cut, "-f1"],
        ]

    def status(self, record: AgentRecord) -> Status:
        """Query launchctl for the job's current status.

        Blocks until the pipeline completes; there is no timeout.

        Raises:
            StatusParseError: If the output matches no known shape.
            OSError: If a pipeline stage cannot be started.
        """
        output = self._pipeline(self.status_stages(record)).run()
        if self.config.native_status:
            output = parse_listing(output, record.label)
        return parse_status(output.strip("\r\n"))
