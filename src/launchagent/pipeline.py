"""
External command execution.

Two shapes are needed: a single command that is issued and left
running (launchctl start/stop/bootstrap...), and a chain of commands
connected through OS pipes like a shell pipeline (launchctl list |
grep | cut).
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger("launchagent.pipeline")


@dataclass
class CommandResult:
    """Completed external command.

    Attributes:
        argv: Command and arguments.
        returncode: Exit status.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.returncode == 0


class SpawnedCommand:
    """Handle to a command that has been started but not awaited.

    Issuing a command and it completing are separate events. When
    output is captured the handle must be awaited with `wait()` or
    `result()`; otherwise spawn with `capture=False`.
    """

    def __init__(self, argv: Sequence[str], process: subprocess.Popen):
        self.argv = list(argv)
        self.process = process
        self._result: Optional[CommandResult] = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def done(self) -> bool:
        """True once the process has exited. Never blocks."""
        return self._result is not None or self.process.poll() is not None

    def wait(self, timeout: Optional[float] = None) -> int:
        """Block until the process exits and return its exit status."""
        return self.result(timeout).returncode

    def result(self, timeout: Optional[float] = None) -> CommandResult:
        """Block until the process exits and return its captured output.

        Raises:
            subprocess.TimeoutExpired: If timeout elapses first.
        """
        if self._result is None:
            stdout, stderr = self.process.communicate(timeout=timeout)
            self._result = CommandResult(
                argv=self.argv,
                returncode=self.process.returncode,
                stdout=stdout or "",
                stderr=stderr or "",
            )
            logger.debug("%s exited with %d", shlex.join(self.argv), self._result.returncode)
        return self._result

    def __repr__(self) -> str:
        return f"SpawnedCommand({shlex.join(self.argv)!r}, pid={self.pid})"


def spawn(argv: Sequence[str], capture: bool = True) -> SpawnedCommand:
    """Start a command and return without waiting.

    With capture on, stdout and stderr go to pipes: the caller must
    eventually call `wait()` or `result()`, or a chatty process can
    block on a full pipe and is never reaped. With capture off the
    output is discarded and `result()` reports empty strings.

    Args:
        argv: Command and arguments.
        capture: Collect output for `result()`.

    Raises:
        OSError: If the executable cannot be started.
    """
    stream = subprocess.PIPE if capture else subprocess.DEVNULL
    process = subprocess.Popen(list(argv), stdout=stream, stderr=stream, text=True)
    logger.debug("Spawned %s (pid %d)", shlex.join(argv), process.pid)
    return SpawnedCommand(argv, process)


class CommandPipeline:
    """Ordered commands, each reading the previous one's output.

    Args:
        stages: Command argv lists, first to last.
    """

    def __init__(self, stages: Sequence[Sequence[str]]):
        if not stages:
            raise ValueError("a pipeline needs at least one stage")
        self.stages = [list(stage) for stage in stages]

    def describe(self) -> str:
        """Shell-style rendering, e.g. `launchctl list | grep x`."""
        return " | ".join(shlex.join(stage) for stage in self.stages)

    def run(self) -> str:
        """Run every stage and return the last stage's output.

        Blocks until the final output is drained and every stage has
        exited. Exit statuses are not checked: `grep` exiting 1 on no
        match is a normal, empty result.

        Raises:
            OSError: If a stage cannot be started.
        """
        logger.debug("Running pipeline: %s", self.describe())
        processes: list[subprocess.Popen] = []
        try:
            for argv in self.stages:
                upstream = processes[-1].stdout if processes else None
                proc = subprocess.Popen(
                    argv, stdin=upstream, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL,
                )
                if upstream is not None:
                    # only the child keeps the read end, so the writer sees SIGPIPE
                    upstream.close()
                processes.append(proc)
            output, _ = processes[-1].communicate()
        except OSError:
            for proc in processes:
                if proc.stdout is not None:
                    proc.stdout.close()
                proc.kill()
            raise
        finally:
            for proc in processes:
                proc.wait()

        return output.decode("utf-8", errors="replace")
