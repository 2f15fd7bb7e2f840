"""Shared test fixtures for launchagent."""

from __future__ import annotations

from pathlib import Path

import pytest

from launchagent.config import LaunchConfig
from launchagent.models import AgentRecord
from launchagent.store import AgentStore


@pytest.fixture
def agents_dir(tmp_path: Path) -> Path:
    """Provide a temporary LaunchAgents directory."""
    directory = tmp_path / "Library" / "LaunchAgents"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def config(agents_dir: Path) -> LaunchConfig:
    """Config pointing the store at the temporary directory."""
    return LaunchConfig(agents_dir=agents_dir)


@pytest.fixture
def store(config: LaunchConfig) -> AgentStore:
    return AgentStore(config=config)


@pytest.fixture
def record() -> AgentRecord:
    """A typical agent definition."""
    return AgentRecord(
        label="com.example.job",
        payload={
            "ProgramArguments": ["/usr/local/bin/job", "--serve"],
            "RunAtLoad": True,
            "KeepAlive": False,
            "StartInterval": 300,
            "EnvironmentVariables": {"LOG_LEVEL": "debug"},
        },
    )
