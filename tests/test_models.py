"""Tests for agent records, write results and status values."""

from __future__ import annotations

from pathlib import Path

import pytest

from launchagent.models import (
    AgentRecord,
    JobState,
    Loaded,
    Running,
    Unloaded,
    WriteResult,
)


class TestAgentRecord:
    """Tests for the AgentRecord model."""

    def test_defaults(self) -> None:
        """A new record has an empty payload and no location."""
        rec = AgentRecord(label="com.example.job")
        assert rec.payload == {}
        assert rec.location is None

    def test_filename(self) -> None:
        assert AgentRecord(label="com.example.job").filename == "com.example.job.plist"

    def test_document_includes_label(self) -> None:
        """document() merges the label into the payload."""
        rec = AgentRecord(label="com.example.job", payload={"RunAtLoad": True})
        assert rec.document() == {"Label": "com.example.job", "RunAtLoad": True}

    def test_document_label_wins_over_payload(self) -> None:
        """A stray Label key in the payload never overrides the record label."""
        rec = AgentRecord(label="com.example.job", payload={"Label": "other"})
        assert rec.document()["Label"] == "com.example.job"

    def test_location_is_mutable(self, tmp_path: Path) -> None:
        rec = AgentRecord(label="x")
        rec.location = tmp_path / "x.plist"
        assert rec.location == tmp_path / "x.plist"


class TestWriteResult:
    """Tests for the WriteResult invariant."""

    def test_new_file_is_modified(self) -> None:
        result = WriteResult(existed=False, modified=True)
        assert result.modified is True

    def test_unchanged_existing_file(self) -> None:
        result = WriteResult(existed=True, modified=False)
        assert result.existed is True
        assert result.modified is False

    def test_new_file_unmodified_rejected(self) -> None:
        """A write to a missing file cannot be a no-op."""
        with pytest.raises(ValueError):
            WriteResult(existed=False, modified=False)


class TestStatus:
    """Tests for structural equality of status values."""

    def test_running_equal_by_pid(self) -> None:
        assert Running(pid=482) == Running(pid=482)

    def test_running_different_pid(self) -> None:
        assert Running(pid=482) != Running(pid=483)

    def test_loaded_and_unloaded(self) -> None:
        assert Loaded() == Loaded()
        assert Unloaded() == Unloaded()
        assert Loaded() != Unloaded()

    def test_running_not_equal_to_other_cases(self) -> None:
        assert Running(pid=1) != Loaded()
        assert Running(pid=1) != Unloaded()

    def test_hashable(self) -> None:
        """Status values can be used in sets."""
        assert len({Running(pid=1), Running(pid=1), Loaded()}) == 2

    def test_state(self) -> None:
        assert Running(pid=7).state == JobState.RUNNING
        assert Loaded().state == JobState.LOADED
        assert Unloaded().state == JobState.UNLOADED
        assert JobState.RUNNING.value == "running"
