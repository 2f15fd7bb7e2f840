"""
Agent store — LaunchAgent property lists on disk.

Agents live in the real user's ~/Library/LaunchAgents as one property
list per job, named after the job label. The store reads and writes
those documents and can skip a write when the serialized content is
byte-identical to what is already on disk, so launchd and other
tooling watching modification times are not disturbed.

No locking is done around read-modify-write sequences: two callers
writing the same label at once will race.

Usage:
    from launchagent.store import AgentStore
    store = AgentStore()
    record = store.read("com.example.job")
    result = store.write_if_changed(record)
"""

from __future__ import annotations

import logging
import os
import plistlib
import pwd
from pathlib import Path
from typing import Iterator, Optional, Union
from xml.parsers.expat import ExpatError

from .config import LaunchConfig, PlistFormat, load_config
from .digest import digest_bytes, digest_file
from .errors import DeserializationError, DirectoryResolutionError, SerializationError
from .models import LABEL_KEY, PLIST_SUFFIX, AgentRecord, WriteResult

logger = logging.getLogger("launchagent.store")

_PLIST_FORMATS = {
    PlistFormat.XML: plistlib.FMT_XML,
    PlistFormat.BINARY: plistlib.FMT_BINARY,
}


def serialize(record: AgentRecord, fmt: PlistFormat = PlistFormat.XML) -> bytes:
    """Encode an agent as a property list document.

    Args:
        record: Agent to encode.
        fmt: XML (default) or binary encoding.

    Returns:
        bytes: The encoded document.

    Raises:
        SerializationError: If the payload holds values plistlib cannot encode.
    """
    try:
        return plistlib.dumps(record.document(), fmt=_PLIST_FORMATS[fmt])
    except (TypeError, OverflowError, ValueError) as exc:
        raise SerializationError(f"Cannot encode agent {record.label}: {exc}") from exc


def deserialize(data: bytes) -> AgentRecord:
    """Decode a property list document into an agent.

    Args:
        data: XML or binary property list bytes.

    Returns:
        AgentRecord with location unset.

    Raises:
        DeserializationError: On malformed data or a missing Label.
    """
    try:
        doc = plistlib.loads(data)
    except (ValueError, ExpatError, AttributeError, TypeError) as exc:
        raise DeserializationError(f"Invalid property list: {exc}") from exc

    if not isinstance(doc, dict):
        raise DeserializationError(f"Expected a dictionary, got {type(doc).__name__}")

    label = doc.pop(LABEL_KEY, None)
    if not isinstance(label, str):
        raise DeserializationError("Property list has no string Label")

    return AgentRecord(label=label, payload=doc)


def resolve_agent_directory() -> Path:
    """Return the real user's LaunchAgents directory.

    The home directory comes from the password database, not $HOME,
    so a sandboxed or overridden environment still resolves to the
    owning user's ~/Library/LaunchAgents.

    Raises:
        DirectoryResolutionError: If the user record or its home is missing.
    """
    uid = os.getuid()
    try:
        home = pwd.getpwuid(uid).pw_dir
    except KeyError as exc:
        raise DirectoryResolutionError(f"No user record for uid {uid}") from exc
    if not home:
        raise DirectoryResolutionError(f"User {uid} has no home directory")
    return Path(home) / "Library" / "LaunchAgents"


def _with_plist_suffix(path: Path) -> Path:
    if path.suffix == PLIST_SUFFIX:
        return path
    return path.with_name(path.name + PLIST_SUFFIX)


class AgentStore:
    """Read and write agent property lists.

    Args:
        agents_dir: Directory holding agent documents. Defaults to the
            config override, then the real user's LaunchAgents directory.
        config: Settings; loaded from the default config file when omitted.
    """

    def __init__(
        self,
        agents_dir: Optional[Path] = None,
        config: Optional[LaunchConfig] = None,
    ):
        self.config = config or load_config()
        self._agents_dir = agents_dir or self.config.agents_dir

    @property
    def agents_dir(self) -> Path:
        """Directory holding the agent documents."""
        if self._agents_dir is None:
            self._agents_dir = resolve_agent_directory()
        return self._agents_dir

    def canonical_path(self, record: AgentRecord) -> Path:
        """Default location for a record, `<agents_dir>/<label>.plist`."""
        return self.agents_dir / record.filename

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read(self, name_or_path: Union[str, Path]) -> AgentRecord:
        """Read an agent by file name or by path.

        A Path, or a string containing a path separator, is read as is.
        Anything else names a file in the agent directory.
        """
        if isinstance(name_or_path, Path) or os.sep in name_or_path:
            return self.read_from(Path(name_or_path).expanduser())
        return self.read_agent(name_or_path)

    def read_agent(self, called: str) -> AgentRecord:
        """Read an agent from the agent directory.

        Args:
            called: File name of the job; `.plist` is appended if missing.
        """
        return self.read_from(_with_plist_suffix(self.agents_dir / called))

    def read_from(self, path: Path) -> AgentRecord:
        """Read an agent from an explicit path.

        Raises:
            OSError: If the file cannot be read.
            DeserializationError: If it is not an agent property list.
        """
        record = deserialize(path.read_bytes())
        record.location = path
        return record

    def iter_agents(self) -> Iterator[AgentRecord]:
        """Yield every readable agent in the directory, in file name order.

        Hidden files, subdirectories and files that are not agent
        property lists are skipped.
        """
        directory = self.agents_dir
        if not directory.is_dir():
            logger.debug("Agent directory %s does not exist", directory)
            return

        for entry in sorted(directory.iterdir()):
            if entry.name.startswith(".") or not entry.is_file():
                continue
            try:
                candidate = self.read_from(entry)
            except (OSError, DeserializationError) as exc:
                logger.debug("Skipping %s: %s", entry, exc)
                continue
            yield candidate

    def locate(self, record: AgentRecord) -> Optional[Path]:
        """Find the document holding this record's label and set its location.

        When several documents share the label, the first in file name
        order wins. No match leaves the location untouched.

        Returns:
            The matching path, or None.
        """
        for candidate in self.iter_agents():
            if candidate.label == record.label:
                record.location = candidate.location
                logger.debug("Located %s at %s", record.label, record.location)
                return record.location
        return None

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def write(self, record: AgentRecord, target: Optional[Path] = None) -> Path:
        """Write an agent to disk.

        Args:
            record: Agent to write.
            target: Destination; `.plist` is appended if missing. Defaults
                to `<agents_dir>/<label>.plist`.

        Returns:
            Path: The file written, also stored in `record.location`.

        Raises:
            SerializationError: If the payload cannot be encoded.
            OSError: If the file cannot be written.
        """
        path = self.canonical_path(record) if target is None else _with_plist_suffix(Path(target))
        data = serialize(record, self.config.plist_format)
        self._write_bytes(path, data)
        record.location = path
        return path

    def write_called(self, record: AgentRecord, called: str) -> Path:
        """Write an agent under a given file name in the agent directory."""
        return self.write(record, self.agents_dir / called)

    def write_if_changed(self, record: AgentRecord) -> WriteResult:
        """Write an agent to its canonical path only if the content changed.

        The existing file's digest is compared with the digest of the
        freshly serialized document. An existing file that cannot be
        read is treated as absent content and overwritten.

        Returns:
            WriteResult: Whether the file existed and whether it was written.
        """
        path = self.canonical_path(record)
        data = serialize(record, self.config.plist_format)
        existed = path.exists()

        if existed:
            try:
                unchanged = digest_file(path, self.config.chunk_size) == digest_bytes(data)
            except OSError as exc:
                logger.debug("Could not digest %s: %s", path, exc)
                unchanged = False
            if unchanged:
                logger.debug("Agent %s unchanged, skipping write", record.label)
                record.location = path
                return WriteResult(existed=True, modified=False)

        self._write_bytes(path, data)
        record.location = path
        return WriteResult(existed=existed, modified=True)

    def _write_bytes(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Wrote agent document %s (%d bytes)", path, len(data))
