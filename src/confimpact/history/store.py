"""Persistent storage for comparison history.

History is a bounded list of HistoryEntry, newest first. The store is an
explicit object handed to whoever needs it: the CLI uses the JSON file
store, tests use the in-memory one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from confimpact.analysis import ComparisonResult
from confimpact.exceptions import HistoryError
from confimpact.history.models import HistoryEntry
from confimpact.report.summary import summarize_changes

logger = logging.getLogger("confimpact.history")

DEFAULT_MAX_ENTRIES = 100


class HistoryStore(ABC):
    """Abstract history store with load / append / list operations."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max_entries

    @abstractmethod
    def load(self) -> list[HistoryEntry]:
        """Return all entries, newest first."""
        ...

    @abstractmethod
    def append(self, entry: HistoryEntry) -> None:
        """Record a new entry as the newest one, dropping the oldest past the cap."""
        ...

    def list(self, limit: int | None = None) -> list[HistoryEntry]:
        """Return the newest `limit` entries (all when limit is None)."""
        entries = self.load()
        return entries if limit is None else entries[:limit]


class MemoryHistoryStore(HistoryStore):
    """History kept in memory only."""

    def __init__(
        self,
        entries: list[HistoryEntry] | None = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        super().__init__(max_entries)
        self._entries: list[HistoryEntry] = list(entries or [])[:max_entries]

    def load(self) -> list[HistoryEntry]:
        return list(self._entries)

    def append(self, entry: HistoryEntry) -> None:
        self._entries = [entry, *self._entries][: self.max_entries]


class JsonHistoryStore(HistoryStore):
    """History persisted as a JSON array in a single file.

    The file is read lazily on first access and rewritten in full (via a
    temp file and rename) on every append.
    """

    def __init__(self, path: str | Path, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        super().__init__(max_entries)
        self.path = Path(path).expanduser()
        self._entries: list[HistoryEntry] | None = None

    def load(self) -> list[HistoryEntry]:
        if self._entries is None:
            self._entries = self._read()
        return list(self._entries)

    def append(self, entry: HistoryEntry) -> None:
        entries = [entry, *self.load()][: self.max_entries]
        self._write(entries)
        self._entries = entries

    def _read(self) -> list[HistoryEntry]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError("history file does not contain a list")
            return [HistoryEntry.model_validate(item) for item in data]
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable history file {self.path}: {e}")
            return []

    def _write(self, entries: list[HistoryEntry]) -> None:
        payload = json.dumps(
            [e.model_dump(mode="json") for e in entries],
            indent=2,
            ensure_ascii=False,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise HistoryError(f"Could not write history file {self.path}: {e}") from e
        logger.debug(f"Wrote {len(entries)} history entries to {self.path}")


def build_entry(result: ComparisonResult, name: str | None = None) -> HistoryEntry:
    """Build the history record for a comparison run."""
    return HistoryEntry(
        name=name or f"{result.file_a} → {result.file_b}",
        timestamp=datetime.now(timezone.utc).isoformat(),
        file_a=result.file_a,
        file_b=result.file_b,
        changes=result.changes,
        impacts=result.impacts,
        risk_level=result.risk_level,
        summary=summarize_changes(result.changes),
    )
