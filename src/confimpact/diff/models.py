"""Data models for structural changes between two documents."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ChangeKind(str, Enum):
    """Types of structural changes."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class ChangeRecord(BaseModel):
    """A single difference at a dotted field path."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    path: str  # e.g. "database.pool.max_size"
    old_value: Any = None  # unset for ADDED
    new_value: Any = None  # unset for REMOVED

    @property
    def key(self) -> str:
        """The last path segment."""
        return self.path.rsplit(".", 1)[-1]

    @property
    def value(self) -> Any:
        """The value that exists: new for additions, old for removals."""
        if self.kind == ChangeKind.REMOVED:
            return self.old_value
        return self.new_value
