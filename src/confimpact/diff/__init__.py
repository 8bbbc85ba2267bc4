"""Structural diffing of configuration documents."""

from confimpact.diff.differ import deep_equal, diff
from confimpact.diff.models import ChangeKind, ChangeRecord

__all__ = ["ChangeKind", "ChangeRecord", "deep_equal", "diff"]
