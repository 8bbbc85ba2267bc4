"""Comparison history: persistence and analysis."""

from confimpact.history.analyzer import analyze
from confimpact.history.models import HistoryEntry, HistoryInsight, PathFrequency
from confimpact.history.store import (
    HistoryStore,
    JsonHistoryStore,
    MemoryHistoryStore,
    build_entry,
)

__all__ = [
    "HistoryEntry",
    "HistoryInsight",
    "HistoryStore",
    "JsonHistoryStore",
    "MemoryHistoryStore",
    "PathFrequency",
    "analyze",
    "build_entry",
]
