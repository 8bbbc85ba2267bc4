"""Insights from past comparison runs."""

from __future__ import annotations

from collections import Counter

from confimpact.history.models import HistoryEntry, HistoryInsight, PathFrequency

MIN_HISTORY_ENTRIES = 3
MIN_OCCURRENCES = 3
TOP_PATHS = 5


def analyze(history: list[HistoryEntry]) -> list[HistoryInsight]:
    """Find fields that keep changing across runs.

    Needs at least three runs. Paths changed three or more times are
    reported, most frequent first (ties keep first-seen order), top five.
    """
    if len(history) < MIN_HISTORY_ENTRIES:
        return []

    counts: Counter[str] = Counter(
        change.path for entry in history for change in entry.changes
    )
    frequent = [
        PathFrequency(path=path, count=count)
        for path, count in counts.most_common()
        if count >= MIN_OCCURRENCES
    ]
    if not frequent:
        return []

    return [HistoryInsight(kind="frequent_changes", paths=frequent[:TOP_PATHS])]
