"""Aggregate counts over changes and impacts.

Pure functions: given the same records they always produce the same
summary. Used by the console, the JSON/markdown reports and history.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from confimpact.diff.models import ChangeKind, ChangeRecord
from confimpact.risk.models import ImpactRecord, RiskLevel

if TYPE_CHECKING:
    from confimpact.analysis import ComparisonResult
    from confimpact.history.models import HistoryInsight


class ChangeSummary(BaseModel):
    """Change counts by kind."""

    total: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0


class ReportSummary(ChangeSummary):
    """Change counts plus impact counts by level."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    overall_risk: RiskLevel = RiskLevel.LOW


def summarize_changes(changes: list[ChangeRecord]) -> ChangeSummary:
    return ChangeSummary(
        total=len(changes),
        added=sum(1 for c in changes if c.kind == ChangeKind.ADDED),
        removed=sum(1 for c in changes if c.kind == ChangeKind.REMOVED),
        modified=sum(1 for c in changes if c.kind == ChangeKind.MODIFIED),
    )


def overall_risk(impacts: list[ImpactRecord]) -> RiskLevel:
    """The most severe level among the impacts, LOW when there are none."""
    level = RiskLevel.LOW
    for impact in impacts:
        level = level.at_least(impact.level)
    return level


def summarize(changes: list[ChangeRecord], impacts: list[ImpactRecord]) -> ReportSummary:
    counts = summarize_changes(changes)
    by_level = {level: 0 for level in RiskLevel}
    for impact in impacts:
        by_level[impact.level] += 1

    return ReportSummary(
        **counts.model_dump(),
        critical=by_level[RiskLevel.CRITICAL],
        high=by_level[RiskLevel.HIGH],
        medium=by_level[RiskLevel.MEDIUM],
        low=by_level[RiskLevel.LOW],
        overall_risk=overall_risk(impacts),
    )


def group_by_level(impacts: list[ImpactRecord]) -> dict[RiskLevel, list[ImpactRecord]]:
    """Impacts grouped most severe first, keeping input order within a group."""
    groups: dict[RiskLevel, list[ImpactRecord]] = {
        level: [] for level in sorted(RiskLevel, key=lambda lv: -lv.rank)
    }
    for impact in impacts:
        groups[impact.level].append(impact)
    return groups


def build_report(
    result: ComparisonResult,
    insights: list[HistoryInsight] | None = None,
) -> dict[str, Any]:
    """The machine-readable report written by --format=json and --output."""
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "file_a": result.file_a,
        "file_b": result.file_b,
        "summary": summarize(result.changes, result.impacts).model_dump(mode="json"),
        "changes": [c.model_dump(mode="json") for c in result.changes],
        "impacts": [i.model_dump(mode="json") for i in result.impacts],
        "validation_issues": [v.model_dump(mode="json") for v in result.validation_issues],
        "insights": [i.model_dump(mode="json") for i in insights or []],
    }
