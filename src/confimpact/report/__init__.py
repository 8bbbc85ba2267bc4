"""Report building: summaries, JSON export and markdown rendering."""

from confimpact.report.renderer import render_markdown, risk_badge
from confimpact.report.summary import (
    ChangeSummary,
    ReportSummary,
    build_report,
    group_by_level,
    overall_risk,
    summarize,
    summarize_changes,
)

__all__ = [
    "ChangeSummary",
    "ReportSummary",
    "build_report",
    "group_by_level",
    "overall_risk",
    "render_markdown",
    "risk_badge",
    "summarize",
    "summarize_changes",
]
