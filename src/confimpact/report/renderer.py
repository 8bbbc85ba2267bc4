"""Markdown renderer for comparison reports.

Generates GitHub-flavored markdown suitable for PR comments or CI logs:
  - Risk badge and change counts
  - Changed fields table
  - Impacts grouped by risk level
  - Schema validation issues
  - Frequently changed fields from history
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from confimpact.diff.models import ChangeKind, ChangeRecord
from confimpact.report.summary import group_by_level, summarize
from confimpact.risk.models import RiskLevel
from confimpact.risk.rules import display

if TYPE_CHECKING:
    from confimpact.analysis import ComparisonResult
    from confimpact.history.models import HistoryInsight

_CHANGE_MARKERS = {
    ChangeKind.ADDED: "+",
    ChangeKind.REMOVED: "-",
    ChangeKind.MODIFIED: "~",
}


def render_markdown(
    result: ComparisonResult,
    insights: list[HistoryInsight] | None = None,
) -> str:
    """Render the full comparison as a markdown document."""
    summary = summarize(result.changes, result.impacts)
    sections: list[str] = []

    sections.append(f"## Configuration Impact: `{result.file_a}` → `{result.file_b}`")
    sections.append("")

    if not result.changes:
        sections.append("> No changes detected.")
        sections.append("")
        sections.extend(_render_validation(result))
        sections.append(_footer())
        return "\n".join(sections)

    emoji, label = risk_badge(summary.overall_risk)
    sections.append(f"| {emoji} Risk | Changes | Added | Modified | Removed |")
    sections.append("|:---:|:---:|:---:|:---:|:---:|")
    sections.append(
        f"| **{label}** | {summary.total} | {summary.added} | "
        f"{summary.modified} | {summary.removed} |"
    )
    sections.append("")

    sections.append("### Changed Fields")
    sections.append("")
    sections.append("| Field | Change | Old | New |")
    sections.append("|:------|:------:|:----|:----|")
    for change in result.changes:
        sections.append(_change_row(change))
    sections.append("")

    if result.impacts:
        sections.append("### Impact Analysis")
        sections.append("")
        for level, items in group_by_level(result.impacts).items():
            if not items:
                continue
            emoji, label = risk_badge(level)
            sections.append("<details>")
            sections.append(f"<summary>{emoji} {label}: {len(items)}</summary>")
            sections.append("")
            for impact in items:
                sections.append(f"- **{impact.title}** (`{impact.path}`, {impact.category.value})")
                if impact.description:
                    sections.append(f"  {impact.description}")
                if impact.recommendation:
                    sections.append(f"  *Recommendation:* {impact.recommendation}")
            sections.append("")
            sections.append("</details>")
            sections.append("")
    else:
        sections.append("> No risky changes detected.")
        sections.append("")

    sections.extend(_render_validation(result))

    for insight in insights or []:
        if insight.kind == "frequent_changes" and insight.paths:
            sections.append("### Frequently Changed Fields")
            sections.append("")
            for pf in insight.paths:
                sections.append(f"- `{pf.path}` ({pf.count}x)")
            sections.append("")

    sections.append(_footer())
    return "\n".join(sections)


def risk_badge(level: RiskLevel) -> tuple[str, str]:
    """Return (emoji, label) for a risk level."""
    return {
        RiskLevel.LOW: ("🟢", "LOW"),
        RiskLevel.MEDIUM: ("🟡", "MEDIUM"),
        RiskLevel.HIGH: ("🟠", "HIGH"),
        RiskLevel.CRITICAL: ("🔴", "CRITICAL"),
    }[level]


def _change_row(change: ChangeRecord) -> str:
    marker = _CHANGE_MARKERS[change.kind]
    old = "" if change.kind == ChangeKind.ADDED else f"`{_cell(change.old_value)}`"
    new = "" if change.kind == ChangeKind.REMOVED else f"`{_cell(change.new_value)}`"
    return f"| `{change.path}` | {marker} {change.kind.value} | {old} | {new} |"


def _cell(value) -> str:
    return display(value).replace("|", "\\|").replace("`", "'")


def _render_validation(result: ComparisonResult) -> list[str]:
    if not result.validation_issues:
        return []
    lines = ["### Schema Validation", ""]
    lines.append("| Document | Field | Severity | Problem |")
    lines.append("|:---------|:------|:--------:|:--------|")
    for issue in result.validation_issues:
        lines.append(
            f"| `{issue.source}` | `{issue.path}` | {issue.severity.value} | {issue.message} |"
        )
    lines.append("")
    return lines


def _footer() -> str:
    return "---\n*Generated by confimpact*"
