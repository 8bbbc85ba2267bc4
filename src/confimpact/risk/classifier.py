"""Risk classification of structural changes.

Maps each ChangeRecord to at most one ImpactRecord using the rule tables in
:mod:`confimpact.risk.rules`. Low-level additions and modifications are
dropped from the output; removals are always reported (at MEDIUM or above).
"""

from __future__ import annotations

from confimpact.diff.models import ChangeKind, ChangeRecord
from confimpact.risk.models import ImpactRecord, RiskLevel
from confimpact.risk.rules import ESCALATION_RULES, EscalationRule, baseline, display

_TITLES = {
    ChangeKind.ADDED: "Added field: {key}",
    ChangeKind.REMOVED: "Removed field: {key}",
    ChangeKind.MODIFIED: "Modified value: {key}",
}


def assess(
    change: ChangeRecord,
    rules: tuple[EscalationRule, ...] = ESCALATION_RULES,
) -> ImpactRecord:
    """Assess a single change, without filtering."""
    key = change.key
    level, category = baseline(key)
    description, recommendation = _default_text(change)
    fired: str | None = None

    for rule in rules:
        if not rule.fires(change, level):
            continue
        level = level.at_least(rule.target)
        description, recommendation = rule.describe(change)
        fired = rule.name

    return ImpactRecord(
        level=level,
        path=change.path,
        title=_TITLES[change.kind].format(key=key),
        description=description,
        recommendation=recommendation,
        change_kind=change.kind,
        category=category,
        rule=fired,
    )


def is_reported(impact: ImpactRecord) -> bool:
    """LOW impacts are only reported for removals."""
    return impact.level != RiskLevel.LOW or impact.change_kind == ChangeKind.REMOVED


def classify(changes: list[ChangeRecord]) -> list[ImpactRecord]:
    """Classify changes, preserving input order, at most one impact per change."""
    impacts: list[ImpactRecord] = []
    for change in changes:
        impact = assess(change)
        if is_reported(impact):
            impacts.append(impact)
    return impacts


def _default_text(change: ChangeRecord) -> tuple[str, str]:
    if change.kind == ChangeKind.ADDED:
        return "New field in the configuration.", ""
    if change.kind == ChangeKind.REMOVED:
        return "Field removed from the configuration.", ""
    return (
        f'Value changed from "{display(change.old_value)}" '
        f'to "{display(change.new_value)}".',
        "",
    )
