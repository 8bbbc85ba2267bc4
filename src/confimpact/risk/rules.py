"""Rule tables for classifying configuration changes.

Two ordered tables drive the classifier:

  1. TIER_RULES: baseline level from the field name (the last path
     segment). Evaluated top to bottom, first match wins. Fields matching
     nothing are LOW / general.
  2. ESCALATION_RULES: applied after the baseline, in order. Each rule that
     fires raises the level to at least its target (never lowers it) and
     replaces the description and recommendation; the last rule to fire
     provides the final text.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable

from confimpact.diff.models import ChangeKind, ChangeRecord
from confimpact.risk.models import ImpactCategory, RiskLevel

KeyMatcher = Callable[[str], bool]


def regex(*patterns: str) -> KeyMatcher:
    """Match a key against any of the patterns (case-insensitive, re.search)."""
    compiled = [re.compile(p, re.IGNORECASE) for p in patterns]

    def match(key: str) -> bool:
        return any(p.search(key) for p in compiled)

    return match


def exact(*names: str) -> KeyMatcher:
    """Match a key equal to one of the names, ignoring case."""
    wanted = {n.lower() for n in names}

    def match(key: str) -> bool:
        return key.lower() in wanted

    return match


def prefix(*prefixes: str) -> KeyMatcher:
    """Match when a token of the key starts with one of the prefixes.

    Keys are split on ``_``, ``-``, spaces and camelCase boundaries, so
    ``max`` matches ``max_size``, ``maxmemory``, ``pool-max`` and
    ``maxConnections`` but not ``admin`` or ``climax``.
    """
    wanted = tuple(p.lower() for p in prefixes)

    def match(key: str) -> bool:
        tokens = re.split(r"[_\-\s]+|(?<=[a-z0-9])(?=[A-Z])", key)
        return any(t.lower().startswith(wanted) for t in tokens if t)

    return match


@dataclass(frozen=True)
class TierRule:
    """Baseline level for field names matched by any of `matchers`."""

    tier: RiskLevel
    category: ImpactCategory
    matchers: tuple[KeyMatcher, ...]

    def matches(self, key: str) -> bool:
        return any(m(key) for m in self.matchers)


TIER_RULES: tuple[TierRule, ...] = (
    TierRule(
        tier=RiskLevel.CRITICAL,
        category=ImpactCategory.SECURITY,
        matchers=(
            regex(r"^(api[_-]?key|secret|password|token|auth)"),
            regex(r"^(database|db)[_.-](host|url|connection)"),
            regex(r"^(enabled?|active|disabled?)$"),
        ),
    ),
    TierRule(
        tier=RiskLevel.HIGH,
        category=ImpactCategory.PERFORMANCE,
        matchers=(
            regex(r"timeout", r"limit", r"threshold", r"retry", r"retries"),
            prefix("max", "min"),
            exact("port", "host", "endpoint", "url"),
        ),
    ),
    TierRule(
        tier=RiskLevel.MEDIUM,
        category=ImpactCategory.CONFIGURATION,
        matchers=(
            exact("name", "type", "version", "format", "encoding", "locale", "timezone"),
        ),
    ),
)


def baseline(key: str) -> tuple[RiskLevel, ImpactCategory]:
    """Return the baseline (level, category) for a field name."""
    for rule in TIER_RULES:
        if rule.matches(key):
            return rule.tier, rule.category
    return RiskLevel.LOW, ImpactCategory.GENERAL


# ---------------------------------------------------------------------------
# Escalation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EscalationRule:
    """Raise a change to at least `target` when `applies` is true."""

    name: str
    kinds: frozenset[ChangeKind]
    target: RiskLevel
    applies: Callable[[ChangeRecord, RiskLevel], bool]
    describe: Callable[[ChangeRecord], tuple[str, str]]  # (description, recommendation)

    def fires(self, change: ChangeRecord, level: RiskLevel) -> bool:
        return change.kind in self.kinds and self.applies(change, level)


def as_number(value: Any) -> float | None:
    """Parse a config value as a number. Booleans and blank strings are not numbers."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return None if number != number else number  # NaN
    return None


def json_type(value: Any) -> str:
    """Name of the JSON type of a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def display(value: Any, width: int = 50) -> str:
    """Short printable form of a config value."""
    if isinstance(value, str):
        text = value
    else:
        text = json.dumps(value, default=str, ensure_ascii=False)
    return text if len(text) <= width else text[:width] + "..."


_is_timeout = regex(r"timeout")
_is_activity_flag = exact("enabled", "enable", "active")
_is_connection = exact("host", "port", "endpoint", "url")


def _timeout_delta(change: ChangeRecord) -> float | None:
    """new - old for numeric timeout changes, None when either side is not a number."""
    if not _is_timeout(change.key):
        return None
    old, new = as_number(change.old_value), as_number(change.new_value)
    if old is None or new is None:
        return None
    return new - old


def _timeout_decreased(change: ChangeRecord, level: RiskLevel) -> bool:
    delta = _timeout_delta(change)
    return delta is not None and delta < 0


def _timeout_increased(change: ChangeRecord, level: RiskLevel) -> bool:
    delta = _timeout_delta(change)
    return delta is not None and delta > 0


ESCALATION_RULES: tuple[EscalationRule, ...] = (
    EscalationRule(
        name="removal",
        kinds=frozenset({ChangeKind.REMOVED}),
        target=RiskLevel.MEDIUM,
        applies=lambda change, level: True,
        describe=lambda change: (
            "Removing a field can break code that still reads it.",
            "Make sure nothing uses this field any more.",
        ),
    ),
    EscalationRule(
        name="added_sensitive",
        kinds=frozenset({ChangeKind.ADDED}),
        target=RiskLevel.HIGH,
        applies=lambda change, level: level.rank >= RiskLevel.HIGH.rank,
        describe=lambda change: (
            "New field in the configuration. Needs attention during deployment.",
            "Check that every component supports the new field.",
        ),
    ),
    EscalationRule(
        name="timeout_decrease",
        kinds=frozenset({ChangeKind.MODIFIED}),
        target=RiskLevel.HIGH,
        applies=_timeout_decreased,
        describe=lambda change: (
            f"Timeout reduced from {display(change.old_value)} to "
            f"{display(change.new_value)}. Operations may start timing out.",
            "Make sure the new value is long enough for the slowest expected operation.",
        ),
    ),
    EscalationRule(
        name="timeout_increase",
        kinds=frozenset({ChangeKind.MODIFIED}),
        target=RiskLevel.LOW,
        applies=_timeout_increased,
        describe=lambda change: (
            f"Timeout increased from {display(change.old_value)} to "
            f"{display(change.new_value)}.",
            "",
        ),
    ),
    EscalationRule(
        name="activity_flag",
        kinds=frozenset({ChangeKind.MODIFIED}),
        target=RiskLevel.CRITICAL,
        applies=lambda change, level: _is_activity_flag(change.key),
        describe=lambda change: (
            f"Activity flag changed: {display(change.old_value)} → "
            f"{display(change.new_value)}",
            "Critical change. Check what this switches on or off before deploying.",
        ),
    ),
    EscalationRule(
        name="connection_change",
        kinds=frozenset({ChangeKind.MODIFIED}),
        target=RiskLevel.HIGH,
        applies=lambda change, level: _is_connection(change.key),
        describe=lambda change: (
            f"Connection parameters changed: {display(change.old_value)} → "
            f"{display(change.new_value)}",
            "Check that the new address is correct and reachable from every environment.",
        ),
    ),
    EscalationRule(
        name="type_change",
        kinds=frozenset({ChangeKind.MODIFIED}),
        target=RiskLevel.HIGH,
        applies=lambda change, level: (
            json_type(change.old_value) != json_type(change.new_value)
        ),
        describe=lambda change: (
            f"Data type changed from {json_type(change.old_value)} "
            f"to {json_type(change.new_value)}.",
            "Update every consumer that parses this field.",
        ),
    ),
)
