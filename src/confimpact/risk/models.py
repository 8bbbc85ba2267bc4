"""Data models for risk assessment of configuration changes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from confimpact.diff.models import ChangeKind


class RiskLevel(str, Enum):
    """Risk tiers, from least to most severe."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def at_least(self, other: RiskLevel) -> RiskLevel:
        """Return the more severe of the two levels."""
        return self if self.rank >= other.rank else other


_RANKS = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


class ImpactCategory(str, Enum):
    """What kind of concern a field belongs to."""

    SECURITY = "security"
    PERFORMANCE = "performance"
    CONFIGURATION = "configuration"
    GENERAL = "general"


class ImpactRecord(BaseModel):
    """Risk assessment derived from exactly one ChangeRecord."""

    model_config = ConfigDict(frozen=True)

    level: RiskLevel
    path: str
    title: str
    description: str = ""
    recommendation: str = ""
    change_kind: ChangeKind
    category: ImpactCategory = ImpactCategory.GENERAL
    rule: str | None = None  # escalation rule whose text was used
