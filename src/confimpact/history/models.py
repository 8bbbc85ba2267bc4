"""Data models for comparison history."""

from __future__ import annotations

from pydantic import BaseModel, Field

from confimpact.diff.models import ChangeRecord
from confimpact.report.summary import ChangeSummary
from confimpact.risk.models import ImpactRecord, RiskLevel


class HistoryEntry(BaseModel):
    """One recorded comparison run."""

    name: str
    timestamp: str  # ISO-8601, UTC
    file_a: str
    file_b: str
    changes: list[ChangeRecord] = Field(default_factory=list)
    impacts: list[ImpactRecord] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    summary: ChangeSummary = Field(default_factory=ChangeSummary)


class PathFrequency(BaseModel):
    path: str
    count: int


class HistoryInsight(BaseModel):
    """Something learned from past runs."""

    kind: str = "frequent_changes"
    paths: list[PathFrequency] = Field(default_factory=list)
