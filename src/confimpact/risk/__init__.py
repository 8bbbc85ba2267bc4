"""Risk classification: rule tables and the change classifier."""

from confimpact.risk.classifier import assess, classify
from confimpact.risk.models import ImpactCategory, ImpactRecord, RiskLevel
from confimpact.risk.rules import ESCALATION_RULES, TIER_RULES, baseline

__all__ = [
    "ESCALATION_RULES",
    "TIER_RULES",
    "ImpactCategory",
    "ImpactRecord",
    "RiskLevel",
    "assess",
    "baseline",
    "classify",
]
