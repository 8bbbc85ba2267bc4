"""Comparison pipeline: load -> diff -> classify (-> validate).

This is the library entry point behind the CLI. It:
1. Loads both documents (and the schema, when given)
2. Diffs them into ChangeRecords
3. Classifies the changes into ImpactRecords
4. Validates each document against the schema independently
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from confimpact.diff.differ import diff
from confimpact.diff.models import ChangeRecord
from confimpact.document.loader import load_document
from confimpact.risk.classifier import classify
from confimpact.risk.models import ImpactRecord, RiskLevel
from confimpact.report.summary import overall_risk
from confimpact.schema.validator import ValidationIssue, validate_document


class ComparisonResult(BaseModel):
    """Everything produced by one comparison run."""

    file_a: str
    file_b: str
    changes: list[ChangeRecord] = Field(default_factory=list)
    impacts: list[ImpactRecord] = Field(default_factory=list)
    validation_issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def risk_level(self) -> RiskLevel:
        return overall_risk(self.impacts)


def compare_documents(
    doc_a: dict[str, Any],
    doc_b: dict[str, Any],
    file_a: str = "A",
    file_b: str = "B",
    schema: dict[str, Any] | None = None,
) -> ComparisonResult:
    """Run the pipeline over documents that are already in memory."""
    changes = diff(doc_a, doc_b)
    impacts = classify(changes)

    issues: list[ValidationIssue] = []
    if schema is not None:
        issues.extend(validate_document(doc_a, schema, source=file_a))
        issues.extend(validate_document(doc_b, schema, source=file_b))

    return ComparisonResult(
        file_a=file_a,
        file_b=file_b,
        changes=changes,
        impacts=impacts,
        validation_issues=issues,
    )


def compare_files(
    path_a: str | Path,
    path_b: str | Path,
    schema_path: str | Path | None = None,
) -> ComparisonResult:
    """Load two files (and an optional schema) and compare them.

    Everything is loaded before anything is compared, so a bad input fails
    the whole run without producing partial results.
    """
    doc_a = load_document(path_a)
    doc_b = load_document(path_b)
    schema = load_document(schema_path) if schema_path else None

    return compare_documents(
        doc_a,
        doc_b,
        file_a=Path(path_a).name,
        file_b=Path(path_b).name,
        schema=schema,
    )
