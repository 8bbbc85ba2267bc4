"""Validate documents against a small JSON-Schema-like subset.

Supported keywords: ``required`` (list of field names), ``properties``
(nested per-field schemas) and, inside a property, ``type`` and ``enum``.
Nested objects are validated when the property declares ``type: object``.
This runs independently of the diff: each input document is checked on its
own.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from confimpact.diff.differ import deep_equal
from confimpact.risk.rules import json_type

ROOT_PATH = "$"


class IssueKind(str, Enum):
    MISSING_REQUIRED = "missing_required"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_ENUM = "invalid_enum"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """One schema violation in one document."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: IssueKind
    message: str
    severity: Severity
    source: str = ""  # which document, e.g. "config-a.yaml"


def type_matches(expected: str, value: Any) -> bool:
    """Check a value against a schema type name. ``integer`` is a whole number."""
    actual = json_type(value)
    if expected == "integer":
        return actual == "number" and float(value).is_integer()
    return actual == expected


def validate_document(
    data: Any, schema: dict[str, Any], source: str = ""
) -> list[ValidationIssue]:
    """Return every schema violation found in `data`."""
    issues: list[ValidationIssue] = []
    if not isinstance(data, dict):
        issues.append(ValidationIssue(
            path=ROOT_PATH,
            kind=IssueKind.TYPE_MISMATCH,
            message=f"Wrong type: expected object, got {json_type(data)}",
            severity=Severity.ERROR,
            source=source,
        ))
        return issues

    _validate(data, schema, "", source, issues)
    return issues


def _validate(
    obj: dict[str, Any],
    schema: dict[str, Any],
    path: str,
    source: str,
    issues: list[ValidationIssue],
) -> None:
    required = schema.get("required")
    if isinstance(required, list):
        for field in required:
            if field not in obj:
                issues.append(ValidationIssue(
                    path=_join(path, field),
                    kind=IssueKind.MISSING_REQUIRED,
                    message=f"Missing required field: {field}",
                    severity=Severity.ERROR,
                    source=source,
                ))

    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return

    for key, prop_schema in properties.items():
        if key not in obj or not isinstance(prop_schema, dict):
            continue
        value = obj[key]
        current_path = _join(path, key)

        expected = prop_schema.get("type")
        # null is accepted for any declared type
        if expected and value is not None and not type_matches(expected, value):
            issues.append(ValidationIssue(
                path=current_path,
                kind=IssueKind.TYPE_MISMATCH,
                message=f"Wrong type: expected {expected}, got {json_type(value)}",
                severity=Severity.ERROR,
                source=source,
            ))

        allowed = prop_schema.get("enum")
        if isinstance(allowed, list) and not any(deep_equal(value, a) for a in allowed):
            issues.append(ValidationIssue(
                path=current_path,
                kind=IssueKind.INVALID_ENUM,
                message="Value not allowed. Allowed: "
                + ", ".join(str(a) for a in allowed),
                severity=Severity.WARNING,
                source=source,
            ))

        if expected == "object" and isinstance(value, dict):
            _validate(value, prop_schema, current_path, source, issues)


def _join(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)
