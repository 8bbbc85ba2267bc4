"""Lightweight schema validation for configuration documents."""

from confimpact.schema.validator import IssueKind, Severity, ValidationIssue, validate_document

__all__ = ["IssueKind", "Severity", "ValidationIssue", "validate_document"]
