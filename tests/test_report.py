"""Tests for report summaries and the markdown renderer."""

from __future__ import annotations

import json

from confimpact.analysis import compare_documents
from confimpact.history.models import HistoryInsight, PathFrequency
from confimpact.report.renderer import render_markdown, risk_badge
from confimpact.report.summary import (
    build_report,
    group_by_level,
    overall_risk,
    summarize,
    summarize_changes,
)
from confimpact.risk.models import ImpactRecord, RiskLevel
from confimpact.diff.models import ChangeKind


def _impact(level: RiskLevel, path: str = "x") -> ImpactRecord:
    return ImpactRecord(
        level=level,
        path=path,
        title=f"Modified value: {path}",
        change_kind=ChangeKind.MODIFIED,
    )


class TestSummary:
    def test_full_config_counts(self, config_docs):
        result = compare_documents(*config_docs)
        summary = summarize(result.changes, result.impacts)
        assert summary.total == 10
        assert summary.added == 1
        assert summary.removed == 1
        assert summary.modified == 8
        assert summary.critical == 2
        assert summary.high == 4
        assert summary.medium == 1
        assert summary.low == 0
        assert summary.overall_risk == RiskLevel.CRITICAL

    def test_empty(self):
        summary = summarize([], [])
        assert summary.total == 0
        assert summary.overall_risk == RiskLevel.LOW

    def test_change_counts_sum_to_total(self, config_docs):
        counts = summarize_changes(compare_documents(*config_docs).changes)
        assert counts.added + counts.removed + counts.modified == counts.total

    def test_overall_risk(self):
        assert overall_risk([]) == RiskLevel.LOW
        assert overall_risk([_impact(RiskLevel.MEDIUM)]) == RiskLevel.MEDIUM
        assert overall_risk(
            [_impact(RiskLevel.MEDIUM), _impact(RiskLevel.HIGH), _impact(RiskLevel.LOW)]
        ) == RiskLevel.HIGH

    def test_group_by_level(self):
        impacts = [
            _impact(RiskLevel.HIGH, "a"),
            _impact(RiskLevel.CRITICAL, "b"),
            _impact(RiskLevel.HIGH, "c"),
        ]
        groups = group_by_level(impacts)
        assert list(groups) == [
            RiskLevel.CRITICAL,
            RiskLevel.HIGH,
            RiskLevel.MEDIUM,
            RiskLevel.LOW,
        ]
        assert [i.path for i in groups[RiskLevel.HIGH]] == ["a", "c"]
        assert groups[RiskLevel.LOW] == []


class TestBuildReport:
    def test_keys(self, config_docs):
        report = build_report(compare_documents(*config_docs, file_a="a.json", file_b="b.json"))
        assert set(report) == {
            "generated_at",
            "file_a",
            "file_b",
            "summary",
            "changes",
            "impacts",
            "validation_issues",
            "insights",
        }
        assert report["file_a"] == "a.json"
        assert report["summary"]["overall_risk"] == "critical"
        assert len(report["changes"]) == 10
        assert report["insights"] == []

    def test_is_json_serializable(self, config_docs, schema):
        result = compare_documents(*config_docs, schema=schema)
        insights = [HistoryInsight(paths=[PathFrequency(path="a", count=3)])]
        report = json.loads(json.dumps(build_report(result, insights)))
        assert report["validation_issues"][0]["kind"] == "type_mismatch"
        assert report["insights"][0]["paths"][0] == {"path": "a", "count": 3}

    def test_change_records(self):
        report = build_report(compare_documents({"a": 1}, {"a": 2}))
        assert report["changes"] == [
            {"kind": "modified", "path": "a", "old_value": 1, "new_value": 2}
        ]


class TestRenderMarkdown:
    def test_no_changes(self):
        md = render_markdown(compare_documents({"a": 1}, {"a": 1}, "a.json", "b.json"))
        assert "## Configuration Impact: `a.json` → `b.json`" in md
        assert "> No changes detected." in md
        assert "*Generated by confimpact*" in md
        assert "### Changed Fields" not in md

    def test_full_report(self, config_docs):
        md = render_markdown(compare_documents(*config_docs))
        assert "**CRITICAL**" in md
        assert "| 🔴 Risk |" in md
        assert "### Changed Fields" in md
        assert "| `database.timeout` | ~ modified | `30` | `10` |" in md
        assert "| `cache_ttl` | + added |  | `300` |" in md
        assert "### Impact Analysis" in md
        assert "<summary>🔴 CRITICAL: 2</summary>" in md
        assert "<summary>🟠 HIGH: 4</summary>" in md
        assert "LOW:" not in md

    def test_only_low_changes(self):
        md = render_markdown(compare_documents({"color": "red"}, {"color": "blue"}))
        assert "> No risky changes detected." in md
        assert "**LOW**" in md

    def test_pipes_escaped(self):
        md = render_markdown(compare_documents({"cmd": "a|b"}, {"cmd": "c"}))
        assert "a\\|b" in md

    def test_validation_section(self, config_docs, schema):
        result = compare_documents(*config_docs, "v1.json", "v2.json", schema=schema)
        md = render_markdown(result)
        assert "### Schema Validation" in md
        assert "| `v2.json` | `database.port` | error |" in md

    def test_insights_section(self, config_docs):
        insights = [HistoryInsight(paths=[PathFrequency(path="database.timeout", count=4)])]
        md = render_markdown(compare_documents(*config_docs), insights)
        assert "### Frequently Changed Fields" in md
        assert "- `database.timeout` (4x)" in md

    def test_risk_badge(self):
        assert risk_badge(RiskLevel.LOW) == ("🟢", "LOW")
        assert risk_badge(RiskLevel.CRITICAL) == ("🔴", "CRITICAL")
