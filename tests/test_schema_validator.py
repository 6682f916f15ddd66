# -*- coding: utf-8 -*-
"""Tests for decoding model payloads into typed results."""

from __future__ import annotations

import copy

import pytest

from infrasights.errors import SchemaViolation
from infrasights.models.cost_report import Impact
from infrasights.pipeline.schema_validator import parse_analysis, parse_cost_report


def test_parse_analysis_builds_typed_result(analysis_payload) -> None:
    result = parse_analysis(analysis_payload)
    assert result.cloud_provider == "AWS"
    assert [c.service for c in result.components] == ["EC2", "RDS PostgreSQL", "S3"]
    assert result.components[2].count_estimate == ""
    assert result.components[2].notes == ""
    assert result.question_ids() == ["traffic", "storage", "ha"]
    assert result.questions[0].options == ["< 10k", "10k - 100k", "> 100k"]
    assert result.questions[1].options == []
    assert result.questions[1].context == ""


def test_parse_analysis_defaults_missing_observations(analysis_payload) -> None:
    del analysis_payload["observations"]
    assert parse_analysis(analysis_payload).observations == []


@pytest.mark.parametrize(
    ("mutate", "path"),
    [
        (lambda p: p.pop("cloud_provider"), "$.cloud_provider"),
        (lambda p: p.pop("questions"), "$.questions"),
        (lambda p: p.__setitem__("components", {"service": "EC2"}), "$.components"),
        (lambda p: p["components"][1].pop("service"), "$.components[1].service"),
        (lambda p: p["questions"][0].__setitem__("text", 42), "$.questions[0].text"),
        (lambda p: p["questions"][2].__setitem__("options", ["Yes", 1]), "$.questions[2].options[1]"),
        (lambda p: p["observations"].append(None), "$.observations[2]"),
    ],
)
def test_parse_analysis_reports_offending_path(analysis_payload, mutate, path) -> None:
    payload = copy.deepcopy(analysis_payload)
    mutate(payload)
    with pytest.raises(SchemaViolation) as exc_info:
        parse_analysis(payload)
    assert exc_info.value.path == path


def test_parse_analysis_rejects_duplicate_question_ids(analysis_payload) -> None:
    analysis_payload["questions"][2]["id"] = "traffic"
    with pytest.raises(SchemaViolation) as exc_info:
        parse_analysis(analysis_payload)
    assert exc_info.value.path == "$.questions[2].id"
    assert "duplicate" in exc_info.value.message


def test_parse_analysis_rejects_non_object_root() -> None:
    with pytest.raises(SchemaViolation) as exc_info:
        parse_analysis(["not", "an", "object"])
    assert exc_info.value.path == "$"


def test_parse_cost_report_builds_typed_result(report_payload) -> None:
    report = parse_cost_report(report_payload)
    assert report.total_monthly_cost == 1234.5
    assert report.total_yearly_cost == 14814.0
    assert report.ranges.pessimistic == 1800.25
    assert report.items[1].calculation_note == ""
    assert report.items[2].monthly_cost == 0.0
    assert [rec.impact for rec in report.recommendations] == [Impact.HIGH, Impact.LOW]
    assert report.confidence_level is Impact.MEDIUM


def test_parse_cost_report_rejects_unknown_impact(report_payload) -> None:
    report_payload["recommendations"][0]["impact"] = "Critical"
    with pytest.raises(SchemaViolation) as exc_info:
        parse_cost_report(report_payload)
    assert exc_info.value.path == "$.recommendations[0].impact"


@pytest.mark.parametrize(
    ("mutate", "path"),
    [
        (lambda p: p["items"][0].__setitem__("monthly_cost", -1), "$.items[0].monthly_cost"),
        (lambda p: p["items"][0].__setitem__("monthly_cost", "12"), "$.items[0].monthly_cost"),
        (lambda p: p["items"][0].__setitem__("monthly_cost", True), "$.items[0].monthly_cost"),
        (lambda p: p.__setitem__("total_monthly_cost", -5), "$.total_monthly_cost"),
        (lambda p: p.pop("ranges"), "$.ranges"),
        (lambda p: p["ranges"].pop("optimistic"), "$.ranges.optimistic"),
        (lambda p: p.pop("confidence_score"), "$.confidence_score"),
    ],
)
def test_parse_cost_report_reports_offending_path(report_payload, mutate, path) -> None:
    payload = copy.deepcopy(report_payload)
    mutate(payload)
    with pytest.raises(SchemaViolation) as exc_info:
        parse_cost_report(payload)
    assert exc_info.value.path == path


def test_free_text_confidence_is_kept(report_payload) -> None:
    report_payload["confidence_score"] = "Fairly sure"
    report = parse_cost_report(report_payload)
    assert report.confidence_score == "Fairly sure"
    assert report.confidence_level is None
