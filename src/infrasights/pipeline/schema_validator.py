# -*- coding: utf-8 -*-
"""Validate decoded model payloads and build typed results.

The model is asked for schema-constrained JSON, but the constraint is enforced
on the model side only. Everything decoded from a response passes through
here before it reaches the session, so a payload that parses as JSON but
misses a required field or carries the wrong type is reported as a
``SchemaViolation`` naming the offending path instead of leaking half-filled
values into the UI.

Optional fields (notes, options, calculation notes, ...) fall back to empty
values; required fields must be present with the declared type.
"""

from __future__ import annotations

from typing import Any

from infrasights.errors import SchemaViolation
from infrasights.models.analysis_result import AnalysisResult, CloudComponent, Question
from infrasights.models.cost_report import CostItem, CostRanges, CostReport, Impact, Recommendation


def _require_object(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaViolation(path, f"expected object, got {type(value).__name__}")
    return value


def _require_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaViolation(path, f"expected array, got {type(value).__name__}")
    return value


def _string(obj: dict[str, Any], key: str, path: str, *, required: bool = True) -> str:
    if key not in obj or obj[key] is None:
        if required:
            raise SchemaViolation(f"{path}.{key}", "missing required field")
        return ""
    value = obj[key]
    if not isinstance(value, str):
        raise SchemaViolation(f"{path}.{key}", f"expected string, got {type(value).__name__}")
    return value


def _number(obj: dict[str, Any], key: str, path: str, *, non_negative: bool = False) -> float:
    if key not in obj or obj[key] is None:
        raise SchemaViolation(f"{path}.{key}", "missing required field")
    value = obj[key]
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaViolation(f"{path}.{key}", f"expected number, got {type(value).__name__}")
    if non_negative and value < 0:
        raise SchemaViolation(f"{path}.{key}", f"expected non-negative number, got {value}")
    return float(value)


def _string_list(obj: dict[str, Any], key: str, path: str, *, required: bool = True) -> list[str]:
    if key not in obj or obj[key] is None:
        if required:
            raise SchemaViolation(f"{path}.{key}", "missing required field")
        return []
    values = _require_list(obj[key], f"{path}.{key}")
    result: list[str] = []
    for index, value in enumerate(values):
        if not isinstance(value, str):
            raise SchemaViolation(f"{path}.{key}[{index}]", f"expected string, got {type(value).__name__}")
        result.append(value)
    return result


def _objects(obj: dict[str, Any], key: str, path: str) -> list[tuple[str, dict[str, Any]]]:
    if key not in obj or obj[key] is None:
        raise SchemaViolation(f"{path}.{key}", "missing required field")
    values = _require_list(obj[key], f"{path}.{key}")
    return [
        (f"{path}.{key}[{index}]", _require_object(value, f"{path}.{key}[{index}]"))
        for index, value in enumerate(values)
    ]


def parse_analysis(payload: Any) -> AnalysisResult:
    """Validate an analyze response and return an ``AnalysisResult``."""
    root = _require_object(payload, "$")

    components = [
        CloudComponent(
            service=_string(item, "service", item_path),
            type=_string(item, "type", item_path),
            count_estimate=_string(item, "count_estimate", item_path, required=False),
            notes=_string(item, "notes", item_path, required=False),
        )
        for item_path, item in _objects(root, "components", "$")
    ]

    questions: list[Question] = []
    seen_ids: set[str] = set()
    for item_path, item in _objects(root, "questions", "$"):
        question_id = _string(item, "id", item_path)
        if not question_id.strip():
            raise SchemaViolation(f"{item_path}.id", "question id must not be empty")
        if question_id in seen_ids:
            raise SchemaViolation(f"{item_path}.id", f"duplicate question id {question_id!r}")
        seen_ids.add(question_id)
        questions.append(
            Question(
                id=question_id,
                text=_string(item, "text", item_path),
                options=_string_list(item, "options", item_path, required=False),
                context=_string(item, "context", item_path, required=False),
            )
        )

    return AnalysisResult(
        components=components,
        architecture_pattern=_string(root, "architecture_pattern", "$"),
        cloud_provider=_string(root, "cloud_provider", "$"),
        observations=_string_list(root, "observations", "$", required=False),
        questions=questions,
    )


def parse_cost_report(payload: Any) -> CostReport:
    """Validate an estimate response and return a ``CostReport``."""
    root = _require_object(payload, "$")

    items = [
        CostItem(
            service=_string(item, "service", item_path),
            configuration=_string(item, "configuration", item_path, required=False),
            monthly_cost=_number(item, "monthly_cost", item_path, non_negative=True),
            calculation_note=_string(item, "calculation_note", item_path, required=False),
        )
        for item_path, item in _objects(root, "items", "$")
    ]

    ranges_obj = _require_object(root.get("ranges"), "$.ranges")
    ranges = CostRanges(
        optimistic=_number(ranges_obj, "optimistic", "$.ranges"),
        pessimistic=_number(ranges_obj, "pessimistic", "$.ranges"),
    )

    recommendations: list[Recommendation] = []
    for item_path, item in _objects(root, "recommendations", "$"):
        raw_impact = _string(item, "impact", item_path)
        impact = Impact.parse(raw_impact)
        if impact is None:
            raise SchemaViolation(f"{item_path}.impact", f"expected High, Medium or Low, got {raw_impact!r}")
        recommendations.append(
            Recommendation(
                title=_string(item, "title", item_path),
                description=_string(item, "description", item_path, required=False),
                impact=impact,
                estimated_savings=_string(item, "estimated_savings", item_path, required=False),
            )
        )

    return CostReport(
        items=items,
        total_monthly_cost=_number(root, "total_monthly_cost", "$", non_negative=True),
        total_yearly_cost=_number(root, "total_yearly_cost", "$", non_negative=True),
        confidence_score=_string(root, "confidence_score", "$"),
        ranges=ranges,
        executive_summary=_string(root, "executive_summary", "$", required=False),
        recommendations=recommendations,
    )
