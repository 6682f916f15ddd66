# -*- coding: utf-8 -*-
"""Shared pytest fixtures."""

from __future__ import annotations

import io
import json
import os
import sys
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


def _encode_png(size: tuple[int, int] = (1, 1)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (255, 255, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


PNG_1X1_BYTES = _encode_png()

SVG_SIZED_BYTES = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<svg xmlns="http://www.w3.org/2000/svg" width="320" height="200">'
    b'<rect x="10" y="10" width="100" height="60" fill="#8b5cf6"/></svg>'
)

SVG_UNSIZED_BYTES = b'<svg xmlns="http://www.w3.org/2000/svg"><g/></svg>'


@pytest.fixture(scope="session")
def qt_app():
    pytest.importorskip("PyQt6")
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1X1_BYTES


@pytest.fixture
def svg_sized_bytes() -> bytes:
    return SVG_SIZED_BYTES


@pytest.fixture
def svg_unsized_bytes() -> bytes:
    return SVG_UNSIZED_BYTES


@pytest.fixture
def default_config() -> dict:
    from infrasights.config import get_default_config

    return get_default_config()


@pytest.fixture
def analysis_payload() -> dict[str, Any]:
    return {
        "components": [
            {"service": "EC2", "type": "Compute", "count_estimate": "3", "notes": "Web tier behind ALB"},
            {"service": "RDS PostgreSQL", "type": "Database", "count_estimate": "1", "notes": "Multi-AZ"},
            {"service": "S3", "type": "Storage"},
        ],
        "architecture_pattern": "Three-tier web application",
        "cloud_provider": "AWS",
        "observations": ["Single region deployment", "No CDN in front of static assets"],
        "questions": [
            {
                "id": "traffic",
                "text": "How many monthly active users do you expect?",
                "options": ["< 10k", "10k - 100k", "> 100k"],
                "context": "Drives compute sizing",
            },
            {"id": "storage", "text": "How much data is stored in S3?", "options": []},
            {"id": "ha", "text": "Do you need multi-region failover?", "options": ["Yes", "No"]},
        ],
    }


@pytest.fixture
def report_payload() -> dict[str, Any]:
    return {
        "items": [
            {
                "service": "EC2",
                "configuration": "3x t3.large",
                "monthly_cost": 180.5,
                "calculation_note": "3 * $0.0832/h * 730h",
            },
            {"service": "RDS PostgreSQL", "configuration": "db.m5.large Multi-AZ", "monthly_cost": 1054.0},
            {"service": "S3", "configuration": "500 GB Standard", "monthly_cost": 0},
        ],
        "total_monthly_cost": 1234.5,
        "total_yearly_cost": 14814,
        "confidence_score": "medium",
        "ranges": {"optimistic": 950, "pessimistic": 1800.25},
        "executive_summary": "#### Overview\n- **Compute** dominates spend\n1. Review `db.m5.large` sizing",
        "recommendations": [
            {
                "title": "Use Reserved Instances",
                "description": "Commit to a **1-year** term for steady EC2 load.",
                "impact": "high",
                "estimated_savings": "$60/month",
            },
            {
                "title": "Enable S3 Intelligent-Tiering",
                "description": "- Move cold objects automatically",
                "impact": "Low",
                "estimated_savings": "$5/month",
            },
        ],
    }


@pytest.fixture
def sample_analysis(analysis_payload):
    from infrasights.pipeline.schema_validator import parse_analysis

    return parse_analysis(analysis_payload)


@pytest.fixture
def sample_report(report_payload):
    from infrasights.pipeline.schema_validator import parse_cost_report

    return parse_cost_report(report_payload)


@pytest.fixture
def sample_image():
    from infrasights.models.uploaded_image import UploadedImage

    return UploadedImage(data=PNG_1X1_BYTES, mime_type="image/png", source_name="diagram.png", width=1, height=1)


@pytest.fixture
def sample_png(tmp_path: Path) -> Path:
    path = tmp_path / "diagram.png"
    path.write_bytes(PNG_1X1_BYTES)
    return path


class FakeGenerationClient:
    """Records calls and replays canned responses (str) or raises them (Exception)."""

    def __init__(self, *responses: Any, api_key: str = "test-key") -> None:
        self.api_key = api_key
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def generate_content(
        self,
        model: str,
        parts: list[dict[str, Any]],
        *,
        system_instruction: str = "",
        temperature: float = 0.2,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "parts": parts,
                "system_instruction": system_instruction,
                "temperature": temperature,
                "response_schema": response_schema,
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_client_factory():
    return FakeGenerationClient


@pytest.fixture
def gateway_factory(fake_client_factory):
    from infrasights.pipeline.gateway import ModelGateway

    def _make(*responses: Any, api_key: str = "test-key") -> ModelGateway:
        return ModelGateway(fake_client_factory(*responses, api_key=api_key), model="gemini-2.5-flash")

    return _make


@pytest.fixture
def analysis_json(analysis_payload) -> str:
    return json.dumps(analysis_payload)


@pytest.fixture
def report_json(report_payload) -> str:
    return json.dumps(report_payload)
