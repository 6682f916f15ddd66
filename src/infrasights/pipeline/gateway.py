# -*- coding: utf-8 -*-
"""Model gateway: the two request/response calls behind the workflow."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from infrasights.config import get_api_key
from infrasights.constants import DEFAULT_GEMINI_BASE_URL
from infrasights.errors import (
    AnalysisFailure,
    ConfigurationError,
    EstimationFailure,
    GatewayError,
    SchemaViolation,
)
from infrasights.integrations.gemini_client import GeminiClient
from infrasights.models.analysis_result import AnalysisResult
from infrasights.models.cost_report import CostReport
from infrasights.models.uploaded_image import UploadedImage
from infrasights.pipeline import prompts
from infrasights.pipeline.schema_validator import parse_analysis, parse_cost_report

logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    api_key: str

    def generate_content(
        self,
        model: str,
        parts: list[dict[str, Any]],
        *,
        system_instruction: str = "",
        temperature: float = 0.2,
        response_schema: dict[str, Any] | None = None,
    ) -> str: ...


class ModelGateway:
    """Build prompts, call the model and decode schema-checked results.

    No caching, no retries, no partial results: each call returns a fully
    validated value or raises.
    """

    def __init__(
        self,
        client: GenerationClient,
        *,
        model: str,
        analysis_temperature: float = 0.2,
        estimate_temperature: float = 0.1,
    ) -> None:
        self.client = client
        self.model = model
        self.analysis_temperature = analysis_temperature
        self.estimate_temperature = estimate_temperature

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "ModelGateway":
        gemini = settings.get("gemini", {})
        timeout = float(gemini.get("request_timeout_seconds", 0) or 0)
        client = GeminiClient(
            api_key=get_api_key(settings),
            base_url=str(gemini.get("base_url", "") or DEFAULT_GEMINI_BASE_URL),
            timeout=timeout or None,
        )
        return cls(
            client,
            model=str(gemini.get("model", "")),
            analysis_temperature=float(gemini.get("analysis_temperature", 0.2)),
            estimate_temperature=float(gemini.get("estimate_temperature", 0.1)),
        )

    def _require_credential(self) -> None:
        if not str(getattr(self.client, "api_key", "") or "").strip():
            raise ConfigurationError("Gemini API key is missing. Set GEMINI_API_KEY in the environment or .env file.")

    def analyze(self, image: UploadedImage, context: str = "") -> AnalysisResult:
        """Send the diagram and business context; return the component inventory."""
        self._require_credential()
        parts = [
            {"inlineData": {"mimeType": image.mime_type, "data": image.to_base64()}},
            {"text": prompts.build_analysis_prompt(context)},
        ]
        logger.info(
            "Analyze request: model=%s image=%s (%s, %d bytes) context_len=%d",
            self.model,
            image.source_name or "<unnamed>",
            image.mime_type,
            image.size_bytes,
            len(context),
        )
        payload = self._call(
            parts,
            temperature=self.analysis_temperature,
            schema=prompts.ANALYSIS_SCHEMA,
            failure=AnalysisFailure,
        )
        result = parse_analysis(payload)
        logger.info(
            "Analyze response: %d components, %d questions, provider=%s",
            len(result.components),
            len(result.questions),
            result.cloud_provider,
        )
        return result

    def estimate(self, analysis: AnalysisResult, answers: dict[str, str]) -> CostReport:
        """Send the analysis plus every answer; return the cost report."""
        self._require_credential()
        prompt = prompts.build_estimate_prompt(analysis, answers)
        logger.info("Estimate request: model=%s questions=%d prompt_len=%d", self.model, len(analysis.questions), len(prompt))
        payload = self._call(
            [{"text": prompt}],
            temperature=self.estimate_temperature,
            schema=prompts.REPORT_SCHEMA,
            failure=EstimationFailure,
        )
        report = parse_cost_report(payload)
        logger.info("Estimate response: %d items, monthly=%.2f", len(report.items), report.total_monthly_cost)
        return report

    def _call(
        self,
        parts: list[dict[str, Any]],
        *,
        temperature: float,
        schema: dict[str, Any],
        failure: type[GatewayError],
    ) -> Any:
        try:
            raw_response = self.client.generate_content(
                self.model,
                parts,
                system_instruction=prompts.SYSTEM_PROMPT,
                temperature=temperature,
                response_schema=schema,
            )
        except (ConfigurationError, SchemaViolation):
            raise
        except Exception as exc:
            logger.error("Model call failed: %s", exc)
            raise failure(f"Model call failed: {exc}") from exc

        if not raw_response or not raw_response.strip():
            raise failure("No response from model")
        try:
            return json.loads(raw_response)
        except json.JSONDecodeError as exc:
            logger.error("Model returned malformed JSON (%d chars)", len(raw_response))
            raise failure(f"Malformed JSON from model: {exc}") from exc
