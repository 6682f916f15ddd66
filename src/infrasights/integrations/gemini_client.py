# -*- coding: utf-8 -*-
"""Gemini REST wrapper for schema-constrained JSON generation."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib import error, parse, request

from infrasights.constants import DEFAULT_GEMINI_BASE_URL

logger = logging.getLogger(__name__)


class GeminiAPIError(RuntimeError):
    """Raised when the Gemini endpoint is unreachable or answers with an error."""

    def __init__(self, message: str, status: int = 0) -> None:
        super().__init__(message)
        self.status = status


class GeminiClient:
    """Thin wrapper for key checks and ``generateContent`` calls."""

    def __init__(
        self,
        api_key: str = "",
        *,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def validate_key(
        self,
        api_key: str | None = None,
        *,
        check_remote: bool = False,
        timeout: float = 3.0,
    ) -> bool:
        """Validate key format and optionally test it against the model listing."""
        key = (api_key if api_key is not None else self.api_key).strip()
        if not (bool(key) and (key.startswith("AIza") or key.startswith("test-"))):
            return False
        if not check_remote:
            return True
        status, _ = self._request_json("GET", f"{self.base_url}/models", api_key=key, timeout=timeout)
        return status == 200

    def build_request_body(
        self,
        parts: list[dict[str, Any]],
        *,
        system_instruction: str = "",
        temperature: float = 0.2,
        response_schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "responseMimeType": "application/json",
        }
        if response_schema is not None:
            generation_config["responseSchema"] = response_schema
        body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        return body

    def generate_content(
        self,
        model: str,
        parts: list[dict[str, Any]],
        *,
        system_instruction: str = "",
        temperature: float = 0.2,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        """Run one generation request and return the concatenated text parts.

        An empty string means the model produced no text.
        """
        body = self.build_request_body(
            parts,
            system_instruction=system_instruction,
            temperature=temperature,
            response_schema=response_schema,
        )
        url = f"{self.base_url}/models/{parse.quote(model, safe='')}:generateContent"
        logger.debug("Gemini request: model=%s parts=%d", model, len(parts))
        status, payload = self._request_json("POST", url, api_key=self.api_key, timeout=self.timeout, data=body)
        if status != 200 or payload is None:
            detail = ""
            if isinstance(payload, dict):
                detail = str((payload.get("error") or {}).get("message", ""))
            raise GeminiAPIError(f"Gemini request failed (status={status}) {detail}".strip(), status=status)
        return self.extract_text(payload)

    @staticmethod
    def extract_text(payload: dict[str, Any]) -> str:
        candidates = payload.get("candidates", [])
        if not isinstance(candidates, list) or not candidates:
            return ""
        first = candidates[0] if isinstance(candidates[0], dict) else {}
        content = first.get("content", {})
        parts = content.get("parts", []) if isinstance(content, dict) else []
        texts = [
            str(part.get("text", ""))
            for part in parts
            if isinstance(part, dict) and part.get("text")
        ]
        return "".join(texts)

    def _request_json(
        self,
        method: str,
        url: str,
        *,
        api_key: str,
        timeout: float | None,
        data: dict[str, Any] | None = None,
    ) -> tuple[int, dict[str, Any] | None]:
        body = None
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-goog-api-key"] = api_key
        if data is not None:
            body = json.dumps(data).encode("utf-8")
        req = request.Request(url, headers=headers, data=body, method=method)
        kwargs: dict[str, Any] = {}
        if timeout:
            kwargs["timeout"] = timeout
        try:
            with request.urlopen(req, **kwargs) as response:
                status = int(getattr(response, "status", 200))
                raw_body = response.read().decode("utf-8", errors="ignore")
                try:
                    payload = json.loads(raw_body) if raw_body else {}
                except json.JSONDecodeError:
                    payload = {}
                return status, payload if isinstance(payload, dict) else {}
        except error.HTTPError as exc:
            raw_body = exc.read().decode("utf-8", errors="ignore")
            try:
                payload = json.loads(raw_body) if raw_body else {}
            except json.JSONDecodeError:
                payload = {}
            return int(exc.code), payload if isinstance(payload, dict) else {}
        except (error.URLError, OSError) as exc:
            logger.warning("Gemini endpoint unreachable: %s", exc)
            return 0, None
