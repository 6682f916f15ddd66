# -*- coding: utf-8 -*-
"""Tests for the Gemini REST wrapper."""

from __future__ import annotations

import io
import json
from urllib import error

import pytest

from infrasights.integrations import gemini_client as gemini_mod
from infrasights.integrations.gemini_client import GeminiAPIError, GeminiClient


class _FakeResponse:
    def __init__(self, payload: dict, status: int = 200) -> None:
        self.status = status
        self._body = json.dumps(payload).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None


def _candidate(text_parts: list[str]) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text} for text in text_parts]}}]}


def test_build_request_body_contains_schema_and_system_prompt() -> None:
    client = GeminiClient("test-key")
    body = client.build_request_body(
        [{"text": "hello"}],
        system_instruction="be precise",
        temperature=0.1,
        response_schema={"type": "OBJECT"},
    )
    assert body["contents"] == [{"role": "user", "parts": [{"text": "hello"}]}]
    assert body["generationConfig"] == {
        "temperature": 0.1,
        "responseMimeType": "application/json",
        "responseSchema": {"type": "OBJECT"},
    }
    assert body["systemInstruction"] == {"parts": [{"text": "be precise"}]}


def test_build_request_body_omits_empty_optionals() -> None:
    body = GeminiClient("test-key").build_request_body([{"text": "x"}])
    assert "systemInstruction" not in body
    assert "responseSchema" not in body["generationConfig"]


def test_extract_text_joins_parts_of_first_candidate() -> None:
    assert GeminiClient.extract_text(_candidate(['{"a":', " 1}"])) == '{"a": 1}'
    assert GeminiClient.extract_text({"candidates": []}) == ""
    assert GeminiClient.extract_text({}) == ""


def test_generate_content_posts_to_model_endpoint(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(req, **kwargs):
        captured["url"] = req.full_url
        captured["method"] = req.get_method()
        captured["key"] = req.get_header("X-goog-api-key")
        captured["body"] = json.loads(req.data.decode("utf-8"))
        captured["kwargs"] = kwargs
        return _FakeResponse(_candidate(['{"ok": true}']))

    monkeypatch.setattr(gemini_mod.request, "urlopen", fake_urlopen)
    client = GeminiClient("AIza-test", base_url="https://example.test/v1beta/")

    text = client.generate_content("gemini-2.5-flash", [{"text": "hi"}], temperature=0.2)

    assert text == '{"ok": true}'
    assert captured["url"] == "https://example.test/v1beta/models/gemini-2.5-flash:generateContent"
    assert captured["method"] == "POST"
    assert captured["key"] == "AIza-test"
    assert captured["body"]["generationConfig"]["temperature"] == 0.2
    assert captured["kwargs"] == {}


def test_generate_content_passes_timeout_when_set(monkeypatch) -> None:
    seen = {}

    def fake_urlopen(req, **kwargs):
        seen.update(kwargs)
        return _FakeResponse(_candidate(["{}"]))

    monkeypatch.setattr(gemini_mod.request, "urlopen", fake_urlopen)
    GeminiClient("AIza-test", timeout=12.5).generate_content("m", [{"text": "hi"}])
    assert seen == {"timeout": 12.5}


def test_generate_content_raises_on_http_error(monkeypatch) -> None:
    def fake_urlopen(req, **kwargs):
        body = io.BytesIO(json.dumps({"error": {"message": "quota exceeded"}}).encode("utf-8"))
        raise error.HTTPError(req.full_url, 429, "Too Many Requests", {}, body)

    monkeypatch.setattr(gemini_mod.request, "urlopen", fake_urlopen)
    with pytest.raises(GeminiAPIError) as exc_info:
        GeminiClient("AIza-test").generate_content("m", [{"text": "hi"}])
    assert exc_info.value.status == 429
    assert "quota exceeded" in str(exc_info.value)


def test_generate_content_raises_when_unreachable(monkeypatch) -> None:
    def fake_urlopen(req, **kwargs):
        raise error.URLError("no route to host")

    monkeypatch.setattr(gemini_mod.request, "urlopen", fake_urlopen)
    with pytest.raises(GeminiAPIError) as exc_info:
        GeminiClient("AIza-test").generate_content("m", [{"text": "hi"}])
    assert exc_info.value.status == 0


def test_validate_key_format_only() -> None:
    client = GeminiClient()
    assert client.validate_key("AIzaSyExample")
    assert client.validate_key("test-local")
    assert not client.validate_key("")
    assert not client.validate_key("sk-not-google")


def test_validate_key_remote_uses_model_listing(monkeypatch) -> None:
    urls = []

    def fake_urlopen(req, **kwargs):
        urls.append(req.full_url)
        return _FakeResponse({"models": []})

    monkeypatch.setattr(gemini_mod.request, "urlopen", fake_urlopen)
    assert GeminiClient("AIza-test", base_url="https://example.test/v1beta").validate_key(check_remote=True)
    assert urls == ["https://example.test/v1beta/models"]
