# -*- coding: utf-8 -*-
"""Tests for the three-stage session workflow."""

from __future__ import annotations

import json

import pytest

from infrasights.constants import (
    ANALYZE_ERROR_TEXT,
    ANALYZE_LOADING_TEXT,
    CANCELLED_TEXT,
    ESTIMATE_ERROR_TEXT,
    ESTIMATE_LOADING_TEXT,
)
from infrasights.core.session import SessionController
from infrasights.core.state import SessionState, Stage
from infrasights.errors import AnalysisFailure, EstimationFailure, SchemaViolation, SessionStateError
from infrasights.integrations.gemini_client import GeminiAPIError


@pytest.fixture
def session_with_image(gateway_factory, analysis_json, report_json, sample_image):
    session = SessionController(gateway_factory(analysis_json, report_json))
    session.select_image(sample_image)
    return session


@pytest.fixture
def clarifying_session(session_with_image):
    assert session_with_image.run_analysis()
    return session_with_image


def test_new_session_starts_in_upload() -> None:
    session = SessionController()
    assert session.stage == Stage.UPLOAD
    assert not session.is_busy
    assert session.progress_percent == 0


def test_analyze_without_image_is_a_no_op(gateway_factory) -> None:
    gateway = gateway_factory()
    session = SessionController(gateway)
    assert session.begin_analysis() is None
    assert not session.run_analysis()
    assert session.stage == Stage.UPLOAD
    assert not session.is_busy
    assert gateway.client.calls == []


def test_successful_analysis_moves_to_clarification(session_with_image) -> None:
    resets_before = session_with_image.state.scroll_resets
    assert session_with_image.run_analysis()

    state = session_with_image.state
    assert state.stage == Stage.CLARIFICATION
    assert state.answers == {"traffic": "", "storage": "", "ha": ""}
    assert state.report is None
    assert not state.busy
    assert state.scroll_resets == resets_before + 1


def test_failed_analysis_stays_in_upload_and_keeps_image(gateway_factory, sample_image) -> None:
    session = SessionController(gateway_factory(GeminiAPIError("quota", status=429)))
    session.select_image(sample_image)

    assert not session.run_analysis()
    assert session.stage == Stage.UPLOAD
    assert session.state.image is sample_image
    assert session.state.error_message == ANALYZE_ERROR_TEXT
    assert not session.is_busy


def test_missing_key_gets_dedicated_message(gateway_factory, sample_image) -> None:
    session = SessionController(gateway_factory(api_key=""))
    session.select_image(sample_image)
    session.run_analysis()
    assert "GEMINI_API_KEY" in session.state.error_message


def test_schema_violation_message_names_the_path(sample_image) -> None:
    session = SessionController()
    session.select_image(sample_image)
    token = session.begin_analysis()
    session.fail_analysis(token, SchemaViolation("$.questions", "missing required field"))
    assert session.state.error_message.startswith(ANALYZE_ERROR_TEXT.rstrip("."))
    assert "$.questions" in session.state.error_message


def test_begin_analysis_marks_busy_and_blocks_second_request(session_with_image) -> None:
    token = session_with_image.begin_analysis()
    assert token is not None and token.is_live
    assert session_with_image.is_busy
    assert session_with_image.state.status_message == ANALYZE_LOADING_TEXT
    assert session_with_image.begin_analysis() is None


def test_image_cannot_change_while_busy(session_with_image, sample_image) -> None:
    session_with_image.begin_analysis()
    assert not session_with_image.select_image(sample_image)


def test_cancel_then_settle_leaves_state_unchanged(session_with_image, sample_analysis) -> None:
    token = session_with_image.begin_analysis()
    assert session_with_image.cancel()

    state = session_with_image.state
    assert not state.busy
    assert state.status_message == CANCELLED_TEXT
    assert not token.is_live

    assert not session_with_image.complete_analysis(token, sample_analysis)
    assert not session_with_image.fail_analysis(token, AnalysisFailure("late"))
    assert state.stage == Stage.UPLOAD
    assert state.analysis is None
    assert state.status_message == CANCELLED_TEXT
    assert state.error_message == ""


def test_stale_token_is_ignored_after_new_request(session_with_image, sample_analysis) -> None:
    first = session_with_image.begin_analysis()
    session_with_image.cancel()
    second = session_with_image.begin_analysis()

    assert not session_with_image.complete_analysis(first, sample_analysis)
    assert session_with_image.is_busy
    assert session_with_image.complete_analysis(second, sample_analysis)
    assert session_with_image.stage == Stage.CLARIFICATION


def test_cancel_without_request_is_a_no_op() -> None:
    session = SessionController()
    assert not session.cancel()
    assert session.state.status_message == ""


def test_set_answer_updates_progress(clarifying_session) -> None:
    assert clarifying_session.total_questions == 3
    clarifying_session.set_answer("traffic", "> 100k")
    assert clarifying_session.answered_count == 1
    assert clarifying_session.progress_percent == 33
    clarifying_session.set_answer("ha", "Yes")
    assert clarifying_session.progress_percent == 67
    clarifying_session.set_answer("storage", "   ")
    assert clarifying_session.answered_count == 2


def test_set_answer_rejects_unknown_question(clarifying_session) -> None:
    with pytest.raises(KeyError):
        clarifying_session.set_answer("nope", "value")
    assert set(clarifying_session.state.answers) == {"traffic", "storage", "ha"}


def test_progress_is_zero_without_questions(gateway_factory, analysis_payload, sample_image) -> None:
    analysis_payload["questions"] = []
    session = SessionController(gateway_factory(json.dumps(analysis_payload)))
    session.select_image(sample_image)
    session.run_analysis()
    assert session.stage == Stage.CLARIFICATION
    assert session.total_questions == 0
    assert session.progress_percent == 0


def test_estimation_sends_answers_and_moves_to_report(clarifying_session) -> None:
    clarifying_session.set_answer("traffic", "10k - 100k")
    assert clarifying_session.run_estimation()

    state = clarifying_session.state
    assert state.stage == Stage.REPORT
    assert state.report is not None
    prompt = clarifying_session.gateway.client.calls[-1]["parts"][0]["text"]
    assert "A: 10k - 100k" in prompt
    assert "A: Not specified" in prompt


def test_begin_estimation_sets_loading_text(clarifying_session) -> None:
    token = clarifying_session.begin_estimation()
    assert token is not None
    assert clarifying_session.state.status_message == ESTIMATE_LOADING_TEXT


def test_failed_estimation_stays_in_clarification(clarifying_session) -> None:
    token = clarifying_session.begin_estimation()
    clarifying_session.set_answer("ha", "No")
    assert clarifying_session.fail_estimation(token, EstimationFailure("No response from model"))

    state = clarifying_session.state
    assert state.stage == Stage.CLARIFICATION
    assert state.error_message == ESTIMATE_ERROR_TEXT
    assert state.answers["ha"] == "No"


def test_estimation_not_allowed_from_upload() -> None:
    session = SessionController()
    assert session.begin_estimation() is None


def test_reset_clears_everything(clarifying_session) -> None:
    clarifying_session.set_context("B2B SaaS")
    clarifying_session.run_estimation()
    resets_before = clarifying_session.state.scroll_resets

    clarifying_session.reset()
    state = clarifying_session.state
    assert state.stage == Stage.UPLOAD
    assert state.image is None
    assert state.analysis is None
    assert state.report is None
    assert state.answers == {}
    assert state.context == ""
    assert state.error_message == "" and state.status_message == ""
    assert state.scroll_resets == resets_before + 1


def test_reset_cancels_in_flight_request(clarifying_session, sample_report) -> None:
    token = clarifying_session.begin_estimation()
    clarifying_session.reset()
    assert not token.is_live
    assert not clarifying_session.complete_estimation(token, sample_report)
    assert clarifying_session.stage == Stage.UPLOAD


def test_context_tags_append_with_separator() -> None:
    session = SessionController()
    assert session.add_context_tag("B2B SaaS") == "B2B SaaS"
    assert session.add_context_tag("High Traffic") == "B2B SaaS, High Traffic"
    session.set_context("")
    assert session.add_context_tag("MVP / Startup") == "MVP / Startup"


def test_listeners_receive_every_mutation(sample_image) -> None:
    seen: list[Stage] = []
    session = SessionController(listener=lambda state: seen.append(state.stage))
    session.set_context("x")
    session.select_image(sample_image)
    assert seen == [Stage.UPLOAD, Stage.UPLOAD]


def test_invariant_detects_stage_mismatch(sample_analysis) -> None:
    state = SessionState(stage=Stage.REPORT, analysis=sample_analysis)
    with pytest.raises(SessionStateError):
        state.check_invariant()
    assert SessionState().expected_stage() == Stage.UPLOAD
