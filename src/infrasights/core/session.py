# -*- coding: utf-8 -*-
"""Three-stage session workflow: Upload -> Clarification -> Report."""

from __future__ import annotations

import logging
from collections.abc import Callable

from infrasights.constants import (
    ANALYZE_ERROR_TEXT,
    ANALYZE_LOADING_TEXT,
    CANCELLED_TEXT,
    ESTIMATE_ERROR_TEXT,
    ESTIMATE_LOADING_TEXT,
)
from infrasights.core.cancellation import CancellationToken
from infrasights.core.state import SessionState, Stage
from infrasights.errors import ConfigurationError, SchemaViolation
from infrasights.models.analysis_result import AnalysisResult
from infrasights.models.cost_report import CostReport
from infrasights.models.uploaded_image import UploadedImage
from infrasights.pipeline.gateway import ModelGateway

logger = logging.getLogger(__name__)


StateListener = Callable[[SessionState], None]


class SessionController:
    """Own the session state and apply every transition to it.

    Model calls are split in two halves so the caller can run the slow part
    elsewhere: ``begin_*`` marks the session busy and hands out a
    ``CancellationToken``; ``complete_*`` / ``fail_*`` apply the outcome only
    while that token is still the live, active request. ``run_*`` chains both
    halves synchronously through the gateway.
    """

    def __init__(self, gateway: ModelGateway | None = None, listener: StateListener | None = None) -> None:
        self.gateway = gateway
        self.state = SessionState()
        self._listeners: list[StateListener] = [listener] if listener is not None else []
        self._active: CancellationToken | None = None

    # -- listeners -----------------------------------------------------

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        self.state.check_invariant()
        for listener in list(self._listeners):
            listener(self.state)

    # -- derived views -------------------------------------------------

    @property
    def stage(self) -> Stage:
        return self.state.stage

    @property
    def is_busy(self) -> bool:
        return self.state.busy

    @property
    def total_questions(self) -> int:
        return len(self.state.analysis.questions) if self.state.analysis else 0

    @property
    def answered_count(self) -> int:
        return sum(1 for value in self.state.answers.values() if value.strip())

    @property
    def progress_percent(self) -> int:
        """Share of answered questions, 0 when there are no questions."""
        total = self.total_questions
        if total == 0:
            return 0
        return round(100 * self.answered_count / total)

    def can_analyze(self) -> bool:
        return self.state.stage == Stage.UPLOAD and self.state.image is not None and not self.state.busy

    def can_estimate(self) -> bool:
        return self.state.stage == Stage.CLARIFICATION and self.state.analysis is not None and not self.state.busy

    # -- upload stage inputs ------------------------------------------

    def select_image(self, image: UploadedImage) -> bool:
        if self.state.stage != Stage.UPLOAD or self.state.busy:
            logger.debug("Ignoring image selection in stage %s (busy=%s)", self.state.stage.value, self.state.busy)
            return False
        self.state.image = image
        self.state.error_message = ""
        logger.info("Image selected: %s (%s)", image.source_name or "<unnamed>", image.mime_type)
        self._notify()
        return True

    def set_context(self, text: str) -> None:
        self.state.context = text
        self._notify()

    def add_context_tag(self, tag: str) -> str:
        current = self.state.context
        self.state.context = f"{current}, {tag}" if current else tag
        self._notify()
        return self.state.context

    # -- clarification stage inputs -----------------------------------

    def set_answer(self, question_id: str, value: str) -> None:
        if question_id not in self.state.answers:
            raise KeyError(f"Unknown question id: {question_id}")
        self.state.answers[question_id] = value
        self._notify()

    # -- request lifecycle ---------------------------------------------

    def _begin(self, label: str, loading_text: str) -> CancellationToken:
        token = CancellationToken(label)
        self._active = token
        self.state.busy = True
        self.state.status_message = loading_text
        self.state.error_message = ""
        logger.info("Request started: %r", token)
        self._notify()
        return token

    def _accepts(self, token: CancellationToken) -> bool:
        if token is not self._active or not token.is_live:
            logger.info("Discarding settled result of %r", token)
            return False
        return True

    def _finish(self) -> None:
        self._active = None
        self.state.busy = False

    def cancel(self) -> bool:
        """Drop the in-flight request's eventual result and hand control back."""
        if self._active is None:
            return False
        logger.info("Cancelling %r", self._active)
        self._active.cancel()
        self._finish()
        self.state.status_message = CANCELLED_TEXT
        self._notify()
        return True

    def _failure_message(self, exc: Exception, default: str) -> str:
        if isinstance(exc, ConfigurationError):
            return str(exc)
        if isinstance(exc, SchemaViolation):
            return f"{default} (unexpected response shape at {exc.path})"
        return default

    # -- analyze -------------------------------------------------------

    def begin_analysis(self) -> CancellationToken | None:
        if not self.can_analyze():
            logger.debug("Analyze ignored: stage=%s image=%s busy=%s",
                         self.state.stage.value, self.state.image is not None, self.state.busy)
            return None
        return self._begin("analyze", ANALYZE_LOADING_TEXT)

    def complete_analysis(self, token: CancellationToken, result: AnalysisResult) -> bool:
        if not self._accepts(token):
            return False
        self._finish()
        self.state.analysis = result
        self.state.answers = {question.id: "" for question in result.questions}
        self.state.report = None
        self.state.stage = Stage.CLARIFICATION
        self.state.status_message = ""
        self.state.scroll_resets += 1
        logger.info("Analysis applied: %d questions", len(result.questions))
        self._notify()
        return True

    def fail_analysis(self, token: CancellationToken, exc: Exception) -> bool:
        if not self._accepts(token):
            return False
        self._finish()
        logger.error("Analysis failed: %s", exc)
        self.state.error_message = self._failure_message(exc, ANALYZE_ERROR_TEXT)
        self.state.status_message = self.state.error_message
        self._notify()
        return True

    def run_analysis(self) -> bool:
        """Run the analyze transition synchronously. Returns True when it was applied."""
        token = self.begin_analysis()
        if token is None:
            return False
        image = self.state.image
        try:
            if self.gateway is None:
                raise ConfigurationError("No model gateway configured")
            result = self.gateway.analyze(image, self.state.context)
        except Exception as exc:
            self.fail_analysis(token, exc)
            return False
        return self.complete_analysis(token, result)

    # -- estimate ------------------------------------------------------

    def begin_estimation(self) -> CancellationToken | None:
        if not self.can_estimate():
            logger.debug("Estimate ignored: stage=%s busy=%s", self.state.stage.value, self.state.busy)
            return None
        return self._begin("estimate", ESTIMATE_LOADING_TEXT)

    def complete_estimation(self, token: CancellationToken, report: CostReport) -> bool:
        if not self._accepts(token):
            return False
        self._finish()
        self.state.report = report
        self.state.stage = Stage.REPORT
        self.state.status_message = ""
        self.state.scroll_resets += 1
        logger.info("Cost report applied: %d items", len(report.items))
        self._notify()
        return True

    def fail_estimation(self, token: CancellationToken, exc: Exception) -> bool:
        if not self._accepts(token):
            return False
        self._finish()
        logger.error("Estimation failed: %s", exc)
        self.state.error_message = self._failure_message(exc, ESTIMATE_ERROR_TEXT)
        self.state.status_message = self.state.error_message
        self._notify()
        return True

    def run_estimation(self) -> bool:
        token = self.begin_estimation()
        if token is None:
            return False
        analysis = self.state.analysis
        answers = dict(self.state.answers)
        try:
            if self.gateway is None:
                raise ConfigurationError("No model gateway configured")
            report = self.gateway.estimate(analysis, answers)
        except Exception as exc:
            self.fail_estimation(token, exc)
            return False
        return self.complete_estimation(token, report)

    # -- reset ---------------------------------------------------------

    def reset(self) -> None:
        """Clear the whole session and return to the upload stage."""
        if self._active is not None:
            self._active.cancel()
        self._active = None
        self.state = SessionState(scroll_resets=self.state.scroll_resets + 1)
        logger.info("Session reset")
        self._notify()
