# -*- coding: utf-8 -*-
"""Session state container for the three-stage workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from infrasights.errors import SessionStateError
from infrasights.models.analysis_result import AnalysisResult
from infrasights.models.cost_report import CostReport
from infrasights.models.uploaded_image import UploadedImage


class Stage(str, Enum):
    UPLOAD = "UPLOAD"
    CLARIFICATION = "CLARIFICATION"
    REPORT = "REPORT"


@dataclass
class SessionState:
    """Mutable session data owned by ``SessionController``.

    ``stage`` is tracked explicitly and must always agree with which results
    are present; ``check_invariant`` enforces that.
    """

    stage: Stage = Stage.UPLOAD
    image: UploadedImage | None = None
    context: str = ""
    analysis: AnalysisResult | None = None
    answers: dict[str, str] = field(default_factory=dict)
    report: CostReport | None = None
    busy: bool = False
    status_message: str = ""
    error_message: str = ""
    scroll_resets: int = 0

    def expected_stage(self) -> Stage:
        if self.analysis is None:
            return Stage.UPLOAD
        if self.report is None:
            return Stage.CLARIFICATION
        return Stage.REPORT

    def check_invariant(self) -> None:
        expected = self.expected_stage()
        if self.stage != expected:
            raise SessionStateError(f"Stage {self.stage.value} disagrees with session data ({expected.value})")
        if self.report is not None and self.analysis is None:
            raise SessionStateError("Cost report present without an analysis")
        if self.stage != Stage.UPLOAD and self.image is None:
            raise SessionStateError(f"Stage {self.stage.value} requires a selected image")
        if self.analysis is not None and set(self.answers) != set(self.analysis.question_ids()):
            raise SessionStateError("Answer keys do not match the analysis questions")
