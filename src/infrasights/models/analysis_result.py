# -*- coding: utf-8 -*-
"""Architecture analysis data model."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class CloudComponent:
    """Single cloud service detected in the diagram."""

    service: str
    type: str
    count_estimate: str = ""
    notes: str = ""


@dataclass(frozen=True)
class Question:
    """Clarifying question asked before costs can be estimated."""

    id: str
    text: str
    options: list[str] = field(default_factory=list)
    context: str = ""


@dataclass(frozen=True)
class AnalysisResult:
    """Structured inventory returned by the analyze call."""

    components: list[CloudComponent] = field(default_factory=list)
    architecture_pattern: str = ""
    cloud_provider: str = ""
    observations: list[str] = field(default_factory=list)
    questions: list[Question] = field(default_factory=list)

    def question_ids(self) -> list[str]:
        return [question.id for question in self.questions]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
