# -*- coding: utf-8 -*-
"""Cost report data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Impact(str, Enum):
    """Closed set of impact and confidence levels."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, value: str) -> "Impact | None":
        """Match a level case-insensitively, returning None for anything else."""
        normalized = str(value).strip().lower()
        for level in cls:
            if level.value.lower() == normalized:
                return level
        return None


@dataclass(frozen=True)
class CostItem:
    """Monthly cost for one service."""

    service: str
    configuration: str
    monthly_cost: float
    calculation_note: str = ""


@dataclass(frozen=True)
class Recommendation:
    """Optimization recommendation with a markdown description."""

    title: str
    description: str
    impact: Impact
    estimated_savings: str = ""


@dataclass(frozen=True)
class CostRanges:
    optimistic: float
    pessimistic: float


@dataclass(frozen=True)
class CostReport:
    """Structured cost estimate returned by the estimate call."""

    items: list[CostItem]
    total_monthly_cost: float
    total_yearly_cost: float
    confidence_score: str
    ranges: CostRanges
    executive_summary: str = ""
    recommendations: list[Recommendation] = field(default_factory=list)

    @property
    def confidence_level(self) -> Impact | None:
        """Confidence as a known level, or None when the model used free text."""
        return Impact.parse(self.confidence_score)
