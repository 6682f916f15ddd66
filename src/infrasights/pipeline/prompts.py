# -*- coding: utf-8 -*-
"""Prompt templates and response schemas for the Gemini calls."""

from __future__ import annotations

import json
from typing import Any

from infrasights.constants import NOT_SPECIFIED_ANSWER
from infrasights.models.analysis_result import AnalysisResult


SYSTEM_PROMPT = """
You are CloudCostGPT, a senior cloud architect.
Your Goal: Help users understand the true cost of their cloud architecture BEFORE they deploy.

Prerequisites:
- You have comprehensive knowledge of AWS, GCP, Azure pricing (2024).
- You are strictly JSON-first. You do not output conversational text unless requested inside a JSON field.
"""

ANALYSIS_PROMPT_SUFFIX = """
## Task: Analyze Architecture & Generate Clarifying Questions

1. Identify all cloud components in the image.
2. Determine the likely cloud provider and architecture pattern.
3. Generate 3-5 critical clarifying questions that are necessary to calculate costs (e.g. Instance sizes, Traffic volume, Storage class).

OUTPUT JSON ONLY. Structure:
{
  "components": [{"service": "...", "type": "Compute/Database/etc", "count_estimate": "...", "notes": "..."}],
  "architecture_pattern": "...",
  "cloud_provider": "...",
  "observations": ["..."],
  "questions": [
    {
      "id": "q1",
      "text": "...",
      "options": ["Option A", "Option B"],
      "context": "Why this matters..."
    }
  ]
}
"""

REPORT_PROMPT_SUFFIX = """
## Task: Generate Detailed Cost Report

Based on the architecture and the user's answers to your questions, generate a detailed cost estimate.

1. Calculate monthly costs for each component.
2. Include hidden costs (Data transfer, NAT, etc).
3. Provide optimization recommendations.

OUTPUT JSON ONLY. Structure:
{
  "items": [
    {"service": "...", "configuration": "...", "monthly_cost": 123.45, "calculation_note": "..."}
  ],
  "total_monthly_cost": 0.00,
  "total_yearly_cost": 0.00,
  "confidence_score": "High/Medium/Low",
  "ranges": { "optimistic": 0.00, "pessimistic": 0.00 },
  "executive_summary": "Markdown string...",
  "recommendations": [
    {"title": "...", "description": "Markdown string...", "impact": "High/Medium/Low", "estimated_savings": "$..."}
  ]
}
"""

_STRING = {"type": "STRING"}
_NUMBER = {"type": "NUMBER"}

ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "components": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "service": _STRING,
                    "type": _STRING,
                    "count_estimate": _STRING,
                    "notes": _STRING,
                },
                "required": ["service", "type"],
            },
        },
        "architecture_pattern": _STRING,
        "cloud_provider": _STRING,
        "observations": {"type": "ARRAY", "items": _STRING},
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _STRING,
                    "text": _STRING,
                    "options": {"type": "ARRAY", "items": _STRING},
                    "context": _STRING,
                },
                "required": ["id", "text"],
            },
        },
    },
    "required": ["components", "architecture_pattern", "cloud_provider", "questions"],
}

REPORT_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "items": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "service": _STRING,
                    "configuration": _STRING,
                    "monthly_cost": _NUMBER,
                    "calculation_note": _STRING,
                },
                "required": ["service", "monthly_cost"],
            },
        },
        "total_monthly_cost": _NUMBER,
        "total_yearly_cost": _NUMBER,
        "confidence_score": _STRING,
        "ranges": {
            "type": "OBJECT",
            "properties": {"optimistic": _NUMBER, "pessimistic": _NUMBER},
            "required": ["optimistic", "pessimistic"],
        },
        "executive_summary": _STRING,
        "recommendations": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": _STRING,
                    "description": _STRING,
                    "impact": {"type": "STRING", "enum": ["High", "Medium", "Low"]},
                    "estimated_savings": _STRING,
                },
                "required": ["title", "impact"],
            },
        },
    },
    "required": [
        "items",
        "total_monthly_cost",
        "total_yearly_cost",
        "confidence_score",
        "ranges",
        "recommendations",
    ],
}


def build_analysis_prompt(user_context: str) -> str:
    return f'User Context: "{user_context}"\n\n{ANALYSIS_PROMPT_SUFFIX}'


def format_answers(analysis: AnalysisResult, answers: dict[str, str]) -> str:
    """Render the Q/A transcript, marking blank answers as not specified."""
    blocks = []
    for question in analysis.questions:
        answer = answers.get(question.id, "").strip() or NOT_SPECIFIED_ANSWER
        blocks.append(f"Q: {question.text}\nA: {answer}")
    return "\n\n".join(blocks)


def build_estimate_prompt(analysis: AnalysisResult, answers: dict[str, str]) -> str:
    return (
        "Based on the previous analysis of the architecture and the user's answers below, "
        "generate the final cost report.\n\n"
        "PREVIOUS ANALYSIS:\n"
        f"{json.dumps(analysis.to_dict(), indent=2)}\n\n"
        "USER ANSWERS TO CLARIFYING QUESTIONS:\n"
        f"{format_answers(analysis, answers)}\n\n"
        f"{REPORT_PROMPT_SUFFIX}"
    )
