# -*- coding: utf-8 -*-
"""Application constants."""

APP_NAME = "InfraSights"
APP_SLUG = "infrasights"
APP_VERSION = "0.1.0"

DEFAULT_SETTINGS_FILE = "settings.json"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Canvas used when an SVG carries no intrinsic size.
DEFAULT_SVG_WIDTH = 1200
DEFAULT_SVG_HEIGHT = 900

CONTEXT_TAGS = (
    "B2B SaaS",
    "High Traffic",
    "Compliance/Medical",
    "MVP / Startup",
    "Internal Tool",
    "Data Processing",
    "E-commerce",
)

NOT_SPECIFIED_ANSWER = "Not specified"
NOT_ANSWERED_ANSWER = "Not answered"

ANALYZE_LOADING_TEXT = "Analyzing architecture patterns & identifying services..."
ESTIMATE_LOADING_TEXT = "Running cost models & simulating billing scenarios..."
ANALYZE_ERROR_TEXT = "Error analyzing diagram. Please try again."
ESTIMATE_ERROR_TEXT = "Error generating report. Please try again."
CANCELLED_TEXT = "Processing stopped by user."

EXPORT_FILENAME_PREFIX = "infrasights-report"
MARKDOWN_MIME_TYPE = "text/markdown"

# Donut chart palette: violet, emerald, fuchsia, sky, amber, rose, indigo.
CHART_COLORS = (
    "#8b5cf6",
    "#10b981",
    "#d946ef",
    "#0ea5e9",
    "#f59e0b",
    "#f43f5e",
    "#6366f1",
)
