# -*- coding: utf-8 -*-
"""Error taxonomy shared by the gateway, normalizer and session."""

from __future__ import annotations


class InfraSightsError(Exception):
    """Base class for all application errors."""


class ConfigurationError(InfraSightsError, ValueError):
    """Raised when settings are invalid or the model credential is missing."""


class DecodeError(InfraSightsError):
    """Raised when an uploaded image cannot be read or normalized."""


class GatewayError(InfraSightsError):
    """Raised when a model call fails or returns an unusable payload."""


class AnalysisFailure(GatewayError):
    """The analyze call failed (transport, auth, quota, empty or non-JSON output)."""


class EstimationFailure(GatewayError):
    """The estimate call failed (transport, auth, quota, empty or non-JSON output)."""


class SchemaViolation(GatewayError):
    """A JSON payload parsed but does not match the declared response schema."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class SessionStateError(InfraSightsError, RuntimeError):
    """Raised when the session stage disagrees with the data it holds."""
