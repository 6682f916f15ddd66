# -*- coding: utf-8 -*-
"""Number formatting shared by the report view and the exporter."""

from __future__ import annotations

CURRENCY_PREFIX = "$"


def format_currency(value: float) -> str:
    """Format ``1234.5`` as ``$1,234.50``."""
    amount = float(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_PREFIX}{abs(amount):,.2f}"


def format_percent(value: int) -> str:
    return f"{int(value)}%"
