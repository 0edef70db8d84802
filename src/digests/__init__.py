"""Forecast digest formatting."""

from src.digests.formatter import (
    DigestFormatter,
    format_current_lines,
    format_sms,
    format_text,
)

__all__ = [
    "DigestFormatter",
    "format_current_lines",
    "format_sms",
    "format_text",
]
