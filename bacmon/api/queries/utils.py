"""
Query utility functions.

Instant parsing/rendering and size formatting shared across query modules.
"""

from datetime import datetime, timezone
from typing import Optional

from ...core.errors import ValidationError


def format_instant(timestamp: float) -> str:
    """
    Render epoch seconds as an ISO-8601 UTC instant, e.g. 2026-10-19T12:00:00Z.

    Resolution is one microsecond; closer timestamps render identically.
    """
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


def parse_instant(value: Optional[str], field: str) -> float:
    """
    Parse a required ISO-8601 request parameter into epoch seconds.

    Naive values are taken as UTC. Missing, blank or unparsable values raise
    ValidationError naming the field.
    """
    if value is None or not value.strip():
        raise ValidationError(field, f"{field} parameter is required")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(field, f"{field} is not a valid ISO-8601 instant: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def format_bytes(bytes_value) -> str:
    """Format bytes value with appropriate unit."""
    if bytes_value is None:
        return "Unknown"
    bytes_val = float(bytes_value)
    if bytes_val < 1024:
        return f"{bytes_val:.0f}B"
    elif bytes_val < 1024**2:
        return f"{bytes_val/1024:.1f}KB"
    elif bytes_val < 1024**3:
        return f"{bytes_val/(1024**2):.1f}MB"
    else:
        return f"{bytes_val/(1024**3):.1f}GB"
