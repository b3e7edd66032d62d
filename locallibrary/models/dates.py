"""Date display helpers shared by the models."""

from datetime import date


def format_medium(value: date | None) -> str:
    """Format a date like ``Oct 19, 2026``; empty string for no date."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"
