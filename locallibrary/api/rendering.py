"""Shared Jinja2 template environment."""

from pathlib import Path

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def stored_text(value: object) -> Markup:
    """Mark a stored text field as safe.

    Catalog text fields are HTML-escaped by the form rules before they are
    saved, so escaping them again on output would show entities to readers.
    """
    return Markup("" if value is None else str(value))


def form_text(value: object) -> str:
    """Turn a stored, escaped value back into what the user typed."""
    return Markup("" if value is None else str(value)).unescape()


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["stored"] = stored_text
