"""Utility helpers for escaping, dates and query strings."""

from __future__ import annotations

import datetime as dt
import html
from typing import Any, Mapping, Optional
from urllib.parse import urlencode


def escape_html(value: Any) -> str:
    """Escape a value for use in element text or a quoted attribute."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def format_short_date(value: Optional[str]) -> str:
    """Render an ISO timestamp as ``M/D, YYYY``; unparsable input is returned unchanged."""
    if not value:
        return ""
    try:
        parsed = dt.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return f"{parsed.month}/{parsed.day}, {parsed.year}"


def format_day_month(value: Optional[str]) -> str:
    """Render an ISO timestamp as ``2 MAR`` for related-post cards."""
    if not value:
        return ""
    try:
        parsed = dt.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return ""
    return f"{parsed.day} {parsed.strftime('%b').upper()}"


def build_page_url(params: Optional[Mapping[str, Any]], page: int) -> str:
    """Query string for ``page`` that keeps every other current parameter (e.g. ``sort``)."""
    query = {key: value for key, value in (params or {}).items() if value is not None}
    query["page"] = page
    encoded = urlencode(query, doseq=True)
    return f"?{encoded}" if encoded else ""
