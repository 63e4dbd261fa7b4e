"""Navigation menu markup for the global header."""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence, Tuple

from ..models import MenuItem
from ..utils import escape_html

_ARROW_SVG = (
    '<svg class="header-arrow" fill="none" stroke="currentColor" viewBox="0 0 24 24">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M19 9l-7 7-7-7"/></svg>'
)


def normalize_path(path: Optional[str]) -> str:
    if not path:
        return ""
    return path if path.startswith("/") else "/" + path


def parse_menu_data(raw: Any) -> Tuple[Optional[dict], Optional[str]]:
    """Decode menu data that may arrive as a JSON string. Returns ``(data, error)``."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            return None, f"menu data is not valid JSON: {exc}"
    error = validate_menu_data(raw)
    if error:
        return None, error
    return raw, None


def validate_menu_data(menu_data: Any) -> Optional[str]:
    """Return a description of what is wrong with ``menu_data``, or None if it is usable."""
    if not isinstance(menu_data, dict):
        return "menu data must be an object"
    if not isinstance(menu_data.get("items"), list):
        return "menu data is missing its items array"
    return None


def build_menu(items: Sequence[Any]) -> List[MenuItem]:
    return [MenuItem.from_dict(item) for item in items if isinstance(item, dict)]


def set_current_by_path(items: Sequence[MenuItem], current_path: str) -> None:
    """Recompute the current-page flag of every item from an exact URL match."""
    for item in items:
        item.is_current_page = item.url == current_path
        set_current_by_path(item.children, current_path)


def render_menu(items: Sequence[MenuItem], level: int = 0) -> str:
    if not items:
        return ""

    list_class = "header-menu-list" if level == 0 else "header-submenu"
    hidden = " data-header-sub hidden" if level > 0 else ""
    entries = []
    for item in items:
        item_class = "header-menu-item" + (" active" if item.is_current_page else "")
        label = escape_html(item.label)
        if item.children:
            body = (
                '<button class="header-menu-trigger" data-header-trigger aria-expanded="false" '
                f'aria-haspopup="true">{label}{_ARROW_SVG}</button>'
                f"{render_menu(item.children, level + 1)}"
            )
        else:
            target = ' target="_blank" rel="noopener noreferrer"' if item.target == "_blank" else ""
            current = ' aria-current="page"' if item.is_current_page else ""
            body = f'<a href="{escape_html(item.url or "#")}" class="header-menu-link"{target}{current}>{label}</a>'
        entries.append(f'<li class="{item_class}" data-header-item>{body}</li>')

    return f'<ul class="{list_class}"{hidden}>{"".join(entries)}</ul>'
