"""Category sidebar markup for list pages."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..models import CategoryNode
from ..utils import escape_html

ALL_CATEGORY_ID = "__all__"
ALL_CATEGORY_LABEL = "All"

_ARROW_SVG = (
    '<svg class="{prefix}-category-arrow" width="12" height="12" viewBox="0 0 24 24" '
    'fill="none" stroke="currentColor"><path stroke-linecap="round" stroke-linejoin="round" '
    'stroke-width="2" d="M9 5l7 7-7 7"/></svg>'
)


def all_category(categories: Sequence[CategoryNode], root_path: Optional[str] = None) -> CategoryNode:
    """Synthesise the leading "All" entry.

    Its link is the first path segment of the first real category
    (``/shop/electronics`` -> ``/shop``), falling back to ``root_path``.
    """
    path = root_path or "#"
    if categories and categories[0].path:
        segments = [segment for segment in categories[0].path.split("/") if segment]
        if segments:
            path = "/" + segments[0]
    return CategoryNode(id=ALL_CATEGORY_ID, name=ALL_CATEGORY_LABEL, path=path, parent_id=None, children=[])


def _absolute(path: Optional[str]) -> str:
    if not path or path == "#":
        return "#"
    return path if path.startswith("/") else "/" + path


def _is_active(category: CategoryNode, current_category_id) -> bool:
    if current_category_id in (None, ""):
        return False
    return category.id == str(current_category_id)


def render_category_tree(
    categories: Sequence[CategoryNode],
    prefix: str = "plp",
    current_category_id=None,
    root_path: Optional[str] = None,
    expanded: bool = True,
    level: int = 0,
) -> str:
    if not categories:
        return f'<p class="{prefix}-categories-empty">No categories</p>'

    nodes: List[CategoryNode] = list(categories)
    if level == 0:
        nodes.insert(0, all_category(categories, root_path))

    list_class = f"{prefix}-category-list" if level == 0 else f"{prefix}-category-sublist"
    level_attr = f' data-level="{level}"' if level > 0 else ""
    items: List[str] = []
    for category in nodes:
        active = _is_active(category, current_category_id)
        has_children = bool(category.children)
        item_class = f"{prefix}-category-item"
        if has_children and expanded:
            item_class += " expanded"
        link_class = f"{prefix}-category-link" + (" active" if active else "")
        category_id = escape_html(category.id)
        current_attr = ' aria-current="page"' if active else ""
        link = (
            f'<a href="{escape_html(_absolute(category.path))}" class="{link_class}" '
            f'data-category-id="{category_id}"{current_attr}>'
            f"{escape_html(category.name)}</a>"
        )
        if has_children:
            toggle = (
                f'<button class="{prefix}-category-toggle" aria-label="Toggle subcategories" '
                f'aria-expanded="{"true" if expanded else "false"}">{_ARROW_SVG.format(prefix=prefix)}</button>'
            )
            body = f'<div class="{prefix}-category-header">{toggle}{link}</div>'
            body += render_category_tree(
                category.children, prefix, current_category_id, root_path, expanded, level + 1
            )
        else:
            body = link
        items.append(f'<li class="{item_class}" data-category-id="{category_id}">{body}</li>')

    return f'<ul class="{list_class}"{level_attr}>{"".join(items)}</ul>'
