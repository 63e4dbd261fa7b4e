"""Paginator markup shared by every listing component."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..models import ELLIPSIS, PageEntry, Pagination
from ..utils import build_page_url, escape_html

FULL_LIST_PAGES = 5

_PREV_SVG = (
    '<svg width="20" height="20" viewBox="0 0 24 24" fill="none" stroke="currentColor">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M15 19l-7-7 7-7"/></svg>'
)
_NEXT_SVG = (
    '<svg width="20" height="20" viewBox="0 0 24 24" fill="none" stroke="currentColor">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M9 5l7 7-7 7"/></svg>'
)


def calculate_pages(current_page: int, total_pages: int) -> List[PageEntry]:
    """Page numbers to show: first, last and current +/- 1, gaps collapsed to ``"..."``.

    Five pages or fewer are always listed in full.
    """
    if total_pages <= FULL_LIST_PAGES:
        return list(range(1, max(total_pages, 1) + 1))
    pages: List[PageEntry] = [1]
    range_start = max(2, current_page - 1)
    range_end = min(total_pages - 1, current_page + 1)

    if range_start > 2:
        pages.append(ELLIPSIS)
    pages.extend(range(range_start, range_end + 1))
    if range_end < total_pages - 1:
        pages.append(ELLIPSIS)
    if total_pages > 1:
        pages.append(total_pages)
    return pages


def _edge_button(prefix: str, direction: str, label: str, svg: str, href: Optional[str]) -> str:
    classes = f"{prefix}-pagination-button {prefix}-pagination-{direction}"
    if href is None:
        return f'<span class="{classes}" aria-disabled="true" aria-label="{label}">{svg}</span>'
    return f'<a href="{href}" class="{classes}" aria-label="{label}">{svg}</a>'


def render_pagination(
    pagination: Pagination,
    params: Optional[Mapping[str, Any]] = None,
    prefix: str = "plp",
    label: str = "Pagination",
) -> str:
    """Paginator links; empty when everything fits on one page."""
    total_pages = pagination.total_pages
    if pagination.total <= 0 and pagination.declared_pages is None:
        return ""
    if total_pages <= 1:
        return ""

    page = pagination.current
    numbers: List[str] = []
    for entry in calculate_pages(page, total_pages):
        if entry == ELLIPSIS:
            numbers.append(f'<span class="{prefix}-pagination-ellipsis">...</span>')
        elif entry == page:
            numbers.append(
                f'<span class="{prefix}-pagination-button {prefix}-pagination-number active" '
                f'aria-current="page">{entry}</span>'
            )
        else:
            numbers.append(
                f'<a href="{escape_html(build_page_url(params, entry))}" '
                f'class="{prefix}-pagination-button {prefix}-pagination-number">{entry}</a>'
            )

    prev_href = escape_html(build_page_url(params, page - 1)) if page > 1 else None
    next_href = escape_html(build_page_url(params, page + 1)) if page < total_pages else None
    return (
        f'<nav class="{prefix}-pagination" aria-label="{label}">'
        f"{_edge_button(prefix, 'prev', 'Previous page', _PREV_SVG, prev_href)}"
        f'<div class="{prefix}-pagination-pages">{"".join(numbers)}</div>'
        f"{_edge_button(prefix, 'next', 'Next page', _NEXT_SVG, next_href)}"
        "</nav>"
    )
