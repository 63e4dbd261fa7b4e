"""Global header and footer injection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from ..config import RenderConfig
from ..dom import (
    COMPONENT_ATTR,
    append_html,
    find_container,
    prepend_html,
    render_root,
    replace_with_html,
    set_inner_html,
)
from ..markup.menu import build_menu, normalize_path, parse_menu_data, render_menu, set_current_by_path
from ..utils import escape_html

logger = logging.getLogger("page_render.components")

HEADER_TYPES = {"header", "global-header"}
FOOTER_TYPES = {"footer", "global-footer"}
DEFAULT_VARIANT = "classic"
PROCESSED_ATTR = "data-menu-processed"


def _placeholder(soup: BeautifulSoup, kind: str) -> Optional[Tag]:
    return soup.find(attrs={COMPONENT_ATTR: kind})


def _menu_data(json_data: Mapping[str, Any]) -> Any:
    components = json_data.get("components")
    if isinstance(components, Mapping) and components.get("menuData"):
        return components["menuData"]
    return json_data.get("menuData")


def process_global_header(header: Tag, menu_data: Any, current_path: str = "") -> bool:
    """Render menu data into the header's ``.header-menu``. Returns True when the menu was replaced."""
    label = "GlobalHeader"
    if not menu_data:
        logger.warning("[%s] No menu data supplied", label)
        return False
    container = find_container(header, "header-menu", label)
    if container is None:
        return False

    data, error = parse_menu_data(menu_data)
    if error:
        logger.warning("[%s] Invalid menu data: %s", label, error)
        return False

    items = build_menu(data["items"])
    path = normalize_path(current_path)
    if path:
        set_current_by_path(items, path)
    html = render_menu(items)
    if not html:
        logger.warning("[%s] Menu rendered empty; keeping the authored placeholder", label)
        return False

    set_inner_html(container, html)
    header[PROCESSED_ATTR] = "true"
    return True


def _inject_header(
    soup: BeautifulSoup, json_data: Mapping[str, Any], current_path: str, config: RenderConfig
) -> Optional[str]:
    root = render_root(soup)
    placeholder = _placeholder(soup, "global-header")
    if placeholder is not None:
        replace_with_html(placeholder, json_data["html"])
        logger.debug("Replaced the global header placeholder")
    else:
        prepend_html(root, json_data["html"])
        logger.debug("Inserted the global header at the top of the page")

    menu_data = _menu_data(json_data)
    if menu_data:
        header = _placeholder(soup, "global-header")
        if header is not None:
            process_global_header(header, menu_data, current_path)
        else:
            logger.warning("Global header markup has no %s marker; menu left as authored", COMPONENT_ATTR)

    append_html(root, f'<script src="{escape_html(config.header_script_src)}" defer></script>')
    variant = json_data.get("variant") or DEFAULT_VARIANT
    stylesheet = config.header_stylesheet_pattern.format(variant=variant)
    prepend_html(root, f'<link rel="stylesheet" href="{escape_html(stylesheet)}"/>')
    return json_data.get("css") or None


def _inject_footer(soup: BeautifulSoup, json_data: Mapping[str, Any]) -> Optional[str]:
    placeholder = _placeholder(soup, "global-footer")
    if placeholder is not None:
        replace_with_html(placeholder, json_data["html"])
        logger.debug("Replaced the global footer placeholder")
    else:
        append_html(render_root(soup), json_data["html"])
        logger.debug("Appended the global footer to the page")
    return json_data.get("css") or None


@dataclass
class GlobalStyles:
    """CSS collected from global components, merged into the page CSS by the pipeline."""

    header: List[str] = field(default_factory=list)
    other: List[str] = field(default_factory=list)


def header_menu_data(records: Optional[Sequence[Mapping[str, Any]]]) -> Any:
    """Menu data of the first header record, if any."""
    for record in records or []:
        if not isinstance(record, Mapping) or record.get("type") not in HEADER_TYPES:
            continue
        json_data = record.get("json_data")
        if isinstance(json_data, Mapping):
            return _menu_data(json_data)
    return None


def inject_global_components(
    soup: BeautifulSoup,
    records: Optional[Sequence[Mapping[str, Any]]],
    current_path: str = "",
    config: Optional[RenderConfig] = None,
) -> GlobalStyles:
    """Place site-wide header and footer markup into the page.

    A record whose markup has a matching placeholder replaces the first one;
    otherwise the header is prepended and the footer appended to the page.
    """
    config = config or RenderConfig()
    styles = GlobalStyles()
    for record in records or []:
        if not isinstance(record, Mapping):
            continue
        kind = record.get("type")
        json_data = record.get("json_data")
        if not isinstance(json_data, Mapping) or not json_data.get("html"):
            continue
        try:
            if kind in HEADER_TYPES:
                css = _inject_header(soup, json_data, current_path, config)
                if css:
                    styles.header.append(css)
            elif kind in FOOTER_TYPES:
                css = _inject_footer(soup, json_data)
                if css:
                    styles.other.append(css)
            else:
                logger.debug("Ignoring global component of type %r", kind)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to inject global component %r", kind)
    return styles
