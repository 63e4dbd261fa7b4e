"""Small BeautifulSoup helpers shared by the injectors."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger("page_render")

COMPONENT_ATTR = "data-component-type"
PARSER = "html.parser"


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", PARSER)


def fragment_nodes(html: str) -> List[Union[Tag, NavigableString]]:
    """Parse an HTML snippet and detach its top-level nodes."""
    fragment = parse_html(html)
    return [node.extract() for node in list(fragment.contents)]


def set_inner_html(tag: Tag, html: str) -> None:
    tag.clear()
    for node in fragment_nodes(html):
        tag.append(node)


def replace_with_html(tag: Tag, html: str) -> None:
    nodes = fragment_nodes(html)
    if nodes:
        tag.replace_with(*nodes)
    else:
        tag.decompose()


def prepend_html(tag: Union[Tag, BeautifulSoup], html: str) -> None:
    for node in reversed(fragment_nodes(html)):
        tag.insert(0, node)


def append_html(tag: Union[Tag, BeautifulSoup], html: str) -> None:
    for node in fragment_nodes(html):
        tag.append(node)


def insert_after_html(tag: Tag, html: str) -> None:
    nodes = fragment_nodes(html)
    if nodes:
        tag.insert_after(*nodes)


def render_root(soup: BeautifulSoup) -> Union[Tag, BeautifulSoup]:
    """The element new global markup is attached to: ``<body>`` or the fragment root."""
    return soup.body if soup.body is not None else soup


def serialize(soup: BeautifulSoup) -> str:
    if soup.body is not None:
        return soup.body.decode_contents()
    return soup.decode()


def class_list(tag: Tag) -> List[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def has_class(tag: Tag, name: str) -> bool:
    return name in class_list(tag)


def remove_class(tag: Tag, name: str) -> None:
    classes = [cls for cls in class_list(tag) if cls != name]
    if classes:
        tag["class"] = classes
    elif tag.has_attr("class"):
        del tag["class"]


def is_attached(tag: Tag, root: BeautifulSoup) -> bool:
    """True if ``tag`` is still reachable from ``root`` (not spliced out)."""
    parent = tag.parent
    while parent is not None:
        if parent is root:
            return True
        parent = parent.parent
    return False


def read_config(tag: Tag, label: str) -> Dict[str, Any]:
    """Decode the ``data-config`` JSON blob of a component, tolerating bad input."""
    raw = tag.get("data-config")
    if not raw:
        return {}
    try:
        config = json.loads(raw)
    except ValueError as exc:
        logger.warning("[%s] Failed to parse data-config: %s", label, exc)
        return {}
    if not isinstance(config, dict):
        logger.warning("[%s] data-config is not an object; ignoring it", label)
        return {}
    return config


def closest(tag: Tag, predicate) -> Optional[Tag]:
    node = tag.parent
    while node is not None and isinstance(node, Tag):
        if predicate(node):
            return node
        node = node.parent
    return None


def find_container(tag: Tag, class_name: str, label: str) -> Optional[Tag]:
    """First descendant with ``class_name``; logs when the authored markup lacks it."""
    container = tag.find(class_=class_name)
    if container is None:
        logger.warning("[%s] Missing .%s container; skipping it", label, class_name)
    return container
