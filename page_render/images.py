"""Image loading hints: priority, lazy loading and responsive sources."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from .dom import class_list
from .models import AssetMeta

logger = logging.getLogger("page_render")

HERO_CLASSES = {"hero", "banner", "cover", "main-image"}
IMAGE_MIME_TYPES = {
    "avif": "image/avif",
    "webp": "image/webp",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
}

AssetMap = Dict[str, AssetMeta]


def build_asset_map(assets: Optional[Iterable[Mapping[str, Any]]]) -> AssetMap:
    """Index builder assets by their URL; entries without any URL are dropped."""
    asset_map: AssetMap = {}
    for asset in assets or []:
        if not asset:
            continue
        meta = AssetMeta.from_dict(asset)
        if meta is not None:
            asset_map[meta.key] = meta
    return asset_map


def is_hero_candidate(img: Tag) -> bool:
    return any(name in HERO_CLASSES for name in class_list(img))


def get_image_type(src: Optional[str]) -> str:
    if not src:
        return "image/jpeg"
    path = urlparse(src).path or src
    extension = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return IMAGE_MIME_TYPES.get(extension, "image/jpeg")


def enhance_image(img: Tag, asset_map: AssetMap, lcp_assigned: bool) -> bool:
    """Annotate one ``<img>`` with loading hints. Returns True if it was made the priority image."""
    src = img.get("src")
    if not src:
        return False

    meta = asset_map.get(src)
    is_priority = False

    if not img.get("loading"):
        if (meta is not None and meta.priority) or (not lcp_assigned and is_hero_candidate(img)):
            img["loading"] = "eager"
            img["fetchpriority"] = "high"
            is_priority = True
        else:
            img["loading"] = "lazy"

    if not img.get("decoding"):
        img["decoding"] = "async"

    if not img.get("alt"):
        img["alt"] = (meta.alt if meta is not None else None) or ""

    if meta is None:
        return is_priority

    if meta.width and not img.get("width"):
        img["width"] = str(meta.width)
    if meta.height and not img.get("height"):
        img["height"] = str(meta.height)
    if meta.placeholder and not img.get("data-placeholder"):
        img["data-placeholder"] = meta.placeholder

    if meta.sources:
        apply_picture_sources(img, meta.sources)
    elif meta.src_set and not img.get("srcset"):
        img["srcset"] = meta.src_set

    if meta.sizes and not img.get("sizes"):
        img["sizes"] = meta.sizes

    return is_priority


def _owner_soup(tag: Tag) -> Optional[BeautifulSoup]:
    node = tag
    while node.parent is not None:
        node = node.parent
    return node if isinstance(node, BeautifulSoup) else None


def apply_picture_sources(img: Tag, sources: Iterable[Mapping[str, Any]]) -> None:
    """Wrap ``img`` in a ``<picture>`` and emit one ``<source>`` per responsive entry."""
    soup = _owner_soup(img)
    if soup is None:
        logger.warning("Cannot wrap detached image %s in <picture>", img.get("src"))
        return

    parent = img.parent
    if isinstance(parent, Tag) and parent.name == "picture":
        picture = parent
        for existing in picture.find_all("source", recursive=False):
            existing.decompose()
    else:
        picture = img.wrap(soup.new_tag("picture"))

    position = 0
    for source in sources:
        if not source:
            continue
        srcset = source.get("srcset") or source.get("srcSet")
        if not srcset:
            continue
        created = soup.new_tag("source", attrs={"srcset": srcset})
        if source.get("type"):
            created["type"] = source["type"]
        if source.get("media"):
            created["media"] = source["media"]
        # Sources precede the <img> in supplied order, most preferred first; the
        # browser uses the first matching one.
        picture.insert(position, created)
        position += 1
