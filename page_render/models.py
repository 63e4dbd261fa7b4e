"""Data models used throughout the render pipeline."""

from __future__ import annotations

import math
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import RenderConfig

PageEntry = Union[int, str]
ELLIPSIS = "..."


def to_int(value: Any, default: int = 0) -> int:
    """Coerce API numbers (which may arrive as strings) to int."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class AssetMeta:
    """Metadata for an image asset exported by the page builder."""

    key: str
    alt: Optional[str] = None
    width: Optional[Union[int, str]] = None
    height: Optional[Union[int, str]] = None
    priority: bool = False
    placeholder: Optional[str] = None
    sources: List[Dict[str, Any]] = field(default_factory=list)
    src_set: Optional[str] = None
    sizes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["AssetMeta"]:
        key = data.get("src") or data.get("url") or data.get("path") or ""
        if not key:
            return None
        return cls(
            key=key,
            alt=data.get("alt"),
            width=data.get("width"),
            height=data.get("height"),
            priority=bool(data.get("priority")),
            placeholder=data.get("placeholder"),
            sources=list(data.get("sources") or []),
            src_set=data.get("srcSet") or data.get("srcset"),
            sizes=data.get("sizes"),
        )


@dataclass
class CategoryNode:
    """A node of the category tree shown in list-page sidebars."""

    id: str
    name: str
    path: Optional[str] = None
    parent_id: Optional[str] = None
    children: List["CategoryNode"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CategoryNode":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            path=data.get("path"),
            parent_id=data.get("parent_id"),
            children=[cls.from_dict(child) for child in data.get("children") or [] if isinstance(child, Mapping)],
        )


@dataclass
class Pagination:
    """Paging state for a listing.

    Accepts both the ``{page, size, total}`` shape and the older
    ``{current_page, total_pages, total_items}`` shape.
    """

    page: int = 1
    size: int = 0
    total: int = 0
    declared_pages: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Pagination":
        if not data:
            return cls()
        if "current_page" in data or "total_items" in data:
            return cls(
                page=to_int(data.get("current_page"), 1),
                size=to_int(data.get("per_page") or data.get("size")),
                total=to_int(data.get("total_items")),
                declared_pages=to_int(data.get("total_pages")),
            )
        return cls(
            page=to_int(data.get("page"), 1),
            size=to_int(data.get("size")),
            total=to_int(data.get("total")),
        )

    @property
    def total_pages(self) -> int:
        if self.declared_pages is not None:
            return max(self.declared_pages, 0)
        if self.total <= 0:
            return 0
        if self.size <= 0:
            return 1
        return math.ceil(self.total / self.size)

    @property
    def current(self) -> int:
        return min(max(self.page, 1), max(self.total_pages, 1))


@dataclass
class MenuItem:
    """Navigation entry rendered into the global header."""

    id: str
    label: str
    url: str = "#"
    link_type: Optional[str] = None
    target: str = "_self"
    is_current_page: bool = False
    children: List["MenuItem"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MenuItem":
        return cls(
            id=str(data.get("id", "")),
            label=str(data.get("label") or ""),
            url=data.get("url") or "#",
            link_type=data.get("linkType"),
            target=data.get("target") or "_self",
            is_current_page=bool(data.get("isCurrentPage")),
            children=[cls.from_dict(child) for child in data.get("children") or [] if isinstance(child, Mapping)],
        )


@dataclass
class CarouselConfig:
    """Options read from the data attributes of a carousel root."""

    loop: bool = True
    autoplay: bool = True
    delay: int = 2500
    effect: str = "slide"
    speed: int = 300
    slides_per_view: float = 1
    space_between: int = 0
    centered_slides: bool = False
    priority: str = "normal"


@dataclass
class PreloadResource:
    """A resource hint the response layer renders as ``<link rel="preload">``."""

    href: str
    as_: str = "image"
    type: str = "image/jpeg"
    fetch_priority: str = "high"

    def to_dict(self) -> Dict[str, str]:
        return {
            "href": self.href,
            "as": self.as_,
            "type": self.type,
            "fetchPriority": self.fetch_priority,
        }


@dataclass
class CarouselScript:
    """Client-side initialisation program for one carousel."""

    index: int
    content: str
    is_above_fold: bool
    type: str = "standard"

    @property
    def priority(self) -> str:
        return "high" if self.is_above_fold else "low"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "content": self.content,
            "isAboveFold": self.is_above_fold,
            "priority": self.priority,
            "type": self.type,
        }


@dataclass
class RenderResult:
    """Everything the route layer needs to emit the page."""

    html: str
    critical_css: str
    deferred_css: str
    preload_resources: List[PreloadResource] = field(default_factory=list)
    carousel_scripts: List[CarouselScript] = field(default_factory=list)
    has_carousels: bool = False
    carousel_count: int = 0
    has_above_fold_carousel: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "html": self.html,
            "criticalCss": self.critical_css,
            "deferredCss": self.deferred_css,
            "preloadResources": [resource.to_dict() for resource in self.preload_resources],
            "swiperScripts": [script.to_dict() for script in self.carousel_scripts],
            "hasSwipers": self.has_carousels,
            "swiperCount": self.carousel_count,
            "hasAboveFoldSwiper": self.has_above_fold_carousel,
        }


@dataclass
class RenderContext:
    """Request-scoped inputs shared by every injector during one render."""

    config: RenderConfig = field(default_factory=RenderConfig)
    current_path: str = ""
    current_params: Dict[str, Any] = field(default_factory=dict)
    current_category_id: Optional[Union[int, str]] = None
    related_client: Optional[Any] = None
    executor: Optional[Executor] = None
