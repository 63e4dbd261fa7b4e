"""Render pipeline: one parse, one tree walk, one serialisation per page."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from .carousel import process_carousels
from .components.detail import inject_blog_detail, inject_product_detail
from .components.header import PROCESSED_ATTR, header_menu_data, inject_global_components, process_global_header
from .components.listing import inject_blog_list_page, inject_product_list_detail, inject_product_list_page
from .config import RenderConfig
from .css import carousel_critical_css, partition_css
from .dom import COMPONENT_ATTR, is_attached, parse_html, serialize
from .images import AssetMap, build_asset_map, enhance_image, get_image_type
from .models import PreloadResource, RenderContext, RenderResult

logger = logging.getLogger("page_render")

RELATED_WORKERS = 4


class ComponentKind(str, Enum):
    PRODUCT_LIST_PAGE = "product-list-page"
    PRODUCT_LIST_DETAIL = "product-list-detail"
    PRODUCT_DETAIL = "product-detail"
    BLOG_LIST_PAGE = "blog-list-page"
    BLOG_DETAIL = "blog-detail"
    GLOBAL_HEADER = "global-header"
    GLOBAL_FOOTER = "global-footer"

    @classmethod
    def of(cls, tag: Tag) -> Optional["ComponentKind"]:
        value = tag.get(COMPONENT_ATTR)
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unknown component type %r", value)
            return None


@dataclass
class TraversalState:
    """Mutable state carried through a single tree walk."""

    asset_map: AssetMap
    lcp_assigned: bool = False
    preload_resources: List[PreloadResource] = field(default_factory=list)
    pending: List[Awaitable[None]] = field(default_factory=list)


@dataclass
class PageData:
    """Optional datasets supplied by the route layer."""

    product_list: Optional[Mapping[str, Any]] = None
    blog_list: Optional[Mapping[str, Any]] = None
    product_detail: Optional[Mapping[str, Any]] = None
    blog_detail: Optional[Mapping[str, Any]] = None
    menu_data: Any = None


_INJECTORS: Dict[ComponentKind, Tuple[Any, str]] = {
    ComponentKind.PRODUCT_LIST_PAGE: (inject_product_list_page, "product_list"),
    ComponentKind.PRODUCT_LIST_DETAIL: (inject_product_list_detail, "product_list"),
    ComponentKind.BLOG_LIST_PAGE: (inject_blog_list_page, "blog_list"),
    ComponentKind.PRODUCT_DETAIL: (inject_product_detail, "product_detail"),
    ComponentKind.BLOG_DETAIL: (inject_blog_detail, "blog_detail"),
}


def _dispatch_component(
    kind: ComponentKind, element: Tag, data: PageData, context: RenderContext, state: TraversalState
) -> None:
    if kind is ComponentKind.GLOBAL_HEADER:
        if data.menu_data and element.get(PROCESSED_ATTR) != "true":
            try:
                process_global_header(element, data.menu_data, context.current_path)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Failed to inject %s component", kind.value)
        return
    if kind is ComponentKind.GLOBAL_FOOTER:
        return

    injector, dataset = _INJECTORS[kind]
    payload = getattr(data, dataset)
    if not payload:
        return
    try:
        pending = injector(element, payload, context)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Failed to inject %s component", kind.value)
        return
    if pending is not None:
        state.pending.append(pending)


def _handle_image(img: Tag, state: TraversalState) -> None:
    src = img.get("src")
    prioritized = enhance_image(img, state.asset_map, state.lcp_assigned)
    if prioritized and src:
        state.preload_resources.append(PreloadResource(href=src, as_="image", type=get_image_type(src)))
        state.lcp_assigned = True


def walk(soup: BeautifulSoup, data: PageData, context: RenderContext, state: TraversalState) -> None:
    """Visit every element once in document order, dispatching components and images.

    Elements are snapshotted before the walk; anything an injector detaches
    is skipped and anything it inserts is not revisited.
    """
    for element in list(soup.find_all(True)):
        if not is_attached(element, soup):
            continue
        kind = ComponentKind.of(element)
        if kind is not None:
            _dispatch_component(kind, element, data, context, state)
        elif element.name == "img":
            _handle_image(element, state)


async def _await_pending(pending: Sequence[Awaitable[None]]) -> None:
    if not pending:
        return
    results = await asyncio.gather(*pending, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            logger.error("Detail component task failed: %s", result, exc_info=result)


async def prepare_page(
    html: str,
    css: str = "",
    assets: Optional[Sequence[Mapping[str, Any]]] = None,
    *,
    global_components: Optional[Sequence[Mapping[str, Any]]] = None,
    product_list: Optional[Mapping[str, Any]] = None,
    blog_list: Optional[Mapping[str, Any]] = None,
    product_detail: Optional[Mapping[str, Any]] = None,
    blog_detail: Optional[Mapping[str, Any]] = None,
    current_path: str = "",
    current_params: Optional[Mapping[str, Any]] = None,
    current_category_id: Any = None,
    config: Optional[RenderConfig] = None,
    related_client: Any = None,
) -> RenderResult:
    """Transform an authored page fragment into the markup and assets sent to the browser."""
    config = config or RenderConfig()
    context = RenderContext(
        config=config,
        current_path=current_path or "",
        current_params=dict(current_params or {}),
        current_category_id=current_category_id,
        related_client=related_client,
    )
    soup = parse_html(html)
    state = TraversalState(asset_map=build_asset_map(assets))

    styles = inject_global_components(soup, global_components, context.current_path, config)
    page_css = (css or "") + "".join(styles.other)
    critical_css, deferred_css = partition_css(page_css, config.critical_css_limit)
    if styles.header:
        critical_css = "".join(styles.header) + critical_css

    data = PageData(
        product_list=product_list,
        blog_list=blog_list,
        product_detail=product_detail,
        blog_detail=blog_detail,
        menu_data=header_menu_data(global_components),
    )
    # Timed-out related fetches are abandoned on this pool, never joined.
    context.executor = ThreadPoolExecutor(max_workers=RELATED_WORKERS, thread_name_prefix="related")
    try:
        walk(soup, data, context, state)
        await _await_pending(state.pending)
    finally:
        context.executor.shutdown(wait=False, cancel_futures=True)

    carousels = process_carousels(soup)
    if carousels.has_carousels:
        critical_css = "\n".join(part for part in (carousel_critical_css(), critical_css) if part)

    logger.debug(
        "Rendered page: %d preload hint(s), %d carousel(s), %d critical / %d deferred CSS chars",
        len(state.preload_resources),
        carousels.count,
        len(critical_css),
        len(deferred_css),
    )
    return RenderResult(
        html=serialize(soup),
        critical_css=critical_css,
        deferred_css=deferred_css,
        preload_resources=state.preload_resources,
        carousel_scripts=carousels.scripts,
        has_carousels=carousels.has_carousels,
        carousel_count=carousels.count,
        has_above_fold_carousel=carousels.has_above_fold_carousel,
    )


def render_page(html: str, css: str = "", assets: Optional[Sequence[Mapping[str, Any]]] = None, **kwargs: Any) -> RenderResult:
    """Synchronous wrapper around :func:`prepare_page` for callers without an event loop."""
    return asyncio.run(prepare_page(html, css, assets, **kwargs))
