"""Injectors for product-detail and blog-detail components.

Gallery, info and description are filled synchronously during the tree
walk. The related-items panel needs a network round trip, so each injector
returns a coroutine that the pipeline awaits together with the others.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from functools import partial
from typing import Any, Awaitable, Callable, List, Mapping, Optional

from bs4 import Tag

from ..dom import closest, find_container, has_class, prepend_html, read_config, set_inner_html
from ..markup.detail import (
    render_blog_info,
    render_description_tabs,
    render_gallery,
    render_product_info,
    render_related_blogs,
    render_related_blogs_skeleton,
    render_related_products,
    render_related_products_skeleton,
)
from ..models import RenderContext

logger = logging.getLogger("page_render.components")

SERVER_RENDERED_ATTR = "data-rsc-rendered"
CLIENT_FALLBACK_ATTR = "data-csr-fallback"
DEFAULT_RELATED_PRODUCTS = 6
DEFAULT_RELATED_BLOGS = 3


def _images(record: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    files = record.get("files")
    if isinstance(files, Mapping) and files.get("images"):
        return list(files["images"])
    return list(record.get("images") or [])


def _count(config: Mapping[str, Any], key: str, default: int) -> int:
    try:
        return int(config.get(key) or default)
    except (TypeError, ValueError):
        return default


async def resolve_related(
    container: Tag,
    fetch: Optional[Callable[[], List[Mapping[str, Any]]]],
    render_items: Callable[[List[Mapping[str, Any]]], str],
    render_skeleton: Callable[[], str],
    timeout: float,
    label: str,
    section_class: Optional[str] = None,
    executor: Optional[Executor] = None,
    limit: Optional[int] = None,
) -> None:
    """Fill ``container`` with related items, or a skeleton the client script will replace.

    The blocking ``fetch`` runs on ``executor``; a timed-out call is abandoned
    there rather than awaited.
    """
    items: Optional[List[Mapping[str, Any]]] = None
    if fetch is None:
        logger.debug("[%s] No related-content client; deferring to the browser", label)
    else:
        try:
            loop = asyncio.get_running_loop()
            items = await asyncio.wait_for(loop.run_in_executor(executor, fetch), timeout)
        except asyncio.TimeoutError:
            logger.warning("[%s] Related items timed out after %.1fs", label, timeout)
        except Exception as exc:  # noqa: BLE001
            logger.warning("[%s] Related items fetch failed: %s", label, exc)

    if items is None:
        set_inner_html(container, render_skeleton())
        container[CLIENT_FALLBACK_ATTR] = "true"
        return

    if limit is not None:
        items = list(items)[:limit]
    set_inner_html(container, render_items(items))
    container[SERVER_RENDERED_ATTR] = "true"
    if not items:
        section = closest(container, lambda tag: has_class(tag, section_class)) if section_class else None
        (section or container)["hidden"] = ""
    logger.debug("[%s] Server-rendered %d related item(s)", label, len(items))


def inject_product_detail(
    element: Tag, data: Optional[Mapping[str, Any]], context: RenderContext
) -> Optional[Awaitable[None]]:
    """Fill a product detail component and return the pending related-products task."""
    if not data:
        return None
    label = "ProductDetail"
    config = read_config(element, label)

    gallery = find_container(element, "pd-gallery", label)
    if gallery is not None:
        set_inner_html(gallery, render_gallery(_images(data), prefix="pd"))

    info = find_container(element, "pd-info", label)
    if info is not None:
        set_inner_html(info, render_product_info(data, config))

    contents = data.get("contents") or []
    if contents:
        description = find_container(element, "pd-description", label)
        if description is not None:
            set_inner_html(description, render_description_tabs(contents))

    product_id = data.get("id")
    if product_id is not None:
        element["data-product-id"] = str(product_id)

    related = find_container(element, "pd-related-content", label)
    if related is None:
        return None
    count = _count(config, "relatedProductsCount", DEFAULT_RELATED_PRODUCTS)
    client = context.related_client
    fetch = partial(client.related_products, product_id) if client is not None and product_id is not None else None
    return resolve_related(
        related,
        fetch,
        render_related_products,
        partial(render_related_products_skeleton, count),
        context.config.related_timeout,
        label,
        section_class="pd-related",
        executor=context.executor,
        limit=count,
    )


def inject_blog_detail(
    element: Tag, data: Optional[Mapping[str, Any]], context: RenderContext
) -> Optional[Awaitable[None]]:
    """Fill a blog detail component and return the pending related-posts task."""
    if not data:
        return None
    label = "BlogDetail"
    config = read_config(element, label)

    main = find_container(element, "bd-main", label)
    if main is not None:
        galleries = main.find_all(lambda tag: has_class(tag, "bd-gallery") or has_class(tag, "bd-gallery-single"))
        info_blocks = main.find_all(lambda tag: has_class(tag, "bd-header") or has_class(tag, "bd-content"))
        images = _images(data)
        gallery_html = ""
        if images or galleries:
            gallery_html = render_gallery(images, prefix="bd")
            if len(images) > 1:
                gallery_html = f'<div class="bd-gallery">{gallery_html}</div>'
        for tag in galleries + info_blocks:
            if not tag.decomposed:
                tag.decompose()
        # Final order inside .bd-main: gallery, header, content, then the rest.
        prepend_html(main, gallery_html + render_blog_info(data))

    blog_id = data.get("id")
    if blog_id is not None:
        element["data-blog-id"] = str(blog_id)

    related = find_container(element, "bd-related-list", label)
    if related is None:
        return None
    count = _count(config, "relatedBlogsCount", DEFAULT_RELATED_BLOGS)
    client = context.related_client
    fetch = partial(client.related_blogs, blog_id, count) if client is not None and blog_id is not None else None
    return resolve_related(
        related,
        fetch,
        render_related_blogs,
        partial(render_related_blogs_skeleton, count),
        context.config.related_timeout,
        label,
        section_class="bd-related",
        executor=context.executor,
        limit=count,
    )
