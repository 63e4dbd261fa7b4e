"""Injectors for the listing components: product/blog list pages and product-list-detail."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from bs4 import Tag

from ..dom import find_container, read_config, set_inner_html
from ..markup.categories import render_category_tree
from ..markup.listings import render_blog_grid, render_blog_list, render_product_grid, render_product_list
from ..markup.pagination import render_pagination
from ..models import CategoryNode, Pagination, RenderContext
from ..utils import escape_html

logger = logging.getLogger("page_render.components")


@dataclass(frozen=True)
class ListingLayout:
    """Class names and defaults that differ between listing families."""

    label: str
    prefix: str
    content_class: str
    noun: str
    default_sort: str
    has_categories: bool = True


PRODUCT_LIST_PAGE = ListingLayout("ProductListPage", "plp", "plp-products-content", "products", "name-asc")
BLOG_LIST_PAGE = ListingLayout("BlogListPage", "blp", "blp-blogs-content", "posts", "published_at-desc")
PRODUCT_LIST_DETAIL = ListingLayout(
    "ProductListDetail", "pld", "pld-products-content", "products", "name-asc", has_categories=False
)


def _variant(element: Tag, config: Mapping[str, Any]) -> str:
    return element.get("data-variant") or config.get("displayMode") or "grid"


def _items_section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = data.get(key) or data.get("items") or {}
    return section if isinstance(section, Mapping) else {}


def inject_categories(
    element: Tag,
    categories: List[CategoryNode],
    layout: ListingLayout,
    config: Mapping[str, Any],
    context: RenderContext,
) -> None:
    if config.get("showCategories") is False:
        return
    container = find_container(element, f"{layout.prefix}-categories", layout.label)
    if container is None or not categories:
        return
    html = render_category_tree(
        categories,
        prefix=layout.prefix,
        current_category_id=context.current_category_id,
        root_path=context.current_path or None,
        expanded=config.get("defaultExpandCategories") is not False,
    )
    set_inner_html(container, html)
    logger.debug("[%s] Categories injected: %d", layout.label, len(categories))


def inject_pagination(
    element: Tag, pagination: Pagination, layout: ListingLayout, context: RenderContext
) -> None:
    container = find_container(element, f"{layout.prefix}-pagination-wrapper", layout.label)
    if container is None:
        return
    html = render_pagination(pagination, context.current_params, prefix=layout.prefix)
    count = (
        f'<span class="{layout.prefix}-results-count">'
        f"<strong>{escape_html(pagination.total)}</strong> {layout.noun}</span>"
    )
    set_inner_html(container, html + count)


def preselect_sort(element: Tag, layout: ListingLayout, config: Mapping[str, Any], context: RenderContext) -> None:
    """Mark the ``<option>`` matching the active sort order as selected."""
    select = element.find(class_=f"{layout.prefix}-sort-select")
    if select is None:
        return
    current_sort = (context.current_params or {}).get("sort") or config.get("defaultSort") or layout.default_sort
    select["data-current-sort"] = current_sort
    for option in select.find_all("option"):
        if option.get("value") == current_sort:
            option["selected"] = "selected"
        elif option.has_attr("selected"):
            del option["selected"]


def inject_product_list_page(element: Tag, data: Optional[Mapping[str, Any]], context: RenderContext) -> None:
    """Fill a product list page: category sidebar, product grid or list and paginator."""
    if not data:
        return
    layout = PRODUCT_LIST_PAGE
    config = read_config(element, layout.label)
    section = _items_section(data, "products")
    products = list(section.get("list") or [])
    categories = [CategoryNode.from_dict(item) for item in data.get("categories") or []]

    inject_categories(element, categories, layout, config, context)

    content = find_container(element, layout.content_class, layout.label)
    if content is not None:
        show_description = config.get("showProductDescription") is not False
        if _variant(element, config) == "list":
            html = render_product_list(products, show_description, prefix=layout.prefix)
        else:
            html = render_product_grid(products, config, show_description, prefix=layout.prefix)
        set_inner_html(content, html)
        logger.debug("[%s] Products injected: %d", layout.label, len(products))

    inject_pagination(element, Pagination.from_mapping(section), layout, context)
    preselect_sort(element, layout, config, context)


def inject_blog_list_page(element: Tag, data: Optional[Mapping[str, Any]], context: RenderContext) -> None:
    """Fill a blog list page: category sidebar, post grid or list and paginator."""
    if not data:
        return
    layout = BLOG_LIST_PAGE
    config = read_config(element, layout.label)
    section = _items_section(data, "blogs")
    blogs = list(section.get("list") or [])
    categories = [CategoryNode.from_dict(item) for item in data.get("categories") or []]

    inject_categories(element, categories, layout, config, context)

    content = find_container(element, layout.content_class, layout.label)
    if content is not None:
        show_description = config.get("showDescription") is not False
        show_publish_date = config.get("showPublishDate") is not False
        if _variant(element, config) == "list":
            html = render_blog_list(blogs, show_description, show_publish_date)
        else:
            html = render_blog_grid(blogs, show_description, show_publish_date)
        set_inner_html(content, html)
        logger.debug("[%s] Posts injected: %d", layout.label, len(blogs))

    inject_pagination(element, Pagination.from_mapping(section), layout, context)
    preselect_sort(element, layout, config, context)


def inject_product_list_detail(element: Tag, data: Optional[Mapping[str, Any]], context: RenderContext) -> None:
    """Fill a category sub-view listing; same as the list page without the sidebar."""
    if not data:
        return
    layout = PRODUCT_LIST_DETAIL
    config = read_config(element, layout.label)
    products = data.get("products") or []
    pagination_data: Dict[str, Any] = dict(data.get("pagination") or {})
    if isinstance(products, Mapping):
        pagination_data = pagination_data or dict(products)
        products = products.get("list") or []

    content = find_container(element, layout.content_class, layout.label)
    if content is not None:
        show_description = config.get("showProductDescription") is not False
        if _variant(element, config) == "list":
            html = render_product_list(products, show_description, prefix=layout.prefix)
        else:
            html = render_product_grid(products, config, show_description, prefix=layout.prefix)
        set_inner_html(content, html)
        logger.debug("[%s] Products injected: %d", layout.label, len(products))

    inject_pagination(element, Pagination.from_mapping(pagination_data), layout, context)
    preselect_sort(element, layout, config, context)
