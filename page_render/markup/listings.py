"""Grid and list markup for product and blog listings."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..utils import escape_html, format_short_date

PLACEHOLDER_IMAGE = "/placeholder.jpg"
DEFAULT_COLUMNS = {"desktop": 4, "tablet": 3, "mobile": 2}

_EMPTY_ICON = (
    '<svg class="{prefix}-empty-icon" width="64" height="64" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor"><circle cx="12" cy="12" r="10" stroke-width="2"/>'
    '<line x1="12" y1="8" x2="12" y2="12" stroke-width="2"/>'
    '<circle cx="12" cy="16" r="1" fill="currentColor"/></svg>'
)


def _empty_state(prefix: str, noun: str, message: str) -> str:
    return (
        f'<div class="{prefix}-{noun}-empty">{_EMPTY_ICON.format(prefix=prefix)}'
        f'<p class="{prefix}-empty-text">{message}</p></div>'
    )


def _columns_class(prefix: str, config: Optional[Mapping[str, Any]]) -> str:
    columns: Dict[str, Any] = dict(DEFAULT_COLUMNS)
    configured = (config or {}).get("columns")
    if isinstance(configured, Mapping):
        columns.update(configured)
    return (
        f"{prefix}-grid-cols-{columns['desktop']} "
        f"{prefix}-grid-md-{columns['tablet']} "
        f"{prefix}-grid-sm-{columns['mobile']}"
    )


def _product_image(product: Mapping[str, Any]) -> str:
    return product.get("primary_image") or product.get("image") or PLACEHOLDER_IMAGE


def _product_summary(product: Mapping[str, Any]) -> Optional[str]:
    return product.get("summary") or product.get("description")


def render_product_grid(
    products: Sequence[Mapping[str, Any]],
    config: Optional[Mapping[str, Any]] = None,
    show_description: bool = True,
    prefix: str = "plp",
) -> str:
    if not products:
        return _empty_state(prefix, "products", "No products found")

    cards = []
    for product in products:
        summary = _product_summary(product)
        description = (
            f'<p class="{prefix}-product-description">{escape_html(summary)}</p>'
            if show_description and summary
            else ""
        )
        cards.append(
            f'<a href="{escape_html(product.get("path") or "#")}" class="{prefix}-product-card" '
            f'data-product-id="{escape_html(product.get("id"))}">'
            f'<div class="{prefix}-product-image-wrapper">'
            f'<img src="{escape_html(_product_image(product))}" alt="{escape_html(product.get("name"))}" '
            f'class="{prefix}-product-image" loading="lazy"/></div>'
            f'<div class="{prefix}-product-info">'
            f'<h3 class="{prefix}-product-name">{escape_html(product.get("name"))}</h3>'
            f"{description}</div></a>"
        )
    return f'<div class="{prefix}-products-grid {_columns_class(prefix, config)}">{"".join(cards)}</div>'


def render_product_list(
    products: Sequence[Mapping[str, Any]],
    show_description: bool = True,
    prefix: str = "plp",
) -> str:
    if not products:
        return _empty_state(prefix, "products", "No products found")

    rows = []
    for product in products:
        summary = _product_summary(product)
        description = (
            f'<p class="{prefix}-product-list-description">{escape_html(summary)}</p>'
            if show_description and summary
            else ""
        )
        rows.append(
            f'<a href="{escape_html(product.get("path") or "#")}" class="{prefix}-product-list-item" '
            f'data-product-id="{escape_html(product.get("id"))}">'
            f'<div class="{prefix}-product-list-image">'
            f'<img src="{escape_html(_product_image(product))}" alt="{escape_html(product.get("name"))}" '
            f'loading="lazy"/></div>'
            f'<div class="{prefix}-product-list-content">'
            f'<h3 class="{prefix}-product-list-name">{escape_html(product.get("name"))}</h3>'
            f"{description}</div></a>"
        )
    return f'<div class="{prefix}-products-list-view">{"".join(rows)}</div>'


def _blog_body(
    blog: Mapping[str, Any], part: str, show_description: bool, show_publish_date: bool
) -> str:
    published = blog.get("published_at")
    date = (
        f'<time class="blp-blog{part}-date" datetime="{escape_html(published)}">'
        f"{escape_html(format_short_date(published))}</time>"
        if show_publish_date and published
        else ""
    )
    description = (
        f'<p class="blp-blog{part}-description">{escape_html(blog.get("description"))}</p>'
        if show_description and blog.get("description")
        else ""
    )
    return (
        f"{date}"
        f'<h3 class="blp-blog{part}-name">{escape_html(blog.get("name"))}</h3>'
        f"{description}"
        f'<a href="{escape_html(blog.get("path") or "#")}" class="blp-blog-learn-more">LEARN MORE</a>'
    )


def render_blog_grid(
    blogs: Sequence[Mapping[str, Any]],
    show_description: bool = True,
    show_publish_date: bool = True,
) -> str:
    if not blogs:
        return _empty_state("blp", "blogs", "No posts found")

    cards = [
        f'<div class="blp-blog-card" data-blog-id="{escape_html(blog.get("id"))}">'
        f'<div class="blp-blog-image-wrapper">'
        f'<img src="{escape_html(blog.get("primary_image") or PLACEHOLDER_IMAGE)}" '
        f'alt="{escape_html(blog.get("name"))}" class="blp-blog-image" loading="lazy"/></div>'
        f'<div class="blp-blog-info">{_blog_body(blog, "", show_description, show_publish_date)}</div>'
        "</div>"
        for blog in blogs
    ]
    return f'<div class="blp-blogs-grid">{"".join(cards)}</div>'


def render_blog_list(
    blogs: Sequence[Mapping[str, Any]],
    show_description: bool = True,
    show_publish_date: bool = True,
) -> str:
    if not blogs:
        return _empty_state("blp", "blogs", "No posts found")

    rows = [
        f'<div class="blp-blog-list-item" data-blog-id="{escape_html(blog.get("id"))}">'
        f'<div class="blp-blog-list-image">'
        f'<img src="{escape_html(blog.get("primary_image") or PLACEHOLDER_IMAGE)}" '
        f'alt="{escape_html(blog.get("name"))}" loading="lazy"/></div>'
        f'<div class="blp-blog-list-content">{_blog_body(blog, "-list", show_description, show_publish_date)}</div>'
        "</div>"
        for blog in blogs
    ]
    return f'<div class="blp-blogs-list-view">{"".join(rows)}</div>'
