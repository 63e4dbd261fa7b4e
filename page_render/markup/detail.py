"""Markup for product and blog detail pages: galleries, info blocks, tabs and related items."""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Sequence

from ..utils import escape_html, format_day_month

MAX_THUMBNAILS = 8
MAX_SKELETON_CARDS = 6
DEFAULT_SKELETON_CARDS = 3
RELATED_PLACEHOLDER_IMAGE = "/images/placeholder.jpg"
FILE_ICON = "/images/icons/file-pdf.svg"


def skeleton_count(count: Optional[int]) -> int:
    return min(count or DEFAULT_SKELETON_CARDS, MAX_SKELETON_CARDS)


def _image_url(image: Mapping[str, Any]) -> str:
    return image.get("url") or image.get("src") or ""


def _slides(images: Sequence[Mapping[str, Any]], alt_prefix: str, main: bool) -> str:
    slides = []
    for index, image in enumerate(images):
        alt = image.get("name") or f"{alt_prefix} {index + 1}"
        if main and index == 0:
            loading = ' loading="eager" fetchpriority="high"'
        else:
            loading = ' loading="lazy"'
        slides.append(
            '<div class="swiper-slide">'
            f'<img src="{escape_html(_image_url(image))}" alt="{escape_html(alt)}" '
            f'width="200" height="200"{loading}/>'
            "</div>"
        )
    return "".join(slides)


def render_gallery(images: Sequence[Mapping[str, Any]], prefix: str = "pd") -> str:
    """Gallery for a detail page.

    Several images become a main carousel wired to a thumbnail strip; a
    single image is rendered statically; no images yields a placeholder.
    """
    images = [image for image in images or [] if _image_url(image)]
    noun = "Product image" if prefix == "pd" else "Blog image"
    if not images:
        return f'<div class="{prefix}-no-images">No images available</div>'

    if len(images) == 1:
        image = images[0]
        return (
            f'<div class="{prefix}-gallery-single">'
            f'<img src="{escape_html(_image_url(image))}" alt="{escape_html(image.get("name") or noun)}" '
            'loading="eager" fetchpriority="high"/>'
            "</div>"
        )

    main = (
        f'<div class="swiper {prefix}-gallery-main" data-swiper-priority="high">'
        f'<div class="swiper-wrapper">{_slides(images, noun, main=True)}</div>'
        '<div class="swiper-button-next"></div>'
        '<div class="swiper-button-prev"></div>'
        '<div class="swiper-pagination"></div>'
        "</div>"
    )
    thumbs = (
        f'<div class="swiper {prefix}-gallery-thumbs">'
        f'<div class="swiper-wrapper">{_slides(images[:MAX_THUMBNAILS], "Thumbnail", main=False)}</div>'
        "</div>"
    )
    return f'<div class="{prefix}-gallery-wrapper">{main}{thumbs}</div>'


def _contact_item(label: str, href: str, value: str, external: bool = False) -> str:
    extra = ' target="_blank" rel="noopener noreferrer"' if external else ""
    return (
        '<div class="contact-item">'
        f'<span class="contact-label">{label}</span>'
        f'<a href="{escape_html(href)}" class="contact-value"{extra}>{escape_html(value)}</a>'
        "</div>"
    )


def render_product_info(product: Mapping[str, Any], config: Optional[Mapping[str, Any]] = None) -> str:
    config = config or {}
    title = product.get("name") or product.get("title") or "Product Title"
    summary = product.get("summary") or product.get("description")
    contact = product.get("contact") or {}
    files = product.get("files") or {}
    documents: List[Mapping[str, Any]] = list(files.get("documents") or []) if isinstance(files, Mapping) else []

    parts = [f'<h1 class="pd-title">{escape_html(title)}</h1>']
    if summary:
        parts.append(f'<div class="pd-brief-description">{escape_html(summary)}</div>')

    contacts = []
    if contact.get("email"):
        contacts.append(_contact_item("Email:", f"mailto:{contact['email']}", contact["email"]))
    if contact.get("phone"):
        contacts.append(_contact_item("Tel:", f"tel:{contact['phone']}", contact["phone"]))
    if contact.get("whatsapp"):
        number = re.sub(r"[^0-9]", "", str(contact["whatsapp"]))
        contacts.append(_contact_item("WhatsApp:", f"https://wa.me/{number}", contact["whatsapp"], external=True))
    if contacts:
        parts.append(f'<div class="pd-contact">{"".join(contacts)}</div>')

    parts.append('<div><button class="pd-quote-btn">REQUEST A QUOTE</button></div>')

    if config.get("showFiles", True) and documents:
        links = "".join(
            f'<a href="{escape_html(document.get("url"))}" download="" class="file-item" '
            'target="_blank" rel="noopener noreferrer">'
            f'<img class="file-icon" src="{FILE_ICON}" alt=""/>'
            f'<span class="file-name">{escape_html(document.get("name"))}</span></a>'
            for document in documents
        )
        parts.append(f'<div class="pd-files"><h3>Downloads</h3><div class="file-list">{links}</div></div>')

    return f'<div class="pd-info-wrapper">{"".join(parts)}</div>'


def render_description_tabs(contents: Sequence[Mapping[str, Any]]) -> str:
    """One tab per content block; the first tab is active. Block bodies are authored HTML."""
    if not contents:
        return '<div class="pd-no-contents">No contents available</div>'

    tabs = []
    panels = []
    for index, block in enumerate(contents):
        active = index == 0
        state = " active" if active else ""
        title = block.get("title") or f"Description {index + 1}"
        tabs.append(
            f'<button class="pd-tab{state}" role="tab" aria-selected="{"true" if active else "false"}" '
            f'data-tab-index="{index}">{escape_html(title)}</button>'
        )
        panels.append(
            f'<div class="pd-tab-content{state}" role="tabpanel" data-content-index="{index}">'
            f'{block.get("description") or ""}</div>'
        )
    return (
        '<div class="pd-description-wrapper">'
        f'<div class="pd-tabs" role="tablist">{"".join(tabs)}</div>'
        f'<div class="pd-tab-contents">{"".join(panels)}</div>'
        "</div>"
    )


def render_blog_info(blog: Mapping[str, Any]) -> str:
    title = blog.get("name") or blog.get("title") or "Blog Title"
    body = blog.get("description") or "<p>Blog content will appear here.</p>"
    return (
        f'<header class="bd-header"><h1 class="bd-title">{escape_html(title)}</h1></header>'
        f'<div class="bd-content">{body}</div>'
    )


def _related_swiper(slides: str) -> str:
    return (
        '<div class="swiper pd-related-swiper">'
        f'<div class="swiper-wrapper">{slides}</div>'
        '<div class="swiper-button-next"></div>'
        '<div class="swiper-button-prev"></div>'
        "</div>"
    )


def render_related_products(products: Sequence[Mapping[str, Any]]) -> str:
    slides = []
    for product in products:
        title = product.get("title") or product.get("name") or ""
        image = product.get("image") or product.get("primary_image") or RELATED_PLACEHOLDER_IMAGE
        slides.append(
            '<div class="swiper-slide"><div class="related-product-card">'
            f'<img src="{escape_html(image)}" alt="{escape_html(title)}" loading="lazy"/>'
            f"<h3>{escape_html(title)}</h3>"
            f'<a href="{escape_html(product.get("path") or "#")}" class="view-more-btn">Learn More</a>'
            "</div></div>"
        )
    return _related_swiper("".join(slides))


def render_related_products_skeleton(count: Optional[int]) -> str:
    card = (
        '<div class="swiper-slide"><div class="related-product-card skeleton">'
        '<div class="skeleton-image"></div>'
        '<div class="skeleton-title"></div>'
        '<div class="skeleton-title"></div>'
        '<div class="skeleton-button"></div>'
        "</div></div>"
    )
    return _related_swiper(card * skeleton_count(count))


def render_related_blogs(blogs: Sequence[Mapping[str, Any]]) -> str:
    """Cards for the ``.bd-related-list`` container."""
    cards = []
    for blog in blogs:
        name = blog.get("name") or "Untitled"
        image = blog.get("primary_image") or RELATED_PLACEHOLDER_IMAGE
        date = format_day_month(blog.get("published_at") or blog.get("created_at"))
        cards.append(
            f'<a class="bd-related-item" href="{escape_html(blog.get("path") or "#")}">'
            f'<div class="bd-related-image"><img src="{escape_html(image)}" alt="{escape_html(name)}" loading="lazy"/></div>'
            f'<div class="bd-related-date">{escape_html(date)}</div>'
            f'<h3 class="bd-related-title">{escape_html(name)}</h3>'
            "</a>"
        )
    return "".join(cards)


def render_related_blogs_skeleton(count: Optional[int]) -> str:
    card = (
        '<div class="bd-related-item skeleton">'
        '<div class="skeleton-image"></div>'
        '<div class="skeleton-date"></div>'
        '<div class="skeleton-title"></div>'
        "</div>"
    )
    return card * skeleton_count(count)
