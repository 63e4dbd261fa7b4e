"""
Unit Tests for Detail Components

Tests for product/blog detail injection and the related-items panel,
including the browser fallback when the API is slow or failing.
"""

import asyncio
import json
import time
from unittest.mock import MagicMock

import pytest

from page_render.components.detail import (
    CLIENT_FALLBACK_ATTR,
    SERVER_RENDERED_ATTR,
    inject_blog_detail,
    inject_product_detail,
)
from page_render.config import RenderConfig
from page_render.dom import class_list, parse_html
from page_render.models import RenderContext

PRODUCT = {
    "id": 42,
    "name": "Steel Valve",
    "summary": "Rated to 40 bar",
    "contact": {"email": "sales@example.com", "whatsapp": "+44 7700 900123"},
    "files": {
        "images": [{"url": "/img/v1.jpg"}, {"url": "/img/v2.jpg"}],
        "documents": [{"name": "Datasheet", "url": "/docs/valve.pdf"}],
    },
    "contents": [
        {"title": "Overview", "description": "<p>Forged body</p>"},
        {"title": "Specs", "description": "<ul><li>DN50</li></ul>"},
    ],
}


def _product_element(config=None):
    attrs = f" data-config='{json.dumps(config)}'" if config else ""
    soup = parse_html(
        f'<div data-component-type="product-detail"{attrs}>'
        '<div class="pd-gallery"></div><div class="pd-info"></div><div class="pd-description"></div>'
        '<section class="pd-related"><div class="pd-related-content"></div></section>'
        "</div>"
    )
    return soup, soup.div


def _run(task):
    asyncio.run(task)


class TestProductDetail:
    """Tests for inject_product_detail() synchronous parts."""

    def test_inject_when_several_images_then_main_and_thumbs(self, context):
        """Multiple images produce a main carousel and thumbnails."""
        soup, element = _product_element()

        task = inject_product_detail(element, PRODUCT, context)
        _run(task)

        gallery = soup.find(class_="pd-gallery")
        main = gallery.find(class_="pd-gallery-main")
        assert main["data-swiper-priority"] == "high"
        assert len(main.find_all("img")) == 2
        assert main.find("img")["loading"] == "eager"
        assert len(gallery.find(class_="pd-gallery-thumbs").find_all("img")) == 2

    def test_inject_when_single_image_then_static(self, context):
        """A single image is rendered without a carousel."""
        soup, element = _product_element()
        product = dict(PRODUCT, files={"images": [{"url": "/img/only.jpg"}]})

        _run(inject_product_detail(element, product, context))

        assert soup.find(class_="pd-gallery-single").img["src"] == "/img/only.jpg"
        assert soup.find(class_="swiper", attrs={"data-swiper-priority": "high"}) is None

    def test_inject_when_product_then_info_tabs_and_id(self, context):
        """Title, contact links, downloads and tabs are filled; the id is stamped."""
        # Arrange
        soup, element = _product_element()

        # Act
        _run(inject_product_detail(element, PRODUCT, context))

        # Assert
        assert element["data-product-id"] == "42"
        assert soup.find("h1", class_="pd-title").get_text() == "Steel Valve"
        assert soup.find("a", href="mailto:sales@example.com") is not None
        assert soup.find("a", href="https://wa.me/447700900123")["target"] == "_blank"
        assert soup.find(class_="pd-files").find("a")["href"] == "/docs/valve.pdf"
        tabs = soup.find_all("button", class_="pd-tab")
        assert "active" in class_list(tabs[0])
        assert tabs[0]["aria-selected"] == "true"
        assert tabs[1]["aria-selected"] == "false"
        panel = soup.find(class_="pd-tab-content", attrs={"data-content-index": "1"})
        assert panel.li.get_text() == "DN50"

    def test_inject_when_show_files_false_then_no_downloads(self, context):
        """showFiles=false hides the download list."""
        soup, element = _product_element(config={"showFiles": False})

        _run(inject_product_detail(element, PRODUCT, context))

        assert soup.find(class_="pd-files") is None

    def test_inject_when_no_data_then_nothing_returned(self, context):
        """Missing data leaves the component untouched."""
        soup, element = _product_element()

        assert inject_product_detail(element, None, context) is None
        assert soup.find(class_="pd-info").contents == []


class TestRelatedProducts:
    """Tests for the related-products panel."""

    def test_related_when_client_succeeds_then_server_rendered(self, context):
        """Fetched items are rendered and the container marked."""
        client = MagicMock()
        client.related_products.return_value = [{"title": "Gate Valve", "path": "/p/gate", "image": "/g.jpg"}]
        context.related_client = client
        soup, element = _product_element()

        _run(inject_product_detail(element, PRODUCT, context))

        container = soup.find(class_="pd-related-content")
        assert container[SERVER_RENDERED_ATTR] == "true"
        assert not container.has_attr(CLIENT_FALLBACK_ATTR)
        assert container.find("a", class_="view-more-btn")["href"] == "/p/gate"
        client.related_products.assert_called_once_with(42)

    def test_related_when_client_fails_then_skeleton_fallback(self, context):
        """An API error degrades to skeleton cards for the browser to replace."""
        client = MagicMock()
        client.related_products.side_effect = RuntimeError("boom")
        context.related_client = client
        soup, element = _product_element(config={"relatedProductsCount": 4})

        _run(inject_product_detail(element, PRODUCT, context))

        container = soup.find(class_="pd-related-content")
        assert container[CLIENT_FALLBACK_ATTR] == "true"
        assert not container.has_attr(SERVER_RENDERED_ATTR)
        assert len(container.find_all(class_="skeleton")) == 4

    @pytest.mark.parametrize("count, expected", [(10, 6), (None, 6), (2, 2)])
    def test_related_when_no_client_then_skeleton_count_capped(self, context, count, expected):
        """Skeleton cards follow the configured count, capped at six."""
        config = {"relatedProductsCount": count} if count is not None else None
        soup, element = _product_element(config=config)

        _run(inject_product_detail(element, PRODUCT, context))

        container = soup.find(class_="pd-related-content")
        assert container[CLIENT_FALLBACK_ATTR] == "true"
        assert len(container.find_all(class_="skeleton")) == expected

    def test_related_when_client_slow_then_times_out_to_fallback(self):
        """A call exceeding the timeout falls back instead of blocking the page."""

        class SlowClient:
            def related_products(self, product_id):
                time.sleep(0.3)
                return [{"title": "Late"}]

        context = RenderContext(config=RenderConfig(related_timeout=0.05), related_client=SlowClient())
        soup, element = _product_element()

        _run(inject_product_detail(element, PRODUCT, context))

        container = soup.find(class_="pd-related-content")
        assert container[CLIENT_FALLBACK_ATTR] == "true"
        assert "Late" not in container.get_text()

    def test_related_when_empty_result_then_section_hidden(self, context):
        """A successful empty answer hides the whole related section."""
        client = MagicMock()
        client.related_products.return_value = []
        context.related_client = client
        soup, element = _product_element()

        _run(inject_product_detail(element, PRODUCT, context))

        assert soup.find("section", class_="pd-related").has_attr("hidden")
        assert soup.find(class_="pd-related-content")[SERVER_RENDERED_ATTR] == "true"

    def test_related_when_more_items_than_count_then_capped(self, context):
        """Server-rendered related products respect the configured count."""
        client = MagicMock()
        client.related_products.return_value = [{"title": f"Valve {n}", "path": f"/p/{n}"} for n in range(5)]
        context.related_client = client
        soup, element = _product_element(config={"relatedProductsCount": 2})

        _run(inject_product_detail(element, PRODUCT, context))

        cards = soup.find(class_="pd-related-content").find_all(class_="related-product-card")
        assert [card.h3.get_text() for card in cards] == ["Valve 0", "Valve 1"]


class TestBlogDetail:
    """Tests for inject_blog_detail()."""

    BLOG = {
        "id": 7,
        "name": "Valve maintenance",
        "description": "<p>Check seals yearly.</p>",
        "images": [{"url": "/b1.jpg"}, {"url": "/b2.jpg"}],
    }

    def _element(self):
        soup = parse_html(
            '<div data-component-type="blog-detail">'
            '<div class="bd-main"><header class="bd-header"><h1>Old</h1></header>'
            '<div class="bd-content">stale</div><div class="bd-share"></div></div>'
            '<aside class="bd-related"><div class="bd-related-list"></div></aside>'
            "</div>"
        )
        return soup, soup.div

    def test_inject_when_blog_then_gallery_header_content_order(self, context):
        """Authored header/content are replaced and ordered after the gallery."""
        soup, element = self._element()

        _run(inject_blog_detail(element, self.BLOG, context))

        children = soup.find(class_="bd-main").find_all(True, recursive=False)
        assert [class_list(child)[0] for child in children] == ["bd-gallery", "bd-header", "bd-content", "bd-share"]
        assert soup.find("h1", class_="bd-title").get_text() == "Valve maintenance"
        assert soup.find(class_="bd-content").p.get_text() == "Check seals yearly."
        assert soup.find(string="stale") is None
        assert element["data-blog-id"] == "7"

    def test_inject_when_client_available_then_requests_configured_count(self, context):
        """Related posts are requested with the default count of three."""
        client = MagicMock()
        client.related_blogs.return_value = [
            {"name": "Seal guide", "path": "/blog/seals", "published_at": "2024-03-05"}
        ]
        context.related_client = client
        soup, element = self._element()

        _run(inject_blog_detail(element, self.BLOG, context))

        client.related_blogs.assert_called_once_with(7, 3)
        item = soup.find("a", class_="bd-related-item")
        assert item["href"] == "/blog/seals"
        assert item.find("h3").get_text() == "Seal guide"
        assert soup.find(class_="bd-related-list")[SERVER_RENDERED_ATTR] == "true"

    def test_inject_when_no_client_then_three_skeletons(self, context):
        """Without a client the browser fills the list later."""
        soup, element = self._element()

        _run(inject_blog_detail(element, self.BLOG, context))

        container = soup.find(class_="bd-related-list")
        assert container[CLIENT_FALLBACK_ATTR] == "true"
        assert len(container.find_all(class_="skeleton")) == 3
