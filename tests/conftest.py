import pytest

from page_render.config import RenderConfig
from page_render.dom import parse_html
from page_render.models import RenderContext


# Common test fixtures
@pytest.fixture
def context():
    """A render context with default settings and no related-content client."""
    return RenderContext(config=RenderConfig())


@pytest.fixture
def carousel_html():
    """Return markup builder for a standard carousel with two image slides."""

    def build(root_attrs: str = "", container_attrs: str = "") -> str:
        return (
            f'<div class="gjs-swiper-root"{root_attrs}>'
            f'<div class="swiper"{container_attrs}><div class="swiper-wrapper">'
            '<div class="swiper-slide"><img class="swiper-lazy" src="/slide-1.jpg"></div>'
            '<div class="swiper-slide"><img src="/slide-2.jpg"></div>'
            "</div></div></div>"
        )

    return build


@pytest.fixture
def menu_data():
    """Navigation tree with one nested level."""
    return {
        "items": [
            {"id": "1", "label": "Home", "url": "/"},
            {
                "id": "2",
                "label": "Products",
                "url": "/products",
                "children": [
                    {"id": "2-1", "label": "Boots", "url": "/products/boots"},
                    {"id": "2-2", "label": "Shoes", "url": "/products/shoes"},
                ],
            },
            {"id": "3", "label": "Docs", "url": "https://docs.example.com", "target": "_blank"},
        ]
    }


@pytest.fixture
def product_list_data():
    """Product list page payload as returned by the content API."""
    return {
        "categories": [
            {
                "id": 1,
                "name": "Shoes",
                "path": "/shop/shoes",
                "children": [{"id": 2, "name": "Boots", "path": "/shop/shoes/boots", "parent_id": 1}],
            }
        ],
        "products": {
            "list": [
                {"id": 10, "name": "Hiking Boot", "path": "/p/hiking-boot", "summary": "Warm and dry"},
                {"id": 11, "name": "Trail Shoe", "path": "/p/trail-shoe", "primary_image": "/img/trail.webp"},
            ],
            "page": 1,
            "size": 2,
            "total": 5,
        },
    }


@pytest.fixture
def soup_of():
    """Parse a fragment and return the soup."""
    return parse_html
