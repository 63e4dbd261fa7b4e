"""
Unit Tests for the Related-Content Client

Tests for request construction and payload handling. The HTTP session is mocked.
"""

from unittest.mock import MagicMock

import pytest
import requests

from page_render.config import RenderConfig
from page_render.related import RELATED_BLOGS_PATH, RELATED_PRODUCTS_PATH, RelatedContentClient


def _session(payload):
    session = MagicMock()
    session.headers = {}
    response = MagicMock()
    response.json.return_value = payload
    session.get.return_value = response
    return session


class TestRelatedContentClient:
    """Tests for RelatedContentClient."""

    def test_init_when_token_given_then_bearer_header(self):
        """The API token is sent as a bearer token."""
        session = _session({})
        RelatedContentClient("https://api.example.com/", api_token="abc", session=session)
        assert session.headers["Authorization"] == "Bearer abc"

    def test_related_products_when_ok_then_items_returned(self):
        """The product endpoint is called with the product id and timeout."""
        # Arrange
        session = _session({"code": 200, "data": [{"title": "A"}, "junk", {"title": "B"}]})
        client = RelatedContentClient("https://api.example.com/", timeout=2.0, session=session)

        # Act
        items = client.related_products(42)

        # Assert
        assert items == [{"title": "A"}, {"title": "B"}]
        session.get.assert_called_once_with(
            "https://api.example.com" + RELATED_PRODUCTS_PATH, params={"product_id": 42}, timeout=2.0
        )

    def test_related_blogs_when_more_than_limit_then_truncated(self):
        """Blog results are cut to the requested count."""
        session = _session({"code": 200, "data": [{"id": n} for n in range(5)]})
        client = RelatedContentClient("https://api.example.com", session=session)

        items = client.related_blogs(7, limit=3)

        assert [item["id"] for item in items] == [0, 1, 2]
        assert session.get.call_args[0][0].endswith(RELATED_BLOGS_PATH)
        assert session.get.call_args[1]["params"] == {"blog_id": 7}

    def test_related_when_api_code_not_ok_then_empty(self, caplog):
        """Non-200 envelope codes yield no items and a warning."""
        client = RelatedContentClient("https://api.example.com", session=_session({"code": 500, "msg": "down"}))

        assert client.related_products(1) == []
        assert "Unexpected related-items payload" in caplog.text

    def test_related_when_http_error_then_raised(self):
        """Transport errors propagate to the caller, which decides on fallback."""
        session = _session({})
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        client = RelatedContentClient("https://api.example.com", session=session)

        with pytest.raises(requests.HTTPError):
            client.related_products(1)

    def test_from_config_when_no_api_base_then_none(self):
        """Without an API base there is nothing to call."""
        assert RelatedContentClient.from_config(RenderConfig()) is None
        client = RelatedContentClient.from_config(RenderConfig(api_base="https://api.example.com", related_timeout=1.0))
        assert client.timeout == 1.0
