"""HTTP client for the related-items endpoints of the content API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_RELATED_TIMEOUT, RenderConfig

logger = logging.getLogger("page_render.related")

RELATED_PRODUCTS_PATH = "/api/module/products/related"
RELATED_BLOGS_PATH = "/api/module/blogs/related"
DEFAULT_RELATED_BLOGS = 3


class RelatedContentClient:
    """Blocking client; the render pipeline runs its calls in a worker thread."""

    def __init__(
        self,
        api_base: str,
        api_token: Optional[str] = None,
        timeout: float = DEFAULT_RELATED_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if api_token:
            self.session.headers["Authorization"] = f"Bearer {api_token}"

    @classmethod
    def from_config(cls, config: RenderConfig) -> Optional["RelatedContentClient"]:
        if not config.api_base:
            return None
        return cls(config.api_base, config.api_token, config.related_timeout)

    def _get(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        url = f"{self.api_base}{path}"
        logger.debug("Fetching related items from %s %s", url, params)
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict) or payload.get("code") != 200:
            logger.warning("Unexpected related-items payload from %s", url)
            return []
        data = payload.get("data")
        return [item for item in data if isinstance(item, dict)] if isinstance(data, list) else []

    def related_products(self, product_id: Any) -> List[Dict[str, Any]]:
        return self._get(RELATED_PRODUCTS_PATH, {"product_id": product_id})

    def related_blogs(self, blog_id: Any, limit: int = DEFAULT_RELATED_BLOGS) -> List[Dict[str, Any]]:
        return self._get(RELATED_BLOGS_PATH, {"blog_id": blog_id})[:limit]
