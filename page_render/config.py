"""Configuration objects and constants for the renderer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger("page_render")

DEFAULT_CRITICAL_CSS_LIMIT = 4000
DEFAULT_RELATED_TIMEOUT = 3.0
DEFAULT_HEADER_SCRIPT_SRC = "/scripts/global-header-core.js"
DEFAULT_HEADER_STYLESHEET = "/styles/global-header-{variant}.css"


@dataclass
class RenderConfig:
    """Settings that control a single render pass."""

    critical_css_limit: int = DEFAULT_CRITICAL_CSS_LIMIT
    related_timeout: float = DEFAULT_RELATED_TIMEOUT
    api_base: Optional[str] = None
    api_token: Optional[str] = None
    header_script_src: str = DEFAULT_HEADER_SCRIPT_SRC
    header_stylesheet_pattern: str = DEFAULT_HEADER_STYLESHEET


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("%s is set to %r which is not a number; using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive (got %s); using %s", name, value, default)
        return default
    return value


def load_config() -> RenderConfig:
    """Build a RenderConfig from environment variables, keeping defaults on bad input."""
    return RenderConfig(
        critical_css_limit=_env_number("CRITICAL_CSS_LIMIT", DEFAULT_CRITICAL_CSS_LIMIT, int),
        related_timeout=_env_number("RELATED_TIMEOUT", DEFAULT_RELATED_TIMEOUT, float),
        api_base=os.getenv("API_BASE") or None,
        api_token=os.getenv("API_TOKEN") or None,
    )
