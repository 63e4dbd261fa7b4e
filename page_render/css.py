"""Critical/deferred CSS partitioning."""

from __future__ import annotations

import re
from typing import List, NamedTuple

from .config import DEFAULT_CRITICAL_CSS_LIMIT

# A rule boundary is a closing brace followed by something that starts a new
# selector or at-rule. Brace nesting is not tracked.
RULE_BOUNDARY = re.compile(r"(?<=\})\s*(?=[.#@])")

CRITICAL_PATTERNS = (
    re.compile(r"^\s*body\b"),
    re.compile(r"^\s*html\b"),
    re.compile(r"^\s*\*"),
    re.compile(r"\b(font|color|background)\s*:"),
    re.compile(r"\b(display|position|width|height)\s*:"),
    re.compile(r"\.(hero|banner|header|nav)\b"),
    re.compile(r"^\s*@media\b"),
)


class CssPartition(NamedTuple):
    critical: str
    deferred: str


def split_rules(css: str) -> List[str]:
    return [rule for rule in RULE_BOUNDARY.split(css) if rule]


def is_critical_rule(rule: str) -> bool:
    return any(pattern.search(rule) for pattern in CRITICAL_PATTERNS)


def partition_css(css: str, limit: int = DEFAULT_CRITICAL_CSS_LIMIT) -> CssPartition:
    """Split authored CSS into an inline critical part and an idle-loaded remainder.

    Rules recognised as critical are always kept inline, even past ``limit``;
    the rest fill the remaining budget in source order and overflow into the
    deferred part.
    """
    if not css:
        return CssPartition("", "")
    if limit is None or limit <= 0:
        limit = len(css)
    if len(css) <= limit:
        return CssPartition(css, "")

    critical: List[str] = []
    deferred: List[str] = []
    current_size = 0
    for rule in split_rules(css):
        if is_critical_rule(rule) or current_size + len(rule) <= limit:
            critical.append(rule)
            current_size += len(rule)
        else:
            deferred.append(rule)
    return CssPartition("".join(critical), "".join(deferred))


def carousel_critical_css() -> str:
    """Styles that keep the first slide of every carousel visible before its script runs."""
    return """
.swiper {
  position: relative;
  overflow: hidden;
}
.swiper-wrapper {
  display: flex;
  transition-property: transform;
}
.swiper-slide {
  flex-shrink: 0;
  width: 100%;
  height: 100%;
  position: relative;
}
.swiper-wrapper > .swiper-slide:first-child {
  display: flex;
  visibility: visible;
}
.swiper-slide img {
  width: 100%;
  height: 100%;
  object-fit: cover;
}
.gjs-swiper-root {
  min-height: 300px;
}
""".strip()
