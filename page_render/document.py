"""Assemble a standalone HTML document from a render result, for previews and the CLI."""

from __future__ import annotations

import json
from typing import List

from .models import RenderResult
from .utils import escape_html

SWIPER_JS = "https://cdn.jsdelivr.net/npm/swiper@11/swiper-bundle.min.js"
SWIPER_CSS = "https://cdn.jsdelivr.net/npm/swiper@11/swiper-bundle.min.css"

_DEFERRED_STYLE_LOADER = """<script>
(function() {
  var css = %s;
  function inject() {
    var style = document.createElement('style');
    style.dataset.deferred = 'true';
    style.textContent = css;
    document.head.appendChild(style);
  }
  if ('requestIdleCallback' in window) {
    requestIdleCallback(inject);
  } else {
    setTimeout(inject, 1);
  }
})();
</script>"""


def _script_text(content: str) -> str:
    # A literal closing tag inside inline JS would end the element early.
    return content.replace("</script", "<\\/script")


def compose_document(result: RenderResult, title: str = "", lang: str = "en") -> str:
    """Wrap rendered markup in a full document.

    Preload hints and critical CSS go in ``<head>``; deferred CSS is added
    on browser idle; carousel programs follow the Swiper runtime, which is
    loaded eagerly only when a carousel sits above the fold.
    """
    head: List[str] = [
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>{escape_html(title)}</title>",
    ]
    for resource in result.preload_resources:
        head.append(
            f'<link rel="preload" href="{escape_html(resource.href)}" as="{escape_html(resource.as_)}" '
            f'type="{escape_html(resource.type)}" fetchpriority="{escape_html(resource.fetch_priority)}">'
        )
    if result.has_carousels:
        head.append(f'<link rel="stylesheet" href="{SWIPER_CSS}">')
    if result.critical_css:
        head.append(f'<style data-critical="true">{result.critical_css}</style>')

    tail: List[str] = []
    if result.deferred_css:
        tail.append(_DEFERRED_STYLE_LOADER % _script_text(json.dumps(result.deferred_css)))
    if result.has_carousels:
        loading = "" if result.has_above_fold_carousel else " defer"
        tail.append(f'<script src="{SWIPER_JS}"{loading}></script>')
        for script in result.carousel_scripts:
            tail.append(
                f'<script data-swiper-index="{script.index}" data-priority="{script.priority}">'
                f"{_script_text(script.content)}</script>"
            )

    head_html = "\n".join(head)
    tail_html = "\n".join(tail)
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{escape_html(lang)}">\n'
        f"<head>\n{head_html}\n</head>\n"
        f"<body>\n{result.html}\n{tail_html}\n</body>\n"
        "</html>\n"
    )
