"""Command-line entry point for the page renderer."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Sequence

from .config import load_config
from .css import partition_css
from .document import compose_document
from .pipeline import prepare_page
from .related import RelatedContentClient

logger = logging.getLogger("page_render.cli")

# Page file key -> prepare_page keyword; camelCase keys from the content API are accepted too.
PAGE_KEYS = {
    "global_components": ("global_components", "globalComponents"),
    "product_list": ("product_list", "productList", "productListPageData"),
    "blog_list": ("blog_list", "blogList", "blogListPageData"),
    "product_detail": ("product_detail", "productDetail", "productDetailData"),
    "blog_detail": ("blog_detail", "blogDetail", "blogDetailData"),
    "current_path": ("current_path", "currentPath", "path"),
    "current_params": ("current_params", "currentParams", "params"),
    "current_category_id": ("current_category_id", "currentCategoryId", "categoryId"),
}


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("render", *argv)


def _add_render_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("pages", nargs="+", type=Path, help="Page JSON files to render")
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where index.html and render.json should be written",
    )
    parser.add_argument(
        "--css-limit",
        type=int,
        default=None,
        help="Critical CSS budget in characters (default: CRITICAL_CSS_LIMIT or 4000)",
    )
    parser.add_argument(
        "--api-base",
        default=None,
        help="Content API base URL used to server-render related items",
    )
    parser.add_argument(
        "--related-timeout",
        type=float,
        default=None,
        help="Seconds to wait for related items before falling back to the browser",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_css_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", type=Path, help="Stylesheet to partition")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Critical CSS budget in characters (default: CRITICAL_CSS_LIMIT or 4000)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render page-builder documents into optimised HTML with critical CSS and carousel scripts.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Render page JSON files to HTML")
    _add_render_arguments(render_parser)

    css_parser = subparsers.add_parser("css", help="Split a stylesheet into critical and deferred parts")
    _add_css_arguments(css_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def page_arguments(page: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a page JSON document onto :func:`prepare_page` keyword arguments."""
    kwargs: Dict[str, Any] = {}
    for name, keys in PAGE_KEYS.items():
        for key in keys:
            if page.get(key) is not None:
                kwargs[name] = page[key]
                break
    return kwargs


def load_page(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        page = json.load(handle)
    if not isinstance(page, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return page


def _output_dir(root: Path, page_path: Path, multiple: bool) -> Path:
    return root / page_path.stem if multiple else root


async def _render_pages(args: argparse.Namespace) -> int:
    config = load_config()
    if args.css_limit is not None:
        config = replace(config, critical_css_limit=args.css_limit)
    if args.related_timeout is not None:
        config = replace(config, related_timeout=args.related_timeout)
    if args.api_base:
        config = replace(config, api_base=args.api_base)
    client = RelatedContentClient.from_config(config)

    output_root = Path(args.output).resolve()
    rendered = 0
    for page_path in args.pages:
        try:
            page = load_page(page_path)
        except (OSError, ValueError) as exc:
            logger.error("Could not read %s: %s", page_path, exc)
            continue

        start = time.perf_counter()
        result = await prepare_page(
            page.get("html") or "",
            page.get("css") or "",
            page.get("assets") or [],
            config=config,
            related_client=client,
            **page_arguments(page),
        )
        elapsed = time.perf_counter() - start

        target = _output_dir(output_root, page_path, len(args.pages) > 1)
        target.mkdir(parents=True, exist_ok=True)
        title = (page.get("meta") or {}).get("title") or page.get("title") or page_path.stem
        (target / "index.html").write_text(compose_document(result, title=title), encoding="utf-8")
        (target / "render.json").write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        rendered += 1
        logger.info("Rendered %s -> %s in %.3fs", page_path, target, elapsed)
        logger.debug(
            "%s: %d preload hint(s), %d carousel(s), critical=%d deferred=%d chars",
            page_path,
            len(result.preload_resources),
            result.carousel_count,
            len(result.critical_css),
            len(result.deferred_css),
        )
    return rendered


def _run_render(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    rendered = asyncio.run(_render_pages(args))
    total = len(args.pages)
    logger.info("Finished (%d/%d rendered, %d failed)", rendered, total, total - rendered)
    return 0 if rendered == total else 1


def _run_css(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    config = load_config()
    limit = args.limit if args.limit is not None else config.critical_css_limit
    try:
        css = args.path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Could not read %s: %s", args.path, exc)
        return 1
    partition = partition_css(css, limit)
    json.dump({"criticalCss": partition.critical, "deferredCss": partition.deferred}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    logger.debug("critical=%d deferred=%d chars", len(partition.critical), len(partition.deferred))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "render":
        return _run_render(args)
    return _run_css(args)


if __name__ == "__main__":
    sys.exit(main())
