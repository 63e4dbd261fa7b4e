"""Carousel (Swiper) detection, first-paint optimisation and init-script generation."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from string import Template
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from .dom import COMPONENT_ATTR, class_list, closest, has_class, remove_class
from .models import CarouselConfig, CarouselScript

logger = logging.getLogger("page_render.carousel")

ROOT_CLASS = "gjs-swiper-root"
CONTAINER_CLASS = "swiper"
SLIDE_CLASS = "swiper-slide"
PAGINATION_CLASS = "swiper-pagination"
BUTTON_PREV_CLASS = "swiper-button-prev"
BUTTON_NEXT_CLASS = "swiper-button-next"
LAZY_CLASS = "swiper-lazy"

# Detail-page galleries: main gallery class -> thumbnail gallery class.
GALLERY_CLASSES = {
    "pd-gallery-main": "pd-gallery-thumbs",
    "bd-gallery-main": "bd-gallery-thumbs",
}
DETAIL_COMPONENTS = {"product-detail", "blog-detail"}

DEFAULT_HEIGHT = "70vh"
LAZY_ROOT_MARGIN = "200px"

DEFAULTS = CarouselConfig()

# Leading numeric prefix, as the browser reads "3000ms" or "1.5x".
INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass
class CarouselResult:
    scripts: List[CarouselScript] = field(default_factory=list)
    has_above_fold_carousel: bool = False

    @property
    def has_carousels(self) -> bool:
        return bool(self.scripts)

    @property
    def count(self) -> int:
        return len(self.scripts)


def _flag(root: Tag, name: str, default: bool) -> bool:
    value = root.get(name)
    if value is None:
        return default
    return value == "true"


def _number(root: Tag, name: str, default, cast=int):
    value = root.get(name)
    if value in (None, ""):
        return default
    match = (INT_PREFIX if cast is int else FLOAT_PREFIX).match(value)
    if match is None:
        return default
    try:
        parsed = cast(match.group(1))
    except (ValueError, OverflowError):
        return default
    if not math.isfinite(parsed):
        return default
    return parsed or default


def read_carousel_config(root: Tag) -> CarouselConfig:
    return CarouselConfig(
        loop=_flag(root, "data-loop", DEFAULTS.loop),
        autoplay=_flag(root, "data-autoplay", DEFAULTS.autoplay),
        delay=_number(root, "data-delay", DEFAULTS.delay),
        effect=root.get("data-effect") or DEFAULTS.effect,
        speed=_number(root, "data-speed", DEFAULTS.speed),
        slides_per_view=_number(root, "data-slides-per-view", DEFAULTS.slides_per_view, float),
        space_between=_number(root, "data-space-between", DEFAULTS.space_between),
        centered_slides=_flag(root, "data-centered-slides", DEFAULTS.centered_slides),
        priority=root.get("data-priority") or DEFAULTS.priority,
    )


def _slides(container: Tag) -> List[Tag]:
    return container.find_all(class_=SLIDE_CLASS)


def optimize_first_slide(container: Tag) -> None:
    """Give the first visible slide image top loading priority."""
    slides = _slides(container)
    if not slides:
        return
    first_slide = slides[0]
    first_image = first_slide.find("img")
    if first_image is not None:
        first_image["loading"] = "eager"
        first_image["fetchpriority"] = "high"
        remove_class(first_image, LAZY_CLASS)
        return
    style = (first_slide.get("style") or "").lower()
    if "background-image" in style and "background-image: none" not in style:
        first_slide["data-preload-bg"] = "true"


def lazy_load_slides(container: Tag) -> None:
    for slide in _slides(container):
        for img in slide.find_all("img"):
            if img.get("loading") == "eager":
                continue
            img["loading"] = "lazy"
            if not img.get("fetchpriority"):
                img["fetchpriority"] = "low"


def _append_style(tag: Tag, declaration: str) -> None:
    existing = (tag.get("style") or "").strip()
    if existing:
        tag["style"] = f"{existing.rstrip(';')}; {declaration}"
    else:
        tag["style"] = declaration


def ensure_fixed_height(root: Tag, container: Tag) -> None:
    """Reserve vertical space so the page does not shift when the carousel initialises."""
    root_style = root.get("style") or ""
    container_style = container.get("style") or ""
    if "height" in root_style or "height" in container_style:
        return
    _append_style(container, f"height: {DEFAULT_HEIGHT};")
    _append_style(root, f"height: {DEFAULT_HEIGHT};")


def _is_carousel_root(tag: Tag) -> bool:
    classes = class_list(tag)
    if ROOT_CLASS in classes:
        return True
    return CONTAINER_CLASS in classes and any(name in classes for name in GALLERY_CLASSES)


def _gallery_class(tag: Tag) -> Optional[str]:
    for name in class_list(tag):
        if name in GALLERY_CLASSES:
            return name
    return None


def process_carousels(soup: BeautifulSoup) -> CarouselResult:
    """Classify every carousel in document order and build its init script.

    The first carousel on the page is treated as above the fold; its first
    slide is loaded eagerly. Later carousels are lazy-loaded and initialise
    when they approach the viewport.
    """
    result = CarouselResult()
    index = 0

    for element in soup.find_all(_is_carousel_root):
        try:
            if has_class(element, ROOT_CLASS):
                script = _process_standard(element, index)
            else:
                script = _process_gallery(element, index)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to process carousel %d; leaving it as authored", index)
            continue
        if script is None:
            continue
        if index == 0 and script.is_above_fold:
            result.has_above_fold_carousel = True
        result.scripts.append(script)
        index += 1

    if result.scripts:
        logger.debug("Prepared %d carousel script(s)", result.count)
    return result


def _process_standard(root: Tag, index: int) -> Optional[CarouselScript]:
    container = root.find(class_=CONTAINER_CLASS)
    if container is None:
        logger.warning("Carousel root %d has no .%s container; skipping", index, CONTAINER_CLASS)
        return None

    config = read_carousel_config(root)
    is_above_fold = index == 0
    if is_above_fold:
        optimize_first_slide(container)
    else:
        lazy_load_slides(container)
    ensure_fixed_height(root, container)

    container["data-swiper-index"] = str(index)
    container["data-swiper-priority"] = "high" if is_above_fold else "low"

    selector = f'.swiper[data-swiper-index="{index}"]'
    return CarouselScript(
        index=index,
        content=render_standard_script(selector, config, is_above_fold),
        is_above_fold=is_above_fold,
        type="standard",
    )


def _process_gallery(main: Tag, index: int) -> Optional[CarouselScript]:
    detail = closest(main, lambda tag: tag.get(COMPONENT_ATTR) in DETAIL_COMPONENTS)
    if detail is None:
        logger.warning("Gallery carousel %d is not inside a detail component; skipping", index)
        return None

    main_class = _gallery_class(main)
    thumbs_class = GALLERY_CLASSES[main_class]
    thumbs = detail.find(
        lambda tag: tag is not main and has_class(tag, CONTAINER_CLASS) and has_class(tag, thumbs_class)
    )

    is_above_fold = index == 0 or main.get("data-swiper-priority") == "high"
    for gallery in (main, thumbs):
        if gallery is None:
            continue
        if is_above_fold:
            optimize_first_slide(gallery)
        else:
            lazy_load_slides(gallery)

    priority = "high" if is_above_fold else "low"
    main["data-swiper-index"] = str(index)
    main["data-swiper-priority"] = priority
    thumb_selector = None
    if thumbs is not None:
        thumbs["data-swiper-index"] = f"{index}-thumbs"
        thumbs["data-swiper-priority"] = priority
        thumb_selector = f'.{thumbs_class}[data-swiper-index="{index}-thumbs"]'

    main_selector = f'.{main_class}[data-swiper-index="{index}"]'
    return CarouselScript(
        index=index,
        content=render_gallery_script(main_selector, thumb_selector, is_above_fold),
        is_above_fold=is_above_fold,
        type="product-detail" if main_class == "pd-gallery-main" else "blog-detail",
    )


# Client-side programs. These are shipped as text and run in the browser once
# the Swiper runtime has loaded; nothing here is evaluated server-side.

_STANDARD_SCRIPT = Template(
    """
(function() {
  function $init_name() {
    var swiperEl = document.querySelector('$selector');
    if (!swiperEl || swiperEl.__swiper_initialized) return;
    if (typeof Swiper === 'undefined') {
      console.warn('Swiper library not loaded yet');
      return;
    }
    var pagination = swiperEl.querySelector('.$pagination_class');
    var nextBtn = swiperEl.querySelector('.$next_class');
    var prevBtn = swiperEl.querySelector('.$prev_class');
    var config = $options;
    if (pagination) {
      config.pagination = { el: pagination, clickable: true };
    }
    if (nextBtn && prevBtn) {
      config.navigation = { nextEl: nextBtn, prevEl: prevBtn };
    }
    if (swiperEl.parentElement && swiperEl.parentElement.closest('.$container_class')) {
      config.nested = true;
    }
    try {
      var instance = new Swiper(swiperEl, config);
      swiperEl.__swiper_initialized = true;
      swiperEl.__swiper_instance = instance;
    } catch (error) {
      console.error('Swiper initialization failed:', error);
    }
  }
$trigger
})();
"""
)

_GALLERY_SCRIPT = Template(
    """
(function() {
  function $init_name() {
    var mainEl = document.querySelector('$main_selector');
    if (!mainEl || mainEl.__swiper_initialized) return;
    if (typeof Swiper === 'undefined') {
      console.warn('Swiper library not loaded yet');
      return;
    }
    var thumbsSwiper = null;
$thumbs_block
    try {
      var mainConfig = {
        loop: true,
        spaceBetween: 10,
        navigation: {
          nextEl: mainEl.querySelector('.$next_class'),
          prevEl: mainEl.querySelector('.$prev_class')
        },
        pagination: {
          el: mainEl.querySelector('.$pagination_class'),
          clickable: true
        }
      };
      if (thumbsSwiper) {
        mainConfig.thumbs = { swiper: thumbsSwiper };
      }
      var mainSwiper = new Swiper(mainEl, mainConfig);
      mainEl.__swiper_initialized = true;
      mainEl.__swiper_instance = mainSwiper;
    } catch (error) {
      console.error('Gallery carousel initialization failed:', error);
    }
  }
$trigger
})();
"""
)

_THUMBS_BLOCK = Template(
    """    var thumbEl = document.querySelector('$thumb_selector');
    if (thumbEl && !thumbEl.__swiper_initialized) {
      try {
        thumbsSwiper = new Swiper(thumbEl, {
          spaceBetween: 10,
          slidesPerView: 4,
          freeMode: true,
          watchSlidesProgress: true,
          breakpoints: {
            640: { slidesPerView: 5 },
            768: { slidesPerView: 6 },
            1024: { slidesPerView: 7 }
          }
        });
        thumbEl.__swiper_initialized = true;
        thumbEl.__swiper_instance = thumbsSwiper;
      } catch (error) {
        console.error('Gallery thumbnails initialization failed:', error);
      }
    }"""
)

_READY_TRIGGER = Template(
    """  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', $init_name);
  } else {
    $init_name();
  }"""
)

_OBSERVER_TRIGGER = Template(
    """  if ('IntersectionObserver' in window) {
    var target = document.querySelector('$selector');
    if (target) {
      var observer = new IntersectionObserver(function(entries) {
        entries.forEach(function(entry) {
          if (entry.isIntersecting) {
            $init_name();
            observer.disconnect();
          }
        });
      }, { rootMargin: '$root_margin' });
      observer.observe(target);
    }
  } else if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', $init_name);
  } else {
    $init_name();
  }"""
)


def _trigger(init_name: str, selector: str, is_above_fold: bool) -> str:
    if is_above_fold:
        return _READY_TRIGGER.substitute(init_name=init_name)
    return _OBSERVER_TRIGGER.substitute(
        init_name=init_name, selector=selector, root_margin=LAZY_ROOT_MARGIN
    )


def carousel_options(config: CarouselConfig) -> dict:
    options = {
        "loop": config.loop,
        "effect": config.effect,
        "speed": config.speed,
        "slidesPerView": config.slides_per_view,
        "spaceBetween": config.space_between,
        "centeredSlides": config.centered_slides,
    }
    if config.autoplay:
        options["autoplay"] = {"delay": config.delay, "disableOnInteraction": False}
    return options


def render_standard_script(selector: str, config: CarouselConfig, is_above_fold: bool) -> str:
    init_name = "initSwiperImmediate" if is_above_fold else "initSwiperLazy"
    options = json.dumps(carousel_options(config), indent=2).replace("\n", "\n    ")
    return _STANDARD_SCRIPT.substitute(
        init_name=init_name,
        selector=selector,
        pagination_class=PAGINATION_CLASS,
        next_class=BUTTON_NEXT_CLASS,
        prev_class=BUTTON_PREV_CLASS,
        container_class=CONTAINER_CLASS,
        options=options,
        trigger=_trigger(init_name, selector, is_above_fold),
    ).strip()


def render_gallery_script(main_selector: str, thumb_selector: Optional[str], is_above_fold: bool) -> str:
    init_name = "initGallerySwiperImmediate" if is_above_fold else "initGallerySwiperLazy"
    thumbs_block = _THUMBS_BLOCK.substitute(thumb_selector=thumb_selector) if thumb_selector else ""
    return _GALLERY_SCRIPT.substitute(
        init_name=init_name,
        main_selector=main_selector,
        thumbs_block=thumbs_block,
        next_class=BUTTON_NEXT_CLASS,
        prev_class=BUTTON_PREV_CLASS,
        pagination_class=PAGINATION_CLASS,
        trigger=_trigger(init_name, main_selector, is_above_fold),
    ).strip()
