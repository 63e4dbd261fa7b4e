"""
Unit Tests for Carousel Processing

Tests for fold classification, slide loading hints, layout guards and
init-script generation.
"""

from page_render.carousel import process_carousels, read_carousel_config
from page_render.dom import class_list, parse_html


def _gallery(component="product-detail", main_attrs=""):
    return (
        f'<div data-component-type="{component}"><div class="pd-gallery">'
        f'<div class="swiper pd-gallery-main"{main_attrs}><div class="swiper-wrapper">'
        '<div class="swiper-slide"><img src="/g1.jpg"></div>'
        '<div class="swiper-slide"><img src="/g2.jpg"></div>'
        "</div></div>"
        '<div class="swiper pd-gallery-thumbs"><div class="swiper-wrapper">'
        '<div class="swiper-slide"><img src="/g1.jpg"></div>'
        "</div></div></div></div>"
    )


class TestFoldClassification:
    """Tests for above/below-the-fold decisions."""

    def test_process_when_two_carousels_then_only_first_above_fold(self, carousel_html):
        """The first carousel in document order is above the fold."""
        soup = parse_html(carousel_html() + "<p>copy</p>" + carousel_html())

        result = process_carousels(soup)

        assert result.count == 2
        assert result.has_carousels is True
        assert [script.is_above_fold for script in result.scripts] == [True, False]
        assert [script.priority for script in result.scripts] == ["high", "low"]
        assert result.has_above_fold_carousel is True

    def test_process_when_first_carousel_then_first_slide_eager(self, carousel_html):
        """The first slide image loads eagerly and loses the lazy class."""
        soup = parse_html(carousel_html())

        process_carousels(soup)

        first = soup.find("img")
        assert first["loading"] == "eager"
        assert first["fetchpriority"] == "high"
        assert "swiper-lazy" not in class_list(first)

    def test_process_when_second_carousel_then_slides_lazy_low(self, carousel_html):
        """Below-the-fold slide images are lazy with low priority."""
        soup = parse_html(carousel_html() + carousel_html())

        process_carousels(soup)

        second_root = soup.find_all(class_="gjs-swiper-root")[1]
        for img in second_root.find_all("img"):
            assert img["loading"] == "lazy"
            assert img["fetchpriority"] == "low"

    def test_process_when_below_fold_image_has_priority_then_kept(self, soup_of):
        """An existing fetchpriority is not overwritten."""
        html = (
            '<div class="gjs-swiper-root"><div class="swiper"><div class="swiper-slide"><img src="/a.jpg"></div></div></div>'
            '<div class="gjs-swiper-root"><div class="swiper"><div class="swiper-slide">'
            '<img src="/b.jpg" fetchpriority="auto"></div></div></div>'
        )
        soup = soup_of(html)

        process_carousels(soup)

        assert soup.find("img", src="/b.jpg")["fetchpriority"] == "auto"

    def test_process_when_background_slide_then_flagged_for_preload(self, soup_of):
        """A first slide painted with background-image is marked for the caller."""
        soup = soup_of(
            '<div class="gjs-swiper-root"><div class="swiper">'
            '<div class="swiper-slide" style="background-image: url(/bg.jpg)"></div></div></div>'
        )

        process_carousels(soup)

        assert soup.find(class_="swiper-slide")["data-preload-bg"] == "true"

    def test_process_when_root_lacks_container_then_skipped_without_index(self, carousel_html, soup_of):
        """A malformed root is skipped and does not consume an index."""
        soup = soup_of('<div class="gjs-swiper-root"><p>empty</p></div>' + carousel_html())

        result = process_carousels(soup)

        assert result.count == 1
        assert result.scripts[0].index == 0
        assert result.scripts[0].is_above_fold is True
        assert soup.find(class_="swiper")["data-swiper-index"] == "0"


class TestLayoutGuard:
    """Tests for the fixed-height guard."""

    def test_process_when_no_height_then_70vh_appended(self, carousel_html):
        """Root and container both get a default height."""
        soup = parse_html(carousel_html(root_attrs=' style="color: red"'))

        process_carousels(soup)

        assert soup.find(class_="gjs-swiper-root")["style"] == "color: red; height: 70vh;"
        assert soup.find(class_="swiper")["style"] == "height: 70vh;"

    def test_process_when_height_present_then_styles_untouched(self, carousel_html):
        """An authored height on the root suppresses the guard."""
        soup = parse_html(carousel_html(root_attrs=' style="height: 400px"'))

        process_carousels(soup)

        assert soup.find(class_="gjs-swiper-root")["style"] == "height: 400px"
        assert not soup.find(class_="swiper").has_attr("style")


class TestInitScripts:
    """Tests for generated client-side programs."""

    def test_script_when_above_fold_then_initialises_on_ready(self, carousel_html):
        """Above-the-fold carousels start on DOM ready."""
        result = process_carousels(parse_html(carousel_html()))

        content = result.scripts[0].content
        assert '.swiper[data-swiper-index="0"]' in content
        assert "__swiper_initialized" in content
        assert "DOMContentLoaded" in content
        assert "IntersectionObserver" not in content

    def test_script_when_below_fold_then_uses_observer_with_margin(self, carousel_html):
        """Below-the-fold carousels wait for the viewport."""
        result = process_carousels(parse_html(carousel_html() + carousel_html()))

        content = result.scripts[1].content
        assert "IntersectionObserver" in content
        assert "rootMargin: '200px'" in content

    def test_script_when_autoplay_disabled_then_no_autoplay_option(self, carousel_html):
        """Carousel options follow the root data attributes."""
        result = process_carousels(parse_html(carousel_html(root_attrs=' data-autoplay="false" data-effect="fade"')))

        content = result.scripts[0].content
        assert '"effect": "fade"' in content
        assert "autoplay" not in content


class TestCarouselConfig:
    """Tests for read_carousel_config()."""

    def test_config_when_no_attributes_then_defaults(self, carousel_html):
        """Defaults apply when nothing is authored."""
        config = read_carousel_config(parse_html(carousel_html()).find(class_="gjs-swiper-root"))
        assert config.loop is True
        assert config.autoplay is True
        assert config.delay == 2500
        assert config.speed == 300
        assert config.effect == "slide"

    def test_config_when_invalid_values_then_falls_back(self, soup_of):
        """Booleans must be literally "true"; bad numbers use defaults."""
        root = soup_of(
            '<div class="gjs-swiper-root" data-loop="yes" data-delay="soon" data-speed="600"></div>'
        ).div
        config = read_carousel_config(root)
        assert config.loop is False
        assert config.delay == 2500
        assert config.speed == 600


class TestDetailGallery:
    """Tests for main + thumbnail gallery carousels."""

    def test_gallery_when_after_standard_carousel_then_below_fold_with_thumbs(self, carousel_html):
        """Gallery indices follow document order and thumbs share the index."""
        soup = parse_html(carousel_html() + _gallery())

        result = process_carousels(soup)

        gallery = result.scripts[1]
        assert gallery.type == "product-detail"
        assert gallery.is_above_fold is False
        assert soup.find(class_="pd-gallery-main")["data-swiper-index"] == "1"
        assert soup.find(class_="pd-gallery-thumbs")["data-swiper-index"] == "1-thumbs"
        assert "mainConfig.thumbs = { swiper: thumbsSwiper }" in gallery.content

    def test_gallery_when_priority_high_then_above_fold(self, carousel_html):
        """data-swiper-priority="high" keeps a later gallery above the fold."""
        soup = parse_html(carousel_html() + _gallery(main_attrs=' data-swiper-priority="high"'))

        result = process_carousels(soup)

        assert result.scripts[1].is_above_fold is True
        assert soup.find("img", src="/g1.jpg")["loading"] == "eager"

    def test_gallery_when_outside_detail_component_then_skipped(self):
        """Galleries only count inside product or blog detail components."""
        soup = parse_html(_gallery(component="product-list-page"))

        result = process_carousels(soup)

        assert result.count == 0
        assert result.has_carousels is False

    def test_config_when_number_has_unit_suffix_then_leading_digits_used(self, soup_of):
        """Values such as "3000ms" keep their leading number."""
        root = soup_of('<div class="gjs-swiper-root" data-delay="3000ms" data-slides-per-view="1.5x"></div>').div
        config = read_carousel_config(root)
        assert config.delay == 3000
        assert config.slides_per_view == 1.5

    def test_config_when_number_not_finite_then_default(self, soup_of):
        """Infinite or overflowing values fall back to the defaults."""
        root = soup_of(
            '<div class="gjs-swiper-root" data-delay="Infinity" data-slides-per-view="1e999"></div>'
        ).div
        config = read_carousel_config(root)
        assert config.delay == 2500
        assert config.slides_per_view == 1

    def test_process_when_delay_infinite_then_carousel_still_processed(self, carousel_html):
        """A bad authored number does not stop the carousel pass."""
        soup = parse_html(carousel_html(root_attrs=' data-delay="Infinity"'))

        result = process_carousels(soup)

        assert result.count == 1
        assert '"delay": 2500' in result.scripts[0].content
