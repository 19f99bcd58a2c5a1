"""Tests for the compositor: quiet zone, fill, blit and border."""

import pytest
from PIL import Image

from qrstudio.color import BORDER_DARK, BORDER_LIGHT, RGBColor
from qrstudio.compositor import ComposedSurface, compose, render
from qrstudio.config import RenderConfig

DARK = RGBColor(20, 20, 20)
LIGHT = RGBColor(250, 250, 250)


def _checker(width: int, height: int) -> Image.Image:
    """Symbol stand-in with a 2px checkerboard so blits are easy to verify."""
    img = Image.new("RGB", (width, height), LIGHT.as_tuple())
    for y in range(height):
        for x in range(width):
            if (x // 2 + y // 2) % 2 == 0:
                img.putpixel((x, y), DARK.as_tuple())
    return img


class TestDimensions:
    @pytest.mark.parametrize("q", [0, 8, 16, 64])
    def test_output_grows_by_twice_the_quiet_zone(self, q):
        surface = compose(_checker(40, 30), RenderConfig(quiet_zone=q))
        assert surface.size == (40 + 2 * q, 30 + 2 * q)
        assert surface.symbol_size == (40, 30)

    def test_zero_quiet_zone_keeps_symbol_size(self):
        surface = compose(_checker(33, 33), RenderConfig(quiet_zone=0, background=LIGHT))
        assert surface.size == (33, 33)


class TestPixels:
    def test_quiet_zone_is_background(self):
        bg = RGBColor(200, 220, 255)
        surface = compose(_checker(20, 20), RenderConfig(quiet_zone=10, background=bg))
        # inside the border ring, outside the symbol
        for xy in [(1, 1), (5, 15), (15, 5), (38, 38), (29, 2)]:
            assert surface.getpixel(xy) == bg.as_tuple()

    def test_symbol_pixels_copied_exactly(self):
        symbol = _checker(24, 24)
        q = 7
        surface = compose(symbol, RenderConfig(quiet_zone=q))
        for y in range(24):
            for x in range(24):
                assert surface.getpixel((x + q, y + q)) == symbol.getpixel((x, y))

    def test_border_dark_on_light_background(self):
        surface = compose(_checker(10, 10), RenderConfig(quiet_zone=4, background="#ffffff"))
        w, h = surface.size
        for xy in [(0, 0), (w - 1, 0), (0, h - 1), (w - 1, h - 1), (w // 2, 0), (0, h // 2)]:
            assert surface.getpixel(xy) == BORDER_DARK.as_tuple()
        assert surface.getpixel((1, 1)) == (255, 255, 255)

    def test_border_light_on_dark_background(self):
        surface = compose(_checker(10, 10), RenderConfig(quiet_zone=4, background="#111827"))
        w, h = surface.size
        assert surface.getpixel((w - 1, h // 2)) == BORDER_LIGHT.as_tuple()
        assert surface.getpixel((1, 1)) == RGBColor.from_hex("#111827").as_tuple()

    def test_border_flush_with_symbol_when_no_quiet_zone(self):
        symbol = _checker(12, 12)
        surface = compose(symbol, RenderConfig(quiet_zone=0, background="#ffffff"))
        assert surface.getpixel((0, 5)) == BORDER_DARK.as_tuple()
        assert surface.getpixel((11, 11)) == BORDER_DARK.as_tuple()
        # interior untouched
        assert surface.getpixel((5, 5)) == symbol.getpixel((5, 5))


class TestSurfaceOwnership:
    def test_image_returns_copy(self):
        surface = compose(_checker(10, 10), RenderConfig(quiet_zone=2))
        img = surface.image()
        img.putpixel((3, 3), (1, 2, 3))
        assert surface.getpixel((3, 3)) != (1, 2, 3)

    def test_surface_is_frozen(self):
        surface = compose(_checker(10, 10), RenderConfig(quiet_zone=2))
        with pytest.raises(AttributeError):
            surface.config = RenderConfig()

    def test_each_compose_is_fresh(self):
        symbol = _checker(10, 10)
        a = compose(symbol, RenderConfig(quiet_zone=2))
        b = compose(symbol, RenderConfig(quiet_zone=2))
        assert a is not b
        assert a.image().tobytes() == b.image().tobytes()


class TestRender:
    def test_render_uses_config(self, encoder):
        cfg = RenderConfig(content="", module_size=2, quiet_zone=5)
        surface = render(cfg, encoder=encoder)
        assert isinstance(surface, ComposedSurface)
        assert encoder.calls == [" "]
        assert surface.size == (21 * 2 + 10, 21 * 2 + 10)
        assert surface.config is cfg

    def test_render_with_real_encoder(self):
        surface = render(RenderConfig(content="hi", module_size=2, quiet_zone=8))
        side = 21 * 2 + 16
        assert surface.size == (side, side)
