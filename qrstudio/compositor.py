"""Compositor — quiet zone, background fill, symbol blit and visibility border."""

from dataclasses import dataclass
from typing import Callable

from PIL import Image, ImageDraw

from qrstudio.color import border_color
from qrstudio.config import RenderConfig
from qrstudio.generator import encode_symbol
from qrstudio.logging import audit, get_logger, trace

log = get_logger("compositor")

Encoder = Callable[..., Image.Image]


@dataclass(frozen=True)
class ComposedSurface:
    """A finished, owned pixel surface.

    The underlying image is never handed out directly; image() returns a
    copy so the surface stays unchanged until the next render replaces it.
    """

    _image: Image.Image
    config: RenderConfig
    symbol_size: tuple[int, int]

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def width(self) -> int:
        return self._image.size[0]

    @property
    def height(self) -> int:
        return self._image.size[1]

    def getpixel(self, xy: tuple[int, int]) -> tuple[int, int, int]:
        return self._image.getpixel(xy)

    def image(self) -> Image.Image:
        return self._image.copy()


@trace
def compose(symbol: Image.Image, config: RenderConfig) -> ComposedSurface:
    """Build the visible surface around a bare symbol.

    1. Output is the symbol grown by quiet_zone on every side.
    2. The whole canvas is filled with the background colour; that fill is the
       quiet zone.
    3. The symbol is pasted at (quiet_zone, quiet_zone) pixel for pixel.
    4. A 1px outline is drawn on the outermost pixel ring, dark on light
       backgrounds and light on dark ones.
    """
    q = config.quiet_zone
    sw, sh = symbol.size
    out_w, out_h = sw + 2 * q, sh + 2 * q

    canvas = Image.new("RGB", (out_w, out_h), config.background.as_tuple())
    # paste copies pixels as-is, no resampling
    canvas.paste(symbol.convert("RGB"), (q, q))

    stroke = border_color(config.background)
    draw = ImageDraw.Draw(canvas)
    draw.rectangle([0, 0, out_w - 1, out_h - 1], outline=stroke.as_tuple(), width=1)

    audit("surface.composed", logger=log,
          symbol_px=f"{sw}x{sh}", surface_px=f"{out_w}x{out_h}",
          quiet_zone=q, border=stroke.to_hex())
    return ComposedSurface(_image=canvas, config=config, symbol_size=(sw, sh))


def render(config: RenderConfig, encoder: Encoder = encode_symbol) -> ComposedSurface:
    """Encode the configured content and compose it in one step."""
    symbol = encoder(
        config.encoder_text,
        config.ecc,
        foreground=config.foreground,
        background=config.background,
        module_size=config.module_size,
        width=config.width,
    )
    return compose(symbol, config)
