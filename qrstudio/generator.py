"""Symbol encoder — turns text into a bare QR symbol image (no quiet zone)."""

from enum import Enum

import qrcode
import qrcode.constants
import qrcode.exceptions
from PIL import Image

from qrstudio.color import BLACK, WHITE, RGBColor
from qrstudio.errors import ConfigError, EncodingCapacityExceeded
from qrstudio.logging import audit, get_logger, trace

log = get_logger("generator")


class ECCLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%

    @classmethod
    def parse(cls, value: "ECCLevel | str") -> "ECCLevel":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ConfigError(f"Unknown error correction level {value!r} (expected L, M, Q or H)")


def _build(text: str, ecc: ECCLevel, box_size: int = 1) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=ecc.value,
        box_size=box_size,
        border=0,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except qrcode.exceptions.DataOverflowError as e:
        raise EncodingCapacityExceeded(len(text), ecc.name) from e
    return qr


def symbol_version(text: str, ecc: "ECCLevel | str" = "M") -> int:
    """QR version (1-40) the encoder picks for this content."""
    return _build(text, ECCLevel.parse(ecc)).version


@trace
def encode_symbol(
    text: str,
    ecc: "ECCLevel | str" = "M",
    foreground: RGBColor = BLACK,
    background: RGBColor = WHITE,
    module_size: int = 8,
    width: int | None = None,
) -> Image.Image:
    """Encode text into a bare QR symbol.

    Args:
        text: Content to encode. Must be non-empty; callers substitute " ".
        ecc: Error correction level L/M/Q/H.
        foreground: Dark module colour.
        background: Light module colour.
        module_size: Pixels per module.
        width: If set, rescale the symbol to width x width pixels
               (nearest-neighbour, modules stay hard-edged). Ignored when
               smaller than the module count.

    Returns:
        RGB image of the symbol with no quiet zone.

    Raises:
        EncodingCapacityExceeded: text does not fit any version at this level.
    """
    level = ECCLevel.parse(ecc)
    qr = _build(text, level, box_size=module_size)
    img = qr.make_image(
        fill_color=foreground.to_hex(),
        back_color=background.to_hex(),
    ).convert("RGB")

    size = qr.version * 4 + 17
    if width is not None and width < size:
        # at least one pixel per module, otherwise keep module_size
        log.warning("width %d below %d modules, keeping module size %d", width, size, module_size)
    elif width is not None and img.size != (width, width):
        img = img.resize((width, width), Image.NEAREST)

    audit("symbol.encoded", logger=log,
          chars=len(text), version=qr.version, modules=f"{size}x{size}",
          ecc=level.name, image_px=f"{img.size[0]}x{img.size[1]}")
    return img
