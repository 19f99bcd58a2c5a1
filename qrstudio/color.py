"""Colour model — sRGB parsing, relative luminance and WCAG contrast checks.

The 4.5:1 threshold is the WCAG "normal text" level. It is used here as a
scan-reliability heuristic for foreground/background pairs, not as an
accessibility guarantee.
"""

import re
from dataclasses import dataclass

from qrstudio.errors import InvalidColorFormat
from qrstudio.logging import get_logger

log = get_logger("color")

CONTRAST_THRESHOLD = 4.5

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class RGBColor:
    """An sRGB colour with 8-bit channels."""

    r: int
    g: int
    b: int

    def __post_init__(self):
        for name in ("r", "g", "b"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 255:
                raise InvalidColorFormat((self.r, self.g, self.b), f"channel {name}={v!r} outside 0-255")

    @classmethod
    def from_hex(cls, text: str) -> "RGBColor":
        """Parse '#rgb', 'rgb', '#rrggbb' or 'rrggbb'.

        The 3-digit form is channel-doubled ('#0af' -> '#00aaff').
        """
        if not isinstance(text, str):
            raise InvalidColorFormat(text, "not a string")
        m = _HEX_RE.match(text.strip())
        if m is None:
            raise InvalidColorFormat(text)
        digits = m.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return cls(*(int(digits[i : i + 2], 16) for i in (0, 2, 4)))

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def __str__(self) -> str:
        return self.to_hex()


BLACK = RGBColor(0, 0, 0)
WHITE = RGBColor(255, 255, 255)
BORDER_DARK = RGBColor.from_hex("#0f172a")
BORDER_LIGHT = RGBColor.from_hex("#e2e8f0")


def parse_color(value: "RGBColor | str | tuple[int, int, int]") -> RGBColor:
    """Validate a colour from any accepted external form.

    Raises InvalidColorFormat instead of guessing.
    """
    if isinstance(value, RGBColor):
        return value
    if isinstance(value, str):
        return RGBColor.from_hex(value)
    if isinstance(value, (tuple, list)) and len(value) == 3:
        return RGBColor(*value)
    raise InvalidColorFormat(value, "expected hex text or an (r, g, b) triple")


# ---------------------------------------------------------------------------
# Luminance & contrast
# ---------------------------------------------------------------------------

def _linearize(channel: int) -> float:
    """Convert an sRGB channel (0-255) to linear light."""
    c = channel / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def luminance(color: RGBColor) -> float:
    """Relative luminance in [0, 1]."""
    r, g, b = (_linearize(ch) for ch in color.as_tuple())
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(a: RGBColor, b: RGBColor) -> float:
    """WCAG contrast ratio between two colours (1.0 - 21.0). Symmetric."""
    l1 = luminance(a)
    l2 = luminance(b)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


@dataclass(frozen=True)
class ContrastResult:
    ratio: float
    passes_threshold: bool

    @property
    def label(self) -> str:
        if self.passes_threshold:
            return f"{self.ratio:.2f} good"
        return f"{self.ratio:.2f} low (may be hard to scan)"


def check_contrast(foreground: RGBColor, background: RGBColor) -> ContrastResult:
    """Compute the contrast between module and background colours."""
    ratio = contrast_ratio(foreground, background)
    result = ContrastResult(ratio=ratio, passes_threshold=ratio >= CONTRAST_THRESHOLD)
    if not result.passes_threshold:
        log.debug("low contrast %s on %s: %.2f:1", foreground, background, ratio)
    return result


def is_light(color: RGBColor) -> bool:
    return luminance(color) > 0.5


def suggest_foreground(background: RGBColor) -> RGBColor:
    """One-step contrast repair: black or white, whichever contrasts more.

    Black wins on light backgrounds and white on dark ones. For mid tones
    (luminance roughly 0.18-0.5) black still gives the higher ratio, so the
    pick is made on the ratios rather than on a fixed luminance cut-off.
    """
    if contrast_ratio(BLACK, background) >= contrast_ratio(WHITE, background):
        return BLACK
    return WHITE


def border_color(background: RGBColor) -> RGBColor:
    """Outline colour that stays visible on the given background."""
    return BORDER_DARK if is_light(background) else BORDER_LIGHT
