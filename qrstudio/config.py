"""Render configuration — the validated boundary for every user-settable knob."""

from dataclasses import dataclass, field, fields, replace as dc_replace

from qrstudio.color import RGBColor, parse_color
from qrstudio.errors import ConfigError
from qrstudio.generator import ECCLevel

MIN_MODULE_SIZE = 1
MIN_WIDTH = 21  # one pixel per module of a version 1 symbol

DEFAULT_FOREGROUND = RGBColor.from_hex("#0f172a")
DEFAULT_BACKGROUND = RGBColor.from_hex("#ffffff")


def _check_int(name: str, value, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class RenderConfig:
    """Immutable snapshot of everything a render depends on.

    Mutations go through replace(), which re-validates and returns a new
    snapshot, so a config handed to a render can never change under it.
    """

    content: str = ""
    module_size: int = 8
    quiet_zone: int = 16
    ecc: ECCLevel = ECCLevel.M
    foreground: RGBColor = field(default=DEFAULT_FOREGROUND)
    background: RGBColor = field(default=DEFAULT_BACKGROUND)
    width: int | None = None

    def __post_init__(self):
        if not isinstance(self.content, str):
            raise ConfigError(f"content must be text, got {type(self.content).__name__}")
        _check_int("module_size", self.module_size, MIN_MODULE_SIZE)
        _check_int("quiet_zone", self.quiet_zone, 0)
        if self.width is not None:
            _check_int("width", self.width, MIN_WIDTH)
        # frozen: coerced values are written through object.__setattr__
        object.__setattr__(self, "ecc", ECCLevel.parse(self.ecc))
        object.__setattr__(self, "foreground", parse_color(self.foreground))
        object.__setattr__(self, "background", parse_color(self.background))

    @property
    def encoder_text(self) -> str:
        """Content handed to the encoder; empty content becomes a single space."""
        return self.content or " "

    def replace(self, **changes) -> "RenderConfig":
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise ConfigError(f"Unknown config field(s): {', '.join(sorted(unknown))}")
        return dc_replace(self, **changes)

    @classmethod
    def from_mapping(cls, values: dict) -> "RenderConfig":
        """Build from external key/values; None means "use the default"."""
        return cls().replace(**{k: v for k, v in values.items() if v is not None})

    def describe(self) -> dict:
        return {
            "chars": len(self.content),
            "module_size": self.module_size,
            "quiet_zone": self.quiet_zone,
            "ecc": self.ecc.name,
            "fg": self.foreground.to_hex(),
            "bg": self.background.to_hex(),
            "width": self.width,
        }


_FIELD_NAMES = {f.name for f in fields(RenderConfig)}
