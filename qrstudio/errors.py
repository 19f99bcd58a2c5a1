"""Exception hierarchy for the render/composite/export pipeline."""


class QRStudioError(Exception):
    """Base class for all qrstudio errors."""


class ConfigError(QRStudioError, ValueError):
    """A configuration value is out of range or of the wrong type."""


class InvalidColorFormat(ConfigError):
    """Colour text is not a 3- or 6-digit hex colour."""

    def __init__(self, value: object, reason: str = "expected #rgb or #rrggbb"):
        self.value = value
        super().__init__(f"Invalid colour {value!r}: {reason}")


class RenderError(QRStudioError):
    """A render could not produce a surface. The controller recovers from these."""


class EncodingCapacityExceeded(RenderError):
    """Content does not fit in any QR version at the selected error-correction level."""

    def __init__(self, length: int, ecc: str):
        self.length = length
        self.ecc = ecc
        super().__init__(
            f"Content too long for a QR code at error correction {ecc} "
            f"({length} chars); shorten it or pick a lower level"
        )


class ExportWithoutSurface(QRStudioError):
    """Export requested before any successful render."""

    def __init__(self, message: str = "Nothing to export: no QR code has been rendered yet"):
        super().__init__(message)
