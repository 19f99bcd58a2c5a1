"""Exporter — PNG bytes and a single-page A4 PDF of a composed surface."""

import io
import time
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from qrstudio.compositor import ComposedSurface
from qrstudio.errors import ExportWithoutSurface
from qrstudio.logging import audit, get_logger, trace

log = get_logger("exporter")

MIME_TYPES = {
    "png": "image/png",
    "pdf": "application/pdf",
}

# ─── PDF layout (A4, measured from the top-left corner) ─────────────────────

PAGE_WIDTH, PAGE_HEIGHT = A4

IMAGE_X = 24 * mm
IMAGE_Y = 28 * mm
IMAGE_SIZE = 58 * mm

TEXT_GAP = 6 * mm
TEXT_WIDTH = 120 * mm
FONT_NAME = "Helvetica"
FONT_SIZE = 10
LINE_HEIGHT = FONT_SIZE * 1.15


def _require(surface: ComposedSurface | None) -> ComposedSurface:
    if surface is None:
        raise ExportWithoutSurface()
    return surface


@trace
def to_png(surface: ComposedSurface | None) -> bytes:
    """Lossless PNG encoding of the surface, pixel for pixel."""
    surface = _require(surface)
    buf = io.BytesIO()
    surface.image().save(buf, format="PNG")
    data = buf.getvalue()
    audit("export.png", logger=log, surface_px=f"{surface.width}x{surface.height}", bytes=len(data))
    return data


def wrap_text(text: str, width: float = TEXT_WIDTH) -> list[str]:
    """Split text into lines no wider than width points in the PDF font."""
    return simpleSplit(text, FONT_NAME, FONT_SIZE, width)


@trace
def to_pdf(surface: ComposedSurface | None, text: str) -> bytes:
    """One A4 page: the code at 24mm/28mm, 58mm square, wrapped text below it."""
    surface = _require(surface)
    buf = io.BytesIO()
    # invariant output: same inputs give the same bytes
    pdf = canvas.Canvas(buf, pagesize=A4, invariant=1)
    pdf.setTitle("QR code")

    # reportlab's origin is bottom-left
    image_bottom = PAGE_HEIGHT - IMAGE_Y - IMAGE_SIZE
    pdf.drawImage(ImageReader(surface.image()), IMAGE_X, image_bottom,
                  width=IMAGE_SIZE, height=IMAGE_SIZE)

    lines = wrap_text(text)
    if lines:
        body = pdf.beginText(IMAGE_X, image_bottom - TEXT_GAP)
        body.setFont(FONT_NAME, FONT_SIZE)
        body.setLeading(LINE_HEIGHT)
        for line in lines:
            body.textLine(line)
        pdf.drawText(body)

    pdf.showPage()
    pdf.save()
    data = buf.getvalue()
    audit("export.pdf", logger=log, lines=len(lines), bytes=len(data))
    return data


def export_filename(kind: str, now: float | None = None) -> str:
    """Timestamp-derived file name, e.g. 'qr-1760000000000.png'."""
    if kind not in MIME_TYPES:
        raise ValueError(f"Unknown export format {kind!r}")
    stamp = int((time.time() if now is None else now) * 1000)
    return f"qr-{stamp}.{kind}"


def save(surface: ComposedSurface | None, text: str, kind: str = "png",
         directory: str | Path = ".", filename: str | None = None) -> Path:
    """Write an export to disk and return its path."""
    if kind not in MIME_TYPES:
        raise ValueError(f"Unknown export format {kind!r}")
    data = to_png(surface) if kind == "png" else to_pdf(surface, text)
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (filename or export_filename(kind))
    path.write_bytes(data)
    audit("export.saved", logger=log, path=str(path), mime=MIME_TYPES[kind], bytes=len(data))
    return path
