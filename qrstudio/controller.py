"""Render controller — keeps a live preview in sync with configuration edits.

States::

    IDLE ──update()──▶ PENDING_RENDER ──debounce elapsed──▶ RENDERING ──▶ RENDERED
      ▲                   │  ▲ update() restarts the timer        │
      │                   │  └────────────────────────────────────┘
      └── generate() from any state goes straight to RENDERING

Every dispatch is stamped with a version number. Config edits also bump the
version, so a render that finishes after a newer edit or a newer dispatch is
discarded instead of replacing a fresher surface.
"""

from enum import Enum
from pathlib import Path
from typing import Callable

from qrstudio.clipboard import copy_text
from qrstudio.color import ContrastResult, RGBColor, check_contrast, suggest_foreground
from qrstudio.compositor import ComposedSurface, Encoder, render
from qrstudio.config import RenderConfig
from qrstudio.errors import RenderError
from qrstudio.exporter import save as save_export, to_pdf, to_png
from qrstudio.generator import encode_symbol
from qrstudio.logging import audit, get_logger
from qrstudio.scheduler import Debouncer, Scheduler

log = get_logger("controller")

DEBOUNCE_SECONDS = 0.18


class RenderState(Enum):
    IDLE = "idle"
    PENDING_RENDER = "pending_render"
    RENDERING = "rendering"
    RENDERED = "rendered"


class RenderController:
    """Owns the current RenderConfig and the most recent ComposedSurface.

    Single-threaded: every method is expected to run on the thread that owns
    the scheduler (e.g. the asyncio loop).
    """

    def __init__(
        self,
        config: RenderConfig | None = None,
        *,
        scheduler: Scheduler,
        encoder: Encoder = encode_symbol,
        auto_render: bool = True,
        debounce_s: float = DEBOUNCE_SECONDS,
        on_rendered: Callable[[ComposedSurface], None] | None = None,
        on_error: Callable[[RenderError], None] | None = None,
        clipboard: Callable[[str], bool] = copy_text,
    ):
        self._config = config or RenderConfig()
        self._encoder = encoder
        self._auto_render = auto_render
        self._debouncer = Debouncer(scheduler, debounce_s, self._on_debounce_elapsed)
        self._on_rendered = on_rendered
        self._on_error = on_error
        self._clipboard = clipboard

        self._version = 0
        self._surface: ComposedSurface | None = None
        self.state = RenderState.IDLE
        self.last_error: RenderError | None = None
        self.render_count = 0

    # -- read-only views ----------------------------------------------------

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def surface(self) -> ComposedSurface | None:
        return self._surface

    @property
    def auto_render(self) -> bool:
        return self._auto_render

    @property
    def contrast(self) -> ContrastResult:
        return check_contrast(self._config.foreground, self._config.background)

    # -- inputs -------------------------------------------------------------

    def start(self) -> ComposedSurface | None:
        """Initial render, performed whatever the auto-render setting."""
        audit("controller.start", logger=log, auto_render=self._auto_render, **self._config.describe())
        return self.generate()

    def update(self, **changes) -> RenderConfig:
        """Apply config edits. Invalid values raise before anything changes."""
        new_config = self._config.replace(**changes)
        if new_config == self._config:
            return self._config
        self._config = new_config
        self._version += 1
        if self._auto_render:
            self._schedule()
        return new_config

    def set_auto_render(self, enabled: bool):
        if enabled == self._auto_render:
            return
        self._auto_render = enabled
        if enabled:
            self._schedule()
        else:
            self._debouncer.cancel()
            if self.state is RenderState.PENDING_RENDER:
                self.state = self._resting_state()
        log.info("auto-render %s", "enabled" if enabled else "disabled")

    def fix_contrast(self) -> RGBColor:
        """Swap the foreground for black or white, whichever suits the background."""
        fg = suggest_foreground(self._config.background)
        self.update(foreground=fg)
        return fg

    def generate(self) -> ComposedSurface | None:
        """Render now, bypassing (and cancelling) any pending debounce."""
        self._debouncer.cancel()
        return self._dispatch()

    def close(self):
        self._debouncer.cancel()
        if self.state is RenderState.PENDING_RENDER:
            self.state = self._resting_state()

    # -- outputs ------------------------------------------------------------

    def export_png(self) -> bytes:
        return to_png(self._surface)

    def export_pdf(self) -> bytes:
        return to_pdf(self._surface, self._export_text())

    def save(self, kind: str = "png", directory: str | Path = ".") -> Path:
        return save_export(self._surface, self._export_text(), kind=kind, directory=directory)

    def copy_content(self) -> bool:
        return self._clipboard(self._config.content)

    # -- internals ----------------------------------------------------------

    def _export_text(self) -> str:
        # text of the surface being exported, not of later unrendered edits
        return self._surface.config.content if self._surface is not None else ""

    def _resting_state(self) -> RenderState:
        return RenderState.RENDERED if self._surface is not None else RenderState.IDLE

    def _schedule(self):
        self.state = RenderState.PENDING_RENDER
        self._debouncer.trigger()

    def _on_debounce_elapsed(self):
        if not self._auto_render:
            return
        self._dispatch()

    def _dispatch(self) -> ComposedSurface | None:
        self._version += 1
        stamp = self._version
        snapshot = self._config
        self.state = RenderState.RENDERING
        try:
            surface = render(snapshot, encoder=self._encoder)
        except RenderError as e:
            self._fail(stamp, e)
            return None
        else:
            return self._complete(stamp, surface)
        finally:
            # never left RENDERING, whatever the encoder or callbacks did
            if self.state is RenderState.RENDERING:
                self.state = self._resting_state()

    def _is_stale(self, stamp: int) -> bool:
        return stamp != self._version

    def _complete(self, stamp: int, surface: ComposedSurface) -> ComposedSurface | None:
        if self._is_stale(stamp):
            audit("render.discarded", logger=log, version=stamp, current=self._version)
            return None
        self._surface = surface
        self.last_error = None
        self.render_count += 1
        self.state = RenderState.RENDERED
        audit("render.done", logger=log, version=stamp,
              surface_px=f"{surface.width}x{surface.height}", renders=self.render_count)
        if self._on_rendered is not None:
            self._on_rendered(surface)
        return surface

    def _fail(self, stamp: int, error: RenderError):
        if self._is_stale(stamp):
            audit("render.discarded", logger=log, version=stamp, current=self._version, error=str(error))
            return
        self.last_error = error
        self.state = self._resting_state()
        audit("render.failed", logger=log, version=stamp, error=str(error),
              kept_previous=self._surface is not None)
        if self._on_error is not None:
            self._on_error(error)
