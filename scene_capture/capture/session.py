# scene_capture/capture/session.py
from __future__ import annotations

"""Capture session
-----------------
The surface a host editor drives: it edits `config`, calls `refresh()` on every
UI pass to get the width/height fields to display, and `capture()` when the
user clicks the capture button.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from scene_capture.capture.offscreen import CaptureListener, CaptureResult, capture
from scene_capture.capture.resolution import (
    FALLBACK_HEIGHT,
    FALLBACK_WIDTH,
    CaptureConfig,
    Resolution,
    parse_dimension,
    resolve,
    viewport_aspect,
)
from scene_capture.render.camera import ViewportRegistry
from scene_capture.utils.config import ResolutionPreset, Settings, get_settings
from scene_capture.utils.logger import get_logger

# Passed to resolve() when the height is not locked; resolve() ignores it then.
_UNLOCKED_ASPECT = 16 / 9


@dataclass(frozen=True)
class ResolvedFields:
    """Width/height text as the capture window shows it after a refresh."""
    width_text: str
    height_text: str
    height_editable: bool


class CaptureSession:
    def __init__(
        self,
        viewports: ViewportRegistry,
        *,
        config: Optional[CaptureConfig] = None,
        output_dir: Optional[Path | str] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.viewports = viewports
        self.config = config or CaptureConfig(
            preset=self.settings.DEFAULT_PRESET,
            lock_to_viewport_aspect=self.settings.LOCK_TO_VIEWPORT_ASPECT,
        )
        self.output_dir = Path(output_dir) if output_dir is not None else self.settings.OUTPUT_DIR
        self._listeners: List[CaptureListener] = []
        self.log = get_logger(__name__)

    def subscribe(self, listener: CaptureListener) -> CaptureListener:
        """Register a callback that receives each CaptureResult."""
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: CaptureListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _sample_aspect(self) -> float:
        # Sampled on every call so a resized viewport is picked up immediately.
        if self.config.lock_to_viewport_aspect:
            return viewport_aspect(self.viewports.require_camera())
        return _UNLOCKED_ASPECT

    def resolve(self) -> Resolution:
        return resolve(self.config, self._sample_aspect())

    def refresh(self) -> ResolvedFields:
        """
        Resolve and write the result back into the editing fields, the way the
        window displays them: a preset fills in its own size, an unparsable
        Custom entry is replaced by the 1920x1080 fallback, and a locked height
        is overwritten with the derived value.
        """
        size = self.resolve()
        cfg = self.config
        if cfg.preset is not ResolutionPreset.Custom:
            cfg.custom_width = str(size.width)
            cfg.custom_height = str(size.height)
        else:
            if parse_dimension(cfg.custom_width) is None or parse_dimension(cfg.custom_height) is None:
                cfg.custom_width = str(FALLBACK_WIDTH)
                cfg.custom_height = str(FALLBACK_HEIGHT)
            if cfg.lock_to_viewport_aspect:
                cfg.custom_height = str(size.height)
        return ResolvedFields(
            width_text=str(size.width),
            height_text=str(size.height),
            height_editable=cfg.preset is ResolutionPreset.Custom and not cfg.lock_to_viewport_aspect,
        )

    def capture(self) -> CaptureResult:
        """Resolve against the active viewport camera and capture it."""
        camera = self.viewports.require_camera()
        size = self.resolve()
        self.log.debug(f"Capturing {camera!r} at {size} ({self.config.preset.value})")
        return capture(camera, size.width, size.height, self.output_dir, listeners=tuple(self._listeners))


__all__ = ["CaptureSession", "ResolvedFields"]
