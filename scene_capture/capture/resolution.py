# scene_capture/capture/resolution.py
from __future__ import annotations

"""Resolution resolver
---------------------
Turns the capture window's selections (preset, custom fields, lock-to-viewport
flag) plus the live viewport aspect ratio into a concrete pixel size.
"""

import math
import re
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scene_capture.errors import InvalidResolution, NoActiveCamera
from scene_capture.utils.config import ResolutionPreset


FALLBACK_WIDTH = 1920
FALLBACK_HEIGHT = 1080
DEFAULT_HEIGHT_RATIO = 0.5625  # 16:9

_INT_TEXT = re.compile(r"^\s*[+-]?[0-9]+\s*$")
_INT32_MIN, _INT32_MAX = -(2 ** 31), 2 ** 31 - 1


class Resolution(NamedTuple):
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class CaptureConfig(BaseModel):
    """
    Mutable capture-window state.

    `custom_width`/`custom_height` hold the raw text of the editing fields and are
    only read for the Custom preset. With `lock_to_viewport_aspect` set the height
    is always derived from the width, so `custom_height` is advisory only.
    """

    model_config = ConfigDict(validate_assignment=True)

    preset: ResolutionPreset = Field(default=ResolutionPreset.FHD)
    custom_width: Optional[str] = None
    custom_height: Optional[str] = Field(default=None, description="Ignored when locked to the viewport aspect")
    lock_to_viewport_aspect: bool = False

    @field_validator("preset", mode="before")
    @classmethod
    def _coerce_preset(cls, v):
        return ResolutionPreset.parse(v)

    @field_validator("custom_width", "custom_height", mode="before")
    @classmethod
    def _field_text(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


def parse_dimension(text: Optional[str]) -> Optional[int]:
    """Parse a dimension field as a 32-bit integer; None when it doesn't parse."""
    if text is None or not _INT_TEXT.match(text):
        return None
    value = int(text)
    if value < _INT32_MIN or value > _INT32_MAX:
        return None
    return value


def derive_height(width: int, viewport_aspect: float) -> int:
    try:
        aspect = float(viewport_aspect)
    except (TypeError, ValueError):
        aspect = math.nan
    if not math.isfinite(aspect) or aspect <= 0:
        raise InvalidResolution(f"Viewport aspect ratio must be a positive number, got {viewport_aspect!r}")
    return int(width / aspect)


def resolve(config: CaptureConfig, viewport_aspect: float) -> Resolution:
    """
    Resolve `config` to a pixel size.

    Presets use their reference width with a 16:9 height. Custom parses the text
    fields and falls back to 1920x1080 when either one is not an integer. When
    locked, height is `int(width / viewport_aspect)` whatever else was entered.
    """
    if config.preset is ResolutionPreset.Custom:
        width = parse_dimension(config.custom_width)
        height = parse_dimension(config.custom_height)
        if width is None or height is None:
            width, height = FALLBACK_WIDTH, FALLBACK_HEIGHT
    else:
        width = config.preset.reference_width
        height = int(width * DEFAULT_HEIGHT_RATIO)

    if config.lock_to_viewport_aspect:
        height = derive_height(width, viewport_aspect)

    if width <= 0 or height <= 0:
        raise InvalidResolution(f"Resolved size {width}x{height} is not positive")
    return Resolution(width, height)


def viewport_aspect(camera) -> float:
    """Sample width / height of the camera's current pixel size."""
    if camera is None:
        raise NoActiveCamera("No active viewport camera to sample the aspect ratio from")
    width, height = camera.pixel_width, camera.pixel_height
    if width <= 0 or height <= 0:
        raise InvalidResolution(f"Viewport has no area ({width}x{height})")
    return width / height


__all__ = [
    "FALLBACK_WIDTH",
    "FALLBACK_HEIGHT",
    "DEFAULT_HEIGHT_RATIO",
    "Resolution",
    "CaptureConfig",
    "parse_dimension",
    "derive_height",
    "resolve",
    "viewport_aspect",
]
