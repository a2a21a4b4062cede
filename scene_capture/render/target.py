from __future__ import annotations

"""Render targets
----------------
Off-screen colour/depth buffers, the process-wide active render target and the
scoped swap used while a camera renders into an off-screen buffer.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

import numpy as np

from scene_capture.errors import InvalidResolution, RenderError


__all__ = [
    "RenderTexture",
    "HasRenderTarget",
    "get_active_render_target",
    "set_active_render_target",
    "read_pixels",
    "use_render_target",
]


class RenderTexture:
    """
    An off-screen render target: 8-bit RGB colour plus an optional depth buffer.
    Buffers are freed by `release()`; touching them afterwards raises RenderError.
    """

    def __init__(self, width: int, height: int, depth_bits: int = 24):
        if width <= 0 or height <= 0:
            raise InvalidResolution(f"Render texture size must be positive, got {width}x{height}")
        if depth_bits not in (0, 16, 24, 32):
            raise ValueError(f"Unsupported depth buffer size: {depth_bits}")
        self.width = width
        self.height = height
        self.depth_bits = depth_bits
        self._color: Optional[np.ndarray] = np.zeros((height, width, 3), dtype=np.uint8)
        self._depth: Optional[np.ndarray] = (
            np.ones((height, width), dtype=np.float32) if depth_bits else None
        )
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def color(self) -> np.ndarray:
        if self._color is None:
            raise RenderError("Render texture has been released")
        return self._color

    @property
    def depth(self) -> Optional[np.ndarray]:
        if self._released:
            raise RenderError("Render texture has been released")
        return self._depth

    def clear(self, rgb: tuple[int, int, int], depth: float = 1.0) -> None:
        self.color[...] = rgb
        if self.depth is not None:
            self.depth[...] = depth

    def release(self) -> None:
        self._color = None
        self._depth = None
        self._released = True

    def __repr__(self) -> str:
        state = "released" if self._released else f"depth={self.depth_bits}"
        return f"RenderTexture({self.width}x{self.height}, {state})"


class HasRenderTarget(Protocol):
    target_texture: Optional[RenderTexture]


# ---------- Active render target ----------

_active: Optional[RenderTexture] = None


def get_active_render_target() -> Optional[RenderTexture]:
    return _active


def set_active_render_target(texture: Optional[RenderTexture]) -> None:
    global _active
    _active = texture


def read_pixels(
    x: int,
    y: int,
    width: int,
    height: int,
    dest: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Copy a region of the active render target into host memory.
    Writes into `dest` when given (must be height x width x 3 uint8) and returns it.
    """
    source = get_active_render_target()
    if source is None:
        raise RenderError("No active render target to read from")
    if x < 0 or y < 0 or x + width > source.width or y + height > source.height:
        raise RenderError(
            f"Read region ({x}, {y}, {width}, {height}) is outside the "
            f"{source.width}x{source.height} render target"
        )
    region = source.color[y:y + height, x:x + width]
    if dest is None:
        return region.copy()
    if dest.shape != (height, width, 3) or dest.dtype != np.uint8:
        raise RenderError(f"Readback buffer must be {height}x{width}x3 uint8, got {dest.shape} {dest.dtype}")
    dest[...] = region
    return dest


@contextmanager
def use_render_target(camera: HasRenderTarget, texture: RenderTexture) -> Iterator[RenderTexture]:
    """
    Point `camera` and the active render target at `texture` for the duration of
    the block; both are put back to their previous values on exit, including
    when the block raises. Not reentrant.
    """
    previous_active = get_active_render_target()
    previous_camera_target = camera.target_texture
    set_active_render_target(texture)
    camera.target_texture = texture
    try:
        yield texture
    finally:
        camera.target_texture = previous_camera_target
        set_active_render_target(previous_active)
