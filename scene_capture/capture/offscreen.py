# scene_capture/capture/offscreen.py
from __future__ import annotations

"""Off-screen capture
--------------------
Renders one frame of a camera into an off-screen buffer, reads the pixels
back, encodes them as PNG and writes `screenshot<yyMMddHHmmssff>.png`.
"""

import io
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

import numpy as np
from PIL import Image

from scene_capture.errors import IOFailure, InvalidResolution, NoActiveCamera
from scene_capture.render.target import RenderTexture, read_pixels, use_render_target
from scene_capture.utils.logger import get_logger
from scene_capture.utils.timing import measure


DEPTH_BITS = 24


@dataclass(frozen=True)
class CaptureResult:
    path: Path
    width: int
    height: int
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "width": self.width,
            "height": self.height,
            "timestamp": self.timestamp.isoformat(),
        }


CaptureListener = Callable[[CaptureResult], None]


def screenshot_filename(ts: datetime) -> str:
    """`screenshot` + yyMMddHHmmss + two-digit centiseconds + `.png`."""
    return f"screenshot{ts.strftime('%y%m%d%H%M%S')}{ts.microsecond // 10000:02d}.png"


def encode_png(pixels: np.ndarray) -> bytes:
    """Losslessly encode an H x W x 3 uint8 buffer as an RGB PNG."""
    out = io.BytesIO()
    Image.fromarray(pixels).convert("RGB").save(out, format="PNG")
    return out.getvalue()


def render_to_pixels(camera, width: int, height: int) -> np.ndarray:
    """
    Render one frame of `camera` off-screen and return the read-back pixels.
    The camera's target and the active render target are restored before returning.
    """
    texture = RenderTexture(width, height, depth_bits=DEPTH_BITS)
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    try:
        with use_render_target(camera, texture):
            camera.render()
            read_pixels(0, 0, width, height, dest=pixels)
    finally:
        texture.release()
    return pixels


@measure("offscreen capture")
def capture(
    camera,
    width: int,
    height: int,
    output_dir: Path | str,
    *,
    now: Optional[datetime] = None,
    listeners: Iterable[CaptureListener] = (),
) -> CaptureResult:
    """
    Capture `camera` at `width` x `height` into a new PNG under `output_dir`.

    Raises:
        InvalidResolution: width or height <= 0 (checked before allocating anything)
        NoActiveCamera: `camera` is None
        IOFailure: the directory or the file could not be written
    """
    log = get_logger(__name__)
    if width <= 0 or height <= 0:
        raise InvalidResolution(f"Cannot capture at {width}x{height}")
    if camera is None:
        raise NoActiveCamera("No active viewport camera to capture from")

    out_dir = Path(output_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure(f"Could not create output directory {out_dir}: {e}") from e

    ts = now or datetime.now()
    out_path = out_dir / screenshot_filename(ts)

    pixels = render_to_pixels(camera, width, height)
    data = encode_png(pixels)
    del pixels

    try:
        out_path.write_bytes(data)
    except OSError as e:
        raise IOFailure(f"Could not write screenshot {out_path}: {e}") from e

    result = CaptureResult(path=out_path, width=width, height=height, timestamp=ts)
    log.info(f"Screenshot captured and saved to: {out_path}")

    for listener in listeners:
        try:
            listener(result)
        except Exception:
            log.exception(f"Capture listener {listener!r} failed")
    return result


__all__ = [
    "CaptureResult",
    "CaptureListener",
    "capture",
    "encode_png",
    "render_to_pixels",
    "screenshot_filename",
]
