from __future__ import annotations

"""Viewport cameras
------------------
A software-rasterised camera that renders a `Scene` into whichever render
texture it targets, and the registry that tracks the last active viewport.
"""

from typing import Optional, Protocol, runtime_checkable

from scene_capture.errors import NoActiveCamera
from scene_capture.render.scene import Scene, hex_to_rgb
from scene_capture.render.target import RenderTexture
from scene_capture.utils.logger import get_logger


DEFAULT_BACKGROUND = (49, 77, 121)


@runtime_checkable
class Camera(Protocol):
    """What the capture needs from a viewport camera."""

    target_texture: Optional[RenderTexture]

    @property
    def pixel_width(self) -> int: ...

    @property
    def pixel_height(self) -> int: ...

    def render(self) -> None: ...


class SceneCamera:
    """
    Renders a Scene with a clear + depth-tested rectangle pass.

    With `target_texture` unset the camera draws into its own viewport buffer
    sized `pixel_width x pixel_height`; otherwise it draws into the target at
    the target's size.
    """

    def __init__(
        self,
        scene: Optional[Scene] = None,
        pixel_width: int = 1600,
        pixel_height: int = 900,
        background: tuple[int, int, int] = DEFAULT_BACKGROUND,
        name: str = "SceneCamera",
    ):
        self.scene = scene or Scene()
        self.name = name
        self.background = background
        self.target_texture: Optional[RenderTexture] = None
        self.frames_rendered = 0
        self._pixel_width = pixel_width
        self._pixel_height = pixel_height
        self._viewport_texture: Optional[RenderTexture] = None
        self.log = get_logger(__name__)

    @property
    def pixel_width(self) -> int:
        return self._pixel_width

    @property
    def pixel_height(self) -> int:
        return self._pixel_height

    def resize(self, pixel_width: int, pixel_height: int) -> None:
        """Viewport was resized; the next on-screen render reallocates its buffer."""
        self._pixel_width = pixel_width
        self._pixel_height = pixel_height
        if self._viewport_texture is not None:
            self._viewport_texture.release()
            self._viewport_texture = None

    def render(self) -> None:
        """Render exactly one frame into the current target."""
        target = self.target_texture or self._ensure_viewport_texture()
        clear = hex_to_rgb(self.scene.background) if self.scene.background else self.background
        target.clear(clear)

        color = target.color
        depth = target.depth
        for rect in self.scene.rects:
            left, top, right, bottom = rect.pixel_bounds(target.width, target.height)
            if right <= left or bottom <= top:
                continue
            if depth is None:
                color[top:bottom, left:right] = rect.rgb
                continue
            region_depth = depth[top:bottom, left:right]
            passed = rect.depth < region_depth
            color[top:bottom, left:right][passed] = rect.rgb
            region_depth[passed] = rect.depth

        self.frames_rendered += 1
        self.log.debug(f"{self.name} rendered {len(self.scene.rects)} rect(s) into {target!r}")

    def _ensure_viewport_texture(self) -> RenderTexture:
        if self._viewport_texture is None:
            self._viewport_texture = RenderTexture(self._pixel_width, self._pixel_height)
        return self._viewport_texture

    def __repr__(self) -> str:
        return f"SceneCamera({self.name!r}, {self._pixel_width}x{self._pixel_height})"


class ViewportRegistry:
    """Tracks the most recently focused viewport camera."""

    def __init__(self, camera: Optional[Camera] = None):
        self.last_active: Optional[Camera] = camera

    def activate(self, camera: Camera) -> None:
        self.last_active = camera

    def deactivate(self) -> None:
        self.last_active = None

    def require_camera(self) -> Camera:
        if self.last_active is None:
            raise NoActiveCamera("No active viewport camera to capture from")
        return self.last_active


__all__ = ["Camera", "SceneCamera", "ViewportRegistry", "DEFAULT_BACKGROUND"]
