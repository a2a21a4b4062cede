"""
Render package for scene capture.
Render targets, the active-target swap, viewport cameras and scene files.
"""

from .target import (
    RenderTexture,
    get_active_render_target,
    set_active_render_target,
    read_pixels,
    use_render_target,
)
from .scene import Scene, SceneRect, load_scene
from .camera import Camera, SceneCamera, ViewportRegistry

__all__ = [
    "RenderTexture",
    "get_active_render_target",
    "set_active_render_target",
    "read_pixels",
    "use_render_target",
    "Scene",
    "SceneRect",
    "load_scene",
    "Camera",
    "SceneCamera",
    "ViewportRegistry",
]
