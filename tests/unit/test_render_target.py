import numpy as np
import pytest

from scene_capture.errors import InvalidResolution, RenderError
from scene_capture.render.camera import SceneCamera
from scene_capture.render.scene import Scene, SceneRect
from scene_capture.render.target import (
    RenderTexture,
    get_active_render_target,
    read_pixels,
    set_active_render_target,
    use_render_target,
)


def test_texture_allocates_color_and_depth():
    tex = RenderTexture(4, 3)
    assert tex.color.shape == (3, 4, 3)
    assert tex.color.dtype == np.uint8
    assert tex.depth.shape == (3, 4)
    assert tex.depth_bits == 24


def test_texture_rejects_empty_size():
    with pytest.raises(InvalidResolution):
        RenderTexture(0, 10)


def test_released_texture_is_unusable():
    tex = RenderTexture(2, 2)
    tex.release()
    assert tex.released
    with pytest.raises(RenderError):
        _ = tex.color


def test_read_pixels_requires_active_target():
    with pytest.raises(RenderError):
        read_pixels(0, 0, 1, 1)


def test_read_pixels_bounds_checked():
    tex = RenderTexture(4, 4)
    set_active_render_target(tex)
    with pytest.raises(RenderError):
        read_pixels(2, 2, 4, 4)


def test_read_pixels_into_buffer():
    tex = RenderTexture(4, 2)
    tex.clear((10, 20, 30))
    set_active_render_target(tex)
    dest = np.zeros((2, 4, 3), dtype=np.uint8)
    out = read_pixels(0, 0, 4, 2, dest=dest)
    assert out is dest
    assert (dest == (10, 20, 30)).all()


def test_use_render_target_restores_on_error():
    cam = SceneCamera(pixel_width=8, pixel_height=8)
    previous = RenderTexture(1, 1)
    set_active_render_target(previous)
    offscreen = RenderTexture(8, 8)

    with pytest.raises(ZeroDivisionError):
        with use_render_target(cam, offscreen):
            assert get_active_render_target() is offscreen
            assert cam.target_texture is offscreen
            1 / 0

    assert get_active_render_target() is previous
    assert cam.target_texture is None


def test_camera_renders_rects_with_depth_test():
    scene = Scene(
        background="#000000",
        rects=[
            SceneRect(x=0.0, y=0.0, width=1.0, height=1.0, color="#ff0000", depth=0.2),
            # behind the red quad, must not show
            SceneRect(x=0.0, y=0.0, width=0.5, height=0.5, color="#00ff00", depth=0.8),
            SceneRect(x=0.5, y=0.5, width=0.5, height=0.5, color="#0000ff", depth=0.1),
        ],
    )
    cam = SceneCamera(scene, pixel_width=4, pixel_height=4)
    tex = RenderTexture(4, 4)
    cam.target_texture = tex
    cam.render()

    assert tuple(tex.color[0, 0]) == (255, 0, 0)
    assert tuple(tex.color[3, 3]) == (0, 0, 255)
    assert tuple(tex.color[0, 3]) == (255, 0, 0)
    assert cam.frames_rendered == 1


def test_camera_without_target_uses_viewport_buffer():
    cam = SceneCamera(pixel_width=3, pixel_height=2)
    cam.render()
    assert get_active_render_target() is None
    assert cam.frames_rendered == 1
