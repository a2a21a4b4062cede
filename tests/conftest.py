import pytest

from scene_capture.render.target import set_active_render_target


@pytest.fixture(autouse=True)
def _no_active_render_target():
    set_active_render_target(None)
    yield
    set_active_render_target(None)
