import pytest

from scene_capture.capture.resolution import (
    CaptureConfig,
    parse_dimension,
    resolve,
    viewport_aspect,
)
from scene_capture.errors import InvalidResolution, NoActiveCamera
from scene_capture.render.camera import SceneCamera
from scene_capture.utils.config import ResolutionPreset


FIXED_PRESETS = [p for p in ResolutionPreset if p is not ResolutionPreset.Custom]


@pytest.mark.parametrize("preset", FIXED_PRESETS)
def test_preset_unlocked_uses_16_9_height(preset):
    cfg = CaptureConfig(preset=preset)
    w, h = resolve(cfg, viewport_aspect=2.5)
    assert w == preset.reference_width
    assert h == int(preset.reference_width * 0.5625)


@pytest.mark.parametrize("preset", FIXED_PRESETS)
def test_preset_locked_derives_height_from_aspect(preset):
    cfg = CaptureConfig(preset=preset, lock_to_viewport_aspect=True)
    heights = [resolve(cfg, a).height for a in (1.0, 4 / 3, 16 / 9, 2.35)]
    assert heights == [int(preset.reference_width / a) for a in (1.0, 4 / 3, 16 / 9, 2.35)]
    assert heights == sorted(heights, reverse=True)
    assert len(set(heights)) == len(heights)


def test_reference_widths():
    assert [p.reference_width for p in ResolutionPreset] == [1280, 1920, 2560, 3840, 7680, None]


def test_fhd_end_to_end():
    assert resolve(CaptureConfig(preset="FHD"), 1.6) == (1920, 1080)


def test_custom_parsed():
    cfg = CaptureConfig(preset="Custom", custom_width="800", custom_height="600")
    assert resolve(cfg, 1.6) == (800, 600)


@pytest.mark.parametrize(
    "w, h",
    [("abc", "600"), ("800", "x"), (None, None), ("", "600"), ("8.5", "600"), ("99999999999", "600")],
)
def test_custom_unparsable_falls_back(w, h):
    cfg = CaptureConfig(preset=ResolutionPreset.Custom, custom_width=w, custom_height=h)
    assert resolve(cfg, 1.6) == (1920, 1080)


def test_custom_locked_ignores_supplied_height():
    for supplied in ("600", "1", "abc-but-width-ok", "99999"):
        cfg = CaptureConfig(preset="Custom", custom_width="1000", custom_height=supplied,
                            lock_to_viewport_aspect=True)
        if parse_dimension(supplied) is None:
            # unparsable input goes through the 1920 fallback first
            assert resolve(cfg, 1.6) == (1920, int(1920 / 1.6))
        else:
            assert resolve(cfg, 1.6) == (1000, int(1000 / 1.6))


def test_custom_ints_are_coerced_to_field_text():
    cfg = CaptureConfig(preset="Custom", custom_width=640, custom_height=480)
    assert cfg.custom_width == "640"
    assert resolve(cfg, 1.0) == (640, 480)


@pytest.mark.parametrize("w, h", [("0", "600"), ("800", "0"), ("-800", "600"), ("800", "-1")])
def test_non_positive_custom_size_is_rejected(w, h):
    cfg = CaptureConfig(preset="Custom", custom_width=w, custom_height=h)
    with pytest.raises(InvalidResolution):
        resolve(cfg, 1.6)


def test_locked_height_rounding_to_zero_is_rejected():
    cfg = CaptureConfig(preset="Custom", custom_width="2", custom_height="2", lock_to_viewport_aspect=True)
    with pytest.raises(InvalidResolution):
        resolve(cfg, 3.0)


@pytest.mark.parametrize("aspect", [0.0, -1.0, float("nan"), float("inf")])
def test_bad_aspect_only_matters_when_locked(aspect):
    assert resolve(CaptureConfig(preset="HD"), aspect) == (1280, 720)
    with pytest.raises(InvalidResolution):
        resolve(CaptureConfig(preset="HD", lock_to_viewport_aspect=True), aspect)


def test_parse_dimension():
    assert parse_dimension(" 42 ") == 42
    assert parse_dimension("+7") == 7
    assert parse_dimension("-3") == -3
    assert parse_dimension("1_000") is None
    assert parse_dimension("") is None
    assert parse_dimension(None) is None


@pytest.mark.parametrize("name", ["fhd", "_FHD", "FHD", "Fhd"])
def test_preset_names(name):
    assert ResolutionPreset.parse(name) is ResolutionPreset.FHD
    assert CaptureConfig(preset=name).preset is ResolutionPreset.FHD


def test_four_k_aliases():
    assert ResolutionPreset.parse("4k") is ResolutionPreset.UHD_4K
    assert ResolutionPreset.parse("_8K") is ResolutionPreset.UHD_8K


def test_unknown_preset_rejected():
    with pytest.raises(ValueError):
        ResolutionPreset.parse("VGA")


def test_viewport_aspect_is_sampled_live():
    cam = SceneCamera(pixel_width=1600, pixel_height=900)
    cfg = CaptureConfig(preset="FHD", lock_to_viewport_aspect=True)
    assert resolve(cfg, viewport_aspect(cam)) == (1920, 1080)
    cam.resize(1000, 1000)
    assert resolve(cfg, viewport_aspect(cam)) == (1920, 1920)


def test_viewport_aspect_errors():
    with pytest.raises(NoActiveCamera):
        viewport_aspect(None)
    with pytest.raises(InvalidResolution):
        viewport_aspect(SceneCamera(pixel_width=100, pixel_height=0))
