from pathlib import Path
import textwrap

import pytest

from scene_capture.render.scene import load_scene


def test_load_scene(tmp_path: Path):
    f = tmp_path / "scene.yaml"
    f.write_text(
        textwrap.dedent(
            """
            background: "#202020"
            rects:
              - {x: 0.1, y: 0.1, width: 0.3, height: 0.3, color: "#ff8800", depth: 0.25}
              - {x: 0.5, y: 0.5, width: 0.5, height: 0.5}
            """
        ),
        encoding="utf-8",
    )
    scene = load_scene(f)
    assert scene.background == "#202020"
    assert len(scene.rects) == 2
    assert scene.rects[0].rgb == (255, 136, 0)
    assert scene.rects[1].color == "#ffffff"


def test_empty_scene_file(tmp_path: Path):
    f = tmp_path / "empty.yaml"
    f.write_text("", encoding="utf-8")
    assert load_scene(f).rects == []


def test_invalid_scene_lists_fields(tmp_path: Path):
    f = tmp_path / "bad.yaml"
    f.write_text("rects:\n  - {x: 2, y: 0, width: 1, height: 1, color: red}\n", encoding="utf-8")
    with pytest.raises(ValueError) as exc:
        load_scene(f)
    msg = str(exc.value)
    assert "rects.0.x" in msg
    assert "rects.0.color" in msg


def test_missing_scene_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_scene(tmp_path / "nope.yaml")
