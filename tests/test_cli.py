"""
Tests for the pixel_studio command line.
"""

import argparse
from unittest.mock import patch

import pytest
from PIL import Image

import pixel_studio
from PS_Libs.ImageEditingLib.image_editing_ops import load_raster
from PS_Libs.ImageEditingLib.image_models import Raster
from PS_Libs.SessionLib.operation_registry import (
    Operation,
    OperationRegistry,
    get_default_registry,
)

from conftest import make_gradient_raster


@pytest.fixture
def input_image(tmp_path):
    path = tmp_path / "input.png"
    make_gradient_raster(120, 80).to_image().save(path)
    return path


@pytest.fixture
def white_image(tmp_path):
    path = tmp_path / "white.png"
    Image.new("RGBA", (60, 60), (255, 255, 255, 255)).save(path)
    return path


def test_parse_stroke():
    assert pixel_studio.parse_stroke("1,2 3.5,4") == [(1.0, 2.0), (3.5, 4.0)]


@pytest.mark.parametrize("text", ["", "1,2 3", "a,b"])
def test_parse_stroke_invalid(text):
    with pytest.raises(argparse.ArgumentTypeError):
        pixel_studio.parse_stroke(text)


def test_denoise(input_image, tmp_path, capsys):
    out_dir = tmp_path / "out"
    code = pixel_studio.main(["denoise", str(input_image), "-o", str(out_dir), "--strength", "4"])

    assert code == 0
    assert (out_dir / "noise-reduced-image.png").exists()
    assert "Saved 120x80 image" in capsys.readouterr().out


def test_crop_rect(input_image, tmp_path):
    code = pixel_studio.main([
        "crop", str(input_image), "-o", str(tmp_path),
        "--x", "10", "--y", "5", "--width", "60", "--height", "50",
    ])

    assert code == 0
    cropped = load_raster(tmp_path / "cropped-image.png")
    assert cropped.size == (60, 50)
    assert cropped.pixel(0, 0) == (10, 5, 15, 255)


def test_crop_aspect(input_image, tmp_path):
    assert pixel_studio.main(["crop", str(input_image), "-o", str(tmp_path), "--aspect", "1:1"]) == 0
    cropped = load_raster(tmp_path / "cropped-image.png")
    assert cropped.width == cropped.height


def test_filter(input_image, tmp_path):
    assert pixel_studio.main(["filter", str(input_image), "-o", str(tmp_path), "--invert", "100"]) == 0
    filtered = load_raster(tmp_path / "filtered-image.png")
    assert filtered.pixel(0, 0) == (255, 255, 255, 255)


def test_carve(white_image, tmp_path):
    code = pixel_studio.main([
        "carve", str(white_image), "-o", str(tmp_path),
        "--stroke", "10,10 40,10", "--brush", "5",
    ])

    assert code == 0
    carved = load_raster(tmp_path / "transparent-bg-image.png")
    assert carved.pixel(25, 10) == (255, 255, 255, 0)
    assert carved.pixel(25, 40) == (255, 255, 255, 255)


def test_invalid_strength(input_image, tmp_path, capsys):
    code = pixel_studio.main(["denoise", str(input_image), "-o", str(tmp_path), "--strength", "11"])

    assert code == 1
    assert "Error" in capsys.readouterr().err


def test_existing_output_needs_overwrite(input_image, tmp_path):
    args = ["denoise", str(input_image), "-o", str(tmp_path)]
    assert pixel_studio.main(args) == 0
    assert pixel_studio.main(args) == 1
    assert pixel_studio.main(args + ["--overwrite"]) == 0


def test_missing_input(tmp_path):
    assert pixel_studio.main(["denoise", str(tmp_path / "nope.png"), "-o", str(tmp_path)]) == 1


def test_every_command_has_an_operation():
    registry = get_default_registry()
    for command, name in pixel_studio.COMMAND_OPERATIONS.items():
        assert name in registry, command


def test_operation_params():
    parser = pixel_studio.build_parser()

    args = parser.parse_args(["crop", "in.png", "--x", "4", "--aspect", "1:1"])
    assert pixel_studio.operation_params(args) == {
        "x": 4.0, "y": None, "width": None, "height": None, "aspect_ratio": 1.0,
    }

    args = parser.parse_args(["carve", "in.png", "--stroke", "1,2 3,4", "--brush", "7"])
    assert pixel_studio.operation_params(args) == {
        "strokes": [[(1.0, 2.0), (3.0, 4.0)]], "brush_radius": 7.0,
    }


def test_run_dispatches_through_registry(input_image):
    calls = []
    marker = Raster.blank(3, 3, (9, 9, 9, 255))

    def fake_denoise(session, params):
        calls.append(params)
        return marker

    registry = OperationRegistry()
    registry.register(Operation("Noise Reduction", fake_denoise, "noise"))
    args = pixel_studio.build_parser().parse_args(["denoise", str(input_image), "--strength", "7"])

    with patch.object(pixel_studio, "get_default_registry", return_value=registry):
        assert pixel_studio.run(args) == ("noise", marker)

    assert calls == [{"strength": 7}]
