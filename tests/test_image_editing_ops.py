"""
Unit tests for image_editing_ops module.

Tests decoding images into rasters, PNG encoding, saving and the
raster comparison helpers.
"""

import io
from unittest.mock import patch

import pytest
from PIL import Image

from PS_Libs.ImageEditingLib.errors import DimensionMismatchError, EncodeError
from PS_Libs.ImageEditingLib.image_editing_ops import (
    check_same_size,
    encode_png,
    load_raster,
    rasters_equal,
    save_raster,
)
from PS_Libs.ImageEditingLib.image_models import Raster


class TestLoadRaster:
    """Tests for load_raster function."""

    def test_loads_from_path(self, tmp_path):
        path = tmp_path / "input.png"
        Image.new("RGBA", (5, 4), (1, 2, 3, 4)).save(path)

        raster = load_raster(path)

        assert raster.size == (5, 4)
        assert raster.pixel(0, 0) == (1, 2, 3, 4)

    def test_loads_from_string_path(self, tmp_path):
        path = tmp_path / "input.png"
        Image.new("RGB", (2, 2), (9, 8, 7)).save(path)

        raster = load_raster(str(path))

        assert raster.pixel(1, 1) == (9, 8, 7, 255)

    def test_loads_from_bytes(self):
        buffer = io.BytesIO()
        Image.new("RGBA", (3, 3), (50, 60, 70, 80)).save(buffer, format="PNG")

        raster = load_raster(buffer.getvalue())

        assert raster.pixel(2, 2) == (50, 60, 70, 80)

    def test_loads_from_pil_image(self):
        raster = load_raster(Image.new("L", (2, 1), 100))
        assert raster.pixel(0, 0) == (100, 100, 100, 255)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_raster(tmp_path / "missing.png")


class TestEncodePng:
    """Tests for encode_png function."""

    def test_produces_png_signature(self, gradient_raster):
        payload = encode_png(gradient_raster)
        assert payload.startswith(b"\x89PNG\r\n\x1a\n")

    def test_is_lossless_with_alpha(self, noisy_raster):
        assert load_raster(encode_png(noisy_raster)) == noisy_raster

    def test_encoder_failure_is_distinguishable(self, gradient_raster):
        with patch.object(Raster, "to_image", side_effect=RuntimeError("boom")):
            with pytest.raises(EncodeError) as excinfo:
                encode_png(gradient_raster)
        assert isinstance(excinfo.value.__cause__, RuntimeError)


class TestSaveRaster:
    """Tests for save_raster function."""

    def test_writes_file(self, tmp_path, noisy_raster):
        path = save_raster(noisy_raster, tmp_path / "out.png")
        assert path.exists()
        assert load_raster(path) == noisy_raster

    def test_no_file_on_encode_failure(self, tmp_path, noisy_raster):
        target = tmp_path / "out.png"
        with patch.object(Raster, "to_image", side_effect=RuntimeError("boom")):
            with pytest.raises(EncodeError):
                save_raster(noisy_raster, target)
        assert not target.exists()


class TestComparisons:
    """Tests for rasters_equal and check_same_size."""

    def test_equal_rasters(self, gradient_raster):
        copy = Raster(gradient_raster.width, gradient_raster.height, gradient_raster.data)
        assert rasters_equal(gradient_raster, copy)

    def test_different_pixels(self):
        assert not rasters_equal(Raster.blank(1, 1, (0, 0, 0, 0)), Raster.blank(1, 1, (0, 0, 0, 1)))

    def test_same_bytes_different_shape(self):
        data = bytes(16)
        assert not rasters_equal(Raster(4, 1, data), Raster(2, 2, data))

    def test_check_same_size_raises(self):
        with pytest.raises(DimensionMismatchError):
            check_same_size(Raster.blank(2, 2), Raster.blank(2, 3))
