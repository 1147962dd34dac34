"""
Unit tests for image_models module.

Tests the Raster container, crop rectangle geometry and pointer events.
"""

import numpy as np
import pytest
from PIL import Image

from PS_Libs.ImageEditingLib.image_models import (
    CropRect,
    PointerEvent,
    Raster,
    round_half_up,
)


class TestRaster:
    """Tests for the Raster dataclass."""

    def test_rejects_wrong_data_length(self):
        with pytest.raises(ValueError):
            Raster(2, 2, bytes(15))

    def test_blank_fills_every_pixel(self):
        raster = Raster.blank(3, 2, (1, 2, 3, 4))
        assert len(raster.data) == 24
        assert raster.pixel(2, 1) == (1, 2, 3, 4)

    def test_pixel_is_row_major(self):
        data = bytes(range(16))
        raster = Raster(2, 2, data)
        assert raster.pixel(0, 0) == (0, 1, 2, 3)
        assert raster.pixel(1, 0) == (4, 5, 6, 7)
        assert raster.pixel(0, 1) == (8, 9, 10, 11)

    def test_pixel_out_of_bounds(self):
        raster = Raster.blank(2, 2)
        with pytest.raises(IndexError):
            raster.pixel(2, 0)

    def test_bytearray_is_frozen_to_bytes(self):
        raster = Raster(1, 1, bytearray([1, 2, 3, 4]))
        assert isinstance(raster.data, bytes)

    def test_to_array_returns_writable_copy(self):
        raster = Raster.blank(2, 2, (9, 9, 9, 9))
        pixels = raster.to_array()
        pixels[0, 0] = (0, 0, 0, 0)
        assert raster.pixel(0, 0) == (9, 9, 9, 9)

    def test_from_array_shape_check(self):
        with pytest.raises(ValueError):
            Raster.from_array(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_from_image_converts_to_rgba(self):
        image = Image.new("RGB", (4, 3), (10, 20, 30))
        raster = Raster.from_image(image)
        assert raster.size == (4, 3)
        assert raster.pixel(3, 2) == (10, 20, 30, 255)

    def test_from_image_type_check(self):
        with pytest.raises(TypeError):
            Raster.from_image("not an image")

    def test_to_image_round_trip(self, gradient_raster):
        image = gradient_raster.to_image()
        assert image.mode == "RGBA"
        assert Raster.from_image(image) == gradient_raster


class TestCropRect:
    """Tests for CropRect geometry."""

    def test_edges(self):
        rect = CropRect(10, 20, 30, 40)
        assert rect.right == 40
        assert rect.bottom == 60

    def test_contains_includes_edges(self):
        rect = CropRect(10, 10, 50, 50)
        assert rect.contains(10, 10)
        assert rect.contains(60, 60)
        assert not rect.contains(61, 30)

    def test_to_box_rounds_half_up(self):
        assert CropRect(10.5, 2.4, 20.5, 30.6).to_box() == (11, 2, 32, 33)

    def test_dict_round_trip(self):
        rect = CropRect(1.5, 2, 3, 4)
        assert CropRect.from_dict(rect.to_dict()) == rect


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_pointer_event_rejects_unknown_kind():
    with pytest.raises(ValueError):
        PointerEvent("click", 1, 2)
