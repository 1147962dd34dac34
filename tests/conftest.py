"""
Pytest configuration and shared fixtures for Pixel Studio tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest

from PS_Libs.ImageEditingLib.image_models import Raster


def make_gradient_raster(width, height):
    """Raster whose pixel (x, y) is (x, y, x + y, 255), each modulo 256."""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = xs % 256
    pixels[:, :, 1] = ys % 256
    pixels[:, :, 2] = (xs + ys) % 256
    pixels[:, :, 3] = 255
    return Raster.from_array(pixels)


def make_noisy_raster(width, height, seed=1234):
    """Deterministic random raster with varying alpha."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    return Raster.from_array(pixels)


@pytest.fixture
def white_raster():
    """50x50 opaque white raster."""
    return Raster.blank(50, 50, (255, 255, 255, 255))


@pytest.fixture
def gradient_raster():
    """200x100 raster with position-encoded pixel values."""
    return make_gradient_raster(200, 100)


@pytest.fixture
def noisy_raster():
    """13x9 random raster, small enough for brute-force reference checks."""
    return make_noisy_raster(13, 9)

