"""
Strength-weighted box-blur noise reduction.

Two passes over the pristine original:

1. Box blur with radius r = strength // 2. Each RGB value is the mean of the
   (2r+1)x(2r+1) neighborhood, rounded half-up. Neighbors outside the raster
   are excluded from both the sum and the count, so edge pixels average over
   a smaller window.
2. Blend: output = original * (1 - f) + blurred * f with f = strength / 10,
   rounded half-up. Alpha passes through unchanged.

The box sums come from an integral image (summed-area table), so the cost
does not grow with the radius. Sums and counts are exact integers; nothing is
rounded before the per-pixel mean.

Example:
    >>> reducer = NoiseReducer(original, strength=6)
    >>> cleaned = reducer.apply()
"""

import logging
from typing import Optional

import numpy as np

from PS_Libs.constants import (
    DEFAULT_NOISE_STRENGTH,
    MAX_NOISE_STRENGTH,
    MIN_NOISE_STRENGTH,
)
from PS_Libs.ImageEditingLib.image_models import Raster

logger = logging.getLogger(__name__)


def validate_strength(strength: int) -> int:
    if isinstance(strength, bool) or int(strength) != strength:
        raise TypeError(f"strength must be an integer, got {strength!r}")
    strength = int(strength)
    if not (MIN_NOISE_STRENGTH <= strength <= MAX_NOISE_STRENGTH):
        raise ValueError(
            f"strength must be {MIN_NOISE_STRENGTH}-{MAX_NOISE_STRENGTH}, got {strength}"
        )
    return strength


def box_blur(channels: np.ndarray, radius: int) -> np.ndarray:
    """
    Clamped-window box blur.

    Args:
        channels: (H, W, C) integer array
        radius: Neighborhood radius in pixels (0 = no blur)

    Returns:
        (H, W, C) int64 array of per-channel means rounded half-up
    """
    values = np.asarray(channels, dtype=np.int64)
    if radius <= 0 or values.size == 0:
        return values.copy()

    height, width = values.shape[:2]
    table = np.zeros((height + 1, width + 1, values.shape[2]), dtype=np.int64)
    table[1:, 1:] = values.cumsum(axis=0).cumsum(axis=1)

    rows = np.arange(height)
    cols = np.arange(width)
    top = np.clip(rows - radius, 0, height)[:, None]
    bottom = np.clip(rows + radius + 1, 0, height)[:, None]
    left = np.clip(cols - radius, 0, width)[None, :]
    right = np.clip(cols + radius + 1, 0, width)[None, :]

    sums = table[bottom, right] - table[top, right] - table[bottom, left] + table[top, left]
    counts = ((bottom - top) * (right - left))[:, :, None]

    # Integer half-up rounding of sums / counts
    return (2 * sums + counts) // (2 * counts)


def reduce_noise(raster: Raster, strength: int) -> Raster:
    """
    Denoise ``raster`` with the given strength (1-10).

    Raises:
        ValueError: If strength is outside 1-10
        TypeError: If strength is not an integer
    """
    strength = validate_strength(strength)
    radius = strength // 2
    factor = strength / 10

    pixels = raster.to_array()
    rgb = pixels[:, :, :3].astype(np.float64)
    blurred = box_blur(pixels[:, :, :3], radius).astype(np.float64)

    blended = np.floor(rgb * (1 - factor) + blurred * factor + 0.5)
    pixels[:, :, :3] = np.clip(blended, 0, 255).astype(np.uint8)

    logger.debug(
        f"Noise reduction on {raster.width}x{raster.height}: "
        f"strength={strength}, radius={radius}, blend={factor}"
    )
    return Raster.from_array(pixels)


class NoiseReducer:
    """Noise reduction state for one original raster."""

    def __init__(self, original: Raster, strength: int = DEFAULT_NOISE_STRENGTH) -> None:
        self._original = original
        self._strength = validate_strength(strength)
        self._output: Optional[Raster] = None

    @property
    def strength(self) -> int:
        return self._strength

    @strength.setter
    def strength(self, value: int) -> None:
        """Set the strength; an existing output is re-derived from the original."""
        self._strength = validate_strength(value)
        if self._output is not None:
            self.apply()

    @property
    def output(self) -> Optional[Raster]:
        return self._output

    def apply(self, strength: Optional[int] = None) -> Raster:
        if strength is not None:
            self._strength = validate_strength(strength)
        self._output = reduce_noise(self._original, self._strength)
        logger.info(f"Noise reduction complete (strength {self._strength})")
        return self._output

    def reset(self) -> Raster:
        """Discard the processed output and return the original."""
        self._output = None
        return self._original
