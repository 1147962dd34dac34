"""
Background carving: make painted pixels transparent.

Carving never alters RGB values. A carved pixel keeps the original's RGB and
gets alpha 0; every other pixel is copied from the original unchanged,
alpha included.

Two selection modes are supported:
    carve: pixels of the *working* raster matching the marker predicate
           (red > 200, green < 100, blue < 100)
    carve_with_mask: pixels where an explicit coverage mask is non-zero.
           Use this when the source image may already contain near-marker
           colors, which the predicate would carve as well.

Example:
    >>> painter = MaskPainter(original)
    >>> ...
    >>> carved = carve(painter.working_raster, original)
"""

import logging

import numpy as np

from PS_Libs.constants import MARKER_BLUE_MAX, MARKER_GREEN_MAX, MARKER_RED_MIN
from PS_Libs.ImageEditingLib.errors import DimensionMismatchError
from PS_Libs.ImageEditingLib.image_editing_ops import check_same_size
from PS_Libs.ImageEditingLib.image_models import Raster

logger = logging.getLogger(__name__)


def marker_mask(raster: Raster) -> np.ndarray:
    """Boolean (H, W) array, True where the pixel matches the marker predicate."""
    pixels = raster.to_array()
    return (
        (pixels[:, :, 0] > MARKER_RED_MIN)
        & (pixels[:, :, 1] < MARKER_GREEN_MAX)
        & (pixels[:, :, 2] < MARKER_BLUE_MAX)
    )


def count_marked(raster: Raster) -> int:
    return int(np.count_nonzero(marker_mask(raster)))


def _apply_transparency(original: Raster, selected: np.ndarray) -> Raster:
    pixels = original.to_array()
    pixels[selected, 3] = 0
    logger.debug(
        f"Carved {int(np.count_nonzero(selected))} of {original.width * original.height} pixels"
    )
    return Raster.from_array(pixels)


def carve(working: Raster, original: Raster) -> Raster:
    """
    Carve marker-colored pixels out of the original.

    Args:
        working: Original raster with marker strokes painted on it
        original: Pristine original raster

    Returns:
        New RGBA raster; marked pixels have alpha 0

    Raises:
        DimensionMismatchError: If the two rasters differ in size
    """
    check_same_size(working, original)
    return _apply_transparency(original, marker_mask(working))


def carve_with_mask(original: Raster, mask: np.ndarray) -> Raster:
    """
    Carve the pixels selected by an explicit mask.

    Args:
        original: Pristine original raster
        mask: (H, W) array; any non-zero entry marks the pixel for removal

    Raises:
        DimensionMismatchError: If the mask shape does not match the raster
    """
    mask = np.asarray(mask)
    if mask.shape != (original.height, original.width):
        raise DimensionMismatchError(
            f"Mask shape {mask.shape} does not match raster "
            f"{original.width}x{original.height}"
        )
    return _apply_transparency(original, mask != 0)
