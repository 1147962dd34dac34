"""
Tonal and spatial filter composition.

Seven filter channels are applied together, always in this order:

    grayscale -> sepia -> invert -> blur -> brightness -> contrast -> saturate

Each channel follows the CSS Filter Effects definition of the function of the
same name, evaluated as an explicit per-pixel pipeline on floating point RGB
values in [0, 255]. Every stage clamps its result to the valid range before
the next one runs. A channel at its identity value is skipped, so composing
all identities reproduces the original exactly.

Output is always derived from the pristine original, never from a previous
filtered result.

Example:
    >>> compositor = FilterCompositor(original)
    >>> compositor.set_param("sepia", 60)
    >>> compositor.set_param("contrast", 130)
    >>> filtered = compositor.output
"""

from dataclasses import asdict, dataclass
import logging
from typing import Any, Callable, Dict, Optional

import numpy as np
from scipy import ndimage

from PS_Libs.constants import FILTER_IDENTITY, FILTER_ORDER, FILTER_RANGES
from PS_Libs.ImageEditingLib.image_models import Raster

logger = logging.getLogger(__name__)


@dataclass
class FilterParams:
    """Filter channel values.

    Attributes:
        grayscale: Percent toward luminance gray (0-100)
        sepia: Percent toward sepia tone (0-100)
        invert: Percent toward the inverted color (0-100)
        blur: Gaussian standard deviation in pixels (0-20)
        brightness: Linear multiplier in percent (0-200, 100 = identity)
        contrast: Contrast around mid-gray in percent (0-200, 100 = identity)
        saturate: Saturation in percent (0-200, 100 = identity)
    """
    grayscale: float = 0
    sepia: float = 0
    invert: float = 0
    blur: float = 0
    brightness: float = 100
    contrast: float = 100
    saturate: float = 100

    def __post_init__(self) -> None:
        for name in FILTER_ORDER:
            validate_filter_value(name, getattr(self, name))

    def is_identity(self) -> bool:
        return all(getattr(self, name) == FILTER_IDENTITY[name] for name in FILTER_ORDER)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterParams":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


def validate_filter_value(name: str, value: float) -> float:
    if name not in FILTER_RANGES:
        raise ValueError(
            f"Unknown filter: {name}. Valid filters: {', '.join(FILTER_ORDER)}"
        )
    low, high = FILTER_RANGES[name]
    if not (low <= value <= high):
        raise ValueError(f"{name} must be {low}-{high}, got {value}")
    return value


# ============================================================================
# Filter channels
# ============================================================================
#
# All channel functions take and return float arrays of shape (H, W, 4).

def _apply_color_matrix(pixels: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    result = pixels.copy()
    result[:, :, :3] = np.clip(pixels[:, :, :3] @ matrix.T, 0.0, 255.0)
    return result


def apply_grayscale(pixels: np.ndarray, percent: float) -> np.ndarray:
    k = 1.0 - min(percent, 100) / 100.0
    matrix = np.array([
        [0.2126 + 0.7874 * k, 0.7152 - 0.7152 * k, 0.0722 - 0.0722 * k],
        [0.2126 - 0.2126 * k, 0.7152 + 0.2848 * k, 0.0722 - 0.0722 * k],
        [0.2126 - 0.2126 * k, 0.7152 - 0.7152 * k, 0.0722 + 0.9278 * k],
    ])
    return _apply_color_matrix(pixels, matrix)


def apply_sepia(pixels: np.ndarray, percent: float) -> np.ndarray:
    k = 1.0 - min(percent, 100) / 100.0
    matrix = np.array([
        [0.393 + 0.607 * k, 0.769 - 0.769 * k, 0.189 - 0.189 * k],
        [0.349 - 0.349 * k, 0.686 + 0.314 * k, 0.168 - 0.168 * k],
        [0.272 - 0.272 * k, 0.534 - 0.534 * k, 0.131 + 0.869 * k],
    ])
    return _apply_color_matrix(pixels, matrix)


def apply_invert(pixels: np.ndarray, percent: float) -> np.ndarray:
    amount = min(percent, 100) / 100.0
    result = pixels.copy()
    rgb = pixels[:, :, :3]
    result[:, :, :3] = amount * (255.0 - rgb) + (1.0 - amount) * rgb
    return result


def apply_blur(pixels: np.ndarray, radius: float) -> np.ndarray:
    """
    Gaussian blur on premultiplied alpha; ``radius`` is the standard deviation.

    Color is weighted by alpha before blurring and divided back out after,
    so fully transparent pixels contribute nothing to their neighbours.
    Where the blurred alpha is zero the straight-color blur is kept.
    """
    sigma = (radius, radius, 0)
    premultiplied = pixels.copy()
    premultiplied[:, :, :3] *= pixels[:, :, 3:4] / 255.0
    blurred = ndimage.gaussian_filter(premultiplied, sigma=sigma, mode="nearest")
    straight = ndimage.gaussian_filter(pixels[:, :, :3], sigma=sigma, mode="nearest")

    coverage = blurred[:, :, 3:4] / 255.0
    with np.errstate(divide="ignore", invalid="ignore"):
        blurred[:, :, :3] = np.where(coverage > 0, blurred[:, :, :3] / coverage, straight)
    return np.clip(blurred, 0.0, 255.0)


def apply_brightness(pixels: np.ndarray, percent: float) -> np.ndarray:
    result = pixels.copy()
    result[:, :, :3] = np.clip(pixels[:, :, :3] * (percent / 100.0), 0.0, 255.0)
    return result


def apply_contrast(pixels: np.ndarray, percent: float) -> np.ndarray:
    amount = percent / 100.0
    result = pixels.copy()
    result[:, :, :3] = np.clip((pixels[:, :, :3] - 127.5) * amount + 127.5, 0.0, 255.0)
    return result


def apply_saturate(pixels: np.ndarray, percent: float) -> np.ndarray:
    s = percent / 100.0
    matrix = np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
    ])
    return _apply_color_matrix(pixels, matrix)


FILTER_FUNCTIONS: Dict[str, Callable[[np.ndarray, float], np.ndarray]] = {
    "grayscale": apply_grayscale,
    "sepia": apply_sepia,
    "invert": apply_invert,
    "blur": apply_blur,
    "brightness": apply_brightness,
    "contrast": apply_contrast,
    "saturate": apply_saturate,
}


def apply_filters(raster: Raster, params: FilterParams) -> Raster:
    """
    Apply every non-identity filter channel to ``raster`` in fixed order.

    Args:
        raster: Source raster (left untouched)
        params: Filter channel values

    Returns:
        New filtered raster of the same size
    """
    if params.is_identity():
        return Raster(raster.width, raster.height, raster.data)

    pixels = raster.to_array().astype(np.float64)
    for name in FILTER_ORDER:
        value = getattr(params, name)
        if value == FILTER_IDENTITY[name]:
            continue
        pixels = FILTER_FUNCTIONS[name](pixels, float(value))

    return Raster.from_array(np.floor(pixels + 0.5))


class FilterCompositor:
    """Holds filter parameters for one original and re-renders on every change."""

    def __init__(self, original: Raster, params: Optional[FilterParams] = None) -> None:
        self._original = original
        self._params = params if params is not None else FilterParams()
        self._output: Optional[Raster] = None

    @property
    def params(self) -> FilterParams:
        return FilterParams.from_dict(self._params.to_dict())

    @property
    def output(self) -> Raster:
        """Most recent render; rendered on first access."""
        if self._output is None:
            return self.render()
        return self._output

    def set_param(self, name: str, value: float) -> Raster:
        """
        Set one filter channel and re-derive the output from the original.

        Raises:
            ValueError: If the filter name is unknown or the value out of range
        """
        validate_filter_value(name, value)
        setattr(self._params, name, value)
        logger.debug(f"Filter {name} set to {value}")
        return self.render()

    def set_params(self, params: FilterParams) -> Raster:
        self._params = FilterParams.from_dict(params.to_dict())
        return self.render()

    def reset(self) -> Raster:
        self._params = FilterParams()
        return self.render()

    def render(self) -> Raster:
        self._output = apply_filters(self._original, self._params)
        return self._output
