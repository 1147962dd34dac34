"""
Image editing data models for Pixel Studio.

This module defines core data structures shared by every editing component.

Classes:
    Raster: Immutable RGBA bitmap (width, height, row-major byte buffer)
    CropRect: Axis-aligned crop rectangle in raster coordinates
    BrushStroke: Ordered points painted with a single brush radius
    PointerEvent: A pointer gesture sample in raster coordinates

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    Point: An (x, y) pair in raster coordinates
"""

from dataclasses import dataclass, field
import math
from typing import Any, Dict, List, Tuple

import numpy as np
from PIL import Image

from PS_Libs.constants import CHANNELS, POINTER_KINDS, RASTER_MODE

RgbaColor = Tuple[int, int, int, int]
Point = Tuple[float, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Raster:
    """
    Decoded RGBA bitmap.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        data: Row-major RGBA bytes, top-to-bottom, length width*height*4
    """
    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Raster dimensions must be >= 0, got {self.width}x{self.height}")
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ValueError(
                f"Raster data length {len(self.data)} does not match "
                f"{self.width}x{self.height}x{CHANNELS} = {expected}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @classmethod
    def blank(cls, width: int, height: int, color: RgbaColor = (0, 0, 0, 0)) -> "Raster":
        """Create a raster filled with a single color."""
        return cls(width, height, bytes(color) * (width * height))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Raster":
        """
        Create a raster from an (H, W, 4) array.

        Values are clipped to 0-255 and converted to uint8.
        """
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected array of shape (H, W, 4), got {array.shape}")
        pixels = np.clip(array, 0, 255).astype(np.uint8)
        height, width = pixels.shape[:2]
        return cls(width, height, pixels.tobytes())

    @classmethod
    def from_image(cls, image: Any) -> "Raster":
        """Create a raster from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "mode") or not hasattr(image, "tobytes"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        if image.mode != RASTER_MODE:
            image = image.convert(RASTER_MODE)
        return cls(image.width, image.height, image.tobytes())

    def to_array(self) -> np.ndarray:
        """Return a writable (H, W, 4) uint8 copy of the pixel data."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        ).copy()

    def to_image(self) -> Image.Image:
        """Return a new PIL RGBA image holding a copy of the pixel data."""
        return Image.frombytes(RASTER_MODE, (self.width, self.height), self.data)

    def pixel(self, x: int, y: int) -> RgbaColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        offset = (y * self.width + x) * CHANNELS
        r, g, b, a = self.data[offset:offset + CHANNELS]
        return r, g, b, a


@dataclass
class CropRect:
    """Crop rectangle in raster coordinates (may hold fractional values)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Edges count as inside."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def to_box(self) -> Tuple[int, int, int, int]:
        """Integer (left, top, right, bottom) box used for pixel extraction."""
        left = round_half_up(self.x)
        top = round_half_up(self.y)
        return (
            left,
            top,
            left + round_half_up(self.width),
            top + round_half_up(self.height),
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropRect":
        """Create from dictionary."""
        return cls(
            float(data["x"]),
            float(data["y"]),
            float(data["width"]),
            float(data["height"]),
        )


@dataclass
class BrushStroke:
    radius: float
    points: List[Point] = field(default_factory=list)


@dataclass(frozen=True)
class PointerEvent:
    """
    Pointer gesture sample.

    Attributes:
        kind: One of 'down', 'move', 'up', 'leave'
        x: X coordinate in raster space
        y: Y coordinate in raster space
    """
    kind: str
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self) -> None:
        if self.kind not in POINTER_KINDS:
            raise ValueError(
                f"Unknown pointer event kind: {self.kind}. "
                f"Valid kinds: {', '.join(POINTER_KINDS)}"
            )
