"""
Brush mask painting for background removal.

The painter accumulates free-form brush strokes over a raster. Each stroke is
rasterised into a single-channel coverage mask (255 = marked for removal) and
the working raster shown to the user is that mask composited over the
original in the marker color.

Consecutive stroke points are joined by a line segment of width 2*radius with
round caps, so fast pointer motion still yields a continuous marked region.

Example:
    >>> painter = MaskPainter(original, brush_radius=10)
    >>> painter.begin_stroke((40, 40))
    >>> painter.extend_stroke((120, 45))
    >>> painter.end_stroke()
    >>> working = painter.working_raster
"""

import logging
from typing import List, Optional

import numpy as np
from PIL import Image, ImageDraw

from PS_Libs.constants import (
    DEFAULT_BRUSH_RADIUS,
    DEFAULT_MARKER_OPACITY,
    MARKER_COLOR,
    MAX_BRUSH_RADIUS,
    MIN_BRUSH_RADIUS,
    POINTER_DOWN,
    POINTER_LEAVE,
    POINTER_MOVE,
    POINTER_UP,
)
from PS_Libs.ImageEditingLib.image_models import BrushStroke, Point, PointerEvent, Raster

logger = logging.getLogger(__name__)


def validate_brush_radius(radius: float) -> float:
    if not (MIN_BRUSH_RADIUS <= radius <= MAX_BRUSH_RADIUS):
        raise ValueError(
            f"brush radius must be {MIN_BRUSH_RADIUS}-{MAX_BRUSH_RADIUS}, got {radius}"
        )
    return float(radius)


class MaskPainter:
    """Accumulates brush strokes over a pristine original raster."""

    def __init__(
        self,
        original: Raster,
        brush_radius: float = DEFAULT_BRUSH_RADIUS,
        marker_opacity: float = DEFAULT_MARKER_OPACITY,
    ) -> None:
        if not (0.0 < marker_opacity <= 1.0):
            raise ValueError(f"marker_opacity must be 0 < o <= 1, got {marker_opacity}")

        self._original = original
        self._brush_radius = validate_brush_radius(brush_radius)
        self._marker_opacity = float(marker_opacity)
        self._strokes: List[BrushStroke] = []
        self._active: Optional[BrushStroke] = None
        self._mask = Image.new("L", original.size, 0)
        self._draw = ImageDraw.Draw(self._mask)
        self._working: Optional[Raster] = original

    @property
    def original(self) -> Raster:
        return self._original

    @property
    def brush_radius(self) -> float:
        return self._brush_radius

    @brush_radius.setter
    def brush_radius(self, value: float) -> None:
        self._brush_radius = validate_brush_radius(value)

    @property
    def is_drawing(self) -> bool:
        return self._active is not None

    @property
    def strokes(self) -> List[BrushStroke]:
        """Finished strokes plus the active one, oldest first."""
        strokes = list(self._strokes)
        if self._active is not None:
            strokes.append(self._active)
        return strokes

    @property
    def mask(self) -> np.ndarray:
        """(H, W) uint8 coverage mask, 255 where painted."""
        return np.array(self._mask, dtype=np.uint8)

    @property
    def working_raster(self) -> Raster:
        """The original with every painted pixel composited in the marker color."""
        if self._working is None:
            self._working = self._composite()
        return self._working

    # ------------------------------------------------------------------
    # Stroke lifecycle
    # ------------------------------------------------------------------

    def begin_stroke(self, point: Point) -> None:
        """Start a new stroke and paint a filled dot at ``point``."""
        if self._active is not None:
            self.end_stroke()

        self._active = BrushStroke(radius=self._brush_radius, points=[point])
        self._paint_dot(point, self._brush_radius)
        self._working = None

    def extend_stroke(self, point: Point) -> None:
        """Paint a round-capped segment from the previous point to ``point``."""
        if self._active is None:
            return

        previous = self._active.points[-1]
        self._active.points.append(point)
        radius = self._active.radius
        self._draw.line([previous, point], fill=255, width=int(round(radius * 2)))
        self._paint_dot(previous, radius)
        self._paint_dot(point, radius)
        self._working = None

    def end_stroke(self) -> None:
        if self._active is None:
            return
        self._strokes.append(self._active)
        logger.debug(
            f"Finished stroke with {len(self._active.points)} points, radius {self._active.radius}"
        )
        self._active = None

    def handle_event(self, event: PointerEvent) -> None:
        """Route a pointer event to the stroke lifecycle."""
        if event.kind == POINTER_DOWN:
            self.begin_stroke((event.x, event.y))
        elif event.kind == POINTER_MOVE:
            self.extend_stroke((event.x, event.y))
        elif event.kind in (POINTER_UP, POINTER_LEAVE):
            self.end_stroke()

    def reset(self) -> None:
        """Discard all strokes; the working raster equals the original again."""
        self._strokes = []
        self._active = None
        self._mask = Image.new("L", self._original.size, 0)
        self._draw = ImageDraw.Draw(self._mask)
        self._working = self._original

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _paint_dot(self, point: Point, radius: float) -> None:
        x, y = point
        self._draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=255)

    def _composite(self) -> Raster:
        pixels = self._original.to_array().astype(np.float64)
        coverage = self.mask.astype(np.float64)[:, :, None] / 255.0 * self._marker_opacity
        marker = np.array(MARKER_COLOR, dtype=np.float64)
        blended = pixels * (1.0 - coverage) + marker * coverage
        return Raster.from_array(np.floor(blended + 0.5))
