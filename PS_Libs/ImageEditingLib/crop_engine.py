"""
Interactive crop rectangle and sub-raster extraction.

The engine is a small state machine driven by pointer events in raster
coordinates:

    IDLE      --down on a corner handle-->  RESIZING (opposite corner anchored)
    IDLE      --down inside the rect----->  DRAGGING
    DRAGGING  --move--> translate, clamp position to the raster
    RESIZING  --move--> grow/shrink from the anchor, clamp size and bounds,
                        honour the locked aspect ratio if one is set
    any       --up/leave--------------->    IDLE

Extraction copies the [x, y, width, height) region of the original raster
pixel-for-pixel, without resampling.

Example:
    >>> engine = CropEngine(original)
    >>> engine.set_aspect_ratio(16 / 9)
    >>> engine.pointer_down(engine.rect.x + 5, engine.rect.y + 5)
    >>> engine.pointer_move(engine.rect.x + 25, engine.rect.y + 15)
    >>> engine.pointer_up()
    >>> cropped = engine.apply_crop()
"""

from enum import Enum
import logging
from typing import Optional, Tuple, Union

from PS_Libs.constants import (
    CROP_HANDLE_SIZE,
    DEFAULT_CROP_FRACTION,
    MIN_CROP_SIZE,
    POINTER_DOWN,
    POINTER_LEAVE,
    POINTER_MOVE,
    POINTER_UP,
)
from PS_Libs.ImageEditingLib.image_models import CropRect, PointerEvent, Raster

logger = logging.getLogger(__name__)


class CropState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class CropHandle(Enum):
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


# Horizontal and vertical direction of each handle relative to its anchor
_HANDLE_SIGNS = {
    CropHandle.TOP_LEFT: (-1, -1),
    CropHandle.TOP_RIGHT: (1, -1),
    CropHandle.BOTTOM_LEFT: (-1, 1),
    CropHandle.BOTTOM_RIGHT: (1, 1),
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def default_crop_rect(width: int, height: int) -> CropRect:
    """Centered rectangle covering 80% of each dimension."""
    crop_w = width * DEFAULT_CROP_FRACTION
    crop_h = height * DEFAULT_CROP_FRACTION
    return CropRect((width - crop_w) / 2, (height - crop_h) / 2, crop_w, crop_h)


def crop_raster(raster: Raster, rect: CropRect) -> Raster:
    """
    Extract the rectangle from ``raster`` as a new raster.

    Fractional coordinates are rounded half-up; the box is clipped to the
    raster so rounding can never read outside it.
    """
    left, top, right, bottom = rect.to_box()
    left = int(_clamp(left, 0, raster.width))
    top = int(_clamp(top, 0, raster.height))
    right = int(_clamp(right, left, raster.width))
    bottom = int(_clamp(bottom, top, raster.height))

    pixels = raster.to_array()[top:bottom, left:right]
    return Raster.from_array(pixels)


class CropEngine:
    """Crop rectangle state for one original raster."""

    def __init__(self, original: Raster, aspect_ratio: Optional[float] = None) -> None:
        self._original = original
        self._rect = default_crop_rect(original.width, original.height)
        self._state = CropState.IDLE
        self._handle: Optional[CropHandle] = None
        self._anchor: Tuple[float, float] = (0.0, 0.0)
        self._last: Tuple[float, float] = (0.0, 0.0)
        self._aspect_ratio: Optional[float] = None
        self._output: Optional[Raster] = None
        if aspect_ratio is not None:
            self.set_aspect_ratio(aspect_ratio)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def rect(self) -> CropRect:
        return CropRect(self._rect.x, self._rect.y, self._rect.width, self._rect.height)

    @property
    def state(self) -> CropState:
        return self._state

    @property
    def active_handle(self) -> Optional[CropHandle]:
        return self._handle

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self._aspect_ratio

    @property
    def output(self) -> Optional[Raster]:
        return self._output

    @property
    def _min_width(self) -> float:
        return min(MIN_CROP_SIZE, self._original.width)

    @property
    def _min_height(self) -> float:
        return min(MIN_CROP_SIZE, self._original.height)

    def _locked_min_width(self, ratio: float) -> float:
        """Smallest width whose derived height still meets the minimum."""
        return max(self._min_width, self._min_height * ratio)

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def handle_at(self, x: float, y: float) -> Optional[CropHandle]:
        """Return the corner handle within CROP_HANDLE_SIZE of (x, y), if any."""
        rect = self._rect
        corners = (
            (CropHandle.TOP_LEFT, rect.x, rect.y),
            (CropHandle.TOP_RIGHT, rect.right, rect.y),
            (CropHandle.BOTTOM_LEFT, rect.x, rect.bottom),
            (CropHandle.BOTTOM_RIGHT, rect.right, rect.bottom),
        )
        for handle, cx, cy in corners:
            if abs(x - cx) <= CROP_HANDLE_SIZE and abs(y - cy) <= CROP_HANDLE_SIZE:
                return handle
        return None

    def hit_test(self, x: float, y: float) -> Union[CropHandle, str, None]:
        """Return the handle under (x, y), "inside" for the rect body, or None."""
        handle = self.handle_at(x, y)
        if handle is not None:
            return handle
        if self._rect.contains(x, y):
            return "inside"
        return None

    def cursor_at(self, x: float, y: float) -> str:
        """Cursor name for hover feedback at (x, y)."""
        hit = self.hit_test(x, y)
        if hit in (CropHandle.TOP_LEFT, CropHandle.BOTTOM_RIGHT):
            return "nwse-resize"
        if isinstance(hit, CropHandle):
            return "nesw-resize"
        if hit == "inside":
            return "move"
        return "default"

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> CropState:
        handle = self.handle_at(x, y)
        if handle is not None:
            sx, sy = _HANDLE_SIGNS[handle]
            rect = self._rect
            self._anchor = (
                rect.x if sx > 0 else rect.right,
                rect.y if sy > 0 else rect.bottom,
            )
            self._handle = handle
            self._state = CropState.RESIZING
        elif self._rect.contains(x, y):
            self._state = CropState.DRAGGING
        else:
            return self._state

        self._last = (x, y)
        logger.debug(f"Crop pointer down at ({x}, {y}) -> {self._state.value}")
        return self._state

    def pointer_move(self, x: float, y: float) -> CropState:
        if self._state is CropState.IDLE:
            return self._state

        dx = x - self._last[0]
        dy = y - self._last[1]
        self._last = (x, y)

        if self._state is CropState.DRAGGING:
            self._drag(dx, dy)
        else:
            self._resize(dx, dy)
        return self._state

    def pointer_up(self) -> CropState:
        self._state = CropState.IDLE
        self._handle = None
        return self._state

    def pointer_leave(self) -> CropState:
        return self.pointer_up()

    def handle_event(self, event: PointerEvent) -> CropState:
        if event.kind == POINTER_DOWN:
            return self.pointer_down(event.x, event.y)
        if event.kind == POINTER_MOVE:
            return self.pointer_move(event.x, event.y)
        if event.kind == POINTER_UP:
            return self.pointer_up()
        if event.kind == POINTER_LEAVE:
            return self.pointer_leave()
        return self._state

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def _drag(self, dx: float, dy: float) -> None:
        rect = self._rect
        rect.x = _clamp(rect.x + dx, 0, self._original.width - rect.width)
        rect.y = _clamp(rect.y + dy, 0, self._original.height - rect.height)

    def _resize(self, dx: float, dy: float) -> None:
        sx, sy = _HANDLE_SIGNS[self._handle]
        ax, ay = self._anchor
        max_w = self._original.width - ax if sx > 0 else ax
        max_h = self._original.height - ay if sy > 0 else ay

        rect = self._rect
        ratio = self._aspect_ratio
        if ratio:
            # Width leads; its range is bounded so the derived height also fits
            high_w = min(max_w, max_h * ratio)
            low_w = min(self._locked_min_width(ratio), high_w)
            new_w = _clamp(rect.width + sx * dx, low_w, high_w)
            new_h = new_w / ratio
        else:
            new_w = _clamp(rect.width + sx * dx, min(self._min_width, max_w), max_w)
            new_h = _clamp(rect.height + sy * dy, min(self._min_height, max_h), max_h)

        rect.width = new_w
        rect.height = new_h
        rect.x = ax if sx > 0 else ax - new_w
        rect.y = ay if sy > 0 else ay - new_h

    def set_aspect_ratio(self, ratio: Optional[float]) -> None:
        """
        Lock (or with None, unlock) the width/height ratio.

        Locking recomputes the height from the current width; if that would
        overflow the raster, the height is cut to the available space and the
        width recomputed from it. Neither side drops below the minimum crop
        size; the rectangle is shifted back inside the raster if it grew.

        Raises:
            ValueError: If ratio is not positive
        """
        if ratio is not None and ratio <= 0:
            raise ValueError(f"aspect ratio must be > 0, got {ratio}")

        self._aspect_ratio = float(ratio) if ratio is not None else None
        if self._aspect_ratio is None:
            return

        ratio = self._aspect_ratio
        width, height = self._original.size
        rect = self._rect

        new_w = min(max(rect.width, self._locked_min_width(ratio)), width)
        new_h = new_w / ratio
        if rect.y + new_h > height:
            new_h = min(max(height - rect.y, self._locked_min_width(ratio) / ratio), height)
            new_w = new_h * ratio
        if new_w > width:
            new_w = width
            new_h = new_w / ratio

        rect.width = new_w
        rect.height = new_h
        rect.x = _clamp(rect.x, 0, width - new_w)
        rect.y = _clamp(rect.y, 0, height - new_h)
        logger.debug(f"Aspect ratio locked to {self._aspect_ratio:.4f}: {rect.to_dict()}")

    def set_rect(self, rect: CropRect) -> CropRect:
        """Replace the rectangle, clamped to the minimum size and raster bounds."""
        width = _clamp(rect.width, self._min_width, self._original.width)
        height = _clamp(rect.height, self._min_height, self._original.height)
        x = _clamp(rect.x, 0, self._original.width - width)
        y = _clamp(rect.y, 0, self._original.height - height)
        self._rect = CropRect(x, y, width, height)
        return self.rect

    def reset_crop(self) -> CropRect:
        """Restore the default rectangle. The aspect lock is left as is."""
        self._rect = default_crop_rect(self._original.width, self._original.height)
        self._state = CropState.IDLE
        self._handle = None
        self._output = None
        return self.rect

    def apply_crop(self) -> Raster:
        self._output = crop_raster(self._original, self._rect)
        logger.info(
            f"Cropped {self._original.width}x{self._original.height} "
            f"to {self._output.width}x{self._output.height}"
        )
        return self._output
