"""
Editing session state for Pixel Studio.

An EditingSession owns the pristine original raster of the loaded image and
one instance of each editing component. It is the seam a UI talks to: pointer
events and control values go in, processed rasters and PNG downloads come out.

Every operation invoked before an image is loaded is a logged no-op that
returns None. ``require_raster`` is available for callers that want an
exception instead.

Example:
    >>> session = EditingSession()
    >>> session.load_image("photo.png")
    >>> session.paint(PointerEvent("down", 10, 10))
    >>> session.paint(PointerEvent("up"))
    >>> carved = session.remove_background()
    >>> filename, payload = session.export("background")
"""

import logging
from typing import Dict, Optional, Tuple

from PS_Libs.constants import (
    DEFAULT_BRUSH_RADIUS,
    DEFAULT_MARKER_OPACITY,
    DEFAULT_NOISE_STRENGTH,
    FEATURE_BACKGROUND,
    FEATURE_CROP,
    FEATURE_FILTERS,
    FEATURE_NOISE,
)
from PS_Libs.ImageEditingLib.background_carver import carve, carve_with_mask
from PS_Libs.ImageEditingLib.crop_engine import CropEngine, CropState
from PS_Libs.ImageEditingLib.errors import MissingInputError
from PS_Libs.ImageEditingLib.filter_compositor import FilterCompositor, FilterParams
from PS_Libs.ImageEditingLib.image_editing_ops import ImageSource, encode_png, load_raster
from PS_Libs.ImageEditingLib.image_models import CropRect, PointerEvent, Raster
from PS_Libs.ImageEditingLib.mask_painter import MaskPainter
from PS_Libs.ImageEditingLib.noise_reducer import NoiseReducer
from PS_Libs.SessionLib.export_handler import default_filename

logger = logging.getLogger(__name__)


class EditingSession:
    """Explicit, UI-independent state for one loaded image."""

    def __init__(
        self,
        brush_radius: float = DEFAULT_BRUSH_RADIUS,
        marker_opacity: float = DEFAULT_MARKER_OPACITY,
        explicit_mask: bool = False,
    ) -> None:
        self.brush_radius = brush_radius
        self.marker_opacity = marker_opacity
        self.explicit_mask = explicit_mask

        self._original: Optional[Raster] = None
        self._painter: Optional[MaskPainter] = None
        self._crop: Optional[CropEngine] = None
        self._filters: Optional[FilterCompositor] = None
        self._noise: Optional[NoiseReducer] = None
        self._aspect_ratio: Optional[float] = None
        self._outputs: Dict[str, Raster] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def original(self) -> Optional[Raster]:
        return self._original

    @property
    def is_loaded(self) -> bool:
        return self._original is not None

    def require_raster(self) -> Raster:
        if self._original is None:
            raise MissingInputError("No image loaded")
        return self._original

    def load_raster(self, raster: Raster) -> Raster:
        """Start a new session on ``raster``; all previous state is discarded."""
        self._original = raster
        self._painter = MaskPainter(raster, self.brush_radius, self.marker_opacity)
        self._crop = CropEngine(raster, self._aspect_ratio)
        self._filters = FilterCompositor(raster)
        self._noise = NoiseReducer(raster, DEFAULT_NOISE_STRENGTH)
        self._outputs = {}
        logger.info(f"Loaded {raster.width}x{raster.height} image")
        return raster

    def load_image(self, source: ImageSource) -> Raster:
        return self.load_raster(load_raster(source))

    def _missing(self, operation: str) -> None:
        logger.warning(f"{operation} ignored: no image loaded")

    # ------------------------------------------------------------------
    # Background removal
    # ------------------------------------------------------------------

    @property
    def painter(self) -> Optional[MaskPainter]:
        return self._painter

    def set_brush_radius(self, radius: float) -> None:
        if self._painter is not None:
            self._painter.brush_radius = radius
        self.brush_radius = radius

    def paint(self, event: PointerEvent) -> Optional[Raster]:
        """Feed a pointer event to the mask painter; returns the working raster."""
        if self._painter is None:
            self._missing("Paint")
            return None
        self._painter.handle_event(event)
        return self._painter.working_raster

    def reset_mask(self) -> Optional[Raster]:
        if self._painter is None:
            self._missing("Mask reset")
            return None
        self._painter.reset()
        self._outputs.pop(FEATURE_BACKGROUND, None)
        return self._painter.working_raster

    def remove_background(self) -> Optional[Raster]:
        if self._painter is None:
            self._missing("Background removal")
            return None

        if self.explicit_mask:
            result = carve_with_mask(self._original, self._painter.mask)
        else:
            result = carve(self._painter.working_raster, self._original)
        self._outputs[FEATURE_BACKGROUND] = result
        logger.info("Background removed")
        return result

    # ------------------------------------------------------------------
    # Cropping
    # ------------------------------------------------------------------

    @property
    def crop_rect(self) -> Optional[CropRect]:
        return self._crop.rect if self._crop is not None else None

    def crop_event(self, event: PointerEvent) -> Optional[CropState]:
        if self._crop is None:
            self._missing("Crop gesture")
            return None
        return self._crop.handle_event(event)

    def set_aspect_ratio(self, ratio: Optional[float]) -> None:
        """Aspect lock survives crop resets and is kept for the next image."""
        if self._crop is not None:
            self._crop.set_aspect_ratio(ratio)
        elif ratio is not None and ratio <= 0:
            raise ValueError(f"aspect ratio must be > 0, got {ratio}")
        self._aspect_ratio = ratio

    def set_crop_rect(self, rect: CropRect) -> Optional[CropRect]:
        if self._crop is None:
            self._missing("Crop rectangle")
            return None
        return self._crop.set_rect(rect)

    def apply_crop(self) -> Optional[Raster]:
        if self._crop is None:
            self._missing("Crop")
            return None
        result = self._crop.apply_crop()
        self._outputs[FEATURE_CROP] = result
        return result

    def reset_crop(self) -> Optional[CropRect]:
        if self._crop is None:
            self._missing("Crop reset")
            return None
        self._outputs.pop(FEATURE_CROP, None)
        return self._crop.reset_crop()

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    @property
    def filter_params(self) -> Optional[FilterParams]:
        return self._filters.params if self._filters is not None else None

    def set_filter(self, name: str, value: float) -> Optional[Raster]:
        if self._filters is None:
            self._missing("Filter change")
            return None
        result = self._filters.set_param(name, value)
        self._outputs[FEATURE_FILTERS] = result
        return result

    def apply_filters(self, params: Optional[FilterParams] = None) -> Optional[Raster]:
        if self._filters is None:
            self._missing("Filters")
            return None
        if params is not None:
            result = self._filters.set_params(params)
        else:
            result = self._filters.render()
        self._outputs[FEATURE_FILTERS] = result
        return result

    def reset_filters(self) -> Optional[Raster]:
        if self._filters is None:
            self._missing("Filter reset")
            return None
        self._outputs.pop(FEATURE_FILTERS, None)
        return self._filters.reset()

    # ------------------------------------------------------------------
    # Noise reduction
    # ------------------------------------------------------------------

    @property
    def noise_strength(self) -> Optional[int]:
        return self._noise.strength if self._noise is not None else None

    def set_noise_strength(self, strength: int) -> Optional[Raster]:
        """Change the strength; an applied result is re-derived at once."""
        if self._noise is None:
            self._missing("Noise strength")
            return None
        self._noise.strength = strength
        if self._noise.output is not None:
            self._outputs[FEATURE_NOISE] = self._noise.output
        return self._noise.output

    def apply_noise_reduction(self, strength: Optional[int] = None) -> Optional[Raster]:
        if self._noise is None:
            self._missing("Noise reduction")
            return None
        result = self._noise.apply(strength)
        self._outputs[FEATURE_NOISE] = result
        return result

    def reset_noise(self) -> Optional[Raster]:
        if self._noise is None:
            self._missing("Noise reset")
            return None
        self._outputs.pop(FEATURE_NOISE, None)
        return self._noise.reset()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def output(self, feature: str) -> Optional[Raster]:
        """Latest processed raster for a feature, or None if not applied yet."""
        return self._outputs.get(feature)

    def export(self, feature: str) -> Optional[Tuple[str, bytes]]:
        """
        Encode the latest output of ``feature`` for download.

        Returns:
            Tuple of (default filename, PNG bytes), or None if nothing to export

        Raises:
            ValueError: If the feature is unknown
            EncodeError: If encoding fails
        """
        if self._original is None:
            self._missing("Export")
            return None
        filename = default_filename(feature)
        raster = self._outputs.get(feature)
        if raster is None:
            logger.warning(f"Export of '{feature}' ignored: nothing has been applied")
            return None
        return filename, encode_png(raster)
