"""
ImageEditingLib - Core pixel processing for Pixel Studio

This module provides the raster model, the five editing components
(mask painting, background carving, cropping, filtering, noise reduction)
and the encode/decode boundary helpers.
"""

from PS_Libs.ImageEditingLib.errors import (
    DimensionMismatchError,
    EncodeError,
    MissingInputError,
)
from PS_Libs.ImageEditingLib.image_models import (
    BrushStroke,
    CropRect,
    Point,
    PointerEvent,
    Raster,
    RgbaColor,
)
from PS_Libs.ImageEditingLib.image_editing_ops import (
    check_same_size,
    encode_png,
    load_raster,
    rasters_equal,
    save_raster,
)
from PS_Libs.ImageEditingLib.mask_painter import MaskPainter
from PS_Libs.ImageEditingLib.background_carver import (
    carve,
    carve_with_mask,
    count_marked,
    marker_mask,
)
from PS_Libs.ImageEditingLib.crop_engine import (
    CropEngine,
    CropHandle,
    CropState,
    crop_raster,
    default_crop_rect,
)
from PS_Libs.ImageEditingLib.filter_compositor import (
    FilterCompositor,
    FilterParams,
    apply_filters,
)
from PS_Libs.ImageEditingLib.noise_reducer import (
    NoiseReducer,
    box_blur,
    reduce_noise,
)

__all__ = [
    "DimensionMismatchError",
    "EncodeError",
    "MissingInputError",
    "BrushStroke",
    "CropRect",
    "Point",
    "PointerEvent",
    "Raster",
    "RgbaColor",
    "check_same_size",
    "encode_png",
    "load_raster",
    "rasters_equal",
    "save_raster",
    "MaskPainter",
    "carve",
    "carve_with_mask",
    "count_marked",
    "marker_mask",
    "CropEngine",
    "CropHandle",
    "CropState",
    "crop_raster",
    "default_crop_rect",
    "FilterCompositor",
    "FilterParams",
    "apply_filters",
    "NoiseReducer",
    "box_blur",
    "reduce_noise",
]
