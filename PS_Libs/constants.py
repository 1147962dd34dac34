"""
Constants and configuration values for Pixel Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editing core.
"""

# Raster layout
CHANNELS = 4
RASTER_MODE = "RGBA"

# Marker predicate (pixels painted for removal)
MARKER_COLOR = (255, 0, 0, 255)
MARKER_RED_MIN = 200      # red channel must be strictly greater
MARKER_GREEN_MAX = 100    # green channel must be strictly less
MARKER_BLUE_MAX = 100     # blue channel must be strictly less
DEFAULT_MARKER_OPACITY = 1.0

# Brush
MIN_BRUSH_RADIUS = 5
MAX_BRUSH_RADIUS = 50
DEFAULT_BRUSH_RADIUS = 20

# Crop
CROP_HANDLE_SIZE = 8
MIN_CROP_SIZE = 50
DEFAULT_CROP_FRACTION = 0.8
ASPECT_PRESETS = {
    "free": None,
    "1:1": 1.0,
    "4:3": 4 / 3,
    "16:9": 16 / 9,
}

# Filters, applied in this order
FILTER_ORDER = (
    "grayscale",
    "sepia",
    "invert",
    "blur",
    "brightness",
    "contrast",
    "saturate",
)
FILTER_RANGES = {
    "grayscale": (0, 100),
    "sepia": (0, 100),
    "invert": (0, 100),
    "blur": (0, 20),
    "brightness": (0, 200),
    "contrast": (0, 200),
    "saturate": (0, 200),
}
FILTER_IDENTITY = {
    "grayscale": 0,
    "sepia": 0,
    "invert": 0,
    "blur": 0,
    "brightness": 100,
    "contrast": 100,
    "saturate": 100,
}

# Noise reduction
MIN_NOISE_STRENGTH = 1
MAX_NOISE_STRENGTH = 10
DEFAULT_NOISE_STRENGTH = 5

# Export
DEFAULT_OUTPUT_FORMAT = "PNG"
FEATURE_BACKGROUND = "background"
FEATURE_CROP = "crop"
FEATURE_FILTERS = "filters"
FEATURE_NOISE = "noise"
DEFAULT_FILENAMES = {
    FEATURE_BACKGROUND: "transparent-bg-image.png",
    FEATURE_CROP: "cropped-image.png",
    FEATURE_FILTERS: "filtered-image.png",
    FEATURE_NOISE: "noise-reduced-image.png",
}

# Pointer event kinds
POINTER_DOWN = "down"
POINTER_MOVE = "move"
POINTER_UP = "up"
POINTER_LEAVE = "leave"
POINTER_KINDS = (POINTER_DOWN, POINTER_MOVE, POINTER_UP, POINTER_LEAVE)
