"""
Error types raised by the Pixel Studio editing core.

Classes:
    MissingInputError: An operation needs a raster but none is loaded
    DimensionMismatchError: Two rasters that must agree in size do not
    EncodeError: The PNG encoder failed to produce bytes
"""


class MissingInputError(RuntimeError):
    """Raised when an operation requires a loaded raster and none is present."""


class DimensionMismatchError(ValueError):
    """Raised when working and original rasters disagree in size."""


class EncodeError(OSError):
    """Raised when a raster cannot be encoded to an image byte stream."""
