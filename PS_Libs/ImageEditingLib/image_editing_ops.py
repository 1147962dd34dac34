"""
Core raster boundary operations for Pixel Studio.

This module converts between encoded image files and the in-memory Raster
model and provides small helpers shared by the editing components.

Functions:
    load_raster: Decode an image file, byte string or PIL Image to a Raster
    encode_png: Encode a Raster to lossless PNG bytes
    save_raster: Encode a Raster and write it to disk
    rasters_equal: Pixel-wise equality check for two rasters
    check_same_size: Raise DimensionMismatchError if two rasters differ in size
"""

import io
import logging
from pathlib import Path
from typing import Any, Union

from PIL import Image

from PS_Libs.constants import DEFAULT_OUTPUT_FORMAT
from PS_Libs.ImageEditingLib.errors import DimensionMismatchError, EncodeError
from PS_Libs.ImageEditingLib.image_models import Raster

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, Any]


def load_raster(source: ImageSource) -> Raster:
    """
    Decode an image into an RGBA Raster.

    Args:
        source: Path to an image file, encoded image bytes, or a PIL Image

    Returns:
        Raster holding the decoded RGBA pixels

    Raises:
        FileNotFoundError: If a path is given and does not exist
        OSError: If the data cannot be decoded by Pillow
    """
    if isinstance(source, (bytes, bytearray)):
        with Image.open(io.BytesIO(source)) as img:
            raster = Raster.from_image(img)
    elif isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {path}")
        with Image.open(path) as img:
            raster = Raster.from_image(img)
    else:
        raster = Raster.from_image(source)

    logger.debug(f"Loaded raster {raster.width}x{raster.height}")
    return raster


def encode_png(raster: Raster) -> bytes:
    """
    Encode a raster to PNG bytes, preserving the alpha channel.

    Raises:
        EncodeError: If Pillow fails to produce the byte stream
    """
    buffer = io.BytesIO()
    try:
        raster.to_image().save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    except Exception as e:
        raise EncodeError(
            f"Failed to encode {raster.width}x{raster.height} raster: {e}"
        ) from e

    payload = buffer.getvalue()
    if not payload:
        raise EncodeError("Encoder produced no bytes")
    return payload


def save_raster(raster: Raster, path: Path) -> Path:
    """
    Encode a raster as PNG and write it to ``path``.

    The file is only written once encoding has fully succeeded, so a failed
    encode never leaves a partial file behind.

    Raises:
        EncodeError: If encoding fails
        OSError: If the file cannot be written
    """
    payload = encode_png(raster)
    path = Path(path)
    path.write_bytes(payload)
    logger.info(f"Saved {raster.width}x{raster.height} image to {path}")
    return path


def rasters_equal(first: Raster, second: Raster) -> bool:
    return first.size == second.size and first.data == second.data


def check_same_size(first: Raster, second: Raster) -> None:
    if first.size != second.size:
        raise DimensionMismatchError(
            f"Raster sizes differ: {first.width}x{first.height} "
            f"vs {second.width}x{second.height}"
        )
