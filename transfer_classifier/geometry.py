"""
Image decoding and square letterboxing
"""

import base64
import binascii
import io
from typing import Union

import numpy as np
from numpy import ndarray
from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeError, InvalidImageError

ImageType = Union[Image.Image, ndarray]


def decode_image(data: Union[bytes, bytearray, str]) -> Image.Image:
    """
    Decode an encoded pixel payload into an RGB image.

    Args:
        data: Raw file bytes, base64 text or a ``data:image/...;base64,`` URL

    Returns:
        PIL.Image.Image: The decoded image in RGB mode

    Raises:
        ImageDecodeError: If the payload is empty or not a readable image
    """
    if isinstance(data, str):
        payload = data.partition(",")[2] if data.startswith("data:") else data
        try:
            # MIME-style base64 wraps lines
            data = base64.b64decode("".join(payload.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeError(f"Invalid base64 image payload: {e}") from e

    if not isinstance(data, (bytes, bytearray)):
        raise ImageDecodeError(f"Unsupported image payload type: {type(data).__name__}")
    if not data:
        raise ImageDecodeError("Empty image payload")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    # Some Pillow plugins raise ValueError or SyntaxError on malformed files
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e

    if image.mode != 'RGB':
        image = image.convert('RGB')

    return image


def letterbox(source: ImageType, size: int) -> Image.Image:
    """
    Scale ``source`` so its larger side equals ``size`` and paste it at the
    top-left corner of a black ``size`` x ``size`` RGB canvas.
    """
    if isinstance(source, ndarray):
        height, width = source.shape[:2]
    else:
        width, height = source.size
    if width <= 0 or height <= 0:
        raise InvalidImageError(f"Image has degenerate geometry {width}x{height}")
    if size <= 0:
        raise InvalidImageError(f"Target size must be positive, got {size}")

    if isinstance(source, ndarray):
        source = Image.fromarray(_to_uint8(source))

    scale = size / max(width, height)
    scaled_width = min(size, max(1, round(width * scale)))
    scaled_height = min(size, max(1, round(height * scale)))

    if source.mode != 'RGB':
        source = source.convert('RGB')

    resized = source.resize((scaled_width, scaled_height), Image.Resampling.BILINEAR)

    canvas = Image.new('RGB', (size, size))
    canvas.paste(resized, (0, 0))

    return canvas


def _to_uint8(array: ndarray) -> ndarray:
    """
    Validate a H x W or H x W x C raster and return it as uint8.

    Float rasters must hold values in [0, 1] and are scaled to [0, 255].
    """
    if array.ndim == 3 and array.shape[2] == 1:
        array = array[:, :, 0]

    if array.ndim not in (2, 3) or (array.ndim == 3 and array.shape[2] not in (3, 4)):
        raise InvalidImageError(f"Unsupported raster shape {array.shape}")

    if array.dtype == np.uint8:
        return array

    if np.issubdtype(array.dtype, np.floating):
        if not np.isfinite(array).all() or array.min() < 0.0 or array.max() > 1.0:
            raise InvalidImageError("Float rasters must hold values in [0, 1]")
        return np.round(array * 255.0).astype(np.uint8)

    raise InvalidImageError(f"Unsupported raster dtype {array.dtype}")
