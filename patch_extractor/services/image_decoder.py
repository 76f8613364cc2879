"""Image decoding and rendering into normalized pixel buffers."""

import logging
import os
from pathlib import Path

import cv2
import numpy as np
from pydantic import ValidationError

from patch_extractor.core.exceptions import ImageDecodeError
from patch_extractor.enums import OriginConvention, PixelFormat
from patch_extractor.models import DecodedImage, PixelBuffer
from patch_extractor.models.pixel_buffer import DEFAULT_LOCK_TIMEOUT

logger = logging.getLogger(__name__)

ImageSource = str | os.PathLike | bytes | bytearray | np.ndarray | DecodedImage

# OpenCV decodes into BGR(A) channel order
DECODED_PIXEL_FORMAT = PixelFormat.BGRA32


def decode_image_bytes(image_bytes: bytes | bytearray) -> DecodedImage:
    """
    Decode encoded image bytes (PNG, JPEG, ...) with OpenCV.

    Args:
        image_bytes (bytes | bytearray): Encoded image.

    Returns:
        DecodedImage: Top-left image with 8-bit gray, BGR or BGRA pixels.

    Raises:
        ImageDecodeError: If the bytes do not decode to an image.
    """
    if not image_bytes:
        raise ImageDecodeError("Image data is empty")

    nparr = np.frombuffer(buffer=image_bytes, dtype=np.uint8)
    try:
        img = cv2.imdecode(buf=nparr, flags=cv2.IMREAD_UNCHANGED)
        if img is not None and img.dtype != np.uint8:
            # Higher bit depths are reduced to 8-bit by the colour decoder
            img = cv2.imdecode(buf=nparr, flags=cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ImageDecodeError(f"OpenCV failed to decode image: {e}") from e

    if img is None:
        raise ImageDecodeError("Failed to decode image")

    return _to_decoded_image(pixels=img, origin=OriginConvention.TOP_LEFT)


def load_image(
    source: ImageSource,
    origin: OriginConvention = OriginConvention.TOP_LEFT,
) -> DecodedImage:
    """
    Load a source image from a path, encoded bytes or a pixel array.

    Args:
        source (ImageSource): Image file path, encoded bytes, (H, W[, C]) uint8
            array in OpenCV channel order, or an already decoded image.
        origin (OriginConvention): Row order of a raw pixel array. Ignored for
            files and bytes, which decode top-left.

    Returns:
        DecodedImage: The decoded image.

    Raises:
        ImageDecodeError: If the source has no usable pixel data.
    """
    if isinstance(source, DecodedImage):
        return source
    if isinstance(source, np.ndarray):
        return _to_decoded_image(pixels=source, origin=origin)
    if isinstance(source, (bytes, bytearray)):
        return decode_image_bytes(source)

    path = Path(source)
    try:
        image_bytes = path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Cannot read image file {path}: {e}") from e

    logger.debug(f"Read {len(image_bytes)} bytes from {path}")
    return decode_image_bytes(image_bytes)


def _to_decoded_image(pixels: np.ndarray, origin: OriginConvention) -> DecodedImage:
    """
    Wrap a pixel array, turning validation failures into decode errors.

    Args:
        pixels (np.ndarray): Pixel array.
        origin (OriginConvention): Row order of the array.

    Returns:
        DecodedImage: The wrapped image.

    Raises:
        ImageDecodeError: If the array is not a usable 8-bit image.
    """
    try:
        return DecodedImage(pixels=pixels, origin=origin)
    except ValidationError as e:
        raise ImageDecodeError(f"Invalid pixel data: {e.errors()[0]['msg']}") from e


def render_pixel_buffer(
    image: DecodedImage,
    pixel_format: PixelFormat = PixelFormat.BGRA32,
    row_alignment: int = 64,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
) -> PixelBuffer:
    """
    Render a decoded image into a packed 4-byte pixel buffer.

    Gray and BGR pixels gain an opaque alpha channel, channels are reordered
    to `pixel_format`, and rows are padded to `row_alignment` bytes. Rows
    keep their memory order, so the buffer has the image's origin convention.

    Args:
        image (DecodedImage): Image to render.
        pixel_format (PixelFormat): Target pixel format.
        row_alignment (int): Row stride alignment in bytes.
        lock_timeout (float): Read lock timeout of the new buffer.

    Returns:
        PixelBuffer: The rendered buffer.

    Raises:
        ImageDecodeError: If the pixels cannot be converted.
        BufferAllocationError: If the buffer cannot be allocated.
    """
    pixels = image.pixels
    channels = 1 if pixels.ndim == 2 else pixels.shape[2]
    try:
        if channels == 1:
            bgra = cv2.cvtColor(src=pixels, code=cv2.COLOR_GRAY2BGRA)
        elif channels == 3:
            bgra = cv2.cvtColor(src=pixels, code=cv2.COLOR_BGR2BGRA)
        else:
            bgra = pixels
    except cv2.error as e:
        raise ImageDecodeError(f"OpenCV failed to convert pixels: {e}") from e

    if pixel_format != DECODED_PIXEL_FORMAT:
        bgra = bgra[..., pixel_format.channel_indices_from(DECODED_PIXEL_FORMAT)]

    buffer = PixelBuffer.from_array(
        pixels=np.ascontiguousarray(bgra),
        pixel_format=pixel_format,
        origin=image.origin,
        row_alignment=row_alignment,
        lock_timeout=lock_timeout,
    )
    logger.debug(f"Rendered {buffer!r}")
    return buffer
