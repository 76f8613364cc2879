"""Stock converters from patch pixel buffers to feature payloads."""

from collections.abc import Callable

import cv2
import numpy as np

from patch_extractor.enums import PixelFormat
from patch_extractor.models import PixelBuffer
from patch_extractor.models.patch_result import PayloadT

Converter = Callable[[PixelBuffer], PayloadT]


def to_pixel_buffer(buffer: PixelBuffer) -> PixelBuffer:
    """Use the patch pixel buffer itself as the payload."""
    return buffer


def to_array(buffer: PixelBuffer) -> np.ndarray:
    """
    Convert a patch to a pixel array.

    Args:
        buffer (PixelBuffer): Patch buffer.

    Returns:
        np.ndarray: (height, width, 4) uint8 array, top row first, in the
            buffer's pixel format.
    """
    return buffer.normalized().pixels()


def encode_image(buffer: PixelBuffer, extension: str = ".png") -> bytes:
    """
    Encode a patch as an image file with OpenCV.

    Args:
        buffer (PixelBuffer): Patch buffer.
        extension (str): Image file extension selecting the codec.

    Returns:
        bytes: Encoded image.

    Raises:
        ValueError: If OpenCV cannot encode the patch.
    """
    bgra = buffer.normalized(pixel_format=PixelFormat.BGRA32).pixels()
    if extension.lower() in (".jpg", ".jpeg"):
        # JPEG has no alpha channel
        image = cv2.cvtColor(src=bgra, code=cv2.COLOR_BGRA2BGR)
    else:
        image = bgra

    success, encoded = cv2.imencode(ext=extension, img=image)
    if not success:
        raise ValueError(f"Failed to encode patch as {extension}")
    return encoded.tobytes()


def to_png_bytes(buffer: PixelBuffer) -> bytes:
    """Encode a patch as PNG bytes."""
    return encode_image(buffer=buffer, extension=".png")
