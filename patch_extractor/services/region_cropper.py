"""Region cropper - copies a rectangle of pixels out of a pixel buffer."""

import logging

from patch_extractor.core.exceptions import CropOutOfBoundsError
from patch_extractor.models import PixelBuffer, Rect
from patch_extractor.models.pixel_buffer import allocate_bytes

logger = logging.getLogger(__name__)


def crop_pixel_buffer(source: PixelBuffer, rect: Rect) -> PixelBuffer:
    """
    Copy the pixels inside a rectangle into a new pixel buffer.

    `rect` is in the source buffer's memory coordinates: row `rect.y` is
    the `rect.y`-th row in memory, whatever the buffer's origin convention.
    The first copied byte is at `rect.y * bytes_per_row + rect.x *
    bytes_per_pixel`; each of the `rect.height` rows contributes
    `rect.width * bytes_per_pixel` bytes. The result is tightly packed, keeps
    the source pixel format and origin convention, and shares no memory with
    the source, so it stays valid after the source is released.

    Args:
        source (PixelBuffer): Buffer to crop from.
        rect (Rect): Rectangle to copy, fully inside the source.

    Returns:
        PixelBuffer: Independent copy of the rectangle.

    Raises:
        CropOutOfBoundsError: If any part of `rect` lies outside the source.
        LockFailedError: If the source cannot be locked for reading.
        BufferAllocationError: If the destination cannot be allocated.
    """
    if (
        rect.min_x < 0
        or rect.min_y < 0
        or rect.max_x > source.width
        or rect.max_y > source.height
    ):
        raise CropOutOfBoundsError(
            f"Crop rect {rect.to_tuple()} exceeds {source.width}x{source.height} buffer"
        )

    bytes_per_pixel = source.bytes_per_pixel
    row_bytes = rect.width * bytes_per_pixel
    start = rect.min_x * bytes_per_pixel

    data = allocate_bytes(height=rect.height, bytes_per_row=row_bytes)
    destination = data.reshape(rect.height, row_bytes)
    with source.locked() as rows:
        destination[:] = rows[rect.min_y : rect.max_y, start : start + row_bytes]

    return PixelBuffer(
        data=data,
        width=rect.width,
        height=rect.height,
        bytes_per_row=row_bytes,
        pixel_format=source.pixel_format,
        origin=source.origin,
        lock_timeout=source.lock_timeout,
    )
