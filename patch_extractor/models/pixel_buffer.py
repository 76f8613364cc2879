"""Pixel buffer model - packed 4-byte pixels with a row stride."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

import numpy as np

from patch_extractor.core.exceptions import BufferAllocationError, LockFailedError
from patch_extractor.enums import OriginConvention, PixelFormat

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


def aligned_bytes_per_row(width: int, bytes_per_pixel: int, row_alignment: int) -> int:
    """
    Calculate a row stride padded up to a byte alignment.

    Args:
        width (int): Row width in pixels.
        bytes_per_pixel (int): Bytes occupied by one pixel.
        row_alignment (int): Alignment of each row in bytes (1 = tightly packed).

    Returns:
        int: Bytes per row.
    """
    row_bytes = width * bytes_per_pixel
    return -(-row_bytes // row_alignment) * row_alignment


def allocate_bytes(height: int, bytes_per_row: int) -> np.ndarray:
    """
    Allocate a zeroed byte block for a pixel buffer.

    Args:
        height (int): Number of rows.
        bytes_per_row (int): Row stride in bytes.

    Returns:
        np.ndarray: Flat uint8 array of `height * bytes_per_row` bytes.

    Raises:
        BufferAllocationError: If the size is invalid or memory is exhausted.
    """
    if height <= 0 or bytes_per_row <= 0:
        raise BufferAllocationError(
            f"Cannot allocate {height} rows of {bytes_per_row} bytes"
        )
    try:
        return np.zeros(height * bytes_per_row, dtype=np.uint8)
    except MemoryError as e:
        raise BufferAllocationError(
            f"Out of memory allocating {height * bytes_per_row} bytes"
        ) from e


class PixelBuffer:
    """
    A block of packed 4-byte pixels addressed through a row stride.

    A buffer owns its bytes: the array handed to the constructor is adopted
    and made read-only, and nothing else is expected to hold a writable
    reference to it. Rows may be padded, so the valid bytes of a row are
    `width * bytes_per_pixel` while consecutive rows are `bytes_per_row`
    apart. Row 0 in memory is the top image row for top-left buffers and the
    bottom image row for bottom-left buffers.

    Reads go through `locked()`, which holds the buffer lock only for the
    duration of the `with` block. After `release()` the bytes are dropped and
    every further read fails with `LockFailedError`.
    """

    def __init__(
        self,
        data: np.ndarray,
        width: int,
        height: int,
        bytes_per_row: int,
        pixel_format: PixelFormat = PixelFormat.BGRA32,
        origin: OriginConvention = OriginConvention.TOP_LEFT,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ) -> None:
        """
        Wrap a byte block as a pixel buffer.

        Args:
            data (np.ndarray): Flat uint8 array of `height * bytes_per_row` bytes.
            width (int): Width in pixels.
            height (int): Height in pixels.
            bytes_per_row (int): Row stride in bytes.
            pixel_format (PixelFormat): Channel layout of each pixel.
            origin (OriginConvention): Which image row memory row 0 holds.
            lock_timeout (float): Seconds to wait for the read lock.

        Raises:
            ValueError: If the dimensions do not match the data.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Pixel buffer dimensions must be positive, got {width}x{height}")
        if bytes_per_row < width * pixel_format.bytes_per_pixel:
            raise ValueError(
                f"Row stride {bytes_per_row} is smaller than a row of {width} pixels"
            )
        if data.dtype != np.uint8 or data.ndim != 1:
            raise ValueError("Pixel data must be a flat uint8 array")
        if data.size != height * bytes_per_row:
            raise ValueError(
                f"Pixel data has {data.size} bytes, expected {height * bytes_per_row}"
            )

        data.flags.writeable = False
        self._data: np.ndarray | None = data
        self._width = width
        self._height = height
        self._bytes_per_row = bytes_per_row
        self._pixel_format = pixel_format
        self._origin = origin
        self._lock = threading.RLock()
        self.lock_timeout = lock_timeout

    @classmethod
    def allocate(
        cls,
        width: int,
        height: int,
        pixel_format: PixelFormat = PixelFormat.BGRA32,
        origin: OriginConvention = OriginConvention.TOP_LEFT,
        row_alignment: int = 1,
    ) -> "PixelBuffer":
        """
        Allocate a zero-filled pixel buffer.

        Args:
            width (int): Width in pixels.
            height (int): Height in pixels.
            pixel_format (PixelFormat): Channel layout of each pixel.
            origin (OriginConvention): Which image row memory row 0 holds.
            row_alignment (int): Row stride alignment in bytes.

        Returns:
            PixelBuffer: The new buffer.

        Raises:
            BufferAllocationError: If the buffer cannot be allocated.
        """
        if width <= 0:
            raise BufferAllocationError(f"Cannot allocate a buffer {width} pixels wide")
        bytes_per_row = aligned_bytes_per_row(
            width=width,
            bytes_per_pixel=pixel_format.bytes_per_pixel,
            row_alignment=row_alignment,
        )
        data = allocate_bytes(height=height, bytes_per_row=bytes_per_row)
        return cls(
            data=data,
            width=width,
            height=height,
            bytes_per_row=bytes_per_row,
            pixel_format=pixel_format,
            origin=origin,
        )

    @classmethod
    def from_array(
        cls,
        pixels: np.ndarray,
        pixel_format: PixelFormat = PixelFormat.BGRA32,
        origin: OriginConvention = OriginConvention.TOP_LEFT,
        row_alignment: int = 1,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ) -> "PixelBuffer":
        """
        Copy an (H, W, 4) uint8 array into a new pixel buffer.

        Rows are copied in array order, so for a bottom-left buffer the first
        array row must already be the bottom image row.

        Args:
            pixels (np.ndarray): Pixel array already in `pixel_format` order.
            pixel_format (PixelFormat): Channel layout of each pixel.
            origin (OriginConvention): Which image row array row 0 holds.
            row_alignment (int): Row stride alignment in bytes.
            lock_timeout (float): Seconds to wait for the read lock.

        Returns:
            PixelBuffer: The new buffer.

        Raises:
            ValueError: If the array is not (H, W, 4) uint8.
            BufferAllocationError: If the buffer cannot be allocated.
        """
        if pixels.ndim != 3 or pixels.shape[2] != pixel_format.bytes_per_pixel:
            raise ValueError(f"Expected an (H, W, 4) array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")

        height, width = pixels.shape[:2]
        bytes_per_row = aligned_bytes_per_row(
            width=width,
            bytes_per_pixel=pixel_format.bytes_per_pixel,
            row_alignment=row_alignment,
        )
        data = allocate_bytes(height=height, bytes_per_row=bytes_per_row)
        rows = data.reshape(height, bytes_per_row)
        rows[:, : width * pixel_format.bytes_per_pixel] = pixels.reshape(height, -1)
        return cls(
            data=data,
            width=width,
            height=height,
            bytes_per_row=bytes_per_row,
            pixel_format=pixel_format,
            origin=origin,
            lock_timeout=lock_timeout,
        )

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def bytes_per_row(self) -> int:
        return self._bytes_per_row

    @property
    def bytes_per_pixel(self) -> int:
        return self._pixel_format.bytes_per_pixel

    @property
    def pixel_format(self) -> PixelFormat:
        return self._pixel_format

    @property
    def origin(self) -> OriginConvention:
        return self._origin

    @property
    def is_released(self) -> bool:
        return self._data is None

    @contextmanager
    def locked(self, timeout: float | None = None) -> Iterator[np.ndarray]:
        """
        Lock the buffer for reading.

        Args:
            timeout (float | None): Seconds to wait for the lock
                (None = the buffer's `lock_timeout`).

        Yields:
            np.ndarray: Read-only (height, bytes_per_row) view of the rows.

        Raises:
            LockFailedError: If the lock is not acquired in time or the
                buffer has been released.
        """
        wait = self.lock_timeout if timeout is None else timeout
        if not self._lock.acquire(timeout=wait):
            raise LockFailedError(f"Timed out after {wait}s waiting for pixel buffer lock")
        try:
            if self._data is None:
                raise LockFailedError("Pixel buffer has been released")
            yield self._data.reshape(self._height, self._bytes_per_row)
        finally:
            self._lock.release()

    def pixels(self) -> np.ndarray:
        """
        Copy the valid pixels out of the buffer.

        Returns:
            np.ndarray: Writable (height, width, 4) uint8 array in memory row order.
        """
        row_bytes = self._width * self.bytes_per_pixel
        with self.locked() as rows:
            valid = np.array(rows[:, :row_bytes])
        return valid.reshape(self._height, self._width, self.bytes_per_pixel)

    def normalized(
        self,
        pixel_format: PixelFormat | None = None,
        row_alignment: int = 1,
    ) -> "PixelBuffer":
        """
        Get an equivalent top-left buffer in the requested pixel format.

        Args:
            pixel_format (PixelFormat | None): Target format (None = keep current).
            row_alignment (int): Row stride alignment of a newly created buffer.

        Returns:
            PixelBuffer: This buffer when nothing changes, otherwise a new buffer.
        """
        target_format = pixel_format or self._pixel_format
        if target_format == self._pixel_format and self._origin == OriginConvention.TOP_LEFT:
            return self

        pixels = self.pixels()
        if self._origin == OriginConvention.BOTTOM_LEFT:
            pixels = pixels[::-1]
        if target_format != self._pixel_format:
            pixels = pixels[..., target_format.channel_indices_from(self._pixel_format)]

        return PixelBuffer.from_array(
            pixels=np.ascontiguousarray(pixels),
            pixel_format=target_format,
            origin=OriginConvention.TOP_LEFT,
            row_alignment=row_alignment,
            lock_timeout=self.lock_timeout,
        )

    def release(self) -> None:
        """Drop the pixel data; later reads fail with `LockFailedError`."""
        with self._lock:
            self._data = None
        logger.debug(f"Released {self!r}")

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(width={self._width}, height={self._height}, "
            f"bytes_per_row={self._bytes_per_row}, pixel_format={self._pixel_format.value}, "
            f"origin={self._origin.value}, released={self.is_released})"
        )
