"""Tests for stock converters."""

import cv2
import numpy as np

from patch_extractor.enums import OriginConvention, PixelFormat
from patch_extractor.models import PixelBuffer
from patch_extractor.services.converters import (
    encode_image,
    to_array,
    to_pixel_buffer,
    to_png_bytes,
)


class TestToArray:
    """Tests for to_array converter."""

    def test_returns_tight_pixels(self, padded_buffer: PixelBuffer) -> None:
        """
        Test that padding is dropped.

        Args:
            padded_buffer (PixelBuffer): Padded buffer fixture.

        """
        pixels = to_array(padded_buffer)
        assert pixels.shape == (8, 10, 4)
        assert pixels[3, 2].tolist() == [2, 3, 32, 255]

    def test_bottom_left_buffer_is_flipped(self) -> None:
        """
        Test that a bottom-left buffer comes out top row first.

        """
        rows = np.zeros((2, 1, 4), dtype=np.uint8)
        rows[0, 0, 0] = 1  # bottom image row
        rows[1, 0, 0] = 2  # top image row
        buffer = PixelBuffer.from_array(pixels=rows, origin=OriginConvention.BOTTOM_LEFT)

        pixels = to_array(buffer)

        assert pixels[:, 0, 0].tolist() == [2, 1]


class TestEncodeImage:
    """Tests for encode_image converter."""

    def test_png_round_trip(self, padded_buffer: PixelBuffer) -> None:
        """
        Test that PNG output decodes to the patch pixels.

        Args:
            padded_buffer (PixelBuffer): Padded buffer fixture.

        """
        encoded = to_png_bytes(padded_buffer)
        decoded = cv2.imdecode(np.frombuffer(encoded, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        np.testing.assert_array_equal(decoded, padded_buffer.pixels())

    def test_png_from_rgba_buffer_is_bgra(self) -> None:
        """
        Test that non-BGRA buffers are converted before encoding.

        """
        rgba = np.array([[[30, 20, 10, 255]]], dtype=np.uint8)
        buffer = PixelBuffer.from_array(pixels=rgba, pixel_format=PixelFormat.RGBA32)

        encoded = encode_image(buffer=buffer, extension=".png")
        decoded = cv2.imdecode(np.frombuffer(encoded, dtype=np.uint8), cv2.IMREAD_UNCHANGED)

        assert decoded[0, 0].tolist() == [10, 20, 30, 255]

    def test_jpeg_drops_alpha(self, padded_buffer: PixelBuffer) -> None:
        """
        Test that JPEG output is a three channel image.

        Args:
            padded_buffer (PixelBuffer): Padded buffer fixture.

        """
        encoded = encode_image(buffer=padded_buffer, extension=".jpg")
        decoded = cv2.imdecode(np.frombuffer(encoded, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        assert decoded.shape == (8, 10, 3)


class TestToPixelBuffer:
    """Tests for to_pixel_buffer converter."""

    def test_returns_same_buffer(self, padded_buffer: PixelBuffer) -> None:
        """
        Test that the buffer itself is the payload.

        Args:
            padded_buffer (PixelBuffer): Padded buffer fixture.

        """
        assert to_pixel_buffer(padded_buffer) is padded_buffer
