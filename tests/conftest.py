"""Pytest configuration and fixtures."""

import pathlib

import cv2
import numpy as np
import pytest

from patch_extractor.core.settings import AppSettings, reload_settings
from patch_extractor.core.settings.app_settings import ExtractionSettings, LoggingSettings
from patch_extractor.enums import PixelFormat
from patch_extractor.models import DecodedImage, PixelBuffer


def make_gradient_bgr(width: int, height: int) -> np.ndarray:
    """
    Create a BGR image whose pixels encode their own position.

    Args:
        width (int): Image width.
        height (int): Image height.

        np.ndarray: (height, width, 3) uint8 array with B = x, G = y and
            R = (7x + 3y) mod 256.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    image = np.empty((height, width, 3), dtype=np.uint8)
    image[..., 0] = xs % 256
    image[..., 1] = ys % 256
    image[..., 2] = (7 * xs + 3 * ys) % 256
    return image


@pytest.fixture
def mock_settings() -> AppSettings:
    """
    Create mock application settings for testing.

        AppSettings: Mock settings instance.
    """
    return AppSettings(
        extraction=ExtractionSettings(
            patch_width=10,
            patch_height=10,
            count=8,
            seed=1234,
            workers=1,
            pixel_format=PixelFormat.BGRA32,
            row_alignment=64,
        ),
        logging=LoggingSettings(
            log_level="DEBUG",
            log_format="%(message)s",
        ),
    )


@pytest.fixture
def gradient_bgr() -> np.ndarray:
    """
    Create a 100x100 position-encoded BGR image.

        np.ndarray: BGR pixels.
    """
    return make_gradient_bgr(width=100, height=100)


@pytest.fixture
def gradient_bgra(gradient_bgr: np.ndarray) -> np.ndarray:
    """
    Create the opaque BGRA version of the gradient image.

    Args:
        gradient_bgr (np.ndarray): BGR gradient fixture.

        np.ndarray: BGRA pixels with alpha 255.
    """
    return cv2.cvtColor(src=gradient_bgr, code=cv2.COLOR_BGR2BGRA)


@pytest.fixture
def gradient_image(gradient_bgr: np.ndarray) -> DecodedImage:
    """
    Create a decoded top-left gradient image.

    Args:
        gradient_bgr (np.ndarray): BGR gradient fixture.

        DecodedImage: Decoded image.
    """
    return DecodedImage(pixels=gradient_bgr)


@pytest.fixture
def sample_png_bytes(gradient_bgr: np.ndarray) -> bytes:
    """
    Encode the gradient image as PNG.

    Args:
        gradient_bgr (np.ndarray): BGR gradient fixture.

        bytes: PNG image bytes.
    """
    _, buffer = cv2.imencode(".png", gradient_bgr)
    return buffer.tobytes()


@pytest.fixture
def sample_image_path(tmp_path: pathlib.Path, sample_png_bytes: bytes) -> pathlib.Path:
    """
    Write the gradient PNG to a temporary file.

    Args:
        tmp_path (pathlib.Path): Pytest temporary directory.
        sample_png_bytes (bytes): PNG bytes fixture.

        pathlib.Path: Path of the written image.
    """
    path = tmp_path / "gradient.png"
    path.write_bytes(sample_png_bytes)
    return path


@pytest.fixture
def invalid_image_bytes() -> bytes:
    """
    Create invalid image bytes for testing error handling.

        bytes: Invalid image data.
    """
    return b"not a valid image"


@pytest.fixture
def padded_buffer() -> PixelBuffer:
    """
    Create a 10x8 pixel buffer with padded rows and unique bytes per pixel.

    Each pixel is (x, y, x + 10 * y, 255); rows are 64 bytes apart.

        PixelBuffer: Buffer with a stride larger than its row width.
    """
    ys, xs = np.mgrid[0:8, 0:10]
    pixels = np.stack(
        [xs, ys, xs + 10 * ys, np.full_like(xs, 255)],
        axis=-1,
    ).astype(np.uint8)
    return PixelBuffer.from_array(pixels=pixels, row_alignment=64)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    """
    Reset settings cache before each test.

    """
    reload_settings()
