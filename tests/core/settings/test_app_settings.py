"""Tests for application settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from patch_extractor.core.settings.app_settings import (
    AppSettings,
    ExtractionSettings,
    LoggingSettings,
    OutputSettings,
)
from patch_extractor.enums import PixelFormat, SamplingMethod


class TestExtractionSettings:
    """Tests for ExtractionSettings."""

    def test_defaults(self) -> None:
        """
        Test default extraction values.

        """
        settings = ExtractionSettings()
        assert (settings.patch_width, settings.patch_height) == (64, 64)
        assert settings.count == 16
        assert settings.sampling == SamplingMethod.RANDOM
        assert settings.mask_factor == 1.0
        assert settings.seed is None
        assert settings.workers == 1
        assert settings.pixel_format == PixelFormat.BGRA32
        assert settings.row_alignment == 64

    def test_custom_values(self) -> None:
        """
        Test custom values, including enums given by value.

        """
        settings = ExtractionSettings(
            patch_width=32,
            sampling="uniform",
            mask_factor=0.5,
            seed=7,
            workers=4,
            pixel_format="RGBA32",
        )
        assert settings.patch_width == 32
        assert settings.sampling == SamplingMethod.UNIFORM
        assert settings.mask_factor == 0.5
        assert settings.seed == 7
        assert settings.workers == 4
        assert settings.pixel_format == PixelFormat.RGBA32

    @pytest.mark.parametrize("mask_factor", [0.0, -0.1, 1.01])
    def test_invalid_mask_factor_raises(self, mask_factor: float) -> None:
        """
        Test that mask factors outside (0, 1] are rejected.

        Args:
            mask_factor (float): Invalid factor.

        """
        with pytest.raises(ValidationError):
            ExtractionSettings(mask_factor=mask_factor)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("patch_width", 0),
            ("count", 0),
            ("workers", 0),
            ("workers", 33),
            ("row_alignment", 0),
            ("lock_timeout", 0.0),
            ("sampling", "spiral"),
        ],
    )
    def test_out_of_range_values_raise(self, field: str, value: object) -> None:
        """
        Test field constraints.

        Args:
            field (str): Field name.
            value (object): Invalid value.

        """
        with pytest.raises(ValidationError):
            ExtractionSettings(**{field: value})


class TestOutputSettings:
    """Tests for OutputSettings."""

    def test_defaults(self) -> None:
        """
        Test default output values.

        """
        settings = OutputSettings()
        assert settings.output_dir == "patches"
        assert settings.image_extension == ".png"

    @pytest.mark.parametrize("extension", ["jpg", ".JPG", " .jpg "])
    def test_extension_normalized(self, extension: str) -> None:
        """
        Test that extensions gain a dot and are lowercased.

        Args:
            extension (str): Extension as configured.

        """
        assert OutputSettings(image_extension=extension).image_extension == ".jpg"

    @pytest.mark.parametrize("extension", ["", ".", "   "])
    def test_empty_extension_raises(self, extension: str) -> None:
        """
        Test that an empty extension is rejected.

        Args:
            extension (str): Empty extension.

        """
        with pytest.raises(ValidationError):
            OutputSettings(image_extension=extension)


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_defaults(self) -> None:
        """
        Test default logging values.

        """
        settings = LoggingSettings()
        assert settings.log_level == "INFO"
        assert settings.loggers == {}
        assert settings.rotate_logs is False
        assert settings.log_file is None

    def test_level_names_normalized(self) -> None:
        """
        Test that level names are uppercased.

        """
        settings = LoggingSettings(log_level="debug", loggers={"cv": "warning"})
        assert settings.log_level == "DEBUG"
        assert settings.loggers == {"cv": "WARNING"}

    def test_unknown_level_raises(self) -> None:
        """
        Test that unknown level names are rejected.

        """
        with pytest.raises(ValidationError):
            LoggingSettings(log_level="LOUD")
        with pytest.raises(ValidationError):
            LoggingSettings(loggers={"patch_extractor": "LOUD"})


class TestAppSettings:
    """Tests for AppSettings."""

    def test_default_sections(self) -> None:
        """
        Test default nested settings.

        """
        settings = AppSettings()
        assert isinstance(settings.extraction, ExtractionSettings)
        assert isinstance(settings.output, OutputSettings)
        assert isinstance(settings.logging, LoggingSettings)

    def test_env_nested_delimiter(self) -> None:
        """
        Test that nested values are read from prefixed environment variables.

        """
        with patch.dict(
            os.environ,
            {
                "PEX_EXTRACTION__PATCH_WIDTH": "128",
                "PEX_EXTRACTION__SAMPLING": "uniform",
                "PEX_OUTPUT__IMAGE_EXTENSION": "jpg",
                "PEX_LOGGING__LOG_LEVEL": "debug",
            },
        ):
            settings = AppSettings()

        assert settings.extraction.patch_width == 128
        assert settings.extraction.sampling == SamplingMethod.UNIFORM
        assert settings.output.image_extension == ".jpg"
        assert settings.logging.log_level == "DEBUG"

    def test_unprefixed_env_ignored(self) -> None:
        """
        Test that variables without the prefix are ignored.

        """
        with patch.dict(os.environ, {"EXTRACTION__PATCH_WIDTH": "128"}):
            settings = AppSettings()
        assert settings.extraction.patch_width == 64

    def test_custom_nested_settings(self) -> None:
        """
        Test constructing settings with explicit sections.

        """
        settings = AppSettings(
            extraction=ExtractionSettings(count=3),
            output=OutputSettings(output_dir="out"),
        )
        assert settings.extraction.count == 3
        assert settings.output.output_dir == "out"
