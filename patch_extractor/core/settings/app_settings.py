"""Application settings using pydantic-settings."""

import logging

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from patch_extractor.enums import PixelFormat, SamplingMethod


class ExtractionSettings(BaseModel):
    """Patch extraction configuration."""

    patch_width: int = Field(default=64, ge=1, description="Patch width in pixels")
    patch_height: int = Field(default=64, ge=1, description="Patch height in pixels")
    count: int = Field(default=16, ge=1, description="Number of patches to sample")
    sampling: SamplingMethod = Field(
        default=SamplingMethod.RANDOM, description="Patch placement method"
    )
    mask_factor: float = Field(
        default=1.0,
        gt=0.0,
        le=1.0,
        description="Fraction of the image (centered) that patches are sampled from",
    )
    seed: int | None = Field(
        default=None, description="Seed for random sampling (None = nondeterministic)"
    )
    workers: int = Field(
        default=1, ge=1, le=32, description="Threads used for cropping (1 = sequential)"
    )
    pixel_format: PixelFormat = Field(
        default=PixelFormat.BGRA32, description="Packed 4-byte format of output patches"
    )
    row_alignment: int = Field(
        default=64, ge=1, le=4096, description="Row stride alignment in bytes for rendering"
    )
    lock_timeout: float = Field(
        default=5.0, gt=0.0, description="Seconds to wait for a pixel buffer read lock"
    )


class OutputSettings(BaseModel):
    """Patch output configuration."""

    output_dir: str = Field(default="patches", description="Directory for written patches")
    image_extension: str = Field(default=".png", description="Image file extension")

    @field_validator("image_extension")
    @classmethod
    def validate_image_extension(cls, v: str) -> str:
        """Validate image extension and normalize the leading dot."""
        v = v.strip().lower()
        if not v or v == ".":
            raise ValueError("Image extension cannot be empty")
        if not v.startswith("."):
            v = f".{v}"
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    loggers: dict[str, str] = Field(default={}, description="Loggers and their levels")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        description="Log format",
    )
    date_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Log date format")
    rotate_logs: bool = Field(default=False, description="Rotate logs daily")
    log_file: str | None = Field(default=None, description="Log file to write to")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is a known level name."""
        return _known_level(v)

    @field_validator("loggers")
    @classmethod
    def validate_loggers(cls, v: dict[str, str]) -> dict[str, str]:
        """Validate per-logger level names."""
        return {name: _known_level(level) for name, level in v.items()}


def _known_level(level: str) -> str:
    name = level.strip().upper()
    if name not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log level: {level}")
    return name


class AppSettings(BaseSettings):
    """Root application settings."""

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="PEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
