"""Decoded image model."""

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from patch_extractor.enums import OriginConvention
from patch_extractor.models.rect import Rect
from patch_extractor.models.size import Size


class DecodedImage(BaseModel):
    """Pixels of a decoded source image and the backend's origin convention."""

    pixels: np.ndarray = Field(
        description="(H, W) gray, (H, W, 3) BGR or (H, W, 4) BGRA uint8 pixels in memory row order"
    )
    origin: OriginConvention = Field(
        default=OriginConvention.TOP_LEFT,
        description="Whether the first pixel row is the top or the bottom image row",
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("pixels")
    @classmethod
    def validate_pixels(cls, v: np.ndarray) -> np.ndarray:
        """Validate pixel array shape and type."""
        if v.dtype != np.uint8:
            raise ValueError(f"Pixels must be uint8, got {v.dtype}")
        if v.ndim not in (2, 3) or (v.ndim == 3 and v.shape[2] not in (1, 3, 4)):
            raise ValueError(f"Unsupported pixel array shape {v.shape}")
        if v.shape[0] == 0 or v.shape[1] == 0:
            raise ValueError("Pixel array is empty")
        return v

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)

    @property
    def bounds(self) -> Rect:
        """Full image extent in top-left coordinates."""
        return Rect.from_xywh(x=0, y=0, width=self.width, height=self.height)
