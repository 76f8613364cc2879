"""Patch result models."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from patch_extractor.models.rect import Rect

PayloadT = TypeVar("PayloadT")


class PatchResult(BaseModel, Generic[PayloadT]):
    """One extracted patch and its rectangle in source image space."""

    payload: PayloadT = Field(description="Converter output for the patch pixels")
    rect: Rect = Field(description="Patch rectangle in top-left image coordinates")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class SkippedPatch(BaseModel):
    """A sampled patch that could not be extracted."""

    rect: Rect = Field(description="Requested patch rectangle in top-left image coordinates")
    reason: str = Field(description="Why the patch was dropped")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "rect": {"origin": {"x": 90, "y": 0}, "size": {"width": 20, "height": 20}},
                "reason": "Crop rect (90, 0, 20, 20) exceeds 100x100 buffer",
            }
        },
    )
