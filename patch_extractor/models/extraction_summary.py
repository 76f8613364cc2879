"""Extraction summary models for command line output."""

from pydantic import BaseModel, ConfigDict, Field

from patch_extractor.enums import SamplingMethod
from patch_extractor.models.patch_result import SkippedPatch
from patch_extractor.models.rect import Rect
from patch_extractor.models.size import Size


class PatchFile(BaseModel):
    """A patch written to disk."""

    path: str = Field(description="Path of the written patch image")
    rect: Rect = Field(description="Patch rectangle in top-left image coordinates")

    model_config = ConfigDict(frozen=True, extra="forbid")


class ExtractionSummary(BaseModel):
    """Summary of a command line extraction run."""

    image: str = Field(description="Source image path")
    patch_size: Size = Field(description="Size of the extracted patches")
    sampling: SamplingMethod | None = Field(
        default=None, description="Sampling method (None for an explicit grid)"
    )
    mask_region: Rect = Field(description="Image area patches were sampled from")
    patches: list[PatchFile] = Field(default_factory=list, description="Written patches")
    skipped: list[SkippedPatch] = Field(default_factory=list, description="Dropped patches")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "image": "page.png",
                "patch_size": {"width": 64, "height": 64},
                "sampling": "uniform",
                "mask_region": {"origin": {"x": 0, "y": 0}, "size": {"width": 640, "height": 480}},
                "patches": [
                    {
                        "path": "patches/page_0000.png",
                        "rect": {"origin": {"x": 0, "y": 0}, "size": {"width": 64, "height": 64}},
                    }
                ],
                "skipped": [],
            }
        },
    )
