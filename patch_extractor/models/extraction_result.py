"""Extraction result model."""

from typing import Generic

from pydantic import BaseModel, ConfigDict, Field

from patch_extractor.models.patch_result import PatchResult, PayloadT, SkippedPatch
from patch_extractor.models.rect import Rect


class ExtractionResult(BaseModel, Generic[PayloadT]):
    """Patches extracted by one call, in sampling order."""

    patches: list[PatchResult[PayloadT]] = Field(
        default_factory=list, description="Extracted patches"
    )
    skipped: list[SkippedPatch] = Field(
        default_factory=list, description="Sampled patches that were dropped"
    )
    mask_region: Rect | None = Field(
        default=None, description="Region sampled when a mask factor was used"
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def payloads(self) -> list[PayloadT]:
        return [patch.payload for patch in self.patches]

    @property
    def rects(self) -> list[Rect]:
        """Patch rectangles, positionally paired with `payloads`."""
        return [patch.rect for patch in self.patches]

    def __len__(self) -> int:
        return len(self.patches)
