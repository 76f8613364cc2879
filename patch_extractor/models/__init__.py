"""Data models."""

from patch_extractor.models.affine_transform import AffineTransform
from patch_extractor.models.decoded_image import DecodedImage
from patch_extractor.models.extraction_result import ExtractionResult
from patch_extractor.models.extraction_summary import ExtractionSummary, PatchFile
from patch_extractor.models.grid_dimensions import GridDimensions
from patch_extractor.models.patch_result import PatchResult, SkippedPatch
from patch_extractor.models.pixel_buffer import PixelBuffer
from patch_extractor.models.point import Point
from patch_extractor.models.rect import Rect
from patch_extractor.models.size import Size

__all__ = [
    "AffineTransform",
    "DecodedImage",
    "ExtractionResult",
    "ExtractionSummary",
    "GridDimensions",
    "PatchFile",
    "PatchResult",
    "PixelBuffer",
    "Point",
    "Rect",
    "SkippedPatch",
    "Size",
]
