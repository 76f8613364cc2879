"""Enumerations."""

from patch_extractor.enums.origin_convention import OriginConvention
from patch_extractor.enums.pixel_format import PixelFormat
from patch_extractor.enums.sampling_method import SamplingMethod

__all__ = ["OriginConvention", "PixelFormat", "SamplingMethod"]
