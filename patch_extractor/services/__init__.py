"""Patch sampling and extraction services."""

from patch_extractor.services.converters import (
    encode_image,
    to_array,
    to_pixel_buffer,
    to_png_bytes,
)
from patch_extractor.services.grid_solver import solve_grid_dimensions
from patch_extractor.services.image_decoder import (
    decode_image_bytes,
    load_image,
    render_pixel_buffer,
)
from patch_extractor.services.patch_extractor import (
    PatchExtractor,
    mask_region_from_factor,
    validate_patch_size,
)
from patch_extractor.services.random_sampler import random_sampling
from patch_extractor.services.region_cropper import crop_pixel_buffer
from patch_extractor.services.uniform_sampler import uniform_sampling

__all__ = [
    "PatchExtractor",
    "crop_pixel_buffer",
    "decode_image_bytes",
    "encode_image",
    "load_image",
    "mask_region_from_factor",
    "random_sampling",
    "render_pixel_buffer",
    "solve_grid_dimensions",
    "to_array",
    "to_pixel_buffer",
    "to_png_bytes",
    "uniform_sampling",
    "validate_patch_size",
]
