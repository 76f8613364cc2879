"""Patch extractor - samples patch origins and crops patches from an image."""

import logging
import math
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Generic

import numpy as np

from patch_extractor.core.exceptions import (
    BufferAllocationError,
    CropOutOfBoundsError,
    InvalidPatchSizeError,
    LockFailedError,
)
from patch_extractor.core.settings import AppSettings
from patch_extractor.enums import OriginConvention, SamplingMethod
from patch_extractor.models import (
    AffineTransform,
    DecodedImage,
    ExtractionResult,
    GridDimensions,
    PatchResult,
    PixelBuffer,
    Point,
    Rect,
    SkippedPatch,
    Size,
)
from patch_extractor.models.patch_result import PayloadT
from patch_extractor.services.converters import Converter
from patch_extractor.services.grid_solver import solve_grid_dimensions
from patch_extractor.services.image_decoder import ImageSource, load_image, render_pixel_buffer
from patch_extractor.services.random_sampler import random_sampling
from patch_extractor.services.region_cropper import crop_pixel_buffer
from patch_extractor.services.uniform_sampler import uniform_sampling

logger = logging.getLogger(__name__)


def mask_region_from_factor(image_size: Size, mask_factor: float) -> Rect:
    """
    Calculate the centered region covering a fraction of the image.

    Args:
        image_size (Size): Full image size.
        mask_factor (float): Fraction of the width and height to keep, in (0, 1].

    Returns:
        Rect: The centered region, or the full image when the factor is 1.

    Raises:
        ValueError: If the factor is outside (0, 1].
    """
    if not 0.0 < mask_factor <= 1.0:
        raise ValueError(f"Mask factor must be in (0, 1], got {mask_factor}")

    width, height = image_size.to_tuple()
    if mask_factor == 1.0:
        return Rect.from_xywh(x=0, y=0, width=width, height=height)

    return Rect.from_xywh(
        x=math.floor(width / 2 - mask_factor * width / 2),
        y=math.floor(height / 2 - mask_factor * height / 2),
        width=max(1, math.floor(mask_factor * width)),
        height=max(1, math.floor(mask_factor * height)),
    )


def validate_patch_size(patch_size: Size, mask_region: Rect) -> None:
    """
    Check that a patch fits inside the mask region.

    Args:
        patch_size (Size): Size of one patch.
        mask_region (Rect): Region patches are sampled from.

    Raises:
        InvalidPatchSizeError: If the patch is wider or taller than the region.
    """
    if patch_size.width > mask_region.width:
        raise InvalidPatchSizeError(
            f"Patch width {patch_size.width} exceeds mask region width {mask_region.width}"
        )
    if patch_size.height > mask_region.height:
        raise InvalidPatchSizeError(
            f"Patch height {patch_size.height} exceeds mask region height {mask_region.height}"
        )


class PatchExtractor(Generic[PayloadT]):
    """
    Extracts fixed-size patches from images for a feature-extraction model.

    Every extraction call validates the patch size against the mask region,
    resolves patch origins (uniform grid, random draws or explicit origins),
    renders the image into one pixel buffer and crops each patch out of it.
    Each cropped patch is handed to `converter`, which turns it into the
    payload the downstream model consumes.

    Patches that cannot be cropped are logged, reported in
    `ExtractionResult.skipped` and left out; the rest of the batch is still
    returned.
    """

    def __init__(
        self,
        settings: AppSettings,
        converter: Converter[PayloadT],
        rng: np.random.Generator | None = None,
    ) -> None:
        """
        Initialize the patch extractor.

        Args:
            settings (AppSettings): Application settings instance.
            converter (Converter[PayloadT]): Turns a patch buffer
                into a payload.
            rng (np.random.Generator | None): Generator for random sampling
                (None = seeded from settings).
        """
        self.settings = settings
        self.converter = converter
        self.rng = rng if rng is not None else np.random.default_rng(settings.extraction.seed)

    def extract_grid(
        self,
        image: ImageSource,
        patch_size: Size,
        grid: GridDimensions,
        mask_region: Rect,
    ) -> ExtractionResult[PayloadT]:
        """
        Extract patches from an evenly spaced grid.

        Args:
            image (ImageSource): Source image.
            patch_size (Size): Size of the patches.
            grid (GridDimensions): Number of patch columns and rows; a 7x10
                grid yields 70 patches.
            mask_region (Rect): Image area patches are extracted from.

        Returns:
            ExtractionResult[PayloadT]: Patches and their rects in image space.

        Raises:
            InvalidPatchSizeError: If the patch does not fit in the mask region.
            DegenerateGridError: If the grid has no columns or rows.
            ImageDecodeError: If the image has no usable pixel data.
        """
        validate_patch_size(patch_size=patch_size, mask_region=mask_region)
        origins = uniform_sampling(mask_region=mask_region, patch_size=patch_size, grid=grid)
        return self._extract(image=load_image(image), patch_size=patch_size, origins=origins)

    def extract(
        self,
        image: ImageSource,
        patch_size: Size,
        count: int,
        sampling: SamplingMethod = SamplingMethod.RANDOM,
        mask_region: Rect | None = None,
    ) -> ExtractionResult[PayloadT]:
        """
        Extract about `count` patches placed by a sampling method.

        With uniform sampling the number of patches may be slightly larger or
        smaller than `count` in favour of even coverage.

        Args:
            image (ImageSource): Source image.
            patch_size (Size): Size of the patches.
            count (int): Number of patches to sample.
            sampling (SamplingMethod): Random or uniform placement.
            mask_region (Rect | None): Image area patches are extracted from
                (None = the whole image).

        Returns:
            ExtractionResult[PayloadT]: Patches and their rects in image space.

        Raises:
            InvalidPatchSizeError: If the patch does not fit in the mask region.
            ImageDecodeError: If the image has no usable pixel data.
            ValueError: If the count or sampling method is invalid.
        """
        if mask_region is not None:
            validate_patch_size(patch_size=patch_size, mask_region=mask_region)

        decoded = load_image(image)
        region = mask_region
        if region is None:
            region = decoded.bounds
            validate_patch_size(patch_size=patch_size, mask_region=region)

        origins = self.sampling_coordinates(
            sampling=sampling,
            mask_region=region,
            patch_size=patch_size,
            count=count,
        )
        return self._extract(image=decoded, patch_size=patch_size, origins=origins)

    def extract_with_mask_factor(
        self,
        image: ImageSource,
        patch_size: Size,
        count: int,
        sampling: SamplingMethod = SamplingMethod.RANDOM,
        mask_factor: float = 1.0,
    ) -> ExtractionResult[PayloadT]:
        """
        Extract patches from a centered fraction of the image.

        Args:
            image (ImageSource): Source image.
            patch_size (Size): Size of the patches.
            count (int): Number of patches to sample.
            sampling (SamplingMethod): Random or uniform placement.
            mask_factor (float): Fraction of the image width and height,
                centered on the image center, that patches come from.

        Returns:
            ExtractionResult[PayloadT]: Patches, their rects and the sampled
                `mask_region`.

        Raises:
            InvalidPatchSizeError: If the patch does not fit in the mask region.
            ImageDecodeError: If the image has no usable pixel data.
            ValueError: If the mask factor, count or sampling method is invalid.
        """
        decoded = load_image(image)
        mask_region = mask_region_from_factor(image_size=decoded.size, mask_factor=mask_factor)
        result = self.extract(
            image=decoded,
            patch_size=patch_size,
            count=count,
            sampling=sampling,
            mask_region=mask_region,
        )
        return result.model_copy(update={"mask_region": mask_region})

    def extract_at(
        self,
        image: ImageSource,
        patch_size: Size,
        origins: Sequence[Point | tuple[int, int]],
    ) -> ExtractionResult[PayloadT]:
        """
        Extract patches at explicit origins.

        Args:
            image (ImageSource): Source image.
            patch_size (Size): Size of the patches.
            origins (Sequence[Point | tuple[int, int]]): Top-left corners of
                the patches, with the coordinate origin at the top-left image corner.

        Returns:
            ExtractionResult[PayloadT]: Patches and their rects in image space.

        Raises:
            InvalidPatchSizeError: If the patch does not fit in the image.
            ImageDecodeError: If the image has no usable pixel data.
        """
        decoded = load_image(image)
        validate_patch_size(patch_size=patch_size, mask_region=decoded.bounds)
        points = [
            origin if isinstance(origin, Point) else Point.from_tuple(origin)
            for origin in origins
        ]
        return self._extract(image=decoded, patch_size=patch_size, origins=points)

    def sampling_coordinates(
        self,
        sampling: SamplingMethod,
        mask_region: Rect,
        patch_size: Size,
        count: int,
    ) -> list[Point]:
        """
        Resolve patch origins for a sampling method.

        Args:
            sampling (SamplingMethod): Random or uniform placement.
            mask_region (Rect): Region to sample from.
            patch_size (Size): Size of one patch.
            count (int): Target number of patches.

        Returns:
            list[Point]: Patch origins in top-left coordinates.

        Raises:
            ValueError: If the sampling method is unknown.
        """
        match SamplingMethod(sampling):
            case SamplingMethod.RANDOM:
                return random_sampling(
                    mask_region=mask_region,
                    patch_size=patch_size,
                    count=count,
                    rng=self.rng,
                )
            case SamplingMethod.UNIFORM:
                grid = solve_grid_dimensions(
                    region_size=mask_region.size,
                    patch_size=patch_size,
                    count=count,
                )
                return uniform_sampling(
                    mask_region=mask_region,
                    patch_size=patch_size,
                    grid=grid,
                )

    def _extract(
        self,
        image: DecodedImage,
        patch_size: Size,
        origins: Sequence[Point],
    ) -> ExtractionResult[PayloadT]:
        """
        Crop and convert one patch per origin.

        Args:
            image (DecodedImage): Decoded source image.
            patch_size (Size): Size of the patches.
            origins (Sequence[Point]): Patch origins in top-left coordinates.

        Returns:
            ExtractionResult[PayloadT]: Converted patches in origin order.
        """
        settings = self.settings.extraction
        source = render_pixel_buffer(
            image=image,
            pixel_format=settings.pixel_format,
            row_alignment=settings.row_alignment,
            lock_timeout=settings.lock_timeout,
        )
        to_backend = self._backend_transform(source)
        rects = [Rect(origin=origin, size=patch_size) for origin in origins]

        def extract_one(rect: Rect) -> PatchResult[PayloadT] | SkippedPatch:
            return self._extract_patch(source=source, to_backend=to_backend, rect=rect)

        try:
            if settings.workers > 1 and len(rects) > 1:
                with ThreadPoolExecutor(max_workers=settings.workers) as executor:
                    outcomes = list(executor.map(extract_one, rects))
            else:
                outcomes = [extract_one(rect) for rect in rects]
        finally:
            source.release()

        patches = [outcome for outcome in outcomes if isinstance(outcome, PatchResult)]
        skipped = [outcome for outcome in outcomes if isinstance(outcome, SkippedPatch)]
        if skipped:
            logger.warning(f"Skipped {len(skipped)} of {len(rects)} patches")
        logger.info(
            f"Extracted {len(patches)} patches of {patch_size.width}x{patch_size.height} "
            f"from {image.width}x{image.height} image"
        )
        return ExtractionResult(patches=patches, skipped=skipped)

    def _extract_patch(
        self,
        source: PixelBuffer,
        to_backend: AffineTransform,
        rect: Rect,
    ) -> PatchResult[PayloadT] | SkippedPatch:
        """
        Crop and convert a single patch.

        Args:
            source (PixelBuffer): Rendered source image.
            to_backend (AffineTransform): Top-left to buffer coordinate transform.
            rect (Rect): Patch rect in top-left coordinates.

        Returns:
            PatchResult[PayloadT] | SkippedPatch: The patch, or why it was dropped.
        """
        try:
            cropped = crop_pixel_buffer(source=source, rect=to_backend.apply_to_rect(rect))
        except (CropOutOfBoundsError, LockFailedError, BufferAllocationError) as e:
            logger.warning(f"Skipping patch at {rect.to_tuple()}: {e}")
            return SkippedPatch(rect=rect, reason=str(e))

        patch = cropped.normalized(pixel_format=self.settings.extraction.pixel_format)
        return PatchResult(payload=self.converter(patch), rect=rect)

    @staticmethod
    def _backend_transform(source: PixelBuffer) -> AffineTransform:
        """
        Get the transform from top-left image coordinates to buffer coordinates.

        Args:
            source (PixelBuffer): Rendered source image.

        Returns:
            AffineTransform: Identity for top-left buffers, a vertical flip
                for bottom-left buffers.
        """
        if source.origin == OriginConvention.BOTTOM_LEFT:
            return AffineTransform.flip_vertical(height=source.height)
        return AffineTransform.identity()
