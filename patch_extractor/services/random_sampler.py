"""Random sampler - uniformly distributed patch origins."""

import logging

import numpy as np

from patch_extractor.core.exceptions import InvalidPatchSizeError
from patch_extractor.models import Point, Rect, Size

logger = logging.getLogger(__name__)


def random_sampling(
    mask_region: Rect,
    patch_size: Size,
    count: int,
    rng: np.random.Generator | None = None,
) -> list[Point]:
    """
    Draw patch origins uniformly at random inside a region.

    Each origin is drawn independently, with replacement, from the closed
    integer ranges `[min_x, max_x - patch width]` and
    `[min_y, max_y - patch height]`, so every patch lies inside the region.
    Origins may repeat and patches may overlap.

    Args:
        mask_region (Rect): Region to sample from.
        patch_size (Size): Size of one patch.
        count (int): Number of origins to draw.
        rng (np.random.Generator | None): Random generator (None = fresh default generator).

    Returns:
        list[Point]: `count` origins in draw order.

    Raises:
        InvalidPatchSizeError: If the patch does not fit in the region.
        ValueError: If count is negative.
    """
    if count < 0:
        raise ValueError(f"Patch count cannot be negative, got {count}")
    if not patch_size.fits_in(mask_region.size):
        raise InvalidPatchSizeError(
            f"Patch {patch_size.width}x{patch_size.height} does not fit in "
            f"region {mask_region.width}x{mask_region.height}"
        )

    if rng is None:
        rng = np.random.default_rng()

    xs = rng.integers(
        low=mask_region.min_x,
        high=mask_region.max_x - patch_size.width,
        size=count,
        endpoint=True,
    )
    ys = rng.integers(
        low=mask_region.min_y,
        high=mask_region.max_y - patch_size.height,
        size=count,
        endpoint=True,
    )
    logger.debug(f"Drew {count} random origins in {mask_region.to_tuple()}")
    return [Point(x=int(x), y=int(y)) for x, y in zip(xs, ys)]
