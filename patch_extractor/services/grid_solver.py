"""Grid size solver - fits a uniform patch grid to a target patch count."""

import logging

from patch_extractor.core.exceptions import InvalidPatchSizeError
from patch_extractor.models import GridDimensions, Size

logger = logging.getLogger(__name__)


def solve_grid_dimensions(region_size: Size, patch_size: Size, count: int) -> GridDimensions:
    """
    Find grid dimensions whose cell count approximates a target patch count.

    Starts from the number of whole patches that fit on each axis, then walks
    towards `count` one unit at a time, alternating between rows and columns
    (rows first). The walk first shrinks the grid while it has more than
    `count` cells, then grows it while it has fewer; the alternation carries
    over from one phase to the next. The result is the first grid the walk
    reaches on the far side of `count`, so it is usually close to but not
    exactly `count` cells.

    A dimension is never shrunk below 1; when the alternation points at a
    dimension of 1 the other dimension shrinks instead.

    Args:
        region_size (Size): Size of the sampling region.
        patch_size (Size): Size of one patch.
        count (int): Target number of patches.

    Returns:
        GridDimensions: Grid with at least one column and one row.

    Raises:
        InvalidPatchSizeError: If the patch does not fit in the region.
        ValueError: If count is less than 1.
    """
    if not patch_size.fits_in(region_size):
        raise InvalidPatchSizeError(
            f"Patch {patch_size.width}x{patch_size.height} does not fit in "
            f"region {region_size.width}x{region_size.height}"
        )
    if count < 1:
        raise ValueError(f"Patch count must be at least 1, got {count}")

    columns = region_size.width // patch_size.width
    rows = region_size.height // patch_size.height
    logger.debug(f"Floor grid {columns}x{rows} for target count {count}")

    change_columns = False
    while columns * rows > count:
        if (change_columns and columns > 1) or rows == 1:
            columns -= 1
        else:
            rows -= 1
        change_columns = not change_columns

    while columns * rows < count:
        if change_columns:
            columns += 1
        else:
            rows += 1
        change_columns = not change_columns

    logger.debug(f"Solved grid {columns}x{rows} ({columns * rows} patches) for count {count}")
    return GridDimensions(columns=columns, rows=rows)
