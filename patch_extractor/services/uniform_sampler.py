"""Uniform sampler - evenly spaced patch origins on a grid."""

import logging

from patch_extractor.core.exceptions import DegenerateGridError, InvalidPatchSizeError
from patch_extractor.models import GridDimensions, Point, Rect, Size

logger = logging.getLogger(__name__)


def _axis_step(region_length: int, patch_length: int, cells: int) -> int:
    """
    Calculate the distance between neighbouring patch origins on one axis.

    Slack left over after placing `cells` patches is spread evenly between
    them, so the first patch touches the region start and the last one ends
    at (or just before) the region end.

    Args:
        region_length (int): Region length on this axis.
        patch_length (int): Patch length on this axis.
        cells (int): Number of patches on this axis (at least 2).

    Returns:
        int: Patch length plus the per-gap slack.
    """
    # Floor division keeps every patch inside the region, also when the
    # slack is negative and patches overlap.
    offset = (region_length - cells * patch_length) // (cells - 1)
    return patch_length + offset


def uniform_sampling(
    mask_region: Rect,
    patch_size: Size,
    grid: GridDimensions,
) -> list[Point]:
    """
    Place patch origins on an evenly spaced grid inside a region.

    Origins are emitted row by row starting at the region origin. Within a
    row `x` advances by the column step while the next patch still ends
    inside the region, otherwise the next origin wraps to the start of the
    following row.

    An axis with a single cell has no spacing to distribute: that column (or
    row) stays left-aligned (or top-aligned) at the region origin.

    Args:
        mask_region (Rect): Region to cover.
        patch_size (Size): Size of one patch.
        grid (GridDimensions): Number of columns and rows.

    Returns:
        list[Point]: `grid.columns * grid.rows` origins in row-major order.

    Raises:
        DegenerateGridError: If the grid has no columns or no rows.
        InvalidPatchSizeError: If the patch does not fit in the region.
    """
    if grid.columns < 1 or grid.rows < 1:
        raise DegenerateGridError(
            f"Uniform grid needs at least one column and row, got {grid.columns}x{grid.rows}"
        )
    if not patch_size.fits_in(mask_region.size):
        raise InvalidPatchSizeError(
            f"Patch {patch_size.width}x{patch_size.height} does not fit in "
            f"region {mask_region.width}x{mask_region.height}"
        )

    single_column = grid.columns == 1
    step_x = (
        patch_size.width
        if single_column
        else _axis_step(mask_region.width, patch_size.width, grid.columns)
    )
    step_y = (
        patch_size.height
        if grid.rows == 1
        else _axis_step(mask_region.height, patch_size.height, grid.rows)
    )
    logger.debug(f"Uniform grid {grid.columns}x{grid.rows} with step ({step_x}, {step_y})")

    origins: list[Point] = []
    x, y = mask_region.min_x, mask_region.min_y
    for _ in range(grid.count):
        origins.append(Point(x=x, y=y))

        if not single_column and x + step_x + patch_size.width <= mask_region.max_x:
            x += step_x
        else:
            y += step_y
            x = mask_region.min_x

    return origins
