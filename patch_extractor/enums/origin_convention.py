"""Origin convention enum."""

from enum import StrEnum


class OriginConvention(StrEnum):
    """Where an image backend places its coordinate origin."""

    TOP_LEFT = "top_left"
    BOTTOM_LEFT = "bottom_left"
