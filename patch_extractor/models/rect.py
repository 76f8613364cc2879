"""Rectangle model for patches and mask regions."""

from pydantic import BaseModel, ConfigDict, Field

from patch_extractor.models.point import Point
from patch_extractor.models.size import Size


class Rect(BaseModel):
    """
    A rectangle defined by its top-left origin and size.

    The right and bottom edges (`max_x`, `max_y`) are exclusive.
    """

    origin: Point = Field(description="Top-left corner")
    size: Size = Field(description="Width and height")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "origin": {"x": 22, "y": 44},
                "size": {"width": 64, "height": 64},
            }
        },
    )

    @classmethod
    def from_xywh(cls, x: int, y: int, width: int, height: int) -> "Rect":
        """Create Rect from origin coordinates and dimensions."""
        return cls(origin=Point(x=x, y=y), size=Size(width=width, height=height))

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height

    @property
    def min_x(self) -> int:
        return self.origin.x

    @property
    def min_y(self) -> int:
        return self.origin.y

    @property
    def max_x(self) -> int:
        return self.origin.x + self.size.width

    @property
    def max_y(self) -> int:
        return self.origin.y + self.size.height

    def contains(self, other: "Rect") -> bool:
        """
        Check whether another rectangle lies entirely inside this one.

        Args:
            other (Rect): Rectangle to test.

        Returns:
            bool: True if every edge of `other` is within this rectangle.
        """
        return (
            other.min_x >= self.min_x
            and other.min_y >= self.min_y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to (x, y, width, height) tuple."""
        return (self.origin.x, self.origin.y, self.size.width, self.size.height)
