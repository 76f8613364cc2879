"""Point model for patch placement."""

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A pixel position with the origin at the top-left corner, x right and y down."""

    x: int = Field(description="Horizontal position (pixels from left)")
    y: int = Field(description="Vertical position (pixels from top)")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={"example": {"x": 22, "y": 44}},
    )

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, coord: tuple[int, int]) -> "Point":
        """Create Point from (x, y) tuple."""
        return cls(x=coord[0], y=coord[1])
