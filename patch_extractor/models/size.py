"""Size model for patches and regions."""

from pydantic import BaseModel, ConfigDict, Field


class Size(BaseModel):
    """A width and height in pixels, both strictly positive."""

    width: int = Field(gt=0, description="Width in pixels")
    height: int = Field(gt=0, description="Height in pixels")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={"example": {"width": 64, "height": 64}},
    )

    def fits_in(self, other: "Size") -> bool:
        """
        Check whether this size fits inside another size on both axes.

        Args:
            other (Size): Enclosing size.

        Returns:
            bool: True if width and height are both no larger than `other`.
        """
        return self.width <= other.width and self.height <= other.height

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)

    @classmethod
    def from_tuple(cls, size: tuple[int, int]) -> "Size":
        """Create Size from (width, height) tuple."""
        return cls(width=size[0], height=size[1])
