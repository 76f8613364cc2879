"""Affine transform model for reconciling coordinate conventions."""

from pydantic import BaseModel, ConfigDict, Field

from patch_extractor.models.point import Point
from patch_extractor.models.rect import Rect


class AffineTransform(BaseModel):
    """
    A 2D affine transform.

    Maps a point as `x' = a*x + c*y + tx` and `y' = b*x + d*y + ty`.
    """

    a: float = Field(default=1.0)
    b: float = Field(default=0.0)
    c: float = Field(default=0.0)
    d: float = Field(default=1.0)
    tx: float = Field(default=0.0)
    ty: float = Field(default=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineTransform":
        return cls(tx=tx, ty=ty)

    @classmethod
    def scale(cls, sx: float, sy: float) -> "AffineTransform":
        return cls(a=sx, d=sy)

    @classmethod
    def flip_vertical(cls, height: float) -> "AffineTransform":
        """
        Create the transform between top-left and bottom-left origins.

        The transform is its own inverse.

        Args:
            height (float): Height of the image space.

        Returns:
            AffineTransform: Transform mapping y to `height - y`.
        """
        return cls.translation(tx=0, ty=height).scaled_by(sx=1.0, sy=-1.0)

    def concatenating(self, other: "AffineTransform") -> "AffineTransform":
        """
        Combine two transforms, applying this one first and `other` second.

        Args:
            other (AffineTransform): Transform applied after this one.

        Returns:
            AffineTransform: The combined transform.
        """
        return AffineTransform(
            a=self.a * other.a + self.b * other.c,
            b=self.a * other.b + self.b * other.d,
            c=self.c * other.a + self.d * other.c,
            d=self.c * other.b + self.d * other.d,
            tx=self.tx * other.a + self.ty * other.c + other.tx,
            ty=self.tx * other.b + self.ty * other.d + other.ty,
        )

    def scaled_by(self, sx: float, sy: float) -> "AffineTransform":
        """Prepend a scale so that it is applied before this transform."""
        return AffineTransform.scale(sx=sx, sy=sy).concatenating(self)

    def translated_by(self, tx: float, ty: float) -> "AffineTransform":
        """Prepend a translation so that it is applied before this transform."""
        return AffineTransform.translation(tx=tx, ty=ty).concatenating(self)

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.tx, self.b * x + self.d * y + self.ty)

    def apply_to_point(self, point: Point) -> Point:
        x, y = self.apply(x=point.x, y=point.y)
        return Point(x=round(x), y=round(y))

    def apply_to_rect(self, rect: Rect) -> Rect:
        """
        Transform a rectangle.

        The four corners are transformed and the result is the smallest
        rectangle enclosing them, so a flipped rectangle keeps a positive size
        with its origin at the minimum corner.

        Args:
            rect (Rect): Rectangle to transform.

        Returns:
            Rect: Normalized transformed rectangle.
        """
        corners = [
            self.apply(x=x, y=y)
            for x in (rect.min_x, rect.max_x)
            for y in (rect.min_y, rect.max_y)
        ]
        xs = [corner[0] for corner in corners]
        ys = [corner[1] for corner in corners]
        min_x, min_y = round(min(xs)), round(min(ys))
        return Rect.from_xywh(
            x=min_x,
            y=min_y,
            width=round(max(xs)) - min_x,
            height=round(max(ys)) - min_y,
        )
