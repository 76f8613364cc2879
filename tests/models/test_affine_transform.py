"""Tests for affine transform model."""

import pytest

from patch_extractor.models import AffineTransform, Point, Rect


class TestAffineTransform:
    """Tests for AffineTransform model."""

    def test_identity(self) -> None:
        """
        Test that identity leaves points unchanged.

        """
        assert AffineTransform.identity().apply(x=3, y=4) == (3, 4)

    def test_translation_and_scale(self) -> None:
        """
        Test the translation and scale constructors.

        """
        assert AffineTransform.translation(tx=5, ty=-2).apply(x=1, y=1) == (6, -1)
        assert AffineTransform.scale(sx=2, sy=3).apply(x=1, y=1) == (2, 3)

    def test_concatenating_applies_self_first(self) -> None:
        """
        Test that concatenation order matches sequential application.

        """
        scale = AffineTransform.scale(sx=2, sy=2)
        shift = AffineTransform.translation(tx=10, ty=0)

        # scale then shift: (1, 1) -> (2, 2) -> (12, 2)
        assert scale.concatenating(shift).apply(x=1, y=1) == (12, 2)
        # shift then scale: (1, 1) -> (11, 1) -> (22, 2)
        assert shift.concatenating(scale).apply(x=1, y=1) == (22, 2)

    def test_scaled_by_prepends_scale(self) -> None:
        """
        Test that scaled_by applies the scale before the transform.

        """
        transform = AffineTransform.translation(tx=10, ty=0).scaled_by(sx=2, sy=1)
        assert transform.apply(x=1, y=1) == (12, 1)

    def test_translated_by_prepends_translation(self) -> None:
        """
        Test that translated_by applies the translation before the transform.

        """
        transform = AffineTransform.scale(sx=2, sy=2).translated_by(tx=1, ty=0)
        assert transform.apply(x=1, y=1) == (4, 2)

    def test_flip_vertical_maps_y(self) -> None:
        """
        Test that the flip maps y to height minus y.

        """
        flip = AffineTransform.flip_vertical(height=100)
        assert flip.apply(x=7, y=0) == (7, 100)
        assert flip.apply(x=7, y=30) == (7, 70)

    def test_flip_vertical_is_involution(self) -> None:
        """
        Test that flipping twice is the identity.

        """
        flip = AffineTransform.flip_vertical(height=80)
        assert flip.concatenating(flip) == AffineTransform.identity()

    def test_apply_to_point_rounds(self) -> None:
        """
        Test that transformed points snap to whole pixels.

        """
        transform = AffineTransform.scale(sx=0.5, sy=0.5)
        assert transform.apply_to_point(Point(x=5, y=8)) == Point(x=2, y=4)

    def test_flipped_rect_keeps_positive_size(self) -> None:
        """
        Test that a flipped rect is normalized to its minimum corner.

        """
        flip = AffineTransform.flip_vertical(height=100)
        rect = Rect.from_xywh(x=5, y=10, width=20, height=30)

        flipped = flip.apply_to_rect(rect)

        assert flipped == Rect.from_xywh(x=5, y=60, width=20, height=30)
        assert flip.apply_to_rect(flipped) == rect

    @pytest.mark.parametrize("y", [0, 1, 50, 99])
    def test_flipped_rows_cover_same_image_row(self, y: int) -> None:
        """
        Test that a one-pixel-tall rect maps to the mirrored memory row.

        Args:
            y (int): Top-left row index.

        """
        flip = AffineTransform.flip_vertical(height=100)
        flipped = flip.apply_to_rect(Rect.from_xywh(x=0, y=y, width=1, height=1))
        assert flipped.min_y == 99 - y
