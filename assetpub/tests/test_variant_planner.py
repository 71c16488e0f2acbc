"""Tests for VariantPlanner and dimension math."""

import pytest

from assetpub.errors import ValidationError
from assetpub.variant_planner import (
    DEFAULT_VARIANTS,
    VariantPlanner,
    VariantSpec,
    compute_variant_dimensions,
)


class TestComputeVariantDimensions:
    """Tests for compute_variant_dimensions."""

    def test_downscale(self):
        """Test halving a 2:1 image."""
        assert compute_variant_dimensions(300, 150, 200) == (200, 100)

    def test_upscale_allowed(self):
        """Test that widths larger than the original are honoured."""
        assert compute_variant_dimensions(300, 150, 1200) == (1200, 600)

    def test_rounds_half_up(self):
        """Test rounding of fractional heights."""
        # 200 * 3 / 8 = 75.0, 100 * 1 / 8 = 12.5, 100 * 1 / 3 = 33.33
        assert compute_variant_dimensions(8, 3, 200) == (200, 75)
        assert compute_variant_dimensions(8, 1, 100) == (100, 13)
        assert compute_variant_dimensions(3, 1, 100) == (100, 33)
        assert compute_variant_dimensions(3, 2, 100) == (100, 67)

    @pytest.mark.parametrize('width,height,target', [
        (1, 1, 1), (4032, 3024, 200), (1920, 1080, 400), (7, 13, 800), (1000, 1, 1200), (123, 4567, 199),
    ])
    def test_aspect_error_within_one_pixel(self, width, height, target):
        """Test the aspect ratio is preserved up to rounding."""
        w, h = compute_variant_dimensions(width, height, target)
        assert w == target
        assert abs(h - target * height / width) <= 0.5

    def test_zero_width_is_an_error(self):
        """Test that a zero-width source is rejected."""
        with pytest.raises(ValidationError):
            compute_variant_dimensions(0, 100, 200)

    def test_non_positive_target(self):
        """Test that a zero target width is rejected."""
        with pytest.raises(ValidationError):
            compute_variant_dimensions(100, 100, 0)


class TestVariantPlanner:
    """Tests for VariantPlanner."""

    def test_default_table_order(self):
        """Test the default table is iterated in declaration order."""
        planner = VariantPlanner()

        assert [v.name for v in planner] == ['mobile', 'tablet', 'desktop_md', 'desktop_lg']
        assert [v.width for v in planner] == [200, 400, 800, 1200]
        assert len(planner) == len(DEFAULT_VARIANTS)

    def test_custom_order_preserved(self):
        """Test a custom table keeps its order."""
        planner = VariantPlanner([VariantSpec('big', 1200), VariantSpec('small', 200)])

        assert [v.width for v in planner] == [1200, 200]

    def test_duplicate_names_rejected(self):
        """Test duplicate variant names."""
        with pytest.raises(ValidationError):
            VariantPlanner([VariantSpec('a', 100), VariantSpec('a', 200)])

    def test_invalid_width_rejected(self):
        """Test non-positive widths."""
        with pytest.raises(ValidationError):
            VariantPlanner([VariantSpec('a', 0)])

    def test_variant_filename(self):
        """Test the variant naming pattern."""
        assert VariantPlanner.variant_filename('my-photo', VariantSpec('mobile', 200), 'png') == 'my-photo_w200.png'

    def test_plan(self):
        """Test planning every variant for a source size."""
        planner = VariantPlanner([VariantSpec('mobile', 200), VariantSpec('desktop_lg', 1200)])

        plan = planner.plan(300, 150)

        assert plan == [
            (VariantSpec('mobile', 200), (200, 100)),
            (VariantSpec('desktop_lg', 1200), (1200, 600)),
        ]

    def test_parse(self):
        """Test parsing NAME=WIDTH."""
        assert VariantPlanner.parse('mobile=200') == VariantSpec('mobile', 200)

    @pytest.mark.parametrize('value', ['mobile', '=200', 'mobile=abc', 'mobile=-5'])
    def test_parse_invalid(self, value):
        """Test malformed variant strings."""
        with pytest.raises(ValidationError):
            VariantPlanner.parse(value)
