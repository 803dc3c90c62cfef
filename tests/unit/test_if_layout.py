"""Unit tests for the if_layout module."""

import math

from structoflow.constants import (
    IF_CONDITION_SIDE_CLEARANCE,
    IF_HEADER_BASE_HEIGHT,
    IF_HEADER_MAX_HEIGHT,
    ROW_HEIGHT,
)
from structoflow.if_layout import (
    CONDITION_BOTTOM_Y,
    build_if_layout,
    diagonal_ratio,
    fit_if_geometry,
    header_height_for_ratio,
)
from structoflow.models import SequenceLayout, StatementLayout


def inline_width(text):
    return len(text) * 7 + 20


class TestDiagonalRatio:
    """Tests for the diagonal helpers."""

    def test_ratio(self):
        """Test the ratio for a regular run."""
        assert diagonal_ratio(100, 25) == 0.75

    def test_zero_run(self):
        """Test that a zero run does not divide by zero."""
        assert diagonal_ratio(0, 25) == 0.0

    def test_header_height_clamped(self):
        """Test the header height bounds."""
        assert header_height_for_ratio(1.0, 21, 40, 60) == 40
        assert header_height_for_ratio(0.3, 21, 40, 60) == 60
        assert header_height_for_ratio(0.0, 21, 40, 60) == 60
        assert header_height_for_ratio(0.5, 21, 40, 60) == 42


class TestFitIfGeometry:
    """Tests for fit_if_geometry."""

    def test_short_condition_keeps_content_widths(self):
        """Test that wide branches are not widened."""
        geometry = fit_if_geometry(55, 64, 64)
        assert geometry.left_width == 64
        assert geometry.right_width == 64
        assert geometry.width == 128
        assert geometry.header_height == IF_HEADER_BASE_HEIGHT

    def test_long_condition_widens_both_sides(self):
        """Test that a long condition widens both columns."""
        geometry = fit_if_geometry(200, 64, 64)
        required = math.ceil(200 / 2) + IF_CONDITION_SIDE_CLEARANCE
        assert geometry.left_width >= required
        assert geometry.right_width >= required
        assert geometry.header_height <= IF_HEADER_MAX_HEIGHT
        assert geometry.width == geometry.left_width + geometry.right_width

    def test_condition_label_clears_diagonals(self):
        """Test the label fits above the diagonal on both sides."""
        for condition_width in (40, 90, 150, 260, 400):
            geometry = fit_if_geometry(condition_width, 64, 300)
            half = condition_width / 2
            for run in (geometry.left_width, geometry.right_width):
                depth = diagonal_ratio(run, half) * geometry.header_height
                assert depth >= CONDITION_BOTTOM_Y - 1e-9

    def test_degenerate_widths(self):
        """Test zero widths still produce a positive box."""
        geometry = fit_if_geometry(0, 0, 0)
        assert geometry.left_width > 0
        assert geometry.right_width > 0
        assert geometry.header_height == IF_HEADER_BASE_HEIGHT


class TestBuildIfLayout:
    """Tests for build_if_layout."""

    def test_dimensions(self):
        """Test the width, height and branch height rules."""
        then_branch = StatementLayout("y ← 1", 64, ROW_HEIGHT)
        else_branch = SequenceLayout(
            children=(StatementLayout("y ← 2", 64, ROW_HEIGHT), StatementLayout("log(y)", 64, ROW_HEIGHT)),
            width=64,
            height=2 * ROW_HEIGHT,
        )
        node = build_if_layout("x > 0", then_branch, else_branch, inline_width)

        assert node.condition == "x > 0"
        assert node.branch_height == 2 * ROW_HEIGHT
        assert node.width == node.left_width + node.right_width
        assert node.height == node.header_height + node.branch_height
        assert node.then_branch is then_branch
        assert node.else_branch is else_branch
