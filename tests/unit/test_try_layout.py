"""Unit tests for the try_layout module."""

from structoflow.constants import HEADER_HEIGHT, ROW_HEIGHT, SECTION_HEADER_HEIGHT, TRY_FRAME_SIDE_WIDTH
from structoflow.models import CatchLayout, StatementLayout
from structoflow.try_layout import build_try_layout, catch_header


def box_width(text):
    return max(64, len(text) * 7 + 20)


def row(text, width=64):
    return StatementLayout(text, width, ROW_HEIGHT)


class TestBuildTryLayout:
    """Tests for build_try_layout."""

    def test_body_only(self):
        """Test a try without catches or finally."""
        node = build_try_layout(row("open()"), (), None, box_width)
        assert node.height == HEADER_HEIGHT + ROW_HEIGHT
        assert node.width == 64 + TRY_FRAME_SIDE_WIDTH
        assert node.finally_branch is None

    def test_catch_and_finally_heights(self):
        """Test the stacked section heights."""
        catches = (
            CatchLayout("IOException e", row("log(e)")),
            CatchLayout("RuntimeException e", row("fail()")),
        )
        node = build_try_layout(row("open()"), catches, row("close()"), box_width)
        assert node.height == (
            HEADER_HEIGHT
            + ROW_HEIGHT
            + 2 * (SECTION_HEADER_HEIGHT + ROW_HEIGHT)
            + SECTION_HEADER_HEIGHT
            + ROW_HEIGHT
        )

    def test_catch_header_sets_width(self):
        """Test a long catch header widens the box."""
        exception = "IllegalArgumentException | NullPointerException e"
        catches = (CatchLayout(exception, row("log(e)")),)
        node = build_try_layout(row("open()"), catches, None, box_width)
        assert node.width == box_width(catch_header(exception))

    def test_wide_body_includes_frame(self):
        """Test body widths include the frame band."""
        node = build_try_layout(row("x", width=300), (), None, box_width)
        assert node.width == 300 + TRY_FRAME_SIDE_WIDTH

    def test_catch_header_text(self):
        """Test the catch section label."""
        assert catch_header("Exception e") == "catch (Exception e)"
