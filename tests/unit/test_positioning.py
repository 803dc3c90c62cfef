"""Unit tests for the positioning module."""

from structoflow.models import IfLayout, LoopLayout, SequenceLayout, StatementLayout
from structoflow.positioning import (
    is_pretest_loop,
    stretch_last_statement_to_height,
    stretch_loop_body_to_height,
)


def row(text, height=30):
    return StatementLayout(text, 64, height)


def pretest_loop(height=60):
    return LoopLayout("while (x)", None, 28, row("a"), 92, height)


class TestStretchLastStatement:
    """Tests for stretch_last_statement_to_height."""

    def test_statement_grows(self):
        """Test a lone statement is stretched."""
        stretched = stretch_last_statement_to_height(row("a"), 90)
        assert stretched.height == 90
        assert stretched.text == "a"

    def test_last_child_of_sequence_grows(self):
        """Test only the last statement of a sequence changes."""
        first = row("a")
        body = SequenceLayout((first, row("b")), 64, 60)
        stretched = stretch_last_statement_to_height(body, 100)

        assert stretched.height == 100
        assert stretched.children[0] is first
        assert stretched.children[1].height == 70
        assert body.height == 60
        assert body.children[1].height == 30

    def test_tall_enough_returns_same_node(self):
        """Test that nothing is copied when no stretching is needed."""
        body = SequenceLayout((row("a"),), 64, 30)
        assert stretch_last_statement_to_height(body, 30) is body
        assert stretch_last_statement_to_height(body, 10) is body

    def test_sequence_ending_in_compound(self):
        """Test sequences ending in anything but a statement are unchanged."""
        body = SequenceLayout((row("a"), pretest_loop()), 92, 90)
        assert stretch_last_statement_to_height(body, 120) is body

    def test_other_kinds_unchanged(self):
        """Test compound nodes are returned unchanged."""
        node = IfLayout("c", row("a"), row("b"), 64, 64, 40, 30, 128, 70)
        assert stretch_last_statement_to_height(node, 100) is node


class TestStretchLoopBody:
    """Tests for stretch_loop_body_to_height."""

    def test_pretest_loop_grows(self):
        """Test a lone pre-test loop is stretched."""
        loop = pretest_loop()
        stretched = stretch_loop_body_to_height(loop, 90)
        assert stretched.height == 90
        assert stretched.body is loop.body

    def test_trailing_loop_in_sequence(self):
        """Test a sequence ending in a pre-test loop."""
        first = row("a")
        body = SequenceLayout((first, pretest_loop()), 92, 90)
        stretched = stretch_loop_body_to_height(body, 120)
        assert stretched.height == 120
        assert stretched.children[0] is first
        assert stretched.children[1].height == 90

    def test_post_test_loop_unchanged(self):
        """Test do-while loops are not stretched."""
        loop = LoopLayout("do", "while (x)", 0, row("a"), 92, 90)
        assert not is_pretest_loop(loop)
        assert stretch_loop_body_to_height(loop, 120) is loop

    def test_statement_unchanged(self):
        """Test a statement is not a loop."""
        node = row("a")
        assert stretch_loop_body_to_height(node, 90) is node
