"""
Tests for the debug module.

These tests verify the layout inspection utilities: walk_layout,
check_layout_invariants, describe_layout and layout_diff.
"""

from dataclasses import replace

from structoflow.debug import check_layout_invariants, describe_layout, layout_diff, walk_layout
from structoflow.layout import build_structogram_layout, estimate_text_width
from structoflow.models import IfLayout, LoopLayout, SequenceLayout, StatementLayout


def row(text, width=64):
    return StatementLayout(text, width, 30)


class TestWalkLayout:
    """Tests for walk_layout."""

    def test_paths(self, if_tree):
        """Test paths in pre-order."""
        paths = [path for path, _ in walk_layout(build_structogram_layout(if_tree))]
        assert paths[:3] == ["root", "root/0", "root/0/then"]
        assert "root/0/else/1" in paths

    def test_every_kind_visited(self, complex_tree):
        """Test compound nodes are descended into."""
        kinds = {node.kind for _, node in walk_layout(build_structogram_layout(complex_tree))}
        assert kinds == {"sequence", "statement", "if", "loop", "switch", "try"}


class TestCheckLayoutInvariants:
    """Tests for check_layout_invariants."""

    def test_legal_tree(self, complex_tree):
        """Test a built tree has no violations."""
        layout = build_structogram_layout(complex_tree)
        assert check_layout_invariants(layout) == []
        assert check_layout_invariants(layout, text_width=estimate_text_width) == []

    def test_bad_sequence_height(self):
        """Test a sequence whose height is not the sum of its children."""
        node = SequenceLayout((row("a"), row("b")), 64, 50)
        violations = check_layout_invariants(node)
        assert len(violations) == 1
        assert violations[0].startswith("root:")
        assert "sum of children" in violations[0]

    def test_bad_sequence_width(self):
        """Test a sequence narrower than its widest child."""
        node = SequenceLayout((row("a", 100),), 64, 30)
        assert "widest child" in check_layout_invariants(node)[0]

    def test_empty_sequence(self):
        """Test an empty sequence is reported."""
        assert "empty sequence" in check_layout_invariants(SequenceLayout((), 64, 30))[0]

    def test_bad_if(self):
        """Test if width and branch height rules."""
        node = IfLayout("c", row("a"), row("b"), 64, 64, 40, 60, 130, 100)
        violations = check_layout_invariants(node)
        assert any("left_width + right_width" in v for v in violations)
        assert any("branch_height" in v for v in violations)

    def test_narrow_if_clips_condition(self):
        """Test the clearance check with an estimator."""
        condition = "a" * 40
        node = IfLayout(condition, row("a"), row("b"), 64, 64, 40, 30, 128, 70)
        assert check_layout_invariants(node) == []
        violations = check_layout_invariants(node, text_width=estimate_text_width)
        assert any("clips the condition" in v for v in violations)

    def test_bad_loops(self):
        """Test loop shape rules."""
        post_test = LoopLayout("do", "while (x)", 28, row("a"), 92, 90)
        assert any("inset" in v for v in check_layout_invariants(post_test))
        pre_test = LoopLayout("while (x)", None, 28, row("a"), 92, 30)
        assert any("loop height" in v for v in check_layout_invariants(pre_test))

    def test_child_paths_reported(self, if_tree):
        """Test violations name the offending node."""
        layout = build_structogram_layout(if_tree)
        node = layout.children[0]
        broken = replace(layout, children=(replace(node, then_branch=replace(node.then_branch, height=45)),))
        violations = check_layout_invariants(broken)
        assert any(v.startswith("root/0/then:") for v in violations)


class TestDescribeLayout:
    """Tests for describe_layout."""

    def test_indented_dump(self, simple_tree):
        """Test the dump lists nodes indented by depth."""
        dump = describe_layout(build_structogram_layout(simple_tree))
        assert dump.split("\n") == [
            "sequence 104x60",
            "  statement 83x30 'total ← 0'",
            "  statement 104x30 'return total'",
        ]

    def test_compound_nodes(self, complex_tree):
        """Test compound node lines."""
        dump = describe_layout(build_structogram_layout(complex_tree))
        assert "if " in dump
        assert "footer='while (i < 10)'" in dump
        assert "[1, 2:" in dump
        assert "catches=[IOException e] finally=True" in dump

    def test_no_layout(self):
        """Test an absent layout."""
        assert describe_layout(None) == "(no layout)"


class TestLayoutDiff:
    """Tests for layout_diff."""

    def test_identical(self, if_tree):
        """Test equal trees have no differences."""
        layout = build_structogram_layout(if_tree)
        assert "No differences found." in layout_diff(layout, layout)

    def test_difference_shown(self, simple_tree):
        """Test a changed statement is reported."""
        expected = build_structogram_layout(simple_tree)
        actual = replace(expected, children=(expected.children[0], row("return 0")))
        diff = layout_diff(expected, actual)
        assert "Found 1 differing line(s)" in diff
        assert "E |" in diff
        assert "A |" in diff
        assert "return 0" in diff
