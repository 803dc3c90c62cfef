"""
Debug utilities for structoflow.

This module provides tools for understanding and troubleshooting layout
trees without drawing them.

Key Components:
- walk_layout: Iterate over every node of a layout tree with its path
- check_layout_invariants: List every size rule a layout tree breaks
- describe_layout: Indented, one-node-per-line dump of a layout tree
- layout_diff: Compare two layout trees line by line

Usage:
    >>> layout = StructogramLayout().layout(tree)
    >>> print(describe_layout(layout))
    >>> assert check_layout_invariants(layout) == []

    # For comparing expected vs actual layouts:
    >>> from structoflow.debug import layout_diff
    >>> print(layout_diff(expected_layout, actual_layout))
"""

import math
from itertools import zip_longest
from typing import Iterator, List, Optional, Tuple

from .constants import (
    HEADER_HEIGHT,
    IF_CONDITION_SIDE_CLEARANCE,
    ROW_HEIGHT,
    SECTION_HEADER_HEIGHT,
    TEXT_PADDING_X,
)
from .layout import TextWidth
from .models import (
    IfLayout,
    LayoutNode,
    LoopLayout,
    SequenceLayout,
    StatementLayout,
    SwitchLayout,
    TryLayout,
)


def _children(node: LayoutNode, path: str) -> List[Tuple[str, LayoutNode]]:
    if isinstance(node, SequenceLayout):
        return [(f"{path}/{i}", child) for i, child in enumerate(node.children)]
    if isinstance(node, IfLayout):
        return [(f"{path}/then", node.then_branch), (f"{path}/else", node.else_branch)]
    if isinstance(node, LoopLayout):
        return [(f"{path}/body", node.body)]
    if isinstance(node, SwitchLayout):
        return [(f"{path}/case[{i}]", case.body) for i, case in enumerate(node.cases)]
    if isinstance(node, TryLayout):
        result = [(f"{path}/body", node.body)]
        result.extend(
            (f"{path}/catch[{i}]", catch.body) for i, catch in enumerate(node.catches)
        )
        if node.finally_branch is not None:
            result.append((f"{path}/finally", node.finally_branch))
        return result
    return []


def walk_layout(node: LayoutNode, path: str = "root") -> Iterator[Tuple[str, LayoutNode]]:
    """Yield (path, node) for a layout tree in depth-first pre-order."""
    yield path, node
    for child_path, child in _children(node, path):
        yield from walk_layout(child, child_path)


def check_layout_invariants(
    node: LayoutNode, text_width: Optional[TextWidth] = None
) -> List[str]:
    """
    Check every node of a layout tree against the structogram size rules.

    Args:
        node: Root of the layout tree.
        text_width: Estimator the tree was built with. When given, if
            columns are also checked for condition label clearance.

    Returns:
        One message per violation; empty when the tree is legal.
    """
    violations: List[str] = []

    def fail(path: str, message: str) -> None:
        violations.append(f"{path}: {message}")

    for path, current in walk_layout(node):
        if current.width <= 0 or current.height <= 0:
            fail(path, f"non-positive size {current.width}x{current.height}")

        if isinstance(current, SequenceLayout):
            if not current.children:
                fail(path, "empty sequence")
                continue
            total = sum(child.height for child in current.children)
            widest = max(child.width for child in current.children)
            if current.height != total:
                fail(path, f"height {current.height} != sum of children {total}")
            if current.width != widest:
                fail(path, f"width {current.width} != widest child {widest}")

        elif isinstance(current, IfLayout):
            if current.width != current.left_width + current.right_width:
                fail(path, "width != left_width + right_width")
            if current.height != current.header_height + current.branch_height:
                fail(path, "height != header_height + branch_height")
            tallest = max(current.then_branch.height, current.else_branch.height)
            if current.branch_height != tallest:
                fail(path, f"branch_height {current.branch_height} != {tallest}")
            if text_width is not None:
                condition_width = text_width(current.condition) + TEXT_PADDING_X * 2
                required = math.ceil(condition_width / 2) + IF_CONDITION_SIDE_CLEARANCE
                if min(current.left_width, current.right_width) < required:
                    fail(path, f"column narrower than {required} clips the condition")

        elif isinstance(current, LoopLayout):
            if current.footer is not None:
                if current.body_inset_width != 0:
                    fail(path, "post-test loop with a body inset")
                expected = 2 * HEADER_HEIGHT + current.body.height
            else:
                if current.body_inset_width <= 0:
                    fail(path, "pre-test loop without a body inset")
                expected = max(2 * ROW_HEIGHT, current.body.height)
            if current.height != expected:
                fail(path, f"loop height {current.height} != {expected}")

        elif isinstance(current, SwitchLayout):
            if not current.cases:
                fail(path, "switch without columns")
            total = sum(case.width for case in current.cases)
            if current.width != total:
                fail(path, f"width {current.width} != sum of columns {total}")
            bands = (
                current.selector_band_height
                + current.label_band_height
                + current.branch_height
            )
            if current.height != bands:
                fail(path, f"height {current.height} != sum of bands {bands}")

        elif isinstance(current, TryLayout):
            expected = HEADER_HEIGHT + current.body.height
            expected += sum(SECTION_HEADER_HEIGHT + c.body.height for c in current.catches)
            if current.finally_branch is not None:
                expected += SECTION_HEADER_HEIGHT + current.finally_branch.height
            if current.height != expected:
                fail(path, f"try height {current.height} != {expected}")

    return violations


def _describe(node: LayoutNode) -> str:
    size = f"{node.width}x{node.height}"
    if isinstance(node, StatementLayout):
        return f"statement {size} {node.text!r}"
    if isinstance(node, SequenceLayout):
        return f"sequence {size}"
    if isinstance(node, IfLayout):
        return (
            f"if {size} {node.condition!r} left={node.left_width} "
            f"right={node.right_width} header={node.header_height}"
        )
    if isinstance(node, LoopLayout):
        footer = f" footer={node.footer!r}" if node.footer is not None else ""
        return f"loop {size} {node.header!r}{footer} inset={node.body_inset_width}"
    if isinstance(node, SwitchLayout):
        columns = ", ".join(f"{case.label}:{case.width}" for case in node.cases)
        return (
            f"switch {size} {node.expression!r} selector={node.selector_band_height} "
            f"labels={node.label_band_height} [{columns}]"
        )
    if isinstance(node, TryLayout):
        catches = ", ".join(catch.exception for catch in node.catches)
        has_finally = node.finally_branch is not None
        return f"try {size} catches=[{catches}] finally={has_finally}"
    return f"{getattr(node, 'kind', type(node).__name__)} {size}"


def describe_layout(node: Optional[LayoutNode]) -> str:
    """
    Dump a layout tree, one node per line, indented by depth.

    Example:
        >>> print(describe_layout(layout))
        sequence 132x60
          statement 132x30 'total ← 0'
          statement 64x30 'return total'
    """
    if node is None:
        return "(no layout)"
    lines = []
    for path, current in walk_layout(node):
        depth = path.count("/")
        lines.append("  " * depth + _describe(current))
    return "\n".join(lines)


def layout_diff(
    expected: Optional[LayoutNode], actual: Optional[LayoutNode], context_lines: int = 2
) -> str:
    """
    Compare two layout trees through their describe_layout dumps.

    Args:
        expected: The expected layout tree
        actual: The actual layout tree
        context_lines: Number of matching lines to show around differences

    Returns:
        A formatted string showing the differing lines
    """
    pairs = list(
        zip_longest(
            describe_layout(expected).split("\n"),
            describe_layout(actual).split("\n"),
            fillvalue="",
        )
    )
    differing = [index for index, (exp, act) in enumerate(pairs) if exp != act]

    output: List[str] = ["=" * 60, "LAYOUT DIFF", "=" * 60]
    if not differing:
        output.append("No differences found.")
        return "\n".join(output)

    output.append(f"Found {len(differing)} differing line(s)")
    output.append("")

    visible = sorted(
        {
            index
            for diff_index in differing
            for index in range(
                max(0, diff_index - context_lines),
                min(len(pairs), diff_index + context_lines + 1),
            )
        }
    )

    previous = None
    for index in visible:
        if previous is not None and index != previous + 1:
            output.append("...")
        exp, act = pairs[index]
        if exp == act:
            output.append(f"{index:3d}:   {act}")
        else:
            output.append(f"{index:3d}: E |{exp}|")
            output.append(f"     A |{act}|")
        previous = index

    return "\n".join(output)
