"""
Height adjustment of layout subtrees before drawing.

A branch column or loop body is often shorter than the space it is drawn
into. Rather than leaving a gap, the last statement (or a trailing
pre-test loop, whose left band then runs to the bottom) is stretched to
fill it.

These passes never modify a node. They return new nodes along the
modified path and share every unchanged subtree with the input; when
nothing needs stretching the input node itself is returned, so callers can
use an identity check to see whether anything changed.
"""

from dataclasses import replace

from .models import LayoutNode, LoopLayout, SequenceLayout, StatementLayout


def is_pretest_loop(node: LayoutNode) -> bool:
    return isinstance(node, LoopLayout) and node.footer is None


def stretch_last_statement_to_height(body: LayoutNode, target_height: int) -> LayoutNode:
    """
    Grow a statement, or the last statement of a sequence, to target_height.

    Other node kinds, and sequences ending in anything but a statement,
    are returned unchanged.
    """
    if body.height >= target_height:
        return body
    if isinstance(body, StatementLayout):
        return replace(body, height=target_height)
    if not isinstance(body, SequenceLayout) or not body.children:
        return body

    last = body.children[-1]
    if not isinstance(last, StatementLayout):
        return body

    delta = target_height - body.height
    children = body.children[:-1] + (replace(last, height=last.height + delta),)
    return replace(body, children=children, height=target_height)


def stretch_loop_body_to_height(body: LayoutNode, target_height: int) -> LayoutNode:
    """
    Grow a pre-test loop, or a sequence ending in one, to target_height.

    Used for switch columns so that a loop at the bottom of a case keeps
    its wrap-around band running to the bottom of the column.
    """
    if body.height >= target_height:
        return body
    if is_pretest_loop(body):
        return replace(body, height=target_height)
    if not isinstance(body, SequenceLayout) or not body.children:
        return body

    last = body.children[-1]
    if not is_pretest_loop(last):
        return body

    delta = target_height - body.height
    children = body.children[:-1] + (replace(last, height=last.height + delta),)
    return replace(body, children=children, height=target_height)
