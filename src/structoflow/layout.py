"""
Layout builder for Nassi-Shneiderman structograms.

Walks a control-flow tree and produces the layout tree: every node gets
integer pixel dimensions that satisfy the structogram rules (condition
labels clear of the header diagonals, branch columns of equal height,
switch fallthrough shown by repeating the code that a case falls into).

The builder is a pure function of its input tree and text width
estimator. It never raises on malformed content: missing labels fall back
to placeholders, empty statements are dropped, and unknown node kinds are
shown as plain statements.

Usage:
    >>> layout = StructogramLayout().layout(tree)
    >>> layout.width, layout.height
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .constants import (
    CHAR_WIDTH,
    DEFAULT_CASE_LABEL,
    DEFAULT_CATCH_LABEL,
    DEFAULT_CONDITION_LABEL,
    DEFAULT_SELECTOR_LABEL,
    EMPTY_BODY_LABEL,
    EMPTY_ELSE_LABEL,
    MIN_CONTENT_WIDTH,
    ROW_HEIGHT,
    TEXT_PADDING_X,
)
from .if_layout import build_if_layout
from .loop_layout import build_loop_layout
from .models import (
    CatchLayout,
    ControlNode,
    IfNode,
    LayoutNode,
    LoopNode,
    SequenceLayout,
    SequenceNode,
    StatementLayout,
    StatementNode,
    SwitchCase,
    SwitchNode,
    TryNode,
)
from .switch_layout import build_switch_layout
from .text import is_terminating_statement, normalize_label, normalize_statement_text
from .tracer import LayoutTrace
from .try_layout import build_try_layout

logger = logging.getLogger(__name__)

TextWidth = Callable[[str], float]


def estimate_text_width(text: str) -> float:
    """Default text width estimator: a fixed width per character."""
    return len(text) * CHAR_WIDTH


def pillow_text_width(font) -> TextWidth:
    """
    Build a text width estimator from a Pillow font.

    Args:
        font: A PIL ImageFont (FreeTypeFont or the default bitmap font).
    """

    def measure(text: str) -> float:
        return font.getlength(text)

    return measure


# ---------------------------------------------------------------------------
# Switch case merging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CaseGroup:
    """
    Switch cases that share one rendered column.

    Attributes:
        labels: Labels of the merged cases, in source order.
        body: The group's own statements (trailing breaks removed).
        terminates: Whether the group's code ends in an explicit terminator,
            so control does not fall through into the next group.
    """

    labels: Tuple[str, ...]
    body: Tuple[ControlNode, ...]
    terminates: bool

    @property
    def label(self) -> str:
        return ", ".join(self.labels)


def has_renderable_node(node: Optional[ControlNode]) -> bool:
    """Whether a node would produce a visible box."""
    if node is None:
        return False
    if isinstance(node, StatementNode):
        return normalize_statement_text(node.text) is not None
    if isinstance(node, SequenceNode):
        return any(has_renderable_node(child) for child in node.children)
    return True


def has_renderable_body(nodes: Optional[Sequence[ControlNode]]) -> bool:
    return any(has_renderable_node(node) for node in nodes or ())


def last_renderable_node(nodes: Optional[Sequence[ControlNode]]) -> Optional[ControlNode]:
    for node in reversed(tuple(nodes or ())):
        if has_renderable_node(node):
            return node
    return None


def case_has_explicit_terminator(nodes: Optional[Sequence[ControlNode]]) -> bool:
    """Whether the last visible statement of a case body ends its flow."""
    last = last_renderable_node(nodes)
    if not isinstance(last, StatementNode):
        return False
    return is_terminating_statement(normalize_statement_text(last.text))


def strip_trailing_breaks(nodes: Optional[Sequence[ControlNode]]) -> Tuple[ControlNode, ...]:
    """Drop the break statement(s) that close a case body."""
    entries = tuple(nodes or ())
    end = len(entries)
    while end > 0:
        last = entries[end - 1]
        if not isinstance(last, StatementNode):
            break
        if normalize_statement_text(last.text) != "break":
            break
        end -= 1
    return entries[:end]


def merge_switch_cases(cases: Sequence[SwitchCase]) -> List[CaseGroup]:
    """
    Merge switch cases into rendered groups.

    Cases without code of their own that do not terminate fall through to
    the next case, so their labels are carried forward and shown together
    with the first following case that has code. An empty case that does
    terminate (a bare "break") closes a group of its own.

    Example:
        Cases 1 (empty), 2 (doA();) and default (doB();) give two groups:
        ("1", "2") with [doA();] and ("default",) with [doB();].
    """
    groups: List[CaseGroup] = []
    pending: List[str] = []

    for entry in cases:
        label = normalize_label(entry.label, DEFAULT_CASE_LABEL)
        own_body = strip_trailing_breaks(entry.body)
        terminates = case_has_explicit_terminator(entry.body)

        if not has_renderable_body(own_body):
            if terminates:
                groups.append(CaseGroup(tuple(pending) + (label,), own_body, True))
                pending = []
            else:
                pending.append(label)
            continue

        groups.append(CaseGroup(tuple(pending) + (label,), own_body, terminates))
        pending = []

    if pending:
        groups.append(CaseGroup(tuple(pending), (), False))

    return groups


def propagate_fallthrough(groups: Sequence[CaseGroup]) -> List[Tuple[ControlNode, ...]]:
    """
    Compute the code shown in every group's column.

    Walking backward, a group that does not terminate shows its own code
    followed by everything shown for the next group.
    """
    displayed: List[Tuple[ControlNode, ...]] = [()] * len(groups)
    following: Tuple[ControlNode, ...] = ()
    for index in range(len(groups) - 1, -1, -1):
        group = groups[index]
        displayed[index] = group.body if group.terminates else group.body + following
        following = displayed[index]
    return displayed


# ---------------------------------------------------------------------------
# Layout builder
# ---------------------------------------------------------------------------


class StructogramLayout:
    """
    Builds layout trees from control-flow trees.

    Attributes:
        text_width: Raw text width estimator, (str) -> pixels.
        trace: Optional LayoutTrace that receives every layout decision.
    """

    def __init__(
        self,
        text_width: Optional[TextWidth] = None,
        trace: Optional[LayoutTrace] = None,
    ):
        self.text_width = text_width or estimate_text_width
        self.trace = trace

    def box_width(self, text: str) -> int:
        """Width of a box holding the text, never below MIN_CONTENT_WIDTH."""
        return max(MIN_CONTENT_WIDTH, math.ceil(self.inline_width(text)))

    def inline_width(self, text: str) -> float:
        """Width of the text plus horizontal padding on both sides."""
        return self.text_width(text) + TEXT_PADDING_X * 2

    def layout(self, tree: Optional[ControlNode]) -> Optional[LayoutNode]:
        """
        Compute the layout tree for a control-flow tree.

        Args:
            tree: Root of the control-flow tree, usually a SequenceNode.

        Returns:
            The layout tree, or None when there is no tree or it renders
            to nothing.
        """
        if tree is None:
            return None
        return self._to_layout_node(tree, "root")

    def _record(self, path: str, node: LayoutNode, reason: str, detail: str = "") -> None:
        if self.trace is not None:
            self.trace.add_decision(
                path, node.kind, node.width, node.height, reason, detail
            )

    def _statement(self, text: str, path: str, reason: str = "statement") -> StatementLayout:
        node = StatementLayout(text=text, width=self.box_width(text), height=ROW_HEIGHT)
        self._record(path, node, reason, text)
        return node

    def _sequence(
        self,
        nodes: Optional[Sequence[ControlNode]],
        path: str,
        empty_label: str = EMPTY_BODY_LABEL,
    ) -> SequenceLayout:
        children = []
        for index, entry in enumerate(nodes or ()):
            child = self._to_layout_node(entry, f"{path}/{index}")
            if child is not None:
                children.append(child)

        if not children:
            placeholder = self._statement(empty_label, f"{path}/0", "empty_placeholder")
            node = SequenceLayout(
                children=(placeholder,),
                width=placeholder.width,
                height=placeholder.height,
            )
        else:
            node = SequenceLayout(
                children=tuple(children),
                width=max(child.width for child in children),
                height=sum(child.height for child in children),
            )
        self._record(path, node, "sequence")
        return node

    def _to_layout_node(self, node: ControlNode, path: str) -> Optional[LayoutNode]:
        if isinstance(node, StatementNode):
            text = normalize_statement_text(node.text)
            if text is None:
                logger.debug("Dropping empty statement at %s", path)
                if self.trace is not None:
                    self.trace.add_decision(path, node.kind, 0, 0, "dropped_statement")
                return None
            return self._statement(text, path)

        if isinstance(node, SequenceNode):
            return self._sequence(node.children, path)

        if isinstance(node, IfNode):
            return self._if(node, path)

        if isinstance(node, LoopNode):
            body = self._sequence(node.children, f"{path}/body")
            condition = normalize_label(node.condition, DEFAULT_CONDITION_LABEL)
            result = build_loop_layout(node.loop_kind, condition, body, self.box_width)
            self._record(path, result, "loop", result.header)
            return result

        if isinstance(node, SwitchNode):
            return self._switch(node, path)

        if isinstance(node, TryNode):
            return self._try(node, path)

        kind = getattr(node, "kind", "") or "unknown"
        label = normalize_label(getattr(node, "text", None), kind)
        return self._statement(label, path, "unknown_kind")

    def _if(self, node: IfNode, path: str) -> LayoutNode:
        condition = normalize_label(node.condition, DEFAULT_CONDITION_LABEL)
        then_branch = self._sequence(node.then_branch, f"{path}/then")
        if node.else_branch:
            else_branch = self._sequence(node.else_branch, f"{path}/else")
        else:
            else_branch = self._statement(EMPTY_ELSE_LABEL, f"{path}/else", "no_else")

        result = build_if_layout(condition, then_branch, else_branch, self.inline_width)
        self._record(path, result, "if", condition)
        return result

    def _switch(self, node: SwitchNode, path: str) -> LayoutNode:
        expression = normalize_label(node.condition, DEFAULT_SELECTOR_LABEL)
        groups = merge_switch_cases(node.cases)

        cases: List[Tuple[str, LayoutNode]] = []
        if not groups:
            cases.append(
                (
                    DEFAULT_CASE_LABEL,
                    self._statement(EMPTY_BODY_LABEL, f"{path}/case[0]", "empty_placeholder"),
                )
            )
        else:
            logger.debug(
                "Merged %d switch cases into %d groups at %s",
                len(node.cases),
                len(groups),
                path,
            )
            for index, (group, body_nodes) in enumerate(
                zip(groups, propagate_fallthrough(groups))
            ):
                case_path = f"{path}/case[{index}]"
                if has_renderable_body(body_nodes):
                    body = self._sequence(body_nodes, case_path)
                else:
                    body = self._statement(EMPTY_BODY_LABEL, case_path, "empty_placeholder")
                self._record(case_path, body, "switch_group", group.label)
                cases.append((group.label, body))

        branch_height = max([ROW_HEIGHT] + [body.height for _, body in cases])
        result = build_switch_layout(
            expression, cases, branch_height, self.box_width, self.inline_width
        )
        self._record(path, result, "switch", expression)
        return result

    def _try(self, node: TryNode, path: str) -> LayoutNode:
        body = self._sequence(node.children, f"{path}/body")
        catches = tuple(
            CatchLayout(
                exception=normalize_label(entry.exception, DEFAULT_CATCH_LABEL),
                body=self._sequence(entry.body, f"{path}/catch[{index}]"),
            )
            for index, entry in enumerate(node.catches)
        )
        finally_branch = None
        if node.finally_branch:
            finally_branch = self._sequence(node.finally_branch, f"{path}/finally")

        result = build_try_layout(body, catches, finally_branch, self.box_width)
        self._record(path, result, "try")
        return result


def build_structogram_layout(
    tree: Optional[ControlNode], text_width: Optional[TextWidth] = None
) -> Optional[LayoutNode]:
    """
    Compute the layout tree for a control-flow tree.

    Convenience wrapper around StructogramLayout.

    Args:
        tree: Root of the control-flow tree, or None.
        text_width: Optional raw text width estimator.

    Returns:
        The layout tree, or None when there is nothing to lay out.
    """
    return StructogramLayout(text_width=text_width).layout(tree)
