"""
Data models for structogram generation.

This module contains the immutable tree types that flow through the
pipeline. The control-flow tree is the input produced by an external
static analyzer; the layout tree is the output of the layout engine and
carries integer pixel dimensions on every node.

Both trees are tagged unions: every variant is a frozen dataclass with a
``kind`` tag, and consumers dispatch on the concrete type. Child
collections are tuples so that a tree can be shared freely between callers
without defensive copies.

Classes:
    StatementNode, SequenceNode, IfNode, LoopNode, SwitchNode, TryNode,
    UnknownNode: Control-flow tree variants.
    SwitchCase, CatchClause: Control-flow sub-records.
    Param, MethodInfo: Method descriptor that owns a control-flow tree.
    StatementLayout, SequenceLayout, IfLayout, LoopLayout, SwitchLayout,
    TryLayout: Layout tree variants.
    SwitchCaseLayout, CatchLayout: Layout sub-records.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

# ---------------------------------------------------------------------------
# Control-flow tree (input)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatementNode:
    """A single simple statement, as source text."""

    text: Optional[str] = None
    kind: ClassVar[str] = "statement"


@dataclass(frozen=True)
class SequenceNode:
    """A block of statements executed in order."""

    children: Tuple["ControlNode", ...] = ()
    kind: ClassVar[str] = "sequence"


@dataclass(frozen=True)
class IfNode:
    """
    A binary decision.

    Attributes:
        condition: Condition source text.
        then_branch: Statements executed when the condition holds.
        else_branch: Statements executed otherwise. Empty when the source
            has no else clause.
    """

    condition: Optional[str] = None
    then_branch: Tuple["ControlNode", ...] = ()
    else_branch: Tuple["ControlNode", ...] = ()
    kind: ClassVar[str] = "if"


@dataclass(frozen=True)
class LoopNode:
    """
    A loop.

    Attributes:
        loop_kind: "while", "for", "foreach" or "doWhile" (post-test).
            Other values are rendered as pre-test loops labeled with the
            kind itself.
        condition: Loop condition or header text.
        children: Loop body.
    """

    loop_kind: Optional[str] = None
    condition: Optional[str] = None
    children: Tuple["ControlNode", ...] = ()
    kind: ClassVar[str] = "loop"


@dataclass(frozen=True)
class SwitchCase:
    """One case entry of a switch statement, in source order."""

    label: Optional[str] = None
    body: Tuple["ControlNode", ...] = ()


@dataclass(frozen=True)
class SwitchNode:
    """A multi-way decision over a selector expression."""

    condition: Optional[str] = None
    cases: Tuple[SwitchCase, ...] = ()
    kind: ClassVar[str] = "switch"


@dataclass(frozen=True)
class CatchClause:
    """A catch section of a try statement."""

    exception: Optional[str] = None
    body: Tuple["ControlNode", ...] = ()


@dataclass(frozen=True)
class TryNode:
    """
    A try statement.

    Attributes:
        children: The protected body.
        catches: Catch sections in source order.
        finally_branch: Finally body, or None when the source has none.
    """

    children: Tuple["ControlNode", ...] = ()
    catches: Tuple[CatchClause, ...] = ()
    finally_branch: Optional[Tuple["ControlNode", ...]] = None
    kind: ClassVar[str] = "try"


@dataclass(frozen=True)
class UnknownNode:
    """A node whose kind the layout engine does not know."""

    kind: str = "unknown"
    text: Optional[str] = None


ControlNode = Union[
    StatementNode, SequenceNode, IfNode, LoopNode, SwitchNode, TryNode, UnknownNode
]


@dataclass(frozen=True)
class Param:
    """A method parameter as reported by the analyzer."""

    name: Optional[str] = None
    type: Optional[str] = None


@dataclass(frozen=True)
class MethodInfo:
    """
    A method descriptor.

    Attributes:
        name: Method name, if the analyzer reported one.
        signature: Raw signature text (e.g. "add(int a, int b)").
        return_type: Declared return type.
        visibility: "public"/"private"/"protected" or UML "+"/"-"/"#".
        is_static: Whether the method is static.
        params: Structured parameters. When empty, parameters are taken
            from the raw signature.
        control_tree: The method body, or None when unavailable.
    """

    name: Optional[str] = None
    signature: str = ""
    return_type: Optional[str] = None
    visibility: Optional[str] = None
    is_static: bool = False
    params: Tuple[Param, ...] = ()
    control_tree: Optional[ControlNode] = None


# ---------------------------------------------------------------------------
# Layout tree (output)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatementLayout:
    """A single statement box."""

    text: str
    width: int
    height: int
    kind: ClassVar[str] = "statement"


@dataclass(frozen=True)
class SequenceLayout:
    """Children stacked top to bottom. Never empty."""

    children: Tuple["LayoutNode", ...]
    width: int
    height: int
    kind: ClassVar[str] = "sequence"


@dataclass(frozen=True)
class IfLayout:
    """
    A binary decision box.

    The header is split by two diagonals meeting above the boundary
    between the left (then) and right (else) columns.
    """

    condition: str
    then_branch: "LayoutNode"
    else_branch: "LayoutNode"
    left_width: int
    right_width: int
    header_height: int
    branch_height: int
    width: int
    height: int
    kind: ClassVar[str] = "if"


@dataclass(frozen=True)
class LoopLayout:
    """
    A loop box.

    Pre-test loops have no footer and an inset body band on the left.
    Post-test loops have a footer row and no inset.
    """

    header: str
    footer: Optional[str]
    body_inset_width: int
    body: "LayoutNode"
    width: int
    height: int
    kind: ClassVar[str] = "loop"


@dataclass(frozen=True)
class SwitchCaseLayout:
    """One rendered column of a switch box."""

    label: str
    body: "LayoutNode"
    width: int


@dataclass(frozen=True)
class SwitchLayout:
    """A multi-way decision box; the last column is the default column."""

    expression: str
    cases: Tuple[SwitchCaseLayout, ...]
    selector_band_height: int
    label_band_height: int
    branch_height: int
    width: int
    height: int
    kind: ClassVar[str] = "switch"


@dataclass(frozen=True)
class CatchLayout:
    """A catch section of a try box."""

    exception: str
    body: "LayoutNode"


@dataclass(frozen=True)
class TryLayout:
    """A try box with stacked catch and finally sections."""

    body: "LayoutNode"
    catches: Tuple[CatchLayout, ...]
    finally_branch: Optional["LayoutNode"]
    width: int
    height: int
    kind: ClassVar[str] = "try"


LayoutNode = Union[
    StatementLayout, SequenceLayout, IfLayout, LoopLayout, SwitchLayout, TryLayout
]
