"""
Drawing primitives for structogram layout trees.

The renderer walks a layout tree and places rectangles, lines and text on
a Drawing. A Drawing is format-neutral: it serializes itself to SVG, and
png_renderer.py rasterizes the same primitives with Pillow.

Nodes are drawn at the width of the column they are placed in, which can
be wider than the node itself; decision boxes then re-fit their columns
with fit_column_widths so the column borders still line up.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union
from xml.sax.saxutils import escape

from .columns import fit_column_widths
from .constants import (
    EMPTY_ELSE_LABEL,
    FINALLY_HEADER_LABEL,
    HEADER_HEIGHT,
    IF_CONDITION_TOP_PADDING,
    LABEL_TEXT_OFFSET_Y,
    LEGACY_EMPTY_ELSE_LABEL,
    SECTION_HEADER_HEIGHT,
    SWITCH_CONDITION_TOP_PADDING,
    TEXT_BASELINE_OFFSET,
    TEXT_PADDING_X,
    TRY_FRAME_SIDE_WIDTH,
    TRY_HEADER_LABEL,
)
from .models import (
    IfLayout,
    LayoutNode,
    LoopLayout,
    SequenceLayout,
    StatementLayout,
    SwitchLayout,
    TryLayout,
)
from .positioning import stretch_last_statement_to_height, stretch_loop_body_to_height
from .theme import StructogramTheme
from .try_layout import catch_header


@dataclass(frozen=True)
class Rect:
    """A filled rectangle; stroke None means no outline."""

    x: float
    y: float
    width: float
    height: float
    fill: str
    stroke: Optional[str] = None


@dataclass(frozen=True)
class Line:
    """A straight line segment."""

    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str


@dataclass(frozen=True)
class Text:
    """
    A single line of text.

    Attributes:
        x: Anchor x coordinate.
        y: Baseline y coordinate.
        value: The text.
        fill: Text color.
        anchor: "start", "middle" or "end".
        font_size: Text size in pixels.
    """

    x: float
    y: float
    value: str
    fill: str
    anchor: str = "start"
    font_size: int = 12


Primitive = Union[Rect, Line, Text]


@dataclass
class Drawing:
    """
    A 2D drawing made of primitives, in paint order.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        background: Canvas background color.
        font_family: Font family used for SVG text.
        stroke_width: Outline width.
        elements: Primitives in the order they are painted.
    """

    width: int
    height: int
    background: str = "#ffffff"
    font_family: str = "sans-serif"
    stroke_width: int = 1
    elements: List[Primitive] = field(default_factory=list)

    def add_rect(self, x, y, width, height, fill, stroke=None) -> None:
        self.elements.append(Rect(x, y, width, height, fill, stroke))

    def add_line(self, x1, y1, x2, y2, stroke) -> None:
        self.elements.append(Line(x1, y1, x2, y2, stroke))

    def add_text(self, x, y, value, fill, anchor="start", font_size=12) -> None:
        self.elements.append(Text(x, y, value, fill, anchor, font_size))

    def texts(self) -> List[str]:
        """All text values, in paint order."""
        return [e.value for e in self.elements if isinstance(e, Text)]

    def to_svg(self) -> str:
        """Serialize the drawing to a standalone SVG document."""
        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" '
            f'height="{self.height}" viewBox="0 0 {self.width} {self.height}" '
            f'stroke-width="{self.stroke_width}" '
            f'font-family="{escape(self.font_family)}" role="img" '
            f'aria-label="Nassi-Shneiderman structogram">',
            f'  <rect x="0" y="0" width="{self.width}" height="{self.height}" '
            f'fill="{self.background}" stroke="none"/>',
        ]
        for element in self.elements:
            if isinstance(element, Rect):
                stroke = element.stroke or "none"
                lines.append(
                    f'  <rect x="{_num(element.x)}" y="{_num(element.y)}" '
                    f'width="{_num(element.width)}" height="{_num(element.height)}" '
                    f'fill="{element.fill}" stroke="{stroke}"/>'
                )
            elif isinstance(element, Line):
                lines.append(
                    f'  <line x1="{_num(element.x1)}" y1="{_num(element.y1)}" '
                    f'x2="{_num(element.x2)}" y2="{_num(element.y2)}" '
                    f'stroke="{element.stroke}"/>'
                )
            else:
                lines.append(
                    f'  <text x="{_num(element.x)}" y="{_num(element.y)}" '
                    f'text-anchor="{element.anchor}" font-size="{element.font_size}" '
                    f'fill="{element.fill}">{escape(element.value)}</text>'
                )
        lines.append("</svg>")
        return "\n".join(lines)


def _num(value: float) -> str:
    """Format a coordinate without a trailing .0."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def is_no_else_placeholder(text: str) -> bool:
    """Whether a statement is the implicit-else sentinel (drawn centered)."""
    normalized = text.strip()
    return (
        normalized == EMPTY_ELSE_LABEL
        or normalized.lower() == LEGACY_EMPTY_ELSE_LABEL
    )


class StructogramRenderer:
    """
    Draws layout trees.

    Attributes:
        theme: Colors and paddings.
        text_width: Optional text width estimator used to make room for a
            title wider than the diagram.
    """

    def __init__(
        self,
        theme: Optional[StructogramTheme] = None,
        text_width: Optional[Callable[[str], float]] = None,
    ):
        self.theme = theme or StructogramTheme.light()
        self.text_width = text_width

    def render(self, layout: LayoutNode, title: Optional[str] = None) -> Drawing:
        """
        Draw a layout tree.

        Args:
            layout: Root of the layout tree.
            title: Optional line drawn above the diagram, usually the method
                declaration.

        Returns:
            The Drawing, sized to the diagram plus canvas padding.
        """
        theme = self.theme
        pad = theme.canvas_padding

        title_height = 0
        width = layout.width + pad * 2
        if title:
            title_height = (
                theme.header_top_padding + theme.font_size + theme.header_bottom_padding
            )
            if self.text_width is not None:
                width = max(width, math.ceil(self.text_width(title)) + pad * 2)

        drawing = Drawing(
            width=width,
            height=layout.height + pad * 2 + title_height,
            background=theme.background,
            font_family=theme.font_family,
            stroke_width=theme.stroke_width,
        )
        if title:
            drawing.add_text(
                pad,
                theme.header_top_padding + theme.font_size,
                title,
                theme.text,
                font_size=theme.font_size,
            )
        self.render_node(drawing, layout, pad, pad + title_height, layout.width)
        return drawing

    def render_node(
        self, drawing: Drawing, node: LayoutNode, x: float, y: float, width: float
    ) -> None:
        """Draw a node with its top-left corner at (x, y) and the given width."""
        if isinstance(node, StatementLayout):
            self._render_statement(drawing, node, x, y, width)
        elif isinstance(node, SequenceLayout):
            offset_y = y
            for child in node.children:
                self.render_node(drawing, child, x, offset_y, width)
                offset_y += child.height
        elif isinstance(node, LoopLayout):
            self._render_loop(drawing, node, x, y, width)
        elif isinstance(node, IfLayout):
            self._render_if(drawing, node, x, y, width)
        elif isinstance(node, SwitchLayout):
            self._render_switch(drawing, node, x, y, width)
        elif isinstance(node, TryLayout):
            self._render_try(drawing, node, x, y, width)

    # -- helpers -----------------------------------------------------------

    def _baseline(self, top: float, row_height: float) -> float:
        return top + row_height / 2 + TEXT_BASELINE_OFFSET / 2

    def _left_text(self, drawing, value, x, y, row_height, fill=None) -> None:
        drawing.add_text(
            x + TEXT_PADDING_X,
            self._baseline(y, row_height),
            value,
            fill or self.theme.text,
            font_size=self.theme.font_size,
        )

    def _centered_text(self, drawing, value, x, y, width, row_height) -> None:
        drawing.add_text(
            x + width / 2,
            self._baseline(y, row_height),
            value,
            self.theme.text,
            anchor="middle",
            font_size=self.theme.font_size,
        )

    def _padded_remainder(self, drawing, x, y, width, content_height, full_height) -> None:
        """Fill the space below a body that is shorter than its column."""
        if content_height >= full_height:
            return
        drawing.add_rect(
            x,
            y + content_height,
            width,
            full_height - content_height,
            self.theme.body,
            self.theme.border,
        )

    # -- node kinds --------------------------------------------------------

    def _render_statement(self, drawing, node: StatementLayout, x, y, width) -> None:
        drawing.add_rect(x, y, width, node.height, self.theme.body, self.theme.border)
        if is_no_else_placeholder(node.text):
            self._centered_text(drawing, node.text, x, y, width, node.height)
        else:
            self._left_text(drawing, node.text, x, y, node.height)

    def _render_loop(self, drawing, node: LoopLayout, x, y, width) -> None:
        theme = self.theme
        footer_height = HEADER_HEIGHT if node.footer is not None else 0
        body_height = node.height - HEADER_HEIGHT - footer_height
        body = stretch_last_statement_to_height(node.body, body_height)

        body_y = y + HEADER_HEIGHT
        footer_y = body_y + body_height
        inset = node.body_inset_width
        content_x = x + inset
        content_width = width - inset

        drawing.add_rect(x, y, width, node.height, theme.body, theme.border)
        if inset > 0:
            drawing.add_rect(x, y, width, HEADER_HEIGHT, theme.loop_header)
        else:
            drawing.add_rect(x, y, width, HEADER_HEIGHT, theme.condition, theme.border)
        self._left_text(drawing, node.header, x, y, HEADER_HEIGHT)

        if inset > 0:
            drawing.add_rect(x, body_y, width, body_height, theme.branch)
            drawing.add_rect(x, body_y, inset, body_height, theme.loop_header)
            drawing.add_line(content_x, body_y, x + width, body_y, theme.border)
            drawing.add_line(content_x, body_y, content_x, footer_y, theme.border)
            self.render_node(drawing, body, content_x, body_y, content_width)
            self._padded_remainder(
                drawing, content_x, body_y, content_width, body.height, body_height
            )
        else:
            self.render_node(drawing, body, x, body_y, width)
            self._padded_remainder(drawing, x, body_y, width, body.height, body_height)

        if node.footer is not None:
            drawing.add_rect(x, footer_y, width, HEADER_HEIGHT, theme.condition, theme.border)
            self._left_text(drawing, node.footer, x, footer_y, HEADER_HEIGHT)

    def _render_if(self, drawing, node: IfLayout, x, y, width) -> None:
        theme = self.theme
        then_branch = stretch_last_statement_to_height(node.then_branch, node.branch_height)
        else_branch = stretch_last_statement_to_height(node.else_branch, node.branch_height)

        branch_top = y + node.header_height
        left_width, right_width = fit_column_widths(
            [node.left_width, node.right_width], width
        )
        split_x = x + left_width

        drawing.add_rect(x, y, width, node.height, theme.body, theme.border)
        drawing.add_rect(x, y, width, node.header_height, theme.if_header, theme.border)
        drawing.add_line(x, y, split_x, branch_top, theme.border)
        drawing.add_line(x + width, y, split_x, branch_top, theme.border)
        drawing.add_line(split_x, branch_top, split_x, y + node.height, theme.border)
        drawing.add_line(x, branch_top, x + width, branch_top, theme.border)

        # Columns are sized for the bare condition; the "if ( )" wrapper is not
        # included, so very tight headers can let it touch the diagonals.
        drawing.add_text(
            split_x,
            y + theme.font_size + IF_CONDITION_TOP_PADDING,
            f"if ({node.condition})",
            theme.text,
            anchor="middle",
            font_size=theme.font_size,
        )
        drawing.add_text(
            x + TEXT_PADDING_X,
            branch_top - LABEL_TEXT_OFFSET_Y,
            "T",
            theme.muted_text,
            font_size=theme.font_size,
        )
        drawing.add_text(
            x + width - TEXT_PADDING_X,
            branch_top - LABEL_TEXT_OFFSET_Y,
            "F",
            theme.muted_text,
            anchor="end",
            font_size=theme.font_size,
        )

        drawing.add_rect(x, branch_top, left_width, node.branch_height, theme.branch, theme.border)
        drawing.add_rect(
            split_x, branch_top, right_width, node.branch_height, theme.branch, theme.border
        )

        self.render_node(drawing, then_branch, x, branch_top, left_width)
        self._padded_remainder(
            drawing, x, branch_top, left_width, then_branch.height, node.branch_height
        )
        self.render_node(drawing, else_branch, split_x, branch_top, right_width)
        self._padded_remainder(
            drawing, split_x, branch_top, right_width, else_branch.height, node.branch_height
        )

    def _render_switch(self, drawing, node: SwitchLayout, x, y, width) -> None:
        theme = self.theme
        header_height = node.selector_band_height + node.label_band_height
        header_bottom = y + header_height
        apex_y = y + node.selector_band_height
        case_widths = fit_column_widths([entry.width for entry in node.cases], width)

        column_starts = []
        cursor = x
        for case_width in case_widths:
            column_starts.append(cursor)
            cursor += case_width

        multiple = len(case_widths) >= 2
        apex_x = column_starts[-1] if multiple else x + width / 2
        diagonal_run = max(apex_x - x, 1)

        drawing.add_rect(x, y, width, node.height, theme.body, theme.border)
        drawing.add_rect(x, y, width, header_height, theme.switch_header, theme.border)
        drawing.add_line(x, y, apex_x, apex_y, theme.border)
        drawing.add_line(x + width, y, apex_x, apex_y, theme.border)
        drawing.add_line(apex_x, apex_y, apex_x, header_bottom, theme.border)
        if multiple:
            # Case dividers start where they meet the left diagonal
            for start_x in column_starts[1:-1]:
                diagonal_y = y + (start_x - x) * (apex_y - y) / diagonal_run
                drawing.add_line(start_x, diagonal_y, start_x, header_bottom, theme.border)

        drawing.add_text(
            apex_x,
            y + theme.font_size + SWITCH_CONDITION_TOP_PADDING,
            node.expression,
            theme.text,
            anchor="middle",
            font_size=theme.font_size,
        )

        for index, entry in enumerate(node.cases):
            column_x = column_starts[index]
            case_width = case_widths[index]
            body = stretch_loop_body_to_height(entry.body, node.branch_height)

            self._centered_text(
                drawing, entry.label, column_x, apex_y, case_width, node.label_band_height
            )
            drawing.add_rect(
                column_x, header_bottom, case_width, node.branch_height, theme.branch, theme.border
            )
            self.render_node(drawing, body, column_x, header_bottom, case_width)
            self._padded_remainder(
                drawing, column_x, header_bottom, case_width, body.height, node.branch_height
            )
            if index > 0:
                drawing.add_line(column_x, header_bottom, column_x, y + node.height, theme.border)

    def _render_try(self, drawing, node: TryLayout, x, y, width) -> None:
        theme = self.theme
        side_width = min(TRY_FRAME_SIDE_WIDTH, max(1, int(width // 3)))
        content_x = x + side_width
        content_width = max(1, width - side_width)

        def divider(divider_y):
            drawing.add_line(x, divider_y, content_x, divider_y, theme.try_wrapper)
            drawing.add_line(content_x, divider_y, x + width, divider_y, theme.border)

        def section_header(label, header_y, header_height, full_top_border=False):
            fill = theme.try_wrapper if full_top_border else theme.section
            drawing.add_rect(x, header_y, width, header_height, fill)
            if full_top_border:
                drawing.add_line(x, header_y, x + width, header_y, theme.border)
            else:
                divider(header_y)
            divider(header_y + header_height)
            self._left_text(drawing, label, x, header_y, header_height)

        def framed_body(body, body_y):
            drawing.add_rect(x, body_y, side_width, body.height, theme.try_wrapper)
            divider(body_y)
            divider(body_y + body.height)
            drawing.add_line(content_x, body_y, content_x, body_y + body.height, theme.border)
            self.render_node(drawing, body, content_x, body_y, content_width)

        drawing.add_rect(x, y, width, node.height, theme.body, theme.border)
        section_header(TRY_HEADER_LABEL, y, HEADER_HEIGHT, full_top_border=True)
        offset_y = y + HEADER_HEIGHT
        framed_body(node.body, offset_y)
        offset_y += node.body.height

        for entry in node.catches:
            section_header(catch_header(entry.exception), offset_y, SECTION_HEADER_HEIGHT)
            offset_y += SECTION_HEADER_HEIGHT
            framed_body(entry.body, offset_y)
            offset_y += entry.body.height

        if node.finally_branch is not None:
            section_header(FINALLY_HEADER_LABEL, offset_y, SECTION_HEADER_HEIGHT)
            offset_y += SECTION_HEADER_HEIGHT
            framed_body(node.finally_branch, offset_y)
