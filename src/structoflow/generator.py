"""
Main structogram generator module.

Combines parsing, layout, and rendering to produce Nassi-Shneiderman
diagrams as SVG, PNG or layout JSON.
"""

import logging
from typing import Any, Dict, Optional, Tuple, Union

from .export import ExportError, StructogramExporter
from .layout import StructogramLayout, TextWidth, estimate_text_width
from .models import ControlNode, LayoutNode, MethodInfo
from .parser import Parser
from .renderer import Drawing, StructogramRenderer
from .text import to_method_declaration
from .theme import StructogramTheme, resolve_theme
from .tracer import LayoutTrace

logger = logging.getLogger(__name__)

Source = Union[ControlNode, MethodInfo, str, bytes, Dict[str, Any]]


class StructogramGenerator:
    """
    Generate structograms from control-flow trees.

    A source can be a control-flow tree, a MethodInfo (drawn with its
    declaration as title), or an analyzer JSON payload.

    Example:
        >>> generator = StructogramGenerator()
        >>> svg = generator.generate_svg('''
        ...     {"kind": "sequence", "children": [
        ...         {"kind": "statement", "text": "int total = 0;"}
        ...     ]}
        ... ''')
    """

    def __init__(
        self,
        theme: Optional[StructogramTheme] = None,
        text_width: Optional[TextWidth] = None,
        colored: bool = True,
        dark_mode: bool = False,
        debug: bool = False,
        font_path: Optional[str] = None,
    ):
        """
        Initialize the structogram generator.

        Args:
            theme: Explicit theme. When None, one is resolved from colored
                and dark_mode.
            text_width: Text width estimator, (str) -> pixels. Defaults to
                a fixed width per character.
            colored: Whether to use colored headers.
            dark_mode: Whether to draw on a dark background.
            debug: Record a LayoutTrace for every call (see get_trace).
            font_path: TrueType font file for PNG export.
        """
        self.theme = theme or resolve_theme(colored=colored, dark_mode=dark_mode)
        self.text_width = text_width or estimate_text_width
        self.debug = debug

        self.parser = Parser()
        self.renderer = StructogramRenderer(self.theme, text_width=self.text_width)
        self.exporter = StructogramExporter(font_path=font_path)

        self._cache: Optional[Tuple[ControlNode, Optional[LayoutNode]]] = None
        self._trace: Optional[LayoutTrace] = None

    def get_trace(self) -> Optional[LayoutTrace]:
        """Trace of the last call when debug is enabled, else None."""
        return self._trace

    def layout(self, source: Source) -> Optional[LayoutNode]:
        """
        Compute the layout tree for a source.

        The result for the most recent tree is memoized by identity, so
        laying out and then rendering the same tree computes it once.

        Returns:
            The layout tree, or None when there is nothing to draw.
        """
        self._trace = LayoutTrace() if self.debug else None
        tree, _ = self._resolve(source)
        return self._layout(tree)

    def render(self, source: Source, title: Optional[str] = None) -> Optional[Drawing]:
        """
        Lay out and draw a source.

        Args:
            source: Control tree, method, or analyzer JSON payload.
            title: Line drawn above the diagram. Defaults to the method
                declaration when the source describes a method.

        Returns:
            The Drawing, or None when there is nothing to draw.
        """
        return self._build(source, title)[1]

    def _build(
        self, source: Source, title: Optional[str]
    ) -> Tuple[Optional[LayoutNode], Optional[Drawing]]:
        self._trace = LayoutTrace() if self.debug else None
        tree, method = self._resolve(source)
        layout = self._layout(tree)
        if layout is None:
            return None, None

        if title is None and method is not None:
            title = to_method_declaration(method)
        drawing = self.renderer.render(layout, title=title)

        if self._trace is not None:
            self._trace.add_stage(
                "render",
                {
                    "width": drawing.width,
                    "height": drawing.height,
                    "elements": len(drawing.elements),
                    "title": title or "",
                },
            )
        return layout, drawing

    def generate_svg(self, source: Source, title: Optional[str] = None) -> str:
        """
        Generate an SVG document for a source.

        Raises:
            ExportError: If the source renders to nothing.
        """
        return self._require_drawing(source, title).to_svg()

    def save(
        self,
        source: Source,
        filename: str,
        fmt: Optional[str] = None,
        title: Optional[str] = None,
        **kwargs,
    ) -> None:
        """
        Generate a structogram and save it.

        Args:
            source: Control tree, method, or analyzer JSON payload.
            filename: Output filename.
            fmt: "svg", "png" or "json". Inferred from filename if None.
            title: Optional title line (svg and png only).
            **kwargs: Extra PNG options (scale, padding, font_path).

        Raises:
            ExportError: If the format is unknown or there is nothing to draw.
        """
        layout, drawing = self._build(source, title)
        if drawing is None:
            raise ExportError("Nothing to draw: the control tree is empty")
        self.exporter.save(drawing, layout, filename, fmt, **kwargs)

    def save_svg(self, source: Source, filename: str, title: Optional[str] = None) -> None:
        """Generate a structogram and save it as SVG."""
        self.exporter.save_svg(self._require_drawing(source, title), filename)

    def save_png(
        self,
        source: Source,
        filename: str,
        title: Optional[str] = None,
        **kwargs,
    ) -> None:
        """
        Generate a structogram and save it as a high-resolution PNG image.

        Args:
            source: Control tree, method, or analyzer JSON payload.
            filename: Output filename (should end in .png).
            title: Optional title line.
            **kwargs: scale, padding and font_path for the PNG renderer.
        """
        self.exporter.save_png(self._require_drawing(source, title), filename, **kwargs)

    def save_json(self, source: Source, filename: str) -> None:
        """Save the layout tree of a source as JSON."""
        self.exporter.save_json(self.layout(source), filename)

    def _resolve(self, source: Source) -> Tuple[Optional[ControlNode], Optional[MethodInfo]]:
        if isinstance(source, (str, bytes, dict)):
            result = self.parser.load(source)
            if self._trace is not None:
                self._trace.add_stage(
                    "parse",
                    {
                        "root_kind": result.tree.kind if result.tree is not None else "",
                        "method": (result.method.name or "") if result.method else "",
                    },
                )
            return result.tree, result.method
        if isinstance(source, MethodInfo):
            return source.control_tree, source
        return source, None

    def _layout(self, tree: Optional[ControlNode]) -> Optional[LayoutNode]:
        if tree is None:
            return None

        if self._trace is None and self._cache is not None and self._cache[0] is tree:
            logger.debug("Reusing cached layout")
            return self._cache[1]

        engine = StructogramLayout(text_width=self.text_width, trace=self._trace)
        layout = engine.layout(tree)
        self._cache = (tree, layout)

        if self._trace is not None:
            self._trace.add_stage(
                "layout",
                {
                    "root_kind": tree.kind,
                    "width": layout.width if layout else 0,
                    "height": layout.height if layout else 0,
                    "decisions": len(self._trace.decisions),
                },
            )
        return layout

    def _require_drawing(self, source: Source, title: Optional[str]) -> Drawing:
        drawing = self.render(source, title=title)
        if drawing is None:
            raise ExportError("Nothing to draw: the control tree is empty")
        return drawing
