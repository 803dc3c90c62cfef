"""
StructoFlow - Nassi-Shneiderman structograms from control-flow trees

A Python library for laying out and drawing structograms of method bodies.

Example:
    >>> from structoflow import StructogramGenerator
    >>> generator = StructogramGenerator()
    >>> generator.save(tree, "method.svg")

Debug Mode Example:
    >>> generator = StructogramGenerator(debug=True)
    >>> layout = generator.layout(tree)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
"""

from .columns import fit_column_widths
from .debug import check_layout_invariants, describe_layout, layout_diff, walk_layout
from .export import ExportError, StructogramExporter, layout_to_dict
from .generator import StructogramGenerator
from .layout import (
    StructogramLayout,
    build_structogram_layout,
    estimate_text_width,
    merge_switch_cases,
    pillow_text_width,
    propagate_fallthrough,
)
from .models import (
    CatchClause,
    CatchLayout,
    IfLayout,
    IfNode,
    LoopLayout,
    LoopNode,
    MethodInfo,
    Param,
    SequenceLayout,
    SequenceNode,
    StatementLayout,
    StatementNode,
    SwitchCase,
    SwitchCaseLayout,
    SwitchLayout,
    SwitchNode,
    TryLayout,
    TryNode,
    UnknownNode,
)
from .parser import ParseError, Parser, parse_control_tree, parse_method
from .png_renderer import PNGRenderer
from .renderer import Drawing, StructogramRenderer
from .text import is_terminating_statement, normalize_statement_text, to_method_declaration
from .theme import StructogramTheme, resolve_theme
from .tracer import LayoutDecision, LayoutTrace, PipelineStage

__version__ = "0.1.0"

__all__ = [
    # Main API
    "StructogramGenerator",
    # Parser
    "Parser",
    "ParseError",
    "parse_control_tree",
    "parse_method",
    # Control-flow tree
    "StatementNode",
    "SequenceNode",
    "IfNode",
    "LoopNode",
    "SwitchNode",
    "SwitchCase",
    "TryNode",
    "CatchClause",
    "UnknownNode",
    "MethodInfo",
    "Param",
    # Layout
    "StructogramLayout",
    "build_structogram_layout",
    "estimate_text_width",
    "pillow_text_width",
    "merge_switch_cases",
    "propagate_fallthrough",
    "fit_column_widths",
    "StatementLayout",
    "SequenceLayout",
    "IfLayout",
    "LoopLayout",
    "SwitchLayout",
    "SwitchCaseLayout",
    "TryLayout",
    "CatchLayout",
    # Text
    "normalize_statement_text",
    "is_terminating_statement",
    "to_method_declaration",
    # Rendering and export
    "StructogramRenderer",
    "Drawing",
    "PNGRenderer",
    "StructogramTheme",
    "resolve_theme",
    "StructogramExporter",
    "ExportError",
    "layout_to_dict",
    # Debug/Tracing (for development and debugging)
    "LayoutTrace",
    "LayoutDecision",
    "PipelineStage",
    "check_layout_invariants",
    "describe_layout",
    "layout_diff",
    "walk_layout",
]
