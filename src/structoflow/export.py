"""
File export functionality for structograms.

This module handles exporting generated structograms to various file formats:
- SVG files (.svg) - Scalable vector drawing
- PNG images - High-resolution rasterized output
- JSON files (.json) - The layout tree with all computed dimensions

The StructogramExporter class provides methods for saving drawings and
layout trees and handles format detection and file I/O.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import EXPORT_PADDING, EXPORT_SCALE
from .models import LayoutNode
from .png_renderer import PNGRenderer
from .renderer import Drawing

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("svg", "png", "json")


class ExportError(Exception):
    """Raised when a structogram cannot be exported."""

    pass


def layout_to_dict(node: Any) -> Any:
    """
    Convert a layout tree into plain JSON-compatible data.

    Every layout node gets its ``kind`` tag as the first key, followed by
    its fields in declaration order.
    """
    if isinstance(node, tuple):
        return [layout_to_dict(item) for item in node]
    if not hasattr(node, "__dataclass_fields__"):
        return node

    result: Dict[str, Any] = {}
    kind = getattr(type(node), "kind", None)
    if kind is not None:
        result["kind"] = kind
    for field in fields(node):
        result[field.name] = layout_to_dict(getattr(node, field.name))
    return result


def detect_format(filename: str) -> str:
    """
    Infer the export format from a filename extension.

    Raises:
        ExportError: If the extension is not a supported format.
    """
    suffix = Path(filename).suffix.lower().lstrip(".")
    if suffix not in EXPORT_FORMATS:
        raise ExportError(
            f"Cannot infer export format from '{filename}'; "
            f"expected one of {', '.join(EXPORT_FORMATS)}"
        )
    return suffix


class StructogramExporter:
    """
    Exports structograms to various file formats.

    Attributes:
        font_path: Optional TrueType font file for PNG export.
    """

    def __init__(self, font_path: Optional[str] = None):
        """
        Initialize the structogram exporter.

        Args:
            font_path: TrueType font file for PNG export. System fonts are
                tried when not given.
        """
        self.font_path = font_path

    def save_svg(self, drawing: Drawing, filename: str) -> None:
        """
        Save a drawing as an SVG document.

        Args:
            drawing: The drawing to save.
            filename: Output filename (should end in .svg).
        """
        output_path = Path(filename)
        output_path.write_text(drawing.to_svg(), encoding="utf-8")
        logger.debug("Wrote SVG %s", output_path)

    def save_png(
        self,
        drawing: Drawing,
        filename: str,
        scale: int = EXPORT_SCALE,
        padding: int = EXPORT_PADDING,
        font_path: Optional[str] = None,
    ) -> None:
        """
        Save a drawing as a high-resolution PNG image.

        Args:
            drawing: The drawing to rasterize.
            filename: Output filename (should end in .png).
            scale: Resolution multiplier for crisp output (default 2 for retina).
            padding: Padding around the diagram, before scaling.
            font_path: Font file to use (overrides the exporter's font_path).

        Example:
            >>> exporter = StructogramExporter()
            >>> exporter.save_png(drawing, "output.png", scale=3)
        """
        renderer = PNGRenderer(
            scale=scale, padding=padding, font_path=font_path or self.font_path
        )
        renderer.render(drawing, str(filename))
        logger.debug("Wrote PNG %s at scale %d", filename, scale)

    def save_json(self, layout: Optional[LayoutNode], filename: str) -> None:
        """
        Save a layout tree as JSON.

        Args:
            layout: Root of the layout tree, or None for an empty diagram.
            filename: Output filename (should end in .json).
        """
        output_path = Path(filename)
        output_path.write_text(
            json.dumps(layout_to_dict(layout), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.debug("Wrote layout JSON %s", output_path)

    def save(
        self,
        drawing: Drawing,
        layout: Optional[LayoutNode],
        filename: str,
        fmt: Optional[str] = None,
        **kwargs,
    ) -> None:
        """
        Save in the given format, or the one implied by the filename.

        Args:
            drawing: The rendered drawing (used for svg and png).
            layout: The layout tree (used for json).
            filename: Output filename.
            fmt: "svg", "png" or "json". Inferred from filename if None.
            **kwargs: Extra options for save_png.

        Raises:
            ExportError: If the format is unknown.
        """
        fmt = (fmt or detect_format(filename)).lower()
        if fmt == "svg":
            self.save_svg(drawing, filename)
        elif fmt == "png":
            self.save_png(drawing, filename, **kwargs)
        elif fmt == "json":
            self.save_json(layout, filename)
        else:
            raise ExportError(
                f"Unknown export format '{fmt}'; expected one of {', '.join(EXPORT_FORMATS)}"
            )
