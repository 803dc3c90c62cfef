"""
PNG Renderer module for structogram generation.

Rasterizes a Drawing as a high-resolution PNG image with Pillow.
"""

import logging
import os
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .constants import EXPORT_PADDING, EXPORT_SCALE
from .renderer import Drawing, Line, Rect, Text

logger = logging.getLogger(__name__)

FONT_OPTIONS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/usr/share/fonts/truetype/ubuntu/Ubuntu-R.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "C:/Windows/Fonts/arial.ttf",
    "DejaVuSans.ttf",
]


class PNGRenderer:
    """Renders structogram drawings as PNG images."""

    def __init__(
        self,
        scale: int = EXPORT_SCALE,
        padding: int = EXPORT_PADDING,
        font_path: Optional[str] = None,
    ):
        """
        Initialize the PNG renderer.

        Args:
            scale: Resolution multiplier (2 gives crisp output on retina
                displays).
            padding: Extra space around the drawing, before scaling.
            font_path: Optional TrueType font file to use for all text.
        """
        self.scale = max(1, scale)
        self.padding = padding
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.ImageFont] = {}

    def _get_font(self, font_size: int):
        """Get a font for rendering text at the given (unscaled) size."""
        size = font_size * self.scale
        if size in self._fonts:
            return self._fonts[size]

        if self.font_path:
            if os.path.exists(self.font_path):
                try:
                    self._fonts[size] = ImageFont.truetype(self.font_path, size)
                    return self._fonts[size]
                except OSError:
                    logger.warning("Could not load font %s", self.font_path)
            else:
                logger.warning("Font path %s does not exist", self.font_path)

        for path in FONT_OPTIONS:
            try:
                self._fonts[size] = ImageFont.truetype(path, size)
                return self._fonts[size]
            except OSError:
                continue

        try:
            font = ImageFont.load_default(size=size)
        except TypeError:
            # Older Pillow versions don't support the size parameter
            font = ImageFont.load_default()
        self._fonts[size] = font
        return font

    def _point(self, x: float, y: float) -> Tuple[float, float]:
        offset = self.padding * self.scale
        return x * self.scale + offset, y * self.scale + offset

    def to_image(self, drawing: Drawing) -> Image.Image:
        """Rasterize a drawing into an RGB image."""
        width = (drawing.width + self.padding * 2) * self.scale
        height = (drawing.height + self.padding * 2) * self.scale
        img = Image.new("RGB", (width, height), drawing.background)
        draw = ImageDraw.Draw(img)
        line_width = max(1, drawing.stroke_width * self.scale)

        for element in drawing.elements:
            if isinstance(element, Rect):
                x0, y0 = self._point(element.x, element.y)
                x1, y1 = self._point(element.x + element.width, element.y + element.height)
                if x1 <= x0 or y1 <= y0:
                    continue
                draw.rectangle(
                    [x0, y0, x1, y1],
                    fill=element.fill,
                    outline=element.stroke,
                    width=line_width if element.stroke else 0,
                )
            elif isinstance(element, Line):
                draw.line(
                    [self._point(element.x1, element.y1), self._point(element.x2, element.y2)],
                    fill=element.stroke,
                    width=line_width,
                )
            elif isinstance(element, Text):
                self._draw_text(draw, element)

        return img

    def _draw_text(self, draw: ImageDraw.ImageDraw, element: Text) -> None:
        """Draw text anchored at its baseline, like SVG text."""
        font = self._get_font(element.font_size)
        x, y = self._point(element.x, element.y)

        text_width = draw.textlength(element.value, font=font)
        if element.anchor == "middle":
            x -= text_width / 2
        elif element.anchor == "end":
            x -= text_width

        if hasattr(font, "getmetrics"):
            ascent = font.getmetrics()[0]
        else:
            ascent = element.font_size * self.scale
        draw.text((x, y - ascent), element.value, fill=element.fill, font=font)

    def render(self, drawing: Drawing, output_path: str = "structogram.png") -> str:
        """
        Render the drawing as a PNG file.

        Args:
            drawing: Drawing produced by StructogramRenderer
            output_path: Path to save the PNG file

        Returns:
            Path to the saved PNG file
        """
        img = self.to_image(drawing)
        img.save(output_path, "PNG", dpi=(72 * self.scale, 72 * self.scale))
        return output_path


def render_to_png(drawing: Drawing, output_path: str = "structogram.png", **kwargs) -> str:
    """
    Convenience function to render a drawing to PNG.

    Args:
        drawing: Drawing to rasterize
        output_path: Path to save the PNG file
        **kwargs: Additional parameters for PNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = PNGRenderer(**kwargs)
    return renderer.render(drawing, output_path)
