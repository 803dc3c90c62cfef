"""
Visual themes for structogram rendering.

A theme is a plain value passed to the renderer. Nothing here influences
box sizes; the layout engine only uses the metrics in constants.py. Two
renderers with different themes can therefore draw the same layout tree
side by side.

Classes:
    StructogramTheme: Colors and render paddings.

Functions:
    normalize_hex_color: Canonical lower-case #rrggbb form.
    resolve_theme: Build a theme from user-facing settings.
"""

import re
from dataclasses import dataclass, replace
from typing import Dict, Optional

from .constants import FONT_SIZE

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-f]{6}$")
SHORT_HEX_COLOR_PATTERN = re.compile(r"^#([0-9a-f]{3})$")

# Header colors users may customize
HEADER_COLOR_FIELDS = ("loop_header", "if_header", "switch_header", "try_wrapper")

LIGHT_HEADER_DEFAULTS = {
    "loop_header": "#d2ebd3",
    "if_header": "#cec1eb",
    "switch_header": "#d6e1ee",
    "try_wrapper": "#f3e2c2",
}

DARK_HEADER_DEFAULTS = {
    "loop_header": "#2f5a44",
    "if_header": "#4a3f6b",
    "switch_header": "#2f4f6b",
    "try_wrapper": "#5b4a32",
}


def normalize_hex_color(value: str) -> str:
    """
    Normalize a hex color to lower-case #rrggbb.

    Short forms (#abc) are expanded; anything that is not a hex color is
    returned trimmed and lower-cased.
    """
    normalized = value.strip().lower()
    if HEX_COLOR_PATTERN.match(normalized):
        return normalized
    match = SHORT_HEX_COLOR_PATTERN.match(normalized)
    if not match:
        return normalized
    r, g, b = match.group(1)
    return f"#{r}{r}{g}{g}{b}{b}"


@dataclass(frozen=True)
class StructogramTheme:
    """
    Colors and paddings used when drawing a structogram.

    Attributes:
        border: Stroke color of box outlines and diagonals.
        text: Statement and label text color.
        muted_text: Color of the T/F corner labels.
        body: Fill of statement boxes.
        loop_header: Fill of pre-test loop headers and wrap bands.
        if_header: Fill of if headers.
        switch_header: Fill of switch headers.
        try_wrapper: Fill of the try frame and the try header row.
        condition: Fill of do-while header and footer rows.
        branch: Background of branch columns.
        section: Fill of the catch and finally header rows.
        background: Canvas background.
        font_size: Text size in pixels.
        font_family: SVG font family.
        canvas_padding: Space around the diagram.
        header_top_padding: Space above the title line.
        header_bottom_padding: Space between title and diagram.
        stroke_width: Outline width in pixels.
    """

    border: str = "#474747"
    text: str = "#0a0a0a"
    muted_text: str = "#737373"
    body: str = "#ffffff"
    loop_header: str = LIGHT_HEADER_DEFAULTS["loop_header"]
    if_header: str = LIGHT_HEADER_DEFAULTS["if_header"]
    switch_header: str = LIGHT_HEADER_DEFAULTS["switch_header"]
    try_wrapper: str = LIGHT_HEADER_DEFAULTS["try_wrapper"]
    condition: str = "#e6ecf7"
    branch: str = "#f8f8f8"
    section: str = "#f0f0f0"
    background: str = "#ffffff"
    font_size: int = FONT_SIZE
    font_family: str = "sans-serif"
    canvas_padding: int = 12
    header_top_padding: int = 10
    header_bottom_padding: int = 10
    stroke_width: int = 1

    @classmethod
    def light(cls) -> "StructogramTheme":
        """Colored theme on a light background."""
        return cls()

    @classmethod
    def dark(cls) -> "StructogramTheme":
        """Colored theme on a dark background."""
        return cls(
            border="#c7c7c7",
            text="#fafafa",
            muted_text="#a3a3a3",
            body="#0a0a0a",
            condition="#26303f",
            branch="#171717",
            section="#262626",
            background="#0a0a0a",
            **DARK_HEADER_DEFAULTS,
        )

    @classmethod
    def monochrome(cls, dark: bool = False) -> "StructogramTheme":
        """Flat theme where every fill is the body color."""
        base = cls.dark() if dark else cls.light()
        flat = {
            name: base.body
            for name in HEADER_COLOR_FIELDS + ("condition", "branch", "section")
        }
        return replace(base, **flat)


def resolve_header_color(
    configured: str, light_default: str, dark_default: str, dark_mode: bool
) -> str:
    """
    Pick the header color to use for a configured color.

    In dark mode a color that is still the light default is swapped for
    the dark default; customized colors are kept as configured.
    """
    if not dark_mode:
        return configured
    if normalize_hex_color(configured) == normalize_hex_color(light_default):
        return dark_default
    return configured


def resolve_theme(
    colored: bool = True,
    dark_mode: bool = False,
    header_colors: Optional[Dict[str, str]] = None,
) -> StructogramTheme:
    """
    Build a theme from user-facing settings.

    Args:
        colored: False for the flat monochrome palette.
        dark_mode: Whether to draw on a dark background.
        header_colors: Optional overrides keyed by "loop_header",
            "if_header", "switch_header" or "try_wrapper". Ignored when
            colored is False. Unknown keys are ignored.

    Returns:
        The resolved StructogramTheme.
    """
    if not colored:
        return StructogramTheme.monochrome(dark=dark_mode)

    theme = StructogramTheme.dark() if dark_mode else StructogramTheme.light()
    if not header_colors:
        return theme

    resolved = {}
    for name in HEADER_COLOR_FIELDS:
        configured = header_colors.get(name)
        if configured:
            resolved[name] = resolve_header_color(
                configured,
                LIGHT_HEADER_DEFAULTS[name],
                DARK_HEADER_DEFAULTS[name],
                dark_mode,
            )
    return replace(theme, **resolved)
