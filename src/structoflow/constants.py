"""
Layout metrics for structogram generation.

All sizes are in pixels. These values drive the sizing decisions of the
layout engine; colors and render-only paddings live in the theme instead.
"""

FONT_SIZE = 12  # Base text size for labels and statements
CHAR_WIDTH = 7  # Width estimate per character
ROW_HEIGHT = 30  # Height of a simple statement row
HEADER_HEIGHT = 30  # Header row for loop and try blocks
SECTION_HEADER_HEIGHT = 24  # Switch label band and catch/finally headers
TEXT_PADDING_X = 10
TEXT_BASELINE_OFFSET = 8
LABEL_TEXT_OFFSET_Y = 6  # Vertical offset of the T/F corner labels

MIN_CONTENT_WIDTH = max(64, TEXT_PADDING_X * 2 + CHAR_WIDTH * 4)

# Placeholder labels
EMPTY_BODY_LABEL = "(empty)"
EMPTY_ELSE_LABEL = "∅"
LEGACY_EMPTY_ELSE_LABEL = "(no else)"
ASSIGNMENT_SYMBOL = "←"

# Fallback labels for missing text
DEFAULT_CONDITION_LABEL = "condition"
DEFAULT_SELECTOR_LABEL = "selector"
DEFAULT_CATCH_LABEL = "catch"
DEFAULT_CASE_LABEL = "default"

# Loops
LOOP_BODY_INSET_WIDTH = 28
DO_WHILE_KIND = "doWhile"

# Try/catch/finally
TRY_FRAME_SIDE_WIDTH = 28
TRY_HEADER_LABEL = "try"
FINALLY_HEADER_LABEL = "finally"

# If header geometry
IF_HEADER_BASE_HEIGHT = HEADER_HEIGHT + 10
IF_HEADER_MAX_HEIGHT = ROW_HEIGHT * 2
IF_CONDITION_TOP_PADDING = 5
IF_CONDITION_SIDE_CLEARANCE = 10
IF_CONDITION_LINE_CLEARANCE = 4

# Switch header geometry
SWITCH_SELECTOR_BASE_HEIGHT = HEADER_HEIGHT
SWITCH_SELECTOR_MAX_HEIGHT = ROW_HEIGHT * 2
SWITCH_CONDITION_TOP_PADDING = 5
SWITCH_CONDITION_SIDE_CLEARANCE = 10
SWITCH_CONDITION_LINE_CLEARANCE = 4

# Statements that end the flow of a switch case
TERMINATOR_KEYWORDS = ("break", "return", "throw", "continue", "yield")

# Raster export
EXPORT_SCALE = 2
EXPORT_PADDING = 8
