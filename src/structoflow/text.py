"""
Text normalization for structogram labels and statements.

Statement text arrives exactly as the analyzer printed it: with comments,
line breaks, trailing semicolons and Java-style assignments. This module
cleans it up for display and applies the structogram conventions, most
notably the assignment arrow ("total = 0" is shown as "total ← 0").

The rewrites are syntactic heuristics over the cleaned text, not an
analysis of the program. Text such as "a == b" or an assignment inside a
lambda can be misread; callers get the heuristic result unchanged.
"""

import re
from typing import Optional

from .constants import ASSIGNMENT_SYMBOL, TERMINATOR_KEYWORDS
from .models import MethodInfo

BLOCK_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)
LINE_COMMENT_PATTERN = re.compile(r"//.*$", re.MULTILINE)
WHITESPACE_PATTERN = re.compile(r"\s+")
TRAILING_SEMICOLONS_PATTERN = re.compile(r";+$")

# [modifiers] type name = expr
DECLARATION_ASSIGNMENT_PATTERN = re.compile(
    r"^(?:(?:final|volatile|transient|static)\s+)*(?:[^\s=]+\s+)+"
    r"([A-Za-z_$][\w$]*)\s*=\s*(.+)$"
)

# target = expr, where target may use member or array access
PLAIN_ASSIGNMENT_PATTERN = re.compile(
    r"^([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*|\[[^\]]+\])*)\s*=\s*(.+)$"
)

PARAMS_PATTERN = re.compile(r"\((.*)\)")

VISIBILITY_NAMES = {
    "+": "public",
    "public": "public",
    "-": "private",
    "private": "private",
    "#": "protected",
    "protected": "protected",
}


def strip_comments(value: str) -> str:
    """Replace block and line comments with a single space."""
    value = BLOCK_COMMENT_PATTERN.sub(" ", value)
    return LINE_COMMENT_PATTERN.sub(" ", value)


def collapse_whitespace(value: Optional[str]) -> str:
    """Strip comments, collapse internal whitespace and trim."""
    return WHITESPACE_PATTERN.sub(" ", strip_comments(value or "")).strip()


def normalize_label(value: Optional[str], fallback: str) -> str:
    """
    Clean a condition, selector or section label.

    Args:
        value: Raw label text, possibly None.
        fallback: Label to use when nothing is left after cleaning.

    Returns:
        The cleaned label, or the fallback.
    """
    normalized = collapse_whitespace(value)
    return normalized if normalized else fallback


def normalize_statement_text(value: Optional[str]) -> Optional[str]:
    """
    Clean a statement for display.

    Collapses whitespace, strips trailing semicolons and rewrites
    assignments with the assignment arrow. Declarations with an
    initializer drop their type and modifiers.

    Examples:
        >>> normalize_statement_text("int total = 0;")
        'total ← 0'
        >>> normalize_statement_text("x = x + 1;")
        'x ← x + 1'
        >>> normalize_statement_text("   ") is None
        True

    Returns:
        The display text, or None when the statement is empty.
    """
    cleaned = TRAILING_SEMICOLONS_PATTERN.sub("", collapse_whitespace(value)).strip()
    if not cleaned:
        return None

    match = DECLARATION_ASSIGNMENT_PATTERN.match(cleaned)
    if match:
        name, expression = match.groups()
        return f"{name} {ASSIGNMENT_SYMBOL} {expression.strip()}"

    match = PLAIN_ASSIGNMENT_PATTERN.match(cleaned)
    if match:
        target, expression = match.groups()
        return f"{target} {ASSIGNMENT_SYMBOL} {expression.strip()}"

    return cleaned


def first_keyword(text: Optional[str]) -> str:
    """Return the lower-cased first token of a statement, or ""."""
    if not text:
        return ""
    parts = text.split(None, 1)
    return parts[0].lower() if parts else ""


def is_terminating_statement(text: Optional[str]) -> bool:
    """
    Whether a normalized statement ends the flow of its block.

    The check only looks at the first keyword (break, return, throw,
    continue or yield).
    """
    return first_keyword(text) in TERMINATOR_KEYWORDS


def normalize_visibility(visibility: Optional[str]) -> str:
    """Map UML symbols and Java keywords to a Java visibility keyword."""
    if not visibility:
        return ""
    return VISIBILITY_NAMES.get(visibility.strip(), "")


def method_name_from_signature(signature: str) -> str:
    """Take the last token before the opening parenthesis."""
    name_part = signature.split("(")[0]
    pieces = name_part.split()
    return pieces[-1] if pieces else signature


def params_from_signature(signature: str) -> str:
    """Take the text between the outermost parentheses."""
    match = PARAMS_PATTERN.search(signature)
    return match.group(1).strip() if match else ""


def to_method_declaration(method: MethodInfo) -> str:
    """
    Build a Java-style declaration line for a method.

    Uses the structured fields where present and falls back to the raw
    signature for the name and parameters.

    Example:
        >>> to_method_declaration(MethodInfo(name="add", visibility="+",
        ...     return_type="int", params=(Param("a", "int"),)))
        'public int add(int a)'
    """
    visibility = normalize_visibility(method.visibility)
    static_token = "static" if method.is_static else ""
    return_type = (method.return_type or "").strip() or "void"
    signature = method.signature or ""
    method_name = (method.name or "").strip() or method_name_from_signature(signature)

    if method.params:
        rendered = []
        for index, param in enumerate(method.params):
            param_type = (param.type or "").strip()
            param_name = (param.name or "").strip()
            if param_type and param_name:
                rendered.append(f"{param_type} {param_name}")
            elif param_type:
                rendered.append(param_type)
            elif param_name:
                rendered.append(param_name)
            else:
                rendered.append(f"arg{index}")
        params = ", ".join(rendered)
    else:
        params = params_from_signature(signature)

    prefix = " ".join(
        token for token in (visibility, static_token, return_type) if token
    )
    return f"{prefix} {method_name}({params})".strip()
