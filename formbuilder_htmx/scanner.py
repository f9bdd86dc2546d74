"""
Markup Scanner - boundary detection over the form engine's markup contract

Not an HTML parser. Only <div> nesting and the handful of literal markers the
form engine and the decorator emit are recognized.
"""
import re
from typing import Optional

from .errors import MalformedMarkupError

WRAPPER_ATTRIBUTE = "data-formbuilder-htmx"
SENTINEL_ATTRIBUTE = "data-formbuilder-htmx-end"
FORM_TERMINATOR = "<!--/FormBuilder-->"
FORM_CLOSE = "</form>"
SUBMITTED_ID = "FormBuilderSubmitted"

DIV_TOKEN_RE = re.compile(r"<(/?)div\b[^>]*>", re.IGNORECASE)
DIV_CLOSE_RE = re.compile(r"\s*</div\s*>", re.IGNORECASE)
SUBMITTED_RE = re.compile(r"""<div\b[^>]*\bid=["']FormBuilderSubmitted["']""", re.IGNORECASE)


def wrapper_start_re(correlation_id: Optional[str] = None) -> "re.Pattern[str]":
    """Start tag of a decoration wrapper, optionally for one correlation ID"""
    id_pattern = re.escape(correlation_id) if correlation_id else r"[^'\"]+"
    return re.compile(
        rf"""<div\s+id=["']({id_pattern})["']\s+{WRAPPER_ATTRIBUTE}\s*>""",
        re.IGNORECASE,
    )


def sentinel_re(correlation_id: str) -> "re.Pattern[str]":
    return re.compile(
        rf"""\s*<div\s+{SENTINEL_ATTRIBUTE}=["']{re.escape(correlation_id)}["'][^>]*>\s*</div\s*>""",
        re.IGNORECASE,
    )


def engine_block_start_re(form_name: str) -> "re.Pattern[str]":
    """Start tag of the form engine's own block for a form, or its post-submission block"""
    name = re.escape(form_name)
    return re.compile(
        rf"""<div\b[^>]*(?:\bclass=["']FormBuilder\s+FormBuilder-{name}(?=["'\s])[^"']*["']"""
        rf"""|\bid=["']FormBuilderSubmitted["']\s+data-name=["']{name}["'])[^>]*>""",
        re.IGNORECASE,
    )


def block_end(html: str, start: int) -> int:
    """
    Index just past the </div> matching the <div> opening at start

    Tracks nesting depth instead of matching non-greedily, so nested and
    duplicate blocks can't truncate each other.
    """
    depth = 0
    for match in DIV_TOKEN_RE.finditer(html, start):
        depth += -1 if match.group(1) else 1
        if depth == 0:
            return match.end()

    raise MalformedMarkupError("Unclosed <div> block", start)


def close_open_divs(html: str, start: int, end: int) -> int:
    """Extends html[start:end] over the </div> closers directly following it, as many as it owes"""
    owed = 0
    for match in DIV_TOKEN_RE.finditer(html, start, end):
        owed += -1 if match.group(1) else 1

    while owed > 0:
        match = DIV_CLOSE_RE.match(html, end)
        if not match:
            break
        end = match.end()
        owed -= 1

    return end


def nearest_boundary(html: str, start: int, correlation_id: Optional[str] = None) -> Optional[int]:
    """Index just past the nearest end marker after start, for unbalanced markup"""
    ends = []

    terminator = html.find(FORM_TERMINATOR, start)
    if terminator != -1:
        ends.append(terminator + len(FORM_TERMINATOR))

    if correlation_id:
        sentinel = sentinel_re(correlation_id).search(html, start)
        if sentinel:
            ends.append(sentinel.end())

    return min(ends) if ends else None


def sentinel_end(html: str, pos: int, correlation_id: str) -> Optional[int]:
    """End of the sentinel for correlation_id when it directly follows pos"""
    match = sentinel_re(correlation_id).match(html, pos)
    return match.end() if match else None


def has_end_marker(fragment: str) -> bool:
    return (
        FORM_TERMINATOR in fragment
        or FORM_CLOSE in fragment.lower()
        or SUBMITTED_RE.search(fragment) is not None
    )
