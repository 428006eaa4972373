"""Single-pass placeholder transformer for trace SQL.

The transformer walks SQL text once, skipping string literals, quoted and
bracketed identifiers, comments and ``@@`` system variables wholesale, and hands
every ``@name`` placeholder to a traversal. Only two traversals exist:

- :class:`CollectTraversal` records which placeholders the SQL uses.
- :class:`ReplaceTraversal` substitutes placeholders with parsed literals.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Generator, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Final, Optional

from mypy_extensions import mypyc_attr

from sqltrace.core.scanner import (
    IDENTIFIER_CHARS,
    consume_block_comment,
    consume_bracket_identifier,
    consume_double_quoted,
    consume_line_comment,
    consume_single_quoted,
    consume_system_variable,
    starts_block_comment,
    starts_line_comment,
    starts_system_variable,
)
from sqltrace.core.types import PlaceholderReference

if TYPE_CHECKING:
    from sqltrace.core.types import ParsedParam

__all__ = (
    "PLACEHOLDER_RE",
    "CollectTraversal",
    "PlaceholderTraversal",
    "ReplaceTraversal",
    "SegmentKind",
    "collapse_line_breaks",
    "collect_placeholders",
    "is_trace_placeholder",
    "iter_segments",
    "normalize_placeholder_name",
    "replace_placeholders",
    "transform_placeholders",
)

PLACEHOLDER_RE: Final = re.compile(r"^@[A-Za-z0-9_#$]+$")

# A candidate run may contain '@' so that "@a@b" is rejected as a whole.
_RUN_CHARS: Final = IDENTIFIER_CHARS | frozenset("@")
_SPECIAL_CHARS: Final = frozenset("'\"[-/@")
_LINE_BREAK_CHARS: Final = frozenset("\r\n")


class SegmentKind(Enum):
    """Kinds of spans produced by :func:`iter_segments`."""

    STRING_LITERAL = "STRING_LITERAL"
    QUOTED_IDENTIFIER = "QUOTED_IDENTIFIER"
    BRACKET_IDENTIFIER = "BRACKET_IDENTIFIER"
    COMMENT_LINE = "COMMENT_LINE"
    COMMENT_BLOCK = "COMMENT_BLOCK"
    SYSTEM_VARIABLE = "SYSTEM_VARIABLE"
    PLACEHOLDER = "PLACEHOLDER"
    TEXT = "TEXT"


def normalize_placeholder_name(name: str) -> str:
    """Case-normalize a placeholder name for lookups."""
    return name.lower()


def is_trace_placeholder(name: str) -> bool:
    """Check whether ``name`` is a complete ``@name`` placeholder token."""
    return PLACEHOLDER_RE.match(name) is not None


def _placeholder_end(text: str, start_index: int) -> int:
    end = start_index + 1
    length = len(text)
    while end < length and text[end] in _RUN_CHARS:
        end += 1
    return end


def iter_segments(text: str) -> "Generator[tuple[SegmentKind, int, int], None, None]":
    """Split SQL text into contiguous ``(kind, start, end)`` spans.

    Dispatch order at each position: single quote, double quote, bracket,
    line comment, block comment, system variable, placeholder, plain text.
    Concatenating every span reproduces the input exactly.

    Args:
        text: SQL text to scan.

    Yields:
        Span kind with start and end offsets.
    """
    i = 0
    length = len(text)
    while i < length:
        char = text[i]

        if char == "'":
            end = consume_single_quoted(text, i)
            yield SegmentKind.STRING_LITERAL, i, end
            i = end
            continue

        if char == '"':
            end = consume_double_quoted(text, i)
            yield SegmentKind.QUOTED_IDENTIFIER, i, end
            i = end
            continue

        if char == "[":
            end = consume_bracket_identifier(text, i)
            yield SegmentKind.BRACKET_IDENTIFIER, i, end
            i = end
            continue

        if starts_line_comment(text, i):
            end = consume_line_comment(text, i)
            yield SegmentKind.COMMENT_LINE, i, end
            i = end
            continue

        if starts_block_comment(text, i):
            end = consume_block_comment(text, i)
            yield SegmentKind.COMMENT_BLOCK, i, end
            i = end
            continue

        if starts_system_variable(text, i):
            end = consume_system_variable(text, i)
            yield SegmentKind.SYSTEM_VARIABLE, i, end
            i = end
            continue

        if char == "@" and i + 1 < length and text[i + 1] in IDENTIFIER_CHARS:
            end = _placeholder_end(text, i)
            if is_trace_placeholder(text[i:end]):
                yield SegmentKind.PLACEHOLDER, i, end
                i = end
                continue

        end = i + 1
        while end < length and text[end] not in _SPECIAL_CHARS:
            end += 1
        yield SegmentKind.TEXT, i, end
        i = end


@mypyc_attr(allow_interpreted_subclasses=False)
class PlaceholderTraversal(ABC):
    """Per-placeholder behaviour for :func:`transform_placeholders`."""

    __slots__ = ()

    @abstractmethod
    def visit(self, token: str, key: str, start: int, end: int) -> Optional[str]:
        """Return replacement text for a placeholder, or None to keep it."""


@mypyc_attr(allow_interpreted_subclasses=False)
class CollectTraversal(PlaceholderTraversal):
    """Records placeholders in first-seen order, deduplicated by key."""

    __slots__ = ("_seen", "references")

    def __init__(self) -> None:
        self.references: list[PlaceholderReference] = []
        self._seen: set[str] = set()

    def visit(self, token: str, key: str, start: int, end: int) -> Optional[str]:
        if key not in self._seen:
            self._seen.add(key)
            self.references.append(PlaceholderReference(name=token, key=key))
        return None


@mypyc_attr(allow_interpreted_subclasses=False)
class ReplaceTraversal(PlaceholderTraversal):
    """Substitutes placeholders that have a parsed literal."""

    __slots__ = ("_params",)

    def __init__(self, params: "Mapping[str, ParsedParam]") -> None:
        self._params = params

    def visit(self, token: str, key: str, start: int, end: int) -> Optional[str]:
        parsed = self._params.get(key)
        if parsed is None or not parsed.normalized_literal:
            return None
        return parsed.normalized_literal


def transform_placeholders(sql_text: str, traversal: PlaceholderTraversal) -> str:
    """Rebuild ``sql_text`` with each placeholder passed through ``traversal``.

    Args:
        sql_text: SQL text containing ``@name`` placeholders.
        traversal: Collect or replace traversal.

    Returns:
        The rebuilt text. Identical to the input when nothing is replaced.
    """
    parts: list[str] = []
    for kind, start, end in iter_segments(sql_text):
        segment = sql_text[start:end]
        if kind is SegmentKind.PLACEHOLDER:
            replacement = traversal.visit(segment, normalize_placeholder_name(segment), start, end)
            parts.append(segment if replacement is None else replacement)
        else:
            parts.append(segment)
    return "".join(parts)


def collect_placeholders(sql_text: str) -> "list[PlaceholderReference]":
    """List the placeholders used in ``sql_text`` in first-seen order.

    Args:
        sql_text: SQL text to scan.

    Returns:
        One reference per distinct case-normalized name.
    """
    traversal = CollectTraversal()
    transform_placeholders(sql_text, traversal)
    return traversal.references


def replace_placeholders(sql_text: str, params: "Mapping[str, ParsedParam]") -> str:
    """Substitute every resolvable placeholder with its normalized literal.

    Placeholders without a registry entry or without a literal are left verbatim.
    """
    return transform_placeholders(sql_text, ReplaceTraversal(params))


def collapse_line_breaks(sql_text: str) -> str:
    """Join a multi-line statement onto a single line.

    Whitespace runs that contain a line break become a single space. Quoted
    spans and comments are copied verbatim, and the line break that ends a
    ``--`` comment is kept.

    Args:
        sql_text: SQL text.

    Returns:
        The collapsed text.
    """
    parts: list[str] = []
    after_line_comment = False
    for kind, start, end in iter_segments(sql_text):
        if kind is not SegmentKind.TEXT:
            parts.append(sql_text[start:end])
            after_line_comment = kind is SegmentKind.COMMENT_LINE
            continue

        i = start
        while i < end:
            char = sql_text[i]
            if not char.isspace():
                parts.append(char)
                after_line_comment = False
                i += 1
                continue
            run_end = i
            while run_end < end and sql_text[run_end].isspace():
                run_end += 1
            run = sql_text[i:run_end]
            if _LINE_BREAK_CHARS.isdisjoint(run):
                parts.append(run)
            elif after_line_comment:
                parts.append("\n")
            else:
                parts.append(" ")
            after_line_comment = False
            i = run_end
    return "".join(parts)
