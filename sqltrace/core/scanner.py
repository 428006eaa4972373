"""Cursor primitives for skipping over quoted spans and comments.

Every function takes the full text and the index of an opening delimiter and
returns the index just past the matching closing delimiter. Unterminated spans
consume the remainder of the text, so the scanner is total over arbitrary input.
"""

from typing import Final

__all__ = (
    "IDENTIFIER_CHARS",
    "consume_block_comment",
    "consume_bracket_identifier",
    "consume_double_quoted",
    "consume_line_comment",
    "consume_single_quoted",
    "consume_system_variable",
    "is_identifier_char",
    "starts_block_comment",
    "starts_line_comment",
    "starts_system_variable",
)

IDENTIFIER_CHARS: Final = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_#$")


def is_identifier_char(char: str) -> bool:
    """Check whether ``char`` may appear in a placeholder or variable name."""
    return char in IDENTIFIER_CHARS


def _consume_escaped(text: str, start_index: int, closing: str) -> int:
    i = start_index + 1
    length = len(text)
    while i < length:
        if text[i] == closing:
            # doubled delimiter is an escaped literal character
            if i + 1 < length and text[i + 1] == closing:
                i += 2
                continue
            return i + 1
        i += 1
    return length


def consume_single_quoted(text: str, start_index: int) -> int:
    """Skip a ``'...'`` string literal where ``''`` escapes a quote.

    Args:
        text: SQL text.
        start_index: Index of the opening quote.

    Returns:
        Index just past the closing quote, or ``len(text)`` when unterminated.
    """
    return _consume_escaped(text, start_index, "'")


def consume_double_quoted(text: str, start_index: int) -> int:
    """Skip a ``"..."`` quoted identifier where ``""`` escapes a quote."""
    return _consume_escaped(text, start_index, '"')


def consume_bracket_identifier(text: str, start_index: int) -> int:
    """Skip a ``[...]`` identifier where ``]]`` is a literal ``]``."""
    return _consume_escaped(text, start_index, "]")


def consume_line_comment(text: str, start_index: int) -> int:
    """Skip a ``--`` comment up to, but not including, the next newline."""
    end = text.find("\n", start_index + 2)
    return len(text) if end == -1 else end


def consume_block_comment(text: str, start_index: int) -> int:
    """Skip a ``/* ... */`` comment. Block comments do not nest."""
    end = text.find("*/", start_index + 2)
    return len(text) if end == -1 else end + 2


def consume_system_variable(text: str, start_index: int) -> int:
    """Skip an ``@@name`` system variable such as ``@@ROWCOUNT``."""
    i = start_index + 2
    length = len(text)
    while i < length and text[i] in IDENTIFIER_CHARS:
        i += 1
    return i


def starts_line_comment(text: str, index: int) -> bool:
    return text.startswith("--", index)


def starts_block_comment(text: str, index: int) -> bool:
    return text.startswith("/*", index)


def starts_system_variable(text: str, index: int) -> bool:
    return text.startswith("@@", index)
