"""Parsing of trace ``EXEC`` parameter-assignment statements.

A captured call such as ``exec sp_execute 71,@0=N'R,HWL',@1='O''Brien',@2=42``
is split on commas outside single-quoted literals. Segments of the form
``@name = value`` become :class:`~sqltrace.core.types.ParsedParam` entries;
anything else (the call prefix, trailing clutter) is skipped.
"""

import re
from typing import Final, Optional

from sqltrace.core.literals import classify_literal
from sqltrace.core.placeholders import is_trace_placeholder, normalize_placeholder_name
from sqltrace.core.scanner import consume_single_quoted
from sqltrace.core.types import ExecParseResult, ParsedParam
from sqltrace.utils.logging import get_logger

__all__ = (
    "ASSIGNMENT_RE",
    "dedupe_strings",
    "parse_assignment_segment",
    "parse_exec_statement",
    "split_assignment_segments",
)

logger = get_logger("sqltrace.core.assignments")

ASSIGNMENT_RE: Final = re.compile(r"^(@[A-Za-z0-9_#$]+)\s*=\s*(.*)$", re.DOTALL)

EMPTY_EXEC_WARNING: Final = "EXEC statement is empty."
NO_ASSIGNMENTS_WARNING: Final = "No parameter assignments were parsed from EXEC statement."


def dedupe_strings(items: "list[str]") -> "list[str]":
    """Drop empty and repeated strings, keeping first occurrences in order."""
    return list(dict.fromkeys(item for item in items if item))


def split_assignment_segments(exec_text: str) -> "list[str]":
    """Split on commas that are not inside single-quoted literals.

    Args:
        exec_text: Raw EXEC statement.

    Returns:
        The segments, untrimmed. Always at least one.
    """
    segments: list[str] = []
    start = 0
    i = 0
    length = len(exec_text)
    while i < length:
        char = exec_text[i]
        if char == "'":
            i = consume_single_quoted(exec_text, i)
            continue
        if char == ",":
            segments.append(exec_text[start:i])
            start = i + 1
        i += 1
    segments.append(exec_text[start:])
    return segments


def parse_assignment_segment(segment: str) -> "Optional[tuple[str, str]]":
    """Match one segment against ``@name = value``.

    A trailing ``;`` on the value is dropped.

    Args:
        segment: One comma-separated segment.

    Returns:
        ``(name, value_token)`` or None when the segment is not an assignment.
    """
    trimmed = segment.strip()
    if not trimmed:
        return None

    match = ASSIGNMENT_RE.match(trimmed)
    if match is None:
        return None

    value_token = match.group(2).strip()
    if value_token.endswith(";"):
        value_token = value_token[:-1].rstrip()
    return match.group(1), value_token


def parse_exec_statement(exec_text: str) -> ExecParseResult:
    """Parse every ``@name=value`` assignment of a trace EXEC statement.

    Repeated names warn and the last value wins.

    Args:
        exec_text: Raw EXEC statement.

    Returns:
        Parameters keyed by lower-cased name, and parser warnings.
    """
    warnings: list[str] = []
    params: dict[str, ParsedParam] = {}

    if not exec_text or not exec_text.strip():
        warnings.append(EMPTY_EXEC_WARNING)
        return ExecParseResult(params=params, warnings=warnings)

    for segment in split_assignment_segments(exec_text):
        assignment = parse_assignment_segment(segment)
        if assignment is None:
            continue
        name, value_token = assignment
        if not is_trace_placeholder(name):
            continue

        key = normalize_placeholder_name(name)
        if key in params:
            warnings.append(f"Duplicate assignment for {name}; last value wins.")
            # keep first-seen position, take the new value
        params[key] = ParsedParam.from_classification(name, value_token, classify_literal(value_token))

    if not params:
        warnings.append(NO_ASSIGNMENTS_WARNING)

    logger.debug("Parsed %d EXEC parameter(s)", len(params))
    return ExecParseResult(params=params, warnings=dedupe_strings(warnings))
