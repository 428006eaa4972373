"""Core parsing and inference pipeline.

Architecture Overview:
- scanner.py: cursor primitives for quoted spans and comments
- placeholders.py: single-pass placeholder transformer (collect / replace)
- literals.py: literal classifier (token -> literal, SQL type, confidence)
- assignments.py: EXEC assignment-list parser
- generator.py: DECLARE-or-inline mode selection and output
- formatting.py: failure-isolated SQL formatter adapter
"""

from sqltrace.core.assignments import parse_exec_statement, split_assignment_segments
from sqltrace.core.formatting import SqlglotFormatter, apply_formatting
from sqltrace.core.generator import TraceStatementGenerator, generate, sort_placeholders_for_declare
from sqltrace.core.literals import classify_literal
from sqltrace.core.placeholders import (
    CollectTraversal,
    PlaceholderTraversal,
    ReplaceTraversal,
    collapse_line_breaks,
    collect_placeholders,
    replace_placeholders,
    transform_placeholders,
)
from sqltrace.core.types import (
    ExecParseResult,
    GenerationMode,
    GenerationResult,
    LiteralClassification,
    ParsedParam,
    PlaceholderReference,
)

__all__ = (
    "CollectTraversal",
    "ExecParseResult",
    "GenerationMode",
    "GenerationResult",
    "LiteralClassification",
    "ParsedParam",
    "PlaceholderReference",
    "PlaceholderTraversal",
    "ReplaceTraversal",
    "SqlglotFormatter",
    "TraceStatementGenerator",
    "apply_formatting",
    "classify_literal",
    "collapse_line_breaks",
    "collect_placeholders",
    "generate",
    "parse_exec_statement",
    "replace_placeholders",
    "sort_placeholders_for_declare",
    "split_assignment_segments",
    "transform_placeholders",
)
