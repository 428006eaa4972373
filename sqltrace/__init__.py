"""sqltrace: turn traced SQL and its EXEC call into runnable SQL."""

from sqltrace import config, core, exceptions, storage, utils
from sqltrace.__metadata__ import __version__
from sqltrace.config import DeclarePolicy, FormatOptions, GeneratorConfig, KeywordCase, load_config_from_env
from sqltrace.core import (
    GenerationMode,
    GenerationResult,
    ParsedParam,
    PlaceholderReference,
    SqlglotFormatter,
    TraceStatementGenerator,
    apply_formatting,
    classify_literal,
    collect_placeholders,
    generate,
    parse_exec_statement,
    replace_placeholders,
)
from sqltrace.exceptions import ImproperConfigurationError, InputStateError, SQLFormattingError, SQLTraceError

__all__ = (
    "DeclarePolicy",
    "FormatOptions",
    "GenerationMode",
    "GenerationResult",
    "GeneratorConfig",
    "ImproperConfigurationError",
    "InputStateError",
    "KeywordCase",
    "ParsedParam",
    "PlaceholderReference",
    "SQLFormattingError",
    "SQLTraceError",
    "SqlglotFormatter",
    "TraceStatementGenerator",
    "__version__",
    "apply_formatting",
    "classify_literal",
    "collect_placeholders",
    "config",
    "core",
    "exceptions",
    "generate",
    "load_config_from_env",
    "parse_exec_statement",
    "replace_placeholders",
    "storage",
    "utils",
)
