"""Failure-isolated SQL pretty-printing.

:func:`apply_formatting` is the only place where generation calls out to a
collaborator. Any failure there turns into a warning and the text is returned
unformatted; generation itself never fails because of the formatter.
"""

from typing import TYPE_CHECKING, Final, Optional

import sqlglot
from sqlglot.dialects.dialect import Dialect
from sqlglot.errors import SqlglotError
from sqlglot.tokens import TokenType

from sqltrace.config import FormatOptions, KeywordCase
from sqltrace.exceptions import SQLFormattingError
from sqltrace.utils.logging import get_logger

if TYPE_CHECKING:
    from sqltrace.protocols import SQLFormatterProtocol

__all__ = (
    "FORMATTER_FAILED_WARNING",
    "FORMATTER_UNAVAILABLE_WARNING",
    "SqlglotFormatter",
    "apply_formatting",
)

logger = get_logger("sqltrace.core.formatting")

FORMATTER_UNAVAILABLE_WARNING: Final = "SQL formatter is unavailable; output was left unformatted."
FORMATTER_FAILED_WARNING: Final = "SQL formatter failed; output was left unformatted."
STATEMENT_SEPARATOR: Final = ";\n\n"

_VALUE_TOKEN_TYPES: Final = frozenset(
    {
        TokenType.STRING,
        TokenType.NATIONAL_STRING,
        TokenType.IDENTIFIER,
        TokenType.VAR,
        TokenType.PARAMETER,
        TokenType.HEX_STRING,
        TokenType.NUMBER,
    }
)


class SqlglotFormatter:
    """Pretty-prints SQL by round-tripping it through sqlglot."""

    __slots__ = ()

    def format(self, sql: str, options: Optional[FormatOptions] = None) -> str:
        """Pretty-print every statement in ``sql``.

        Args:
            sql: SQL text, possibly containing several statements.
            options: Dialect and keyword casing. Defaults to T-SQL, upper case.

        Raises:
            SQLFormattingError: If sqlglot cannot parse or generate the SQL.

        Returns:
            Formatted SQL with statements separated by a blank line.
        """
        options = options or FormatOptions()
        try:
            statements = sqlglot.transpile(sql, read=options.dialect, write=options.dialect, pretty=True)
        except SqlglotError as e:
            msg = f"Failed to format SQL: {e}"
            raise SQLFormattingError(msg) from e

        formatted = STATEMENT_SEPARATOR.join(statement for statement in statements if statement.strip())
        if options.keyword_case is KeywordCase.LOWER:
            return self._lower_keywords(formatted, options.dialect)
        return formatted

    @staticmethod
    def _lower_keywords(sql: str, dialect_name: str) -> str:
        dialect = Dialect.get_or_raise(dialect_name)
        keywords = dialect.tokenizer_class.KEYWORDS
        try:
            tokens = dialect.tokenize(sql)
        except SqlglotError as e:
            msg = f"Failed to tokenize formatted SQL: {e}"
            raise SQLFormattingError(msg) from e

        parts: list[str] = []
        position = 0
        for token in tokens:
            if token.token_type in _VALUE_TOKEN_TYPES or token.text.upper() not in keywords:
                continue
            end = token.end + 1
            parts.append(sql[position : token.start])
            parts.append(sql[token.start : end].lower())
            position = end
        parts.append(sql[position:])
        return "".join(parts)


def apply_formatting(
    sql_text: str,
    warnings: "list[str]",
    formatter: "Optional[SQLFormatterProtocol]",
    options: Optional[FormatOptions] = None,
) -> str:
    """Format ``sql_text`` without ever letting the formatter break generation.

    Blank text is returned as-is and the formatter is not called.

    Args:
        sql_text: Text to format.
        warnings: Warning list to append to.
        formatter: Formatter collaborator, or None when none is configured.
        options: Options forwarded to the formatter.

    Returns:
        The formatted text, or ``sql_text`` unchanged on any failure.
    """
    if not sql_text or not sql_text.strip():
        return sql_text

    if formatter is None:
        warnings.append(FORMATTER_UNAVAILABLE_WARNING)
        return sql_text

    try:
        return formatter.format(sql_text, options or FormatOptions())
    except Exception as e:  # noqa: BLE001
        message = str(e)
        logger.warning("SQL formatter %s failed: %s", type(formatter).__name__, message or type(e).__name__)
        warnings.append(f"{FORMATTER_FAILED_WARNING} ({message})" if message else FORMATTER_FAILED_WARNING)
        return sql_text
