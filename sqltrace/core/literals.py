"""Classification of raw T-SQL literal tokens.

:func:`classify_literal` maps a token such as ``N'abc'``, ``0xA0FF`` or
``12.340`` to the literal text to embed and the SQL Server type it implies.
A type is only reported as confident when the surface syntax alone fixes it.
``NULL`` is never confident because its type cannot be determined from syntax.
"""

import re
from typing import Final, Optional

from sqltrace.core.types import LiteralClassification
from sqltrace.utils.logging import get_logger

__all__ = (
    "INT32_MAX",
    "INT32_MIN",
    "MAX_NVARCHAR_LENGTH",
    "MAX_VARBINARY_LENGTH",
    "MAX_VARCHAR_LENGTH",
    "SQL_MAX_PRECISION",
    "classify_literal",
    "decimal_type_from_literal",
    "decode_sql_string",
)

logger = get_logger("sqltrace.core.literals")

INT32_MIN: Final[int] = -2147483648
INT32_MAX: Final[int] = 2147483647
SQL_MAX_PRECISION: Final[int] = 38
MAX_NVARCHAR_LENGTH: Final[int] = 4000
MAX_VARCHAR_LENGTH: Final[int] = 8000
MAX_VARBINARY_LENGTH: Final[int] = 8000

NULL_RE: Final = re.compile(r"^null$", re.IGNORECASE)
NATIONAL_STRING_RE: Final = re.compile(r"^N'(?:[^']|'')*'$", re.DOTALL)
STRING_RE: Final = re.compile(r"^'(?:[^']|'')*'$", re.DOTALL)
HEX_RE: Final = re.compile(r"^0x[0-9A-Fa-f]*$")
INTEGER_RE: Final = re.compile(r"^[+-]?[0-9]+$")
DECIMAL_RE: Final = re.compile(r"^[+-]?(?:[0-9]+\.[0-9]+|[0-9]+\.[0-9]*|\.[0-9]+)$")

DATETIME_RE: Final = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]{1,7})?$")
DATE_RE: Final = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
TIME_RE: Final = re.compile(r"^[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]{1,7})?$")

EMPTY_VALUE_ERROR: Final = "Value is empty."
NULL_VALUE_ERROR: Final = "NULL has no concrete type for conservative inference."
ODD_HEX_ERROR: Final = "Hex literal has odd digit count."
INTEGER_PARSE_ERROR: Final = "Could not parse integer literal."
DECIMAL_PRECISION_ERROR: Final = f"Decimal precision exceeds SQL Server limit ({SQL_MAX_PRECISION})."
UNSUPPORTED_TOKEN_ERROR: Final = "Unsupported token format."


def decode_sql_string(value: str) -> str:
    """Undo ``''`` escaping inside a string literal body."""
    return value.replace("''", "'")


def _sized_type(name: str, length: int, max_length: int) -> str:
    length = max(1, length)
    if length > max_length:
        return f"{name}(max)"
    return f"{name}({length})"


def _string_type(value: str) -> str:
    if DATETIME_RE.fullmatch(value):
        return "datetime"
    if DATE_RE.fullmatch(value):
        return "date"
    if TIME_RE.fullmatch(value):
        return "time"
    return _sized_type("varchar", len(value), MAX_VARCHAR_LENGTH)


def decimal_type_from_literal(token: str) -> Optional[str]:
    """Compute ``decimal(p,s)`` for a decimal literal.

    An empty integer part (``.5``) counts as a single ``0`` digit.

    Args:
        token: Decimal literal, optionally signed.

    Returns:
        The decimal type, or None when the precision exceeds 38.
    """
    integer_part, _, fraction_part = token.lstrip("+-").partition(".")
    precision = len(integer_part or "0") + len(fraction_part)
    if precision > SQL_MAX_PRECISION:
        return None
    return f"decimal({precision},{len(fraction_part)})"


def classify_literal(raw_token: str) -> LiteralClassification:
    """Classify a raw literal token from a trace statement.

    Rules are tried in order and the first match wins: empty, ``NULL``,
    national string, string (datetime, date, time or varchar), hex, integer,
    decimal, and finally the unsupported fallback.

    Args:
        raw_token: Value text as it appeared after ``=``.

    Returns:
        The normalized literal, inferred type, confidence and parse error.
    """
    token = raw_token.strip()

    if not token:
        return LiteralClassification(None, None, confidence=False, parse_error=EMPTY_VALUE_ERROR)

    if NULL_RE.match(token):
        return LiteralClassification("NULL", None, confidence=False, parse_error=NULL_VALUE_ERROR)

    if NATIONAL_STRING_RE.match(token):
        value = decode_sql_string(token[2:-1])
        return LiteralClassification(token, _sized_type("nvarchar", len(value), MAX_NVARCHAR_LENGTH), confidence=True)

    if STRING_RE.match(token):
        value = decode_sql_string(token[1:-1])
        return LiteralClassification(token, _string_type(value), confidence=True)

    if HEX_RE.match(token):
        digits = len(token) - 2
        if digits % 2:
            logger.debug("Rejected hex literal with %d digits", digits)
            return LiteralClassification(token, None, confidence=False, parse_error=ODD_HEX_ERROR)
        return LiteralClassification(token, _sized_type("varbinary", digits // 2, MAX_VARBINARY_LENGTH), confidence=True)

    if INTEGER_RE.match(token):
        try:
            number = int(token)
        except ValueError:
            logger.debug("Integer literal %r could not be parsed", token, exc_info=True)
            return LiteralClassification(token, None, confidence=False, parse_error=INTEGER_PARSE_ERROR)
        inferred_type = "int" if INT32_MIN <= number <= INT32_MAX else "bigint"
        return LiteralClassification(token, inferred_type, confidence=True)

    if DECIMAL_RE.match(token):
        inferred_type = decimal_type_from_literal(token)
        if inferred_type is None:
            logger.debug("Decimal literal %r exceeds maximum precision", token)
            return LiteralClassification(token, None, confidence=False, parse_error=DECIMAL_PRECISION_ERROR)
        return LiteralClassification(token, inferred_type, confidence=True)

    logger.debug("Unsupported literal token %r", token)
    return LiteralClassification(token, None, confidence=False, parse_error=UNSUPPORTED_TOKEN_ERROR)
