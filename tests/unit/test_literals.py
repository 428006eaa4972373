"""Tests for literal classification."""

from typing import Optional

import pytest

from sqltrace.core.literals import (
    DECIMAL_PRECISION_ERROR,
    EMPTY_VALUE_ERROR,
    INTEGER_PARSE_ERROR,
    NULL_VALUE_ERROR,
    ODD_HEX_ERROR,
    UNSUPPORTED_TOKEN_ERROR,
    classify_literal,
    decimal_type_from_literal,
    decode_sql_string,
)


@pytest.mark.parametrize(
    ("token", "expected_type"),
    [
        ("N'AB'", "nvarchar(2)"),
        ("N''", "nvarchar(1)"),
        ("N'O''Brien'", "nvarchar(7)"),
        ("N'R,HWL'", "nvarchar(5)"),
        ("'hello'", "varchar(5)"),
        ("''", "varchar(1)"),
        ("'It''s'", "varchar(4)"),
        ("'2024-01-31 13:45:00'", "datetime"),
        ("'2024-01-31 13:45:00.1234567'", "datetime"),
        ("'2024-01-31'", "date"),
        ("'13:45:00'", "time"),
        ("'13:45:00.5'", "time"),
        ("'2024-01-31T13:45:00'", "varchar(19)"),
        ("'2024-01-31 13:45:00.12345678'", "varchar(28)"),
        ("0xA0FF", "varbinary(2)"),
        ("0x", "varbinary(1)"),
        ("0xDEADBEEF", "varbinary(4)"),
        ("0", "int"),
        ("42", "int"),
        ("-7", "int"),
        ("+7", "int"),
        ("2147483647", "int"),
        ("-2147483648", "int"),
        ("2147483648", "bigint"),
        ("-2147483649", "bigint"),
        ("99999999999999999999999", "bigint"),
        ("12.340", "decimal(5,3)"),
        ("-12.5", "decimal(3,1)"),
        ("12.", "decimal(2,0)"),
        (".5", "decimal(2,1)"),
        ("0.0", "decimal(2,1)"),
    ],
)
def test_confident_literals(token: str, expected_type: str) -> None:
    """Recognized literals get a confident type."""
    result = classify_literal(token)

    assert result.confidence is True
    assert result.inferred_type == expected_type
    assert result.normalized_literal == token
    assert result.parse_error is None


@pytest.mark.parametrize("token", ["NULL", "null", "Null"])
def test_null_is_never_confident(token: str) -> None:
    """NULL has no confident type."""
    result = classify_literal(token)

    assert result.confidence is False
    assert result.inferred_type is None
    assert result.normalized_literal == "NULL"
    assert result.parse_error == NULL_VALUE_ERROR


@pytest.mark.parametrize("token", ["", "   ", "\t\n"])
def test_empty_value(token: str) -> None:
    """Empty tokens have no literal."""
    result = classify_literal(token)

    assert result.confidence is False
    assert result.normalized_literal is None
    assert result.inferred_type is None
    assert result.parse_error == EMPTY_VALUE_ERROR


def test_token_is_trimmed() -> None:
    """Surrounding whitespace is ignored."""
    result = classify_literal("  42 ")
    assert result.normalized_literal == "42"
    assert result.inferred_type == "int"


@pytest.mark.parametrize(
    ("token", "expected_error"),
    [
        ("0xABC", ODD_HEX_ERROR),
        ("0x1", ODD_HEX_ERROR),
        ("1." + "1" * 38, DECIMAL_PRECISION_ERROR),
        ("GETDATE()", UNSUPPORTED_TOKEN_ERROR),
        ("1e10", UNSUPPORTED_TOKEN_ERROR),
        ("'unterminated", UNSUPPORTED_TOKEN_ERROR),
        ("N'a'b'", UNSUPPORTED_TOKEN_ERROR),
        ("0xZZ", UNSUPPORTED_TOKEN_ERROR),
        ("@1", UNSUPPORTED_TOKEN_ERROR),
    ],
)
def test_unclassifiable_tokens_keep_their_text(token: str, expected_error: str) -> None:
    """Unknown tokens keep their text without a type."""
    result = classify_literal(token)

    assert result.confidence is False
    assert result.inferred_type is None
    assert result.normalized_literal == token
    assert result.parse_error == expected_error


def test_varchar_length_boundary() -> None:
    """varchar switches to max above 8000."""
    assert classify_literal("'" + "a" * 8000 + "'").inferred_type == "varchar(8000)"
    assert classify_literal("'" + "a" * 8001 + "'").inferred_type == "varchar(max)"
    assert classify_literal("'" + "a" * 8100 + "'").inferred_type == "varchar(max)"


def test_nvarchar_length_boundary() -> None:
    """nvarchar switches to max above 4000."""
    assert classify_literal("N'" + "a" * 4000 + "'").inferred_type == "nvarchar(4000)"
    assert classify_literal("N'" + "a" * 4001 + "'").inferred_type == "nvarchar(max)"
    assert classify_literal("N'" + "a" * 4100 + "'").inferred_type == "nvarchar(max)"


def test_string_length_counts_decoded_characters() -> None:
    """Doubled quotes count as one character."""
    assert classify_literal("N'" + "''" * 4000 + "'").inferred_type == "nvarchar(4000)"
    assert classify_literal("'" + "''" * 8001 + "'").inferred_type == "varchar(max)"


def test_varbinary_length_boundary() -> None:
    """varbinary switches to max above 8000 bytes."""
    assert classify_literal("0x" + "ab" * 8000).inferred_type == "varbinary(8000)"
    assert classify_literal("0x" + "ab" * 8001).inferred_type == "varbinary(max)"


def test_decimal_precision_boundary() -> None:
    """Precision above 38 is not confident."""
    assert classify_literal("1." + "0" * 37).inferred_type == "decimal(38,37)"
    assert classify_literal("1" * 39 + ".0").parse_error == DECIMAL_PRECISION_ERROR


def test_integer_beyond_conversion_limit_is_not_confident() -> None:
    """Integers past the conversion limit are not confident."""
    # CPython refuses very long str->int conversions unless the limit is raised
    token = "9" * 5000
    result = classify_literal(token)

    assert result.normalized_literal == token
    if result.confidence:
        assert result.inferred_type == "bigint"
    else:
        assert result.inferred_type is None
        assert result.parse_error == INTEGER_PARSE_ERROR


@pytest.mark.parametrize("token", ["N'AB'", "NULL", "0xABC", "12.340", "", "2147483648", "'2024-01-31'"])
def test_classification_is_deterministic(token: str) -> None:
    """The same token always classifies the same way."""
    assert classify_literal(token) == classify_literal(token)


@pytest.mark.parametrize(
    ("token", "expected"),
    [("12.340", "decimal(5,3)"), ("+.25", "decimal(3,2)"), ("100.", "decimal(3,0)"), ("1" * 39 + ".1", None)],
)
def test_decimal_type_from_literal(token: str, expected: Optional[str]) -> None:
    """Precision and scale come from the digits."""
    assert decimal_type_from_literal(token) == expected


def test_decode_sql_string() -> None:
    """Doubled quotes are unescaped."""
    assert decode_sql_string("O''Brien") == "O'Brien"
    assert decode_sql_string("''''") == "''"
