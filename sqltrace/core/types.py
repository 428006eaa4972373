"""Value types passed between the scanner, classifier, parser and generator."""

from enum import Enum
from typing import Optional

__all__ = (
    "ExecParseResult",
    "GenerationMode",
    "GenerationResult",
    "LiteralClassification",
    "ParsedParam",
    "PlaceholderReference",
)


class GenerationMode(str, Enum):
    """Output strategy chosen by the generator."""

    DECLARE = "declare"
    INLINE = "inline"

    def __str__(self) -> str:
        return self.value


class LiteralClassification:
    """Result of classifying one raw literal token."""

    __slots__ = ("confidence", "inferred_type", "normalized_literal", "parse_error")

    def __init__(
        self,
        normalized_literal: Optional[str],
        inferred_type: Optional[str],
        confidence: bool,
        parse_error: Optional[str] = None,
    ) -> None:
        self.normalized_literal = normalized_literal
        self.inferred_type = inferred_type
        self.confidence = confidence
        self.parse_error = parse_error

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (
            self.normalized_literal == other.normalized_literal
            and self.inferred_type == other.inferred_type
            and self.confidence == other.confidence
            and self.parse_error == other.parse_error
        )

    def __hash__(self) -> int:
        return hash((self.normalized_literal, self.inferred_type, self.confidence, self.parse_error))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join([f'normalized_literal={self.normalized_literal!r}', f'inferred_type={self.inferred_type!r}', f'confidence={self.confidence!r}', f'parse_error={self.parse_error!r}'])})"


class ParsedParam:
    """One ``@name=value`` assignment taken from the EXEC statement.

    A confident parameter always carries both an inferred type and a literal.
    ``NULL`` values are never confident because their type cannot be read from syntax.
    """

    __slots__ = ("confidence", "inferred_type", "name", "normalized_literal", "parse_error", "raw_token")

    def __init__(
        self,
        name: str,
        raw_token: str,
        normalized_literal: Optional[str],
        inferred_type: Optional[str],
        confidence: bool,
        parse_error: Optional[str] = None,
    ) -> None:
        self.name = name
        self.raw_token = raw_token
        self.normalized_literal = normalized_literal
        self.inferred_type = inferred_type
        self.confidence = confidence
        self.parse_error = parse_error

    @classmethod
    def from_classification(cls, name: str, raw_token: str, classification: LiteralClassification) -> "ParsedParam":
        return cls(
            name=name,
            raw_token=raw_token,
            normalized_literal=classification.normalized_literal,
            inferred_type=classification.inferred_type,
            confidence=classification.confidence,
            parse_error=classification.parse_error,
        )

    @property
    def is_declarable(self) -> bool:
        """True when the parameter can be declared with its own inferred type."""
        return bool(self.confidence and self.inferred_type and self.normalized_literal)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (
            self.name == other.name
            and self.raw_token == other.raw_token
            and self.normalized_literal == other.normalized_literal
            and self.inferred_type == other.inferred_type
            and self.confidence == other.confidence
            and self.parse_error == other.parse_error
        )

    def __hash__(self) -> int:
        return hash((self.name, self.raw_token, self.normalized_literal, self.inferred_type, self.confidence))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join([f'name={self.name!r}', f'raw_token={self.raw_token!r}', f'normalized_literal={self.normalized_literal!r}', f'inferred_type={self.inferred_type!r}', f'confidence={self.confidence!r}', f'parse_error={self.parse_error!r}'])})"


class PlaceholderReference:
    """A placeholder found in the SQL text."""

    __slots__ = ("key", "name")

    def __init__(self, name: str, key: str) -> None:
        self.name = name
        self.key = key

    @property
    def numeric_sort_key(self) -> "Optional[tuple[int, str]]":
        """Order key of an ``@<digits>`` name, otherwise None.

        Compares by significant digit count, then digit text, so arbitrarily
        long names order numerically without an ``int`` conversion.
        """
        digits = self.name[1:]
        if not (digits.isdigit() and digits.isascii()):
            return None
        significant = digits.lstrip("0")
        return len(significant), significant

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.name == other.name and self.key == other.key

    def __hash__(self) -> int:
        return hash((self.name, self.key))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, key={self.key!r})"


class ExecParseResult:
    """Parameters parsed from an EXEC statement plus the warnings raised on the way.

    ``params`` is keyed by the lower-cased placeholder name.
    """

    __slots__ = ("params", "warnings")

    def __init__(self, params: "dict[str, ParsedParam]", warnings: "list[str]") -> None:
        self.params = params
        self.warnings = warnings

    def __repr__(self) -> str:
        return f"{type(self).__name__}(params={self.params!r}, warnings={self.warnings!r})"


class GenerationResult:
    """Final output of :func:`sqltrace.core.generator.generate`."""

    __slots__ = ("mode", "output_sql", "params", "warnings")

    def __init__(
        self, mode: GenerationMode, output_sql: str, warnings: "list[str]", params: "list[ParsedParam]"
    ) -> None:
        self.mode = mode
        self.output_sql = output_sql
        self.warnings = warnings
        self.params = params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (
            self.mode == other.mode
            and self.output_sql == other.output_sql
            and self.warnings == other.warnings
            and self.params == other.params
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={self.mode!r}, output_sql={self.output_sql!r}, warnings={self.warnings!r})"
