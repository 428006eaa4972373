"""Configuration for statement generation.

Settings can be built directly or read from ``SQLTRACE_*`` environment variables:

- SQLTRACE_DECLARE_POLICY: ``variant`` (default) or ``strict``
- SQLTRACE_DIALECT: sqlglot dialect used for formatting (default ``tsql``)
- SQLTRACE_KEYWORD_CASE: ``upper`` (default) or ``lower``
- SQLTRACE_FORMAT_OUTPUT: pretty-print the output (true/false)
- SQLTRACE_COLLAPSE_LINE_BREAKS: join the input SQL onto one line (true/false)
- SQLTRACE_DECLARE_INDENT: indentation of continued DECLARE lines (integer)
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, TypeVar

from sqlglot.dialects.dialect import Dialect

from sqltrace.exceptions import ImproperConfigurationError
from sqltrace.utils.logging import get_logger

__all__ = (
    "DeclarePolicy",
    "FormatOptions",
    "GeneratorConfig",
    "KeywordCase",
    "load_config_from_env",
)

logger = get_logger("sqltrace.config")

EnumT = TypeVar("EnumT", bound=Enum)


class DeclarePolicy(str, Enum):
    """How the generator treats parameters without a confident type.

    ``VARIANT`` declares such parameters as ``sql_variant`` (uninitialized when
    no value was supplied) and only falls back to inline output when the SQL has
    no placeholders. ``STRICT`` falls back to inline output on any uncertainty.
    """

    VARIANT = "variant"
    STRICT = "strict"

    def __str__(self) -> str:
        return self.value


class KeywordCase(str, Enum):
    """Keyword casing applied by the formatter."""

    UPPER = "upper"
    LOWER = "lower"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FormatOptions:
    """Options handed to the SQL formatter collaborator."""

    dialect: str = "tsql"
    keyword_case: KeywordCase = KeywordCase.UPPER


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for :func:`sqltrace.core.generator.generate`."""

    declare_policy: DeclarePolicy = DeclarePolicy.VARIANT
    dialect: str = "tsql"
    keyword_case: KeywordCase = KeywordCase.UPPER
    format_output: bool = True
    collapse_line_breaks: bool = False
    declare_indent: int = 8

    def __post_init__(self) -> None:
        object.__setattr__(self, "declare_policy", _coerce_enum(DeclarePolicy, self.declare_policy, "declare_policy"))
        object.__setattr__(self, "keyword_case", _coerce_enum(KeywordCase, self.keyword_case, "keyword_case"))
        if self.declare_indent < 0:
            msg = f"declare_indent must not be negative, got {self.declare_indent}"
            raise ImproperConfigurationError(msg)
        try:
            Dialect.get_or_raise(self.dialect)
        except ValueError as e:
            msg = f"Unknown SQL dialect {self.dialect!r}"
            raise ImproperConfigurationError(msg) from e

    @property
    def is_strict(self) -> bool:
        return self.declare_policy is DeclarePolicy.STRICT

    def format_options(self) -> FormatOptions:
        """Build the options passed to the formatter."""
        return FormatOptions(dialect=self.dialect, keyword_case=self.keyword_case)

    def replace(self, **changes: Any) -> "GeneratorConfig":
        """Create a new configuration with updated values.

        Args:
            **changes: Field values to update

        Returns:
            New GeneratorConfig instance
        """
        return replace(self, **changes)


def _coerce_enum(enum_type: "type[EnumT]", value: Any, setting: str) -> EnumT:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_type)
        msg = f"Invalid value {value!r} for {setting}; expected one of: {allowed}"
        raise ImproperConfigurationError(msg) from e


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on", "enabled")


def _env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer value for %s: %s, using default %d", key, value, default)
        return default


def load_config_from_env() -> GeneratorConfig:
    """Load configuration from ``SQLTRACE_*`` environment variables.

    Raises:
        ImproperConfigurationError: If a policy, keyword case or dialect value is not recognised.

    Returns:
        GeneratorConfig loaded from environment variables
    """
    defaults = GeneratorConfig()
    return GeneratorConfig(
        declare_policy=os.getenv("SQLTRACE_DECLARE_POLICY", defaults.declare_policy.value),  # type: ignore[arg-type]
        dialect=os.getenv("SQLTRACE_DIALECT", defaults.dialect),
        keyword_case=os.getenv("SQLTRACE_KEYWORD_CASE", defaults.keyword_case.value),  # type: ignore[arg-type]
        format_output=_env_bool("SQLTRACE_FORMAT_OUTPUT", defaults.format_output),
        collapse_line_breaks=_env_bool("SQLTRACE_COLLAPSE_LINE_BREAKS", defaults.collapse_line_breaks),
        declare_indent=_env_int("SQLTRACE_DECLARE_INDENT", defaults.declare_indent),
    )
