"""DECLARE-or-inline generation from a trace SQL statement and its EXEC call.

Flow:
1. Parse the EXEC assignments into a parameter registry.
2. Collect the placeholders the SQL actually uses.
3. Check every used placeholder against the registry and decide the mode.
4. Emit a ``DECLARE`` block followed by the SQL, or substitute literals inline.
5. Pass the SQL statement through the formatter adapter. The DECLARE block keeps
   its own one-declaration-per-line layout.

Every problem along the way becomes a warning; :func:`generate` always returns
a :class:`~sqltrace.core.types.GenerationResult`.
"""

import logging
from typing import TYPE_CHECKING, Final, Optional, Union

from sqltrace.config import GeneratorConfig
from sqltrace.core.assignments import dedupe_strings, parse_exec_statement
from sqltrace.core.formatting import SqlglotFormatter, apply_formatting
from sqltrace.core.placeholders import collapse_line_breaks, collect_placeholders, replace_placeholders
from sqltrace.core.types import GenerationMode, GenerationResult
from sqltrace.typing import Empty, EmptyType
from sqltrace.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqltrace.core.types import ParsedParam, PlaceholderReference
    from sqltrace.protocols import SQLFormatterProtocol

__all__ = (
    "VARIANT_TYPE",
    "TraceStatementGenerator",
    "build_declare_statement",
    "generate",
    "sort_placeholders_for_declare",
)

logger = get_logger("sqltrace.core.generator")

VARIANT_TYPE: Final = "sql_variant"


def sort_placeholders_for_declare(references: "Sequence[PlaceholderReference]") -> "list[PlaceholderReference]":
    """Order placeholders for the DECLARE block.

    ``@<digits>`` names come first, ascending by numeric value, so ``@2``
    precedes ``@10``. Other names follow in their first-seen order.

    Args:
        references: Placeholders in first-seen order.

    Returns:
        A new, sorted list.
    """
    numeric: list[tuple[tuple[int, str], int, PlaceholderReference]] = []
    named: list[PlaceholderReference] = []
    for index, reference in enumerate(references):
        sort_key = reference.numeric_sort_key
        if sort_key is None:
            named.append(reference)
        else:
            numeric.append((sort_key, index, reference))
    numeric.sort(key=lambda item: (item[0], item[1]))
    return [reference for _, _, reference in numeric] + named


def build_declare_statement(declarations: "Sequence[str]", sql_text: str, indent: int = 8) -> str:
    """Join declarations into one ``DECLARE`` statement followed by the SQL.

    Args:
        declarations: ``@name type [= literal]`` fragments in output order.
        sql_text: The SQL statement; surrounding whitespace is trimmed.
        indent: Spaces before each continued declaration line.

    Returns:
        ``DECLARE ...;`` a blank line, then the SQL.
    """
    separator = ",\n" + " " * indent
    return f"DECLARE {separator.join(declarations)};\n\n{sql_text.strip()}"


class TraceStatementGenerator:
    """Turns a trace SQL statement plus EXEC call into runnable SQL.

    Holds only configuration and the formatter; every :meth:`generate` call
    builds its state from scratch.
    """

    __slots__ = ("config", "formatter")

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        formatter: "Union[SQLFormatterProtocol, None, EmptyType]" = Empty,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Generation settings. Defaults to :class:`GeneratorConfig`.
            formatter: Formatter collaborator. Omit for :class:`SqlglotFormatter`;
                pass None to run without one.
        """
        self.config = config or GeneratorConfig()
        self.formatter: Optional[SQLFormatterProtocol] = SqlglotFormatter() if formatter is Empty else formatter  # type: ignore[assignment]

    def generate(self, sql_text: Optional[str], exec_text: Optional[str]) -> GenerationResult:
        """Generate DECLARE or inline output.

        Args:
            sql_text: SQL containing ``@name`` placeholders. None is treated as empty.
            exec_text: The EXEC statement with ``@name=value`` assignments.

        Returns:
            Mode, output text, de-duplicated warnings and all parsed parameters.
        """
        safe_sql = sql_text if isinstance(sql_text, str) else ""
        safe_exec = exec_text if isinstance(exec_text, str) else ""
        if self.config.collapse_line_breaks:
            safe_sql = collapse_line_breaks(safe_sql)

        warnings: list[str] = []
        parse_result = parse_exec_statement(safe_exec)
        warnings.extend(parse_result.warnings)
        params = parse_result.params

        references = collect_placeholders(safe_sql)
        can_declare = self._check_references(references, params, warnings)

        used_keys = {reference.key for reference in references}
        for key, param in params.items():
            if key not in used_keys:
                warnings.append(f"EXEC parameter {param.name} is not referenced in the SQL statement.")

        if can_declare:
            mode = GenerationMode.DECLARE
            output_sql = self._render_declare(safe_sql, references, params, warnings)
        else:
            mode = GenerationMode.INLINE
            output_sql = self._format(self._render_inline(safe_sql, references, params, warnings), warnings)

        result_warnings = dedupe_strings(warnings)
        log_with_context(
            logger,
            logging.DEBUG,
            "Generated trace statement",
            mode=mode.value,
            placeholder_count=len(references),
            parameter_count=len(params),
            warning_count=len(result_warnings),
        )
        return GenerationResult(
            mode=mode,
            output_sql=output_sql,
            warnings=result_warnings,
            params=list(params.values()),
        )

    def _check_references(
        self,
        references: "Sequence[PlaceholderReference]",
        params: "Mapping[str, ParsedParam]",
        warnings: "list[str]",
    ) -> bool:
        can_declare = bool(references)
        for reference in references:
            parsed = params.get(reference.key)
            if parsed is None:
                warnings.append(f"Missing value for {reference.name} in EXEC statement.")
                can_declare = False
                continue

            if not parsed.normalized_literal:
                warnings.append(f"No literal value was parsed for {reference.name}.")
                can_declare = False

            if not parsed.confidence or not parsed.inferred_type:
                detail = f" ({parsed.parse_error})" if parsed.parse_error else ""
                warnings.append(f"Type inference is not confident for {reference.name}{detail}.")
                can_declare = False

        if references and not self.config.is_strict:
            # variant declarations cover every uncertainty
            return True
        return can_declare

    def _render_declare(
        self,
        sql_text: str,
        references: "Sequence[PlaceholderReference]",
        params: "Mapping[str, ParsedParam]",
        warnings: "list[str]",
    ) -> str:
        declarations: list[str] = []
        for reference in sort_placeholders_for_declare(references):
            parsed = params.get(reference.key)
            if parsed is None or not parsed.normalized_literal:
                warnings.append(
                    f"Declaring {reference.name} as uninitialized {VARIANT_TYPE} because no value was supplied."
                )
                declarations.append(f"{reference.name} {VARIANT_TYPE}")
            elif not parsed.is_declarable:
                warnings.append(
                    f"Declaring {reference.name} using {VARIANT_TYPE} because its type could not be inferred."
                )
                declarations.append(f"{reference.name} {VARIANT_TYPE} = {parsed.normalized_literal}")
            else:
                declarations.append(f"{reference.name} {parsed.inferred_type} = {parsed.normalized_literal}")
        # only the statement body is formatted; the DECLARE layout is fixed
        body = self._format(sql_text.strip(), warnings)
        return build_declare_statement(declarations, body, self.config.declare_indent)

    def _format(self, sql_text: str, warnings: "list[str]") -> str:
        if not self.config.format_output:
            return sql_text
        return apply_formatting(sql_text, warnings, self.formatter, self.config.format_options())

    @staticmethod
    def _render_inline(
        sql_text: str,
        references: "Sequence[PlaceholderReference]",
        params: "Mapping[str, ParsedParam]",
        warnings: "list[str]",
    ) -> str:
        output_sql = replace_placeholders(sql_text, params)
        for reference in references:
            parsed = params.get(reference.key)
            if parsed is None:
                warnings.append(f"Unresolved placeholder {reference.name} was left unchanged.")
            elif not parsed.normalized_literal:
                warnings.append(f"Placeholder {reference.name} was left unchanged due to missing literal.")
            elif parsed.parse_error:
                warnings.append(f"Used best-effort value for {reference.name}: {parsed.parse_error}")
        return output_sql


def generate(
    sql_text: Optional[str],
    exec_text: Optional[str],
    formatter: "Union[SQLFormatterProtocol, None, EmptyType]" = Empty,
    config: Optional[GeneratorConfig] = None,
) -> GenerationResult:
    """Generate a DECLARE block or inline-substituted SQL for a trace statement.

    Args:
        sql_text: SQL containing ``@0``-style placeholders.
        exec_text: Companion ``exec sp_execute ...,@0=...`` statement.
        formatter: Formatter collaborator. Omit to use sqlglot; None disables it with a warning.
        config: Generation settings.

    Returns:
        The generation result. Never raises for string inputs.
    """
    return TraceStatementGenerator(config=config, formatter=formatter).generate(sql_text, exec_text)
