from pathlib import Path
from typing import IO, TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from click import Group
    from rich.console import Console

    from sqltrace.core.types import GenerationResult

__all__ = ("get_sqltrace_group", "main", "render_warnings")


def render_warnings(console: "Console", result: "GenerationResult") -> None:
    """Print the mode badge and the warning list.

    Args:
        console: Console to print to.
        result: Generation result to describe.
    """
    style = "green" if result.mode.value == "declare" else "yellow"
    console.print(f"[bold {style}]MODE: {result.mode.value.upper()}[/]")

    warnings = result.warnings
    if not warnings:
        console.print("No warnings.")
        return
    console.print("1 warning:" if len(warnings) == 1 else f"{len(warnings)} warnings:")
    for warning in warnings:
        console.print(f"  - {warning}", markup=False, soft_wrap=True)


def get_sqltrace_group() -> "Group":
    """Get the sqltrace CLI group.

    Raises:
        MissingDependencyError: If the `rich-click` package is not installed.

    Returns:
        The sqltrace CLI group.
    """
    from sqltrace.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError as e:
        raise MissingDependencyError(package="rich-click", install_package="cli") from e
    from rich.console import Console
    from rich.markup import escape

    from sqltrace.config import DeclarePolicy, KeywordCase, load_config_from_env
    from sqltrace.core.generator import generate
    from sqltrace.exceptions import ImproperConfigurationError, InputStateError
    from sqltrace.storage import FileInputStateStore, InputState
    from sqltrace.utils.logging import configure_logging, correlation_scope

    state_file_option = click.option(
        "--state-file",
        help="File used to remember the last inputs (defaults to $SQLTRACE_STATE_PATH or ~/.sqltrace/state.json).",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
    )

    @click.group(name="sqltrace")
    @click.option(
        "--log-level",
        help="Logging level for diagnostic output on stderr.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default="WARNING",
        show_default=True,
    )
    @click.option(
        "--log-format",
        help="Log line format.",
        type=click.Choice(["simple", "structured"]),
        default="simple",
        show_default=True,
    )
    def sqltrace_group(log_level: str, log_format: str) -> None:
        """Turn traced SQL plus its EXEC call into runnable SQL."""
        configure_logging(level=log_level, format_style=log_format)

    @sqltrace_group.command(name="generate", help="Generate a DECLARE block or inline SQL from trace input.")
    @click.option("--sql", "sql_text", help="SQL statement containing @0-style placeholders.", type=str, default=None)
    @click.option(
        "--sql-file", help="Read the SQL statement from a file ('-' for stdin).", type=click.File("r"), default=None
    )
    @click.option("--exec", "exec_text", help="The traced EXEC statement.", type=str, default=None)
    @click.option("--exec-file", help="Read the EXEC statement from a file.", type=click.File("r"), default=None)
    @click.option(
        "--strict/--variant",
        "strict",
        help="Fall back to inline output on any uncertain parameter instead of declaring sql_variant.",
        default=None,
    )
    @click.option("--format/--no-format", "format_output", help="Pretty-print the output.", default=None)
    @click.option(
        "--keyword-case",
        help="Keyword casing used by the formatter.",
        type=click.Choice([case.value for case in KeywordCase]),
        default=None,
    )
    @click.option("--join-lines", help="Join the SQL statement onto one line first.", is_flag=True, default=False)
    @click.option("--remember/--no-remember", help="Remember the inputs for the next run.", default=True)
    @state_file_option
    def generate_command(  # pyright: ignore[reportUnusedFunction]
        sql_text: Optional[str],
        sql_file: "Optional[IO[str]]",
        exec_text: Optional[str],
        exec_file: "Optional[IO[str]]",
        strict: Optional[bool],
        format_output: Optional[bool],
        keyword_case: Optional[str],
        join_lines: bool,
        remember: bool,
        state_file: Optional[Path],
    ) -> None:
        """Generate output SQL and print it to stdout."""
        console = Console(stderr=True, highlight=False)

        try:
            config = load_config_from_env()
            overrides: dict[str, object] = {}
            if strict is not None:
                overrides["declare_policy"] = DeclarePolicy.STRICT if strict else DeclarePolicy.VARIANT
            if format_output is not None:
                overrides["format_output"] = format_output
            if keyword_case is not None:
                overrides["keyword_case"] = keyword_case
            if join_lines:
                overrides["collapse_line_breaks"] = True
            if overrides:
                config = config.replace(**overrides)
        except ImproperConfigurationError as e:
            raise click.UsageError(str(e)) from e

        if sql_text is None and sql_file is not None:
            sql_text = sql_file.read()
        if exec_text is None and exec_file is not None:
            exec_text = exec_file.read()

        store = FileInputStateStore(state_file)
        if sql_text is None or exec_text is None:
            try:
                remembered = store.load()
            except InputStateError as e:
                console.print(f"[yellow]Ignoring remembered inputs: {escape(str(e))}[/]")
                remembered = InputState()
            sql_text = remembered.sql_text if sql_text is None else sql_text
            exec_text = remembered.exec_text if exec_text is None else exec_text

        with correlation_scope():
            result = generate(sql_text, exec_text, config=config)
        click.echo(result.output_sql)
        render_warnings(console, result)

        if remember:
            try:
                store.save(InputState(sql_text=sql_text or "", exec_text=exec_text or ""))
            except InputStateError as e:
                console.print(f"[yellow]Could not remember inputs: {escape(str(e))}[/]")

    @sqltrace_group.command(name="clear", help="Forget the remembered SQL and EXEC inputs.")
    @state_file_option
    def clear_command(state_file: Optional[Path]) -> None:  # pyright: ignore[reportUnusedFunction]
        """Delete the remembered inputs."""
        console = Console(stderr=True, highlight=False)
        try:
            FileInputStateStore(state_file).clear()
        except InputStateError as e:
            console.print(f"[red]{escape(str(e))}[/]")
            raise SystemExit(1) from e
        console.print("Remembered inputs cleared.")

    return sqltrace_group


def main() -> None:
    """Entry point for the ``sqltrace`` console script."""
    get_sqltrace_group()()
