"""
chartlang command line.

Commands:
- parse: compile a chart file into a statechart configuration (JSON or YAML)
- tokens: show the token stream of a chart file
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from chartlang.cli.utils import configure_logging, load_cli_config, read_source, version_callback
from chartlang.core.errors import InvalidIndentationError
from chartlang.core.lexer import tokenize
from chartlang.core.manifest import OUTPUT_FORMATS
from chartlang.core.parser_impl import parse
from chartlang.core.serialize import dump

app = typer.Typer(
    help="chartlang - compile indentation-based statecharts into configuration trees",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level (overrides chartlang.toml)",
    ),
) -> None:
    """chartlang CLI main callback for global options."""
    ctx.obj = {"log_level": log_level.upper() if log_level else None}


def _log_level(ctx: typer.Context, configured: str) -> str:
    override = (ctx.obj or {}).get("log_level")
    return override or configured


@app.command(name="parse")
def parse_command(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="Chart file to compile"),  # noqa: B008
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (default: stdout)",
    ),
    output_format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format (json or yaml; default from chartlang.toml, else json)",
    ),
    indent: int | None = typer.Option(
        None,
        "--indent",
        help="Indentation of the output",
        min=0,
    ),
    root_id: str | None = typer.Option(
        None,
        "--root-id",
        help="Id of the synthetic root when the file has several top-level states",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to chartlang.toml (default: nearest one above the source)",
    ),
) -> None:
    """
    Compile a chart file into a statechart configuration.

    Examples:
        chartlang parse door.chart                 # JSON to stdout
        chartlang parse door.chart -f yaml         # YAML to stdout
        chartlang parse door.chart -o door.json    # Save to file
    """
    settings = load_cli_config(config, source)
    configure_logging(_log_level(ctx, settings.logging.level))

    chosen_format = (output_format or settings.output.format).lower()
    if chosen_format not in OUTPUT_FORMATS:
        typer.echo(f"Unknown format {chosen_format!r} (expected json or yaml)", err=True)
        raise typer.Exit(code=1)

    text = read_source(source)
    try:
        result = parse(text, root_id=root_id or settings.parser.root_id)
    except InvalidIndentationError as e:
        typer.echo(f"{source}:{e}", err=True)
        raise typer.Exit(code=1)

    if not result.ok:
        typer.echo(f"{source}:{result.message}", err=True)
        raise typer.Exit(code=1)

    content = dump(result, chosen_format, settings.output.indent if indent is None else indent)

    if output:
        output.write_text(content if content.endswith("\n") else content + "\n", encoding="utf-8")
        typer.echo(f"Statechart {result.id!r} written to {output}")
    else:
        typer.echo(content.rstrip("\n"))


@app.command(name="tokens")
def tokens_command(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="Chart file to tokenize"),  # noqa: B008
    table: bool = typer.Option(
        False,
        "--table",
        help="Render the tokens as a table",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to chartlang.toml (default: nearest one above the source)",
    ),
) -> None:
    """
    Show the token stream of a chart file, one token per line.

    Useful to see where INDENT and DEDENT tokens are produced.
    """
    settings = load_cli_config(config, source)
    configure_logging(_log_level(ctx, settings.logging.level))

    text = read_source(source)
    try:
        tokens = tokenize(text)
    except InvalidIndentationError as e:
        typer.echo(f"{source}:{e}", err=True)
        raise typer.Exit(code=1)

    if table:
        grid = Table(title=str(source))
        grid.add_column("Line", justify="right")
        grid.add_column("Col", justify="right")
        grid.add_column("Type")
        grid.add_column("Text")
        for token in tokens:
            grid.add_row(str(token.line), str(token.col), token.type.value, token.text or "")
        console.print(grid)
        return

    for token in tokens:
        line = f"{token.line}:{token.col} {token.type.value}"
        if token.text is not None:
            line += f" {token.text!r}"
        typer.echo(line)


def main(argv: list[str] | None = None) -> None:
    app(args=argv if argv is not None else sys.argv[1:], standalone_mode=True)


if __name__ == "__main__":
    main()
