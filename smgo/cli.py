"""
smgo CLI

    smgo parse person.go --format json
    smgo shell /tmp/smgo.flag
"""

import sys
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from smgo.config import settings
from smgo.errors import SmgoError
from smgo.observability import get_logger, setup_logging
from smgo.parsing import parse_file
from smgo.serialization import to_json, to_yaml

app = typer.Typer(
    name="smgo",
    help="Go declarations parser for structural diff/merge tools",
    add_completion=False,
)

err_console = Console(stderr=True)
logger = get_logger(__name__)

SHELL_END = "end"


class OutputFormat(str, Enum):
    YAML = "yaml"
    JSON = "json"


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (default: SMGO_LOG_LEVEL)"),
):
    setup_logging(log_level or settings.log_level, settings.log_format)


@app.command("parse")
def parse_command(
    path: Path = typer.Argument(..., help="Go source file", exists=True, dir_okay=False),
    encoding: str = typer.Option("UTF-8", "--encoding", "-e", help="Source encoding"),
    output_format: OutputFormat = typer.Option(OutputFormat.YAML, "--format", "-f", help="Output format"),
    print_blocks: bool = typer.Option(False, "--print-blocks", help="Print the resolved blocks to stderr"),
):
    """
    Parse a Go file and print its declarations tree.
    """
    if print_blocks:
        settings.print_blocks = True

    try:
        tree = parse_file(path, encoding)
    except SmgoError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    if output_format is OutputFormat.JSON:
        typer.echo(to_json(tree, str(path)))
    else:
        typer.echo(to_yaml(tree, str(path)), nl=False)


@app.command("shell")
def shell_command(
    flag_file: Path = typer.Argument(..., help="File created once the parser is ready"),
):
    """
    Run as an external parser of the merge tool.

    Reads requests of three lines from stdin (source path, encoding, output
    path), writes the YAML tree to the output path and answers OK or KO.
    The line "end" stops the loop.
    """
    flag_file.touch()
    logger.info("shell_ready", flag_file=str(flag_file))

    while True:
        source_path = sys.stdin.readline()
        if not source_path or source_path.strip() == SHELL_END:
            break
        encoding = sys.stdin.readline().strip()
        output_path = sys.stdin.readline().strip()

        try:
            tree = parse_file(source_path.strip(), encoding)
            Path(output_path).write_text(to_yaml(tree, source_path.strip()), encoding="utf-8")
        except (SmgoError, OSError) as e:
            logger.error("shell_request_failed", source=source_path.strip(), error=str(e))
            typer.echo("KO")
            continue

        typer.echo("OK")


if __name__ == "__main__":
    app()
