"""
Debug output of the resolved block sequence.

Enabled process-wide with settings.print_blocks (SMGO_PRINT_BLOCKS=1) or
`smgo parse --print-blocks`. Printing never changes the returned tree.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from smgo.parsing.walker import Block


def _span(span) -> str:
    return "-" if span.is_absent else f"{span.start}..{span.end}"


def print_blocks(blocks: Sequence["Block"], console: Console | None = None) -> None:
    """
    Print blocks as a table.

    Args:
        blocks: Resolved block sequence
        console: Target console (defaults to stderr)
    """
    console = console or Console(stderr=True)

    table = Table(title=f"Blocks ({len(blocks)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Parent")
    table.add_column("Location")
    table.add_column("Span / Header")
    table.add_column("Footer")

    for i, block in enumerate(blocks):
        parent = block.parent.name if block.parent is not None else ""
        if block.node is not None:
            target = block.node
            spans = (_span(target.span), "")
        else:
            target = block.container
            spans = (_span(target.header_span), _span(target.footer_span))
        location = target.location_span
        table.add_row(
            str(i),
            block.kind.value,
            block.type,
            block.name,
            parent,
            f"{location.start.line}:{location.start.column}-{location.end.line}:{location.end.column}",
            *spans,
        )

    console.print(table)
