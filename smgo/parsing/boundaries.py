"""
Boundary fixing.

Turns the byte positions recorded by DeclarationWalker into rune spans that
tile the whole file:

- every block starts right after the previous one ends, so leading blank
  lines and comments belong to the declaration that follows them;
- every block ends at the end of its last line (trailing blanks, `;` and a
  line comment included) unless more code follows on that line;
- a container is split into a header (through the opening delimiter), its
  members, and a footer (from the last member through the closing
  delimiter).

Blocks are processed in document order, so byte offsets are translated with
a single forward pass over the buffer.
"""

from collections.abc import Sequence

from smgo.errors import BoundaryError
from smgo.models import Container, File, LocationSpan, Node, RuneSpan
from smgo.observability import get_logger
from smgo.parsing.delimiters import find_closing, find_opening
from smgo.parsing.offsets import LineIndex, OffsetTranslator
from smgo.parsing.walker import Block, BlockKind

logger = get_logger(__name__)

_BLANKS = " \t\r\f\v"


class BoundaryFixer:
    """Rewrites the spans of one parsed file."""

    def __init__(self, source: bytes):
        self._text = source.decode("utf-8")
        self._offsets = OffsetTranslator(source)
        self._lines = LineIndex(self._text)
        self._cursor = 0

    def fix(self, file: File, blocks: Sequence[Block]) -> File:
        """
        Fix the boundaries of every block, in place.

        Args:
            file: Root produced by the walker
            blocks: Block sequence in document order, containers before members

        Returns:
            The same File, with rune spans

        Raises:
            BoundaryError: If offsets cannot be translated or the resulting
                blocks overlap, are out of order, or escape their container
        """
        open_blocks: list[Block] = []

        for block in blocks:
            # post-order footers: close containers this block is not part of
            while open_blocks and open_blocks[-1].container is not block.parent:
                self._close_container(open_blocks.pop())
            if block.parent is not None and not open_blocks:
                raise BoundaryError("Block outside of its container", {"block": block.name})

            if block.kind is BlockKind.CONTAINER:
                self._open_container(block)
                open_blocks.append(block)
            else:
                self._fix_node(block)

        while open_blocks:
            self._close_container(open_blocks.pop())

        if self._cursor < len(self._text):
            file.footer_span = RuneSpan(self._cursor, len(self._text) - 1)
        else:
            file.footer_span = RuneSpan.absent()

        check_invariants(file)
        logger.debug("boundaries_fixed", blocks=len(blocks), runes=len(self._text))
        return file

    def _fix_node(self, block: Block) -> None:
        node = block.node
        start = self._claim_start(block)
        end = self._line_end(self._offsets.to_rune(block.end_byte))

        node.span = RuneSpan(start, end)
        node.location_span = self._relocate(node.location_span, start)
        self._cursor = end + 1

    def _open_container(self, block: Block) -> None:
        container = block.container
        start = self._claim_start(block)

        anchor = self._offsets.to_rune(block.anchor_byte)
        opening = find_opening(self._text, anchor, block.delimiters)
        if opening < 0:
            raise BoundaryError(
                f"Opening '{block.delimiters.opening}' not found",
                {"block": block.name, "anchor": anchor},
            )

        header_end = self._line_end(opening + 1)
        container.header_span = RuneSpan(start, header_end)
        container.location_span = self._relocate(container.location_span, start)
        self._cursor = header_end + 1

    def _close_container(self, block: Block) -> None:
        container = block.container

        closing = find_closing(self._text, self._cursor, block.delimiters)
        body_end = self._offsets.to_rune(block.body_end_byte)
        if closing < 0 or closing + 1 != body_end:
            raise BoundaryError(
                f"Closing '{block.delimiters.closing}' does not match the declaration body",
                {"block": block.name, "found": closing, "expected": body_end - 1},
            )

        # a struct tag or a group's ')' may follow the body
        end = self._line_end(self._offsets.to_rune(block.end_byte))
        container.footer_span = RuneSpan(self._cursor, end)
        self._cursor = end + 1

    def _claim_start(self, block: Block) -> int:
        """Start of the block's span; fails if the declaration overlaps the previous block"""
        declaration_start = self._offsets.to_rune(block.start_byte)
        if declaration_start < self._cursor:
            raise BoundaryError(
                "Declaration starts before the end of the previous block",
                {"block": block.name, "start": declaration_start, "previous_end": self._cursor - 1},
            )
        return self._cursor

    def _line_end(self, pos: int) -> int:
        """
        Last rune of a block whose declaration ends (exclusively) at pos.

        Trailing blanks, one `;` and a line comment are absorbed up to and
        including the newline. If code follows on the same line the block
        ends at its last character (or the `;`).
        """
        text = self._text
        last = pos - 1
        i = self._skip_blanks(pos)

        if i < len(text) and text[i] == ";":
            last = i
            i = self._skip_blanks(i + 1)

        if text.startswith("//", i):
            newline = text.find("\n", i)
            i = len(text) if newline < 0 else newline
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            if close >= 0 and "\n" not in text[i:close]:
                i = self._skip_blanks(close + 2)

        if i >= len(text):
            return len(text) - 1
        if text[i] == "\n":
            return i
        return last

    def _skip_blanks(self, pos: int) -> int:
        text = self._text
        while pos < len(text) and text[pos] in _BLANKS:
            pos += 1
        return pos

    def _relocate(self, location_span: LocationSpan, start: int) -> LocationSpan:
        return LocationSpan(self._lines.location(start), location_span.end)


def check_invariants(file: File) -> None:
    """
    Validate a finished declaration tree.

    Siblings must be in ascending order without overlapping, and the members
    of a container must lie between its header and its footer.

    Raises:
        BoundaryError: On the first violation found
    """
    _check_ordered("file", file.containers)
    _check_ordered("file", file.nodes)
    _check_siblings("file", file.children(), bounds=None)


def _check_siblings(owner: str, children: list[Container | Node], bounds: RuneSpan | None) -> None:
    previous_end = bounds.start - 1 if bounds is not None else -1

    for child in children:
        if isinstance(child, Container):
            _check_container(child)

        span = child.span
        if span.is_absent:
            raise BoundaryError("Block span was not resolved", {"owner": owner, "block": child.name})
        if span.start <= previous_end:
            raise BoundaryError(
                "Blocks overlap or are out of order",
                {"owner": owner, "block": child.name, "start": span.start, "previous_end": previous_end},
            )
        if bounds is not None and not bounds.contains(span):
            raise BoundaryError(
                "Block escapes its container",
                {"owner": owner, "block": child.name, "span": (span.start, span.end)},
            )
        previous_end = span.end


def _check_container(container: Container) -> None:
    header, footer = container.header_span, container.footer_span
    if header.is_absent or footer.is_absent or header.end >= footer.start:
        raise BoundaryError(
            "Container header/footer not resolved",
            {"block": container.name, "header": (header.start, header.end), "footer": (footer.start, footer.end)},
        )

    _check_ordered(container.name, container.containers)
    _check_ordered(container.name, container.nodes)
    _check_siblings(container.name, container.children(), RuneSpan(header.end + 1, footer.start - 1))


def _check_ordered(owner: str, blocks: Sequence[Container | Node]) -> None:
    starts = [block.span.start for block in blocks]
    if starts != sorted(starts):
        raise BoundaryError("Blocks are not in document order", {"owner": owner})
