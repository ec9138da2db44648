"""
Offset translation.

tree-sitter reports byte offsets into the UTF-8 buffer while the declaration
tree is expressed in characters (runes). OffsetTranslator is the only place
where byte offsets are turned into rune offsets.
"""

from bisect import bisect_right

from smgo.errors import OffsetTranslationError
from smgo.models import Location


def _rune_width(lead: int) -> int:
    """Length in bytes of the UTF-8 sequence starting with the lead byte"""
    if lead < 0x80:
        return 1
    if 0xC0 <= lead < 0xE0:
        return 2
    if 0xE0 <= lead < 0xF0:
        return 3
    if 0xF0 <= lead < 0xF8:
        return 4
    return 0


class OffsetTranslator:
    """
    Byte offset -> rune offset mapping for a UTF-8 buffer.

    Keeps a (byte, rune) cursor that only moves forward, so resolving
    offsets in non-decreasing order costs a single linear scan in total.
    A query behind the cursor restarts the scan from the buffer start.
    """

    def __init__(self, source: bytes):
        self._source = source
        self._byte = 0
        self._rune = 0

    def to_rune(self, byte_offset: int) -> int:
        """
        Translate a byte offset into a rune offset.

        Args:
            byte_offset: Offset on a character boundary, 0..len(source)

        Returns:
            Number of characters preceding the byte offset

        Raises:
            OffsetTranslationError: If the offset is outside the buffer or
                points inside a multi-byte character
        """
        if byte_offset < 0 or byte_offset > len(self._source):
            raise OffsetTranslationError(byte_offset, f"outside of the {len(self._source)} bytes buffer")

        if byte_offset < self._byte:
            self._byte = 0
            self._rune = 0

        source = self._source
        while self._byte < byte_offset:
            width = _rune_width(source[self._byte])
            if width == 0:
                raise OffsetTranslationError(self._byte, "invalid UTF-8 lead byte")
            self._byte += width
            self._rune += 1

        if self._byte != byte_offset:
            raise OffsetTranslationError(byte_offset, "not on a character boundary")

        return self._rune


class LineIndex:
    """
    Rune offset -> Location lookup for decoded source text.

    Columns are byte columns, the unit tree-sitter reports declaration ends in.
    """

    def __init__(self, text: str):
        self._text = text
        self._starts = [0]
        self._starts.extend(i + 1 for i, ch in enumerate(text) if ch == "\n")

    def location(self, offset: int) -> Location:
        """Location of a rune offset (1-indexed line, 0-indexed byte column)"""
        row = bisect_right(self._starts, offset) - 1
        line_prefix = self._text[self._starts[row] : offset]
        return Location(row + 1, len(line_prefix.encode("utf-8")))
