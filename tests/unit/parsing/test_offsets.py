"""
Byte -> rune offset translation and line lookup.
"""

import pytest

from smgo.errors import OffsetTranslationError
from smgo.models import Location
from smgo.parsing.offsets import LineIndex, OffsetTranslator


class TestOffsetTranslator:
    def test_ascii_is_identity(self):
        translator = OffsetTranslator(b"package main\n")

        assert [translator.to_rune(i) for i in range(14)] == list(range(14))

    def test_multibyte_characters(self):
        # ñ: 2 bytes, 日: 3 bytes, 😀: 4 bytes
        source = "añ日😀z".encode("utf-8")
        translator = OffsetTranslator(source)

        assert translator.to_rune(0) == 0
        assert translator.to_rune(1) == 1
        assert translator.to_rune(3) == 2
        assert translator.to_rune(6) == 3
        assert translator.to_rune(10) == 4
        assert translator.to_rune(11) == 5

    def test_backward_query_restarts(self):
        source = "ñññ".encode("utf-8")
        translator = OffsetTranslator(source)

        assert translator.to_rune(6) == 3
        assert translator.to_rune(2) == 1
        assert translator.to_rune(4) == 2

    def test_offset_inside_character(self):
        translator = OffsetTranslator("日本".encode("utf-8"))

        with pytest.raises(OffsetTranslationError, match="not on a character boundary"):
            translator.to_rune(1)

    def test_translator_recovers_after_misaligned_offset(self):
        translator = OffsetTranslator("日本".encode("utf-8"))

        with pytest.raises(OffsetTranslationError):
            translator.to_rune(4)
        assert translator.to_rune(6) == 2

    @pytest.mark.parametrize("offset", [-1, 4])
    def test_offset_outside_buffer(self, offset):
        translator = OffsetTranslator(b"abc")

        with pytest.raises(OffsetTranslationError, match="outside") as exc_info:
            translator.to_rune(offset)
        assert exc_info.value.byte_offset == offset

    def test_end_of_buffer_is_valid(self):
        source = "x日".encode("utf-8")

        assert OffsetTranslator(source).to_rune(len(source)) == 2


class TestLineIndex:
    def test_locations(self):
        index = LineIndex("ab\n\nñx\n")

        assert index.location(0) == Location(1, 0)
        assert index.location(1) == Location(1, 1)
        assert index.location(2) == Location(1, 2)
        assert index.location(3) == Location(2, 0)
        assert index.location(4) == Location(3, 0)
        assert index.location(5) == Location(3, 2)
        assert index.location(6) == Location(3, 3)
        assert index.location(7) == Location(4, 0)

    def test_empty_text(self):
        index = LineIndex("")

        assert index.location(0) == Location(1, 0)

    def test_columns_count_bytes(self):
        index = LineIndex("x = \"日本\"; y\n")

        assert index.location(4) == Location(1, 4)
        assert index.location(5) == Location(1, 5)
        assert index.location(6) == Location(1, 8)
        assert index.location(9) == Location(1, 13)
