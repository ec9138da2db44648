"""
Boundary fixer: rune spans, headers/footers and invariant checks.
"""

import pytest

from smgo.errors import BoundaryError, OffsetTranslationError
from smgo.models import Container, ContainerType, File, Location, LocationSpan, Node, NodeType, RuneSpan
from smgo.parsing.boundaries import BoundaryFixer, check_invariants
from smgo.parsing.walker import DeclarationWalker
from tests.helpers.go_helpers import location_span, parse_go_code, tiles


def fix(code: str):
    source = code.encode("utf-8")
    file, blocks = DeclarationWalker(source).walk(parse_go_code(code))
    return BoundaryFixer(source).fix(file, blocks), blocks


class TestBoundaryFixer:
    def test_node_spans_extend_to_line_end(self):
        code = "package p\n\nconst A = 1 // one\n"
        file, _ = fix(code)

        assert file.nodes[0].span == RuneSpan(0, 9)
        assert file.nodes[1].span == RuneSpan(10, len(code) - 1)

    def test_locations_start_at_span_start(self):
        file, _ = fix("package p\n\n\nfunc F() {}\n")
        func = file.nodes[1]

        assert func.location_span == location_span(2, 0, 4, 12)

    def test_start_columns_count_bytes(self):
        code = "package p\n\nvar a = \"é\"; var b = 2\n"
        file, _ = fix(code)
        a, b = file.nodes[1], file.nodes[2]

        assert a.location_span.end == Location(3, 13)
        assert b.location_span.start == Location(3, 13)
        assert b.location_span.end == Location(3, 24)
        assert b.span.text(code) == " var b = 2\n"

    def test_header_and_footer(self):
        code = "package p\n\ntype T struct { // doc\n\tA int\n} // end\n"
        file, _ = fix(code)
        container = file.containers[0]

        assert container.header_span.text(code) == "\ntype T struct { // doc\n"
        assert container.nodes[0].span.text(code) == "\tA int\n"
        assert container.footer_span.text(code) == "} // end\n"

    def test_multibyte_spans(self):
        code = "package p\n\n// ñandú 日本\ntype T struct {\n\tÁ int\n}\n"
        file, _ = fix(code)
        container = file.containers[0]

        assert container.header_span.start == code.index("\n\n// ñandú") + 1
        assert container.header_span.end == code.index("{\n") + 1
        assert container.nodes[0].span.text(code) == "\tÁ int\n"
        assert container.footer_span == RuneSpan(len(code) - 2, len(code) - 1)

    def test_single_spec_type_group_keeps_parenthesis_in_footer(self):
        code = "package p\n\ntype (\n\tT struct {\n\t\tA int\n\t}\n)\n"
        file, _ = fix(code)
        container = file.containers[0]

        assert container.name == "T"
        assert container.header_span.text(code) == "\ntype (\n\tT struct {\n"
        assert container.footer_span.text(code) == "\t}\n)\n"

    def test_trailing_content_becomes_file_footer(self):
        code = "package p\n\nfunc F() {}\n\n// eof\n"
        file, _ = fix(code)

        assert file.footer_span.text(code) == "\n// eof\n"

    def test_no_trailing_content(self):
        file, _ = fix("package p\n")

        assert file.footer_span.is_absent

    def test_blocks_tile_the_source(self):
        code = "package p\n\nimport (\n\t\"a\"\n\t\"b\"\n)\n\ntype T struct{ A, B int }\n\nvar x = map[string]struct{}{}\n"
        file, _ = fix(code)

        assert "".join(tiles(file, code)) == code

    def test_misaligned_offset_is_fatal(self):
        code = "package p\n\nconst Ñ = 1\n"
        source = code.encode("utf-8")
        file, blocks = DeclarationWalker(source).walk(parse_go_code(code))
        blocks[1].end_byte = source.index("Ñ".encode("utf-8")) + 1

        with pytest.raises(OffsetTranslationError):
            BoundaryFixer(source).fix(file, blocks)

    def test_overlapping_declarations_are_fatal(self):
        code = "package p\n\nconst A = 1\n"
        source = code.encode("utf-8")
        file, blocks = DeclarationWalker(source).walk(parse_go_code(code))
        blocks[1].start_byte = 0

        with pytest.raises(BoundaryError, match="before the end of the previous block"):
            BoundaryFixer(source).fix(file, blocks)

    def test_mismatched_closing_delimiter_is_fatal(self):
        code = "package p\n\ntype T struct {\n\tA int\n}\n"
        source = code.encode("utf-8")
        file, blocks = DeclarationWalker(source).walk(parse_go_code(code))
        blocks[1].body_end_byte -= 1

        with pytest.raises(BoundaryError, match="does not match"):
            BoundaryFixer(source).fix(file, blocks)

    def test_block_outside_open_container_is_fatal(self):
        code = "package p\n\ntype T struct {\n\tA int\n}\n\nfunc F() {}\n"
        source = code.encode("utf-8")
        file, blocks = DeclarationWalker(source).walk(parse_go_code(code))
        blocks[3].parent = Container(ContainerType.STRUCT, "U", LocationSpan.degenerate())

        with pytest.raises(BoundaryError, match="outside of its container"):
            BoundaryFixer(source).fix(file, blocks)


def _node(name: str, start: int, end: int) -> Node:
    return Node(NodeType.FIELD, name, LocationSpan.degenerate(), RuneSpan(start, end))


class TestCheckInvariants:
    def _file(self, containers=(), nodes=()) -> File:
        return File(
            location_span=LocationSpan.degenerate(),
            containers=list(containers),
            nodes=[Node(NodeType.PACKAGE, "p", LocationSpan.degenerate(), RuneSpan(0, 9)), *nodes],
        )

    def _container(self, header: RuneSpan, footer: RuneSpan, nodes=()) -> Container:
        return Container(ContainerType.STRUCT, "T", LocationSpan.degenerate(), header, footer, [], list(nodes))

    def test_valid_tree(self):
        container = self._container(RuneSpan(10, 20), RuneSpan(31, 32), [_node("A", 21, 25), _node("B", 26, 30)])

        check_invariants(self._file([container], [_node("F", 33, 40)]))

    def test_overlapping_siblings(self):
        with pytest.raises(BoundaryError, match="overlap"):
            check_invariants(self._file(nodes=[_node("A", 10, 20), _node("B", 20, 30)]))

    def test_unresolved_span(self):
        with pytest.raises(BoundaryError, match="not resolved"):
            check_invariants(self._file(nodes=[_node("A", 0, -1)]))

    def test_member_escapes_container(self):
        container = self._container(RuneSpan(10, 20), RuneSpan(31, 32), [_node("A", 21, 31)])

        with pytest.raises(BoundaryError, match="escapes"):
            check_invariants(self._file([container]))

    def test_member_overlaps_header(self):
        container = self._container(RuneSpan(10, 20), RuneSpan(31, 32), [_node("A", 20, 25)])

        with pytest.raises(BoundaryError):
            check_invariants(self._file([container]))

    def test_unresolved_footer(self):
        container = self._container(RuneSpan(10, 20), RuneSpan.absent())

        with pytest.raises(BoundaryError, match="header/footer"):
            check_invariants(self._file([container]))

    def test_members_out_of_order(self):
        container = self._container(RuneSpan(10, 20), RuneSpan(31, 32), [_node("B", 26, 30), _node("A", 21, 25)])

        with pytest.raises(BoundaryError, match="document order"):
            check_invariants(self._file([container]))
