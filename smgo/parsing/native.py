"""
Go parser backed by tree-sitter.

tree-sitter recovers from syntax errors; the declaration tree must not.
parse_go turns tree-sitter output into either a usable syntax tree or a
single GoSyntaxError, the way go/parser would report it.
"""

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

from smgo.observability import get_logger

logger = get_logger(__name__)

_LANGUAGE: Language | None = None

_TOP_LEVEL_DECLARATIONS = frozenset(
    {
        "import_declaration",
        "const_declaration",
        "var_declaration",
        "type_declaration",
        "function_declaration",
        "method_declaration",
    }
)


class GoSyntaxError(Exception):
    """
    First syntax error found in a Go source.

    Attributes:
        offset: Byte offset of the error
        line: Line number (1-indexed)
        column: Byte column (0-indexed)
        message: go/parser style diagnostic, "line:col: reason"
    """

    def __init__(self, offset: int, line: int, column: int, reason: str):
        self.offset = offset
        self.line = line
        self.column = column
        self.message = f"{line}:{column + 1}: {reason}"
        super().__init__(self.message)


def get_language() -> Language:
    """Get the Go grammar, loaded once per process"""
    global _LANGUAGE
    if _LANGUAGE is None:
        _LANGUAGE = Language(tsgo.language())
        logger.debug("go_grammar_loaded")
    return _LANGUAGE


def parse_go(source: bytes) -> Tree:
    """
    Parse Go source code.

    A new Parser is created per call; only the grammar is shared.

    Args:
        source: Source bytes

    Returns:
        tree-sitter Tree without error nodes, starting with a package clause

    Raises:
        GoSyntaxError: On invalid UTF-8, a syntax error, or a missing
            package clause
    """
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        line, column = _point_at(source, e.start)
        raise GoSyntaxError(e.start, line, column, "illegal UTF-8 encoding") from e

    parser = Parser(get_language())
    tree = parser.parse(source)
    root = tree.root_node

    if root.has_error:
        error_node = _first_error(root)
        if error_node is not None:
            raise _error_from_node(error_node, source)

    _check_top_level(root, source)
    return tree


def node_text(node: Node, source: bytes) -> str:
    """Get the source text of a node"""
    return source[node.start_byte : node.end_byte].decode("utf-8")


def _point_at(source: bytes, offset: int) -> tuple[int, int]:
    line_start = source.rfind(b"\n", 0, offset) + 1
    return source.count(b"\n", 0, offset) + 1, offset - line_start


def _first_error(node: Node) -> Node | None:
    """First ERROR or MISSING node in document order"""
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _first_token(node: Node, source: bytes) -> str:
    while node.child_count > 0:
        node = node.children[0]
    text = node_text(node, source).split("\n", 1)[0]
    if not text:
        return "EOF"
    return text if len(text) <= 32 else text[:32] + "..."


def _error_from_node(node: Node, source: bytes) -> GoSyntaxError:
    row, column = node.start_point
    if node.is_missing:
        reason = f"expected '{node.type}'"
    else:
        reason = f"syntax error: unexpected '{_first_token(node, source)}'"
    logger.debug("go_syntax_error", line=row + 1, column=column, reason=reason)
    return GoSyntaxError(node.start_byte, row + 1, column, reason)


def _check_top_level(root: Node, source: bytes) -> None:
    """The package clause comes first and only declarations follow it"""
    seen_package = False
    for child in root.named_children:
        if child.type == "comment":
            continue
        if not seen_package and child.type == "package_clause":
            seen_package = True
            continue

        if child.type in _TOP_LEVEL_DECLARATIONS and seen_package:
            continue

        row, column = child.start_point
        found = _first_token(child, source)
        expected = "declaration" if seen_package else "'package'"
        raise GoSyntaxError(child.start_byte, row + 1, column, f"expected {expected}, found '{found}'")

    if not seen_package:
        row, column = root.end_point
        raise GoSyntaxError(len(source), row + 1, column, "expected 'package', found 'EOF'")
