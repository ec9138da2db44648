"""
Delimiter scanning over decoded Go source.

tree-sitter positions tell where a declaration starts and ends, not where
the braces or parentheses of its body are. These scanners find them in the
raw text, stepping over comments and string/rune literals so that a `}`
inside `"..."` or `// ...` is never taken for a delimiter.
"""

from typing import NamedTuple


class Delimiters(NamedTuple):
    opening: str
    closing: str


BRACES = Delimiters("{", "}")
PARENS = Delimiters("(", ")")


def skip_comment_or_literal(text: str, pos: int) -> int | None:
    """
    Skip a comment or literal starting at pos.

    Returns:
        Index just past the comment/literal, or None if none starts at pos
    """
    ch = text[pos]
    if ch == "/" and text.startswith("//", pos):
        end = text.find("\n", pos)
        return len(text) if end < 0 else end
    if ch == "/" and text.startswith("/*", pos):
        end = text.find("*/", pos + 2)
        return len(text) if end < 0 else end + 2
    if ch == "`":
        end = text.find("`", pos + 1)
        return len(text) if end < 0 else end + 1
    if ch == '"' or ch == "'":
        i = pos + 1
        while i < len(text) and text[i] != ch and text[i] != "\n":
            i += 2 if text[i] == "\\" else 1
        return min(i + 1, len(text))
    return None


def find_opening(text: str, start: int, delimiters: Delimiters) -> int:
    """
    Find the first opening delimiter at or after start.

    Args:
        text: Decoded source
        start: Rune offset to scan from
        delimiters: Delimiter pair in use

    Returns:
        Rune offset of the opening delimiter, or -1 if not found
    """
    i = start
    while i < len(text):
        skipped = skip_comment_or_literal(text, i)
        if skipped is not None:
            i = skipped
            continue
        if text[i] == delimiters.opening:
            return i
        i += 1
    return -1


def find_closing(text: str, start: int, delimiters: Delimiters) -> int:
    """
    Find the closing delimiter matching an opening one already consumed.

    Scanning starts at depth 0: nested opening/closing pairs met on the way
    are skipped, and the first closing delimiter at depth 0 is returned.

    Args:
        text: Decoded source
        start: Rune offset inside the delimited body
        delimiters: Delimiter pair in use

    Returns:
        Rune offset of the matching closing delimiter, or -1 if unbalanced
    """
    depth = 0
    i = start
    while i < len(text):
        skipped = skip_comment_or_literal(text, i)
        if skipped is not None:
            i = skipped
            continue
        ch = text[i]
        if ch == delimiters.opening:
            depth += 1
        elif ch == delimiters.closing:
            if depth == 0:
                return i
            depth -= 1
        i += 1
    return -1
