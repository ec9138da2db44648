"""
Parsing Layer

Two-pass construction of the declarations tree:
- native: tree-sitter Go grammar, syntax error reporting
- walker: declaration extraction with byte positions
- boundaries: rune spans, container headers/footers, invariants
"""

from smgo.parsing.boundaries import BoundaryFixer, check_invariants
from smgo.parsing.native import GoSyntaxError, parse_go
from smgo.parsing.parser import error_file, parse, parse_file
from smgo.parsing.walker import Block, BlockKind, DeclarationWalker

__all__ = [
    "parse",
    "parse_file",
    "error_file",
    "parse_go",
    "GoSyntaxError",
    "DeclarationWalker",
    "Block",
    "BlockKind",
    "BoundaryFixer",
    "check_invariants",
]
