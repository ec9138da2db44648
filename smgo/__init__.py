"""
smgo

Go declarations parser for structural diff/merge tools. Splits a Go source
file into addressable blocks (package, imports, declarations, struct and
interface members) with exact character offsets.
"""

__version__ = "0.1.0"

from .errors import (
    BoundaryError,
    OffsetTranslationError,
    SmgoError,
    SourceReadError,
    UnsupportedEncodingError,
)
from .models import (
    Container,
    ContainerType,
    File,
    Location,
    LocationSpan,
    Node,
    NodeType,
    ParsingError,
    RuneSpan,
)
from .parsing import check_invariants, parse, parse_file

__all__ = [
    "parse",
    "parse_file",
    "check_invariants",
    "File",
    "Container",
    "Node",
    "ContainerType",
    "NodeType",
    "Location",
    "LocationSpan",
    "RuneSpan",
    "ParsingError",
    "SmgoError",
    "UnsupportedEncodingError",
    "SourceReadError",
    "BoundaryError",
    "OffsetTranslationError",
]
