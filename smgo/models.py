"""
Declaration tree models.

The tree handed to the structural merge tool: a File owning Containers and
Nodes, each annotated with a line/column LocationSpan and rune offsets.
"""

from dataclasses import dataclass, field
from enum import Enum


class NodeType(str, Enum):
    """Leaf declaration kinds."""

    PACKAGE = "package"
    IMPORT = "import"
    CONST = "const"
    VAR = "var"
    TYPE = "type"
    FUNCTION = "function"
    FIELD = "field"
    METHOD = "method"


class ContainerType(str, Enum):
    """Composite declaration kinds."""

    STRUCT = "struct"
    INTERFACE = "interface"
    IMPORT_GROUP = "import group"
    CONST_GROUP = "const group"
    VAR_GROUP = "var group"
    TYPE_GROUP = "type group"


@dataclass(frozen=True, slots=True)
class Location:
    """
    Position in the source file.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (0 for line starts and synthetic positions)
    """

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class LocationSpan:
    """Start and end Location, start <= end in document order."""

    start: Location
    end: Location

    @classmethod
    def degenerate(cls) -> "LocationSpan":
        """Span used by files that could not be parsed"""
        return cls(Location(1, 0), Location(1, 0))


@dataclass(frozen=True, slots=True)
class RuneSpan:
    """
    Character offsets from the beginning of the file (0-indexed).

    The end offset is inclusive. A span whose end is lower than its start
    ({0, -1}) marks an absent span.
    """

    start: int
    end: int

    @classmethod
    def absent(cls) -> "RuneSpan":
        return cls(0, -1)

    @property
    def is_absent(self) -> bool:
        return self.end < self.start

    def contains(self, other: "RuneSpan") -> bool:
        """Check if other lies within this span"""
        return self.start <= other.start and other.end <= self.end

    def text(self, source: str) -> str:
        """Slice the covered characters out of the decoded source"""
        if self.is_absent:
            return ""
        return source[self.start : self.end + 1]


@dataclass(slots=True)
class Node:
    """Leaf declaration (function, import, field, ...)."""

    type: NodeType
    name: str
    location_span: LocationSpan
    span: RuneSpan = field(default_factory=RuneSpan.absent)


@dataclass(slots=True)
class Container:
    """
    Composite declaration nesting other declarations.

    Attributes:
        header_span: From the declaration start through the opening delimiter
        footer_span: The closing delimiter (and the rest of its line)
        containers: Nested containers in document order
        nodes: Nested nodes in document order
    """

    type: ContainerType
    name: str
    location_span: LocationSpan
    header_span: RuneSpan = field(default_factory=RuneSpan.absent)
    footer_span: RuneSpan = field(default_factory=RuneSpan.absent)
    containers: list["Container"] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)

    @property
    def span(self) -> RuneSpan:
        """Full extent, header start through footer end"""
        return RuneSpan(self.header_span.start, self.footer_span.end)

    def children(self) -> list["Container | Node"]:
        """Nested blocks merged in document order"""
        return sorted([*self.containers, *self.nodes], key=lambda child: child.span.start)


@dataclass(frozen=True, slots=True)
class ParsingError:
    """Syntax error reported inside the tree instead of being raised."""

    location: Location
    message: str


@dataclass(slots=True)
class File:
    """
    Root of the declaration tree.

    On success the first node is always the package clause and
    parsing_errors is None. On a syntax error the tree is empty and
    parsing_errors holds exactly one entry.
    """

    location_span: LocationSpan
    footer_span: RuneSpan = field(default_factory=RuneSpan.absent)
    containers: list[Container] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)
    parsing_errors: list[ParsingError] | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.parsing_errors)

    def children(self) -> list[Container | Node]:
        """Top-level blocks merged in document order"""
        return sorted([*self.containers, *self.nodes], key=lambda child: child.span.start)
