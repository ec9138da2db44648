"""
Declaration walker.

Walks a tree-sitter Go syntax tree and extracts the declarations the merge
tool aligns: package clause, imports, constants, variables, types,
functions and the members of struct/interface types.

The walker records byte positions only. Rune spans are filled in later by
BoundaryFixer from the Block sequence produced here.
"""

from dataclasses import dataclass
from enum import Enum

from tree_sitter import Node as TSNode
from tree_sitter import Tree

from smgo.errors import BoundaryError
from smgo.models import Container, ContainerType, File, Location, LocationSpan, Node, NodeType
from smgo.parsing.delimiters import BRACES, PARENS, Delimiters
from smgo.parsing.native import node_text


class BlockKind(str, Enum):
    NODE = "node"
    CONTAINER = "container"


@dataclass(slots=True)
class Block:
    """
    Working record between the walker and the boundary fixer.

    Attributes:
        kind: Whether the block finalizes a Node or a Container
        node: Node being finalized (NODE blocks)
        container: Container being finalized (CONTAINER blocks)
        parent: Owning container, None for top-level blocks
        start_byte: Declaration start
        end_byte: Declaration end (exclusive)
        anchor_byte: Where the scan for the opening delimiter starts
        body_end_byte: End of the delimited body (just past the closing delimiter)
        delimiters: Delimiter pair of the container body
    """

    kind: BlockKind
    node: Node | None
    container: Container | None
    parent: Container | None
    start_byte: int
    end_byte: int
    anchor_byte: int = 0
    body_end_byte: int = 0
    delimiters: Delimiters = BRACES

    @property
    def type(self) -> str:
        target = self.node if self.kind is BlockKind.NODE else self.container
        return target.type.value

    @property
    def name(self) -> str:
        target = self.node if self.kind is BlockKind.NODE else self.container
        return target.name


# Grouped declarations: spec node types and the container used for 2+ specs
_GROUPS: dict[str, tuple[NodeType, ContainerType, frozenset[str]]] = {
    "import_declaration": (NodeType.IMPORT, ContainerType.IMPORT_GROUP, frozenset({"import_spec"})),
    "const_declaration": (NodeType.CONST, ContainerType.CONST_GROUP, frozenset({"const_spec"})),
    "var_declaration": (NodeType.VAR, ContainerType.VAR_GROUP, frozenset({"var_spec"})),
    "type_declaration": (NodeType.TYPE, ContainerType.TYPE_GROUP, frozenset({"type_spec", "type_alias"})),
}

_COMPOSITES: dict[str, ContainerType] = {
    "struct_type": ContainerType.STRUCT,
    "interface_type": ContainerType.INTERFACE,
}

_INTERFACE_METHODS = frozenset({"method_elem", "method_spec"})


class DeclarationWalker:
    """
    Extracts declaration blocks from a Go syntax tree.

    Blocks are emitted in document order, a container always before its
    members, so the sequence doubles as a pre-order walk of the resulting
    declaration tree.
    """

    def __init__(self, source: bytes):
        self._source = source
        self._file: File | None = None
        self._blocks: list[Block] = []
        self._file_end: Location | None = None

    def walk(self, tree: Tree) -> tuple[File, list[Block]]:
        """
        Walk the syntax tree.

        Args:
            tree: Error-free tree whose first declaration is the package clause

        Returns:
            (File root, ordered block sequence)

        Raises:
            BoundaryError: If the tree has no package clause
        """
        for child in tree.root_node.named_children:
            self._visit_top_level(child)

        if self._file is None:
            raise BoundaryError("Syntax tree has no package clause")

        self._file.location_span = LocationSpan(Location(1, 0), self._file_end)
        return self._file, self._blocks

    def _visit_top_level(self, node: TSNode) -> None:
        if node.type == "package_clause":
            self._visit_package(node)
        elif self._file is None and node.type != "comment":
            raise BoundaryError("Syntax tree has no package clause", {"found": node.type})
        elif node.type in _GROUPS:
            self._visit_declaration(node)
        elif node.type in ("function_declaration", "method_declaration"):
            self._add_node(NodeType.FUNCTION, self._field_text(node, "name"), node, parent=None)
        else:
            # comments and unknown constructs: no block, no descent
            return
        self._file_end = self._end_location(node)

    def _visit_package(self, node: TSNode) -> None:
        name = ""
        for child in node.named_children:
            if child.type == "package_identifier":
                name = node_text(child, self._source)
        self._file = File(location_span=LocationSpan.degenerate())
        self._add_node(NodeType.PACKAGE, name, node, parent=None)

    def _visit_declaration(self, node: TSNode) -> None:
        """import/const/var/type declaration, single or grouped"""
        node_type, group_type, spec_types = _GROUPS[node.type]
        specs = self._specs(node, spec_types)

        if len(specs) < 2:
            spec = specs[0] if specs else None
            self._visit_spec(node_type, spec, node, parent=None)
            return

        group = Container(group_type, node_text(node.children[0], self._source), self._location_span(node))
        self._add_container(group, node, parent=None, anchor=node, body=node, delimiters=PARENS)
        for spec in specs:
            self._visit_spec(node_type, spec, spec, parent=group)

    def _visit_spec(self, node_type: NodeType, spec: TSNode | None, decl: TSNode, parent: Container | None) -> None:
        """
        Emit the block of one spec.

        Args:
            node_type: Node type of the enclosing declaration keyword
            spec: Spec node providing the name (None for an empty group)
            decl: Node whose extent the block covers
            parent: Owning container
        """
        if spec is None:
            self._add_node(node_type, "", decl, parent)
            return

        if node_type is NodeType.IMPORT:
            path = node_text(spec.child_by_field_name("path"), self._source)
            self._add_node(node_type, path.strip('"`'), decl, parent)
        elif node_type is NodeType.TYPE:
            name = self._field_text(spec, "name")
            type_node = spec.child_by_field_name("type")
            if spec.type == "type_spec" and type_node is not None and type_node.type in _COMPOSITES:
                self._visit_composite(name, type_node, decl, parent)
            else:
                self._add_node(node_type, name, decl, parent)
        else:
            names = [node_text(child, self._source) for child in spec.children_by_field_name("name")]
            self._add_node(node_type, ", ".join(names), decl, parent)

    def _visit_composite(self, name: str, type_node: TSNode, decl: TSNode, parent: Container | None) -> None:
        """struct/interface container and its members"""
        container = Container(_COMPOSITES[type_node.type], name, self._location_span(decl))
        self._add_container(container, decl, parent, anchor=type_node, body=type_node, delimiters=BRACES)

        if type_node.type == "struct_type":
            for field_list in type_node.named_children:
                if field_list.type == "field_declaration_list":
                    self._visit_fields(field_list, container)
        else:
            self._visit_interface(type_node, container)

    def _visit_fields(self, field_list: TSNode, container: Container) -> None:
        for field_decl in field_list.named_children:
            if field_decl.type != "field_declaration":
                continue

            names = [node_text(child, self._source) for child in field_decl.children_by_field_name("name")]
            type_node = field_decl.child_by_field_name("type")

            if names and type_node is not None and type_node.type in _COMPOSITES:
                self._visit_composite(", ".join(names), type_node, field_decl, container)
            elif names:
                self._add_node(NodeType.FIELD, ", ".join(names), field_decl, container)
            else:
                # embedded field
                embedded = node_text(type_node, self._source) if type_node is not None else ""
                self._add_node(NodeType.FIELD, embedded, field_decl, container)

    def _visit_interface(self, interface: TSNode, container: Container) -> None:
        for elem in interface.named_children:
            if elem.type == "comment":
                continue
            if elem.type == "method_spec_list":
                self._visit_interface(elem, container)
            elif elem.type in _INTERFACE_METHODS:
                self._add_node(NodeType.METHOD, self._field_text(elem, "name"), elem, container)
            else:
                # embedded interface or type constraint
                self._add_node(NodeType.FIELD, node_text(elem, self._source), elem, container)

    def _specs(self, node: TSNode, spec_types: frozenset[str]) -> list[TSNode]:
        specs = []
        for child in node.named_children:
            if child.type in spec_types:
                specs.append(child)
            elif child.type.endswith("_spec_list"):
                specs.extend(spec for spec in child.named_children if spec.type in spec_types)
        return specs

    def _add_node(self, node_type: NodeType, name: str, decl: TSNode, parent: Container | None) -> None:
        node = Node(type=node_type, name=name, location_span=self._location_span(decl))
        if parent is None:
            self._file.nodes.append(node)
        else:
            parent.nodes.append(node)
        self._blocks.append(
            Block(
                kind=BlockKind.NODE,
                node=node,
                container=None,
                parent=parent,
                start_byte=decl.start_byte,
                end_byte=decl.end_byte,
            )
        )

    def _add_container(
        self,
        container: Container,
        decl: TSNode,
        parent: Container | None,
        anchor: TSNode,
        body: TSNode,
        delimiters: Delimiters,
    ) -> None:
        if parent is None:
            self._file.containers.append(container)
        else:
            parent.containers.append(container)
        self._blocks.append(
            Block(
                kind=BlockKind.CONTAINER,
                node=None,
                container=container,
                parent=parent,
                start_byte=decl.start_byte,
                end_byte=decl.end_byte,
                anchor_byte=anchor.start_byte,
                body_end_byte=body.end_byte,
                delimiters=delimiters,
            )
        )

    def _field_text(self, node: TSNode, field_name: str) -> str:
        child = node.child_by_field_name(field_name)
        return node_text(child, self._source) if child is not None else ""

    def _location_span(self, node: TSNode) -> LocationSpan:
        """Native positions; the start is moved by BoundaryFixer"""
        row, column = node.start_point
        return LocationSpan(Location(row + 1, column), self._end_location(node))

    def _end_location(self, node: TSNode) -> Location:
        # go/parser convention: 1-based column just past the last character
        row, column = node.end_point
        return Location(row + 1, column + 1)
