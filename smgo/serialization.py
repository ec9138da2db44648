"""
Serialization of declaration trees to the merge tool's exchange format.

    ---
    type: file
    name: person.go
    locationSpan: {start: [1, 0], end: [9, 2]}
    footerSpan: [0, -1]
    parsingErrorsDetected: false
    children:
    - type: struct
      name: Person
      locationSpan: {start: [2, 0], end: [5, 2]}
      headerSpan: [21, 42]
      footerSpan: [56, 57]
      children: [...]
"""

import json
from typing import Any

import yaml

from smgo.models import Container, File, Location, LocationSpan, Node, RuneSpan


class _FlowList(list):
    """List dumped in YAML flow style: [1, 0]"""


class _FlowDict(dict):
    """Mapping dumped in YAML flow style: {start: [1, 0], end: [9, 2]}"""


class _TreeDumper(yaml.SafeDumper):
    pass


_TreeDumper.add_representer(
    _FlowList, lambda dumper, data: dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True)
)
_TreeDumper.add_representer(
    _FlowDict, lambda dumper, data: dumper.represent_mapping("tag:yaml.org,2002:map", data, flow_style=True)
)


def _location(location: Location) -> list[int]:
    return _FlowList([location.line, location.column])


def _location_span(location_span: LocationSpan) -> dict[str, list[int]]:
    return _FlowDict(start=_location(location_span.start), end=_location(location_span.end))


def _span(span: RuneSpan) -> list[int]:
    return _FlowList([span.start, span.end])


def _block_to_dict(block: Container | Node) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": block.type.value,
        "name": block.name,
        "locationSpan": _location_span(block.location_span),
    }
    if isinstance(block, Container):
        data["headerSpan"] = _span(block.header_span)
        data["footerSpan"] = _span(block.footer_span)
        data["children"] = [_block_to_dict(child) for child in block.children()]
    else:
        data["span"] = _span(block.span)
    return data


def file_to_dict(file: File, name: str = "") -> dict[str, Any]:
    """
    Convert a declaration tree into plain data.

    Args:
        file: Parsed tree
        name: File name reported to the merge tool

    Returns:
        Dict of lists/ints/strings, containers and nodes merged in document order
    """
    data: dict[str, Any] = {
        "type": "file",
        "name": name,
        "locationSpan": _location_span(file.location_span),
        "footerSpan": _span(file.footer_span),
        "parsingErrorsDetected": file.has_errors,
        "children": [_block_to_dict(child) for child in file.children()],
    }
    if file.has_errors:
        data["parsingError"] = [
            {"location": _location(error.location), "message": error.message} for error in file.parsing_errors
        ]
    return data


def to_yaml(file: File, name: str = "") -> str:
    """Serialize a tree as a YAML document"""
    return yaml.dump(
        file_to_dict(file, name),
        Dumper=_TreeDumper,
        sort_keys=False,
        explicit_start=True,
        allow_unicode=True,
        default_flow_style=False,
    )


def to_json(file: File, name: str = "", indent: int | None = 2) -> str:
    """Serialize a tree as JSON"""
    return json.dumps(file_to_dict(file, name), indent=indent, ensure_ascii=False)
