"""Load syntax trees from the JSON dump of the external PowerShell parser."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pwsh_lowering.src.common.source_location import SourceLocation, UNKNOWN_LOCATION

from .nodes import SyntaxKind, SyntaxNode

logger = logging.getLogger(__name__)

# JSON key -> SyntaxNode field; the parser script emits camelCase keys
_FIELD_ALIASES: Dict[str, str] = {
    "code": "code",
    "name": "name",
    "operator": "operator",
    "unaryType": "unary_token",
    "unary_token": "unary_token",
    "codeType": "type_annotation",
    "type_annotation": "type_annotation",
}

_LOCATION_ALIASES: Dict[str, str] = {
    "file": "file",
    "startLine": "line",
    "line": "line",
    "startColumn": "column",
    "column": "column",
    "endLine": "end_line",
    "end_line": "end_line",
    "endColumn": "end_column",
    "end_column": "end_column",
}


class SyntaxLoadError(ValueError):
    """Raised when a syntax tree document is malformed."""


def load_syntax_tree(
    data: Mapping[str, Any], source_file: Optional[str] = None
) -> SyntaxNode:
    """Build a :class:`SyntaxNode` tree from a decoded JSON document.

    Args:
        data: Root node mapping with ``type`` (or ``kind``), optional scalar
            fields and a ``children`` list
        source_file: File name used for locations that do not name one

    Raises:
        SyntaxLoadError: If a node is not a mapping, lacks a tag or has
            non-list children
    """
    return _build_node(data, source_file, path="$")


def load_syntax_json(text: str, source_file: Optional[str] = None) -> SyntaxNode:
    """Parse JSON text and build its syntax tree."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SyntaxLoadError(f"Invalid syntax tree JSON: {exc}") from exc
    return load_syntax_tree(data, source_file)


def load_syntax_file(file_path: Path) -> SyntaxNode:
    """Read a syntax tree dump from disk."""
    try:
        with open(file_path, "r", encoding="utf-8") as handle:
            text = handle.read()
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Syntax tree file not found: {file_path}") from exc
    return load_syntax_json(text, str(file_path))


def _build_node(data: Any, source_file: Optional[str], path: str) -> SyntaxNode:
    if not isinstance(data, Mapping):
        raise SyntaxLoadError(f"{path}: expected an object, got {type(data).__name__}")

    tag = data.get("type", data.get("kind"))
    if not isinstance(tag, str) or not tag:
        raise SyntaxLoadError(f"{path}: node has no 'type' tag")

    kind = SyntaxKind.from_tag(tag)
    if kind is SyntaxKind.UNKNOWN:
        logger.debug("Unrecognised syntax tag %s at %s", tag, path)

    fields: Dict[str, Any] = {}
    for key, field_name in _FIELD_ALIASES.items():
        value = data.get(key)
        if value is not None and field_name not in fields:
            fields[field_name] = str(value)

    raw_children = data.get("children") or []
    if not isinstance(raw_children, list):
        raise SyntaxLoadError(f"{path}: 'children' must be a list")

    children = tuple(
        _build_node(child, source_file, f"{path}.children[{index}]")
        for index, child in enumerate(raw_children)
    )

    return SyntaxNode(
        kind=kind,
        tag=tag,
        children=children,
        location=_build_location(data.get("location"), source_file),
        **fields,
    )


def _build_location(data: Any, source_file: Optional[str]) -> SourceLocation:
    if not isinstance(data, Mapping):
        if source_file:
            return SourceLocation(file=source_file)
        return UNKNOWN_LOCATION

    values: Dict[str, Any] = {}
    for key, field_name in _LOCATION_ALIASES.items():
        if key in data and field_name not in values:
            values[field_name] = data[key]

    file_name = values.pop("file", None) or source_file
    try:
        numbers = {key: int(value) for key, value in values.items()}
    except (TypeError, ValueError) as exc:
        raise SyntaxLoadError(f"Invalid location: {dict(data)}") from exc

    return SourceLocation(file=file_name, **numbers)
