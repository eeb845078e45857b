"""Syntax tree definitions consumed by the lowering pass."""

from .nodes import SyntaxKind, SyntaxNode
from .flatten import flatten_leaves
from .loader import (
    SyntaxLoadError,
    load_syntax_file,
    load_syntax_json,
    load_syntax_tree,
)

__all__ = [
    "SyntaxKind",
    "SyntaxNode",
    "flatten_leaves",
    "SyntaxLoadError",
    "load_syntax_file",
    "load_syntax_json",
    "load_syntax_tree",
]
