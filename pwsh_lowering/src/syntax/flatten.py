"""Leaf flattening for nested syntax groupings."""

from __future__ import annotations

from typing import List

from .nodes import SyntaxNode


def flatten_leaves(node: SyntaxNode) -> List[SyntaxNode]:
    """Collect the childless nodes below ``node`` in left-to-right order.

    Intermediate grouping nodes (array literals, parentheses, sub-expressions)
    are dropped. A childless node flattens to itself.
    """
    if node.is_leaf:
        return [node]

    leaves: List[SyntaxNode] = []
    _collect_leaves(node, leaves)
    return leaves


def _collect_leaves(node: SyntaxNode, leaves: List[SyntaxNode]) -> None:
    for child in node.children:
        if child.is_leaf:
            leaves.append(child)
        else:
            _collect_leaves(child, leaves)
