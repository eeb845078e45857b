"""Type lowering: type-annotation syntax to IR types."""

from __future__ import annotations

from typing import Any, Optional

from pwsh_lowering.src.ir.types import (
    IRType,
    TypeParser,
    TypeSyntaxError,
    UNKNOWN_TYPE,
)
from pwsh_lowering.src.syntax.nodes import SyntaxKind, SyntaxNode

from .errors import LoweringIssue


class TypeLowerer:
    """Maps type syntax to IR types; anything unrecognised becomes unknown."""

    def __init__(self, parent: Any, type_parser: Optional[TypeParser] = None) -> None:
        self.parent = parent
        self.type_parser = type_parser or TypeParser()

    @property
    def scope(self):
        return self.parent.scope

    @property
    def diagnostics(self):
        return self.parent.diagnostics

    def lower_type(self, node: SyntaxNode) -> IRType:
        if node.kind is SyntaxKind.TYPE_REFERENCE:
            return self.lower_type_reference(node)
        return UNKNOWN_TYPE

    def lower_type_reference(self, node: SyntaxNode) -> IRType:
        identifier = node.first_child(SyntaxKind.IDENTIFIER)
        if identifier is None:
            self._unresolved("Type reference has no identifier", node)
            return UNKNOWN_TYPE
        return self.lower_annotation(self.scope.identifier_name(identifier), node)

    def lower_annotation(
        self, text: Optional[str], node: Optional[SyntaxNode] = None
    ) -> IRType:
        """Parse a type annotation string; absent or invalid text is unknown."""
        if not text or not text.strip():
            return UNKNOWN_TYPE
        try:
            return self.type_parser.parse(text)
        except TypeSyntaxError as exc:
            self._unresolved(str(exc), node)
            return UNKNOWN_TYPE

    def _unresolved(self, message: str, node: Optional[SyntaxNode]) -> None:
        self.diagnostics.warning(
            message,
            stage="lowering",
            node=node,
            category=LoweringIssue.UNRESOLVED_SYMBOL.value,
        )
