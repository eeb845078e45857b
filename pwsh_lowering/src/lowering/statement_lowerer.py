from __future__ import annotations
from typing import Any

from pwsh_lowering.src.ir.nodes import (
    Block,
    DeclarationStatement,
    ExpressionStatement,
    Statement,
)
from pwsh_lowering.src.scope.scope_manager import entered_scope
from pwsh_lowering.src.syntax.nodes import SyntaxKind, SyntaxNode

# Kinds lowered as a list of child statements
BLOCK_KINDS = frozenset(
    {
        SyntaxKind.SCRIPT_BLOCK,
        SyntaxKind.NAMED_BLOCK,
        SyntaxKind.STATEMENT_BLOCK,
        SyntaxKind.SWITCH_STATEMENT,
    }
)


class StatementLowerer:
    """Minimal statement lowering used when no external service is supplied."""

    def __init__(self, parent: Any) -> None:
        self.parent = parent

    @property
    def scope(self):
        return self.parent.scope

    def lower(self, node: SyntaxNode) -> Statement:
        if node.kind in BLOCK_KINDS:
            return self.lower_generic_block(node)
        if node.kind is SyntaxKind.FUNCTION_DEFINITION:
            declaration = self.parent.decl_lowerer.lower(node)
            return DeclarationStatement(
                declaration, location=node.location, code=node.code
            )
        expression = self.parent.expr_lowerer.lower(node)
        return ExpressionStatement(expression, location=node.location, code=node.code)

    def lower_generic_block(self, node: SyntaxNode) -> Block:
        """Lower every child as a statement of a new scoped block."""
        block = Block(location=node.location, code=node.code)
        with entered_scope(self.scope, block):
            for child in node.children:
                # Parameters belong to the enclosing function declaration
                if child.kind is SyntaxKind.PARAM_BLOCK:
                    continue
                block.add_statement(self.lower(child))
        return block
