"""
Syntax tree to IR lowering pass for PowerShell scripts.

This module wires the lowering helpers together: expression lowering is the
core, statement and declaration lowering are collaborators that can be
replaced by external services, and the scope service is shared by all of them.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from pwsh_lowering.src.common.constants import (
    DEFAULT_CONFIG,
    STAGE_LOWERING,
    LoweringConfig,
)
from pwsh_lowering.src.common.diagnostics import ProgramDiagnostics
from pwsh_lowering.src.ir.nodes import Block, Expression, Statement
from pwsh_lowering.src.scope.scope_manager import ScopeManager
from pwsh_lowering.src.syntax.nodes import SyntaxNode

from .argument_binder import ArgumentBinder
from .declaration_lowerer import DeclarationLowerer
from .expression_lowerer import ExpressionLowerer
from .statement_lowerer import StatementLowerer
from .type_lowerer import TypeLowerer


class ScriptLowerer:
    """Facade that coordinates the lowering helpers."""

    def __init__(
        self,
        scope: Optional[Any] = None,
        diagnostics: Optional[ProgramDiagnostics] = None,
        config: LoweringConfig = DEFAULT_CONFIG,
        statement_service: Optional[Any] = None,
        declaration_service: Optional[Any] = None,
    ):
        self.config = config
        self.scope = scope if scope is not None else ScopeManager(config)
        self.diagnostics = diagnostics if diagnostics is not None else ProgramDiagnostics()
        self.diagnostics.default_stage = STAGE_LOWERING

        self.type_lowerer = TypeLowerer(self)
        self.expr_lowerer = ExpressionLowerer(self)
        self.arg_binder = ArgumentBinder(self)
        self.stmt_lowerer = statement_service or StatementLowerer(self)
        self.decl_lowerer = declaration_service or DeclarationLowerer(self)

    def lower_expression(self, node: SyntaxNode) -> Expression:
        return self.expr_lowerer.lower(node)

    def lower_statement(self, node: SyntaxNode) -> Statement:
        return self.stmt_lowerer.lower(node)

    def lower_script(self, root: SyntaxNode) -> Block:
        """Lower a whole script; the result is always a block."""
        statement = self.stmt_lowerer.lower(root)
        if isinstance(statement, Block):
            return statement
        return Block(statements=[statement], location=root.location, code=root.code)


def lower_script_tree(
    root: SyntaxNode,
    diagnostics: Optional[ProgramDiagnostics] = None,
    config: LoweringConfig = DEFAULT_CONFIG,
) -> Tuple[Block, ProgramDiagnostics]:
    """Lower a script syntax tree with the default collaborators."""
    lowerer = ScriptLowerer(diagnostics=diagnostics, config=config)
    return lowerer.lower_script(root), lowerer.diagnostics
