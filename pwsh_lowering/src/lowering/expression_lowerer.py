"""Expression lowering for the PowerShell syntax tree."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from pwsh_lowering.src.ir.nodes import (
    BinaryOp,
    Block,
    Call,
    Cast,
    CompoundExpr,
    DeclarationExpr,
    Expression,
    InitializerList,
    Literal,
    Reference,
    UnaryOp,
    Unknown,
)
from pwsh_lowering.src.ir.types import UNKNOWN_TYPE, NamedType, first_known
from pwsh_lowering.src.scope.scope_manager import entered_scope
from pwsh_lowering.src.syntax.flatten import flatten_leaves
from pwsh_lowering.src.syntax.nodes import SyntaxKind, SyntaxNode

from .errors import LoweringIssue, MalformedNodeError

logger = logging.getLogger(__name__)

# Kinds that only wrap a single child expression
WRAPPER_KINDS = frozenset(
    {
        SyntaxKind.COMMAND_EXPRESSION,
        SyntaxKind.PAREN_EXPRESSION,
        SyntaxKind.STATEMENT_BLOCK,
        SyntaxKind.SCRIPT_BLOCK_EXPRESSION,
    }
)

# Childless nodes of these kinds are empty groupings, not array elements
GROUPING_KINDS = WRAPPER_KINDS | {
    SyntaxKind.PIPELINE,
    SyntaxKind.ARRAY_EXPRESSION,
    SyntaxKind.ARRAY_LITERAL,
    SyntaxKind.NAMED_BLOCK,
}

# Unary token -> (operator symbol, is_postfix)
UNARY_OPERATORS = {
    "PostfixIncrement": ("++", True),
    "PostfixDecrement": ("--", True),
    "PrefixIncrement": ("++", False),
    "PrefixDecrement": ("--", False),
    # Token names used by System.Management.Automation.Language.TokenKind
    "PostfixPlusPlus": ("++", True),
    "PostfixMinusMinus": ("--", True),
    "PlusPlus": ("++", False),
    "MinusMinus": ("--", False),
    "PrefixPlusPlus": ("++", False),
    "PrefixMinusMinus": ("--", False),
}


class ExpressionLowerer:
    """Lowers syntax nodes in expression position to IR expressions.

    ``lower`` never fails: unsupported kinds and structurally malformed nodes
    are reported to the diagnostics collector and become ``Unknown``.
    """

    def __init__(self, parent: Any) -> None:
        self.parent = parent

        handlers: Dict[SyntaxKind, Callable[[SyntaxNode], Expression]] = {
            kind: self.lower_wrapper for kind in WRAPPER_KINDS
        }
        handlers.update(
            {
                SyntaxKind.PIPELINE: self.lower_pipeline,
                SyntaxKind.SCRIPT_BLOCK: self.lower_script_block,
                SyntaxKind.COMMAND: self.lower_command,
                SyntaxKind.COMMAND_PARAMETER: self.lower_reference,
                SyntaxKind.SWITCH_STATEMENT: self.lower_statement_expression,
                SyntaxKind.VARIABLE_EXPRESSION: self.lower_reference,
                SyntaxKind.ASSIGNMENT_STATEMENT: self.lower_binary_op,
                SyntaxKind.BINARY_EXPRESSION: self.lower_binary_op,
                SyntaxKind.UNARY_EXPRESSION: self.lower_unary_op,
                SyntaxKind.CONSTANT_EXPRESSION: self.lower_literal,
                SyntaxKind.STRING_CONSTANT_EXPRESSION: self.lower_literal,
                SyntaxKind.FUNCTION_DEFINITION: self.lower_declaration_expression,
                SyntaxKind.ARRAY_EXPRESSION: self.lower_array,
                SyntaxKind.ARRAY_LITERAL: self.lower_array,
                SyntaxKind.CONVERT_EXPRESSION: self.lower_cast,
                SyntaxKind.MEMBER_EXPRESSION: self.lower_member_access,
                SyntaxKind.INVOKE_MEMBER_EXPRESSION: self.lower_member_access,
            }
        )
        self.handlers = handlers

    @property
    def config(self):
        return self.parent.config

    @property
    def scope(self):
        return self.parent.scope

    @property
    def diagnostics(self):
        return self.parent.diagnostics

    @property
    def type_lowerer(self):
        return self.parent.type_lowerer

    @property
    def stmt_lowerer(self):
        return self.parent.stmt_lowerer

    @property
    def decl_lowerer(self):
        return self.parent.decl_lowerer

    def lower(self, node: SyntaxNode) -> Expression:
        """Lower a syntax node to an IR expression."""
        logger.debug("Lowering expression %s", node.tag)
        handler = self.handlers.get(node.kind)
        if handler is None:
            self.diagnostics.warning(
                f"Unsupported expression kind: {node.tag}",
                stage="lowering",
                node=node,
                category=LoweringIssue.UNSUPPORTED_NODE_KIND.value,
            )
            return self._unknown(node)

        try:
            return handler(node)
        except MalformedNodeError as exc:
            self._report_malformed(exc.message, exc.node or node)
            return self._unknown(node)

    def _unknown(self, node: SyntaxNode) -> Unknown:
        return Unknown(raw_text=node.code, location=node.location, code=node.code)

    def _report_malformed(self, message: str, node: SyntaxNode) -> None:
        self.diagnostics.error(
            message,
            stage="lowering",
            node=node,
            category=LoweringIssue.MALFORMED_NODE.value,
        )

    # ------------------------------------------------------------------
    # Wrappers, pipelines and blocks
    # ------------------------------------------------------------------

    def lower_wrapper(self, node: SyntaxNode) -> Expression:
        if not node.children:
            raise MalformedNodeError(f"{node.tag} wraps no expression", node)
        if len(node.children) != 1:
            self._report_malformed(
                f"{node.tag} has {len(node.children)} children, lowering the first",
                node,
            )
        return self.lower(node.children[0])

    def lower_pipeline(self, node: SyntaxNode) -> Expression:
        if not node.children:
            raise MalformedNodeError("Pipeline has no stages", node)
        if len(node.children) == 1:
            return self.lower(node.children[0])

        # TODO: model the value flowing between stages instead of a plain block
        statement = self.stmt_lowerer.lower_generic_block(node)
        return CompoundExpr(statement, location=node.location, code=node.code)

    def lower_script_block(self, node: SyntaxNode) -> Expression:
        if not node.children:
            raise MalformedNodeError("Script block has no statements", node)
        if len(node.children) == 1:
            statement = self.stmt_lowerer.lower(node.children[0])
            return CompoundExpr(statement, location=node.location, code=node.code)

        block = Block(location=node.location, code=node.code)
        with entered_scope(self.scope, block):
            for child in node.children:
                block.add_statement(self.stmt_lowerer.lower(child))
        return CompoundExpr(block, location=node.location, code=node.code)

    def lower_statement_expression(self, node: SyntaxNode) -> Expression:
        """Statements such as ``switch`` may appear in expression position."""
        statement = self.stmt_lowerer.lower(node)
        return CompoundExpr(statement, location=node.location, code=node.code)

    def lower_declaration_expression(self, node: SyntaxNode) -> Expression:
        declaration = self.decl_lowerer.lower(node)
        return DeclarationExpr(declaration, location=node.location, code=node.code)

    # ------------------------------------------------------------------
    # Calls and references
    # ------------------------------------------------------------------

    def lower_command(self, node: SyntaxNode) -> Expression:
        """Lower a command invocation; the first child names the callee."""
        if not node.children:
            raise MalformedNodeError("Command has no callee", node)

        callee = node.children[0]
        if callee.kind is not SyntaxKind.STRING_CONSTANT_EXPRESSION:
            raise MalformedNodeError(
                f"First child of a command must name the callee, got {callee.tag}",
                callee,
            )

        call = Call(
            callee_name=callee.code or callee.name or "",
            location=node.location,
            code=node.code,
        )

        candidates = self.scope.resolve_function(call)
        if len(candidates) > 1:
            # The first candidate belongs to the innermost scope
            self.diagnostics.warning(
                f"{len(candidates)} declarations found for '{call.callee_name}', "
                "using the innermost one",
                stage="lowering",
                node=node,
                category=LoweringIssue.AMBIGUOUS_DECLARATION.value,
            )
        elif not candidates:
            self.diagnostics.info(
                f"No declaration found for '{call.callee_name}', "
                "arguments keep their syntactic index",
                stage="lowering",
                node=node,
                category=LoweringIssue.UNRESOLVED_SYMBOL.value,
            )

        call.declaration = candidates[0] if candidates else None
        if len(node.children) > 1:
            self.parent.arg_binder.bind(call, candidates, node.children[1:])
        return call

    def lower_reference(self, node: SyntaxNode) -> Expression:
        return Reference(
            name=self.scope.identifier_name(node),
            type=self.type_lowerer.lower_annotation(node.type_annotation, node),
            location=node.location,
            code=node.code,
        )

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def lower_binary_op(self, node: SyntaxNode) -> Expression:
        """Lower binary operators and assignments (both are lhs op rhs)."""
        if not node.operator:
            raise MalformedNodeError(f"{node.tag} has no operator", node)
        if len(node.children) != 2:
            raise MalformedNodeError(
                f"{node.tag} needs 2 operands, got {len(node.children)}", node
            )

        binary = BinaryOp(
            operator=node.operator,
            lhs=self.lower(node.children[0]),
            rhs=self.lower(node.children[1]),
            location=node.location,
            code=node.code,
        )
        binary.type = first_known(binary.lhs.result_type, binary.rhs.result_type)
        return binary

    def lower_unary_op(self, node: SyntaxNode) -> Expression:
        operator = UNARY_OPERATORS.get(node.unary_token or "")
        if operator is None:
            raise MalformedNodeError(
                f"Unsupported unary operator token: {node.unary_token!r}", node
            )
        if not node.children:
            raise MalformedNodeError("Unary expression has no operand", node)

        symbol, is_postfix = operator
        return UnaryOp(
            operator=symbol,
            is_postfix=is_postfix,
            operand=self.lower(node.children[0]),
            location=node.location,
            code=node.code,
        )

    # ------------------------------------------------------------------
    # Literals, arrays and casts
    # ------------------------------------------------------------------

    def lower_literal(self, node: SyntaxNode) -> Expression:
        literal_types = {
            SyntaxKind.CONSTANT_EXPRESSION: self.config.integer_type_name,
            SyntaxKind.STRING_CONSTANT_EXPRESSION: self.config.string_type_name,
        }
        type_name = literal_types.get(node.kind)
        if type_name is None:
            self.diagnostics.warning(
                f"Unidentified literal type for {node.tag}",
                stage="lowering",
                node=node,
                category=LoweringIssue.UNSUPPORTED_NODE_KIND.value,
            )
            literal_type = UNKNOWN_TYPE
        else:
            literal_type = NamedType(type_name)

        text = node.code or node.name or ""
        return Literal(
            type=literal_type,
            raw_text=text,
            name=text,
            location=node.location,
            code=node.code,
        )

    def lower_array(self, node: SyntaxNode) -> Expression:
        leaves = [
            leaf
            for leaf in flatten_leaves(node)
            if leaf is not node and leaf.kind not in GROUPING_KINDS
        ]
        return InitializerList(
            type=self.type_lowerer.lower_annotation(node.type_annotation, node),
            elements=[self.lower(leaf) for leaf in leaves],
            location=node.location,
            code=node.code,
        )

    def lower_cast(self, node: SyntaxNode) -> Expression:
        if len(node.children) != 2:
            raise MalformedNodeError(
                f"Conversion needs a type and an operand, got {len(node.children)} children",
                node,
            )

        if node.type_annotation:
            target_type = self.type_lowerer.lower_annotation(node.type_annotation, node)
        else:
            target_type = self.type_lowerer.lower_type(node.children[0])

        return Cast(
            target_type=target_type,
            inner=self.lower(node.children[1]),
            location=node.location,
            code=node.code,
        )

    def lower_member_access(self, node: SyntaxNode) -> Expression:
        """Member access is not modelled; it lowers to ``Unknown``."""
        self.diagnostics.info(
            f"Member access is not lowered: {node.code}",
            stage="lowering",
            node=node,
            category=LoweringIssue.UNSUPPORTED_NODE_KIND.value,
        )
        return self._unknown(node)
