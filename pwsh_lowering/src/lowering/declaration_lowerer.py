from __future__ import annotations
from typing import Any, List

from pwsh_lowering.src.ir.nodes import (
    Declaration,
    FunctionDeclaration,
    ParameterDeclaration,
)
from pwsh_lowering.src.scope.scope_manager import entered_scope
from pwsh_lowering.src.syntax.nodes import SyntaxKind, SyntaxNode

from .errors import MalformedNodeError


class DeclarationLowerer:
    """Lowers function definitions and registers them in the current scope."""

    def __init__(self, parent: Any) -> None:
        self.parent = parent

    @property
    def config(self):
        return self.parent.config

    @property
    def scope(self):
        return self.parent.scope

    def lower(self, node: SyntaxNode) -> Declaration:
        if node.kind is not SyntaxKind.FUNCTION_DEFINITION:
            raise MalformedNodeError(f"Cannot lower {node.tag} as a declaration", node)
        if not node.name:
            raise MalformedNodeError("Function definition has no name", node)

        function = FunctionDeclaration(
            name=node.name, location=node.location, code=node.code
        )
        for index, parameter in enumerate(self._collect_parameters(node)):
            function.parameters.append(self.lower_parameter(parameter, index))

        # Registered before the body so recursive calls resolve
        self.scope.add_declaration(function)

        body = node.first_child(SyntaxKind.SCRIPT_BLOCK)
        if body is not None:
            with entered_scope(self.scope, function):
                for parameter in function.parameters:
                    self.scope.add_declaration(parameter)
                function.body = self.parent.stmt_lowerer.lower(body)
        return function

    def lower_parameter(self, node: SyntaxNode, index: int) -> ParameterDeclaration:
        variable = node.first_child(SyntaxKind.VARIABLE_EXPRESSION)
        name = self.scope.identifier_name(variable or node)
        if not name.startswith(self.config.parameter_sigil):
            name = f"{self.config.parameter_sigil}{name}"

        annotation = node.type_annotation or (variable.type_annotation if variable else None)
        return ParameterDeclaration(
            name=name,
            type=self.parent.type_lowerer.lower_annotation(annotation, node),
            argument_index=index,
            location=node.location,
            code=node.code,
        )

    def _collect_parameters(self, node: SyntaxNode) -> List[SyntaxNode]:
        """Parameters in declaration order, from the signature or a param block."""
        parameters: List[SyntaxNode] = []
        for child in node.children:
            if child.kind is SyntaxKind.PARAMETER:
                parameters.append(child)
            elif child.kind in (SyntaxKind.PARAM_BLOCK, SyntaxKind.SCRIPT_BLOCK):
                parameters.extend(self._collect_parameters(child))
        return parameters
