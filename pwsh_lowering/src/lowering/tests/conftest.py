"""
Shared fixtures for lowering tests.

Syntax trees are built directly from SyntaxNode; external collaborators are
replaced by MagicMock where a test only cares about the expression core.
"""

from unittest.mock import MagicMock

import pytest

from pwsh_lowering.src.common.diagnostics import ProgramDiagnostics
from pwsh_lowering.src.common.source_location import SourceLocation
from pwsh_lowering.src.ir.nodes import Block, FunctionDeclaration, ParameterDeclaration
from pwsh_lowering.src.lowering.lowerer import ScriptLowerer
from pwsh_lowering.src.scope.scope_manager import ScopeManager
from pwsh_lowering.src.syntax.nodes import SyntaxKind, SyntaxNode


def build_node(kind: SyntaxKind, *children: SyntaxNode, **fields) -> SyntaxNode:
    fields.setdefault("location", SourceLocation("<test>", 1, 0))
    return SyntaxNode(kind, children=children, **fields)


@pytest.fixture
def node():
    """Factory building syntax nodes: node(kind, *children, **fields)."""
    return build_node


@pytest.fixture
def const(node):
    def build(text: str) -> SyntaxNode:
        return node(SyntaxKind.CONSTANT_EXPRESSION, code=text)

    return build


@pytest.fixture
def string(node):
    def build(text: str) -> SyntaxNode:
        return node(SyntaxKind.STRING_CONSTANT_EXPRESSION, code=text)

    return build


@pytest.fixture
def variable(node):
    def build(text: str, **fields) -> SyntaxNode:
        return node(SyntaxKind.VARIABLE_EXPRESSION, code=text, **fields)

    return build


@pytest.fixture
def flag(node):
    def build(text: str, *children: SyntaxNode) -> SyntaxNode:
        return node(SyntaxKind.COMMAND_PARAMETER, *children, code=text)

    return build


@pytest.fixture
def diagnostics():
    """Provide a fresh ProgramDiagnostics instance."""
    return ProgramDiagnostics(verbose=True)


@pytest.fixture
def scope():
    return ScopeManager()


@pytest.fixture
def lowerer(scope, diagnostics):
    """ScriptLowerer with the default collaborators."""
    return ScriptLowerer(scope=scope, diagnostics=diagnostics)


@pytest.fixture
def statement_service():
    service = MagicMock()
    service.lower.side_effect = lambda node: Block(code=f"stmt:{node.code}")
    service.lower_generic_block.side_effect = lambda node: Block(
        code=f"generic:{node.code}"
    )
    return service


@pytest.fixture
def declaration_service():
    service = MagicMock()
    service.lower.side_effect = lambda node: FunctionDeclaration(name=node.name or "")
    return service


@pytest.fixture
def mocked_lowerer(scope, diagnostics, statement_service, declaration_service):
    """ScriptLowerer whose statement and declaration services are mocks."""
    return ScriptLowerer(
        scope=scope,
        diagnostics=diagnostics,
        statement_service=statement_service,
        declaration_service=declaration_service,
    )


@pytest.fixture
def declare(scope):
    """Register a function declaration with the given parameter names."""

    def build(name: str, *parameters: str) -> FunctionDeclaration:
        function = FunctionDeclaration(
            name=name,
            parameters=[
                ParameterDeclaration(name=param, argument_index=index)
                for index, param in enumerate(parameters)
            ],
        )
        scope.add_declaration(function)
        return function

    return build
