"""
Tests for lowering/declaration_lowerer.py
"""

import pytest

from pwsh_lowering.src.ir.nodes import Block, Call, FunctionDeclaration, Unknown
from pwsh_lowering.src.ir.types import NamedType, UNKNOWN_TYPE
from pwsh_lowering.src.lowering.errors import LoweringIssue, MalformedNodeError
from pwsh_lowering.src.syntax.nodes import SyntaxKind


@pytest.fixture
def declarations(lowerer):
    return lowerer.decl_lowerer


@pytest.fixture
def parameter(node, variable):
    def build(name: str, annotation=None):
        return node(SyntaxKind.PARAMETER, variable(name), type_annotation=annotation)

    return build


class TestFunctionDeclarations:
    def test_param_block_parameters(self, declarations, node, parameter):
        definition = node(
            SyntaxKind.FUNCTION_DEFINITION,
            node(
                SyntaxKind.SCRIPT_BLOCK,
                node(
                    SyntaxKind.PARAM_BLOCK,
                    parameter("$Name"),
                    parameter("$Path", "[string]"),
                ),
            ),
            name="Get-Foo",
        )
        function = declarations.lower(definition)

        assert isinstance(function, FunctionDeclaration)
        assert function.name == "Get-Foo"
        assert [p.name for p in function.parameters] == ["$Name", "$Path"]
        assert [p.argument_index for p in function.parameters] == [0, 1]
        assert function.parameters[0].type is UNKNOWN_TYPE
        assert function.parameters[1].type == NamedType("string")
        assert function.parameter_positions() == {"$Name": 0, "$Path": 1}

    def test_signature_parameters_get_sigil(self, declarations, node, variable):
        definition = node(
            SyntaxKind.FUNCTION_DEFINITION,
            node(SyntaxKind.PARAMETER, variable("", name="count")),
            name="Add-One",
        )
        function = declarations.lower(definition)
        assert function.parameters[0].name == "$count"

    def test_variable_annotation_used(self, declarations, node, variable):
        definition = node(
            SyntaxKind.FUNCTION_DEFINITION,
            node(SyntaxKind.PARAMETER, variable("$n", type_annotation="int")),
            name="Add-One",
        )
        function = declarations.lower(definition)
        assert function.parameters[0].type == NamedType("integer")

    def test_registered_in_current_scope(self, declarations, scope, node):
        function = declarations.lower(node(SyntaxKind.FUNCTION_DEFINITION, name="Get-Foo"))
        assert scope.global_scope.lookup_local("get-foo") == [function]
        assert function.body is None

    def test_body_scope_holds_parameters(self, declarations, scope, node, parameter, const):
        definition = node(
            SyntaxKind.FUNCTION_DEFINITION,
            node(
                SyntaxKind.SCRIPT_BLOCK,
                node(SyntaxKind.PARAM_BLOCK, parameter("$Name")),
                const("1"),
            ),
            name="Get-Foo",
        )
        function = declarations.lower(definition)

        function_scope = scope.global_scope.children[0]
        assert function_scope.block is function
        assert function_scope.lookup_local("$Name") == [function.parameters[0]]
        assert isinstance(function.body, Block)
        assert len(function.body.statements) == 1
        assert scope.depth == 0

    def test_recursive_call_resolves(self, declarations, node, string):
        definition = node(
            SyntaxKind.FUNCTION_DEFINITION,
            node(
                SyntaxKind.SCRIPT_BLOCK,
                node(SyntaxKind.COMMAND, string("Get-Foo")),
            ),
            name="Get-Foo",
        )
        function = declarations.lower(definition)

        call = function.body.statements[0].expression
        assert isinstance(call, Call)
        assert call.declaration is function

    def test_redefinition_resolves_newest(self, declarations, scope, node):
        first = declarations.lower(node(SyntaxKind.FUNCTION_DEFINITION, name="Get-Foo"))
        second = declarations.lower(node(SyntaxKind.FUNCTION_DEFINITION, name="Get-Foo"))
        assert scope.resolve_function(Call("Get-Foo")) == [second, first]


class TestMalformedDefinitions:
    def test_wrong_kind(self, declarations, const):
        with pytest.raises(MalformedNodeError):
            declarations.lower(const("1"))

    def test_missing_name(self, declarations, node):
        with pytest.raises(MalformedNodeError, match="no name"):
            declarations.lower(node(SyntaxKind.FUNCTION_DEFINITION))

    def test_missing_name_in_expression_position(self, lowerer, diagnostics, node):
        result = lowerer.lower_expression(
            node(SyntaxKind.FUNCTION_DEFINITION, code="function {}")
        )
        assert isinstance(result, Unknown)
        assert len(diagnostics.by_category(LoweringIssue.MALFORMED_NODE.value)) == 1
