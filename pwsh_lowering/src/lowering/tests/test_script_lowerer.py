"""
End-to-end tests for lowering/lowerer.py
"""

import json

import pytest

from pwsh_lowering.src.common.diagnostics import DiagnosticError, ProgramDiagnostics
from pwsh_lowering.src.ir.nodes import (
    Block,
    Call,
    DeclarationStatement,
    ExpressionStatement,
    ir_to_dict,
)
from pwsh_lowering.src.lowering.lowerer import ScriptLowerer, lower_script_tree
from pwsh_lowering.src.lowering.statement_lowerer import StatementLowerer
from pwsh_lowering.src.scope.scope_manager import ScopeManager
from pwsh_lowering.src.syntax.loader import load_syntax_tree
from pwsh_lowering.src.syntax.nodes import SyntaxKind


SCRIPT = {
    "type": "ScriptBlockAst",
    "code": "function Get-Foo { param($Name, $Path) } Get-Foo -Path p -Name n",
    "location": {"startLine": 1, "startColumn": 1},
    "children": [
        {
            "type": "NamedBlockAst",
            "children": [
                {
                    "type": "FunctionDefinitionAst",
                    "name": "Get-Foo",
                    "location": {"startLine": 1, "startColumn": 1},
                    "children": [
                        {
                            "type": "ScriptBlockAst",
                            "children": [
                                {
                                    "type": "ParamBlockAst",
                                    "children": [
                                        {
                                            "type": "ParameterAst",
                                            "children": [
                                                {
                                                    "type": "VariableExpressionAst",
                                                    "code": "$Name",
                                                }
                                            ],
                                        },
                                        {
                                            "type": "ParameterAst",
                                            "children": [
                                                {
                                                    "type": "VariableExpressionAst",
                                                    "code": "$Path",
                                                }
                                            ],
                                        },
                                    ],
                                }
                            ],
                        }
                    ],
                },
                {
                    "type": "PipelineAst",
                    "location": {"startLine": 1, "startColumn": 42},
                    "children": [
                        {
                            "type": "CommandAst",
                            "code": "Get-Foo -Path p -Name n",
                            "location": {"startLine": 1, "startColumn": 42},
                            "children": [
                                {"type": "StringConstantExpressionAst", "code": "Get-Foo"},
                                {"type": "CommandParameterAst", "code": "-Path"},
                                {"type": "StringConstantExpressionAst", "code": "p"},
                                {"type": "CommandParameterAst", "code": "-Name"},
                                {"type": "StringConstantExpressionAst", "code": "n"},
                            ],
                        }
                    ],
                },
            ],
        }
    ],
}


@pytest.fixture
def script_tree():
    return load_syntax_tree(SCRIPT, "script.ps1")


def find_call(block: Block) -> Call:
    for statement in block.statements:
        if isinstance(statement, Block):
            found = find_call(statement)
            if found is not None:
                return found
        elif isinstance(statement, ExpressionStatement) and isinstance(
            statement.expression, Call
        ):
            return statement.expression
    return None


class TestScriptLowerer:
    def test_call_binds_to_declared_parameters(self, script_tree):
        block, diagnostics = lower_script_tree(script_tree)

        call = find_call(block)
        assert call.callee_name == "Get-Foo"
        assert call.declaration is not None
        assert [(arg.expression.raw_text, arg.index) for arg in call.arguments] == [
            ("p", 1),
            ("n", 0),
        ]
        assert [arg.expression.raw_text for arg in call.arguments_by_index()] == ["n", "p"]
        assert not diagnostics.has_errors()
        assert diagnostics.warning_count() == 0

    def test_declaration_statement_precedes_call(self, script_tree):
        block, _ = lower_script_tree(script_tree)
        named_block = block.statements[0]
        assert isinstance(named_block.statements[0], DeclarationStatement)
        assert named_block.statements[0].declaration.name == "Get-Foo"

    def test_locations_carry_source_file(self, script_tree):
        block, _ = lower_script_tree(script_tree)
        call = find_call(block)
        assert call.location.file == "script.ps1"
        assert call.location.column == 42

    def test_scopes_balanced(self, script_tree):
        scope = ScopeManager()
        ScriptLowerer(scope=scope).lower_script(script_tree)
        assert scope.depth == 0
        assert scope.current_scope is scope.global_scope

    def test_non_block_root_is_wrapped(self, lowerer, const):
        root = const("5")
        block = lowerer.lower_script(root)

        assert isinstance(block, Block)
        assert len(block.statements) == 1
        assert block.statements[0].expression.raw_text == "5"
        assert block.location == root.location

    def test_result_serialises(self, script_tree):
        block, _ = lower_script_tree(script_tree)
        document = json.loads(json.dumps(ir_to_dict(block)))

        assert document["node"] == "Block"
        assert document["location"] == "script.ps1:1:1"

    def test_default_diagnostics_stage(self, const):
        _, diagnostics = lower_script_tree(const("1"))
        assert diagnostics.default_stage == "lowering"

    def test_shared_diagnostics(self, node):
        diagnostics = ProgramDiagnostics()
        _, returned = lower_script_tree(
            node(SyntaxKind.SCRIPT_BLOCK, node(SyntaxKind.UNKNOWN, tag="TrapStatementAst")),
            diagnostics=diagnostics,
        )
        assert returned is diagnostics
        assert diagnostics.warning_count() == 1

    def test_errors_do_not_abort(self, node, const):
        script = node(
            SyntaxKind.SCRIPT_BLOCK,
            node(SyntaxKind.BINARY_EXPRESSION, const("1")),
            const("2"),
        )
        block, diagnostics = lower_script_tree(script)

        assert len(block.statements) == 2
        assert diagnostics.error_count() == 1

    def test_strict_mode_aborts(self, node, const):
        script = node(
            SyntaxKind.SCRIPT_BLOCK,
            node(SyntaxKind.BINARY_EXPRESSION, const("1")),
            const("2"),
        )
        with pytest.raises(DiagnosticError):
            lower_script_tree(script, diagnostics=ProgramDiagnostics(raise_errors=True))

    def test_collaborators_are_injectable(self, statement_service, declaration_service):
        lowerer = ScriptLowerer(
            statement_service=statement_service,
            declaration_service=declaration_service,
        )
        assert lowerer.stmt_lowerer is statement_service
        assert lowerer.decl_lowerer is declaration_service
        assert isinstance(ScriptLowerer().stmt_lowerer, StatementLowerer)
