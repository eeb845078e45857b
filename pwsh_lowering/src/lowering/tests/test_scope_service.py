"""
Lowering against a scope service that offers only enter_scope, leave_scope,
resolve_function and identifier_name.
"""

import pytest

from pwsh_lowering.src.common.diagnostics import DiagnosticError, ProgramDiagnostics
from pwsh_lowering.src.ir.nodes import Block, Call, CompoundExpr, Unknown
from pwsh_lowering.src.lowering.errors import MalformedNodeError
from pwsh_lowering.src.lowering.lowerer import ScriptLowerer
from pwsh_lowering.src.syntax.nodes import SyntaxKind


class RecordingScope:
    """Minimal scope service recording enter/leave events."""

    def __init__(self):
        self.events = []

    def enter_scope(self, block):
        self.events.append(("enter", block))

    def leave_scope(self, block):
        self.events.append(("leave", block))

    def resolve_function(self, call):
        return []

    def identifier_name(self, node):
        return (node.name or node.code or "").strip()


@pytest.fixture
def recording_scope():
    return RecordingScope()


class TestMinimalScopeService:
    def test_script_block_enters_and_leaves(self, recording_scope, diagnostics, node, const):
        lowerer = ScriptLowerer(scope=recording_scope, diagnostics=diagnostics)
        result = lowerer.lower_expression(
            node(SyntaxKind.SCRIPT_BLOCK, const("1"), const("2"))
        )

        assert isinstance(result, CompoundExpr)
        assert recording_scope.events == [
            ("enter", result.statement),
            ("leave", result.statement),
        ]

    def test_scope_left_when_a_statement_fails(
        self, recording_scope, diagnostics, statement_service, node, const
    ):
        failing = const("2")

        def lower_statement(child):
            if child is failing:
                raise MalformedNodeError("broken statement", child)
            return Block()

        statement_service.lower.side_effect = lower_statement
        lowerer = ScriptLowerer(
            scope=recording_scope,
            diagnostics=diagnostics,
            statement_service=statement_service,
        )
        result = lowerer.lower_expression(
            node(SyntaxKind.SCRIPT_BLOCK, const("1"), failing)
        )

        assert isinstance(result, Unknown)
        assert [event for event, _ in recording_scope.events] == ["enter", "leave"]
        entered, left = (block for _, block in recording_scope.events)
        assert entered is left

    def test_scope_left_when_strict_mode_aborts(self, recording_scope, node, const):
        lowerer = ScriptLowerer(
            scope=recording_scope,
            diagnostics=ProgramDiagnostics(raise_errors=True),
        )
        script = node(
            SyntaxKind.SCRIPT_BLOCK,
            const("1"),
            node(SyntaxKind.BINARY_EXPRESSION, const("2")),
        )
        with pytest.raises(DiagnosticError):
            lowerer.lower_expression(script)
        assert [event for event, _ in recording_scope.events] == ["enter", "leave"]

    def test_nested_blocks_through_statement_lowering(
        self, recording_scope, diagnostics, node, string
    ):
        lowerer = ScriptLowerer(scope=recording_scope, diagnostics=diagnostics)
        script = node(
            SyntaxKind.SCRIPT_BLOCK,
            node(SyntaxKind.NAMED_BLOCK, node(SyntaxKind.COMMAND, string("Get-Date"))),
        )
        outer = lowerer.lower_script(script)
        inner = outer.statements[0]

        assert recording_scope.events == [
            ("enter", outer),
            ("enter", inner),
            ("leave", inner),
            ("leave", outer),
        ]
        assert isinstance(inner.statements[0].expression, Call)
        assert not diagnostics.has_errors()
