"""Syntax tree consumed by the lowering pass.

The tree is produced by an external PowerShell parser. Each node carries the
parser's tag (``CommandAst``, ``PipelineAst``, ...) which is mapped onto the
closed :class:`SyntaxKind` enumeration; tags the enumeration does not know map
to ``SyntaxKind.UNKNOWN`` so the dispatcher always has a fallback arm.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from pwsh_lowering.src.common.source_location import SourceLocation, UNKNOWN_LOCATION

AST_SUFFIX = "Ast"


class SyntaxKind(Enum):
    """Syntax kinds emitted by the PowerShell parser (tag without ``Ast``)."""

    # Wrappers
    COMMAND_EXPRESSION = "CommandExpression"
    PAREN_EXPRESSION = "ParenExpression"
    STATEMENT_BLOCK = "StatementBlock"
    SCRIPT_BLOCK_EXPRESSION = "ScriptBlockExpression"

    # Blocks and pipelines
    PIPELINE = "Pipeline"
    SCRIPT_BLOCK = "ScriptBlock"
    NAMED_BLOCK = "NamedBlock"

    # Calls
    COMMAND = "Command"
    COMMAND_PARAMETER = "CommandParameter"

    # Statements usable as expressions
    SWITCH_STATEMENT = "SwitchStatement"
    ASSIGNMENT_STATEMENT = "AssignmentStatement"

    # Expressions
    VARIABLE_EXPRESSION = "VariableExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    UNARY_EXPRESSION = "UnaryExpression"
    CONSTANT_EXPRESSION = "ConstantExpression"
    STRING_CONSTANT_EXPRESSION = "StringConstantExpression"
    EXPANDABLE_STRING_EXPRESSION = "ExpandableStringExpression"
    ARRAY_EXPRESSION = "ArrayExpression"
    ARRAY_LITERAL = "ArrayLiteral"
    CONVERT_EXPRESSION = "ConvertExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    INVOKE_MEMBER_EXPRESSION = "InvokeMemberExpression"

    # Declarations
    FUNCTION_DEFINITION = "FunctionDefinition"
    PARAM_BLOCK = "ParamBlock"
    PARAMETER = "Parameter"

    # Types
    TYPE_CONSTRAINT = "TypeConstraint"
    TYPE_EXPRESSION = "TypeExpression"
    TYPE_REFERENCE = "TypeReference"
    IDENTIFIER = "Identifier"

    UNKNOWN = "Unknown"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "SyntaxKind":
        """Map a parser tag (with or without the ``Ast`` suffix) to a kind."""
        if not tag:
            return cls.UNKNOWN
        name = tag[: -len(AST_SUFFIX)] if tag.endswith(AST_SUFFIX) else tag
        return _KINDS_BY_TAG.get(name, cls.UNKNOWN)


_KINDS_BY_TAG = {kind.value: kind for kind in SyntaxKind}


@dataclass(frozen=True)
class SyntaxNode:
    """Immutable, externally owned syntax tree node.

    ``children`` are kept in source order; lowering relies on it.
    """

    kind: SyntaxKind
    code: Optional[str] = None
    name: Optional[str] = None
    operator: Optional[str] = None
    unary_token: Optional[str] = None
    type_annotation: Optional[str] = None
    children: Tuple["SyntaxNode", ...] = ()
    location: SourceLocation = UNKNOWN_LOCATION
    tag: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if self.tag is None:
            object.__setattr__(self, "tag", self.kind.value)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def first_child(self, kind: SyntaxKind) -> Optional["SyntaxNode"]:
        """Return the first direct child of the given kind."""
        for child in self.children:
            if child.kind is kind:
                return child
        return None

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"{self.tag}({self.code!r})"
