from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Optional

from pwsh_lowering.src.common.source_location import SourceLocation, UNKNOWN_LOCATION

from .types import IRType, UNKNOWN_TYPE

"""IR expression, statement and declaration nodes produced by lowering.

Nodes form a tree: every child is owned by exactly one parent. The only field
written after construction is ``BinaryOp.type``.
"""


@dataclass
class IRNode:
    """Base class for all IR nodes."""

    location: SourceLocation = field(default=UNKNOWN_LOCATION, kw_only=True)
    code: Optional[str] = field(default=None, kw_only=True, compare=False)

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"{self.__class__.__name__}({self.code!r})"


# ---------------------------------------------------------------------------
# Declarations and statements (produced by collaborators, opaque to expressions)
# ---------------------------------------------------------------------------


@dataclass
class Declaration(IRNode):
    """Base class for declarations."""

    name: str = ""


@dataclass
class ParameterDeclaration(Declaration):
    """Function parameter; ``name`` keeps the ``$`` sigil."""

    type: IRType = UNKNOWN_TYPE
    argument_index: int = 0


@dataclass
class FunctionDeclaration(Declaration):
    """Function definition with its ordered parameters."""

    parameters: List[ParameterDeclaration] = field(default_factory=list)
    body: Optional["Statement"] = None

    def parameter_positions(self) -> Dict[str, int]:
        """Map parameter names to their declared argument index."""
        return {param.name: param.argument_index for param in self.parameters}


@dataclass
class Statement(IRNode):
    """Base class for statements."""


@dataclass
class ExpressionStatement(Statement):
    expression: "Expression"


@dataclass
class DeclarationStatement(Statement):
    declaration: Declaration


@dataclass
class Block(Statement):
    """Ordered statement list with its own lexical scope."""

    statements: List[Statement] = field(default_factory=list)

    def add_statement(self, statement: Statement) -> None:
        self.statements.append(statement)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass
class Expression(IRNode):
    """Base class for IR expressions."""

    @property
    def result_type(self) -> IRType:
        return getattr(self, "type", UNKNOWN_TYPE)


@dataclass
class Literal(Expression):
    """Literal constant; the raw text doubles as value and display name."""

    type: IRType
    raw_text: str
    name: str = ""

    @property
    def value(self) -> str:
        return self.raw_text


@dataclass
class Reference(Expression):
    """Reference to a variable or parameter by name."""

    name: str
    type: IRType = UNKNOWN_TYPE


@dataclass
class BinaryOp(Expression):
    """Binary operator or assignment."""

    operator: str
    lhs: Expression
    rhs: Expression
    type: IRType = UNKNOWN_TYPE


@dataclass
class UnaryOp(Expression):
    """Increment/decrement operator."""

    operator: str
    is_postfix: bool
    operand: Expression

    @property
    def is_prefix(self) -> bool:
        return not self.is_postfix

    @property
    def result_type(self) -> IRType:
        return self.operand.result_type


@dataclass
class CallArgument:
    """A bound call argument.

    ``index`` is the declared (or synthesized) parameter index, ``position``
    the order in which the binder produced the argument.
    """

    expression: Expression
    index: int
    position: int


@dataclass
class Call(Expression):
    """Call of a command or function by name."""

    callee_name: str
    arguments: List[CallArgument] = field(default_factory=list)
    declaration: Optional[FunctionDeclaration] = field(default=None, compare=False)

    def add_argument(self, expression: Expression, index: int) -> CallArgument:
        argument = CallArgument(expression, index, len(self.arguments))
        self.arguments.append(argument)
        return argument

    def arguments_by_index(self) -> List[CallArgument]:
        """Arguments in declaration order (ties keep scan order)."""
        return sorted(self.arguments, key=lambda arg: (arg.index, arg.position))


@dataclass
class InitializerList(Expression):
    """Array literal with its flattened elements."""

    type: IRType = UNKNOWN_TYPE
    elements: List[Expression] = field(default_factory=list)


@dataclass
class Cast(Expression):
    """Conversion of ``inner`` to ``target_type``."""

    target_type: IRType
    inner: Expression

    @property
    def result_type(self) -> IRType:
        return self.target_type


@dataclass
class CompoundExpr(Expression):
    """Statement used in expression position."""

    statement: Statement


@dataclass
class DeclarationExpr(Expression):
    """Declaration used in expression position."""

    declaration: Declaration


@dataclass
class Unknown(Expression):
    """Fallback for syntax that could not be lowered."""

    raw_text: Optional[str] = None


# ---------------------------------------------------------------------------
# Debug helpers
# ---------------------------------------------------------------------------


def ir_to_dict(node: Any) -> Any:
    """Convert IR nodes to plain dictionaries for JSON output and debugging."""
    if isinstance(node, IRType):
        return str(node)
    if isinstance(node, SourceLocation):
        return str(node) if node != UNKNOWN_LOCATION else None
    if isinstance(node, list):
        return [ir_to_dict(item) for item in node]
    if not is_dataclass(node):
        return node

    result: Dict[str, Any] = {"node": type(node).__name__}
    for node_field in fields(node):
        value = getattr(node, node_field.name)
        if node_field.name == "declaration" and isinstance(node, Call):
            result[node_field.name] = value.name if value is not None else None
        elif node_field.name == "location":
            rendered = ir_to_dict(value)
            if rendered is not None:
                result[node_field.name] = rendered
        else:
            result[node_field.name] = ir_to_dict(value)
    return result


def format_ir(node: IRNode, indent: int = 0) -> str:
    """Render IR structure as an indented tree."""
    spaces = "  " * indent
    lines = [f"{spaces}{type(node).__name__}"]

    for node_field in fields(node):
        if node_field.name in ("location", "code"):
            continue
        value = getattr(node, node_field.name)
        if isinstance(value, IRNode):
            lines.append(f"{spaces}  {node_field.name}:")
            lines.append(format_ir(value, indent + 2))
        elif isinstance(value, list):
            lines.append(f"{spaces}  {node_field.name}:")
            for item in value:
                if isinstance(item, CallArgument):
                    lines.append(f"{spaces}    [index={item.index}]")
                    lines.append(format_ir(item.expression, indent + 3))
                elif isinstance(item, IRNode):
                    lines.append(format_ir(item, indent + 2))
                else:
                    lines.append(f"{spaces}    {item}")
        else:
            lines.append(f"{spaces}  {node_field.name}: {value}")
    return "\n".join(lines)
