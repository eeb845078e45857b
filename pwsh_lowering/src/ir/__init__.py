"""IR types and nodes produced by the lowering pass."""

from .types import (
    ArrayType,
    GenericType,
    IRType,
    NamedType,
    TypeParser,
    TypeSyntaxError,
    UnknownType,
    UNKNOWN_TYPE,
    first_known,
    named_type,
)
from .nodes import (
    BinaryOp,
    Block,
    Call,
    CallArgument,
    Cast,
    CompoundExpr,
    Declaration,
    DeclarationExpr,
    DeclarationStatement,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    InitializerList,
    IRNode,
    Literal,
    ParameterDeclaration,
    Reference,
    Statement,
    UnaryOp,
    Unknown,
    format_ir,
    ir_to_dict,
)

__all__ = [
    # Types
    "ArrayType",
    "GenericType",
    "IRType",
    "NamedType",
    "TypeParser",
    "TypeSyntaxError",
    "UnknownType",
    "UNKNOWN_TYPE",
    "first_known",
    "named_type",
    # Nodes
    "BinaryOp",
    "Block",
    "Call",
    "CallArgument",
    "Cast",
    "CompoundExpr",
    "Declaration",
    "DeclarationExpr",
    "DeclarationStatement",
    "Expression",
    "ExpressionStatement",
    "FunctionDeclaration",
    "InitializerList",
    "IRNode",
    "Literal",
    "ParameterDeclaration",
    "Reference",
    "Statement",
    "UnaryOp",
    "Unknown",
    "format_ir",
    "ir_to_dict",
]
