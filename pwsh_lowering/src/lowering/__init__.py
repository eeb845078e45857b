from .argument_binder import ArgumentBinder
from .declaration_lowerer import DeclarationLowerer
from .errors import LoweringError, LoweringIssue, MalformedNodeError
from .expression_lowerer import ExpressionLowerer
from .lowerer import ScriptLowerer, lower_script_tree
from .statement_lowerer import StatementLowerer
from .type_lowerer import TypeLowerer

"""Lowering subpackage exports."""


__all__ = [
    "ArgumentBinder",
    "DeclarationLowerer",
    "ExpressionLowerer",
    "LoweringError",
    "LoweringIssue",
    "MalformedNodeError",
    "ScriptLowerer",
    "lower_script_tree",
    "StatementLowerer",
    "TypeLowerer",
]
