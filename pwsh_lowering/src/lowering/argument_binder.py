"""Binding of command arguments to declared function parameters."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Set

from pwsh_lowering.src.ir.nodes import Call, FunctionDeclaration
from pwsh_lowering.src.syntax.flatten import flatten_leaves
from pwsh_lowering.src.syntax.nodes import SyntaxKind, SyntaxNode

from .errors import LoweringIssue
from .expression_lowerer import GROUPING_KINDS


class ArgumentBinder:
    """Binds the raw argument nodes of a command to a :class:`Call`.

    Named flags (``-Name value``) take the declared index of the parameter
    they name; script blocks are lowered whole; any other grouping is
    flattened to its leaves, each bound with an index local to that group.
    Arguments are appended in scan order.
    """

    def __init__(self, parent: Any) -> None:
        self.parent = parent

    @property
    def config(self):
        return self.parent.config

    @property
    def diagnostics(self):
        return self.parent.diagnostics

    @property
    def expr_lowerer(self):
        return self.parent.expr_lowerer

    def bind(
        self,
        call: Call,
        candidates: Sequence[FunctionDeclaration],
        items: Sequence[SyntaxNode],
    ) -> Call:
        positions = self._parameter_positions(candidates)
        is_declared = bool(candidates)
        consumed: Set[int] = set()

        for index, item in enumerate(items):
            if index in consumed:
                continue

            if item.kind is SyntaxKind.COMMAND_PARAMETER:
                self._bind_flag(call, positions, is_declared, items, index, consumed)
            elif item.kind is SyntaxKind.SCRIPT_BLOCK_EXPRESSION:
                call.add_argument(self.expr_lowerer.lower(item), index)
            else:
                # Nested array literals and parentheses carry no information
                # beyond their leaves; empty groupings contribute nothing.
                leaves = [
                    leaf
                    for leaf in flatten_leaves(item)
                    if leaf.kind not in GROUPING_KINDS
                ]
                for leaf_index, leaf in enumerate(leaves):
                    call.add_argument(self.expr_lowerer.lower(leaf), leaf_index)

        return call

    def _parameter_positions(
        self, candidates: Sequence[FunctionDeclaration]
    ) -> Dict[str, int]:
        if not candidates:
            return {}
        return {
            self.config.normalize_name(name): position
            for name, position in candidates[0].parameter_positions().items()
        }

    def _bind_flag(
        self,
        call: Call,
        positions: Dict[str, int],
        is_declared: bool,
        items: Sequence[SyntaxNode],
        index: int,
        consumed: Set[int],
    ) -> None:
        flag = items[index]
        name = self.parameter_name(flag)

        value_node: Optional[SyntaxNode] = None
        if flag.children:
            # -Name:value keeps its argument as a child
            value_node = flag.children[0]
        elif (
            index + 1 < len(items)
            and items[index + 1].kind is not SyntaxKind.COMMAND_PARAMETER
        ):
            value_node = items[index + 1]
            consumed.add(index + 1)

        declared_index = positions.get(self.config.normalize_name(name))
        if declared_index is None:
            if is_declared:
                self.diagnostics.warning(
                    f"'{call.callee_name}' declares no parameter {name}",
                    stage="lowering",
                    node=flag,
                    category=LoweringIssue.UNRESOLVED_SYMBOL.value,
                )
            declared_index = index

        # A flag without a value is a switch and stands for itself
        expression = self.expr_lowerer.lower(value_node or flag)
        call.add_argument(expression, declared_index)

    def parameter_name(self, flag: SyntaxNode) -> str:
        """Translate ``-Name`` (or ``-Name:``) into the declared form ``$Name``."""
        text = (flag.name or flag.code or "").strip()
        if text.startswith(self.config.flag_marker):
            text = text[len(self.config.flag_marker) :]
        text = text.split(":", 1)[0]
        return f"{self.config.parameter_sigil}{text}"

