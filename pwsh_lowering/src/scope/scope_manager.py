"""Lexical scope tracking and declaration lookup used during lowering."""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pwsh_lowering.src.common.constants import DEFAULT_CONFIG, LoweringConfig
from pwsh_lowering.src.ir.nodes import (
    Call,
    Declaration,
    FunctionDeclaration,
    IRNode,
)
from pwsh_lowering.src.syntax.nodes import SyntaxNode


class ScopeError(Exception):
    """Raised when scopes are entered and left out of order."""


class Scope:
    """One level of the lexical scope hierarchy."""

    def __init__(
        self,
        block: Optional[IRNode] = None,
        parent: Optional["Scope"] = None,
        config: LoweringConfig = DEFAULT_CONFIG,
    ) -> None:
        self.block = block
        self.parent = parent
        self.config = config
        self.declarations: Dict[str, List[Declaration]] = {}
        self.children: List["Scope"] = []

    def define(self, declaration: Declaration) -> None:
        """Add a declaration to this scope. Redefinitions are kept in order."""
        key = self.config.normalize_name(declaration.name)
        self.declarations.setdefault(key, []).append(declaration)

    def lookup_local(self, name: str) -> List[Declaration]:
        return list(self.declarations.get(self.config.normalize_name(name), []))

    def create_child_scope(self, block: Optional[IRNode] = None) -> "Scope":
        """Create and return a child scope."""
        child = Scope(block, parent=self, config=self.config)
        self.children.append(child)
        return child


class ScopeManager:
    """Default scope service: a stack of :class:`Scope` objects.

    ``enter_scope``/``leave_scope`` must nest; lowering pairs them through
    :func:`entered_scope`.
    """

    def __init__(self, config: LoweringConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.global_scope = Scope(config=config)
        self.current_scope = self.global_scope

    @property
    def depth(self) -> int:
        depth = 0
        scope = self.current_scope
        while scope.parent is not None:
            depth += 1
            scope = scope.parent
        return depth

    def enter_scope(self, block: IRNode) -> Scope:
        self.current_scope = self.current_scope.create_child_scope(block)
        return self.current_scope

    def leave_scope(self, block: IRNode) -> None:
        if self.current_scope is self.global_scope:
            raise ScopeError("Cannot leave the global scope")
        if self.current_scope.block is not block:
            raise ScopeError(
                f"Scope mismatch: leaving {type(block).__name__} but the innermost "
                f"scope belongs to {type(self.current_scope.block).__name__}"
            )
        self.current_scope = self.current_scope.parent

    def add_declaration(self, declaration: Declaration) -> None:
        self.current_scope.define(declaration)

    def resolve_function(self, call: Call) -> List[FunctionDeclaration]:
        """Return function declarations named like the callee, innermost scope first."""
        candidates: List[FunctionDeclaration] = []
        scope: Optional[Scope] = self.current_scope
        while scope is not None:
            for declaration in reversed(scope.lookup_local(call.callee_name)):
                if isinstance(declaration, FunctionDeclaration):
                    candidates.append(declaration)
            scope = scope.parent
        return candidates

    def identifier_name(self, node: SyntaxNode) -> str:
        """Name of the identifier a syntax node stands for."""
        name = node.name or node.code or ""
        return name.strip()


@contextmanager
def entered_scope(service: Any, block: IRNode) -> Iterator[None]:
    """Enter a scope for ``block`` and always leave it again.

    Only ``enter_scope`` and ``leave_scope`` are used, so any scope service
    works, not just :class:`ScopeManager`.
    """
    service.enter_scope(block)
    try:
        yield
    finally:
        service.leave_scope(block)
