from .scope_manager import Scope, ScopeError, ScopeManager, entered_scope

"""Default scope and symbol service."""


__all__ = ["Scope", "ScopeError", "ScopeManager", "entered_scope"]
