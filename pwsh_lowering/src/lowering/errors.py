"""Lowering exceptions and diagnostic categories."""

from enum import Enum
from typing import Optional

from pwsh_lowering.src.syntax.nodes import SyntaxNode


class LoweringIssue(Enum):
    """Diagnostic categories recorded while lowering."""

    MALFORMED_NODE = "MalformedNodeError"  # structural invariant violated
    UNSUPPORTED_NODE_KIND = "UnsupportedNodeKind"  # kind outside the dispatch table
    AMBIGUOUS_DECLARATION = "AmbiguousDeclarationWarning"  # several call candidates
    UNRESOLVED_SYMBOL = "UnresolvedSymbolWarning"  # missing name or type info


class LoweringError(Exception):
    """Base class for lowering failures tied to a syntax node."""

    def __init__(self, message: str, node: Optional[SyntaxNode] = None) -> None:
        self.message = message
        self.node = node
        location = ""
        if node is not None and node.location.line > 0:
            location = f" at {node.location.line}:{node.location.column}"
        super().__init__(f"{message}{location}")


class MalformedNodeError(LoweringError):
    """A syntax node violates a structural invariant; its subtree is lost."""

    issue = LoweringIssue.MALFORMED_NODE
