"""Common utilities shared across lowering stages."""

from .diagnostics import (
    Diagnostic,
    DiagnosticError,
    DiagnosticSeverity,
    ProgramDiagnostics,
)
from .source_location import SourceLocation, UNKNOWN_LOCATION
from .constants import *

__all__ = [
    "Diagnostic",
    "DiagnosticError",
    "DiagnosticSeverity",
    "ProgramDiagnostics",
    "SourceLocation",
    "UNKNOWN_LOCATION",
    # Constants
    "DEFAULT_CONFIG",
    "LoweringConfig",
    "FLAG_MARKER",
    "PARAMETER_SIGIL",
    "STAGE_LOADING",
    "STAGE_LOWERING",
]
