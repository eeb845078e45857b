import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Any
from pathlib import Path

"""Unified diagnostic collection for the lowering pipeline."""

logger = logging.getLogger(__name__)


class DiagnosticSeverity(Enum):
    """Severity levels for lowering diagnostics."""

    DEBUG = "debug"  # Internal information
    INFO = "info"  # Informational messages for users
    WARNING = "warning"  # Issues that degrade a node but keep the pass going
    ERROR = "error"  # Structural problems in the syntax tree


_SEVERITY_ORDER = [
    DiagnosticSeverity.DEBUG,
    DiagnosticSeverity.INFO,
    DiagnosticSeverity.WARNING,
    DiagnosticSeverity.ERROR,
]

_LOG_LEVELS = {
    DiagnosticSeverity.DEBUG: logging.DEBUG,
    DiagnosticSeverity.INFO: logging.INFO,
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.ERROR: logging.ERROR,
}


class DiagnosticError(Exception):
    """Raised for error diagnostics when the collector runs in strict mode."""

    def __init__(self, diagnostic: "Diagnostic") -> None:
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)


@dataclass
class Diagnostic:
    """A single diagnostic message with context."""

    severity: DiagnosticSeverity
    message: str
    stage: str  # loading, lowering, cli
    line: int = 0
    column: int = 0
    source_file: Optional[str] = None
    node: Optional[Any] = None  # SyntaxNode reference if available
    category: Optional[str] = None  # e.g. MalformedNodeError


class ProgramDiagnostics:
    """Central diagnostic collection for a lowering run.

    Every soft or subtree-local problem found while lowering ends up here
    instead of aborting the pass. Entries are mirrored to the module logger.

    Usage:
        diagnostics = ProgramDiagnostics()
        diagnostics.warning("Unsupported node kind", category="UnsupportedNodeKind")
        if diagnostics.has_errors():
            print(diagnostics.format_for_user())
    """

    def __init__(
        self,
        verbose: bool = False,
        debug: bool = False,
        log_level: Optional[str] = None,
        raise_errors: bool = False,
    ):
        self.diagnostics: List[Diagnostic] = []
        if log_level is not None:
            verbose = verbose or log_level in ("debug", "info")
            debug = debug or log_level == "debug"
        self.verbose = verbose
        self.debug = debug
        self.raise_errors = raise_errors
        self._error_count = 0
        self._warning_count = 0
        self.default_stage = "unknown"

    def info(
        self,
        message: str,
        stage: str | None = None,
        node: Optional[Any] = None,
        category: Optional[str] = None,
    ) -> None:
        """Add an informational message (kept in verbose mode)."""
        if self.verbose:
            self._add(DiagnosticSeverity.INFO, message, stage, node, category)
        else:
            logger.info(message)

    def warning(
        self,
        message: str,
        stage: str | None = None,
        node: Optional[Any] = None,
        category: Optional[str] = None,
    ) -> None:
        """Add a warning (always kept, doesn't stop lowering)."""
        self._add(DiagnosticSeverity.WARNING, message, stage, node, category)
        self._warning_count += 1

    def error(
        self,
        message: str,
        stage: str | None = None,
        node: Optional[Any] = None,
        category: Optional[str] = None,
    ) -> None:
        """Add an error. Raises DiagnosticError in strict mode."""
        diag = self._add(DiagnosticSeverity.ERROR, message, stage, node, category)
        self._error_count += 1
        if self.raise_errors:
            raise DiagnosticError(diag)

    def _add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        stage: str | None,
        node: Optional[Any],
        category: Optional[str],
    ) -> Diagnostic:
        """Internal method to add a diagnostic."""
        line = 0
        column = 0
        source_file = None
        location = getattr(node, "location", None)
        if location is not None:
            line = location.line
            column = location.column
            source_file = location.file

        diag = Diagnostic(
            severity=severity,
            message=message,
            stage=stage or self.default_stage,
            line=line,
            column=column,
            source_file=source_file,
            node=node,
            category=category,
        )
        self.diagnostics.append(diag)
        logger.log(_LOG_LEVELS[severity], self._format_diagnostic(diag))
        return diag

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return self._error_count > 0

    def error_count(self) -> int:
        return self._error_count

    def warning_count(self) -> int:
        return self._warning_count

    def by_category(self, category: str) -> List[Diagnostic]:
        """Return all diagnostics recorded under the given category."""
        return [diag for diag in self.diagnostics if diag.category == category]

    def get_messages(
        self, min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    ) -> List[str]:
        """Get formatted messages at or above the specified severity level."""
        messages = []
        for diag in self.diagnostics:
            if _SEVERITY_ORDER.index(diag.severity) < _SEVERITY_ORDER.index(
                min_severity
            ):
                continue

            messages.append(self._format_diagnostic(diag))
        return messages

    def _format_diagnostic(self, diag: Diagnostic) -> str:
        """Format a single diagnostic for display."""
        # Format: SEVERITY [stage:file:line:col]: (category) message
        location_parts = [diag.stage]
        if diag.source_file:
            location_parts.append(Path(diag.source_file).name)
        if diag.line > 0:
            location_parts.append(str(diag.line))
            if diag.column > 0:
                location_parts.append(str(diag.column))

        location = ":".join(location_parts)
        category = f"({diag.category}) " if diag.category else ""
        return f"{diag.severity.value.upper()} [{location}]: {category}{diag.message}"

    def format_for_user(self) -> str:
        """Format all diagnostics for user-friendly output."""
        if not self.diagnostics:
            return "No diagnostics."

        if self.debug:
            min_severity = DiagnosticSeverity.DEBUG
        elif self.verbose:
            min_severity = DiagnosticSeverity.INFO
        else:
            min_severity = DiagnosticSeverity.WARNING

        messages = self.get_messages(min_severity)

        summary = f"\nLowering summary: {self._error_count} error(s), {self._warning_count} warning(s)"

        return "\n".join(messages) + summary
