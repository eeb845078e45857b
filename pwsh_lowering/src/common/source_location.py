"""Source location utilities for tracking code positions."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
    """Represents a region in PowerShell source code."""

    file: Optional[str] = None
    line: int = 0
    column: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:col."""
        parts = []
        if self.file:
            parts.append(Path(self.file).name)
        if self.line > 0:
            parts.append(str(self.line))
            if self.column > 0:
                parts.append(str(self.column))
        return ":".join(parts) if parts else "unknown"


UNKNOWN_LOCATION = SourceLocation()
