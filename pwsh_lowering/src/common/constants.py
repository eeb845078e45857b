from dataclasses import dataclass

"""Shared constants and configuration for the lowering pipeline."""

# Stage names used for diagnostics
STAGE_LOADING = "loading"
STAGE_LOWERING = "lowering"

# PowerShell spells parameters "-Name" at call sites and "$Name" in declarations
FLAG_MARKER = "-"
PARAMETER_SIGIL = "$"

# Primitive type names produced for literals
INTEGER_TYPE_NAME = "integer"
STRING_TYPE_NAME = "string"
UNKNOWN_TYPE_NAME = "unknown"


@dataclass(frozen=True)
class LoweringConfig:
    """Knobs for a lowering run."""

    parameter_sigil: str = PARAMETER_SIGIL
    flag_marker: str = FLAG_MARKER
    case_insensitive_names: bool = True
    integer_type_name: str = INTEGER_TYPE_NAME
    string_type_name: str = STRING_TYPE_NAME

    def normalize_name(self, name: str) -> str:
        """Key used for name comparisons (PowerShell names ignore case)."""
        return name.casefold() if self.case_insensitive_names else name


DEFAULT_CONFIG = LoweringConfig()
