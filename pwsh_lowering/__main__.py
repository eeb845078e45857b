#!/usr/bin/env python3
"""
pwsh-lower CLI - Entry point for the PowerShell lowering pass.

This module allows running the lowering pass as:
    python -m pwsh_lowering script.ast.json
    pwsh-lower script.ast.json  (when installed via pip)
"""

from pwsh_lowering.cli import main

if __name__ == "__main__":
    main()
