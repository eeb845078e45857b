#!/usr/bin/env python3
"""
pwsh-lower CLI - Command-line interface for the PowerShell lowering pass.

Reads the JSON syntax tree dumped by the PowerShell parser script and prints
the lowered IR as JSON or as an indented tree.

Usage:
    pwsh-lower script.ast.json                 # Lower a script, print IR
    pwsh-lower script.ast.json -o script.ir.json
    pwsh-lower expr.ast.json --expression      # Lower the root as one expression
    pwsh-lower script.ast.json --strict        # Stop at the first error
    pwsh-lower script.ast.json --format tree   # Human-readable IR tree
"""

import json
import logging
import sys
from pathlib import Path

import click

from pwsh_lowering.src.common.constants import (
    DEFAULT_CONFIG,
    STAGE_LOADING,
    LoweringConfig,
)
from pwsh_lowering.src.common.diagnostics import DiagnosticError, ProgramDiagnostics
from pwsh_lowering.src.ir.nodes import format_ir, ir_to_dict
from pwsh_lowering.src.lowering.lowerer import ScriptLowerer
from pwsh_lowering.src.syntax.loader import SyntaxLoadError, load_syntax_json


def lower_json_source(
    source_text: str,
    source_name: str = "<string>",
    as_expression: bool = False,
    log_level: str = "error",
    strict: bool = False,
    config: LoweringConfig = DEFAULT_CONFIG,
    output_format: str = "json",
) -> tuple[bool, str, list]:
    """
    Lower a JSON syntax tree dump to IR.

    Args:
        source_text: JSON document produced by the PowerShell parser script
        source_name: Name of the source (for locations and error messages)
        as_expression: Lower the root node as a single expression
        log_level: Logging verbosity level
        strict: Abort on the first error diagnostic
        config: Lowering configuration settings
        output_format: "json" for the IR as JSON, "tree" for an indented tree

    Returns:
        (success: bool, result: str, diagnostics: list)
    """
    diagnostics = ProgramDiagnostics(log_level=log_level, raise_errors=strict)

    source_file = None if source_name == "<string>" else source_name
    try:
        root = load_syntax_json(source_text, source_file)
    except SyntaxLoadError as exc:
        diagnostics.default_stage = STAGE_LOADING
        diagnostics.raise_errors = False
        diagnostics.error(str(exc))
        return False, "Loading failed", diagnostics.get_messages()

    lowerer = ScriptLowerer(diagnostics=diagnostics, config=config)
    try:
        if as_expression:
            lowered = lowerer.lower_expression(root)
        else:
            lowered = lowerer.lower_script(root)
    except DiagnosticError:
        return False, "Lowering aborted", diagnostics.get_messages()

    if output_format == "tree":
        result = format_ir(lowered)
    else:
        result = json.dumps(ir_to_dict(lowered), indent=2)
    return True, result, diagnostics.get_messages()


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


@click.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file for the IR (default: stdout)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "tree"], case_sensitive=False),
    default="json",
    help="Print the IR as JSON or as an indented tree",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
@click.option("--strict", is_flag=True, help="Abort at the first lowering error")
@click.option(
    "--expression",
    is_flag=True,
    help="Lower the root node as a single expression instead of a script",
)
@click.option(
    "--case-sensitive",
    is_flag=True,
    help="Match function and parameter names case-sensitively",
)
def main(
    input_file, output, output_format, log_level, strict, expression, case_sensitive
):
    """Lower a PowerShell syntax tree dump to IR."""
    setup_logging(log_level)

    try:
        source_text = input_file.read_text(encoding="utf-8")
    except OSError as e:
        click.echo(f"Failed to read input file: {e}", err=True)
        sys.exit(1)

    config = LoweringConfig(case_insensitive_names=not case_sensitive)
    success, result, diagnostic_messages = lower_json_source(
        source_text,
        source_name=str(input_file.resolve()),
        as_expression=expression,
        log_level=log_level,
        strict=strict,
        config=config,
        output_format=output_format.lower(),
    )

    for message in diagnostic_messages:
        click.echo(message, err=True)

    if not success:
        click.echo(f"Lowering failed: {result}", err=True)
        sys.exit(1)

    if output:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(result, encoding="utf-8")
        except OSError as e:
            click.echo(f"Failed to write output file: {e}", err=True)
            sys.exit(1)
    else:
        click.echo(result)

    if any(message.startswith("ERROR") for message in diagnostic_messages):
        sys.exit(1)


if __name__ == "__main__":
    main()
