"""Command line front end of the block code generator."""

import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from blockgen.args import Args
from blockgen.codegen import CodeGenerator, GenerationError
from blockgen.config_loader import GeneratorConfig, load_generator_config
from blockgen.errors import Diagnostic, DiagnosticReporter, ErrorCode
from blockgen.errors.codes import format_error_message
from blockgen.errors.reporter import format_success_message
from blockgen.log import get_logger, init_logging
from blockgen.workspace import Workspace, WorkspaceValidationError, load_workspace

logger = get_logger(__name__)

EXIT_SUCCESS = 0
"""Program generated."""

EXIT_VALIDATION_ERRORS = 1
"""Workspace loaded but could not be translated."""

EXIT_FILE_ERROR = 2
"""Workspace could not be read or parsed."""


@dataclass
class GenerationOutcome:
    """Result of translating one workspace file."""

    code: str | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)
    exit_code: int = EXIT_SUCCESS


def workspace_stats(workspace: Workspace) -> dict[str, int]:
    """Count blocks, procedures and variables of a workspace."""
    return {
        "blocks": sum(1 for _ in workspace.all_nodes()),
        "procedures": len(workspace.procedure_definitions()),
        "variables": len(workspace.declared_variables),
    }


def _load_diagnostics(error: WorkspaceValidationError, file: str) -> list[Diagnostic]:
    if not error.validation_errors:
        return [
            Diagnostic.error(
                format_error_message(ErrorCode.E0008, detail=str(error)),
                file,
                code=ErrorCode.E0008,
            ),
        ]
    return [
        Diagnostic.error(
            format_error_message(ErrorCode.E0007, detail=str(entry.get("msg", ""))),
            file,
            path=".".join(str(part) for part in entry.get("loc", ())),
            code=ErrorCode.E0007,
        )
        for entry in error.validation_errors
    ]


def generate_file(path: Path, config: GeneratorConfig) -> GenerationOutcome:
    """Load a workspace file and generate its program.

    Args:
        path: Workspace document.
        config: Generator settings.

    Returns:
        The generated code or the diagnostics explaining why there is none.

    """
    file = str(path)
    try:
        workspace = load_workspace(path)
    except WorkspaceValidationError as e:
        logger.warning("Failed to load workspace %s: %s", path, e)
        diagnostics = _load_diagnostics(e, file)
        exit_code = EXIT_VALIDATION_ERRORS if e.validation_errors else EXIT_FILE_ERROR
        return GenerationOutcome(diagnostics=diagnostics, exit_code=exit_code)

    stats = workspace_stats(workspace)
    warnings = [
        Diagnostic.warning(
            format_error_message(ErrorCode.E0009, name=name),
            file,
            code=ErrorCode.E0009,
        ).with_help("remove it from 'variables' or use it in a block")
        for name in workspace.unused_variables()
    ]
    try:
        code = CodeGenerator(config).generate(workspace)
    except GenerationError as e:
        logger.warning("Failed to generate %s: %s", path, e)
        return GenerationOutcome(
            diagnostics=[e.to_diagnostic(file), *warnings],
            stats=stats,
            exit_code=EXIT_VALIDATION_ERRORS,
        )
    return GenerationOutcome(code=code, diagnostics=warnings, stats=stats)


def _report(
    args: Args,
    outcome: GenerationOutcome,
    console: Console,
    error_console: Console,
) -> None:
    file = str(args.workspace)
    reporter = DiagnosticReporter()

    if args.json_output:
        report = reporter.format_json(outcome.diagnostics, file, stats=outcome.stats)
        console.out(report)
        return

    if outcome.diagnostics:
        error_console.out(reporter.format_diagnostics(outcome.diagnostics), end="")
    if outcome.code is None:
        return

    if args.check:
        console.print(f"{file}: {format_success_message(**outcome.stats)}")
        return

    code = outcome.code or ""
    if args.out:
        args.out.write_text(code, encoding="utf-8")
        console.print(f"Wrote {args.out}")
        return
    console.out(code, end="")


def run(
    args: Args,
    *,
    console: Console | None = None,
    error_console: Console | None = None,
) -> int:
    """Generate the program of the workspace named on the command line.

    Returns:
        Process exit code.

    """
    config = load_generator_config(args)
    outcome = generate_file(args.workspace, config)
    _report(
        args,
        outcome,
        console or Console(),
        error_console or Console(stderr=True),
    )
    return outcome.exit_code


def main_run(args: Args) -> None:
    """Configure logging, run the generator and exit with its status."""
    init_logging(args)
    exit_code = run(args)
    if exit_code != EXIT_SUCCESS:
        sys.exit(exit_code)
