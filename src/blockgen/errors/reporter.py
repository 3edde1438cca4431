"""Error reporter for the block code generator.

Provide compiler-style formatting of diagnostics with a location line
and helpful suggestions.
"""

import json
from collections.abc import Mapping
from io import StringIO

from blockgen.errors.diagnostics import Diagnostic, Severity
from blockgen.log import get_logger

logger = get_logger(__name__)

GUTTER_WIDTH = 5
"""Width of the gutter before help lines."""


class DiagnosticReporter:
    """Format and report diagnostic messages."""

    def format_diagnostic(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: The diagnostic to format.

        Returns:
            Formatted diagnostic string.

        Example output:
            error[E0004]: break outside of a loop
              --> program.yaml (block 'b7')
                 = help: move the break block inside a loop body

        """
        output = StringIO()

        self._write_header(output, diagnostic)
        output.write(f"  --> {diagnostic.location}\n")

        if diagnostic.help_text:
            self._write_help(output, diagnostic.help_text)

        return output.getvalue()

    def format_diagnostics(
        self,
        diagnostics: list[Diagnostic],
        *,
        include_summary: bool = True,
    ) -> str:
        """Format multiple diagnostics.

        Args:
            diagnostics: List of diagnostics to format.
            include_summary: Whether to include a summary line at the end.

        Returns:
            Formatted string with all diagnostics.

        """
        if not diagnostics:
            return ""

        output = StringIO()
        for i, diagnostic in enumerate(diagnostics):
            if i > 0:
                output.write("\n")
            output.write(self.format_diagnostic(diagnostic))

        if include_summary:
            output.write("\n")
            self._write_summary(output, diagnostics)

        return output.getvalue()

    def format_json(
        self,
        diagnostics: list[Diagnostic],
        file: str,
        *,
        stats: Mapping[str, int | str] | None = None,
    ) -> str:
        """Format diagnostics as JSON.

        Args:
            diagnostics: List of diagnostics.
            file: Workspace file being checked.
            stats: Optional statistics about the workspace.

        Returns:
            JSON string representation.

        """
        errors = [d for d in diagnostics if d.severity == Severity.ERROR]
        warnings = [d for d in diagnostics if d.severity == Severity.WARNING]

        result: dict[str, object] = {
            "version": "1.0",
            "file": file,
            "valid": len(errors) == 0,
            "errors": [d.to_dict() for d in errors],
            "warnings": [d.to_dict() for d in warnings],
        }

        if stats:
            result["stats"] = dict(stats)

        return json.dumps(result, indent=2)

    def _write_header(self, output: StringIO, diagnostic: Diagnostic) -> None:
        severity = diagnostic.severity.value
        if diagnostic.code:
            output.write(f"{severity}[{diagnostic.code.value}]: {diagnostic.message}\n")
        else:
            output.write(f"{severity}: {diagnostic.message}\n")

    def _write_help(self, output: StringIO, help_text: str) -> None:
        gutter = " " * GUTTER_WIDTH
        output.write(f"{gutter}= help: {help_text}\n")

    def _write_summary(
        self,
        output: StringIO,
        diagnostics: list[Diagnostic],
    ) -> None:
        """Write a summary line.

        Args:
            output: Output buffer.
            diagnostics: List of all diagnostics.

        """
        errors = sum(1 for d in diagnostics if d.severity == Severity.ERROR)
        warnings = sum(1 for d in diagnostics if d.severity == Severity.WARNING)

        if errors == 0 and warnings == 0:
            return

        parts = []
        if errors > 0:
            parts.append(f"{errors} error{'s' if errors != 1 else ''}")
        if warnings > 0:
            parts.append(f"{warnings} warning{'s' if warnings != 1 else ''}")

        summary = " and ".join(parts)
        files = {d.file for d in diagnostics}
        if len(files) == 1:
            output.write(f"Found {summary} in {next(iter(files))}\n")
        else:
            output.write(f"Found {summary} in {len(files)} files\n")


def format_success_message(
    *,
    blocks: int = 0,
    procedures: int = 0,
    variables: int = 0,
) -> str:
    """Format a success message for a valid workspace.

    Args:
        blocks: Number of nodes in the workspace.
        procedures: Number of procedure definitions.
        variables: Number of declared variables.

    Returns:
        Formatted success message.

    """
    parts = []
    if blocks > 0:
        parts.append(f"{blocks} block{'s' if blocks != 1 else ''}")
    if procedures > 0:
        parts.append(f"{procedures} procedure{'s' if procedures != 1 else ''}")
    if variables > 0:
        parts.append(f"{variables} variable{'s' if variables != 1 else ''}")

    if parts:
        return f"valid ({', '.join(parts)})"

    return "valid"
