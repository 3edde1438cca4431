"""Parse and organize app args."""

from collections.abc import Callable
from pathlib import Path

import typed_argparse as tap


class Args(tap.TypedArgs):
    """App args."""

    workspace: Path = tap.arg(
        positional=True,
        help="Workspace document (YAML or JSON) describing the block graph",
    )
    target: str | None = tap.arg(
        help="Output language: javascript, ch or cpp (default: from config)",
        default=None,
    )
    out: Path | None = tap.arg(
        help="Output file path for the generated program (default: stdout)",
        default=None,
    )
    config: Path | None = tap.arg(
        help="Explicit generator config file (TOML)",
        default=None,
    )
    check: bool = tap.arg(
        help="Validate and generate without printing the program",
        default=False,
    )
    json_output: bool = tap.arg(
        help="Report diagnostics as JSON",
        default=False,
    )
    verbose: bool = tap.arg(help="Enables verbose (DEBUG) logging", default=False)


def bind_and_run(app_main: Callable[[Args], None]) -> None:
    """Parse args and run the app passing the parsed args."""
    tap.Parser(Args).bind(app_main).run()
