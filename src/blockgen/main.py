"""Block code generator CLI entry point."""

from blockgen.args import bind_and_run
from blockgen.cli import main_run


def main() -> None:
    """Entry point for the CLI."""
    bind_and_run(main_run)


if __name__ == "__main__":
    main()
