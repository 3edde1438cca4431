"""Code emitter for block code generation.

Build fragments of generated text line by line with indentation, and
splice already generated fragments into them.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from blockgen.log import get_logger

logger = get_logger(__name__)

DEFAULT_INDENT = "    "
"""Default indentation string (4 spaces)."""

MIN_INDENT_LEVEL = 0
"""Minimum indentation level."""


def prefix_lines(text: str, prefix: str) -> str:
    """Prefix every line of ``text`` except a trailing empty one.

    Args:
        text: Text to prefix.
        prefix: String put in front of each line.

    Returns:
        The prefixed text.

    """
    lines = text.split("\n")
    last = len(lines) - 1
    return "\n".join(
        line if i == last and not line else prefix + line
        for i, line in enumerate(lines)
    )


class CodeEmitter:
    """Build generated text with indentation.

    Each construct of the generator creates its own emitter, emits its
    lines, splices the text of nested chains with ``emit_block`` and
    returns ``get_code()``.
    """

    def __init__(self, *, indent_str: str = DEFAULT_INDENT) -> None:
        """Initialize an emitter.

        Args:
            indent_str: String to use for one indentation level.

        """
        self._lines: list[str] = []
        self._indent_level = 0
        self._indent_str = indent_str

    def emit(self, code: str) -> None:
        """Emit a line of code at the current indentation.

        Args:
            code: The code to emit (single line, no trailing newline).

        """
        indent = self._indent_str * self._indent_level
        self._lines.append(f"{indent}{code}")

    def emit_block(self, text: str) -> None:
        """Emit multi-line text, indenting each non-empty line.

        Args:
            text: Generated text, usually ending with a newline.

        """
        indent = self._indent_str * self._indent_level
        for line in text.splitlines():
            self._lines.append(f"{indent}{line}" if line else "")

    def append(self, suffix: str) -> None:
        """Append text to the last emitted line.

        Args:
            suffix: Text to append, such as a statement terminator.

        """
        if not self._lines:
            self._lines.append(suffix)
            return
        self._lines[-1] += suffix

    def indent(self) -> None:
        """Increase indentation level."""
        self._indent_level += 1

    def dedent(self) -> None:
        """Decrease indentation level."""
        if self._indent_level > MIN_INDENT_LEVEL:
            self._indent_level -= 1

    @contextmanager
    def indented(self) -> Iterator[None]:
        """Indent the lines emitted inside the ``with`` block."""
        self.indent()
        try:
            yield
        finally:
            self.dedent()

    def get_code(self) -> str:
        """Get the generated code as a string.

        Returns:
            The complete generated code with newlines.

        """
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"
