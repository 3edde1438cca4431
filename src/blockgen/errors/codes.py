"""Error code definitions for the block code generator.

Provide standardized error codes for categorizing and identifying
generation and input validation failures.
"""

from enum import Enum

from blockgen.log import get_logger

logger = get_logger(__name__)

_GENERATION_MAX = 6
"""Maximum error code number for generation errors."""


class ErrorCode(str, Enum):
    """Generator error codes.

    Error codes follow the convention E0001-E9999 where the number
    indicates the error category:
    - E0001-E0006: Generation errors (abort the pass)
    - E0007+: Input errors (workspace documents and configuration)
    """

    # Generation errors
    E0001 = "E0001"
    """No translation rule for a node kind."""

    E0002 = "E0002"
    """Unknown flow statement."""

    E0003 = "E0003"
    """Flow statement that the generator does not support."""

    E0004 = "E0004"
    """Break outside of a loop."""

    E0005 = "E0005"
    """Procedure return outside of a procedure definition."""

    E0006 = "E0006"
    """Unknown output language."""

    # Input errors
    E0007 = "E0007"
    """Workspace document failed validation."""

    E0008 = "E0008"
    """Workspace document could not be read or parsed."""

    E0009 = "E0009"
    """Variable kind declared for a variable the graph never uses."""

    @property
    def category(self) -> str:
        """Get the error category for this code.

        Returns:
            Human-readable category name.

        """
        code_num = int(self.value[1:])
        if code_num <= _GENERATION_MAX:
            return "generation"
        return "input"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.E0001: "no code generator for node kind '{kind}'",
    ErrorCode.E0002: "unknown flow statement '{flow}'",
    ErrorCode.E0003: "flow statement '{flow}' is not supported",
    ErrorCode.E0004: "break outside of a loop",
    ErrorCode.E0005: "procedure return outside of a procedure definition",
    ErrorCode.E0006: "unknown target language '{target}'",
    ErrorCode.E0007: "invalid workspace: {detail}",
    ErrorCode.E0008: "cannot load workspace: {detail}",
    ErrorCode.E0009: "variable '{name}' is declared but never used",
}


def format_error_message(code: ErrorCode, **kwargs: str) -> str:
    """Format an error message with the given parameters.

    Args:
        code: The error code.
        **kwargs: Parameters to substitute in the message template.

    Returns:
        Formatted error message string.

    """
    template = ERROR_MESSAGES.get(code, "unknown error")
    try:
        return template.format(**kwargs)
    except KeyError as e:
        logger.warning("Missing parameter for error message: %s", e)
        return template
