"""Diagnostic messages for the block code generator.

Provide diagnostic dataclasses for representing errors and warnings
located at a workspace node.
"""

from dataclasses import dataclass
from enum import Enum

from blockgen.errors.codes import ErrorCode
from blockgen.log import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    """An error that prevents code generation."""

    WARNING = "warning"
    """A potential issue that does not prevent generation."""


@dataclass
class Diagnostic:
    """A diagnostic message with workspace location.

    The location is the workspace file plus, when known, the id of the
    node the diagnostic refers to or the path of the offending field.
    """

    severity: Severity
    """The severity level of this diagnostic."""

    message: str
    """The primary diagnostic message (no leading capital, no trailing period)."""

    file: str
    """Path to the workspace document."""

    block_id: str | None = None
    """Id of the node the diagnostic refers to."""

    path: str | None = None
    """Dotted path of a document field, for validation errors."""

    code: ErrorCode | None = None
    """Optional error code for categorization."""

    help_text: str | None = None
    """Optional help text with suggestions for fixing the issue."""

    @classmethod
    def error(
        cls,
        message: str,
        file: str,
        *,
        block_id: str | None = None,
        path: str | None = None,
        code: ErrorCode | None = None,
        help_text: str | None = None,
    ) -> "Diagnostic":
        """Create an error diagnostic.

        Args:
            message: The error message.
            file: Workspace file path.
            block_id: Optional id of the offending node.
            path: Optional dotted path of the offending field.
            code: Optional error code.
            help_text: Optional help text.

        Returns:
            A new Diagnostic with ERROR severity.

        """
        return cls(
            severity=Severity.ERROR,
            message=message,
            file=file,
            block_id=block_id,
            path=path,
            code=code,
            help_text=help_text,
        )

    @classmethod
    def warning(
        cls,
        message: str,
        file: str,
        *,
        block_id: str | None = None,
        code: ErrorCode | None = None,
        help_text: str | None = None,
    ) -> "Diagnostic":
        """Create a warning diagnostic."""
        return cls(
            severity=Severity.WARNING,
            message=message,
            file=file,
            block_id=block_id,
            code=code,
            help_text=help_text,
        )

    def with_help(self, help_text: str) -> "Diagnostic":
        """Add help text to this diagnostic.

        Args:
            help_text: The help text to add.

        Returns:
            Self for chaining.

        """
        self.help_text = help_text
        return self

    @property
    def location(self) -> str:
        """Human-readable location of the diagnostic."""
        if self.block_id is not None:
            return f"{self.file} (block '{self.block_id}')"
        if self.path:
            return f"{self.file} ({self.path})"
        return self.file

    def to_dict(self) -> dict[str, object]:
        """Convert this diagnostic to a dictionary for JSON serialization.

        Returns:
            Dictionary representation suitable for JSON output.

        """
        location: dict[str, str] = {"file": self.file}
        if self.block_id is not None:
            location["block_id"] = self.block_id
        if self.path is not None:
            location["path"] = self.path

        result: dict[str, object] = {
            "severity": self.severity.value,
            "message": self.message,
            "location": location,
        }

        if self.code is not None:
            result["code"] = self.code.value

        if self.help_text is not None:
            result["help"] = self.help_text

        return result
