"""Exceptions raised while generating code."""

from blockgen.errors.codes import ErrorCode
from blockgen.errors.diagnostics import Diagnostic


class GenerationError(Exception):
    """A fatal error that aborts the current generation pass."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        block_id: str | None = None,
        help_text: str | None = None,
    ) -> None:
        """Initialize a generation error.

        Args:
            message: Error message.
            code: Error code for categorization.
            block_id: Id of the node being translated, if any.
            help_text: Optional suggestion for fixing the workspace.

        """
        super().__init__(message)
        self.code = code
        self.block_id = block_id
        self.help_text = help_text

    def to_diagnostic(self, file: str) -> Diagnostic:
        """Convert this error to a diagnostic located in ``file``."""
        return Diagnostic.error(
            str(self),
            file,
            block_id=self.block_id,
            code=self.code,
            help_text=self.help_text,
        )


class UnsupportedOperationError(GenerationError):
    """A recognized construct that the generator deliberately rejects."""
