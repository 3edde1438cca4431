"""Error handling and diagnostics for the block code generator.

Provide error codes, diagnostic messages, and compiler-style formatting
for reporting generation and input errors.
"""

from blockgen.errors.codes import ErrorCode
from blockgen.errors.diagnostics import Diagnostic, Severity
from blockgen.errors.reporter import DiagnosticReporter

__all__ = [
    "Diagnostic",
    "DiagnosticReporter",
    "ErrorCode",
    "Severity",
]
