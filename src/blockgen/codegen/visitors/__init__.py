"""Node visitors for block code generation."""

from blockgen.codegen.visitors.expressions import ExpressionVisitor
from blockgen.codegen.visitors.loops import LoopVisitor
from blockgen.codegen.visitors.procedures import ProcedureVisitor
from blockgen.codegen.visitors.statements import StatementVisitor

__all__ = [
    "ExpressionVisitor",
    "LoopVisitor",
    "ProcedureVisitor",
    "StatementVisitor",
]
