"""Statement visitor for block code generation.

Generate chain stages for assignments and conditionals.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from blockgen.codegen.names import NameType
from blockgen.codegen.precedence import Order
from blockgen.codegen.runtime import stage_close, stage_open
from blockgen.log import get_logger
from blockgen.workspace.nodes import VARIABLE_FIELD

if TYPE_CHECKING:
    from collections.abc import Callable

    from blockgen.codegen.generator import CodeGenerator
    from blockgen.workspace.nodes import Node

logger = get_logger(__name__)


class StatementVisitor:
    """Generate stages for statements that do not alter control flow."""

    def __init__(self, generator: CodeGenerator) -> None:
        """Initialize the statement visitor.

        Args:
            generator: Generator running the current pass.

        """
        self._gen = generator
        self._dispatch: dict[str, Callable[[Node], str]] = {
            "variables_set": self._visit_variable_set,
            "math_change": self._visit_math_change,
            "controls_if": self._visit_if,
        }

    def handlers(self) -> dict[str, Callable[[Node], str]]:
        """Return the handlers by node kind."""
        return dict(self._dispatch)

    def _variable(self, node: Node) -> str:
        name = str(node.get_field(VARIABLE_FIELD, ""))
        return self._gen.names.get_name(name, NameType.VARIABLE)

    def _visit_variable_set(self, node: Node) -> str:
        value = self._gen.value_to_code(node, "VALUE", Order.ASSIGNMENT) or "0"
        return self._gen.simple_stage(f"{self._variable(node)} = {value};")

    def _visit_math_change(self, node: Node) -> str:
        delta = self._gen.value_to_code(node, "DELTA", Order.ASSIGNMENT) or "0"
        return self._gen.simple_stage(f"{self._variable(node)} += {delta};")

    def _visit_if(self, node: Node) -> str:
        """Generate a stage that runs at most one branch chain.

        Each branch is a fresh chain returned from the stage, so the
        statements after the conditional wait for the chosen branch.
        """
        emitter = self._gen.new_emitter()
        emitter.emit(stage_open())
        with emitter.indented():
            n = 0
            while True:
                condition = (
                    self._gen.value_to_code(node, f"IF{n}", Order.NONE) or "false"
                )
                keyword = "if" if n == 0 else "} else if"
                emitter.emit(f"{keyword} ({condition}) {{")
                with emitter.indented():
                    branch = self._gen.branch_to_code(node, f"DO{n}")
                    self._gen.emit_chain(emitter, branch)
                n += 1
                if f"IF{n}" not in node.values and f"DO{n}" not in node.statements:
                    break
            if "ELSE" in node.statements:
                emitter.emit("} else {")
                with emitter.indented():
                    branch = self._gen.branch_to_code(node, "ELSE")
                    self._gen.emit_chain(emitter, branch)
            emitter.emit("}")
        emitter.emit(stage_close())
        logger.debug("Generated conditional %s with %d branches", node.id, n)
        return emitter.get_code()
