"""Procedure visitor for block code generation.

A procedure definition becomes a function returning a pending result.
Its body is a chain; an early return travels down that chain as a
return signal, and a final settle step turns it into the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from blockgen.codegen.errors import GenerationError
from blockgen.codegen.names import NameType
from blockgen.codegen.precedence import Order
from blockgen.codegen.runtime import (
    FLOW_RETURN,
    FUNC_REJECT,
    FUNC_RESOLVE,
    IS_FLOW_RETURN,
    PROMISE,
    REASON_PARAM,
    SIGNAL_PARAM,
    chain_start,
)
from blockgen.errors.codes import ErrorCode, format_error_message
from blockgen.log import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from blockgen.codegen.emitter import CodeEmitter
    from blockgen.codegen.generator import CodeGenerator
    from blockgen.workspace.nodes import Node

logger = get_logger(__name__)


class ProcedureVisitor:
    """Generate procedure definitions, calls and early returns."""

    def __init__(self, generator: CodeGenerator) -> None:
        """Initialize the procedure visitor.

        Args:
            generator: Generator running the current pass.

        """
        self._gen = generator

    def statement_handlers(self) -> dict[str, Callable[[Node], str | None]]:
        """Return the statement handlers by node kind."""
        return {
            "procedures_defreturn": self._visit_definition,
            "procedures_defnoreturn": self._visit_definition,
            "procedures_callnoreturn": self._visit_call_statement,
            "procedures_ifreturn": self._visit_if_return,
        }

    def value_handlers(self) -> dict[str, Callable[[Node], tuple[str, int]]]:
        """Return the value handlers by node kind."""
        return {"procedures_callreturn": self._visit_call_value}

    def _procedure_name(self, node: Node) -> str:
        name = str(node.get_field("NAME", ""))
        return self._gen.names.get_name(name, NameType.PROCEDURE)

    def _visit_definition(self, node: Node) -> None:
        """Store a procedure definition in the definitions table.

        The definition contributes no text to the chain it appears in.
        """
        name = self._procedure_name(node)
        args = [self._gen.names.get_name(a, NameType.VARIABLE) for a in node.arguments]

        with self._gen.procedure_scope():
            stages = self._gen.branch_to_code(node, "STACK")
            return_value = self._gen.value_to_code(node, "RETURN", Order.NONE)

        # Loop trap, then statement prefix, then the body.
        stages = (
            self._gen.instrument(self._gen.config.infinite_loop_trap, node)
            + self._gen.instrument(self._gen.config.statement_prefix, node)
            + stages
        )
        if return_value:
            stages += self._gen.simple_stage(f"return {FLOW_RETURN}({return_value});")

        emitter = self._gen.new_emitter()
        emitter.emit(f"function {name}({', '.join(args)}) {{")
        with emitter.indented():
            emitter.emit(
                f"return new {PROMISE}(function({FUNC_RESOLVE}, {FUNC_REJECT}) {{",
            )
            with emitter.indented():
                emitter.emit(chain_start())
                emitter.emit_block(stages)
                self._emit_settle(emitter)
            emitter.emit("});")
        emitter.emit("}")

        code = emitter.get_code()
        self._gen.definitions[name] = self._gen.finalize_statement(node, code)
        logger.debug("Defined procedure %s(%s)", name, ", ".join(args))

    def _emit_settle(self, emitter: CodeEmitter) -> None:
        """Emit the step that settles the procedure result.

        A return signal resolves with its payload, normal completion
        resolves with nothing and a failure rejects with its reason.
        """
        emitter.emit(f".then(function({SIGNAL_PARAM}) {{")
        with emitter.indented():
            emitter.emit(f"if ({IS_FLOW_RETURN}({SIGNAL_PARAM})) {{")
            with emitter.indented():
                emitter.emit(f"{FUNC_RESOLVE}({SIGNAL_PARAM}.value);")
            emitter.emit("} else {")
            with emitter.indented():
                emitter.emit(f"{FUNC_RESOLVE}();")
            emitter.emit("}")
        emitter.emit(f"}}, function({REASON_PARAM}) {{")
        with emitter.indented():
            emitter.emit(f"{FUNC_REJECT}({REASON_PARAM});")
        emitter.emit("});")

    def _call(self, node: Node) -> str:
        name = self._procedure_name(node)
        args = [
            self._gen.value_to_code(node, f"ARG{i}", Order.COMMA) or "null"
            for i in range(len(node.arguments))
        ]
        return f"{name}({', '.join(args)})"

    def _visit_call_value(self, node: Node) -> tuple[str, int]:
        return self._call(node), Order.FUNCTION_CALL

    def _visit_call_statement(self, node: Node) -> str:
        # The next statement waits for the call to settle.
        call = self._call(node)
        return self._gen.simple_stage(f"return {call}.then(function() {{}});")

    def _visit_if_return(self, node: Node) -> str:
        if not self._gen.in_procedure:
            raise GenerationError(
                format_error_message(ErrorCode.E0005),
                code=ErrorCode.E0005,
                block_id=node.id,
                help_text="move the return into a procedure body",
            )
        condition = self._gen.value_to_code(node, "CONDITION", Order.NONE) or "false"
        if node.has_return_value:
            value = self._gen.value_to_code(node, "VALUE", Order.NONE) or "null"
            exit_line = f"return {FLOW_RETURN}({value});"
        else:
            exit_line = f"return {FLOW_RETURN}();"
        return self._gen.simple_stage(
            f"if ({condition}) {{\n{self._gen.config.indent}{exit_line}\n}}",
        )
