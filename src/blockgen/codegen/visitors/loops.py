"""Loop visitor for block code generation.

Every loop becomes a single stage that returns the pending result of a
loop driver. The driver runs one iteration chain at a time and passes
each iteration a token identifying the loop invocation; ``break`` makes
the iteration chain resolve with a break signal carrying that token.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from blockgen.codegen.errors import GenerationError, UnsupportedOperationError
from blockgen.codegen.names import NameType
from blockgen.codegen.precedence import Order
from blockgen.codegen.runtime import (
    FLOW_BREAK,
    MATH,
    PROMISE_TIMES,
    PROMISE_WHILE,
    stage_close,
    stage_open,
)
from blockgen.codegen.visitors.expressions import format_number, number_field
from blockgen.errors.codes import ErrorCode, format_error_message
from blockgen.log import get_logger
from blockgen.workspace.nodes import VARIABLE_FIELD

if TYPE_CHECKING:
    from collections.abc import Callable

    from blockgen.codegen.emitter import CodeEmitter
    from blockgen.codegen.generator import CodeGenerator
    from blockgen.workspace.nodes import Node

logger = get_logger(__name__)

_NUMBER = re.compile(r"\s*-?\d+(\.\d+)?([eE][-+]?\d+)?\s*")
_IDENTIFIER = re.compile(r"\w+", re.ASCII)


def is_number(text: str) -> bool:
    """Return True when text is a plain decimal literal."""
    return _NUMBER.fullmatch(text) is not None


def is_simple_operand(text: str) -> bool:
    """Return True when text can be evaluated repeatedly without hoisting."""
    return is_number(text) or _IDENTIFIER.fullmatch(text) is not None


class LoopVisitor:
    """Generate loop stages and break stages."""

    def __init__(self, generator: CodeGenerator) -> None:
        """Initialize the loop visitor.

        Args:
            generator: Generator running the current pass.

        """
        self._gen = generator
        self._dispatch: dict[str, Callable[[Node], str]] = {
            "controls_repeat": self._visit_repeat,
            "controls_repeat_ext": self._visit_repeat,
            "controls_whileUntil": self._visit_while_until,
            "controls_for": self._visit_for,
            "controls_forEach": self._visit_for_each,
            "controls_flow_statements": self._visit_flow_statement,
        }

    def handlers(self) -> dict[str, Callable[[Node], str]]:
        """Return the handlers by node kind."""
        return dict(self._dispatch)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _hoist(self, emitter: CodeEmitter, code: str, hint: str) -> str:
        """Evaluate code once into a fresh variable unless it is simple."""
        if is_simple_operand(code):
            return code
        name = self._gen.names.get_distinct_name(hint, NameType.VARIABLE)
        emitter.emit(f"var {name} = {code};")
        return name

    def _emit_while(
        self,
        emitter: CodeEmitter,
        condition: str,
        token: str,
        stages: str,
        *,
        prologue: tuple[str, ...] = (),
    ) -> None:
        emitter.emit(f"return {PROMISE_WHILE}(function() {{")
        with emitter.indented():
            emitter.emit(f"return {condition};")
        emitter.emit(f"}}, function({token}) {{")
        with emitter.indented():
            for line in prologue:
                emitter.emit(line)
            self._gen.emit_chain(emitter, stages)
        emitter.emit("});")

    def _variable(self, node: Node) -> str:
        name = str(node.get_field(VARIABLE_FIELD, ""))
        return self._gen.names.get_name(name, NameType.VARIABLE)

    # =========================================================================
    # Loops
    # =========================================================================

    def _visit_repeat(self, node: Node) -> str:
        if "TIMES" in node.fields:
            repeats = format_number(number_field(node, "TIMES"))
        else:
            repeats = self._gen.value_to_code(node, "TIMES", Order.ASSIGNMENT) or "0"

        emitter = self._gen.new_emitter()
        emitter.emit(stage_open())
        with emitter.indented():
            end = self._hoist(emitter, repeats, "repeat_end")
            counter = self._gen.names.get_distinct_name("count", NameType.VARIABLE)
            with self._gen.loop_scope() as token:
                stages = self._gen.loop_body(node)
            body = f"function({token}, {counter})"
            emitter.emit(f"return {PROMISE_TIMES}({end}, {body} {{")
            with emitter.indented():
                self._gen.emit_chain(emitter, stages)
            emitter.emit("});")
        emitter.emit(stage_close())
        return emitter.get_code()

    def _visit_while_until(self, node: Node) -> str:
        until = str(node.get_field("MODE", "WHILE")).upper() == "UNTIL"
        condition = (
            self._gen.value_to_code(
                node,
                "BOOL",
                Order.LOGICAL_NOT if until else Order.NONE,
            )
            or "false"
        )
        if until:
            condition = f"!{condition}"

        emitter = self._gen.new_emitter()
        emitter.emit(stage_open())
        with emitter.indented():
            with self._gen.loop_scope() as token:
                stages = self._gen.loop_body(node)
            self._emit_while(emitter, condition, token, stages)
        emitter.emit(stage_close())
        return emitter.get_code()

    def _visit_for(self, node: Node) -> str:
        """Generate a counting loop.

        With literal bounds the direction is decided here. Otherwise the
        direction is decided once, from the start and end values, before
        the first iteration.
        """
        variable = self._variable(node)
        start = self._gen.value_to_code(node, "FROM", Order.ASSIGNMENT) or "0"
        end = self._gen.value_to_code(node, "TO", Order.ASSIGNMENT) or "0"
        step = self._gen.value_to_code(node, "BY", Order.ASSIGNMENT) or "1"

        emitter = self._gen.new_emitter()
        emitter.emit(stage_open())
        with emitter.indented():
            if is_number(start) and is_number(end) and is_number(step):
                up = float(start) <= float(end)
                magnitude = abs(float(step))
                emitter.emit(f"{variable} = {start.strip()};")
                condition = f"{variable} {'<=' if up else '>='} {end.strip()}"
                if magnitude == 1:
                    increment = f"{variable}{'++' if up else '--'};"
                else:
                    operator = "+=" if up else "-="
                    increment = f"{variable} {operator} {format_number(magnitude)};"
            else:
                start_var = self._hoist(emitter, start, f"{variable}_start")
                end_var = self._hoist(emitter, end, f"{variable}_end")
                inc_var = self._gen.names.get_distinct_name(
                    f"{variable}_inc",
                    NameType.VARIABLE,
                )
                if is_number(step):
                    emitter.emit(f"var {inc_var} = {format_number(abs(float(step)))};")
                else:
                    emitter.emit(f"var {inc_var} = {MATH}.abs({step});")
                emitter.emit(f"if ({start_var} > {end_var}) {{")
                with emitter.indented():
                    emitter.emit(f"{inc_var} = -{inc_var};")
                emitter.emit("}")
                emitter.emit(f"{variable} = {start_var};")
                condition = (
                    f"{inc_var} >= 0 ? {variable} <= {end_var}"
                    f" : {variable} >= {end_var}"
                )
                increment = f"{variable} += {inc_var};"

            with self._gen.loop_scope() as token:
                stages = self._gen.loop_body(node)
            stages += self._gen.simple_stage(increment)
            self._emit_while(emitter, condition, token, stages)
        emitter.emit(stage_close())
        return emitter.get_code()

    def _visit_for_each(self, node: Node) -> str:
        variable = self._variable(node)
        collection = self._gen.value_to_code(node, "LIST", Order.ASSIGNMENT) or "[]"

        emitter = self._gen.new_emitter()
        emitter.emit(stage_open())
        with emitter.indented():
            list_var = collection
            if _IDENTIFIER.fullmatch(collection) is None:
                list_var = self._gen.names.get_distinct_name(
                    f"{variable}_list",
                    NameType.VARIABLE,
                )
                emitter.emit(f"var {list_var} = {collection};")
            index_var = self._gen.names.get_distinct_name(
                f"{variable}_index",
                NameType.VARIABLE,
            )
            emitter.emit(f"var {index_var} = 0;")
            with self._gen.loop_scope() as token:
                stages = self._gen.loop_body(node)
            self._emit_while(
                emitter,
                f"{index_var} < {list_var}.length",
                token,
                stages,
                prologue=(
                    f"{variable} = {list_var}[{index_var}];",
                    f"{index_var}++;",
                ),
            )
        emitter.emit(stage_close())
        return emitter.get_code()

    # =========================================================================
    # Early exits
    # =========================================================================

    def _visit_flow_statement(self, node: Node) -> str:
        flow = str(node.get_field("FLOW", ""))
        if flow == "BREAK":
            token = self._gen.current_loop_token
            if token is None:
                raise GenerationError(
                    format_error_message(ErrorCode.E0004),
                    code=ErrorCode.E0004,
                    block_id=node.id,
                    help_text="move the break into a loop body",
                )
            return self._gen.simple_stage(f"return {FLOW_BREAK}({token});")
        if flow == "CONTINUE":
            raise UnsupportedOperationError(
                format_error_message(ErrorCode.E0003, flow=flow),
                code=ErrorCode.E0003,
                block_id=node.id,
                help_text="wrap the rest of the loop body in a conditional instead",
            )
        raise GenerationError(
            format_error_message(ErrorCode.E0002, flow=flow),
            code=ErrorCode.E0002,
            block_id=node.id,
        )
