"""Expression visitor for block code generation.

Generate expression text, with its own binding order, from value nodes.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, TypeVar

from blockgen.codegen.errors import GenerationError
from blockgen.codegen.names import NameType
from blockgen.codegen.precedence import Order
from blockgen.codegen.runtime import MATH
from blockgen.errors.codes import ErrorCode, format_error_message
from blockgen.log import get_logger
from blockgen.workspace.nodes import VARIABLE_FIELD

if TYPE_CHECKING:
    from collections.abc import Callable

    from blockgen.codegen.generator import CodeGenerator
    from blockgen.workspace.nodes import Node

logger = get_logger(__name__)

_Op = TypeVar("_Op")

# Binary operators: node OP field -> (operator text, order)
ARITHMETIC_OPERATORS: dict[str, tuple[str | None, Order]] = {
    "ADD": (" + ", Order.ADDITION),
    "MINUS": (" - ", Order.SUBTRACTION),
    "MULTIPLY": (" * ", Order.MULTIPLICATION),
    "DIVIDE": (" / ", Order.DIVISION),
    "POWER": (None, Order.COMMA),  # Math.pow(a, b)
}

COMPARE_OPERATORS: dict[str, tuple[str, Order]] = {
    "EQ": (" == ", Order.EQUALITY),
    "NEQ": (" != ", Order.EQUALITY),
    "LT": (" < ", Order.RELATIONAL),
    "LTE": (" <= ", Order.RELATIONAL),
    "GT": (" > ", Order.RELATIONAL),
    "GTE": (" >= ", Order.RELATIONAL),
}

LOGIC_OPERATORS: dict[str, tuple[str, Order]] = {
    "AND": (" && ", Order.LOGICAL_AND),
    "OR": (" || ", Order.LOGICAL_OR),
}


def format_number(value: float) -> str:
    """Format a number the way the generated language prints it."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def number_field(node: Node, name: str, default: float = 0) -> float:
    """Read a numeric field, converting text the way ``Number()`` does.

    Blank text reads as zero. Text that is not a number logs a warning and
    reads as NaN.
    """
    raw = node.get_field(name, default)
    if isinstance(raw, str) and not raw.strip():
        return 0.0
    try:
        return float(raw)
    except ValueError:
        logger.warning("Node %s holds a non-numeric %s %r", node.id, name, raw)
        return math.nan


class ExpressionVisitor:
    """Generate expressions from value nodes.

    Every handler returns the expression text together with the order of
    its outermost operator; grouping is left to the generator.
    """

    def __init__(self, generator: CodeGenerator) -> None:
        """Initialize the expression visitor.

        Args:
            generator: Generator running the current pass.

        """
        self._gen = generator
        self._dispatch: dict[str, Callable[[Node], tuple[str, int]]] = {
            "math_number": self._visit_number,
            "text": self._visit_text,
            "logic_boolean": self._visit_boolean,
            "logic_null": self._visit_null,
            "variables_get": self._visit_variable_get,
            "math_arithmetic": self._visit_arithmetic,
            "logic_compare": self._visit_compare,
            "logic_operation": self._visit_logic_operation,
            "logic_negate": self._visit_negate,
            "lists_create_with": self._visit_list_create,
        }

    def handlers(self) -> dict[str, Callable[[Node], tuple[str, int]]]:
        """Return the handlers by node kind."""
        return dict(self._dispatch)

    def _visit_number(self, node: Node) -> tuple[str, int]:
        value = number_field(node, "NUM")
        if math.isnan(value):
            return "NaN", Order.ATOMIC
        order = Order.ATOMIC if value >= 0 else Order.UNARY_NEGATION
        return format_number(value), order

    def _visit_text(self, node: Node) -> tuple[str, int]:
        return self._gen.target.quote(str(node.get_field("TEXT", ""))), Order.ATOMIC

    def _visit_boolean(self, node: Node) -> tuple[str, int]:
        value = node.get_field("BOOL", "TRUE")
        truthy = value is True or str(value).upper() == "TRUE"
        return ("true" if truthy else "false"), Order.ATOMIC

    def _visit_null(self, node: Node) -> tuple[str, int]:
        return "null", Order.ATOMIC

    def _visit_variable_get(self, node: Node) -> tuple[str, int]:
        name = str(node.get_field(VARIABLE_FIELD, ""))
        return self._gen.names.get_name(name, NameType.VARIABLE), Order.ATOMIC

    def _visit_arithmetic(self, node: Node) -> tuple[str, int]:
        op = str(node.get_field("OP", "ADD"))
        operator, order = self._lookup(node, op, ARITHMETIC_OPERATORS)
        if operator is None:
            base = self._gen.value_to_code(node, "A", Order.COMMA) or "0"
            exponent = self._gen.value_to_code(node, "B", Order.COMMA) or "0"
            return f"{MATH}.pow({base}, {exponent})", Order.FUNCTION_CALL
        return self._binary(node, operator, order, default="0")

    def _visit_compare(self, node: Node) -> tuple[str, int]:
        op = str(node.get_field("OP", "EQ"))
        operator, order = self._lookup(node, op, COMPARE_OPERATORS)
        return self._binary(node, operator, order, default="0")

    def _visit_logic_operation(self, node: Node) -> tuple[str, int]:
        op = str(node.get_field("OP", "AND"))
        operator, order = self._lookup(node, op, LOGIC_OPERATORS)
        left = self._gen.value_to_code(node, "A", order)
        right = self._gen.value_to_code(node, "B", order - 1)
        if not left and not right:
            left = right = "false"
        else:
            # A missing operand must not change the result.
            default = "true" if op == "AND" else "false"
            left = left or default
            right = right or default
        return f"{left}{operator}{right}", order

    def _visit_negate(self, node: Node) -> tuple[str, int]:
        operand = self._gen.value_to_code(node, "BOOL", Order.LOGICAL_NOT) or "true"
        return f"!{operand}", Order.LOGICAL_NOT

    def _visit_list_create(self, node: Node) -> tuple[str, int]:
        slots = self._slot_count(node, "ADD")
        count = number_field(node, "ITEMS", slots)
        if not math.isfinite(count) or count < 0:
            logger.warning("Node %s has invalid ITEMS, using %d", node.id, slots)
            count = slots
        items = [
            self._gen.value_to_code(node, f"ADD{i}", Order.COMMA) or "null"
            for i in range(int(count))
        ]
        return f"[{', '.join(items)}]", Order.ATOMIC

    def _binary(
        self,
        node: Node,
        operator: str,
        order: int,
        *,
        default: str,
    ) -> tuple[str, int]:
        # Equal-order right operands are grouped: a - (b - c).
        left = self._gen.value_to_code(node, "A", order) or default
        right = self._gen.value_to_code(node, "B", order - 1) or default
        return f"{left}{operator}{right}", order

    @staticmethod
    def _slot_count(node: Node, prefix: str) -> int:
        count = 0
        while f"{prefix}{count}" in node.values:
            count += 1
        return count

    @staticmethod
    def _lookup(node: Node, op: str, table: dict[str, _Op]) -> _Op:
        if op not in table:
            raise GenerationError(
                format_error_message(ErrorCode.E0001, kind=f"{node.kind} {op}"),
                code=ErrorCode.E0001,
                block_id=node.id,
                help_text=f"supported operators are: {', '.join(table)}",
            )
        return table[op]
