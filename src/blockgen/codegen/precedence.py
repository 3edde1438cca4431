"""Operator precedence for emitted expressions.

Lower values bind tighter. The table follows the operator precedence of
the promise-chain dialect shared by every target.
"""

from enum import IntEnum


class Order(IntEnum):
    """Binding strength of an emitted expression."""

    ATOMIC = 0  # 0 "" ...
    MEMBER = 1  # . []
    NEW = 1  # new
    FUNCTION_CALL = 2  # ()
    INCREMENT = 3  # ++
    DECREMENT = 3  # --
    LOGICAL_NOT = 4  # !
    BITWISE_NOT = 4  # ~
    UNARY_PLUS = 4  # +
    UNARY_NEGATION = 4  # -
    TYPEOF = 4  # typeof
    VOID = 4  # void
    DELETE = 4  # delete
    MULTIPLICATION = 5  # *
    DIVISION = 5  # /
    MODULUS = 5  # %
    ADDITION = 6  # +
    SUBTRACTION = 6  # -
    BITWISE_SHIFT = 7  # << >> >>>
    RELATIONAL = 8  # < <= > >=
    IN = 8  # in
    INSTANCEOF = 8  # instanceof
    EQUALITY = 9  # == != === !==
    BITWISE_AND = 10  # &
    BITWISE_XOR = 11  # ^
    BITWISE_OR = 12  # |
    LOGICAL_AND = 13  # &&
    LOGICAL_OR = 14  # ||
    CONDITIONAL = 15  # ?:
    ASSIGNMENT = 16  # = += -= *= /= %= <<= >>= ...
    COMMA = 17  # ,
    NONE = 99  # (...)


def needs_parens(own: int, context: int) -> bool:
    """Return True when an expression of order ``own`` must be grouped.

    Args:
        own: Order of the emitted expression.
        context: Loosest order the embedding position accepts.

    """
    return own > context
