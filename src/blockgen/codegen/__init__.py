"""Code generation from block workspaces to promise-chain programs."""

from blockgen.codegen.emitter import CodeEmitter
from blockgen.codegen.errors import GenerationError, UnsupportedOperationError
from blockgen.codegen.generator import CodeGenerator
from blockgen.codegen.names import NameAllocator, NameType
from blockgen.codegen.precedence import Order

__all__ = [
    "CodeEmitter",
    "CodeGenerator",
    "GenerationError",
    "NameAllocator",
    "NameType",
    "Order",
    "UnsupportedOperationError",
]
