"""Main code generator for block workspaces.

Translate a workspace into a single promise chain in the selected target
language, plus a definitions section holding variable declarations and
procedure definitions.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import TYPE_CHECKING

from blockgen.codegen.emitter import CodeEmitter, prefix_lines
from blockgen.codegen.errors import GenerationError
from blockgen.codegen.names import NameAllocator, NameType
from blockgen.codegen.precedence import Order, needs_parens
from blockgen.codegen.runtime import chain_start, stage_close, stage_open
from blockgen.codegen.targets import Target, get_target
from blockgen.codegen.visitors import (
    ExpressionVisitor,
    LoopVisitor,
    ProcedureVisitor,
    StatementVisitor,
)
from blockgen.config_loader import GeneratorConfig
from blockgen.errors.codes import ErrorCode, format_error_message
from blockgen.log import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from blockgen.workspace.nodes import Node, Workspace

logger = get_logger(__name__)

VARIABLES_DEFINITION = "%variables"
"""Definitions key of the variable declaration preamble."""

LOOP_TOKEN_HINT = "loop"
"""Spelling hint of the per-loop break tokens."""

_TEMPLATE_ID = re.compile("%1")
_TRAILING_SPACES = re.compile(r"[ \t]+\n")


class CodeGenerator:
    """Generate promise-chain code from a block workspace.

    One generator holds the state of a generation pass: the name
    allocator, the definitions table, the stack of enclosing loop tokens
    and the procedure nesting depth. ``generate`` resets all of it, so a
    generator may be reused for any number of passes.
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        """Initialize the code generator.

        Args:
            config: Generation settings. Defaults to JavaScript output.

        Raises:
            GenerationError: If the configured target is unknown.

        """
        self.config = config or GeneratorConfig()
        self.target: Target = get_target(self.config.target)
        self.names = NameAllocator(self.target.all_reserved_words())
        self.definitions: dict[str, str] = {}
        self._loop_tokens: list[str] = []
        self._procedure_depth = 0

        expressions = ExpressionVisitor(self)
        procedures = ProcedureVisitor(self)
        self._value_dispatch: dict[str, Callable[[Node], tuple[str, int]]] = {
            **expressions.handlers(),
            **procedures.value_handlers(),
        }
        self._statement_dispatch: dict[str, Callable[[Node], str | None]] = {
            **StatementVisitor(self).handlers(),
            **LoopVisitor(self).handlers(),
            **procedures.statement_handlers(),
        }
        logger.debug("Created CodeGenerator for target %s", self.target.name)

    # =========================================================================
    # Generation pass
    # =========================================================================

    def generate(self, workspace: Workspace) -> str:
        """Generate the program text of a workspace.

        Args:
            workspace: Workspace to translate.

        Returns:
            The definitions section, followed by the top-level chain.

        Raises:
            GenerationError: If a node cannot be translated.

        """
        logger.debug(
            "Generating %s code for %d root nodes",
            self.target.name,
            len(workspace.blocks),
        )
        self.init(workspace)

        stages = "".join(self.root_to_code(root) for root in workspace.blocks)
        emitter = self.new_emitter()
        if stages:
            emitter.emit(chain_start())
            emitter.emit_block(stages)
            emitter.append(";")

        code = self.finish(emitter.get_code())
        logger.debug("Generated %d definitions", len(self.definitions))
        return code

    def init(self, workspace: Workspace) -> None:
        """Reset pass state and declare the workspace variables."""
        self.names.reset()
        self.definitions = {}
        self._loop_tokens = []
        self._procedure_depth = 0
        self.definitions[VARIABLES_DEFINITION] = self.target.declare_variables(
            workspace.declared_variables,
            self.names,
        )

    def finish(self, body: str) -> str:
        """Prepend the definitions section to the top-level chain."""
        definitions = "\n\n".join(
            d.rstrip("\n") for d in self.definitions.values() if d.strip()
        )
        code = f"{definitions}\n\n\n{body}"
        code = _TRAILING_SPACES.sub("\n", code).strip("\n")
        return f"{code}\n" if code else ""

    def root_to_code(self, root: Node) -> str:
        """Translate one root node and the statements chained after it."""
        if root.kind in self._value_dispatch:
            return self.naked_value_to_code(root)
        return self.statement_to_code(root)

    # =========================================================================
    # Node translation
    # =========================================================================

    def statement_to_code(self, node: Node | None) -> str:
        """Translate a statement node and every node chained after it.

        Args:
            node: First node of a statement chain, or None.

        Returns:
            Chain stages, one after the other, at column zero.

        Raises:
            GenerationError: If no generator handles the node kind.

        """
        if node is None:
            return ""
        handler = self._statement_dispatch.get(node.kind)
        if handler is None:
            if node.kind in self._value_dispatch:
                return self.naked_value_to_code(node)
            raise self.unknown_kind(node)
        code = handler(node)
        if code is None:
            # Stored as a definition.
            return ""
        return self.finalize_statement(node, code)

    def expression_to_code(self, node: Node, order: int) -> tuple[str, int]:
        """Translate a value node.

        Args:
            node: Value node.
            order: Loosest order the embedding position accepts.

        Returns:
            The expression text, grouped when needed, and its own order.

        Raises:
            GenerationError: If no generator handles the node kind.

        """
        handler = self._value_dispatch.get(node.kind)
        if handler is None:
            raise self.unknown_kind(node)
        code, own = handler(node)
        code = self.finalize_statement(node, code, inline=True)
        if needs_parens(own, order):
            code = f"({code})"
        return code, own

    def value_to_code(self, parent: Node, slot: str, order: int) -> str:
        """Translate the node plugged into a value slot.

        Returns:
            The expression text, or an empty string for an empty slot.

        """
        child = parent.values.get(slot)
        if child is None:
            return ""
        code, _ = self.expression_to_code(child, order)
        return code

    def branch_to_code(self, parent: Node, slot: str) -> str:
        """Translate the statement chain plugged into a statement slot."""
        return self.statement_to_code(parent.statements.get(slot))

    def naked_value_to_code(self, node: Node) -> str:
        """Translate a value node used as a statement into a stage."""
        handler = self._value_dispatch[node.kind]
        code, _ = handler(node)
        stage = self.simple_stage(f"return {code};")
        return self.finalize_statement(node, stage)

    def finalize_statement(self, node: Node, code: str, *, inline: bool = False) -> str:
        """Attach comments and the statements that follow a translated node.

        Args:
            node: The translated node.
            code: Its translated text.
            inline: True for nodes embedded in an expression, which never
                carry comments.

        Returns:
            Comments, the node text and the text of ``node.next``.

        """
        comments = ""
        if not inline:
            prefix = self.target.comment_prefix
            if node.comment:
                comments += prefix_lines(node.comment, prefix) + "\n"
            for child in node.value_nodes():
                nested = self.nested_comments(child)
                if nested:
                    comments += prefix_lines(nested, prefix)
        return comments + code + self.statement_to_code(node.next)

    def nested_comments(self, node: Node) -> str:
        """Collect the comments of a value subtree, one per line."""
        comments = [n.comment for n in node.descendants() if n.comment]
        if not comments:
            return ""
        return "\n".join(comments) + "\n"

    def unknown_kind(self, node: Node) -> GenerationError:
        """Build the error raised for a node kind without generator."""
        return GenerationError(
            format_error_message(ErrorCode.E0001, kind=node.kind),
            code=ErrorCode.E0001,
            block_id=node.id,
        )

    # =========================================================================
    # Stage helpers
    # =========================================================================

    def new_emitter(self) -> CodeEmitter:
        """Create an emitter using the configured indentation."""
        return CodeEmitter(indent_str=self.config.indent)

    def simple_stage(self, *lines: str) -> str:
        """Build a chain stage whose body is the given lines."""
        emitter = self.new_emitter()
        emitter.emit(stage_open())
        with emitter.indented():
            for line in lines:
                emitter.emit_block(line)
        emitter.emit(stage_close())
        return emitter.get_code()

    def emit_chain(
        self,
        emitter: CodeEmitter,
        stages: str,
        *,
        keyword: str = "return ",
    ) -> None:
        """Emit a fresh chain running ``stages``, terminated with a semicolon."""
        emitter.emit(f"{keyword}{chain_start()}")
        emitter.emit_block(stages)
        emitter.append(";")

    def instrument(self, template: str | None, node: Node) -> str:
        """Build the stage of an instrumentation template, if configured."""
        if not template:
            return ""
        code = _TEMPLATE_ID.sub(lambda _: self.target.quote(node.id), template)
        return self.simple_stage(code)

    def add_loop_trap(self, branch: str, node: Node) -> str:
        """Surround a loop body with the configured instrumentation stages.

        The infinite-loop trap runs first in every iteration and the
        statement prefix runs last.
        """
        trap = self.instrument(self.config.infinite_loop_trap, node)
        prefix = self.instrument(self.config.statement_prefix, node)
        return trap + branch + prefix

    def loop_body(self, node: Node, slot: str = "DO") -> str:
        """Translate an instrumented loop body."""
        return self.add_loop_trap(self.branch_to_code(node, slot), node)

    # =========================================================================
    # Scopes
    # =========================================================================

    @contextmanager
    def loop_scope(self) -> Iterator[str]:
        """Allocate the break token of a loop and make it the innermost one."""
        token = self.names.get_distinct_name(LOOP_TOKEN_HINT, NameType.VARIABLE)
        self._loop_tokens.append(token)
        try:
            yield token
        finally:
            self._loop_tokens.pop()

    @contextmanager
    def procedure_scope(self) -> Iterator[None]:
        """Enter a procedure body, where enclosing loops are out of reach."""
        saved_tokens = self._loop_tokens
        self._loop_tokens = []
        self._procedure_depth += 1
        try:
            yield
        finally:
            self._procedure_depth -= 1
            self._loop_tokens = saved_tokens

    @property
    def current_loop_token(self) -> str | None:
        """Break token of the innermost enclosing loop, or None."""
        return self._loop_tokens[-1] if self._loop_tokens else None

    @property
    def in_procedure(self) -> bool:
        """Whether translation is inside a procedure definition."""
        return self._procedure_depth > 0
