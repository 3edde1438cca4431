"""Pydantic models for block workspace documents."""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

FieldValue = bool | int | float | str
"""Literal value stored in a node field."""

PROCEDURE_DEFINITION_KINDS = frozenset(
    {"procedures_defreturn", "procedures_defnoreturn"},
)
"""Node kinds that define a procedure."""

VARIABLE_FIELD = "VAR"
"""Field holding the variable name of variable-bound nodes."""


class VariableKind(str, Enum):
    """Declared kind of a workspace variable."""

    INTEGER = "integer"
    """Plain number, declared with the fixed numeric type."""

    NUMBER = "number"
    """Decimal number, declared with the wider numeric type."""

    LINKBOT = "linkbot"
    """Linked actuator with wheel diameter and track width dimensions."""


@dataclass(frozen=True)
class VariableDecl:
    """A variable observed in the workspace with its resolved kind."""

    name: str
    kind: VariableKind


class Node(BaseModel):
    """A typed unit of program structure.

    Value slots hold expression nodes, statement slots hold the first
    node of a nested statement chain, and ``next`` links the statement
    that follows this one.
    """

    model_config = ConfigDict(extra="forbid")

    kind: str
    id: str = ""
    fields: dict[str, FieldValue] = Field(default_factory=dict)
    values: dict[str, "Node | None"] = Field(default_factory=dict)
    statements: dict[str, "Node | None"] = Field(default_factory=dict)
    next: "Node | None" = None
    comment: str | None = None
    arguments: list[str] = Field(default_factory=list)
    has_return_value: bool = False

    def get_field(self, name: str, default: FieldValue | None = None) -> Any:
        """Return a field value, or ``default`` when the field is absent."""
        return self.fields.get(name, default)

    def value_nodes(self) -> Iterator["Node"]:
        """Yield the nodes plugged into value slots, in slot order."""
        for child in self.values.values():
            if child is not None:
                yield child

    def children(self) -> Iterator["Node"]:
        """Yield value children, statement children and the next node."""
        yield from self.value_nodes()
        for child in self.statements.values():
            if child is not None:
                yield child
        if self.next is not None:
            yield self.next

    def descendants(self) -> Iterator["Node"]:
        """Yield this node and every node reachable from it, depth first."""
        yield self
        for child in self.children():
            yield from child.descendants()


class Workspace(BaseModel):
    """A forest of root nodes plus declared variable kinds.

    Node ids and variable declarations are resolved once, when the
    document is validated.
    """

    model_config = ConfigDict(extra="forbid")

    blocks: list[Node] = Field(default_factory=list)
    variables: dict[str, VariableKind] = Field(default_factory=dict)

    _declared_variables: list[VariableDecl] = PrivateAttr(default_factory=list)

    @field_validator("variables", mode="before")
    @classmethod
    def normalize_variable_kinds(cls, v: object) -> object:
        """Accept variable kind tags in any letter case."""
        if isinstance(v, dict):
            return {
                name: kind.lower() if isinstance(kind, str) else kind
                for name, kind in v.items()
            }
        return v

    def model_post_init(self, context: Any, /) -> None:
        """Assign missing node ids and resolve variable declarations."""
        self._assign_ids()
        self._declared_variables = self._collect_variables()

    @property
    def declared_variables(self) -> list[VariableDecl]:
        """Variables observed in the graph, in order of first appearance."""
        return list(self._declared_variables)

    def all_nodes(self) -> Iterator[Node]:
        """Yield every node of every root, depth first."""
        for root in self.blocks:
            yield from root.descendants()

    def unused_variables(self) -> list[str]:
        """Return names in ``variables`` that no node refers to."""
        used = {v.name.lower() for v in self._declared_variables}
        return [name for name in self.variables if name.lower() not in used]

    def procedure_definitions(self) -> list[Node]:
        """Return the root nodes that define procedures."""
        return [b for b in self.blocks if b.kind in PROCEDURE_DEFINITION_KINDS]

    def _assign_ids(self) -> None:
        used = {node.id for node in self.all_nodes() if node.id}
        counter = 0
        for node in self.all_nodes():
            if node.id:
                continue
            counter += 1
            while f"b{counter}" in used:
                counter += 1
            node.id = f"b{counter}"
            used.add(node.id)

    def _collect_variables(self) -> list[VariableDecl]:
        kinds = {name.lower(): kind for name, kind in self.variables.items()}
        seen: set[str] = set()
        declared: list[VariableDecl] = []
        for node in self.all_nodes():
            names: list[str] = []
            if VARIABLE_FIELD in node.fields:
                names.append(str(node.fields[VARIABLE_FIELD]))
            if node.kind in PROCEDURE_DEFINITION_KINDS:
                names.extend(node.arguments)
            for name in names:
                key = name.lower()
                if key in seen:
                    continue
                seen.add(key)
                declared.append(
                    VariableDecl(name, kinds.get(key, VariableKind.INTEGER)),
                )
        return declared


Node.model_rebuild()
