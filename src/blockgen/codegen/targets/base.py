"""Base class for output languages.

A target supplies what differs between output languages: reserved
words, comment and string syntax, and the variable declaration preamble.
The statement chain itself uses the same promise dialect everywhere.
"""

from typing import ClassVar

from blockgen.codegen.names import NameAllocator, NameType
from blockgen.codegen.runtime import CHAIN_KEYWORDS, RUNTIME_NAMES
from blockgen.workspace.nodes import VariableDecl, VariableKind

WHEEL_DIAMETER = 3.5
"""Default wheel diameter declared for linked actuators."""

TRACK_WIDTH = 3.7
"""Default track width declared for linked actuators."""


class Target:
    """An output language of the generator."""

    name: ClassVar[str] = ""
    reserved_words: ClassVar[frozenset[str]] = frozenset()
    comment_prefix: ClassVar[str] = "// "
    variable_types: ClassVar[dict[VariableKind, str]] = {}
    dimension_type: ClassVar[str] = "double"

    def all_reserved_words(self) -> frozenset[str]:
        """Reserved words plus the identifiers used by the runtime protocol."""
        return self.reserved_words | RUNTIME_NAMES | CHAIN_KEYWORDS

    def quote(self, text: str) -> str:
        """Encode text as a single-quoted string literal."""
        escaped = text.replace("\\", "\\\\").replace("\n", "\\n").replace("'", "\\'")
        return f"'{escaped}'"

    def declare_variables(
        self,
        variables: list[VariableDecl],
        names: NameAllocator,
    ) -> str:
        """Build the variable declaration preamble.

        Args:
            variables: Variables observed in the workspace.
            names: Allocator of the current pass.

        Returns:
            One declaration per variable, joined by newlines.

        """
        lines: list[str] = []
        for variable in variables:
            identifier = names.get_name(variable.name, NameType.VARIABLE)
            if variable.kind == VariableKind.LINKBOT:
                lines.extend(self._declare_dimensions(identifier, names))
            lines.append(f"{self.variable_types[variable.kind]} {identifier};")
        return "\n".join(lines)

    def _declare_dimensions(self, identifier: str, names: NameAllocator) -> list[str]:
        wheel = names.get_name(f"{identifier}_wheelDiameter", NameType.VARIABLE)
        track = names.get_name(f"{identifier}_trackWidth", NameType.VARIABLE)
        return [
            f"{self.dimension_type} {wheel} = {WHEEL_DIAMETER};",
            f"{self.dimension_type} {track} = {TRACK_WIDTH};",
        ]
