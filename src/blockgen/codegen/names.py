"""Name allocation for generated identifiers.

Map user-facing variable and procedure names to identifiers that are
legal in the target language, unique within a generation pass and
never equal to a reserved word.
"""

import re
from collections.abc import Iterable
from enum import Enum
from urllib.parse import quote

from blockgen.log import get_logger

logger = get_logger(__name__)

_NON_WORD = re.compile(r"\W", re.ASCII)
_DIGITS = "0123456789"


class NameType(str, Enum):
    """Namespace of a symbolic name."""

    VARIABLE = "VARIABLE"
    PROCEDURE = "PROCEDURE"


class NameAllocator:
    """Allocate collision-free identifiers for one generation pass.

    ``get_name`` binds a (name, namespace) pair to an identifier on first
    use and returns the same identifier afterwards. ``get_distinct_name``
    always manufactures a fresh identifier. ``reset`` forgets every
    binding and must be called at the start of each pass.
    """

    def __init__(self, reserved_words: Iterable[str] = ()) -> None:
        """Initialize the allocator.

        Args:
            reserved_words: Identifiers that must never be issued.

        """
        self._reserved = frozenset(reserved_words)
        self._bindings: dict[str, str] = {}
        self._issued: set[str] = set()

    def reset(self) -> None:
        """Clear all bindings and issued identifiers."""
        self._bindings.clear()
        self._issued.clear()

    def get_name(self, name: str, name_type: NameType) -> str:
        """Return the identifier bound to a symbolic name.

        Symbolic names are matched case-insensitively.

        Args:
            name: User-facing name.
            name_type: Namespace of the name.

        Returns:
            The identifier for this (name, namespace) pair.

        """
        key = f"{name.lower()}_{name_type.value}"
        if key in self._bindings:
            return self._bindings[key]
        identifier = self.get_distinct_name(name, name_type)
        self._bindings[key] = identifier
        return identifier

    def get_distinct_name(self, name: str, name_type: NameType) -> str:
        """Return an identifier never issued before in this pass.

        Args:
            name: Hint for the identifier spelling.
            name_type: Namespace of the identifier.

        Returns:
            A fresh identifier derived from the hint.

        """
        safe_name = self.safe_name(name)
        suffix = ""
        counter = 1
        while (
            safe_name + suffix in self._issued or safe_name + suffix in self._reserved
        ):
            counter += 1
            suffix = str(counter)
        identifier = safe_name + suffix
        self._issued.add(identifier)
        logger.debug("Allocated %s name %s for %r", name_type.value, identifier, name)
        return identifier

    @staticmethod
    def safe_name(name: str) -> str:
        """Turn a user-facing name into a legal identifier.

        Spaces become underscores, other characters outside ``[A-Za-z0-9_]``
        are replaced by underscores (non-ASCII characters are first percent
        encoded), and a leading digit gets a ``my_`` prefix.
        """
        if not name:
            return "unnamed"
        encoded = quote(name.replace(" ", "_"), safe="")
        safe_name = _NON_WORD.sub("_", encoded)
        if safe_name[0] in _DIGITS:
            safe_name = "my_" + safe_name
        return safe_name
