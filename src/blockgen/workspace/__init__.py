"""Block workspace input model.

Provide validated models for the block graph consumed by the generator
and loaders for YAML and JSON workspace documents.
"""

from blockgen.workspace.loader import (
    WorkspaceValidationError,
    load_workspace,
    parse_workspace,
)
from blockgen.workspace.nodes import (
    Node,
    VariableDecl,
    VariableKind,
    Workspace,
)

__all__ = [
    "Node",
    "VariableDecl",
    "VariableKind",
    "Workspace",
    "WorkspaceValidationError",
    "load_workspace",
    "parse_workspace",
]
