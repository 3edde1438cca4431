"""Workspace document loader with validation."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from blockgen.log import get_logger
from blockgen.workspace.nodes import Workspace

logger = get_logger(__name__)

JSON_SUFFIXES = frozenset({".json"})
"""File suffixes parsed as JSON; everything else is read as YAML."""


class WorkspaceValidationError(Exception):
    """Raised when a workspace document cannot be loaded or validated."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)

    @property
    def validation_errors(self) -> list[dict[str, Any]]:
        """Pydantic error entries when the cause was a validation failure."""
        if isinstance(self.cause, ValidationError):
            return [dict(e) for e in self.cause.errors()]
        return []


def _load_document(file_path: Path) -> dict[str, Any]:
    """Load and parse a YAML or JSON document."""
    try:
        with file_path.open("r", encoding="utf-8") as f:
            if file_path.suffix.lower() in JSON_SUFFIXES:
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        msg = f"Invalid document syntax: {e}"
        raise WorkspaceValidationError(msg, file_path, e) from e
    except OSError as e:
        msg = f"Failed to read file: {e}"
        raise WorkspaceValidationError(msg, file_path, e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Workspace must contain a mapping/object, got {type(data).__name__}"
        raise WorkspaceValidationError(msg, file_path)
    return data


def parse_workspace(data: dict[str, Any], file_path: Path | None = None) -> Workspace:
    """Validate a workspace mapping.

    Args:
        data: Parsed document content.
        file_path: Source of the document, for error reporting.

    Returns:
        The validated workspace.

    Raises:
        WorkspaceValidationError: If the mapping does not describe a workspace.

    """
    try:
        return Workspace.model_validate(data)
    except ValidationError as e:
        msg = f"Workspace validation failed: {e.error_count()} error(s)"
        raise WorkspaceValidationError(msg, file_path, e) from e


def load_workspace(file_path: Path) -> Workspace:
    """Load a workspace document from disk.

    Args:
        file_path: Path to a YAML or JSON workspace document.

    Returns:
        The validated workspace.

    Raises:
        WorkspaceValidationError: If the file cannot be read, parsed or validated.

    """
    logger.debug("Loading workspace from %s", file_path)
    workspace = parse_workspace(_load_document(file_path), file_path)
    logger.debug(
        "Loaded %d root block(s) and %d variable(s) from %s",
        len(workspace.blocks),
        len(workspace.declared_variables),
        file_path,
    )
    return workspace
