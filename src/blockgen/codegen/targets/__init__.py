"""Output languages supported by the generator."""

from blockgen.codegen.errors import GenerationError
from blockgen.codegen.targets.base import Target
from blockgen.codegen.targets.ch import ChTarget, CppTarget
from blockgen.codegen.targets.javascript import JavaScriptTarget
from blockgen.errors.codes import ErrorCode, format_error_message

TARGETS: dict[str, type[Target]] = {
    JavaScriptTarget.name: JavaScriptTarget,
    ChTarget.name: ChTarget,
    CppTarget.name: CppTarget,
}
"""Target classes by language name."""


def get_target(name: str) -> Target:
    """Create the target for a language name.

    Args:
        name: Language name, case-insensitive.

    Returns:
        A target instance.

    Raises:
        GenerationError: If no target has this name.

    """
    target_cls = TARGETS.get(name.lower())
    if target_cls is None:
        raise GenerationError(
            format_error_message(ErrorCode.E0006, target=name),
            code=ErrorCode.E0006,
            help_text=f"available targets are: {', '.join(sorted(TARGETS))}",
        )
    return target_cls()


__all__ = [
    "TARGETS",
    "ChTarget",
    "CppTarget",
    "JavaScriptTarget",
    "Target",
    "get_target",
]
