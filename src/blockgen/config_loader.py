"""Configuration loader for the block code generator."""

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from blockgen.args import Args

logger = logging.getLogger(__name__)

CONFIG_DIR = ".blockgen"
CONFIG_FILE = "config.toml"


class GeneratorConfig(BaseModel):
    """Settings of a generation pass.

    ``statement_prefix`` and ``infinite_loop_trap`` are optional code
    templates; ``%1`` is replaced by the quoted id of the node being
    generated. The loop trap runs at the start of every loop iteration and
    procedure body, the statement prefix after every iteration and at the
    start of every procedure body.
    """

    model_config = ConfigDict(extra="forbid")

    target: str = "javascript"
    indent: str = "    "
    statement_prefix: str | None = None
    infinite_loop_trap: str | None = None


def _read_config_file(path: Path) -> GeneratorConfig | None:
    try:
        with path.open("rb") as f:
            return GeneratorConfig.model_validate(tomllib.load(f))
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None


def load_generator_config(args: Args, *, cwd: Path | None = None) -> GeneratorConfig:
    """Load generator configuration with priority: CLI > explicit > local > global.

    Args:
        args: Parsed command line arguments
        cwd: Directory searched for the local configuration (default: cwd)

    Returns:
        The effective generator configuration

    """
    candidates: list[Path] = []
    if args.config:
        candidates.append(args.config)
    candidates.append((cwd or Path.cwd()) / CONFIG_DIR / CONFIG_FILE)
    candidates.append(Path.home() / CONFIG_DIR / CONFIG_FILE)

    config = GeneratorConfig()
    for path in candidates:
        if not path.is_file():
            continue
        loaded = _read_config_file(path)
        if loaded is not None:
            logger.debug("Using generator config from %s", path)
            config = loaded
            break

    if args.target:
        config = config.model_copy(update={"target": args.target})
    return config
