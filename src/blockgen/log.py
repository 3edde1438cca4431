"""Logging helper module."""

from logging import (
    DEBUG,
    INFO,
    Logger,
    basicConfig,
    getLogger,
)

from blockgen.args import Args

LOG_FILE = "blockgen.log"
"""File that receives generator logs."""


def init_logging(args: Args) -> None:
    """Initialize logging for the application.

    Should be called once when the application starts.
    """
    basicConfig(
        level=INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=LOG_FILE,
        filemode="w",
    )

    root_logger = getLogger()
    configure_3p_loggers(root_logger)

    if args.verbose:
        root_logger.setLevel(DEBUG)
        root_logger.info("Debug logging enabled.")


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)


def configure_3p_loggers(root_logger: Logger) -> None:
    """Remove handlers that third-party libraries attached to their loggers."""
    for name in root_logger.manager.loggerDict:
        if name.startswith("blockgen"):
            continue
        getLogger(name).handlers.clear()
