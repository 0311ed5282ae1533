"""Logging utilities for depotscan.

Only the infrastructure layer logs; the core reports everything through
exceptions.  The CLI calls :func:`configure_logging` once at start-up.
"""

from __future__ import annotations

import logging

_LOGGER_NAME = "depotscan"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the depotscan hierarchy.

    Module names already inside the package (``depotscan.infra.x``) are
    used as-is.
    """
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    if name == _LOGGER_NAME or name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the depotscan logger.

    Uses :class:`rich.logging.RichHandler` when Rich is installed and a
    plain :class:`logging.StreamHandler` otherwise.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler: logging.Handler
    try:
        from rich.console import Console
        from rich.logging import RichHandler

        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    except ModuleNotFoundError:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[depotscan] %(levelname)s %(message)s"))

    handler.setLevel(level)
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
