"""
Standard logging setup for shapeguard.

The library only emits records; nothing is printed until an application
calls ``configure_logging``. Rich debug panels are separate and live in
``shapeguard.utils.logger``.
"""

import logging
from typing import Optional, Union

LOGGER_NAME = "shapeguard"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Marks the handler configure_logging installs so repeated calls reuse it
_OWN_HANDLER_ATTR = "_shapeguard_default"


def get_logger(name: str = "") -> logging.Logger:
    """
    Return the logger for a shapeguard component.

    Args:
        name: Component name such as ``"validator"``. A full dotted module
              name under ``shapeguard`` is accepted as-is; an empty name
              gives the package logger.

    Example:
        >>> get_logger("validator").name
        'shapeguard.validator'
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def resolve_level(level: Union[int, str]) -> int:
    """Turn a level name like ``"debug"`` into its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    format: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Send shapeguard records to a handler.

    Args:
        level: Level for the package logger, numeric or a name.
        format: Format for the default stream handler.
        handler: Handler to attach instead of the default stream handler.

    Returns:
        The package logger.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    logger = get_logger()
    logger.setLevel(resolve_level(level))

    if handler is not None:
        logger.addHandler(handler)
        return logger

    own = [h for h in logger.handlers if getattr(h, _OWN_HANDLER_ATTR, False)]
    stream = own[0] if own else logging.StreamHandler()
    stream.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    if not own:
        setattr(stream, _OWN_HANDLER_ATTR, True)
        logger.addHandler(stream)
    return logger
