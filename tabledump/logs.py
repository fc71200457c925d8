"""Contains logging related functionality."""

import logging
import logging.config
import typing
from pathlib import Path

import yaml

PACKAGE_LOGGER = "tabledump"


def init_logging(filepath: Path, level: str | None = None) -> dict[str, typing.Any]:
    """Read logging config yaml file from `filepath` and initialize logging by applying it globally.

    :param filepath: Path to the logging configuration yaml file.
    :param level: Optional level name (e.g. ``DEBUG``) replacing the configured level of the package logger.
    :returns: The logging configuration as dict, including the level override.
    :raises ValueError: If `level` is not a known logging level name.
    """
    config: dict[str, typing.Any] = yaml.safe_load(filepath.read_text(encoding="utf-8"))

    if level is not None:
        level = level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{level}'")
        config.setdefault("loggers", {}).setdefault(PACKAGE_LOGGER, {})["level"] = level

    logging.config.dictConfig(config)
    return config
