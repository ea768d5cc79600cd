# src/app/logging_config.py
"""
Central logging configuration for the recipe diff tool.

Call configure_logging() once from the entrypoint:

    from app.logging_config import configure_logging
    configure_logging("DEBUG")

Library modules only ever call logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import sys
from typing import Union


def resolve_level(level: Union[int, str]) -> int:
    """Turn "debug" / "INFO" / 10 into a logging level number."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure root logging if no handlers are attached yet.

    Args:
        level: logging level number or name
    """
    root = logging.getLogger()

    # Don't duplicate handlers if someone already configured logging.
    if root.handlers:
        root.setLevel(resolve_level(level))
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(resolve_level(level))
