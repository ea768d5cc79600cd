# src/app/__init__.py
"""
Process-level plumbing shared by the recipe diff entrypoints.
"""

from __future__ import annotations

from .logging_config import configure_logging, resolve_level

__all__ = [
    "configure_logging",
    "resolve_level",
]
