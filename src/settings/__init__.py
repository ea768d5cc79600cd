# src/settings/__init__.py

from .loader import apply_overrides, load_settings
from .schema import DiffSettings

__all__ = [
    "DiffSettings",
    "apply_overrides",
    "load_settings",
]
