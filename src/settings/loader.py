# src/settings/loader.py
"""
YAML settings loader for the recipe diff tool.

Reads config/recipe_diff.yaml (or an explicit path) into DiffSettings:

    recipe_diff:
      output: "analysis.json"
      whitelist: []
      blacklist: ["duplicate-registration"]
      log_level: "INFO"

A missing default file yields the defaults. Command-line flags are layered on
top with apply_overrides.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .schema import DiffSettings


# Default config directory; tests monkeypatch this to point at a temp dir.
CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
SETTINGS_FILE = "recipe_diff.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file and return it as a dict."""
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML config {path} must be a mapping at top level.")
    return data


def _str_list(value: Any, key: str, path: Path) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"{path}: '{key}' must be a list of status names.")
    return [str(v) for v in value]


def load_settings(path: Optional[Path] = None) -> DiffSettings:
    """
    Load DiffSettings from `path`, or from CONFIG_DIR/recipe_diff.yaml.

    An explicit path must exist; the default file is optional.
    """
    if path is None:
        path = CONFIG_DIR / SETTINGS_FILE
        if not path.exists():
            return DiffSettings()
    elif not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")

    raw = _load_yaml(path)
    section = raw.get("recipe_diff", raw)
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'recipe_diff' must be a mapping.")

    defaults = DiffSettings()
    return DiffSettings(
        output=str(section.get("output", defaults.output)),
        whitelist=_str_list(section.get("whitelist"), "whitelist", path),
        blacklist=_str_list(section.get("blacklist"), "blacklist", path),
        log_level=str(section.get("log_level", defaults.log_level)).upper(),
    )


def apply_overrides(
    settings: DiffSettings,
    output: Optional[str] = None,
    whitelist: Optional[List[str]] = None,
    blacklist: Optional[List[str]] = None,
    log_level: Optional[str] = None,
) -> DiffSettings:
    """
    Layer command-line values over file settings.

    A status list given on the command line replaces both lists from the
    file, so `-w` never combines with a file blacklist (or vice versa).
    """
    updates: Dict[str, Any] = {}
    if output:
        updates["output"] = output
    if whitelist or blacklist:
        updates["whitelist"] = list(whitelist or [])
        updates["blacklist"] = list(blacklist or [])
    if log_level:
        updates["log_level"] = log_level.upper()
    return replace(settings, **updates)
