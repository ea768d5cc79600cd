# DiffSettings dataclass
# src/settings/schema.py

from dataclasses import dataclass, field
from typing import List


@dataclass
class DiffSettings:
    """
    Resolved configuration for one recipe-diff run.

    - output: where the JSON report is written
    - whitelist: status values to keep ("outputs-changed", ...); empty = all
    - blacklist: status values to drop; mutually exclusive with whitelist
    - log_level: logging level name ("INFO", "DEBUG", ...)
    """
    output: str = "analysis.json"
    whitelist: List[str] = field(default_factory=list)
    blacklist: List[str] = field(default_factory=list)
    log_level: str = "INFO"
