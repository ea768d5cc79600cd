# src/recipes/loader.py
"""
RecEx dump loader.

Responsibility:
  - Read a RecEx JSON export from disk.
  - Pick the GregTech source out of it (shaped / shapeless / ore-dict crafting
    sources are ignored).
  - Map every machine recipe into an immutable RecipeRecord.

Expected shape (keys may use either the long names or RecEx's short aliases):

    {
      "sources": [
        {
          "type": "gregtech",
          "machines": [
            {
              "n": "Macerator",
              "recs": [
                {
                  "en": true, "dur": 400, "eut": 2,
                  "iI": [{"a": 1, "m": 0, "uN": "tile.stone", "lN": "Stone"}],
                  "fI": [],
                  "iO": [{"a": 1, "m": 0, "uN": "tile.cobble", "lN": "Cobblestone"}],
                  "fO": []
                }
              ]
            }
          ]
        },
        {"type": "shaped", "recipes": [...]}
      ]
    }

Validation stops at shape: once a record is built, the core trusts it.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .schema import FluidStack, ItemStack, RecipeRecord, Stat

logger = logging.getLogger(__name__)


GREGTECH_SOURCE_TYPES = ("gregtech", "Gregtech")


class DumpFormatError(ValueError):
    """Raised when a dump does not have the expected RecEx layout."""


@dataclass
class Dump:
    """One loaded snapshot of the GregTech recipe registry."""
    source: str
    records: List[RecipeRecord] = field(default_factory=list)
    machines: List[str] = field(default_factory=list)
    missing_count: int = 0

    def __len__(self) -> int:
        return len(self.records)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _get(raw: Dict[str, Any], long_key: str, short_key: str, default: Any = None) -> Any:
    """Look a field up under its long name first, then under its RecEx alias."""
    if long_key in raw:
        return raw[long_key]
    return raw.get(short_key, default)


def _as_list(value: Any, what: str, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DumpFormatError(f"{where}: expected a list for {what}, got {type(value).__name__}")
    return value


def _parse_item(raw: Any, where: str) -> ItemStack:
    if not isinstance(raw, dict):
        raise DumpFormatError(f"{where}: item stack must be an object, got {raw!r}")
    return ItemStack(
        name=_get(raw, "unlocalized_name", "uN"),
        metadata=int(_get(raw, "metadata", "m", 0)),
        amount=int(_get(raw, "amount", "a", 0)),
        display_name=_get(raw, "localized_name", "lN"),
    )


def _parse_fluid(raw: Any, where: str) -> FluidStack:
    if not isinstance(raw, dict):
        raise DumpFormatError(f"{where}: fluid stack must be an object, got {raw!r}")
    return FluidStack(
        name=_get(raw, "unlocalized_name", "uN"),
        amount=int(_get(raw, "amount", "a", 0)),
        display_name=_get(raw, "localized_name", "lN"),
    )


def _parse_stats(raw: Dict[str, Any]) -> Tuple[Stat, ...]:
    return (
        ("duration", int(_get(raw, "duration", "dur", 0))),
        ("eut", int(_get(raw, "eut", "eut", 0))),
        ("enabled", bool(_get(raw, "enabled", "en", True))),
    )


def _parse_recipe(raw: Any, machine: str, index: int, where: str) -> RecipeRecord:
    if not isinstance(raw, dict):
        raise DumpFormatError(f"{where}: recipe must be an object, got {type(raw).__name__}")

    item_inputs = _as_list(_get(raw, "item_inputs", "iI"), "item inputs", where)
    fluid_inputs = _as_list(_get(raw, "fluid_inputs", "fI"), "fluid inputs", where)
    item_outputs = _as_list(_get(raw, "item_outputs", "iO"), "item outputs", where)
    fluid_outputs = _as_list(_get(raw, "fluid_outputs", "fO"), "fluid outputs", where)

    return RecipeRecord(
        machine=machine,
        item_inputs=tuple(_parse_item(s, where) for s in item_inputs),
        fluid_inputs=tuple(_parse_fluid(s, where) for s in fluid_inputs),
        item_outputs=tuple(_parse_item(s, where) for s in item_outputs),
        fluid_outputs=tuple(_parse_fluid(s, where) for s in fluid_outputs),
        stats=_parse_stats(raw),
        index=index,
    )


def _find_gregtech_machines(raw: Dict[str, Any], source: str) -> List[Any]:
    sources = raw.get("sources")
    if not isinstance(sources, list):
        raise DumpFormatError(f"{source}: missing top-level 'sources' list")

    for entry in sources:
        if isinstance(entry, dict) and entry.get("type") in GREGTECH_SOURCE_TYPES:
            return _as_list(entry.get("machines"), "machines", source)

    raise DumpFormatError(f"{source}: dump has no gregtech recipe source")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_dump(raw: Any, source: str = "<memory>") -> Dump:
    """Convert an already-decoded RecEx document into a Dump."""
    if not isinstance(raw, dict):
        raise DumpFormatError(f"{source}: dump must be a JSON object, got {type(raw).__name__}")

    dump = Dump(source=source)

    for m_idx, machine_raw in enumerate(_find_gregtech_machines(raw, source)):
        if not isinstance(machine_raw, dict):
            raise DumpFormatError(f"{source}: machine #{m_idx} must be an object")

        name = _get(machine_raw, "name", "n")
        if not isinstance(name, str) or not name:
            raise DumpFormatError(f"{source}: machine #{m_idx} has no name")
        dump.machines.append(name)

        recipes = _as_list(_get(machine_raw, "recipes", "recs"), "recipes", f"{source}:{name}")
        for r_idx, recipe_raw in enumerate(recipes):
            record = _parse_recipe(recipe_raw, name, len(dump.records), f"{source}:{name}#{r_idx}")
            if record.has_missing():
                dump.missing_count += 1
            dump.records.append(record)

    logger.info(
        "Loaded %d recipes across %d machines from %s",
        len(dump.records),
        len(dump.machines),
        source,
    )
    if dump.missing_count:
        logger.warning("%s: %d recipes reference missing items or fluids", source, dump.missing_count)
    return dump


def load_dump(path: Path) -> Dump:
    """Read and parse a RecEx JSON dump from `path`."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dump not found: {path}")

    logger.info("Reading %s", path)
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise DumpFormatError(f"{path}: invalid JSON ({exc})") from exc

    return parse_dump(raw, source=str(path))


def load_dumps(before: Path, after: Optional[Path]) -> Tuple[Dump, Optional[Dump]]:
    """
    Load one or two dumps. With two, each is read on its own thread; an error
    on either thread is re-raised here.
    """
    if after is None:
        return load_dump(before), None

    results: Dict[str, Dump] = {}
    errors: Dict[str, BaseException] = {}

    def _worker(key: str, path: Path) -> None:
        try:
            results[key] = load_dump(path)
        except BaseException as exc:
            errors[key] = exc

    threads = [
        threading.Thread(target=_worker, args=("before", before), name="load-before", daemon=True),
        threading.Thread(target=_worker, args=("after", after), name="load-after", daemon=True),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for key in ("before", "after"):
        if key in errors:
            raise errors[key]

    return results["before"], results["after"]
