# machine-grouped report assembly
# src/recipes/report.py
"""
Report assembly for classified recipes.

assemble_report groups the surviving entries by machine, in a deterministic
order: machines by name, entries by signature then by dump order.

report_to_dict produces the JSON layout consumed by downstream tooling:

    {
      "<machine>": {
        "<Status label>": [
          {"before": [recipe, ...], "after": [recipe, ...]},
          {"recipes": [recipe, ...]},            # when before == after
          ...
        ]
      }
    }
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List

from .keys import describe_signature
from .schema import ClassifiedRecipe, Status


Report = Dict[str, List[ClassifiedRecipe]]


def assemble_report(entries: Iterable[ClassifiedRecipe]) -> Report:
    """Group entries by machine, ordered by machine then signature then dump order."""
    per_machine: Dict[str, List[ClassifiedRecipe]] = {}
    for entry in entries:
        per_machine.setdefault(entry.machine, []).append(entry)

    return {
        machine: sorted(per_machine[machine], key=ClassifiedRecipe.sort_key)
        for machine in sorted(per_machine)
    }


def summarize(entries: Iterable[ClassifiedRecipe]) -> Dict[Status, int]:
    """Count entries per status, in taxonomy order."""
    counts = Counter(e.status for e in entries)
    return {status: counts[status] for status in Status if counts[status]}


def entry_to_dict(entry: ClassifiedRecipe) -> Dict[str, Any]:
    data: Dict[str, Any] = {"inputs": describe_signature(entry.signature)}
    if entry.before == entry.after:
        data["recipes"] = [r.to_dict() for r in entry.before]
    else:
        data["before"] = [r.to_dict() for r in entry.before]
        data["after"] = [r.to_dict() for r in entry.after]

    if entry.conflict_state is not None:
        data["conflict_state"] = entry.conflict_state.value
    if entry.survivor_index is not None:
        data["survivor_index"] = entry.survivor_index
    if entry.unmatched_before:
        data["unmatched_before"] = [r.to_dict() for r in entry.unmatched_before]
    if entry.unmatched_after:
        data["unmatched_after"] = [r.to_dict() for r in entry.unmatched_after]
    return data


def report_to_dict(report: Report) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """Serialize an assembled report into plain JSON-safe data."""
    out: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
    for machine, entries in report.items():
        by_status: Dict[str, List[Dict[str, Any]]] = {}
        for status in Status:
            matching = [entry_to_dict(e) for e in entries if e.status is status]
            if matching:
                by_status[status.label] = matching
        if by_status:
            out[machine] = by_status
    return out
