# group recipes by machine and input signature
# src/recipes/grouping.py

from __future__ import annotations

from typing import Dict, Iterable

from .conflicts import detect_conflict
from .keys import input_signature
from .schema import Grouping, InputSignature, RecipeGroup, RecipeRecord


def group_recipes(records: Iterable[RecipeRecord]) -> Grouping:
    """
    Partition a dump's records into machine -> signature -> RecipeGroup.

    Every record lands in exactly one group; members keep dump order.
    Each group's ConflictState is computed once the partition is complete.
    """
    per_machine: Grouping = {}

    for record in records:
        by_inputs: Dict[InputSignature, RecipeGroup] = per_machine.setdefault(record.machine, {})

        sig = input_signature(record)
        group = by_inputs.get(sig)
        if group is None:
            group = RecipeGroup(signature=sig)
            by_inputs[sig] = group
        group.members.append(record)

    for by_inputs in per_machine.values():
        for group in by_inputs.values():
            group.state = detect_conflict(group)

    return per_machine


def count_records(grouping: Grouping) -> int:
    return sum(len(g) for by_inputs in grouping.values() for g in by_inputs.values())
