# intra-dump conflict detection
# src/recipes/conflicts.py
"""
Intra-dump conflict detection.

A group with more than one occupant is either:
  - a duplicate registration: every occupant has the same outputs and stats,
    the mod simply registered the recipe twice
  - a conflict: the same inputs can produce different results, which machine
    code resolves arbitrarily in-game

This runs for every dump, with or without a second dump to compare against.
"""

from __future__ import annotations

from typing import List

from .schema import (
    ClassifiedRecipe,
    ConflictState,
    Grouping,
    RecipeGroup,
    Status,
)


def detect_conflict(group: RecipeGroup) -> ConflictState:
    """Return the ConflictState of `group` based on its occupants."""
    members = group.members
    if len(members) <= 1:
        return ConflictState.SINGLE

    first = members[0]
    if all(first.same_content(other) for other in members[1:]):
        return ConflictState.DUPLICATE
    return ConflictState.CONFLICTING


def group_state(group: RecipeGroup) -> ConflictState:
    """Return the cached state of `group`, computing it if grouping skipped it."""
    if group.state is None:
        group.state = detect_conflict(group)
    return group.state


def status_for_state(state: ConflictState) -> Status | None:
    """Map an intra-dump state onto the status it is reported under."""
    if state is ConflictState.CONFLICTING:
        return Status.CONFLICTING
    if state is ConflictState.DUPLICATE:
        return Status.DUPLICATE_REGISTRATION
    return None


def find_conflicts(grouping: Grouping) -> List[RecipeGroup]:
    """Return every non-single group of a dump, ordered by machine then signature."""
    found: List[RecipeGroup] = []
    for machine in sorted(grouping):
        by_inputs = grouping[machine]
        for sig in sorted(by_inputs):
            group = by_inputs[sig]
            if group_state(group) is not ConflictState.SINGLE:
                found.append(group)
    return found


def intra_dump_statuses(grouping: Grouping) -> List[ClassifiedRecipe]:
    """
    Classify a standalone dump.

    Only conflicting / duplicate-registration entries can come out of this;
    both `before` and `after` hold the group's occupants.
    """
    entries: List[ClassifiedRecipe] = []
    for group in find_conflicts(grouping):
        state = group_state(group)
        status = status_for_state(state)
        if status is None:
            continue
        members = tuple(group.members)
        entries.append(
            ClassifiedRecipe(
                machine=group.machine,
                signature=group.signature,
                status=status,
                before=members,
                after=members,
                conflict_state=state,
                order=min(r.index for r in members),
            )
        )
    return entries
