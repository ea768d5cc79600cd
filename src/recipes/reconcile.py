# cross-dump reconciliation
# src/recipes/reconcile.py
"""
Cross-dump reconciler.

Responsibility:
  - Pair RecipeGroups of a "before" and an "after" dump by
    (machine, InputSignature).
  - Turn each pair (or unpaired group) into zero or more ClassifiedRecipes.

Occupant count drives the decision:

    before   after    result
    ------   -----    ------------------------------------------------------
    -        n        added per occupant
    n        -        removed per occupant
    1        1        outputs-changed | stats-changed | nothing
    1        >=2      conflict-created
    >=2      1        conflict-removed (+ outputs/stats-changed if no exact survivor)
    >=2      >=2      conflicting carried forward (duplicate-registration if
                      both sides are unchanged duplicates)
                      (+ outputs/stats-changed if the content sets differ)

When one recipe has to be matched against several candidates, the first exact
content match in dump order wins and is removed from the pool.

Machines are independent of each other; reconcile_machine is a pure function
of its two inputs.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .conflicts import group_state
from .schema import (
    ClassifiedRecipe,
    ConflictState,
    Grouping,
    InputSignature,
    RecipeGroup,
    RecipeRecord,
    Status,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Matching helpers
# ---------------------------------------------------------------------------

def _first_index(pool: Sequence[RecipeRecord], target: RecipeRecord, outputs_only: bool = False) -> Optional[int]:
    """Index of the first record in `pool` matching `target`, None if none does."""
    for i, candidate in enumerate(pool):
        if outputs_only:
            if candidate.same_outputs(target):
                return i
        elif candidate.same_content(target):
            return i
    return None


def pair_occupants(
    before: Sequence[RecipeRecord],
    after: Sequence[RecipeRecord],
) -> Tuple[List[Tuple[RecipeRecord, RecipeRecord]], List[RecipeRecord], List[RecipeRecord]]:
    """
    Greedily pair after-occupants with exact content matches among the
    before-occupants.

    Returns (pairs, unmatched_before, unmatched_after), all in dump order.
    """
    pool: List[RecipeRecord] = list(before)
    pairs: List[Tuple[RecipeRecord, RecipeRecord]] = []
    unmatched_after: List[RecipeRecord] = []

    for record in after:
        idx = _first_index(pool, record)
        if idx is None:
            unmatched_after.append(record)
            continue
        pairs.append((pool.pop(idx), record))

    return pairs, pool, unmatched_after


def _order(before: Sequence[RecipeRecord], after: Sequence[RecipeRecord]) -> int:
    # Indices are only comparable within one dump: prefer the after side.
    side = after or before
    return min(r.index for r in side) if side else 0


def _entry(
    sig: InputSignature,
    status: Status,
    before: Sequence[RecipeRecord] = (),
    after: Sequence[RecipeRecord] = (),
    **extra,
) -> ClassifiedRecipe:
    return ClassifiedRecipe(
        machine=sig.machine,
        signature=sig,
        status=status,
        before=tuple(before),
        after=tuple(after),
        order=_order(before, after),
        **extra,
    )


# ---------------------------------------------------------------------------
# Per-case classification
# ---------------------------------------------------------------------------

def _classify_added(group: RecipeGroup) -> List[ClassifiedRecipe]:
    sig = group.signature
    state = group_state(group)
    return [
        _entry(sig, Status.ADDED, after=(record,), conflict_state=state)
        for record in group.members
    ]


def _classify_removed(group: RecipeGroup) -> List[ClassifiedRecipe]:
    sig = group.signature
    state = group_state(group)
    return [
        _entry(sig, Status.REMOVED, before=(record,), conflict_state=state)
        for record in group.members
    ]


def _classify_single_pair(sig: InputSignature, old: RecipeRecord, new: RecipeRecord) -> List[ClassifiedRecipe]:
    if not old.same_outputs(new):
        return [_entry(sig, Status.OUTPUTS_CHANGED, before=(old,), after=(new,))]
    if old.stats != new.stats:
        return [_entry(sig, Status.STATS_CHANGED, before=(old,), after=(new,))]
    return []


def _classify_conflict_removed(before: RecipeGroup, after: RecipeGroup) -> List[ClassifiedRecipe]:
    sig = before.signature
    survivor = after.members[0]
    idx = _first_index(before.members, survivor)

    entries = [
        _entry(
            sig,
            Status.CONFLICT_REMOVED,
            before=before.members,
            after=after.members,
            conflict_state=group_state(before),
            survivor_index=idx,
        )
    ]
    if idx is not None:
        return entries

    # No exact survivor: report the change against the closest candidate.
    same_outputs = _first_index(before.members, survivor, outputs_only=True)
    if same_outputs is not None:
        entries.append(
            _entry(sig, Status.STATS_CHANGED, before=(before.members[same_outputs],), after=(survivor,))
        )
    else:
        entries.append(_entry(sig, Status.OUTPUTS_CHANGED, before=before.members, after=(survivor,)))
    return entries


def _classify_multi_pair(before: RecipeGroup, after: RecipeGroup) -> List[ClassifiedRecipe]:
    sig = before.signature
    before_state = group_state(before)
    after_state = group_state(after)

    _, unmatched_before, unmatched_after = pair_occupants(before.members, after.members)

    if (
        before_state is ConflictState.DUPLICATE
        and after_state is ConflictState.DUPLICATE
        and len(before) == len(after)
        and not unmatched_before
        and not unmatched_after
    ):
        return [
            _entry(
                sig,
                Status.DUPLICATE_REGISTRATION,
                before=before.members,
                after=after.members,
                conflict_state=after_state,
            )
        ]

    entries = [
        _entry(
            sig,
            Status.CONFLICTING,
            before=before.members,
            after=after.members,
            conflict_state=after_state,
            unmatched_before=tuple(unmatched_before),
            unmatched_after=tuple(unmatched_after),
        )
    ]

    old_outputs = {r.outputs_key() for r in before.members}
    new_outputs = {r.outputs_key() for r in after.members}
    if old_outputs != new_outputs:
        entries.append(_entry(sig, Status.OUTPUTS_CHANGED, before=before.members, after=after.members))
    elif {r.content_key() for r in before.members} != {r.content_key() for r in after.members}:
        entries.append(_entry(sig, Status.STATS_CHANGED, before=before.members, after=after.members))

    return entries


def classify_pair(before: Optional[RecipeGroup], after: Optional[RecipeGroup]) -> List[ClassifiedRecipe]:
    """Classify one (machine, signature) slot given its group on each side."""
    if before is None and after is None:
        return []
    if before is None:
        return _classify_added(after)
    if after is None:
        return _classify_removed(before)

    b, a = len(before), len(after)
    if b == 1 and a == 1:
        return _classify_single_pair(before.signature, before.members[0], after.members[0])
    if b == 1:
        return [
            _entry(
                before.signature,
                Status.CONFLICT_CREATED,
                before=before.members,
                after=after.members,
                conflict_state=group_state(after),
            )
        ]
    if a == 1:
        return _classify_conflict_removed(before, after)
    return _classify_multi_pair(before, after)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def reconcile_machine(
    before: Dict[InputSignature, RecipeGroup],
    after: Dict[InputSignature, RecipeGroup],
) -> List[ClassifiedRecipe]:
    """Reconcile one machine's groups across the two dumps."""
    entries: List[ClassifiedRecipe] = []
    for sig in sorted(set(before) | set(after)):
        entries.extend(classify_pair(before.get(sig), after.get(sig)))
    return entries


def reconcile(before: Grouping, after: Grouping) -> List[ClassifiedRecipe]:
    """
    Reconcile two groupings and return every classified recipe.

    Machines present on only one side are handled by the same rules: all of
    their recipes come out as added or removed.
    """
    entries: List[ClassifiedRecipe] = []
    for machine in sorted(set(before) | set(after)):
        machine_entries = reconcile_machine(before.get(machine, {}), after.get(machine, {}))
        if machine not in before:
            logger.info("Machine %r only present in the after dump", machine)
        elif machine not in after:
            logger.info("Machine %r only present in the before dump", machine)
        logger.debug("Machine %r: %d classified entries", machine, len(machine_entries))
        entries.extend(machine_entries)
    return entries
