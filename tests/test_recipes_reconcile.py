# tests/test_recipes_reconcile.py
"""
Cross-dump reconciliation: one test per occupant-count case plus
self-comparison.
"""

from recipes.grouping import group_recipes
from recipes.reconcile import pair_occupants, reconcile
from recipes.schema import ConflictState, Status
from recipes.testing import indexed, make_recipe


def _statuses(entries):
    return sorted(e.status.value for e in entries)


def _run(before, after):
    return reconcile(group_recipes(indexed(*before)), group_recipes(indexed(*after)))


# --- 1 vs 1 ---

def test_outputs_changed_single_pair():
    before = [make_recipe(inputs=[("itemA", 1)], outputs=[("itemB", 2)], duration=100)]
    after = [make_recipe(inputs=[("itemA", 1)], outputs=[("itemB", 3)], duration=100)]

    entries = _run(before, after)

    assert _statuses(entries) == ["outputs-changed"]
    entry = entries[0]
    assert entry.old_outputs[0][0][0].amount == 2
    assert entry.new_outputs[0][0][0].amount == 3
    assert entry.before_count == entry.after_count == 1


def test_stats_changed_single_pair():
    entries = _run([make_recipe(duration=100)], [make_recipe(duration=80)])

    assert _statuses(entries) == ["stats-changed"]
    assert entries[0].old_stats[0]["duration"] == 100
    assert entries[0].new_stats[0]["duration"] == 80


def test_outputs_change_wins_over_stats_change():
    entries = _run([make_recipe(duration=100)], [make_recipe(outputs=[("other", 1)], duration=5)])

    assert _statuses(entries) == ["outputs-changed"]


def test_unchanged_recipe_is_not_reported():
    assert _run([make_recipe()], [make_recipe()]) == []


# --- added / removed ---

def test_added_and_removed_are_mirror_images():
    base = make_recipe(inputs=[("itemA", 1)])
    new = make_recipe(inputs=[("itemS", 1)])

    added = _run([base], [base, new])
    removed = _run([base, new], [base])

    assert _statuses(added) == ["added"]
    assert added[0].after[0].item_inputs[0].name == "itemS"
    assert _statuses(removed) == ["removed"]
    assert removed[0].before[0].item_inputs[0].name == "itemS"


def test_new_conflicting_group_is_only_reported_as_added():
    after = [
        make_recipe(inputs=[("itemS", 1)], outputs=[("x", 1)]),
        make_recipe(inputs=[("itemS", 1)], outputs=[("y", 1)]),
    ]

    entries = _run([], after)

    assert _statuses(entries) == ["added", "added"]
    assert all(e.conflict_state is ConflictState.CONFLICTING for e in entries)


def test_machine_only_in_one_dump():
    entries = _run([make_recipe(machine="Old")], [make_recipe(machine="New")])

    assert {(e.machine, e.status) for e in entries} == {
        ("Old", Status.REMOVED),
        ("New", Status.ADDED),
    }


# --- 1 vs >=2 ---

def test_conflict_created():
    before = [make_recipe()]
    after = [make_recipe(), make_recipe(outputs=[("itemZ", 1)])]

    entries = _run(before, after)

    assert _statuses(entries) == ["conflict-created"]
    assert entries[0].conflict_state is ConflictState.CONFLICTING
    assert entries[0].before_count == 1
    assert entries[0].after_count == 2


# --- >=2 vs 1 ---

def test_conflict_removed_with_exact_survivor():
    before = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)])]
    after = [make_recipe(outputs=[("y", 1)])]

    entries = _run(before, after)

    assert _statuses(entries) == ["conflict-removed"]
    assert entries[0].survivor_index == 1
    assert entries[0].conflict_state is ConflictState.CONFLICTING


def test_conflict_removed_survivor_with_changed_stats():
    before = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)])]
    after = [make_recipe(outputs=[("y", 1)], eut=120)]

    entries = _run(before, after)

    assert _statuses(entries) == ["conflict-removed", "stats-changed"]
    removed = next(e for e in entries if e.status is Status.CONFLICT_REMOVED)
    changed = next(e for e in entries if e.status is Status.STATS_CHANGED)
    assert removed.survivor_index is None
    assert changed.before[0].item_outputs[0].name == "y"


def test_conflict_removed_survivor_with_new_outputs():
    before = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)])]
    after = [make_recipe(outputs=[("z", 1)])]

    entries = _run(before, after)

    assert _statuses(entries) == ["conflict-removed", "outputs-changed"]
    changed = next(e for e in entries if e.status is Status.OUTPUTS_CHANGED)
    assert changed.before_count == 2


# --- >=2 vs >=2 ---

def test_conflict_carried_forward_without_change():
    group = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)])]

    entries = _run(group, list(reversed(group)))

    assert _statuses(entries) == ["conflicting"]
    assert entries[0].unmatched_before == ()
    assert entries[0].unmatched_after == ()


def test_conflict_with_changed_output_set():
    before = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)])]
    after = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("z", 1)])]

    entries = _run(before, after)

    assert _statuses(entries) == ["conflicting", "outputs-changed"]
    conflict = next(e for e in entries if e.status is Status.CONFLICTING)
    assert [r.item_outputs[0].name for r in conflict.unmatched_before] == ["y"]
    assert [r.item_outputs[0].name for r in conflict.unmatched_after] == ["z"]


def test_conflict_with_changed_stats_only():
    before = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)])]
    after = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)], duration=1)]

    assert _statuses(_run(before, after)) == ["conflicting", "stats-changed"]


def test_stable_duplicate_registration():
    dup = [make_recipe(), make_recipe()]

    entries = _run(dup, dup)

    assert _statuses(entries) == ["duplicate-registration"]
    assert entries[0].conflict_state is ConflictState.DUPLICATE


def test_conflict_turning_into_duplicate_stays_conflicting():
    before = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("y", 1)])]
    after = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("x", 1)])]

    entries = _run(before, after)

    assert _statuses(entries) == ["conflicting", "outputs-changed"]
    conflict = next(e for e in entries if e.status is Status.CONFLICTING)
    assert conflict.conflict_state is ConflictState.DUPLICATE


def test_duplicate_with_changed_content_is_conflicting():
    before = [make_recipe(outputs=[("x", 1)]), make_recipe(outputs=[("x", 1)])]
    after = [make_recipe(outputs=[("y", 1)]), make_recipe(outputs=[("y", 1)])]

    assert _statuses(_run(before, after)) == ["conflicting", "outputs-changed"]


def test_duplicate_with_changed_count_is_conflicting():
    before = [make_recipe(), make_recipe()]
    after = [make_recipe(), make_recipe(), make_recipe()]

    entries = _run(before, after)

    assert _statuses(entries) == ["conflicting"]
    assert len(entries[0].unmatched_after) == 1


def test_entry_order_uses_after_dump_indices():
    before = [make_recipe(inputs=[("pad", 1)]), make_recipe(outputs=[("x", 1)])]
    after = [make_recipe(outputs=[("y", 1)])]

    entries = _run(before, after)

    changed = next(e for e in entries if e.status is Status.OUTPUTS_CHANGED)
    assert changed.before[0].index == 1
    assert changed.order == 0


def test_pairing_prefers_first_exact_match():
    a1 = make_recipe(outputs=[("x", 1)], index=0)
    a2 = make_recipe(outputs=[("x", 1)], index=1)
    b = make_recipe(outputs=[("x", 1)], index=7)

    pairs, unmatched_before, unmatched_after = pair_occupants([a1, a2], [b])

    assert pairs[0][0].index == 0
    assert [r.index for r in unmatched_before] == [1]
    assert unmatched_after == []


# --- properties ---

def test_reconciling_a_dump_against_itself_only_reports_existing_states():
    records = indexed(
        make_recipe(inputs=[("a", 1)]),
        make_recipe(inputs=[("b", 1)]),
        make_recipe(inputs=[("b", 1)]),
        make_recipe(inputs=[("c", 1)]),
        make_recipe(inputs=[("c", 1)], outputs=[("q", 1)]),
        make_recipe(machine="Other", inputs=[("a", 1)], fluid_inputs=[("water", 10)]),
    )
    grouping = group_recipes(records)

    entries = reconcile(grouping, grouping)

    assert _statuses(entries) == ["conflicting", "duplicate-registration"]
