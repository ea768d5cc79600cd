# tests/test_recipes_keys_and_grouping.py
"""
Signature normalization, grouping and intra-dump conflict detection.
"""

from recipes.conflicts import detect_conflict, find_conflicts, intra_dump_statuses
from recipes.grouping import count_records, group_recipes
from recipes.keys import describe_signature, input_signature
from recipes.schema import ConflictState, RecipeGroup
from recipes.testing import indexed, make_recipe


def test_signature_ignores_input_order():
    r1 = make_recipe(inputs=[("itemA", 1), ("itemC", 2, 5)], fluid_inputs=[("water", 1000), ("steam", 50)])
    r2 = make_recipe(inputs=[("itemC", 2, 5), ("itemA", 1)], fluid_inputs=[("steam", 50), ("water", 1000)])

    assert input_signature(r1) == input_signature(r2)


def test_signature_respects_amount_metadata_and_machine():
    base = input_signature(make_recipe(inputs=[("itemA", 1)]))

    assert input_signature(make_recipe(inputs=[("itemA", 2)])) != base
    assert input_signature(make_recipe(inputs=[("itemA", 1, 3)])) != base
    assert input_signature(make_recipe(machine="Other", inputs=[("itemA", 1)])) != base


def test_signature_keeps_repeated_stacks_and_ignores_outputs():
    twice = input_signature(make_recipe(inputs=[("itemA", 1), ("itemA", 1)]))
    once = input_signature(make_recipe(inputs=[("itemA", 1)]))

    assert twice != once
    assert len(twice.items) == 2
    assert input_signature(make_recipe(outputs=[("x", 9)], duration=5)) == once


def test_describe_signature_is_readable():
    sig = input_signature(make_recipe(inputs=[("gt.metaitem.01", 2, 11305)], fluid_inputs=[("molten.tin", 144)]))

    assert describe_signature(sig) == "2x gt.metaitem.01:11305 + 144L molten.tin"


def test_grouping_is_a_partition():
    records = indexed(
        make_recipe(machine="Macerator", inputs=[("ore", 1)]),
        make_recipe(machine="Macerator", inputs=[("ore", 1)], outputs=[("dust", 2)]),
        make_recipe(machine="Macerator", inputs=[("ingot", 1)]),
        make_recipe(machine="Assembler", inputs=[("ore", 1)]),
    )

    grouping = group_recipes(records)

    assert set(grouping) == {"Macerator", "Assembler"}
    assert count_records(grouping) == len(records)
    assert sorted(len(g) for g in grouping["Macerator"].values()) == [1, 2]
    for by_inputs in grouping.values():
        for sig, group in by_inputs.items():
            assert all(input_signature(r) == sig for r in group.members)


def test_conflict_states():
    single = RecipeGroup(signature=input_signature(make_recipe()), members=[make_recipe()])
    dup = RecipeGroup(signature=single.signature, members=[make_recipe(), make_recipe()])
    conflict = RecipeGroup(
        signature=single.signature,
        members=[make_recipe(), make_recipe(outputs=[("itemB", 2)])],
    )
    stat_conflict = RecipeGroup(
        signature=single.signature,
        members=[make_recipe(), make_recipe(eut=120)],
    )

    assert detect_conflict(single) is ConflictState.SINGLE
    assert detect_conflict(dup) is ConflictState.DUPLICATE
    assert detect_conflict(conflict) is ConflictState.CONFLICTING
    assert detect_conflict(stat_conflict) is ConflictState.CONFLICTING


def test_duplicate_check_ignores_output_order():
    a = make_recipe(outputs=[("x", 1), ("y", 1)])
    b = make_recipe(outputs=[("y", 1), ("x", 1)])
    group = RecipeGroup(signature=input_signature(a), members=[a, b])

    assert detect_conflict(group) is ConflictState.DUPLICATE


def test_single_dump_duplicate_and_conflict_statuses():
    records = indexed(
        make_recipe(inputs=[("itemA", 1)]),
        make_recipe(inputs=[("itemA", 1)]),
        make_recipe(inputs=[("itemC", 1)]),
        make_recipe(inputs=[("itemC", 1)], outputs=[("itemD", 1)]),
        make_recipe(inputs=[("lonely", 1)]),
    )
    grouping = group_recipes(records)

    entries = intra_dump_statuses(grouping)

    assert sorted(e.status.value for e in entries) == ["conflicting", "duplicate-registration"]
    assert len(find_conflicts(grouping)) == 2
    for e in entries:
        assert e.before == e.after
        assert e.after_count == 2
