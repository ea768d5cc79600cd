# src/recipes/testing.py
"""
Testing helpers for recipe analysis.

Provides:
  - make_recipe: compact RecipeRecord factory
  - make_raw_dump: RecEx-shaped JSON documents for loader / CLI tests
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from .schema import FluidStack, ItemStack, RecipeRecord

# (name, amount) or (name, amount, metadata)
StackSpec = Tuple[Any, ...]


def _item(spec: StackSpec) -> ItemStack:
    name, amount = spec[0], spec[1]
    metadata = spec[2] if len(spec) > 2 else 0
    return ItemStack(name=name, metadata=metadata, amount=amount, display_name=name)


def _fluid(spec: StackSpec) -> FluidStack:
    return FluidStack(name=spec[0], amount=spec[1], display_name=spec[0])


def make_recipe(
    machine: str = "M",
    inputs: Sequence[StackSpec] = (("itemA", 1),),
    outputs: Sequence[StackSpec] = (("itemB", 1),),
    fluid_inputs: Sequence[StackSpec] = (),
    fluid_outputs: Sequence[StackSpec] = (),
    duration: int = 100,
    eut: int = 30,
    enabled: bool = True,
    index: int = 0,
) -> RecipeRecord:
    """Build a RecipeRecord from terse (name, amount[, metadata]) tuples."""
    return RecipeRecord(
        machine=machine,
        item_inputs=tuple(_item(s) for s in inputs),
        fluid_inputs=tuple(_fluid(s) for s in fluid_inputs),
        item_outputs=tuple(_item(s) for s in outputs),
        fluid_outputs=tuple(_fluid(s) for s in fluid_outputs),
        stats=(("duration", duration), ("eut", eut), ("enabled", enabled)),
        index=index,
    )


def indexed(*records: RecipeRecord) -> List[RecipeRecord]:
    """Return copies of `records` carrying their position as dump index."""
    out: List[RecipeRecord] = []
    for i, r in enumerate(records):
        out.append(
            RecipeRecord(
                machine=r.machine,
                item_inputs=r.item_inputs,
                fluid_inputs=r.fluid_inputs,
                item_outputs=r.item_outputs,
                fluid_outputs=r.fluid_outputs,
                stats=r.stats,
                index=i,
            )
        )
    return out


def make_raw_dump(machines: Dict[str, List[Dict[str, Any]]], short_keys: bool = True) -> Dict[str, Any]:
    """
    Build a RecEx document with one gregtech source plus an ignored shaped
    source. Recipe dicts are passed through unchanged.
    """
    name_key, recipes_key = ("n", "recs") if short_keys else ("name", "recipes")
    return {
        "sources": [
            {"type": "shaped", "recipes": []},
            {
                "type": "gregtech",
                "machines": [
                    {name_key: name, recipes_key: recipes}
                    for name, recipes in machines.items()
                ],
            },
        ]
    }


def raw_recipe(
    inputs: Sequence[StackSpec] = (("itemA", 1),),
    outputs: Sequence[StackSpec] = (("itemB", 1),),
    duration: int = 100,
    eut: int = 30,
) -> Dict[str, Any]:
    """RecEx short-key recipe dict."""
    def stack(spec: StackSpec) -> Dict[str, Any]:
        return {
            "a": spec[1],
            "m": spec[2] if len(spec) > 2 else 0,
            "uN": spec[0],
            "lN": spec[0],
        }

    return {
        "en": True,
        "dur": duration,
        "eut": eut,
        "iI": [stack(s) for s in inputs],
        "iO": [stack(s) for s in outputs],
    }
