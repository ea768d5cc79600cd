# input signature construction
# src/recipes/keys.py
"""
Key normalizer for machine recipes.

Two recipes collide in-game when the same machine would accept the same set of
input stacks for both. The signature captures exactly that: machine id plus
the multiset of (name, metadata, amount) item inputs and (name, amount) fluid
inputs. Exporter ordering is irrelevant, repeated stacks are kept.
"""

from __future__ import annotations

from typing import List

from .schema import InputSignature, RecipeRecord


def input_signature(record: RecipeRecord) -> InputSignature:
    """Return the order-independent input signature of `record`."""
    items = tuple(sorted(stack.sort_key() for stack in record.item_inputs))
    fluids = tuple(sorted(stack.sort_key() for stack in record.fluid_inputs))
    return InputSignature(machine=record.machine, items=items, fluids=fluids)


def describe_signature(signature: InputSignature) -> str:
    """
    Render a signature for humans, e.g.

        "2x gt.metaitem.01:11305 + 144L molten.tin"
    """
    parts: List[str] = []
    for name, metadata, amount in signature.items:
        parts.append(f"{amount}x {name or '?'}:{metadata}")
    for name, amount in signature.fluids:
        parts.append(f"{amount}L {name or '?'}")
    if not parts:
        return "(no inputs)"
    return " + ".join(parts)
