# RecipeRecord, InputSignature, Status, and related types
# src/recipes/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# Placeholder stacks RecEx emits when an item failed to resolve.
MISSING_ITEM_NAMES = ("tile.fire",)
MISSING_ITEM_DISPLAY_NAMES = ("Fire",)


# ---------------------------------------------------------------------------
# Stacks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ItemStack:
    """
    One item stack as exported by RecEx.

    - name: unlocalized name ("gt.metaitem.01"), None if the exporter could
      not resolve it
    - metadata: damage / meta value distinguishing sub-items
    - amount: stack size
    - display_name: localized name; informational only, never compared
    """
    name: Optional[str]
    metadata: int = 0
    amount: int = 1
    display_name: Optional[str] = field(default=None, compare=False)

    def is_missing(self) -> bool:
        return (
            self.name is None
            or self.display_name is None
            or self.name in MISSING_ITEM_NAMES
            or self.display_name in MISSING_ITEM_DISPLAY_NAMES
        )

    def sort_key(self) -> Tuple[str, int, int]:
        return (self.name or "", self.metadata, self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unlocalized_name": self.name,
            "localized_name": self.display_name,
            "metadata": self.metadata,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class FluidStack:
    """One fluid stack: fluid name plus amount in millibuckets."""
    name: Optional[str]
    amount: int = 0
    display_name: Optional[str] = field(default=None, compare=False)

    def is_missing(self) -> bool:
        return self.name is None or self.display_name is None

    def sort_key(self) -> Tuple[str, int]:
        return (self.name or "", self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unlocalized_name": self.name,
            "localized_name": self.display_name,
            "amount": self.amount,
        }


# ---------------------------------------------------------------------------
# Recipes
# ---------------------------------------------------------------------------

Stat = Tuple[str, Any]


@dataclass(frozen=True)
class RecipeRecord:
    """
    One registered machine recipe from a dump.

    Stats are an ordered tuple of (name, value) pairs so the record stays
    hashable; for GregTech recipes they are duration, eut and enabled.
    `index` is the record's position inside its dump and does not take part
    in equality.
    """
    machine: str
    item_inputs: Tuple[ItemStack, ...] = ()
    fluid_inputs: Tuple[FluidStack, ...] = ()
    item_outputs: Tuple[ItemStack, ...] = ()
    fluid_outputs: Tuple[FluidStack, ...] = ()
    stats: Tuple[Stat, ...] = ()
    index: int = field(default=0, compare=False)

    def outputs_key(self) -> Tuple[Tuple[Tuple[str, int, int], ...], Tuple[Tuple[str, int], ...]]:
        """Order-insensitive view of the outputs, used for comparison."""
        return (
            tuple(sorted(s.sort_key() for s in self.item_outputs)),
            tuple(sorted(s.sort_key() for s in self.fluid_outputs)),
        )

    def content_key(self) -> Tuple[Any, ...]:
        """Outputs plus stats: everything that must match for two records to be duplicates."""
        return (self.outputs_key(), self.stats)

    def same_outputs(self, other: "RecipeRecord") -> bool:
        return self.outputs_key() == other.outputs_key()

    def same_content(self, other: "RecipeRecord") -> bool:
        return self.content_key() == other.content_key()

    def stat(self, name: str, default: Any = None) -> Any:
        for key, value in self.stats:
            if key == name:
                return value
        return default

    @property
    def stats_dict(self) -> Dict[str, Any]:
        return dict(self.stats)

    def has_missing(self) -> bool:
        return (
            any(s.is_missing() for s in self.item_inputs)
            or any(s.is_missing() for s in self.fluid_inputs)
            or any(s.is_missing() for s in self.item_outputs)
            or any(s.is_missing() for s in self.fluid_outputs)
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.stats)
        if self.item_inputs:
            data["item_inputs"] = [s.to_dict() for s in self.item_inputs]
        if self.fluid_inputs:
            data["fluid_inputs"] = [s.to_dict() for s in self.fluid_inputs]
        if self.item_outputs:
            data["item_outputs"] = [s.to_dict() for s in self.item_outputs]
        if self.fluid_outputs:
            data["fluid_outputs"] = [s.to_dict() for s in self.fluid_outputs]
        return data


# ---------------------------------------------------------------------------
# Keys and groups
# ---------------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class InputSignature:
    """
    Machine-scoped, order-independent key over a recipe's inputs.

    - items: sorted (name, metadata, amount) tuples, repeats preserved
    - fluids: sorted (name, amount) tuples, repeats preserved
    """
    machine: str
    items: Tuple[Tuple[str, int, int], ...] = ()
    fluids: Tuple[Tuple[str, int], ...] = ()


class ConflictState(Enum):
    """Intra-dump state of one RecipeGroup."""

    SINGLE = "single"
    DUPLICATE = "duplicate"
    CONFLICTING = "conflicting"


@dataclass
class RecipeGroup:
    """
    All records of one dump sharing an InputSignature.

    `state` is filled in by recipes.conflicts.detect_conflict once the
    grouping is complete.
    """
    signature: InputSignature
    members: List[RecipeRecord] = field(default_factory=list)
    state: Optional[ConflictState] = None

    @property
    def machine(self) -> str:
        return self.signature.machine

    def __len__(self) -> int:
        return len(self.members)


Grouping = Dict[str, Dict[InputSignature, RecipeGroup]]


# ---------------------------------------------------------------------------
# Status taxonomy
# ---------------------------------------------------------------------------

class Status(Enum):
    """Closed set of statuses a classified recipe can carry."""

    ADDED = "added"
    REMOVED = "removed"
    OUTPUTS_CHANGED = "outputs-changed"
    STATS_CHANGED = "stats-changed"
    CONFLICTING = "conflicting"
    CONFLICT_CREATED = "conflict-created"
    CONFLICT_REMOVED = "conflict-removed"
    DUPLICATE_REGISTRATION = "duplicate-registration"

    @property
    def label(self) -> str:
        """Human label, e.g. "Outputs Changed"."""
        return " ".join(part.capitalize() for part in self.value.split("-"))

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    @classmethod
    def parse(cls, text: str) -> "Status":
        """
        Parse a status from its value ("outputs-changed"), its label
        ("Outputs Changed") or the enum name ("OUTPUTS_CHANGED").
        """
        token = text.strip().lower().replace("_", "-").replace(" ", "-")
        for status in cls:
            if status.value == token:
                return status
        valid = ", ".join(s.value for s in cls)
        raise ValueError(f"Unknown recipe status {text!r} (expected one of: {valid})")


_STATUS_ORDER: List[Status] = list(Status)


# ---------------------------------------------------------------------------
# Classification results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassifiedRecipe:
    """
    One reportable outcome for a (machine, signature) pair.

    - before / after: the records involved on each side; in single-dump
      mode both hold the same occupants
    - conflict_state: the group state the status refers to (the after-group
      for conflict-created, the before-group for conflict-removed, ...)
    - survivor_index: for conflict-removed, which before-occupant the
      remaining recipe matches, None if none matched exactly
    - unmatched_before / unmatched_after: occupants left over after greedy
      exact-match pairing of two multi-occupant groups
    - order: smallest after-dump index involved (before-dump if no after
      records), for stable report ordering
    """
    machine: str
    signature: InputSignature
    status: Status
    before: Tuple[RecipeRecord, ...] = ()
    after: Tuple[RecipeRecord, ...] = ()
    conflict_state: Optional[ConflictState] = None
    survivor_index: Optional[int] = None
    unmatched_before: Tuple[RecipeRecord, ...] = ()
    unmatched_after: Tuple[RecipeRecord, ...] = ()
    order: int = 0

    @property
    def before_count(self) -> int:
        return len(self.before)

    @property
    def after_count(self) -> int:
        return len(self.after)

    @property
    def old_outputs(self) -> List[Tuple[Tuple[ItemStack, ...], Tuple[FluidStack, ...]]]:
        return [(r.item_outputs, r.fluid_outputs) for r in self.before]

    @property
    def new_outputs(self) -> List[Tuple[Tuple[ItemStack, ...], Tuple[FluidStack, ...]]]:
        return [(r.item_outputs, r.fluid_outputs) for r in self.after]

    @property
    def old_stats(self) -> List[Dict[str, Any]]:
        return [r.stats_dict for r in self.before]

    @property
    def new_stats(self) -> List[Dict[str, Any]]:
        return [r.stats_dict for r in self.after]

    def sort_key(self) -> Tuple[Any, ...]:
        return (self.signature, self.order, self.status.rank)
