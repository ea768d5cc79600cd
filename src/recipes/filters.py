# whitelist / blacklist filtering over statuses
# src/recipes/filters.py

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from .schema import ClassifiedRecipe, Status


class InvalidFilterConfig(ValueError):
    """Raised when a whitelist and a blacklist are supplied together."""


def _as_statuses(values: Optional[Iterable[object]]) -> FrozenSet[Status]:
    if not values:
        return frozenset()
    return frozenset(v if isinstance(v, Status) else Status.parse(str(v)) for v in values)


@dataclass(frozen=True)
class StatusFilter:
    """
    Inclusion or exclusion filter over the status taxonomy.

    - whitelist non-empty: keep only those statuses
    - blacklist non-empty: drop those statuses
    - both empty: pass everything through

    Construction rejects a filter with both lists set, so an invalid
    configuration fails before any classification runs.
    """
    whitelist: FrozenSet[Status] = frozenset()
    blacklist: FrozenSet[Status] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "whitelist", _as_statuses(self.whitelist))
        object.__setattr__(self, "blacklist", _as_statuses(self.blacklist))
        if self.whitelist and self.blacklist:
            raise InvalidFilterConfig("cannot use a status whitelist and blacklist at the same time")

    @classmethod
    def from_names(
        cls,
        whitelist: Optional[Iterable[str]] = None,
        blacklist: Optional[Iterable[str]] = None,
    ) -> "StatusFilter":
        return cls(whitelist=_as_statuses(whitelist), blacklist=_as_statuses(blacklist))

    @property
    def is_passthrough(self) -> bool:
        return not self.whitelist and not self.blacklist

    def allows(self, status: Status) -> bool:
        if self.whitelist:
            return status in self.whitelist
        if self.blacklist:
            return status not in self.blacklist
        return True

    def apply(self, entries: Iterable[ClassifiedRecipe]) -> List[ClassifiedRecipe]:
        return [e for e in entries if self.allows(e.status)]


PASSTHROUGH = StatusFilter()
