# src/recipes/analysis.py
"""
Entry points for recipe analysis.

- analyze_dump(records, status_filter)          one dump, conflicts only
- compare_dumps(before, after, status_filter)   two dumps, full taxonomy

Both take the StatusFilter as an argument. A filter is validated when it is
constructed, so an invalid whitelist/blacklist combination never reaches the
classification stage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .conflicts import find_conflicts, intra_dump_statuses
from .filters import PASSTHROUGH, StatusFilter
from .grouping import count_records, group_recipes
from .reconcile import reconcile
from .report import Report, assemble_report, summarize
from .schema import RecipeGroup, RecipeRecord, Status

logger = logging.getLogger(__name__)


@dataclass
class AnalysisReport:
    """
    Result of one analysis run.

    - mode: "conflicts" (single dump) or "compare" (two dumps)
    - entries: machine -> ordered ClassifiedRecipes surviving the filter
    - conflict_groups: machine -> non-single groups of the sole / after dump
    - summary: per-status counts over `entries`
    """
    mode: str
    entries: Report = field(default_factory=dict)
    conflict_groups: Dict[str, List[RecipeGroup]] = field(default_factory=dict)
    summary: Dict[Status, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.summary.values())


def _conflict_groups_by_machine(groups: Iterable[RecipeGroup]) -> Dict[str, List[RecipeGroup]]:
    out: Dict[str, List[RecipeGroup]] = {}
    for group in groups:
        out.setdefault(group.machine, []).append(group)
    return out


def _finish(mode: str, entries, status_filter: StatusFilter, conflict_groups) -> AnalysisReport:
    kept = status_filter.apply(entries)
    logger.info("%d of %d classified entries kept by the status filter", len(kept), len(entries))
    return AnalysisReport(
        mode=mode,
        entries=assemble_report(kept),
        conflict_groups=_conflict_groups_by_machine(conflict_groups),
        summary=summarize(kept),
    )


def analyze_dump(
    records: Iterable[RecipeRecord],
    status_filter: Optional[StatusFilter] = None,
) -> AnalysisReport:
    """Run conflict / duplicate analysis over a single dump."""
    status_filter = status_filter or PASSTHROUGH

    grouping = group_recipes(records)
    logger.info("Grouped %d recipes across %d machines", count_records(grouping), len(grouping))

    conflicts = find_conflicts(grouping)
    entries = intra_dump_statuses(grouping)
    return _finish("conflicts", entries, status_filter, conflicts)


def compare_dumps(
    before: Iterable[RecipeRecord],
    after: Iterable[RecipeRecord],
    status_filter: Optional[StatusFilter] = None,
) -> AnalysisReport:
    """Classify every noteworthy change between two dumps."""
    status_filter = status_filter or PASSTHROUGH

    before_grouping = group_recipes(before)
    after_grouping = group_recipes(after)
    logger.info(
        "Grouped %d before / %d after recipes",
        count_records(before_grouping),
        count_records(after_grouping),
    )

    entries = reconcile(before_grouping, after_grouping)
    return _finish("compare", entries, status_filter, find_conflicts(after_grouping))
