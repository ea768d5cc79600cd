# recipes package
# src/recipes/__init__.py

"""
GregTech recipe dump analysis.

Surface for consumers:

- analyze_dump(records, status_filter)         -> AnalysisReport
- compare_dumps(before, after, status_filter)  -> AnalysisReport
- StatusFilter                                 -> whitelist / blacklist
- load_dump(path)                              -> Dump
"""

from __future__ import annotations

from .analysis import AnalysisReport, analyze_dump, compare_dumps
from .filters import InvalidFilterConfig, StatusFilter
from .loader import Dump, DumpFormatError, load_dump, load_dumps, parse_dump
from .schema import (
    ClassifiedRecipe,
    ConflictState,
    FluidStack,
    InputSignature,
    ItemStack,
    RecipeGroup,
    RecipeRecord,
    Status,
)


__all__ = [
    "AnalysisReport",
    "analyze_dump",
    "compare_dumps",
    "StatusFilter",
    "InvalidFilterConfig",
    "Dump",
    "DumpFormatError",
    "load_dump",
    "load_dumps",
    "parse_dump",
    "ClassifiedRecipe",
    "ConflictState",
    "FluidStack",
    "InputSignature",
    "ItemStack",
    "RecipeGroup",
    "RecipeRecord",
    "Status",
]
