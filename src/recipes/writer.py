# JSON report output and rich summary
# src/recipes/writer.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table

from .analysis import AnalysisReport
from .keys import describe_signature
from .report import report_to_dict


def analysis_to_dict(analysis: AnalysisReport) -> Dict[str, Any]:
    """
    Plain-data view of an AnalysisReport.

    Comparison runs serialize to the machine -> status -> entries mapping.
    Conflict-only runs additionally carry a "conflict_groups" section.
    """
    data: Dict[str, Any] = report_to_dict(analysis.entries)
    if analysis.mode == "conflicts" and analysis.conflict_groups:
        return {
            "statuses": data,
            "conflict_groups": {
                machine: [
                    {
                        "inputs": describe_signature(g.signature),
                        "state": g.state.value if g.state else None,
                        "occupants": len(g),
                    }
                    for g in groups
                ]
                for machine, groups in analysis.conflict_groups.items()
            },
        }
    return data


def write_report(analysis: AnalysisReport, path: Path) -> None:
    """Write the analysis as indented JSON, creating parent dirs as needed."""
    path = Path(path)
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(analysis_to_dict(analysis), f, indent=2, ensure_ascii=False)


def build_summary_table(analysis: AnalysisReport) -> Table:
    table = Table(title=f"Recipe analysis ({analysis.mode})")
    table.add_column("Status")
    table.add_column("Count", justify="right")
    for status, count in analysis.summary.items():
        table.add_row(status.label, str(count))
    table.add_row("[bold]Total[/bold]", f"[bold]{analysis.total}[/bold]")
    return table


def print_summary(analysis: AnalysisReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    if not analysis.summary:
        console.print("No noteworthy recipes found.")
        return
    console.print(build_summary_table(analysis))
