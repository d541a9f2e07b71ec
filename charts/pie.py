"""
Pie chart boundary.

The pie itself is drawn by an external renderer (Chart.js on the homepage).
This module only produces what that renderer consumes: parallel
``labels``/``values``/``colors`` lists in the same order as the cached items,
rebuilt in full on every data change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

from budget.models import BudgetItem
from charts.palette import DEFAULT_PALETTE, colors_for


@dataclass(frozen=True)
class PieChartData:
    labels: list[str] = field(default_factory=list)
    values: list[float] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "labels": list(self.labels),
            "values": list(self.values),
            "colors": list(self.colors),
        }


def build_pie_data(
    items: Sequence[BudgetItem],
    palette: tuple[str, ...] = DEFAULT_PALETTE,
) -> PieChartData:
    """One label/value/color per item, by position.  Lists are fresh copies."""
    return PieChartData(
        labels=[item.title for item in items],
        values=[item.budget for item in items],
        colors=colors_for(len(items), palette),
    )


class PieRenderer(Protocol):
    def render(self, data: PieChartData) -> None: ...

    def destroy(self) -> None: ...


class ChartJsPieRenderer:
    """Holds the Chart.js config for the homepage pie.

    ``render`` replaces the whole config; ``destroy`` drops it so a torn-down
    view leaves no chart behind.
    """

    def __init__(self, responsive: bool = True) -> None:
        self.responsive = responsive
        self.config: dict[str, Any] | None = None

    def render(self, data: PieChartData) -> None:
        self.config = {
            "type": "pie",
            "data": {
                "labels": list(data.labels),
                "datasets": [
                    {
                        "data": list(data.values),
                        "backgroundColor": list(data.colors),
                    }
                ],
            },
            "options": {"responsive": self.responsive},
        }

    def destroy(self) -> None:
        self.config = None
