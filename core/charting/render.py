"""Render parsed target data into a Chart.js horizontal bar payload."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TypedDict

from core.parsers.chart_data import ChartRecord

LABEL_WRAP_AT = 35
EMPTY_STATE_MESSAGE = "Chart data is not available."
DEFAULT_DATASET_LABEL = "Annual Target"
BAR_COLOR = "#2563EB"


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload for the target chart."""

    label: str
    data: list[float]
    valueLabels: list[str]
    backgroundColor: str
    borderRadius: int
    borderSkipped: bool


class ChartData(TypedDict):
    """Chart.js `data` block: category labels plus datasets."""

    labels: list[str | list[str]]
    datasets: list[ChartDataset]


@dataclass(frozen=True, slots=True)
class RenderedChart:
    """A rendered chart panel.

    Attributes:
        title: Optional panel title shown above the chart.
        data: Chart.js data payload. Empty when `empty_state` is set.
        options: Chart.js options payload.
        empty_state: Placeholder message when there is nothing to draw.
    """

    title: str | None
    data: ChartData
    options: dict[str, Any] = field(default_factory=dict)
    empty_state: str | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when the chart should render its placeholder."""

        return self.empty_state is not None

    def as_chartjs(self) -> dict[str, Any]:
        """Return the full Chart.js config (`type`, `data`, `options`)."""

        return {"type": "bar", "data": self.data, "options": self.options}

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable payload for the chart API and templates."""

        return {
            "title": self.title,
            "emptyState": self.empty_state,
            "chart": None if self.is_empty else self.as_chartjs(),
        }


def render_target_chart(
    records: Sequence[ChartRecord],
    *,
    title: str | None = None,
    dataset_label: str = DEFAULT_DATASET_LABEL,
) -> RenderedChart:
    """Render chart records as a horizontal bar chart.

    Args:
        records: Parsed records in display order.
        title: Optional chart title.
        dataset_label: Legend label for the single bar dataset.

    Returns:
        RenderedChart whose category axis lists record names top-to-bottom in
        the same order as `records`. Chart.js draws the first category at the
        top when `indexAxis="y"` and the axis is not reversed.
    """

    if not records:
        return RenderedChart(
            title=title,
            data={"labels": [], "datasets": []},
            empty_state=EMPTY_STATE_MESSAGE,
        )

    values = [record.value for record in records]
    dataset: ChartDataset = {
        "label": dataset_label,
        "data": values,
        "valueLabels": [format_value_label(value) for value in values],
        "backgroundColor": BAR_COLOR,
        "borderRadius": 4,
        "borderSkipped": False,
    }
    return RenderedChart(
        title=title,
        data={
            "labels": [wrap_category_label(record.name) for record in records],
            "datasets": [dataset],
        },
        options=_chart_options(max_value=max(values)),
    )


def wrap_category_label(name: str) -> str | list[str]:
    """Wrap a long category name onto a second line.

    Args:
        name: Record name.

    Returns:
        The name unchanged when it fits, otherwise a two-line Chart.js label
        split at character 35 regardless of word boundaries.
    """

    if len(name) <= LABEL_WRAP_AT:
        return name
    return [name[:LABEL_WRAP_AT], name[LABEL_WRAP_AT:]]


def format_value_label(value: float) -> str:
    """Format a bar value the way it was entered (`150.0` -> `"150"`)."""

    if value.is_integer():
        return str(int(value))
    return repr(value)


def _chart_options(*, max_value: float) -> dict[str, Any]:
    """Return Chart.js options for a horizontal bar chart."""

    return {
        "indexAxis": "y",
        "responsive": True,
        "maintainAspectRatio": False,
        "layout": {"padding": {"right": 40}},
        "scales": {
            "x": {
                "type": "linear",
                "beginAtZero": True,
                "suggestedMax": max(max_value, 0),
                "grid": {"borderDash": [3, 3]},
            },
            "y": {
                "type": "category",
                "reverse": False,
                "grid": {"display": False},
                "ticks": {"autoSkip": False, "color": "#666", "font": {"size": 12}},
            },
        },
        "plugins": {
            "legend": {"display": True},
            "datalabels": {"anchor": "end", "align": "right", "clamp": True},
        },
    }
