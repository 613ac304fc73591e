from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def wrap_axis_label(label: str, max_line_len: int = 12, max_lines: int = 3) -> str:
    """Greedy word wrap for category axis labels, joined with newlines."""
    s = (label or "").strip()
    if not s or len(s) <= max_line_len:
        return s
    lines: List[str] = []
    line = ""
    for word in s.split():
        candidate = f"{line} {word}" if line else word
        if len(candidate) > max_line_len and line:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return "\n".join(lines[:max_lines])


def crosstab_frame(rows: Sequence[str], columns: Sequence[str], counts: Sequence[Sequence[int]]) -> pd.DataFrame:
    records = [
        {"row": r, "column": c, "count": int(counts[i][j])}
        for i, r in enumerate(rows)
        for j, c in enumerate(columns)
    ]
    return pd.DataFrame(records, columns=["row", "column", "count"])


def stacked_bar_chart(
    rows: Sequence[str],
    columns: Sequence[str],
    counts: Sequence[Sequence[int]],
    *,
    x_title: str,
    color_title: str,
    height: int = 320,
) -> alt.Chart:
    data = crosstab_frame(rows, columns, counts)
    hover = alt.selection_point(fields=["column"], on="mouseover", empty=True)
    return (
        alt.Chart(data)
        .mark_bar()
        .encode(
            x=alt.X("row:N", title=x_title, sort=list(rows), axis=alt.Axis(labelAngle=-20)),
            y=alt.Y("count:Q", title="Programs", stack="zero", axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False)),
            color=alt.Color("column:N", title=color_title, sort=list(columns)),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.35)),
            tooltip=[
                alt.Tooltip("row:N", title=x_title),
                alt.Tooltip("column:N", title=color_title),
                alt.Tooltip("count:Q", title="Programs"),
            ],
        )
        .add_params(hover)
        .properties(height=height)
    )


def distribution_labels_expr(categories: Sequence[str]) -> str:
    """Vega expression mapping each category to its wrapped axis lines."""
    lines = {c: wrap_axis_label(c).split("\n") for c in categories}
    return f"{json.dumps(lines)}[datum.label] || datum.label"


def distribution_bar_chart(categories: Sequence[str], counts: Sequence[int], *, x_title: str, height: int = 300) -> alt.Chart:
    data = pd.DataFrame(
        {"category": list(categories), "count": [int(c) for c in counts]},
        columns=["category", "count"],
    )
    return (
        alt.Chart(data)
        .mark_bar(color="#7c5cff", opacity=0.8)
        .encode(
            x=alt.X(
                "category:N",
                title=x_title,
                sort=list(categories),
                axis=alt.Axis(labelAngle=-25, labelExpr=distribution_labels_expr(categories), labelPadding=14),
            ),
            y=alt.Y("count:Q", title="Programs", axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=[alt.Tooltip("category:N", title=x_title), alt.Tooltip("count:Q", title="Programs")],
        )
        .properties(height=height)
    )


def heatmap_chart(
    rows: Sequence[str],
    columns: Sequence[str],
    counts: Sequence[Sequence[int]],
    *,
    row_title: str,
    column_title: str,
    height: int = 360,
) -> alt.LayerChart:
    data = crosstab_frame(rows, columns, counts)
    max_count = max([1] + [int(v) for v in data["count"]])
    base = alt.Chart(data).encode(
        x=alt.X("column:N", title=column_title, sort=list(columns), axis=alt.Axis(labelAngle=-25)),
        y=alt.Y("row:N", title=row_title, sort=list(rows)),
    )
    cells = base.mark_rect().encode(
        color=alt.Color("count:Q", title="Count", scale=alt.Scale(domain=[0, max_count], range=["#f3f4f6", "#7c5cff"])),
        tooltip=[
            alt.Tooltip("row:N", title=row_title),
            alt.Tooltip("column:N", title=column_title),
            alt.Tooltip("count:Q", title="Count"),
        ],
    )
    labels = base.mark_text(baseline="middle").encode(text="count:Q")
    return (cells + labels).properties(height=height)
