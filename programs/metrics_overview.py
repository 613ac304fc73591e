from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

import pandas as pd

from programs.charts import distribution_bar_chart, heatmap_chart, stacked_bar_chart, to_vega_spec
from programs.columns import DERIVED_COLUMN
from programs.filters import ProgramFilters, uniq_sorted
from programs.normalize import category_key


@dataclass(frozen=True)
class KpiSummary:
    total: int = 0
    issued: int = 0
    under_application: int = 0
    phase_out: int = 0
    colleges: int = 0


@dataclass(frozen=True)
class CrossTab:
    categories: List[str] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class CrossTab2D:
    rows: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    counts: List[List[int]] = field(default_factory=list)


def _keys(series: pd.Series) -> pd.Series:
    return series.astype(str).map(category_key)


def compute_kpis(df: pd.DataFrame) -> KpiSummary:
    if df.empty:
        return KpiSummary()
    status = df["COPC Status"].astype(str).str.lower()
    return KpiSummary(
        total=int(len(df)),
        issued=int((status == "issued").sum()),
        under_application=int((status == "under application").sum()),
        # Substring on purpose: labels vary ("Voluntary phase-out", ...).
        phase_out=int(status.str.contains("phase-out", regex=False).sum()),
        colleges=int(df.loc[df["College"] != "", "College"].nunique()),
    )


def crosstab_1d(df: pd.DataFrame, column: str) -> CrossTab:
    if df.empty or column not in df.columns:
        return CrossTab()
    categories = uniq_sorted(df[column])
    counts = _keys(df[column]).value_counts()
    return CrossTab(categories=categories, counts=[int(counts.get(category_key(c), 0)) for c in categories])


def crosstab_2d(df: pd.DataFrame, row_column: str, col_column: str) -> CrossTab2D:
    """Dense count matrix: counts[i][j] = rows with rows[i] and columns[j]."""
    if df.empty or row_column not in df.columns or col_column not in df.columns:
        return CrossTab2D()
    rows = uniq_sorted(df[row_column])
    columns = uniq_sorted(df[col_column])
    if not rows or not columns:
        return CrossTab2D(rows=rows, columns=columns, counts=[[0] * len(columns) for _ in rows])
    table = pd.crosstab(_keys(df[row_column]).rename("row"), _keys(df[col_column]).rename("column"))
    table = table.reindex(
        index=[category_key(r) for r in rows],
        columns=[category_key(c) for c in columns],
        fill_value=0,
    )
    counts = [[int(v) for v in line] for line in table.to_numpy().tolist()]
    return CrossTab2D(rows=rows, columns=columns, counts=counts)


def compute_breakdowns(df: pd.DataFrame) -> Dict[str, Any]:
    return {
        "status_by_college": crosstab_2d(df, "College", "COPC Status"),
        "level_by_college": crosstab_2d(df, "College", "Level"),
        "accreditation": crosstab_1d(df, DERIVED_COLUMN),
        "accreditation_by_college": crosstab_2d(df, "College", DERIVED_COLUMN),
    }


def compute_charts(breakdowns: Dict[str, Any]) -> Dict[str, Any]:
    status: CrossTab2D = breakdowns["status_by_college"]
    level: CrossTab2D = breakdowns["level_by_college"]
    accr: CrossTab = breakdowns["accreditation"]
    accr_college: CrossTab2D = breakdowns["accreditation_by_college"]
    return {
        "status_by_college": stacked_bar_chart(status.rows, status.columns, status.counts, x_title="College", color_title="COPC Status"),
        "level_by_college": stacked_bar_chart(level.rows, level.columns, level.counts, x_title="College", color_title="Level"),
        "accreditation": distribution_bar_chart(accr.categories, accr.counts, x_title="Accreditation"),
        "accreditation_by_college": heatmap_chart(
            accr_college.rows,
            accr_college.columns,
            accr_college.counts,
            row_title="College",
            column_title="Accreditation",
        ),
    }


def compute_overview(filters: ProgramFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    raw: pd.DataFrame = ctx.get("raw", pd.DataFrame())
    programs: pd.DataFrame = ctx.get("programs", pd.DataFrame())
    filtered: pd.DataFrame = ctx.get("filtered_programs", pd.DataFrame())

    breakdowns = compute_breakdowns(filtered)
    charts = {name: to_vega_spec(chart) for name, chart in compute_charts(breakdowns).items()}

    return {
        "filters": asdict(filters),
        "row_counts": {
            "loaded": int(len(raw)),
            "campus": int(len(programs)),
            "removed": int(ctx.get("removed_count", 0) or 0),
            "showing": int(len(filtered)),
        },
        "options": ctx.get("options", {}),
        "kpis": asdict(compute_kpis(filtered)),
        "breakdowns": {name: asdict(value) for name, value in breakdowns.items()},
        "charts": charts,
        "rows": filtered.to_dict(orient="records"),
    }
