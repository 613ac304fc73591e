from __future__ import annotations

import unicodedata
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional

import pandas as pd

from programs.columns import DERIVED_COLUMN, SEARCH_COLUMNS
from programs.normalize import category_key


@dataclass(frozen=True)
class ProgramFilters:
    colleges: List[str] = field(default_factory=list)
    levels: List[str] = field(default_factory=list)
    copc_statuses: List[str] = field(default_factory=list)
    accreditations: List[str] = field(default_factory=list)
    deans: List[str] = field(default_factory=list)
    search: str = ""
    hide_blank_major: bool = False


DEFAULT_FILTERS = ProgramFilters()

# Filter field -> record column.
MULTI_SELECT_COLUMNS: Dict[str, str] = {
    "colleges": "College",
    "levels": "Level",
    "copc_statuses": "COPC Status",
    "accreditations": DERIVED_COLUMN,
    "deans": "Dean",
}


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s:
            out.append(s)
    return out


def normalize_filters(raw: Optional[dict]) -> ProgramFilters:
    raw = raw or {}
    return ProgramFilters(
        colleges=_as_str_list(raw.get("colleges")),
        levels=_as_str_list(raw.get("levels")),
        copc_statuses=_as_str_list(raw.get("copc_statuses")),
        accreditations=_as_str_list(raw.get("accreditations")),
        deans=_as_str_list(raw.get("deans")),
        search=str(raw.get("search") or "").strip(),
        hide_blank_major=bool(raw.get("hide_blank_major", False)),
    )


def is_default(filters: ProgramFilters) -> bool:
    return normalize_filters(asdict(filters)) == DEFAULT_FILTERS


# ---------------- Option lists ----------------
def _sort_key(value: str):
    # Base-letter comparison: case and accents only break ties.
    base = "".join(c for c in unicodedata.normalize("NFKD", value) if not unicodedata.combining(c))
    return (base.casefold(), value.casefold(), value)


def uniq_sorted(values: Iterable[object]) -> List[str]:
    """Trim, drop empties, dedupe case-insensitively (first spelling wins) and sort."""
    seen: Dict[str, str] = {}
    for v in values:
        if v is None or (pd.api.types.is_scalar(v) and pd.isna(v)):
            continue
        s = str(v).strip()
        if s and category_key(s) not in seen:
            seen[category_key(s)] = s
    return sorted(seen.values(), key=_sort_key)


def filter_options(df: pd.DataFrame) -> Dict[str, List[str]]:
    return {
        name: (uniq_sorted(df[col]) if col in df.columns else [])
        for name, col in MULTI_SELECT_COLUMNS.items()
    }


# ---------------- Filtering ----------------
def search_haystack(df: pd.DataFrame) -> pd.Series:
    cols = [c for c in SEARCH_COLUMNS if c in df.columns]
    if df.empty or not cols:
        return pd.Series("", index=df.index, dtype=object)
    parts = df[cols].astype(str)
    return parts.apply(lambda row: " | ".join(v for v in row if v), axis=1).str.lower()


def search_mask(df: pd.DataFrame, query: str) -> pd.Series:
    q = (query or "").strip().lower()
    if not q:
        return pd.Series(True, index=df.index)
    return search_haystack(df).str.contains(q, regex=False)


def multi_select_mask(series: pd.Series, selected: List[str]) -> pd.Series:
    if not selected:
        return pd.Series(True, index=series.index)
    keys = {category_key(s) for s in selected}
    return series.astype(str).map(category_key).isin(keys)


def apply_filters(df: pd.DataFrame, filters: ProgramFilters) -> pd.DataFrame:
    """Rows that satisfy every active constraint, in input order."""
    if df.empty:
        return df.copy()
    mask = pd.Series(True, index=df.index)
    for name, col in MULTI_SELECT_COLUMNS.items():
        mask &= multi_select_mask(df[col], getattr(filters, name))
    if filters.hide_blank_major:
        mask &= df["Major"].astype(str).str.strip() != ""
    mask &= search_mask(df, filters.search)
    return df[mask]
