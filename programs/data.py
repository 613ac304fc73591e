from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from programs.columns import DERIVED_COLUMN, EXPECTED_HEADERS, TARGET_CAMPUS
from programs.errors import EmptyWorkbook, MissingColumns, UnreadableFile
from programs.filters import ProgramFilters, apply_filters, filter_options, normalize_filters
from programs.normalize import normalize_accreditation, normalize_value


logger = logging.getLogger(__name__)


def empty_programs(with_derived: bool = True) -> pd.DataFrame:
    cols = EXPECTED_HEADERS + ([DERIVED_COLUMN] if with_derived else [])
    return pd.DataFrame({c: pd.Series(dtype=object) for c in cols})


def drop_duplicate_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.loc[:, ~df.columns.duplicated()]


# ---------------- Upload reading ----------------
def read_upload(source: object) -> bytes:
    """Read the full byte buffer of an upload (bytes, path, or file-like)."""
    try:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        if isinstance(source, (str, Path)):
            return Path(source).read_bytes()
        if hasattr(source, "getvalue"):
            return bytes(source.getvalue())
        if hasattr(source, "read"):
            if hasattr(source, "seek"):
                source.seek(0)
            return bytes(source.read())
    except OSError as exc:
        raise UnreadableFile("Failed to read the file.") from exc
    raise UnreadableFile(f"Unsupported upload source: {type(source).__name__}")


def open_workbook(data: bytes) -> pd.ExcelFile:
    """Return an :class:`~pandas.ExcelFile` over the uploaded bytes."""
    try:
        return pd.ExcelFile(io.BytesIO(data), engine="openpyxl")
    except Exception as exc:  # openpyxl/zipfile raise a range of types for bad input
        raise UnreadableFile("The file could not be opened as an Excel workbook.") from exc


def read_first_sheet(excel: pd.ExcelFile) -> pd.DataFrame:
    sheet_names = list(excel.sheet_names or [])
    if not sheet_names:
        raise EmptyWorkbook()
    df = excel.parse(sheet_names[0], header=0, dtype=object, keep_default_na=False, na_values=[])
    df.columns = [str(c).strip() for c in df.columns]
    df = drop_duplicate_columns(df)
    if df.empty:
        return df
    blank = df.apply(lambda col: col.map(normalize_value).eq("")).all(axis=1)
    return df[~blank].reset_index(drop=True)


def missing_headers(headers: Iterable[object]) -> List[str]:
    trimmed = {str(h).strip() for h in headers}
    return [h for h in EXPECTED_HEADERS if h not in trimmed]


def validate_headers(headers: Iterable[object]) -> None:
    missing = missing_headers(headers)
    if missing:
        raise MissingColumns(missing)


def normalize_records(df: pd.DataFrame) -> pd.DataFrame:
    """Canonical records: the twelve expected columns as trimmed strings."""
    if df.empty:
        return empty_programs(with_derived=False)
    out = pd.DataFrame(index=df.index)
    for col in EXPECTED_HEADERS:
        out[col] = df[col].map(normalize_value).astype(object)
    return out.reset_index(drop=True)


def with_accreditation(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out[DERIVED_COLUMN] = out["Accreditation"].map(normalize_accreditation).astype(object)
    return out


def is_target_campus(campus: pd.Series, target: str = TARGET_CAMPUS) -> pd.Series:
    return campus.astype(str).str.strip().str.lower() == target.strip().lower()


def restrict_to_campus(df: pd.DataFrame, target: str = TARGET_CAMPUS) -> Tuple[pd.DataFrame, int]:
    if df.empty:
        return df.copy(), 0
    mask = is_target_campus(df["Campus"], target)
    kept = df[mask].reset_index(drop=True)
    return kept, int(len(df) - len(kept))


def parse_programs(data: bytes) -> pd.DataFrame:
    """Parse the first sheet of a workbook into normalized program records."""
    with open_workbook(data) as excel:
        sheet = read_first_sheet(excel)
    if sheet.empty:
        return empty_programs(with_derived=False)
    validate_headers(sheet.columns)
    return normalize_records(sheet)


# ---------------- Public API ----------------
def load_programs(source: object, file_name: Optional[str] = None) -> Dict[str, object]:
    """Load an upload into a data context.

    Keys: ``raw`` (every normalized row), ``programs`` (target-campus rows with
    the derived accreditation column), ``removed_count`` and ``file_name``.
    Raises an :class:`~programs.errors.IngestError` subclass on failure.
    """
    if file_name is None:
        file_name = getattr(source, "name", None)
    raw = parse_programs(read_upload(source))
    campus, removed = restrict_to_campus(raw)
    programs = with_accreditation(campus) if not campus.empty else empty_programs()
    logger.info(
        "loaded %s: %d rows, %d %s rows, %d removed",
        file_name or "<upload>",
        len(raw),
        len(programs),
        TARGET_CAMPUS,
        removed,
    )
    return {
        "file_name": None if file_name is None else str(file_name),
        "raw": raw,
        "programs": programs,
        "removed_count": removed,
    }


def prepare_context(filters: dict | ProgramFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    programs: pd.DataFrame = data_ctx.get("programs", empty_programs())
    raw: pd.DataFrame = data_ctx.get("raw", empty_programs(with_derived=False))
    filt = filters if isinstance(filters, ProgramFilters) else normalize_filters(filters)

    return {
        "filters": filt,
        "raw": raw,
        "programs": programs,
        "filtered_programs": apply_filters(programs, filt),
        # Options come from the full campus set so a selection can always widen.
        "options": filter_options(programs),
        "removed_count": int(data_ctx.get("removed_count", 0) or 0),
    }
