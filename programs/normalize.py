from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Union

import pandas as pd


# ---------------- Cell values ----------------
@dataclass(frozen=True)
class EmptyCell:
    pass


@dataclass(frozen=True)
class TextCell:
    value: str


@dataclass(frozen=True)
class NumberCell:
    value: Union[int, float]


@dataclass(frozen=True)
class BoolCell:
    value: bool


@dataclass(frozen=True)
class OtherCell:
    value: object


Cell = Union[EmptyCell, TextCell, NumberCell, BoolCell, OtherCell]


def to_cell(value: object) -> Cell:
    """Classify a raw workbook value (openpyxl/pandas scalar) into a Cell."""
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return EmptyCell()
    if isinstance(value, str):
        return TextCell(value)
    # bool is checked first: True/False are also numbers.
    if pd.api.types.is_bool(value):
        return BoolCell(bool(value))
    if pd.api.types.is_integer(value):
        return NumberCell(int(value))
    if pd.api.types.is_float(value):
        return NumberCell(float(value))
    return OtherCell(value)


def format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_other(value: object) -> str:
    # Date cells: midnight timestamps render as the bare date.
    if isinstance(value, datetime.datetime):
        if value.time() == datetime.time(0, 0) and value.tzinfo is None:
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value).strip()


def normalize_cell(cell: Cell) -> str:
    if isinstance(cell, EmptyCell):
        return ""
    if isinstance(cell, TextCell):
        return cell.value.strip()
    if isinstance(cell, NumberCell):
        return format_number(cell.value)
    if isinstance(cell, BoolCell):
        return "TRUE" if cell.value else "FALSE"
    return format_other(cell.value)


def normalize_value(value: object) -> str:
    return normalize_cell(to_cell(value))


# ---------------- Accreditation taxonomy ----------------
ACCREDITATION_UNKNOWN = "Unknown"

# Most specific roman numeral first: "LEVEL I" is a prefix of the others.
ACCREDITATION_KEYWORDS = (
    ("LEVEL IV", "Level IV"),
    ("LEVEL III", "Level III"),
    ("LEVEL II", "Level II"),
    ("LEVEL I", "Level I"),
    ("CANDIDATE", "Candidate"),
)


def normalize_accreditation(raw: object) -> str:
    """Map free-text accreditation into Level IV..I, Candidate or Unknown.

    Text that matches no keyword is returned trimmed, in its original casing.
    """
    text = "" if raw is None else str(raw).strip()
    if not text:
        return ACCREDITATION_UNKNOWN
    upper = text.upper()
    for keyword, label in ACCREDITATION_KEYWORDS:
        if keyword in upper:
            return label
    return text


def category_key(value: object) -> str:
    """Comparison key for categorical values: trimmed and case-folded."""
    return str(value).strip().casefold()
