from __future__ import annotations

import csv

import pandas as pd

from programs.columns import PROGRAM_COLUMNS

EXPORT_FILENAME = "bambang_filtered.csv"


def export_frame(df: pd.DataFrame) -> pd.DataFrame:
    """The twelve record columns plus the derived accreditation, in fixed order."""
    out = df.reindex(columns=PROGRAM_COLUMNS)
    return out.fillna("").astype(str)


def export_csv(df: pd.DataFrame) -> str:
    """Comma-delimited text; fields with a comma, quote or newline are quoted."""
    return export_frame(df).to_csv(index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")


def export_csv_bytes(df: pd.DataFrame) -> bytes:
    return export_csv(df).encode("utf-8")
