"""
Pytest fixtures for the programs dashboard tests.

Provides in-memory workbooks built with openpyxl and small pre-normalized
program frames for the filter and aggregation tests.
"""

import io
from typing import Dict, List, Sequence

import openpyxl
from openpyxl.chart import BarChart
import pandas as pd
import pytest

from programs.columns import EXPECTED_HEADERS
from programs.data import with_accreditation


def build_xlsx(rows: Sequence[Sequence[object]], headers: Sequence[str] = EXPECTED_HEADERS) -> bytes:
    """Return the bytes of a one-sheet workbook: a header row then ``rows``."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Programs"
    ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def program_row(**fields: str) -> List[str]:
    """One worksheet row in EXPECTED_HEADERS order; keyword names use underscores."""
    values = {h: "" for h in EXPECTED_HEADERS}
    for key, value in fields.items():
        values[_column_for(key)] = value
    return [values[h] for h in EXPECTED_HEADERS]


def _column_for(key: str) -> str:
    aliases = {
        "copc_status": "COPC Status",
        "copc_no": "COPC No.",
        "contents_notation": "Contents Notation",
        "cmo_psg": "CMO / PSG",
        "bor_resolution": "BOR Resolution",
    }
    return aliases.get(key, key.capitalize())


def make_programs(records: List[Dict[str, str]]) -> pd.DataFrame:
    """Normalized campus rows (with the derived accreditation column)."""
    rows = [dict(zip(EXPECTED_HEADERS, program_row(**r))) for r in records]
    df = pd.DataFrame(rows, columns=EXPECTED_HEADERS, dtype=object)
    return with_accreditation(df)


@pytest.fixture
def sample_programs() -> pd.DataFrame:
    return make_programs(
        [
            {
                "campus": "Bambang",
                "college": "College of Engineering",
                "program": "BS Civil Engineering",
                "major": "",
                "level": "Undergraduate",
                "copc_status": "Issued",
                "copc_no": "COPC-001",
                "accreditation": "AACCUP Level III",
                "dean": "Dr. Reyes",
            },
            {
                "campus": "Bambang",
                "college": "College of Education",
                "program": "BSEd",
                "major": "Mathematics",
                "level": "Undergraduate",
                "copc_status": "Under Application",
                "cmo_psg": "CMO 75 s. 2017",
                "accreditation": "Candidate status",
                "dean": "Dr. Santos",
            },
            {
                "campus": "Bambang",
                "college": "College of Education",
                "program": "MAEd",
                "major": "Educational Management",
                "level": "Graduate",
                "copc_status": "Voluntary Phase-Out",
                "bor_resolution": "BOR Res. 12, s. 2020",
                "accreditation": "",
                "dean": "Dr. Santos",
            },
            {
                "campus": "Bambang",
                "college": "College of Engineering",
                "program": "BS Electrical Engineering",
                "major": "",
                "level": "Undergraduate",
                "copc_status": "issued",
                "accreditation": "Level IV Re-accredited",
                "dean": "Dr. Reyes",
            },
            {
                "campus": "Bambang",
                "college": "College of Arts",
                "program": "AB English",
                "major": "Language",
                "level": "Undergraduate",
                "copc_status": "Phased",
                "contents_notation": "with thesis",
                "accreditation": "PACUCOA accredited",
                "dean": "Dr. Cruz",
            },
        ]
    )


@pytest.fixture
def sample_xlsx() -> bytes:
    return build_xlsx(
        [
            program_row(campus="BAMBANG", college="College of Engineering", program="BS CE", copc_status="Issued", dean="Dr. Reyes"),
            program_row(campus="bambang ", college="College of Education", program="BSEd", copc_status="Issued", dean="Dr. Santos"),
            program_row(campus="Bambang", college="College of Arts", program="AB English", accreditation="Level II", dean="Dr. Cruz"),
            program_row(campus="Solano", college="College of Arts", program="AB History", dean="Dr. Lim"),
        ]
    )


def build_chartsheet_only_xlsx() -> bytes:
    """A workbook whose only sheet is a chartsheet, so it has no worksheets."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    cs = wb.create_chartsheet("Chart")
    cs.add_chart(BarChart())
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
