from __future__ import annotations

from typing import List

TARGET_CAMPUS = "Bambang"

EXPECTED_HEADERS: List[str] = [
    "Campus",
    "College",
    "Program",
    "Major",
    "Level",
    "COPC Status",
    "COPC No.",
    "Contents Notation",
    "Accreditation",
    "CMO / PSG",
    "BOR Resolution",
    "Dean",
]
DERIVED_COLUMN = "AccreditationNormalized"
PROGRAM_COLUMNS: List[str] = EXPECTED_HEADERS + [DERIVED_COLUMN]

# Free-text search haystack, in join order.
SEARCH_COLUMNS: List[str] = [
    "Program",
    "Major",
    "COPC No.",
    "CMO / PSG",
    "BOR Resolution",
    "Contents Notation",
    "College",
    "Level",
    "COPC Status",
    "Accreditation",
    "Dean",
]
