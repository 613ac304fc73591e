"""
Tests for programs/export.py
"""
import csv
import io

from conftest import make_programs
from programs.columns import PROGRAM_COLUMNS
from programs.export import EXPORT_FILENAME, export_csv, export_csv_bytes

HEADER = (
    "Campus,College,Program,Major,Level,COPC Status,COPC No.,Contents Notation,"
    "Accreditation,CMO / PSG,BOR Resolution,Dean,AccreditationNormalized"
)


def _parse(text: str):
    return list(csv.reader(io.StringIO(text)))


class TestExportCsv:
    def test_filename(self):
        assert EXPORT_FILENAME == "bambang_filtered.csv"

    def test_header_line(self, sample_programs):
        assert export_csv(sample_programs).splitlines()[0] == HEADER

    def test_empty_set_is_header_only(self):
        assert export_csv(make_programs([])).strip() == HEADER

    def test_one_line_per_record_in_order(self, sample_programs):
        rows = _parse(export_csv(sample_programs))
        assert len(rows) == 1 + len(sample_programs)
        assert [r[2] for r in rows[1:]] == sample_programs["Program"].tolist()
        assert rows[1][-1] == "Level III"

    def test_plain_fields_unquoted(self):
        text = export_csv(make_programs([{"campus": "Bambang", "program": "BSIT"}]))
        assert text.splitlines()[1].startswith("Bambang,,BSIT,")

    def test_comma_and_quote_round_trip(self):
        program = 'Bachelor, Arts "Honors"'
        text = export_csv(make_programs([{"program": program, "dean": "Line one\nLine two"}]))
        assert '"Bachelor, Arts ""Honors"""' in text
        rows = _parse(text)
        assert rows[1][PROGRAM_COLUMNS.index("Program")] == program
        assert rows[1][PROGRAM_COLUMNS.index("Dean")] == "Line one\nLine two"

    def test_extra_columns_dropped(self, sample_programs):
        df = sample_programs.assign(Remarks="x")
        assert _parse(export_csv(df))[0] == PROGRAM_COLUMNS

    def test_bytes_are_utf8(self):
        data = export_csv_bytes(make_programs([{"dean": "Dr. Peña"}]))
        assert "Dr. Peña" in data.decode("utf-8")
