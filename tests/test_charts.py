"""
Tests for programs/charts.py
"""
import json

from programs.charts import (
    crosstab_frame,
    distribution_bar_chart,
    distribution_labels_expr,
    heatmap_chart,
    stacked_bar_chart,
    to_vega_spec,
    wrap_axis_label,
)


class TestWrapAxisLabel:
    def test_short_label_unchanged(self):
        assert wrap_axis_label("Level IV") == "Level IV"

    def test_wraps_on_words(self):
        assert wrap_axis_label("PACUCOA accredited program") == "PACUCOA\naccredited\nprogram"

    def test_at_most_three_lines(self):
        assert wrap_axis_label("one two three four five six seven", max_line_len=5).count("\n") == 2

    def test_long_single_word_kept(self):
        assert wrap_axis_label("Supercalifragilistic") == "Supercalifragilistic"

    def test_blank(self):
        assert wrap_axis_label("   ") == ""


class TestCharts:
    rows = ["College A", "College B"]
    columns = ["Issued", "Under Application"]
    counts = [[2, 0], [1, 3]]

    def test_crosstab_frame_is_long_format(self):
        df = crosstab_frame(self.rows, self.columns, self.counts)
        assert list(df.columns) == ["row", "column", "count"]
        assert len(df) == 4
        assert df["count"].sum() == 6

    def test_stacked_bar_spec(self):
        spec = to_vega_spec(stacked_bar_chart(self.rows, self.columns, self.counts, x_title="College", color_title="COPC Status"))
        assert spec["mark"]["type"] == "bar"
        assert spec["encoding"]["x"]["sort"] == self.rows
        assert spec["encoding"]["color"]["sort"] == self.columns

    def test_distribution_keyed_by_category(self):
        spec = to_vega_spec(distribution_bar_chart(["Level I", "PACUCOA accredited program"], [3, 1], x_title="Accreditation"))
        assert spec["encoding"]["x"]["field"] == "category"
        assert spec["encoding"]["x"]["sort"] == ["Level I", "PACUCOA accredited program"]

    def test_distribution_long_labels_with_shared_prefix_stay_distinct(self):
        categories = [
            "Accredited by the Philippine Association Alpha",
            "Accredited by the Philippine Association Beta",
        ]
        spec = to_vega_spec(distribution_bar_chart(categories, [3, 5], x_title="Accreditation"))
        assert spec["encoding"]["x"]["sort"] == categories
        (rows,) = spec["datasets"].values()
        assert [r["category"] for r in rows] == categories
        assert [r["count"] for r in rows] == [3, 5]

    def test_distribution_label_expr_wraps_lines(self):
        expr = distribution_labels_expr(["PACUCOA accredited program"])
        assert expr.endswith("[datum.label] || datum.label")
        mapping = json.loads(expr[: expr.index("[datum.label]")])
        assert mapping == {"PACUCOA accredited program": ["PACUCOA", "accredited", "program"]}

    def test_heatmap_scale_domain(self):
        spec = to_vega_spec(heatmap_chart(self.rows, self.columns, self.counts, row_title="College", column_title="Accreditation"))
        assert len(spec["layer"]) == 2
        assert spec["layer"][0]["encoding"]["color"]["scale"]["domain"] == [0, 3]

    def test_heatmap_empty_has_unit_domain(self):
        spec = to_vega_spec(heatmap_chart([], [], [], row_title="College", column_title="Accreditation"))
        assert spec["layer"][0]["encoding"]["color"]["scale"]["domain"] == [0, 1]
