"""
Tests for display formatting helpers.
"""
import pandas as pd
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from skillgap.ui.formatting import (
    GAP_COLORS,
    attainment_pct,
    fmt_count,
    fmt_gap,
    fmt_percent_share,
    fmt_ratio,
    fmt_score,
    format_gap_df,
    gap_color,
)


class TestFormatters:
    def test_fmt_score(self):
        assert fmt_score(2.5) == "2.50"
        assert fmt_score(None) == "—"
        assert fmt_score(np.nan) == "—"

    def test_fmt_gap_signed(self):
        assert fmt_gap(1.5) == "+1.50"
        assert fmt_gap(-0.25) == "-0.25"
        assert fmt_gap(-0.001) == "0.00"

    def test_fmt_count(self):
        assert fmt_count(1234) == "1,234"

    def test_fmt_percent_share(self):
        assert fmt_percent_share(0.25) == "25%"
        assert fmt_percent_share(np.nan) == "—"

    def test_fmt_ratio(self):
        assert fmt_ratio(2.0, 3.0) == "2 / 3"


class TestGapColors:
    def test_colors(self):
        assert gap_color(0) == GAP_COLORS["surplus"]
        assert gap_color(-0.5) == GAP_COLORS["shortfall"]
        assert gap_color(None) == GAP_COLORS["neutral"]

    def test_attainment_pct(self):
        assert attainment_pct(1.5, 3) == 50.0
        assert attainment_pct(4, 3) == 100.0
        assert attainment_pct(2, 0) == 100.0
        assert attainment_pct(0, 0) == 0.0


class TestFormatGapDf:
    def test_formats_and_labels(self):
        df = pd.DataFrame({
            "category": ["Data"],
            "actual_average": [2.5],
            "expected_average": [2.0],
            "gap": [0.5],
            "member_count": [2],
            "is_shortfall": [False],
        })

        result = format_gap_df(df)

        assert list(result.columns) == ["Category", "Actual avg", "Expected avg", "Gap", "Members"]
        assert result.iloc[0].tolist() == ["Data", "2.50", "2.00", "+0.50", "2"]
