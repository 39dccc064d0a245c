"""
Consistent number and display formatting.
"""
import pandas as pd
from typing import Union, Any

from skillgap.config import FORMAT_COUNT, FORMAT_GAP, FORMAT_SCORE

try:
    from pandas.io.formats.style import Styler
except Exception:
    Styler = Any  # type: ignore[misc]


GAP_COLORS = {
    "surplus": "#28a745",
    "shortfall": "#dc3545",
    "neutral": "#6c757d",
}


# =============================================================================
# NUMBER FORMATTERS
# =============================================================================

def fmt_score(value: Union[float, int, None]) -> str:
    """Format a score or average: 2.50"""
    if value is None or pd.isna(value):
        return "—"
    return FORMAT_SCORE.format(value)


def fmt_gap(value: Union[float, int, None]) -> str:
    """Format a gap with sign: +0.50 / -1.25 / 0.00"""
    if value is None or pd.isna(value):
        return "—"
    if round(value, 2) == 0:
        return FORMAT_SCORE.format(0)
    return FORMAT_GAP.format(value)


def fmt_count(value: Union[float, int, None]) -> str:
    """Format count: 1,234"""
    if value is None or pd.isna(value):
        return "—"
    return FORMAT_COUNT.format(int(value))


def fmt_percent_share(value: Union[float, int, None], decimals: int = 0) -> str:
    """Format a 0-1 share as a percentage: 0.25 -> 25%"""
    if value is None or pd.isna(value):
        return "—"
    return f"{value * 100:,.{decimals}f}%"


def fmt_ratio(actual: Union[float, int, None], expected: Union[float, int, None]) -> str:
    """Format actual against expected: 2 / 3"""
    if actual is None or expected is None or pd.isna(actual) or pd.isna(expected):
        return "—"
    return f"{actual:g} / {expected:g}"


def gap_color(value: Union[float, int, None]) -> str:
    """Green for meeting or exceeding expectations, red for a shortfall."""
    if value is None or pd.isna(value):
        return GAP_COLORS["neutral"]
    return GAP_COLORS["surplus"] if value >= 0 else GAP_COLORS["shortfall"]


def attainment_pct(actual: float, expected: float) -> float:
    """Actual as a percentage of expected, capped to 0-100 for progress bars."""
    if expected is None or pd.isna(expected) or expected <= 0:
        return 100.0 if actual and actual > 0 else 0.0
    return float(min(max(actual / expected * 100, 0.0), 100.0))


# =============================================================================
# DATAFRAME FORMATTERS
# =============================================================================

COLUMN_LABELS = {
    "category": "Category",
    "skill_name": "Skill",
    "actual_average": "Actual avg",
    "expected_average": "Expected avg",
    "actual_score": "Actual",
    "expected_score": "Expected",
    "average": "Average",
    "gap": "Gap",
    "member_count": "Members",
}


def format_gap_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Format a gap dataframe for display.

    Applies appropriate formatting to known column types and drops helper
    columns.
    """
    df = df.drop(columns=["is_shortfall"], errors="ignore").copy()

    score_cols = ["actual_average", "expected_average", "actual_score", "expected_score", "average"]

    for col in df.columns:
        if col in score_cols:
            df[col] = df[col].apply(fmt_score)
        elif col == "gap":
            df[col] = df[col].apply(fmt_gap)
        elif col == "member_count":
            df[col] = df[col].apply(fmt_count)

    return df.rename(columns=COLUMN_LABELS)


def style_gap_df(df: pd.DataFrame) -> "Styler":
    """
    Colour the Gap column of a formatted gap dataframe.
    """
    def color_gap(val):
        try:
            v = float(str(val).replace("+", ""))
        except ValueError:
            return ""
        return f"color: {gap_color(v)}; font-weight: bold"

    styled = df.style
    if "Gap" in df.columns:
        styled = styled.map(color_gap, subset=["Gap"])
    return styled
