"""
Layout components: report loading, headers, gap panels.
"""
import streamlit as st
import pandas as pd
from typing import Optional

from skillgap.config import config
from skillgap.data.loader import LoadedReport, get_data_status, load_report_from_dir
from skillgap.data.schema import SourceLoadFailure
from skillgap.ui.formatting import (
    attainment_pct,
    fmt_ratio,
    fmt_score,
    format_gap_df,
    gap_color,
    style_gap_df,
)


# =============================================================================
# REPORT LOADING
# =============================================================================

@st.cache_resource(ttl=config.cache_ttl_seconds, show_spinner=False)
def load_cached_report(data_dir: str) -> LoadedReport:
    """One LoadedReport per data directory, shared across reruns."""
    return load_report_from_dir(data_dir)


def get_report() -> Optional[LoadedReport]:
    """
    Load the report or render the failure state.

    Returns None when the load failed; the caller should stop rendering.
    """
    with st.spinner("Loading data..."):
        try:
            return load_cached_report(str(config.data_dir))
        except SourceLoadFailure as e:
            render_load_failure(e)
            return None


def render_load_failure(error: SourceLoadFailure):
    """Show why the report is unavailable and what files are expected."""
    st.error(f"Could not load the skill report: {error}")

    status = get_data_status()
    lines = []
    for key, info in status.items():
        icon = "✅" if info["exists"] else "❌"
        lines.append(f"- {icon} **{key}**: `{info['path']}`")

    st.markdown(
        "### Setup Required\n\n"
        f"Place the source files in `{config.data_dir}` (or set `DATA_DIR`):\n\n"
        + "\n".join(lines)
    )
    st.info("Run `python scripts/validate_inputs.py` to check the files, then refresh this page.")


# =============================================================================
# HEADERS
# =============================================================================

def section_header(title: str, subtitle: Optional[str] = None):
    """Render section header with optional subtitle."""
    st.markdown(f"### {title}")
    if subtitle:
        st.caption(subtitle)


# =============================================================================
# GAP PANELS
# =============================================================================

def render_gap_table(df: pd.DataFrame):
    """Render a category or skill gap table with coloured gaps."""
    if df.empty:
        st.info("No data for this selection.")
        return
    st.dataframe(
        style_gap_df(format_gap_df(df)),
        use_container_width=True,
        hide_index=True,
    )


def render_category_card(category_row: pd.Series, skills: pd.DataFrame):
    """
    Card for one category: averages, then each skill's actual / expected.
    """
    actual = category_row["actual_average"]
    expected = category_row["expected_average"]
    color = gap_color(category_row["gap"])

    with st.container(border=True):
        st.markdown(f"#### {category_row['category']}")
        st.caption(f"Expected average: {fmt_score(expected)}")
        st.markdown(
            f'<span style="color:{color}; font-weight:600">Actual average: {fmt_score(actual)}</span>',
            unsafe_allow_html=True,
        )
        for row in skills.itertuples(index=False):
            st.progress(
                int(attainment_pct(row.actual_score, row.expected_score)),
                text=f"{row.skill_name}: {fmt_ratio(row.actual_score, row.expected_score)}",
            )
