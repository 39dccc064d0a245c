"""
Category Averages Page

Descriptive baseline: mean actual score per category across every person,
independent of roles and expectations.
"""
import streamlit as st
from pathlib import Path
import sys

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from skillgap.metrics.gaps import CATEGORY_AVERAGE_COLUMNS, search_categories
from skillgap.ui.formatting import format_gap_df
from skillgap.ui.layout import get_report, section_header
from skillgap.ui.state import get_state, init_state, set_state


st.set_page_config(page_title="Category Averages", page_icon="📋", layout="wide")

init_state()


def main():
    st.title("Category Averages")
    st.caption("Mean actual score per category across all people")

    report = get_report()
    if report is None:
        return

    search = st.text_input("Search categories", value=get_state("category_search"))
    set_state("category_search", search)

    rows = search_categories(report.category_averages, search)
    df = pd.DataFrame(
        [{"category": row.category, "average": row.average} for row in rows],
        columns=CATEGORY_AVERAGE_COLUMNS,
    )

    section_header("Averages", f"{len(df)} of {len(report.category_averages)} categories")
    if df.empty:
        st.info("No categories match this search.")
        return

    st.dataframe(format_gap_df(df), use_container_width=True, hide_index=True)

    st.markdown("---")
    with st.expander("Method"):
        st.markdown("""
        | Metric | Formula | Notes |
        |--------|---------|-------|
        | **Average** | `Σ score / count` per category | Every person column in the skills source, roles ignored |
        | **Gap** | `actual − expected` | Positive = surplus, negative = shortfall |
        | **Team expected** | criteria[category][role] | Read from the criteria, not averaged per person |
        """)


main()
