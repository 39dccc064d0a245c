"""
Team Skill-Gap Report

Main entry point for Streamlit app.
"""
import streamlit as st
from pathlib import Path

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Team Skill-Gap Report",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Add repo root to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

from skillgap.config import config
from skillgap.logging_config import configure_logging
from skillgap.metrics.gaps import (
    available_roles,
    per_category_for_person_frame,
    per_category_for_team_frame,
    per_skill_gap_frame,
    shortfall_share,
    team_members,
)
from skillgap.ui.charts import gap_bar, gap_radar
from skillgap.ui.formatting import fmt_count, fmt_percent_share
from skillgap.ui.layout import get_report, render_category_card, render_gap_table, section_header
from skillgap.ui.state import ensure_selection, get_state, init_state, set_state


configure_logging(config.log_level)


def render_individual_tab(report):
    """Per-person view: radar, category cards, skill gaps."""
    names = list(report.member_names)
    if not names:
        st.info("No members found in the roles source.")
        return

    selected = ensure_selection("selected_member", names)
    labels = {profile.name: f"{profile.name} - {profile.role}" for profile in report.profiles}

    col1, col2 = st.columns([2, 1])
    with col1:
        member_name = st.selectbox(
            "Member",
            names,
            index=names.index(selected),
            format_func=lambda name: labels.get(name, name),
        )
        set_state("selected_member", member_name)

    profile = report.member(member_name)

    roles = available_roles(report.criteria)
    own_role = (profile.role or "").strip()
    role_options = ["(own role)"] + [role for role in roles if role != own_role]
    with col2:
        compare = st.selectbox("Compare against", role_options)
    compare_role = None if compare == "(own role)" else compare
    set_state("compare_role", compare_role)

    categories = per_category_for_person_frame(profile, report.criteria, compare_role)
    expected_label = f"Expected ({compare_role or own_role or 'no role'})"

    m1, m2, m3 = st.columns(3)
    m1.metric("Categories", fmt_count(len(categories)))
    m2.metric("Skills", fmt_count(len(profile.skills)))
    m3.metric("Categories short", fmt_percent_share(shortfall_share(categories)))

    st.plotly_chart(
        gap_radar(categories, expected_label=expected_label),
        use_container_width=True,
    )

    section_header("Categories", "Sorted by gap, largest surplus first")
    skills = per_skill_gap_frame(profile)
    if compare_role is None:
        skills_by_category = {cat: grp for cat, grp in skills.groupby("category", sort=False)}
        cols = st.columns(3)
        for i, row in enumerate(categories.itertuples(index=False)):
            with cols[i % 3]:
                render_category_card(
                    categories.iloc[i],
                    skills_by_category.get(row.category, skills.iloc[0:0]),
                )
    else:
        render_gap_table(categories)

    with st.expander("Skill detail"):
        render_gap_table(skills)


def render_team_tab(report):
    """Per-role team view: radar, gap table, member list."""
    roles = available_roles(report.criteria)
    if not roles:
        st.info("No roles found in the scoring criteria.")
        return

    selected = ensure_selection("selected_team_role", roles)
    role = st.selectbox("Role", roles, index=roles.index(selected))
    set_state("selected_team_role", role)

    members = team_members(report.profiles, role)
    member_names = "、".join(profile.name for profile in members) or "none"
    st.caption(f"Current {role} members: {member_names}")

    team = per_category_for_team_frame(report.profiles, role, report.criteria)

    st.plotly_chart(
        gap_radar(team, actual_label="Team actual", expected_label="Team expected"),
        use_container_width=True,
    )

    col1, col2 = st.columns([3, 2])
    with col1:
        section_header("Category gaps", "Sorted by gap, largest surplus first")
        render_gap_table(team)
    with col2:
        if not team.empty:
            st.plotly_chart(gap_bar(team, title="Gap by category"), use_container_width=True)


def main():
    """Main app entry point."""

    # Initialize session state
    init_state()

    # Header
    st.title("Team Skill-Gap Report")
    st.caption("Skill → Category → Person / Team role")

    report = get_report()
    if report is None:
        return

    tab_individual, tab_team = st.tabs(["Individual", "Team"])

    with tab_individual:
        render_individual_tab(report)

    with tab_team:
        render_team_tab(report)

    with st.sidebar:
        st.markdown("### Data")
        st.metric("Members", fmt_count(len(report.profiles)))
        st.metric("Skills", fmt_count(len(report.skills)))
        st.metric("Criteria categories", fmt_count(len(report.criteria)))
        st.page_link("pages/1_Category_Averages.py", label="Category Averages", icon="📋")
        if get_state("compare_role"):
            st.caption(f"Individual view compares against: {get_state('compare_role')}")


if __name__ == "__main__":
    main()
