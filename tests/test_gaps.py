"""
Tests for gap aggregation: per-skill, per-person, per-team and global views.
"""
import pytest
import pandas as pd
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from skillgap.data.models import (
    CategoryAverage,
    CategoryGap,
    MemberSkillProfile,
    ExpandedSkill,
    RoleAssignment,
    ScoringCriteria,
    SkillRecord,
)
from skillgap.metrics.join import join
from skillgap.metrics.gaps import (
    CATEGORY_GAP_COLUMNS,
    available_roles,
    global_category_average,
    global_category_average_frame,
    per_category_for_person,
    per_category_for_person_frame,
    per_category_for_team,
    per_category_for_team_frame,
    per_skill_gap,
    per_skill_gap_frame,
    search_categories,
    shortfall_share,
    sort_by_gap,
    team_members,
)


def make_team():
    skills = [
        SkillRecord("Data", "SQL", {"Alice": 3, "Bob": 1, "Cara": 2}),
        SkillRecord("Data", "Python", {"Alice": 2, "Bob": 2, "Cara": 3}),
        SkillRecord("Cloud", "AWS", {"Alice": 1, "Bob": 3, "Cara": 0}),
        SkillRecord("Cloud", "GCP", {"Alice": 0, "Bob": 1, "Cara": 1}),
    ]
    roles = [
        RoleAssignment("Alice", "DE"),
        RoleAssignment("Bob", "BA"),
        RoleAssignment("Cara", "DE"),
    ]
    criteria = [
        ScoringCriteria("Data", {"DE": 2, "BA": 1}),
        ScoringCriteria("Cloud", {"DE": 1, "BA": 2}),
    ]
    return skills, roles, criteria


class TestPerCategoryForPerson:
    """Tests for one person's category averages."""

    def test_single_skill_scenario(self):
        """A/X: Alice 3 vs Eng 2 -> gap 1."""
        skills = [SkillRecord("A", "X", {"Alice": 3})]
        roles = [RoleAssignment("Alice", "Eng")]
        criteria = [ScoringCriteria("A", {"Eng": 2})]
        alice = join(skills, roles, criteria)[0]

        result = per_category_for_person(alice)

        assert result == [CategoryGap("A", 3.0, 2.0, 1.0, 1)]

    def test_averages_and_sort(self):
        skills, roles, criteria = make_team()
        alice = join(skills, roles, criteria)[0]

        df = per_category_for_person_frame(alice)

        assert list(df.columns) == CATEGORY_GAP_COLUMNS
        # Data: actual (3+2)/2 = 2.5 vs 2 -> +0.5; Cloud: (1+0)/2 = 0.5 vs 1 -> -0.5
        assert list(df["category"]) == ["Data", "Cloud"]
        assert df["actual_average"].tolist() == [2.5, 0.5]
        assert df["gap"].tolist() == [0.5, -0.5]
        assert df["is_shortfall"].tolist() == [False, True]

    def test_average_is_sum_over_count(self):
        skills = [
            SkillRecord("A", "X", {"P": 1}),
            SkillRecord("A", "Y", {"P": 2}),
            SkillRecord("A", "Z", {"P": 2}),
        ]
        profile = join(skills, [RoleAssignment("P", "R")], [])[0]

        df = per_category_for_person_frame(profile)

        assert abs(df["actual_average"].iloc[0] - 5 / 3) < 0.01
        assert df["actual_average"].iloc[0] == 1.67

    def test_unrounded(self):
        skills = [SkillRecord("A", "X", {"P": 1}), SkillRecord("A", "Y", {"P": 1}),
                  SkillRecord("A", "Z", {"P": 0})]
        profile = join(skills, [RoleAssignment("P", "R")], [])[0]

        df = per_category_for_person_frame(profile, rounded=False)

        assert df["actual_average"].iloc[0] == pytest.approx(2 / 3)

    def test_role_override(self):
        """Compare a DE against BA expectations."""
        skills, roles, criteria = make_team()
        alice = join(skills, roles, criteria)[0]

        df = per_category_for_person_frame(alice, criteria=criteria, role="BA")

        expected = dict(zip(df["category"], df["expected_average"]))
        assert expected == {"Data": 1.0, "Cloud": 2.0}

    def test_absent_role_expected_zero(self):
        """A person with no role assignment compares against 0."""
        skills, roles, criteria = make_team()
        profiles = join(skills, [], criteria, include_unassigned=True)

        df = per_category_for_person_frame(profiles[0])

        assert (df["expected_average"] == 0).all()
        assert (df["gap"] == df["actual_average"]).all()

    def test_empty_profile(self):
        df = per_category_for_person_frame(MemberSkillProfile("Nobody", "DE"))

        assert df.empty
        assert list(df.columns) == CATEGORY_GAP_COLUMNS


class TestStableGapSort:
    """Tests for descending, stable gap ordering."""

    def test_ties_keep_encounter_order(self):
        """Two categories tied at gap 1.5 stay in first-encountered order."""
        skills = [
            SkillRecord("Zeta", "Z1", {"P": 2.5}),
            SkillRecord("Alpha", "A1", {"P": 3.0}),
            SkillRecord("Mid", "M1", {"P": 1.0}),
        ]
        criteria = [
            ScoringCriteria("Zeta", {"R": 1.0}),
            ScoringCriteria("Alpha", {"R": 1.5}),
            ScoringCriteria("Mid", {"R": 0.0}),
        ]
        profile = join(skills, [RoleAssignment("P", "R")], criteria)[0]

        result = per_category_for_person(profile)

        assert [r.category for r in result] == ["Zeta", "Alpha", "Mid"]
        assert [r.gap for r in result] == [1.5, 1.5, 1.0]

    def test_sort_by_gap_descending(self):
        df = pd.DataFrame({"category": list("abcd"), "gap": [0.0, 2.0, -1.0, 2.0]})

        result = sort_by_gap(df)

        assert list(result["category"]) == ["b", "d", "a", "c"]


class TestPerSkillGap:
    """Tests for the per-skill detail view."""

    def test_grouped_by_category_sorted_by_gap(self):
        skills, roles, criteria = make_team()
        cara = join(skills, roles, criteria)[2]

        df = per_skill_gap_frame(cara)

        # Data first (encounter order); Python gap +1 before SQL gap 0
        assert list(df["skill_name"]) == ["Python", "SQL", "GCP", "AWS"]
        assert list(df["gap"]) == [1.0, 0.0, 0.0, -1.0]

    def test_records_match_frame(self):
        skills, roles, criteria = make_team()
        cara = join(skills, roles, criteria)[2]

        result = per_skill_gap(cara)

        assert [s.skill_name for s in result] == ["Python", "SQL", "GCP", "AWS"]
        assert isinstance(result[0], ExpandedSkill)
        assert result[0].gap == 1.0

    def test_records_rounded_like_frame(self):
        skills = [SkillRecord("Data", "SQL", {"Alice": 2.3456})]
        roles = [RoleAssignment("Alice", "DE")]
        criteria = [ScoringCriteria("Data", {"DE": 1.0})]
        alice = join(skills, roles, criteria)[0]

        assert per_skill_gap(alice)[0].actual_score == 2.35
        assert per_skill_gap(alice, decimals=1)[0].actual_score == 2.3
        assert per_skill_gap(alice, rounded=False)[0].actual_score == 2.3456

    def test_empty(self):
        assert per_skill_gap_frame(MemberSkillProfile("Nobody", "DE")).empty
        assert per_skill_gap(MemberSkillProfile("Nobody", "DE")) == []


class TestPerCategoryForTeam:
    """Tests for the team-by-role view."""

    def test_team_averages(self):
        skills, roles, criteria = make_team()
        profiles = join(skills, roles, criteria)

        result = per_category_for_team(profiles, "DE", criteria)

        by_cat = {r.category: r for r in result}
        # Data: Alice 3,2 + Cara 2,3 -> 10/4 = 2.5 vs 2
        assert by_cat["Data"].actual_average == 2.5
        assert by_cat["Data"].expected_average == 2.0
        assert by_cat["Data"].gap == 0.5
        # Cloud: Alice 1,0 + Cara 0,1 -> 2/4 = 0.5 vs 1
        assert by_cat["Cloud"].actual_average == 0.5
        assert by_cat["Cloud"].gap == -0.5
        assert by_cat["Data"].member_count == 2
        assert [r.category for r in result] == ["Data", "Cloud"]

    def test_expected_read_from_criteria(self):
        """Expected comes from criteria for the role, not from profiles."""
        skills, roles, criteria = make_team()
        profiles = join(skills, roles, [])  # every profile expected = 0

        df = per_category_for_team_frame(profiles, "BA", criteria)

        assert dict(zip(df["category"], df["expected_average"])) == {"Data": 1.0, "Cloud": 2.0}

    def test_role_trimmed(self):
        skills, roles, criteria = make_team()
        profiles = join(skills, roles, criteria)

        df = per_category_for_team_frame(profiles, " DE ", criteria)

        assert df["member_count"].max() == 2

    def test_unknown_role_empty(self):
        skills, roles, criteria = make_team()
        profiles = join(skills, roles, criteria)

        assert per_category_for_team_frame(profiles, "TPM", criteria).empty
        assert per_category_for_team(profiles, "", criteria) == []

    def test_unassigned_excluded(self):
        """People without a role never join a team."""
        skills, roles, criteria = make_team()
        profiles = join(skills, roles[:1], criteria, include_unassigned=True)

        members = team_members(profiles, "DE")

        assert [p.name for p in members] == ["Alice"]
        assert team_members(profiles, "") == []

    def test_category_missing_from_criteria(self):
        skills = [SkillRecord("Design", "Figma", {"Alice": 2})]
        profiles = join(skills, [RoleAssignment("Alice", "DE")], [])

        result = per_category_for_team(profiles, "DE", [])

        assert result == [CategoryGap("Design", 2.0, 0.0, 2.0, 1)]


class TestGlobalCategoryAverage:
    """Tests for the role-independent baseline."""

    def test_flat_mean(self):
        skills, _, _ = make_team()

        result = global_category_average(skills)

        # Data: 3+1+2+2+2+3 = 13 / 6; Cloud: 1+3+0+0+1+1 = 6 / 6
        assert result == [CategoryAverage("Data", 2.17), CategoryAverage("Cloud", 1.0)]

    def test_unrounded(self):
        skills, _, _ = make_team()

        df = global_category_average_frame(skills, rounded=False)

        assert df["average"].iloc[0] == pytest.approx(13 / 6)

    def test_category_without_scores_omitted(self):
        skills = [SkillRecord("Empty", "Nothing", {}), SkillRecord("A", "X", {"P": 1})]

        result = global_category_average(skills)

        assert [r.category for r in result] == ["A"]

    def test_empty(self):
        assert global_category_average([]) == []


class TestSelectionHelpers:
    def test_available_roles_configured_first(self):
        criteria = [ScoringCriteria("Data", {"DS": 1, "Intern": 0})]

        roles = available_roles(criteria, team_roles=["TPM", "DS"])

        assert roles == ["TPM", "DS", "Intern"]

    def test_search_categories(self):
        averages = [CategoryAverage("Data Engineering", 2.0), CategoryAverage("Cloud", 1.0)]

        assert search_categories(averages, "data") == [averages[0]]
        assert search_categories(averages, "") == averages

    def test_shortfall_share(self):
        df = pd.DataFrame({"is_shortfall": [True, False, False, True]})

        assert shortfall_share(df) == 0.5
        assert np.isnan(shortfall_share(pd.DataFrame()))


class TestDeterminism:
    def test_same_inputs_same_outputs(self):
        skills, roles, criteria = make_team()

        first = [per_category_for_person(p) for p in join(skills, roles, criteria)]
        second = [per_category_for_person(p) for p in join(skills, roles, criteria)]

        assert first == second
