"""
Skill-gap metrics pack.

Single source of truth for: per-skill gaps, per-person and per-team category
gaps, and the global category baseline.

gap = actual - expected (positive = surplus, negative = shortfall).
Every gap view is sorted by descending gap with a stable sort, so equal gaps
keep their first-encountered order. Averages are computed unrounded and
rounded once, as the last step, for display.
"""
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from skillgap.config import TEAM_ROLES, config
from skillgap.data.models import (
    CategoryAverage,
    CategoryGap,
    ExpandedSkill,
    MemberSkillProfile,
    ScoringCriteria,
    SkillRecord,
)
from skillgap.metrics.join import build_criteria_index, expected_score, profiles_frame


CATEGORY_GAP_COLUMNS = [
    "category", "actual_average", "expected_average", "gap", "member_count", "is_shortfall",
]
SKILL_GAP_COLUMNS = ["category", "skill_name", "actual_score", "expected_score", "gap"]
CATEGORY_AVERAGE_COLUMNS = ["category", "average"]


def _trim(value) -> str:
    return (value or "").strip()


# =============================================================================
# SORTING & ROUNDING
# =============================================================================

def sort_by_gap(df: pd.DataFrame, column: str = "gap") -> pd.DataFrame:
    """Descending sort on gap; ties keep their current order."""
    return df.sort_values(column, ascending=False, kind="mergesort").reset_index(drop=True)


def round_for_display(df: pd.DataFrame, decimals: Optional[int] = None,
                      columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Round score columns for display. Only call on final results."""
    decimals = config.display_decimals if decimals is None else decimals
    columns = columns or [
        "actual_average", "expected_average", "gap",
        "actual_score", "expected_score", "average",
    ]
    df = df.copy()
    for col in columns:
        if col in df.columns:
            df[col] = df[col].astype(float).round(decimals)
    return df


def _finish_category_gaps(grouped: pd.DataFrame, rounded: bool,
                          decimals: Optional[int]) -> pd.DataFrame:
    grouped["gap"] = grouped["actual_average"] - grouped["expected_average"]
    result = sort_by_gap(grouped)
    if rounded:
        result = round_for_display(result, decimals)
    result["is_shortfall"] = result["gap"] < 0
    result["member_count"] = result["member_count"].astype(int)
    return result[CATEGORY_GAP_COLUMNS]


def _empty(columns: List[str]) -> pd.DataFrame:
    return pd.DataFrame(columns=columns)


# =============================================================================
# PER-SKILL
# =============================================================================

def per_skill_gap_frame(profile: MemberSkillProfile,
                        rounded: bool = True,
                        decimals: Optional[int] = None) -> pd.DataFrame:
    """
    One row per skill with its gap.

    Categories appear in first-encountered order; within a category skills
    are sorted by descending gap.
    """
    df = profiles_frame([profile])
    if df.empty:
        return _empty(SKILL_GAP_COLUMNS)

    df["category_order"], _ = pd.factorize(df["category"])
    # Two stable passes: gap within category, then category order.
    df = df.sort_values("gap", ascending=False, kind="mergesort")
    df = df.sort_values("category_order", kind="mergesort").reset_index(drop=True)

    result = df[SKILL_GAP_COLUMNS]
    if rounded:
        result = round_for_display(result, decimals)
    return result


# =============================================================================
# PER-CATEGORY (PERSON)
# =============================================================================

def per_category_for_person_frame(profile: MemberSkillProfile,
                                  criteria: Optional[Sequence[ScoringCriteria]] = None,
                                  role: Optional[str] = None,
                                  rounded: bool = True,
                                  decimals: Optional[int] = None) -> pd.DataFrame:
    """
    Average one person's actual and expected scores per category.

    Args:
        profile: The person's joined skills
        criteria: Scoring criteria, only needed with ``role``
        role: Compare against this role's expectations instead of the
            person's own role

    Returns DataFrame with:
    - actual_average, expected_average: mean over the category's skills
    - gap: actual_average - expected_average
    - member_count: always 1
    - is_shortfall: gap < 0
    """
    df = profiles_frame([profile])
    if df.empty:
        return _empty(CATEGORY_GAP_COLUMNS)

    if role is not None and criteria is not None:
        index = build_criteria_index(criteria)
        df["expected_score"] = df["category"].map(lambda c: expected_score(index, c, role))

    grouped = df.groupby("category", sort=False).agg(
        actual_average=("actual_score", "mean"),
        expected_average=("expected_score", "mean"),
        member_count=("name", "nunique"),
    ).reset_index()

    return _finish_category_gaps(grouped, rounded, decimals)


# =============================================================================
# PER-CATEGORY (TEAM)
# =============================================================================

def team_members(profiles: Sequence[MemberSkillProfile], role: str) -> List[MemberSkillProfile]:
    """Profiles whose role equals ``role`` (trimmed). A blank role matches nobody."""
    role_key = _trim(role)
    if not role_key:
        return []
    return [profile for profile in profiles if _trim(profile.role) == role_key]


def per_category_for_team_frame(profiles: Sequence[MemberSkillProfile],
                                role: str,
                                criteria: Sequence[ScoringCriteria],
                                rounded: bool = True,
                                decimals: Optional[int] = None) -> pd.DataFrame:
    """
    Team view for one role.

    actual_average is the mean over every (member, skill) pair in the
    category. expected_average is the role's expected score for the category,
    read straight from the criteria (0 when missing). member_count is the
    number of distinct members contributing to the category.
    """
    members = team_members(profiles, role)
    df = profiles_frame(members)
    if df.empty:
        return _empty(CATEGORY_GAP_COLUMNS)

    grouped = df.groupby("category", sort=False).agg(
        actual_average=("actual_score", "mean"),
        member_count=("name", "nunique"),
    ).reset_index()

    index = build_criteria_index(criteria)
    role_key = _trim(role)
    grouped["expected_average"] = grouped["category"].map(
        lambda c: expected_score(index, c, role_key)
    ).astype(float)

    return _finish_category_gaps(grouped, rounded, decimals)


# =============================================================================
# GLOBAL BASELINE
# =============================================================================

def global_category_average_frame(skills: Sequence[SkillRecord],
                                  rounded: bool = True,
                                  decimals: Optional[int] = None) -> pd.DataFrame:
    """
    Mean of every person's actual score per category, ignoring roles.

    Categories appear in first-encountered order. A category with no scores
    is left out.
    """
    rows = [
        {"category": _trim(skill.category), "score": score}
        for skill in skills
        for score in skill.scores_by_person.values()
    ]
    if not rows:
        return _empty(CATEGORY_AVERAGE_COLUMNS)

    df = pd.DataFrame(rows)
    result = df.groupby("category", sort=False).agg(
        average=("score", "mean"),
    ).reset_index()

    if rounded:
        result = round_for_display(result, decimals)
    return result[CATEGORY_AVERAGE_COLUMNS]


# =============================================================================
# RECORD VIEWS
# =============================================================================

def _category_gaps(df: pd.DataFrame) -> List[CategoryGap]:
    return [
        CategoryGap(
            category=row.category,
            actual_average=float(row.actual_average),
            expected_average=float(row.expected_average),
            gap=float(row.gap),
            member_count=int(row.member_count),
        )
        for row in df.itertuples(index=False)
    ]


def per_skill_gap(profile: MemberSkillProfile,
                  rounded: bool = True,
                  decimals: Optional[int] = None) -> List[ExpandedSkill]:
    """Profile skills grouped by category, each group sorted by descending gap."""
    df = per_skill_gap_frame(profile, rounded, decimals)
    return [
        ExpandedSkill(
            category=row.category,
            skill_name=row.skill_name,
            actual_score=float(row.actual_score),
            expected_score=float(row.expected_score),
        )
        for row in df.itertuples(index=False)
    ]


def per_category_for_person(profile: MemberSkillProfile,
                            criteria: Optional[Sequence[ScoringCriteria]] = None,
                            role: Optional[str] = None,
                            rounded: bool = True,
                            decimals: Optional[int] = None) -> List[CategoryGap]:
    return _category_gaps(
        per_category_for_person_frame(profile, criteria, role, rounded, decimals)
    )


def per_category_for_team(profiles: Sequence[MemberSkillProfile],
                          role: str,
                          criteria: Sequence[ScoringCriteria],
                          rounded: bool = True,
                          decimals: Optional[int] = None) -> List[CategoryGap]:
    return _category_gaps(
        per_category_for_team_frame(profiles, role, criteria, rounded, decimals)
    )


def global_category_average(skills: Sequence[SkillRecord],
                            rounded: bool = True,
                            decimals: Optional[int] = None) -> List[CategoryAverage]:
    df = global_category_average_frame(skills, rounded, decimals)
    return [
        CategoryAverage(category=row.category, average=float(row.average))
        for row in df.itertuples(index=False)
    ]


# =============================================================================
# SELECTION HELPERS
# =============================================================================

def available_roles(criteria: Sequence[ScoringCriteria],
                    team_roles: Optional[Sequence[str]] = None) -> List[str]:
    """
    Role labels for role selection: the configured team roles first, then any
    other role found in the criteria headers.
    """
    team_roles = TEAM_ROLES if team_roles is None else team_roles
    roles = dict.fromkeys(_trim(role) for role in team_roles)
    for row in criteria:
        roles.update(dict.fromkeys(_trim(role) for role in row.expected_by_role))
    return [role for role in roles if role]


def search_categories(averages: Sequence[CategoryAverage], term: str) -> List[CategoryAverage]:
    """Case-insensitive substring filter on category name."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(averages)
    return [row for row in averages if needle in row.category.lower()]


def shortfall_share(df: pd.DataFrame) -> float:
    """Fraction of categories in a gap view that fall short of expectations."""
    if df.empty:
        return np.nan
    return float(df["is_shortfall"].mean())
