"""
Joiner: role assignments x skill records -> per-person skill profiles.

Expected scores are looked up by (trimmed category, trimmed role). A miss on
either key yields 0; the join never raises.
"""
from typing import Dict, List, Mapping, Sequence

import pandas as pd

from skillgap.data.models import (
    ExpandedSkill,
    MemberSkillProfile,
    RoleAssignment,
    ScoringCriteria,
    SkillRecord,
)

CriteriaIndex = Dict[str, Dict[str, float]]

PROFILE_COLUMNS = [
    "name", "role", "category", "skill_name",
    "actual_score", "expected_score", "gap",
]


def _trim(value) -> str:
    return (value or "").strip()


def build_criteria_index(criteria: Sequence[ScoringCriteria]) -> CriteriaIndex:
    """
    Map trimmed category -> trimmed role -> expected score.
    The first row wins for a repeated category.
    """
    index: CriteriaIndex = {}
    for row in criteria:
        index.setdefault(
            _trim(row.category),
            {_trim(role): score for role, score in row.expected_by_role.items()},
        )
    return index


def expected_score(index: Mapping[str, Mapping[str, float]], category: str, role: str) -> float:
    """Expected score for a category and role, or 0 if either is unknown."""
    return float(index.get(_trim(category), {}).get(_trim(role), 0.0))


def _expand(person_name: str, role: str,
            skills: Sequence[SkillRecord], index: CriteriaIndex) -> MemberSkillProfile:
    return MemberSkillProfile(
        name=person_name,
        role=role,
        skills=tuple(
            ExpandedSkill(
                category=_trim(skill.category),
                skill_name=skill.name,
                actual_score=float(skill.score_for(person_name)),
                expected_score=expected_score(index, skill.category, role),
            )
            for skill in skills
        ),
    )


def join(skills: Sequence[SkillRecord],
         roles: Sequence[RoleAssignment],
         criteria: Sequence[ScoringCriteria],
         include_unassigned: bool = False) -> List[MemberSkillProfile]:
    """
    Build one profile per role assignment with one ExpandedSkill per skill record.

    Order follows the role assignments, then the skill records.

    Args:
        include_unassigned: Also build profiles (blank role, expected 0) for
            people who have score columns but no role assignment. They are
            appended after the assigned people.
    """
    index = build_criteria_index(criteria)
    profiles = [_expand(assignment.person_name, assignment.role, skills, index)
                for assignment in roles]

    if include_unassigned:
        assigned = {assignment.person_name for assignment in roles}
        people = dict.fromkeys(person for skill in skills for person in skill.scores_by_person)
        profiles.extend(_expand(person, "", skills, index)
                        for person in people if person not in assigned)

    return profiles


def profiles_frame(profiles: Sequence[MemberSkillProfile]) -> pd.DataFrame:
    """
    Flatten profiles to one row per (person, skill).

    Row order matches profile order, then skill order.
    """
    rows = [
        {
            "name": profile.name,
            "role": profile.role,
            "category": skill.category,
            "skill_name": skill.skill_name,
            "actual_score": skill.actual_score,
            "expected_score": skill.expected_score,
            "gap": skill.gap,
        }
        for profile in profiles
        for skill in profile.skills
    ]
    return pd.DataFrame(rows, columns=PROFILE_COLUMNS)
