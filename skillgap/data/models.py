"""
Typed records for the skill-gap report.

Source-derived records (skills, roles, criteria) and everything computed from
them are frozen. Score mappings are wrapped read-only so a record cannot be
changed after construction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple


def _freeze(mapping: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class SkillRecord:
    """One skills row: a skill item and every person's score for it."""

    category: str
    name: str
    scores_by_person: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scores_by_person", _freeze(self.scores_by_person))

    def score_for(self, person_name: str) -> float:
        return self.scores_by_person.get(person_name, 0.0)


@dataclass(frozen=True)
class RoleAssignment:
    person_name: str
    role: str


@dataclass(frozen=True)
class ScoringCriteria:
    """Expected score per role for one skill category."""

    category: str
    expected_by_role: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_by_role", _freeze(self.expected_by_role))


@dataclass(frozen=True)
class ExpandedSkill:
    category: str
    skill_name: str
    actual_score: float
    expected_score: float

    @property
    def gap(self) -> float:
        return self.actual_score - self.expected_score


@dataclass(frozen=True)
class MemberSkillProfile:
    """All (actual, expected) skill pairs for one person, in skill input order."""

    name: str
    role: str
    skills: Tuple[ExpandedSkill, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "skills", tuple(self.skills))

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(skill.category for skill in self.skills))


@dataclass(frozen=True)
class CategoryAverage:
    """Mean actual score of a category across every person."""

    category: str
    average: float


@dataclass(frozen=True)
class CategoryGap:
    """Actual vs expected averages for one category (person or team view)."""

    category: str
    actual_average: float
    expected_average: float
    gap: float
    member_count: int = 1

    @property
    def is_shortfall(self) -> bool:
        return self.gap < 0
