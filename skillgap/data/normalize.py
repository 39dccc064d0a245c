"""
Normalizer: raw source rows -> typed skill, role and criteria datasets.

Score cells that fail to parse become 0; a bad number never drops a row.
Category, role and header strings are trimmed here, once.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from skillgap.config import ColumnConfig, config
from skillgap.data.models import RoleAssignment, ScoringCriteria, SkillRecord
from skillgap.data.schema import (
    clean_columns,
    coerce_scores,
    is_missing,
    validate_schema,
    value_columns,
)

logger = logging.getLogger(__name__)

Rows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


@dataclass(frozen=True)
class NormalizedSources:
    skills: Tuple[SkillRecord, ...]
    roles: Tuple[RoleAssignment, ...]
    criteria: Tuple[ScoringCriteria, ...]


def _as_frame(rows: Rows) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return clean_columns(rows)
    return clean_columns(pd.DataFrame(list(rows)))


def _text(values: pd.Series) -> pd.Series:
    """Identity cells as trimmed strings; missing cells become ''."""
    return values.map(lambda v: "" if is_missing(v) else str(v).strip())


def normalize_skills(rows: Rows,
                     category_col: Optional[str] = None,
                     name_col: Optional[str] = None) -> List[SkillRecord]:
    """
    Build SkillRecords. Every non-identity column is a person's score column.

    Rows with a blank category or item name (e.g. trailing blank CSV lines)
    are skipped.
    """
    columns = config.columns
    category_col = category_col or columns.skill_category
    name_col = name_col or columns.skill_name
    df = _as_frame(rows)
    if df.empty:
        return []

    validate_schema(df, "skills", columns=ColumnConfig(
        skill_category=category_col, skill_name=name_col,
    ))

    categories = _text(df[category_col])
    names = _text(df[name_col])
    person_cols = [col for col in df.columns if col not in (category_col, name_col)]
    scores = pd.DataFrame(
        {person: coerce_scores(df[person]) for person in person_cols},
        index=df.index,
    )

    keep = (categories != "") & (names != "")
    n_skipped = int((~keep).sum())
    if n_skipped:
        logger.debug("Skipped %d skills row(s) with blank category or item name", n_skipped)

    records = []
    for idx in df.index[keep]:
        records.append(SkillRecord(
            category=categories.at[idx],
            name=names.at[idx],
            scores_by_person={person: float(scores.at[idx, person]) for person in person_cols},
        ))
    return records


def normalize_roles(rows: Rows,
                    name_col: Optional[str] = None,
                    role_col: Optional[str] = None) -> List[RoleAssignment]:
    """
    Build RoleAssignments, one per person.

    A person listed more than once keeps their first position but takes the
    role of their last row.
    """
    columns = config.columns
    name_col = name_col or columns.person_name
    role_col = role_col or columns.role
    df = _as_frame(rows)
    if df.empty:
        return []

    validate_schema(df, "roles", columns=ColumnConfig(person_name=name_col, role=role_col))

    names = _text(df[name_col])
    roles = _text(df[role_col])

    by_person = {}
    for name, role in zip(names, roles):
        if not name:
            continue
        if name in by_person and by_person[name] != role:
            logger.warning(
                "Duplicate role assignment for %r: %r replaces %r", name, role, by_person[name]
            )
        by_person[name] = role

    return [RoleAssignment(person_name=name, role=role) for name, role in by_person.items()]


def normalize_criteria(rows: Rows,
                       category_col: Optional[str] = None) -> List[ScoringCriteria]:
    """
    Build ScoringCriteria. Every non-identity column is a role's expected score.

    Duplicate categories are all kept; lookups use the first one.
    """
    category_col = category_col or config.columns.criteria_category
    df = _as_frame(rows)
    if df.empty:
        return []

    column_config = ColumnConfig(criteria_category=category_col)
    validate_schema(df, "criteria", columns=column_config)

    categories = _text(df[category_col])
    role_cols = value_columns(df, "criteria", columns=column_config)
    expected = pd.DataFrame(
        {role: coerce_scores(df[role]) for role in role_cols},
        index=df.index,
    )

    records = []
    seen = set()
    for idx in df.index:
        category = categories.at[idx]
        if not category:
            continue
        if category in seen:
            logger.warning("Duplicate scoring criteria for category %r; first row is used", category)
        seen.add(category)
        records.append(ScoringCriteria(
            category=category,
            expected_by_role={role: float(expected.at[idx, role]) for role in role_cols},
        ))
    return records


def normalize_sources(skill_rows: Rows, role_rows: Rows, criteria_rows: Rows,
                      columns: Optional[ColumnConfig] = None) -> NormalizedSources:
    """Normalize all three sources with one header configuration."""
    columns = columns or config.columns
    return NormalizedSources(
        skills=tuple(normalize_skills(skill_rows, columns.skill_category, columns.skill_name)),
        roles=tuple(normalize_roles(role_rows, columns.person_name, columns.role)),
        criteria=tuple(normalize_criteria(criteria_rows, columns.criteria_category)),
    )
