"""
Source table validation, load errors and numeric coercion.
"""
import logging
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from skillgap.config import ColumnConfig, config

logger = logging.getLogger(__name__)


class SkillGapError(Exception):
    """Base error for the skill-gap report."""
    pass


class SourceLoadFailure(SkillGapError):
    """Raised when a source table cannot be fetched or read. Fatal to the load."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load {source} source: {reason}")


class SchemaValidationError(SourceLoadFailure):
    """Raised when a source table is missing one of its identity columns."""
    pass


SOURCE_NAMES = ("skills", "roles", "criteria")


def identity_columns(source: str, columns: Optional[ColumnConfig] = None) -> List[str]:
    """Identity (non-score) columns of a source table."""
    columns = columns or config.columns
    if source == "skills":
        return [columns.skill_category, columns.skill_name]
    if source == "roles":
        return [columns.person_name, columns.role]
    if source == "criteria":
        return [columns.criteria_category]
    return []


def is_missing(value) -> bool:
    """True for None, NaN, NaT and pd.NA scalars."""
    return value is None or (pd.api.types.is_scalar(value) and bool(pd.isna(value)))


def clean_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Strip surrounding whitespace from column headers.

    Headers that only differed by padding collapse onto one name; the last
    such column wins.
    """
    df = df.copy()
    df.columns = [str(col).strip() for col in df.columns]
    duplicated = df.columns.duplicated(keep="last")
    if duplicated.any():
        logger.warning(
            "Duplicate column header(s) after trimming: %s; last column is used",
            sorted(set(df.columns[duplicated])),
        )
        df = df.loc[:, ~duplicated]
    return df


def validate_required_columns(df: pd.DataFrame, source: str,
                              columns: Optional[ColumnConfig] = None) -> Tuple[bool, List[str]]:
    """
    Validate that identity columns exist in dataframe.
    Returns (is_valid, missing_columns).
    """
    required = identity_columns(source, columns)
    present = {str(col).strip() for col in df.columns}
    missing = [col for col in required if col not in present]

    return len(missing) == 0, missing


def value_columns(df: pd.DataFrame, source: str,
                  columns: Optional[ColumnConfig] = None) -> List[str]:
    """
    Columns holding scores: one per person (skills) or one per role (criteria).
    Roles have none.
    """
    if source == "roles":
        return []
    identity = set(identity_columns(source, columns))
    return [col for col in df.columns if str(col).strip() not in identity]


def validate_schema(df: pd.DataFrame, source: str, strict: bool = True,
                    columns: Optional[ColumnConfig] = None) -> Dict:
    """
    Full schema validation.

    Args:
        df: DataFrame to validate
        source: One of 'skills', 'roles', 'criteria'
        strict: If True, raise SchemaValidationError on missing identity columns
        columns: Header configuration (defaults to config.columns)

    Returns:
        Dict with validation results
    """
    is_valid, missing_required = validate_required_columns(df, source, columns)
    score_cols = value_columns(df, source, columns)

    result = {
        "is_valid": is_valid,
        "missing_required": missing_required,
        "value_columns": [str(col).strip() for col in score_cols],
        "total_columns": len(df.columns),
        "total_rows": len(df),
    }

    if strict and not is_valid:
        raise SchemaValidationError(
            source, f"missing identity columns {missing_required}"
        )

    return result


def coerce_scores(values: pd.Series) -> pd.Series:
    """
    Parse score cells to floats. Anything unparseable, blank or non-finite
    ("inf", "-Infinity") becomes 0.
    """
    cleaned = values.astype(object).map(
        lambda v: v.strip() if isinstance(v, str) else (None if is_missing(v) else v)
    )
    numeric = pd.to_numeric(cleaned, errors="coerce").astype(float)
    finite = np.isfinite(numeric)
    n_bad = int((~finite).sum())
    if n_bad:
        logger.debug("Coerced %d non-numeric score cell(s) to 0", n_bad)
    return numeric.where(finite, 0.0)

