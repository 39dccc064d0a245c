"""
Source loading and the loaded report.

The three sources are fetched concurrently and must all succeed before
anything is normalized. Any failure aborts the whole load with a single
SourceLoadFailure; there is no partial report and no retry.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

import pandas as pd

from skillgap.config import AppConfig, ColumnConfig, config
from skillgap.data.models import (
    CategoryAverage,
    MemberSkillProfile,
    RoleAssignment,
    ScoringCriteria,
    SkillRecord,
)
from skillgap.data.normalize import Rows, normalize_sources
from skillgap.data.schema import SOURCE_NAMES, SourceLoadFailure, clean_columns, validate_schema
from skillgap.metrics.gaps import global_category_average
from skillgap.metrics.join import join

logger = logging.getLogger(__name__)

Source = Union[str, Path, Callable[[], Rows]]


@dataclass(frozen=True)
class LoadedReport:
    """Everything the presentation layer needs for one session."""

    skills: Tuple[SkillRecord, ...]
    roles: Tuple[RoleAssignment, ...]
    criteria: Tuple[ScoringCriteria, ...]
    profiles: Tuple[MemberSkillProfile, ...]
    category_averages: Tuple[CategoryAverage, ...]

    @property
    def member_names(self) -> Tuple[str, ...]:
        return tuple(profile.name for profile in self.profiles)

    def member(self, name: str) -> Optional[MemberSkillProfile]:
        for profile in self.profiles:
            if profile.name == name:
                return profile
        return None


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://", "file://"))


def _resolve_path(filepath: Path) -> Optional[Path]:
    """Find the file as given, or as .parquet / .csv."""
    if filepath.exists():
        return filepath
    for suffix in (".parquet", ".csv"):
        candidate = filepath.with_suffix(suffix)
        if candidate.exists():
            return candidate
    return None


def read_source(source: Source) -> pd.DataFrame:
    """
    Read one tabular source as strings.

    Accepts a path (csv or parquet), a URL to a csv, or a zero-argument
    callable returning rows.
    """
    if callable(source):
        rows = source()
        return rows if isinstance(rows, pd.DataFrame) else pd.DataFrame(list(rows))

    if isinstance(source, str) and _is_url(source):
        return pd.read_csv(source, dtype=str, keep_default_na=False)

    path = _resolve_path(Path(source))
    if path is None:
        raise FileNotFoundError(f"{source} not found")
    if path.suffix == ".parquet":
        return pd.read_parquet(path).fillna("").astype(str)
    return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")


def _fetch_one(name: str, source: Source, columns: ColumnConfig) -> pd.DataFrame:
    df = clean_columns(read_source(source))
    validate_schema(df, name, strict=True, columns=columns)
    return df


def fetch_sources(skills_source: Source,
                  roles_source: Source,
                  criteria_source: Source,
                  columns: Optional[ColumnConfig] = None) -> Dict[str, pd.DataFrame]:
    """
    Fetch the three sources concurrently.

    Raises:
        SourceLoadFailure: if any fetch fails; names every failed source.
    """
    columns = columns or config.columns
    sources = dict(zip(SOURCE_NAMES, (skills_source, roles_source, criteria_source)))

    with ThreadPoolExecutor(max_workers=len(sources)) as executor:
        futures = {
            name: executor.submit(_fetch_one, name, source, columns)
            for name, source in sources.items()
        }

    frames: Dict[str, pd.DataFrame] = {}
    failures: Dict[str, BaseException] = {}
    for name, future in futures.items():
        error = future.exception()
        if error is not None:
            failures[name] = error
        else:
            frames[name] = future.result()

    if failures:
        reason = "; ".join(
            getattr(error, "reason", None) or str(error) or type(error).__name__
            for error in failures.values()
        )
        failed = ", ".join(failures)
        logger.error("Report load failed (%s): %s", failed, reason)
        raise SourceLoadFailure(failed, reason) from next(iter(failures.values()))

    return frames


def build_report(skill_rows: Rows, role_rows: Rows, criteria_rows: Rows,
                 columns: Optional[ColumnConfig] = None,
                 include_unassigned: bool = False) -> LoadedReport:
    """Normalize, join and baseline already-fetched rows."""
    sources = normalize_sources(skill_rows, role_rows, criteria_rows, columns=columns)
    profiles = join(sources.skills, sources.roles, sources.criteria,
                    include_unassigned=include_unassigned)
    return LoadedReport(
        skills=sources.skills,
        roles=sources.roles,
        criteria=sources.criteria,
        profiles=tuple(profiles),
        category_averages=tuple(global_category_average(sources.skills, rounded=False)),
    )


def load_report(skills_source: Source,
                roles_source: Source,
                criteria_source: Source,
                columns: Optional[ColumnConfig] = None,
                include_unassigned: bool = False) -> LoadedReport:
    """
    Fetch, normalize and join the three sources into a LoadedReport.

    Raises:
        SourceLoadFailure: if any source cannot be loaded.
    """
    logger.info("Loading skill-gap report sources")
    frames = fetch_sources(skills_source, roles_source, criteria_source, columns=columns)
    report = build_report(
        frames["skills"], frames["roles"], frames["criteria"],
        columns=columns, include_unassigned=include_unassigned,
    )
    logger.info(
        "Loaded %d skill(s), %d member(s), %d criteria categor(ies)",
        len(report.skills), len(report.profiles), len(report.criteria),
    )
    return report


def _config_for(data_dir: Optional[Path], app_config: Optional[AppConfig]) -> AppConfig:
    app_config = app_config or config
    if data_dir:
        return replace(app_config, data_dir=Path(data_dir))
    return app_config


def load_report_from_dir(data_dir: Optional[Path] = None,
                         app_config: Optional[AppConfig] = None,
                         include_unassigned: bool = False) -> LoadedReport:
    """Load the report from the configured source files."""
    app_config = _config_for(data_dir, app_config)
    return load_report(
        app_config.skills_path,
        app_config.roles_path,
        app_config.criteria_path,
        columns=app_config.columns,
        include_unassigned=include_unassigned,
    )


def get_data_status(data_dir: Optional[Path] = None,
                    app_config: Optional[AppConfig] = None) -> Dict[str, Any]:
    """Get status of the three source files."""
    app_config = _config_for(data_dir, app_config)
    paths = {
        "skills": app_config.skills_path,
        "roles": app_config.roles_path,
        "criteria": app_config.criteria_path,
    }

    status = {}
    for key, expected in paths.items():
        path = _resolve_path(expected)
        status[key] = {
            "file": expected.name,
            "exists": path is not None,
            "path": str(path) if path else str(expected),
        }
    return status
