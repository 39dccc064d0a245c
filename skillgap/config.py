"""
Application configuration management.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    if Path("./public/File").exists():
        return Path("./public/File")
    return Path("./data")


@dataclass(frozen=True)
class ColumnConfig:
    """Identity column headers of the three source tables."""

    # Skills source (RAW)
    skill_category: str = "項目分類"
    skill_name: str = "項目名稱"

    # Roles source (Job)
    person_name: str = "姓名"
    role: str = "預設職能"

    # Criteria source (ScoringCriteria)
    criteria_category: str = "技能分類"


def _default_columns() -> ColumnConfig:
    overrides = {
        "skill_category": os.getenv("SKILL_CATEGORY_COLUMN"),
        "skill_name": os.getenv("SKILL_NAME_COLUMN"),
        "person_name": os.getenv("PERSON_NAME_COLUMN"),
        "role": os.getenv("ROLE_COLUMN"),
        "criteria_category": os.getenv("CRITERIA_CATEGORY_COLUMN"),
    }
    return ColumnConfig(**{k: v for k, v in overrides.items() if v})


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)
    skills_file: str = field(default_factory=lambda: os.getenv("SKILLS_FILE", SOURCE_FILES["skills"]))
    roles_file: str = field(default_factory=lambda: os.getenv("ROLES_FILE", SOURCE_FILES["roles"]))
    criteria_file: str = field(default_factory=lambda: os.getenv("CRITERIA_FILE", SOURCE_FILES["criteria"]))

    # Source headers
    columns: ColumnConfig = field(default_factory=_default_columns)

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Cache settings
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "3600")))

    # Display
    display_decimals: int = field(default_factory=lambda: int(os.getenv("DISPLAY_DECIMALS", "2")))

    @property
    def skills_path(self) -> Path:
        return self.data_dir / self.skills_file

    @property
    def roles_path(self) -> Path:
        return self.data_dir / self.roles_file

    @property
    def criteria_path(self) -> Path:
        return self.data_dir / self.criteria_file


# Source file names
SOURCE_FILES = {
    "skills": "RAW.csv",
    "roles": "Job.csv",
    "criteria": "ScoringCriteria.csv",
}

# Role labels offered in the team view, in display order
TEAM_ROLES: List[str] = ["TPM", "BA", "維運", "系統分析", "架構", "DE", "DS"]

# Radar chart radial axis upper bound
SCORE_AXIS_MAX = 3

# Formatting constants
FORMAT_SCORE = "{:.2f}"
FORMAT_GAP = "{:+.2f}"
FORMAT_COUNT = "{:,}"


# Global config instance
config = AppConfig()
