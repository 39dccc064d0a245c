"""
Tests for configuration and environment overrides.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from skillgap.config import AppConfig, ColumnConfig, SOURCE_FILES, TEAM_ROLES


class TestAppConfig:
    def test_defaults(self, monkeypatch, tmp_path):
        for var in ("DATA_DIR", "SKILLS_FILE", "DISPLAY_DECIMALS"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.chdir(tmp_path)

        cfg = AppConfig()

        assert cfg.data_dir == Path("./data")
        assert cfg.skills_file == SOURCE_FILES["skills"]
        assert cfg.display_decimals == 2
        assert cfg.skills_path == Path("data") / "RAW.csv"

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATA_DIR", str(tmp_path))
        monkeypatch.setenv("ROLES_FILE", "people.csv")
        monkeypatch.setenv("DISPLAY_DECIMALS", "1")

        cfg = AppConfig()

        assert cfg.data_dir == tmp_path
        assert cfg.roles_path == tmp_path / "people.csv"
        assert cfg.display_decimals == 1

    def test_column_overrides(self, monkeypatch):
        monkeypatch.setenv("PERSON_NAME_COLUMN", "name")
        monkeypatch.setenv("ROLE_COLUMN", "role")

        cfg = AppConfig()

        assert cfg.columns.person_name == "name"
        assert cfg.columns.role == "role"
        assert cfg.columns.skill_category == ColumnConfig().skill_category

    def test_team_roles(self):
        assert TEAM_ROLES[0] == "TPM"
        assert len(TEAM_ROLES) == len(set(TEAM_ROLES))
