"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dayfinder.adapters.roster import ConfigGroupRoster
from dayfinder.config import AppConfig, GroupConfig
from dayfinder.domain.exceptions import UnknownGroupError


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path):
        path = write_config(tmp_path, """
database_url: sqlite:///test.db
country_code: br
groups:
  - id: trip
    name: Beach trip
    owner: ana
    members: [bob, caio]
    weekends_only: true
""")

        config = AppConfig.load_from_yaml(path)

        assert config.database_url == "sqlite:///test.db"
        assert config.country_code == "BR"
        assert config.log_level == "WARNING"
        group = config.find_group("trip")
        assert group is not None
        assert group.members == ["ana", "bob", "caio"]
        assert group.weekends_only is True
        assert config.find_group("other") is None

    def test_defaults(self):
        config = AppConfig()

        assert config.country_code == "BR"
        assert config.groups == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "groups: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = write_config(tmp_path, "- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(path)

    def test_duplicate_group_ids(self):
        with pytest.raises(ValidationError, match="Duplicate group id"):
            AppConfig(groups=[
                GroupConfig(id="trip", name="Trip one", owner="ana"),
                GroupConfig(id="trip", name="Trip two", owner="bob"),
            ])

    def test_invalid_country_code(self):
        with pytest.raises(ValidationError):
            AppConfig(country_code="BRA")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            AppConfig(log_level="LOUD")


class TestGroupConfig:
    """Tests for GroupConfig."""

    def test_owner_is_always_a_member(self):
        group = GroupConfig(id="trip", name="Trip", owner="ana", members=["bob", "ana", "bob"])

        assert group.members == ["ana", "bob"]

    def test_name_length(self):
        with pytest.raises(ValidationError):
            GroupConfig(id="trip", name="ab", owner="ana")


class TestConfigGroupRoster:
    """Tests for the config-backed roster provider."""

    def test_get_roster(self):
        config = AppConfig(groups=[
            GroupConfig(id="trip", name="Trip", owner="ana", members=["bob"], weekends_only=True)
        ])

        roster = ConfigGroupRoster(config).get_roster("trip")

        assert roster.member_ids == frozenset({"ana", "bob"})
        assert roster.total_members == 2
        assert roster.weekends_only is True

    def test_unknown_group(self):
        with pytest.raises(UnknownGroupError):
            ConfigGroupRoster(AppConfig()).get_roster("trip")
