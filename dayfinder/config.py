"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class GroupConfig(BaseModel):
    """Group and its member roster."""
    id: str
    name: str
    owner: str
    members: List[str] = Field(default_factory=list)
    weekends_only: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Group names are 3 to 100 characters long."""
        if not 3 <= len(value) <= 100:
            raise ValueError(f"Group name must be 3 to 100 characters long, got {len(value)}")
        return value

    @model_validator(mode="after")
    def include_owner(self) -> "GroupConfig":
        """The owner is always a member of their own group."""
        # Preserve order while removing duplicates
        seen: set[str] = set()
        roster: List[str] = []
        for member in [self.owner] + list(self.members):
            if member not in seen:
                roster.append(member)
                seen.add(member)
        self.members = roster
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    database_url: str = "sqlite:///dayfinder.db"
    country_code: str = "BR"
    timezone: str = "America/Sao_Paulo"
    log_level: str = "WARNING"
    groups: List[GroupConfig] = Field(default_factory=list)

    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, value: str) -> str:
        """Country codes are ISO 3166 alpha-2."""
        value = value.strip().upper()
        if len(value) != 2 or not value.isalpha():
            raise ValueError(f"country_code must be a two-letter ISO code, got '{value}'")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Ensure the level is one the logging module knows."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("groups")
    @classmethod
    def validate_groups(cls, value: List[GroupConfig]) -> List[GroupConfig]:
        """Ensure group ids are unique."""
        seen_ids: set[str] = set()
        for group in value:
            if group.id in seen_ids:
                raise ValueError(f"Duplicate group id detected: {group.id}")
            seen_ids.add(group.id)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_group(self, group_id: str) -> GroupConfig | None:
        """Find a group by its id."""
        for group in self.groups:
            if group.id == group_id:
                return group
        return None


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
