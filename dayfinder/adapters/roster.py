"""
Group rosters resolved from the application configuration.
"""

from ..config import AppConfig
from ..domain.exceptions import UnknownGroupError
from ..domain.models import GroupRoster


class ConfigGroupRoster:
    """
    Roster provider reading groups from ``AppConfig``.

    Group membership itself is managed elsewhere; this adapter only exposes
    the member ids and the weekends-only flag the engines need.
    """

    def __init__(self, config: AppConfig):
        self.config = config

    def get_roster(self, group_id: str) -> GroupRoster:
        group = self.config.find_group(group_id)
        if group is None:
            raise UnknownGroupError(f"Unknown group: '{group_id}'")

        return GroupRoster(
            group_id=group.id,
            member_ids=frozenset(group.members),
            weekends_only=group.weekends_only,
        )
