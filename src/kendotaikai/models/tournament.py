"""Tournament configuration and state snapshot."""

# Kendo Taikai
# Copyright (C) 2025  Kendo Taikai developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kendotaikai.constants import (
    DEFAULT_DUEL_TIME_LIMIT,
    DEFAULT_GROUP_COUNT,
    DEFAULT_QUALIFIERS_PER_GROUP,
    MAX_TEAMS_PER_GROUP,
)
from kendotaikai.exceptions import InvalidConfigurationException
from kendotaikai.models.bracket import Bracket
from kendotaikai.models.enums import TournamentStatus
from kendotaikai.models.group import Group
from kendotaikai.models.team import Team
from kendotaikai.utils import generate_id, utc_now_iso


@dataclass
class TournamentConfig:
    """Configuration settings for a tournament.

    Attributes:
        name: Tournament name
        requested_groups: Seed groups to aim for (more are opened if needed)
        max_teams_per_group: Upper bound on seed group size
        qualifiers_per_group: Teams per group advancing to the bracket,
            None to advance every team
        duel_time_limit: Duel length in seconds
    """

    name: str
    requested_groups: int = DEFAULT_GROUP_COUNT
    max_teams_per_group: int = MAX_TEAMS_PER_GROUP
    qualifiers_per_group: Optional[int] = DEFAULT_QUALIFIERS_PER_GROUP
    duel_time_limit: int = DEFAULT_DUEL_TIME_LIMIT

    def validate(self) -> None:
        """Raise InvalidConfigurationException on out-of-range settings."""
        if self.requested_groups < 1:
            raise InvalidConfigurationException(
                f"requested_groups must be at least 1, got {self.requested_groups}"
            )
        if not 1 <= self.max_teams_per_group <= MAX_TEAMS_PER_GROUP:
            raise InvalidConfigurationException(
                f"max_teams_per_group must be between 1 and {MAX_TEAMS_PER_GROUP}, "
                f"got {self.max_teams_per_group}"
            )
        if self.qualifiers_per_group is not None and self.qualifiers_per_group < 1:
            raise InvalidConfigurationException(
                "qualifiers_per_group must be at least 1 or None"
            )
        if self.duel_time_limit <= 0:
            raise InvalidConfigurationException("duel_time_limit must be positive")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "requested_groups": self.requested_groups,
            "max_teams_per_group": self.max_teams_per_group,
            "qualifiers_per_group": self.qualifiers_per_group,
            "duel_time_limit": self.duel_time_limit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            name=data.get("name", "Untitled Taikai"),
            requested_groups=data.get("requested_groups", DEFAULT_GROUP_COUNT),
            max_teams_per_group=data.get("max_teams_per_group", MAX_TEAMS_PER_GROUP),
            qualifiers_per_group=data.get(
                "qualifiers_per_group", DEFAULT_QUALIFIERS_PER_GROUP
            ),
            duel_time_limit=data.get("duel_time_limit", DEFAULT_DUEL_TIME_LIMIT),
        )


@dataclass
class Tournament:
    """Full tournament state, owned and persisted by the caller.

    Attributes:
        config: Tournament settings
        status: Current stage
        teams: Registered teams
        seed_groups: Groups of the seed stage
        bracket: Main stage bracket once built
    """

    config: TournamentConfig
    status: TournamentStatus = TournamentStatus.REGISTRATION
    teams: List[Team] = field(default_factory=list)
    seed_groups: List[Group] = field(default_factory=list)
    bracket: Optional[Bracket] = None
    id: str = field(default_factory=lambda: generate_id("Tournament"))
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    completed_at: Optional[str] = None

    @property
    def name(self) -> str:
        return self.config.name

    def get_team(self, team_id: str) -> Optional[Team]:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def get_group(self, group_id: str) -> Optional[Group]:
        for group in self.seed_groups:
            if group.id == group_id:
                return group
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary."""
        return {
            "id": self.id,
            "config": self.config.to_dict(),
            "status": self.status.value,
            "teams": [t.to_dict() for t in self.teams],
            "seed_groups": [g.to_dict() for g in self.seed_groups],
            "bracket": self.bracket.to_dict() if self.bracket else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Deserialize tournament from dictionary."""
        bracket = data.get("bracket")
        return cls(
            id=data["id"],
            config=TournamentConfig.from_dict(data.get("config", {})),
            status=TournamentStatus(
                data.get("status", TournamentStatus.REGISTRATION.value)
            ),
            teams=[Team.from_dict(t) for t in data.get("teams", [])],
            seed_groups=[Group.from_dict(g) for g in data.get("seed_groups", [])],
            bracket=Bracket.from_dict(bracket) if bracket else None,
            created_at=data.get("created_at") or utc_now_iso(),
            updated_at=data.get("updated_at") or utc_now_iso(),
            completed_at=data.get("completed_at"),
        )
