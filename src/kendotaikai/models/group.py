"""Seed group and standings models."""

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

from kendotaikai.models.match import Match
from kendotaikai.models.team import Team


@dataclass
class TeamStanding:
    """Derived group tally for one team.

    Attributes:
        team_id: Team the tally belongs to
        wins: Team matches won
        losses: Team matches lost
        points: 2 per win, 1 per draw
        ranking: 1-based position, 0 until ranked
    """

    team_id: str
    wins: int = 0
    losses: int = 0
    points: int = 0
    ranking: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "wins": self.wins,
            "losses": self.losses,
            "points": self.points,
            "ranking": self.ranking,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamStanding":
        return cls(
            team_id=data["team_id"],
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            points=data.get("points", 0),
            ranking=data.get("ranking", 0),
        )


@dataclass
class Group:
    """A round-robin seed group of up to three teams.

    Attributes:
        id: Group id (``group_1``, ``group_2`` ...)
        name: Display name (``Group A``, ``Group B`` ...)
        teams: Member teams, fixed once the group is created
        matches: Round-robin fixtures between the members
        standings: Current standings, ordered by ranking
    """

    id: str
    name: str
    teams: List[Team] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)
    standings: List[TeamStanding] = field(default_factory=list)

    @property
    def team_ids(self) -> List[str]:
        return [t.id for t in self.teams]

    @property
    def is_complete(self) -> bool:
        """All fixtures of the group are completed."""
        return all(m.is_completed for m in self.matches)

    def get_team(self, team_id: str) -> Optional[Team]:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def get_match(self, match_id: str) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize group to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "teams": [t.to_dict() for t in self.teams],
            "matches": [m.to_dict() for m in self.matches],
            "standings": [s.to_dict() for s in self.standings],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Group":
        """Deserialize group from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            teams=[Team.from_dict(t) for t in data.get("teams", [])],
            matches=[Match.from_dict(m) for m in data.get("matches", [])],
            standings=[TeamStanding.from_dict(s) for s in data.get("standings", [])],
        )
