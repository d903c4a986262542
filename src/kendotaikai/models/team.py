"""Team model: a dojo's entry with an ordered roster."""

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

from kendotaikai.constants import TEAM_SIZE
from kendotaikai.models.participant import Participant
from kendotaikai.type_hints import Lineup
from kendotaikai.utils import generate_id


@dataclass
class Team:
    """A team entered by a dojo.

    Roster order defines duel positions: ``players[0]`` fights duel 1,
    ``players[1]`` duel 2 and so on up to seven.

    Attributes:
        name: Team name
        dojo_id: Affiliation the team belongs to
        players: Ordered roster (at most seven)
        seed_ranking: Global seed after the group stage
        group_ranking: Finishing position inside its seed group
        final_ranking: Placement after the bracket
        id: Unique identifier (generated when not supplied)
    """

    name: str
    dojo_id: str
    players: List[Participant] = field(default_factory=list)
    seed_ranking: Optional[int] = None
    group_ranking: Optional[int] = None
    final_ranking: Optional[int] = None
    id: str = field(default_factory=lambda: generate_id("Team"))

    def lineup(self) -> Lineup:
        """Participant ids for duel positions 1-7, None where the slot is empty."""
        ids: Lineup = [p.id for p in self.players[:TEAM_SIZE]]
        ids.extend([None] * (TEAM_SIZE - len(ids)))
        return ids

    def to_dict(self) -> Dict[str, Any]:
        """Serialize team to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "dojo_id": self.dojo_id,
            "players": [p.to_dict() for p in self.players],
            "seed_ranking": self.seed_ranking,
            "group_ranking": self.group_ranking,
            "final_ranking": self.final_ranking,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        """Deserialize team from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            dojo_id=data["dojo_id"],
            players=[Participant.from_dict(p) for p in data.get("players", [])],
            seed_ranking=data.get("seed_ranking"),
            group_ranking=data.get("group_ranking"),
            final_ranking=data.get("final_ranking"),
        )

    def __str__(self) -> str:
        return self.name
