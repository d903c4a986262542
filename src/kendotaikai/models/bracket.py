"""Double-elimination bracket models.

Matches live in a single list (the arena) and refer to each other by index,
so ``next_winner_match`` and ``next_loser_match`` are positions in
``Bracket.matches``.
"""

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

from kendotaikai.models.enums import BracketMatchStatus, BracketSide
from kendotaikai.models.team import Team


@dataclass
class BracketMatch:
    """One slot-pair in the bracket.

    Attributes:
        index: Position in ``Bracket.matches``
        round: Round number within its side
        side: Winners, losers or grand final
        position: 1-based order inside the round
        team1_id: First filled slot
        team2_id: Second filled slot
        expected_teams: How many teams will ever arrive (1 for a bye)
        next_winner_match: Index the winner moves to
        next_loser_match: Index the loser drops to (winners side only)
    """

    index: int
    round: int
    side: BracketSide
    position: int
    team1_id: Optional[str] = None
    team2_id: Optional[str] = None
    winner_id: Optional[str] = None
    loser_id: Optional[str] = None
    status: BracketMatchStatus = BracketMatchStatus.PENDING
    expected_teams: int = 2
    next_winner_match: Optional[int] = None
    next_loser_match: Optional[int] = None

    @property
    def is_bye(self) -> bool:
        return self.expected_teams == 1

    @property
    def is_completed(self) -> bool:
        return self.status is BracketMatchStatus.COMPLETED

    @property
    def team_ids(self) -> List[str]:
        return [t for t in (self.team1_id, self.team2_id) if t is not None]

    @property
    def label(self) -> str:
        if self.side is BracketSide.GRAND_FINAL:
            return "grand_final"
        kind = "bye" if self.is_bye else "m"
        return f"{self.side.value}_r{self.round}_{kind}{self.position}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "round": self.round,
            "side": self.side.value,
            "position": self.position,
            "team1_id": self.team1_id,
            "team2_id": self.team2_id,
            "winner_id": self.winner_id,
            "loser_id": self.loser_id,
            "status": self.status.value,
            "expected_teams": self.expected_teams,
            "next_winner_match": self.next_winner_match,
            "next_loser_match": self.next_loser_match,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BracketMatch":
        return cls(
            index=data["index"],
            round=data["round"],
            side=BracketSide(data["side"]),
            position=data["position"],
            team1_id=data.get("team1_id"),
            team2_id=data.get("team2_id"),
            winner_id=data.get("winner_id"),
            loser_id=data.get("loser_id"),
            status=BracketMatchStatus(
                data.get("status", BracketMatchStatus.PENDING.value)
            ),
            expected_teams=data.get("expected_teams", 2),
            next_winner_match=data.get("next_winner_match"),
            next_loser_match=data.get("next_loser_match"),
        )


@dataclass
class Bracket:
    """A double-elimination bracket.

    Attributes:
        teams: Qualified teams in seed order
        matches: Every bracket match, addressed by index
        winners_rounds: Number of winners-bracket rounds
        losers_rounds: Number of losers-bracket rounds reserved
        grand_final_index: Index of the grand final in ``matches``
    """

    teams: List[Team] = field(default_factory=list)
    matches: List[BracketMatch] = field(default_factory=list)
    winners_rounds: int = 0
    losers_rounds: int = 0
    grand_final_index: Optional[int] = None

    @property
    def winners_matches(self) -> List[BracketMatch]:
        return [m for m in self.matches if m.side is BracketSide.WINNERS]

    @property
    def losers_matches(self) -> List[BracketMatch]:
        return [m for m in self.matches if m.side is BracketSide.LOSERS]

    @property
    def grand_final(self) -> Optional[BracketMatch]:
        if self.grand_final_index is None:
            return None
        return self.matches[self.grand_final_index]

    @property
    def total_rounds(self) -> int:
        return self.winners_rounds + self.losers_rounds + 1

    @property
    def is_completed(self) -> bool:
        final = self.grand_final
        return final is not None and final.is_completed

    def round_matches(self, side: BracketSide, round_number: int) -> List[BracketMatch]:
        return [m for m in self.matches if m.side is side and m.round == round_number]

    def get_team(self, team_id: str) -> Optional[Team]:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize bracket to dictionary."""
        return {
            "teams": [t.to_dict() for t in self.teams],
            "matches": [m.to_dict() for m in self.matches],
            "winners_rounds": self.winners_rounds,
            "losers_rounds": self.losers_rounds,
            "grand_final_index": self.grand_final_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bracket":
        """Deserialize bracket from dictionary."""
        return cls(
            teams=[Team.from_dict(t) for t in data.get("teams", [])],
            matches=[BracketMatch.from_dict(m) for m in data.get("matches", [])],
            winners_rounds=data.get("winners_rounds", 0),
            losers_rounds=data.get("losers_rounds", 0),
            grand_final_index=data.get("grand_final_index"),
        )
