"""Team match model."""

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
from typing import Any, Dict, Optional

from kendotaikai.models.enums import MatchStage, MatchStatus, Side
from kendotaikai.models.scoring import MatchScore, OvertimeData
from kendotaikai.type_hints import TeamOutcomeReason
from kendotaikai.utils import utc_now_iso


@dataclass
class MatchDecision:
    """Outcome of evaluating a team match score.

    Attributes:
        winner_side: Winning side, None while undecided or tied
        needs_overtime: Set wins and total points are level
        reason: What decided the match
    """

    winner_side: Optional[Side]
    needs_overtime: bool
    reason: Optional[TeamOutcomeReason] = None


@dataclass
class Match:
    """A seven-duel team match between two teams.

    Attributes:
        id: Unique match id
        team1_id: First team
        team2_id: Second team
        stage: Seed group match or main bracket match
        status: Lifecycle status
        current_player_set: Duel position currently being fought (1-7)
        scores: Aggregate score and the seven duels
        winner_id: Winning team id once decided
        overtime: Encho-sen record when the match went to overtime
    """

    id: str
    team1_id: str
    team2_id: str
    stage: MatchStage = MatchStage.SEED
    status: MatchStatus = MatchStatus.SCHEDULED
    current_player_set: int = 1
    scores: MatchScore = field(default_factory=MatchScore)
    winner_id: Optional[str] = None
    overtime: Optional[OvertimeData] = None
    tournament_id: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    @property
    def is_completed(self) -> bool:
        return self.status is MatchStatus.COMPLETED

    @property
    def needs_overtime(self) -> bool:
        return self.status is MatchStatus.OVERTIME

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner_id is None:
            return None
        return self.team2_id if self.winner_id == self.team1_id else self.team1_id

    def team_id_for(self, side: Side) -> str:
        return self.team1_id if side is Side.TEAM1 else self.team2_id

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "tournament_id": self.tournament_id,
            "team1_id": self.team1_id,
            "team2_id": self.team2_id,
            "stage": self.stage.value,
            "status": self.status.value,
            "current_player_set": self.current_player_set,
            "scores": self.scores.to_dict(),
            "winner_id": self.winner_id,
            "overtime": self.overtime.to_dict() if self.overtime else None,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        overtime = data.get("overtime")
        return cls(
            id=data["id"],
            tournament_id=data.get("tournament_id"),
            team1_id=data["team1_id"],
            team2_id=data["team2_id"],
            stage=MatchStage(data.get("stage", MatchStage.SEED.value)),
            status=MatchStatus(data.get("status", MatchStatus.SCHEDULED.value)),
            current_player_set=data.get("current_player_set", 1),
            scores=MatchScore.from_dict(data.get("scores", {})),
            winner_id=data.get("winner_id") or None,
            overtime=OvertimeData.from_dict(overtime) if overtime else None,
            started_at=data.get("started_at"),
            completed_at=data.get("completed_at"),
            created_at=data.get("created_at") or utc_now_iso(),
            updated_at=data.get("updated_at") or utc_now_iso(),
        )
