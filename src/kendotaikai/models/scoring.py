"""Scoring data models: actions, duels, overtime and team match score.

These are plain data containers. The rules that change them live in
``kendotaikai.controllers.duel``, ``team_match`` and ``overtime``.
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

from kendotaikai.constants import DEFAULT_DUEL_TIME_LIMIT, TEAM_SIZE
from kendotaikai.models.enums import ActionKind, DuelResult, Side
from kendotaikai.utils import generate_id, utc_now_iso


def _side_or_none(value: Optional[str]) -> Optional[Side]:
    return Side(value) if value else None


@dataclass
class ScoringAction:
    """One entry in a duel's action log.

    Attributes:
        kind: Strike, foul (hansoku) or converted foul credit (hansoku_point)
        participant_id: Participant whose log holds the entry
        confirmed: Only confirmed actions count towards points
    """

    kind: ActionKind
    participant_id: str
    confirmed: bool = True
    timestamp: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=lambda: generate_id("Action"))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize action to dictionary."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "participant_id": self.participant_id,
            "timestamp": self.timestamp,
            "confirmed": self.confirmed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoringAction":
        """Deserialize action from dictionary."""
        return cls(
            id=data["id"],
            kind=ActionKind(data["kind"]),
            participant_id=data["participant_id"],
            timestamp=data.get("timestamp") or utc_now_iso(),
            confirmed=data.get("confirmed", True),
        )


@dataclass
class PlayerSetResult:
    """A single duel between the two teams' players at one roster position.

    Attributes:
        set_number: Duel position (1-7)
        team1_player_id: Team1 participant, None when the roster slot is empty
        team2_player_id: Team2 participant, None when the roster slot is empty
        result: Current duel result
        winner_side: Side that took the set, if any
        team1_actions: Action log of the team1 participant
        team2_actions: Action log of the team2 participant
        team1_points: Points derived from ``team1_actions``
        team2_points: Points derived from ``team2_actions``
        manual_override: Result was entered directly instead of scored
    """

    set_number: int
    team1_player_id: Optional[str] = None
    team2_player_id: Optional[str] = None
    result: DuelResult = DuelResult.PENDING
    winner_side: Optional[Side] = None
    team1_actions: List[ScoringAction] = field(default_factory=list)
    team2_actions: List[ScoringAction] = field(default_factory=list)
    team1_points: int = 0
    team2_points: int = 0
    time_limit: int = DEFAULT_DUEL_TIME_LIMIT
    time_remaining: int = DEFAULT_DUEL_TIME_LIMIT
    manual_override: bool = False
    started_at: Optional[str] = None
    completed_at: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def winner_id(self) -> Optional[str]:
        """Participant id of the set winner (None for draws and pending sets)."""
        if self.winner_side is None:
            return None
        return self.player_id_for(self.winner_side)

    @property
    def actions(self) -> List[ScoringAction]:
        """Both logs merged in timestamp order."""
        return sorted(
            self.team1_actions + self.team2_actions, key=lambda a: a.timestamp
        )

    def player_id_for(self, side: Side) -> Optional[str]:
        return self.team1_player_id if side is Side.TEAM1 else self.team2_player_id

    def actions_for(self, side: Side) -> List[ScoringAction]:
        return self.team1_actions if side is Side.TEAM1 else self.team2_actions

    def points_for(self, side: Side) -> int:
        return self.team1_points if side is Side.TEAM1 else self.team2_points

    def side_of(self, participant_id: str) -> Optional[Side]:
        """Which side a participant fights for in this duel, if any."""
        if participant_id and participant_id == self.team1_player_id:
            return Side.TEAM1
        if participant_id and participant_id == self.team2_player_id:
            return Side.TEAM2
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize duel to dictionary."""
        return {
            "set_number": self.set_number,
            "team1_player_id": self.team1_player_id,
            "team2_player_id": self.team2_player_id,
            "result": self.result.value,
            "winner_side": self.winner_side.value if self.winner_side else None,
            "winner_id": self.winner_id,
            "team1_actions": [a.to_dict() for a in self.team1_actions],
            "team2_actions": [a.to_dict() for a in self.team2_actions],
            "team1_points": self.team1_points,
            "team2_points": self.team2_points,
            "time_limit": self.time_limit,
            "time_remaining": self.time_remaining,
            "manual_override": self.manual_override,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerSetResult":
        """Deserialize duel from dictionary."""
        time_limit = data.get("time_limit", DEFAULT_DUEL_TIME_LIMIT)
        return cls(
            set_number=data["set_number"],
            team1_player_id=data.get("team1_player_id"),
            team2_player_id=data.get("team2_player_id"),
            result=DuelResult(data.get("result", DuelResult.PENDING.value)),
            winner_side=_side_or_none(data.get("winner_side")),
            team1_actions=[
                ScoringAction.from_dict(a) for a in data.get("team1_actions", [])
            ],
            team2_actions=[
                ScoringAction.from_dict(a) for a in data.get("team2_actions", [])
            ],
            team1_points=data.get("team1_points", 0),
            team2_points=data.get("team2_points", 0),
            time_limit=time_limit,
            time_remaining=data.get("time_remaining", time_limit),
            manual_override=data.get("manual_override", False),
            started_at=data.get("started_at"),
            completed_at=data.get("completed_at"),
        )


@dataclass
class CurrentBattle:
    """The duel currently on the court."""

    set_number: int
    team1_player_id: Optional[str]
    team2_player_id: Optional[str]
    started_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "set_number": self.set_number,
            "team1_player_id": self.team1_player_id,
            "team2_player_id": self.team2_player_id,
            "started_at": self.started_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CurrentBattle":
        return cls(
            set_number=data["set_number"],
            team1_player_id=data.get("team1_player_id"),
            team2_player_id=data.get("team2_player_id"),
            started_at=data.get("started_at") or utc_now_iso(),
        )


@dataclass
class OvertimeData:
    """Encho-sen between one nominee per team.

    Attributes:
        team1_player_id: Team1 nominee
        team2_player_id: Team2 nominee
        actions: Strikes recorded during overtime (the first one decides)
        winner_id: Nominee who struck first
        winner_side: Side of ``winner_id``
    """

    team1_player_id: str
    team2_player_id: str
    actions: List[ScoringAction] = field(default_factory=list)
    winner_id: Optional[str] = None
    winner_side: Optional[Side] = None
    started_at: str = field(default_factory=utc_now_iso)
    completed_at: Optional[str] = None

    @property
    def is_decided(self) -> bool:
        return self.winner_id is not None

    @property
    def winning_action(self) -> Optional[ScoringAction]:
        for action in self.actions:
            if action.participant_id == self.winner_id:
                return action
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize overtime to dictionary."""
        return {
            "team1_player_id": self.team1_player_id,
            "team2_player_id": self.team2_player_id,
            "actions": [a.to_dict() for a in self.actions],
            "winner_id": self.winner_id,
            "winner_side": self.winner_side.value if self.winner_side else None,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OvertimeData":
        """Deserialize overtime from dictionary."""
        return cls(
            team1_player_id=data["team1_player_id"],
            team2_player_id=data["team2_player_id"],
            actions=[ScoringAction.from_dict(a) for a in data.get("actions", [])],
            winner_id=data.get("winner_id"),
            winner_side=_side_or_none(data.get("winner_side")),
            started_at=data.get("started_at") or utc_now_iso(),
            completed_at=data.get("completed_at"),
        )


def empty_player_sets(time_limit: int = DEFAULT_DUEL_TIME_LIMIT) -> List[PlayerSetResult]:
    """Seven pending duels without participants."""
    return [
        PlayerSetResult(
            set_number=i + 1, time_limit=time_limit, time_remaining=time_limit
        )
        for i in range(TEAM_SIZE)
    ]


@dataclass
class MatchScore:
    """Team match aggregate: set wins, total points and the seven duels."""

    team1_wins: int = 0
    team2_wins: int = 0
    team1_total_points: int = 0
    team2_total_points: int = 0
    player_sets: List[PlayerSetResult] = field(default_factory=empty_player_sets)
    current_battle: Optional[CurrentBattle] = None

    def wins_for(self, side: Side) -> int:
        return self.team1_wins if side is Side.TEAM1 else self.team2_wins

    def points_for(self, side: Side) -> int:
        return (
            self.team1_total_points if side is Side.TEAM1 else self.team2_total_points
        )

    def get_set(self, set_number: int) -> PlayerSetResult:
        return self.player_sets[set_number - 1]

    @property
    def completed_sets(self) -> int:
        return sum(1 for s in self.player_sets if s.is_completed)

    @property
    def all_sets_completed(self) -> bool:
        return all(s.is_completed for s in self.player_sets)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize score to dictionary."""
        return {
            "team1_wins": self.team1_wins,
            "team2_wins": self.team2_wins,
            "team1_total_points": self.team1_total_points,
            "team2_total_points": self.team2_total_points,
            "player_sets": [s.to_dict() for s in self.player_sets],
            "current_battle": (
                self.current_battle.to_dict() if self.current_battle else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchScore":
        """Deserialize score from dictionary."""
        sets = [PlayerSetResult.from_dict(s) for s in data.get("player_sets", [])]
        battle = data.get("current_battle")
        return cls(
            team1_wins=data.get("team1_wins", 0),
            team2_wins=data.get("team2_wins", 0),
            team1_total_points=data.get("team1_total_points", 0),
            team2_total_points=data.get("team2_total_points", 0),
            player_sets=sets or empty_player_sets(),
            current_battle=CurrentBattle.from_dict(battle) if battle else None,
        )
