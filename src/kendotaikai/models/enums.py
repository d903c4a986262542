"""Enumerations shared by the Kendo Taikai models."""

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

from enum import Enum

from kendotaikai.type_hints import TEAM1, TEAM2


class ActionKind(Enum):
    """Every kind of entry in a duel action log."""

    MEN = "men"
    KOTE = "kote"
    TSUKI = "tsuki"
    DO = "do"
    HANSOKU = "hansoku"
    HANSOKU_POINT = "hansoku_point"

    @property
    def is_strike(self) -> bool:
        """Valid target strikes (yuko-datotsu)."""
        return self in STRIKE_KINDS

    @property
    def scores_point(self) -> bool:
        """Kinds that count towards a side's point total."""
        return self in POINT_KINDS


STRIKE_KINDS = frozenset(
    {ActionKind.MEN, ActionKind.KOTE, ActionKind.TSUKI, ActionKind.DO}
)
POINT_KINDS = STRIKE_KINDS | {ActionKind.HANSOKU_POINT}


class Side(Enum):
    """One of the two teams in a match."""

    TEAM1 = TEAM1
    TEAM2 = TEAM2

    @property
    def opponent(self) -> "Side":
        return Side.TEAM2 if self is Side.TEAM1 else Side.TEAM1


class DuelResult(Enum):
    """Result recorded on a single duel (set)."""

    PENDING = "pending"
    WIN = "win"
    DRAW = "draw"
    FORFEIT = "forfeit"
    TIME_EXPIRED = "time_expired"


class DuelOutcome(Enum):
    """Manual result a moderator may enter for a duel.

    ``FORFEIT_TEAM1`` means team1 forfeits the duel, so team2 takes the set.
    """

    TEAM1_WIN = "team1_win"
    TEAM2_WIN = "team2_win"
    DRAW = "draw"
    FORFEIT_TEAM1 = "forfeit_team1"
    FORFEIT_TEAM2 = "forfeit_team2"


class MatchStatus(Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    OVERTIME = "overtime"
    COMPLETED = "completed"


class MatchStage(Enum):
    SEED = "seed"
    MAIN = "main"


class BracketSide(Enum):
    WINNERS = "winners"
    LOSERS = "losers"
    GRAND_FINAL = "grand_final"


class BracketMatchStatus(Enum):
    PENDING = "pending"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TournamentStatus(Enum):
    REGISTRATION = "registration"
    SEED = "seed"
    MAIN = "main"
    COMPLETED = "completed"


class KendoRank(Enum):
    """Kendo grades in ascending order (Mudansha is ungraded)."""

    MUDANSHA = "Mudansha"
    KYU_10 = "10 Kyu"
    KYU_9 = "9 Kyu"
    KYU_8 = "8 Kyu"
    KYU_7 = "7 Kyu"
    KYU_6 = "6 Kyu"
    KYU_5 = "5 Kyu"
    KYU_4 = "4 Kyu"
    KYU_3 = "3 Kyu"
    KYU_2 = "2 Kyu"
    KYU_1 = "1 Kyu"
    DAN_1 = "1 Dan"
    DAN_2 = "2 Dan"
    DAN_3 = "3 Dan"
    DAN_4 = "4 Dan"
    DAN_5 = "5 Dan"
    DAN_6 = "6 Dan"
    DAN_7 = "7 Dan"
    DAN_8 = "8 Dan"
