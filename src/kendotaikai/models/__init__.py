"""Data models for Kendo Taikai."""

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

from kendotaikai.models.bracket import Bracket, BracketMatch
from kendotaikai.models.group import Group, TeamStanding
from kendotaikai.models.match import Match, MatchDecision
from kendotaikai.models.participant import Participant
from kendotaikai.models.scoring import (
    CurrentBattle,
    MatchScore,
    OvertimeData,
    PlayerSetResult,
    ScoringAction,
)
from kendotaikai.models.team import Team
from kendotaikai.models.tournament import Tournament, TournamentConfig

__all__ = [
    "Bracket",
    "BracketMatch",
    "CurrentBattle",
    "Group",
    "Match",
    "MatchDecision",
    "MatchScore",
    "OvertimeData",
    "Participant",
    "PlayerSetResult",
    "ScoringAction",
    "Team",
    "TeamStanding",
    "Tournament",
    "TournamentConfig",
]
