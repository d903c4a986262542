"""Random Tournament Generator (RTG) - end-to-end simulation of a taikai.

This module generates random dojos, teams and rosters and plays a whole
tournament through the real engines: seed groups, every duel of every team
match, overtime where needed and the double-elimination bracket.
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

import json
import random
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from kendotaikai.constants import DEFAULT_GROUP_COUNT, DEFAULT_QUALIFIERS_PER_GROUP
from kendotaikai.controllers import team_match
from kendotaikai.controllers.bracket import get_ready_matches
from kendotaikai.controllers.overtime import add_overtime_strike, start_overtime
from kendotaikai.controllers.tournament import TournamentManager
from kendotaikai.exceptions import TournamentStateException
from kendotaikai.models.enums import (
    ActionKind,
    KendoRank,
    MatchStatus,
    Side,
    STRIKE_KINDS,
    TournamentStatus,
)
from kendotaikai.models.match import Match
from kendotaikai.models.participant import Participant, rank_order, sort_by_rank
from kendotaikai.models.team import Team
from kendotaikai.models.tournament import Tournament, TournamentConfig
from kendotaikai.utils import setup_logger

logger = setup_logger(__name__)

DOJO_NAMES = [
    "Kodokan",
    "Mumeishi",
    "Shidogakuin",
    "Tora",
    "Hizen",
    "Yushinkan",
    "Renshinkan",
    "Fudoshin",
    "Seishinkan",
    "Kenyukai",
]

STRIKES = sorted(STRIKE_KINDS, key=lambda k: k.value)


class ResultPattern(Enum):
    """How duel exchanges are decided."""

    REALISTIC = "realistic"  # higher grades strike more often
    RANDOM = "random"  # every exchange is a coin flip


@dataclass
class SimulationConfig:
    """Configuration for Random Tournament Generator."""

    num_teams: int
    num_dojos: int = 3
    roster_size_range: Tuple[int, int] = (5, 7)
    requested_groups: int = DEFAULT_GROUP_COUNT
    qualifiers_per_group: Optional[int] = DEFAULT_QUALIFIERS_PER_GROUP
    result_pattern: ResultPattern = ResultPattern.REALISTIC
    foul_rate: float = 0.08
    idle_rate: float = 0.35
    max_exchanges: int = 6
    seed: Optional[int] = None
    tournament_name: str = "RTG Taikai"


class TeamFactory:
    """Factory for creating random dojos, teams and rosters."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng

    def create_teams(self) -> List[Team]:
        """Create teams spread round-robin over the configured dojos."""
        dojo_count = max(1, min(self.config.num_dojos, len(DOJO_NAMES)))
        dojos = DOJO_NAMES[:dojo_count]
        counters: Dict[str, int] = {}
        teams = []

        for i in range(self.config.num_teams):
            dojo = dojos[i % dojo_count]
            counters[dojo] = counters.get(dojo, 0) + 1
            name = f"{dojo} {chr(ord('A') + counters[dojo] - 1)}"
            low, high = self.config.roster_size_range
            roster = [
                self._create_participant(f"{name} #{p + 1}")
                for p in range(self.random.randint(low, high))
            ]
            teams.append(
                Team(name=name, dojo_id=dojo.lower(), players=roster, id=f"team_{i + 1}")
            )

        logger.info(f"Created {len(teams)} teams from {dojo_count} dojos")
        return teams

    def _create_participant(self, name: str) -> Participant:
        ranks = list(KendoRank)
        # Weighted towards kyu and low dan grades
        weights = [1] + [1] * 10 + [3, 3, 2, 2, 1, 1, 1, 1]
        return Participant(
            name=name,
            kendo_rank=self.random.choices(ranks, weights=weights)[0],
            date_of_birth=date(self.random.randint(1960, 2008), 1, 1),
        )


class DuelSimulator:
    """Plays the duels of a team match through the scoring engine."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng
        self.participants: Dict[str, Participant] = {}

    def register(self, teams: List[Team]) -> None:
        for team in teams:
            for player in team.players:
                self.participants[player.id] = player

    def _strength(self, participant_id: Optional[str]) -> int:
        player = self.participants.get(participant_id)
        return 1 + rank_order(player.kendo_rank if player else None)

    def _pick_side(self, team1_player: str, team2_player: str) -> Side:
        if self.config.result_pattern is ResultPattern.RANDOM:
            return Side.TEAM1 if self.random.random() < 0.5 else Side.TEAM2
        s1 = self._strength(team1_player)
        s2 = self._strength(team2_player)
        return Side.TEAM1 if self.random.random() < s1 / (s1 + s2) else Side.TEAM2

    def play_set(self, match: Match, set_number: int) -> Match:
        """Fight one duel to two points or until the clock runs out."""
        duel = match.scores.get_set(set_number)
        players = {Side.TEAM1: duel.team1_player_id, Side.TEAM2: duel.team2_player_id}

        for _ in range(self.config.max_exchanges):
            roll = self.random.random()
            if roll < self.config.idle_rate:
                continue
            if roll < self.config.idle_rate + self.config.foul_rate:
                side = Side.TEAM1 if self.random.random() < 0.5 else Side.TEAM2
                kind = ActionKind.HANSOKU
            else:
                side = self._pick_side(players[Side.TEAM1], players[Side.TEAM2])
                kind = self.random.choice(STRIKES)
            match = team_match.record_action(match, set_number, players[side], kind)
            if match.scores.get_set(set_number).is_completed:
                return match

        return team_match.expire_set_time(match, set_number, 0)

    def play_overtime(self, match: Match) -> Match:
        """Nominate the highest graded fielded player of each team and fight."""
        nominees = {}
        for side in (Side.TEAM1, Side.TEAM2):
            fielded = [
                self.participants[pid]
                for pid in (s.player_id_for(side) for s in match.scores.player_sets)
                if pid in self.participants
            ]
            nominees[side] = sort_by_rank(fielded)[0].id

        match = start_overtime(match, nominees[Side.TEAM1], nominees[Side.TEAM2])
        side = self._pick_side(nominees[Side.TEAM1], nominees[Side.TEAM2])
        return add_overtime_strike(match, nominees[side], self.random.choice(STRIKES))

    def play_match(self, match: Match) -> Match:
        """Play every open duel, then overtime if the match is tied."""
        next_set = team_match.get_next_set(match)
        while next_set is not None and match.status is MatchStatus.IN_PROGRESS:
            match = self.play_set(match, next_set.set_number)
            next_set = team_match.get_next_set(match)

        if match.status is MatchStatus.OVERTIME:
            match = self.play_overtime(match)
        return match


class RandomTournamentGenerator:
    """Random Tournament Generator for end-to-end engine runs."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.team_factory = TeamFactory(config, self.random)
        self.duel_simulator = DuelSimulator(config, self.random)
        self.manager = TournamentManager()
        self.played_matches: List[Match] = []

    def generate_complete_tournament(self) -> Tournament:
        """Create teams and play the tournament through to its final ranking."""
        logger.info(
            f"Generating tournament: {self.config.num_teams} teams, "
            f"{self.config.num_dojos} dojos"
        )
        teams = self.team_factory.create_teams()
        self.duel_simulator.register(teams)

        tournament = self.manager.create_tournament(
            TournamentConfig(
                name=self.config.tournament_name,
                requested_groups=self.config.requested_groups,
                qualifiers_per_group=self.config.qualifiers_per_group,
            ),
            teams,
        )
        tournament = self.manager.start_seed_stage(tournament)
        tournament = self._play_seed_stage(tournament)
        tournament = self.manager.advance_to_main_stage(tournament)
        tournament = self._play_main_stage(tournament)

        logger.info("Tournament generation complete")
        return tournament

    def _play_seed_stage(self, tournament: Tournament) -> Tournament:
        for group in tournament.seed_groups:
            for fixture in group.matches:
                match = self.manager.start_group_match(tournament, group.id, fixture.id)
                match = self.duel_simulator.play_match(match)
                self.played_matches.append(match)
                tournament = self.manager.record_group_match(tournament, group.id, match)
        return tournament

    def _play_main_stage(self, tournament: Tournament) -> Tournament:
        while tournament.status is TournamentStatus.MAIN:
            ready = get_ready_matches(tournament.bracket)
            if not ready:
                raise TournamentStateException("Bracket has no playable match left")
            index = ready[0].index
            match = self.manager.create_bracket_match(tournament, index)
            match = self.duel_simulator.play_match(match)
            self.played_matches.append(match)
            tournament = self.manager.record_bracket_match(tournament, index, match)
        return tournament

    def export_json_format(self, tournament: Tournament) -> str:
        export_data = {
            "simulation_config": {
                "num_teams": self.config.num_teams,
                "num_dojos": self.config.num_dojos,
                "requested_groups": self.config.requested_groups,
                "result_pattern": self.config.result_pattern.value,
                "seed": self.config.seed,
            },
            "tournament": tournament.to_dict(),
            "matches": [m.to_dict() for m in self.played_matches],
        }
        return json.dumps(export_data, indent=2)


def create_small_tournament(
    num_teams: int = 6, seed: Optional[int] = None
) -> RandomTournamentGenerator:
    """Create small tournament for testing."""
    config = SimulationConfig(num_teams=num_teams, num_dojos=2, requested_groups=2, seed=seed)
    return RandomTournamentGenerator(config)


def create_normal_tournament(
    num_teams: int = 12, seed: Optional[int] = None
) -> RandomTournamentGenerator:
    """Create standard tournament for development testing."""
    config = SimulationConfig(num_teams=num_teams, num_dojos=4, seed=seed)
    return RandomTournamentGenerator(config)
