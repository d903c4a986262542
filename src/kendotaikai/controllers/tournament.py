"""Tournament stage progression.

Registration, seed groups, the double-elimination main stage and
completion. The manager holds no tournament state of its own: every method
takes the current :class:`Tournament` and returns the next one.
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

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from kendotaikai.constants import MIN_TEAMS_FOR_SEED_STAGE, SAVE_FILE_EXTENSION
from kendotaikai.controllers.bracket import (
    advance_after_match,
    assign_final_rankings,
    find_match,
    generate_bracket,
)
from kendotaikai.controllers.seeding import generate_seed_groups
from kendotaikai.controllers.standings import get_qualified_teams, update_group_standings
from kendotaikai.controllers.team_match import finalize_match, start_match
from kendotaikai.exceptions import (
    BracketAdvanceException,
    DuplicateTeamException,
    FileLoadException,
    FileSaveException,
    InvalidSeedingInputException,
    MatchStateException,
    PrematureAdvancementException,
    TeamNotFoundException,
    TournamentStateException,
)
from kendotaikai.models.enums import MatchStage, MatchStatus, TournamentStatus
from kendotaikai.models.group import Group
from kendotaikai.models.match import Match
from kendotaikai.models.scoring import MatchScore, empty_player_sets
from kendotaikai.models.team import Team
from kendotaikai.models.tournament import Tournament, TournamentConfig
from kendotaikai.utils import setup_logger, utc_now_iso
from kendotaikai.utils.validation import validate_team_roster_strict

logger = setup_logger(__name__)


@dataclass
class TournamentProgress:
    """Match counts across seed groups and bracket."""

    total_matches: int
    completed_matches: int
    remaining_matches: int
    percentage: int


class TournamentManager:
    """Moves a tournament through its stages.

    This class is responsible for:
    - Registering and withdrawing teams
    - Generating seed groups and recording their results
    - Building the bracket once every group match is finished
    - Advancing the bracket and assigning final rankings
    """

    def create_tournament(
        self, config: TournamentConfig, teams: Iterable[Team] = ()
    ) -> Tournament:
        """New tournament in registration with the given teams."""
        config.validate()
        tournament = Tournament(config=copy.deepcopy(config))
        for team in teams:
            tournament = self.register_team(tournament, team)
        logger.info(f"Created tournament {config.name}")
        return tournament

    def _require_status(self, tournament: Tournament, status: TournamentStatus) -> None:
        if tournament.status is not status:
            raise TournamentStateException(
                f"Tournament {tournament.name} is in {tournament.status.value}, "
                f"expected {status.value}"
            )

    # ========== Registration ==========

    def register_team(self, tournament: Tournament, team: Team) -> Tournament:
        """Add a team during registration.

        Raises:
            TournamentStateException: If registration is closed
            DuplicateTeamException: If the team id is already registered
            RosterValidationException: If the roster cannot be used
        """
        self._require_status(tournament, TournamentStatus.REGISTRATION)
        if tournament.get_team(team.id) is not None:
            raise DuplicateTeamException(f"Team {team.id} is already registered")
        validate_team_roster_strict(team)

        updated = copy.deepcopy(tournament)
        updated.teams.append(copy.deepcopy(team))
        updated.updated_at = utc_now_iso()
        logger.debug(f"Registered {team.name} ({team.dojo_id})")
        return updated

    def withdraw_team(self, tournament: Tournament, team_id: str) -> Tournament:
        """Remove a team during registration."""
        self._require_status(tournament, TournamentStatus.REGISTRATION)
        if tournament.get_team(team_id) is None:
            raise TeamNotFoundException(f"Team {team_id} is not registered")

        updated = copy.deepcopy(tournament)
        updated.teams = [t for t in updated.teams if t.id != team_id]
        updated.updated_at = utc_now_iso()
        return updated

    # ========== Seed Stage ==========

    def start_seed_stage(self, tournament: Tournament) -> Tournament:
        """Close registration and generate the seed groups.

        Raises:
            TournamentStateException: If the tournament is past registration
            InvalidSeedingInputException: If fewer than two teams registered
        """
        self._require_status(tournament, TournamentStatus.REGISTRATION)
        if len(tournament.teams) < MIN_TEAMS_FOR_SEED_STAGE:
            raise InvalidSeedingInputException(
                f"At least {MIN_TEAMS_FOR_SEED_STAGE} teams are needed, "
                f"{len(tournament.teams)} registered"
            )

        config = tournament.config
        updated = copy.deepcopy(tournament)
        updated.seed_groups = generate_seed_groups(
            updated.teams,
            requested_groups=config.requested_groups,
            max_per_group=config.max_teams_per_group,
            tournament_id=updated.id,
            time_limit=config.duel_time_limit,
        )
        updated.status = TournamentStatus.SEED
        updated.updated_at = utc_now_iso()
        logger.info(f"{tournament.name}: seed stage started")
        return updated

    def _group_or_raise(self, tournament: Tournament, group_id: str) -> Group:
        group = tournament.get_group(group_id)
        if group is None:
            raise TournamentStateException(f"No seed group {group_id}")
        return group

    def start_group_match(
        self, tournament: Tournament, group_id: str, match_id: str
    ) -> Match:
        """Started team match for a group fixture, built from the rosters."""
        self._require_status(tournament, TournamentStatus.SEED)
        group = self._group_or_raise(tournament, group_id)
        match = group.get_match(match_id)
        if match is None:
            raise TournamentStateException(f"{group.name} has no match {match_id}")
        return start_match(
            match, group.get_team(match.team1_id), group.get_team(match.team2_id)
        )

    def record_group_match(
        self, tournament: Tournament, group_id: str, match: Match
    ) -> Tournament:
        """Store a group match and recompute that group's standings.

        The match replaces the fixture with the same id, so a corrected result
        simply overwrites the earlier one. A match reported as completed is
        finalized from its duel scores first: the winner is recomputed and a
        tie is stored back in overtime.

        Raises:
            MatchStateException: If a completed match still has open duels
        """
        self._require_status(tournament, TournamentStatus.SEED)
        group = self._group_or_raise(tournament, group_id)
        if group.get_match(match.id) is None:
            raise TournamentStateException(f"{group.name} has no match {match.id}")
        if match.status is MatchStatus.COMPLETED or match.winner_id is not None:
            match = finalize_match(match)

        updated = copy.deepcopy(tournament)
        groups = []
        for existing in updated.seed_groups:
            if existing.id == group_id:
                existing.matches = [
                    copy.deepcopy(match) if m.id == match.id else m
                    for m in existing.matches
                ]
                existing = update_group_standings(existing)
            groups.append(existing)
        updated.seed_groups = groups
        updated.updated_at = utc_now_iso()
        return updated

    # ========== Main Stage ==========

    def advance_to_main_stage(self, tournament: Tournament) -> Tournament:
        """Build the bracket from the group qualifiers.

        Raises:
            TournamentStateException: If the seed stage is not running
            PrematureAdvancementException: If any group match is unfinished
        """
        self._require_status(tournament, TournamentStatus.SEED)
        unfinished = [
            m.id
            for g in tournament.seed_groups
            for m in g.matches
            if not m.is_completed
        ]
        if unfinished:
            raise PrematureAdvancementException(
                f"{len(unfinished)} group matches are not completed: "
                + ", ".join(unfinished)
            )

        updated = copy.deepcopy(tournament)
        updated.seed_groups = [update_group_standings(g) for g in updated.seed_groups]
        qualified = get_qualified_teams(
            updated.seed_groups, updated.config.qualifiers_per_group
        )
        updated.bracket = generate_bracket(qualified)

        seeds = {t.id: t for t in qualified}
        for team in updated.teams:
            if team.id in seeds:
                team.seed_ranking = seeds[team.id].seed_ranking
                team.group_ranking = seeds[team.id].group_ranking

        updated.status = TournamentStatus.MAIN
        updated.updated_at = utc_now_iso()
        logger.info(f"{tournament.name}: main stage started with {len(qualified)} teams")
        return updated

    def create_bracket_match(self, tournament: Tournament, match_index: int) -> Match:
        """Started team match for a ready bracket match."""
        self._require_status(tournament, TournamentStatus.MAIN)
        slot = find_match(tournament.bracket, match_index)
        if len(slot.team_ids) != 2 or slot.is_completed:
            raise BracketAdvanceException(f"Match {slot.label} is not ready to play")

        team1 = tournament.bracket.get_team(slot.team1_id)
        team2 = tournament.bracket.get_team(slot.team2_id)
        time_limit = tournament.config.duel_time_limit
        match = Match(
            id=f"bracket_{slot.label}",
            team1_id=team1.id,
            team2_id=team2.id,
            stage=MatchStage.MAIN,
            scores=MatchScore(player_sets=empty_player_sets(time_limit)),
            tournament_id=tournament.id,
        )
        return start_match(match, team1, team2)

    def record_bracket_result(
        self, tournament: Tournament, match_index: int, winner_id: str, loser_id: str
    ) -> Tournament:
        """Advance the bracket; completing the grand final ends the tournament."""
        self._require_status(tournament, TournamentStatus.MAIN)

        updated = copy.deepcopy(tournament)
        updated.bracket = advance_after_match(
            updated.bracket, match_index, winner_id, loser_id
        )
        updated.updated_at = utc_now_iso()

        if updated.bracket.is_completed:
            updated.bracket = assign_final_rankings(updated.bracket)
            placements = {t.id: t.final_ranking for t in updated.bracket.teams}
            for team in updated.teams:
                team.final_ranking = placements.get(team.id)
            updated.status = TournamentStatus.COMPLETED
            updated.completed_at = utc_now_iso()
            logger.info(
                f"{tournament.name} completed, champion {updated.bracket.grand_final.winner_id}"
            )
        return updated

    def record_bracket_match(
        self, tournament: Tournament, match_index: int, match: Match
    ) -> Tournament:
        """Advance the bracket with the outcome of a finished team match.

        The winner is taken from the finalized duel scores, not from the
        reported match.

        Raises:
            MatchStateException: If duels are open or the match is still tied
        """
        if match.status is not MatchStatus.COMPLETED and match.winner_id is None:
            raise MatchStateException(f"Match {match.id} has no winner yet")
        match = finalize_match(match)
        if match.status is not MatchStatus.COMPLETED:
            raise MatchStateException(f"Match {match.id} is tied and needs overtime")
        return self.record_bracket_result(
            tournament, match_index, match.winner_id, match.loser_id
        )

    # ========== Reporting ==========

    def get_tournament_progress(self, tournament: Tournament) -> TournamentProgress:
        """Completed and remaining matches over groups and bracket (byes excluded)."""
        group_matches = [m for g in tournament.seed_groups for m in g.matches]
        total = len(group_matches)
        completed = sum(1 for m in group_matches if m.is_completed)

        if tournament.bracket is not None:
            played = [m for m in tournament.bracket.matches if not m.is_bye]
            total += len(played)
            completed += sum(1 for m in played if m.is_completed)

        percentage = round(completed / total * 100) if total else 0
        return TournamentProgress(
            total_matches=total,
            completed_matches=completed,
            remaining_matches=total - completed,
            percentage=percentage,
        )

    def get_final_standings(self, tournament: Tournament) -> List[Team]:
        """Placed teams ordered by final ranking."""
        placed = [t for t in tournament.teams if t.final_ranking is not None]
        return sorted(placed, key=lambda t: t.final_ranking)

    def get_champion(self, tournament: Tournament) -> Optional[Team]:
        if tournament.bracket is None or not tournament.bracket.is_completed:
            return None
        return tournament.get_team(tournament.bracket.grand_final.winner_id)


# ========== File I/O ==========


def save_tournament(tournament: Tournament, path: Union[str, Path]) -> Path:
    """Write a tournament to a JSON file.

    Raises:
        FileSaveException: If the file cannot be written
    """
    target = Path(path)
    if not target.suffix:
        target = target.with_suffix(SAVE_FILE_EXTENSION)
    try:
        target.write_text(json.dumps(tournament.to_dict(), indent=4), encoding="utf-8")
    except OSError as e:
        raise FileSaveException(f"Could not save tournament to {target}: {e}") from e
    logger.info(f"Tournament saved to {target}")
    return target


def load_tournament(path: Union[str, Path]) -> Tournament:
    """Read a tournament written by :func:`save_tournament`.

    Raises:
        FileLoadException: If the file is missing or not a tournament
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return Tournament.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise FileLoadException(f"Could not load tournament from {path}: {e}") from e


def load_teams(path: Union[str, Path]) -> List[Team]:
    """Read a JSON list of teams (or an object with a ``teams`` list).

    Raises:
        FileLoadException: If the file is missing or malformed
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("teams", [])
        return [Team.from_dict(t) for t in data]
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise FileLoadException(f"Could not load teams from {path}: {e}") from e
