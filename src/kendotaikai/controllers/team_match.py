"""Team match engine: seven duels, aggregate score and the match decision.

A match is started from the two rosters, duels are scored through the
functions of :mod:`kendotaikai.controllers.duel`, and after every change the
set wins, total points, current duel and match status are recomputed from
the duels themselves.
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
from typing import List, Optional, Union

from kendotaikai.constants import (
    DEFAULT_DUEL_TIME_LIMIT,
    STATUS_TEXT_IN_PROGRESS,
    STATUS_TEXT_OVERTIME,
    TEAM_SIZE,
)
from kendotaikai.controllers import duel as duel_engine
from kendotaikai.exceptions import InvalidActionException, MatchStateException
from kendotaikai.models.enums import (
    ActionKind,
    DuelOutcome,
    DuelResult,
    MatchStatus,
    Side,
)
from kendotaikai.models.match import Match, MatchDecision
from kendotaikai.models.scoring import CurrentBattle, MatchScore, PlayerSetResult
from kendotaikai.models.team import Team
from kendotaikai.type_hints import Lineup
from kendotaikai.utils import setup_logger, utc_now_iso

logger = setup_logger(__name__)


# ========== Lineups ==========


def create_lineup_set(
    set_number: int,
    team1_player_id: Optional[str],
    team2_player_id: Optional[str],
    time_limit: int = DEFAULT_DUEL_TIME_LIMIT,
) -> PlayerSetResult:
    """A duel for one roster position.

    If only one side has a player the duel is already won by forfeit; if
    neither has one it is already a draw.
    """
    duel = PlayerSetResult(
        set_number=set_number,
        team1_player_id=team1_player_id,
        team2_player_id=team2_player_id,
        time_limit=time_limit,
        time_remaining=time_limit,
    )
    if team1_player_id and team2_player_id:
        return duel

    if team1_player_id or team2_player_id:
        duel.result = DuelResult.FORFEIT
        duel.winner_side = Side.TEAM1 if team1_player_id else Side.TEAM2
    else:
        duel.result = DuelResult.DRAW
    duel.completed_at = utc_now_iso()
    return duel


def create_lineup_sets(
    team1_lineup: Lineup,
    team2_lineup: Lineup,
    time_limit: int = DEFAULT_DUEL_TIME_LIMIT,
) -> List[PlayerSetResult]:
    """Seven duels pairing the lineups position by position."""

    def slot(lineup: Lineup, i: int) -> Optional[str]:
        return lineup[i] if i < len(lineup) else None

    return [
        create_lineup_set(
            i + 1, slot(team1_lineup, i), slot(team2_lineup, i), time_limit
        )
        for i in range(TEAM_SIZE)
    ]


# ========== Aggregation ==========


def determine_match_winner(score: MatchScore) -> MatchDecision:
    """Decide a match from its score.

    Nothing is decided until all seven duels are complete. Then more set
    wins decides, then more total points, and a tie on both needs overtime.
    """
    if not score.all_sets_completed:
        return MatchDecision(winner_side=None, needs_overtime=False)

    if score.team1_wins != score.team2_wins:
        side = Side.TEAM1 if score.team1_wins > score.team2_wins else Side.TEAM2
        return MatchDecision(winner_side=side, needs_overtime=False, reason="sets")

    if score.team1_total_points != score.team2_total_points:
        side = (
            Side.TEAM1
            if score.team1_total_points > score.team2_total_points
            else Side.TEAM2
        )
        return MatchDecision(winner_side=side, needs_overtime=False, reason="points")

    return MatchDecision(winner_side=None, needs_overtime=True, reason="tied")


def calculate_match_score(score: MatchScore) -> MatchScore:
    """Recount set wins and total points from the duels."""
    updated = copy.deepcopy(score)
    winners = [s.winner_side for s in updated.player_sets]
    updated.team1_wins = winners.count(Side.TEAM1)
    updated.team2_wins = winners.count(Side.TEAM2)
    updated.team1_total_points = sum(s.team1_points for s in updated.player_sets)
    updated.team2_total_points = sum(s.team2_points for s in updated.player_sets)
    return updated


def get_next_set(match: Match) -> Optional[PlayerSetResult]:
    """First duel still to be fought between two present players."""
    for duel in match.scores.player_sets:
        if not duel.is_completed and duel.team1_player_id and duel.team2_player_id:
            return duel
    return None


def _refresh(match: Match) -> None:
    match.scores = calculate_match_score(match.scores)
    score = match.scores

    pending = [s for s in score.player_sets if not s.is_completed]
    match.current_player_set = pending[0].set_number if pending else TEAM_SIZE

    next_duel = get_next_set(match)
    battle = score.current_battle
    if next_duel is None:
        score.current_battle = None
    elif battle is None or battle.set_number != next_duel.set_number:
        score.current_battle = CurrentBattle(
            set_number=next_duel.set_number,
            team1_player_id=next_duel.team1_player_id,
            team2_player_id=next_duel.team2_player_id,
        )

    decision = determine_match_winner(score)
    previous = match.status
    if decision.winner_side is not None:
        match.status = MatchStatus.COMPLETED
        match.winner_id = match.team_id_for(decision.winner_side)
        match.completed_at = utc_now_iso()
    elif decision.needs_overtime:
        match.status = MatchStatus.OVERTIME
        match.winner_id = None
        match.completed_at = None
    else:
        match.status = MatchStatus.IN_PROGRESS
        match.winner_id = None
        match.completed_at = None
    match.updated_at = utc_now_iso()

    if match.status is not previous:
        if match.status is MatchStatus.COMPLETED:
            logger.info(
                f"Match {match.id} won by {match.winner_id} on {decision.reason} "
                f"({score.team1_wins}-{score.team2_wins} sets, "
                f"{score.team1_total_points}-{score.team2_total_points} points)"
            )
        elif match.status is MatchStatus.OVERTIME:
            logger.info(f"Match {match.id} tied, overtime required")


# ========== Match Operations ==========


def start_match(match: Match, team1: Team, team2: Team) -> Match:
    """Put a scheduled match on court using the two rosters.

    Args:
        match: Scheduled match
        team1: Team playing as team1 (roster order gives duel positions)
        team2: Team playing as team2

    Returns:
        The started match; it may already be decided if rosters are short

    Raises:
        MatchStateException: If the match is not scheduled or the teams do
            not belong to it
    """
    if match.status is not MatchStatus.SCHEDULED:
        raise MatchStateException(
            f"Match {match.id} is {match.status.value}, "
            "only scheduled matches can start"
        )
    if (team1.id, team2.id) != (match.team1_id, match.team2_id):
        raise MatchStateException(
            f"Teams {team1.id} and {team2.id} do not play match {match.id}"
        )

    sets = match.scores.player_sets
    time_limit = sets[0].time_limit if sets else DEFAULT_DUEL_TIME_LIMIT

    started = copy.deepcopy(match)
    started.scores = MatchScore(
        player_sets=create_lineup_sets(team1.lineup(), team2.lineup(), time_limit)
    )
    started.status = MatchStatus.IN_PROGRESS
    started.started_at = utc_now_iso()
    logger.info(f"Match {match.id} started: {team1.name} vs {team2.name}")
    _refresh(started)
    return started


def _require_scoring_open(match: Match) -> None:
    if match.status is MatchStatus.SCHEDULED:
        raise MatchStateException(f"Match {match.id} has not been started")
    if match.status is MatchStatus.COMPLETED:
        raise MatchStateException(f"Match {match.id} is already completed")
    if match.overtime is not None:
        raise MatchStateException(
            f"Match {match.id} is in overtime, duels can no longer change"
        )


def _get_set(match: Match, set_number: int) -> PlayerSetResult:
    if not 1 <= set_number <= len(match.scores.player_sets):
        raise InvalidActionException(f"Match {match.id} has no set {set_number}")
    return match.scores.get_set(set_number)


def update_player_set(match: Match, player_set: PlayerSetResult) -> Match:
    """Replace one duel and recompute the match.

    This is the single write path for duel changes, so corrections made
    before the match is finished are handled the same way as new results.
    """
    _require_scoring_open(match)
    _get_set(match, player_set.set_number)

    updated = copy.deepcopy(match)
    updated.scores.player_sets[player_set.set_number - 1] = copy.deepcopy(player_set)
    _refresh(updated)
    return updated


def record_action(
    match: Match,
    set_number: int,
    participant_id: str,
    kind: Union[ActionKind, str],
) -> Match:
    """Score a strike or foul in one duel of the match."""
    _require_scoring_open(match)
    duel = duel_engine.add_action(_get_set(match, set_number), participant_id, kind)
    return update_player_set(match, duel)


def undo_action(match: Match, set_number: int, participant_id: str) -> Match:
    """Take back a participant's latest action in one duel."""
    _require_scoring_open(match)
    duel = duel_engine.undo_last_action(_get_set(match, set_number), participant_id)
    return update_player_set(match, duel)


def set_result(
    match: Match, set_number: int, outcome: Union[DuelOutcome, str]
) -> Match:
    """Enter a duel result by hand (win, draw or forfeit)."""
    _require_scoring_open(match)
    duel = duel_engine.set_duel_result(_get_set(match, set_number), outcome)
    return update_player_set(match, duel)


def expire_set_time(match: Match, set_number: int, time_remaining: int = 0) -> Match:
    """Apply the clock running out in one duel."""
    _require_scoring_open(match)
    duel = duel_engine.expire_duel_time(_get_set(match, set_number), time_remaining)
    return update_player_set(match, duel)


def reset_set(match: Match, set_number: int) -> Match:
    """Clear one duel; a position with a missing player is forfeited again."""
    _require_scoring_open(match)
    duel = _get_set(match, set_number)
    if duel.team1_player_id and duel.team2_player_id:
        cleared = duel_engine.reset_duel(duel)
    else:
        cleared = create_lineup_set(
            set_number, duel.team1_player_id, duel.team2_player_id, duel.time_limit
        )
    logger.info(f"Match {match.id}: set {set_number} reset")
    return update_player_set(match, cleared)


def finalize_match(match: Match) -> Match:
    """Confirm the outcome of a match whose duels are all complete.

    A match reported as completed while set wins and points are level and
    no overtime winner exists is put back into overtime instead.

    Raises:
        MatchStateException: If any duel is still open
    """
    if not match.scores.all_sets_completed:
        raise MatchStateException(
            f"Match {match.id} still has {TEAM_SIZE - match.scores.completed_sets} "
            "open sets"
        )

    updated = copy.deepcopy(match)
    updated.scores = calculate_match_score(updated.scores)
    decision = determine_match_winner(updated.scores)

    if decision.winner_side is not None:
        updated.status = MatchStatus.COMPLETED
        updated.winner_id = updated.team_id_for(decision.winner_side)
    elif updated.overtime is not None and updated.overtime.is_decided:
        updated.status = MatchStatus.COMPLETED
        updated.winner_id = updated.team_id_for(updated.overtime.winner_side)
    else:
        if match.status is MatchStatus.COMPLETED or match.winner_id is not None:
            logger.warning(
                f"Match {match.id} reported as decided but is tied on sets and "
                "points without overtime; overtime required"
            )
        updated.status = MatchStatus.OVERTIME
        updated.winner_id = None
        updated.completed_at = None
        return updated

    updated.completed_at = updated.completed_at or utc_now_iso()
    updated.updated_at = utc_now_iso()
    return updated


# ========== Display ==========


def get_match_decision(match: Match) -> MatchDecision:
    """Current decision including an overtime result."""
    if match.overtime is not None and match.overtime.is_decided:
        return MatchDecision(
            winner_side=match.overtime.winner_side,
            needs_overtime=False,
            reason="overtime",
        )
    return determine_match_winner(match.scores)


def get_match_status_text(match: Match, team1_name: str, team2_name: str) -> str:
    """One-line status for the moderator view."""
    decision = get_match_decision(match)
    if decision.needs_overtime:
        return STATUS_TEXT_OVERTIME
    if decision.winner_side is None:
        return STATUS_TEXT_IN_PROGRESS

    winner = team1_name if decision.winner_side is Side.TEAM1 else team2_name
    if decision.reason == "sets":
        return f"{winner} wins by set count"
    if decision.reason == "points":
        return f"{winner} wins by total points"
    if decision.reason == "overtime":
        return f"{winner} wins in overtime"
    return f"{winner} wins"


def get_set_result_description(
    player_set: PlayerSetResult, team1_name: str, team2_name: str
) -> str:
    """Readable result of one duel, e.g. ``Set 3: Kodokan A wins by forfeit``."""
    prefix = f"Set {player_set.set_number}"
    winner = None
    if player_set.winner_side is not None:
        winner = team1_name if player_set.winner_side is Side.TEAM1 else team2_name

    if player_set.result is DuelResult.DRAW:
        if not player_set.team1_player_id and not player_set.team2_player_id:
            return f"{prefix}: Both teams forfeit - Draw"
        return f"{prefix}: Draw"
    if player_set.result is DuelResult.FORFEIT:
        return f"{prefix}: {winner} wins by forfeit"
    if player_set.result is DuelResult.WIN:
        return f"{prefix}: {winner} wins"
    if player_set.result is DuelResult.TIME_EXPIRED:
        return f"{prefix}: {winner} wins on time"
    return f"{prefix}: In progress"
