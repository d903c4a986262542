"""Scoring for a single duel (one set of a team match).

Each side keeps its own action log. Two fouls (hansoku) by one side turn into
one ``hansoku_point`` entry in the opponent's log, and a side's points are the
number of confirmed scoring entries in its own log. The first side to two
points takes the duel.

Every function here works on a copy and returns the updated duel.
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
from typing import Iterable, Optional, Union

from kendotaikai.constants import DUEL_POINTS_TO_WIN, HANSOKU_PER_POINT
from kendotaikai.exceptions import (
    DuelCompletedException,
    DuelStateException,
    IllegalActionKindException,
    InvalidActionException,
)
from kendotaikai.models.enums import ActionKind, DuelOutcome, DuelResult, Side
from kendotaikai.models.scoring import PlayerSetResult, ScoringAction
from kendotaikai.utils import setup_logger, utc_now_iso

logger = setup_logger(__name__)

_OUTCOMES = {
    DuelOutcome.TEAM1_WIN: (DuelResult.WIN, Side.TEAM1),
    DuelOutcome.TEAM2_WIN: (DuelResult.WIN, Side.TEAM2),
    DuelOutcome.DRAW: (DuelResult.DRAW, None),
    DuelOutcome.FORFEIT_TEAM1: (DuelResult.FORFEIT, Side.TEAM2),
    DuelOutcome.FORFEIT_TEAM2: (DuelResult.FORFEIT, Side.TEAM1),
}


def parse_action_kind(kind: Union[ActionKind, str]) -> ActionKind:
    """Accept an ActionKind or its string value.

    Raises:
        IllegalActionKindException: For unknown kinds
    """
    try:
        return ActionKind(kind)
    except ValueError:
        raise IllegalActionKindException(f"Unknown action kind: {kind!r}") from None


def calculate_points(actions: Iterable[ScoringAction]) -> int:
    """Confirmed strikes plus converted foul credits in one log."""
    return sum(1 for a in actions if a.confirmed and a.kind.scores_point)


def hansoku_count(actions: Iterable[ScoringAction]) -> int:
    return sum(1 for a in actions if a.confirmed and a.kind is ActionKind.HANSOKU)


def format_time(seconds: int) -> str:
    """Clock display as M:SS."""
    minutes, rest = divmod(max(seconds, 0), 60)
    return f"{minutes}:{rest:02d}"


def _convert_penalties(duel: PlayerSetResult) -> None:
    for side in (Side.TEAM1, Side.TEAM2):
        log = duel.actions_for(side)
        converted = hansoku_count(log) // HANSOKU_PER_POINT
        if not converted:
            continue

        to_remove = converted * HANSOKU_PER_POINT
        kept = []
        for action in log:
            if to_remove and action.confirmed and action.kind is ActionKind.HANSOKU:
                to_remove -= 1
                continue
            kept.append(action)
        log[:] = kept

        opponent = side.opponent
        for _ in range(converted):
            duel.actions_for(opponent).append(
                ScoringAction(
                    kind=ActionKind.HANSOKU_POINT,
                    participant_id=duel.player_id_for(opponent),
                )
            )
        logger.info(
            f"Set {duel.set_number}: {converted * HANSOKU_PER_POINT} hansoku by "
            f"{side.value} converted to {converted} point(s) for {opponent.value}"
        )


def _refresh_points(duel: PlayerSetResult) -> None:
    duel.team1_points = calculate_points(duel.team1_actions)
    duel.team2_points = calculate_points(duel.team2_actions)


def _check_completion(duel: PlayerSetResult) -> None:
    if duel.is_completed:
        return
    for side in (Side.TEAM1, Side.TEAM2):
        if duel.points_for(side) >= DUEL_POINTS_TO_WIN:
            duel.result = DuelResult.WIN
            duel.winner_side = side
            duel.completed_at = utc_now_iso()
            logger.info(
                f"Set {duel.set_number} won by {side.value} "
                f"({duel.team1_points}-{duel.team2_points})"
            )
            return


def _reopen(duel: PlayerSetResult) -> None:
    duel.result = DuelResult.PENDING
    duel.winner_side = None
    duel.completed_at = None


def _side_or_raise(duel: PlayerSetResult, participant_id: Optional[str]) -> Side:
    side = duel.side_of(participant_id) if participant_id else None
    if side is None:
        raise InvalidActionException(
            f"Participant {participant_id!r} is not fighting in set {duel.set_number}"
        )
    return side


def add_action(
    duel: PlayerSetResult,
    participant_id: str,
    kind: Union[ActionKind, str],
) -> PlayerSetResult:
    """Record a strike or foul for one participant.

    Args:
        duel: Current duel state
        participant_id: Participant who struck or committed the foul
        kind: ``men``, ``kote``, ``tsuki``, ``do`` or ``hansoku``

    Returns:
        Updated duel with fouls converted, points recounted and the result
        set if a side reached two points

    Raises:
        DuelCompletedException: If the duel already has a result
        IllegalActionKindException: If ``kind`` is unknown or ``hansoku_point``
        InvalidActionException: If the participant is not in this duel
    """
    kind = parse_action_kind(kind)
    if kind is ActionKind.HANSOKU_POINT:
        raise IllegalActionKindException(
            "hansoku_point is awarded automatically and cannot be submitted"
        )
    if duel.is_completed:
        raise DuelCompletedException(f"Set {duel.set_number} is already completed")
    side = _side_or_raise(duel, participant_id)

    updated = copy.deepcopy(duel)
    if updated.started_at is None:
        updated.started_at = utc_now_iso()
    updated.actions_for(side).append(
        ScoringAction(kind=kind, participant_id=participant_id)
    )
    logger.debug(f"Set {duel.set_number}: {kind.value} for {side.value}")

    _convert_penalties(updated)
    _refresh_points(updated)
    _check_completion(updated)
    return updated


def undo_last_action(duel: PlayerSetResult, participant_id: str) -> PlayerSetResult:
    """Remove the newest entry of one participant's log.

    Undoing a converted ``hansoku_point`` withdraws that point; the fouls that
    produced it are not restored. The duel is reopened and its result
    re-evaluated, so an undo can turn a won duel back into a pending one.

    Raises:
        InvalidActionException: If the participant is not in this duel
        DuelStateException: If the log is empty or the result was entered
            manually
    """
    side = _side_or_raise(duel, participant_id)
    if duel.manual_override:
        raise DuelStateException(
            f"Set {duel.set_number} has a manual result; reset it instead"
        )
    if not duel.actions_for(side):
        raise DuelStateException(
            f"No actions to undo for {participant_id} in set {duel.set_number}"
        )

    updated = copy.deepcopy(duel)
    removed = updated.actions_for(side).pop()
    logger.debug(f"Set {duel.set_number}: undid {removed.kind.value} for {side.value}")

    _reopen(updated)
    _refresh_points(updated)
    _check_completion(updated)
    return updated


def set_duel_result(
    duel: PlayerSetResult, outcome: Union[DuelOutcome, str]
) -> PlayerSetResult:
    """Enter a duel result directly, bypassing action scoring.

    ``forfeit_team1`` means team1 forfeits, so team2 takes the set. The duel
    is completed immediately and accepts no further actions. Points already
    scored stay in the logs.
    """
    outcome = DuelOutcome(outcome)
    result, winner = _OUTCOMES[outcome]

    updated = copy.deepcopy(duel)
    updated.result = result
    updated.winner_side = winner
    updated.manual_override = True
    updated.completed_at = utc_now_iso()
    logger.info(f"Set {duel.set_number} result entered manually: {outcome.value}")
    return updated


def expire_duel_time(duel: PlayerSetResult, time_remaining: int = 0) -> PlayerSetResult:
    """Apply the clock running out.

    The side with more points takes the set as ``time_expired``; equal points
    make a draw. A duel that already has a result is returned unchanged.
    """
    updated = copy.deepcopy(duel)
    updated.time_remaining = max(time_remaining, 0)
    if updated.is_completed:
        return updated

    if updated.team1_points > updated.team2_points:
        updated.result, updated.winner_side = DuelResult.TIME_EXPIRED, Side.TEAM1
    elif updated.team2_points > updated.team1_points:
        updated.result, updated.winner_side = DuelResult.TIME_EXPIRED, Side.TEAM2
    else:
        updated.result, updated.winner_side = DuelResult.DRAW, None
    updated.completed_at = utc_now_iso()
    logger.info(
        f"Set {duel.set_number} time expired: {updated.result.value} "
        f"({updated.team1_points}-{updated.team2_points})"
    )
    return updated


def reset_duel(duel: PlayerSetResult) -> PlayerSetResult:
    """Clear a duel back to pending with a full clock, keeping its participants."""
    return PlayerSetResult(
        set_number=duel.set_number,
        team1_player_id=duel.team1_player_id,
        team2_player_id=duel.team2_player_id,
        time_limit=duel.time_limit,
        time_remaining=duel.time_limit,
    )


def should_end_duel(duel: PlayerSetResult) -> bool:
    """Two points reached or the clock is out."""
    return (
        max(duel.team1_points, duel.team2_points) >= DUEL_POINTS_TO_WIN
        or duel.time_remaining <= 0
    )
