"""Overtime (encho-sen) for team matches tied on sets and points.

Each team nominates one player. The first valid strike by either nominee
wins the whole team match. Fouls are not scored in overtime.
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
from typing import Optional, Union

from kendotaikai.controllers.duel import parse_action_kind
from kendotaikai.exceptions import IllegalActionKindException, OvertimeException
from kendotaikai.models.enums import ActionKind, MatchStatus, Side
from kendotaikai.models.match import Match
from kendotaikai.models.scoring import OvertimeData, ScoringAction
from kendotaikai.utils import setup_logger, utc_now_iso

logger = setup_logger(__name__)


def _check_nominee(match: Match, side: Side, player_id: Optional[str]) -> None:
    if not player_id:
        raise OvertimeException(f"Match {match.id}: {side.value} must nominate a player")
    fielded = {s.player_id_for(side) for s in match.scores.player_sets} - {None}
    if fielded and player_id not in fielded:
        raise OvertimeException(
            f"Match {match.id}: {player_id} did not fight for {side.value}"
        )


def start_overtime(match: Match, team1_player_id: str, team2_player_id: str) -> Match:
    """Open overtime between the two nominees.

    Nominees must be players who fought for their team in this match.

    Raises:
        OvertimeException: If the match does not need overtime, overtime has
            already been decided or a nominee is missing
    """
    if match.status is not MatchStatus.OVERTIME:
        raise OvertimeException(
            f"Match {match.id} is {match.status.value}, overtime is not required"
        )
    if match.overtime is not None and match.overtime.is_decided:
        raise OvertimeException(f"Overtime of match {match.id} is already decided")
    _check_nominee(match, Side.TEAM1, team1_player_id)
    _check_nominee(match, Side.TEAM2, team2_player_id)

    updated = copy.deepcopy(match)
    updated.overtime = OvertimeData(
        team1_player_id=team1_player_id, team2_player_id=team2_player_id
    )
    updated.updated_at = utc_now_iso()
    logger.info(
        f"Overtime started in match {match.id}: {team1_player_id} vs {team2_player_id}"
    )
    return updated


def add_overtime_strike(
    match: Match, participant_id: str, kind: Union[ActionKind, str]
) -> Match:
    """Record the deciding strike of overtime.

    Args:
        match: Match in overtime
        participant_id: Nominee who scored
        kind: ``men``, ``kote``, ``tsuki`` or ``do``

    Returns:
        The completed match, won by the striker's team

    Raises:
        IllegalActionKindException: If ``kind`` is not a strike
        OvertimeException: If overtime has not started, is already decided
            or the participant is not a nominee
    """
    kind = parse_action_kind(kind)
    if not kind.is_strike:
        raise IllegalActionKindException(
            f"{kind.value} is not allowed in overtime, only strikes count"
        )
    overtime = match.overtime
    if overtime is None:
        raise OvertimeException(f"Overtime has not started in match {match.id}")
    if overtime.is_decided:
        raise OvertimeException(f"Overtime of match {match.id} is already decided")

    if participant_id == overtime.team1_player_id:
        side = Side.TEAM1
    elif participant_id == overtime.team2_player_id:
        side = Side.TEAM2
    else:
        raise OvertimeException(
            f"{participant_id} is not an overtime nominee in match {match.id}"
        )

    updated = copy.deepcopy(match)
    now = utc_now_iso()
    record = updated.overtime
    record.actions.append(ScoringAction(kind=kind, participant_id=participant_id))
    record.winner_id = participant_id
    record.winner_side = side
    record.completed_at = now

    updated.status = MatchStatus.COMPLETED
    updated.winner_id = updated.team_id_for(side)
    updated.completed_at = now
    updated.updated_at = now
    logger.info(
        f"Match {match.id} decided in overtime: {kind.value} by {participant_id}, "
        f"{updated.winner_id} wins"
    )
    return updated


def get_overtime_winner(match: Match) -> Optional[str]:
    """Team id that won overtime, if overtime was decided."""
    if match.overtime is None or match.overtime.winner_side is None:
        return None
    return match.team_id_for(match.overtime.winner_side)
