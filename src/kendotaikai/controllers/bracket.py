"""Double-elimination bracket generation, advancement and placement.

Qualified teams are paired by seed in the winners bracket. Losing a winners
bracket match drops a team into the losers bracket, losing there eliminates
it, and the last team of each side meets in a single grand final.

Losers bracket layout for ``W`` winners rounds:

- round 1: the losers of winners round 1 play each other
- round ``2(r-1)``: the losers of winners round ``r`` drop in and meet the
  losers bracket survivors
- odd rounds after that: survivors play each other

``2W - 1`` rounds are reserved this way. A team without an opponent in a
round moves on without playing, and a reserved round may end up with no
matches at all. If more than one team is still left after the reserved
rounds, extra rounds are appended until one survivor remains.
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
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from kendotaikai.constants import GRAND_FINAL_ROUND, MIN_BRACKET_TEAMS
from kendotaikai.exceptions import BracketAdvanceException, InvalidBracketException
from kendotaikai.models.bracket import Bracket, BracketMatch
from kendotaikai.models.enums import BracketMatchStatus, BracketSide
from kendotaikai.models.team import Team
from kendotaikai.utils import setup_logger

logger = setup_logger(__name__)

UNSEEDED_RANKING = 999

# (match index, "winner" or "loser"): where a team will come from
FeederRef = Tuple[int, str]


@dataclass
class BracketRound:
    """Matches of one bracket round, for display."""

    side: BracketSide
    round: int
    matches: List[BracketMatch] = field(default_factory=list)


@dataclass
class BracketView:
    """Bracket grouped by round.

    Attributes:
        winners_rounds: Winners bracket rounds in order
        losers_rounds: Losers bracket rounds in order, empty ones included
        grand_final: The grand final match
        total_rounds: Winners plus losers rounds plus the grand final
        teams_remaining: Teams not yet eliminated
    """

    winners_rounds: List[BracketRound]
    losers_rounds: List[BracketRound]
    grand_final: Optional[BracketMatch]
    total_rounds: int
    teams_remaining: int


# ========== Construction ==========


def _seed_key(team: Team) -> int:
    return team.seed_ranking if team.seed_ranking is not None else UNSEEDED_RANKING


def _new_match(
    bracket: Bracket, round_number: int, side: BracketSide, position: int, expected: int
) -> BracketMatch:
    match = BracketMatch(
        index=len(bracket.matches),
        round=round_number,
        side=side,
        position=position,
        expected_teams=expected,
    )
    bracket.matches.append(match)
    return match


def _link(bracket: Bracket, ref: FeederRef, target: int) -> None:
    index, outcome = ref
    if outcome == "winner":
        bracket.matches[index].next_winner_match = target
    else:
        bracket.matches[index].next_loser_match = target


def _build_winners_bracket(bracket: Bracket, teams: List[Team]) -> List[List[int]]:
    count = len(teams)
    round_one: List[int] = []

    for i in range(count // 2):
        match = _new_match(bracket, 1, BracketSide.WINNERS, i + 1, 2)
        match.team1_id = teams[i].id
        match.team2_id = teams[count - 1 - i].id
        match.status = BracketMatchStatus.READY
        round_one.append(match.index)

    if count % 2:
        bye_team = teams[count // 2]
        match = _new_match(bracket, 1, BracketSide.WINNERS, len(round_one) + 1, 1)
        match.team1_id = bye_team.id
        match.winner_id = bye_team.id
        match.status = BracketMatchStatus.COMPLETED
        round_one.append(match.index)
        logger.debug(f"{bye_team.name} receives a first round bye")

    rounds = [round_one]
    while len(rounds[-1]) > 1:
        previous = rounds[-1]
        round_number = len(rounds) + 1
        current = []
        for k in range(0, len(previous), 2):
            feeders = previous[k : k + 2]
            match = _new_match(
                bracket, round_number, BracketSide.WINNERS, k // 2 + 1, len(feeders)
            )
            for feeder in feeders:
                bracket.matches[feeder].next_winner_match = match.index
            current.append(match.index)
        rounds.append(current)
    return rounds


def _play_losers_round(
    bracket: Bracket, round_number: int, entrants: List[FeederRef]
) -> List[FeederRef]:
    survivors: List[FeederRef] = []
    for k in range(0, len(entrants) - 1, 2):
        match = _new_match(bracket, round_number, BracketSide.LOSERS, k // 2 + 1, 2)
        _link(bracket, entrants[k], match.index)
        _link(bracket, entrants[k + 1], match.index)
        survivors.append((match.index, "winner"))
    if len(entrants) % 2:
        survivors.append(entrants[-1])
    return survivors


def _interleave(first: List[FeederRef], second: List[FeederRef]) -> List[FeederRef]:
    mixed: List[FeederRef] = []
    for a, b in zip(first, second):
        mixed.extend([a, b])
    shorter = min(len(first), len(second))
    return mixed + first[shorter:] + second[shorter:]


def _build_losers_bracket(
    bracket: Bracket, winners_rounds: List[List[int]]
) -> List[FeederRef]:
    def losers_of(round_indices: List[int]) -> List[FeederRef]:
        return [
            (i, "loser")
            for i in round_indices
            if bracket.matches[i].expected_teams == 2
        ]

    reserved = 2 * len(winners_rounds) - 1
    pool = _play_losers_round(bracket, 1, losers_of(winners_rounds[0]))

    for round_number in range(2, reserved + 1):
        if round_number % 2 == 0:
            dropping = losers_of(winners_rounds[round_number // 2])
            entrants = _interleave(pool, dropping)
        else:
            entrants = pool
        pool = _play_losers_round(bracket, round_number, entrants)

    bracket.losers_rounds = reserved
    while len(pool) > 1:
        bracket.losers_rounds += 1
        pool = _play_losers_round(bracket, bracket.losers_rounds, pool)
    return pool


def generate_bracket(teams: Sequence[Team]) -> Bracket:
    """Build a double-elimination bracket from qualified teams.

    Teams are sorted by ``seed_ranking`` (unseeded teams last) and round 1
    pairs the best seed with the worst: seed ``i`` meets seed ``N-1-i``. With
    an odd number of teams the middle seed gets a bye and is already placed
    in round 2.

    Args:
        teams: Qualified teams (not modified)

    Returns:
        The new bracket

    Raises:
        InvalidBracketException: If there are fewer than two teams or team
            ids repeat
    """
    if len(teams) < MIN_BRACKET_TEAMS:
        raise InvalidBracketException(
            f"A bracket needs at least {MIN_BRACKET_TEAMS} teams, got {len(teams)}"
        )
    ids = [t.id for t in teams]
    if len(set(ids)) != len(ids):
        raise InvalidBracketException("Team ids in a bracket must be unique")

    seeded = sorted(copy.deepcopy(list(teams)), key=_seed_key)
    bracket = Bracket(teams=seeded)

    winners_rounds = _build_winners_bracket(bracket, seeded)
    bracket.winners_rounds = len(winners_rounds)
    survivors = _build_losers_bracket(bracket, winners_rounds)

    final = _new_match(bracket, GRAND_FINAL_ROUND, BracketSide.GRAND_FINAL, 1, 2)
    bracket.grand_final_index = final.index
    bracket.matches[winners_rounds[-1][0]].next_winner_match = final.index
    for ref in survivors:
        _link(bracket, ref, final.index)

    for index in winners_rounds[0]:
        match = bracket.matches[index]
        if match.is_bye:
            _place_team(bracket, match.next_winner_match, match.winner_id)

    logger.info(
        f"Generated bracket for {len(seeded)} teams: {bracket.winners_rounds} winners "
        f"rounds, {bracket.losers_rounds} losers rounds, {len(bracket.matches)} matches"
    )
    return bracket


# ========== Advancement ==========


def _place_team(bracket: Bracket, index: Optional[int], team_id: Optional[str]) -> None:
    if index is None or team_id is None:
        return
    match = bracket.matches[index]
    if match.team1_id is None:
        match.team1_id = team_id
    elif match.team2_id is None:
        match.team2_id = team_id
    else:
        raise BracketAdvanceException(f"Match {match.label} has no open slot")

    if len(match.team_ids) < match.expected_teams:
        return
    if match.is_bye:
        # Structural bye: the only team moves straight on
        match.winner_id = team_id
        match.status = BracketMatchStatus.COMPLETED
        logger.debug(f"{team_id} advances through bye {match.label}")
        _place_team(bracket, match.next_winner_match, team_id)
    else:
        match.status = BracketMatchStatus.READY


def find_match(bracket: Bracket, index: int) -> BracketMatch:
    """Bracket match at ``index``.

    Raises:
        BracketAdvanceException: If no such match exists
    """
    if not 0 <= index < len(bracket.matches):
        raise BracketAdvanceException(f"No bracket match with index {index}")
    return bracket.matches[index]


def find_match_by_label(bracket: Bracket, label: str) -> Optional[BracketMatch]:
    for match in bracket.matches:
        if match.label == label:
            return match
    return None


def start_bracket_match(bracket: Bracket, index: int) -> Bracket:
    """Mark a ready match as being played."""
    match = find_match(bracket, index)
    if match.status is not BracketMatchStatus.READY:
        raise BracketAdvanceException(
            f"Match {match.label} is {match.status.value}, not ready"
        )
    updated = copy.deepcopy(bracket)
    updated.matches[index].status = BracketMatchStatus.IN_PROGRESS
    return updated


def advance_after_match(
    bracket: Bracket, match_index: int, winner_id: str, loser_id: str
) -> Bracket:
    """Record a finished bracket match and move both teams on.

    The winner takes the first open slot of the next winners-side match. The
    loser of a winners bracket match drops into its losers bracket match; a
    losers bracket loss eliminates the team.

    Args:
        bracket: Current bracket
        match_index: Index of the finished match
        winner_id: Team that won
        loser_id: Team that lost

    Returns:
        Updated bracket

    Raises:
        BracketAdvanceException: If the match is not ready to be decided or
            the teams given are not the two teams of the match
    """
    match = find_match(bracket, match_index)
    if match.status not in (BracketMatchStatus.READY, BracketMatchStatus.IN_PROGRESS):
        raise BracketAdvanceException(
            f"Match {match.label} is {match.status.value} and cannot be decided"
        )
    if len(match.team_ids) != 2:
        raise BracketAdvanceException(f"Match {match.label} is missing a team")
    if winner_id == loser_id or {winner_id, loser_id} != set(match.team_ids):
        raise BracketAdvanceException(
            f"{winner_id} and {loser_id} are not the two teams of {match.label}"
        )

    updated = copy.deepcopy(bracket)
    finished = updated.matches[match_index]
    finished.winner_id = winner_id
    finished.loser_id = loser_id
    finished.status = BracketMatchStatus.COMPLETED

    _place_team(updated, finished.next_winner_match, winner_id)
    if finished.side is BracketSide.WINNERS:
        _place_team(updated, finished.next_loser_match, loser_id)

    logger.info(f"Bracket match {finished.label}: {winner_id} beat {loser_id}")
    return updated


# ========== Queries ==========


def get_ready_matches(bracket: Bracket) -> List[BracketMatch]:
    """Matches with both teams known that have not been played yet."""
    return [m for m in bracket.matches if m.status is BracketMatchStatus.READY]


def eliminated_team_ids(bracket: Bracket) -> List[str]:
    """Teams knocked out so far: losers bracket losers and the grand final loser."""
    return [
        m.loser_id
        for m in bracket.matches
        if m.loser_id is not None and m.side is not BracketSide.WINNERS
    ]


def get_bracket_rounds(bracket: Bracket) -> BracketView:
    """Group the bracket by side and round for display."""

    def rounds(side: BracketSide, count: int) -> List[BracketRound]:
        return [
            BracketRound(side, r, bracket.round_matches(side, r))
            for r in range(1, count + 1)
        ]

    winners = rounds(BracketSide.WINNERS, bracket.winners_rounds)
    losers = rounds(BracketSide.LOSERS, bracket.losers_rounds)
    return BracketView(
        winners_rounds=winners,
        losers_rounds=losers,
        grand_final=bracket.grand_final,
        total_rounds=bracket.total_rounds,
        teams_remaining=len(bracket.teams) - len(set(eliminated_team_ids(bracket))),
    )


def calculate_team_placement(bracket: Bracket, team_id: str) -> Optional[int]:
    """Final placement of a team, or None while it is still in the bracket.

    The grand final decides first and second place. Every other team is
    placed by the losers bracket round it went out in: teams knocked out in
    the same round share a placement, which is 3 plus the number of teams
    knocked out in later losers rounds.
    """
    final = bracket.grand_final
    if final is not None and final.is_completed:
        if final.winner_id == team_id:
            return 1
        if final.loser_id == team_id:
            return 2

    for match in bracket.losers_matches:
        if match.loser_id == team_id:
            later = sum(1 for m in bracket.losers_matches if m.round > match.round)
            return 3 + later
    return None


def assign_final_rankings(bracket: Bracket) -> Bracket:
    """Copy of the bracket with ``final_ranking`` set on every placed team."""
    updated = copy.deepcopy(bracket)
    for team in updated.teams:
        team.final_ranking = calculate_team_placement(updated, team.id)
    return updated
