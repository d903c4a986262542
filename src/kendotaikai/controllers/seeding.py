"""Seed group generation.

Teams are spread over small round-robin groups so that teams from the same
dojo meet as late as possible, then every group gets its full set of
fixtures.
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
import string
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from kendotaikai.constants import (
    DEFAULT_DUEL_TIME_LIMIT,
    DEFAULT_GROUP_COUNT,
    GROUP_ID_PREFIX,
    GROUP_NAME_PREFIX,
    MAX_TEAMS_PER_GROUP,
)
from kendotaikai.controllers.standings import rank_standings
from kendotaikai.models.enums import MatchStage, MatchStatus
from kendotaikai.models.group import Group, TeamStanding
from kendotaikai.models.match import Match
from kendotaikai.models.scoring import MatchScore, empty_player_sets
from kendotaikai.models.team import Team
from kendotaikai.type_hints import Fixture
from kendotaikai.utils import setup_logger
from kendotaikai.utils.validation import effective_group_count, validate_seeding_input

logger = setup_logger(__name__)


def group_name(index: int) -> str:
    """Display name for the group at ``index``: Group A, Group B, ..."""
    letters = string.ascii_uppercase
    label = letters[index] if index < len(letters) else str(index + 1)
    return f"{GROUP_NAME_PREFIX} {label}"


def group_id(index: int) -> str:
    return f"{GROUP_ID_PREFIX}_{index + 1}"


def affiliation_queue(teams: Sequence[Team]) -> List[Team]:
    """Order teams dojo by dojo, largest dojo first.

    Dojos with the same number of teams keep the order in which they first
    appear, and teams keep their input order inside a dojo.
    """
    by_dojo: Dict[str, List[Team]] = OrderedDict()
    for team in teams:
        by_dojo.setdefault(team.dojo_id, []).append(team)

    dojos = sorted(by_dojo.values(), key=len, reverse=True)
    return [team for dojo_teams in dojos for team in dojo_teams]


def _pick_group(
    buckets: List[List[Team]], team: Team, max_per_group: int
) -> Optional[int]:
    """Index of the open group with fewest same-dojo teams, then fewest teams."""
    best_index = None
    best_key = None
    for index, bucket in enumerate(buckets):
        if len(bucket) >= max_per_group:
            continue
        same_dojo = sum(1 for t in bucket if t.dojo_id == team.dojo_id)
        key = (same_dojo, len(bucket))
        if best_key is None or key < best_key:
            best_index, best_key = index, key
    return best_index


def distribute_teams(
    teams: Sequence[Team],
    requested_groups: int = DEFAULT_GROUP_COUNT,
    max_per_group: int = MAX_TEAMS_PER_GROUP,
) -> List[List[Team]]:
    """Partition teams into group buckets.

    Args:
        teams: Teams to place
        requested_groups: Groups to open up front
        max_per_group: Capacity of each group

    Returns:
        Non-empty buckets in group order
    """
    group_count = effective_group_count(len(teams), requested_groups, max_per_group)
    buckets: List[List[Team]] = [[] for _ in range(group_count)]

    for team in affiliation_queue(teams):
        index = _pick_group(buckets, team, max_per_group)
        if index is None:
            # Every group is full
            buckets.append([])
            index = len(buckets) - 1
            logger.debug(f"Opened extra group {index + 1} for {team.name}")
        buckets[index].append(team)

    return [bucket for bucket in buckets if bucket]


def round_robin_fixtures(team_ids: Sequence[str]) -> List[Fixture]:
    """Every unordered pair of teams, in roster order."""
    return [
        (team_ids[i], team_ids[j])
        for i in range(len(team_ids))
        for j in range(i + 1, len(team_ids))
    ]


def create_group_matches(
    group_key: str,
    teams: Sequence[Team],
    tournament_id: Optional[str] = None,
    time_limit: int = DEFAULT_DUEL_TIME_LIMIT,
) -> List[Match]:
    """Scheduled seed matches for all pairings inside one group."""
    positions = {team.id: i + 1 for i, team in enumerate(teams)}
    matches = []
    for team1_id, team2_id in round_robin_fixtures([t.id for t in teams]):
        matches.append(
            Match(
                id=f"match_{group_key}_{positions[team1_id]}_{positions[team2_id]}",
                team1_id=team1_id,
                team2_id=team2_id,
                stage=MatchStage.SEED,
                status=MatchStatus.SCHEDULED,
                scores=MatchScore(player_sets=empty_player_sets(time_limit)),
                tournament_id=tournament_id,
            )
        )
    return matches


def generate_seed_groups(
    teams: Sequence[Team],
    requested_groups: int = DEFAULT_GROUP_COUNT,
    max_per_group: int = MAX_TEAMS_PER_GROUP,
    tournament_id: Optional[str] = None,
    time_limit: int = DEFAULT_DUEL_TIME_LIMIT,
) -> List[Group]:
    """Build seed groups with fixtures and zeroed standings.

    At least ``ceil(len(teams) / max_per_group)`` groups are used, so no team
    is ever left out. Same-dojo meetings are avoided where possible but are
    not forbidden. Groups left empty after placement are dropped, so
    fewer groups than requested come back when there are too few teams
    (two teams with four requested groups give two groups).

    Args:
        teams: Registered teams (not modified)
        requested_groups: Preferred number of groups
        max_per_group: Capacity of each group
        tournament_id: Copied onto every generated match
        time_limit: Duel time limit for the generated matches

    Returns:
        The seed groups, ``group_1`` first

    Raises:
        InvalidSeedingInputException: If there are no teams, the group count
            is below one or team ids repeat
    """
    validate_seeding_input(teams, requested_groups)

    buckets = distribute_teams(
        copy.deepcopy(list(teams)), requested_groups, max_per_group
    )

    groups = []
    for index, members in enumerate(buckets):
        key = group_id(index)
        standings = rank_standings([TeamStanding(team_id=t.id) for t in members])
        groups.append(
            Group(
                id=key,
                name=group_name(index),
                teams=members,
                matches=create_group_matches(key, members, tournament_id, time_limit),
                standings=standings,
            )
        )

    logger.info(
        f"Generated {len(groups)} seed groups for {len(teams)} teams "
        f"({sum(len(g.matches) for g in groups)} matches)"
    )
    return groups
