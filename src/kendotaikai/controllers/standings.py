"""Group standings and qualification for the main stage.

Standings are derived data: they are always rebuilt from zero out of the
completed matches of a group, never patched incrementally.
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
from typing import Dict, Iterable, List, Optional, Sequence

from kendotaikai.constants import (
    DEFAULT_QUALIFIERS_PER_GROUP,
    STANDING_DRAW_POINTS,
    STANDING_LOSS_POINTS,
    STANDING_WIN_POINTS,
)
from kendotaikai.models.group import Group, TeamStanding
from kendotaikai.models.match import Match
from kendotaikai.models.team import Team
from kendotaikai.utils import setup_logger

logger = setup_logger(__name__)


def rank_standings(standings: Iterable[TeamStanding]) -> List[TeamStanding]:
    """Sort by points, then wins, then fewest losses and number the ranks.

    Ties on all three keep their incoming order.
    """
    ordered = sorted(standings, key=lambda s: (-s.points, -s.wins, s.losses))
    for position, standing in enumerate(ordered, start=1):
        standing.ranking = position
    return ordered


def _fold_match(table: Dict[str, TeamStanding], match: Match) -> None:
    team1 = table.get(match.team1_id)
    team2 = table.get(match.team2_id)
    if team1 is None or team2 is None:
        logger.debug(f"Skipping match {match.id}: team not in these standings")
        return

    if match.winner_id is None:
        team1.points += STANDING_DRAW_POINTS
        team2.points += STANDING_DRAW_POINTS
        return

    if match.winner_id == team1.team_id:
        winner, loser = team1, team2
    else:
        winner, loser = team2, team1
    winner.wins += 1
    winner.points += STANDING_WIN_POINTS
    loser.losses += 1
    loser.points += STANDING_LOSS_POINTS


def recompute_standings(
    standings: Sequence[TeamStanding], matches: Iterable[Match]
) -> List[TeamStanding]:
    """Rebuild standings from scratch out of the completed matches.

    Running it twice over the same matches gives the same table.

    Args:
        standings: Current standings; only the team ids and their order are used
        matches: All matches of the group; unfinished ones are ignored

    Returns:
        New standings list ordered by ranking
    """
    fresh = [TeamStanding(team_id=s.team_id) for s in standings]
    table = {s.team_id: s for s in fresh}

    for match in matches:
        if match.is_completed:
            _fold_match(table, match)

    return rank_standings(fresh)


def update_group_standings(group: Group) -> Group:
    """Return a copy of the group with standings recomputed from its matches."""
    updated = copy.deepcopy(group)
    known = {s.team_id for s in updated.standings}
    base = list(updated.standings) + [
        TeamStanding(team_id=t.id) for t in updated.teams if t.id not in known
    ]
    updated.standings = recompute_standings(base, updated.matches)
    logger.debug(
        f"{updated.name} standings: "
        + ", ".join(f"{s.team_id}={s.points}" for s in updated.standings)
    )
    return updated


def ranked_teams(group: Group) -> List[Team]:
    """Group members in standings order (teams without a standing go last)."""
    order = {s.team_id: s.ranking for s in group.standings}
    return sorted(group.teams, key=lambda t: order.get(t.id, len(group.teams) + 1))


def get_qualified_teams(
    groups: Sequence[Group],
    qualifiers_per_group: Optional[int] = DEFAULT_QUALIFIERS_PER_GROUP,
) -> List[Team]:
    """Collect bracket qualifiers with a global seed across groups.

    Group winners are seeded first (group A winner is seed 1, group B winner
    seed 2 ...), then the runners-up, and so on. Each team also keeps its
    finishing position inside its group.

    Args:
        groups: Seed groups with up-to-date standings
        qualifiers_per_group: Teams taken from each group, None for all

    Returns:
        Copies of the qualifying teams sorted by seed ranking
    """
    qualified: List[Team] = []
    group_count = len(groups)

    for group_index, group in enumerate(groups):
        members = ranked_teams(group)
        if qualifiers_per_group is not None:
            members = members[:qualifiers_per_group]
        for rank_index, team in enumerate(members):
            seeded = copy.deepcopy(team)
            seeded.group_ranking = rank_index + 1
            seeded.seed_ranking = rank_index * group_count + group_index + 1
            qualified.append(seeded)

    qualified.sort(key=lambda t: t.seed_ranking)
    logger.info(f"{len(qualified)} teams qualified from {group_count} groups")
    return qualified
