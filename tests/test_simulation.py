import json
import random

import pytest

from kendotaikai.controllers.tournament import TournamentManager
from kendotaikai.models.enums import MatchStatus, TournamentStatus
from kendotaikai.simulation import (
    RandomTournamentGenerator,
    ResultPattern,
    SimulationConfig,
)
from kendotaikai.simulation.rtg import (
    TeamFactory,
    create_normal_tournament,
    create_small_tournament,
)


def _rankings(tournament):
    return {t.id: t.final_ranking for t in tournament.teams}


def test_small_tournament_runs_to_completion():
    rtg = create_small_tournament(seed=7)
    tournament = rtg.generate_complete_tournament()

    assert tournament.status is TournamentStatus.COMPLETED
    assert TournamentManager().get_champion(tournament) is not None
    for group in tournament.seed_groups:
        assert group.is_complete
    for match in rtg.played_matches:
        assert match.status is MatchStatus.COMPLETED
        assert match.winner_id in (match.team1_id, match.team2_id)


def test_same_seed_gives_same_result():
    first = create_small_tournament(seed=11).generate_complete_tournament()
    second = create_small_tournament(seed=11).generate_complete_tournament()
    assert _rankings(first) == _rankings(second)


@pytest.mark.parametrize("pattern", list(ResultPattern))
@pytest.mark.parametrize("num_teams", [2, 5, 9])
def test_result_patterns_and_sizes(pattern, num_teams):
    config = SimulationConfig(
        num_teams=num_teams, num_dojos=3, result_pattern=pattern, seed=num_teams
    )
    tournament = RandomTournamentGenerator(config).generate_complete_tournament()
    assert tournament.status is TournamentStatus.COMPLETED
    assert tournament.bracket.is_completed


def test_tied_matches_are_settled_in_overtime():
    # Mostly idle exchanges leave many matches level
    config = SimulationConfig(
        num_teams=12, num_dojos=4, idle_rate=0.9, foul_rate=0.05, seed=5
    )
    rtg = RandomTournamentGenerator(config)
    rtg.generate_complete_tournament()
    for match in rtg.played_matches:
        if match.overtime is not None:
            assert match.overtime.is_decided
            assert match.winner_id == match.team_id_for(match.overtime.winner_side)


def test_team_factory_builds_rosters():
    config = SimulationConfig(num_teams=6, num_dojos=2, roster_size_range=(3, 7))
    teams = TeamFactory(config, random.Random(1)).create_teams()

    assert [t.id for t in teams] == [f"team_{i}" for i in range(1, 7)]
    assert {t.dojo_id for t in teams} == {"kodokan", "mumeishi"}
    assert all(3 <= len(t.players) <= 7 for t in teams)
    assert teams[0].name == "Kodokan A"
    assert teams[2].name == "Kodokan B"


def test_export_json_format():
    rtg = create_normal_tournament(seed=3)
    tournament = rtg.generate_complete_tournament()
    data = json.loads(rtg.export_json_format(tournament))

    assert data["simulation_config"]["seed"] == 3
    assert data["tournament"]["status"] == "completed"
    assert len(data["matches"]) == len(rtg.played_matches)
