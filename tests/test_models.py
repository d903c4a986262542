from datetime import date

from kendotaikai.models.enums import ActionKind, KendoRank, Side
from kendotaikai.models.participant import Participant, rank_category, sort_by_rank
from kendotaikai.models.team import Team
from kendotaikai.models.tournament import Tournament, TournamentConfig


def test_action_kinds():
    assert ActionKind.MEN.is_strike
    assert not ActionKind.HANSOKU.is_strike
    assert ActionKind.HANSOKU_POINT.scores_point
    assert not ActionKind.HANSOKU.scores_point
    assert Side.TEAM1.opponent is Side.TEAM2


def test_rank_categories():
    assert rank_category(None) == "mudansha"
    assert rank_category(KendoRank.KYU_3) == "kyu"
    assert rank_category(KendoRank.DAN_4) == "dan"


def test_sort_by_rank_most_senior_first():
    players = [
        Participant(name="a", kendo_rank=KendoRank.KYU_1),
        Participant(name="b", kendo_rank=KendoRank.DAN_3),
        Participant(name="c"),
    ]
    assert [p.name for p in sort_by_rank(players)] == ["b", "a", "c"]


def test_participant_age():
    born = date(date.today().year - 30, 1, 1)
    assert Participant(name="a", date_of_birth=born).age == 30
    assert Participant(name="b").age is None


def test_lineup_pads_empty_positions():
    team = Team(
        name="Kodokan A",
        dojo_id="kodokan",
        players=[Participant(name="a", id="p1"), Participant(name="b", id="p2")],
    )
    assert team.lineup() == ["p1", "p2", None, None, None, None, None]


def test_tournament_round_trip():
    team = Team(
        name="Kodokan A",
        dojo_id="kodokan",
        players=[
            Participant(
                name="a", kendo_rank=KendoRank.DAN_2, date_of_birth=date(1990, 5, 4)
            )
        ],
    )
    tournament = Tournament(
        config=TournamentConfig(name="Spring Taikai", qualifiers_per_group=None),
        teams=[team],
    )
    restored = Tournament.from_dict(tournament.to_dict())
    assert restored.to_dict() == tournament.to_dict()
    assert restored.config.qualifiers_per_group is None
    assert restored.teams[0].players[0].kendo_rank is KendoRank.DAN_2
