from kendotaikai.controllers.standings import (
    get_qualified_teams,
    rank_standings,
    ranked_teams,
    recompute_standings,
    update_group_standings,
)
from kendotaikai.models.enums import MatchStatus
from kendotaikai.models.group import Group, TeamStanding
from kendotaikai.models.match import Match
from kendotaikai.models.team import Team


def _result(match_id, team1, team2, winner):
    return Match(
        id=match_id,
        team1_id=team1,
        team2_id=team2,
        status=MatchStatus.COMPLETED,
        winner_id=winner,
    )


def _group(group_id, team_ids, matches=()):
    return Group(
        id=group_id,
        name=group_id,
        teams=[Team(name=t, dojo_id="dojo", id=t) for t in team_ids],
        matches=list(matches),
        standings=[TeamStanding(team_id=t) for t in team_ids],
    )


def test_win_loss_and_draw_points():
    matches = [
        _result("m1", "a", "b", "a"),
        _result("m2", "a", "c", None),
        _result("m3", "b", "c", "c"),
    ]
    standings = recompute_standings(_group("g", "abc").standings, matches)
    table = {s.team_id: s for s in standings}

    assert (table["a"].wins, table["a"].losses, table["a"].points) == (1, 0, 3)
    assert (table["b"].wins, table["b"].losses, table["b"].points) == (0, 2, 0)
    assert (table["c"].wins, table["c"].losses, table["c"].points) == (1, 0, 3)
    assert table["a"].ranking == 1
    assert table["c"].ranking == 2
    assert table["b"].ranking == 3


def test_unfinished_matches_are_ignored():
    pending = Match(id="m1", team1_id="a", team2_id="b", status=MatchStatus.IN_PROGRESS)
    standings = recompute_standings(_group("g", "ab").standings, [pending])
    assert all(s.points == 0 for s in standings)


def test_recompute_is_idempotent():
    matches = [_result("m1", "a", "b", "b"), _result("m2", "b", "c", "b")]
    group = _group("g", "abc", matches)
    once = update_group_standings(group)
    twice = update_group_standings(once)
    assert [s.to_dict() for s in twice.standings] == [
        s.to_dict() for s in once.standings
    ]
    assert once.standings[0].team_id == "b"
    assert once.standings[0].wins == 2


def test_update_group_standings_returns_copy():
    group = _group("g", "ab", [_result("m1", "a", "b", "a")])
    update_group_standings(group)
    assert group.standings[0].points == 0


def test_full_ties_keep_incoming_order():
    standings = rank_standings(
        [TeamStanding("x", points=2, wins=1), TeamStanding("y", points=2, wins=1)]
    )
    assert [s.team_id for s in standings] == ["x", "y"]
    assert [s.ranking for s in standings] == [1, 2]


def test_ranked_teams_follow_standings():
    group = update_group_standings(_group("g", "abc", [_result("m1", "a", "c", "c")]))
    assert [t.id for t in ranked_teams(group)][0] == "c"


def test_qualifiers_are_seeded_across_groups():
    groups = [
        update_group_standings(
            _group(
                "group_1",
                "abc",
                [_result("m1", "a", "b", "b"), _result("m2", "b", "c", "b")],
            )
        ),
        update_group_standings(_group("group_2", "de", [_result("m3", "d", "e", "e")])),
    ]
    qualified = get_qualified_teams(groups, 2)

    assert [t.id for t in qualified] == ["b", "e", "a", "d"]
    assert [t.seed_ranking for t in qualified] == [1, 2, 3, 4]
    assert [t.group_ranking for t in qualified] == [1, 1, 2, 2]
    # Input teams are left untouched
    assert groups[0].teams[1].seed_ranking is None


def test_all_teams_qualify_without_limit():
    group = update_group_standings(_group("group_1", "abc"))
    assert len(get_qualified_teams([group], None)) == 3
