import pytest

from kendotaikai.constants import STATUS_TEXT_IN_PROGRESS, STATUS_TEXT_OVERTIME
from kendotaikai.controllers.team_match import (
    create_lineup_set,
    determine_match_winner,
    expire_set_time,
    finalize_match,
    get_match_status_text,
    get_next_set,
    get_set_result_description,
    record_action,
    reset_set,
    set_result,
    start_match,
    undo_action,
    update_player_set,
)
from kendotaikai.exceptions import InvalidActionException, MatchStateException
from kendotaikai.models.enums import DuelResult, MatchStatus, Side
from kendotaikai.models.match import Match
from kendotaikai.models.participant import Participant
from kendotaikai.models.team import Team


def _team(team_id, size=7):
    players = [
        Participant(name=f"{team_id} {i}", id=f"{team_id}_p{i}")
        for i in range(1, size + 1)
    ]
    return Team(
        name=team_id.upper(), dojo_id=f"{team_id}_dojo", players=players, id=team_id
    )


def _started(size1=7, size2=7):
    team1, team2 = _team("red", size1), _team("white", size2)
    match = Match(id="m1", team1_id="red", team2_id="white")
    return start_match(match, team1, team2)


def _win_set(match, set_number, side):
    team = "red" if side is Side.TEAM1 else "white"
    player = f"{team}_p{set_number}"
    match = record_action(match, set_number, player, "men")
    return record_action(match, set_number, player, "kote")


def _draw_set(match, set_number):
    return expire_set_time(match, set_number, 0)


def test_start_match_pairs_roster_positions():
    match = _started()
    assert match.status is MatchStatus.IN_PROGRESS
    duel = match.scores.get_set(3)
    assert duel.team1_player_id == "red_p3"
    assert duel.team2_player_id == "white_p3"
    assert match.current_player_set == 1
    assert match.scores.current_battle.set_number == 1


def test_start_match_requires_scheduled():
    match = _started()
    with pytest.raises(MatchStateException):
        start_match(match, _team("red"), _team("white"))


def test_start_match_rejects_wrong_teams():
    match = Match(id="m1", team1_id="red", team2_id="white")
    with pytest.raises(MatchStateException):
        start_match(match, _team("white"), _team("red"))


def test_scoring_before_start_is_rejected():
    match = Match(id="m1", team1_id="red", team2_id="white")
    with pytest.raises(MatchStateException):
        record_action(match, 1, "red_p1", "men")


def test_short_roster_forfeits_missing_positions():
    match = _started(size1=7, size2=5)
    for set_number in (6, 7):
        duel = match.scores.get_set(set_number)
        assert duel.result is DuelResult.FORFEIT
        assert duel.winner_side is Side.TEAM1
        assert duel.team1_points == 0
    assert match.scores.team1_wins == 2
    assert match.scores.team1_total_points == 0


def test_both_players_missing_is_draw():
    duel = create_lineup_set(7, None, None)
    assert duel.result is DuelResult.DRAW
    assert duel.winner_side is None
    assert duel.is_completed


def test_next_set_skips_finished_duels():
    match = _win_set(_started(), 1, Side.TEAM1)
    assert get_next_set(match).set_number == 2
    assert match.current_player_set == 2
    assert match.scores.current_battle.set_number == 2


def test_match_stays_open_until_all_sets_complete():
    match = _started()
    for set_number in range(1, 5):
        match = _win_set(match, set_number, Side.TEAM1)
    assert match.scores.team1_wins == 4
    assert match.status is MatchStatus.IN_PROGRESS
    assert match.winner_id is None


def test_more_set_wins_decides():
    match = _started()
    for set_number in range(1, 5):
        match = _win_set(match, set_number, Side.TEAM2)
    for set_number in range(5, 8):
        match = _win_set(match, set_number, Side.TEAM1)
    assert match.status is MatchStatus.COMPLETED
    assert match.winner_id == "white"
    assert match.loser_id == "red"
    assert determine_match_winner(match.scores).reason == "sets"
    assert get_match_status_text(match, "Red", "White") == "White wins by set count"


def test_points_break_level_set_wins():
    match = _started()
    match = _win_set(match, 1, Side.TEAM1)
    match = _win_set(match, 2, Side.TEAM2)
    # Set 3: red leads 1-0 when time runs out
    match = record_action(match, 3, "red_p3", "do")
    match = expire_set_time(match, 3, 0)
    # Set 4: white leads 2-1
    match = record_action(match, 4, "red_p4", "men")
    match = record_action(match, 4, "white_p4", "men")
    match = record_action(match, 4, "white_p4", "men")
    match = _win_set(match, 5, Side.TEAM1)
    # Set 6: white leads 1-0 when time runs out
    match = record_action(match, 6, "white_p6", "kote")
    match = expire_set_time(match, 6, 0)
    match = _draw_set(match, 7)

    assert match.scores.team1_wins == match.scores.team2_wins == 3
    assert match.scores.team1_total_points == 6
    assert match.scores.team2_total_points == 5
    assert match.status is MatchStatus.COMPLETED
    assert match.winner_id == "red"
    assert determine_match_winner(match.scores).reason == "points"


def test_tie_on_sets_and_points_requires_overtime():
    match = _started()
    for set_number in range(1, 8):
        match = _draw_set(match, set_number)
    assert match.status is MatchStatus.OVERTIME
    assert match.winner_id is None
    assert match.completed_at is None
    assert get_match_status_text(match, "Red", "White") == STATUS_TEXT_OVERTIME


def test_in_progress_status_text():
    assert get_match_status_text(_started(), "Red", "White") == STATUS_TEXT_IN_PROGRESS


def test_completed_match_rejects_changes():
    match = _started()
    for set_number in range(1, 7):
        match = _draw_set(match, set_number)
    match = _win_set(match, 7, Side.TEAM1)
    assert match.status is MatchStatus.COMPLETED

    with pytest.raises(MatchStateException):
        undo_action(match, 7, "red_p7")
    with pytest.raises(MatchStateException):
        record_action(match, 7, "white_p7", "men")


def test_undo_inside_open_duel():
    match = record_action(_started(), 1, "red_p1", "men")
    match = undo_action(match, 1, "red_p1")
    assert match.scores.get_set(1).team1_points == 0
    assert match.scores.team1_total_points == 0


def test_manual_set_result():
    match = set_result(_started(), 2, "forfeit_team1")
    duel = match.scores.get_set(2)
    assert duel.result is DuelResult.FORFEIT
    assert duel.winner_side is Side.TEAM2
    assert match.scores.team2_wins == 1


def test_reset_set_clears_duel():
    match = record_action(_started(), 1, "red_p1", "men")
    match = reset_set(match, 1)
    duel = match.scores.get_set(1)
    assert duel.team1_actions == []
    assert duel.result is DuelResult.PENDING


def test_reset_set_forfeits_missing_player_again():
    match = _started(size1=7, size2=6)
    match = reset_set(match, 7)
    duel = match.scores.get_set(7)
    assert duel.result is DuelResult.FORFEIT
    assert duel.winner_side is Side.TEAM1


def test_invalid_set_number():
    with pytest.raises(InvalidActionException):
        record_action(_started(), 8, "red_p1", "men")


def test_update_player_set_recomputes_totals():
    match = _started()
    duel = match.scores.get_set(1)
    duel.team1_points = 1
    match = update_player_set(match, duel)
    assert match.scores.team1_total_points == 1


def test_finalize_requires_all_sets():
    with pytest.raises(MatchStateException):
        finalize_match(_started())


def test_finalize_puts_tied_completed_match_into_overtime():
    match = _started()
    for set_number in range(1, 8):
        match = _draw_set(match, set_number)
    match.status = MatchStatus.COMPLETED
    match.winner_id = "red"

    finalized = finalize_match(match)
    assert finalized.status is MatchStatus.OVERTIME
    assert finalized.winner_id is None


def test_finalize_confirms_winner():
    match = _started()
    for set_number in range(1, 8):
        match = _win_set(match, set_number, Side.TEAM1)
    finalized = finalize_match(match)
    assert finalized.status is MatchStatus.COMPLETED
    assert finalized.winner_id == "red"


def test_set_result_descriptions():
    match = _started(size1=7, size2=6)
    match = _win_set(match, 1, Side.TEAM2)
    match = record_action(match, 2, "red_p2", "men")
    match = expire_set_time(match, 2, 0)
    match = _draw_set(match, 3)

    def describe(n):
        return get_set_result_description(match.scores.get_set(n), "Red", "White")

    assert describe(1) == "Set 1: White wins"
    assert describe(2) == "Set 2: Red wins on time"
    assert describe(3) == "Set 3: Draw"
    assert describe(4) == "Set 4: In progress"
    assert describe(7) == "Set 7: Red wins by forfeit"
    assert (
        get_set_result_description(create_lineup_set(5, None, None), "Red", "White")
        == "Set 5: Both teams forfeit - Draw"
    )
