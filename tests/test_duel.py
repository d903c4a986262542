import pytest

from kendotaikai.controllers.duel import (
    add_action,
    calculate_points,
    expire_duel_time,
    format_time,
    reset_duel,
    set_duel_result,
    should_end_duel,
    undo_last_action,
)
from kendotaikai.exceptions import (
    DuelCompletedException,
    DuelStateException,
    IllegalActionKindException,
    InvalidActionException,
)
from kendotaikai.models.enums import ActionKind, DuelResult, Side
from kendotaikai.models.scoring import PlayerSetResult


def _duel(time_limit=180):
    return PlayerSetResult(
        set_number=1,
        team1_player_id="p1",
        team2_player_id="p2",
        time_limit=time_limit,
        time_remaining=time_limit,
    )


def _kinds(actions):
    return [a.kind for a in actions]


def test_two_strikes_win_the_duel():
    duel = add_action(_duel(), "p1", "men")
    assert duel.team1_points == 1
    assert not duel.is_completed

    duel = add_action(duel, "p1", ActionKind.KOTE)
    assert duel.team1_points == 2
    assert duel.result is DuelResult.WIN
    assert duel.winner_side is Side.TEAM1
    assert duel.winner_id == "p1"
    assert duel.is_completed


def test_add_action_does_not_modify_input():
    original = _duel()
    add_action(original, "p1", "men")
    assert original.team1_actions == []
    assert original.team1_points == 0
    assert original.started_at is None


def test_two_hansoku_give_opponent_a_point():
    duel = add_action(_duel(), "p1", "hansoku")
    assert duel.team2_points == 0
    assert _kinds(duel.team1_actions) == [ActionKind.HANSOKU]

    duel = add_action(duel, "p1", "hansoku")
    assert duel.team1_actions == []
    assert _kinds(duel.team2_actions) == [ActionKind.HANSOKU_POINT]
    assert duel.team2_actions[0].participant_id == "p2"
    assert duel.team2_points == 1
    assert duel.team1_points == 0
    assert not duel.is_completed


def test_odd_hansoku_stays_in_the_log():
    duel = _duel()
    for _ in range(3):
        duel = add_action(duel, "p2", "hansoku")
    assert _kinds(duel.team2_actions) == [ActionKind.HANSOKU]
    assert duel.team1_points == 1


def test_hansoku_point_completes_duel():
    duel = add_action(_duel(), "p2", "do")
    duel = add_action(duel, "p1", "hansoku")
    duel = add_action(duel, "p1", "hansoku")
    assert duel.team2_points == 2
    assert duel.winner_side is Side.TEAM2


def test_hansoku_point_cannot_be_submitted():
    with pytest.raises(IllegalActionKindException):
        add_action(_duel(), "p1", "hansoku_point")


def test_unknown_kind_is_rejected():
    with pytest.raises(IllegalActionKindException):
        add_action(_duel(), "p1", "sweep")


def test_unknown_participant_is_rejected():
    with pytest.raises(InvalidActionException):
        add_action(_duel(), "stranger", "men")


def test_completed_duel_rejects_actions():
    duel = add_action(add_action(_duel(), "p1", "men"), "p1", "men")
    with pytest.raises(DuelCompletedException):
        add_action(duel, "p2", "men")


def test_unconfirmed_actions_do_not_count():
    duel = add_action(_duel(), "p1", "men")
    duel.team1_actions[0].confirmed = False
    assert calculate_points(duel.team1_actions) == 0


def test_undo_reopens_won_duel():
    duel = add_action(add_action(_duel(), "p1", "men"), "p1", "tsuki")
    assert duel.is_completed

    duel = undo_last_action(duel, "p1")
    assert not duel.is_completed
    assert duel.result is DuelResult.PENDING
    assert duel.team1_points == 1
    assert _kinds(duel.team1_actions) == [ActionKind.MEN]


def test_undo_hansoku_point_does_not_restore_fouls():
    duel = add_action(add_action(_duel(), "p1", "hansoku"), "p1", "hansoku")
    duel = undo_last_action(duel, "p2")
    assert duel.team1_actions == []
    assert duel.team2_actions == []
    assert duel.team2_points == 0


def test_undo_with_empty_log_fails():
    with pytest.raises(DuelStateException):
        undo_last_action(_duel(), "p1")


def test_undo_after_manual_result_fails():
    duel = set_duel_result(add_action(_duel(), "p1", "men"), "draw")
    with pytest.raises(DuelStateException):
        undo_last_action(duel, "p1")


@pytest.mark.parametrize(
    "outcome, result, winner",
    [
        ("team1_win", DuelResult.WIN, Side.TEAM1),
        ("team2_win", DuelResult.WIN, Side.TEAM2),
        ("draw", DuelResult.DRAW, None),
        ("forfeit_team1", DuelResult.FORFEIT, Side.TEAM2),
        ("forfeit_team2", DuelResult.FORFEIT, Side.TEAM1),
    ],
)
def test_manual_result(outcome, result, winner):
    duel = set_duel_result(_duel(), outcome)
    assert duel.result is result
    assert duel.winner_side is winner
    assert duel.manual_override
    assert duel.is_completed


def test_time_expired_leader_wins():
    duel = expire_duel_time(add_action(_duel(), "p2", "kote"), 0)
    assert duel.result is DuelResult.TIME_EXPIRED
    assert duel.winner_side is Side.TEAM2
    assert duel.time_remaining == 0


def test_time_expired_level_is_draw():
    duel = add_action(add_action(_duel(), "p1", "men"), "p2", "men")
    duel = expire_duel_time(duel)
    assert duel.result is DuelResult.DRAW
    assert duel.winner_side is None


def test_time_expired_keeps_existing_result():
    duel = add_action(add_action(_duel(), "p1", "men"), "p1", "men")
    expired = expire_duel_time(duel, 0)
    assert expired.result is DuelResult.WIN
    assert expired.completed_at == duel.completed_at


def test_reset_duel_keeps_players():
    duel = add_action(_duel(time_limit=240), "p1", "men")
    duel = expire_duel_time(duel, 12)
    cleared = reset_duel(duel)
    assert cleared.team1_player_id == "p1"
    assert cleared.team2_player_id == "p2"
    assert cleared.team1_actions == []
    assert cleared.result is DuelResult.PENDING
    assert cleared.time_remaining == 240


def test_should_end_duel():
    duel = _duel()
    assert not should_end_duel(duel)
    duel = add_action(add_action(duel, "p1", "men"), "p1", "men")
    assert should_end_duel(duel)

    out_of_time = _duel()
    out_of_time.time_remaining = 0
    assert should_end_duel(out_of_time)


@pytest.mark.parametrize(
    "seconds, text", [(180, "3:00"), (65, "1:05"), (9, "0:09"), (-4, "0:00")]
)
def test_format_time(seconds, text):
    assert format_time(seconds) == text
