import pytest

from kendotaikai.controllers.overtime import (
    add_overtime_strike,
    get_overtime_winner,
    start_overtime,
)
from kendotaikai.controllers.team_match import (
    expire_set_time,
    get_match_decision,
    get_match_status_text,
    record_action,
    start_match,
)
from kendotaikai.exceptions import (
    IllegalActionKindException,
    MatchStateException,
    OvertimeException,
)
from kendotaikai.models.enums import ActionKind, MatchStatus, Side
from kendotaikai.models.match import Match
from kendotaikai.models.participant import Participant
from kendotaikai.models.team import Team


def _team(team_id):
    players = [
        Participant(name=f"{team_id} {i}", id=f"{team_id}_p{i}") for i in range(1, 8)
    ]
    return Team(
        name=team_id.upper(), dojo_id=f"{team_id}_dojo", players=players, id=team_id
    )


def _tied_match():
    match = start_match(
        Match(id="m1", team1_id="red", team2_id="white"), _team("red"), _team("white")
    )
    for set_number in range(1, 8):
        match = expire_set_time(match, set_number, 0)
    assert match.status is MatchStatus.OVERTIME
    return match


def test_overtime_strike_decides_match():
    match = start_overtime(_tied_match(), "red_p1", "white_p7")
    match = add_overtime_strike(match, "white_p7", "men")

    assert match.status is MatchStatus.COMPLETED
    assert match.winner_id == "white"
    assert match.completed_at is not None
    assert match.overtime.winner_id == "white_p7"
    assert match.overtime.winner_side is Side.TEAM2
    assert match.overtime.winning_action.kind is ActionKind.MEN
    assert get_overtime_winner(match) == "white"
    assert get_match_decision(match).reason == "overtime"
    assert get_match_status_text(match, "Red", "White") == "White wins in overtime"


def test_hansoku_is_not_allowed_in_overtime():
    match = start_overtime(_tied_match(), "red_p1", "white_p1")
    with pytest.raises(IllegalActionKindException):
        add_overtime_strike(match, "red_p1", "hansoku")


def test_overtime_requires_tied_match():
    match = start_match(
        Match(id="m1", team1_id="red", team2_id="white"), _team("red"), _team("white")
    )
    with pytest.raises(OvertimeException):
        start_overtime(match, "red_p1", "white_p1")


def test_overtime_requires_nominees():
    with pytest.raises(OvertimeException):
        start_overtime(_tied_match(), "", "white_p1")


def test_nominee_must_have_fought_for_the_team():
    with pytest.raises(OvertimeException):
        start_overtime(_tied_match(), "white_p1", "white_p2")


def test_strike_before_overtime_started():
    with pytest.raises(OvertimeException):
        add_overtime_strike(_tied_match(), "red_p1", "kote")


def test_only_nominees_can_strike():
    match = start_overtime(_tied_match(), "red_p1", "white_p1")
    with pytest.raises(OvertimeException):
        add_overtime_strike(match, "red_p2", "kote")


def test_decided_overtime_accepts_no_more_strikes():
    match = start_overtime(_tied_match(), "red_p1", "white_p1")
    match = add_overtime_strike(match, "red_p1", "do")
    with pytest.raises(OvertimeException):
        add_overtime_strike(match, "white_p1", "men")
    with pytest.raises(OvertimeException):
        start_overtime(match, "red_p1", "white_p1")


def test_duels_are_frozen_once_overtime_starts():
    match = start_overtime(_tied_match(), "red_p1", "white_p1")
    assert get_overtime_winner(match) is None
    with pytest.raises(MatchStateException):
        record_action(match, 1, "red_p1", "men")
