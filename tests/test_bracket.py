import pytest

from kendotaikai.controllers.bracket import (
    advance_after_match,
    calculate_team_placement,
    eliminated_team_ids,
    find_match,
    find_match_by_label,
    generate_bracket,
    get_bracket_rounds,
    get_ready_matches,
    start_bracket_match,
)
from kendotaikai.exceptions import BracketAdvanceException, InvalidBracketException
from kendotaikai.models.bracket import Bracket
from kendotaikai.models.enums import BracketMatchStatus, BracketSide
from kendotaikai.models.team import Team


def _seeded(count):
    return [
        Team(name=f"Seed {i}", dojo_id=f"dojo{i}", seed_ranking=i, id=f"t{i}")
        for i in range(1, count + 1)
    ]


def _play_out(bracket):
    """Play every match with the team in the first slot winning."""
    while not bracket.is_completed:
        ready = get_ready_matches(bracket)
        assert ready, "bracket stalled"
        match = ready[0]
        bracket = advance_after_match(
            bracket, match.index, match.team1_id, match.team2_id
        )
    return bracket


def _pairs(matches):
    return {frozenset(m.team_ids) for m in matches}


def test_first_round_pairs_best_with_worst():
    bracket = generate_bracket(_seeded(8))
    first_round = bracket.round_matches(BracketSide.WINNERS, 1)

    assert _pairs(first_round) == {
        frozenset({"t1", "t8"}),
        frozenset({"t2", "t7"}),
        frozenset({"t3", "t6"}),
        frozenset({"t4", "t5"}),
    }
    assert all(m.status is BracketMatchStatus.READY for m in first_round)


def test_teams_are_sorted_by_seed():
    teams = list(reversed(_seeded(4)))
    bracket = generate_bracket(teams)
    assert [t.id for t in bracket.teams] == ["t1", "t2", "t3", "t4"]
    assert find_match(bracket, 0).team_ids == ["t1", "t4"]
    # Input list is not modified
    assert teams[0].id == "t4"


def test_second_round_fills_after_feeders():
    bracket = generate_bracket(_seeded(8))
    second_round = bracket.round_matches(BracketSide.WINNERS, 2)
    assert len(second_round) == 2
    assert all(m.team_ids == [] for m in second_round)
    assert all(m.status is BracketMatchStatus.PENDING for m in second_round)

    bracket = advance_after_match(bracket, 0, "t1", "t8")
    slot = find_match(bracket, second_round[0].index)
    assert slot.team_ids == ["t1"]
    assert slot.status is BracketMatchStatus.PENDING

    bracket = advance_after_match(bracket, 1, "t7", "t2")
    slot = find_match(bracket, second_round[0].index)
    assert slot.team_ids == ["t1", "t7"]
    assert slot.status is BracketMatchStatus.READY


def test_winners_bracket_loser_drops_to_losers_bracket():
    bracket = advance_after_match(generate_bracket(_seeded(8)), 0, "t1", "t8")
    finished = find_match(bracket, 0)
    assert finished.winner_id == "t1"
    assert finished.loser_id == "t8"
    assert finished.is_completed

    losers_slot = find_match(bracket, finished.next_loser_match)
    assert losers_slot.side is BracketSide.LOSERS
    assert losers_slot.round == 1
    assert losers_slot.team_ids == ["t8"]
    assert eliminated_team_ids(bracket) == []


def test_odd_team_count_gives_middle_seed_a_bye():
    bracket = generate_bracket(_seeded(5))
    bye = find_match_by_label(bracket, "winners_r1_bye3")

    assert bye.is_bye
    assert bye.is_completed
    assert bye.winner_id == "t3"
    played = [m for m in bracket.round_matches(BracketSide.WINNERS, 1) if not m.is_bye]
    assert _pairs(played) == {
        frozenset({"t1", "t5"}),
        frozenset({"t2", "t4"}),
    }
    # The bye winner waits for its opponent in the winners final
    waiting = [
        m
        for m in bracket.winners_matches
        if "t3" in m.team_ids and not m.is_completed
    ]
    assert len(waiting) == 1
    assert waiting[0].status is BracketMatchStatus.PENDING


def test_two_team_bracket_goes_straight_to_grand_final():
    bracket = generate_bracket(_seeded(2))
    assert bracket.winners_rounds == 1
    assert bracket.losers_matches == []

    bracket = advance_after_match(bracket, 0, "t2", "t1")
    final = bracket.grand_final
    assert set(final.team_ids) == {"t1", "t2"}
    assert final.status is BracketMatchStatus.READY


@pytest.mark.parametrize("count", [2, 3, 4, 5, 6, 7, 8, 11, 16])
def test_every_bracket_plays_to_a_champion(count):
    bracket = _play_out(generate_bracket(_seeded(count)))
    final = bracket.grand_final

    assert final.is_completed
    assert len(set(eliminated_team_ids(bracket))) == count - 1
    assert get_bracket_rounds(bracket).teams_remaining == 1
    placements = [calculate_team_placement(bracket, t.id) for t in bracket.teams]
    assert all(p is not None for p in placements)
    assert placements.count(1) == 1
    assert placements.count(2) == 1


def test_eight_team_placements():
    bracket = _play_out(generate_bracket(_seeded(8)))
    placements = sorted(calculate_team_placement(bracket, t.id) for t in bracket.teams)
    assert placements == [1, 2, 3, 4, 5, 5, 7, 7]


def test_placement_unknown_while_team_is_alive():
    bracket = generate_bracket(_seeded(4))
    assert calculate_team_placement(bracket, "t1") is None


def test_bracket_rounds_view():
    view = get_bracket_rounds(generate_bracket(_seeded(8)))
    assert [len(r.matches) for r in view.winners_rounds] == [4, 2, 1]
    assert [len(r.matches) for r in view.losers_rounds] == [2, 2, 1, 1, 0]
    assert view.total_rounds == 9
    assert view.teams_remaining == 8
    assert view.grand_final.label == "grand_final"


def test_start_bracket_match():
    bracket = start_bracket_match(generate_bracket(_seeded(4)), 0)
    assert find_match(bracket, 0).status is BracketMatchStatus.IN_PROGRESS
    bracket = advance_after_match(bracket, 0, "t1", "t4")
    assert find_match(bracket, 0).is_completed


def test_pending_match_cannot_start():
    bracket = generate_bracket(_seeded(4))
    pending = bracket.round_matches(BracketSide.WINNERS, 2)[0]
    with pytest.raises(BracketAdvanceException):
        start_bracket_match(bracket, pending.index)


def test_advance_rejects_foreign_teams():
    with pytest.raises(BracketAdvanceException):
        advance_after_match(generate_bracket(_seeded(4)), 0, "t1", "t2")


def test_advance_rejects_finished_match():
    bracket = advance_after_match(generate_bracket(_seeded(4)), 0, "t1", "t4")
    with pytest.raises(BracketAdvanceException):
        advance_after_match(bracket, 0, "t1", "t4")


def test_unknown_match_index():
    with pytest.raises(BracketAdvanceException):
        find_match(generate_bracket(_seeded(4)), 99)


def test_bracket_needs_two_unique_teams():
    with pytest.raises(InvalidBracketException):
        generate_bracket(_seeded(1))
    with pytest.raises(InvalidBracketException):
        generate_bracket(_seeded(2) + _seeded(1))


def test_bracket_serialization_keeps_links():
    bracket = advance_after_match(generate_bracket(_seeded(6)), 0, "t1", "t6")
    restored = Bracket.from_dict(bracket.to_dict())
    assert restored.to_dict() == bracket.to_dict()
    assert restored.grand_final_index == bracket.grand_final_index
