import pytest

from settlement.events import CompetitorRecord, EventSnapshot, parse_score, resolve_winner


def make_snapshot(first_score, second_score, completed=True):
    return EventSnapshot(
        event_id="401",
        name="Kansas City Chiefs at Buffalo Bills",
        completed=completed,
        competitors=(
            CompetitorRecord("Buffalo Bills", "Bills", first_score),
            CompetitorRecord("Kansas City Chiefs", "Chiefs", second_score),
        ),
    )


@pytest.mark.parametrize("score", [0, 7, 24, 51])
def test_equal_scores_have_no_winner(score):
    assert resolve_winner(make_snapshot(score, score)) is None


def test_higher_score_wins_either_side():
    assert resolve_winner(make_snapshot(27, 24)) == "Buffalo Bills"
    assert resolve_winner(make_snapshot(10, 31)) == "Kansas City Chiefs"


def test_missing_score_is_undecidable():
    assert resolve_winner(make_snapshot(None, 14)) is None
    assert resolve_winner(make_snapshot(14, None)) is None


def test_incomplete_game_has_no_winner():
    assert resolve_winner(make_snapshot(21, 3, completed=False)) is None


def test_single_competitor_has_no_winner():
    snapshot = EventSnapshot(
        event_id="401",
        name="Bye",
        completed=True,
        competitors=(CompetitorRecord("Buffalo Bills", "Bills", 3),),
    )
    assert resolve_winner(snapshot) is None


@pytest.mark.parametrize(
    "raw, expected",
    [("24", 24), (" 7 ", 7), (0, 0), ("", None), ("TBD", None), (None, None), (True, None)],
)
def test_parse_score(raw, expected):
    assert parse_score(raw) == expected
