import pytest

from scoring.ranking import rank_bidders
from scoring.report import score_band, summarize

from factories import make_bidder


@pytest.mark.parametrize("score, band", [
    (100, "excellent"),
    (80, "excellent"),
    (79, "good"),
    (70, "good"),
    (60, "fair"),
    (59, "poor"),
    (0, "poor"),
])
def test_score_band(score, band):
    assert score_band(score) == band


def test_summary_of_ranking():
    ranked = rank_bidders([
        make_bidder("x", scores={"a": 72}, overall=72),
        make_bidder("y", scores={"a": 88}, overall=88),
        make_bidder("z", scores={"a": 61}, overall=61),
    ])

    summary = summarize(ranked)

    assert summary.evaluated_count == 3
    # 221 / 3 = 73.67
    assert summary.average_score == 74
    assert summary.top_performer.bidder.id == "y"


def test_average_rounds_half_up():
    ranked = rank_bidders([
        make_bidder("x", scores={"a": 70}, overall=70),
        make_bidder("y", scores={"a": 71}, overall=71),
    ])

    assert summarize(ranked).average_score == 71


def test_top_performer_ignores_sort_order():
    ranked = rank_bidders(
        [
            make_bidder("x", scores={"a": 72}, overall=72),
            make_bidder("y", scores={"a": 88}, overall=88),
        ],
        direction="asc",
    )

    assert ranked[0].bidder.id == "x"
    assert summarize(ranked).top_performer.bidder.id == "y"


def test_top_performer_tie_goes_to_earlier_row():
    ranked = rank_bidders([
        make_bidder("x", scores={"a": 80}, overall=80),
        make_bidder("y", scores={"a": 80}, overall=80),
    ])

    assert summarize(ranked).top_performer.bidder.id == "x"


def test_empty_summary():
    summary = summarize([])

    assert summary.evaluated_count == 0
    assert summary.average_score is None
    assert summary.top_performer is None
