import pytest

from scoring.errors import MissingScoreError
from scoring.ranking import NAME, SortDirection, evaluated_bidders, rank_bidders

from factories import make_bidder


@pytest.fixture
def bidders():
    return [
        make_bidder("x", "Xenon Build", scores={"tech": 70, "fin": 74}, overall=72),
        make_bidder("y", "alpha Works", scores={"tech": 90, "fin": 86}, overall=88),
        make_bidder("z", "Bravo Group", scores={"tech": 60, "fin": 62}, overall=61),
    ]


def test_descending_overall_ranking_with_deltas(bidders):
    ranked = rank_bidders(bidders)

    assert [row.overall_score for row in ranked] == [88, 72, 61]
    assert [row.delta for row in ranked] == [0, -16, -27]
    assert [row.rank for row in ranked] == [1, 2, 3]


def test_ascending_deltas_are_relative_to_first_row(bidders):
    ranked = rank_bidders(bidders, direction="asc")

    assert [row.overall_score for row in ranked] == [61, 72, 88]
    assert [row.delta for row in ranked] == [0, 11, 27]


def test_category_sort_key(bidders):
    ranked = rank_bidders(bidders, sort_key="fin", direction=SortDirection.DESC)

    assert [row.bidder.id for row in ranked] == ["y", "x", "z"]
    assert [row.value for row in ranked] == [86, 74, 62]
    assert [row.delta for row in ranked] == [0, -12, -24]


def test_category_deltas_against_leader(bidders):
    ranked = rank_bidders(bidders)

    assert ranked[0].category_deltas == {"tech": 0, "fin": 0}
    assert ranked[1].category_deltas == {"tech": -20, "fin": -12}


def test_name_sort_is_case_insensitive_and_has_no_delta(bidders):
    ranked = rank_bidders(bidders, sort_key=NAME, direction="asc")

    assert [row.bidder.name for row in ranked] == ["alpha Works", "Bravo Group", "Xenon Build"]
    assert all(row.delta is None for row in ranked)
    assert all(row.value is None for row in ranked)


def test_name_sort_places_accented_names_by_letter():
    accented = [
        make_bidder("z", "Zeta Bau", scores={"tech": 70}, overall=70),
        make_bidder("e", "Émile Construction", scores={"tech": 65}, overall=65),
        make_bidder("a", "Eagle Civil", scores={"tech": 60}, overall=60),
    ]

    ascending = rank_bidders(accented, sort_key=NAME, direction="asc")
    descending = rank_bidders(accented, sort_key=NAME, direction="desc")

    assert [row.bidder.id for row in ascending] == ["a", "e", "z"]
    assert [row.bidder.id for row in descending] == ["z", "e", "a"]


def test_ties_keep_input_order_in_both_directions():
    tied = [
        make_bidder("first", scores={"tech": 70}, overall=70),
        make_bidder("second", scores={"tech": 70}, overall=70),
        make_bidder("third", scores={"tech": 70}, overall=70),
    ]

    descending = rank_bidders(tied, direction="desc")
    ascending = rank_bidders(tied, direction="asc")

    assert [row.bidder.id for row in descending] == ["first", "second", "third"]
    assert [row.bidder.id for row in ascending] == ["first", "second", "third"]


def test_unevaluated_bidders_are_excluded(bidders):
    pending = make_bidder("p", "Pending", scores={"tech": 99})
    empty = make_bidder("e", "Empty", overall=50)

    candidates = bidders + [pending, empty]

    assert {bidder.id for bidder in evaluated_bidders(candidates)} == {"x", "y", "z"}
    assert len(rank_bidders(candidates)) == 3


def test_sorting_by_unscored_category_raises(bidders):
    partial = make_bidder("p", "Partial", scores={"tech": 80}, overall=80)

    with pytest.raises(MissingScoreError) as exc_info:
        rank_bidders(bidders + [partial], sort_key="fin")

    assert exc_info.value.bidder_id == "p"
    assert exc_info.value.category_ids == ["fin"]


def test_no_evaluated_bidders_gives_empty_ranking():
    assert rank_bidders([make_bidder("p")]) == []


def test_invalid_direction_is_rejected(bidders):
    with pytest.raises(ValueError):
        rank_bidders(bidders, direction="sideways")
