import pytest

from schemas.tender import ScoringMatrix
from scoring.errors import ConfigurationError
from scoring.weights import effective_weights, ensure_balanced, validate_weights

from factories import TENDER_ID, make_category


def test_weights_summing_to_100_are_balanced():
    balance = validate_weights({"technical": 60, "commercial": 40})

    assert balance.balanced is True
    assert balance.total == 100
    assert balance.message is None


def test_unbalanced_weights_report_actual_total():
    balance = validate_weights([("a", 30), ("b", 30)])

    assert balance.balanced is False
    assert balance.total == 60
    assert balance.message == "Total weight must equal 100%. Current total: 60%"


def test_empty_weight_set_is_unbalanced():
    balance = validate_weights({})

    assert balance.balanced is False
    assert balance.total == 0


def test_over_100_is_unbalanced():
    assert validate_weights({"a": 70, "b": 40}).total == 110
    assert validate_weights({"a": 70, "b": 40}).balanced is False


def test_negative_weight_is_rejected():
    with pytest.raises(ConfigurationError):
        validate_weights({"a": 110, "b": -10})


def test_ensure_balanced_raises_with_total():
    with pytest.raises(ConfigurationError) as exc_info:
        ensure_balanced({"a": 30, "b": 30})

    assert exc_info.value.total == 60
    assert "Total weight must equal 100%" in str(exc_info.value)


def test_effective_weights_use_category_weights_without_matrix():
    categories = [make_category("technical", 60), make_category("commercial", 40)]

    assert effective_weights(categories) == {"technical": 60, "commercial": 40}


def test_matrix_entries_override_category_weights():
    categories = [make_category("technical", 50), make_category("commercial", 50)]
    matrix = ScoringMatrix(tender_id=TENDER_ID, criteria={"technical": 70, "commercial": 30})

    assert effective_weights(categories, matrix) == {"technical": 70, "commercial": 30}


def test_partial_matrix_keeps_remaining_category_weights():
    categories = [make_category("technical", 50), make_category("commercial", 50)]
    matrix = ScoringMatrix(tender_id=TENDER_ID, criteria={"technical": 40})

    weights = effective_weights(categories, matrix)

    assert weights == {"technical": 40, "commercial": 50}
    assert validate_weights(weights).total == 90


def test_matrix_naming_unknown_category_is_rejected():
    categories = [make_category("technical", 100)]
    matrix = ScoringMatrix(tender_id=TENDER_ID, criteria={"legal": 20})

    with pytest.raises(ConfigurationError, match="legal"):
        effective_weights(categories, matrix)
