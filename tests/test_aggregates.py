import pytest

from spotrate.domain.aggregates import compute_aggregate, round_half_away_from_zero


def test_empty_set_is_zero_not_error():
    assert compute_aggregate([], precision=1) == (0.0, 0)
    assert compute_aggregate([], precision=None) == (0.0, 0)


def test_mean_uses_exact_count():
    assert compute_aggregate([3, 4, 5], precision=1) == (4.0, 3)
    assert compute_aggregate([4, 5], precision=1) == (4.5, 2)
    assert compute_aggregate([1, 1, 1, 5], precision=1) == (2.0, 4)


@pytest.mark.parametrize(
    "values, expected",
    [
        ([4, 4, 5, 5, 4, 4, 5, 5], 4.5),
        ([1, 2, 2], 1.7),  # 1.666.. rounds up
        ([4, 4, 5], 4.3),  # 4.333.. rounds down
        ([1] + [2] * 19, 2.0),  # 1.95 -> 2.0
    ],
)
def test_review_precision_rounds_half_away_from_zero(values, expected):
    average, count = compute_aggregate(values, precision=1)
    assert average == expected
    assert count == len(values)
    assert abs(average - sum(values) / len(values)) <= 0.05 + 1e-9


def test_unrounded_precision_keeps_full_mean():
    average, count = compute_aggregate([4, 4, 5], precision=None)
    assert count == 3
    assert average == pytest.approx(13 / 3)


def test_zero_precision_rounds_to_integer_scale():
    assert compute_aggregate([4, 5], precision=0) == (5.0, 2)
    assert compute_aggregate([3, 4, 4], precision=0) == (4.0, 3)


def test_round_half_away_from_zero_differs_from_builtin_round():
    assert round(0.25, 1) == 0.2
    assert round_half_away_from_zero(0.25, 1) == 0.3
    assert round_half_away_from_zero(2.5, 0) == 3.0
    assert round_half_away_from_zero(-2.5, 0) == -3.0


def test_round_rejects_negative_places():
    with pytest.raises(ValueError):
        round_half_away_from_zero(1.0, -1)
