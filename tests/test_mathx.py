import pytest

from gamekit.mathx import INT32_MAX, INT32_MIN, checked_sum


def test_empty_sum_is_zero():
    assert checked_sum() == 0


@pytest.mark.parametrize("values", [(1, 2), (10, -4, 7), (-5, 3), (100,)])
def test_sum_matches_builtin_within_range(values):
    assert checked_sum(*values) == sum(values)


def test_max_value_is_allowed():
    assert checked_sum(INT32_MAX) == INT32_MAX
    assert checked_sum(INT32_MAX - 1, 1) == INT32_MAX


def test_overflow_raises():
    with pytest.raises(OverflowError):
        checked_sum(INT32_MAX, 1)


def test_overflow_checked_after_each_step():
    with pytest.raises(OverflowError):
        checked_sum(INT32_MAX, 1, -1)


def test_min_value_is_allowed():
    assert checked_sum(INT32_MIN) == INT32_MIN
    assert checked_sum(INT32_MIN + 1, -1) == INT32_MIN


def test_underflow_wraps_like_int32():
    assert checked_sum(INT32_MIN, -1) == INT32_MAX