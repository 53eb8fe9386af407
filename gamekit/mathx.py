"""Overflow-checked integer helpers for 32-bit game counters."""

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)


def _wrap_int32(value: int) -> int:
    return ((value - INT32_MIN) % 2**32) + INT32_MIN


def checked_sum(*args: int) -> int:
    """Add 32-bit values, raising OverflowError once the running total exceeds INT32_MAX.

    Only the upper bound is checked after each addition; a total that falls
    below INT32_MIN wraps around like a 32-bit integer.
    """
    total = 0
    for value in args:
        total += value
        if total > INT32_MAX:
            raise OverflowError(f"sum exceeds {INT32_MAX}")
    return _wrap_int32(total)