"""A skip list holding a sorted set of positive 32-bit integers."""

from __future__ import annotations

import random
from typing import Iterator, Optional

MAX_LEVEL = 32
P = 0.5
_UINT32_MAX = 0xFFFFFFFF


class _Node:
    __slots__ = ("value", "forward")

    def __init__(self, value: int, level: int) -> None:
        self.value = value
        self.forward: list[Optional[_Node]] = [None] * level


class SkipList:
    """Sorted set of distinct values in 1..2**32-1."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._header = _Node(0, MAX_LEVEL)
        self._length = 0
        self._height = 1
        self._rng = rng if rng is not None else random.Random()

    def _random_level(self) -> int:
        level = 1
        while self._rng.random() < P and level < MAX_LEVEL:
            level += 1
        return level

    def _predecessors(self, value: int) -> list[_Node]:
        update = [self._header] * MAX_LEVEL
        node = self._header
        for i in reversed(range(self._height)):
            nxt = node.forward[i]
            while nxt is not None and nxt.value < value:
                node = nxt
                nxt = node.forward[i]
            update[i] = node
        return update

    def add(self, value: int) -> bool:
        """Insert value; returns False if it is not positive or already present."""
        if value <= 0:
            return False
        if value > _UINT32_MAX:
            raise ValueError(f"value {value} does not fit in 32 bits")
        update = self._predecessors(value)
        candidate = update[0].forward[0]
        if candidate is not None and candidate.value == value:
            return False
        level = self._random_level()
        self._height = max(self._height, level)
        node = _Node(value, level)
        for i in range(level):
            node.forward[i] = update[i].forward[i]
            update[i].forward[i] = node
        self._length += 1
        return True

    def delete(self, value: int) -> bool:
        """Remove value; returns False if it was not present."""
        update = self._predecessors(value)
        node = update[0].forward[0]
        if node is None or node.value != value:
            return False
        for i, successor in enumerate(node.forward):
            update[i].forward[i] = successor
            node.forward[i] = None
        while self._height > 1 and self._header.forward[self._height - 1] is None:
            self._height -= 1
        self._length -= 1
        return True

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[int]:
        node = self._header.forward[0]
        while node is not None:
            yield node.value
            node = node.forward[0]

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int) or value <= 0:
            return False
        candidate = self._predecessors(value)[0].forward[0]
        return candidate is not None and candidate.value == value