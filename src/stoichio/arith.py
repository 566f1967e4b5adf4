"""Integer gcd/lcm helpers used by the exact elimination."""

from __future__ import annotations

from functools import reduce
from typing import Iterable


def gcd(a: int, b: int) -> int:
    a, b = abs(a), abs(b)
    while b != 0:
        a, b = b, a % b
    return a


def gcd_vec(values: Iterable[int]) -> int:
    """Greatest common divisor of all values; 0 for an empty or all-zero input."""
    return reduce(gcd, values, 0)


def lcm(a: int, b: int) -> int:
    """Least common multiple, always non-negative; 0 if either argument is 0."""
    if a == 0 or b == 0:
        return 0
    a, b = abs(a), abs(b)
    return a // gcd(a, b) * b


def lcm_vec(values: Iterable[int]) -> int:
    return reduce(lcm, values, 1)
