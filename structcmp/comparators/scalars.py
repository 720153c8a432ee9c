# structcmp/structcmp/comparators/scalars.py
from __future__ import annotations
from decimal import Decimal
from typing import Any


def compare_bool(b1: bool, b2: bool) -> int:
    if b1:
        return 0 if b2 else 1
    return -1 if b2 else 0


def compare_ordered(x1: Any, x2: Any) -> int:
    """
    Three-way result from < and > only, never from subtraction, so extreme
    integers cannot overflow and unordered values (NaN) come out as 0.
    """
    if x1 < x2:
        return -1
    if x1 > x2:
        return 1
    return 0


compare_int = compare_ordered
compare_text = compare_ordered


def compare_real(x1: Any, x2: Any) -> int:
    # Decimal raises on ordering a NaN instead of answering False
    if isinstance(x1, Decimal) and (x1.is_nan() or x2.is_nan()):
        return 0
    return compare_ordered(x1, x2)


def sign(n: int) -> int:
    return (n > 0) - (n < 0)
