# structcmp/structcmp/comparators/visits.py
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

VisitKey = Tuple[int, int, type]


class Visits:
    """
    Pairs of structures already compared, or still being compared, during one
    top-level call. Keys are canonical (smaller id first); signals are stored
    in canonical order and flipped back on lookup.

    A pair that is re-entered while still in progress reads as equal; that is
    what stops self-referential structures from recursing forever.
    """

    __slots__ = ("_seen",)

    def __init__(self) -> None:
        self._seen: Dict[VisitKey, int] = {}

    @staticmethod
    def canonical(v1: Any, v2: Any) -> Tuple[VisitKey, bool]:
        a1, a2 = id(v1), id(v2)
        swapped = a1 > a2
        if swapped:
            a1, a2 = a2, a1
        return (a1, a2, type(v1)), swapped

    def lookup(self, key: VisitKey, swapped: bool) -> Optional[int]:
        res = self._seen.get(key)
        if res is None:
            return None
        return -res if swapped else res

    def begin(self, key: VisitKey) -> None:
        self._seen[key] = 0

    def record(self, key: VisitKey, swapped: bool, res: int) -> None:
        self._seen[key] = -res if swapped else res

    def __len__(self) -> int:
        return len(self._seen)
