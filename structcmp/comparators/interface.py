# structcmp/structcmp/comparators/interface.py
from __future__ import annotations
import dataclasses
import numbers
import weakref
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence, Set
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, List, Optional

# Two values of one registered type in, ordering signal out.
OrderingFunc = Callable[[Any, Any], int]


@dataclasses.dataclass(frozen=True)
class CompareOptions:
    """
    Engine knobs.

    sort_map_keys: traverse mappings over the sorted union of their keys instead
                   of the left operand's iteration order.
    max_depth:     raise DepthExceededError past this nesting depth (None = unbounded).
    """
    sort_map_keys: bool = False
    max_depth: Optional[int] = None


class Shape(Enum):
    """Closed set of structural categories the engine dispatches on."""
    ARRAY = "array"            # fixed-size sequence: plain tuple
    SEQUENCE = "sequence"      # variable-size sequence: list, deque, range, ...
    MAPPING = "mapping"
    SET = "set"
    REFERENCE = "reference"    # weakref.ref
    VARIANT = "variant"        # enum member wrapping a value
    STRUCT = "struct"          # dataclass, named tuple, __slots__ class
    CALLABLE = "callable"
    BOOL = "bool"
    INT = "int"
    REAL = "real"
    TEXT = "text"
    BYTES = "bytes"
    OTHER = "other"


def slot_names(cls: type) -> List[str]:
    """Instance slots of cls in declaration order, base classes first."""
    names: List[str] = []
    for klass in reversed(cls.__mro__):
        slots = vars(klass).get("__slots__")
        if slots is None:
            continue
        if isinstance(slots, str):
            slots = [slots]
        for s in slots:
            if s in ("__dict__", "__weakref__"):
                continue
            # private slots are stored under their mangled name
            if s.startswith("__") and not s.endswith("__"):
                s = f"_{klass.__name__.lstrip('_')}{s}"
            if s not in names:
                names.append(s)
    return names


def _is_slots_struct(value: Any) -> bool:
    return not hasattr(value, "__dict__") and bool(slot_names(type(value)))


def shape_of(value: Any) -> Shape:
    # order matters: bool < int, IntEnum < int, named tuple < tuple, weakref < callable
    if isinstance(value, bool):
        return Shape.BOOL
    if isinstance(value, Enum):
        return Shape.VARIANT
    if isinstance(value, int):
        return Shape.INT
    if isinstance(value, (numbers.Real, Decimal)):
        return Shape.REAL
    if isinstance(value, str):
        return Shape.TEXT
    if isinstance(value, (bytes, bytearray)):
        return Shape.BYTES
    if isinstance(value, weakref.ref):
        return Shape.REFERENCE
    if isinstance(value, tuple):
        return Shape.STRUCT if hasattr(type(value), "_fields") else Shape.ARRAY
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Shape.STRUCT
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, Set):
        return Shape.SET
    if isinstance(value, Sequence):
        return Shape.SEQUENCE
    if _is_slots_struct(value):
        return Shape.STRUCT
    if callable(value):
        return Shape.CALLABLE
    return Shape.OTHER


class Comparator(ABC):
    """
    Stable comparator interface.
    Implementations keep no state between calls; per-call bookkeeping is
    created inside compare().
    """

    @abstractmethod
    def compare(self, a: Any, b: Any) -> int:
        """Return a negative, zero or positive ordering signal for (a, b)."""
        ...
