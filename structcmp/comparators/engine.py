# structcmp/structcmp/comparators/engine.py
from __future__ import annotations
import dataclasses
import functools
from typing import Any, Callable, Dict, Iterable, List, Optional

from structcmp import logging as slog
from structcmp.errors import (
    DepthExceededError,
    TypeMismatchError,
    UncomparableCallablesError,
    UncomparableTypeError,
    UnexportedFieldError,
)
from .interface import Comparator, CompareOptions, Shape, shape_of, slot_names
from .registry import Comparisons, default_comparisons
from .scalars import compare_bool, compare_int, compare_ordered, compare_real, compare_text
from .visits import Visits

# Shapes whose instances can sit inside a reference cycle or be shared.
_TRACKED = frozenset({Shape.ARRAY, Shape.SEQUENCE, Shape.MAPPING, Shape.SET, Shape.STRUCT})

# Shapes for which None and "empty" are interchangeable.
_NIL_OR_EMPTY = frozenset({Shape.SEQUENCE, Shape.MAPPING, Shape.SET})


class _Absent:
    """A value that could not be obtained at all (dead weakref, missing key, unset slot)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<absent>"


ABSENT = _Absent()


def _field_names(value: Any) -> List[str]:
    if dataclasses.is_dataclass(value):
        return [f.name for f in dataclasses.fields(value) if f.compare]
    fields = getattr(type(value), "_fields", None)
    if fields is not None:
        return list(fields)
    return slot_names(type(value))


def _deref(ref: Any) -> Any:
    target = ref()
    return ABSENT if target is None else target


class DeepComparator(Comparator):
    """
    Structural three-way comparison of two values of the same type.

    Every recursive step runs, in order:
      1. absent values order first
      2. None orders first (but equals any empty/None list, set or mapping)
      3. both sides must be of the exact same class
      4. a registered ordering function for that class wins outright
      5. identical objects are equal; pairs already seen reuse their signal
      6. per-shape structural rule (see the _compare_* methods)

    At the top level a None operand equals only None or an empty container
    and orders before everything else.

    Failures raise ComparisonError subclasses and abort the whole call.

    Mapping traversal follows the left operand's iteration order unless
    options.sort_map_keys is set; in that mode the result for two equal-length
    mappings with different contents no longer depends on insertion order.
    """

    def __init__(self, comparisons: Optional[Comparisons] = None, options: Optional[CompareOptions] = None):
        self.comparisons = comparisons if comparisons is not None else default_comparisons()
        self.options = options or CompareOptions()
        self._dispatch: Dict[Shape, Callable[[Any, Any, Visits, int], int]] = {
            Shape.ARRAY: self._compare_array,
            Shape.SEQUENCE: self._compare_sequence,
            Shape.MAPPING: self._compare_mapping,
            Shape.SET: self._compare_set,
            Shape.REFERENCE: self._compare_reference,
            Shape.VARIANT: self._compare_variant,
            Shape.STRUCT: self._compare_struct,
            Shape.CALLABLE: self._compare_callable,
            Shape.BOOL: lambda v1, v2, _visits, _depth: compare_bool(v1, v2),
            Shape.INT: lambda v1, v2, _visits, _depth: compare_int(v1, v2),
            Shape.REAL: lambda v1, v2, _visits, _depth: compare_real(v1, v2),
            Shape.TEXT: lambda v1, v2, _visits, _depth: compare_text(v1, v2),
            Shape.BYTES: lambda v1, v2, _visits, _depth: compare_ordered(v1, v2),
            Shape.OTHER: self._compare_other,
        }

    def compare(self, a: Any, b: Any) -> int:
        if slog.debug_enabled():
            slog.log_debug(f"Comparing {slog.type_name(a)} with {slog.type_name(b)}")
        if a is None or b is None:
            return self._compare_top_nil(a, b)
        if type(a) is not type(b):
            raise TypeMismatchError(slog.type_name(a), slog.type_name(b))
        return self._compare_values(a, b, Visits(), 0)

    def cmp_key(self) -> Callable[[Any], Any]:
        """Key function for sorted()/list.sort() backed by compare()."""
        return functools.cmp_to_key(self.compare)

    # ------------------------------------------------------------------ core

    def _compare_values(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        max_depth = self.options.max_depth
        if max_depth is not None and depth > max_depth:
            raise DepthExceededError(max_depth)

        if v1 is ABSENT or v2 is ABSENT:
            return compare_bool(v1 is not ABSENT, v2 is not ABSENT)
        if v1 is None or v2 is None:
            return self._compare_nil(v1, v2)
        if type(v1) is not type(v2):
            raise TypeMismatchError(slog.type_name(v1), slog.type_name(v2))

        override = self.comparisons.get(type(v1))
        if override is not None:
            return override(v1, v2)

        shape = shape_of(v1)
        try:
            if shape in _TRACKED:
                return self._compare_tracked(shape, v1, v2, visits, depth)
            return self._dispatch[shape](v1, v2, visits, depth)
        except UnexportedFieldError as err:
            err.path.insert(0, slog.type_name(v1))
            raise

    def _compare_nil(self, v1: Any, v2: Any) -> int:
        if v1 is None and v2 is None:
            return 0
        other = v2 if v1 is None else v1
        if shape_of(other) in _NIL_OR_EMPTY:
            return 0
        return compare_bool(v1 is not None, v2 is not None)

    def _compare_top_nil(self, a: Any, b: Any) -> int:
        # Only an empty container stands in for a top-level None; anything
        # else, non-empty containers included, orders after it.
        other = b if a is None else a
        if other is None or (shape_of(other) in _NIL_OR_EMPTY and len(other) == 0):
            return 0
        return compare_bool(a is not None, b is not None)

    def _compare_tracked(self, shape: Shape, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        if v1 is v2:
            return 0
        key, swapped = Visits.canonical(v1, v2)
        seen = visits.lookup(key, swapped)
        if seen is not None:
            return seen
        visits.begin(key)
        res = self._dispatch[shape](v1, v2, visits, depth)
        visits.record(key, swapped, res)
        return res

    def _compare_items(self, items1: Iterable[Any], items2: Iterable[Any], visits: Visits, depth: int) -> int:
        for x1, x2 in zip(items1, items2):
            res = self._compare_values(x1, x2, visits, depth + 1)
            if res != 0:
                return res
        return 0

    def _sort_key(self, visits: Visits, depth: int) -> Callable[[Any], Any]:
        return functools.cmp_to_key(lambda x1, x2: self._compare_values(x1, x2, visits, depth + 1))

    # ---------------------------------------------------------------- shapes

    def _compare_array(self, v1: tuple, v2: tuple, visits: Visits, depth: int) -> int:
        # arity is part of a tuple's shape
        if len(v1) != len(v2):
            raise TypeMismatchError(f"tuple[{len(v1)}]", f"tuple[{len(v2)}]")
        return self._compare_items(v1, v2, visits, depth)

    def _compare_sequence(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        n1, n2 = len(v1), len(v2)
        # one empty side is not ordered against a non-empty one
        if (n1 == 0) != (n2 == 0):
            return 0
        if n1 != n2:
            return compare_int(n1, n2)
        return self._compare_items(v1, v2, visits, depth)

    def _compare_mapping(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        n1, n2 = len(v1), len(v2)
        if (n1 == 0) != (n2 == 0):
            return 0
        if n1 != n2:
            return compare_int(n1, n2)

        keys = list(v1)
        if self.options.sort_map_keys:
            keys.extend(k for k in v2 if k not in v1)
            keys.sort(key=self._sort_key(visits, depth))

        for k in keys:
            x1 = v1[k] if k in v1 else ABSENT
            x2 = v2[k] if k in v2 else ABSENT
            res = self._compare_values(x1, x2, visits, depth + 1)
            if res != 0:
                return res
        return 0

    def _compare_set(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        n1, n2 = len(v1), len(v2)
        if (n1 == 0) != (n2 == 0):
            return 0
        if n1 != n2:
            return compare_int(n1, n2)
        key = self._sort_key(visits, depth)
        return self._compare_items(sorted(v1, key=key), sorted(v2, key=key), visits, depth)

    def _compare_reference(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        return self._compare_values(_deref(v1), _deref(v2), visits, depth + 1)

    def _compare_variant(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        return self._compare_values(v1.value, v2.value, visits, depth + 1)

    def _compare_struct(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        for name in _field_names(v1):
            if name.startswith("_"):
                raise UnexportedFieldError(name)
            res = self._compare_values(getattr(v1, name, ABSENT), getattr(v2, name, ABSENT), visits, depth + 1)
            if res != 0:
                return res
        return 0

    def _compare_callable(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        raise UncomparableCallablesError(slog.type_name(v1))

    def _compare_other(self, v1: Any, v2: Any, visits: Visits, depth: int) -> int:
        # no order defined; equality is all we can offer
        if v1 == v2:
            return 0
        raise UncomparableTypeError(slog.type_name(v1))


def compare(a: Any, b: Any, *, comparisons: Optional[Comparisons] = None,
            options: Optional[CompareOptions] = None) -> int:
    """Compare a and b structurally; see DeepComparator for the rules."""
    return DeepComparator(comparisons, options).compare(a, b)


def cmp_key(*, comparisons: Optional[Comparisons] = None,
            options: Optional[CompareOptions] = None) -> Callable[[Any], Any]:
    return DeepComparator(comparisons, options).cmp_key()
