# structcmp/structcmp/comparators/registry.py
from __future__ import annotations
import inspect
import sys
import typing
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from structcmp import logging as slog
from structcmp.errors import (
    ArityError,
    InvalidOverrideError,
    NotCallableError,
    ParameterTypeError,
    RegistryFrozenError,
    ReturnArityError,
    ReturnTypeError,
)
from .interface import OrderingFunc

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_MISSING = inspect.Parameter.empty


def _type_hints(fn: Any) -> Dict[str, Any]:
    target = fn if inspect.isroutine(fn) else getattr(fn, "__call__", fn)
    try:
        return typing.get_type_hints(target)
    except Exception as e:
        raise ParameterTypeError(f"cannot resolve annotations of {fn!r}: {e}") from e


def validate_ordering_func(fn: Any, for_type: Optional[type] = None) -> type:
    """
    Check that fn looks like `def f(a: T, b: T) -> int` and return T.

    With for_type given, annotations may be left out (lambdas, partials), but
    any annotation that is present must agree with for_type / int.
    """
    if not callable(fn):
        raise NotCallableError(f"expected a callable, got: {fn!r}")

    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        raise ArityError(f"cannot inspect signature of {fn!r}: {e}") from e

    params = list(sig.parameters.values())
    if len(params) != 2 or any(p.kind not in _POSITIONAL for p in params):
        raise ArityError(f"expected exactly two positional parameters, got: {sig}")

    hints = _type_hints(fn)
    t1 = hints.get(params[0].name, _MISSING)
    t2 = hints.get(params[1].name, _MISSING)

    if for_type is None:
        if t1 is _MISSING or t2 is _MISSING:
            raise ParameterTypeError(f"both parameters must be annotated with the compared type, got: {sig}")
        if t1 is not t2:
            raise ParameterTypeError(f"expected arg 1 and 2 to have the same type, got: {sig}")
        param_type = t1
    else:
        for t in (t1, t2):
            if t is not _MISSING and t is not for_type:
                raise ParameterTypeError(f"parameter annotated {t!r} does not match for_type {for_type!r}")
        param_type = for_type

    if not isinstance(param_type, type):
        raise ParameterTypeError(f"compared type must be a concrete class, got: {param_type!r}")

    ret = hints.get("return", _MISSING)
    if ret is _MISSING:
        if for_type is None:
            raise ReturnTypeError(f"expected an 'int' return annotation, got: {sig}")
    elif ret is type(None):
        raise ReturnArityError(f"expected one return value, got none: {sig}")
    elif ret is tuple or typing.get_origin(ret) is tuple:
        raise ReturnArityError(f"expected one return value, got a tuple: {sig}")
    elif ret is not int:
        raise ReturnTypeError(f"expected 'int' return, got: {sig}")

    return param_type


class Comparisons(Mapping):
    """
    Registry of ordering overrides, keyed by the exact class they compare.

    Read access follows the Mapping protocol (`get`, `in`, iteration, `len`);
    the only way in is register()/register_all(). Last registration for a
    type wins. The engine never writes here, so a frozen registry can be
    shared between threads.
    """

    def __init__(self) -> None:
        self._funcs: Dict[type, OrderingFunc] = {}
        self._frozen = False

    def register(self, fn: OrderingFunc, *, for_type: Optional[type] = None) -> OrderingFunc:
        if self._frozen:
            raise RegistryFrozenError("cannot register on a frozen Comparisons")
        try:
            tp = validate_ordering_func(fn, for_type)
        except InvalidOverrideError as e:
            slog.log_warn(f"Rejected ordering function {fn!r}: {e}")
            raise
        if tp in self._funcs:
            slog.log_debug(f"Replacing ordering function for {slog.type_name(tp)}")
        self._funcs[tp] = fn
        slog.log_debug(f"Registered ordering function for {slog.type_name(tp)}")
        return fn

    def register_all(self, *funcs: OrderingFunc) -> None:
        # not atomic: functions before a failing one stay registered
        for fn in funcs:
            self.register(fn)

    def freeze(self) -> "Comparisons":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def available(self) -> Dict[type, OrderingFunc]:
        return dict(self._funcs)

    def __getitem__(self, tp: type) -> OrderingFunc:
        return self._funcs[tp]

    def __iter__(self) -> Iterator[type]:
        return iter(self._funcs)

    def __len__(self) -> int:
        return len(self._funcs)

    def __repr__(self) -> str:
        names = ", ".join(slog.type_name(t) for t in self._funcs)
        return f"Comparisons([{names}]{', frozen' if self._frozen else ''})"


def new_comparisons(*funcs: OrderingFunc) -> Comparisons:
    """Build a registry from funcs; raises InvalidOverrideError on the first bad one."""
    c = Comparisons()
    c.register_all(*funcs)
    return c


def new_comparisons_or_die(*funcs: OrderingFunc) -> Comparisons:
    """Like new_comparisons, but a bad function terminates the process (exit status 2)."""
    try:
        return new_comparisons(*funcs)
    except InvalidOverrideError as e:
        slog.log_err(f"Invalid ordering function: {e}")
        sys.exit(2)


# Process default used by compare() when no registry is passed.
_DEFAULT = Comparisons()

def default_comparisons() -> Comparisons:
    return _DEFAULT

def register(fn: OrderingFunc, *, for_type: Optional[type] = None) -> OrderingFunc:
    return _DEFAULT.register(fn, for_type=for_type)

def get(tp: type) -> OrderingFunc | None:
    return _DEFAULT.get(tp)

def available() -> Dict[type, OrderingFunc]:
    return _DEFAULT.available()
