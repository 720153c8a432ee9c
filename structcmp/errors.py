# structcmp/structcmp/errors.py
"""
Exception hierarchy.

Comparison-time failures derive from ComparisonError and abort the whole
top-level comparison. Registration-time failures derive from
InvalidOverrideError (a ValueError) and are ordinary, recoverable errors.
"""
from __future__ import annotations
from typing import List, Optional


class ComparisonError(Exception):
    """Two values cannot be ordered without more configuration."""


class TypeMismatchError(ComparisonError, TypeError):
    """Two non-nil values have different type descriptors."""

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"cannot compare different types: {left} - {right}")


class UnexportedFieldError(ComparisonError):
    """
    A non-public field was reached without a registered override.

    Attributes:
        path: type names from the outermost value down to the owner of the field
        field: the offending field name
    """

    def __init__(self, field: str, path: Optional[List[str]] = None):
        self.field = field
        self.path: List[str] = list(path or [])
        super().__init__(field)

    def __str__(self) -> str:
        nested = " -> ".join(self.path) if self.path else "<unknown>"
        return (
            f"an unexported field was encountered, nested like this: {nested} "
            f"(field '{self.field}'); register an override for one of these types"
        )


class UncomparableCallablesError(ComparisonError):
    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"cannot compare two non-nil callables of type {type_name}")


class UncomparableTypeError(ComparisonError):
    """No order is defined for the type and the two values are not equal."""

    def __init__(self, value_type: str):
        self.value_type = value_type
        super().__init__(f"cannot compare values of type {value_type}")


class DepthExceededError(ComparisonError):
    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"structure nested deeper than max_depth={max_depth}")


class InvalidOverrideError(ValueError):
    """A candidate ordering function failed validation."""


class NotCallableError(InvalidOverrideError):
    pass


class ArityError(InvalidOverrideError):
    pass


class ParameterTypeError(InvalidOverrideError):
    pass


class ReturnArityError(InvalidOverrideError):
    pass


class ReturnTypeError(InvalidOverrideError):
    pass


class RegistryFrozenError(RuntimeError):
    pass
