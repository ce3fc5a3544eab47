"""Exception types raised while resolving overloaded calls."""
from __future__ import annotations


class ResolutionError(TypeError):
    """A call that cannot be matched to any overload because of caller input."""

    kind = "resolution"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ArityError(ResolutionError):
    kind = "arity"


class UnknownKeywordError(ResolutionError):
    kind = "unknown_keyword"

    def __init__(self, keyword: str) -> None:
        super().__init__(f"unknown keyword: {keyword}")
        self.keyword = keyword


class TypeMismatchError(ResolutionError):
    kind = "type_mismatch"

    def __init__(self, function: str, argument: str, expected: str) -> None:
        super().__init__(f"{function}(): argument '{argument}' must be {expected}")
        self.function = function
        self.argument = argument
        self.expected = expected


class CatalogDefectError(RuntimeError):
    """Internal failure caused by a broken catalog or a resolver bug.

    Not a ``ResolutionError``: callers handling user mistakes must not catch it.
    """

    kind = "internal"

    def __init__(self, message: str, function: str = "") -> None:
        if function:
            message = f"{message} Please report a bug with {function}."
        super().__init__(message)
        self.message = message
        self.function = function
