"""Type tag vocabulary: runtime checks and implicit coercions."""
from __future__ import annotations

import re
from typing import Any, Callable, Tuple

import numpy as np

from .errors import CatalogDefectError

TensorPredicate = Callable[[Any], bool]

REDUCTION_PARAM = "reduction"

_INT_LIST = re.compile(r"\Aint\[([^\]]*)\]\Z")
_SIZE = re.compile(r"\A\d+\Z")


def default_is_tensor(value: Any) -> bool:
    return isinstance(value, np.ndarray)


def is_integer(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, np.integer))


def is_numeric(value: Any) -> bool:
    return is_integer(value) or isinstance(value, (float, np.floating))


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def base_tag(type_tag: str) -> str:
    """Strip alias annotations such as ``Tensor(a!)`` down to ``Tensor``."""

    return type_tag.split("(", 1)[0]


def check_value(
    tag: str,
    name: str,
    value: Any,
    *,
    function: str,
    is_tensor: TensorPredicate = default_is_tensor,
) -> Tuple[bool, Any]:
    """Validate ``value`` against a normalized type tag.

    Returns ``(ok, value)`` where ``value`` may have been coerced
    (a bare integer broadcast into an ``int[N]`` list).
    Raises ``CatalogDefectError`` for tags outside the vocabulary.
    """

    if tag == "Tensor":
        return is_tensor(value), value
    if tag == "Tensor?":
        return value is None or is_tensor(value), value
    if tag in ("Tensor[]", "Tensor?[]"):
        return is_sequence(value) and all(is_tensor(item) for item in value), value
    if tag == "int":
        if name == REDUCTION_PARAM:
            return isinstance(value, str), value
        return is_integer(value), value
    if tag in ("float", "Scalar"):
        return is_numeric(value), value
    match = _INT_LIST.match(tag)
    if match:
        if is_integer(value):
            size = match.group(1)
            if not _SIZE.match(size):
                raise CatalogDefectError(f"Unknown size: {size}.", function)
            value = [value] * int(size)
        return is_sequence(value) and all(is_integer(item) for item in value), value
    if tag == "ScalarType?":
        return value is None, value
    if tag == "bool":
        return value is True or value is False, value
    if tag == "str":
        return isinstance(value, str), value
    raise CatalogDefectError(f"Unknown argument type: {tag}.", function)
