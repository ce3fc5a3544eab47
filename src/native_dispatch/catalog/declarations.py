"""Parser for native schema declarations.

Accepts strings such as::

    sum.dim_IntList(Tensor self, int[1] dim, bool keepdim=False, *, ScalarType? dtype=None) -> Tensor

and turns them into :class:`~native_dispatch.core.Signature` records.
"""
from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple

from native_dispatch.core import Parameter, Signature

_DECLARATION = re.compile(r"\A\s*([A-Za-z_][\w.]*)\s*\((.*)\)\s*->\s*(.+?)\s*\Z", re.DOTALL)
_INT = re.compile(r"\A-?\d+\Z")
_FLOAT = re.compile(r"\A-?(\d+\.\d*|\.\d+|\d+(\.\d*)?[eE][-+]?\d+)\Z")

_REDUCTIONS = {
    "Mean": "mean",
    "Sum": "sum",
    "at::Reduction::Mean": "mean",
    "at::Reduction::Sum": "sum",
    "at::Reduction::None": "none",
}


def parse_declaration(func: str, callee: Optional[str] = None) -> Signature:
    match = _DECLARATION.match(func)
    if not match:
        raise ValueError(f"Malformed declaration '{func}'")
    full_name, params_text, returns = match.groups()
    public_name = full_name.split(".", 1)[0]
    params = _parse_params(params_text, func)
    out_count = 0 if public_name.endswith("_") else returns.count("!")
    try:
        return Signature(
            public_name=public_name,
            callee_name=callee or default_callee(full_name),
            params=params,
            out_count=out_count,
        )
    except ValueError as exc:
        raise ValueError(f"Invalid declaration '{func}': {exc}") from exc


def default_callee(full_name: str) -> str:
    return "_" + full_name.replace(".", "_").lower()


def _parse_params(text: str, func: str) -> Tuple[Parameter, ...]:
    params: List[Parameter] = []
    positional = True
    for item in split_top_level(text):
        if item == "*":
            positional = False
            continue
        head, sep, default_text = item.partition("=")
        parts = head.strip().rsplit(None, 1)
        if len(parts) != 2:
            raise ValueError(f"Malformed parameter '{item}' in declaration '{func}'")
        type_tag, name = parts
        params.append(
            Parameter(
                name=name,
                type_tag=type_tag,
                positional=positional,
                has_default=bool(sep),
                default=parse_default(default_text.strip()) if sep else None,
            )
        )
    return tuple(params)


def split_top_level(text: str) -> List[str]:
    """Split on commas that are not nested inside brackets or parentheses."""

    items: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
        if char == "," and depth == 0:
            items.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        items.append(tail)
    return [item for item in items if item]


def parse_default(text: str) -> Any:
    if text == "True":
        return True
    if text == "False":
        return False
    if text == "None":
        return None
    if text in _REDUCTIONS:
        return _REDUCTIONS[text]
    if _INT.match(text):
        return int(text)
    if _FLOAT.match(text):
        return float(text)
    if text.startswith("[") and text.endswith("]"):
        return [parse_default(part) for part in split_top_level(text[1:-1])]
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    return text
