"""Overload sets: every signature sharing one public name."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Tuple

from .models import Signature


@dataclass(frozen=True)
class OverloadSet:
    """Immutable group of signatures with cached positional arity bounds."""

    signatures: Tuple[Signature, ...]
    min_positional_arity: int = field(init=False)
    max_positional_arity: int = field(init=False)

    def __post_init__(self) -> None:
        items = tuple(self.signatures)
        if not items:
            raise ValueError("An overload set requires at least one signature")
        name = items[0].public_name
        mismatched = sorted({sig.public_name for sig in items if sig.public_name != name})
        if mismatched:
            raise ValueError(f"Overload set '{name}' cannot include signatures named {mismatched}")
        callees = [sig.callee_name for sig in items]
        if len(set(callees)) != len(callees):
            raise ValueError(f"Overload set '{name}' has duplicate callee names")
        object.__setattr__(self, "signatures", items)
        object.__setattr__(self, "min_positional_arity", min(sig.required_positional_arity() for sig in items))
        object.__setattr__(self, "max_positional_arity", max(sig.positional_arity() for sig in items))

    @property
    def name(self) -> str:
        return self.signatures[0].public_name

    def expected_arity(self) -> str:
        """Human readable arity range: ``min`` or ``min..max``."""

        if self.min_positional_arity == self.max_positional_arity:
            return str(self.min_positional_arity)
        return f"{self.min_positional_arity}..{self.max_positional_arity}"

    def __iter__(self) -> Iterator[Signature]:
        return iter(self.signatures)

    def __len__(self) -> int:
        return len(self.signatures)
