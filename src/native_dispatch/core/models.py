"""Core dataclasses shared across native_dispatch subsystems."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple


@dataclass(frozen=True)
class Parameter:
    """One declared argument of a native signature."""

    name: str
    type_tag: str
    positional: bool = True
    has_default: bool = False
    default: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Parameter":
        has_default = "default" in data
        return cls(
            name=str(data["name"]),
            type_tag=str(data["type"]),
            positional=bool(data.get("positional", True)),
            has_default=has_default,
            default=data.get("default") if has_default else None,
        )


@dataclass(frozen=True)
class Signature:
    """A single overload of a public function."""

    public_name: str
    callee_name: str
    params: Tuple[Parameter, ...] = tuple()
    out_count: int = 0

    def __post_init__(self) -> None:
        if self.out_count < 0 or self.out_count > len(self.params):
            raise ValueError(
                f"Signature '{self.callee_name}' declares out_count={self.out_count} "
                f"with {len(self.params)} parameters"
            )
        names = [param.name for param in self.params]
        if len(set(names)) != len(names):
            raise ValueError(f"Signature '{self.callee_name}' has duplicate parameter names")

    @property
    def is_out(self) -> bool:
        return self.out_count > 0

    @property
    def out_params(self) -> Tuple[Parameter, ...]:
        if not self.out_count:
            return tuple()
        return self.params[-self.out_count :]

    def positional_arity(self) -> int:
        return sum(1 for param in self.params if param.positional)

    def required_positional_arity(self) -> int:
        return sum(1 for param in self.params if param.positional and not param.has_default)

    def has_param(self, name: str) -> bool:
        return any(param.name == name for param in self.params)


@dataclass(frozen=True)
class Invocation:
    """Canonical call produced by a successful resolution."""

    callee_name: str
    args: Tuple[Any, ...]

    def as_dict(self) -> Dict[str, Any]:
        return {"callee_name": self.callee_name, "args": list(self.args)}


@dataclass
class Call:
    """Positional values and keyword options of one call site."""

    args: Sequence[Any] = field(default_factory=tuple)
    kwargs: Mapping[str, Any] = field(default_factory=dict)
