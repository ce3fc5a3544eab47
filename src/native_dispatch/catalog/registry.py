"""Catalog of overload sets keyed by public name."""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from native_dispatch.core import Invocation, OverloadSet, Resolver, Signature
from native_dispatch.core.types import TensorPredicate, default_is_tensor

from .declarations import parse_declaration


class Catalog:
    """Read-only registry of overload sets, built once and passed explicitly."""

    def __init__(self, signatures: Iterable[Signature], is_tensor: TensorPredicate = default_is_tensor) -> None:
        grouped: Dict[str, List[Signature]] = {}
        for signature in signatures:
            grouped.setdefault(signature.public_name, []).append(signature)
        self._overloads: Mapping[str, OverloadSet] = MappingProxyType(
            {name: OverloadSet(tuple(items)) for name, items in grouped.items()}
        )
        self._resolver = Resolver(is_tensor=is_tensor)

    @classmethod
    def from_declarations(
        cls,
        declarations: Iterable[Union[str, Mapping[str, Any]]],
        is_tensor: TensorPredicate = default_is_tensor,
    ) -> "Catalog":
        """Build a catalog from declaration strings or ``{"func", "callee"}`` mappings."""

        signatures = []
        for entry in declarations:
            if isinstance(entry, str):
                signatures.append(parse_declaration(entry))
            else:
                signatures.append(parse_declaration(str(entry["func"]), entry.get("callee")))
        return cls(signatures, is_tensor=is_tensor)

    def get(self, name: str) -> OverloadSet:
        try:
            return self._overloads[name]
        except KeyError as exc:
            raise KeyError(f"Function '{name}' is not in the catalog") from exc

    def resolve(
        self,
        name: str,
        args: Sequence[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> Invocation:
        return self._resolver.resolve(self.get(name), args, kwargs)

    def __contains__(self, name: object) -> bool:
        return name in self._overloads

    def __iter__(self) -> Iterator[OverloadSet]:
        return iter(self._overloads.values())

    def __len__(self) -> int:
        return len(self._overloads)

    def names(self) -> Iterable[str]:
        return tuple(self._overloads.keys())
