"""Overload resolution for loosely typed call sites.

A call is pushed through a fixed pipeline of pure stages, each taking an
immutable candidate tuple and returning a possibly smaller one:

1. trim trailing ``None`` positionals and check the overload set's arity range
2. drop candidates that cannot take that many arguments
3. drop output overloads unless the caller passed ``out``
4. fan a multi-value ``out`` out to the trailing output parameters
5. drop candidates lacking a supplied keyword, then reject an ``out`` group
   that is not a sequence
6. bind and type check every remaining candidate
7. emit the single survivor as an :class:`Invocation`
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import ArityError, CatalogDefectError, TypeMismatchError, UnknownKeywordError
from .models import Call, Invocation, Signature
from .overloads import OverloadSet
from .types import TensorPredicate, base_tag, check_value, default_is_tensor, is_sequence

logger = logging.getLogger(__name__)

Candidates = Tuple[Signature, ...]
Binding = Dict[str, Any]

OUT_KEYWORD = "out"


def trim_positionals(args: Sequence[Any]) -> Tuple[Any, ...]:
    values = list(args)
    while values and values[-1] is None:
        values.pop()
    return tuple(values)


def check_arity(overloads: OverloadSet, count: int) -> None:
    if count < overloads.min_positional_arity or count > overloads.max_positional_arity:
        raise ArityError(f"wrong number of arguments (given {count}, expected {overloads.expected_arity()})")


def filter_by_arity(candidates: Candidates, count: int) -> Candidates:
    return tuple(sig for sig in candidates if len(sig.params) >= count)


def out_supplied(kwargs: Mapping[str, Any]) -> bool:
    value = kwargs.get(OUT_KEYWORD)
    return value is not None and value is not False


def filter_out_overloads(candidates: Candidates, kwargs: Mapping[str, Any]) -> Candidates:
    if out_supplied(kwargs):
        return candidates
    return tuple(sig for sig in candidates if not sig.is_out)


def rewrite_out_group(candidates: Candidates, kwargs: Mapping[str, Any]) -> Tuple[Candidates, Dict[str, Any]]:
    """Splice a multi-value ``out`` into the trailing output parameters.

    Returns the narrowed candidates and a new keyword mapping; ``kwargs``
    itself is left untouched. A non-sequence ``out`` is left in place for
    :func:`check_out_group`.
    """

    options = dict(kwargs)
    out_value = options.get(OUT_KEYWORD)
    if not out_supplied(options) or not is_sequence(out_value):
        return candidates, options
    multi = [sig for sig in candidates if sig.out_count > 1]
    if len(multi) != 1:
        return candidates, options
    signature = multi[0]
    del options[OUT_KEYWORD]
    for index, param in enumerate(signature.out_params):
        options[param.name] = out_value[index] if index < len(out_value) else None
    return (signature,), options


def accepts_keyword(signature: Signature, keyword: str) -> bool:
    if keyword == OUT_KEYWORD and signature.out_count > 1:
        return True
    return signature.has_param(keyword)


def filter_by_keywords(candidates: Candidates, kwargs: Mapping[str, Any]) -> Candidates:
    for keyword in kwargs:
        candidates = tuple(sig for sig in candidates if accepts_keyword(sig, keyword))
        if not candidates:
            raise UnknownKeywordError(keyword)
    return candidates


def check_out_group(candidates: Candidates, kwargs: Mapping[str, Any], function: str) -> Candidates:
    """Reject an ``out`` group that was not passed as a sequence.

    Runs after the keyword filter so unknown keywords are reported first.
    """

    out_value = kwargs.get(OUT_KEYWORD)
    if not out_supplied(kwargs) or is_sequence(out_value):
        return candidates
    multi = [sig for sig in candidates if sig.out_count > 1]
    if len(multi) == 1:
        raise TypeMismatchError(function, OUT_KEYWORD, f"a tuple of {multi[0].out_count} Tensors")
    return candidates


def bind(signature: Signature, args: Sequence[Any], kwargs: Mapping[str, Any]) -> Binding:
    """Map positional values, keyword overrides and defaults onto parameter names."""

    binding: Binding = {param.name: value for param, value in zip(signature.params, args)}
    binding.update(kwargs)
    for param in signature.params:
        if binding.get(param.name) is None:
            default = param.default
            binding[param.name] = list(default) if isinstance(default, list) else default
    return binding


class Resolver:
    """Selects one overload per call and produces the canonical invocation."""

    def __init__(self, is_tensor: TensorPredicate = default_is_tensor) -> None:
        self.is_tensor = is_tensor

    def resolve(
        self,
        overloads: OverloadSet,
        args: Sequence[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> Invocation:
        name = overloads.name
        positionals = trim_positionals(args)
        check_arity(overloads, len(positionals))

        candidates = filter_by_arity(overloads.signatures, len(positionals))
        options: Mapping[str, Any] = dict(kwargs or {})
        candidates = filter_out_overloads(candidates, options)
        candidates, options = rewrite_out_group(candidates, options)
        candidates = filter_by_keywords(candidates, options)
        candidates = check_out_group(candidates, options, name)

        survivors = []
        for signature in candidates:
            binding = self.validate(signature, bind(signature, positionals, options), single=len(candidates) == 1)
            if binding is not None:
                survivors.append((signature, binding))

        if len(survivors) != 1:
            raise CatalogDefectError(f"Expected exactly one overload for {name}, got {len(survivors)}.", name)
        signature, binding = survivors[0]
        logger.debug("resolved %s to %s", name, signature.callee_name)
        return Invocation(
            callee_name=signature.callee_name,
            args=tuple(binding[param.name] for param in signature.params),
        )

    def resolve_call(self, overloads: OverloadSet, call: Call) -> Invocation:
        return self.resolve(overloads, call.args, call.kwargs)

    def validate(self, signature: Signature, binding: Binding, single: bool) -> Optional[Binding]:
        """Type check ``binding`` in declared parameter order.

        Returns the (possibly coerced) binding, or ``None`` when the candidate
        is eliminated. With ``single`` set a mismatch raises instead.
        """

        name = signature.public_name
        checked = dict(binding)
        for param in signature.params:
            tag = base_tag(param.type_tag)
            ok, value = check_value(tag, param.name, checked[param.name], function=name, is_tensor=self.is_tensor)
            if not ok:
                if single:
                    argument = "input" if param.name == "self" else param.name
                    raise TypeMismatchError(name, argument, tag)
                logger.debug("dropping %s: argument '%s' is not %s", signature.callee_name, param.name, tag)
                return None
            checked[param.name] = value
        return checked


_default_resolver = Resolver()


def resolve(
    overloads: OverloadSet,
    args: Sequence[Any] = (),
    kwargs: Optional[Mapping[str, Any]] = None,
) -> Invocation:
    """Resolve a call against ``overloads`` treating ``numpy.ndarray`` as the tensor type."""

    return _default_resolver.resolve(overloads, args, kwargs)
