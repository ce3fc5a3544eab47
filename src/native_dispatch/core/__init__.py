"""Core models and the overload resolver exposed at the package level."""
from .errors import ArityError, CatalogDefectError, ResolutionError, TypeMismatchError, UnknownKeywordError
from .models import Call, Invocation, Parameter, Signature
from .overloads import OverloadSet
from .resolver import Resolver, resolve

__all__ = [
    "ArityError",
    "Call",
    "CatalogDefectError",
    "Invocation",
    "OverloadSet",
    "Parameter",
    "ResolutionError",
    "Resolver",
    "Signature",
    "TypeMismatchError",
    "UnknownKeywordError",
    "resolve",
]
