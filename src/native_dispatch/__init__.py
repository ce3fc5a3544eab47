"""native_dispatch package initialization."""
from __future__ import annotations

from .catalog import Catalog, load_builtins, load_catalog
from .core import (
    ArityError,
    CatalogDefectError,
    Invocation,
    OverloadSet,
    Parameter,
    ResolutionError,
    Resolver,
    Signature,
    TypeMismatchError,
    UnknownKeywordError,
    resolve,
)
from .version import __version__

__all__ = [
    "__version__",
    "ArityError",
    "Catalog",
    "CatalogDefectError",
    "Invocation",
    "OverloadSet",
    "Parameter",
    "ResolutionError",
    "Resolver",
    "Signature",
    "TypeMismatchError",
    "UnknownKeywordError",
    "load_builtins",
    "load_catalog",
    "resolve",
]
