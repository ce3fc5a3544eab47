"""Catalog loading and lookup."""

from .builtins import BUILTIN_DECLARATIONS, load_builtins
from .declarations import parse_declaration
from .loader import load_catalog, load_catalog_data
from .registry import Catalog

__all__ = [
    "BUILTIN_DECLARATIONS",
    "Catalog",
    "load_builtins",
    "load_catalog",
    "load_catalog_data",
    "parse_declaration",
]
