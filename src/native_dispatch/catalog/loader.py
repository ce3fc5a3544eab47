"""YAML loader and validation for native function catalogs."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml
from jsonschema import Draft7Validator

from native_dispatch.core import Parameter, Signature
from native_dispatch.core.types import TensorPredicate, default_is_tensor

from .declarations import default_callee, parse_declaration
from .registry import Catalog

logger = logging.getLogger(__name__)


def load_catalog(path: str, is_tensor: TensorPredicate = default_is_tensor) -> Catalog:
    """Load and validate a catalog file."""
    catalog_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}
    catalog = load_catalog_data(raw, is_tensor=is_tensor)
    logger.debug("loaded %d functions from %s", len(catalog), catalog_path)
    return catalog


def load_catalog_data(raw: Any, is_tensor: TensorPredicate = default_is_tensor) -> Catalog:
    """Validate an already parsed catalog mapping and build a :class:`Catalog`."""
    if not isinstance(raw, Mapping):
        raise ValueError("Catalog file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Catalog schema validation failed: {messages}")
    signatures = [_parse_entry(entry, idx) for idx, entry in enumerate(raw["functions"])]
    return Catalog(signatures, is_tensor=is_tensor)


def _parse_entry(entry: Mapping[str, Any], idx: int) -> Signature:
    callee = entry.get("callee")
    if "func" in entry:
        signature = parse_declaration(entry["func"], callee)
        if "out_count" in entry:
            signature = _with_out_count(signature, int(entry["out_count"]), idx)
        return signature
    name = _require_str(entry, "name", idx)
    params = _parse_params(entry["params"], idx)
    try:
        return Signature(
            public_name=name.split(".", 1)[0],
            callee_name=str(callee) if callee else default_callee(name),
            params=params,
            out_count=int(entry.get("out_count", 0)),
        )
    except ValueError as exc:
        raise ValueError(f"functions/{idx}: {exc}") from exc


def _with_out_count(signature: Signature, out_count: int, idx: int) -> Signature:
    try:
        return Signature(
            public_name=signature.public_name,
            callee_name=signature.callee_name,
            params=signature.params,
            out_count=out_count,
        )
    except ValueError as exc:
        raise ValueError(f"functions/{idx}: {exc}") from exc


def _parse_params(raw: Sequence[Mapping[str, Any]], idx: int) -> tuple[Parameter, ...]:
    params = []
    seen_keyword_only = False
    for entry in raw:
        param = Parameter.from_mapping(entry)
        if param.positional and seen_keyword_only:
            raise ValueError(
                f"functions/{idx}: positional parameter '{param.name}' follows a keyword-only parameter"
            )
        seen_keyword_only = seen_keyword_only or not param.positional
        params.append(param)
    return tuple(params)


def _require_str(raw: Mapping[str, Any], key: str, idx: int) -> str:
    text = str(raw.get(key, "")).strip()
    if not text:
        raise ValueError(f"functions/{idx}: field '{key}' cannot be empty")
    return text


PARAM_SCHEMA = {
    "type": "object",
    "required": ["name", "type"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "type": {"type": "string", "minLength": 1},
        "positional": {"type": "boolean"},
        "default": {},
    },
    "additionalProperties": False,
}

CATALOG_SCHEMA = {
    "type": "object",
    "required": ["functions"],
    "properties": {
        "functions": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "anyOf": [{"required": ["func"]}, {"required": ["name", "params"]}],
                "properties": {
                    "func": {"type": "string", "minLength": 1},
                    "name": {"type": "string", "minLength": 1},
                    "callee": {"type": "string", "minLength": 1},
                    "out_count": {"type": "integer", "minimum": 0},
                    "params": {"type": "array", "items": PARAM_SCHEMA},
                },
                "additionalProperties": False,
            },
        },
    },
}
_validator = Draft7Validator(CATALOG_SCHEMA)
