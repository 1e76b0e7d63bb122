"""Detailed-schema JSON notation for Plutus data.

This is the JSON rendering used by cardano-cli and most off-chain tooling
(`--*-json-file` with the detailed schema).  One object per node:

    {"int": 42}
    {"bytes": "cafe"}                         lower-case hex
    {"list": [ ... ]}
    {"map": [{"k": ..., "v": ...}, ...]}
    {"constructor": 0, "fields": [ ... ]}     logical variant, not the tag

It is a diagnostic and test-vector format, not a wire encoding.  Parsing
is strict: unknown or missing keys, floats, booleans in number position,
and malformed hex all raise JsonFormatError.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Union

from ._constants import U64_MAX
from ._core import create_array, create_constr, create_map
from ._errors import JsonFormatError
from ._node import Array, BigInt, BoundedBytes, Constr, Map, PlutusData


def node_to_json(data: PlutusData) -> Dict[str, Any]:
    """Render a node tree as detailed-schema JSON (plain dicts and lists)."""
    if isinstance(data, BigInt):
        return {"int": data.value}
    if isinstance(data, BoundedBytes):
        return {"bytes": data.value.hex()}
    if isinstance(data, Array):
        return {"list": [node_to_json(i) for i in data.items]}
    if isinstance(data, Map):
        return {"map": [{"k": node_to_json(k), "v": node_to_json(v)}
                        for k, v in data.pairs]}
    if isinstance(data, Constr):
        variant = data.variant
        if variant is None:
            raise JsonFormatError("constructor tag {} has no variant".format(data.tag))
        return {"constructor": variant,
                "fields": [node_to_json(f) for f in data.fields]}
    raise JsonFormatError("not a Plutus data node: {}".format(type(data).__name__))


# ── Parsing ──────────────────────────────────────────────────
# json.loads turns "1.0" into a float before we can see it; the
# parse_float hook rejects such tokens at the source.

def _reject_float(token: str) -> Any:
    raise JsonFormatError("non-integer number {}".format(token))


def _expect_keys(obj: Dict[str, Any], keys: List[str]) -> None:
    if sorted(obj) != sorted(keys):
        raise JsonFormatError("expected keys {}, got {}".format(keys, sorted(obj)))


def _expect_int(val: Any, what: str) -> int:
    if isinstance(val, bool) or not isinstance(val, int):
        raise JsonFormatError("{} must be an integer, got {!r}".format(what, val))
    return val


def _expect_list(val: Any, what: str) -> List[Any]:
    if not isinstance(val, list):
        raise JsonFormatError("{} must be a list".format(what))
    return val


def node_from_json(obj: Any) -> PlutusData:
    """Build a node tree from parsed detailed-schema JSON."""
    if not isinstance(obj, dict):
        raise JsonFormatError("node must be an object, got {}".format(type(obj).__name__))

    if "int" in obj:
        _expect_keys(obj, ["int"])
        return BigInt(_expect_int(obj["int"], "int"))

    if "bytes" in obj:
        _expect_keys(obj, ["bytes"])
        raw = obj["bytes"]
        if not isinstance(raw, str):
            raise JsonFormatError("bytes must be a hex string")
        try:
            return BoundedBytes(bytes.fromhex(raw))
        except ValueError as exc:
            raise JsonFormatError("bad hex in bytes: {}".format(exc)) from exc

    if "list" in obj:
        _expect_keys(obj, ["list"])
        return create_array(node_from_json(i) for i in _expect_list(obj["list"], "list"))

    if "map" in obj:
        _expect_keys(obj, ["map"])
        pairs = []
        for entry in _expect_list(obj["map"], "map"):
            if not isinstance(entry, dict):
                raise JsonFormatError("map entry must be an object")
            _expect_keys(entry, ["k", "v"])
            pairs.append((node_from_json(entry["k"]), node_from_json(entry["v"])))
        return create_map(pairs)

    if "constructor" in obj:
        _expect_keys(obj, ["constructor", "fields"])
        variant = _expect_int(obj["constructor"], "constructor")
        if variant < 0 or variant > U64_MAX:
            raise JsonFormatError("constructor {} outside 0..2**64-1".format(variant))
        fields = [node_from_json(f) for f in _expect_list(obj["fields"], "fields")]
        return create_constr(variant, fields)

    raise JsonFormatError("unrecognised node keys {}".format(sorted(obj)))


def loads(raw: Union[str, bytes]) -> PlutusData:
    """Parse detailed-schema JSON text into a node tree."""
    try:
        obj = json.loads(raw, parse_float=_reject_float)
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        raise JsonFormatError("invalid JSON: {}".format(exc)) from exc
    return node_from_json(obj)


def dumps(data: PlutusData) -> str:
    """Render a node tree as compact detailed-schema JSON text."""
    return json.dumps(node_to_json(data), separators=(",", ":"))
