"""Structural helpers — check a node's kind and arity before destructuring,
and build nodes with canonical framing.

Every decoder in the package goes through these helpers, so the error a
caller sees for a malformed tree is always one of the taxonomy in _errors:
UnexpectedNodeKind for the wrong node, WrongTupleArity / WrongVariantArity
for the wrong length, CustomDecodeError for a tag that does not invert.

Framing rule (matches the ledger's own serializer): a non-empty Array or
Constr field list is written with indefinite length, an empty one with
definite length.  Decoders accept both.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ._constants import KIND_ARRAY, KIND_BIGINT, KIND_BYTES, KIND_CONSTR, KIND_MAP
from ._errors import (
    CustomDecodeError,
    UnexpectedNodeKind,
    WrongTupleArity,
    WrongVariantArity,
)
from ._node import (
    Array,
    BigInt,
    BoundedBytes,
    Constr,
    Map,
    PlutusData,
    kind_name,
)
from ._tags import variant_to_tag


# ── Destructuring ────────────────────────────────────────────

def expect_bigint(data: PlutusData) -> int:
    if not isinstance(data, BigInt):
        raise UnexpectedNodeKind(KIND_BIGINT, kind_name(data))
    return data.value


def expect_bytes(data: PlutusData) -> bytes:
    if not isinstance(data, BoundedBytes):
        raise UnexpectedNodeKind(KIND_BYTES, kind_name(data))
    return data.value


def expect_array(data: PlutusData) -> List[PlutusData]:
    if not isinstance(data, Array):
        raise UnexpectedNodeKind(KIND_ARRAY, kind_name(data))
    return list(data.items)


def expect_map(data: PlutusData) -> List[Tuple[PlutusData, PlutusData]]:
    if not isinstance(data, Map):
        raise UnexpectedNodeKind(KIND_MAP, kind_name(data))
    return list(data.pairs)


def expect_constr(data: PlutusData) -> Tuple[int, List[PlutusData]]:
    """Return (variant, fields) of a Constr node."""
    if not isinstance(data, Constr):
        raise UnexpectedNodeKind(KIND_CONSTR, kind_name(data))
    variant = data.variant
    if variant is None:
        raise CustomDecodeError("value has invalid tag")
    return variant, list(data.fields)


def expect_tuple(items: Sequence[PlutusData], n: int) -> List[PlutusData]:
    """Exactly n items of a positional array, or WrongTupleArity."""
    if len(items) != n:
        raise WrongTupleArity(n, len(items))
    return list(items)


def expect_variant(variant: int, fields: Sequence[PlutusData], n: int) -> List[PlutusData]:
    """Exactly n fields of a matched constructor, or WrongVariantArity."""
    if len(fields) != n:
        raise WrongVariantArity(variant, n, len(fields))
    return list(fields)


# ── Construction ─────────────────────────────────────────────

def create_constr(variant: int, fields: Iterable[PlutusData]) -> Constr:
    tag, any_constructor = variant_to_tag(variant)
    items = tuple(fields)
    return Constr(tag, items, any_constructor, indefinite=bool(items))


def create_array(items: Iterable[PlutusData]) -> Array:
    items = tuple(items)
    return Array(items, indefinite=bool(items))


def create_map(pairs: Iterable[Tuple[PlutusData, PlutusData]]) -> Map:
    return Map(tuple(pairs))
