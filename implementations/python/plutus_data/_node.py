"""Plutus data node model.

The interchange format is a closed algebra of five node kinds:

    BigInt        arbitrary-precision integer
    BoundedBytes  byte string
    Array         ordered sequence of nodes
    Map           sequence of (key node, value node) pairs
    Constr        constructor tag + optional escape discriminant + fields

Nodes are immutable and compare structurally.  The `indefinite` flag on
Array and Constr records which CBOR length framing the sequence uses; it
is a wire detail and is excluded from equality, so a definite and an
indefinite array with the same items are the same value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Tuple

from ._constants import KIND_ARRAY, KIND_BIGINT, KIND_BYTES, KIND_CONSTR, KIND_MAP
from ._tags import tag_to_variant


class PlutusData:
    """Base of the five node kinds.  Not instantiated directly."""

    kind: ClassVar[str] = ""

    __slots__ = ()


@dataclass(frozen=True)
class BigInt(PlutusData):
    kind: ClassVar[str] = KIND_BIGINT

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; a bool here is always a caller bug.
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("BigInt value must be int, got {}".format(
                type(self.value).__name__))


@dataclass(frozen=True)
class BoundedBytes(PlutusData):
    kind: ClassVar[str] = KIND_BYTES

    value: bytes

    def __post_init__(self) -> None:
        if isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, "value", bytes(self.value))
        elif not isinstance(self.value, bytes):
            raise TypeError("BoundedBytes value must be bytes, got {}".format(
                type(self.value).__name__))


@dataclass(frozen=True)
class Array(PlutusData):
    kind: ClassVar[str] = KIND_ARRAY

    items: Tuple[PlutusData, ...]
    indefinite: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class Map(PlutusData):
    kind: ClassVar[str] = KIND_MAP

    pairs: Tuple[Tuple[PlutusData, PlutusData], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "pairs", tuple((k, v) for k, v in self.pairs))


@dataclass(frozen=True)
class Constr(PlutusData):
    kind: ClassVar[str] = KIND_CONSTR

    tag: int
    fields: Tuple[PlutusData, ...]
    any_constructor: Optional[int] = None
    indefinite: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    @property
    def variant(self) -> Optional[int]:
        """Logical variant number, or None when the tag is not a constructor tag."""
        return tag_to_variant(self.tag, self.any_constructor)


def kind_name(data: Any) -> str:
    """Kind name used in error messages.  Non-nodes report their Python type."""
    if isinstance(data, PlutusData):
        return data.kind
    return type(data).__name__


# ── Deterministic ordering ───────────────────────────────────
# Map keys are emitted in ascending order of this key so that equal
# dicts always encode to identical node trees.  Kind rank first, then
# payload; nested nodes recurse, so any two keys are comparable.


def node_sort_key(data: PlutusData) -> Tuple[Any, ...]:
    if isinstance(data, BigInt):
        return (0, data.value)
    if isinstance(data, BoundedBytes):
        return (1, data.value)
    if isinstance(data, Array):
        return (2, tuple(node_sort_key(i) for i in data.items))
    if isinstance(data, Map):
        return (3, tuple((node_sort_key(k), node_sort_key(v)) for k, v in data.pairs))
    if isinstance(data, Constr):
        escape = -1 if data.any_constructor is None else data.any_constructor
        return (4, data.tag, escape, tuple(node_sort_key(f) for f in data.fields))
    raise TypeError("not a Plutus data node: {}".format(type(data).__name__))
