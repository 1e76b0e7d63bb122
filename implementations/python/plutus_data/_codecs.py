"""Leaf and container codecs.

A codec is the per-type contract between Python values and Plutus data:

    encode(value) -> PlutusData
    decode(data)  -> value          (raises DecodeError)

plus the bulk pair encode_many / decode_many used by list codecs.  The
bulk forms default to an Array of element nodes; a codec may override
them with a denser representation.  Only one does: single-byte integers
pack a whole list into one BoundedBytes node.  Because ListCodec always
delegates to its element codec, that choice is fixed when the list codec
is built, never inspected per value.

Codecs hold no mutable state and may be shared freely between threads.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ._errors import (
    CustomDecodeError,
    InvalidTextEncoding,
    NumericRangeExceeded,
    UnexpectedNodeKind,
    UnknownDiscriminant,
    UnsupportedValue,
)
from ._core import (
    create_array,
    create_constr,
    create_map,
    expect_array,
    expect_bigint,
    expect_bytes,
    expect_constr,
    expect_map,
    expect_tuple,
    expect_variant,
)
from ._node import BigInt, BoundedBytes, PlutusData, kind_name, node_sort_key


@dataclass(frozen=True)
class IntRange:
    """Inclusive bounds of a fixed-width integer, used as Annotated metadata."""

    name: str
    lo: int
    hi: int

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi


class Codec:
    """Base codec.  Subclasses implement encode and decode."""

    name: str = "?"

    def encode(self, value: Any) -> PlutusData:
        raise NotImplementedError

    def decode(self, data: PlutusData) -> Any:
        raise NotImplementedError

    def encode_many(self, values: Iterable[Any]) -> PlutusData:
        return create_array(self.encode(v) for v in values)

    def decode_many(self, data: PlutusData) -> List[Any]:
        return [self.decode(item) for item in expect_array(data)]

    def __repr__(self) -> str:
        return "<{} {}>".format(type(self).__name__, self.name)


def _unsupported(codec: Codec, value: Any) -> UnsupportedValue:
    return UnsupportedValue("cannot encode {} as {}".format(
        type(value).__name__, codec.name))


# ── Scalars ──────────────────────────────────────────────────

class BoolCodec(Codec):
    """False is constructor 0, True is constructor 1, both without fields."""

    name = "bool"

    def encode(self, value: Any) -> PlutusData:
        if not isinstance(value, bool):
            raise _unsupported(self, value)
        return create_constr(1 if value else 0, ())

    def decode(self, data: PlutusData) -> bool:
        variant, fields = expect_constr(data)
        if variant == 0:
            expect_variant(variant, fields, 0)
            return False
        if variant == 1:
            expect_variant(variant, fields, 0)
            return True
        raise UnknownDiscriminant(variant)


class IntCodec(Codec):
    """int <-> BigInt.  With a width, values outside it fail both ways."""

    def __init__(self, width: Optional[IntRange] = None) -> None:
        self.width = width
        self.name = width.name if width is not None else "int"

    def _check(self, value: Any) -> int:
        # bool before int: isinstance(True, int) is True.
        if isinstance(value, bool) or not isinstance(value, int):
            raise _unsupported(self, value)
        if self.width is not None and not self.width.contains(value):
            raise NumericRangeExceeded(value, self.width.name)
        return value

    def encode(self, value: Any) -> PlutusData:
        return BigInt(self._check(value))

    def decode(self, data: PlutusData) -> int:
        value = expect_bigint(data)
        if self.width is not None and not self.width.contains(value):
            raise CustomDecodeError(
                "integer {} out of range for {}".format(value, self.width.name))
        return value


class ByteCodec(IntCodec):
    """Single-byte unsigned integer.  Lists of these travel as BoundedBytes."""

    def encode_many(self, values: Iterable[Any]) -> PlutusData:
        return BoundedBytes(bytes(self._check(v) for v in values))

    def decode_many(self, data: PlutusData) -> List[int]:
        return list(expect_bytes(data))


class BytesCodec(Codec):
    name = "bytes"

    def encode(self, value: Any) -> PlutusData:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise _unsupported(self, value)
        return BoundedBytes(bytes(value))

    def decode(self, data: PlutusData) -> bytes:
        return expect_bytes(data)


class TextCodec(Codec):
    """str <-> BoundedBytes holding UTF-8."""

    name = "str"

    def encode(self, value: Any) -> PlutusData:
        if not isinstance(value, str):
            raise _unsupported(self, value)
        try:
            raw = value.encode("utf-8")
        except UnicodeEncodeError as exc:
            # Only lone surrogates get here.
            raise InvalidTextEncoding("text is not encodable as utf-8: {}".format(exc)) from exc
        return BoundedBytes(raw)

    def decode(self, data: PlutusData) -> str:
        raw = expect_bytes(data)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CustomDecodeError("invalid utf-8: {}".format(exc)) from exc


class NodeCodec(Codec):
    """Pass-through for fields declared as a node type.

    Declaring a field as PlutusData accepts any node; declaring it as one
    of the five kinds accepts only that kind.
    """

    def __init__(self, node_type: type) -> None:
        self.node_type = node_type
        self.name = node_type.kind or node_type.__name__

    def encode(self, value: Any) -> PlutusData:
        if not isinstance(value, self.node_type):
            raise _unsupported(self, value)
        return value

    def decode(self, data: PlutusData) -> PlutusData:
        if not isinstance(data, self.node_type):
            raise UnexpectedNodeKind(self.name, kind_name(data))
        return data


# ── Containers ───────────────────────────────────────────────

class OptionalCodec(Codec):
    """Present value is constructor 0 with one field; None is constructor 1."""

    def __init__(self, inner: Codec) -> None:
        self.inner = inner
        self.name = "Optional[{}]".format(inner.name)

    def encode(self, value: Any) -> PlutusData:
        if value is None:
            return create_constr(1, ())
        return create_constr(0, (self.inner.encode(value),))

    def decode(self, data: PlutusData) -> Any:
        variant, fields = expect_constr(data)
        if variant == 0:
            [item] = expect_variant(variant, fields, 1)
            return self.inner.decode(item)
        if variant == 1:
            expect_variant(variant, fields, 0)
            return None
        raise UnknownDiscriminant(variant)


class TupleCodec(Codec):
    """Fixed-arity tuple <-> Array with one positional item per element."""

    def __init__(self, elements: Sequence[Codec]) -> None:
        self.elements = tuple(elements)
        self.name = "Tuple[{}]".format(", ".join(c.name for c in self.elements))

    def encode(self, value: Any) -> PlutusData:
        if not isinstance(value, (tuple, list)) or len(value) != len(self.elements):
            raise _unsupported(self, value)
        return create_array(c.encode(v) for c, v in zip(self.elements, value))

    def decode(self, data: PlutusData) -> Tuple[Any, ...]:
        items = expect_tuple(expect_array(data), len(self.elements))
        return tuple(c.decode(item) for c, item in zip(self.elements, items))


class ListCodec(Codec):
    """list <-> the element codec's sequence form.

    A List[U8] also accepts bytes or bytearray on encode; it decodes to a
    list of ints either way.
    """

    def __init__(self, element: Codec) -> None:
        self.element = element
        self.name = "List[{}]".format(element.name)

    def encode(self, value: Any) -> PlutusData:
        if isinstance(self.element, ByteCodec) and isinstance(value, (bytes, bytearray)):
            return BoundedBytes(bytes(value))
        if isinstance(value, (str, bytes, bytearray, Mapping)) or \
                not isinstance(value, (list, tuple)):
            raise _unsupported(self, value)
        return self.element.encode_many(value)

    def decode(self, data: PlutusData) -> List[Any]:
        return self.element.decode_many(data)


class MapCodec(Codec):
    """Mapping <-> Map.

    Pairs are emitted in ascending order of the encoded key node so equal
    dicts always produce identical trees.  Decoding accepts any order but
    rejects a key that appears twice.
    """

    def __init__(self, key: Codec, value: Codec) -> None:
        self.key = key
        self.value = value
        self.name = "Dict[{}, {}]".format(key.name, value.name)

    def encode(self, value: Any) -> PlutusData:
        if not isinstance(value, Mapping):
            raise _unsupported(self, value)
        pairs = [(self.key.encode(k), self.value.encode(v)) for k, v in value.items()]
        pairs.sort(key=lambda kv: node_sort_key(kv[0]))
        return create_map(pairs)

    def decode(self, data: PlutusData) -> Dict[Any, Any]:
        out: Dict[Any, Any] = {}
        for k, v in expect_map(data):
            key = self.key.decode(k)
            try:
                seen = key in out
            except TypeError as exc:
                # Records with list or dict fields decode to unhashable keys.
                raise CustomDecodeError("unhashable map key {!r}".format(key)) from exc
            if seen:
                raise CustomDecodeError("duplicate map key {!r}".format(key))
            out[key] = self.value.decode(v)
        return out
