"""plutus_data — map Python records and unions to Plutus data.

Plutus data is the five-node interchange format (BigInt, BoundedBytes,
Array, Map, Constr) used for datums, redeemers and script parameters.
This package converts between it and ordinary Python values, deriving the
mapping from type declarations.

Quick start:
    >>> from plutus_data import Datum, U64, Constr, BigInt
    >>> class Counter(Datum):
    ...     flag: bool
    ...     count: U64
    >>> Counter(flag=True, count=1337).to_data() == Constr(
    ...     121, [Constr(122, []), BigInt(1337)])
    True

Unions are declared as a Datum subclass with union=True; each subclass
of it is one alternative.  Anything that can be written as a type
annotation (Optional, Tuple, List, Dict, U8..I64, bytes, str, ...) can be
converted with to_data / from_data directly.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Union

from ._codecs import Codec, IntRange
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
from ._errors import (
    ERR_CUSTOM,
    ERR_JSON,
    ERR_NODE_KIND,
    ERR_NUMERIC_RANGE,
    ERR_SCHEMA,
    ERR_TEXT_ENCODING,
    ERR_TUPLE_ARITY,
    ERR_UNKNOWN_VARIANT,
    ERR_UNSUPPORTED,
    ERR_VARIANT_ARITY,
    ERR_VARIANT_RANGE,
    CustomDecodeError,
    DecodeError,
    EncodeError,
    InvalidTextEncoding,
    JsonFormatError,
    NumericRangeExceeded,
    PlutusError,
    SchemaError,
    UnexpectedNodeKind,
    UnknownDiscriminant,
    UnsupportedValue,
    VariantOutOfRange,
    WrongTupleArity,
    WrongVariantArity,
)
from ._json_adapter import dumps as _json_dumps
from ._json_adapter import loads as _json_loads
from ._json_adapter import node_from_json, node_to_json
from ._node import Array, BigInt, BoundedBytes, Constr, Map, PlutusData
from ._rules import Datum
from ._schema import I8, I16, I32, I64, U8, U16, U32, U64, codec_for, describe
from ._tags import tag_to_variant, variant_to_tag

__version__ = "0.1.0"

__all__ = [
    # Conversion API
    "to_data",
    "from_data",
    "to_data_list",
    "from_data_list",
    "to_json",
    "from_json",
    "codec_for",
    "describe",
    "Codec",
    # Declarations
    "Datum",
    "IntRange",
    "U8", "U16", "U32", "U64",
    "I8", "I16", "I32", "I64",
    # Node model
    "PlutusData",
    "BigInt",
    "BoundedBytes",
    "Array",
    "Map",
    "Constr",
    "node_to_json",
    "node_from_json",
    # Tag arithmetic
    "variant_to_tag",
    "tag_to_variant",
    # Structural helpers
    "expect_array",
    "expect_bigint",
    "expect_bytes",
    "expect_constr",
    "expect_map",
    "expect_tuple",
    "expect_variant",
    "create_array",
    "create_constr",
    "create_map",
    # Exceptions
    "PlutusError",
    "DecodeError",
    "UnknownDiscriminant",
    "UnexpectedNodeKind",
    "WrongTupleArity",
    "WrongVariantArity",
    "CustomDecodeError",
    "EncodeError",
    "NumericRangeExceeded",
    "InvalidTextEncoding",
    "VariantOutOfRange",
    "UnsupportedValue",
    "SchemaError",
    "JsonFormatError",
    # Error codes
    "ERR_UNKNOWN_VARIANT",
    "ERR_NODE_KIND",
    "ERR_TUPLE_ARITY",
    "ERR_VARIANT_ARITY",
    "ERR_CUSTOM",
    "ERR_NUMERIC_RANGE",
    "ERR_TEXT_ENCODING",
    "ERR_VARIANT_RANGE",
    "ERR_UNSUPPORTED",
    "ERR_SCHEMA",
    "ERR_JSON",
]


# ── Core API ──────────────────────────────────────────────────

def to_data(value: Any, tp: Optional[Any] = None) -> PlutusData:
    """Encode a value as Plutus data.

    `tp` is the type annotation to encode under.  It defaults to the
    value's own class, which is enough for Datum instances and scalars;
    containers need it spelled out (List[U8], Dict[str, int], ...).
    """
    return codec_for(type(value) if tp is None else tp).encode(value)


def from_data(data: PlutusData, tp: Any) -> Any:
    """Decode Plutus data as `tp`.  Raises a DecodeError subclass on mismatch."""
    return codec_for(tp).decode(data)


def to_data_list(values: Iterable[Any], tp: Any) -> PlutusData:
    """Encode a homogeneous list of `tp` values.

    Uses the element type's list form: an Array in general, a single
    BoundedBytes for U8.
    """
    return codec_for(tp).encode_many(values)


def from_data_list(data: PlutusData, tp: Any) -> List[Any]:
    """Inverse of to_data_list."""
    return codec_for(tp).decode_many(data)


# ── JSON notation ─────────────────────────────────────────────

def to_json(value: Any, tp: Optional[Any] = None) -> str:
    """Encode a value and render it as detailed-schema JSON text."""
    return _json_dumps(to_data(value, tp))


def from_json(raw: Union[str, bytes], tp: Any) -> Any:
    """Parse detailed-schema JSON text and decode it as `tp`."""
    return from_data(_json_loads(raw), tp)
