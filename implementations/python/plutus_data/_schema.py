"""Shape descriptors and annotation resolution.

Two jobs:

1. describe(cls) reflects on a record or union declaration and returns a
   TypeShape: the alternatives in declaration order, each with its
   effective variant number and its fields (name + annotation).
2. codec_for(tp) turns any supported annotation into a Codec and caches
   it.  Records and unions are handed to the rule generator in _rules.

Supported annotations:

    bool, int, U8..I64, bytes, str
    PlutusData and the five node kinds (pass-through)
    Optional[T]
    Tuple[T1, ..., Tn]        2 <= n <= 8
    List[T] / Sequence[T]
    Dict[K, V] / Mapping[K, V]
    Datum subclasses, dataclasses, NamedTuple classes

Resolution happens once per annotation.  Record codecs resolve their field
annotations lazily, on first encode/decode, so recursive types work.
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Dict,
    List,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ._constants import INT_WIDTHS, TUPLE_MAX_ARITY, TUPLE_MIN_ARITY, U64_MAX
from ._codecs import (
    BoolCodec,
    ByteCodec,
    BytesCodec,
    Codec,
    IntCodec,
    IntRange,
    ListCodec,
    MapCodec,
    NodeCodec,
    OptionalCodec,
    TextCodec,
    TupleCodec,
)
from ._errors import SchemaError
from ._node import PlutusData

# ── Fixed-width integer annotations ──────────────────────────

U8 = Annotated[int, IntRange("U8", *INT_WIDTHS["U8"])]
U16 = Annotated[int, IntRange("U16", *INT_WIDTHS["U16"])]
U32 = Annotated[int, IntRange("U32", *INT_WIDTHS["U32"])]
U64 = Annotated[int, IntRange("U64", *INT_WIDTHS["U64"])]
I8 = Annotated[int, IntRange("I8", *INT_WIDTHS["I8"])]
I16 = Annotated[int, IntRange("I16", *INT_WIDTHS["I16"])]
I32 = Annotated[int, IntRange("I32", *INT_WIDTHS["I32"])]
I64 = Annotated[int, IntRange("I64", *INT_WIDTHS["I64"])]


# ── Shape descriptors ────────────────────────────────────────

@dataclass(frozen=True)
class FieldShape:
    name: str
    annotation: Any


@dataclass(frozen=True)
class AlternativeShape:
    cls: type
    variant: int
    fields: Tuple[FieldShape, ...]
    positional: bool  # NamedTuple: build with cls(*values)


@dataclass(frozen=True)
class TypeShape:
    cls: type
    alternatives: Tuple[AlternativeShape, ...]
    is_union: bool


_SHAPES: Dict[type, TypeShape] = {}


def is_namedtuple(cls: type) -> bool:
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, "_fields")


def is_union_root(cls: type) -> bool:
    return "__plutus_alternatives__" in cls.__dict__


def is_declared(cls: Any) -> bool:
    """True for anything describe() accepts."""
    if not isinstance(cls, type):
        return False
    return (is_union_root(cls) or dataclasses.is_dataclass(cls)
            or is_namedtuple(cls))


def check_variant(owner: str, variant: Any) -> int:
    if isinstance(variant, bool) or not isinstance(variant, int):
        raise SchemaError("{}: variant must be an int, got {!r}".format(owner, variant))
    if variant < 0 or variant > U64_MAX:
        raise SchemaError("{}: variant {} outside 0..2**64-1".format(owner, variant))
    return variant


def _hints(cls: type) -> Dict[str, Any]:
    try:
        return get_type_hints(cls, include_extras=True)
    except NameError as exc:
        raise SchemaError("cannot resolve annotations of {}: {}".format(
            cls.__qualname__, exc)) from exc


def _fields_of(cls: type) -> Tuple[Tuple[FieldShape, ...], bool]:
    hints = _hints(cls)
    if is_namedtuple(cls):
        names = list(cls._fields)
        positional = True
    elif dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls) if f.init]
        positional = False
    else:
        raise SchemaError("{} is not a record (dataclass, NamedTuple or Datum)".format(
            cls.__qualname__))
    shapes = []
    for name in names:
        if name not in hints:
            raise SchemaError("{}.{} has no type annotation".format(cls.__qualname__, name))
        shapes.append(FieldShape(name, hints[name]))
    return tuple(shapes), positional


def _variant_override(cls: type) -> Any:
    return cls.__dict__.get("__plutus_variant__")


def _describe_union(root: type) -> TypeShape:
    declared: List[type] = root.__dict__["__plutus_alternatives__"]
    if not declared:
        raise SchemaError("union {} declares no alternatives".format(root.__qualname__))

    # Alternatives without an override are numbered by their position
    # among the other un-overridden alternatives.
    alternatives = []
    implicit = 0
    for alt in declared:
        override = _variant_override(alt)
        if override is None:
            variant = implicit
            implicit += 1
        else:
            variant = override
        fields, positional = _fields_of(alt)
        alternatives.append(AlternativeShape(alt, variant, fields, positional))

    owners: Dict[int, type] = {}
    for alt_shape in alternatives:
        prev = owners.get(alt_shape.variant)
        if prev is not None:
            raise SchemaError("{}: alternatives {} and {} both map to variant {}".format(
                root.__qualname__, prev.__name__, alt_shape.cls.__name__,
                alt_shape.variant))
        owners[alt_shape.variant] = alt_shape.cls

    # No alternative may be registered once the table exists.
    root.__plutus_sealed__ = True
    return TypeShape(root, tuple(alternatives), is_union=True)


def describe(cls: type) -> TypeShape:
    """Return the (cached) shape of a record or union declaration."""
    shape = _SHAPES.get(cls)
    if shape is not None:
        return shape

    if is_union_root(cls):
        shape = _describe_union(cls)
    elif "__plutus_root__" in cls.__dict__:
        # A single alternative decodes and encodes like a record with
        # the variant the union assigned to it.
        root_shape = describe(cls.__dict__["__plutus_root__"])
        alt = next(a for a in root_shape.alternatives if a.cls is cls)
        shape = TypeShape(cls, (alt,), is_union=False)
    else:
        override = _variant_override(cls)
        variant = 0 if override is None else override
        fields, positional = _fields_of(cls)
        shape = TypeShape(cls, (AlternativeShape(cls, variant, fields, positional),),
                          is_union=False)

    return _SHAPES.setdefault(cls, shape)


# ── Annotation resolution ────────────────────────────────────

_CODECS: Dict[Any, Codec] = {}

_SCALARS = {
    bool: BoolCodec,
    bytes: BytesCodec,
    str: TextCodec,
}


def codec_for(tp: Any) -> Codec:
    """Return the codec for a type annotation."""
    try:
        codec = _CODECS.get(tp)
    except TypeError as exc:
        raise SchemaError("unhashable type annotation {!r}".format(tp)) from exc
    if codec is not None:
        return codec
    return _CODECS.setdefault(tp, _resolve(tp))


def _resolve(tp: Any) -> Codec:
    if tp is Any:
        raise SchemaError("Any has no Plutus data representation")

    if tp in _SCALARS:
        return _SCALARS[tp]()
    if tp is int:
        return IntCodec()
    if isinstance(tp, type) and issubclass(tp, PlutusData):
        return NodeCodec(tp)

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        base = args[0]
        ranges = [m for m in tp.__metadata__ if isinstance(m, IntRange)]
        if ranges and base is int:
            width = ranges[0]
            if width.lo == 0 and width.hi == 255:
                return ByteCodec(width)
            return IntCodec(width)
        return codec_for(base)

    if origin is Union or isinstance(tp, types.UnionType):
        present = [a for a in args if a is not type(None)]
        if len(present) == 1 and len(args) == 2:
            return OptionalCodec(codec_for(present[0]))
        raise SchemaError("unsupported union {!r}; declare a Datum union instead".format(tp))

    if origin is tuple:
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            raise SchemaError("tuples need a fixed arity, got {!r}; use List[T]".format(tp))
        if not TUPLE_MIN_ARITY <= len(args) <= TUPLE_MAX_ARITY:
            raise SchemaError("tuple arity {} outside {}..{}".format(
                len(args), TUPLE_MIN_ARITY, TUPLE_MAX_ARITY))
        return TupleCodec([codec_for(a) for a in args])

    if origin in (list, Sequence):
        return ListCodec(codec_for(args[0]))

    if origin in (dict, Mapping):
        key_tp, value_tp = args
        _check_key(key_tp, key_tp)
        return MapCodec(codec_for(key_tp), codec_for(value_tp))

    if tp in (list, dict, tuple):
        raise SchemaError("{} needs type arguments".format(tp.__name__))

    if is_declared(tp):
        # Imported here: the generator resolves its fields through codec_for.
        from ._rules import generate
        return generate(tp)

    raise SchemaError("no Plutus data mapping for {!r}".format(tp))


_UNHASHABLE = (list, dict, set, Sequence, Mapping)


def _check_key(tp: Any, key_tp: Any) -> None:
    # Decoded keys must be hashable all the way down: a tuple or Optional
    # holding a list still decodes to an unhashable value.
    if tp in (list, dict, set) or get_origin(tp) in _UNHASHABLE:
        raise SchemaError("map key type {!r} is not hashable".format(key_tp))
    origin = get_origin(tp)
    if origin is Annotated:
        _check_key(get_args(tp)[0], key_tp)
    elif origin is tuple or origin is Union or isinstance(tp, types.UnionType):
        for arg in get_args(tp):
            if arg is not Ellipsis:
                _check_key(arg, key_tp)
