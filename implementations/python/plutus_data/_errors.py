"""Plutus data error codes and exception hierarchy.

Three families, one per phase:

    DecodeError   node tree does not match the expected shape
    EncodeError   a value cannot be represented (out-of-range int, bad text)
    SchemaError   a declared type cannot be mapped at all

Every exception carries a `.code` (one of the ERR_* strings below) so that
callers and cross-language tests can compare failures without parsing
messages.  Decoding is fail-fast: the first failure raised by a nested
decoder propagates unchanged to the caller.
"""

from __future__ import annotations

from typing import Any, Tuple

# ── Error codes ──────────────────────────────────────────────
# Decode side.
ERR_UNKNOWN_VARIANT: str = "ERR_UNKNOWN_VARIANT"  # variant matches no alternative
ERR_NODE_KIND: str = "ERR_NODE_KIND"              # wrong node kind at a position
ERR_TUPLE_ARITY: str = "ERR_TUPLE_ARITY"          # tuple/array length mismatch
ERR_VARIANT_ARITY: str = "ERR_VARIANT_ARITY"      # constructor field count mismatch
ERR_CUSTOM: str = "ERR_CUSTOM"                    # bad tag, bad utf-8, range, dup key

# Encode side.
ERR_NUMERIC_RANGE: str = "ERR_NUMERIC_RANGE"
ERR_TEXT_ENCODING: str = "ERR_TEXT_ENCODING"
ERR_VARIANT_RANGE: str = "ERR_VARIANT_RANGE"
ERR_UNSUPPORTED: str = "ERR_UNSUPPORTED"

# Declaration side.
ERR_SCHEMA: str = "ERR_SCHEMA"

# JSON notation.
ERR_JSON: str = "ERR_JSON"


class PlutusError(Exception):
    """Base for every error raised by plutus_data.

    Subclasses list their payload attribute names in `_fields`; two errors
    compare equal when they have the same class and the same payload, which
    lets tests treat failures as plain values.
    """

    code: str = ""
    _fields: Tuple[str, ...] = ()

    def __init__(self, msg: str = "") -> None:
        super().__init__(msg or self.code)

    def _payload(self) -> Tuple[Any, ...]:
        return tuple(getattr(self, name) for name in self._fields)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._payload() == other._payload()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._payload()))

    def __repr__(self) -> str:
        args = ", ".join("{}={!r}".format(n, getattr(self, n)) for n in self._fields)
        return "{}({})".format(type(self).__name__, args)


# ── Decode errors ────────────────────────────────────────────

class DecodeError(PlutusError):
    """A node tree could not be decoded into the requested type."""


class UnknownDiscriminant(DecodeError):
    code = ERR_UNKNOWN_VARIANT
    _fields = ("variant",)

    def __init__(self, variant: int) -> None:
        self.variant = variant
        super().__init__("unexpected variant {}".format(variant))


class UnexpectedNodeKind(DecodeError):
    code = ERR_NODE_KIND
    _fields = ("expected", "actual")

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "unexpected type (expected {}, found {})".format(expected, actual))


class WrongTupleArity(DecodeError):
    code = ERR_TUPLE_ARITY
    _fields = ("expected", "actual")

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "unexpected field count for tuple (expected {}, found {})".format(
                expected, actual))


class WrongVariantArity(DecodeError):
    code = ERR_VARIANT_ARITY
    _fields = ("variant", "expected", "actual")

    def __init__(self, variant: int, expected: int, actual: int) -> None:
        self.variant = variant
        self.expected = expected
        self.actual = actual
        super().__init__(
            "unexpected field count for variant {} (expected {}, found {})".format(
                variant, expected, actual))


class CustomDecodeError(DecodeError):
    """Catch-all semantic failure: invalid tag, invalid UTF-8, and the like."""

    code = ERR_CUSTOM
    _fields = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ── Encode errors ────────────────────────────────────────────
# The ledger format itself has no encode failures; these exist because
# Python values are wider than the declared field types.

class EncodeError(PlutusError):
    """A value cannot be represented as Plutus data."""


class NumericRangeExceeded(EncodeError):
    code = ERR_NUMERIC_RANGE
    _fields = ("value", "width")

    def __init__(self, value: int, width: str) -> None:
        self.value = value
        self.width = width
        super().__init__("integer {} out of range for {}".format(value, width))


class InvalidTextEncoding(EncodeError):
    code = ERR_TEXT_ENCODING
    _fields = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class VariantOutOfRange(EncodeError):
    code = ERR_VARIANT_RANGE
    _fields = ("variant",)

    def __init__(self, variant: int) -> None:
        self.variant = variant
        super().__init__("variant {} outside 0..2**64-1".format(variant))


class UnsupportedValue(EncodeError):
    code = ERR_UNSUPPORTED
    _fields = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ── Declaration errors ───────────────────────────────────────

class SchemaError(PlutusError):
    """A type annotation or declaration cannot be mapped to Plutus data."""

    code = ERR_SCHEMA
    _fields = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class JsonFormatError(PlutusError):
    """Malformed detailed-schema JSON."""

    code = ERR_JSON
    _fields = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
