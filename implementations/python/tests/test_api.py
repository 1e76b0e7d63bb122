"""Unit tests for the plutus_data public API.

Organized by feature area.  Golden vectors live in test_conformance.py;
these tests exercise the contracts and the edge cases around them.
"""

from __future__ import annotations

import os
import sys
import unittest
from typing import Dict, List, Optional, Sequence, Tuple, Union

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))

from plutus_data import (
    ERR_CUSTOM,
    ERR_NODE_KIND,
    ERR_NUMERIC_RANGE,
    ERR_SCHEMA,
    ERR_TEXT_ENCODING,
    ERR_TUPLE_ARITY,
    ERR_UNKNOWN_VARIANT,
    ERR_VARIANT_ARITY,
    I8,
    U8,
    U16,
    U64,
    Array,
    BigInt,
    BoundedBytes,
    Constr,
    CustomDecodeError,
    DecodeError,
    InvalidTextEncoding,
    JsonFormatError,
    Map,
    NumericRangeExceeded,
    PlutusData,
    PlutusError,
    SchemaError,
    UnexpectedNodeKind,
    UnknownDiscriminant,
    UnsupportedValue,
    VariantOutOfRange,
    WrongTupleArity,
    WrongVariantArity,
    codec_for,
    create_array,
    create_constr,
    create_map,
    describe,
    expect_array,
    expect_constr,
    expect_map,
    expect_tuple,
    expect_variant,
    from_data,
    from_data_list,
    from_json,
    tag_to_variant,
    to_data,
    to_data_list,
    to_json,
    variant_to_tag,
)

from datum_fixtures import (
    Action,
    BlockReference,
    Burn,
    Clash,
    Close,
    Cons,
    Counter,
    Escaped,
    Finite,
    HasArray,
    Interval,
    IntervalBound,
    IntervalBoundType,
    Mint,
    NegativeInfinity,
    Opaque,
    Origin,
    Pair,
    Plain,
    Point,
    PositiveInfinity,
    SimpleStruct,
    Spend,
    TokenRecord,
)


def _int(n: int) -> BigInt:
    return BigInt(n)


# ── Constructor tag arithmetic ────────────────────────────────

class TestTagArithmetic(unittest.TestCase):
    def test_compact_range(self):
        self.assertEqual(variant_to_tag(0), (121, None))
        self.assertEqual(variant_to_tag(6), (127, None))

    def test_extended_range(self):
        self.assertEqual(variant_to_tag(7), (1280, None))
        self.assertEqual(variant_to_tag(127), (1400, None))

    def test_escape_range(self):
        self.assertEqual(variant_to_tag(128), (102, 128))
        self.assertEqual(variant_to_tag(2**64 - 1), (102, 2**64 - 1))

    def test_inverse_0_to_200(self):
        for n in range(201):
            with self.subTest(n=n):
                self.assertEqual(tag_to_variant(*variant_to_tag(n)), n)

    def test_escape_accepts_small_discriminant(self):
        """A peer may escape even a small variant; decoders must follow."""
        self.assertEqual(tag_to_variant(102, 3), 3)

    def test_invalid_tags(self):
        for tag in [0, 120, 128, 1279, 1401, 102]:
            with self.subTest(tag=tag):
                self.assertIsNone(tag_to_variant(tag))

    def test_variant_out_of_range(self):
        for n in [-1, 2**64]:
            with self.subTest(n=n):
                with self.assertRaises(VariantOutOfRange) as ctx:
                    variant_to_tag(n)
                self.assertEqual(ctx.exception.variant, n)

    def test_constr_variant_property(self):
        self.assertEqual(Constr(1283, []).variant, 10)
        self.assertIsNone(Constr(42, []).variant)


# ── Node model and structural helpers ─────────────────────────

class TestStructuralHelpers(unittest.TestCase):
    def test_framing_nonempty_is_indefinite(self):
        self.assertTrue(create_array([_int(1)]).indefinite)
        self.assertTrue(create_constr(0, [_int(1)]).indefinite)

    def test_framing_empty_is_definite(self):
        self.assertFalse(create_array([]).indefinite)
        self.assertFalse(create_constr(0, []).indefinite)

    def test_framing_ignored_by_equality(self):
        self.assertEqual(Array([_int(1)], indefinite=False),
                         Array([_int(1)], indefinite=True))

    def test_decode_accepts_definite_framing(self):
        node = Constr(121, [Constr(122, []), _int(1337)], indefinite=False)
        self.assertEqual(Counter.from_data(node), Counter(flag=True, count=1337))

    def test_expect_array_wrong_kind(self):
        with self.assertRaises(UnexpectedNodeKind) as ctx:
            expect_array(_int(1))
        self.assertEqual((ctx.exception.expected, ctx.exception.actual), ("Array", "BigInt"))

    def test_expect_map_wrong_kind(self):
        with self.assertRaises(UnexpectedNodeKind) as ctx:
            expect_map(create_array([]))
        self.assertEqual((ctx.exception.expected, ctx.exception.actual), ("Map", "Array"))

    def test_expect_constr(self):
        self.assertEqual(expect_constr(create_constr(9, [_int(1)])), (9, [_int(1)]))

    def test_expect_constr_invalid_tag(self):
        with self.assertRaises(CustomDecodeError) as ctx:
            expect_constr(Constr(5, []))
        self.assertEqual(ctx.exception.code, ERR_CUSTOM)
        self.assertEqual(ctx.exception.message, "value has invalid tag")

    def test_expect_tuple_arity(self):
        with self.assertRaises(WrongTupleArity) as ctx:
            expect_tuple([_int(1)], 2)
        self.assertEqual(ctx.exception, WrongTupleArity(2, 1))

    def test_expect_variant_arity(self):
        with self.assertRaises(WrongVariantArity) as ctx:
            expect_variant(4, [], 1)
        self.assertEqual(ctx.exception, WrongVariantArity(4, 1, 0))

    def test_create_map_keeps_pairs(self):
        m = create_map([(_int(1), _int(2))])
        self.assertEqual(expect_map(m), [(_int(1), _int(2))])

    def test_bigint_rejects_bool(self):
        with self.assertRaises(TypeError):
            BigInt(True)


# ── Primitive codecs ──────────────────────────────────────────

class TestPrimitives(unittest.TestCase):
    def test_bool(self):
        self.assertEqual(to_data(False), Constr(121, []))
        self.assertEqual(to_data(True), Constr(122, []))
        self.assertIs(from_data(Constr(122, []), bool), True)
        self.assertIs(from_data(Constr(102, [], 0), bool), False)

    def test_bool_unknown_variant(self):
        with self.assertRaises(UnknownDiscriminant) as ctx:
            from_data(Constr(123, []), bool)
        self.assertEqual(ctx.exception.variant, 2)
        self.assertEqual(ctx.exception.code, ERR_UNKNOWN_VARIANT)

    def test_bool_with_fields(self):
        with self.assertRaises(WrongVariantArity) as ctx:
            from_data(Constr(122, [_int(1)]), bool)
        self.assertEqual(ctx.exception, WrongVariantArity(1, 0, 1))

    def test_fixed_width_round_trip(self):
        for tp, val in [(U8, 255), (U16, 65535), (U64, 2**64 - 1), (I8, -128), (int, -(10**40))]:
            with self.subTest(tp=tp, val=val):
                self.assertEqual(to_data(val, tp), _int(val))
                self.assertEqual(from_data(_int(val), tp), val)

    def test_encode_out_of_range(self):
        for tp, val in [(U8, 256), (U8, -1), (I8, 128), (U64, 2**64)]:
            with self.subTest(tp=tp, val=val):
                with self.assertRaises(NumericRangeExceeded) as ctx:
                    to_data(val, tp)
                self.assertEqual(ctx.exception.code, ERR_NUMERIC_RANGE)
                self.assertEqual(ctx.exception.value, val)

    def test_decode_out_of_range(self):
        with self.assertRaises(CustomDecodeError):
            from_data(_int(-1), U64)

    def test_int_rejects_bool(self):
        with self.assertRaises(UnsupportedValue):
            to_data(True, U64)

    def test_bytes(self):
        self.assertEqual(to_data(b"\xca\xfe"), BoundedBytes(b"\xca\xfe"))
        self.assertEqual(to_data(bytearray(b"\x01"), bytes), BoundedBytes(b"\x01"))
        self.assertEqual(from_data(BoundedBytes(b""), bytes), b"")

    def test_bytes_kind_mismatch(self):
        with self.assertRaises(UnexpectedNodeKind) as ctx:
            from_data(_int(1), bytes)
        self.assertEqual(ctx.exception, UnexpectedNodeKind("BoundedBytes", "BigInt"))
        self.assertEqual(ctx.exception.code, ERR_NODE_KIND)

    def test_text(self):
        self.assertEqual(to_data("SUNDAE"), BoundedBytes(b"SUNDAE"))
        self.assertEqual(from_data(BoundedBytes("é".encode("utf-8")), str), "é")

    def test_text_invalid_utf8(self):
        with self.assertRaises(CustomDecodeError) as ctx:
            from_data(BoundedBytes(b"\xff\xfe"), str)
        self.assertIn("invalid utf-8", ctx.exception.message)

    def test_text_lone_surrogate(self):
        with self.assertRaises(InvalidTextEncoding) as ctx:
            to_data("\ud800")
        self.assertEqual(ctx.exception.code, ERR_TEXT_ENCODING)

    def test_node_passthrough(self):
        inner = create_map([(_int(1), BoundedBytes(b"x"))])
        self.assertEqual(Opaque(payload=inner).to_data(), create_constr(0, [inner]))
        self.assertEqual(Opaque.from_data(create_constr(0, [inner])).payload, inner)

    def test_node_kind_passthrough_checks_kind(self):
        with self.assertRaises(UnexpectedNodeKind) as ctx:
            from_data(BoundedBytes(b""), BigInt)
        self.assertEqual(ctx.exception, UnexpectedNodeKind("BigInt", "BoundedBytes"))


# ── Container codecs ──────────────────────────────────────────

class TestContainers(unittest.TestCase):
    def test_optional(self):
        self.assertEqual(to_data(1337, Optional[U64]), Constr(121, [_int(1337)]))
        self.assertEqual(to_data(None, Optional[U64]), Constr(122, []))
        self.assertEqual(from_data(Constr(121, [_int(1337)]), Optional[U64]), 1337)
        self.assertIsNone(from_data(Constr(122, []), Optional[U64]))

    def test_optional_pipe_syntax(self):
        self.assertEqual(to_data(7, U64 | None), Constr(121, [_int(7)]))

    def test_optional_unknown_variant(self):
        with self.assertRaises(UnknownDiscriminant) as ctx:
            from_data(Constr(123, []), Optional[U64])
        self.assertEqual(ctx.exception.variant, 2)

    def test_optional_missing_field(self):
        with self.assertRaises(WrongVariantArity) as ctx:
            from_data(Constr(121, []), Optional[U64])
        self.assertEqual(ctx.exception, WrongVariantArity(0, 1, 0))

    def test_tuple(self):
        node = to_data((b"\x13\x37", 9001), Tuple[bytes, U64])
        self.assertEqual(node, Array([BoundedBytes(b"\x13\x37"), _int(9001)]))
        self.assertEqual(from_data(node, Tuple[bytes, U64]), (b"\x13\x37", 9001))

    def test_tuple_arity_mismatch(self):
        node = create_array([_int(1), _int(2), _int(3)])
        with self.assertRaises(WrongTupleArity) as ctx:
            from_data(node, Tuple[U64, U64])
        self.assertEqual(ctx.exception, WrongTupleArity(2, 3))
        self.assertEqual(ctx.exception.code, ERR_TUPLE_ARITY)

    def test_tuple_arity_eight(self):
        tp = Tuple[U8, U8, U8, U8, U8, U8, U8, U8]
        self.assertEqual(from_data(to_data(tuple(range(8)), tp), tp), tuple(range(8)))

    def test_list(self):
        node = to_data(["cafe", "babe"], List[str])
        self.assertEqual(node, Array([BoundedBytes(b"cafe"), BoundedBytes(b"babe")]))
        self.assertEqual(from_data(node, List[str]), ["cafe", "babe"])

    def test_empty_list(self):
        node = to_data([], List[U64])
        self.assertEqual(node, Array([]))
        self.assertFalse(node.indefinite)

    def test_byte_list_specialization(self):
        node = to_data([1, 2, 255], List[U8])
        self.assertEqual(node, BoundedBytes(b"\x01\x02\xff"))
        self.assertEqual(from_data(node, List[U8]), [1, 2, 255])

    def test_byte_list_specialization_sequence_alias(self):
        self.assertEqual(to_data([9], Sequence[U8]), BoundedBytes(b"\x09"))

    def test_byte_list_accepts_bytes(self):
        self.assertEqual(to_data(b"\x01\xff", List[U8]), BoundedBytes(b"\x01\xff"))
        self.assertEqual(to_data(bytearray(b"\x07"), List[U8]), BoundedBytes(b"\x07"))
        with self.assertRaises(UnsupportedValue):
            to_data(b"\x01", List[U16])

    def test_byte_list_rejects_array(self):
        with self.assertRaises(UnexpectedNodeKind) as ctx:
            from_data(create_array([_int(1)]), List[U8])
        self.assertEqual(ctx.exception, UnexpectedNodeKind("BoundedBytes", "Array"))

    def test_byte_list_out_of_range(self):
        with self.assertRaises(NumericRangeExceeded):
            to_data([1, 300], List[U8])

    def test_wider_ints_use_array(self):
        self.assertEqual(to_data([1, 2], List[U16]), Array([_int(1), _int(2)]))

    def test_bulk_forms(self):
        self.assertEqual(to_data_list([1, 2], U8), BoundedBytes(b"\x01\x02"))
        self.assertEqual(from_data_list(BoundedBytes(b"\x03"), U8), [3])
        self.assertEqual(to_data_list([True], bool), Array([Constr(122, [])]))
        self.assertEqual(from_data_list(Array([Constr(121, [])]), bool), [False])

    def test_map_sorted_on_encode(self):
        node = to_data({"b": 2, "a": 1}, Dict[str, int])
        self.assertEqual(node, Map([(BoundedBytes(b"a"), _int(1)),
                                    (BoundedBytes(b"b"), _int(2))]))

    def test_map_any_order_on_decode(self):
        node = Map([(BoundedBytes(b"b"), _int(2)), (BoundedBytes(b"a"), _int(1))])
        self.assertEqual(from_data(node, Dict[str, int]), {"a": 1, "b": 2})

    def test_map_duplicate_key(self):
        node = Map([(BoundedBytes(b"a"), _int(1)), (BoundedBytes(b"a"), _int(2))])
        with self.assertRaises(CustomDecodeError) as ctx:
            from_data(node, Dict[str, int])
        self.assertEqual(ctx.exception.code, ERR_CUSTOM)

    def test_map_mixed_kind_keys_are_ordered(self):
        node = to_data({BoundedBytes(b"x"): 1, _int(5): 2}, Dict[PlutusData, int])
        self.assertEqual([k.kind for k, _ in node.pairs], ["BigInt", "BoundedBytes"])

    def test_map_wrong_kind(self):
        with self.assertRaises(UnexpectedNodeKind):
            from_data(create_array([]), Dict[str, int])


# ── Mapping rules: records ────────────────────────────────────

class TestRecords(unittest.TestCase):
    def test_two_field_record(self):
        node = Counter(flag=True, count=1337).to_data()
        self.assertEqual(node, Constr(121, [Constr(122, []), _int(1337)]))
        self.assertEqual(Counter.from_data(node), Counter(flag=True, count=1337))

    def test_simple_struct(self):
        data = SimpleStruct(bool_field=True, u64_field=1337,
                            bigint_field=_int(9001), byte_field=b"\xca\xfe\xd0\x0d")
        node = create_constr(0, [
            create_constr(1, []),
            _int(1337),
            _int(9001),
            BoundedBytes(b"\xca\xfe\xd0\x0d"),
        ])
        self.assertEqual(data.to_data(), node)
        self.assertEqual(SimpleStruct.from_data(node), data)

    def test_nested_records(self):
        data = Interval(
            lower_bound=IntervalBound(NegativeInfinity(), True),
            upper_bound=IntervalBound(Finite(420), False),
        )
        node = create_constr(0, [
            create_constr(0, [create_constr(0, []), create_constr(1, [])]),
            create_constr(0, [create_constr(1, [_int(420)]), create_constr(0, [])]),
        ])
        self.assertEqual(data.to_data(), node)
        self.assertEqual(Interval.from_data(node), data)

    def test_list_field(self):
        node = HasArray(params=["cafe"]).to_data()
        self.assertEqual(node, create_constr(0, [Array([BoundedBytes(b"cafe")])]))

    def test_record_variant_override(self):
        node = Escaped(payload=b"\x01").to_data()
        self.assertEqual((node.tag, node.any_constructor), (102, 300))
        self.assertEqual(Escaped.from_data(node), Escaped(payload=b"\x01"))

    def test_record_wrong_variant(self):
        with self.assertRaises(UnknownDiscriminant) as ctx:
            Counter.from_data(create_constr(1, []))
        self.assertEqual(ctx.exception.variant, 1)

    def test_record_wrong_arity(self):
        with self.assertRaises(WrongVariantArity) as ctx:
            Counter.from_data(create_constr(0, [Constr(121, [])]))
        self.assertEqual(ctx.exception, WrongVariantArity(0, 2, 1))
        self.assertEqual(ctx.exception.code, ERR_VARIANT_ARITY)

    def test_innermost_error_propagates(self):
        node = create_constr(0, [
            create_constr(0, [create_constr(0, []), create_constr(1, [])]),
            create_constr(0, [create_constr(1, [BoundedBytes(b"")]), create_constr(0, [])]),
        ])
        with self.assertRaises(UnexpectedNodeKind) as ctx:
            Interval.from_data(node)
        self.assertEqual(ctx.exception, UnexpectedNodeKind("BigInt", "BoundedBytes"))

    def test_recursive_record(self):
        chain = Cons(1, Cons(2, None))
        node = chain.to_data()
        self.assertEqual(node, create_constr(0, [
            _int(1), create_constr(0, [create_constr(0, [_int(2), create_constr(1, [])])]),
        ]))
        self.assertEqual(Cons.from_data(node), chain)

    def test_namedtuple_record(self):
        node = to_data(Pair(b"\x00", 5))
        self.assertEqual(node, create_constr(0, [BoundedBytes(b"\x00"), _int(5)]))
        self.assertEqual(from_data(node, Pair), Pair(b"\x00", 5))

    def test_plain_dataclass_record(self):
        value = Plain(name="pool", weights={"a": 1})
        self.assertEqual(from_data(to_data(value), Plain), value)

    def test_encode_wrong_class(self):
        with self.assertRaises(UnsupportedValue):
            codec_for(Counter).encode(Origin())

    def test_kind_mismatch_on_record(self):
        with self.assertRaises(UnexpectedNodeKind) as ctx:
            Counter.from_data(_int(0))
        self.assertEqual(ctx.exception, UnexpectedNodeKind("Constr", "BigInt"))


# ── Mapping rules: unions ─────────────────────────────────────

class TestUnions(unittest.TestCase):
    def test_three_alternatives(self):
        self.assertEqual(NegativeInfinity().to_data(), Constr(121, []))
        self.assertEqual(Finite(13).to_data(), Constr(122, [_int(13)]))
        self.assertEqual(PositiveInfinity().to_data(), Constr(123, []))

    def test_decode_through_root(self):
        for value in [NegativeInfinity(), Finite(13), PositiveInfinity()]:
            with self.subTest(value=value):
                self.assertEqual(IntervalBoundType.from_data(value.to_data()), value)

    def test_unknown_discriminant(self):
        with self.assertRaises(UnknownDiscriminant) as ctx:
            IntervalBoundType.from_data(create_constr(3, []))
        self.assertEqual(ctx.exception, UnknownDiscriminant(3))

    def test_variant_arity_mismatch(self):
        with self.assertRaises(WrongVariantArity) as ctx:
            IntervalBoundType.from_data(Constr(122, []))
        self.assertEqual(ctx.exception, WrongVariantArity(1, 1, 0))

    def test_alternative_decodes_only_its_variant(self):
        with self.assertRaises(UnknownDiscriminant):
            Finite.from_data(Constr(121, []))

    def test_overrides_do_not_shift_implicit_numbers(self):
        shape = describe(Action)
        self.assertEqual([(a.cls, a.variant) for a in shape.alternatives],
                         [(Mint, 5), (Burn, 0), (Spend, 200), (Close, 1)])

    def test_override_round_trip(self):
        for value in [Mint(-3), Burn(2**63 - 1), Spend(), Close()]:
            with self.subTest(value=value):
                self.assertEqual(Action.from_data(value.to_data()), value)
        self.assertEqual(Spend().to_data(), Constr(102, [], 200))

    def test_union_field(self):
        data = TokenRecord(token_name="SUNDAE", token_value=13379001,
                           block_ref=Point(header_hash=[0x12, 0x24]))
        node = Constr(121, [
            BoundedBytes(b"SUNDAE"),
            _int(13379001),
            Constr(121, [Constr(122, [BoundedBytes(b"\x12\x24")])]),
        ])
        self.assertEqual(data.to_data(), node)
        self.assertEqual(TokenRecord.from_data(node), data)

    def test_union_encode_through_root_codec(self):
        self.assertEqual(to_data(Origin(), BlockReference), Constr(121, []))

    def test_duplicate_variant_rejected(self):
        with self.assertRaises(SchemaError) as ctx:
            Clash.from_data(Constr(121, []))
        self.assertEqual(ctx.exception.code, ERR_SCHEMA)
        self.assertIn("variant 0", ctx.exception.message)

    def test_late_alternative_rejected(self):
        IntervalBoundType.from_data(Constr(121, []))
        with self.assertRaises(SchemaError):
            class Late(IntervalBoundType):
                pass


# ── Declaration errors ────────────────────────────────────────

class TestSchemaErrors(unittest.TestCase):
    def test_unsupported_annotations(self):
        for tp in [Tuple[int], Tuple[int, ...], list, Union[int, str],
                   Dict[List[int], int], float, Tuple[(U8,) * 9]]:
            with self.subTest(tp=tp):
                with self.assertRaises(SchemaError):
                    codec_for(tp)

    def test_nested_unhashable_map_keys(self):
        for tp in [Dict[Tuple[List[U64], U64], U64], Dict[Optional[List[U64]], U64],
                   Dict[Tuple[bytes, Dict[str, int]], int]]:
            with self.subTest(tp=tp):
                with self.assertRaises(SchemaError):
                    codec_for(tp)

    def test_record_key_with_list_field(self):
        key = create_constr(0, [create_array([BoundedBytes(b"a")])])
        with self.assertRaises(CustomDecodeError):
            from_data(create_map([(key, _int(1))]), Dict[HasArray, int])

    def test_bad_variant_override(self):
        from plutus_data import Datum
        for bad in [-1, 2**64, "1", True]:
            with self.subTest(bad=bad):
                with self.assertRaises(SchemaError):
                    class Bad(Datum, variant=bad):
                        pass

    def test_union_with_fields(self):
        from plutus_data import Datum
        with self.assertRaises(SchemaError):
            class BadUnion(Datum, union=True):
                x: int

    def test_all_errors_share_base(self):
        for cls in [DecodeError, SchemaError, JsonFormatError, UnsupportedValue]:
            self.assertTrue(issubclass(cls, PlutusError))


# ── JSON notation ─────────────────────────────────────────────

class TestJson(unittest.TestCase):
    def test_record(self):
        raw = to_json(Counter(flag=True, count=1337))
        self.assertEqual(
            raw, '{"constructor":0,"fields":[{"constructor":1,"fields":[]},{"int":1337}]}')
        self.assertEqual(from_json(raw, Counter), Counter(flag=True, count=1337))

    def test_bytes_and_map(self):
        raw = to_json({b"\xca\xfe": [1]}, Dict[bytes, List[U8]])
        self.assertEqual(raw, '{"map":[{"k":{"bytes":"cafe"},"v":{"bytes":"01"}}]}')

    def test_large_constructor(self):
        self.assertEqual(from_json('{"constructor":200,"fields":[]}', Action), Spend())

    def test_float_rejected(self):
        with self.assertRaises(JsonFormatError):
            from_json('{"int": 1.0}', int)

    def test_bad_hex(self):
        with self.assertRaises(JsonFormatError):
            from_json('{"bytes": "zz"}', bytes)

    def test_extra_keys(self):
        with self.assertRaises(JsonFormatError):
            from_json('{"int": 1, "bytes": ""}', int)

    def test_not_json(self):
        with self.assertRaises(JsonFormatError):
            from_json("{", int)


if __name__ == "__main__":
    unittest.main()
