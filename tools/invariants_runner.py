#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Mapping invariants (property tests) for plutus_data.
#
# This runner:
# - generates random type annotations and matching values within limits
# - checks that decode(encode(v)) == v and that encoding is deterministic
# - checks framing (non-empty sequences indefinite, empty ones definite)
# - checks that tag_to_variant inverts variant_to_tag over sampled variants
# - checks that the JSON notation reproduces every encoded node
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, random
from typing import Any, Callable, Dict, List, Optional, Tuple, Union, get_origin

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python", "tests"))

import plutus_data
from plutus_data import (
    I64, U8, U64, Array, Constr, Map, PlutusData,
    codec_for, node_from_json, node_to_json, tag_to_variant, variant_to_tag,
)
from plutus_data._constants import U64_MAX

import datum_fixtures as fx

SEED = int(os.environ.get("PLUTUS_SEED", "1337"))
TRIALS = int(os.environ.get("PLUTUS_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("PLUTUS_GEN_MAX_DEPTH", "4"))
MAX_LIST = int(os.environ.get("PLUTUS_GEN_MAX_LIST", "5"))
MAX_STR = int(os.environ.get("PLUTUS_GEN_MAX_STR", "16"))
MAX_BYTES = int(os.environ.get("PLUTUS_GEN_MAX_BYTES", "32"))

random.seed(SEED)

def rand_utf8_string() -> str:
    # Scalars only; surrogates cannot be encoded as UTF-8.
    out = []
    for _ in range(random.randint(0, MAX_STR)):
        r = random.random()
        if r < 0.70:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.90:
            out.append(chr(random.randint(0x00A0, 0xD7FF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_bytes() -> bytes:
    return bytes(random.getrandbits(8) for _ in range(random.randint(0, MAX_BYTES)))

def rand_big_int() -> int:
    return random.choice([-1, 1]) * random.getrandbits(random.randint(0, 200))

# Leaf types with a value generator each.
LEAVES: List[Tuple[Any, Callable[[], Any]]] = [
    (bool, lambda: random.random() < 0.5),
    (int, rand_big_int),
    (U8, lambda: random.randint(0, 255)),
    (U64, lambda: random.randint(0, U64_MAX)),
    (I64, lambda: random.randint(-2 ** 63, 2 ** 63 - 1)),
    (bytes, rand_bytes),
    (str, rand_utf8_string),
]

KEYS: List[Tuple[Any, Callable[[], Any]]] = [
    (str, rand_utf8_string),
    (bytes, rand_bytes),
    (U64, lambda: random.randint(0, U64_MAX)),
]

def rand_bound_type() -> Any:
    r = random.randint(0, 2)
    if r == 0:
        return fx.NegativeInfinity()
    if r == 1:
        return fx.Finite(value=random.randint(0, U64_MAX))
    return fx.PositiveInfinity()

def rand_interval() -> Any:
    return fx.Interval(
        lower_bound=fx.IntervalBound(bound_type=rand_bound_type(), is_inclusive=random.random() < 0.5),
        upper_bound=fx.IntervalBound(bound_type=rand_bound_type(), is_inclusive=random.random() < 0.5),
    )

def rand_action() -> Any:
    r = random.randint(0, 3)
    if r == 0:
        return fx.Mint(amount=random.randint(-2 ** 63, 2 ** 63 - 1))
    if r == 1:
        return fx.Burn(amount=random.randint(-2 ** 63, 2 ** 63 - 1))
    if r == 2:
        return fx.Spend()
    return fx.Close()

def rand_cons(depth: int) -> Any:
    tail = rand_cons(depth + 1) if depth < MAX_GEN_DEPTH and random.random() < 0.6 else None
    return fx.Cons(head=random.randint(0, U64_MAX), tail=tail)

def rand_token_record() -> Any:
    ref: Any = None
    r = random.random()
    if r < 0.33:
        ref = fx.Origin()
    elif r < 0.66:
        ref = fx.Point(header_hash=list(rand_bytes()))
    return fx.TokenRecord(token_name=rand_utf8_string(),
                          token_value=random.randint(0, U64_MAX), block_ref=ref)

DECLARED: List[Tuple[Any, Callable[[], Any]]] = [
    (fx.IntervalBoundType, rand_bound_type),
    (fx.Interval, rand_interval),
    (fx.Action, rand_action),
    (fx.Cons, lambda: rand_cons(0)),
    (fx.TokenRecord, rand_token_record),
    (fx.Escaped, lambda: fx.Escaped(payload=rand_bytes())),
    (fx.Pair, lambda: fx.Pair(key=rand_bytes(), amount=random.randint(0, U64_MAX))),
]

def gen_typed(depth: int) -> Tuple[Any, Callable[[], Any]]:
    """Pick a random annotation and return it with a value generator."""
    if depth >= MAX_GEN_DEPTH:
        return random.choice(LEAVES)
    r = random.random()
    if r < 0.30:
        return random.choice(LEAVES)
    if r < 0.45:
        return random.choice(DECLARED)
    if r < 0.60:
        tp, gen = gen_typed(depth + 1)
        if get_origin(tp) is Union:
            return tp, gen
        return Optional[tp], lambda: None if random.random() < 0.3 else gen()
    if r < 0.72:
        parts = [gen_typed(depth + 1) for _ in range(random.randint(2, 4))]
        tp = Tuple[tuple(p[0] for p in parts)]
        return tp, lambda: tuple(g() for _, g in parts)
    if r < 0.86:
        tp, gen = gen_typed(depth + 1)
        return List[tp], lambda: [gen() for _ in range(random.randint(0, MAX_LIST))]
    ktp, kgen = random.choice(KEYS)
    vtp, vgen = gen_typed(depth + 1)
    return Dict[ktp, vtp], lambda: {kgen(): vgen() for _ in range(random.randint(0, MAX_LIST))}

def framing_ok(node: PlutusData) -> bool:
    if isinstance(node, Array):
        return node.indefinite == bool(node.items) and all(framing_ok(i) for i in node.items)
    if isinstance(node, Constr):
        return node.indefinite == bool(node.fields) and all(framing_ok(f) for f in node.fields)
    if isinstance(node, Map):
        return all(framing_ok(k) and framing_ok(v) for k, v in node.pairs)
    return True

def fail(label: str, **context: Any) -> int:
    print("INVARIANT FAIL:", label)
    for k, v in context.items():
        print("  {}: {}".format(k, repr(v)[:2000]))
    return 1

def main() -> int:
    for t in range(TRIALS):
        # (1) tag inverse
        variant = random.choice([
            random.randint(0, 6), random.randint(7, 127), random.randint(128, U64_MAX)])
        tag, anyc = variant_to_tag(variant)
        if tag_to_variant(tag, anyc) != variant:
            return fail("tag inverse", variant=variant, tag=tag)

        tp, gen = gen_typed(0)
        value = gen()
        codec = codec_for(tp)

        # (2) encode determinism
        node = codec.encode(value)
        if codec.encode(value) != node:
            return fail("encode determinism", trial=t, tp=tp, value=value)

        # (3) framing
        if not framing_ok(node):
            return fail("framing", trial=t, tp=tp, node=node)

        # (4) round trip
        back = codec.decode(node)
        if back != value:
            return fail("round trip", trial=t, tp=tp, value=value, decoded=back)

        # (5) JSON notation reproduces the node
        if node_from_json(node_to_json(node)) != node:
            return fail("json round trip", trial=t, tp=tp, node=node)

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED} (plutus_data {plutus_data.__version__})")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
