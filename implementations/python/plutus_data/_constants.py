"""Plutus data constants — constructor tag layout and integer widths.

The tag layout is fixed by the ledger's CBOR convention for Plutus data
(CIP-0005 / the Alonzo CDDL).  Any deviation breaks interoperability with
on-chain validators, so every number here is normative.
"""

from __future__ import annotations

from typing import Dict, Tuple

# ── Constructor tags ─────────────────────────────────────────
# Variants 0..6 use the compact tag range 121..127.
# Variants 7..127 use the extended range 1280..1400.
# Anything larger escapes to tag 102 and carries the variant as an
# explicit "any constructor" discriminant next to the field list.
TAG_COMPACT_BASE: int = 121
TAG_COMPACT_LAST: int = 127
TAG_EXTENDED_BASE: int = 1280
TAG_EXTENDED_LAST: int = 1400
TAG_ANY_CONSTRUCTOR: int = 102

VARIANT_COMPACT_LAST: int = 6
VARIANT_EXTENDED_FIRST: int = 7
VARIANT_EXTENDED_LAST: int = 127

# Tags and the escape discriminant are CBOR unsigned 64-bit.
U64_MAX: int = 2**64 - 1

# ── Node kind names ──────────────────────────────────────────
# These strings show up in UnexpectedNodeKind errors and are compared
# verbatim by tests in other languages.  Keep them stable.
KIND_BIGINT: str = "BigInt"
KIND_BYTES: str = "BoundedBytes"
KIND_ARRAY: str = "Array"
KIND_MAP: str = "Map"
KIND_CONSTR: str = "Constr"

# ── Fixed-width integers ─────────────────────────────────────
# name -> (min, max), inclusive.  Python ints are arbitrary-precision,
# so widths are enforced explicitly on both encode and decode.
INT_WIDTHS: Dict[str, Tuple[int, int]] = {
    "U8": (0, 2**8 - 1),
    "U16": (0, 2**16 - 1),
    "U32": (0, 2**32 - 1),
    "U64": (0, 2**64 - 1),
    "I8": (-(2**7), 2**7 - 1),
    "I16": (-(2**15), 2**15 - 1),
    "I32": (-(2**31), 2**31 - 1),
    "I64": (-(2**63), 2**63 - 1),
}

# ── Tuple arity ──────────────────────────────────────────────
TUPLE_MIN_ARITY: int = 2
TUPLE_MAX_ARITY: int = 8
