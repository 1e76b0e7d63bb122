"""Constructor tag arithmetic.

Maps a logical variant number onto the physical CBOR tag of a Constr node
and back.  Pure and bit-exact; see _constants for the ranges.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ._constants import (
    TAG_ANY_CONSTRUCTOR,
    TAG_COMPACT_BASE,
    TAG_COMPACT_LAST,
    TAG_EXTENDED_BASE,
    TAG_EXTENDED_LAST,
    U64_MAX,
    VARIANT_COMPACT_LAST,
    VARIANT_EXTENDED_FIRST,
    VARIANT_EXTENDED_LAST,
)
from ._errors import VariantOutOfRange


def variant_to_tag(variant: int) -> Tuple[int, Optional[int]]:
    """Return (tag, any_constructor) for a logical variant number.

    >>> variant_to_tag(0)
    (121, None)
    >>> variant_to_tag(7)
    (1280, None)
    >>> variant_to_tag(128)
    (102, 128)
    """
    if isinstance(variant, bool) or not isinstance(variant, int):
        raise TypeError("variant must be int, got {}".format(type(variant).__name__))
    if variant < 0 or variant > U64_MAX:
        raise VariantOutOfRange(variant)
    if variant <= VARIANT_COMPACT_LAST:
        return TAG_COMPACT_BASE + variant, None
    if variant <= VARIANT_EXTENDED_LAST:
        return TAG_EXTENDED_BASE + (variant - VARIANT_EXTENDED_FIRST), None
    return TAG_ANY_CONSTRUCTOR, variant


def tag_to_variant(tag: int, any_constructor: Optional[int] = None) -> Optional[int]:
    """Invert variant_to_tag.  Returns None for a tag outside the three ranges.

    Tag 102 without an escape discriminant is also invalid.  Note that the
    escape form accepts any discriminant, including small ones that would
    normally use a compact tag; decoders must not reject it.
    """
    if TAG_COMPACT_BASE <= tag <= TAG_COMPACT_LAST:
        return tag - TAG_COMPACT_BASE
    if TAG_EXTENDED_BASE <= tag <= TAG_EXTENDED_LAST:
        return tag - TAG_EXTENDED_BASE + VARIANT_EXTENDED_FIRST
    if tag == TAG_ANY_CONSTRUCTOR and any_constructor is not None:
        return any_constructor
    return None
