"""Mapping-rule generator and the Datum declaration base.

generate(cls) turns a record or union declaration into a ConstrCodec.
The codec's rule table holds one entry per alternative, in declaration
order: the variant number, the class, and one field codec per declared
field.  Decoding walks the table and takes the first entry whose variant
matches; encoding looks the value's class up directly.

Declaring types:

    class Interval(Datum):
        lower: IntervalBound
        upper: IntervalBound

    class BlockReference(Datum, union=True):
        pass

    class Origin(BlockReference):
        pass

    class Point(BlockReference, variant=3):
        header_hash: bytes

Datum subclasses become frozen dataclasses.  A record is constructor 0
unless it passes `variant=`.  Alternatives of a union are numbered by
their position among the alternatives that do not pass `variant=`.
Plain dataclasses and NamedTuple classes are accepted as records too.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, dataclass_transform

from ._codecs import Codec
from ._core import create_constr, expect_constr, expect_variant
from ._errors import SchemaError, UnknownDiscriminant, UnsupportedValue
from ._node import PlutusData
from ._schema import check_variant, codec_for, describe

logger = logging.getLogger(__name__)


class _Rule(NamedTuple):
    variant: int
    cls: type
    names: Tuple[str, ...]
    codecs: Tuple[Codec, ...]
    positional: bool

    def build(self, values: List[Any]) -> Any:
        if self.positional:
            return self.cls(*values)
        return self.cls(**dict(zip(self.names, values)))


class ConstrCodec(Codec):
    """Codec generated from a record or union shape."""

    def __init__(self, cls: type) -> None:
        self.cls = cls
        self.name = cls.__qualname__
        self._table: Optional[Tuple[_Rule, ...]] = None
        self._by_class: Dict[type, _Rule] = {}

    def rules(self) -> Tuple[_Rule, ...]:
        # Built on first use so that field annotations may refer to types
        # declared later in the module, or to the type itself.
        if self._table is None:
            shape = describe(self.cls)
            table = tuple(
                _Rule(
                    alt.variant,
                    alt.cls,
                    tuple(f.name for f in alt.fields),
                    tuple(codec_for(f.annotation) for f in alt.fields),
                    alt.positional,
                )
                for alt in shape.alternatives
            )
            logger.debug(
                "generated rules for %s: %s", self.name,
                ", ".join("{}={}/{}".format(r.cls.__name__, r.variant, len(r.codecs))
                          for r in table))
            self._by_class = {r.cls: r for r in table}
            self._table = table
        return self._table

    def decode(self, data: PlutusData) -> Any:
        rules = self.rules()
        variant, fields = expect_constr(data)
        for rule in rules:
            if variant == rule.variant:
                items = expect_variant(variant, fields, len(rule.codecs))
                return rule.build([c.decode(item) for c, item in zip(rule.codecs, items)])
        raise UnknownDiscriminant(variant)

    def encode(self, value: Any) -> PlutusData:
        self.rules()
        rule = self._by_class.get(type(value))
        if rule is None:
            raise UnsupportedValue("cannot encode {} as {}".format(
                type(value).__name__, self.name))
        return create_constr(
            rule.variant,
            [c.encode(getattr(value, n)) for c, n in zip(rule.codecs, rule.names)])


def generate(cls: type) -> ConstrCodec:
    """Produce the codec for a declared record or union."""
    return ConstrCodec(cls)


# ── Declarations ─────────────────────────────────────────────

@dataclass_transform(frozen_default=True)
class Datum:
    """Base for records and tagged unions that map to Plutus data.

    Class keywords:
        variant=N    explicit constructor number for this record/alternative
        union=True   this class is a union; its subclasses are the alternatives
    """

    def __init_subclass__(cls, variant: Optional[int] = None, union: bool = False,
                          **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        parent = next((b for b in cls.__bases__ if issubclass(b, Datum)), Datum)

        if "__plutus_root__" in parent.__dict__:
            raise SchemaError("{}: alternative {} cannot be subclassed".format(
                cls.__qualname__, parent.__qualname__))

        if union:
            if parent is not Datum:
                raise SchemaError("{}: a union must derive directly from Datum".format(
                    cls.__qualname__))
            if variant is not None:
                raise SchemaError("{}: a union takes no variant; set it on alternatives".format(
                    cls.__qualname__))
            if inspect.get_annotations(cls):
                raise SchemaError("{}: a union declares no fields".format(cls.__qualname__))
            cls.__plutus_alternatives__ = []
            return

        if variant is not None:
            cls.__plutus_variant__ = check_variant(cls.__qualname__, variant)

        if "__plutus_alternatives__" in parent.__dict__:
            if parent.__dict__.get("__plutus_sealed__"):
                raise SchemaError(
                    "{}: union {} is already in use; declare every alternative "
                    "before the first encode or decode".format(
                        cls.__qualname__, parent.__qualname__))
            parent.__plutus_alternatives__.append(cls)
            cls.__plutus_root__ = parent

        dataclass(frozen=True)(cls)

    def to_data(self) -> PlutusData:
        return codec_for(type(self)).encode(self)

    @classmethod
    def from_data(cls, data: PlutusData) -> Any:
        return codec_for(cls).decode(data)
