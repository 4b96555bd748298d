r"""
Argument parsers: string token → typed value.

Overview
- ParserTable: immutable mapping of value type → parser callable. The registry
  checks every handler parameter type against it; the dispatcher applies it.
- Value types for the fixed-width defaults:
  • Int8, Int16, Int32: signed integers, range-checked (int subclasses).
  • Float32: single-precision float (float subclass, rounded through IEEE-754
    binary32).
  • Char: exactly one character (str subclass).
- Default parsers
  • int, Int8, Int16, Int32: r"[+-]?[0-9]+" (no whitespace, no underscores).
  • float, Float32: decimal digits with an optional fraction and exponent,
    or [+-]Infinity and NaN (no whitespace, no underscores, no "inf").
  • bool: "true" (any case) is True, anything else False.
  • Char: exactly one character.
  • str: identity.

Parsers raise ValueError (or OverflowError) on bad input; the dispatcher
reports any such failure as an ERROR result.
"""
import builtins
import re
import struct
from collections.abc import Mapping

from .faults import InvalidParserError
from .utils import freeze, named, typename


class _BoundedInt(int):
    """
    signed integer restricted to `bits` bits.
    """
    bits = 0

    def __new__(cls, value=0, /):
        self = super().__new__(cls, value)
        bound = 1 << (cls.bits - 1)
        if not -bound <= self < bound:
            raise OverflowError(f"value {int(self)} out of range for {cls.__name__} ({-bound} to {bound - 1})")
        return self

    def __repr__(self):
        return f"{type(self).__name__}({int(self)})"


class Int8(_BoundedInt):
    bits = 8


class Int16(_BoundedInt):
    bits = 16


class Int32(_BoundedInt):
    bits = 32


class Float32(float):
    """
    float rounded to IEEE-754 single precision.
    """

    def __new__(cls, value=0.0, /):
        value = float(value)
        try:
            value, = struct.unpack("f", struct.pack("f", value))
        except OverflowError:
            value = float("inf") if value > 0 else float("-inf")
        return super().__new__(cls, value)

    def __repr__(self):
        return f"Float32({float(self)!r})"


class Char(str):
    """
    a string of exactly one character.
    """

    def __new__(cls, value="", /):
        if len(value) != 1:
            raise ValueError(f"expected a character, but received {value!r}")
        return super().__new__(cls, value)


_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|Infinity|NaN)")


def _numeric(cls, pattern):
    @named("parse_" + cls.__name__.lower())
    def parse(text, /):
        if not pattern.fullmatch(text):
            raise ValueError(f"invalid literal for {cls.__name__}: {text!r}")
        return cls(text)
    return parse


def parse_bool(text, /):
    return text.lower() == "true"


def parse_str(text, /):
    return text


DEFAULT_PARSERS = freeze({
    int: _numeric(int, _INTEGER),
    Int8: _numeric(Int8, _INTEGER),
    Int16: _numeric(Int16, _INTEGER),
    Int32: _numeric(Int32, _INTEGER),
    float: _numeric(float, _FLOAT),
    Float32: _numeric(Float32, _FLOAT),
    bool: parse_bool,
    Char: Char,
    str: parse_str,
})


class ParserTable(Mapping):
    """
    Immutable type → parser mapping.

    Parameters
    - parsers: Mapping[type, Callable[[str], Any]]
      Every key must be a class and every value a callable.

    Raises
    - InvalidParserError on a non-class key or a non-callable parser.
    """
    __slots__ = ("_parsers",)

    def __init__(self, parsers=DEFAULT_PARSERS, /):
        checked = {}
        for type, parser in dict(parsers).items():
            if not isinstance(type, builtins.type):
                raise InvalidParserError(f"parser key must be a class, not {type!r}")
            if not callable(parser):
                raise InvalidParserError(f"parser for type {typename(type)!r} must be callable")
            checked[type] = parser
        self._parsers = freeze(checked)

    @classmethod
    def defaults(cls):
        return cls(DEFAULT_PARSERS)

    def parse(self, type, text, /):
        """
        Convert text with the parser registered for type.

        Raises
        - KeyError when no parser is registered (the registry rules this out
          for compiled command methods).
        - whatever the parser raises on malformed text.
        """
        return self._parsers[type](text)

    def __getitem__(self, type):
        return self._parsers[type]

    def __iter__(self):
        return iter(self._parsers)

    def __len__(self):
        return len(self._parsers)

    def __repr__(self):
        return f"parser-table({', '.join(map(typename, self._parsers))})"

    def __rich_repr__(self):
        for type, parser in self._parsers.items():
            yield typename(type), parser


__all__ = (
    "Int8",
    "Int16",
    "Int32",
    "Float32",
    "Char",
    "DEFAULT_PARSERS",
    "ParserTable",
    "parse_bool",
    "parse_str",
)
