"""
Arbor value model: the closed set of typed values carried by options and arguments.

Overview
- Kind
  • The four declarable kinds: BOOL, STR, INT, FLOAT.
  • Its string form is the tag shown in help and fault messages
    ("boolean", "string", "integer", "float").
  • Kind.parse(text) converts a raw command-line token into a Value, raising
    ValueError when the text does not denote a value of that kind.
  • Kind.default is the natural default (false, "", 0, 0.0) used when an option
    declares none.

- Value
  • Immutable (kind, value) pair. Equal when kind and payload are equal.
  • str(value) formats the payload so that kind.parse(str(value)) == value.
  • as_bool()/as_str()/as_int()/as_float() unwrap the payload, raising TypeError
    when asked for the wrong kind.

Text rules
- boolean: exactly "true" or "false" (case-sensitive).
- string: any text, unchanged.
- integer: optional sign and ASCII digits, within the 32-bit signed range.
- float: what float() accepts, restricted to ASCII text without surrounding whitespace
  or "_" separators.
"""
import enum
import re
from typing import final

from .utils import *

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


class Kind(enum.Enum):
    """
    Declarable value kinds; the member value is the human-readable type tag.
    """
    BOOL = "boolean"
    STR = "string"
    INT = "integer"
    FLOAT = "float"

    def __str__(self):
        return self.value

    @classmethod
    def of(cls, object, /):
        """
        Resolve a kind from a Kind member or from the matching builtin type.

        Examples
        - Kind.of(Kind.INT) -> Kind.INT
        - Kind.of(float)    -> Kind.FLOAT
        """
        if isinstance(object, cls):
            return object
        try:
            return {bool: cls.BOOL, str: cls.STR, int: cls.INT, float: cls.FLOAT}[object]
        except (KeyError, TypeError):
            raise TypeError(f"kind must be one of Kind members, bool, str, int or float, not {object!r}") from None

    @property
    def default(self):
        match self:
            case Kind.BOOL:
                return Value(self, False)
            case Kind.STR:
                return Value(self, "")
            case Kind.INT:
                return Value(self, 0)
            case Kind.FLOAT:
                return Value(self, 0.0)

    def parse(self, text, /):
        """
        Convert raw text into a Value of this kind.

        Raises
        - TypeError: text is not a string.
        - ValueError: text does not denote a value of this kind.
        """
        if not isinstance(text, str):
            raise TypeError(f"{self} text must be a string")

        match self:
            case Kind.BOOL:
                if text not in ("true", "false"):
                    raise ValueError(f"{text!r} is not a valid {self} (expected 'true' or 'false')")
                return Value(self, text == "true")
            case Kind.STR:
                return Value(self, text)
            case Kind.INT:
                if not re.fullmatch(r"[+-]?[0-9]+", text):
                    raise ValueError(f"{text!r} is not a valid {self}")
                return Value(self, int(text))
            case Kind.FLOAT:
                if not text.isascii() or text != text.strip() or "_" in text:
                    raise ValueError(f"{text!r} is not a valid {self}")
                try:
                    return Value(self, float(text))
                except ValueError:
                    raise ValueError(f"{text!r} is not a valid {self}") from None


@final
class Value:
    """
    Immutable typed value produced by parsing or by instantiating a declared default.

    Construction validates the payload against the kind:
    - BOOL takes a bool, STR a str, INT an int (not bool) in the 32-bit range,
      FLOAT an int or float (stored as float).
    """
    __slots__ = ("_kind", "_value")

    kind = mirror("kind")
    value = mirror("value")

    def __new__(cls, kind, value, /):
        kind = Kind.of(kind)

        match kind:
            case Kind.BOOL if not isinstance(value, bool):
                raise TypeError(f"{kind} value must be a bool")
            case Kind.STR if not isinstance(value, str):
                raise TypeError(f"{kind} value must be a string")
            case Kind.INT if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{kind} value must be an int")
            case Kind.INT if not INT_MIN <= value <= INT_MAX:
                raise ValueError(f"{kind} value {value} is out of the 32-bit signed range")
            case Kind.FLOAT if not isinstance(value, int | float) or isinstance(value, bool):
                raise TypeError(f"{kind} value must be a float")
            case Kind.FLOAT:
                value = float(value)

        self = super().__new__(cls)
        self._kind = kind
        self._value = value
        return self

    def _unwrap(self, kind):
        if self._kind is not kind:
            raise TypeError(f"value of kind {self._kind} is not a {kind}")
        return self._value

    def as_bool(self):
        return self._unwrap(Kind.BOOL)

    def as_str(self):
        return self._unwrap(Kind.STR)

    def as_int(self):
        return self._unwrap(Kind.INT)

    def as_float(self):
        return self._unwrap(Kind.FLOAT)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._kind is other._kind and self._value == other._value

    def __hash__(self):
        return hash((self._kind, self._value))

    def __str__(self):
        match self._kind:
            case Kind.BOOL:
                return "true" if self._value else "false"
            case Kind.FLOAT:
                return repr(self._value)
            case _:
                return str(self._value)

    def __repr__(self):
        return f"value({self._kind}, {self._value!r})"

    def __rich_repr__(self):
        yield "kind", self._kind
        yield "value", self._value


__all__ = (
    "Kind",
    "Value",
)
