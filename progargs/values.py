r"""
Progargs typed values and token coercion.

Overview
- ValueType: the tag of a value (flag, string, int, float). Each member knows its
  zero value (returned by accessors on lookup/type mismatches) and the placeholder
  shown in help ("<string>", "<int>", "<float>"; flags have none).
- Value: a tagged union holding exactly one payload. The tag is authoritative,
  projections (flag/string/integer/floating) refuse to read the wrong member.
- coerce(type, token): turn a raw command-line token into a Value.

Coercion rules
- flag: presence only, always True.
- string: the token verbatim.
- int: "parse or zero", like C atoi: optional leading whitespace, optional sign,
  then the longest run of ASCII digits; no digits at all yields 0, and so does
  a run too long for int() to convert.
    "42" -> 42, "  -7" -> -7, "12abc" -> 12, "abc" -> 0, "" -> 0
- float: "parse or zero", like C atof: the longest decimal/exponent/inf/nan prefix.
    "0.5" -> 0.5, "1e3x" -> 1000.0, ".5" -> 0.5, "x" -> 0.0
- strict=True upgrades malformed numeric text to ValueError (the whole token,
  minus surrounding whitespace, must be a number).
"""
import re
from enum import Enum
from typing import final

from .utils import IntrospectableType, Unset

_INTEGER = re.compile(r"\s*(?P<number>[+-]?\d+)", re.ASCII)
_FLOATING = re.compile(
    r"\s*(?P<number>[+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?))",
    re.ASCII | re.IGNORECASE
)
_WHITESPACE = " \t\n\v\f\r"


class ValueType(Enum):
    """
    tag of a typed value.
    """
    FLAG = "flag"
    STRING = "string"
    INT = "int"
    FLOAT = "float"

    @property
    def zero(self):
        """
        type-appropriate empty value: False, None, 0 or 0.0.
        """
        return {
            ValueType.FLAG: False,
            ValueType.STRING: None,
            ValueType.INT: 0,
            ValueType.FLOAT: 0.0,
        }[self]

    @property
    def placeholder(self):
        """
        help placeholder for the value token (None for flags).
        """
        return None if self is ValueType.FLAG else "<%s>" % self.value

    def accepts(self, payload, /):
        """
        whether payload fits this tag (bool is not an int here, ints are floats).
        """
        match self:
            case ValueType.FLAG:
                return isinstance(payload, bool)
            case ValueType.STRING:
                return payload is None or isinstance(payload, str)
            case ValueType.INT:
                return isinstance(payload, int) and not isinstance(payload, bool)
            case ValueType.FLOAT:
                return isinstance(payload, int | float) and not isinstance(payload, bool)


@final
class Value(metaclass=IntrospectableType):
    """
    Tagged union over {flag, string, int, float}.

    The payload is checked against the tag on construction and float payloads are
    normalised to float. Reading a projection that does not match the tag raises
    TypeError, so callers must check `type` before projecting.
    """

    __introspectable__ = (
        "type",
        "payload",
    )

    def __init__(self, type, payload=Unset, /):
        if not isinstance(type, ValueType):
            raise TypeError("value 'type' must be a value-type")
        if payload is Unset:
            payload = type.zero
        if not type.accepts(payload):
            raise TypeError("value payload %r does not fit type %r" % (payload, type.value))
        if type is ValueType.FLOAT:
            payload = float(payload)
        self._type = type
        self._payload = payload

    def _project(self, type, /):
        if self._type is not type:
            raise TypeError("value holds %s, not %s" % (self._type.value, type.value))
        return self._payload

    @property
    def flag(self):
        return self._project(ValueType.FLAG)

    @property
    def string(self):
        return self._project(ValueType.STRING)

    @property
    def integer(self):
        return self._project(ValueType.INT)

    @property
    def floating(self):
        return self._project(ValueType.FLOAT)

    def __eq__(self, other, /):
        if not isinstance(other, Value):
            return NotImplemented
        return self._type is other._type and self._payload == other._payload

    def __hash__(self):
        return hash((self._type, self._payload))


def coerce(type, token, /, *, strict=False):
    """
    Coerce a raw token into a Value of the given type.

    Parameters
    - type: ValueType
    - token: str (ignored for flags)
    - strict: bool (keyword-only)
      when True, malformed int/float text raises ValueError instead of coercing to zero.

    Returns
    - Value tagged with `type`.
    """
    if not isinstance(type, ValueType):
        raise TypeError("coerce() first argument must be a value-type")

    match type:
        case ValueType.FLAG:
            return Value(type, True)
        case ValueType.STRING:
            if not isinstance(token, str):
                raise TypeError("coerce() second argument must be a string")
            return Value(type, token)
        case ValueType.INT:
            pattern, convert = _INTEGER, int
        case ValueType.FLOAT:
            pattern, convert = _FLOATING, float

    if not isinstance(token, str):
        raise TypeError("coerce() second argument must be a string")

    if strict:
        if not (match := pattern.fullmatch(token.rstrip(_WHITESPACE))):
            raise ValueError("%r is not a valid %s" % (token, type.value))
        return Value(type, convert(match["number"]))

    if not (match := pattern.match(token)):
        return Value(type)
    try:
        return Value(type, convert(match["number"]))
    except ValueError:
        # digit run beyond sys.get_int_max_str_digits()
        return Value(type)


__all__ = (
    "ValueType",
    "Value",
    "coerce",
)
