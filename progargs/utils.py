"""
Progargs shared helpers.

Contents
- Unset: the "argument omitted" marker. Several parameters accept None as a real
  value (a string default, a missing short name), so omission needs its own object.
- coalesce(object, default): swap Unset for a fallback, leave everything else alone.
- rename(name): decorator fixing __name__/__qualname__ of generated functions.
- mirror(name): read-only property over the "_name" attribute of an instance.
- IntrospectableType: metaclass that publishes __introspectable__ fields as
  mirror() properties and derives __repr__/__rich_repr__ from them.
- ordinal(number): "first", "second", ... "11th", "22nd" for positions in messages.

    >>> coalesce(Unset, 10), coalesce(None, 10)
    (10, None)
"""
import functools
import operator
import re
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance; it is falsy, prints as "Unset", cannot be
    subclassed and can take part in `X | Unset` unions for isinstance checks.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, `object` otherwise (None, 0 and "" included).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator giving the decorated function a fixed __name__ and __qualname__.

        @rename("__repr__")
        def anything(self): ...
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("rename() must decorate a callable")
        try:
            function.__name__ = function.__qualname__ = name
        except (AttributeError, TypeError):
            raise TypeError("rename() cannot rename %r" % (function,)) from None
        return function

    return decorator


def _freeze(object):
    # containers leave through read-only views
    match object:
        case str():
            return object
        case Sequence():
            return tuple(object)
        case Mapping():
            return MappingProxyType(object)
        case Set():
            return frozenset(object)
    return object


def mirror(name, /):
    """
    Property reading self._<name>; lists, dicts and sets come back as tuple,
    mappingproxy and frozenset.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


class IntrospectableType(type):
    """
    Metaclass for the package's record-like classes.

    A class lists its public fields in __introspectable__ and stores them as
    "_field"; the metaclass adds:
    - one mirror() property per field,
    - __typename__, the class name in kebab case ("ValueType" -> "value-type"),
      used as the subject of error messages,
    - __rich_repr__ over __displayable__ (when given) or __introspectable__,
    - __repr__ as "typename(field=value, ...)" unless the class defines one.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        properties = {field: mirror(field) for field in namespace.get("__introspectable__", ())}
        typename = re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()

        self = super().__new__(cls, name, bases, {**namespace, **properties, "__typename__": typename}, **options)

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)

        self.__rich_repr__ = __rich_repr__

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                fields = map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())
                return "%s(%s)" % (type(self).__typename__, ", ".join(fields))

            self.__repr__ = __repr__

        return self


_ORDINALS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """
    Ordinal label for a 1-based position: words up to ten, "11th", "21st", "102nd" above.
    """
    if 1 <= number <= len(_ORDINALS):
        return _ORDINALS[number - 1]
    if number % 100 in (11, 12, 13):
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "UnsetType",
    "IntrospectableType",
    "Unset",
)
