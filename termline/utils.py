"""
Small helpers shared by the descriptor, term and rendering layers.

- Unset: "argument not given" marker, for parameters where None is a real value.
- coalesce(value, default): Unset → default, anything else unchanged.
- @rename(name): stable __name__/__qualname__ for generated evaluators.
- mirror(name): read-only property over self._name returning a frozen snapshot.
- ordinal(number): "first" … "tenth", then "11th", "21st", …

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker: a falsy process-wide singleton that cannot be
    subclassed and survives copies.

    `str | Unset` builds a union usable with isinstance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    default when object is Unset; None, 0 and "" are kept as given.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    decorator giving a callable the __name__ and __qualname__ `name`.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("rename() must decorate a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _freeze(object):
    # One level only; owners freeze what they nest.
    match object:
        case str() | bytes() | bytearray():
            return object
        case Sequence():
            return tuple(object)
        case Mapping():
            return MappingProxyType(dict(object))
        case Set():
            return frozenset(object)
    return object


def mirror(name, /):
    """
    property reading self._<name>; lists, dicts and sets come back as
    tuple, mappingproxy and frozenset.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """
    English ordinal of a 1-based position, spelled out up to ten.
    """
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
