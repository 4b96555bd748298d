"""
Herald utilities shared by the configuration, registration and dispatch layers.

- Unset: sentinel for "not provided" where None is meaningful (a help message
  explicitly absent vs. never given). coalesce() materializes it.
- named(): give generated callables readable names for tracebacks.
- freeze() / mirror(): read-only snapshots of configuration containers and
  the properties serving them.
- typename(): class name used in fault messages.

Only names listed in __all__ are supported.
"""
import builtins
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel: falsy, distinct from None, one per process.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Replace Unset with default; every other value (None, 0, "") is kept.

        coalesce(Unset, " ")  -> " "
        coalesce(None, " ")   -> None
    """
    return default if object is Unset else object


def named(name, /):
    """
    Decorator setting __name__ and __qualname__ of the decorated callable.
    """
    if not isinstance(name, str):
        raise TypeError("@named() argument must be a string")

    def decorator(callable):
        if not builtins.callable(callable):
            raise TypeError("@named() must be applied to a callable")
        callable.__name__ = callable.__qualname__ = name
        return callable

    return decorator


def freeze(object, /):
    """
    Shallow, read-only snapshot of a container.

    Sequences (not strings) become tuples, mappings become MappingProxyType
    over a private copy, sets become frozensets; anything else is returned
    unchanged.
    """
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    return object


def mirror(name, /):
    """
    Read-only property serving freeze(self._<name>).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @named(name)
    def getter(self):
        return freeze(getattr(self, "_" + name))

    return property(getter)


def typename(object, /):
    """
    Qualified name of a class, or of an instance's class.
    """
    cls = object if isinstance(object, type) else type(object)
    return getattr(cls, "__qualname__", None) or repr(cls)


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "named",
    "freeze",
    "mirror",
    "typename",
)
