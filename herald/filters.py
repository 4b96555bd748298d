"""
Command filters: declarative markers and the predicates that interpret them.

Overview
- Marker: base class for filter configuration. Instances are applied as
  decorators on command methods or on their container classes:

        class AdminOnly(Marker): ...

        @AdminOnly()
        class Moderation:
            @command
            def kick(self, user: User, target: str): ...

- CommandFilter: the filter contract. Either an object with
  filter(context, marker, key, arguments) -> bool, or a plain callable with
  the same signature.
- FilterTable: immutable marker type → filter mapping; resolves the filters of
  one command method (method markers override container markers of the same
  type).
- CommandMethodFilter: one resolved (marker, filter) pair, callable as
  (context, key, arguments) -> bool.
- Access / AccessFilter: numeric access levels expressed as a marker/filter
  pair (context level must reach the marker level).
"""
import builtins
from collections.abc import Mapping
from typing import NamedTuple, Protocol, runtime_checkable

from .faults import InvalidFilterError
from .utils import freeze, typename

_MARKERS = "__herald_markers__"


class Marker:
    """
    Base class of filter markers.

    A marker instance is the concrete configuration read by its filter (e.g.
    an access level). Applying an instance to a function or a class records it
    on the target; each marker type can be applied only once per target.
    Markers on a class are inherited by its subclasses.
    """

    def __call__(self, target, /):
        if not callable(target):
            raise TypeError(f"@{typename(self)}() must be applied to a function or a class")
        attached = getattr(target, _MARKERS, {})
        if type(self) in vars(target).get(_MARKERS, {}):
            raise TypeError(f"@{typename(self)}() must be applied only once")
        setattr(target, _MARKERS, {**attached, type(self): self})
        return target

    def __repr__(self):
        fields = ", ".join(f"{name}={value!r}" for name, value in self.__rich_repr__())
        return f"{typename(self)}({fields})"

    def __rich_repr__(self):
        yield from vars(self).items()


def markers(target, /):
    """
    Return the markers applied to a function or class, keyed by marker type.
    """
    return freeze(getattr(target, _MARKERS, {}))


@runtime_checkable
class CommandFilter(Protocol):
    """
    Filter contract; execution proceeds only when filter() returns True.

    Parameters
    - context: the command context (usually the message author).
    - marker: the Marker instance declared on the method or its container.
    - key: the lower-cased command key.
    - arguments: the raw argument tokens (tuple of strings).
    """

    def filter(self, context, marker, key, arguments, /): ...


class CommandMethodFilter(NamedTuple):
    """
    A marker paired with the filter that interprets it.
    """
    marker: Marker
    filter: object

    def __call__(self, context, key, arguments, /):
        return bool(self.filter(context, self.marker, key, arguments))


def _adapt(filter):
    """
    Normalize a filter object or plain callable into a callable predicate.
    """
    if isinstance(filter, CommandFilter) and callable(filter.filter):
        return filter.filter
    if callable(filter):
        return filter
    raise InvalidFilterError(f"filter must be callable or provide a filter() method, not {typename(filter)!r}")


class FilterTable(Mapping):
    """
    Immutable marker type → filter mapping.

    Values are stored normalized (bound filter() methods or plain callables).

    Raises
    - InvalidFilterError when a key is not a Marker subclass or a value is
      neither callable nor a CommandFilter.
    """
    __slots__ = ("_filters",)

    def __init__(self, filters=(), /):
        checked = {}
        for type, filter in dict(filters).items():
            if not isinstance(type, builtins.type) or not issubclass(type, Marker):
                raise InvalidFilterError(f"filter key must be a Marker subclass, not {type!r}")
            checked[type] = _adapt(filter)
        self._filters = freeze(checked)

    def resolve(self, method, container, /):
        """
        Gather the filters applying to one command method.

        Markers are read from the method and from the container class; the
        method's marker wins when both declare the same marker type. Marker
        types without a registered filter are ignored.

        Returns
        - frozenset[CommandMethodFilter]
        """
        declared = dict(markers(container)) | dict(markers(method))
        return frozenset(
            CommandMethodFilter(marker, self._filters[type])
            for type, marker in declared.items()
            if type in self._filters
        )

    def __getitem__(self, type):
        return self._filters[type]

    def __iter__(self):
        return iter(self._filters)

    def __len__(self):
        return len(self._filters)

    def __repr__(self):
        return f"filter-table({', '.join(map(typename, self._filters))})"

    def __rich_repr__(self):
        for type, filter in self._filters.items():
            yield typename(type), filter


class Access(Marker):
    """
    Minimum access level required to run a command.

    On a container class it sets the base-line level of every command inside;
    an Access marker on a method overrides it.
    """

    def __init__(self, level, /):
        if isinstance(level, bool) or not isinstance(level, int):
            raise TypeError("Access level must be an integer")
        self.level = level

    def __eq__(self, other):
        if not isinstance(other, Access):
            return NotImplemented
        return self.level == other.level

    def __hash__(self):
        return hash((Access, self.level))


class AccessFilter:
    """
    Approve when the context's level reaches the marker's level.

    Parameters
    - level_of: Callable[[context], int], reads the caller's access level.
    """

    def __init__(self, level_of, /):
        if not callable(level_of):
            raise InvalidFilterError("AccessFilter level_of must be callable")
        self._level_of = level_of

    def filter(self, context, marker, key, arguments, /):
        return self._level_of(context) >= marker.level


__all__ = (
    "Marker",
    "markers",
    "CommandFilter",
    "CommandMethodFilter",
    "FilterTable",
    "Access",
    "AccessFilter",
)
