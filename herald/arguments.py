r"""
Herald declarative handler configuration.

Overview
- @command
  • Marks a method as a command handler and records its keys and help text.
    Forms: @command, @command(), @command("say", "s", help="say <text>").
    Without keys the method's own name is the key.

- Parameter specs (used as parameter defaults)
  • default("literal"): the parameter is optional; the literal is parsed with
    the parameter type's parser whenever no token is left for it.
  • remaining(): the parameter receives all remaining text of the message as
    one token, delimiters included. Only valid on the last parameter.
  • remaining(default="literal"): both at once.
  Each returns an Argument; plain str/int/float/bool defaults are accepted
  too and behave like default(str(value)).

- Filter markers (Marker subclasses from herald.filters) are stacked as
  decorators on the same method or on its container class.

Quick example:
    >>> class Greeter:
    ...     @command("greet", "hi", help="greet [name]")
    ...     def greet(self, user: User, name: str = default("world")) -> None:
    ...         user.send(f"hello {name}")
    ...
    ...     @command(help="say <text>")
    ...     def say(self, user: User, text: str = remaining()) -> None:
    ...         user.send(text)
    ...

Nothing here validates handler signatures; that happens when a container is
registered (herald.registry).
"""
from typing import NamedTuple

from .utils import *

_COMMAND = "__command__"


class CommandInfo(NamedTuple):
    """
    Metadata recorded by @command on a handler function.

    - keys: declared keys as written (normalized later by the registry);
      empty means "use the method name".
    - help: help text or None.
    """
    keys: tuple[str, ...]
    help: str | None


class Argument:
    """
    Parameter spec carried as a handler parameter's default value.

    Properties
    - default: str | None, the default literal (None when the parameter is
      required).
    - remaining: bool, whether the parameter captures the remaining text.
    """
    __slots__ = ("_default", "_remaining")

    def __init__(self, default=Unset, /, *, remaining=False):
        if not isinstance(default, str | UnsetType):
            raise TypeError(f"argument 'default' must be a string, not {typename(default)!r}")
        if not isinstance(remaining, bool):
            raise TypeError("argument 'remaining' must be a boolean")
        self._default = coalesce(default)
        self._remaining = remaining

    @property
    def default(self):
        return self._default

    @property
    def remaining(self):
        return self._remaining

    def __argument__(self):
        """
        Introspection hook: identify this object as a parameter spec.
        """
        return self

    def __eq__(self, other):
        if not isinstance(other, Argument):
            return NotImplemented
        return (self._default, self._remaining) == (other._default, other._remaining)

    def __hash__(self):
        return hash((Argument, self._default, self._remaining))

    def __repr__(self):
        return f"argument({', '.join(f'{name}={value!r}' for name, value in self.__rich_repr__())})"

    def __rich_repr__(self):
        yield "default", self._default
        yield "remaining", self._remaining


def default(value, /):
    """
    Declare a default literal for a handler parameter.

        def roll(self, user: User, sides: int = default("6")) -> None: ...
    """
    return Argument(value)


def remaining(default=Unset):
    """
    Declare that the (last) handler parameter captures the remaining text.

        def say(self, user: User, text: str = remaining()) -> None: ...
    """
    return Argument(default, remaining=True)


def command(*keys, help=Unset):
    """
    Mark a method as a command handler.

    Invocation modes
    - Bare decorator:     @command
    - Configured:         @command("key", "alias", help="usage text")

    Parameters
    - *keys: str
      Command keys; case is irrelevant (keys are lower-cased on registration).
    - help: str
      Help message returned with unsuccessful results. Blank text means none.

    Returns
    - the decorated function itself (with metadata attached), so filter
      markers can be stacked in any order.
    """
    if len(keys) == 1 and callable(keys[0]) and help is Unset:
        return command()(keys[0])

    for key in keys:
        if not isinstance(key, str):
            raise TypeError("@command() keys must be strings")
        if not key.strip():
            raise ValueError("@command() keys cannot be empty")
    if not isinstance(help, str | UnsetType):
        raise TypeError("@command() 'help' must be a string")

    # Blank help text is the same as no help text.
    info = CommandInfo(tuple(key.strip() for key in keys), (help.strip() or None) if help else None)

    @named("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        if hasattr(callback, _COMMAND):
            raise TypeError("@command() must be applied only once")
        setattr(callback, _COMMAND, info)
        return callback

    return wrapper


def commandinfo(method, /):
    """
    Return the CommandInfo recorded on a handler, or None when unmarked.
    """
    return getattr(method, _COMMAND, None)


__all__ = (
    "CommandInfo",
    "Argument",
    "default",
    "remaining",
    "command",
    "commandinfo",
)
