"""
Herald command layer: configure, register and execute text commands.

What this module provides
- Commands: one independent command router. Owns a Registry (key → compiled
  command method) and a Dispatcher, and exposes:
  • register(container): compile every @command method of an object.
  • execute(context, message): run the addressed handler, returning a
    CommandResult (never raising for ordinary failures).
- CommandsBuilder: builder-style configuration producing Commands instances.
  Builders are reusable; build() snapshots the current settings.

Quick start
    import random

    from herald import CommandsBuilder, command, default, remaining

    class User:
        def send(self, text): print(text)

    class Chat:
        @command("say", "s", help="say <text>")
        def say(self, user: User, text: str = remaining()) -> None:
            user.send(text)

        @command(help="roll [sides]")
        def roll(self, user: User, sides: int = default("6")) -> None:
            user.send(str(random.randint(1, sides)))

    commands = CommandsBuilder.for_type(User).build()
    commands.register(Chat())
    result = commands.execute(User(), "say hello there")
    assert result.succeeded

Design notes
- Configuration errors raise ConfigurationError immediately; contract
  violations of handlers raise RegistrationError on register().
- There is no process-wide registry: every Commands is self-contained and
  several may coexist with different settings.
"""
import builtins

from .delimiters import Delimiter
from .dispatcher import Dispatcher
from .faults import *
from .filters import FilterTable
from .invokers import ReflectiveInvoker
from .parsers import DEFAULT_PARSERS, ParserTable
from .registry import Registry
from .utils import *


def _process_context(metadata):
    """
    Validate the context type: it must be a class.
    """
    if not isinstance(metadata["context_type"], builtins.type):
        raise InvalidContextError(
            f"context type must be a class, not {metadata['context_type']!r}"
        )


def _process_delimiter(metadata):
    """
    Normalize the delimiter into a Delimiter (validates str / re.Pattern).
    """
    metadata["delimiter"] = Delimiter(metadata["delimiter"])


def _process_parsers(metadata):
    """
    Resolve Unset to the default parsers and freeze them into a ParserTable.
    """
    metadata["parsers"] = ParserTable(coalesce(metadata["parsers"], DEFAULT_PARSERS))


def _process_filters(metadata):
    """
    Freeze the marker type → filter pairs into a FilterTable.
    """
    metadata["filters"] = FilterTable(metadata["filters"])


def _process_invoker(metadata):
    """
    Resolve Unset to ReflectiveInvoker; the provider must be callable.
    """
    if not callable(provider := coalesce(metadata["invoker_provider"], ReflectiveInvoker)):
        raise InvalidInvokerError(f"invoker provider must be callable, not {typename(provider)!r}")
    metadata["invoker_provider"] = provider


class Commands:
    """
    Parses and dispatches text commands to registered command methods.

    Parameters
    - context_type: type
      Class every handler receives first (usually the message author).
    - delimiter: str | re.Pattern | Delimiter
      Argument separator; default single space.
    - parsers: Mapping[type, Callable[[str], Any]] | Unset
      Argument parsers; Unset means the defaults (see herald.parsers).
    - filters: Mapping[type[Marker], CommandFilter | Callable]
      Filters per marker type; empty by default.
    - invoker_provider: Callable[[container, method], invoker] | Unset
      Call-site factory; Unset means ReflectiveInvoker.

    Properties (read-only)
    - context_type, delimiter, parsers, filters, invoker_provider.
    """
    context_type = mirror("context_type")
    delimiter = mirror("delimiter")
    parsers = mirror("parsers")
    filters = mirror("filters")
    invoker_provider = mirror("invoker_provider")

    def __init__(
            self,
            context_type,
            /,
            delimiter=" ",
            parsers=Unset,
            filters=(),
            invoker_provider=Unset,
    ):
        metadata = {
            "context_type": context_type,
            "delimiter": delimiter,
            "parsers": parsers,
            "filters": filters,
            "invoker_provider": invoker_provider,
        }
        _process_context(metadata)
        _process_delimiter(metadata)
        _process_parsers(metadata)
        _process_filters(metadata)
        _process_invoker(metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._registry = Registry(
            self._context_type,
            parsers=self._parsers,
            filters=self._filters,
            invoker_provider=self._invoker_provider,
            delimiter=self._delimiter,
        )
        self._dispatcher = Dispatcher(self._registry, parsers=self._parsers, delimiter=self._delimiter)

    def register(self, container, /):
        """
        Register every command method within container.

        A method is a command method when it is public, non-static and marked
        with @command. The container can be any object.

        Returns
        - list of the CommandMethod records compiled by this call.

        Raises
        - RegistrationError (subclasses) when a method breaks the contract;
          methods compiled before it stay registered.
        """
        return self._registry.register(container)

    def execute(self, context, message, /):
        """
        Execute the command addressed by a text message.

        Returns
        - CommandResult (see herald.results for the outcome types).
        """
        return self._dispatcher.execute(context, message)

    def keys(self):
        return self._registry.keys()

    def __contains__(self, key):
        return isinstance(key, str) and key.lower() in self._registry

    def __getitem__(self, key):
        return self._registry[key.lower()]

    def __len__(self):
        return len(self._registry)

    def __repr__(self):
        return f"commands(context_type={self._context_type.__qualname__}, delimiter={self._delimiter!r}, keys={len(self._registry)})"

    def __rich_repr__(self):
        yield "context_type", self._context_type
        yield "delimiter", self._delimiter
        yield "parsers", self._parsers
        yield "filters", self._filters
        yield "registry", self._registry


class CommandsBuilder:
    """
    Builder for Commands instances.

    Every setter validates its input immediately (ConfigurationError) and
    returns the builder. build() can be called any number of times; each call
    snapshots the current settings into a new, independent Commands.
    """

    @classmethod
    def for_type(cls, context_type, /):
        """
        Create a builder for the given context type (usually the message author).
        """
        return cls(context_type)

    def __init__(self, context_type, /):
        _process_context({"context_type": context_type})
        self._context_type = context_type
        self._delimiter = Delimiter(" ")
        self._invoker_provider = ReflectiveInvoker
        self._parsers = dict(DEFAULT_PARSERS)
        self._filters = {}

    def set_delimiter(self, delimiter, /):
        """
        Set the argument delimiter: one character, a literal string or a
        compiled re.Pattern. The default is a single space.
        """
        self._delimiter = Delimiter(delimiter)
        return self

    def set_invoker_provider(self, provider, /):
        """
        Set the invoker provider: (container, method) -> (context, *arguments) -> None.
        """
        metadata = {"invoker_provider": provider}
        _process_invoker(metadata)
        self._invoker_provider = metadata["invoker_provider"]
        return self

    def add_parser(self, type, parser, /):
        """
        Add (or replace) the parser for an argument type.
        """
        self._parsers[type] = ParserTable({type: parser})[type]
        return self

    def add_filter(self, type, filter, /):
        """
        Add (or replace) the filter interpreting a Marker subclass.
        """
        FilterTable({type: filter})
        self._filters[type] = filter
        return self

    def build(self):
        """
        Create a new Commands from the current settings.
        """
        return Commands(
            self._context_type,
            self._delimiter,
            parsers=self._parsers,
            filters=self._filters,
            invoker_provider=self._invoker_provider,
        )

    def __repr__(self):
        return f"commands-builder(context_type={self._context_type.__qualname__})"


__all__ = (
    "Commands",
    "CommandsBuilder",
)
