"""
Registration: compile command handlers into immutable dispatch records.

Command method contract
- A command method is a public (no leading underscore), plain method of the
  container's class, marked with @command. Static and class methods are
  skipped.
- Its return annotation is absent or None.
- Its first parameter (after self) is annotated with exactly the configured
  context type.
- Its keys (declared, or the method name) are unique across the registry,
  case-insensitively, and do not contain the delimiter.
- Every other parameter is a plain positional parameter whose annotation
  (str when absent) has a registered parser.
- Parameters with a default value form a contiguous suffix.
- Only the last parameter may capture the remaining text.

Any violation raises a RegistrationError subclass (see herald.faults) and
aborts registration of that method only: methods compiled earlier in the same
register() call stay registered. Register containers at boot time.
"""
import inspect
import logging
from collections.abc import Mapping
from inspect import Parameter
from typing import NamedTuple

from .arguments import Argument, commandinfo
from .faults import *
from .filters import CommandMethodFilter
from .utils import freeze

logger = logging.getLogger(__name__)

_LITERALS = (str, int, float, bool)


class CommandParameter(NamedTuple):
    """
    One handler argument after the context argument.
    """
    name: str
    type: type
    default: str | None = None

    @property
    def optional(self):
        return self.default is not None


class CommandMethod(NamedTuple):
    """
    Compiled, immutable unit of dispatch.

    - invoker: callable (context, *arguments) -> None provided by the invoker provider.
    - keys: lower-cased command keys (at least one).
    - help_message: help text or None.
    - filters: resolved filters, all of which must approve.
    - parameters: parameters after the context parameter, in order.
    - required_parameter_count: parameters without a default value.
    - limited_parameters: the last parameter captures the remaining text.
    - name: qualified handler name, for diagnostics.
    """
    invoker: object
    keys: frozenset[str]
    help_message: str | None
    filters: frozenset[CommandMethodFilter]
    parameters: tuple[CommandParameter, ...]
    required_parameter_count: int
    limited_parameters: bool
    name: str


def _annotation_name(annotation):
    return getattr(annotation, "__qualname__", None) or repr(annotation)


def _resolve_default(name, parameter, value):
    """
    Return (default literal or None, remaining flag) for one parameter default.
    """
    if value is Parameter.empty:
        return None, False
    if hasattr(value, "__argument__") and callable(value.__argument__):
        argument = value.__argument__()
        if not isinstance(argument, Argument):
            raise TypeError("__argument__() non-argument returned")
        return argument.default, argument.remaining
    if isinstance(value, _LITERALS):
        return str(value), False
    raise InvalidDefaultError(
        f"parameter {parameter!r} of command method '{name}' has a default of type "
        f"{type(value).__name__!r}, expected a literal or default('...')"
    )


class Registry(Mapping):
    """
    Key → CommandMethod table with the compilation routine.

    Parameters
    - context_type: type every handler's first parameter must be annotated with.
    - parsers: ParserTable used to validate parameter types.
    - filters: FilterTable used to resolve markers into filters.
    - invoker_provider: callable (container, method) -> invoker.
    - delimiter: Delimiter; keys containing it are rejected.

    The registry is a read-only Mapping for callers; only register() and
    register_one() add entries.
    """

    def __init__(self, context_type, /, *, parsers, filters, invoker_provider, delimiter):
        self._context_type = context_type
        self._parsers = parsers
        self._filters = filters
        self._invoker_provider = invoker_provider
        self._delimiter = delimiter
        self._methods = {}

    def register(self, container, /):
        """
        Register every command method of container's class.

        Returns
        - list[CommandMethod] compiled by this call, in name order.
        """
        compiled = []
        for name, member in inspect.getmembers_static(type(container)):
            if commandinfo(member) is None:
                continue
            if name.startswith("_"):
                logger.debug("skipping non-public command method %s.%s", type(container).__qualname__, name)
                continue
            if not inspect.isfunction(member):
                logger.debug("skipping static or class command method %s.%s", type(container).__qualname__, name)
                continue
            compiled.append(self.register_one(container, member))
        return compiled

    def register_one(self, container, method, /):
        """
        Validate one command method and compile it into a CommandMethod.

        Raises
        - RegistrationError subclasses on contract violations, in this order:
          ReturnTypeError, ContextParameterError, DuplicateKeyError /
          InvalidKeyError, ParameterKindError / UnresolvedAnnotationError /
          MissingParserError, InvalidDefaultError / DefaultPlacementError,
          RemainingPlacementError.
        """
        info = commandinfo(method)
        if info is None:
            raise TypeError(f"{method!r} is not marked with @command")

        name = f"{type(container).__qualname__}.{method.__name__}"
        bound = method.__get__(container, type(container))
        try:
            signature = inspect.signature(bound, eval_str=True)
        except NameError as error:
            raise UnresolvedAnnotationError(f"command method '{name}' has an unresolvable annotation: {error}") from None

        # 1. no return value
        if signature.return_annotation not in (Parameter.empty, None, type(None)):
            raise ReturnTypeError(
                f"command method '{name}' must not return a value "
                f"(annotated {_annotation_name(signature.return_annotation)!r})"
            )

        # 2. context parameter
        parameters = list(signature.parameters.values())
        context = self._context_type.__qualname__
        if not parameters:
            raise ContextParameterError(f"command method '{name}' must take the context type {context!r} first")
        if parameters[0].kind not in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD):
            raise ContextParameterError(f"first parameter of command method '{name}' must be positional")
        if parameters[0].annotation is not self._context_type:
            raise ContextParameterError(
                f"first parameter of command method '{name}' must match the context type {context!r}"
            )

        # 3. keys
        keys = frozenset(key.lower() for key in (info.keys or (method.__name__,)))
        for key in sorted(keys):
            if not key:
                raise InvalidKeyError(f"command method '{name}' declares an empty key")
            if self._delimiter.occurs_in(key):
                raise InvalidKeyError(f"command key '{key}' of '{name}' contains the delimiter {self._delimiter.source!r}")
            if key in self._methods:
                raise DuplicateKeyError(
                    f"command key '{key}' is already assigned to '{self._methods[key].name}'"
                )

        # 4. argument parameters
        arguments = []
        limited = False
        for index, parameter in enumerate(parameters[1:], start=1):
            if parameter.kind not in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD):
                raise ParameterKindError(
                    f"parameter {parameter.name!r} of command method '{name}' must be positional, "
                    f"not {parameter.kind.description}"
                )
            annotation = str if parameter.annotation is Parameter.empty else parameter.annotation
            if annotation not in self._parsers:
                raise MissingParserError(
                    f"parameter {parameter.name!r} of command method '{name}' has type "
                    f"{_annotation_name(annotation)!r} without a parser"
                )

            # 5. default placement
            value, limited = _resolve_default(name, parameter.name, parameter.default)
            if value is None and arguments and arguments[-1].optional:
                raise DefaultPlacementError(
                    f"parameter {parameter.name!r} of command method '{name}' follows a parameter "
                    f"with a default value; only the rightmost parameters can have one"
                )

            # 7. remaining capture
            if limited and index != len(parameters) - 1:
                raise RemainingPlacementError(
                    f"parameter {parameter.name!r} of command method '{name}' captures the remaining "
                    f"text but is not the last parameter"
                )
            arguments.append(CommandParameter(parameter.name, annotation, value))

        if not arguments and parameters[0].default is not Parameter.empty:
            # A remaining marker on the context parameter is accepted and captures nothing.
            limited = _resolve_default(name, parameters[0].name, parameters[0].default)[1]

        # 6. filters
        filters = self._filters.resolve(method, type(container))

        invoker = self._invoker_provider(container, method)
        if not callable(invoker):
            raise InvalidInvokerError(f"invoker provider returned a non-callable for '{name}'")

        # 8. insert under every key
        compiled = CommandMethod(
            invoker=invoker,
            keys=keys,
            help_message=info.help,
            filters=filters,
            parameters=freeze(arguments),
            required_parameter_count=sum(1 for argument in arguments if not argument.optional),
            limited_parameters=limited,
            name=name,
        )
        for key in keys:
            self._methods[key] = compiled
        logger.debug("registered command method %s under %s", name, ", ".join(sorted(keys)))
        return compiled

    def __getitem__(self, key):
        return self._methods[key]

    def __iter__(self):
        return iter(self._methods)

    def __len__(self):
        return len(self._methods)

    def __repr__(self):
        return f"registry({', '.join(sorted(self._methods))})"

    def __rich_repr__(self):
        yield "context_type", self._context_type
        yield "keys", sorted(self._methods)


__all__ = (
    "CommandParameter",
    "CommandMethod",
    "Registry",
)
