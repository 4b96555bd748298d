"""
Dispatch: message → CommandResult.

Pipeline (see Dispatcher.execute)
    blank check → split → resolve key → re-split for remaining capture → filters →
    argument count → parse (token or default) → invoke

Nothing in this pipeline raises for ordinary failures; every outcome is a
CommandResult. Exceptions from parsers, filters and handlers are captured as
ERROR results with the cause attached.
"""
import logging

from .results import CommandResult, ResultType

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Executes messages against a Registry.

    Parameters
    - registry: Mapping[str, CommandMethod] (usually herald.registry.Registry).
    - parsers: ParserTable applied to argument tokens.
    - delimiter: Delimiter used to split messages.

    Reentrant: execute() only reads the registry, so concurrent calls are
    safe as long as no registration runs at the same time.
    """

    def __init__(self, registry, /, *, parsers, delimiter):
        self._registry = registry
        self._parsers = parsers
        self._delimiter = delimiter

    def execute(self, context, message, /):
        """
        Resolve and run the command addressed by message.

        Returns
        - CommandResult with one of the ResultType outcomes:
          • KEY_NOT_FOUND for blank messages and unknown keys,
          • NO_ACCESS when any filter denies (no help message),
          • ARGUMENT_MISMATCH when tokens < required parameters (help message),
          • ERROR when parsing, a filter or the handler raises (help message + cause),
          • SUCCESS otherwise.

        Raises
        - TypeError when message is not a string.
        """
        if not isinstance(message, str):
            raise TypeError(f"execute() message must be a string, not {type(message).__name__!r}")
        if not message.strip():
            return CommandResult(ResultType.KEY_NOT_FOUND)

        tokens = self._delimiter.split(message)
        key = tokens[0].lower()
        if (method := self._registry.get(key)) is None:
            logger.debug("no command method under key %r", key)
            return CommandResult(ResultType.KEY_NOT_FOUND)

        # The last parameter takes everything after the preceding tokens, delimiters included.
        if method.limited_parameters and method.parameters:
            tokens = self._delimiter.split(message, limit=len(method.parameters) + 1)

        arguments = tuple(tokens[1:])
        try:
            approved = all(check(context, key, arguments) for check in method.filters)
        except Exception as cause:
            logger.debug("filter of %s raised", method.name, exc_info=cause)
            return CommandResult(ResultType.ERROR, method.help_message, cause)
        if not approved:
            logger.debug("access to %s denied for key %r", method.name, key)
            return CommandResult(ResultType.NO_ACCESS)

        if len(arguments) < method.required_parameter_count:
            logger.debug(
                "%s expects at least %d arguments, got %d",
                method.name, method.required_parameter_count, len(arguments),
            )
            return CommandResult(ResultType.ARGUMENT_MISMATCH, method.help_message)

        try:
            values = []
            pending = iter(arguments)
            for parameter in method.parameters:
                # Defaults are substituted per parameter so each one is parsed exactly once.
                text = next(pending, parameter.default)
                values.append(self._parsers.parse(parameter.type, text))
            method.invoker(context, *values)
        except Exception as cause:
            logger.debug("command method %s failed", method.name, exc_info=cause)
            return CommandResult(ResultType.ERROR, method.help_message, cause)

        return CommandResult(ResultType.SUCCESS)


__all__ = (
    "Dispatcher",
)
