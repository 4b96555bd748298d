"""
Herald faults (configuration and registration errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every build-time issue.
  Codes are grouped by domain so logs and searches stay predictable.
- CommandFault: base type carrying message + hint that knows how to render
  itself with rich in a short, actionable way.
- ConfigurationError / RegistrationError: the two fatal error classes. The
  first is raised while settings are assembled (builder, Commands), the second
  while a handler is compiled (Registry.register_one).
- report(): print any fault to a rich console.

Dispatch never raises these; run-time outcomes are CommandResult values.

Integration
- The host application may customize rendering through __main__ hooks:
  __prog__ (header label), __styles__ (style overrides) and __codes__
  (relabelled fault codes).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - configuration (211xx)
      • INVALID_CONTEXT, INVALID_DELIMITER, INVALID_PARSER, INVALID_FILTER,
        INVALID_INVOKER
    - handler shape (221xx)
      • NON_VOID_RETURN, CONTEXT_PARAMETER, PARAMETER_KIND,
        UNRESOLVED_ANNOTATION
    - keys (222xx)
      • DUPLICATE_KEY, INVALID_KEY
    - parameters (223xx)
      • MISSING_PARSER, DEFAULT_PLACEMENT, INVALID_DEFAULT,
        REMAINING_PLACEMENT

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- configuration errors (211xx) ---
    INVALID_CONTEXT       = 21101
    INVALID_DELIMITER     = 21102
    INVALID_PARSER        = 21103
    INVALID_FILTER        = 21104
    INVALID_INVOKER       = 21105

    # --- handler shape errors (221xx) ---
    NON_VOID_RETURN       = 22101
    CONTEXT_PARAMETER     = 22102
    PARAMETER_KIND        = 22103
    UNRESOLVED_ANNOTATION = 22104

    # --- key errors (222xx) ---
    DUPLICATE_KEY         = 22201
    INVALID_KEY           = 22202

    # --- parameter errors (223xx) ---
    MISSING_PARSER        = 22301
    DEFAULT_PLACEMENT     = 22302
    INVALID_DEFAULT       = 22303
    REMAINING_PLACEMENT   = 22304

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels. without a mapping the
        numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandFault(Exception):
    """
    Base class of every fault herald raises.

    Subclasses pin a `code`, a short `title` and a default `hint`; instances
    carry the message and optional per-fault overrides.

    Rendering
    - str(fault) is the plain message (what tracebacks show).
    - rich renders a header "[ prog — code | title ]", the message and a hint
      line; panel chrome when fancy=True.
    """
    code = Unset
    title = "fault"
    hint = Unset

    def __init__(self, message, /, *, hint=Unset, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.hint = coalesce(hint, type(self).hint)
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "fault-title": "bold #FF4DA6",

            # body
            "fault-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "herald"), "prog-name"),
            " — ",
            text(self.code.normalize() if self.code else "", "code"),
            " | ",
            text(self.title.title(), "fault-title"),
            " ]"
        )
        message = text(self.message, "fault-message")
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)


class ConfigurationError(CommandFault, TypeError):
    """
    Invalid settings handed to CommandsBuilder or Commands.
    """
    title = "invalid configuration"


class InvalidContextError(ConfigurationError):
    code = FaultCode.INVALID_CONTEXT
    title = "invalid context type"
    hint = "pass the class every handler receives as its first argument"


class InvalidDelimiterError(ConfigurationError):
    code = FaultCode.INVALID_DELIMITER
    title = "invalid delimiter"
    hint = "use a non-empty string or a compiled re.Pattern"


class InvalidParserError(ConfigurationError):
    code = FaultCode.INVALID_PARSER
    title = "invalid parser"
    hint = "register a class together with a callable taking one string"


class InvalidFilterError(ConfigurationError):
    code = FaultCode.INVALID_FILTER
    title = "invalid filter"
    hint = "register a Marker subclass with a filter object or callable"


class InvalidInvokerError(ConfigurationError):
    code = FaultCode.INVALID_INVOKER
    title = "invalid invoker provider"
    hint = "provide a callable taking (container, method) and returning an invoker"


class RegistrationError(CommandFault, ValueError):
    """
    A handler broke the command method contract; fix it and restart.

    Registration is not transactional: methods compiled before the failing
    one in the same register() call stay registered.
    """
    title = "invalid command method"


class ReturnTypeError(RegistrationError):
    code = FaultCode.NON_VOID_RETURN
    title = "non-void command method"
    hint = "drop the return annotation or annotate it as None"


class ContextParameterError(RegistrationError):
    code = FaultCode.CONTEXT_PARAMETER
    title = "missing context parameter"
    hint = "annotate the first parameter with the configured context type"


class ParameterKindError(RegistrationError):
    code = FaultCode.PARAMETER_KIND
    title = "unsupported parameter"
    hint = "command arguments must be plain positional parameters"


class UnresolvedAnnotationError(RegistrationError):
    code = FaultCode.UNRESOLVED_ANNOTATION
    title = "unresolved annotation"
    hint = "make every annotation importable from the handler's module"


class DuplicateKeyError(RegistrationError):
    code = FaultCode.DUPLICATE_KEY
    title = "duplicate command key"
    hint = "keys are case-insensitive and must be unique across all containers"


class InvalidKeyError(RegistrationError):
    code = FaultCode.INVALID_KEY
    title = "invalid command key"
    hint = "keys must be non-empty and must not contain the delimiter"


class MissingParserError(RegistrationError):
    code = FaultCode.MISSING_PARSER
    title = "missing parser"
    hint = "register one with CommandsBuilder.add_parser()"


class DefaultPlacementError(RegistrationError):
    code = FaultCode.DEFAULT_PLACEMENT
    title = "misplaced default value"
    hint = "only the rightmost parameters can have a default value"


class InvalidDefaultError(RegistrationError):
    code = FaultCode.INVALID_DEFAULT
    title = "invalid default value"
    hint = "use default('literal') or a plain str, int, float or bool default"


class RemainingPlacementError(RegistrationError):
    code = FaultCode.REMAINING_PLACEMENT
    title = "misplaced remaining parameter"
    hint = "only the last parameter can capture the remaining text"


def report(fault, /, *, console=console, fancy=False, colorful=True):
    """
    print a fault to a rich console (stderr by default).

    options
    - fancy: render inside a panel.
    - colorful: apply the palette (host overrides via __main__.__styles__).
    """
    if not isinstance(fault, CommandFault):
        raise TypeError("report() argument must be a command fault")
    rendered = type(fault)(fault.message, hint=fault.hint, **{**fault.options, "fancy": fancy, "colorful": colorful})
    console.print(rendered)


__all__ = (
    "FaultCode",
    "CommandFault",
    "ConfigurationError",
    "InvalidContextError",
    "InvalidDelimiterError",
    "InvalidParserError",
    "InvalidFilterError",
    "InvalidInvokerError",
    "RegistrationError",
    "ReturnTypeError",
    "ContextParameterError",
    "ParameterKindError",
    "UnresolvedAnnotationError",
    "DuplicateKeyError",
    "InvalidKeyError",
    "MissingParserError",
    "DefaultPlacementError",
    "InvalidDefaultError",
    "RemainingPlacementError",
    "report",
)
