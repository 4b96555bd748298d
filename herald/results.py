"""
Dispatch outcomes.

Commands.execute() never raises for ordinary failures; it returns a
CommandResult whose `type` says what happened:

- KEY_NOT_FOUND: empty message or no handler registered under the key.
- NO_ACCESS: a filter denied the invocation.
- ARGUMENT_MISMATCH: fewer argument tokens than required parameters.
- ERROR: argument parsing, a filter or the handler raised; see `cause`.
- SUCCESS: the handler completed.

`help_message` carries the handler's help text for ARGUMENT_MISMATCH and
ERROR, so the host can show the correct usage.
"""
from enum import Enum
from typing import NamedTuple

from rich.text import Text


class ResultType(Enum):
    KEY_NOT_FOUND = "key-not-found"
    NO_ACCESS = "no-access"
    ARGUMENT_MISMATCH = "argument-mismatch"
    ERROR = "error"
    SUCCESS = "success"


class CommandResult(NamedTuple):
    type: ResultType
    help_message: str | None = None
    cause: BaseException | None = None

    @property
    def succeeded(self):
        return self.type is ResultType.SUCCESS

    def __bool__(self):
        return self.succeeded

    def __rich__(self):
        text = Text.assemble(
            ("[", "dim"),
            (self.type.value, "bold green" if self.succeeded else "bold #FF4DA6"),
            ("]", "dim"),
        )
        if self.help_message:
            text.append(" " + self.help_message, "italic #9CE19C")
        if self.cause is not None:
            text.append(f" ({type(self.cause).__name__}: {self.cause})", "#C8C8D0")
        return text


__all__ = (
    "ResultType",
    "CommandResult",
)
