"""
Invocation boundary: how a compiled command method is finally called.

- CommandInvoker: call-site of one command method, (context, *arguments) -> None.
- InvokerProvider: (container, method) -> CommandInvoker. The registry asks the
  configured provider once per method at registration time.
- ReflectiveInvoker: the default provider/invoker. Binds the method function to
  its container through the descriptor protocol and calls it directly.

Custom providers (pre-bound partials, generated call-sites, instrumentation
wrappers) are set with CommandsBuilder.set_invoker_provider() and do not
affect registration or dispatch.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class CommandInvoker(Protocol):
    def __call__(self, context, /, *arguments): ...


@runtime_checkable
class InvokerProvider(Protocol):
    def __call__(self, container, method, /): ...


class ReflectiveInvoker:
    """
    Calls `method` bound to `container` with the context and parsed arguments.

    Usable both as the provider (the class itself is called with
    (container, method)) and as the resulting invoker.
    """
    __slots__ = ("container", "method", "_bound")

    def __init__(self, container, method, /):
        if not callable(method):
            raise TypeError("ReflectiveInvoker method must be callable")
        self.container = container
        self.method = method
        self._bound = method.__get__(container, type(container)) if hasattr(method, "__get__") else method

    def __call__(self, context, /, *arguments):
        self._bound(context, *arguments)

    def __repr__(self):
        return f"reflective-invoker({getattr(self.method, '__qualname__', self.method)!s})"

    def __rich_repr__(self):
        yield "container", self.container
        yield "method", self.method


__all__ = (
    "CommandInvoker",
    "InvokerProvider",
    "ReflectiveInvoker",
)
