"""
Reflector Errors
=================

Exception hierarchy for the reflection bridge.

Only :class:`SignatureError` ever escapes to a caller, and only at
construction time.  Every other :class:`BridgeError` is raised inside a
single invocation and converted by
:meth:`reflector.core.engine.MethodReflector.invoke` into an unknown
result plus a diagnostic log record.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for all reflection bridge failures."""

    pass


class SignatureError(BridgeError, ValueError):
    """A method signature or type descriptor is malformed."""

    pass


class TypeResolutionError(BridgeError):
    """A type could not be found in the host type universe."""

    pass


class MethodNotFoundError(BridgeError):
    """No callable matches the name, arity and parameter types, or the
    match is ambiguous."""

    pass


class AccessDeniedError(BridgeError):
    """The member is private or the owning type is denied by configuration."""

    pass


class ArgumentMismatchError(BridgeError):
    """An argument cannot be marshaled into, or is incompatible with, the
    declared parameter type."""

    pass


class NullReceiverError(BridgeError):
    """An instance method was invoked with a null receiver."""

    pass


class InvocationTargetError(BridgeError):
    """The invoked host callable raised.

    The original exception is available as ``__cause__`` and
    :attr:`target_exception`.
    """

    def __init__(self, message: str, target_exception: BaseException) -> None:
        super().__init__(message)
        self.target_exception = target_exception
