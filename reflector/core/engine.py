"""
Method Reflector
=================

Bridge between the symbolic interpreter and natively executable host
code.  One :class:`MethodReflector` is built per method reference the
interpreter decides not to model; each call site then hands it the
callee frame::

    reflector = MethodReflector(
        "Ljava/lang/Integer;->parseInt(Ljava/lang/String;)I", is_static=True,
    )
    state = MethodState.for_call(reflector.signature, "42")
    reflector.invoke(state)
    state.peek_return_register()     # type=I, value=42

Invocation Pipeline:
    1. Resolve the owning type in the host type universe
    2. Marshal arguments from the parameter registers
    3. Dispatch as static, constructor or instance call
    4. Commit the outcome (value, new receiver or Unknown)

:meth:`MethodReflector.invoke` never raises.  Resolution and invocation
failures are logged at WARNING and surface to the interpreter only as
an :class:`UnknownValue` in the return register.
"""

from __future__ import annotations

import logging
from typing import Any

from shared.config import AppConfig, ReflectorConfig
from shared.logger import BridgeLogger, get_logger

from reflector.core.binder import bind_result
from reflector.core.errors import BridgeError
from reflector.core.models import InvocationOutcome, MethodSignature
from reflector.core.state import RegisterFile
from reflector.dispatch.invoker import Invoker
from reflector.dispatch.resolver import TypeResolver
from reflector.marshaling.arguments import ArgumentMarshaler
from reflector.parsers.signature import parse_signature


class MethodReflector:
    """Invokes one method reference natively on behalf of the interpreter.

    Stateless across invocations: the parsed signature and collaborators
    are fixed at construction, and every per-call effect goes to the
    register file passed to :meth:`invoke`.

    Args:
        signature: Method reference text or an already parsed signature.
        is_static: Whether the call site is a static invocation.  Ignored
            when *signature* is a :class:`MethodSignature`.
        config: Application configuration.  Defaults are used if not provided.
        logger: Logger instance.  One is built from *config* if not provided.
        resolver: Host type resolver, shared between reflectors if given.

    Raises:
        SignatureError: If *signature* is malformed.
    """

    def __init__(
        self,
        signature: str | MethodSignature,
        is_static: bool = False,
        *,
        config: AppConfig | None = None,
        logger: BridgeLogger | None = None,
        resolver: TypeResolver | None = None,
    ) -> None:
        if isinstance(signature, MethodSignature):
            self._signature = signature
        else:
            self._signature = parse_signature(signature, is_static)

        self._config: AppConfig = config or AppConfig()
        settings: ReflectorConfig = self._config.reflector
        self._resolver = resolver or TypeResolver(settings)
        self._marshaler = ArgumentMarshaler(self._resolver, settings)
        self._invoker = Invoker(self._resolver)
        self._log_traces = settings.log_traces

        base = logger or get_logger("engine", self._config.global_settings)
        self._logger = base.bind(signature=self._signature.text)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def signature(self) -> MethodSignature:
        return self._signature

    @property
    def resolver(self) -> TypeResolver:
        return self._resolver

    # ------------------------------------------------------------------ #
    #  Main entry point
    # ------------------------------------------------------------------ #

    def invoke(self, registers: RegisterFile) -> None:
        """Invoke the method natively and commit the result to *registers*.

        Never raises.  On failure the return register (if any) receives
        an :class:`UnknownValue` tagged with the declared return type.
        """
        if self._logger.is_enabled_for(logging.DEBUG):
            self._logger.debug("Reflecting %s with context:\n%r", self._signature, registers)

        outcome = self._dispatch(registers)
        try:
            bind_result(registers, self._signature, outcome)
        except Exception as exc:
            self._logger.exception("Failed to commit result of %s: %s", self._signature, exc)

    def _dispatch(self, registers: RegisterFile) -> InvocationOutcome:
        sig = self._signature
        try:
            owner = self._resolver.resolve_class(sig.class_binary_name)
            arguments = self._marshaler.marshal(registers, sig)

            if sig.is_static:
                self._logger.debug("Reflecting %s, class=%s args=%r", sig, owner.binary_name, arguments.args)
                with self._logger.timed(sig.text):
                    value = self._invoker.invoke_static(owner, sig.method_name, arguments)
                return InvocationOutcome.success(value)

            if sig.is_constructor:
                self._logger.debug("Reflecting %s, class=%s args=%r", sig, owner.binary_name, arguments.args)
                with self._logger.timed(sig.text):
                    instance = self._invoker.invoke_constructor(owner, arguments)
                return InvocationOutcome.success(instance=instance)

            receiver: Any = registers.peek_parameter(0).value
            self._logger.debug("Reflecting %s, target=%r args=%r", sig, receiver, arguments.args)
            with self._logger.timed(sig.text):
                value = self._invoker.invoke_virtual(owner, sig.method_name, receiver, arguments)
            return InvocationOutcome.success(value)

        except BridgeError as exc:
            self._logger.warning("Failed to reflect %s: %s", sig, exc)
            if self._log_traces:
                self._logger.debug("Stack trace:", exc_info=exc)
            return InvocationOutcome.failure(exc)
        except Exception as exc:
            self._logger.exception("Unexpected failure reflecting %s: %s", sig, exc)
            return InvocationOutcome.failure(
                BridgeError(f"{type(exc).__name__}: {exc}")
            )
