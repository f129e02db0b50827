"""
Native Invocation Dispatcher
=============================

Selects and calls the host callable for one static, constructor or
instance invocation.  Selection mirrors the bytecode's rules closely
enough for library calls:

    - overloads are chosen by parameter type, exact matches first, then
      the cheapest compatible variant (subclassing, primitive widening,
      boxing of numpy scalars into Python numbers);
    - members whose names start with ``_`` are private to the host;
    - argument values are checked against the parameter types before
      the call, ``None`` only being acceptable for reference types.

Every failure raises a :class:`BridgeError` subclass; exceptions raised
by the callee itself are wrapped in :class:`InvocationTargetError`.
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any, Callable, Optional

import numpy as np

from reflector.core.errors import (
    AccessDeniedError,
    ArgumentMismatchError,
    InvocationTargetError,
    MethodNotFoundError,
    NullReceiverError,
    TypeResolutionError,
)
from reflector.core.models import InvocationArguments, UnknownValue
from reflector.dispatch.overloads import Overload, OverloadSet
from reflector.dispatch.resolver import HostClass, TypeResolver
from reflector.parsers.descriptor import map_descriptor


CONSTRUCTOR_HOOK: str = "new_instance"

# Java primitive widening conversions, nearest first.
_WIDENING: dict[type, tuple[type, ...]] = {
    np.int8: (np.int16, np.int32, np.int64, np.float32, np.float64),
    np.int16: (np.int32, np.int64, np.float32, np.float64),
    np.uint16: (np.int32, np.int64, np.float32, np.float64),
    np.int32: (np.int64, np.float32, np.float64),
    np.int64: (np.float32, np.float64),
    np.float32: (np.float64,),
}

# Boxing a numpy scalar into the Python type bound to its wrapper class.
_BOXING: dict[type, type] = {
    np.int8: int,
    np.int16: int,
    np.int32: int,
    np.int64: int,
    np.uint16: str,
    np.bool_: bool,
    np.float32: float,
    np.float64: float,
}

# Unboxing a Python value into a primitive parameter.
_UNBOXING: dict[type, tuple[type, ...]] = {
    np.int8: (int,),
    np.int16: (int,),
    np.int32: (int,),
    np.int64: (int,),
    np.uint16: (str,),
    np.bool_: (bool,),
    np.float32: (float, int),
    np.float64: (float, int),
}

_ARRAY_TYPES: tuple[type, ...] = (list, np.ndarray)

_BOXING_COST: int = 20
_OBJECT_COST: int = 50


# ---------------------------------------------------------------------------
# Argument compatibility
# ---------------------------------------------------------------------------

def _is_primitive_type(host_type: type) -> bool:
    return isinstance(host_type, type) and issubclass(host_type, np.generic)


def conversion_cost(supplied: type, declared: type) -> Optional[int]:
    """Cost of passing a *supplied*-typed argument as *declared*.

    ``0`` for an exact match, ``None`` when not assignable.
    """
    if supplied is declared:
        return 0
    widening = _WIDENING.get(supplied, ())
    if declared in widening:
        return 1 + widening.index(declared)
    if _is_primitive_type(declared):
        return None
    if declared is object:
        return _OBJECT_COST
    if _BOXING.get(supplied) is declared:
        return _BOXING_COST
    if isinstance(supplied, type) and issubclass(supplied, declared):
        mro = supplied.__mro__
        return mro.index(declared) if declared in mro else _BOXING_COST
    return None


def adapt_argument(value: Any, declared: type, position: int) -> Any:
    """Check *value* against *declared* and convert it where needed.

    Raises:
        ArgumentMismatchError: If the value cannot be passed.
    """
    if isinstance(value, UnknownValue):
        raise ArgumentMismatchError(f"Argument {position} is unknown")
    if value is None:
        if _is_primitive_type(declared):
            raise ArgumentMismatchError(
                f"Argument {position}: null passed for primitive {declared.__name__}"
            )
        return None
    if declared is object:
        return value
    if declared in _ARRAY_TYPES:
        if isinstance(value, np.ndarray) or (
            isinstance(value, Sequence) and not isinstance(value, (str, bytes))
        ) or isinstance(value, (bytes, bytearray)):
            return value
        raise ArgumentMismatchError(
            f"Argument {position}: {type(value).__name__} is not an array"
        )
    if isinstance(value, declared):
        return value

    supplied = type(value)
    if _is_primitive_type(declared) and declared in _WIDENING.get(supplied, ()):
        return np.asarray(value).astype(declared)[()]
    if _is_primitive_type(declared) and supplied in _UNBOXING.get(declared, ()):
        try:
            return declared(ord(value) if supplied is str else value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ArgumentMismatchError(f"Argument {position}: {exc}") from exc
    if _BOXING.get(supplied) is declared:
        return chr(int(value)) if declared is str else declared(value)
    raise ArgumentMismatchError(
        f"Argument {position}: {supplied.__name__} is not assignable "
        f"to {declared.__name__}"
    )


def adapt_arguments(args: Sequence[Any], declared: Sequence[type]) -> tuple[Any, ...]:
    return tuple(
        adapt_argument(value, ptype, i) for i, (value, ptype) in enumerate(zip(args, declared))
    )


# ---------------------------------------------------------------------------
# Invoker
# ---------------------------------------------------------------------------

class Invoker:
    """Resolves and calls host members for marshaled arguments."""

    def __init__(self, resolver: TypeResolver) -> None:
        self._resolver = resolver

    @property
    def resolver(self) -> TypeResolver:
        return self._resolver

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def invoke_static(
        self,
        owner: HostClass,
        name: str,
        arguments: InvocationArguments,
    ) -> Any:
        self._check_access(owner, name)
        member = inspect.getattr_static(owner.members, name, None)
        if member is None:
            raise MethodNotFoundError(f"No static method {owner.binary_name}.{name}")

        if isinstance(member, OverloadSet):
            overload = self._select(member, arguments, owner.binary_name)
            args = adapt_arguments(arguments.args, self._variant_types(overload))
            return self._call(overload.function, args, f"{owner.binary_name}.{name}")

        if not isinstance(member, (staticmethod, classmethod)):
            raise MethodNotFoundError(f"{owner.binary_name}.{name} is not static")
        target = getattr(owner.members, name)
        args = adapt_arguments(arguments.args, arguments.parameter_types)
        self._check_arity(target, args, f"{owner.binary_name}.{name}")
        return self._call(target, args, f"{owner.binary_name}.{name}")

    def invoke_constructor(
        self,
        owner: HostClass,
        arguments: InvocationArguments,
    ) -> Any:
        label = f"{owner.binary_name}.<init>"
        hook = inspect.getattr_static(owner.members, CONSTRUCTOR_HOOK, None)

        if isinstance(hook, OverloadSet):
            overload = self._select(hook, arguments, owner.binary_name)
            args = adapt_arguments(arguments.args, self._variant_types(overload))
            return self._call(overload.function, args, label)

        args = adapt_arguments(arguments.args, arguments.parameter_types)
        if hook is not None:
            target: Callable[..., Any] = getattr(owner.members, CONSTRUCTOR_HOOK)
        else:
            target = owner.host_type
        self._check_arity(target, args, label)
        return self._call(target, args, label)

    def invoke_virtual(
        self,
        owner: HostClass,
        name: str,
        receiver: Any,
        arguments: InvocationArguments,
    ) -> Any:
        label = f"{owner.binary_name}.{name}"
        if receiver is None:
            raise NullReceiverError(f"Null receiver for {label}")
        if isinstance(receiver, UnknownValue):
            raise TypeResolutionError(f"Receiver of {label} is unknown")
        self._check_access(owner, name)

        namespace, member = self._find_instance_member(owner, name, type(receiver))
        if member is None:
            raise MethodNotFoundError(
                f"No method {name} on {type(receiver).__name__} ({owner.binary_name})"
            )

        if isinstance(member, OverloadSet):
            overload = self._select(member, arguments, owner.binary_name)
            args = adapt_arguments(arguments.args, self._variant_types(overload))
            return self._call(overload.function, (receiver, *args), label)

        args = adapt_arguments(arguments.args, arguments.parameter_types)
        if namespace in type(receiver).__mro__:
            target = getattr(receiver, name)
            self._check_arity(target, args, label)
            return self._call(target, args, label)

        target = getattr(namespace, name)
        call_args = (receiver, *args)
        self._check_arity(target, call_args, label)
        return self._call(target, call_args, label)

    # ------------------------------------------------------------------ #
    #  Lookup helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_access(owner: HostClass, name: str) -> None:
        if name.startswith("_"):
            raise AccessDeniedError(f"{owner.binary_name}.{name} is not accessible")

    def _find_instance_member(
        self,
        owner: HostClass,
        name: str,
        receiver_type: type,
    ) -> tuple[Optional[type], Any]:
        """Find *name* on the receiver's own type first, then the declared owner."""
        for namespace in self._resolver.members_chain(receiver_type):
            member = namespace.__dict__.get(name)
            if member is not None:
                return namespace, member
        member = inspect.getattr_static(owner.members, name, None)
        if member is not None:
            return owner.members, member
        return None, None

    def _variant_types(self, overload: Overload) -> tuple[type, ...]:
        return tuple(
            self._resolver.host_type(map_descriptor(d)) for d in overload.descriptors
        )

    def _select(
        self,
        overloads: OverloadSet,
        arguments: InvocationArguments,
        owner_name: str,
    ) -> Overload:
        """Pick the cheapest variant compatible with the argument types.

        Raises:
            MethodNotFoundError: If nothing matches or the best match is
                ambiguous.
        """
        label = f"{owner_name}.{overloads.name}"
        scored: list[tuple[int, Overload]] = []
        for overload in overloads.candidates(len(arguments)):
            total = 0
            for supplied, declared in zip(arguments.parameter_types, self._variant_types(overload)):
                cost = conversion_cost(supplied, declared)
                if cost is None:
                    break
                total += cost
            else:
                scored.append((total, overload))

        if not scored:
            shapes = ", ".join(t.__name__ for t in arguments.parameter_types)
            raise MethodNotFoundError(f"No overload of {label} accepts ({shapes})")

        scored.sort(key=lambda item: item[0])
        if len(scored) > 1 and scored[0][0] == scored[1][0]:
            raise MethodNotFoundError(f"Ambiguous overload for {label}")
        return scored[0][1]

    @staticmethod
    def _check_arity(target: Callable[..., Any], args: Sequence[Any], label: str) -> None:
        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError):
            # Some builtins expose no signature; let the call decide.
            return
        try:
            signature.bind(*args)
        except TypeError as exc:
            raise MethodNotFoundError(
                f"No variant of {label} accepts {len(args)} argument(s): {exc}"
            ) from exc

    @staticmethod
    def _call(target: Callable[..., Any], args: Sequence[Any], label: str) -> Any:
        try:
            return target(*args)
        except Exception as exc:
            raise InvocationTargetError(
                f"{label} raised {type(exc).__name__}: {exc}", exc
            ) from exc
