"""
Argument Marshaling
====================

Reads the callee's parameter registers and produces the native argument
list for one invocation.

Register layout (instance call, ``Lcom/Foo;->bar(JI)V``)::

    p0      receiver          -- not an argument
    p1 p2   long (wide)       -- argument 0, second slot never read
    p3      int               -- argument 1

Coercion, applied to each non-null value in order:

    1. A cell typed as a primitive or a boxed primitive is narrowed to the
       exact kind the callee declares.  The register convention reuses a
       single 32-bit representation for int, short, byte, char and
       boolean, so the register's own tag cannot be trusted.
    2. A numeric zero bound for a reference parameter other than
       ``java.lang.Object`` becomes null.  Null and integer zero share the
       same ``const/4 vX, 0`` encoding; this is a heuristic and can be
       switched off with ``ReflectorConfig.zero_as_null``.
    3. Anything else passes through unchanged.
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np

from reflector.core.errors import ArgumentMismatchError
from reflector.core.models import (
    InvocationArguments,
    MethodSignature,
    TypeDescriptor,
    UnknownValue,
)
from reflector.core.state import RegisterFile, ValueCell
from reflector.dispatch.resolver import TypeResolver
from reflector.parsers.descriptor import cast_to_primitive
from shared.config import ReflectorConfig


def is_numeric(value: Any) -> bool:
    """True for numbers and numpy numeric scalars, false for booleans."""
    return isinstance(value, numbers.Number) and not isinstance(value, (bool, np.bool_))


class ArgumentMarshaler:
    """Builds :class:`InvocationArguments` from a register file.

    Args:
        resolver: Maps parameter descriptors to host types.
        config: Bridge configuration; only ``zero_as_null`` is consulted.
    """

    def __init__(
        self,
        resolver: TypeResolver,
        config: ReflectorConfig | None = None,
    ) -> None:
        self._resolver = resolver
        self._zero_as_null = (config or ReflectorConfig()).zero_as_null

    def marshal(
        self,
        registers: RegisterFile,
        signature: MethodSignature,
    ) -> InvocationArguments:
        """Read every declared parameter of *signature* from *registers*.

        Raises:
            ArgumentMismatchError: If a register is missing, holds an
                unknown value, or cannot be coerced.
            TypeResolutionError: If a parameter type is not resolvable.
        """
        register = 0 if signature.is_static else 1
        count = registers.register_count
        args: list[Any] = []
        parameter_types: list[type] = []
        if count < register:
            raise ArgumentMismatchError("Instance call without a receiver register p0")

        for position, expected in enumerate(signature.parameters):
            if register + expected.width > count:
                raise ArgumentMismatchError(
                    f"Parameter {position} ({expected}) needs register p{register}"
                    f"{'-p%d' % (register + 1) if expected.width == 2 else ''}, "
                    f"frame has {count}"
                )
            cell = registers.peek_parameter(register)
            args.append(self.coerce(cell, expected, position))
            parameter_types.append(self._resolver.host_type(expected))
            register += expected.width

        return InvocationArguments(tuple(args), tuple(parameter_types))

    def coerce(self, cell: ValueCell, expected: TypeDescriptor, position: int = 0) -> Any:
        """Apply the coercion rules to one register value."""
        value = cell.value
        if value is None:
            return None
        if isinstance(value, UnknownValue):
            raise ArgumentMismatchError(
                f"Parameter {position} ({expected}) is unknown"
            )
        if cell.is_primitive_or_wrapper():
            return cast_to_primitive(value, expected.descriptor)
        if (
            self._zero_as_null
            and expected.is_reference
            and not expected.is_object
            and is_numeric(value)
            and value == 0
        ):
            return None
        return value
