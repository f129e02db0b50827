"""
Register File and Value Cells
==============================

The bridge borrows the interpreter's call state for the duration of one
invocation.  It depends only on the narrow capability sets declared here
as :class:`typing.Protocol` classes, so any interpreter whose frame and
heap-item objects expose these members can be plugged in.

:class:`HeapItem` and :class:`MethodState` are minimal in-memory
implementations used when running the bridge standalone.
"""

from __future__ import annotations

import numbers
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from reflector.core.models import MethodSignature, UnknownValue

_PRIMITIVE_DESCRIPTORS: frozenset[str] = frozenset("IZJBSCDF")
_WRAPPER_DESCRIPTORS: frozenset[str] = frozenset(
    {
        "Ljava/lang/Integer;",
        "Ljava/lang/Boolean;",
        "Ljava/lang/Long;",
        "Ljava/lang/Byte;",
        "Ljava/lang/Short;",
        "Ljava/lang/Character;",
        "Ljava/lang/Double;",
        "Ljava/lang/Float;",
    }
)


# ---------------------------------------------------------------------------
# Capability protocols
# ---------------------------------------------------------------------------

@runtime_checkable
class ValueCell(Protocol):
    """A runtime value paired with its declared type descriptor."""

    @property
    def value(self) -> Any: ...

    @property
    def type(self) -> str: ...

    def is_primitive_or_wrapper(self) -> bool: ...

    def integer_value(self) -> Optional[int]: ...


@runtime_checkable
class RegisterFile(Protocol):
    """The callee frame: parameter registers plus a return slot."""

    @property
    def register_count(self) -> int: ...

    def peek_parameter(self, index: int) -> ValueCell: ...

    def assign_parameter(self, index: int, cell: ValueCell) -> None: ...

    def assign_return_register(self, cell: ValueCell) -> None: ...


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------

class HeapItem:
    """Immutable (value, declared type) pair."""

    __slots__ = ("_value", "_type")

    def __init__(self, value: Any, type: str) -> None:
        self._value = value
        self._type = type

    @property
    def value(self) -> Any:
        return self._value

    @property
    def type(self) -> str:
        return self._type

    @property
    def is_unknown(self) -> bool:
        return isinstance(self._value, UnknownValue)

    def is_primitive_or_wrapper(self) -> bool:
        return self._type in _PRIMITIVE_DESCRIPTORS or self._type in _WRAPPER_DESCRIPTORS

    def integer_value(self) -> Optional[int]:
        """The value as a Python int, or ``None`` if it is not an integral number."""
        value = self._value
        if isinstance(value, str) and len(value) == 1:
            return ord(value)
        if isinstance(value, numbers.Number):
            try:
                number = int(value)  # type: ignore[arg-type]
            except (TypeError, ValueError, OverflowError):
                return None
            return number if number == value else None
        return None

    def __repr__(self) -> str:
        return f"type={self._type}, value={self._value!r}"


class MethodState:
    """List-backed register file for one callee frame.

    Registers are numbered the way the calling convention lays out
    parameters: the receiver (for instance calls) at 0, wide values
    spanning two consecutive registers.
    """

    def __init__(self, registers: Iterable[HeapItem] = ()) -> None:
        self._registers: list[HeapItem] = list(registers)
        self._return: Optional[HeapItem] = None

    @classmethod
    def for_call(
        cls,
        signature: MethodSignature,
        *args: Any,
        receiver: Any = None,
    ) -> MethodState:
        """Lay out a receiver and arguments for *signature*.

        Each argument may be a :class:`HeapItem` or a raw value, which
        is wrapped with the declared parameter descriptor.  Wide
        arguments are written to two consecutive registers.

        Raises:
            ValueError: If the argument count does not match.
        """
        if len(args) != len(signature.parameters):
            raise ValueError(
                f"{signature.text} takes {len(signature.parameters)} "
                f"argument(s), {len(args)} given"
            )

        registers: list[HeapItem] = []
        if not signature.is_static:
            if isinstance(receiver, HeapItem):
                registers.append(receiver)
            else:
                registers.append(HeapItem(receiver, signature.class_name))

        for param, arg in zip(signature.parameters, args):
            item = arg if isinstance(arg, HeapItem) else HeapItem(arg, param.descriptor)
            registers.extend([item] * param.width)
        return cls(registers)

    @property
    def register_count(self) -> int:
        return len(self._registers)

    def peek_parameter(self, index: int) -> HeapItem:
        return self._registers[index]

    def assign_parameter(self, index: int, cell: HeapItem) -> None:
        self._registers[index] = cell

    def assign_return_register(self, cell: HeapItem) -> None:
        self._return = cell

    def peek_return_register(self) -> Optional[HeapItem]:
        return self._return

    @property
    def has_return(self) -> bool:
        return self._return is not None

    def __repr__(self) -> str:
        lines = [f"p{i}: {item!r}" for i, item in enumerate(self._registers)]
        if self._return is not None:
            lines.append(f"result: {self._return!r}")
        return "\n".join(lines) if lines else "<empty>"
