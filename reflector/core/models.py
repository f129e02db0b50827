"""
Reflector Data Models
======================

Value objects shared by every stage of the reflection bridge: the parsed
method signature, single type descriptors, the transient argument bundle
handed to the dispatcher and the outcome of one native invocation.

Signatures and descriptors are pydantic models frozen at construction so
that one :class:`MethodSignature` can be shared by concurrent
invocations without copying.

References:
    - Google. (2024). Dalvik bytecode format. Android Open Source Project.
      https://source.android.com/docs/core/runtime/dalvik-bytecode
    - Google. (2024). DEX Format, "TypeDescriptor Semantics".
      https://source.android.com/docs/core/runtime/dex-format
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from reflector.core.errors import BridgeError


VOID: str = "V"
OBJECT_TYPE: str = "Ljava/lang/Object;"
CONSTRUCTOR_NAME: str = "<init>"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class PrimitiveKind(str, enum.Enum):
    """The eight primitive kinds of the register calling convention.

    Each member's value is its single-letter descriptor.
    """
    INT = "I"
    BOOLEAN = "Z"
    LONG = "J"
    BYTE = "B"
    SHORT = "S"
    CHAR = "C"
    DOUBLE = "D"
    FLOAT = "F"

    @property
    def width(self) -> int:
        """Number of register slots a value of this kind occupies."""
        return 2 if self in (PrimitiveKind.LONG, PrimitiveKind.DOUBLE) else 1

    @property
    def host_type(self) -> type:
        """Exact numpy scalar type used for this kind on the host."""
        return _HOST_SCALARS[self]

    @property
    def label(self) -> str:
        """Java keyword for this kind, e.g. ``"int"``."""
        return self.name.lower()


_HOST_SCALARS: dict[PrimitiveKind, type] = {
    PrimitiveKind.INT: np.int32,
    PrimitiveKind.BOOLEAN: np.bool_,
    PrimitiveKind.LONG: np.int64,
    PrimitiveKind.BYTE: np.int8,
    PrimitiveKind.SHORT: np.int16,
    PrimitiveKind.CHAR: np.uint16,
    PrimitiveKind.DOUBLE: np.float64,
    PrimitiveKind.FLOAT: np.float32,
}


# ---------------------------------------------------------------------------
# Descriptors and signatures
# ---------------------------------------------------------------------------

class TypeDescriptor(BaseModel):
    """A single parameter or value type.

    Either a primitive (``kind`` set) or a reference whose ``name`` is the
    host binary name, e.g. ``java.lang.String`` or ``[Ljava.lang.String;``.

    Attributes:
        descriptor: Raw descriptor text as written in smali.
        kind: Primitive kind, or ``None`` for reference types.
        name: Java keyword for primitives, binary name for references.
    """
    model_config = ConfigDict(frozen=True)

    descriptor: str
    kind: Optional[PrimitiveKind] = None
    name: str = ""

    @property
    def is_primitive(self) -> bool:
        return self.kind is not None

    @property
    def is_reference(self) -> bool:
        return self.kind is None

    @property
    def is_array(self) -> bool:
        return self.descriptor.startswith("[")

    @property
    def is_object(self) -> bool:
        """Whether this is the universal ``java.lang.Object`` type."""
        return self.descriptor == OBJECT_TYPE

    @property
    def width(self) -> int:
        """Register slots consumed: 2 for long and double, 1 otherwise."""
        return self.kind.width if self.kind is not None else 1

    def __str__(self) -> str:
        return self.descriptor


class MethodSignature(BaseModel):
    """Immutable decomposition of a smali method reference.

    Built once by :func:`reflector.parsers.signature.parse_signature`.

    Attributes:
        class_name: Owning type, internal form (``Ljava/lang/String;``).
        class_binary_name: Owning type, binary form (``java.lang.String``).
        method_name: Method name, ``<init>`` for constructors.
        parameters: Declared parameters in order, receiver excluded.
        return_type: Return descriptor, ``V`` for void.
        is_static: Whether the call is a static invocation.
    """
    model_config = ConfigDict(frozen=True)

    class_name: str = Field(..., min_length=1)
    class_binary_name: str = Field(..., min_length=1)
    method_name: str = Field(..., min_length=1)
    parameters: tuple[TypeDescriptor, ...] = ()
    return_type: str = Field(..., min_length=1)
    is_static: bool = False

    @property
    def is_constructor(self) -> bool:
        return self.method_name == CONSTRUCTOR_NAME

    @property
    def returns_void(self) -> bool:
        return self.return_type == VOID

    @property
    def parameter_types(self) -> tuple[str, ...]:
        """Raw parameter descriptors, receiver excluded."""
        return tuple(p.descriptor for p in self.parameters)

    @property
    def parameter_register_count(self) -> int:
        """Register slots used by the call, receiver included."""
        receiver = 0 if self.is_static else 1
        return receiver + sum(p.width for p in self.parameters)

    @property
    def text(self) -> str:
        """The signature in ``Lcls;->name(params)ret`` form."""
        params = "".join(self.parameter_types)
        return f"{self.class_name}->{self.method_name}({params}){self.return_type}"

    def __str__(self) -> str:
        return self.text


# ---------------------------------------------------------------------------
# Per-invocation values
# ---------------------------------------------------------------------------

class UnknownValue:
    """Sentinel for a value the bridge could not compute.

    Distinct from ``None``, which is a legitimate null reference.  All
    unknown values are equal to each other.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UnknownValue)

    def __hash__(self) -> int:
        return hash(UnknownValue)

    def __repr__(self) -> str:
        return "Unknown"


@dataclass(frozen=True, slots=True)
class InvocationArguments:
    """Marshaled native arguments and their matching parameter types."""
    args: tuple[Any, ...] = ()
    parameter_types: tuple[type, ...] = ()

    def __len__(self) -> int:
        return len(self.args)


@dataclass(frozen=True, slots=True)
class InvocationOutcome:
    """Result of one dispatch: a concrete value or a failure.

    Use :meth:`success` and :meth:`failure` rather than the constructor.
    """
    value: Any = None
    error: Optional[BridgeError] = None
    instance: Any = field(default=None)

    @classmethod
    def success(cls, value: Any = None, *, instance: Any = None) -> InvocationOutcome:
        return cls(value=value, instance=instance)

    @classmethod
    def failure(cls, error: BridgeError) -> InvocationOutcome:
        return cls(error=error)

    @property
    def is_unknown(self) -> bool:
        return self.error is not None

    def cell_value(self) -> Any:
        """Value to store in the VM: the result, or :class:`UnknownValue`."""
        return UnknownValue() if self.error is not None else self.value
