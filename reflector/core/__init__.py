"""
Reflector Core Module
======================

Contains the reflection engine, data models and register state.
"""

from reflector.core.errors import (
    AccessDeniedError,
    ArgumentMismatchError,
    BridgeError,
    InvocationTargetError,
    MethodNotFoundError,
    NullReceiverError,
    SignatureError,
    TypeResolutionError,
)
from reflector.core.models import (
    InvocationArguments,
    InvocationOutcome,
    MethodSignature,
    PrimitiveKind,
    TypeDescriptor,
    UnknownValue,
)
from reflector.core.state import HeapItem, MethodState, RegisterFile, ValueCell
from reflector.core.engine import MethodReflector

__all__ = [
    "MethodReflector",
    "AccessDeniedError",
    "ArgumentMismatchError",
    "BridgeError",
    "InvocationTargetError",
    "MethodNotFoundError",
    "NullReceiverError",
    "SignatureError",
    "TypeResolutionError",
    "InvocationArguments",
    "InvocationOutcome",
    "MethodSignature",
    "PrimitiveKind",
    "TypeDescriptor",
    "UnknownValue",
    "HeapItem",
    "MethodState",
    "RegisterFile",
    "ValueCell",
]
