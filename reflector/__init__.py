"""
Reflector -- Native Method Bridge
===================================

Executes selected Java/Android library methods natively on behalf of a
symbolic Dalvik interpreter.  The interpreter hands over a callee frame;
the bridge parses the method reference, marshals the parameter registers
into host values, calls the bound host implementation and writes the
result (or an unknown marker) back into the frame.

Modules:
    - ``reflector.core.engine``        -- MethodReflector entry point
    - ``reflector.core.models``        -- Signatures, outcomes, Unknown
    - ``reflector.core.state``         -- Register cells and frames
    - ``reflector.parsers``            -- Descriptor and signature parsing
    - ``reflector.marshaling``         -- Register to argument conversion
    - ``reflector.dispatch``           -- Type resolution and invocation
    - ``reflector.host``               -- java.lang bindings
"""

__version__ = "1.0.0"

from reflector.core import (
    BridgeError,
    HeapItem,
    MethodReflector,
    MethodSignature,
    MethodState,
    SignatureError,
    UnknownValue,
)
from reflector.dispatch import host_class, overloaded
from reflector.parsers import map_descriptor, parse_signature

__all__ = [
    "BridgeError",
    "HeapItem",
    "MethodReflector",
    "MethodSignature",
    "MethodState",
    "SignatureError",
    "UnknownValue",
    "host_class",
    "map_descriptor",
    "overloaded",
    "parse_signature",
]
