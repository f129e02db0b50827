"""
Type Descriptor Mapping
========================

Pure helpers translating smali type descriptors into bridge types:

    - :func:`map_descriptor` -- descriptor text to :class:`TypeDescriptor`
    - :func:`split_descriptors` -- a concatenated parameter list to its parts
    - :func:`internal_to_binary` / :func:`binary_to_internal` -- class names
    - :func:`cast_to_primitive` -- narrow a register value to its exact kind

Descriptor grammar (DEX format, "TypeDescriptor Semantics")::

    V                 void (return types only)
    Z B S C I J F D   primitives
    Lfully/qualified/Name;
    [descriptor       array, up to 255 dimensions

Reference:
    Google. (2024). DEX Format. Android Open Source Project.
    https://source.android.com/docs/core/runtime/dex-format
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np

from reflector.core.errors import ArgumentMismatchError, SignatureError
from reflector.core.models import PrimitiveKind, TypeDescriptor, VOID


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PRIMITIVES: dict[str, PrimitiveKind] = {kind.value: kind for kind in PrimitiveKind}

MAX_ARRAY_DIMENSIONS: int = 255


# ---------------------------------------------------------------------------
# Class name conversion
# ---------------------------------------------------------------------------

def internal_to_binary(name: str) -> str:
    """Convert an internal descriptor to a host binary name.

    ``Lcom/example/Foo;`` becomes ``com.example.Foo``; array descriptors
    keep their brackets and ``L...;`` wrapper, as in
    ``[Ljava/lang/String;`` to ``[Ljava.lang.String;``.
    """
    if name.startswith("["):
        return name.replace("/", ".")
    if name.startswith("L") and name.endswith(";"):
        return name[1:-1].replace("/", ".")
    return name


def binary_to_internal(name: str) -> str:
    """Inverse of :func:`internal_to_binary` for reference types."""
    if name.startswith("["):
        return name.replace(".", "/")
    if name in PRIMITIVES or name == VOID:
        return name
    return "L" + name.replace(".", "/") + ";"


# ---------------------------------------------------------------------------
# Descriptor parsing
# ---------------------------------------------------------------------------

def descriptor_end(text: str, start: int) -> int:
    """Index one past the descriptor beginning at *start*.

    Raises:
        SignatureError: On a truncated or invalid descriptor.
    """
    i = start
    while i < len(text) and text[i] == "[":
        i += 1
    if i - start > MAX_ARRAY_DIMENSIONS:
        raise SignatureError(f"Too many array dimensions in {text!r}")
    if i >= len(text):
        raise SignatureError(f"Truncated descriptor in {text!r}")

    ch = text[i]
    if ch == "L":
        end = text.find(";", i)
        if end == -1 or end == i + 1:
            raise SignatureError(f"Unterminated class descriptor in {text!r}")
        return end + 1
    if ch in PRIMITIVES:
        return i + 1
    if ch == VOID:
        raise SignatureError(f"void is not a value type in {text!r}")
    raise SignatureError(f"Unknown type code {ch!r} in {text!r}")


def split_descriptors(text: str) -> list[str]:
    """Split a concatenated parameter list such as ``IJLjava/lang/String;[B``.

    Raises:
        SignatureError: If any descriptor is malformed.
    """
    parts: list[str] = []
    i = 0
    while i < len(text):
        end = descriptor_end(text, i)
        parts.append(text[i:end])
        i = end
    return parts


def map_descriptor(text: str) -> TypeDescriptor:
    """Map one value-type descriptor to a :class:`TypeDescriptor`.

    Raises:
        SignatureError: If *text* is not exactly one valid descriptor.
    """
    if not text or descriptor_end(text, 0) != len(text):
        raise SignatureError(f"Invalid type descriptor: {text!r}")

    kind = PRIMITIVES.get(text)
    if kind is not None:
        return TypeDescriptor(descriptor=text, kind=kind, name=kind.label)
    return TypeDescriptor(descriptor=text, name=internal_to_binary(text))


def register_width(text: str) -> int:
    """Register slots used by a descriptor: 2 for ``J`` and ``D``."""
    kind = PRIMITIVES.get(text)
    return kind.width if kind is not None else 1


def array_component(text: str) -> tuple[int, str]:
    """Return ``(dimensions, component descriptor)`` of an array descriptor."""
    stripped = text.lstrip("[")
    return len(text) - len(stripped), stripped


# ---------------------------------------------------------------------------
# Primitive coercion
# ---------------------------------------------------------------------------

def cast_to_primitive(value: Any, descriptor: str) -> Any:
    """Coerce *value* to the exact host type of a primitive *descriptor*.

    The register calling convention stores byte, short, char, boolean and
    int alike as a 32-bit integer, so the same register value must be
    narrowed to whatever the callee declares.  Integral targets wrap on
    overflow, ``Z`` means non-zero, ``C`` accepts a one-character string.
    Non-primitive descriptors return *value* unchanged.

    Raises:
        ArgumentMismatchError: If *value* cannot be represented as a number.
    """
    kind = PRIMITIVES.get(descriptor)
    if kind is None:
        return value

    raw = value
    if isinstance(raw, str):
        if len(raw) != 1:
            raise ArgumentMismatchError(
                f"Cannot cast string of length {len(raw)} to {kind.label}"
            )
        raw = ord(raw)
    elif isinstance(raw, (bool, np.bool_)):
        raw = int(raw)
    elif not isinstance(raw, numbers.Number):
        raise ArgumentMismatchError(
            f"Cannot cast {type(value).__name__} to {kind.label}"
        )

    if kind is PrimitiveKind.BOOLEAN:
        return np.bool_(raw != 0)

    try:
        return np.asarray(raw).astype(kind.host_type)[()]
    except (TypeError, ValueError, OverflowError) as exc:
        raise ArgumentMismatchError(
            f"Cannot cast {value!r} to {kind.label}: {exc}"
        ) from exc
