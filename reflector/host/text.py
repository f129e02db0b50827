"""
java.lang.StringBuilder
========================

Mutable string buffer used by compiler-generated string concatenation.
Unlike ``String`` it is a real host class: instances live on the
interpreter heap and are mutated in place by ``append``.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from reflector.dispatch.overloads import overloaded
from reflector.dispatch.resolver import host_class
from reflector.host.lang import java_string


@host_class("java.lang.StringBuilder")
class StringBuilder:

    def __init__(self, initial: str = "") -> None:
        self._chunks: list[str] = [initial] if initial else []

    @overloaded()
    def new_instance() -> "StringBuilder":
        return StringBuilder()

    @new_instance.variant("Ljava/lang/String;")
    def _from_string(value: str) -> "StringBuilder":
        if value is None:
            raise TypeError("StringBuilder(null)")
        return StringBuilder(value)

    @new_instance.variant("I")
    def _with_capacity(capacity: Any) -> "StringBuilder":
        if capacity < 0:
            raise ValueError(f"negative capacity {int(capacity)}")
        return StringBuilder()

    # ------------------------------------------------------------------ #
    #  append
    # ------------------------------------------------------------------ #

    @overloaded("Ljava/lang/String;")
    def append(self, value: Any) -> "StringBuilder":
        self._chunks.append(java_string(value))
        return self

    @append.variant("Ljava/lang/Object;")
    def _append_object(self, value: Any) -> "StringBuilder":
        self._chunks.append(java_string(value))
        return self

    @append.variant("C")
    def _append_char(self, value: Any) -> "StringBuilder":
        self._chunks.append(chr(int(value)))
        return self

    @append.variant("I")
    def _append_int(self, value: Any) -> "StringBuilder":
        self._chunks.append(java_string(np.int32(value)))
        return self

    @append.variant("J")
    def _append_long(self, value: Any) -> "StringBuilder":
        self._chunks.append(java_string(np.int64(value)))
        return self

    @append.variant("Z")
    def _append_boolean(self, value: Any) -> "StringBuilder":
        self._chunks.append(java_string(bool(value)))
        return self

    @append.variant("F")
    def _append_float(self, value: Any) -> "StringBuilder":
        self._chunks.append(java_string(np.float32(value)))
        return self

    @append.variant("D")
    def _append_double(self, value: Any) -> "StringBuilder":
        self._chunks.append(java_string(np.float64(value)))
        return self

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def length(self) -> np.int32:
        return np.int32(len(self.toString()))

    def charAt(self, index: Any) -> np.uint16:
        text = self.toString()
        index = int(index)
        if not 0 <= index < len(text):
            raise IndexError(f"index {index}, length {len(text)}")
        return np.uint16(ord(text[index]))

    def reverse(self) -> "StringBuilder":
        self._chunks = [self.toString()[::-1]]
        return self

    def toString(self) -> str:
        return "".join(self._chunks)

    def __str__(self) -> str:
        return self.toString()

    def __repr__(self) -> str:
        return f"StringBuilder({self.toString()!r})"

