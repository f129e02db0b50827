"""
java.lang Bindings
===================

Host implementations of the ``java.lang`` members most often reached by
obfuscated string and arithmetic code: ``Object``, ``String``, the boxed
number types, ``Character`` and ``Math``.

Java values map onto host values as follows:

    ======================  ===========================
    java.lang.String        ``str``
    java.lang.Integer etc.  ``int``
    java.lang.Double/Float  ``float``
    java.lang.Boolean       ``bool``
    int, long, char, ...    numpy scalars (``np.int32``, ``np.int64``,
                            ``np.uint16``, ...)
    ======================  ===========================

Members take the receiver as their first argument; static members are
``@staticmethod`` or variants of an :class:`OverloadSet`.  Java
exceptions are raised as the closest Python exception and reach the
interpreter as an unknown result.
"""

from __future__ import annotations

import math
import numbers
import re
from typing import Any

import numpy as np

from reflector.dispatch.overloads import overloaded
from reflector.dispatch.resolver import DEFAULT_REGISTRY, host_class
from reflector.parsers.descriptor import cast_to_primitive


_JAVA_WHITESPACE: str = "".join(chr(c) for c in range(0x21))
_INTEGER_LITERAL = re.compile(r"[+-]?[0-9a-zA-Z]+")

INT_MIN: int = -(2 ** 31)
INT_MAX: int = 2 ** 31 - 1
LONG_MIN: int = -(2 ** 63)
LONG_MAX: int = 2 ** 63 - 1


def java_string(value: Any) -> str:
    """Render *value* the way ``String.valueOf`` would."""
    if value is None:
        return "null"
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, np.uint16):
        return chr(int(value))
    if isinstance(value, (np.floating, float)):
        return _java_float(value)
    if isinstance(value, np.integer):
        return str(int(value))
    return str(value)


def _java_float(value: Any) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    # Shortest round-trip repr at the value's own width.
    return str(value) if isinstance(value, np.floating) else repr(value)


def _char(code: Any) -> str:
    return chr(int(code))


def _parse_integer(text: str | None, radix: int, low: int, high: int) -> int:
    """Strict integer parsing: no whitespace, underscores or range overflow."""
    if text is None:
        raise ValueError('For input string: "null"')
    if not 2 <= radix <= 36:
        raise ValueError(f"radix {radix} out of range")
    if not _INTEGER_LITERAL.fullmatch(text):
        raise ValueError(f'For input string: "{text}"')
    value = int(text, radix)
    if not low <= value <= high:
        raise ValueError(f'For input string: "{text}" (out of range)')
    return value


# ---------------------------------------------------------------------------
# java.lang.Object
# ---------------------------------------------------------------------------

@host_class("java.lang.Object", object)
class JavaObject:
    """Members every host value answers to."""

    def toString(self) -> str:
        return java_string(self)

    def hashCode(self) -> np.int32:
        return cast_to_primitive(hash(self), "I")

    def equals(self, other: Any) -> bool:
        return bool(self == other)


# ---------------------------------------------------------------------------
# java.lang.String
# ---------------------------------------------------------------------------

@host_class("java.lang.String", str)
class JavaString:
    """``java.lang.String`` members over a Python ``str`` receiver."""

    def length(self) -> np.int32:
        return np.int32(len(self))

    def isEmpty(self) -> bool:
        return len(self) == 0

    def charAt(self, index: Any) -> np.uint16:
        index = int(index)
        if not 0 <= index < len(self):
            raise IndexError(f"index {index}, length {len(self)}")
        return np.uint16(ord(self[index]))

    @overloaded("I")
    def substring(self, begin: Any) -> str:
        return JavaString._slice(self, int(begin), len(self))

    @substring.variant("I", "I")
    def _substring_range(self, begin: Any, end: Any) -> str:
        return JavaString._slice(self, int(begin), int(end))

    @staticmethod
    def _slice(value: str, begin: int, end: int) -> str:
        if begin < 0 or end > len(value) or begin > end:
            raise IndexError(f"begin {begin}, end {end}, length {len(value)}")
        return value[begin:end]

    @overloaded("I")
    def indexOf(self, char: Any) -> np.int32:
        return np.int32(self.find(_char(char)))

    @indexOf.variant("Ljava/lang/String;")
    def _index_of_string(self, needle: str) -> np.int32:
        if needle is None:
            raise TypeError("indexOf(null)")
        return np.int32(self.find(needle))

    def equals(self, other: Any) -> bool:
        return isinstance(other, str) and self == other

    def concat(self, other: str) -> str:
        if other is None:
            raise TypeError("concat(null)")
        return self + other

    def contains(self, other: str) -> bool:
        if other is None:
            raise TypeError("contains(null)")
        return other in self

    def startsWith(self, prefix: str) -> bool:
        if prefix is None:
            raise TypeError("startsWith(null)")
        return self.startswith(prefix)

    def endsWith(self, suffix: str) -> bool:
        if suffix is None:
            raise TypeError("endsWith(null)")
        return self.endswith(suffix)

    def toUpperCase(self) -> str:
        return self.upper()

    def toLowerCase(self) -> str:
        return self.lower()

    def trim(self) -> str:
        return self.strip(_JAVA_WHITESPACE)

    def toString(self) -> str:
        return self

    def hashCode(self) -> np.int32:
        units = self.encode("utf-16-be", "surrogatepass")
        h = 0
        for i in range(0, len(units), 2):
            h = (31 * h + int.from_bytes(units[i:i + 2], "big")) & 0xFFFFFFFF
        return cast_to_primitive(h, "I")

    @overloaded("Ljava/lang/Object;")
    def valueOf(value: Any) -> str:
        return java_string(value)

    @valueOf.variant("I")
    def _value_of_int(value: Any) -> str:
        return java_string(value)

    @valueOf.variant("J")
    def _value_of_long(value: Any) -> str:
        return java_string(value)

    @valueOf.variant("Z")
    def _value_of_boolean(value: Any) -> str:
        return java_string(value)

    @valueOf.variant("C")
    def _value_of_char(value: Any) -> str:
        return _char(value)

    @valueOf.variant("F")
    def _value_of_float(value: Any) -> str:
        return java_string(value)

    @valueOf.variant("D")
    def _value_of_double(value: Any) -> str:
        return java_string(value)


DEFAULT_REGISTRY.register("java.lang.CharSequence", str, JavaString)


# ---------------------------------------------------------------------------
# Boxed numbers
# ---------------------------------------------------------------------------

@host_class("java.lang.Integer", int)
class JavaInteger:
    """``java.lang.Integer``; boxed values are plain Python ints."""

    @overloaded("Ljava/lang/String;")
    def parseInt(text: str) -> np.int32:
        return np.int32(_parse_integer(text, 10, INT_MIN, INT_MAX))

    @parseInt.variant("Ljava/lang/String;", "I")
    def _parse_int_radix(text: str, radix: Any) -> np.int32:
        return np.int32(_parse_integer(text, int(radix), INT_MIN, INT_MAX))

    @overloaded("I")
    def valueOf(value: Any) -> int:
        return int(value)

    @valueOf.variant("Ljava/lang/String;")
    def _value_of_string(text: str) -> int:
        return _parse_integer(text, 10, INT_MIN, INT_MAX)

    @overloaded()
    def toString(self) -> str:
        return str(int(self))

    @toString.variant("I")
    def _to_string_static(value: Any) -> str:
        return str(int(value))

    @staticmethod
    def toHexString(value: Any) -> str:
        return format(int(value) & 0xFFFFFFFF, "x")

    @staticmethod
    def toBinaryString(value: Any) -> str:
        return format(int(value) & 0xFFFFFFFF, "b")

    def intValue(self) -> np.int32:
        return cast_to_primitive(self, "I")

    def longValue(self) -> np.int64:
        return cast_to_primitive(self, "J")


@host_class("java.lang.Long", int)
class JavaLong:
    """``java.lang.Long`` static helpers."""

    @overloaded("Ljava/lang/String;")
    def parseLong(text: str) -> np.int64:
        return np.int64(_parse_integer(text, 10, LONG_MIN, LONG_MAX))

    @parseLong.variant("Ljava/lang/String;", "I")
    def _parse_long_radix(text: str, radix: Any) -> np.int64:
        return np.int64(_parse_integer(text, int(radix), LONG_MIN, LONG_MAX))

    @staticmethod
    def valueOf(value: Any) -> int:
        return int(value)

    @staticmethod
    def toHexString(value: Any) -> str:
        return format(int(value) & 0xFFFFFFFFFFFFFFFF, "x")


@host_class("java.lang.Boolean", bool)
class JavaBoolean:
    """``java.lang.Boolean``; boxed values are plain Python bools."""

    @staticmethod
    def parseBoolean(text: str | None) -> bool:
        return text is not None and text.lower() == "true"

    @staticmethod
    def valueOf(value: Any) -> bool:
        return bool(value)

    @overloaded()
    def toString(self) -> str:
        return java_string(self)

    @toString.variant("Z")
    def _to_string_static(value: Any) -> str:
        return java_string(value)

    def booleanValue(self) -> bool:
        return bool(self)


@host_class("java.lang.Double", float)
class JavaDouble:
    """``java.lang.Double``; boxed values are plain Python floats."""

    @staticmethod
    def parseDouble(text: str | None) -> np.float64:
        if text is None:
            raise TypeError("parseDouble(null)")
        return np.float64(float(text.strip(_JAVA_WHITESPACE)))

    @staticmethod
    def isNaN(value: Any) -> bool:
        return math.isnan(float(value))

    def doubleValue(self) -> np.float64:
        return np.float64(self)


DEFAULT_REGISTRY.register("java.lang.Float", float, JavaDouble)
DEFAULT_REGISTRY.register("java.lang.Short", int, JavaObject)
DEFAULT_REGISTRY.register("java.lang.Byte", int, JavaObject)
DEFAULT_REGISTRY.register("java.lang.Number", numbers.Number, JavaObject)


# ---------------------------------------------------------------------------
# java.lang.Character
# ---------------------------------------------------------------------------

@host_class("java.lang.Character", str)
class JavaCharacter:
    """``java.lang.Character`` static predicates over ``char`` codes."""

    @staticmethod
    def isDigit(code: Any) -> bool:
        return _char(code).isdigit()

    @staticmethod
    def isLetter(code: Any) -> bool:
        return _char(code).isalpha()

    @staticmethod
    def isLetterOrDigit(code: Any) -> bool:
        return _char(code).isalnum()

    @staticmethod
    def isWhitespace(code: Any) -> bool:
        return _char(code).isspace()

    @staticmethod
    def toUpperCase(code: Any) -> np.uint16:
        upper = _char(code).upper()
        return np.uint16(ord(upper)) if len(upper) == 1 else np.uint16(code)

    @staticmethod
    def toLowerCase(code: Any) -> np.uint16:
        lower = _char(code).lower()
        return np.uint16(ord(lower)) if len(lower) == 1 else np.uint16(code)


# ---------------------------------------------------------------------------
# java.lang.Math
# ---------------------------------------------------------------------------

@host_class("java.lang.Math")
class JavaMath:
    """``java.lang.Math`` with two's-complement overflow on integral kinds."""

    @overloaded("I")
    def abs(value: Any) -> np.int32:
        with np.errstate(all="ignore"):
            return np.abs(np.int32(value))

    @abs.variant("J")
    def _abs_long(value: Any) -> np.int64:
        with np.errstate(all="ignore"):
            return np.abs(np.int64(value))

    @abs.variant("F")
    def _abs_float(value: Any) -> np.float32:
        return np.abs(np.float32(value))

    @abs.variant("D")
    def _abs_double(value: Any) -> np.float64:
        return np.abs(np.float64(value))

    @overloaded("I", "I")
    def max(a: Any, b: Any) -> np.int32:
        return np.int32(a) if a >= b else np.int32(b)

    @max.variant("J", "J")
    def _max_long(a: Any, b: Any) -> np.int64:
        return np.int64(a) if a >= b else np.int64(b)

    @max.variant("D", "D")
    def _max_double(a: Any, b: Any) -> np.float64:
        return np.maximum(np.float64(a), np.float64(b))

    @overloaded("I", "I")
    def min(a: Any, b: Any) -> np.int32:
        return np.int32(a) if a <= b else np.int32(b)

    @min.variant("J", "J")
    def _min_long(a: Any, b: Any) -> np.int64:
        return np.int64(a) if a <= b else np.int64(b)

    @min.variant("D", "D")
    def _min_double(a: Any, b: Any) -> np.float64:
        return np.minimum(np.float64(a), np.float64(b))

    @staticmethod
    def sqrt(value: Any) -> np.float64:
        with np.errstate(invalid="ignore"):
            return np.sqrt(np.float64(value))

    @staticmethod
    def pow(base: Any, exponent: Any) -> np.float64:
        with np.errstate(all="ignore"):
            return np.power(np.float64(base), np.float64(exponent))
