"""
Reflector Marshaling
=====================

Conversion of parameter registers into native call arguments.
"""

from reflector.marshaling.arguments import ArgumentMarshaler

__all__ = ["ArgumentMarshaler"]
