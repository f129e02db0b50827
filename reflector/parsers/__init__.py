"""
Reflector Parsers
==================

Type descriptor and method reference parsing.
"""

from reflector.parsers.descriptor import (
    cast_to_primitive,
    internal_to_binary,
    map_descriptor,
    split_descriptors,
)
from reflector.parsers.signature import parse_signature

__all__ = [
    "cast_to_primitive",
    "internal_to_binary",
    "map_descriptor",
    "parse_signature",
    "split_descriptors",
]
