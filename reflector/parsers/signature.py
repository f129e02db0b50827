"""
Method Signature Parser
========================

Decomposes a smali method reference of the form::

    Lcom/example/Foo;->bar(ILjava/lang/String;J)V

into a frozen :class:`MethodSignature`.  Parsing happens once, when a
bridge is built; malformed input is a caller bug and raises
:class:`SignatureError` immediately.
"""

from __future__ import annotations

from reflector.core.errors import SignatureError
from reflector.core.models import MethodSignature, VOID
from reflector.parsers.descriptor import (
    descriptor_end,
    internal_to_binary,
    map_descriptor,
    split_descriptors,
)

SEPARATOR: str = "->"


def _validate_owner(owner: str, text: str) -> None:
    if not owner:
        raise SignatureError(f"Missing owning type in {text!r}")
    if not (owner.startswith("L") or owner.startswith("[")):
        raise SignatureError(f"Owning type must be a class or array: {text!r}")
    if descriptor_end(owner, 0) != len(owner):
        raise SignatureError(f"Malformed owning type {owner!r} in {text!r}")


def parse_signature(text: str, is_static: bool = False) -> MethodSignature:
    """Parse *text* into a :class:`MethodSignature`.

    Args:
        text: Full method reference, ``<owner>-><name>(<params>)<return>``.
        is_static: Whether the call site is a static invocation.  Not
            recoverable from the reference itself.

    Raises:
        SignatureError: On any malformed component.
    """
    owner, sep, member = text.partition(SEPARATOR)
    if not sep:
        raise SignatureError(f"Missing '{SEPARATOR}' in signature {text!r}")
    _validate_owner(owner, text)

    open_idx = member.find("(")
    close_idx = member.find(")")
    if open_idx == -1 or close_idx == -1 or close_idx < open_idx:
        raise SignatureError(f"Missing parameter list in {text!r}")
    if member.count("(") != 1 or member.count(")") != 1:
        raise SignatureError(f"Unbalanced parameter list in {text!r}")

    name = member[:open_idx]
    if not name:
        raise SignatureError(f"Empty method name in {text!r}")

    parameters = tuple(
        map_descriptor(d) for d in split_descriptors(member[open_idx + 1:close_idx])
    )

    return_type = member[close_idx + 1:]
    if return_type != VOID:
        # Validates; raises on junk after the parameter list.
        map_descriptor(return_type)

    return MethodSignature(
        class_name=owner,
        class_binary_name=internal_to_binary(owner),
        method_name=name,
        parameters=parameters,
        return_type=return_type,
        is_static=is_static,
    )
