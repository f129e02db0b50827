"""
Result Binder
==============

Commits an :class:`InvocationOutcome` to the callee's register file:

    - constructors: register ``p0`` receives the new instance on success,
      and nothing else is written;
    - void methods: nothing is written;
    - everything else: the return register receives the value, or an
      :class:`UnknownValue`, tagged with the declared return type.
"""

from __future__ import annotations

from reflector.core.models import InvocationOutcome, MethodSignature
from reflector.core.state import HeapItem, RegisterFile


def bind_result(
    registers: RegisterFile,
    signature: MethodSignature,
    outcome: InvocationOutcome,
) -> None:
    if signature.is_constructor and not signature.is_static:
        if not outcome.is_unknown:
            registers.assign_parameter(0, HeapItem(outcome.instance, signature.class_name))
        return

    if signature.returns_void:
        return

    registers.assign_return_register(HeapItem(outcome.cell_value(), signature.return_type))
