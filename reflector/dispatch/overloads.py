"""
Descriptor-keyed Overloads
===========================

Python has one function per name; the bytecode being interpreted has
overloads selected by parameter types.  Host bindings declare each
variant with the smali descriptors it accepts::

    class StringBuilder:

        @overloaded("Ljava/lang/String;")
        def append(self, value):
            ...

        @append.variant("I")
        def _append_int(self, value):
            ...

The class attribute ``append`` is then an :class:`OverloadSet` that the
invoker inspects; the variant functions themselves are plain functions
taking the receiver (if any) as their first argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence


@dataclass(frozen=True, slots=True)
class Overload:
    """One variant: parameter descriptors and the implementing function."""
    descriptors: tuple[str, ...]
    function: Callable[..., Any]

    @property
    def arity(self) -> int:
        return len(self.descriptors)


class OverloadSet:
    """All variants registered under one member name."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._variants: list[Overload] = []

    def add(self, descriptors: Sequence[str], function: Callable[..., Any]) -> None:
        key = tuple(descriptors)
        if any(v.descriptors == key for v in self._variants):
            raise ValueError(f"Duplicate overload {self.name}({''.join(key)})")
        self._variants.append(Overload(key, function))

    def variant(self, *descriptors: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering another variant of this member."""
        def decorator(function: Callable[..., Any]) -> Callable[..., Any]:
            self.add(descriptors, function)
            return function
        return decorator

    def candidates(self, arity: int) -> list[Overload]:
        return [v for v in self._variants if v.arity == arity]

    @property
    def variants(self) -> tuple[Overload, ...]:
        return tuple(self._variants)

    def __len__(self) -> int:
        return len(self._variants)

    def __repr__(self) -> str:
        shapes = ", ".join("(" + "".join(v.descriptors) + ")" for v in self._variants)
        return f"<OverloadSet {self.name} [{shapes}]>"


def overloaded(*descriptors: str) -> Callable[[Callable[..., Any]], OverloadSet]:
    """Start an :class:`OverloadSet` named after the decorated function."""
    def decorator(function: Callable[..., Any]) -> OverloadSet:
        overloads = OverloadSet(function.__name__)
        overloads.add(descriptors, function)
        return overloads
    return decorator
