"""
Reflector Dispatch
===================

Host type resolution, overload declaration and native invocation.
"""

from reflector.dispatch.overloads import Overload, OverloadSet, overloaded
from reflector.dispatch.resolver import (
    DEFAULT_REGISTRY,
    HostClass,
    HostTypeRegistry,
    TypeResolver,
    host_class,
)
from reflector.dispatch.invoker import Invoker

__all__ = [
    "DEFAULT_REGISTRY",
    "HostClass",
    "HostTypeRegistry",
    "Invoker",
    "Overload",
    "OverloadSet",
    "TypeResolver",
    "host_class",
    "overloaded",
]
