"""
Host Type Resolution
=====================

Maps binary class names from the interpreted program onto types in the
running Python process.  Three sources are consulted, in order:

    1. Configured aliases -- ``binary name -> dotted.python.Path``.
    2. The :class:`HostTypeRegistry` of bound JDK types, filled by the
       :func:`host_class` decorator in :mod:`reflector.host`.
    3. Dynamic import of the binary name as a dotted Python path, for
       names under one of the configured ``import_roots``.

A registered :class:`HostClass` separates the *host type* used for
instance checks (``java.lang.String`` is ``str``) from the *members*
class holding the Java-named methods, so builtin host types can be
bridged without subclassing them.
"""

from __future__ import annotations

import importlib
import types
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

import numpy as np

from reflector.core.errors import AccessDeniedError, TypeResolutionError
from reflector.core.models import TypeDescriptor
from reflector.parsers.descriptor import (
    PRIMITIVES,
    array_component,
    internal_to_binary,
)
from shared.config import ReflectorConfig


BUILTIN_BINDINGS_MODULE: str = "reflector.host"


@dataclass(frozen=True, slots=True)
class HostClass:
    """A bridged type: binary name, host type and members namespace."""
    binary_name: str
    host_type: type
    members: type


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class HostTypeRegistry:
    """Binary name to :class:`HostClass` table.

    Populated at import time and read-only afterwards.
    """

    def __init__(self) -> None:
        self._by_name: dict[str, HostClass] = {}
        self._by_type: dict[type, HostClass] = {}

    def register(
        self,
        binary_name: str,
        host_type: type,
        members: type | None = None,
    ) -> HostClass:
        entry = HostClass(binary_name, host_type, members or host_type)
        self._by_name[binary_name] = entry
        # First registration of a host type owns instance dispatch.
        self._by_type.setdefault(host_type, entry)
        return entry

    def lookup(self, binary_name: str) -> Optional[HostClass]:
        return self._by_name.get(binary_name)

    def for_type(self, host_type: type) -> Optional[HostClass]:
        return self._by_type.get(host_type)

    def names(self) -> list[str]:
        return sorted(self._by_name)

    def __contains__(self, binary_name: object) -> bool:
        return binary_name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


DEFAULT_REGISTRY = HostTypeRegistry()


def host_class(
    binary_name: str,
    host_type: type | None = None,
    *,
    registry: HostTypeRegistry | None = None,
) -> Callable[[type], type]:
    """Class decorator registering a members class for *binary_name*.

    Without *host_type* the decorated class is its own host type.
    """
    def decorator(members: type) -> type:
        (registry or DEFAULT_REGISTRY).register(
            binary_name, host_type or members, members
        )
        return members
    return decorator


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class TypeResolver:
    """Resolves binary names and descriptors to host types.

    Args:
        config: Bridge configuration (aliases, denied types, import roots).
        registry: Registry of bound types.  Defaults to the process-wide
            registry, with :mod:`reflector.host` bindings loaded.
    """

    def __init__(
        self,
        config: ReflectorConfig | None = None,
        registry: HostTypeRegistry | None = None,
    ) -> None:
        self._config = config or ReflectorConfig()
        if registry is None:
            importlib.import_module(BUILTIN_BINDINGS_MODULE)
            registry = DEFAULT_REGISTRY
        for module in self._config.host_modules:
            importlib.import_module(module)
        self._registry = registry
        self._denied = frozenset(self._config.denied_types)

    @property
    def registry(self) -> HostTypeRegistry:
        return self._registry

    # ------------------------------------------------------------------ #
    #  Class resolution
    # ------------------------------------------------------------------ #

    def resolve_class(self, binary_name: str) -> HostClass:
        """Resolve a binary class name to a :class:`HostClass`.

        Raises:
            AccessDeniedError: If the name is in ``denied_types``.
            TypeResolutionError: If no source knows the name.
        """
        if binary_name in self._denied:
            raise AccessDeniedError(f"Reflection on {binary_name} is denied")

        if binary_name.startswith("["):
            array_type = self._array_type(binary_name)
            return HostClass(binary_name, array_type, array_type)

        alias = self._config.aliases.get(binary_name)
        if alias is not None:
            return self._from_host_type(binary_name, self._import_type(alias))

        entry = self._registry.lookup(binary_name)
        if entry is not None:
            return entry

        if not self._importable(binary_name):
            raise TypeResolutionError(f"Class not found: {binary_name}")
        return self._from_host_type(binary_name, self._import_type(binary_name, gated=True))

    def host_type(self, descriptor: TypeDescriptor) -> type:
        """Host type for a parameter or value descriptor.

        Primitives map to numpy scalar types, one-dimensional primitive
        arrays to :class:`numpy.ndarray`, other arrays to :class:`list`.
        """
        if descriptor.kind is not None:
            return descriptor.kind.host_type
        return self.resolve_class(descriptor.name).host_type

    def _from_host_type(self, binary_name: str, host_type: type) -> HostClass:
        entry = self._registry.for_type(host_type)
        if entry is not None:
            return HostClass(binary_name, host_type, entry.members)
        return HostClass(binary_name, host_type, host_type)

    def _array_type(self, binary_name: str) -> type:
        dimensions, component = array_component(binary_name)
        if component in PRIMITIVES:
            return np.ndarray if dimensions == 1 else list
        # Component must exist even though the host array type is generic.
        self.resolve_class(internal_to_binary(component.replace(".", "/")))
        return list

    # ------------------------------------------------------------------ #
    #  Instance dispatch support
    # ------------------------------------------------------------------ #

    def members_chain(self, receiver_type: type) -> Iterator[type]:
        """Namespaces searched for an instance member, most specific first.

        Walks the receiver's MRO; a bound host type contributes its
        members class instead of itself.
        """
        seen: set[type] = set()
        for klass in receiver_type.__mro__:
            entry = self._registry.for_type(klass)
            owner = entry.members if entry is not None else klass
            if owner not in seen:
                seen.add(owner)
                yield owner

    # ------------------------------------------------------------------ #
    #  Dynamic import
    # ------------------------------------------------------------------ #

    def _importable(self, dotted: str) -> bool:
        return any(
            dotted == root or dotted.startswith(root + ".")
            for root in self._config.import_roots
        )

    def _import_type(self, dotted: str, gated: bool = False) -> type:
        """Import ``package.module.Class$Inner`` and return the class.

        Only classes are walked after the module prefix: module
        attributes and ``_``-prefixed names are never followed.  When
        *gated*, the class must also be defined under an import root.

        Raises:
            AccessDeniedError: If the path names a private attribute or a
                class defined outside the import roots.
            TypeResolutionError: If no module prefix imports or the
                remaining path does not name a class.
        """
        parts = dotted.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                target: Any = importlib.import_module(module_name)
            except ModuleNotFoundError as exc:
                # Only a missing prefix means "try a shorter one".
                if exc.name is not None and module_name.startswith(exc.name):
                    continue
                raise TypeResolutionError(
                    f"Cannot load {dotted}: {exc}"
                ) from exc

            attributes = [a for p in parts[split:] for a in p.split("$")]
            if any(a.startswith("_") for a in attributes):
                raise AccessDeniedError(f"{dotted} names a private attribute")
            try:
                for attribute in attributes:
                    target = getattr(target, attribute)
                    if isinstance(target, types.ModuleType):
                        raise AttributeError(attribute)
            except AttributeError:
                continue
            if not isinstance(target, type):
                raise TypeResolutionError(f"{dotted} is not a class")
            if gated and not self._importable(getattr(target, "__module__", "")):
                raise AccessDeniedError(
                    f"{dotted} is defined in {target.__module__}, outside the import roots"
                )
            return target

        raise TypeResolutionError(f"Class not found: {dotted}")
