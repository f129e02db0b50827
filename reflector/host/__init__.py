"""
Host Bindings
==============

Importing this package registers the bundled ``java.lang`` bindings
with the default host type registry.
"""

from reflector.host import lang, text

__all__ = ["lang", "text"]
