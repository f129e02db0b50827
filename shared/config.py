"""
Reflector Configuration Management
===================================

Centralized configuration for the reflection bridge using Python
dataclasses and TOML-based persistence.

Configuration is kept apart from code: every tunable of the bridge
(logging, the zero-as-null heuristic, type aliases, denied types) lives
in a ``config.toml`` file with ``[global]`` and ``[reflector]`` tables.

Example ``config.toml``::

    [global]
    log_level = "DEBUG"
    log_file = "logs/reflector.log"
    log_json = true

    [reflector]
    zero_as_null = true
    denied_types = ["java.lang.Runtime", "java.lang.System"]
    host_modules = ["myproject.bindings"]
    import_roots = ["myproject"]

    [reflector.aliases]
    "com.example.Crypto" = "myproject.crypto.Crypto"

References:
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Bridge Config ==================================


@dataclass(frozen=False, slots=True)
class ReflectorConfig:
    """Configuration for the native-invocation bridge.

    Controls argument coercion heuristics, host type resolution and
    diagnostic verbosity of :class:`reflector.core.engine.MethodReflector`.
    """

    # Argument marshaling
    zero_as_null: bool = True

    # Diagnostics
    log_traces: bool = True

    # Host type resolution
    denied_types: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)
    host_modules: list[str] = field(default_factory=list)
    import_roots: list[str] = field(default_factory=list)


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity and destinations."""

    log_level: str = "WARNING"
    log_file: str | None = None
    log_json: bool = False
    console_logging: bool = True
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class AppConfig:
    """Master configuration aggregating the global and bridge settings.

    Usage:
        >>> config = AppConfig.load()                  # from default path
        >>> config = AppConfig.load("custom.toml")     # from custom path
        >>> config.reflector.zero_as_null
        True
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    reflector: ReflectorConfig = field(default_factory=ReflectorConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> AppConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys gracefully fall back to dataclass
        defaults -- no ``KeyError`` is raised.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`AppConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            # Fall back to pure defaults when the default file is absent.
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            reflector=cls._build_section(ReflectorConfig, raw.get("reflector", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are silently ignored so that
        forward-compatible config files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> AppConfig:
    """Module-level convenience wrapper around :meth:`AppConfig.load`.

    Caches the result so that repeated imports share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = AppConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
