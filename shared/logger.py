"""
Reflector Structured Logger
============================

Provides :class:`BridgeLogger`, a structured logging facade that emits
both human-friendly Rich console output and machine-parseable JSON logs
to rotating log files.

Every record carries the bridge *component* that produced it and, where
one is bound, the method *signature* being reflected, so that a failed
native call can be traced back to the exact smali reference.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import threading
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from shared.config import GlobalConfig

# ---------------------------------------------------------------------------
# Rich theme for console log output
# ---------------------------------------------------------------------------
_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)

_CONTEXT_FIELDS: tuple[str, ...] = ("component", "signature")


# ========================== JSON Formatter =================================


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {
          "timestamp": "...",
          "level": "WARNING",
          "logger": "reflector.engine",
          "message": "...",
          "component": "engine",
          "signature": "Ljava/lang/Integer;->parseInt(Ljava/lang/String;)I",
          "extra": { ... },
          "exc_info": "..."
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in _CONTEXT_FIELDS:
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val

        # Arbitrary extra data from keyword arguments
        extra = getattr(record, "bridge_extra", None)
        if extra is not None:
            entry["extra"] = extra

        # Exception traceback
        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


# ========================== Rich Console Handler ===========================


class _ColorConsoleHandler(RichHandler):
    """Thin wrapper over :class:`rich.logging.RichHandler` applying the
    bridge log theme on stderr.
    """

    def __init__(self, **kwargs: Any) -> None:
        console = Console(theme=_LOG_THEME, stderr=True)
        super().__init__(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


# ========================== BridgeLogger ===================================


class BridgeLogger:
    """Structured, context-aware logger for the reflection bridge.

    Each instance is bound to a *component* (e.g. ``"engine"``) and may
    carry further immutable context through :meth:`bind`.  Bound views
    share the underlying :class:`logging.Logger` and its handlers, so
    binding per reflected method is cheap and safe across threads.

    Usage::

        log = BridgeLogger("engine", log_file="reflector.log", json_logs=True)
        method_log = log.bind(signature="Lcom/Foo;->bar()V")
        method_log.warning("Failed to reflect: %s", reason)

    Args:
        component:       Bridge component name; the stdlib logger is
                         named ``reflector.<component>``.
        log_level:       Minimum severity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file:        Path to the rotating log file. ``None`` disables file logging.
        json_logs:       If ``True`` the file handler emits JSON lines.
        max_bytes:       Maximum log-file size before rotation (default 10 MiB).
        backup_count:    Number of rotated backup files to keep.
        console_output:  If ``True`` attach a colour Rich console handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "WARNING",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._component = component
        self._context: dict[str, Any] = {}

        self._logger = logging.getLogger(f"reflector.{component}")
        self._logger.setLevel(
            getattr(logging, log_level.upper(), logging.WARNING)
        )
        self._logger.propagate = False

        # Prevent duplicate handlers on re-instantiation
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        # -- Console handler (Rich colour-coded) --
        if console_output:
            ch = _ColorConsoleHandler(level=log_level.upper())
            self._logger.addHandler(ch)

        # -- File handler (plain text or JSON lines, with rotation) --
        if log_file is not None:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
            if json_logs:
                fh.setFormatter(_JSONFormatter())
            else:
                fh.setFormatter(
                    logging.Formatter(
                        fmt=(
                            "%(asctime)s | %(levelname)-8s | "
                            "%(name)s | %(message)s"
                        ),
                        datefmt="%Y-%m-%dT%H:%M:%S%z",
                    )
                )
            self._logger.addHandler(fh)

    @classmethod
    def from_config(cls, component: str, settings: GlobalConfig) -> BridgeLogger:
        """Build a logger from the ``[global]`` configuration section."""
        return cls(
            component,
            log_level=settings.log_level,
            log_file=settings.log_file,
            json_logs=settings.log_json,
            console_output=settings.console_logging,
        )

    # ------------------------------------------------------------------ #
    #  Context binding
    # ------------------------------------------------------------------ #

    def bind(self, **context: Any) -> BridgeLogger:
        """Return a view of this logger with additional context fields.

        The returned view shares handlers with its parent; neither is
        mutated by later binds.
        """
        child = object.__new__(BridgeLogger)
        child._component = self._component
        child._logger = self._logger
        child._context = {**self._context, **context}
        return child

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Inject bridge context into the log record via *extra*."""
        extra = kwargs.pop("extra", {}) or {}

        # Collect non-standard keyword args as bridge_extra
        bridge_extra_data: dict[str, Any] = {}
        standard_keys = {"exc_info", "stack_info", "stacklevel"}
        for key in list(kwargs):
            if key not in standard_keys:
                bridge_extra_data[key] = kwargs.pop(key)

        extra["component"] = self._component
        extra["signature"] = self._context.get("signature")
        other = {k: v for k, v in self._context.items() if k != "signature"}
        other.update(bridge_extra_data)
        if other:
            extra["bridge_extra"] = other

        kwargs["extra"] = extra
        return kwargs

    def is_enabled_for(self, level: int) -> bool:
        """Whether a record at *level* would be emitted."""
        return self._logger.isEnabledFor(level)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a DEBUG-level message."""
        kwargs = self._enrich(kwargs)
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an INFO-level message."""
        kwargs = self._enrich(kwargs)
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a WARNING-level message."""
        kwargs = self._enrich(kwargs)
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an ERROR-level message."""
        kwargs = self._enrich(kwargs)
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an ERROR-level message with full exception traceback."""
        kwargs["exc_info"] = kwargs.get("exc_info", True)
        kwargs = self._enrich(kwargs)
        self._logger.error(msg, *args, **kwargs)

    # ------------------------------------------------------------------ #
    #  Timing helper
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Context manager for measuring and logging elapsed time."""

        def __init__(self, logger_inst: BridgeLogger, label: str) -> None:
            self._logger = logger_inst
            self._label = label
            self._start: float = 0.0

        def __enter__(self) -> BridgeLogger._TimingContext:
            self._start = time.perf_counter()
            return self

        def __exit__(self, *exc: Any) -> None:
            self._logger.debug(
                "Completed: %s (%.6f sec)",
                self._label,
                self.elapsed,
            )

        @property
        def elapsed(self) -> float:
            """Seconds elapsed since entering the context."""
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs the elapsed time at DEBUG on exit.

        Usage::

            with log.timed("native call"):
                result = target(*args)
        """
        return self._TimingContext(self, label)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def component(self) -> str:
        """Name of the bridge component this logger is bound to."""
        return self._component

    @property
    def context(self) -> dict[str, Any]:
        """A copy of the bound context fields."""
        return dict(self._context)

    @property
    def underlying(self) -> logging.Logger:
        """Direct access to the stdlib :class:`logging.Logger`."""
        return self._logger


# ========================= Module-level convenience ========================

_SHARED_LOGGERS: dict[str, tuple[tuple[Any, ...], BridgeLogger]] = {}
_SHARED_LOCK = threading.Lock()


def get_logger(component: str, settings: GlobalConfig) -> BridgeLogger:
    """Return the process-wide :class:`BridgeLogger` for *component*.

    Built once per component and reused while *settings* are unchanged,
    so constructing many reflectors never tears down live handlers.
    """
    key = (
        settings.log_level,
        settings.log_file,
        settings.log_json,
        settings.console_logging,
    )
    with _SHARED_LOCK:
        cached = _SHARED_LOGGERS.get(component)
        if cached is None or cached[0] != key:
            cached = (key, BridgeLogger.from_config(component, settings))
            _SHARED_LOGGERS[component] = cached
        return cached[1]
