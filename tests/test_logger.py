import json
import logging
import sys

from shared.config import GlobalConfig
from shared.logger import BridgeLogger, _JSONFormatter, get_logger


def test_bind_adds_context_without_mutating_parent():
    log = BridgeLogger("bind-test", console_output=False)
    child = log.bind(signature="Lcom/Foo;->bar()V", attempt=1)
    assert log.context == {}
    assert child.context == {"signature": "Lcom/Foo;->bar()V", "attempt": 1}
    assert child.underlying is log.underlying
    assert child.component == "bind-test"


def test_json_log_file(tmp_path):
    path = tmp_path / "logs" / "reflector.log"
    log = BridgeLogger("json-test", log_file=path, json_logs=True, console_output=False)
    log.bind(signature="Lcom/Foo;->bar()V").warning("Failed to reflect %s", "bar", reason="denied")
    for handler in log.underlying.handlers:
        handler.close()
    log.underlying.handlers.clear()

    entry = json.loads(path.read_text(encoding="utf-8").strip())
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "reflector.json-test"
    assert entry["message"] == "Failed to reflect bar"
    assert entry["component"] == "json-test"
    assert entry["signature"] == "Lcom/Foo;->bar()V"
    assert entry["extra"] == {"reason": "denied"}


def test_json_formatter_includes_traceback():
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord("reflector.x", logging.ERROR, __file__, 1, "oops", None, sys.exc_info())
    entry = json.loads(_JSONFormatter().format(record))
    assert "ValueError: bad" in entry["exc_info"]
    assert "signature" not in entry


def test_from_config_respects_level():
    log = BridgeLogger.from_config("level-test", GlobalConfig(log_level="ERROR", console_logging=False))
    assert not log.is_enabled_for(logging.WARNING)
    assert log.is_enabled_for(logging.ERROR)
    assert log.underlying.handlers == []


def test_reinstantiation_closes_replaced_handlers(tmp_path):
    first = BridgeLogger("reopen-test", log_file=tmp_path / "a.log", console_output=False)
    old = first.underlying.handlers[0]
    second = BridgeLogger("reopen-test", log_file=tmp_path / "b.log", console_output=False)
    assert old not in second.underlying.handlers
    assert old.stream is None
    for handler in second.underlying.handlers:
        handler.close()
    second.underlying.handlers.clear()


def test_get_logger_reuses_logger_while_settings_match(tmp_path):
    settings = GlobalConfig(console_logging=False, log_file=str(tmp_path / "shared.log"))
    log = get_logger("shared-test", settings)
    handlers = list(log.underlying.handlers)

    assert get_logger("shared-test", settings) is log
    assert log.underlying.handlers == handlers

    rebuilt = get_logger("shared-test", GlobalConfig(console_logging=False))
    assert rebuilt is not log
    assert rebuilt.underlying.handlers == []
