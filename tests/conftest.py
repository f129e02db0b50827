import logging

import pytest

from reflector.core.engine import MethodReflector
from shared.config import AppConfig, GlobalConfig, ReflectorConfig
from shared.logger import BridgeLogger


class RecordingHandler(logging.Handler):

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)

    def at(self, level):
        return [r for r in self.records if r.levelno == level]


@pytest.fixture
def config():
    return AppConfig(
        global_settings=GlobalConfig(console_logging=False),
        reflector=ReflectorConfig(
            import_roots=["tests"],
            denied_types=["java.lang.Runtime"],
        ),
    )


@pytest.fixture
def logger():
    log = BridgeLogger("tests", log_level="DEBUG", console_output=False)
    yield log
    log.underlying.handlers.clear()


@pytest.fixture
def records(logger):
    handler = RecordingHandler()
    logger.underlying.addHandler(handler)
    return handler


@pytest.fixture
def reflect(config, logger):
    def build(signature, is_static=False):
        return MethodReflector(signature, is_static, config=config, logger=logger)
    return build
