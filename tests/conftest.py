import pytest

import logface.providers.loguru  # noqa: F401  registers "loguru"
import logface.providers.structlog  # noqa: F401  registers "structlog"
from logface import factory as log_factory
from logface.options import build_options, with_level
from logface.testing import RecordingLogger, RecordingProvider
from logface.types import LogLevel


@pytest.fixture(autouse=True)
def fresh_factory():
    """
    Give every test its own process-wide registry.
    Cached loggers, custom providers and the global logger never leak between tests.
    """
    log_factory.reset_log_factory()
    yield log_factory.get_log_factory()
    log_factory.reset_log_factory()


@pytest.fixture
def registry():
    """An isolated registry holding the builtin providers."""
    return log_factory.new_registry()


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "logs" / "app.log"


@pytest.fixture
def recording_provider():
    return RecordingProvider()


@pytest.fixture
def recording_logger():
    return RecordingLogger("test", build_options(with_level(LogLevel.DEBUG)))
