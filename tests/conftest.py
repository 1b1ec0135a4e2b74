"""Root conftest - shared test configuration.

Invariants:
    - Configuration env vars never leak in from the developer's shell
    - Route tests get an app built from explicit test Settings
    - Tests that call setup_logging() restore the root logger afterwards
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from student_api.config import Settings
from student_api.main import create_app

CONFIG_ENV_VARS = (
    "CONFIG_PATH", "ENV", "STORAGE_PATH", "HTTP_SERVER",
    "HTTP_SERVER__ADDRESS", "HTTP_SERVER__SHUTDOWN_TIMEOUT",
    "LOG_LEVEL", "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return Settings(
        env="test",
        storage_path="/tmp/s.db",
        http_server={"address": "127.0.0.1:0", "shutdown_timeout": 5},
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
async def client(app):
    """In-process client - no socket, no lifespan."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def isolated_logging():
    """Undo root handlers/level changes made by setup_logging()."""
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    for handler in list(logging.root.handlers):
        if handler not in handlers:
            logging.root.removeHandler(handler)
    logging.root.setLevel(level)
