"""Process Entry Point - verifies exit codes for config failure, startup failure and SIGTERM.

Invariants:
    - Config failures, bind failures and app startup failures -> exit code 1,
      no exception escapes
    - SIGTERM -> graceful stop, exit code 0
"""

import asyncio
import logging
import os
import signal
import socket
from contextlib import asynccontextmanager

from fastapi import FastAPI

import student_api.__main__ as entrypoint
from student_api.__main__ import main, serve
from student_api.config import Settings


def test_main_without_config_path_exits_1(isolated_logging, caplog):
    caplog.set_level(logging.CRITICAL, logger="student_api")
    assert main([]) == 1
    assert "CONFIG_PATH is required" in caplog.text


def test_main_with_missing_file_exits_1(isolated_logging, tmp_path):
    assert main(["-config", str(tmp_path / "missing.yaml")]) == 1


def test_main_with_invalid_config_exits_1(isolated_logging, tmp_path):
    path = tmp_path / "local.yaml"
    path.write_text('env: "dev"\n', encoding="utf-8")
    assert main(["-config", str(path)]) == 1


def test_main_with_unparseable_env_override_exits_1(
    isolated_logging, tmp_path, monkeypatch, caplog,
):
    path = tmp_path / "local.yaml"
    path.write_text(
        'env: "dev"\nstorage_path: "/tmp/s.db"\n'
        'http_server:\n  address: "127.0.0.1:8080"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("HTTP_SERVER", "127.0.0.1:9090")
    caplog.set_level(logging.CRITICAL, logger="student_api")

    assert main(["-config", str(path)]) == 1
    assert "http_server" in caplog.text


async def test_serve_bind_failure_exits_1():
    occupied = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    occupied.bind(("127.0.0.1", 0))
    occupied.listen()
    try:
        port = occupied.getsockname()[1]
        settings = Settings(http_server={"address": f"127.0.0.1:{port}"})
        assert await serve(settings) == 1
    finally:
        occupied.close()


async def test_serve_stops_on_sigterm_and_exits_0(caplog):
    caplog.set_level(logging.INFO)
    settings = Settings(
        env="test", http_server={"address": "127.0.0.1:0", "shutdown_timeout": 2},
    )
    serve_task = asyncio.create_task(serve(settings))
    # serve() installs its handlers before its first await
    await asyncio.sleep(0.5)

    os.kill(os.getpid(), signal.SIGTERM)
    exit_code = await asyncio.wait_for(serve_task, timeout=5)

    assert exit_code == 0
    assert "Received SIGTERM, shutting down" in caplog.text
    assert "Server stopped successfully" in caplog.text


async def test_serve_app_startup_failure_exits_1(monkeypatch, caplog):
    @asynccontextmanager
    async def failing_lifespan(app):
        raise RuntimeError("storage unavailable")
        yield

    monkeypatch.setattr(
        entrypoint, "create_app", lambda settings: FastAPI(lifespan=failing_lifespan),
    )
    caplog.set_level(logging.CRITICAL, logger="student_api")
    settings = Settings(env="test", http_server={"address": "127.0.0.1:0"})

    assert await asyncio.wait_for(serve(settings), timeout=5) == 1
    assert "server stopped unexpectedly" in caplog.text
