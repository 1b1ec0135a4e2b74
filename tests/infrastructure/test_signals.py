"""Signal Adapter - verifies SIGTERM/SIGINT set the shutdown token exactly once.

Design Decisions:
    - Real signals sent to the test process; handlers are installed before
      os.kill and removed in finally, so the default action never runs
"""

import asyncio
import logging
import os
import signal

import pytest

from student_api.infrastructure.signals import (
    install_signal_handlers, remove_signal_handlers,
)


@pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
async def test_signal_sets_shutdown_token(sig):
    loop = asyncio.get_running_loop()
    shutdown = asyncio.Event()
    install_signal_handlers(loop, shutdown)
    try:
        os.kill(os.getpid(), sig)
        await asyncio.wait_for(shutdown.wait(), timeout=2)
    finally:
        remove_signal_handlers(loop)

    assert shutdown.is_set()


async def test_second_signal_is_ignored(caplog):
    caplog.set_level(logging.INFO, logger="student_api.infrastructure.signals")
    loop = asyncio.get_running_loop()
    shutdown = asyncio.Event()
    install_signal_handlers(loop, shutdown)
    try:
        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.wait_for(shutdown.wait(), timeout=2)
        os.kill(os.getpid(), signal.SIGINT)
        await asyncio.sleep(0.1)
    finally:
        remove_signal_handlers(loop)

    assert "Received SIGTERM, shutting down" in caplog.text
    assert "Received SIGINT during shutdown, ignoring" in caplog.text


async def test_remove_signal_handlers_uninstalls():
    loop = asyncio.get_running_loop()
    install_signal_handlers(loop, asyncio.Event())
    remove_signal_handlers(loop)

    assert loop.remove_signal_handler(signal.SIGTERM) is False
    assert loop.remove_signal_handler(signal.SIGINT) is False
