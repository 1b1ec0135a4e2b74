"""Signal Adapter - turns SIGINT/SIGTERM into a shutdown token.

Invariants:
    - The token is set at most once; later signals are logged and ignored
    - Handlers live on the event loop (loop.add_signal_handler), never signal.signal
"""

import asyncio
import logging
import signal

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop, shutdown: asyncio.Event,
) -> None:
    """Set `shutdown` when the process receives SIGINT or SIGTERM."""

    def _on_signal(sig: signal.Signals) -> None:
        if shutdown.is_set():
            logger.warning(
                f"Received {sig.name} during shutdown, ignoring",
                extra={"signal": sig.name},
            )
            return
        logger.info(
            f"Received {sig.name}, shutting down",
            extra={"signal": sig.name},
        )
        shutdown.set()

    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, _on_signal, sig)


def remove_signal_handlers(loop: asyncio.AbstractEventLoop) -> None:
    for sig in SHUTDOWN_SIGNALS:
        loop.remove_signal_handler(sig)
