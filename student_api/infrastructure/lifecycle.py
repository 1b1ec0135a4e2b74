"""Server Lifecycle - bind, serve in the background, drain on a shutdown token.

Invariants:
    - initializing -> serving -> draining -> stopped; crash_stopped is reached
      from initializing (bind failure) or serving (serve loop ended on its own)
    - Only the shutdown token starts a drain; a crash never drains
    - Drain is bounded by http_server.shutdown_timeout; a timeout is stored in
      drain_error and logged, never raised
    - uvicorn's own signal capture is disabled; signals reach us only via the token

Design Decisions:
    - Socket bound here, not inside uvicorn: bind errors surface as
      ServerStartupError before any task starts, and port 0 reports its real port
    - uvicorn.Server driven directly (serve / should_exit / force_exit) instead of
      uvicorn.run, so the caller owns the event loop and the drain timer
    - SystemExit from uvicorn.Server.serve is turned into ServerCrashedError
      inside the serve task, so it never reaches the event loop
"""

import asyncio
import contextlib
import logging
import socket

import uvicorn
from fastapi import FastAPI

from student_api.config import Settings
from student_api.core.domain_types import LifecycleState
from student_api.core.errors import (
    DrainTimeoutError, ServerCrashedError, ServerStartupError,
)

logger = logging.getLogger(__name__)

STARTUP_POLL_SECONDS = 0.05
# After a drain timeout, how long cancelled requests get to unwind.
FORCE_EXIT_TIMEOUT_SECONDS = 1.0


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the caller."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class ServerLifecycle:
    """Runs one app on one listener from bind to stop.

    Usage:
        lifecycle = ServerLifecycle(settings, create_app(settings))
        await lifecycle.run(shutdown_event)
    """

    def __init__(self, settings: Settings, app: FastAPI):
        self._settings = settings
        self._app = app
        self._grace = settings.http_server.shutdown_timeout
        self._server: _Server | None = None
        self.state = LifecycleState.INITIALIZING
        self.drain_error: DrainTimeoutError | None = None
        self.bound_address: tuple[str, int] | None = None
        self.serving = asyncio.Event()

    async def run(self, shutdown: asyncio.Event) -> LifecycleState:
        """Serve until `shutdown` is set, then drain.

        Raises:
            ServerStartupError: the listener could not be bound.
            ServerCrashedError: the server stopped without a shutdown request.
        """
        sock = self._bind()
        self._server = _Server(uvicorn.Config(
            self._app,
            log_config=None,
            lifespan="on",
            timeout_graceful_shutdown=None,
        ))
        serve_task = asyncio.create_task(self._serve(sock), name="uvicorn-serve")
        try:
            if not await self._wait_until_started(serve_task):
                raise self._crash(serve_task)
            self._transition(LifecycleState.SERVING)
            self.serving.set()

            stop_task = asyncio.create_task(shutdown.wait())
            try:
                await asyncio.wait(
                    {serve_task, stop_task},
                    return_when=asyncio.FIRST_COMPLETED,
                )
            finally:
                stop_task.cancel()

            if not shutdown.is_set():
                raise self._crash(serve_task)
            await self._drain(serve_task)
        except asyncio.CancelledError:
            serve_task.cancel()
            raise
        finally:
            sock.close()
        return self.state

    async def _serve(self, sock: socket.socket) -> None:
        # uvicorn exits the process when the app lifespan fails to start
        try:
            await self._server.serve(sockets=[sock])
        except SystemExit as exc:
            raise ServerCrashedError(f"uvicorn exited with status {exc.code}") from exc

    def _bind(self) -> socket.socket:
        """Bind the listener socket (uvicorn calls listen on it)."""
        http = self._settings.http_server
        host, port = http.host, http.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            self._transition(LifecycleState.CRASH_STOPPED)
            raise ServerStartupError(http.address, str(exc)) from exc
        sock.set_inheritable(True)
        self.bound_address = sock.getsockname()[:2]
        logger.info(
            f"Bound listener on {self.bound_address[0]}:{self.bound_address[1]}",
            extra={"address": http.address},
        )
        return sock

    async def _wait_until_started(self, serve_task: asyncio.Task) -> bool:
        while not self._server.started:
            if serve_task.done():
                return False
            await asyncio.sleep(STARTUP_POLL_SECONDS)
        return True

    async def _drain(self, serve_task: asyncio.Task) -> None:
        """Stop accepting, wait up to the grace period for in-flight requests."""
        self._transition(LifecycleState.DRAINING)
        self._server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(serve_task), timeout=self._grace)
        except asyncio.TimeoutError:
            pending = list(self._server.server_state.tasks)
            self.drain_error = DrainTimeoutError(self._grace, len(pending))
            logger.error(
                f"Server shutdown failed: {self.drain_error.message}",
                extra={"error_code": self.drain_error.code},
            )
            self._server.force_exit = True
            for task in pending:
                task.cancel()
            try:
                await asyncio.wait_for(serve_task, timeout=FORCE_EXIT_TIMEOUT_SECONDS)
            except asyncio.TimeoutError:
                logger.error("Server did not exit after cancelling in-flight requests")

        self._transition(LifecycleState.STOPPED)
        if self.drain_error is None:
            logger.info("Server stopped successfully")

    def _crash(self, serve_task: asyncio.Task) -> ServerCrashedError:
        self._transition(LifecycleState.CRASH_STOPPED)
        if serve_task.cancelled():
            return ServerCrashedError("serve loop was cancelled")
        exc = serve_task.exception()
        if isinstance(exc, ServerCrashedError):
            return exc
        if exc is not None:
            error = ServerCrashedError(repr(exc))
            error.__cause__ = exc
            return error
        return ServerCrashedError("serve loop exited without a shutdown request")

    def _transition(self, state: LifecycleState) -> None:
        logger.info(
            f"Server {self.state.value} -> {state.value}",
            extra={"state": state.value},
        )
        self.state = state
