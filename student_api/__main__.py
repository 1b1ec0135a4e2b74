"""Process entry point - `python -m student_api` / `student-api`.

Invariants:
    - The only place that turns errors into exit codes
    - Exit 1 on configuration or server failure; exit 0 after a signal shutdown,
      even when the drain reported an error
"""

import asyncio
import logging
import sys
from typing import Sequence

from student_api.config import Settings, load_config
from student_api.core.errors import ConfigError, ServerCrashedError, ServerStartupError
from student_api.infrastructure.lifecycle import ServerLifecycle
from student_api.infrastructure.observability import setup_logging
from student_api.infrastructure.signals import (
    install_signal_handlers, remove_signal_handlers,
)
from student_api.main import create_app

logger = logging.getLogger("student_api")


async def serve(settings: Settings) -> int:
    """Run the server until SIGINT/SIGTERM; return the process exit code."""
    loop = asyncio.get_running_loop()
    shutdown = asyncio.Event()
    lifecycle = ServerLifecycle(settings, create_app(settings))

    install_signal_handlers(loop, shutdown)
    try:
        await lifecycle.run(shutdown)
    except (ServerStartupError, ServerCrashedError) as exc:
        logger.critical(exc.message, extra={"error_code": exc.code})
        return 1
    finally:
        remove_signal_handlers(loop)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    setup_logging()
    try:
        settings = load_config(argv)
    except ConfigError as exc:
        logger.critical(exc.message, extra={"error_code": exc.code})
        return 1

    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        f"Loaded config: env={settings.env.value} "
        f"storage_path={settings.storage_path} "
        f"address={settings.http_server.address}",
        extra={
            "env": settings.env.value,
            "storage_path": settings.storage_path,
            "address": settings.http_server.address,
        },
    )
    return asyncio.run(serve(settings))


if __name__ == "__main__":
    sys.exit(main())
