"""Shared logging helpers for multi-step operations.

USAGE:
    from mlms.infrastructure.observability.logger_template import log_operation

    logger = logging.getLogger(__name__)

    async with log_operation(logger, "artist_delete", artist_id=7):
        await delete_everything()
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any


# Yo, this wraps an operation in started/completed/failed log lines with duration_ms attached.
# The **context kwargs land in `extra` on every line. On failure it logs with the traceback
# and RE-RAISES - it never decides what the caller should do about the error.
@asynccontextmanager
async def log_operation(
    logger: logging.Logger,
    operation: str,
    **context: Any,
) -> AsyncIterator[None]:
    """Bracket a block with "<operation>.started" and "<operation>.completed" lines.

    If the block raises, "<operation>.failed" is logged at ERROR with the
    exception type and the traceback, then the exception propagates.

    Args:
        logger: Module logger
        operation: Operation name (e.g., "album_delete", "playlist_fork")
        **context: Additional fields to include in logs (e.g., album_id=3)
    """
    start = time.perf_counter()
    logger.info(f"{operation}.started", extra=context)

    try:
        yield
    except Exception as e:
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.error(
            f"{operation}.failed",
            extra={
                **context,
                "duration_ms": duration_ms,
                "error": str(e),
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        raise

    duration_ms = int((time.perf_counter() - start) * 1000)
    logger.info(f"{operation}.completed", extra={**context, "duration_ms": duration_ms})
