"""Log setup for MLMS: one stdout handler, request correlation, optional JSON lines."""

import contextvars
import logging
import sys
import traceback
import uuid
from pathlib import Path
from typing import Any

from pythonjsonlogger.json import JsonFormatter

# Libraries that are too chatty at DEBUG/INFO. Engine SQL echo is switched by DATABASE_ECHO,
# and uvicorn.access would duplicate the line RequestLoggingMiddleware already writes.
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio", "uvicorn.access")

_TEXT_FORMAT = "%(asctime)s │ %(levelname)-7s │ %(name)s:%(lineno)d │ %(message)s"
_JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

# Hey future me, a ContextVar follows each asyncio task, so two requests in flight never see
# each other's id. Outside a request (startup, shutdown) it is just "".
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)


def get_correlation_id() -> str:
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id to the current context and return it.

    A missing or empty value (no X-Correlation-ID header) gets a fresh uuid4.
    """
    value = correlation_id or str(uuid.uuid4())
    correlation_id_var.set(value)
    return value


class CorrelationIdFilter(logging.Filter):
    """Stamps ``record.correlation_id`` so both formatters can print it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


class CompactExceptionFormatter(logging.Formatter):
    """Console formatter that prints tracebacks as a short cause chain.

    The root cause comes first. Under each ``╰─►`` line only frames from the
    mlms package are kept, so an IntegrityError raised deep in SQLAlchemy
    shows up next to the repository call that triggered it.
    """

    package_marker = "mlms"

    def _own_frames(self, exc: BaseException) -> list[str]:
        out: list[str] = []
        for frame in traceback.extract_tb(exc.__traceback__):
            if "/site-packages/" in frame.filename or self.package_marker not in frame.filename:
                continue
            name = Path(frame.filename).name
            out.append(f'    File "{name}", line {frame.lineno}, in {frame.name}')
            if frame.line:
                out.append(f"      {frame.line.strip()}")
        return out

    def formatException(self, ei: Any) -> str:
        exc_value = ei[1]
        if exc_value is None:
            return ""

        chain: list[BaseException] = []
        while exc_value is not None and exc_value not in chain:
            chain.append(exc_value)
            exc_value = exc_value.__cause__ or exc_value.__context__

        lines: list[str] = []
        for exc in reversed(chain):
            lines.append(f"╰─► {type(exc).__name__}: {exc}")
            lines.extend(self._own_frames(exc))
        return "\n".join(lines)


class CustomJsonFormatter(JsonFormatter):
    """One JSON object per line with level, logger, source location and correlation id."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            timestamp=self.formatTime(record, self.datefmt),
            level=record.levelname,
            logger=record.name,
            source=f"{record.module}.{record.funcName}:{record.lineno}",
        )
        correlation_id = getattr(record, "correlation_id", "")
        if correlation_id:
            log_record["correlation_id"] = correlation_id
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return CustomJsonFormatter(_JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return CompactExceptionFormatter(fmt=_TEXT_FORMAT, datefmt="%H:%M:%S")


# Listen future me, the lifespan calls this once per app start. Existing root handlers are
# dropped first, otherwise every TestClient startup would add another stdout handler.
def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    app_name: str = "mlms",
) -> None:
    """Install the single root handler.

    Args:
        log_level: Level name; anything logging doesn't know becomes INFO
        json_format: JSON lines for log shippers instead of the console layout
        app_name: Included in the "Logging configured" line
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(_build_formatter(json_format))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "app_name": app_name,
            "log_level": logging.getLevelName(level),
            "json_format": json_format,
        },
    )
