"""
JSON-логи в stdout (+ опционально ротируемый файл).
request_id проставляется фильтром из contextvar, который выставляет middleware запроса.
"""
import json
import logging
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from starlette.requests import Request

from notestore.core.config import settings

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

access_logger = logging.getLogger("notestore.access")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; only whitelisted extra fields are copied."""

    EXTRA_FIELDS = (
        "request_id", "user_id", "note_id", "order_id", "receipt", "amount",
        "currency", "items", "state", "sink", "path", "method", "status_code",
        "latency_ms", "ip", "attempts", "error",
    )

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            {f: getattr(record, f) for f in self.EXTRA_FIELDS if getattr(record, f, None) is not None}
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        # default=str: enum-состояния и Path в extra
        return json.dumps(payload, ensure_ascii=False, default=str)


def _handler(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    return handler


def configure_logging(level: str | None = None) -> None:
    formatter = JsonFormatter()
    handlers = [_handler(logging.StreamHandler(), formatter)]
    if settings.log_file:
        handlers.append(
            _handler(
                RotatingFileHandler(
                    settings.log_file,
                    maxBytes=settings.log_max_bytes,
                    backupCount=settings.log_backup_count,
                ),
                formatter,
            )
        )
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    root.handlers = handlers
    # Свой access-лог ниже; дублировать uvicorn не нужно
    logging.getLogger("uvicorn.access").disabled = True


async def log_requests(request: Request, call_next):
    """HTTP middleware: request id (из заголовка или новый), латентность, статус."""
    request_id = request.headers.get(settings.request_id_header) or uuid.uuid4().hex
    token = request_id_var.set(request_id)
    start = time.monotonic()
    try:
        response = await call_next(request)
    except Exception:
        access_logger.exception(
            "request_unhandled",
            extra={"path": request.url.path, "method": request.method},
        )
        raise
    finally:
        request_id_var.reset(token)
    response.headers[settings.request_id_header] = request_id
    access_logger.info(
        "request",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "latency_ms": round((time.monotonic() - start) * 1000, 1),
        },
    )
    return response
