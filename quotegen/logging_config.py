"""
Logging configuration for Quotegen.

Text output for development, JSON for production. Every handler carries a
filter that redacts API keys and bearer tokens, since request logging sits
right next to the OpenRouter credentials.
"""

import json
import logging
import re
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

# Context variable for request ID tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set a request ID in context. Generates one if not provided."""
    rid = request_id or str(uuid.uuid4())[:8]
    request_id_var.set(rid)
    return rid


class SensitiveDataFilter(logging.Filter):
    """Filter to redact credentials from log records."""

    PATTERNS = [
        # OpenRouter keys (sk-or-v1-...)
        (re.compile(r'(sk-or-[a-zA-Z0-9]{0,3}-?)[a-zA-Z0-9_-]{8,}', re.I), r'\1[REDACTED]'),
        # Bearer tokens
        (re.compile(r'(Bearer\s+)([a-zA-Z0-9_.-]+)', re.I), r'\1[REDACTED]'),
        # api_key=..., "api_key": "..."
        (re.compile(r'(api[_-]?key["\']?\s*[:=]\s*["\']?)([a-zA-Z0-9_-]{8,})', re.I), r'\1[REDACTED]'),
    ]

    def _redact(self, value: str) -> str:
        for pattern, replacement in self.PATTERNS:
            value = pattern.sub(replacement, value)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        # Redact the rendered message so tokens split across msg and args are caught
        record.msg = self._redact(record.getMessage())
        record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_data['request_id'] = request_id

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        extra_data = getattr(record, 'extra_data', None)
        if extra_data:
            log_data.update(extra_data)

        return json.dumps(log_data)


class TextFormatter(logging.Formatter):
    """Plain text formatter: timestamp, level, request id, logger, message."""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s %(levelname)-8s %(rid)s%(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )

    def format(self, record: logging.LogRecord) -> str:
        request_id = get_request_id()
        record.rid = f"[{request_id}] " if request_id else ""
        return super().format(record)


def setup_logging(level: str = "INFO", format_type: str = "text") -> logging.Logger:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "text" for development, "json" for production

    Returns:
        Root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    formatter = JSONFormatter() if format_type.lower() == "json" else TextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(console_handler)

    # httpx logs every request line at INFO
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)

    return root_logger


class LoggingMiddleware:
    """
    ASGI middleware for request logging.

    Adds request ID to context and logs request/response.
    """

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger('quotegen.http')

    async def __call__(self, scope, receive, send):
        if scope['type'] != 'http':
            await self.app(scope, receive, send)
            return

        request_id = set_request_id()
        method = scope.get('method', 'UNKNOWN')
        path = scope.get('path', '/')

        response_status = [None]

        async def send_wrapper(message):
            if message['type'] == 'http.response.start':
                response_status[0] = message.get('status', 0)
                message.setdefault('headers', [])
                message['headers'] = list(message['headers']) + [
                    (b'x-request-id', request_id.encode())
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            status = response_status[0] or 0
            level = logging.INFO if status < 400 else logging.WARNING if status < 500 else logging.ERROR
            self.logger.log(
                level,
                f"{method} {path} -> {status}",
                extra={'extra_data': {
                    'status': status,
                    'request_id': request_id,
                }}
            )
