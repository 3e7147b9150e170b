"""
Structured logging for the blog backend.

Every record, whether it comes from structlog or from a stdlib logger
(uvicorn, sqlalchemy), goes through the same sanitizing chain before it is
rendered: pretty console output in development, JSON lines everywhere else.

Redacted before rendering:
- credential headers (``Authorization``, ``Cookie`` ...)
- event fields named like secrets (``password``, ``token`` ...)
- JWTs and email addresses found inside any string value

Control characters are escaped so user-supplied titles and usernames cannot
forge extra log lines.

Examples
--------
>>> from app.monitoring import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Blog created", slug="hello-world")
"""

from logging import INFO, Handler, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path as SyncPath
from re import Pattern
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    merge_contextvars,
)
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import JSONRenderer, StackInfoRenderer, UnicodeDecoder, add_log_level, format_exc_info
from structlog.processors import json as struct_json
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from app.configs.settings import settings
from app.utils.helpers import today_str

REDACTED = "[REDACTED]"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "proxy-authorization",
        "x-api-key",
    },
)

SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "password_hash",
        "new_password",
        "token",
        "access_token",
        "secret",
        "api_secret",
    },
)

# JWTs contain dots and must be matched before emails
PII_PATTERNS: list[tuple[Pattern, str]] = [
    (re_compile(r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"), "[REDACTED_JWT]"),
    (re_compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
]

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Escape line breaks and tabs, drop NUL bytes.

    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(CONTROL_CHARS)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of ``headers`` with credential values replaced.

    >>> sanitize_headers({"Authorization": "Bearer abc", "Accept": "json"})
    {'Authorization': '[REDACTED]', 'Accept': 'json'}
    """
    return {k: REDACTED if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def redact_pii(message: str) -> str:
    """
    Replace JWTs and email addresses inside free text.

    >>> redact_pii("Login for jane@example.com")
    'Login for [REDACTED_EMAIL]'
    """
    for pattern, replacement in PII_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def sanitize_event_dict(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Structlog processor that scrubs an event before it is rendered.

    Secret-named fields are blanked outright, a ``headers`` mapping is run
    through :func:`sanitize_headers` and every other string is escaped and
    PII-redacted.
    """
    for key, value in event_dict.items():
        lowered = key.lower()
        if lowered in SENSITIVE_FIELDS:
            event_dict[key] = REDACTED
        elif lowered == "headers" and isinstance(value, dict):
            event_dict[key] = sanitize_headers(value)
        elif isinstance(value, str):
            event_dict[key] = redact_pii(sanitize_log_message(value))

    return event_dict


def _renderer(*, colors: bool) -> Processor:
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(
            colors=colors,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    return JSONRenderer(serializer=struct_json.dumps)


def _attach(handler: Handler, *, colors: bool) -> None:
    """Give ``handler`` the sanitizing formatter and add it to the root logger."""
    handler.setFormatter(
        ProcessorFormatter(
            processors=[
                sanitize_event_dict,
                ProcessorFormatter.remove_processors_meta,
                _renderer(colors=colors),
            ],
            # Applied to records from plain stdlib loggers
            foreign_pre_chain=[
                merge_contextvars,
                add_log_level,
                add_timestamp,
                ExtraAdder(),
            ],
        ),
    )
    root.addHandler(handler)


def configure_logging() -> None:
    """
    Route structlog and stdlib logging through the sanitizing formatter.

    Safe to call more than once; existing root handlers are replaced.
    """
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            add_timestamp,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    _attach(StreamHandler(), colors=True)

    if settings.LOG_TO_FILE:
        log_file = SyncPath(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        )
        file_handler.setLevel(INFO)
        _attach(file_handler, colors=False)


def get_logger(name: str) -> BoundLogger:
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    """Attach ``request_id`` to every log line emitted by the current request."""
    bind_contextvars(request_id=request_id)


def get_request_id() -> str:
    return get_contextvars().get("request_id", "N/A")


def clear_context() -> None:
    clear_contextvars()
