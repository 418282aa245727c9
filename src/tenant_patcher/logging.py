"""Structured logging for tenant installs.

Every record carries ``trace_id``, ``app`` and ``tenant``. Inside
``install_context`` they hold the values for the running install, and
outside it they are ``-``, so JSON lines from one install can be grouped
without parsing messages.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from tenant_patcher.config import Settings
from tenant_patcher.ids import new_id

REQUEST_FIELDS = ("trace_id", "app", "tenant")


def _fill_request_fields(
    _logger: object, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    for key in REQUEST_FIELDS:
        event_dict.setdefault(key, "-")
    return event_dict


def configure_logging(settings: Settings, *, json_output: bool | None = None) -> None:
    """Route stdlib and structlog records through one structlog formatter.

    Output is JSON when ``APP_ENV`` is prod and console text otherwise,
    unless ``json_output`` forces a choice.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if json_output is None:
        json_output = settings.app_env == "prod"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _fill_request_fields,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)
    # httpx logs every request at INFO; keep it for DEBUG runs only.
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))


@contextmanager
def install_context(app: str, tenant: str) -> Iterator[str]:
    """Bind a fresh trace id plus app and tenant for the duration of one install."""
    trace_id = new_id("trc")
    structlog.contextvars.bind_contextvars(trace_id=trace_id, app=app, tenant=tenant)
    try:
        yield trace_id
    finally:
        structlog.contextvars.unbind_contextvars(*REQUEST_FIELDS)
