"""
structlog configuration for the evaluation service.

Log lines carry the service name, version and environment. Anything that
looks like a provider credential is masked before it reaches a renderer.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from evaluation_api.core.config import settings
from evaluation_api.core.constants import SERVICE_VERSION

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"apikey", "api_key", "credentials", "authorization"})

# Loggers that would otherwise log every request at INFO
NOISY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx", "httpcore")


def add_service_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp every entry with service name, version and environment."""
    event_dict["service"] = settings.app_name
    event_dict["version"] = SERVICE_VERSION
    event_dict["env"] = settings.app_env
    return event_dict


def _mask(value: Any) -> Any:
    if isinstance(value, MutableMapping):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else _mask(item)
            for key, item in value.items()
        }
    return value


def redact_credentials(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace credential-bearing fields, including nested ones, with a placeholder."""
    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _mask(event_dict[key])
    return event_dict


def _renderer() -> Processor:
    if settings.is_development:
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def setup_logging() -> None:
    """
    Route structlog and stdlib logging through one stdout handler.

    Development renders colored console lines, every other environment
    renders one JSON object per line.
    """
    level = logging.getLevelName(settings.log_level)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
        add_service_context,
        redact_credentials,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer()],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("evaluation_api").setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("Evaluating test case", provider_id="openai", steps=4)
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Bind key/value pairs to every log line emitted inside the block.

    Example:
        with LogContext(request_id="req_abc123", provider_id="openai"):
            logger.info("Evaluation complete")
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = {key: value for key, value in kwargs.items() if value is not None}

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.context)
