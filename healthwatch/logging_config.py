"""
Process-wide logging for HealthWatch.

Service modules log structured events through structlog; the API middleware
logs through stdlib loggers with ``extra`` fields. Both end up on one root
handler owned by this module, so calling setup_logging() again (the API, the
CLI and main all do) never stacks handlers or reopens the log file.
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import EventDict, Processor

from healthwatch.config import LoggingConfig, settings

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("LiteLLM", "httpx", "httpcore")

_handler: Optional[logging.Handler] = None


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the service name and environment."""
    event_dict.setdefault("service", "healthwatch")
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def _build_handler(config: LoggingConfig) -> logging.Handler:
    if config.output == "stdout":
        return logging.StreamHandler(sys.stdout)
    if config.output == "stderr":
        return logging.StreamHandler(sys.stderr)
    return logging.FileHandler(config.output, mode="a", encoding="utf-8")


def _processors(config: LoggingConfig) -> List[Processor]:
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if config.format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(config: Optional[LoggingConfig] = None, force: bool = False) -> None:
    """
    Configure logging once per process.

    Args:
        config: Logging configuration (defaults to settings.logging)
        force: Replace an existing configuration, closing its handler
    """
    global _handler

    if _handler is not None and not force:
        return

    config = config or settings.logging
    root = logging.getLogger()

    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()

    handler = _build_handler(config)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    _handler = handler

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=_processors(config),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
