import logging

import structlog

from vigenere_breaker.core.config import Settings, get_settings

_configured = False


def configure_logging(settings: Settings | None = None, *, force: bool = False) -> None:
    """
    Configure structlog for the application.

    Development uses the console renderer; every other environment emits
    JSON lines. Safe to call more than once.
    """
    global _configured
    if _configured and not force:
        return

    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.use_json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str, **initial_values) -> structlog.typing.FilteringBoundLogger:
    """Return a bound logger tagged with the component name."""
    return structlog.get_logger(name).bind(component=name, **initial_values)
