"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog

from mp_reliability.observability.logging.processors import ReliabilityContextProcessor

if TYPE_CHECKING:
    from mp_reliability.config.settings import ReliabilitySettings


class JsonLoggerFactory:
    """Configure structlog for JSON output routed through stdlib ``logging``."""

    @staticmethod
    def configure(
        level: int | str = logging.INFO,
        *,
        service: str | None = None,
        environment: str | None = None,
    ) -> None:
        shared_processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]
        if service is not None:
            shared_processors.insert(0, ReliabilityContextProcessor(service, environment))

        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level.upper() if isinstance(level, str) else level)

    @staticmethod
    def configure_from_settings(settings: ReliabilitySettings) -> None:
        JsonLoggerFactory.configure(
            settings.log_level,
            service=settings.service_name,
            environment=settings.environment,
        )


__all__ = ["JsonLoggerFactory"]
