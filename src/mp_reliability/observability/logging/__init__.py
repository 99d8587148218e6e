"""Observability – structlog configuration and logger helpers."""
from mp_reliability.observability.logging.factory import JsonLoggerFactory
from mp_reliability.observability.logging.processors import ReliabilityContextProcessor, get_logger

__all__ = [
    "JsonLoggerFactory",
    "ReliabilityContextProcessor",
    "get_logger",
]
