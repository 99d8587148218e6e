"""Observability – structured logging for the reliability services."""
