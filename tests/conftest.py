"""Shared pytest configuration."""

pytest_plugins = ["mp_reliability.testing.fixtures"]
