"""Config settings – ReliabilitySettings.

Every knob is read from ``RELIABILITY_<FIELD>`` environment variables, e.g.
``RELIABILITY_EVALUATION_INTERVAL_SECONDS=30``.
"""
from __future__ import annotations

import dataclasses
from typing import ClassVar, Sequence

from mp_reliability.config.settings.base import Settings
from mp_reliability.config.settings.factory import SettingsFactory
from mp_reliability.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from mp_reliability.config.validation import InvalidSettingValueError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclasses.dataclass
class ReliabilitySettings(Settings):
    _prefix: ClassVar[str] = "RELIABILITY"

    service_name: str = "mp-reliability"
    environment: str = "production"
    log_level: str = "INFO"

    alert_history_size: int = 1000
    alert_history_max_age_hours: float = 24.0
    execution_history_size: int = 5000
    execution_history_max_age_hours: float = 24.0

    sustain_minutes: float = 2.0
    sustain_change_tolerance: float = 0.2
    critical_burn_rate: float = 14.4
    exhausted_budget_percent: float = 1.0

    remediation_enabled: bool = True
    evaluation_interval_seconds: int = 60

    breaker_failure_threshold: int = 10
    breaker_window_seconds: float = 600.0
    breaker_recovery_seconds: float = 300.0

    def _validate(self) -> None:
        positive = (
            "alert_history_size",
            "alert_history_max_age_hours",
            "execution_history_size",
            "execution_history_max_age_hours",
            "critical_burn_rate",
            "evaluation_interval_seconds",
            "breaker_failure_threshold",
            "breaker_window_seconds",
            "breaker_recovery_seconds",
        )
        for name in positive:
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be positive")
        if self.sustain_minutes < 0:
            raise InvalidSettingValueError("sustain_minutes", self.sustain_minutes, "must not be negative")
        if not 0 < self.sustain_change_tolerance <= 1:
            raise InvalidSettingValueError(
                "sustain_change_tolerance", self.sustain_change_tolerance, "must be in (0, 1]"
            )
        if not 0 <= self.exhausted_budget_percent <= 100:
            raise InvalidSettingValueError(
                "exhausted_budget_percent", self.exhausted_budget_percent, "must be in [0, 100]"
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise InvalidSettingValueError("log_level", self.log_level, f"must be one of {_LOG_LEVELS}")


def load_settings(
    loaders: Sequence[SettingsLoader] | None = None,
    **overrides: object,
) -> ReliabilitySettings:
    """Build :class:`ReliabilitySettings` from the environment (default) or *loaders*."""
    return SettingsFactory.create(
        ReliabilitySettings,
        loaders=loaders if loaders is not None else [EnvSettingsLoader()],
        overrides=dict(overrides) or None,
    )


__all__ = ["ReliabilitySettings", "load_settings"]
