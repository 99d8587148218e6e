"""Config – 12-factor settings for the reliability services."""
from mp_reliability.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    ReliabilitySettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
    load_settings,
)
from mp_reliability.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "ReliabilitySettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "load_settings",
]
