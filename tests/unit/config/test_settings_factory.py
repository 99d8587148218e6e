"""Unit tests for SettingsFactory merging."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import pytest

from mp_reliability.config import (
    ConfigError,
    MissingRequiredSettingError,
    Settings,
    SettingsFactory,
    SettingsLoader,
)


@dataclass
class SinkSettings(Settings):
    _prefix: ClassVar[str] = "SINK"

    url: str
    timeout: float = 5.0


class StaticLoader(SettingsLoader):
    def __init__(self, **values: Any) -> None:
        self._values = values

    def load(self, settings_class):  # type: ignore[override]
        return settings_class(**self._values)


class MissingLoader(SettingsLoader):
    def load(self, settings_class):  # type: ignore[override]
        raise MissingRequiredSettingError("SINK_URL")


class BrokenLoader(SettingsLoader):
    def load(self, settings_class):  # type: ignore[override]
        raise ConfigError("unreadable source")


class TestSettingsFactory:
    def test_later_loader_wins(self) -> None:
        settings = SettingsFactory.create(
            SinkSettings,
            loaders=[StaticLoader(url="a", timeout=1.0), StaticLoader(url="b")],
        )
        assert settings.url == "b"
        assert settings.timeout == 5.0

    def test_overrides_have_highest_priority(self) -> None:
        settings = SettingsFactory.create(
            SinkSettings, loaders=[StaticLoader(url="a")], overrides={"url": "override"}
        )
        assert settings.url == "override"

    def test_missing_loader_is_skipped(self) -> None:
        settings = SettingsFactory.create(SinkSettings, loaders=[MissingLoader(), StaticLoader(url="a")])
        assert settings.url == "a"

    def test_other_loader_errors_propagate(self) -> None:
        with pytest.raises(ConfigError, match="unreadable"):
            SettingsFactory.create(SinkSettings, loaders=[BrokenLoader(), StaticLoader(url="a")])

    def test_required_field_missing_everywhere(self) -> None:
        with pytest.raises(MissingRequiredSettingError):
            SettingsFactory.create(SinkSettings, loaders=[MissingLoader()])

    def test_unknown_override_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            SettingsFactory.create(SinkSettings, overrides={"url": "a", "nope": 1})
