"""Settings validation tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from buoy_obs.config import Settings, load_settings
from buoy_obs.exceptions import ConfigError


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings.station_id == "AGXC1"
    assert settings.fetch_timeout_seconds == 10.0
    assert settings.safe_summary()["station_id"] == "AGXC1"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BUOY_STATION_ID", "46025")
    monkeypatch.setenv("BUOY_FETCH_TIMEOUT_SECONDS", "3.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.station_id == "46025"
    assert settings.fetch_timeout_seconds == 3.5
    assert settings.log_level == "DEBUG"
    assert settings.tabular_url.endswith("/realtime2/46025.txt")


@pytest.mark.parametrize(
    ("env_name", "value"),
    [
        ("BUOY_FETCH_TIMEOUT_SECONDS", "0"),
        ("BUOY_STATION_ID", "../etc"),
        ("BUOY_TABULAR_URL_TEMPLATE", "https://example.com/no-placeholder.txt"),
        ("LOG_LEVEL", "chatty"),
    ],
)
def test_invalid_values_raise_config_error(
    monkeypatch: pytest.MonkeyPatch, env_name: str, value: str
) -> None:
    monkeypatch.setenv(env_name, value)
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_settings()


def test_keyword_override_uses_field_name() -> None:
    assert Settings(station_id="46222").narrative_url.endswith("/latest_obs/46222.txt")
