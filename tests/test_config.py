from __future__ import annotations

from datetime import timedelta

import pytest

from aisviewer.config import ViewerConfig
from aisviewer.exceptions import AisConfigError


def test_defaults() -> None:
    config = ViewerConfig()
    assert config.min_visible_zoom == 12
    assert config.poll_interval_ms == 10_000
    assert config.stale_timeout_ms == 120_000
    assert config.tile_precision == 5
    assert config.poll_interval == 10.0
    assert config.stale_timeout == timedelta(minutes=2)


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIS_BASE_URL", "https://ais.example.com")
    monkeypatch.setenv("AIS_MIN_VISIBLE_ZOOM", "11.5")
    monkeypatch.setenv("AIS_POLL_INTERVAL_MS", "5000")
    monkeypatch.setenv("AIS_STALE_TIMEOUT_MS", "60000")
    monkeypatch.setenv("AIS_TILE_PRECISION", "6")
    monkeypatch.setenv("AIS_REQUEST_TIMEOUT", "3.5")

    config = ViewerConfig.from_env()

    assert config.base_url == "https://ais.example.com"
    assert config.min_visible_zoom == 11.5
    assert config.poll_interval_ms == 5000
    assert config.stale_timeout_ms == 60000
    assert config.tile_precision == 6
    assert config.request_timeout == 3.5


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIS_POLL_INTERVAL_MS", "not-a-number")
    config = ViewerConfig.from_env(poll_interval_ms=2000)
    assert config.poll_interval_ms == 2000


def test_from_env_invalid_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIS_TILE_PRECISION", "five")
    with pytest.raises(AisConfigError):
        ViewerConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"poll_interval_ms": 0},
        {"stale_timeout_ms": -1},
        {"tile_precision": 0},
        {"tile_precision": 13},
        {"request_timeout": 0},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(AisConfigError):
        ViewerConfig(**kwargs)
