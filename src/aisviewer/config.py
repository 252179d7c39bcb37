"""Viewer configuration for aisviewer."""

from __future__ import annotations

import dataclasses
import os
from datetime import timedelta
from typing import Any

from aisviewer._constants import (
    BASE_URL,
    MAX_TILE_PRECISION,
    MIN_VISIBLE_ZOOM,
    POLL_INTERVAL_MS,
    REQUEST_TIMEOUT_S,
    STALE_TIMEOUT_MS,
    TILE_PRECISION,
)
from aisviewer.exceptions import AisConfigError


@dataclasses.dataclass(frozen=True)
class ViewerConfig:
    """Viewer configuration.

    Parameters
    ----------
    base_url : str
        Vessel service base URL.
    min_visible_zoom : float
        Zoom level below which polling stops and the store is reset.
    poll_interval_ms : int
        Fixed poll cadence in milliseconds. Stale vessels are swept on
        the same cadence.
    stale_timeout_ms : int
        A vessel whose server-side ``last_updated`` is older than this
        is dropped on the next sweep.
    tile_precision : int
        Geohash precision used to cover the requested bounding box.
    request_timeout : float
        Total timeout in seconds for one vessel request.
    """

    base_url: str = BASE_URL
    min_visible_zoom: float = MIN_VISIBLE_ZOOM
    poll_interval_ms: int = POLL_INTERVAL_MS
    stale_timeout_ms: int = STALE_TIMEOUT_MS
    tile_precision: int = TILE_PRECISION
    request_timeout: float = REQUEST_TIMEOUT_S

    def __post_init__(self) -> None:
        if self.poll_interval_ms <= 0:
            raise AisConfigError(f"poll_interval_ms must be positive, got {self.poll_interval_ms}")
        if self.stale_timeout_ms <= 0:
            raise AisConfigError(f"stale_timeout_ms must be positive, got {self.stale_timeout_ms}")
        if not 1 <= self.tile_precision <= MAX_TILE_PRECISION:
            raise AisConfigError(
                f"tile_precision must be between 1 and {MAX_TILE_PRECISION}, got {self.tile_precision}"
            )
        if self.request_timeout <= 0:
            raise AisConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @property
    def poll_interval(self) -> float:
        """Poll cadence in seconds."""
        return self.poll_interval_ms / 1000.0

    @property
    def stale_timeout(self) -> timedelta:
        return timedelta(milliseconds=self.stale_timeout_ms)

    @classmethod
    def from_env(cls, **overrides: Any) -> ViewerConfig:
        """Create configuration from environment variables.

        Reads ``AIS_BASE_URL`` and the numeric ``AIS_*`` tuning variables.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ViewerConfig
            Populated configuration.

        Raises
        ------
        AisConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP: dict[str, tuple[str, type]] = {
            "AIS_BASE_URL": ("base_url", str),
            "AIS_MIN_VISIBLE_ZOOM": ("min_visible_zoom", float),
            "AIS_POLL_INTERVAL_MS": ("poll_interval_ms", int),
            "AIS_STALE_TIMEOUT_MS": ("stale_timeout_ms", int),
            "AIS_TILE_PRECISION": ("tile_precision", int),
            "AIS_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, (field_name, caster) in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = caster(val.strip())
            except ValueError as exc:
                raise AisConfigError(f"{env_key} has an invalid value: {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
