"""Runtime settings read from ``BUS_TRACKER_*`` environment variables.

A ``.env`` file in the working directory is loaded by the web app and the
scripts (via python-dotenv) before :meth:`Settings.from_env` is called.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from bus_tracker.progress.engine import AT_STOP_KM, NEAR_STOP_KM
from bus_tracker.progress.models import ProgressMode
from bus_tracker.tracking.store import FRESHNESS_WINDOW_S

_PREFIX = "BUS_TRACKER_"


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{_PREFIX}{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Tunable parameters for the tracker."""

    routes_path: str | None = None
    """JSON route file; None means the built-in catalog."""

    freshness_window_s: float = FRESHNESS_WINDOW_S
    at_stop_km: float = AT_STOP_KM
    near_stop_km: float = NEAR_STOP_KM
    progress_mode: ProgressMode = ProgressMode.WAYPOINT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *env* (defaults to ``os.environ``)."""
        env = os.environ if env is None else env

        mode_raw = env.get(_PREFIX + "PROGRESS_MODE", "").strip().lower() or "waypoint"
        try:
            mode = ProgressMode(mode_raw)
        except ValueError:
            choices = ", ".join(m.value for m in ProgressMode)
            raise ValueError(
                f"{_PREFIX}PROGRESS_MODE must be one of {choices}, got {mode_raw!r}"
            ) from None

        return cls(
            routes_path=env.get(_PREFIX + "ROUTES", "").strip() or None,
            freshness_window_s=_float(env, "FRESHNESS_S", FRESHNESS_WINDOW_S),
            at_stop_km=_float(env, "AT_STOP_KM", AT_STOP_KM),
            near_stop_km=_float(env, "NEAR_STOP_KM", NEAR_STOP_KM),
            progress_mode=mode,
            log_level=env.get(_PREFIX + "LOG_LEVEL", "").strip().upper() or "INFO",
        )
