"""FixStore — most recent enriched fix per vehicle, with a freshness window.

Slot lifecycle per vehicle::

    absent ──record──▶ fresh ──(window elapses)──▶ stale ──record──▶ fresh

Staleness is derived from the clock at query time; nothing runs in the
background and stale slots are kept until overwritten.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone

from bus_tracker.tracking.models import EnrichedFix, FixLookup, FixState

_logger = logging.getLogger(__name__)

FRESHNESS_WINDOW_S = 300.0  # 5 minutes


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FixStore:
    """Thread-safe in-memory map of vehicle_id → :class:`EnrichedFix`.

    Parameters
    ----------
    freshness_window_s:
        A slot is fresh while ``now - received_at <= freshness_window_s``.
    clock:
        Zero-argument callable returning the current aware UTC datetime.
        Injected so tests can drive time explicitly.
    """

    def __init__(
        self,
        freshness_window_s: float = FRESHNESS_WINDOW_S,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if freshness_window_s <= 0:
            raise ValueError(f"freshness_window_s must be positive, got {freshness_window_s}")
        self._window = freshness_window_s
        self._clock = clock
        self._lock = threading.Lock()
        self._slots: dict[str, EnrichedFix] = {}

    @property
    def freshness_window_s(self) -> float:
        return self._window

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def record(self, enriched: EnrichedFix) -> bool:
        """Store *enriched* as its vehicle's current fix, stamping ``received_at``.

        Returns False (and keeps the stored fix) when *enriched* was
        captured before the fix already held for that vehicle and that fix
        is still fresh.  A stale slot accepts any fix.
        """
        vehicle_id = enriched.vehicle_id
        with self._lock:
            now = self._clock()
            stamped = dataclasses.replace(enriched, received_at=now)
            previous = self._slots.get(vehicle_id)
            if (
                previous is not None
                and enriched.captured_at < previous.captured_at
                and self._age_s(previous, now) <= self._window
            ):
                _logger.info(
                    "Ignoring out-of-order fix for %s: captured %s, have %s",
                    vehicle_id,
                    enriched.captured_at.isoformat(),
                    previous.captured_at.isoformat(),
                )
                return False
            self._slots[vehicle_id] = stamped
        return True

    def get(self, vehicle_id: str) -> EnrichedFix | None:
        """Return the stored fix for *vehicle_id* regardless of freshness."""
        with self._lock:
            return self._slots.get(vehicle_id)

    def current(self, vehicle_id: str) -> FixLookup:
        """Return the vehicle's slot classified as absent, fresh or stale."""
        now = self._clock()
        with self._lock:
            enriched = self._slots.get(vehicle_id)
        if enriched is None:
            return FixLookup(vehicle_id=vehicle_id, state=FixState.ABSENT)

        age = self._age_s(enriched, now)
        state = FixState.FRESH if age <= self._window else FixState.STALE
        return FixLookup(vehicle_id=vehicle_id, state=state, fix=enriched, age_seconds=age)

    def all_active(self) -> list[EnrichedFix]:
        """All fixes still inside the freshness window, in insertion order."""
        now = self._clock()
        with self._lock:
            slots = list(self._slots.values())
        return [e for e in slots if self._age_s(e, now) <= self._window]

    def vehicle_ids(self) -> list[str]:
        with self._lock:
            return list(self._slots)

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _age_s(enriched: EnrichedFix, now: datetime) -> float:
        # A clock that steps backwards must not make a fix look younger than new.
        return max(0.0, (now - enriched.received_at).total_seconds())
