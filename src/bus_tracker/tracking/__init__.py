"""Live location ingestion state.

Public API
----------
Fix                 - single raw GPS observation
EnrichedFix         - fix + progress report + receive time
FixLookup           - absent / fresh / stale lookup result
FixParser           - raw payload dict → Fix
FixValidationError  - raised on malformed coordinates
FixStore            - most recent fix per vehicle
"""

from bus_tracker.tracking.models import EnrichedFix, Fix, FixLookup, FixSource, FixState
from bus_tracker.tracking.parser import FixParser, FixValidationError
from bus_tracker.tracking.store import FRESHNESS_WINDOW_S, FixStore, utc_now

__all__ = [
    "FRESHNESS_WINDOW_S",
    "EnrichedFix",
    "Fix",
    "FixLookup",
    "FixParser",
    "FixSource",
    "FixState",
    "FixStore",
    "FixValidationError",
    "utc_now",
]
