"""Per-feature in-flight guard.

Each feature (risk, board, strategy_map, ...) owns a single slot. Entering a
slot that is already taken does not wait and does not queue: the caller is
told the slot was not acquired and skips its call. Slots for different
features are independent.

Runs on a single event loop; the check-and-set in acquire() has no await
between test and assignment, so it cannot interleave with another task.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

logger = structlog.get_logger(__name__)


class FeatureGuard:
    """Single-slot guard keyed by feature name."""

    def __init__(self):
        self._in_flight: set[str] = set()

    def acquire(self, feature: str) -> bool:
        """Take the slot for a feature.

        Returns:
            True if acquired, False if the feature is already in flight
        """
        if feature in self._in_flight:
            return False
        self._in_flight.add(feature)
        return True

    def release(self, feature: str) -> None:
        self._in_flight.discard(feature)

    def is_busy(self, feature: str) -> bool:
        return feature in self._in_flight

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    @asynccontextmanager
    async def slot(self, feature: str) -> AsyncGenerator[bool, None]:
        """Context manager for a feature slot.

        Yields:
            True if the slot was acquired. On False the body must not call the backend.

        Example:
            async with guard.slot("risk") as acquired:
                if acquired:
                    risk = await generate_risk_analysis(...)
        """
        acquired = self.acquire(feature)
        if not acquired:
            logger.info("feature_in_flight_skipped", feature=feature)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(feature)
