"""Global earned/spent point totals."""
from __future__ import annotations

import logging
import threading

from arealock.data import state_keys
from arealock.data.state_codec import parse_int
from arealock.data.state_store import StateStore

logger = logging.getLogger(__name__)


class PointsLedger:
    """Tracks earned and spent totals; the spendable balance is derived."""

    def __init__(self, *, store: StateStore) -> None:
        self._store = store
        self._lock = threading.RLock()
        self._earned = 0
        self._spent = 0

    @property
    def earned_total(self) -> int:
        with self._lock:
            return self._earned

    @property
    def spent_total(self) -> int:
        with self._lock:
            return self._spent

    def spendable(self) -> int:
        with self._lock:
            return max(0, self._earned - self._spent)

    def load(self) -> None:
        """Read both totals from the store; missing or garbled values count as zero."""
        with self._lock:
            self._earned = max(0, parse_int(self._store.get(state_keys.POINTS_EARNED_TOTAL)))
            self._spent = max(0, parse_int(self._store.get(state_keys.POINTS_SPENT_TOTAL)))

    def add_earned(self, amount: int) -> None:
        if amount <= 0:
            return
        with self._lock:
            self._earned += amount
            self._persist()

    def spend(self, amount: int) -> bool:
        """Deduct ``amount`` if affordable. Returns False without changing anything otherwise."""
        with self._lock:
            if amount <= 0 or amount > self.spendable():
                return False
            self._spent += amount
            self._persist()
        logger.debug("Spent %d points", amount)
        return True

    def set_starting(self, points: int) -> None:
        """Destructively reset the ledger to ``points`` earned and nothing spent."""
        with self._lock:
            self._earned = max(0, points)
            self._spent = 0
            self._persist()
        logger.info("Points ledger reset to %d starting points", max(0, points))

    def _persist(self) -> None:
        self._store.set_many(
            {
                state_keys.POINTS_EARNED_TOTAL: str(self._earned),
                state_keys.POINTS_SPENT_TOTAL: str(self._spent),
            }
        )
