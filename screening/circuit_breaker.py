"""
Circuit breaker for external data sources.
"""

import logging
import time
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)

CLOSED = 'CLOSED'
OPEN = 'OPEN'
HALF_OPEN = 'HALF_OPEN'


class CircuitBreaker:
    """
    Tracks the failure rate of recent calls and disables a failing API
    temporarily.

    CLOSED -> OPEN once the failure rate over the last ``window`` calls
    (with at least ``min_samples`` of them) reaches ``failure_threshold``.
    OPEN -> HALF_OPEN after ``timeout`` seconds; one trial call is let
    through, its outcome closes or re-opens the circuit. Other callers are
    refused while the trial is outstanding; a trial that never reports back
    is replaced after another ``timeout``.
    """

    def __init__(self, name: str, failure_threshold: float = 0.6, timeout: int = 300,
                 window: int = 10, min_samples: int = 5,
                 clock: Callable[[], float] = time.monotonic):
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.min_samples = min_samples
        self.results = deque(maxlen=window)
        self.state = CLOSED
        self.last_failure_time = 0.0
        self.trial_started = 0.0
        self._clock = clock

    @property
    def failure_rate(self) -> float:
        if not self.results:
            return 0.0
        return 1 - (sum(self.results) / len(self.results))

    def record_success(self):
        self.results.append(True)
        if self.state == HALF_OPEN:
            self.state = CLOSED
            self.results.clear()
            logger.info(f"[CIRCUIT] ✅ {self.name} recovered - Circuit CLOSED")

    def record_failure(self) -> bool:
        """
        Record a failed call.

        Returns:
            True when this failure opened the circuit (caller may alert)
        """
        self.results.append(False)

        if self.state == HALF_OPEN:
            self.state = OPEN
            self.last_failure_time = self._clock()
            logger.warning(f"[CIRCUIT] 🔴 {self.name} trial call failed - Circuit OPEN again")
            return False

        if self.state == CLOSED and len(self.results) >= self.min_samples:
            if self.failure_rate >= self.failure_threshold:
                self.state = OPEN
                self.last_failure_time = self._clock()
                logger.warning(f"[CIRCUIT] 🔴 {self.name} failure rate {self.failure_rate:.0%} - Circuit OPEN")
                return True

        return False

    def can_attempt(self) -> bool:
        if self.state == CLOSED:
            return True

        if self.state == OPEN:
            if self._clock() - self.last_failure_time >= self.timeout:
                self.state = HALF_OPEN
                self.trial_started = self._clock()
                logger.info(f"[CIRCUIT] 🟡 {self.name} attempting recovery - Circuit HALF_OPEN")
                return True
            return False

        # HALF_OPEN: a trial call is already in flight
        if self._clock() - self.trial_started >= self.timeout:
            self.trial_started = self._clock()
            return True
        return False

    def get_stats(self):
        return {
            'name': self.name,
            'state': self.state,
            'failure_rate': self.failure_rate,
            'samples': len(self.results),
        }
