"""
Token bucket rate limiter for birdc invocations.

The bucket is topped up to its maximum once per interval by a
background thread. This is a strict reset, not an accumulation:
whatever was consumed during the second, the next tick restores
exactly `max_requests` tokens.

Usage:
    limiter = RateLimiter(enabled=True, max_requests=10)
    limiter.start()

    if limiter.admit():
        run_query()

    limiter.stop()  # tests / shutdown
"""

import logging
import threading
from typing import Optional

from bird.locks import ReadWriteLock

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admission control shared by every dispatched query."""

    def __init__(self, enabled: bool = False, max_requests: int = 10, interval: float = 1.0):
        self.enabled = enabled
        self.max_requests = max_requests
        self.interval = interval
        self._remaining = max_requests
        self._lock = ReadWriteLock()

        self._stop_event = threading.Event()
        self._worker_thread: Optional[threading.Thread] = None

    @property
    def remaining(self) -> int:
        with self._lock.read_locked():
            return self._remaining

    def admit(self) -> bool:
        """
        Consume one token.

        Returns:
            True when the request may proceed (always, if disabled),
            False when the bucket is empty. A rejection has no side effects.
        """
        if not self.enabled:
            return True

        with self._lock.read_locked():
            if self._remaining < 1:
                logger.debug("Rate limit reached, rejecting query")
                return False

        with self._lock.write_locked():
            # Re-check: another worker may have taken the last token
            if self._remaining < 1:
                logger.debug("Rate limit reached, rejecting query")
                return False
            self._remaining -= 1
        return True

    def reset(self):
        """Refill the bucket to its maximum, regardless of its current level."""
        with self._lock.write_locked():
            self._remaining = self.max_requests

    # =========================================================================
    # Background reset
    # =========================================================================

    @property
    def running(self) -> bool:
        return self._worker_thread is not None and self._worker_thread.is_alive()

    def start(self):
        """Start the periodic reset thread (no-op if already running)."""
        if self.running:
            if not self._stop_event.is_set():
                return
            # A stopped loop that outlived stop(); let it finish first
            self._worker_thread.join()
        self._stop_event.clear()
        self._worker_thread = threading.Thread(
            target=self._reset_loop, name="ratelimit-reset", daemon=True
        )
        self._worker_thread.start()
        logger.info(
            f"Rate limit reset loop started "
            f"(enabled={self.enabled}, max={self.max_requests}/{self.interval}s)"
        )

    def stop(self, timeout: Optional[float] = None):
        """Signal the reset thread to exit and wait for it."""
        self._stop_event.set()
        if self._worker_thread is not None:
            self._worker_thread.join(timeout if timeout is not None else self.interval * 2)
            if self._worker_thread.is_alive():
                logger.warning("Rate limit reset loop did not stop in time")
                return
            self._worker_thread = None

    def _reset_loop(self):
        while not self._stop_event.wait(self.interval):
            self.reset()
