"""Sliding-window attempt limiter used to throttle mock logins."""
import math
import threading
import time
from collections import defaultdict
from typing import Callable, Dict, List

from case_manager.errors import RateLimitExceeded


class AttemptLimiter:
    """
    In-memory sliding window keyed by an arbitrary string (here, an email).

    Every checked attempt counts against the window; a successful login
    calls ``reset`` to clear the key.
    """

    def __init__(
        self,
        max_attempts: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.clock = clock

        # {key: [timestamp1, timestamp2, ...]}
        self.attempts: Dict[str, List[float]] = defaultdict(list)

        self.lock = threading.Lock()

    def _recent(self, key: str, now: float) -> List[float]:
        cutoff = now - self.window_seconds
        recent = [ts for ts in self.attempts[key] if ts > cutoff]
        self.attempts[key] = recent
        return recent

    def check(self, key: str) -> None:
        """
        Record an attempt for ``key``.

        Raises:
            RateLimitExceeded: If the window is already full; the attempt is
                               not recorded
        """
        with self.lock:
            now = self.clock()
            recent = self._recent(key, now)

            if len(recent) >= self.max_attempts:
                retry_after = math.ceil(min(recent) + self.window_seconds - now)
                raise RateLimitExceeded(
                    f"Too many login attempts. Try again in {retry_after} seconds",
                    retry_after=max(retry_after, 1),
                )

            recent.append(now)

    def remaining(self, key: str) -> int:
        with self.lock:
            return max(0, self.max_attempts - len(self._recent(key, self.clock())))

    def reset(self, key: str) -> None:
        with self.lock:
            self.attempts.pop(key, None)
