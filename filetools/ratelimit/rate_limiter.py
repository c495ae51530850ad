import threading
import time
from collections.abc import Callable


class RateLimiter:
    """Sliding-window request counter keyed by caller identifier.

    Rejected attempts are not recorded, so hammering past the limit does not
    push the reset time further out.
    """

    DEFAULT_MAX_REQUESTS = 50
    DEFAULT_WINDOW_SECONDS = 15 * 60

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._max_requests = max_requests
        self._window = float(window_seconds)
        self._clock = clock
        self._requests: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window

    def is_allowed(self, identifier: str) -> bool:
        """Record a request for identifier if the window has room."""
        now = self._clock()
        with self._lock:
            live = self._prune(identifier, now)
            if len(live) >= self._max_requests:
                return False
            live.append(now)
            return True

    def get_remaining_requests(self, identifier: str) -> int:
        now = self._clock()
        with self._lock:
            live = self._prune(identifier, now)
            return max(0, self._max_requests - len(live))

    def get_reset_time(self, identifier: str) -> float:
        """Timestamp at which the oldest retained request leaves the window, or 0."""
        with self._lock:
            timestamps = self._requests.get(identifier)
            if not timestamps:
                return 0
            return min(timestamps) + self._window

    def _prune(self, identifier: str, now: float) -> list[float]:
        # caller holds the lock
        live = [ts for ts in self._requests.get(identifier, []) if now - ts < self._window]
        self._requests[identifier] = live
        return live
