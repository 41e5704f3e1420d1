"""Fixed-window, in-memory request limiting keyed by client address."""
import math
import time
from dataclasses import dataclass

from limits import RateLimitItem, RateLimitItemPerHour, RateLimitItemPerMinute
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter


@dataclass(frozen=True)
class RateLimitScope:
    name: str
    limit: RateLimitItem
    message: str

    @property
    def window_seconds(self) -> int:
        return self.limit.get_expiry()

    @property
    def max_requests(self) -> int:
        return self.limit.amount


GENERAL_SCOPE = RateLimitScope(
    name="general",
    limit=RateLimitItemPerMinute(100, 15),
    message="Too many requests, try again later.",
)

CONTACT_SCOPE = RateLimitScope(
    name="contact",
    limit=RateLimitItemPerHour(5),
    message="Too many contact requests, try again later.",
)


class RateLimiter:
    """Counts requests per (scope, address) inside fixed time windows.

    Every call to ``admit`` counts, including rejected ones, so a client
    hammering the endpoint stays blocked until its window elapses.
    """

    def __init__(self, storage=None):
        self._storage = storage or MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self._storage)

    def admit(self, scope: RateLimitScope, address: str) -> bool:
        return self._strategy.hit(scope.limit, scope.name, address)

    def retry_after(self, scope: RateLimitScope, address: str) -> int:
        """Whole seconds until the current window for this client resets."""
        reset_at, _ = self._strategy.get_window_stats(scope.limit, scope.name, address)
        return max(0, math.ceil(reset_at - time.time()))

    def reset(self):
        self._storage.reset()
