import threading
import time

from limits import RateLimitItemPerMinute, RateLimitItemPerSecond

from contact_api.core.rate_limit import CONTACT_SCOPE, GENERAL_SCOPE, RateLimiter, RateLimitScope


def test_scope_windows():
    assert (GENERAL_SCOPE.window_seconds, GENERAL_SCOPE.max_requests) == (15 * 60, 100)
    assert (CONTACT_SCOPE.window_seconds, CONTACT_SCOPE.max_requests) == (60 * 60, 5)


def test_contact_scope_allows_five_per_hour():
    limiter = RateLimiter()
    results = [limiter.admit(CONTACT_SCOPE, "10.0.0.1") for _ in range(6)]
    assert results == [True] * 5 + [False]


def test_window_resets_after_it_elapses():
    limiter = RateLimiter()
    scope = RateLimitScope("short", RateLimitItemPerSecond(1, 1), "slow down")
    assert limiter.admit(scope, "10.0.0.1")
    assert not limiter.admit(scope, "10.0.0.1")
    time.sleep(1.1)
    assert limiter.admit(scope, "10.0.0.1")


def test_addresses_and_scopes_are_independent():
    limiter = RateLimiter()
    for _ in range(5):
        limiter.admit(CONTACT_SCOPE, "10.0.0.1")
    assert not limiter.admit(CONTACT_SCOPE, "10.0.0.1")
    assert limiter.admit(CONTACT_SCOPE, "10.0.0.2")
    assert limiter.admit(GENERAL_SCOPE, "10.0.0.1")


def test_general_scope_ceiling():
    limiter = RateLimiter()
    allowed = sum(limiter.admit(GENERAL_SCOPE, "10.0.0.1") for _ in range(150))
    assert allowed == 100


def test_retry_after_counts_down_to_window_end():
    limiter = RateLimiter()
    limiter.admit(CONTACT_SCOPE, "10.0.0.1")
    assert 3590 <= limiter.retry_after(CONTACT_SCOPE, "10.0.0.1") <= 3600
    assert limiter.retry_after(CONTACT_SCOPE, "10.0.0.9") == 0


def test_reset_clears_all_windows():
    limiter = RateLimiter()
    scope = RateLimitScope("tiny", RateLimitItemPerMinute(1), "slow down")
    assert limiter.admit(scope, "a")
    assert not limiter.admit(scope, "a")
    limiter.reset()
    assert limiter.admit(scope, "a")


def test_limiters_do_not_share_state():
    first, second = RateLimiter(), RateLimiter()
    scope = RateLimitScope("tiny", RateLimitItemPerMinute(1), "slow down")
    assert first.admit(scope, "a")
    assert second.admit(scope, "a")


def test_concurrent_admits_never_exceed_ceiling():
    limiter = RateLimiter()
    scope = RateLimitScope("burst", RateLimitItemPerMinute(50), "slow down")
    admitted = []
    lock = threading.Lock()

    def worker():
        for _ in range(20):
            if limiter.admit(scope, "shared"):
                with lock:
                    admitted.append(1)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(admitted) == 50
