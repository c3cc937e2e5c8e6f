from app.core.rate_limit import AdmissionController


def test_allows_up_to_limit_then_denies(clock):
    limiter = AdmissionController(limit=50, window_seconds=60, clock=clock)
    assert all(limiter.try_consume("1.2.3.4") for _ in range(50))
    assert limiter.try_consume("1.2.3.4") is False
    assert limiter.try_consume("1.2.3.4") is False
    assert limiter.remaining("1.2.3.4") == 0


def test_clients_are_independent(clock):
    limiter = AdmissionController(limit=2, window_seconds=60, clock=clock)
    assert limiter.try_consume("a")
    assert limiter.try_consume("a")
    assert not limiter.try_consume("a")
    assert limiter.try_consume("b")
    assert limiter.remaining("b") == 1


def test_window_resets_after_expiry(clock):
    limiter = AdmissionController(limit=1, window_seconds=60, clock=clock)
    assert limiter.try_consume("a")
    clock.advance(59)
    assert not limiter.try_consume("a")
    clock.advance(2)
    assert limiter.try_consume("a")


def test_cost_larger_than_remaining_is_denied(clock):
    limiter = AdmissionController(limit=5, window_seconds=60, clock=clock)
    assert limiter.try_consume("a", cost=4)
    assert not limiter.try_consume("a", cost=2)
    # un rechazo no consume puntos
    assert limiter.try_consume("a", cost=1)


def test_retry_after_and_reset(clock):
    limiter = AdmissionController(limit=1, window_seconds=60, clock=clock)
    limiter.try_consume("a")
    clock.advance(20.5)
    assert limiter.retry_after("a") == 40
    limiter.reset()
    assert limiter.try_consume("a")


def test_expired_buckets_are_dropped(clock):
    limiter = AdmissionController(limit=50, window_seconds=60, clock=clock)
    for i in range(100):
        assert limiter.try_consume(f"10.0.0.{i}")
    assert len(limiter) == 100
    clock.advance(61)
    assert limiter.try_consume("10.0.1.1")
    assert len(limiter) == 1


def test_sweep_keeps_buckets_of_open_windows(clock):
    limiter = AdmissionController(limit=1, window_seconds=60, clock=clock)
    limiter.try_consume("old")
    clock.advance(30)
    limiter.try_consume("recent")
    clock.advance(31)
    limiter.try_consume("other")
    assert len(limiter) == 2
    assert not limiter.try_consume("recent")
