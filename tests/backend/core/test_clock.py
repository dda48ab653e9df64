from datetime import datetime, timedelta, timezone

from backend.core.clock import get_clock, to_utc_naive, utc_now


def test_to_utc_naive_converts_aware_datetimes() -> None:
    aware = datetime(2026, 1, 6, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    assert to_utc_naive(aware) == datetime(2026, 1, 6, 10, 0)


def test_to_utc_naive_passes_naive_datetimes_through() -> None:
    naive = datetime(2026, 1, 6, 10, 0)

    assert to_utc_naive(naive) is naive


def test_utc_now_is_naive_utc() -> None:
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    now = utc_now()

    assert now.tzinfo is None
    assert abs(now - before) < timedelta(seconds=5)


def test_get_clock_returns_system_clock() -> None:
    assert get_clock() is utc_now
