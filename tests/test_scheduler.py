from __future__ import annotations

import threading
from datetime import datetime, timezone

from opportunity_crawler.scheduler import SingleFlightScheduler
from opportunity_crawler.utils.datetime_utils import next_daily_run


def test_overlapping_trigger_is_dropped_while_run_in_flight() -> None:
    started = threading.Event()
    release = threading.Event()
    calls: list[str] = []

    def job() -> bool:
        calls.append("run")
        started.set()
        release.wait(timeout=5)
        return True

    scheduler = SingleFlightScheduler(job)
    worker = scheduler.trigger_in_background("startup")
    assert started.wait(timeout=5)

    assert scheduler.is_running
    assert scheduler.trigger("daily") is False

    release.set()
    worker.join(timeout=5)

    assert calls == ["run"]
    assert not scheduler.is_running
    assert scheduler.trigger("daily") is True
    assert calls == ["run", "run"]


def test_failed_run_releases_the_flag() -> None:
    attempts: list[int] = []

    def job() -> bool:
        attempts.append(1)
        raise RuntimeError("browser crashed")

    scheduler = SingleFlightScheduler(job)

    assert scheduler.trigger() is True
    assert not scheduler.is_running
    assert scheduler.trigger() is True
    assert len(attempts) == 2


def test_run_forever_fires_startup_run_and_stops() -> None:
    ran = threading.Event()

    def job() -> bool:
        ran.set()
        return True

    stop = threading.Event()
    stop.set()
    scheduler = SingleFlightScheduler(job)

    scheduler.run_forever(hour=3, minute=0, run_on_startup=True, stop_event=stop)

    assert ran.wait(timeout=5)


def test_next_daily_run_is_strictly_after_now() -> None:
    before = datetime(2026, 10, 18, 2, 15, tzinfo=timezone.utc)
    exactly = datetime(2026, 10, 18, 3, 0, tzinfo=timezone.utc)
    after = datetime(2026, 10, 18, 3, 0, 30, tzinfo=timezone.utc)

    assert next_daily_run(before, 3, 0) == datetime(2026, 10, 18, 3, 0, tzinfo=timezone.utc)
    assert next_daily_run(exactly, 3, 0) == datetime(2026, 10, 19, 3, 0, tzinfo=timezone.utc)
    assert next_daily_run(after, 3, 0) == datetime(2026, 10, 19, 3, 0, tzinfo=timezone.utc)


def test_next_daily_run_crosses_month_end() -> None:
    now = datetime(2026, 10, 31, 23, 59)

    assert next_daily_run(now, 3, 0) == datetime(2026, 11, 1, 3, 0)
