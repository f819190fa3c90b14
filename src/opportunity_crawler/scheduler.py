from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from opportunity_crawler.utils.datetime_utils import next_daily_run

logger = logging.getLogger(__name__)


class SingleFlightScheduler:
    """Run ``job`` on demand, never more than one at a time.

    A trigger that arrives while a run is in flight is dropped; it is not
    queued and not retried later. ``job`` returns True on success.
    """

    def __init__(
        self,
        job: Callable[[], bool],
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.job = job
        self.clock = clock
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def trigger(self, reason: str = "tick") -> bool:
        if not self._lock.acquire(blocking=False):
            logger.info("Previous run still in progress, skipping this %s.", reason)
            return False

        start = self.clock()
        logger.info("Starting %s run at %s", reason, start.isoformat())
        try:
            succeeded = self.job()
            logger.info("Run %s", "succeeded" if succeeded else "finished with errors")
        except Exception:  # noqa: BLE001
            logger.exception("Run failed")
        finally:
            end = self.clock()
            logger.info(
                "Finished run at %s (duration %.1fs)",
                end.isoformat(),
                (end - start).total_seconds(),
            )
            self._lock.release()
        return True

    def trigger_in_background(self, reason: str = "tick") -> threading.Thread:
        thread = threading.Thread(
            target=self.trigger,
            kwargs={"reason": reason},
            name=f"crawl-{reason}",
            daemon=True,
        )
        thread.start()
        return thread

    def run_forever(
        self,
        *,
        hour: int,
        minute: int,
        run_on_startup: bool = True,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Fire once at startup, then once a day at ``hour:minute`` local time.

        Each firing runs on its own thread so that a run overlapping the next
        daily time meets the single-flight guard instead of delaying the tick.
        """
        stop = stop_event or threading.Event()
        if run_on_startup:
            self.trigger_in_background("startup")

        logger.info("Scheduler is active. Daily run scheduled at %02d:%02d.", hour, minute)
        while not stop.is_set():
            now = self.clock()
            upcoming = next_daily_run(now, hour, minute)
            logger.debug("Next run at %s", upcoming.isoformat())
            if stop.wait((upcoming - now).total_seconds()):
                break
            self.trigger_in_background("daily")

        logger.info("Scheduler stopped")
