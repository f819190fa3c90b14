from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from bs4 import BeautifulSoup

from opportunity_crawler.config import TargetSettings
from opportunity_crawler.extractors import ExtractionError, get_extractor
from opportunity_crawler.fetchers import NavigationError, PageFetcher, PageSession, fetch_with_retry
from opportunity_crawler.models import Opportunity

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CrawlResult:
    records: list[Opportunity] = field(default_factory=list)
    per_target: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class CrawlService:
    """Visit every target in order and collect what its extractor finds.

    All targets share one page session, so visits are strictly sequential.
    A failing target contributes nothing and the crawl moves on.
    """

    def __init__(
        self,
        *,
        targets: list[TargetSettings],
        fetcher: PageFetcher,
        max_attempts: int = 3,
        retry_delay: float = 3.0,
        settle_delay: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.targets = targets
        self.fetcher = fetcher
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.settle_delay = settle_delay
        self.sleep = sleep

    def crawl(self) -> CrawlResult:
        result = CrawlResult()
        logger.info("Starting crawl of %d targets", len(self.targets))

        try:
            session = self.fetcher.open_session()
        except Exception as exc:  # noqa: BLE001
            message = f"could not open page session: {exc}"
            logger.exception(message)
            result.errors.append(message)
            return result

        with session:
            for target in self.targets:
                logger.info("Scraping %s (%s)", target.name, target.url)
                try:
                    records = self._crawl_target(session, target)
                except NavigationError as exc:
                    self._record_failure(result, target, f"fetch failed: {exc}")
                    continue
                except ExtractionError as exc:
                    self._record_failure(result, target, f"extraction failed: {exc}")
                    continue
                except Exception as exc:  # noqa: BLE001
                    self._record_failure(result, target, f"unexpected error: {exc}")
                    continue

                result.per_target[target.name] = len(records)
                if records:
                    logger.info("Extracted %d records from %s", len(records), target.name)
                    result.records.extend(records)
                else:
                    logger.warning(
                        "No records found on %s; check selectors or page structure",
                        target.name,
                    )

        logger.info("Total records collected: %d", len(result.records))
        return result

    def _crawl_target(self, session: PageSession, target: TargetSettings) -> list[Opportunity]:
        fetch_with_retry(
            session,
            target.url,
            max_attempts=self.max_attempts,
            retry_delay=self.retry_delay,
            sleep=self.sleep,
        )
        session.settle(self.settle_delay)
        html = session.content()

        extractor = get_extractor(target.extractor)
        try:
            soup = BeautifulSoup(html, "html.parser")
            records = extractor(soup, target.url, category=target.category)
        except Exception as exc:  # noqa: BLE001
            raise ExtractionError(f"{target.extractor.value} extractor: {exc}") from exc

        return records

    @staticmethod
    def _record_failure(result: CrawlResult, target: TargetSettings, reason: str) -> None:
        message = f"target {target.name} {reason}"
        logger.exception(message)
        result.errors.append(message)
        result.per_target[target.name] = 0
