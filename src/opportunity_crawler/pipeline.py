from __future__ import annotations

import logging
from dataclasses import dataclass

from opportunity_crawler.reconciler import ReconcileReport, RecordReconciler
from opportunity_crawler.service import CrawlResult, CrawlService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineReport:
    crawl: CrawlResult
    reconcile: ReconcileReport

    @property
    def ok(self) -> bool:
        return self.crawl.ok and self.reconcile.ok


def run_pipeline(service: CrawlService, reconciler: RecordReconciler) -> PipelineReport:
    crawl_result = service.crawl()
    reconcile_report = reconciler.reconcile(crawl_result.records)
    report = PipelineReport(crawl=crawl_result, reconcile=reconcile_report)

    logger.info(
        "Run complete | records=%d inserted=%d skipped=%d failed=%d errors=%d",
        len(crawl_result.records),
        reconcile_report.inserted,
        reconcile_report.skipped,
        reconcile_report.failed,
        len(crawl_result.errors),
    )
    return report
