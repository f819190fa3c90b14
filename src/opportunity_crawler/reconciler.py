from __future__ import annotations

import logging
from dataclasses import dataclass, field

from opportunity_crawler.models import Opportunity, OpportunityKind
from opportunity_crawler.store import Store, UpsertResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PartitionStats:
    attempted: int = 0
    inserted: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass(slots=True)
class ReconcileReport:
    partitions: dict[OpportunityKind, PartitionStats] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return sum(stats.attempted for stats in self.partitions.values())

    @property
    def inserted(self) -> int:
        return sum(stats.inserted for stats in self.partitions.values())

    @property
    def skipped(self) -> int:
        return sum(stats.skipped for stats in self.partitions.values())

    @property
    def failed(self) -> int:
        return sum(stats.failed for stats in self.partitions.values())

    @property
    def ok(self) -> bool:
        return self.failed == 0


class RecordReconciler:
    """Write each record into its kind's collection unless its id is already stored."""

    def __init__(self, store: Store) -> None:
        self.store = store

    def reconcile(self, records: list[Opportunity]) -> ReconcileReport:
        report = ReconcileReport()
        if not records:
            logger.info("No records collected; skipping database save")
            return report

        for kind, partition in _partition_by_kind(records).items():
            report.partitions[kind] = self._reconcile_partition(kind, partition)

        return report

    def _reconcile_partition(
        self,
        kind: OpportunityKind,
        records: list[Opportunity],
    ) -> PartitionStats:
        stats = PartitionStats(attempted=len(records))
        collection = kind.collection

        if not self.store.available:
            logger.warning(
                "Persistence is disabled; %d %s records not saved",
                len(records),
                collection,
            )
            stats.failed = len(records)
            return stats

        logger.info("Starting sync of %d records into %s", len(records), collection)
        for record in records:
            try:
                outcome = self.store.upsert_if_absent(collection, record.id, record.to_document())
            except Exception as exc:  # noqa: BLE001
                logger.exception("Failed to save %s/%s: %s", collection, record.id, exc)
                stats.failed += 1
                continue

            if outcome is UpsertResult.INSERTED:
                stats.inserted += 1
            else:
                stats.skipped += 1

        logger.info(
            "Sync of %s complete | inserted=%d skipped_duplicate=%d failed=%d",
            collection,
            stats.inserted,
            stats.skipped,
            stats.failed,
        )
        return stats


def _partition_by_kind(records: list[Opportunity]) -> dict[OpportunityKind, list[Opportunity]]:
    partitions: dict[OpportunityKind, list[Opportunity]] = {}
    for kind in OpportunityKind:
        matching = [record for record in records if record.kind is kind]
        if matching:
            partitions[kind] = matching
    return partitions
