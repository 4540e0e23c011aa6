"""Backfill pipeline: stream rows, classify, dedup and dispatch updates."""

import json
import logging
import time

from device_backfill.models.record_source import RecordSource
from device_backfill.models.schemas import ClassifiedRecord, RunSummary, UpdateOutcome
from device_backfill.services.batch_scheduler import BatchScheduler
from device_backfill.services.dedup_tracker import DedupTracker
from device_backfill.services.device_updater import DeviceUpdater
from device_backfill.services.metrics import MetricsAggregator, log_summary
from device_backfill.services.os_classifier import classify_os
from device_backfill.services.row_validator import is_valid_row

logger = logging.getLogger(__name__)


class BackfillRunner:
    """Owns the state of a single backfill run."""

    def __init__(
        self,
        source: RecordSource,
        updater: DeviceUpdater,
        window_size: int = 20,
        progress_interval: int = 1000,
    ):
        """
        Initialize the runner.

        Args:
            source: Source of raw login-event rows.
            updater: Store update executor.
            window_size: Maximum number of concurrent store updates.
            progress_interval: Rows between progress log lines.
        """
        self._source = source
        self._updater = updater
        self._window_size = window_size
        self.dedup = DedupTracker()
        self.metrics = MetricsAggregator(progress_interval=progress_interval)

    def run(self) -> RunSummary:
        """
        Process every row of the source.

        Returns:
            Summary of the run.

        Raises:
            RecordSourceError: If the source is not readable. Raised before
                any update is dispatched.
        """
        self._source.ensure_readable()
        start = time.monotonic()

        with BatchScheduler(
            self._updater.update_device,
            window_size=self._window_size,
            on_settled=self._on_settled,
        ) as scheduler:
            for row in self._source.iter_records():
                self.metrics.record_seen()
                record = self._admit(row)
                if record is not None:
                    scheduler.submit(record)

        summary = self.metrics.summary(
            devices_marked=len(self.dedup),
            elapsed_seconds=time.monotonic() - start,
        )
        logger.info(
            "CSV complete: Processed %d, Updated %d", summary.processed, summary.updated
        )
        return summary

    def _admit(self, row: dict[str, str | None]) -> ClassifiedRecord | None:
        """Run a row through validation, classification and dedup.

        Returns the record to dispatch, or None after recording a skip.
        """
        if not is_valid_row(row):
            logger.warning("Skipping record with missing data: %s", json.dumps(row))
            self.metrics.record(UpdateOutcome.SKIPPED_INVALID)
            return None

        suid = row["suid"].strip()
        zid = row["zid"].strip()
        source_app = row["sourceApp"]

        os_tag = classify_os(source_app)
        if os_tag is None:
            logger.info("No OS detected for suid=%s, zid=%s, sourceApp=%s", suid, zid, source_app)
            self.metrics.record(UpdateOutcome.SKIPPED_NO_OS_MATCH)
            return None

        if not self.dedup.admit(zid):
            logger.debug("Skipping suid=%s, zid=%s as device was already processed", suid, zid)
            self.metrics.record(UpdateOutcome.SKIPPED_ALREADY_PROCESSED)
            return None

        return ClassifiedRecord(suid=suid, zid=zid, os_tag=os_tag)

    def _on_settled(
        self,
        record: ClassifiedRecord,
        outcome: UpdateOutcome,
        error: BaseException | None,
    ) -> None:
        self.metrics.record(outcome)


def run_backfill(
    source: RecordSource,
    updater: DeviceUpdater,
    window_size: int = 20,
    progress_interval: int = 1000,
) -> RunSummary:
    """Run one backfill and log its summary."""
    logger.info("Updating %s with up to %d concurrent writes", updater.table_name, window_size)
    runner = BackfillRunner(
        source,
        updater,
        window_size=window_size,
        progress_interval=progress_interval,
    )
    summary = runner.run()
    log_summary(summary)
    return summary
