"""Run counters and summary reporting."""

import logging
import threading

from device_backfill.models.schemas import RunSummary, UpdateOutcome

logger = logging.getLogger(__name__)

_OUTCOME_FIELDS = {
    UpdateOutcome.UPDATED: "updated",
    UpdateOutcome.FAILED: "failed",
    UpdateOutcome.SKIPPED_INVALID: "skipped_invalid",
    UpdateOutcome.SKIPPED_NO_OS_MATCH: "skipped_no_os_match",
    UpdateOutcome.SKIPPED_ALREADY_PROCESSED: "skipped_already_processed",
    UpdateOutcome.SKIPPED_NOT_FOUND: "skipped_not_found",
    UpdateOutcome.SKIPPED_DRY_RUN: "skipped_dry_run",
}


class MetricsAggregator:
    """Counts rows seen and their outcomes."""

    def __init__(self, progress_interval: int = 1000):
        """
        Initialize the aggregator.

        Args:
            progress_interval: Log a progress line every this many rows seen.
        """
        self._progress_interval = progress_interval
        self._lock = threading.Lock()
        self._processed = 0
        self._counts = {field: 0 for field in _OUTCOME_FIELDS.values()}

    def record_seen(self) -> None:
        """Count one input row and log progress at the configured interval."""
        with self._lock:
            self._processed += 1
            processed = self._processed
            updated = self._counts["updated"]
        if processed % self._progress_interval == 0:
            logger.info("Processed %d records (updated %d so far)", processed, updated)

    def record(self, outcome: UpdateOutcome) -> None:
        with self._lock:
            self._counts[_OUTCOME_FIELDS[outcome]] += 1

    def summary(self, devices_marked: int, elapsed_seconds: float) -> RunSummary:
        with self._lock:
            return RunSummary(
                processed=self._processed,
                devices_marked=devices_marked,
                elapsed_seconds=elapsed_seconds,
                **self._counts,
            )


def log_summary(summary: RunSummary) -> None:
    """Log the final report of a run."""
    logger.info("=" * 60)
    logger.info("Process summary:")
    logger.info("  - Total records processed from CSV: %d", summary.processed)
    logger.info("  - Total records updated: %d", summary.updated)
    logger.info("  - Failed updates: %d", summary.failed)
    logger.info("  - Skipped (missing data): %d", summary.skipped_invalid)
    logger.info("  - Skipped (no OS detected): %d", summary.skipped_no_os_match)
    logger.info("  - Skipped (already processed): %d", summary.skipped_already_processed)
    logger.info("  - Skipped (device not found): %d", summary.skipped_not_found)
    logger.info("  - Skipped (dry run, would update): %d", summary.skipped_dry_run)
    logger.info("Processed devices in set: %d", summary.devices_marked)
    logger.info("Execution time: %.1f seconds", summary.elapsed_seconds)
    logger.info("=" * 60)
