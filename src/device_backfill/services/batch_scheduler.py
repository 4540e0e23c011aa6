"""Windowed concurrent dispatch of device updates."""

import logging
from concurrent.futures import ALL_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable

from device_backfill.models.schemas import ClassifiedRecord, UpdateOutcome
from device_backfill.services.device_updater import DeviceNotFoundError

logger = logging.getLogger(__name__)

SettledCallback = Callable[[ClassifiedRecord, UpdateOutcome, BaseException | None], None]


class BatchScheduler:
    """Runs update tasks concurrently, one fixed-size window at a time.

    Each submitted record starts its update immediately. Once the window
    is full, submit() blocks until every task in it has settled, whether it
    succeeded or failed, and only then accepts the next record. A failed
    task never cancels its siblings.

    Use as a context manager; leaving the block flushes the last window and
    shuts the worker pool down.
    """

    def __init__(
        self,
        update_fn: Callable[[ClassifiedRecord], UpdateOutcome],
        window_size: int = 20,
        on_settled: SettledCallback | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            update_fn: Callable performing one store update. Returns the
                outcome of the record and raises on failure.
            window_size: Maximum number of updates in flight at once.
            on_settled: Called once per task, in the caller's thread, after
                its window has settled.
        """
        if window_size < 1:
            raise ValueError("window_size must be at least 1")

        self._update_fn = update_fn
        self._window_size = window_size
        self._on_settled = on_settled
        self._executor: ThreadPoolExecutor | None = None
        self._window: dict[Future, ClassifiedRecord] = {}
        self._windows_settled = 0

    @property
    def pending(self) -> int:
        """Number of tasks in the current, not yet settled window."""
        return len(self._window)

    @property
    def windows_settled(self) -> int:
        return self._windows_settled

    def __enter__(self) -> "BatchScheduler":
        self._executor = ThreadPoolExecutor(
            max_workers=self._window_size,
            thread_name_prefix="device-update",
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.flush()
        finally:
            self._executor.shutdown(wait=True)
            self._executor = None

    def submit(self, record: ClassifiedRecord) -> None:
        """Start the update for a record, settling the window when it is full."""
        if self._executor is None:
            raise RuntimeError("BatchScheduler must be used as a context manager")

        future = self._executor.submit(self._update_fn, record)
        self._window[future] = record

        if len(self._window) >= self._window_size:
            self._settle_window()

    def flush(self) -> None:
        """Settle any tasks left in a partial final window."""
        if self._window:
            self._settle_window()

    def _settle_window(self) -> None:
        window = self._window
        self._window = {}

        wait(window, return_when=ALL_COMPLETED)
        self._windows_settled += 1

        for future, record in window.items():
            error = future.exception()
            if error is None:
                outcome = future.result()
            else:
                outcome = self._outcome_for(record, error)
            if self._on_settled is not None:
                self._on_settled(record, outcome, error)

        logger.debug("Settled window %d (%d task(s))", self._windows_settled, len(window))

    @staticmethod
    def _outcome_for(record: ClassifiedRecord, error: BaseException) -> UpdateOutcome:
        if isinstance(error, DeviceNotFoundError):
            logger.info("No matching item for suid=%s, zid=%s", record.suid, record.zid)
            return UpdateOutcome.SKIPPED_NOT_FOUND

        logger.error(
            "Error processing suid=%s, zid=%s: %s",
            record.suid,
            record.zid,
            error,
            exc_info=(type(error), error, error.__traceback__),
        )
        return UpdateOutcome.FAILED
