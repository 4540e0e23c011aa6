from .batch_scheduler import BatchScheduler
from .dedup_tracker import DedupTracker
from .device_updater import DeviceNotFoundError, DeviceUpdater, build_device_name
from .metrics import MetricsAggregator, log_summary
from .os_classifier import classify_os
from .row_validator import is_valid_row

__all__ = [
    "BatchScheduler",
    "DedupTracker",
    "DeviceNotFoundError",
    "DeviceUpdater",
    "build_device_name",
    "MetricsAggregator",
    "log_summary",
    "classify_os",
    "is_valid_row",
]
