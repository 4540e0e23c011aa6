"""Models package."""

from device_backfill.models.record_source import RecordSource, RecordSourceError
from device_backfill.models.schemas import (
    ClassifiedRecord,
    DeviceKey,
    RunSummary,
    UpdateOutcome,
)

__all__ = [
    "ClassifiedRecord",
    "DeviceKey",
    "RecordSource",
    "RecordSourceError",
    "RunSummary",
    "UpdateOutcome",
]
