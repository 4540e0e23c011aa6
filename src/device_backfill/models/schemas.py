"""Pydantic models for device records and run results."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel

DEVICE_SORT_KEY_PREFIX = "device#"


class DeviceKey(BaseModel):
    """Identity of a device record in the user table."""

    suid: str
    zid: str

    @property
    def partition_key(self) -> str:
        return self.suid

    @property
    def sort_key(self) -> str:
        return f"{DEVICE_SORT_KEY_PREFIX}{self.zid}"


class ClassifiedRecord(BaseModel):
    """A validated row with the OS derived from its sourceApp."""

    suid: str
    zid: str
    os_tag: Literal["Mac", "Windows"]

    @property
    def key(self) -> DeviceKey:
        return DeviceKey(suid=self.suid, zid=self.zid)


class UpdateOutcome(str, Enum):
    """Terminal result of a single input row."""

    UPDATED = "updated"
    SKIPPED_INVALID = "skipped_invalid"
    SKIPPED_NO_OS_MATCH = "skipped_no_os_match"
    SKIPPED_ALREADY_PROCESSED = "skipped_already_processed"
    SKIPPED_NOT_FOUND = "skipped_not_found"
    SKIPPED_DRY_RUN = "skipped_dry_run"
    FAILED = "failed"


class RunSummary(BaseModel):
    """Aggregate counters for one backfill run."""

    processed: int = 0
    updated: int = 0
    failed: int = 0
    skipped_invalid: int = 0
    skipped_no_os_match: int = 0
    skipped_already_processed: int = 0
    skipped_not_found: int = 0
    skipped_dry_run: int = 0
    devices_marked: int = 0
    elapsed_seconds: float = 0.0

    @property
    def skipped(self) -> int:
        """Total rows that never produced a store update."""
        return (
            self.skipped_invalid
            + self.skipped_no_os_match
            + self.skipped_already_processed
            + self.skipped_not_found
            + self.skipped_dry_run
        )
