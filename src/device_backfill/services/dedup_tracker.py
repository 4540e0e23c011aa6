"""In-run deduplication of device updates."""

import threading


class DedupTracker:
    """Remembers which devices were already admitted for an update in this run.

    Devices are marked when they are admitted, not when their update
    succeeds, so a failed update is not attempted again later in the run.
    """

    def __init__(self):
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def should_process(self, zid: str) -> bool:
        with self._lock:
            return zid not in self._seen

    def mark_processed(self, zid: str) -> None:
        with self._lock:
            self._seen.add(zid)

    def admit(self, zid: str) -> bool:
        """Mark the device and return True, or return False if already marked."""
        with self._lock:
            if zid in self._seen:
                return False
            self._seen.add(zid)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
