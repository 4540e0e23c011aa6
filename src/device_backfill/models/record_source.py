from abc import ABC, abstractmethod
from typing import Iterator


class RecordSourceError(Exception):
    """Raised when the input records cannot be read at all."""


class RecordSource(ABC):
    """Abstract base class for login-event record sources."""

    @abstractmethod
    def ensure_readable(self) -> None:
        """Check that the source can be read.

        Raises:
            RecordSourceError: If the source is missing or unreadable.
        """
        pass

    @abstractmethod
    def iter_records(self) -> Iterator[dict[str, str | None]]:
        """Yield raw records lazily, in source order.

        Returns:
            Iterator of column name -> value mappings.
        """
        pass
