import csv
import logging
from pathlib import Path
from typing import Iterator

from device_backfill.models.record_source import RecordSource, RecordSourceError

logger = logging.getLogger(__name__)


class CsvRecordSource(RecordSource):
    """Record source that streams rows from a CSV export.

    The first line is the header; each following row is yielded as a dict
    keyed by header name. Short rows yield None for the missing cells.
    """

    def __init__(self, file_path: Path, encoding: str = "utf-8-sig"):
        """Initialize the CSV record source.

        Args:
            file_path: Path to the CSV file.
            encoding: File encoding. The default strips a leading BOM.
        """
        self.file_path = Path(file_path)
        self.encoding = encoding

    def ensure_readable(self) -> None:
        if not self.file_path.exists():
            raise RecordSourceError(f"CSV file not found: {self.file_path}")

        if not self.file_path.is_file():
            raise RecordSourceError(f"CSV path is not a file: {self.file_path}")

        try:
            with open(self.file_path, "r", newline="", encoding=self.encoding) as f:
                f.read(1)
        except (OSError, UnicodeDecodeError) as e:
            raise RecordSourceError(f"CSV file is not readable: {self.file_path}: {e}") from e

    def iter_records(self) -> Iterator[dict[str, str | None]]:
        """Stream rows from the CSV file without loading it into memory."""
        logger.info("Reading records from %s", self.file_path)
        try:
            with open(self.file_path, "r", newline="", encoding=self.encoding) as f:
                reader = csv.DictReader(f)
                for row in reader:
                    yield row
        except FileNotFoundError as e:
            raise RecordSourceError(f"CSV file not found: {self.file_path}") from e
