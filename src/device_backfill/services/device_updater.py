"""Store update service for desktop device records."""

import logging

from device_backfill.infrastructure.dynamodb_client import DynamoDBClient, ItemNotFoundError
from device_backfill.models.schemas import ClassifiedRecord, UpdateOutcome

logger = logging.getLogger(__name__)

BASE_DEVICE_NAME = "Desktop Agent"


class DeviceNotFoundError(Exception):
    """Raised when the device record to update does not exist in the table."""


def build_device_name(os_tag: str) -> str:
    """Build the display name for a desktop device, e.g. "Desktop Agent (Mac)"."""
    return f"{BASE_DEVICE_NAME} ({os_tag})"


class DeviceUpdater:
    """Writes the derived OS onto existing device records."""

    def __init__(
        self,
        dynamodb_client: DynamoDBClient,
        table_name: str,
        dry_run: bool = False,
    ):
        """
        Initialize device updater.

        Args:
            dynamodb_client: DynamoDBClient instance.
            table_name: Target user table, e.g. "dev-user".
            dry_run: Log the updates instead of writing them.
        """
        self._dynamodb_client = dynamodb_client
        self._table_name = table_name
        self._dry_run = dry_run

    @property
    def table_name(self) -> str:
        """Get the target table name."""
        return self._table_name

    @staticmethod
    def device_key(suid: str, zid: str) -> dict[str, str]:
        """Primary key of a device record."""
        return {"pk": suid, "sk": f"device#{zid}"}

    def update_device(self, record: ClassifiedRecord) -> UpdateOutcome:
        """
        Set the name and os attributes of one device record.

        The write is a plain overwrite, so repeating it with the same
        record leaves the item unchanged.

        Args:
            record: Classified record to apply.

        Returns:
            UPDATED once written, or SKIPPED_DRY_RUN when nothing was written.

        Raises:
            DeviceNotFoundError: If the device record does not exist.
            ClientError: On any other store error. Not retried.
        """
        name = build_device_name(record.os_tag)
        key = self.device_key(record.suid, record.zid)

        if self._dry_run:
            logger.info(
                "[DRY RUN] Would update suid=%s, zid=%s with name=%s",
                record.suid,
                record.zid,
                name,
            )
            return UpdateOutcome.SKIPPED_DRY_RUN

        logger.debug("Updating suid=%s, zid=%s with name=%s", record.suid, record.zid, name)
        try:
            self._dynamodb_client.update_item(
                table_name=self._table_name,
                key=key,
                updates={"name": name, "os": record.os_tag.lower()},
            )
        except ItemNotFoundError as e:
            raise DeviceNotFoundError(
                f"No device record for suid={record.suid}, zid={record.zid}"
            ) from e
        return UpdateOutcome.UPDATED

    def count_pending_devices(self) -> int:
        """Count desktop device records whose name has no OS suffix yet."""
        return self._dynamodb_client.count_items(
            table_name=self._table_name,
            filter_expression="recordType = :rt AND #t = :type AND #n = :name",
            names={"#t": "type", "#n": "name"},
            values={":rt": "device", ":type": "desktop", ":name": BASE_DEVICE_NAME},
        )
