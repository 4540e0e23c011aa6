"""Infrastructure package."""

from device_backfill.infrastructure.csv_record_source import CsvRecordSource
from device_backfill.infrastructure.dependency_injection import DependenciesContainer
from device_backfill.infrastructure.dynamodb_client import DynamoDBClient, ItemNotFoundError

__all__ = [
    "CsvRecordSource",
    "DependenciesContainer",
    "DynamoDBClient",
    "ItemNotFoundError",
]
