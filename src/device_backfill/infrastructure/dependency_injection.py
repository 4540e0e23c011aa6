"""Dependency injection container for the application."""

import boto3
from dependency_injector import providers
from dependency_injector.containers import DeclarativeContainer

from device_backfill.config import Config
from device_backfill.infrastructure.csv_record_source import CsvRecordSource
from device_backfill.infrastructure.dynamodb_client import DynamoDBClient


def _create_session(config: Config) -> boto3.Session:
    """Create boto3 session using the profile and region from config."""
    return boto3.Session(
        profile_name=config.aws_profile,
        region_name=config.aws_region,
    )


def _create_device_updater(dynamodb_client: DynamoDBClient, config: Config):
    """Factory for DeviceUpdater to avoid circular import."""
    from device_backfill.services.device_updater import DeviceUpdater

    return DeviceUpdater(
        dynamodb_client,
        table_name=config.table_name,
        dry_run=config.dry_run,
    )


class DependenciesContainer(DeclarativeContainer):
    """DI container for the application."""

    config = providers.Singleton(Config.from_env)

    # AWS Session
    session = providers.Singleton(_create_session, config=config)

    # DynamoDB dependency chain
    dynamodb_boto_client = providers.Singleton(
        lambda session: session.client("dynamodb"),
        session=session,
    )

    dynamodb_client = providers.Singleton(
        DynamoDBClient,
        client=dynamodb_boto_client,
    )

    device_updater = providers.Singleton(
        _create_device_updater,
        dynamodb_client=dynamodb_client,
        config=config,
    )

    # Input
    record_source = providers.Factory(
        lambda config: CsvRecordSource(config.file_path),
        config=config,
    )
