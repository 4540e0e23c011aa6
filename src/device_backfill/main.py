"""Main entry point for the device OS backfill job."""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dependency_injector import providers

from device_backfill.config import Config
from device_backfill.handlers.backfill import run_backfill
from device_backfill.infrastructure import DependenciesContainer
from device_backfill.models.record_source import RecordSourceError

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure logging to stdout."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Set the OS on desktop device records from a login-events CSV"
    )
    parser.add_argument("--env", help="Target environment; the table is <env>-user")
    parser.add_argument("--file", type=Path, help="Path to the login-events CSV")
    parser.add_argument(
        "--concurrency",
        type=int,
        help="Maximum number of concurrent store updates",
    )
    parser.add_argument(
        "--progress-interval",
        type=int,
        help="Log progress every N records",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the updates without writing them",
    )
    parser.add_argument(
        "--count-pending",
        action="store_true",
        help="Only count device records still named 'Desktop Agent' and exit",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Apply CLI overrides on top of the environment configuration."""
    config = Config.from_env()
    if args.env:
        config = config.with_env(args.env)
    if args.file is not None:
        config = replace(config, file_path=args.file)
    if args.concurrency is not None:
        config = replace(config, concurrency_limit=args.concurrency)
    if args.progress_interval is not None:
        config = replace(config, progress_interval=args.progress_interval)
    if args.dry_run:
        config = replace(config, dry_run=True)
    return config


def main(
    argv: list[str] | None = None,
    container: DependenciesContainer | None = None,
) -> int:
    """
    Run the backfill.

    Returns:
        Process exit code: 0 on completion, 1 on a fatal error.
    """
    setup_logging()
    args = parse_args(argv)

    try:
        config = build_config(args)
        config.validate()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    try:
        if container is None:
            container = DependenciesContainer()
        container.config.override(providers.Object(config))

        updater = container.device_updater()

        if args.count_pending:
            pending = updater.count_pending_devices()
            logger.info("Found %d device records without OS in %s", pending, config.table_name)
            return 0

        source = container.record_source()
        logger.info(
            "Starting process with table %s and file %s", config.table_name, config.file_path
        )
        run_backfill(
            source,
            updater,
            window_size=config.concurrency_limit,
            progress_interval=config.progress_interval,
        )
        return 0

    except RecordSourceError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except Exception as e:
        logger.error("Unhandled exception: %s", e, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
