"""Handlers package."""

from device_backfill.handlers.backfill import BackfillRunner, run_backfill

__all__ = ["BackfillRunner", "run_backfill"]
