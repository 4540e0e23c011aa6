"""Backfill the OS of desktop device records from login events."""

__version__ = "0.1.0"
