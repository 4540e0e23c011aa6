"""Structural validation of raw login-event rows."""

REQUIRED_FIELDS = ("suid", "zid", "sourceApp")


def is_valid_row(row: dict[str, str | None]) -> bool:
    """Return True if every required field is present and non-blank."""
    for field in REQUIRED_FIELDS:
        value = row.get(field)
        if value is None or not value.strip():
            return False
    return True
