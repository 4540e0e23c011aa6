"""Derive the device OS from the sourceApp of a login event."""

# Checked in order; the first substring found wins.
OS_RULES = (
    ("mac", "Mac"),
    ("windows", "Windows"),
)


def classify_os(source_app: str) -> str | None:
    """
    Classify a sourceApp string as Mac or Windows.

    Args:
        source_app: Free-text client description, e.g. "Desktop Agent macOS 14.2".

    Returns:
        "Mac" or "Windows", or None if neither substring is present.
    """
    lowered = source_app.lower()
    for needle, os_tag in OS_RULES:
        if needle in lowered:
            return os_tag
    return None
