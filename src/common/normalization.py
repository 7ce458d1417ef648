"""
Query normalization for stable cache keys.

Every cache lookup, every cache write and every record persisted by the
built-in store layer is keyed by the normalized form of the user's input.
"""


def normalize(raw: str | None) -> str:
    """
    Convert raw query text into its canonical cache key.

    Trims leading/trailing whitespace and lower-cases, so " Paris " and
    "paris" map to the same key.

    Args:
        raw: Text as typed by the user (None is treated as empty)

    Returns:
        Normalized key, possibly empty
    """
    if not raw:
        return ""
    return raw.strip().lower()
