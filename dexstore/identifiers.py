"""Dex key helpers for the Kanto/Johto datasets."""

from __future__ import annotations

from .errors import InvalidArgument

# Dataset keys look like "#001"; no dataset entry needs more than three digits.
DEX_KEY_PREFIX = "#"
DEX_KEY_WIDTH = 3
MAX_DEX_NUMBER = 10**DEX_KEY_WIDTH - 1


def resolve_identifier(numeric: str) -> str:
    """Convert a decimal dex number into the stored dex key.

    Args:
        numeric: Non-negative integer as a decimal string (e.g., "7", "150").

    Returns:
        The padded dex key, e.g. "#007".

    Raises:
        InvalidArgument: If the value is not a non-negative integer or needs more than three digits.
    """
    text = numeric.strip() if isinstance(numeric, str) else ""
    # int() would also accept "+7" and "1_0"; only plain digits are dex numbers.
    if not text.isascii() or not text.isdigit():
        raise InvalidArgument(f"Invalid Pokemon ID: {numeric!r}")
    number = int(text)
    if number > MAX_DEX_NUMBER:
        raise InvalidArgument(f"Pokemon ID out of range: {numeric!r}")
    return f"{DEX_KEY_PREFIX}{number:0{DEX_KEY_WIDTH}d}"
