"""Parsing of operator-entered values.

All parse failures raise InputError with the console message the CLI prints.
"""

import re
from datetime import datetime

from .errors import InputError

EXPIRATION_TIME_OF_DAY = "23:59:59"

# ASCII digits only, no underscores or leading plus
COUNT_PATTERN = re.compile(r"-?[0-9]+")
INDEX_PATTERN = re.compile(r"[0-9]+")


def parse_expiration(text: str) -> datetime:
    """Parse ``YYYY-MM-DD`` into the last second of that day in local time.

    Returns:
        A timezone-aware datetime in the local zone.
    """
    try:
        naive = datetime.strptime(f"{text.strip()} {EXPIRATION_TIME_OF_DAY}", "%Y-%m-%d %H:%M:%S")
    except ValueError:
        raise InputError("Cannot parse date. Aborting.")
    return naive.astimezone()


def to_epoch(moment: datetime) -> int:
    return int(moment.timestamp())


def parse_code_count(text: str) -> int:
    """Parse the requested number of codes; must be a positive integer."""
    text = text.strip()
    if not COUNT_PATTERN.fullmatch(text):
        raise InputError("Cannot parse number of vouchers. Aborting.")
    count = int(text)
    if count <= 0:
        raise InputError("Number of codes must be more than zero.")
    return count


def parse_selection(text: str, product_count: int) -> int:
    """Parse a zero-based product index and check it against the list size.

    Args:
        text: Raw operator input.
        product_count: Number of products that were displayed.

    Returns:
        The index, guaranteed to satisfy ``0 <= index < product_count``.
    """
    text = text.strip()
    if not INDEX_PATTERN.fullmatch(text):
        raise InputError("Cannot parse selected ID of product. Aborting.")
    index = int(text)
    if index >= product_count:
        raise InputError("Invalid product selected")
    return index
