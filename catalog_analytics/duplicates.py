from __future__ import annotations

"""Duplicate detection on a normalized text key."""

from collections import Counter
from typing import Callable, Dict, Optional

from loguru import logger

from .catalog import CatalogTable, check_fields
from .config import TEXT_FIELDS
from .normalize import normalize_key


def find_duplicates(
    table: CatalogTable,
    normalize_fn: Callable[[Optional[str]], Optional[str]] = normalize_key,
    key_field: str = "product_name",
) -> Dict[str, int]:
    """
    Normalized keys seen more than once, with their counts.

    Ordered by count descending, then key.  Records whose normalized key
    is ``None`` (absent value) are not counted.
    """
    check_fields([key_field], TEXT_FIELDS)
    counts: Counter = Counter()
    for value in table.column(key_field):
        key = normalize_fn(value)
        if key is not None:
            counts[key] += 1

    dupes = sorted(((k, n) for k, n in counts.items() if n > 1), key=lambda x: (-x[1], x[0]))
    logger.debug("Duplicate scan on '{}': {} keys repeated", key_field, len(dupes))
    return dict(dupes)
