from __future__ import annotations

"""
Hierarchical ROLLUP counts.

For dimensions ``[d1, ..., dn]`` the rollup emits n + 1 grouping
levels: level 0 groups on every dimension, level k replaces the last k
dimensions with the ``ALL`` sentinel, level n is the grand total.  This
is the standard ROLLUP, not the CUBE / grouping-sets power set.

Keys are tagged: each position holds either a concrete value or one of
two sentinels, so a record whose category is itself missing
(``MISSING``) never collapses into the subtotal bucket (``ALL``).
"""

import enum
from collections import Counter
from typing import Any, Dict, List, Sequence, Tuple, Union

from loguru import logger

from .catalog import CatalogTable, check_fields
from .config import ALL_LABEL, MISSING_LABEL


class Sentinel(enum.Enum):
    ALL = "ALL"
    MISSING = "MISSING"


KeyPart = Union[str, Sentinel]
RollupKey = Tuple[KeyPart, ...]

# Concrete values first, then MISSING, then ALL.
_SENTINEL_ORDER = {Sentinel.MISSING: 1, Sentinel.ALL: 2}


def rollup_level(key: RollupKey) -> int:
    """Number of dimensions rolled up to ``ALL`` in ``key``."""
    return sum(1 for part in key if part is Sentinel.ALL)


def _part_sort_key(part: KeyPart) -> Tuple[int, Any]:
    if isinstance(part, Sentinel):
        return (_SENTINEL_ORDER[part], "")
    return (0, part)


def rollup_sort_key(key: RollupKey) -> Tuple[Any, ...]:
    return (rollup_level(key),) + tuple(_part_sort_key(p) for p in key)


def rollup_counts(table: CatalogTable, dimensions: Sequence[str]) -> Dict[RollupKey, int]:
    """
    Count records at every rollup level in a single pass.

    Each record contributes once per level.  An empty table still
    yields the grand-total key with a count of 0, as SQL does.
    """
    dimensions = list(dimensions)
    check_fields(dimensions)
    n = len(dimensions)

    projected = zip(*table.columns(dimensions)) if n else [()] * len(table)
    counts: Counter = Counter()
    for values in projected:
        key = tuple(Sentinel.MISSING if v is None else v for v in values)
        for level in range(n + 1):
            counts[key[: n - level] + (Sentinel.ALL,) * level] += 1

    grand_total = (Sentinel.ALL,) * n
    if grand_total not in counts:
        counts[grand_total] = 0

    logger.debug("Rollup over {}: {} keys across {} levels", dimensions, len(counts), n + 1)
    return dict(counts)


def render_part(part: KeyPart, all_label: str = ALL_LABEL, missing_label: str = MISSING_LABEL) -> str:
    if part is Sentinel.ALL:
        return all_label
    if part is Sentinel.MISSING:
        return missing_label
    return part


def rollup(
    table: CatalogTable,
    dimensions: Sequence[str],
    *,
    all_label: str = ALL_LABEL,
    missing_label: str = MISSING_LABEL,
    count_field: str = "count",
) -> List[Dict[str, Any]]:
    """
    Rollup rows ``{dimension..., count, rollup_level}``.

    Ordered by rollup level (detail, subtotals, grand total) and then by
    dimension values ascending.  Sentinels are rendered with
    ``all_label`` / ``missing_label``; ``rollup_level`` tells them apart
    from a source value that happens to spell the same.
    """
    dimensions = list(dimensions)
    counts = rollup_counts(table, dimensions)
    rows: List[Dict[str, Any]] = []
    for key in sorted(counts, key=rollup_sort_key):
        row: Dict[str, Any] = {
            dim: render_part(part, all_label, missing_label) for dim, part in zip(dimensions, key)
        }
        row[count_field] = counts[key]
        row["rollup_level"] = rollup_level(key)
        rows.append(row)
    return rows
