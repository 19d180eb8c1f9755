from __future__ import annotations

"""
Grouping and window-style metrics over the catalog.

``group_count`` does the single-pass GROUP BY; the ``with_*`` helpers
take the resulting rows and attach what a SQL engine would compute
with window functions:

* ``with_share_of_total`` -- ``100 * count / SUM(count) OVER ()``
* ``with_partition_rank`` -- ``RANK() OVER (PARTITION BY ... ORDER BY ...)``

Rows are plain dicts so the output can be rendered or serialized by
the caller without conversion.  Helpers never mutate their input rows.
"""

from collections import Counter, defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from loguru import logger

from .catalog import CatalogTable, check_fields
from .errors import EmptyInputError

GroupKey = Tuple[Any, ...]

_CENT = Decimal("0.01")


def group_count(table: CatalogTable, key_fields: Sequence[str]) -> Dict[GroupKey, int]:
    """
    Count records per distinct projection onto ``key_fields``.

    ``None`` is a key value of its own, it is not merged into anything.
    Keys appear in first-seen order.
    """
    key_fields = list(key_fields)
    check_fields(key_fields)
    columns = table.columns(key_fields)
    counts: Counter = Counter(zip(*columns)) if columns else Counter({(): len(table)})
    return dict(counts)


def group_rows(counts: Dict[GroupKey, int], key_fields: Sequence[str]) -> List[Dict[str, Any]]:
    """Flatten a ``group_count`` mapping into ``{field..., "count"}`` rows."""
    rows: List[Dict[str, Any]] = []
    for key, n in counts.items():
        row = dict(zip(key_fields, key))
        row["count"] = n
        rows.append(row)
    return rows


def _share(count: int, total: int) -> float:
    # Decimal keeps SQL ROUND semantics (half away from zero).
    pct = (Decimal(100) * Decimal(count) / Decimal(total)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return float(pct)


def with_share_of_total(
    rows: Iterable[Dict[str, Any]],
    *,
    count_field: str = "count",
    pct_field: str = "pct_of_total",
) -> List[Dict[str, Any]]:
    """
    Attach each row's percentage of the summed counts, rounded to two
    decimals.  Raises :class:`EmptyInputError` when there is nothing to
    divide by.
    """
    rows = list(rows)
    total = sum(r[count_field] for r in rows)
    if not rows or total == 0:
        raise EmptyInputError("Share of total requested over zero rows")
    return [{**r, pct_field: _share(r[count_field], total)} for r in rows]


def _sort_value(value: Any) -> Tuple[int, Any]:
    # Ascending order with missing values last, as in SQL's NULLS LAST.
    return (1, "") if value is None else (0, value)


def partition_sort_key(values: Iterable[Any]) -> Tuple[Tuple[int, Any], ...]:
    return tuple(_sort_value(v) for v in values)


def with_partition_rank(
    rows: Iterable[Dict[str, Any]],
    partition_fields: Sequence[str],
    order_field: str,
    descending: bool = True,
    *,
    rank_field: str = "rank",
    dense: bool = False,
) -> List[Dict[str, Any]]:
    """
    Rank rows inside each partition by ``order_field``.

    Standard RANK semantics: equal values share a rank and the next
    distinct value gets its 1-based row position, so ranks may skip
    (5, 5, 2 -> 1, 1, 3).  ``dense=True`` numbers distinct values
    consecutively instead (1, 1, 2).

    Output is ordered by partition key ascending, then rank; rows that
    tie keep their input order.
    """
    rows = list(rows)
    if not rows:
        raise EmptyInputError("Rank requested over zero rows")

    # Field names are checked against the first row
    check_fields(list(partition_fields) + [order_field], allowed=rows[0].keys())

    partitions: Dict[GroupKey, List[Dict[str, Any]]] = defaultdict(list)
    for r in rows:
        partitions[tuple(r.get(f) for f in partition_fields)].append(r)

    out: List[Dict[str, Any]] = []
    for pkey in sorted(partitions, key=partition_sort_key):
        # reverse=True keeps ties stable; missing values rank last ascending,
        # first descending, as in PostgreSQL.
        members = sorted(
            partitions[pkey],
            key=lambda r: _sort_value(r.get(order_field)),
            reverse=descending,
        )

        rank = 0
        distinct = 0
        previous: Any = object()
        for position, r in enumerate(members, start=1):
            value = r.get(order_field)
            if value != previous:
                distinct += 1
                rank = distinct if dense else position
                previous = value
            out.append({**r, rank_field: rank})

    logger.debug("Ranked {} rows across {} partitions", len(rows), len(partitions))
    return out

