from __future__ import annotations

"""
Catalog reports composed from the engine components.

Each report answers one analyst question about the catalog and returns
an ordered list of plain dict rows, ready to be written out as CSV or
JSON by the caller:

1.  ``category_share``                 -- products per category + % of catalog
2.  ``subcategory_rank``               -- subcategories ranked inside each category
3.  ``material_groups``                -- material mentioned in the description
4.  ``longest_descriptions``           -- content depth, longest first
5.  ``top_name_keywords``              -- frequent words in product names
6.  ``subcategory_not_in_description`` -- descriptions that never name the subcategory
7.  ``brand_hints``                    -- first word of the name as a brand guess
8.  ``search_products``                -- full-text AND search over name + description
9.  ``duplicate_names``                -- repeated product names
10. ``category_rollup``                -- category / subcategory / total counts

Settings come from an :class:`~catalog_analytics.config.EngineConfig`;
keyword arguments override individual values.
"""

from collections import Counter
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from .aggregate import group_count, group_rows, partition_sort_key, with_partition_rank, with_share_of_total
from .catalog import CatalogTable
from .classify import classify_counts
from .config import ROLLUP_DIMENSIONS, EngineConfig
from .duplicates import find_duplicates
from .normalize import token_frequency
from .rollup import rollup
from .search_index import SearchIndex

Row = Dict[str, Any]

_DEFAULT_CONFIG = EngineConfig()


def _cfg(config: Optional[EngineConfig]) -> EngineConfig:
    return config if config is not None else _DEFAULT_CONFIG


def _rename(rows: List[Row], old: str, new: str) -> List[Row]:
    return [{(new if k == old else k): v for k, v in r.items()} for r in rows]


# ---------------------------
# Distribution
# ---------------------------

def category_share(table: CatalogTable, config: Optional[EngineConfig] = None) -> List[Row]:
    rows = group_rows(group_count(table, ["category"]), ["category"])
    rows = with_share_of_total(rows, pct_field="pct_of_catalog")
    rows.sort(key=lambda r: (-r["count"],) + partition_sort_key([r["category"]]))
    return _rename(rows, "count", "product_count")


def subcategory_rank(table: CatalogTable, config: Optional[EngineConfig] = None) -> List[Row]:
    keys = ["category", "subcategory"]
    rows = group_rows(group_count(table, keys), keys)
    # Stable tie order inside a rank: alphabetical subcategory
    rows.sort(key=lambda r: partition_sort_key([r["subcategory"]]))
    rows = with_partition_rank(rows, ["category"], "count", rank_field="subcategory_rank")
    return _rename(rows, "count", "product_count")


def category_rollup(table: CatalogTable, config: Optional[EngineConfig] = None) -> List[Row]:
    cfg = _cfg(config)
    return rollup(
        table,
        list(ROLLUP_DIMENSIONS),
        all_label=cfg.all_label,
        missing_label=cfg.missing_label,
        count_field="product_count",
    )


# ---------------------------
# Text-derived reports
# ---------------------------

def material_groups(table: CatalogTable, config: Optional[EngineConfig] = None) -> List[Row]:
    cfg = _cfg(config)
    rows = classify_counts(
        table,
        "description",
        cfg.material_rules,
        cfg.material_default_label,
        label_field="material_group",
    )
    return _rename(rows, "count", "product_count")


def longest_descriptions(
    table: CatalogTable,
    config: Optional[EngineConfig] = None,
    *,
    limit: Optional[int] = None,
) -> List[Row]:
    """Records by description length, longest first; a missing description has length 0."""
    limit = limit if limit is not None else _cfg(config).longest_description_limit
    rows = [
        {
            "id": rec.id,
            "category": rec.category,
            "subcategory": rec.subcategory,
            "product_name": rec.product_name,
            "description_length": len(rec.description or ""),
        }
        for rec in table.scan()
    ]
    rows.sort(key=lambda r: (-r["description_length"], r["id"]))
    return rows[:limit]


def top_name_keywords(
    table: CatalogTable,
    config: Optional[EngineConfig] = None,
    *,
    min_frequency: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Row]:
    cfg = _cfg(config)
    return token_frequency(
        table,
        "product_name",
        min_frequency=cfg.min_token_frequency if min_frequency is None else min_frequency,
        limit=cfg.keyword_limit if limit is None else limit,
        stopwords=cfg.stopwords,
        min_length=cfg.min_token_length,
    )


def subcategory_not_in_description(table: CatalogTable, config: Optional[EngineConfig] = None) -> List[Row]:
    """Records whose description does not mention their subcategory (case-insensitive)."""
    out: List[Row] = []
    for rec in table.scan():
        if rec.subcategory is None:
            continue
        if rec.subcategory.lower() in (rec.description or "").lower():
            continue
        out.append(rec.model_dump())
    return out


def brand_hint(product_name: Optional[str]) -> Optional[str]:
    """First space-separated word of the name.  Crude on purpose."""
    if product_name is None:
        return None
    return product_name.split(" ", 1)[0].strip()


def brand_hints(
    table: CatalogTable,
    config: Optional[EngineConfig] = None,
    *,
    min_count: Optional[int] = None,
) -> List[Row]:
    min_count = _cfg(config).min_brand_count if min_count is None else min_count
    counts: Counter = Counter(
        hint for hint in map(brand_hint, table.column("product_name")) if hint is not None
    )
    rows = [{"brand_hint": b, "product_count": n} for b, n in counts.items() if n > min_count]
    rows.sort(key=lambda r: (-r["product_count"], r["brand_hint"]))
    return rows


def duplicate_names(table: CatalogTable, config: Optional[EngineConfig] = None) -> List[Row]:
    return [
        {"normalized_name": key, "occurrences": n}
        for key, n in find_duplicates(table, key_field="product_name").items()
    ]


# ---------------------------
# Search
# ---------------------------

def build_search_index(table: CatalogTable, config: Optional[EngineConfig] = None) -> SearchIndex:
    cfg = _cfg(config)
    return SearchIndex.build(
        table,
        cfg.search_fields,
        stopwords=cfg.stopwords,
        min_length=cfg.min_token_length,
    )


def search_products(
    table: CatalogTable,
    query_text: str,
    config: Optional[EngineConfig] = None,
    *,
    limit: Optional[int] = None,
    index: Optional[SearchIndex] = None,
) -> List[Row]:
    """
    Products matching every token of ``query_text``.

    Pass a prebuilt ``index`` to reuse it across queries; it must have
    been built from this same table.
    """
    cfg = _cfg(config)
    if index is None:
        index = build_search_index(table, cfg)
    hits = index.search(query_text, cfg.search_limit if limit is None else limit)
    if not hits:
        return []
    rows: List[Row] = [
        {
            "id": rec.id,
            "category": rec.category,
            "subcategory": rec.subcategory,
            "product_name": rec.product_name,
        }
        for rec in table.records_at([hit.position for hit in hits])
    ]
    logger.debug("Search '{}' returned {} products", query_text, len(rows))
    return rows


# ---------------------------
# Registry
# ---------------------------

ReportFn = Callable[..., List[Row]]

REPORTS: Dict[str, ReportFn] = {
    "category_share": category_share,
    "subcategory_rank": subcategory_rank,
    "material_groups": material_groups,
    "longest_descriptions": longest_descriptions,
    "top_name_keywords": top_name_keywords,
    "subcategory_not_in_description": subcategory_not_in_description,
    "brand_hints": brand_hints,
    "search_products": search_products,
    "duplicate_names": duplicate_names,
    "category_rollup": category_rollup,
}


def run_report(
    name: str,
    table: CatalogTable,
    config: Optional[EngineConfig] = None,
    *,
    query_text: Optional[str] = None,
) -> List[Row]:
    """Dispatch one report by name.  ``query_text`` is only used by search."""
    if name not in REPORTS:
        raise KeyError(f"Unknown report '{name}'. Available: {sorted(REPORTS)}")
    logger.info("Running report {}", name)
    if name == "search_products":
        return search_products(table, query_text or "", config)
    return REPORTS[name](table, config)
