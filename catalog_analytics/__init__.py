"""
Top-level package for the catalog analytics engine.

The engine computes distribution statistics, keyword classifications,
duplicate signals and full-text search results over a product catalog
held in memory.  Every operation is a pure function of a loaded
:class:`~catalog_analytics.catalog.CatalogTable`; there are no side
effects on import and no I/O below the CLI.
"""

from .aggregate import group_count, group_rows, with_partition_rank, with_share_of_total
from .catalog import CatalogTable, ProductRecord, catalog_from_frame, load, load_catalog_csv
from .classify import KeywordRule, classify, classify_counts
from .config import EngineConfig
from .duplicates import find_duplicates
from .errors import CatalogError, EmptyInputError, InvalidFieldError
from .normalize import normalize_key, token_frequency, tokenize
from .rollup import Sentinel, rollup, rollup_counts
from .search_index import SearchHit, SearchIndex

__all__ = [
    "CatalogError",
    "CatalogTable",
    "EmptyInputError",
    "EngineConfig",
    "InvalidFieldError",
    "KeywordRule",
    "ProductRecord",
    "SearchHit",
    "SearchIndex",
    "Sentinel",
    "catalog_from_frame",
    "classify",
    "classify_counts",
    "find_duplicates",
    "group_count",
    "group_rows",
    "load",
    "load_catalog_csv",
    "normalize_key",
    "rollup",
    "rollup_counts",
    "token_frequency",
    "tokenize",
    "with_partition_rank",
    "with_share_of_total",
]
