from __future__ import annotations
"""
Configuration for the catalog analytics engine.

Every tunable lives here as a module-level constant so the engine
modules never hardcode thresholds.  ``EngineConfig`` bundles the same
values into a validated pydantic object for callers (the CLI, the
report layer) that want to pass one settings object around.
"""

import os
from typing import FrozenSet, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Record shape
RECORD_FIELDS: Tuple[str, ...] = ("id", "category", "subcategory", "product_name", "description")
TEXT_FIELDS: Tuple[str, ...] = RECORD_FIELDS[1:]

# Tokenization
DEFAULT_STOPWORDS: FrozenSet[str] = frozenset(
    {"with", "from", "this", "that", "your", "into", "over", "made"}
)
MIN_TOKEN_LENGTH = int(os.getenv("CATALOG_MIN_TOKEN_LENGTH", "4"))

# Keyword cascade for materials.  Order matters: first match wins.
MATERIAL_RULES: List[Tuple[str, str]] = [
    ("leather", "Leather"),
    ("cashmere", "Cashmere"),
    ("cotton", "Cotton"),
    ("wool", "Wool"),
    ("silk", "Silk"),
]
MATERIAL_DEFAULT_LABEL = "Other / Unknown"

# Reporting thresholds (strictly greater than)
MIN_TOKEN_FREQUENCY = int(os.getenv("CATALOG_MIN_TOKEN_FREQUENCY", "5"))
MIN_BRAND_COUNT = int(os.getenv("CATALOG_MIN_BRAND_COUNT", "20"))

# Result limits for "top N" reports
LONGEST_DESCRIPTION_LIMIT = 20
KEYWORD_LIMIT = 30
SEARCH_LIMIT = int(os.getenv("CATALOG_SEARCH_LIMIT", "30"))

# Search defaults
SEARCH_FIELDS: Tuple[str, ...] = ("product_name", "description")
DEFAULT_SEARCH_QUERY = "cashmere scarf"

# Rollup rendering
ALL_LABEL = "ALL"
MISSING_LABEL = "MISSING"
ROLLUP_DIMENSIONS: Tuple[str, ...] = ("category", "subcategory")


class EngineConfig(BaseModel):
    """Validated bundle of the settings above."""

    model_config = ConfigDict(frozen=True)

    stopwords: FrozenSet[str] = DEFAULT_STOPWORDS
    min_token_length: int = Field(default=MIN_TOKEN_LENGTH, ge=1)
    material_rules: List[Tuple[str, str]] = Field(default_factory=lambda: list(MATERIAL_RULES))
    material_default_label: str = MATERIAL_DEFAULT_LABEL
    min_token_frequency: int = Field(default=MIN_TOKEN_FREQUENCY, ge=0)
    min_brand_count: int = Field(default=MIN_BRAND_COUNT, ge=0)
    longest_description_limit: int = Field(default=LONGEST_DESCRIPTION_LIMIT, ge=1)
    keyword_limit: int = Field(default=KEYWORD_LIMIT, ge=1)
    search_limit: int = Field(default=SEARCH_LIMIT, ge=1)
    search_fields: Tuple[str, ...] = SEARCH_FIELDS
    all_label: str = ALL_LABEL
    missing_label: str = MISSING_LABEL
