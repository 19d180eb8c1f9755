from __future__ import annotations

"""
Keyword-cascade classification of free text.

A rule list is evaluated top to bottom and the first keyword found as
a case-insensitive substring decides the label, exactly like a chain
of ``CASE WHEN ... ILIKE`` branches.  Rules are therefore kept as an
ordered sequence, never a dict: an earlier rule always beats a later
one even when both match.
"""

from collections import Counter
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from loguru import logger

from .catalog import CatalogTable, check_fields
from .config import MATERIAL_DEFAULT_LABEL, MATERIAL_RULES, TEXT_FIELDS


class KeywordRule(NamedTuple):
    keyword: str
    label: str


Rule = Union[KeywordRule, Tuple[str, str]]


def _compile(rules: Sequence[Rule]) -> List[KeywordRule]:
    return [KeywordRule(kw.lower(), label) for kw, label in rules]


def _first_match(text: Optional[str], compiled: List[KeywordRule], default_label: str) -> str:
    if not text:
        return default_label
    lowered = text.lower()
    for keyword, label in compiled:
        if keyword in lowered:
            return label
    return default_label


def classify(
    text: Optional[str],
    rules: Sequence[Rule] = MATERIAL_RULES,
    default_label: str = MATERIAL_DEFAULT_LABEL,
) -> str:
    """Return the label of the first rule whose keyword occurs in ``text``."""
    return _first_match(text, _compile(rules), default_label)


def classify_counts(
    table: CatalogTable,
    field: str = "description",
    rules: Sequence[Rule] = MATERIAL_RULES,
    default_label: str = MATERIAL_DEFAULT_LABEL,
    *,
    label_field: str = "material_group",
) -> List[Dict[str, Any]]:
    """
    Classify every record's ``field`` and count records per label.

    Rows come back largest group first, ties ordered by label.
    """
    check_fields([field], TEXT_FIELDS)
    compiled = _compile(rules)
    counts: Counter = Counter(
        _first_match(text, compiled, default_label) for text in table.column(field)
    )
    logger.debug("Classified '{}' into {} labels", field, len(counts))
    ordered = sorted(counts.items(), key=lambda x: (-x[1], x[0]))
    return [{label_field: label, "count": n} for label, n in ordered]
