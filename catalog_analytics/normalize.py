from __future__ import annotations

"""
Text normalization utilities shared by the frequency report, the
duplicate detector and the full-text index.

Keeping the tokenizer in one place guarantees that documents and
queries are tokenized identically: the search index relies on that to
match anything at all.
"""

import re
from collections import Counter
from typing import AbstractSet, Any, Dict, Iterator, List, Optional

from loguru import logger

from .catalog import CatalogTable
from .config import DEFAULT_STOPWORDS, KEYWORD_LIMIT, MIN_TOKEN_FREQUENCY, MIN_TOKEN_LENGTH


# ---------------------------
# Tokenization
# ---------------------------

WHITESPACE_RE = re.compile(r"\s+")
NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def tokenize(
    text: Optional[str],
    stopwords: AbstractSet[str] = DEFAULT_STOPWORDS,
    min_length: int = MIN_TOKEN_LENGTH,
) -> Iterator[str]:
    """
    Lazily yield normalized tokens from ``text``.

    - split on whitespace runs
    - case-fold, then drop every character outside ``[a-z0-9]``
    - skip empty results, tokens shorter than ``min_length`` and
      stopwords

    ``None`` yields nothing.  The generator can be recreated at will
    from the same input and always produces the same sequence.
    """
    if not text:
        return
    for word in WHITESPACE_RE.split(text):
        token = NON_ALNUM_RE.sub("", word.casefold())
        if len(token) < min_length:
            continue
        if token in stopwords:
            continue
        yield token


def normalize_key(value: Optional[str]) -> Optional[str]:
    """Lowercase + trim.  Absent values stay absent."""
    if value is None:
        return None
    return value.strip().lower()


# ---------------------------
# Frequency counting
# ---------------------------

def token_frequency(
    table: CatalogTable,
    field: str = "product_name",
    *,
    min_frequency: int = MIN_TOKEN_FREQUENCY,
    limit: int = KEYWORD_LIMIT,
    stopwords: AbstractSet[str] = DEFAULT_STOPWORDS,
    min_length: int = MIN_TOKEN_LENGTH,
) -> List[Dict[str, Any]]:
    """
    Count tokens across one text field of the catalog.

    Only tokens seen strictly more than ``min_frequency`` times are
    reported, most frequent first (ties alphabetical), at most
    ``limit`` rows.
    """
    counts: Counter = Counter()
    for text in table.column(field):
        counts.update(tokenize(text, stopwords=stopwords, min_length=min_length))

    frequent = [(tok, n) for tok, n in counts.items() if n > min_frequency]
    frequent.sort(key=lambda x: (-x[1], x[0]))
    logger.debug(
        "Token frequency over '{}': {} distinct, {} above threshold", field, len(counts), len(frequent)
    )
    return [{"token": tok, "frequency": n} for tok, n in frequent[:limit]]
