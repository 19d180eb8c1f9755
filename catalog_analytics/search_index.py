from __future__ import annotations

"""
Minimal full-text index over catalog text fields.

The index is a build-then-query object: :meth:`SearchIndex.build`
tokenizes the whole table in one pass and returns a finished, read-only
index.  There is no incremental update; a changed catalog means a new
``build``.  Once returned the index can be shared freely between
concurrent readers.

Matching follows plain-query full-text semantics: a record matches
only if it contains every distinct query token.  Documents and
queries go through the same :func:`~catalog_analytics.normalize.tokenize`.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import AbstractSet, Dict, FrozenSet, List, Mapping, Optional, Sequence, Set, Tuple

from loguru import logger

from .catalog import CatalogTable, check_fields
from .config import DEFAULT_STOPWORDS, MIN_TOKEN_LENGTH, SEARCH_FIELDS, SEARCH_LIMIT, TEXT_FIELDS
from .normalize import tokenize


@dataclass(frozen=True)
class SearchHit:
    id: int
    position: int
    score: int


class SearchIndex:
    """
    Inverted index: token -> positions of the records containing it,
    plus the token count of every record.

    Positions (row numbers in the table) are used internally because
    record ids are not guaranteed to be unique.
    """

    def __init__(
        self,
        postings: Mapping[str, FrozenSet[int]],
        doc_lengths: Sequence[int],
        doc_ids: Sequence[int],
        fields: Tuple[str, ...],
        stopwords: AbstractSet[str],
        min_length: int,
    ):
        self._postings = MappingProxyType(dict(postings))
        self._doc_lengths = tuple(doc_lengths)
        self._doc_ids = tuple(doc_ids)
        self.fields = fields
        self.stopwords = frozenset(stopwords)
        self.min_length = min_length

    # ---------------------------
    # Construction
    # ---------------------------

    @classmethod
    def build(
        cls,
        table: CatalogTable,
        fields: Sequence[str] = SEARCH_FIELDS,
        *,
        stopwords: AbstractSet[str] = DEFAULT_STOPWORDS,
        min_length: int = MIN_TOKEN_LENGTH,
    ) -> "SearchIndex":
        """
        Index the concatenation of ``fields`` for every record.

        Missing field values count as empty strings.
        """
        fields = tuple(fields)
        check_fields(fields, TEXT_FIELDS)
        logger.info("Building search index over {} records (fields={})", len(table), list(fields))

        rows = zip(*table.columns(fields)) if fields else [()] * len(table)
        postings: Dict[str, Set[int]] = {}
        doc_lengths: List[int] = []
        for pos, values in enumerate(rows):
            text = " ".join(v or "" for v in values)
            tokens = list(tokenize(text, stopwords=stopwords, min_length=min_length))
            doc_lengths.append(len(tokens))
            for tok in set(tokens):
                postings.setdefault(tok, set()).add(pos)

        frozen = {tok: frozenset(docs) for tok, docs in postings.items()}
        logger.debug("Search index built: {} tokens, {} documents", len(frozen), len(doc_lengths))
        return cls(frozen, doc_lengths, table.ids(), fields, stopwords, min_length)

    # ---------------------------
    # Introspection
    # ---------------------------

    def __len__(self) -> int:
        return len(self._doc_ids)

    @property
    def vocabulary_size(self) -> int:
        return len(self._postings)

    def postings(self, token: str) -> FrozenSet[int]:
        return self._postings.get(token, frozenset())

    def doc_length(self, position: int) -> int:
        return self._doc_lengths[position]

    # ---------------------------
    # Querying
    # ---------------------------

    def query_tokens(self, query_text: Optional[str]) -> List[str]:
        """Distinct query tokens in first-seen order."""
        seen: Dict[str, None] = {}
        for tok in tokenize(query_text, stopwords=self.stopwords, min_length=self.min_length):
            seen.setdefault(tok, None)
        return list(seen)

    def search(self, query_text: Optional[str], limit: int = SEARCH_LIMIT) -> List[SearchHit]:
        """
        Records containing every query token, best score first.

        The score is the number of distinct query tokens a record
        contains; ties go to the lower id.  An empty query or an empty
        index returns ``[]``.
        """
        tokens = self.query_tokens(query_text)
        if not tokens or not self._doc_ids:
            return []

        # Intersect rarest postings first
        ordered = sorted(tokens, key=lambda t: len(self.postings(t)))
        matched = set(self.postings(ordered[0]))
        for tok in ordered[1:]:
            if not matched:
                break
            matched &= self.postings(tok)

        hits = [
            SearchHit(
                id=self._doc_ids[pos],
                position=pos,
                score=sum(1 for t in tokens if pos in self._postings.get(t, ())),
            )
            for pos in matched
        ]
        hits.sort(key=lambda h: (-h.score, h.id, h.position))
        return hits[:limit]

    def query(self, query_text: Optional[str], limit: int = SEARCH_LIMIT) -> List[int]:
        """Ranked record ids for ``query_text``."""
        return [h.id for h in self.search(query_text, limit)]


def build(table: CatalogTable, fields: Sequence[str] = SEARCH_FIELDS, **kwargs) -> SearchIndex:
    return SearchIndex.build(table, fields, **kwargs)


def query(index: SearchIndex, query_text: Optional[str], limit: int = SEARCH_LIMIT) -> List[int]:
    return index.query(query_text, limit)
