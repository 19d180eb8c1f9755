from __future__ import annotations
"""
In-memory record store for the product catalog.

The catalog is held column-wise in a pandas DataFrame of object
columns so that missing values stay ``None`` rather than turning into
``NaN``.  A :class:`CatalogTable` is a snapshot: there is no mutation
API and every engine component only reads from it.

Two ingestion helpers sit on top of :func:`load` for callers that hold
raw tabular data (the CLI): :func:`catalog_from_frame` maps arbitrary
column spellings onto the canonical record schema, and
:func:`load_catalog_csv` reads a delimited file first.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import pandas as pd
from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from .config import RECORD_FIELDS, TEXT_FIELDS
from .errors import InvalidFieldError


# ---------------------------
# Record schema
# ---------------------------

class ProductRecord(BaseModel):
    """One catalog row.  Immutable once loaded; ``id`` need not be unique."""

    model_config = ConfigDict(frozen=True)

    id: int
    category: Optional[str] = None
    subcategory: Optional[str] = None
    product_name: Optional[str] = None
    description: Optional[str] = None

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        # Absent / NaN is valid domain state, anything else becomes text.
        if value is None:
            return None
        if isinstance(value, str):
            return value
        if pd.api.types.is_scalar(value) and pd.isna(value):
            return None
        return str(value)


# ---------------------------
# Table
# ---------------------------

class CatalogTable:
    """
    Read-only, column-oriented view over a list of product records.

    Construct through :func:`load`; the backing frame is never exposed
    directly (``frame()`` hands out a copy).
    """

    def __init__(self, columns: Dict[str, List[Any]]):
        self._frame = pd.DataFrame(
            {f: pd.Series(columns[f], dtype=object) for f in RECORD_FIELDS},
            columns=list(RECORD_FIELDS),
        )

    def __len__(self) -> int:
        return len(self._frame)

    def __repr__(self) -> str:
        return f"CatalogTable(records={len(self)})"

    def scan(self) -> Iterator[ProductRecord]:
        """Iterate the records in insertion order.  Each call starts over."""
        for row in self._frame.itertuples(index=False, name=None):
            yield ProductRecord.model_construct(**dict(zip(RECORD_FIELDS, row)))

    def records_at(self, positions: Sequence[int]) -> List[ProductRecord]:
        """Records at the given row positions, in the order asked for."""
        rows = self._frame.iloc[list(positions)].itertuples(index=False, name=None)
        return [ProductRecord.model_construct(**dict(zip(RECORD_FIELDS, row))) for row in rows]

    def column(self, field: str) -> List[Any]:
        """Return the values of one field, ``None`` where absent."""
        check_fields([field])
        return self._frame[field].tolist()

    def columns(self, fields: Iterable[str]) -> List[List[Any]]:
        fields = list(fields)
        check_fields(fields)
        return [self._frame[f].tolist() for f in fields]

    def ids(self) -> List[int]:
        return self._frame["id"].tolist()

    def frame(self) -> pd.DataFrame:
        return self._frame.copy()


def check_fields(fields: Iterable[str], allowed: Iterable[str] = RECORD_FIELDS) -> None:
    """Raise :class:`InvalidFieldError` for the first field not in ``allowed``."""
    allowed = tuple(allowed)
    for f in fields:
        if f not in allowed:
            raise InvalidFieldError(f, allowed)


def load(records: Iterable[Union[Mapping[str, Any], ProductRecord]]) -> CatalogTable:
    """
    Validate records to the :class:`ProductRecord` shape and freeze them
    into a :class:`CatalogTable`.

    A non-integer ``id`` raises pydantic's ``ValidationError``; missing
    or malformed optional text fields become ``None``.
    """
    columns: Dict[str, List[Any]] = {f: [] for f in RECORD_FIELDS}
    for rec in records:
        if not isinstance(rec, ProductRecord):
            rec = ProductRecord.model_validate(dict(rec))
        for f in RECORD_FIELDS:
            columns[f].append(getattr(rec, f))
    table = CatalogTable(columns)
    logger.debug("Loaded catalog table with {} records", len(table))
    return table


# ---------------------------
# Ingestion helpers
# ---------------------------

COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "id": ["id", "ID", "product_id", "Product ID", "item_id", "sku"],
    "category": ["category", "Category", "product_category", "Category Name"],
    "subcategory": ["subcategory", "SubCategory", "Sub Category", "sub_category", "Subcategory Name"],
    "product_name": ["product_name", "ProductName", "Product Name", "name", "Name", "Title"],
    "description": ["description", "Description", "product_description", "Details"],
}


def _standardise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename raw columns to the canonical record schema."""
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            # Try exact, then case-insensitive
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.info("Standardising columns with map: {}", col_map)
    df_std = df.rename(columns=col_map)

    missing = [c for c in TEXT_FIELDS if c not in df_std.columns]
    if missing:
        logger.warning("Raw catalog is missing columns {}; treating them as empty", missing)
    return df_std


def _parse_id(value: Any) -> Optional[int]:
    """Integer id from a raw cell, or None when it is missing or not integral."""
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return None
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    # "12.0" style exports; only small values survive the float round trip
    number = pd.to_numeric(text, errors="coerce")
    if pd.isna(number) or not float(number).is_integer():
        return None
    return int(number)


def catalog_from_frame(df_raw: pd.DataFrame) -> CatalogTable:
    """
    Build a :class:`CatalogTable` from a raw DataFrame.

    Rows whose id is not an integer are dropped with a warning.  If no
    id column can be found, sequential ids are assigned.
    """
    df = _standardise_columns(df_raw.copy())

    if "id" not in df.columns:
        logger.warning("Raw catalog has no id column; assigning sequential ids")
        df["id"] = range(1, len(df) + 1)

    records: List[Dict[str, Any]] = []
    dropped = 0
    for _, row in df.iterrows():
        iid = _parse_id(row["id"])
        if iid is None:
            dropped += 1
            continue
        rec: Dict[str, Any] = {"id": iid}
        for f in TEXT_FIELDS:
            rec[f] = row[f] if f in df.columns else None
        records.append(rec)
    if dropped:
        logger.warning("Dropped {} rows with a missing or non-integer id", dropped)

    table = load(records)
    logger.info("Catalog built from frame: {} records ({} dropped)", len(table), dropped)
    return table


def load_catalog_csv(path: Path) -> CatalogTable:
    """Read a delimited catalog export and load it."""
    logger.info("Loading catalog CSV from {}", path)
    df = pd.read_csv(path, dtype=str)
    logger.info("Read {} raw rows", len(df))
    return catalog_from_frame(df)
