import pandas as pd
import pytest
from pydantic import ValidationError

from catalog_analytics.catalog import ProductRecord, catalog_from_frame, load, load_catalog_csv
from catalog_analytics.errors import InvalidFieldError


def test_load_preserves_insertion_order(catalog):
    assert len(catalog) == 6
    assert catalog.ids() == [1, 2, 3, 4, 5, 6]


def test_scan_is_restartable(catalog):
    first = list(catalog.scan())
    second = list(catalog.scan())
    assert first == second
    assert all(isinstance(r, ProductRecord) for r in first)
    assert first[5].category is None


def test_records_are_immutable(catalog):
    rec = next(catalog.scan())
    with pytest.raises(ValidationError):
        rec.category = "Shoes"


def test_missing_and_malformed_optional_fields_become_absent():
    table = load([{"id": 1, "category": float("nan"), "product_name": 42}])
    rec = next(table.scan())
    assert rec.category is None
    assert rec.subcategory is None
    assert rec.product_name == "42"


def test_non_integer_id_is_rejected():
    with pytest.raises(ValidationError):
        load([{"id": "abc", "category": "Bags"}])


def test_duplicate_ids_are_kept():
    table = load([{"id": 7, "product_name": "A"}, {"id": 7, "product_name": "B"}])
    assert table.ids() == [7, 7]


def test_unknown_column_raises(catalog):
    with pytest.raises(InvalidFieldError) as exc:
        catalog.column("price")
    assert exc.value.field == "price"
    assert isinstance(exc.value, KeyError)


def test_frame_is_a_copy(catalog):
    df = catalog.frame()
    df.loc[0, "category"] = "Changed"
    assert catalog.column("category")[0] == "Bags"


def test_catalog_from_frame_standardises_columns_and_drops_bad_ids():
    raw = pd.DataFrame(
        {
            "ID": ["1", "2", "x"],
            "Category": ["Bags", None, "Shoes"],
            "Product Name": ["Tote", "Scarf", "Loafer"],
            "Description": ["Leather tote", None, "Suede"],
        }
    )
    table = catalog_from_frame(raw)
    assert table.ids() == [1, 2]
    assert table.column("category") == ["Bags", None]
    assert table.column("product_name") == ["Tote", "Scarf"]
    assert table.column("subcategory") == [None, None]


def test_catalog_from_frame_assigns_ids_when_missing():
    table = catalog_from_frame(pd.DataFrame({"name": ["A", "B"]}))
    assert table.ids() == [1, 2]
    assert table.column("product_name") == ["A", "B"]


def test_load_catalog_csv(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text(
        "id,category,subcategory,product_name,description\n"
        "1,Bags,Tote,Tote Bag,Leather tote\n"
        "2,Bags,,Clutch,\n",
        encoding="utf-8",
    )
    table = load_catalog_csv(path)
    assert len(table) == 2
    rec = list(table.scan())[1]
    assert rec.subcategory is None
    assert rec.description is None
    assert rec.product_name == "Clutch"


def test_catalog_from_frame_keeps_large_ids_exact():
    raw = pd.DataFrame(
        {"id": ["9007199254740993", " 12 ", "7.0", "7.5"], "name": ["Tote", "Clutch", "Scarf", "Belt"]}
    )
    table = catalog_from_frame(raw)
    assert table.ids() == [9007199254740993, 12, 7]
    assert table.column("product_name") == ["Tote", "Clutch", "Scarf"]


def test_records_at_returns_requested_positions(catalog):
    recs = catalog.records_at([3, 0])
    assert [r.id for r in recs] == [4, 1]
    assert catalog.records_at([]) == []
