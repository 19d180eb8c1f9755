import json

import pandas as pd
import pytest

from catalog_analytics import cli
from catalog_analytics.reports import REPORTS

CSV_TEXT = (
    "id,category,subcategory,product_name,description\n"
    "1,Bags,Tote,Tote Bag,Leather tote with cotton lining\n"
    "2,Bags,Clutch,Clutch,Silk evening clutch\n"
    "3,Accessories,Scarf,Cashmere Scarf,Soft cashmere wrap\n"
)


@pytest.fixture
def catalog_csv(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


def test_single_report_to_csv(catalog_csv, tmp_path):
    out = tmp_path / "out" / "share.csv"
    assert cli.main(["--csv", str(catalog_csv), "--report", "category_share", "--out", str(out)]) == 0
    df = pd.read_csv(out)
    assert list(df.columns) == ["category", "product_count", "pct_of_catalog"]
    assert df["product_count"].tolist() == [2, 1]


def test_search_report_to_json(catalog_csv, tmp_path):
    out = tmp_path / "search.json"
    argv = ["--csv", str(catalog_csv), "--report", "search_products", "--query", "cashmere scarf",
            "--format", "json", "--out", str(out)]
    assert cli.main(argv) == 0
    rows = json.loads(out.read_text(encoding="utf-8"))
    assert [r["id"] for r in rows] == [3]


def test_report_to_stdout(catalog_csv, capsys):
    assert cli.main(["--csv", str(catalog_csv), "--report", "duplicate_names"]) == 0
    assert capsys.readouterr().out.strip() == ""


def test_all_reports(catalog_csv, tmp_path):
    out_dir = tmp_path / "reports"
    assert cli.main(["--csv", str(catalog_csv), "--report", "all", "--out", str(out_dir)]) == 0
    assert sorted(p.stem for p in out_dir.glob("*.csv")) == sorted(REPORTS)


def test_empty_catalog_fails_cleanly(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("id,category,subcategory,product_name,description\n", encoding="utf-8")
    assert cli.main(["--csv", str(path), "--report", "category_share"]) == 1
