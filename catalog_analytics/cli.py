# catalog_analytics/cli.py
"""
Batch runner for the catalog reports.

Loads a catalog CSV, runs one report (or all of them) and writes the
rows as CSV or JSON.

Examples:
    python -m catalog_analytics.cli --csv catalog.csv --report category_share
    python -m catalog_analytics.cli --csv catalog.csv --report search_products --query "cashmere scarf"
    python -m catalog_analytics.cli --csv catalog.csv --report all --out artifacts/
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from catalog_analytics.catalog import CatalogTable, load_catalog_csv
from catalog_analytics.config import DEFAULT_SEARCH_QUERY, EngineConfig
from catalog_analytics.errors import CatalogError
from catalog_analytics.reports import REPORTS, run_report


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def write_rows(rows: List[Dict], out_path: Optional[Path], fmt: str) -> None:
    """Write rows to ``out_path`` (stdout when None) as CSV or JSON."""
    df = pd.DataFrame(rows)
    if fmt == "json":
        text = df.to_json(orient="records", indent=2) if rows else "[]"
    else:
        text = df.to_csv(index=False) if rows else ""
    if out_path is None:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")


def _run_all(table: CatalogTable, config: EngineConfig, query: str, out_dir: Path, fmt: str) -> int:
    failures = 0
    for name in REPORTS:
        try:
            rows = run_report(name, table, config, query_text=query)
        except CatalogError as e:
            logger.error("Report {} failed: {}", name, e)
            failures += 1
            continue
        out = out_dir / f"{name}.{fmt}"
        write_rows(rows, out, fmt)
        print(f"Wrote {len(rows)} rows to {out}")
    return 1 if failures else 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Catalog analytics reports")
    ap.add_argument("--csv", required=True, type=Path, help="catalog CSV export")
    ap.add_argument("--report", required=True, choices=sorted(REPORTS) + ["all"])
    ap.add_argument("--query", default=DEFAULT_SEARCH_QUERY, help="search text for search_products")
    ap.add_argument("--limit", type=int, default=None, help="override the search result limit")
    ap.add_argument("--format", dest="fmt", choices=["csv", "json"], default="csv")
    ap.add_argument("--out", type=Path, default=None, help="output file (directory for --report all)")
    ap.add_argument("--log-level", default="WARNING")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    config = EngineConfig() if args.limit is None else EngineConfig(search_limit=args.limit)
    table = load_catalog_csv(args.csv)
    logger.info("Loaded {} records from {}", len(table), args.csv)

    if args.report == "all":
        out_dir = args.out or Path("artifacts")
        return _run_all(table, config, args.query, out_dir, args.fmt)

    try:
        rows = run_report(args.report, table, config, query_text=args.query)
    except CatalogError as e:
        logger.error("Report {} failed: {}", args.report, e)
        return 1

    write_rows(rows, args.out, args.fmt)
    if args.out is not None:
        print(f"Wrote {len(rows)} rows to {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
