import pytest

from catalog_analytics.catalog import load

SAMPLE_RECORDS = [
    {"id": 1, "category": "Bags", "subcategory": "Tote", "product_name": "Tote Bag",
     "description": "Leather tote with cotton lining"},
    {"id": 2, "category": "Bags", "subcategory": "Tote", "product_name": "tote bag",
     "description": "Canvas tote bag"},
    {"id": 3, "category": "Bags", "subcategory": "Clutch", "product_name": "Clutch",
     "description": "Silk evening clutch"},
    {"id": 4, "category": "Accessories", "subcategory": "Scarf", "product_name": "Cashmere Scarf Deluxe",
     "description": "Soft cashmere wrap"},
    {"id": 5, "category": "Accessories", "subcategory": "Scarf", "product_name": "Cotton Scarf",
     "description": None},
    {"id": 6, "category": None, "subcategory": None, "product_name": None,
     "description": "Wool blend"},
]


@pytest.fixture
def catalog():
    return load(SAMPLE_RECORDS)


@pytest.fixture
def empty_catalog():
    return load([])


def make_catalog(**columns):
    """Build a table from parallel column lists; ids are assigned 1..n."""
    n = max(len(v) for v in columns.values())
    return load(
        [{"id": i + 1, **{name: values[i] for name, values in columns.items()}} for i in range(n)]
    )
