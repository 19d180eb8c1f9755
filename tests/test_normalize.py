import types

from catalog_analytics.normalize import normalize_key, token_frequency, tokenize

from conftest import make_catalog


def test_tokenize_strips_case_folds_and_filters():
    text = "Leather-trimmed COTTON jacket, with 2 pockets!"
    assert list(tokenize(text)) == ["leathertrimmed", "cotton", "jacket", "pockets"]


def test_tokenize_drops_short_tokens_and_stopwords():
    assert list(tokenize("bag big tote made from silk")) == ["tote", "silk"]


def test_tokenize_absent_text():
    assert list(tokenize(None)) == []
    assert list(tokenize("")) == []
    assert list(tokenize("   \t\n ")) == []


def test_tokenize_custom_stopwords_and_length():
    assert list(tokenize("luxury tote", stopwords={"tote"})) == ["luxury"]
    assert list(tokenize("bag tote", min_length=3)) == ["bag", "tote"]


def test_tokenize_is_lazy_and_repeatable():
    text = "Cashmere  Scarf\tDeluxe"
    assert isinstance(tokenize(text), types.GeneratorType)
    assert list(tokenize(text)) == list(tokenize(text))


def test_tokenize_is_idempotent_on_its_output():
    tokens = list(tokenize("Hand-made ITALIAN leather Loafers (size 42)"))
    assert list(tokenize(" ".join(tokens))) == tokens


def test_normalize_key():
    assert normalize_key("  Tote Bag ") == "tote bag"
    assert normalize_key(None) is None


def test_token_frequency_threshold_and_order():
    names = ["Silk Scarf"] * 7 + ["Wool Coat"] * 6 + ["Linen Coat"] * 2
    table = make_catalog(product_name=names)
    rows = token_frequency(table)
    assert rows == [
        {"token": "coat", "frequency": 8},
        {"token": "scarf", "frequency": 7},
        {"token": "silk", "frequency": 7},
        {"token": "wool", "frequency": 6},
    ]
    assert [r["token"] for r in token_frequency(table, limit=2)] == ["coat", "scarf"]


def test_token_frequency_skips_missing_names(catalog):
    rows = token_frequency(catalog, min_frequency=1)
    assert rows == [{"token": "scarf", "frequency": 2}, {"token": "tote", "frequency": 2}]


def test_tokenize_uses_full_case_folding():
    assert list(tokenize("Straße")) == list(tokenize("STRASSE")) == ["strasse"]
