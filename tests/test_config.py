import pytest
from pydantic import ValidationError

from catalog_analytics.config import DEFAULT_STOPWORDS, MATERIAL_RULES, EngineConfig


def test_defaults():
    cfg = EngineConfig()
    assert cfg.stopwords == DEFAULT_STOPWORDS
    assert cfg.min_token_length == 4
    assert cfg.min_token_frequency == 5
    assert cfg.min_brand_count == 20
    assert cfg.longest_description_limit == 20
    assert cfg.keyword_limit == 30
    assert cfg.search_limit == 30
    assert cfg.material_rules == MATERIAL_RULES
    assert cfg.material_default_label == "Other / Unknown"


def test_rule_order_is_preserved():
    rules = [("silk", "Silk"), ("leather", "Leather")]
    assert EngineConfig(material_rules=rules).material_rules == rules


@pytest.mark.parametrize("field", ["min_token_length", "search_limit", "keyword_limit"])
def test_limits_must_be_positive(field):
    with pytest.raises(ValidationError):
        EngineConfig(**{field: 0})


def test_config_is_frozen():
    cfg = EngineConfig()
    with pytest.raises(ValidationError):
        cfg.search_limit = 5
