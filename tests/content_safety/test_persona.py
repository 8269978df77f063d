"""Tests for persona rule matching and product text extraction."""

from types import SimpleNamespace

import pytest

from content_safety.models import PersonaRule, Severity
from content_safety.persona import (
    PersonaRuleEngine,
    extract_product_text,
    find_matching_alternatives,
    normalize_persona_tags,
    product_fields,
)
from content_safety.rules.rule_store import RuleStore


@pytest.fixture
def engine():
    return PersonaRuleEngine(RuleStore())


def test_scenario_pregnancy_caffeine(engine):
    """Test the canonical pregnancy + caffeine example."""
    product = {"name": "眠気覚まし", "ingredients": ["カフェイン"]}

    warnings = engine.check(product, ["pregnancy"])

    assert len(warnings) == 1
    assert warnings[0].rule_id == "pregnancy-caffeine"
    assert warnings[0].severity == Severity.HIGH
    assert warnings[0].message == "妊娠中はカフェインの摂取に注意が必要です"
    assert warnings[0].action == "医師に相談してください"
    assert warnings[0].affected_ingredients == ["カフェイン"]


@pytest.mark.parametrize("tags", [None, [], set(), ["  "]])
def test_no_persona_tags_returns_empty(engine, tags):
    assert engine.check({"ingredients": ["カフェイン"]}, tags) == []


@pytest.mark.parametrize("product", [None, {}, {"ingredients": [None, 3, {}]}])
def test_no_extractable_text_returns_empty(engine, product):
    assert engine.check(product, ["pregnancy"]) == []


def test_rule_requires_matching_tag(engine):
    """Test that rules for other personas never fire."""
    warnings = engine.check({"ingredients": ["カフェイン"]}, ["medication"])
    assert warnings == []


def test_multiple_rules_fire_once_each(engine):
    """Test that every applicable rule fires, each only once."""
    product = {
        "title": "Energy Boost with Caffeine",
        "description": "caffeine and guarana",
        "ingredients": [{"name": "Caffeine"}, {"name": "Taurine"}],
    }

    warnings = engine.check(product, {"stimulant-sensitivity"})

    assert [w.rule_id for w in warnings] == [
        "stimulant-caffeine",
        "stimulant-theanine",
        "stimulant-taurine",
    ]
    assert warnings[1].affected_ingredients == ["guarana"]


def test_tags_are_case_insensitive(engine):
    warnings = engine.check({"ingredients": ["caffeine"]}, ["Pregnancy "])
    assert [w.rule_id for w in warnings] == ["pregnancy-caffeine"]


def test_affected_ingredients_are_pattern_alternatives(engine):
    """Test that matched alternatives, not literal product names, are reported."""
    product = {"ingredients": ["Retinol Palmitate", "ビタミンA誘導体"]}

    warnings = engine.check(product, ["pregnancy"])

    assert warnings[0].affected_ingredients == ["ビタミンa", "retinol"]


class TestExtractProductText:
    """Tests for corpus extraction across ingredient shapes."""

    def test_all_ingredient_shapes(self):
        product = {
            "title": "Title",
            "description": "Desc",
            "ingredients": [
                "Plain",
                {"name": "Named"},
                {"ingredient": "Ref String"},
                {"ingredient": {"name": "Ref Object"}},
                {"ingredient": {}},
                None,
                42,
            ],
            "warnings": ["Keep away from children", None],
        }

        text = extract_product_text(product)

        assert text == "title desc plain named ref string ref object keep away from children"

    def test_attribute_objects(self):
        product = SimpleNamespace(
            name="Sleep Aid",
            description=None,
            ingredients=[SimpleNamespace(name="Melatonin")],
        )
        assert extract_product_text(product) == "sleep aid melatonin"

    def test_preserve_case(self):
        assert extract_product_text({"name": "CURE"}, lowercase=False) == "CURE"

    def test_non_list_ingredients_ignored(self):
        assert extract_product_text({"name": "x", "ingredients": "caffeine"}) == "x"

    def test_fields_equal_for_mapping_and_object(self):
        """Test that a dict and an attribute object with the same values share fields."""
        as_dict = {"name": "Energy", "ingredients": [{"name": "caffeine"}], "_id": "p-1"}
        as_object = SimpleNamespace(name="Energy", ingredients=["caffeine"])

        assert product_fields(as_dict) == product_fields(as_object)
        assert dict(product_fields(as_dict))["ingredients"] == ("caffeine",)

    def test_fields_of_missing_product(self):
        assert product_fields(None) == ()


class TestMatching:
    """Tests for the substring containment rule."""

    rule = PersonaRule(
        id="r",
        persona_tag="pregnancy",
        ingredient_pattern="カフェイン | caffeine |",
        severity=Severity.HIGH,
        message="m",
    )

    def test_alternative_in_corpus(self):
        assert find_matching_alternatives("green tea caffeine", self.rule) == ["caffeine"]

    def test_corpus_in_alternative(self):
        """Test the reverse containment for partial names."""
        assert find_matching_alternatives("caff", self.rule) == ["caffeine"]

    def test_no_match(self):
        assert find_matching_alternatives("vitamin c", self.rule) == []

    def test_alternatives_trimmed(self):
        assert self.rule.alternatives == ["カフェイン", "caffeine"]


def test_normalize_persona_tags_accepts_single_string():
    assert normalize_persona_tags("pregnancy") == frozenset({"pregnancy"})
    assert normalize_persona_tags(["a", None, 3, "A"]) == frozenset({"a"})
