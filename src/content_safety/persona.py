"""Persona-specific ingredient risk rules."""

from collections.abc import Iterable
from typing import Any

from common.logger import get_logger

from .models import PersonaRule, PersonaWarning
from .rules.rule_store import RuleStore

logger = get_logger(__name__)


def _field(obj: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute-style object."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _ingredient_name(entry: Any) -> str | None:
    """Resolve an ingredient entry to its display name.

    Accepts a plain string, an object with a ``name``, or a reference
    wrapper ``{"ingredient": <string or object with name>}``.
    """
    if isinstance(entry, str):
        return entry

    name = _field(entry, "name")
    if isinstance(name, str):
        return name

    nested = _field(entry, "ingredient")
    if isinstance(nested, str):
        return nested
    if nested is not None:
        nested_name = _field(nested, "name")
        if isinstance(nested_name, str):
            return nested_name

    return None


def product_fields(product: Any) -> tuple[tuple[str, tuple[str, ...]], ...]:
    """Extractable text of a product, grouped by field.

    Reads title, name and description, every resolvable ingredient name
    and any product-level warning strings, from a mapping or an
    attribute-style object. Malformed entries are skipped.

    Returns:
        ``(field, values)`` pairs in corpus order; values may be empty
    """
    if product is None:
        return ()

    fields: list[tuple[str, tuple[str, ...]]] = []

    for key in ("title", "name", "description"):
        value = _field(product, key)
        fields.append((key, (value,) if isinstance(value, str) and value.strip() else ()))

    names: list[str] = []
    ingredients = _field(product, "ingredients")
    if isinstance(ingredients, (list, tuple)):
        for entry in ingredients:
            name = _ingredient_name(entry)
            if name and name.strip():
                names.append(name)
            else:
                logger.debug(f"Skipping malformed ingredient entry: {entry!r}")
    fields.append(("ingredients", tuple(names)))

    warnings = _field(product, "warnings")
    if isinstance(warnings, (list, tuple)):
        fields.append(("warnings", tuple(w for w in warnings if isinstance(w, str) and w.strip())))
    else:
        fields.append(("warnings", ()))

    return tuple(fields)


def extract_product_text(product: Any, lowercase: bool = True) -> str:
    """Build the search corpus for a product.

    Args:
        product: Product mapping or object
        lowercase: Lowercase the corpus (persona matching); compliance
            scanning keeps the original casing for reported matches

    Returns:
        Space-joined text of product_fields, empty if nothing is extractable
    """
    text = " ".join(value for _, values in product_fields(product) for value in values)
    return text.lower() if lowercase else text


def normalize_persona_tags(persona_tags: Iterable[str] | None) -> frozenset[str]:
    """Lowercase and trim persona tags, dropping blanks and non-strings."""
    if persona_tags is None:
        return frozenset()
    if isinstance(persona_tags, str):
        persona_tags = [persona_tags]
    return frozenset(t.strip().lower() for t in persona_tags if isinstance(t, str) and t.strip())


def find_matching_alternatives(corpus: str, rule: PersonaRule) -> list[str]:
    """Return the rule's alternatives that match the corpus.

    An alternative matches when it is a substring of the corpus or the
    corpus is a substring of it. Matching is not tokenized.
    """
    matches: list[str] = []
    for alt in rule.alternatives:
        if (alt in corpus or corpus in alt) and alt not in matches:
            matches.append(alt)
    return matches


class PersonaRuleEngine:
    """Evaluate persona-tagged ingredient rules against a product."""

    def __init__(self, rule_store: RuleStore):
        self.rule_store = rule_store

    def check(self, product: Any, persona_tags: Iterable[str] | None) -> list[PersonaWarning]:
        """Find every persona rule that applies to the product.

        Args:
            product: Product mapping or object (title/name, description, ingredients)
            persona_tags: Active persona tags, e.g. {"pregnancy"}

        Returns:
            One warning per applicable rule, in rule order
        """
        tags = normalize_persona_tags(persona_tags)
        if not tags:
            return []

        corpus = extract_product_text(product)
        if not corpus:
            return []

        warnings: list[PersonaWarning] = []
        for rule in self.rule_store.load_persona_rules():
            if rule.persona_tag not in tags:
                continue

            matched = find_matching_alternatives(corpus, rule)
            if matched:
                warnings.append(
                    PersonaWarning(
                        rule_id=rule.id,
                        severity=rule.severity,
                        message=rule.message,
                        action=rule.recommended_action,
                        affected_ingredients=matched,
                    )
                )

        logger.debug(f"{len(warnings)} persona rule(s) fired for tags {sorted(tags)}")
        return warnings
