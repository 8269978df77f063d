"""Shared fixtures: isolated rule stores, rule files and sample products."""

import json

import pytest

from content_safety.rules.rule_store import RuleStore


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch):
    """Keep a developer's CONTENT_SAFETY_* settings out of the tests."""
    monkeypatch.delenv("CONTENT_SAFETY_RULES_PATH", raising=False)
    monkeypatch.delenv("CONTENT_SAFETY_BASE_DIR", raising=False)


@pytest.fixture
def write_rules(tmp_path):
    """Write a rule document and return its path."""

    def _write(rules, name="rules.json"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = rules if isinstance(rules, (dict, str)) else {"ng": rules}
        text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def kanchi_store(write_rules, tmp_path):
    """Store whose only banned phrase is 完治."""
    path = write_rules([{"pattern": "完治", "suggest": "改善が期待される"}], name="override.json")
    return RuleStore(override_path=path, base_dir=tmp_path)


@pytest.fixture
def caffeine_product():
    return {
        "_id": "p-1",
        "name": "エナジーサポート",
        "description": "このサプリで完治を目指しましょう",
        "ingredients": [{"ingredient": {"name": "カフェイン"}, "amountMgPerServing": 80}],
    }
