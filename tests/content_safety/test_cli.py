"""Tests for the command line interface."""

import json
import logging

import pytest

from content_safety.cli import main
from content_safety.rules.rule_store import RuleStore


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """main() reconfigures the root logger; put pytest's handlers back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def rules_file(write_rules):
    return write_rules([{"pattern": "完治", "suggest": "改善が期待される"}], name="cli-rules.json")


def test_scan_json(rules_file, capsys):
    code = main(["--rules", str(rules_file), "scan", "--text", "完治を目指す", "--format", "json"])

    data = json.loads(capsys.readouterr().out)
    assert code == 1
    assert data["violations"][0]["matchedText"] == "完治"


def test_scan_clean_text(rules_file):
    assert main(["--rules", str(rules_file), "scan", "--text", "健康維持に"]) == 0


def test_scan_missing_file(rules_file, tmp_path):
    assert main(["--rules", str(rules_file), "scan", "--file", str(tmp_path / "none.txt")]) == 2


def test_rewrite(rules_file, capsys):
    code = main(["--rules", str(rules_file), "rewrite", "--text", "このサプリで完治を目指しましょう"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "このサプリで改善が期待されるを目指しましょう"


def test_check_product_json(rules_file, tmp_path, capsys):
    product = tmp_path / "product.json"
    product.write_text(
        json.dumps(
            {
                "name": "エナジー",
                "description": "完治を目指す",
                "ingredients": [{"name": "カフェイン"}],
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )

    code = main(
        [
            "--rules",
            str(rules_file),
            "check",
            "--product",
            str(product),
            "--persona",
            "pregnancy",
            "--format",
            "json",
        ]
    )

    data = json.loads(capsys.readouterr().out)
    assert code == 1
    assert [w["kind"] for w in data["warnings"]] == ["persona", "compliance"]


def test_check_invalid_product(tmp_path):
    product = tmp_path / "bad.json"
    product.write_text("{oops", encoding="utf-8")
    assert main(["check", "--product", str(product)]) == 2


def test_rules_listing_filters(capsys):
    code = main(["rules", "--persona", "lactation", "--severity", "medium", "--format", "json"])

    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["rules"]
    assert all(r["personaTag"] == "lactation" and r["severity"] == "mid" for r in data["rules"])


def test_scan_non_utf8_file(rules_file, tmp_path, capsys):
    """Test that an undecodable input file is reported, not raised."""
    path = tmp_path / "copy.txt"
    path.write_bytes("完治".encode("shift_jis"))

    assert main(["--rules", str(rules_file), "scan", "--file", str(path)]) == 2
    assert "UTF-8" in capsys.readouterr().err


def test_check_non_utf8_product(tmp_path):
    product = tmp_path / "product.json"
    product.write_bytes('{"name": "完治"}'.encode("shift_jis"))
    assert main(["check", "--product", str(product)]) == 2


def test_missing_product_reported_on_stderr(tmp_path, capsys):
    assert main(["check", "--product", str(tmp_path / "none.json")]) == 2
    assert "exist" in capsys.readouterr().err


def test_rules_uses_store_lookups(monkeypatch, capsys):
    """Test that filtering goes through the rule store's tag and severity lookups."""
    calls = []
    by_tag = RuleStore.persona_rules_by_tag
    by_severity = RuleStore.persona_rules_by_severity

    def spy_tag(self, tag):
        calls.append(("tag", tag))
        return by_tag(self, tag)

    def spy_severity(self, severity):
        calls.append(("severity", severity))
        return by_severity(self, severity)

    monkeypatch.setattr(RuleStore, "persona_rules_by_tag", spy_tag)
    monkeypatch.setattr(RuleStore, "persona_rules_by_severity", spy_severity)

    code = main(["rules", "--persona", "pregnancy", "--severity", "high", "--format", "json"])

    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert calls == [("tag", "pregnancy"), ("severity", "high")]
    assert data["rules"]
    assert all(r["personaTag"] == "pregnancy" and r["severity"] == "high" for r in data["rules"])


def test_rules_warns_on_unknown_tag(capsys):
    assert main(["rules", "--persona", "astronaut"]) == 0
    assert "Unknown persona tag 'astronaut'" in capsys.readouterr().out
