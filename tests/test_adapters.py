"""
Tests for per-language adapters and language code tables.

Run with: pytest tests/test_adapters.py -v
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from smarttrans.adapters import LanguageAdapterTable, LanguageRule
from smarttrans.placeholders import PlaceholderKind, parse
from smarttrans.translators.language_codes import DEEPL_LANGUAGE_CODES, deepl_code, iso_code, supports_formality


def first(source):
    return parse(source).descriptors[0]


class TestLanguageAdapterTable:
    """Tests for the adapter table."""

    def test_builtin_rules(self):
        """Japanese, Chinese and Korean rewrite plurals as counters."""
        table = LanguageAdapterTable()
        d = first("{count:plural:{item}|{items}}")
        assert table.apply("Japanese", d, ["アイテム", "アイテム"]) == "{count}個のアイテム"
        assert table.apply("Chinese (Simplified)", d, ["物品", "物品"]) == "{count}个物品"
        assert table.apply("Korean", d, ["아이템", "아이템"]) == "{count}개의 아이템"

    def test_identity_for_other_languages(self):
        table = LanguageAdapterTable()
        d = first("{count:plural:{item}|{items}}")
        assert table.apply("German", d, ["Gegenstand", "Gegenstände"]) is None

    def test_only_plural_constructs(self):
        """Gender and choose constructs are never rewritten."""
        table = LanguageAdapterTable()
        assert table.apply("Japanese", first("{p:gender(m,f):{he}|{she}}"), ["彼", "彼女"]) is None
        assert table.apply("Japanese", first("{name}"), []) is None

    def test_falls_back_to_original_noun(self):
        table = LanguageAdapterTable()
        d = first("You have {count:plural:{} item|{} items}")
        assert table.apply("Japanese", d, None) == "{count}個のitem"

    def test_no_noun_keeps_construct(self):
        """Without any fragment there is nothing to put in the template."""
        table = LanguageAdapterTable()
        d = first("{count:plural:{}|{}}")
        assert table.apply("Japanese", d, []) is None

    def test_region_subtag_fallback(self):
        """zh-tw should fall back to the zh rule."""
        table = LanguageAdapterTable()
        code, rule = table.rule_for("zh-TW")
        assert code == "zh"
        assert rule is not None

    def test_template_cache(self):
        """Templates are cached per language and construct."""
        table = LanguageAdapterTable()
        d = first("{count:plural:{item}|{items}}")
        table.apply("Japanese", d, ["a"])
        table.apply("Japanese", d, ["b"])
        assert table.cache_size() == 1
        table.apply("German", d, ["c"])
        assert table.cache_size() == 2

    def test_tables_are_independent(self):
        """Custom rules in one table never leak into another."""
        one = LanguageAdapterTable()
        two = LanguageAdapterTable()
        one.register("German", LanguageRule("{} Stück [noun]"))
        d = first("{count:plural:{item}|{items}}")
        assert one.apply("German", d, ["Apfel"]) == "{count} Stück Apfel"
        assert two.apply("German", d, ["Apfel"]) is None

    def test_register_replaces_cached_template(self):
        table = LanguageAdapterTable()
        d = first("{count:plural:{item}|{items}}")
        assert table.apply("Japanese", d, ["x"]) == "{count}個のx"
        table.register("ja", LanguageRule("{}つの[noun]"))
        assert table.apply("Japanese", d, ["x"]) == "{count}つのx"

    def test_custom_kinds(self):
        table = LanguageAdapterTable({"fr": LanguageRule("[noun] ({})", kinds=(PlaceholderKind.CHOOSE,))})
        d = first("{c:choose(a,b):{rouge}|{vert}}")
        assert table.apply("French", d, ["rouge", "vert"]) == "rouge ({c})"


class TestLanguageCodes:
    """Tests for language name tables."""

    def test_deepl_builtin(self):
        assert deepl_code("German") == "DE"
        assert deepl_code("Portuguese (Brazil)") == "PT-BR"
        assert deepl_code("Chinese (Traditional)") == "ZH"

    def test_deepl_regional_fallback(self):
        assert deepl_code("French (Canada)") == "FR"

    def test_deepl_targets_have_regional_variants(self):
        """The deepl SDK rejects bare EN and PT as target languages."""
        assert deepl_code("English") == "EN-US"
        assert deepl_code("English (UK)") == "EN-GB"
        assert deepl_code("English (Australia)") == "EN-US"
        assert deepl_code("Portuguese") == "PT-PT"
        assert not {"EN", "PT"} & set(DEEPL_LANGUAGE_CODES.values())

    def test_deepl_custom_first(self):
        assert deepl_code("German", {"German": "DE-CH"}) == "DE-CH"
        assert deepl_code("Klingon", {"Klingon": "TLH"}) == "TLH"

    def test_deepl_unknown(self, caplog):
        assert deepl_code("Klingon") is None
        assert "Klingon" in caplog.text

    def test_iso(self):
        assert iso_code("Japanese") == "ja"
        assert iso_code("chinese (traditional)") == "zh"
        assert iso_code("Portuguese (Brazil)") == "pt-br"
        assert iso_code("Esperanto") == "esperanto"
        assert iso_code("ZH-TW") == "zh-tw"

    def test_formality(self):
        assert supports_formality("DE")
        assert supports_formality("pt-br")
        assert supports_formality(deepl_code("Portuguese"))
        assert not supports_formality("BG")
        assert not supports_formality("ZH")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
