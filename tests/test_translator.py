"""
tests/test_translator.py
─────────────────────────
Tests for JSON locale lookup.
"""
import pytest

from ridewear.i18n.translator import SUPPORTED_LANGS, _load_locale, get_lang, has_key, set_lang, t


@pytest.fixture(autouse=True)
def english():
    set_lang("en")
    yield
    set_lang("en")


def _keys(node: dict, prefix: str = "") -> set[str]:
    keys = set()
    for name, value in node.items():
        path = f"{prefix}{name}"
        if isinstance(value, dict):
            keys |= _keys(value, f"{path}.")
        else:
            keys.add(path)
    return keys


class TestTranslate:
    def test_known_key(self):
        assert t("factors.hours.label") == "Time in saddle"
        assert t("components.BRAKE_PAD") == "Brake Pads"

    def test_override_language(self):
        assert t("status.OVERDUE", lang="es") == "Vencido"

    def test_set_lang(self):
        set_lang("es")
        assert get_lang() == "es"
        assert t("status.ALL_GOOD") == "Todo bien"

    def test_unsupported_language_falls_back(self):
        set_lang("xx")
        assert get_lang() == "en"

    def test_missing_key(self):
        assert t("factors.nope.label") == "factors.nope.label"
        assert t("factors.nope.label", default="?") == "?"

    def test_non_leaf_key_is_missing(self):
        assert not has_key("factors.hours")
        assert has_key("factors.hours.label")


class TestLocales:
    @pytest.mark.parametrize("lang", SUPPORTED_LANGS)
    def test_same_keys_as_english(self, lang):
        assert _keys(_load_locale(lang)) == _keys(_load_locale("en"))

    @pytest.mark.parametrize("lang", SUPPORTED_LANGS)
    def test_why_templates_format(self, lang):
        fields = {
            "component": "fork",
            "top_label": "Time in saddle",
            "top_label_lower": "time in saddle",
            "top_share": 60,
            "second_label_lower": "distance ridden",
            "hours": 12,
        }
        for key in _keys(_load_locale(lang)):
            if key.startswith("why."):
                assert t(key, lang).format(**fields)
