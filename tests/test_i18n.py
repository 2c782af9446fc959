from types import MappingProxyType

import pytest

from toms import i18n
from toms.i18n import TRANSLATIONS, Language, lookup, normalize_language, translator


def test_lookup_in_requested_language():
    assert lookup("hotels", "turkish") == "Oteller"
    assert lookup("hotels", "arabic") == "الفنادق"


def test_key_missing_from_a_language_falls_back_to_english(monkeypatch):
    english = dict(TRANSLATIONS[Language.ENGLISH], seasonalOffer="Seasonal Offer")
    monkeypatch.setattr(i18n, "TRANSLATIONS", MappingProxyType({**TRANSLATIONS, Language.ENGLISH: english}))
    assert lookup("seasonalOffer", "arabic") == "Seasonal Offer"
    assert lookup("hotels", "arabic") == "الفنادق"


@pytest.mark.parametrize("language", [Language.ARABIC, Language.TURKISH])
def test_every_label_is_translated(language):
    table = TRANSLATIONS[language]
    assert set(table) == set(TRANSLATIONS[Language.ENGLISH])
    assert all(table.values())


def test_unknown_key_and_language_return_the_key():
    assert lookup("nonexistent.key", "elvish") == "nonexistent.key"


def test_unknown_language_uses_english():
    assert lookup("proposal", "elvish") == "TRAVEL PROPOSAL"
    assert lookup("proposal", None) == "TRAVEL PROPOSAL"


@pytest.mark.parametrize("name, language", [
    ("English", Language.ENGLISH), ("TURKISH", Language.TURKISH), ("ar", Language.ARABIC),
    ("tr", Language.TURKISH), ("", Language.ENGLISH), (None, Language.ENGLISH),
    (Language.ARABIC, Language.ARABIC),
])
def test_normalize_language(name, language):
    assert normalize_language(name) is language


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        TRANSLATIONS[Language.ENGLISH]["hotels"] = "Inns"


def test_translator_binds_language():
    t = translator("tr")
    assert t("page") == "Sayfa"
    assert t("form.transportation") == "TRANSFER HİZMET FORMU"
    assert translator("ar")("voucherNo") == "رقم القسيمة"
