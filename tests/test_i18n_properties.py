"""
Property-based tests for the internationalization (i18n) module.

Verifies that every message exists in all supported languages and that
get_message falls back to the default language and the key itself.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from addon_registration.i18n import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    TRANSLATIONS,
    get_message,
    get_missing_translations,
)


class TestTranslationCoverage:
    """Both languages have all message translations."""

    def test_no_language_is_missing_translations(self) -> None:
        assert len(TRANSLATIONS) > 0
        for language in SUPPORTED_LANGUAGES:
            assert get_missing_translations(language) == set()

    @given(key=st.sampled_from(sorted(TRANSLATIONS)))
    @settings(max_examples=50)
    def test_translations_are_non_empty(self, key: str) -> None:
        for language in SUPPORTED_LANGUAGES:
            assert TRANSLATIONS[key][language].strip()

    @given(key=st.sampled_from(sorted(TRANSLATIONS)), language=st.sampled_from(sorted(SUPPORTED_LANGUAGES)))
    @settings(max_examples=100)
    def test_get_message_returns_string(self, key: str, language: str) -> None:
        message = get_message(key, language, name="vim", count=2, path="/tmp/p.xml", server="s", error="e")

        assert isinstance(message, str)
        assert message


class TestGetMessage:

    def test_default_language_is_english(self) -> None:
        assert DEFAULT_LANGUAGE == "en"
        assert get_message("online_search.error_headline") == "Error"

    def test_unsupported_language_uses_default(self) -> None:
        assert get_message("online_search.error_headline", "fr") == "Error"

    def test_unknown_key_returns_key(self) -> None:
        assert get_message("no.such.message", "de") == "no.such.message"

    def test_format_args(self) -> None:
        assert get_message("online_search.package_not_selected", "en", name="vim") == (
            "Package vim could not be selected for installation."
        )
        assert get_message("regcodes.found", "de", count=3) == "3 Registrierungscode(s) gefunden"

    def test_missing_format_args_leave_template(self) -> None:
        assert get_message("profile.server", "en", count=1) == "Registration server: {server}"

    def test_supported_languages_is_frozen(self) -> None:
        assert SUPPORTED_LANGUAGES == frozenset({"de", "en"})
