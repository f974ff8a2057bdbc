"""
Internationalization (i18n) module for the add-on registration system.

Provides translations for all user-facing messages in English (en) and German (de).
"""

from typing import Optional


SUPPORTED_LANGUAGES = frozenset({"de", "en"})
DEFAULT_LANGUAGE = "en"


# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Online search workflow
    "online_search.package_not_selected": {
        "en": "Package {name} could not be selected for installation.",
        "de": "Paket {name} konnte nicht zur Installation ausgewählt werden.",
    },
    "online_search.error_headline": {
        "en": "Error",
        "de": "Fehler",
    },

    # Reg-code discovery
    "regcodes.none_found": {
        "en": "No registration codes found on removable media",
        "de": "Keine Registrierungscodes auf Wechselmedien gefunden",
    },
    "regcodes.found": {
        "en": "Found {count} registration code(s)",
        "de": "{count} Registrierungscode(s) gefunden",
    },

    # Unattended profile
    "profile.registration_disabled": {
        "en": "Registration is disabled",
        "de": "Registrierung ist deaktiviert",
    },
    "profile.registration_enabled": {
        "en": "Registration is enabled",
        "de": "Registrierung ist aktiviert",
    },
    "profile.server": {
        "en": "Registration server: {server}",
        "de": "Registrierungsserver: {server}",
    },
    "profile.default_server": {
        "en": "default",
        "de": "Standard",
    },
    "profile.addons": {
        "en": "Add-ons: {count}",
        "de": "Erweiterungen: {count}",
    },
    "profile.read_failed": {
        "en": "Could not read profile {path}: {error}",
        "de": "Profil {path} konnte nicht gelesen werden: {error}",
    },
    "profile.written": {
        "en": "Profile written to {path}",
        "de": "Profil nach {path} geschrieben",
    },
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'regcodes.none_found')
        language: Language code ('de' or 'en'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string.
        If the key is not found, returns the key itself.

    Examples:
        >>> get_message('online_search.package_not_selected', 'en', name='vim')
        'Package vim could not be selected for installation.'
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language) or translations.get(DEFAULT_LANGUAGE)
    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            pass

    return message


def get_missing_translations(language: str) -> set[str]:
    """Get all message keys that are missing translations for a language."""
    return {
        key for key, translations in TRANSLATIONS.items()
        if language not in translations
    }
