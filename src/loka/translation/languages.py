"""Target locales offered by the translator."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    """A target locale."""

    id: str
    name: str


AVAILABLE_LANGUAGES: list[Language] = [
    Language(id="zh-TW", name="Traditional Chinese (Taiwan)"),
    Language(id="zh-HK", name="Traditional Chinese (Hong Kong)"),
    Language(id="en-AU", name="English (Australia)"),
    Language(id="en-HK", name="English (Hong Kong)"),
    Language(id="en-MY", name="English (Malaysia)"),
    Language(id="en-SG", name="English (Singapore)"),
    Language(id="en-IN", name="English (India)"),
    Language(id="th", name="Thai"),
    Language(id="vi", name="Vietnamese"),
    Language(id="ms", name="Malay"),
]

_BY_ID = {lang.id: lang for lang in AVAILABLE_LANGUAGES}


def get_language(lang_id: str) -> Language | None:
    """Look up a locale by code."""
    return _BY_ID.get(lang_id)


def language_name(lang_id: str) -> str:
    """Display name for a locale, falling back to the code itself."""
    lang = _BY_ID.get(lang_id)
    return lang.name if lang else lang_id
