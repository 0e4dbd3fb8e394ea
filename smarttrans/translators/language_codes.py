"""
Language name tables.

Languages are identified by display names ("German", "Portuguese (Brazil)").
Providers need their own codes; the adapter table needs ISO codes.
"""
from typing import Dict, Mapping, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

DEEPL_LANGUAGE_CODES: Dict[str, str] = {
    "Bulgarian": "BG",
    "Czech": "CS",
    "Danish": "DA",
    "German": "DE",
    "Greek": "EL",
    "English": "EN-US",
    "English (US)": "EN-US",
    "English (UK)": "EN-GB",
    "Spanish": "ES",
    "Estonian": "ET",
    "Finnish": "FI",
    "French": "FR",
    "Hungarian": "HU",
    "Indonesian": "ID",
    "Italian": "IT",
    "Japanese": "JA",
    "Korean": "KO",
    "Lithuanian": "LT",
    "Latvian": "LV",
    "Norwegian": "NB",
    "Dutch": "NL",
    "Polish": "PL",
    "Portuguese": "PT-PT",
    "Portuguese (Portugal)": "PT-PT",
    "Portuguese (Brazil)": "PT-BR",
    "Romanian": "RO",
    "Russian": "RU",
    "Slovak": "SK",
    "Slovenian": "SL",
    "Swedish": "SV",
    "Turkish": "TR",
    "Ukrainian": "UK",
    "Chinese": "ZH",
    "Chinese (Simplified)": "ZH",
    "Chinese (Traditional)": "ZH",
}

# Targets that accept the formality option
FORMALITY_LANGUAGES = frozenset({
    "DE", "FR", "IT", "ES", "NL", "PL", "PT-PT", "PT-BR", "RU", "JA",
})

ISO_CODES: Dict[str, str] = {
    "japanese": "ja",
    "chinese": "zh",
    "chinese (simplified)": "zh",
    "chinese (traditional)": "zh",
    "korean": "ko",
    "french": "fr",
    "spanish": "es",
    "german": "de",
    "italian": "it",
    "portuguese": "pt",
    "portuguese (brazil)": "pt-br",
    "russian": "ru",
    "dutch": "nl",
    "danish": "da",
    "swedish": "sv",
    "ukrainian": "uk",
}


def deepl_code(language: str, custom: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Map a display name to a DeepL target code.

    Lookup order:
    1. Custom mappings from config
    2. Built-in table
    3. Base name of a regional variant ("French (Canada)" -> FR)

    Returns None for unknown languages.
    """
    if custom and custom.get(language):
        return custom[language]

    code = DEEPL_LANGUAGE_CODES.get(language)
    if code:
        return code

    if '(' in language:
        code = DEEPL_LANGUAGE_CODES.get(language.split('(')[0].strip())
        if code:
            return code

    logger.error(
        f"Language '{language}' has no DeepL code; add it to language_mappings",
        extra={"language": language},
    )
    return None


def iso_code(language: str) -> str:
    """ISO code for a display name; unknown names are lowercased as-is."""
    return ISO_CODES.get(language.strip().lower(), language.strip().lower())


def supports_formality(code: str) -> bool:
    return code.upper() in FORMALITY_LANGUAGES
