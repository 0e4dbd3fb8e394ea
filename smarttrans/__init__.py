"""
Placeholder-safe machine translation for localization strings.

Structure:
    smarttrans/
    ├── placeholders/   - Parser, matchers, inner-fragment extraction
    ├── translators/    - Providers (DeepL, OpenAI, Caiyun) and batch client
    ├── utils/          - Configuration, logging, exceptions
    ├── adapters.py     - Per-language plural rewrites (ja, zh, ko)
    ├── reconstructor.py - Marker repair and construct restoration
    ├── pipeline.py     - TranslationSession orchestrator
    └── translate.py    - Command line interface

Quick Usage:
    from smarttrans.placeholders import parse
    result = parse("{player:gender(male,female):He|She} found {count:plural:{item}|{items}}")
    result.carrier   # "%VAR_0% found %VAR_1%"

    from smarttrans.pipeline import TranslationSession
    session = TranslationSession()
    session.translate_all_languages("Hello {name}", ["German", "Japanese"])

CLI:
    python -m smarttrans.translate parse "You have {count:plural:{} item|{} items}"
    python -m smarttrans.translate text "Hello {name}" -l German
"""

__version__ = "1.0.0"
