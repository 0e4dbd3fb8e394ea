#!/usr/bin/env python3
"""
Placeholder-safe translation utility.

Usage:
    python -m smarttrans.translate parse "You have {count:plural:{} item|{} items}"
    python -m smarttrans.translate text "Hello {name}" -l German Japanese
    python -m smarttrans.translate file strings.json out.json -l French
    python -m smarttrans.translate --provider openai check
"""

import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

from .utils.config import Config, DEFAULT_CONFIG_FILE
from .utils.exceptions import SmartTransError
from .utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def show_parse(text: str, include_free_text: bool = True):
    """Print carrier, descriptors and fragments for one string."""
    from .placeholders import parse, translatable_fragments

    result = parse(text)
    print(f"Carrier: {result.carrier}")
    if not result.descriptors:
        print("No placeholders found")
        return result

    for d in result.descriptors:
        options = f" options={list(d.options)}" if d.options else ""
        print(f"  {d.marker:10} {d.kind.value:9} name={d.name!r}{options} depth={d.depth}")
        print(f"             {d.raw}")
        for f in translatable_fragments(d, include_free_text):
            print(f"             - [{f.kind}] {f.text!r}")
    return result


def translate_text(config: Config, text: str, languages: List[str], context: Optional[str] = None) -> int:
    """Translate one string; returns the number of failed languages."""
    from .pipeline import TranslationSession

    session = TranslationSession(config)
    results = session.translate_all_languages(text, languages, context)

    failed = 0
    for language in languages:
        translated = results.get(language)
        if translated is None:
            failed += 1
            print(f"{language}: (failed)")
        else:
            print(f"{language}: {translated}")
    return failed


def translate_file(
    config: Config,
    input_path: str,
    output_path: str,
    languages: List[str],
    context: Optional[str] = None,
) -> int:
    """
    Translate a {key: text} JSON file.

    Output is {language: {key: text or null}}. Returns the number of failed
    languages.
    """
    from .pipeline import TranslationSession

    input_p = Path(input_path)
    output_p = Path(output_path)

    if not input_p.exists():
        print(f"File not found: {input_p}")
        return len(languages)

    with open(input_p, 'r', encoding='utf-8') as f:
        strings = json.load(f)
    if not isinstance(strings, dict):
        print(f"Expected a JSON object of key -> text in {input_p}")
        return len(languages)

    keys = list(strings.keys())
    sources = [str(strings[k]) for k in keys]

    def report(language, translations):
        status = "ok" if translations is not None else "failed"
        print(f"  [{status}] {language}")

    session = TranslationSession(config, on_result=report)
    results = session.translate(sources, languages, context)

    output = {}
    failed = 0
    for language in languages:
        translations = results.get(language)
        if translations is None:
            failed += 1
            output[language] = {k: None for k in keys}
        else:
            output[language] = dict(zip(keys, translations))

    output_p.parent.mkdir(parents=True, exist_ok=True)
    with open(output_p, 'w', encoding='utf-8') as f:
        json.dump(output, f, ensure_ascii=False, indent=2)
    print(f"Saved: {output_p}")
    return failed


def check_provider(config: Config) -> bool:
    """Test the configured provider's credentials."""
    from .translators import create_provider

    provider = create_provider(config)
    ok = provider.check_connection()
    print(f"{provider.name}: {'connected' if ok else 'FAILED'}")
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Placeholder-safe machine translation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Providers:
  deepl    DeepL API (DEEPL_API_KEY)
  openai   OpenAI chat models (OPENAI_API_KEY)
  caiyun   Caiyun, zh/en/ja only (CAIYUN_TOKEN)
        """
    )
    parser.add_argument("--provider", help="Override translation.provider")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE, help="YAML config file")
    parser.add_argument("--context", help="Context passed to the provider")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--json-logs", action="store_true", help="Structured JSON log entries")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Show how a string is tokenized (offline)")
    parse_parser.add_argument("text", help="Source string")

    # Text command
    text_parser = subparsers.add_parser("text", help="Translate one string")
    text_parser.add_argument("text", help="Source string")
    text_parser.add_argument("-l", "--languages", nargs="+", required=True, help="Target language names")

    # File command
    file_parser = subparsers.add_parser("file", help="Translate a JSON {key: text} file")
    file_parser.add_argument("input", help="Input JSON file")
    file_parser.add_argument("output", help="Output JSON file")
    file_parser.add_argument("-l", "--languages", nargs="+", required=True, help="Target language names")

    # Check command
    subparsers.add_parser("check", help="Test provider connection")

    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file, json_format=args.json_logs)

    try:
        config = Config.load(args.config)
    except SmartTransError as e:
        logger.error(f"Config error: {e}")
        return 2
    if args.provider:
        config.translation.provider = args.provider

    try:
        if args.command == "parse":
            show_parse(args.text, config.translation.translate_free_text)
            return 0
        elif args.command == "text":
            return 1 if translate_text(config, args.text, args.languages, args.context) else 0
        elif args.command == "file":
            return 1 if translate_file(config, args.input, args.output, args.languages, args.context) else 0
        elif args.command == "check":
            return 0 if check_provider(config) else 1
    except SmartTransError as e:
        logger.error(str(e))
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
