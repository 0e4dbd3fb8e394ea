"""
Prompt builders for LLM providers.

Texts reach the model with their placeholders already swapped for
``%VAR_n%`` markers, so the rules below are about keeping markers intact.
"""
import json
from typing import List, Optional

SYSTEM_PROMPT = (
    "You are a professional game localization expert with deep knowledge of "
    "gaming terminology across languages. Your task is to translate text "
    "accurately while preserving all formatting and placeholders."
)

MARKER_RULES = """IMPORTANT TRANSLATION RULES:
1. Tokens like %VAR_0%, %VAR_1% are placeholders. Copy them exactly, with both percent signs, and never translate, renumber or merge them.
2. Move a placeholder if the target grammar needs it somewhere else in the sentence.
3. Keep line breaks, punctuation style and markup tags.
4. Single words or short phrases are fragments of a larger sentence; translate them as they would appear in that sentence."""

# Languages where English gaming terms tend to be left untranslated
GAMING_TERM_LANGUAGES = {"Korean", "Japanese", "Chinese", "Portuguese", "Dutch"}

GAMING_TERM_NOTE = (
    "Terms like 'item' or 'potion' should be translated to the gaming term "
    "players of the target language would recognize, not left in English."
)


def build_system_prompt(target_language: str) -> str:
    parts = [SYSTEM_PROMPT, MARKER_RULES]
    if target_language in GAMING_TERM_LANGUAGES:
        parts.append(GAMING_TERM_NOTE)
    return "\n\n".join(parts)


def build_batch_prompt(texts: List[str], target_language: str, context: Optional[str] = None) -> str:
    """
    Build the user prompt for one batch.

    The model answers with ``{"translations": [...]}``, one entry per input
    text in the same order.
    """
    lines = [f"Translate each string in this JSON array into {target_language}."]
    if context:
        lines.append(f"Context: {context}")
    lines.append(
        'Reply with a JSON object {"translations": [...]} containing exactly '
        f"{len(texts)} strings, in the same order as the input."
    )
    lines.append(json.dumps(texts, ensure_ascii=False))
    return "\n".join(lines)
