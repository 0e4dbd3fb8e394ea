"""
Per-language placeholder adapters.

Some target languages have no grammatical plural, so a plural construct is
better rewritten as a counter phrase than translated variant by variant:

    {count:plural:{} item|{} items}   ->   {count}個のアイテム    (ja)

Rules are keyed by ISO code. Languages without a rule keep constructs as
they are. Each TranslationSession owns one table, so the template cache never
leaks between sessions.
"""
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .placeholders import PlaceholderDescriptor, PlaceholderKind, translatable_fragments
from .translators.language_codes import iso_code
from .utils.logger import get_logger

logger = get_logger(__name__)

COUNT_SLOT = "{}"
NOUN_SLOT = "[noun]"


@dataclass(frozen=True)
class LanguageRule:
    """
    Replacement template for constructs of the given kinds.

    ``{}`` becomes a reference to the construct's variable and ``[noun]``
    the first translated fragment.
    """
    template: str
    kinds: Tuple[PlaceholderKind, ...] = (PlaceholderKind.PLURAL,)

    def applies_to(self, descriptor: PlaceholderDescriptor) -> bool:
        return descriptor.kind in self.kinds


def _builtin_rules() -> Dict[str, LanguageRule]:
    return {
        "ja": LanguageRule("{}個の[noun]"),
        "zh": LanguageRule("{}个[noun]"),
        "ko": LanguageRule("{}개의 [noun]"),
    }


class LanguageAdapterTable:
    """Lazily built rule table plus a (language, construct) template cache."""

    def __init__(self, rules: Optional[Mapping[str, LanguageRule]] = None):
        self._extra_rules: Dict[str, LanguageRule] = dict(rules or {})
        self._rules: Optional[Dict[str, LanguageRule]] = None
        self._templates: Dict[Tuple[str, str], Optional[str]] = {}

    @property
    def rules(self) -> Dict[str, LanguageRule]:
        if self._rules is None:
            self._rules = _builtin_rules()
            self._rules.update(self._extra_rules)
            logger.debug(f"Loaded {len(self._rules)} language rules")
        return self._rules

    def register(self, language: str, rule: LanguageRule) -> None:
        """Add or replace the rule for a language (name or ISO code)."""
        code = iso_code(language)
        self.rules[code] = rule
        self._templates = {k: v for k, v in self._templates.items() if k[0] != code}

    def rule_for(self, language: str) -> Tuple[str, Optional[LanguageRule]]:
        """Return (code, rule); tries the full code, then its primary subtag."""
        code = iso_code(language)
        rule = self.rules.get(code)
        if rule is None and '-' in code:
            code = code.split('-')[0]
            rule = self.rules.get(code)
        return code, rule

    def template(self, language: str, descriptor: PlaceholderDescriptor) -> Optional[str]:
        """Cached template for a construct, or None when the language keeps it as is."""
        code, rule = self.rule_for(language)
        key = (code, descriptor.raw)
        if key not in self._templates:
            if rule is None or not rule.applies_to(descriptor):
                self._templates[key] = None
            else:
                self._templates[key] = rule.template.replace(COUNT_SLOT, "{" + descriptor.name + "}")
        return self._templates[key]

    def apply(
        self,
        language: Optional[str],
        descriptor: PlaceholderDescriptor,
        translated_fragments: Optional[Sequence[Optional[str]]] = None,
        include_free_text: bool = True,
    ) -> Optional[str]:
        """
        Rewrite a construct for `language`.

        Returns None when no rule applies or when there is no noun to put in
        the template; callers then keep the regular construct.
        """
        if not language:
            return None
        template = self.template(language, descriptor)
        if template is None:
            return None

        noun = next((t.strip() for t in translated_fragments or [] if t and t.strip()), "")
        if not noun:
            originals = translatable_fragments(descriptor, include_free_text)
            noun = originals[0].text.strip() if originals else ""
        if not noun:
            return None

        noun = noun.replace('{', '').replace('}', '')
        return template.replace(NOUN_SLOT, noun)

    def cache_size(self) -> int:
        return len(self._templates)
