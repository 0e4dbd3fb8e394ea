"""
Translation session.

Ties the parser, the batch client, the adapter table and the reconstructor
together for a list of source strings and a list of target languages.

Languages that share a provider code (e.g. "Chinese (Simplified)" and
"Chinese (Traditional)" on DeepL) are translated once and the result is
used for every language in the group. Groups run concurrently; one failed
group never affects another.

Usage:
    from smarttrans.pipeline import TranslationSession

    session = TranslationSession(Config.load("smarttrans.yaml"))
    results = session.translate(["You have {count:plural:{} item|{} items}"], ["German", "Japanese"])
    results["German"]     # ["Du hast {count:plural:{} Gegenstand|{} Gegenstände}"] or None
"""
import asyncio
import re
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .adapters import LanguageAdapterTable
from .placeholders import Fragment, ParseResult, parse, translatable_fragments
from .reconstructor import reconstruct
from .translators import TranslationClient, TranslationProvider, TranslationUnit, create_provider
from .utils.config import Config
from .utils.logger import get_logger

logger = get_logger(__name__)

MARKER_RE = re.compile(r"%VAR_\d+%")
FRAGMENT_CONTEXT = 'These phrases appear in the sentence: "{sentence}".'

ResultCallback = Callable[[str, Optional[List[str]]], None]

# (source index, descriptor index or None for the carrier, fragment index)
Slot = Tuple[int, Optional[int], int]


@dataclass
class PreparedSource:
    """A parsed source string and the pieces that need translating."""
    source: str
    parsed: ParseResult
    fragments: Dict[int, List[Fragment]] = field(default_factory=dict)

    @property
    def carrier(self) -> str:
        return self.parsed.carrier

    @property
    def needs_carrier(self) -> bool:
        """False when the carrier is only markers, digits and punctuation."""
        return any(ch.isalpha() for ch in MARKER_RE.sub("", self.carrier))


class TranslationSession:
    """
    One translation session: provider, client, adapters and template cache.

    Args:
        config: Settings; loaded from the environment when None.
        provider: Overrides the provider named in config.
        client: Overrides the client built from config.
        adapters: Overrides the default adapter table.
        on_result: Called as ``on_result(language, translations)`` on the
            event loop thread when a language completes.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        provider: Optional[TranslationProvider] = None,
        client: Optional[TranslationClient] = None,
        adapters: Optional[LanguageAdapterTable] = None,
        on_result: Optional[ResultCallback] = None,
    ):
        self.config = config or Config.load()
        t = self.config.translation
        if client is not None:
            self.client = client
            self.provider = provider or client.provider
        else:
            self.provider = provider or create_provider(self.config)
            self.client = TranslationClient(
                self.provider,
                max_retries=t.max_retries,
                initial_delay=t.initial_retry_delay,
                max_batch_size=t.max_batch_size,
                formal=t.formal,
                preserve_formatting=t.preserve_formatting,
            )
        self.adapters = adapters or LanguageAdapterTable()
        self.on_result = on_result

    # =========================================================================
    # PREPARATION
    # =========================================================================

    def prepare(self, source: str) -> PreparedSource:
        """Parse a source string and collect its fragments."""
        parsed = parse(source)
        include_free = self.config.translation.translate_free_text
        fragments = {}
        for d in parsed.descriptors:
            found = translatable_fragments(d, include_free)
            if found:
                fragments[d.index] = found
        return PreparedSource(source=source, parsed=parsed, fragments=fragments)

    def _fragment_context(self, source: str, context: Optional[str]) -> Optional[str]:
        if not self.config.translation.include_context:
            return context
        enhanced = FRAGMENT_CONTEXT.format(sentence=source)
        return f"{enhanced} {context}" if context else enhanced

    def build_units(
        self,
        prepared: Sequence[PreparedSource],
        target_code: str,
        context: Optional[str] = None,
    ) -> Tuple[List[TranslationUnit], List[Slot]]:
        """Units for one target code plus the slot each result belongs to."""
        units: List[TranslationUnit] = []
        slots: List[Slot] = []
        for i, p in enumerate(prepared):
            if p.needs_carrier:
                units.append(TranslationUnit(p.carrier, target_code, context))
                slots.append((i, None, 0))
            if p.fragments:
                fragment_context = self._fragment_context(p.source, context)
                for d_index, fragments in p.fragments.items():
                    for f_index, fragment in enumerate(fragments):
                        units.append(TranslationUnit(fragment.text, target_code, fragment_context))
                        slots.append((i, d_index, f_index))
        return units, slots

    def chunks(self, units: Sequence[TranslationUnit]) -> Iterator[List[TranslationUnit]]:
        """
        Split units into batches of at most max_batch_size.

        A batch also ends where the context changes, since providers take one
        context per request.
        """
        size = self.client.max_batch_size
        start = 0
        while start < len(units):
            end = start + 1
            while end < len(units) and end - start < size and units[end].context == units[start].context:
                end += 1
            yield list(units[start:end])
            start = end

    # =========================================================================
    # TRANSLATION
    # =========================================================================

    def group_languages(self, languages: Sequence[str]) -> Tuple["OrderedDict[str, List[str]]", List[str]]:
        """Group languages by provider code; also return unsupported ones."""
        groups: "OrderedDict[str, List[str]]" = OrderedDict()
        unsupported = []
        for language in languages:
            code = self.provider.language_code(language)
            if not code:
                logger.error(f"No {self.provider.name} code for '{language}', skipping",
                             extra={"language": language, "provider": self.provider.name})
                unsupported.append(language)
                continue
            groups.setdefault(code, []).append(language)
        return groups, unsupported

    def _assemble(
        self,
        prepared: Sequence[PreparedSource],
        slots: Sequence[Slot],
        results: Sequence[str],
        language: str,
    ) -> List[str]:
        carriers = [p.carrier for p in prepared]
        fragment_maps: List[Dict[int, List[Optional[str]]]] = [
            {d: [None] * len(frags) for d, frags in p.fragments.items()} for p in prepared
        ]
        for (i, d_index, f_index), text in zip(slots, results):
            if d_index is None:
                carriers[i] = text
            else:
                fragment_maps[i][d_index][f_index] = text

        include_free = self.config.translation.translate_free_text
        return [
            reconstruct(
                carriers[i],
                p.parsed.descriptors,
                fragment_maps[i],
                language=language,
                adapters=self.adapters,
                include_free_text=include_free,
            )
            for i, p in enumerate(prepared)
        ]

    async def _translate_group(
        self,
        target_code: str,
        languages: Sequence[str],
        prepared: Sequence[PreparedSource],
        context: Optional[str],
    ) -> Dict[str, Optional[List[str]]]:
        log_extra = {"provider": self.provider.name, "target_code": target_code}
        try:
            units, slots = self.build_units(prepared, target_code, context)
            results: List[str] = []
            for chunk in self.chunks(units):
                translations = await self.client.translate_batch(chunk, target_code)
                if translations is None:
                    logger.error(f"Translation to {target_code} failed for {', '.join(languages)}",
                                 extra=log_extra)
                    return self._publish({language: None for language in languages})
                results.extend(translations)

            output = {
                language: self._assemble(prepared, slots, results, language)
                for language in languages
            }
        except Exception as e:
            logger.error(f"Unexpected error translating to {target_code}: {e}", exc_info=True, extra=log_extra)
            output = {language: None for language in languages}
        return self._publish(output)

    def _publish(self, output: Dict[str, Optional[List[str]]]) -> Dict[str, Optional[List[str]]]:
        if self.on_result is not None:
            for language, translations in output.items():
                try:
                    self.on_result(language, translations)
                except Exception as e:
                    logger.error(f"Result callback failed for {language}: {e}", exc_info=True,
                                 extra={"language": language})
        return output

    async def translate_async(
        self,
        sources: Sequence[str],
        languages: Sequence[str],
        context: Optional[str] = None,
    ) -> Dict[str, Optional[List[str]]]:
        """
        Translate `sources` into every language.

        Returns:
            Language -> translations in source order, or None for languages
            whose translation failed or is not supported by the provider.
        """
        results: Dict[str, Optional[List[str]]] = {language: None for language in languages}
        if not languages:
            return results

        prepared = [self.prepare(source) for source in sources]
        groups, unsupported = self.group_languages(languages)
        if unsupported:
            self._publish({language: None for language in unsupported})

        logger.info(f"Translating {len(sources)} string(s) into {len(languages)} language(s) "
                    f"via {len(groups)} request group(s)", extra={"provider": self.provider.name})

        outputs = await asyncio.gather(*(
            self._translate_group(code, group, prepared, context)
            for code, group in groups.items()
        ))
        for output in outputs:
            results.update(output)
        return results

    def translate(
        self,
        sources: Sequence[str],
        languages: Sequence[str],
        context: Optional[str] = None,
    ) -> Dict[str, Optional[List[str]]]:
        """Blocking wrapper around translate_async."""
        return asyncio.run(self.translate_async(sources, languages, context))

    # =========================================================================
    # SINGLE-KEY COMMANDS
    # =========================================================================

    async def translate_text_async(self, text: str, language: str, context: Optional[str] = None) -> Optional[str]:
        """Translate one field into one language."""
        results = await self.translate_async([text], [language], context)
        translations = results.get(language)
        return translations[0] if translations else None

    async def translate_all_languages_async(
        self,
        text: str,
        languages: Sequence[str],
        context: Optional[str] = None,
    ) -> Dict[str, Optional[str]]:
        """Translate one key into every language."""
        results = await self.translate_async([text], languages, context)
        return {language: (r[0] if r else None) for language, r in results.items()}

    async def translate_missing_languages_async(
        self,
        text: str,
        existing: Mapping[str, Optional[str]],
        languages: Sequence[str],
        context: Optional[str] = None,
    ) -> Dict[str, Optional[str]]:
        """Translate one key only into languages whose existing value is blank."""
        missing = [language for language in languages if not (existing.get(language) or "").strip()]
        if not missing:
            logger.info("No missing translations")
            return {}
        return await self.translate_all_languages_async(text, missing, context)

    def translate_text(self, text: str, language: str, context: Optional[str] = None) -> Optional[str]:
        return asyncio.run(self.translate_text_async(text, language, context))

    def translate_all_languages(
        self,
        text: str,
        languages: Sequence[str],
        context: Optional[str] = None,
    ) -> Dict[str, Optional[str]]:
        return asyncio.run(self.translate_all_languages_async(text, languages, context))

    def translate_missing_languages(
        self,
        text: str,
        existing: Mapping[str, Optional[str]],
        languages: Sequence[str],
        context: Optional[str] = None,
    ) -> Dict[str, Optional[str]]:
        return asyncio.run(self.translate_missing_languages_async(text, existing, languages, context))
