"""
Reconstructor.

Puts constructs back into a translated carrier string. MT engines sometimes
mangle markers (``%VAR_0%`` -> ``__PLACEHOLDER_0.__``, ``% VAR_0 %``,
``-var-0-``), so each marker is looked up exactly first and then with a
bounded repair pattern.

Reconstruction never raises: a marker that cannot be found is logged and the
literal marker is appended to the output.
"""
import re
from functools import lru_cache
from typing import Mapping, Optional, Sequence

from .adapters import LanguageAdapterTable
from .placeholders import PlaceholderDescriptor, marker_pattern, rebuild_construct
from .utils.exceptions import ReconstructionMismatch
from .utils.logger import get_logger

logger = get_logger(__name__)

SENTINEL_TEMPLATE = "\x00{index}\x00"


@lru_cache(maxsize=256)
def repair_pattern(index: int) -> "re.Pattern":
    """Pattern for a mangled marker `index`; see `marker_pattern`."""
    return marker_pattern(str(index))


def _replacement(
    descriptor: PlaceholderDescriptor,
    fragments: Optional[Sequence[Optional[str]]],
    language: Optional[str],
    adapters: Optional[LanguageAdapterTable],
    include_free_text: bool,
) -> str:
    if adapters is not None and language:
        adapted = adapters.apply(language, descriptor, fragments, include_free_text)
        if adapted is not None:
            return adapted
    if fragments:
        return rebuild_construct(descriptor, fragments, include_free_text)
    return descriptor.raw


def reconstruct(
    translated_carrier: str,
    descriptors: Sequence[PlaceholderDescriptor],
    translated_fragments: Optional[Mapping[int, Sequence[Optional[str]]]] = None,
    language: Optional[str] = None,
    adapters: Optional[LanguageAdapterTable] = None,
    include_free_text: bool = True,
) -> str:
    """
    Rebuild a translated string.

    Args:
        translated_carrier: MT output for the carrier string.
        descriptors: Descriptors from the parse of the source.
        translated_fragments: Descriptor index -> fragment translations, in
            ``translatable_fragments`` order.
        language: Target language name, used for adapter lookup.
        adapters: Session adapter table; None disables adapters.
        include_free_text: Must match the flag used when extracting fragments.

    Returns:
        The translated string with every construct restored.
    """
    text = translated_carrier
    translated_fragments = translated_fragments or {}
    substitutions = {}
    unresolved = []

    for descriptor in descriptors:
        marker = descriptor.marker
        sentinel = SENTINEL_TEMPLATE.format(index=descriptor.index)

        pos = text.find(marker)
        if pos >= 0:
            text = text[:pos] + sentinel + text[pos + len(marker):]
            if marker in text:
                logger.warning(f"Removing duplicate {marker} from translation", extra={"marker": marker})
                text = text.replace(marker, "")
        else:
            match = repair_pattern(descriptor.index).search(text)
            if match is None:
                unresolved.append(descriptor)
                continue
            logger.debug(f"Repaired {match.group(0)!r} -> {marker}", extra={"marker": marker})
            text = text[:match.start()] + sentinel + (match.group("dot") or "") + text[match.end():]

        substitutions[sentinel] = _replacement(
            descriptor,
            translated_fragments.get(descriptor.index),
            language,
            adapters,
            include_free_text,
        )

    # Sentinels first, so substituted constructs are never searched again
    for sentinel, value in substitutions.items():
        text = text.replace(sentinel, value)

    for descriptor in unresolved:
        error = ReconstructionMismatch(
            f"Marker {descriptor.marker} not found in translation",
            marker=descriptor.marker,
            details={"language": language},
        )
        logger.warning(str(error), extra={"marker": descriptor.marker, "language": language})
        if text and not text[-1].isspace():
            text += " "
        text += descriptor.marker

    return text
