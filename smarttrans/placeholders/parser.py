"""
Placeholder parser.

Turns a source string into a carrier string, where every top-level construct
is replaced by a ``%VAR_i%`` marker, plus the descriptors needed to put the
constructs back.

Usage:
    from smarttrans.placeholders import parse

    result = parse("You have {count:plural:{} item|{} items}")
    result.carrier                  # "You have %VAR_0%"
    result.descriptors[0].kind      # PlaceholderKind.PLURAL
"""
import re
from typing import List

from .descriptor import MARKER_LIKE_RE, ParseResult, PlaceholderDescriptor, PlaceholderKind
from .fragments import extract_fragments
from .matchers import MATCHERS, brace_depth, find_balanced_spans
from ..utils.exceptions import ParseFailure
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Stand-in for spans left literal after a ParseFailure; contains no braces so
# later matchers never see the span again.
HELD_TEMPLATE = "\x00{index}\x00"

# Stand-in for marker-looking text already present in the source
LITERAL_TEMPLATE = "\x01{index}\x01"
LITERAL_RE = re.compile("\x01(\\d+)\x01")


def _hide_literals(text: str, literals: List[str], skip=()) -> str:
    """Replace marker-looking text outside the `skip` spans with literal stand-ins."""
    pieces = []
    last = 0
    for match in MARKER_LIKE_RE.finditer(text):
        if any(start <= match.start() < end for start, end in skip):
            continue
        pieces.append(text[last:match.start()])
        pieces.append(LITERAL_TEMPLATE.format(index=len(literals)))
        literals.append(match.group(0))
        last = match.end()
    pieces.append(text[last:])
    return "".join(pieces)


def parse(source: str) -> ParseResult:
    """
    Parse `source` into a carrier string and ordered descriptors.

    Never raises: unbalanced braces, ``{}`` and malformed constructs are kept
    as literal text. Marker-looking text in the source becomes a LITERAL
    descriptor so every marker appears in the carrier exactly once.
    """
    literals: List[str] = []
    working = _hide_literals(source, literals, skip=find_balanced_spans(source))
    descriptors: List[PlaceholderDescriptor] = []
    held: List[str] = []

    for matcher in MATCHERS:
        replacements = []
        for start, end in find_balanced_spans(working):
            raw = working[start:end]
            try:
                match = matcher(raw)
            except ParseFailure as e:
                logger.warning(f"Leaving malformed placeholder as text: {e}")
                replacements.append((start, end, HELD_TEMPLATE.format(index=len(held))))
                held.append(_hide_literals(raw, literals))
                continue
            if match is None:
                continue

            descriptor = PlaceholderDescriptor(
                index=len(descriptors),
                kind=match.kind,
                raw=raw,
                name=match.name,
                options=match.options,
                body_offset=match.body_offset,
                depth=brace_depth(raw),
            )
            descriptor.fragments = extract_fragments(descriptor)
            descriptors.append(descriptor)
            replacements.append((start, end, descriptor.marker))

        # Right to left keeps earlier offsets valid
        for start, end, text in reversed(replacements):
            working = working[:start] + text + working[end:]

    for i, raw in enumerate(held):
        working = working.replace(HELD_TEMPLATE.format(index=i), raw, 1)

    def literal_marker(match):
        descriptor = PlaceholderDescriptor(
            index=len(descriptors),
            kind=PlaceholderKind.LITERAL,
            raw=literals[int(match.group(1))],
            depth=0,
        )
        descriptors.append(descriptor)
        return descriptor.marker

    working = LITERAL_RE.sub(literal_marker, working)

    if descriptors:
        logger.debug(f"Parsed {len(descriptors)} placeholder(s): {working!r}")

    return ParseResult(source=source, carrier=working, descriptors=descriptors)
