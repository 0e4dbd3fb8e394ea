"""
Ordered placeholder matchers.

Each matcher is a pure function ``raw -> Optional[SpanMatch]`` that decides
whether one balanced ``{...}`` span is a construct of its kind. The parser
offers every outermost span to the matchers in ``MATCHERS`` order, so a span
is always claimed by the most specific kind that fits it.

Matchers raise ParseFailure when the header is recognized but its contents
are malformed; the parser leaves that span literal.
"""
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .descriptor import PlaceholderKind
from ..utils.exceptions import ParseFailure

NAME = r"(?P<name>[^:{}|()]+)"

GENDER_RE = re.compile(r"\{" + NAME + r":gender\((?P<options>[^(){}]*)\):")
CHOOSE_RE = re.compile(r"\{" + NAME + r":choose\((?P<options>[^(){}]*)\):")
PLURAL_RE = re.compile(r"\{" + NAME + r":plural:")
LIST_RE = re.compile(r"\{" + NAME + r":list(?=[:}])")
DATETIME_RE = re.compile(r"\{" + NAME + r":(?:date|time)(?=[:}])")
LEADING_NAME_RE = re.compile(r"\{([^:{}]*)")


@dataclass(frozen=True)
class SpanMatch:
    """Classification of one span."""
    kind: PlaceholderKind
    name: str
    options: Tuple[str, ...] = ()
    body_offset: int = 1


Matcher = Callable[[str], Optional[SpanMatch]]


def find_balanced_spans(text: str) -> List[Tuple[int, int]]:
    """
    Return (start, end) of every outermost balanced ``{...}`` span.

    Braces without a partner are literal text; a balanced span inside an
    unterminated one is still reported.
    """
    stack = []
    pairs = []
    for i, ch in enumerate(text):
        if ch == '{':
            stack.append(i)
        elif ch == '}' and stack:
            pairs.append((stack.pop(), i + 1))

    pairs.sort()
    outermost = []
    last_end = -1
    for start, end in pairs:
        if start >= last_end:
            outermost.append((start, end))
            last_end = end
    return outermost


def brace_depth(raw: str) -> int:
    """Deepest brace nesting inside a balanced span."""
    depth = deepest = 0
    for ch in raw:
        if ch == '{':
            depth += 1
            deepest = max(deepest, depth)
        elif ch == '}' and depth:
            depth -= 1
    return deepest


def _split_options(options: str, raw: str) -> Tuple[str, ...]:
    parts = tuple(o.strip() for o in options.split(','))
    if any(not p for p in parts):
        raise ParseFailure("Empty option in option list", span=raw)
    return parts


def _header_matcher(pattern: "re.Pattern", kind: PlaceholderKind, with_options: bool = False) -> Matcher:
    """Build a matcher for constructs introduced by a ``name:kind...`` header."""

    def matcher(raw: str) -> Optional[SpanMatch]:
        header = pattern.match(raw)
        if not header:
            return None
        options: Tuple[str, ...] = ()
        if with_options:
            options = _split_options(header.group("options"), raw)
        return SpanMatch(kind, header.group("name").strip(), options, header.end())

    matcher.__name__ = f"match_{kind.value}"
    return matcher


# Gender headers may carry plural variants inside them; it runs first so
# those plurals stay part of the gender construct.
match_gender = _header_matcher(GENDER_RE, PlaceholderKind.GENDER, with_options=True)
match_choose = _header_matcher(CHOOSE_RE, PlaceholderKind.CHOOSE, with_options=True)
match_plural = _header_matcher(PLURAL_RE, PlaceholderKind.PLURAL)
match_list = _header_matcher(LIST_RE, PlaceholderKind.LIST)
match_datetime = _header_matcher(DATETIME_RE, PlaceholderKind.DATETIME)


def _leading_name(raw: str) -> str:
    m = LEADING_NAME_RE.match(raw)
    return m.group(1) if m else ""


def match_nested(raw: str) -> Optional[SpanMatch]:
    """Any other span with braces inside, e.g. ``{player:{name} ({level})}``."""
    if '{' not in raw[1:-1]:
        return None
    name = _leading_name(raw)
    return SpanMatch(PlaceholderKind.NESTED, name.strip(), body_offset=1 + len(name))


def match_simple(raw: str) -> Optional[SpanMatch]:
    """Plain ``{name}`` or ``{name:format}``. An empty ``{}`` stays literal."""
    inner = raw[1:-1]
    if not inner.strip() or '{' in inner or '}' in inner:
        return None
    return SpanMatch(PlaceholderKind.VARIABLE, _leading_name(raw).strip())


MATCHERS: List[Matcher] = [
    match_gender,
    match_choose,
    match_plural,
    match_list,
    match_datetime,
    match_nested,
    match_simple,
]


def classify(raw: str) -> Optional[SpanMatch]:
    """First match for one span, or None for literal text and malformed headers."""
    for matcher in MATCHERS:
        try:
            match = matcher(raw)
        except ParseFailure:
            return None
        if match:
            return match
    return None
