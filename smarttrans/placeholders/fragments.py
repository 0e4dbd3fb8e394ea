"""
Inner-fragment extraction for Plural, Gender and Choose constructs.

Two kinds of fragment are collected from a construct's variant body:

- brace fragments: innermost ``{...}`` bodies that are not blank and are not
  variable references (no ``.`` or ``:``), e.g. ``item`` in ``{item}``
- free text: text outside nested braces and between ``|`` separators that
  contains at least one letter, e.g. ``He`` in ``He|She``

The order of ``translatable_fragments`` is the only link between a fragment
and its translation, so both sides must call it with the same arguments.
"""
from typing import List, Optional, Sequence

from .descriptor import FRAGMENT_KINDS, Fragment, PlaceholderDescriptor
from .matchers import classify, find_balanced_spans


def _innermost_bodies(raw: str, start: int, end: int) -> List[Fragment]:
    stack = []
    found = []
    for i in range(start, end):
        ch = raw[i]
        if ch == '{':
            stack.append(i)
        elif ch == '}' and stack:
            open_at = stack.pop()
            body = raw[open_at + 1:i]
            if '{' in body:
                continue
            found.append(Fragment(body, open_at + 1, i, "brace"))
    found.sort(key=lambda f: f.start)
    return found


def _is_reference(text: str) -> bool:
    return not text.strip() or '.' in text or ':' in text


def extract_fragments(descriptor: PlaceholderDescriptor) -> List[Fragment]:
    """Brace fragments of a construct; empty for kinds without variants."""
    if descriptor.kind not in FRAGMENT_KINDS:
        return []
    raw = descriptor.raw
    return [
        f for f in _innermost_bodies(raw, descriptor.body_offset, len(raw) - 1)
        if not _is_reference(f.text)
    ]


def _free_runs(raw: str, start: int, end: int) -> List[Fragment]:
    """Letter-bearing text runs at brace depth 0 of raw[start:end]."""
    runs = []
    nested = [(s + start, e + start) for s, e in find_balanced_spans(raw[start:end])]

    # Plain text between nested spans, split on variant separators
    cursor = start
    gaps = []
    for s, e in nested:
        gaps.append((cursor, s))
        cursor = e
    gaps.append((cursor, end))

    for gap_start, gap_end in gaps:
        offset = gap_start
        for piece in raw[gap_start:gap_end].split('|'):
            stripped = piece.strip()
            if any(ch.isalpha() for ch in stripped):
                lead = len(piece) - len(piece.lstrip())
                runs.append(Fragment(stripped, offset + lead, offset + lead + len(stripped), "free"))
            offset += len(piece) + 1

    # Variant bodies of nested plural/gender/choose constructs
    for s, e in nested:
        inner = classify(raw[s:e])
        if inner and inner.kind in FRAGMENT_KINDS:
            runs.extend(_free_runs(raw, s + inner.body_offset, e - 1))

    runs.sort(key=lambda f: f.start)
    return runs


def extract_free_text(descriptor: PlaceholderDescriptor) -> List[Fragment]:
    """Free-text fragments of a construct; empty for kinds without variants."""
    if descriptor.kind not in FRAGMENT_KINDS:
        return []
    return _free_runs(descriptor.raw, descriptor.body_offset, len(descriptor.raw) - 1)


def translatable_fragments(descriptor: PlaceholderDescriptor, include_free_text: bool = True) -> List[Fragment]:
    """Brace fragments followed by free-text fragments."""
    fragments = list(descriptor.fragments) if descriptor.fragments else extract_fragments(descriptor)
    if include_free_text:
        fragments.extend(extract_free_text(descriptor))
    return fragments


def _clean(text: str, fragment: Fragment) -> str:
    # Translations must not open or close constructs, or add variants
    text = text.replace('{', '').replace('}', '')
    if fragment.kind == "free":
        text = text.replace('|', '/')
    return text


def rebuild_construct(
    descriptor: PlaceholderDescriptor,
    translations: Optional[Sequence[Optional[str]]],
    include_free_text: bool = True,
) -> str:
    """
    Splice translations into the construct's fragment slots.

    Slots without a translation (list too short, or a None entry) keep their
    original text; surplus translations are ignored.
    """
    if not translations:
        return descriptor.raw

    fragments = translatable_fragments(descriptor, include_free_text)
    pairs = [
        (f, t) for f, t in zip(fragments, translations)
        if t is not None and t.strip()
    ]

    raw = descriptor.raw
    for fragment, text in sorted(pairs, key=lambda p: p[0].start, reverse=True):
        raw = raw[:fragment.start] + _clean(text, fragment) + raw[fragment.end:]
    return raw
