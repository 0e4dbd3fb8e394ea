"""Placeholder micro-language: parsing, fragments and descriptors."""
from .descriptor import (
    MARKER_LIKE_RE,
    MARKER_TEMPLATE,
    Fragment,
    ParseResult,
    PlaceholderDescriptor,
    PlaceholderKind,
    make_marker,
    marker_pattern,
)
from .fragments import extract_fragments, extract_free_text, rebuild_construct, translatable_fragments
from .parser import parse

__all__ = [
    'MARKER_TEMPLATE',
    'Fragment',
    'ParseResult',
    'PlaceholderDescriptor',
    'PlaceholderKind',
    'MARKER_LIKE_RE',
    'make_marker',
    'marker_pattern',
    'extract_fragments',
    'extract_free_text',
    'rebuild_construct',
    'translatable_fragments',
    'parse',
]
