"""
Data types produced by the placeholder parser.

Descriptors live for one parse/reconstruct round and are never shared
between calls.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

MARKER_TEMPLATE = "%VAR_{index}%"

MARKER_WRAPPER = r"(?:%|_{1,3}|-)"


def make_marker(index: int) -> str:
    """Return the carrier marker for descriptor `index`."""
    return MARKER_TEMPLATE.format(index=index)


def marker_pattern(index: str) -> "re.Pattern":
    """
    Pattern for a marker, exact or mangled, whose number matches `index`.

    Tolerates ``%``/``_``/``__``/``-`` wrappers, the names VAR, VARIABLE,
    PLACEHOLDER and LOCUTOR in any case, a space/``_``/``-`` separator, and a
    stray ``.`` or ``。`` before the closing wrapper.
    """
    return re.compile(
        MARKER_WRAPPER + r"\s?(?:VARIABLE|VAR|PLACEHOLDER|LOCUTOR)[ _-]?" + index
        + r"(?!\d)\s?(?P<dot>[.。])?(?:" + MARKER_WRAPPER + r"|(?!\w))",
        re.IGNORECASE,
    )


# Any marker-looking text, including text already present in a source string
MARKER_LIKE_RE = marker_pattern(r"\d+")


class PlaceholderKind(str, Enum):
    VARIABLE = "variable"
    PLURAL = "plural"
    GENDER = "gender"
    CHOOSE = "choose"
    LIST = "list"
    DATETIME = "datetime"
    NESTED = "nested"
    LITERAL = "literal"  # marker-looking source text, restored verbatim


# Kinds whose bodies carry human-readable variants
FRAGMENT_KINDS = (PlaceholderKind.PLURAL, PlaceholderKind.GENDER, PlaceholderKind.CHOOSE)


@dataclass(frozen=True)
class Fragment:
    """A translatable piece of a construct, offsets relative to its raw text."""
    text: str
    start: int
    end: int
    kind: str = "brace"  # brace | free


@dataclass
class PlaceholderDescriptor:
    """One top-level construct found in a source string."""
    index: int
    kind: PlaceholderKind
    raw: str
    name: str = ""
    options: Tuple[str, ...] = ()
    body_offset: int = 0          # where variants start inside `raw`
    depth: int = 1                # deepest brace nesting inside the span
    fragments: List[Fragment] = field(default_factory=list)

    @property
    def marker(self) -> str:
        return make_marker(self.index)

    @property
    def body(self) -> str:
        """Variant text between the header and the closing brace."""
        return self.raw[self.body_offset:-1]

    @property
    def has_fragments(self) -> bool:
        return self.kind in FRAGMENT_KINDS


@dataclass
class ParseResult:
    """Carrier string plus descriptors in marker order."""
    source: str
    carrier: str
    descriptors: List[PlaceholderDescriptor] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.descriptors)
