"""
Tests for the placeholder parser and matchers.

Run with: pytest tests/test_parser.py -v
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from smarttrans.placeholders import PlaceholderKind, parse
from smarttrans.placeholders.matchers import (
    MATCHERS,
    brace_depth,
    classify,
    find_balanced_spans,
    match_choose,
    match_datetime,
    match_gender,
    match_list,
    match_nested,
    match_plural,
    match_simple,
)
from smarttrans.utils.exceptions import ParseFailure


class TestBalancedSpans:
    """Tests for the brace scanner."""

    def test_outermost_only(self):
        """Nested pairs should be reported as one outer span."""
        text = "a {x:{y}} b {z}"
        assert find_balanced_spans(text) == [(2, 9), (12, 15)]

    def test_unterminated_is_literal(self):
        """An unclosed brace should produce no span."""
        assert find_balanced_spans("{unterminated") == []

    def test_stray_closing_brace(self):
        """A closing brace without opener should be ignored."""
        assert find_balanced_spans("} {a}") == [(2, 5)]

    def test_balanced_inside_unterminated(self):
        """A balanced span inside an unclosed one should still be found."""
        assert find_balanced_spans("{a {b}") == [(3, 6)]

    def test_depth(self):
        """Depth should count the deepest nesting."""
        assert brace_depth("{a}") == 1
        assert brace_depth("{a:{b:{c}}}") == 3


class TestMatchers:
    """Tests for individual matcher functions."""

    def test_order(self):
        """Matchers should run from most to least specific."""
        assert MATCHERS == [
            match_gender, match_choose, match_plural, match_list,
            match_datetime, match_nested, match_simple,
        ]

    def test_gender(self):
        """Gender headers should yield name and options."""
        m = match_gender("{player:gender(male,female):He|She}")
        assert m.kind == PlaceholderKind.GENDER
        assert m.name == "player"
        assert m.options == ("male", "female")
        assert m.body_offset == len("{player:gender(male,female):")

    def test_gender_empty_option(self):
        """An empty option should raise ParseFailure."""
        with pytest.raises(ParseFailure):
            match_gender("{player:gender(male,,female):He|She}")

    def test_choose(self):
        """Choose headers should yield options."""
        m = match_choose("{door:choose(locked,open):Locked|Open}")
        assert m.kind == PlaceholderKind.CHOOSE
        assert m.options == ("locked", "open")

    def test_plural(self):
        m = match_plural("{count:plural:{} item|{} items}")
        assert m.kind == PlaceholderKind.PLURAL
        assert m.name == "count"

    def test_list_and_datetime(self):
        """List and date/time headers, with or without a format."""
        assert match_list("{items:list:{}|, |{} and {}}").kind == PlaceholderKind.LIST
        assert match_datetime("{when:date:dd MMM}").kind == PlaceholderKind.DATETIME
        assert match_datetime("{when:time}").kind == PlaceholderKind.DATETIME

    def test_nested(self):
        """Spans with inner braces and no known header are nested."""
        m = match_nested("{player:{name} ({level})}")
        assert m.kind == PlaceholderKind.NESTED
        assert m.name == "player"
        assert match_nested("{name}") is None

    def test_simple(self):
        """Simple variables, with format specifiers."""
        assert match_simple("{name}").name == "name"
        assert match_simple("{price:C2}").name == "price"
        assert match_simple("{}") is None
        assert match_simple("{  }") is None

    def test_wrong_kind_returns_none(self):
        """A matcher should not claim other kinds."""
        assert match_gender("{count:plural:{}|{}}") is None
        assert match_plural("{name}") is None

    def test_classify(self):
        """classify should return the first matching kind."""
        assert classify("{n:plural:{a}|{b}}").kind == PlaceholderKind.PLURAL
        assert classify("{}") is None
        assert classify("{p:gender(,):a}") is None


class TestParse:
    """Tests for parse()."""

    def test_plain_text(self):
        """Text without braces should pass through."""
        result = parse("Hello world")
        assert result.carrier == "Hello world"
        assert len(result) == 0

    def test_plural(self):
        result = parse("You have {count:plural:{} item|{} items}")
        assert result.carrier == "You have %VAR_0%"
        d = result.descriptors[0]
        assert d.kind == PlaceholderKind.PLURAL
        assert d.raw == "{count:plural:{} item|{} items}"
        assert d.body == "{} item|{} items"

    def test_scenario_gender_and_plural(self):
        """Gender and plural in one string should each become a marker."""
        result = parse("{player:gender(male,female):He|She} found {count:plural:{item}|{items}}")
        assert result.carrier == "%VAR_0% found %VAR_1%"
        kinds = [d.kind for d in result.descriptors]
        assert kinds == [PlaceholderKind.GENDER, PlaceholderKind.PLURAL]
        assert [f.text for f in result.descriptors[1].fragments] == ["item", "items"]

    def test_numbering_follows_precedence(self):
        """Markers are numbered by matcher order first, then position."""
        result = parse("{name} has {count:plural:{item}|{items}}")
        assert result.carrier == "%VAR_1% has %VAR_0%"
        assert result.descriptors[0].kind == PlaceholderKind.PLURAL
        assert result.descriptors[1].raw == "{name}"

    def test_numbering_left_to_right_within_kind(self):
        result = parse("{a} and {b}")
        assert result.carrier == "%VAR_0% and %VAR_1%"
        assert [d.name for d in result.descriptors] == ["a", "b"]

    def test_gender_with_nested_plural(self):
        """A plural inside a gender variant stays part of the gender construct."""
        source = "{p:gender(m,f):He has {n:plural:{item}|{items}}|She has {n:plural:{item}|{items}}}"
        result = parse(source)
        assert result.carrier == "%VAR_0%"
        assert result.descriptors[0].kind == PlaceholderKind.GENDER
        assert result.descriptors[0].depth == 3

    def test_plural_inside_plural(self):
        """Only the outermost of same-kind nested constructs is a descriptor."""
        result = parse("{a:plural:{b:plural:{x}|{y}}|{z}}")
        assert len(result) == 1
        assert [f.text for f in result.descriptors[0].fragments] == ["x", "y", "z"]

    def test_empty_braces_literal(self):
        """{} at top level should stay literal."""
        result = parse("Value: {}")
        assert result.carrier == "Value: {}"
        assert len(result) == 0

    def test_unterminated(self):
        """Unterminated input creates no descriptor."""
        result = parse("{unterminated")
        assert result.carrier == "{unterminated"
        assert len(result) == 0

    def test_partially_balanced(self):
        result = parse("{a {b}")
        assert result.carrier == "{a %VAR_0%"
        assert result.descriptors[0].raw == "{b}"

    def test_malformed_construct_isolated(self):
        """A malformed construct stays literal and others still parse."""
        result = parse("{p:gender(m,,f):He|She} sees {name}")
        assert result.carrier == "{p:gender(m,,f):He|She} sees %VAR_0%"
        assert len(result) == 1
        assert result.descriptors[0].raw == "{name}"

    def test_marker_text_in_source(self):
        """Marker-looking source text gets its own marker, so none repeats."""
        result = parse("Use %VAR_0% for {name}")
        assert result.carrier == "Use %VAR_1% for %VAR_0%"
        assert result.descriptors[1].kind == PlaceholderKind.LITERAL
        assert result.descriptors[1].raw == "%VAR_0%"

    def test_mangled_marker_text_in_source(self):
        result = parse("__VAR_0__ then {a} then -var-1-")
        assert result.carrier == "%VAR_1% then %VAR_0% then %VAR_2%"
        assert [d.raw for d in result.descriptors[1:]] == ["__VAR_0__", "-var-1-"]

    def test_marker_text_inside_construct_untouched(self):
        """Marker text inside a construct stays part of its raw text."""
        result = parse("{count:plural:{} %VAR_0%|{} items}")
        assert result.carrier == "%VAR_0%"
        assert len(result) == 1

    def test_marker_text_inside_malformed_construct(self):
        result = parse("{p:gender(m,,f):%VAR_0%} {name}")
        assert result.carrier == "{p:gender(m,,f):%VAR_1%} %VAR_0%"
        assert result.descriptors[1].raw == "%VAR_0%"

    def test_kinds(self):
        result = parse("{items:list:{}|, } {when:date:d} {player:{name} ({level})} {door:choose(a,b):A|B}")
        kinds = {d.raw: d.kind for d in result.descriptors}
        assert kinds["{items:list:{}|, }"] == PlaceholderKind.LIST
        assert kinds["{when:date:d}"] == PlaceholderKind.DATETIME
        assert kinds["{player:{name} ({level})}"] == PlaceholderKind.NESTED
        assert kinds["{door:choose(a,b):A|B}"] == PlaceholderKind.CHOOSE

    def test_markers_are_bijective(self):
        """Every descriptor marker appears exactly once in the carrier."""
        result = parse("{a} {b:plural:{x}|{y}} {c:gender(m,f):x|y} {d}")
        for d in result.descriptors:
            assert result.carrier.count(d.marker) == 1
        assert [d.index for d in result.descriptors] == list(range(len(result)))

    def test_source_preserved(self):
        source = "Hi {name}"
        assert parse(source).source == source


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
