"""Tests for placeholder discovery and token parsing."""

import pytest
from phengine.lib.errors import MalformedPlaceholder
from phengine.lib.parser import PlaceholderParser
from phengine.models.dataModel import ParsedPlaceholder


@pytest.fixture
def parser() -> PlaceholderParser:
    return PlaceholderParser()


@pytest.mark.parametrize(
    "text,expected",
    [
        ("{{gen:uuid}}", True),
        ("  {{gen:uuid}}  ", True),
        ("{{a}}", True),
        ("{{}}", False),
        ("{{gen:uuid}} tail", False),
        ("head {{gen:uuid}}", False),
        ("plain", False),
        ("{{gen:\nuuid}}", False),
    ],
)
def test_is_placeholder(parser: PlaceholderParser, text: str, expected: bool) -> None:
    assert parser.is_placeholder(text) is expected


def test_find_simple(parser: PlaceholderParser) -> None:
    assert parser.find_placeholders("id={{gen:uuid:x}}") == ["{{gen:uuid:x}}"]


def test_find_none(parser: PlaceholderParser) -> None:
    assert parser.find_placeholders("no tokens here") == []


def test_find_nested_outer_first(parser: PlaceholderParser) -> None:
    text = "{{time:format:{{gen:number:1}}:dd.MM.yyyy}}"
    assert parser.find_placeholders(text) == [
        "{{time:format:{{gen:number:1}}:dd.MM.yyyy}}",
        "{{gen:number:1}}",
    ]


def test_find_deeply_nested(parser: PlaceholderParser) -> None:
    text = "{{a:b:{{c:d:{{e:f}}}}}}"
    assert parser.find_placeholders(text) == [
        "{{a:b:{{c:d:{{e:f}}}}}}",
        "{{c:d:{{e:f}}}}",
        "{{e:f}}",
    ]


def test_find_collapses_duplicates(parser: PlaceholderParser) -> None:
    text = "{{gen:uuid:a}} and {{gen:uuid:a}} and {{gen:uuid:b}}"
    assert parser.find_placeholders(text) == ["{{gen:uuid:a}}", "{{gen:uuid:b}}"]


def test_find_drops_unterminated(parser: PlaceholderParser) -> None:
    assert parser.find_placeholders("{{gen:uuid:a}} and {{gen:uuid") == [
        "{{gen:uuid:a}}"
    ]


def test_find_ignores_stray_close(parser: PlaceholderParser) -> None:
    assert parser.find_placeholders("}} {{gen:uuid:a}}") == ["{{gen:uuid:a}}"]


def test_depth_measure(parser: PlaceholderParser) -> None:
    assert parser.depth_measure("{{gen:uuid}}") == 1
    assert parser.depth_measure("{{a:b:{{c:d:{{e:f}}}}}}") == 3
    assert parser.depth_measure("plain") == 0


def test_parse_basic(parser: PlaceholderParser) -> None:
    result: ParsedPlaceholder = parser.parse("{{gen:uuid:inst1}}")
    assert result.original == "{{gen:uuid:inst1}}"
    assert result.module == "gen"
    assert result.action == "uuid"
    assert result.args == ["inst1"]
    assert result.transforms == []


def test_parse_without_args(parser: PlaceholderParser) -> None:
    result = parser.parse("{{gen:uuid}}")
    assert result.args == []


def test_parse_trims_segments(parser: PlaceholderParser) -> None:
    result = parser.parse("  {{ gen : number : 42 }}  ")
    assert (result.module, result.action, result.args) == ("gen", "number", ["42"])
    assert result.original == "{{ gen : number : 42 }}"


def test_parse_transforms(parser: PlaceholderParser) -> None:
    result = parser.parse("{{gen:number:42|toString|pad:5:0}}")
    assert [t.name for t in result.transforms] == ["toString", "pad"]
    assert result.transforms[0].params == []
    assert result.transforms[1].params == ["5", "0"]


def test_parse_escaped_colons(parser: PlaceholderParser) -> None:
    result = parser.parse(r"{{time:calc:0:HH\:mm\:ss}}")
    assert result.module == "time"
    assert result.action == "calc"
    assert result.args == ["0", "HH:mm:ss"]


def test_parse_nested_argument_kept_whole(parser: PlaceholderParser) -> None:
    result = parser.parse("{{time:format:{{gen:number:1|toString}}:yyyy}}")
    assert result.args == ["{{gen:number:1|toString}}", "yyyy"]
    assert result.transforms == []


def test_parse_drops_trailing_empty_segment(parser: PlaceholderParser) -> None:
    assert parser.parse("{{gen:uuid:}}").args == []


@pytest.mark.parametrize(
    "token",
    [
        "plain text",
        "{{gen}}",
        "{{:uuid}}",
        "{{gen: }}",
        "{{gen:uuid| :x}}",
    ],
)
def test_parse_malformed(parser: PlaceholderParser, token: str) -> None:
    with pytest.raises(MalformedPlaceholder):
        parser.parse(token)


def test_malformed_is_value_error(parser: PlaceholderParser) -> None:
    with pytest.raises(ValueError):
        parser.parse("{{only}}")
