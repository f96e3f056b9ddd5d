"""Unit tests for `.env` text generation."""

from __future__ import annotations

import math

import pytest

from envpipe.parser import parse
from envpipe.serializer import generate, quote_value, render_value


def test_generate_sorts_keys_by_default() -> None:
    """Keys are emitted lexicographically with no trailing newline."""

    assert generate({"B": "2", "A": "1"}) == "A=1\nB=2"


def test_generate_keeps_source_order_when_not_sorting() -> None:
    """With `sort=False` the mapping order is preserved."""

    assert generate({"B": "2", "A": "1"}, sort=False) == "B=2\nA=1"


def test_generate_applies_include_then_exclude() -> None:
    """Only included keys are emitted, minus any excluded ones."""

    source = {"A": "1", "B": "2", "C": "3"}

    assert generate(source, include={"A", "C", "MISSING"}) == "A=1\nC=3"
    assert generate(source, exclude={"B"}) == "A=1\nC=3"
    assert generate(source, include=["A", "B"], exclude=["B"]) == "A=1"


def test_generate_empty_selection_is_empty_text() -> None:
    """Nothing selected yields an empty string."""

    assert generate({}) == ""
    assert generate({"A": "1"}, include=set()) == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("plain", "plain"),
        ("", ""),
        ("a=b,c", "a=b,c"),
        ("two words", '"two words"'),
        ('say "hi"', '"say \\"hi\\""'),
        ("it's", "\"it's\""),
        ("$HOME", '"$HOME"'),
        ("{x}", '"{x}"'),
        ("C:\\dir", '"C:\\\\dir"'),
        ("line1\nline2", '"line1\\nline2"'),
        ("tab\there", '"tab\\there"'),
    ],
)
def test_quote_value_quotes_only_when_needed(value: str, expected: str) -> None:
    """Whitespace, quotes, `$`, braces, and backslashes trigger quoting."""

    assert quote_value(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        "plain",
        "",
        "  padded  ",
        "two words",
        'say "hi"',
        "it's",
        "C:\\dir\\",
        "multi\nline\r\nvalue",
        "tab\tseparated",
        "{braces}",
        "#not-a-comment",
        "a=b=c",
    ],
)
def test_generated_values_parse_back_unchanged(value: str) -> None:
    """Values without references survive `generate` followed by `parse`."""

    assert parse(generate({"KEY": value})) == {"KEY": value}


def test_render_value_formats_typed_values() -> None:
    """Typed values render in forms the converter reads back."""

    assert render_value(True) == "true"
    assert render_value(False) == "false"
    assert render_value(None) == ""
    assert render_value(3000) == "3000"
    assert render_value(0.5) == "0.5"
    assert render_value(math.inf) == "Infinity"
    assert render_value(-math.inf) == "-Infinity"
    assert render_value(math.nan) == "NaN"
    assert render_value(["a", "b"]) == "a,b"
    assert render_value([1, "two", None]) == '[1,"two",null]'
    assert render_value([]) == ""
    assert render_value({"k": [1, 2]}) == '{"k":[1,2]}'


def test_generate_renders_typed_values() -> None:
    """Validator output can be serialized directly."""

    source = {"PORT": 8080, "DEBUG": True, "TAGS": ["x", "y"]}

    assert generate(source) == "DEBUG=true\nPORT=8080\nTAGS=x,y"
