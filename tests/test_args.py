import pytest

from panshell.args import is_quote, parse


def test_parse_mixed_quotes_and_escapes():
    line = (
        "  one two three \"double quotes\" 'single quotes'  \"\"   arg\\ with\\ spaces "
        "\"\\\"quotes\\\" in 'quotes'\" '\"quotes\" in \\'quotes'\"  \"   "
    )
    assert parse(line) == [
        "one",
        "two",
        "three",
        "double quotes",
        "single quotes",
        "",
        "arg with spaces",
        "\"quotes\" in 'quotes'",
        "\"quotes\" in 'quotes  ",
    ]


def test_parse_unicode_filename():
    assert parse(" cd  英语_800个有趣句子帮你记忆7000个单词_42页.doc") == [
        "cd",
        "英语_800个有趣句子帮你记忆7000个单词_42页.doc",
    ]


def test_parse_empty_line():
    assert parse("") == []
    assert parse("    ") == []


def test_parse_backslash_kept_before_ordinary_char():
    assert parse("a\\b c") == ["a\\b", "c"]


def test_parse_trailing_backslash_kept():
    assert parse("abc\\") == ["abc\\"]


def test_parse_escaped_backslash():
    assert parse("a\\\\b") == ["a\\b"]


def test_parse_unclosed_quote_drops_rest():
    assert parse('ls "unterminated text') == ["ls"]


def test_parse_back_quotes_group():
    assert parse("echo `a b`") == ["echo", "a b"]


def test_parse_tabs_separate():
    assert parse("a\tb\nc") == ["a", "b", "c"]


@pytest.mark.parametrize("char, expected", [("'", True), ('"', True), ("`", True), ("a", False), ("\\", False)])
def test_is_quote(char, expected):
    assert is_quote(char) is expected