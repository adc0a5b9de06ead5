"""
Tests for quote-aware tokenizing and compound splitting.
"""

from cmdx.lexer import (
    Operator,
    Segment,
    Token,
    join_compound,
    needs_quoting,
    render_token,
    split_compound,
    tokenize,
)
from cmdx.platforms import Os


def test_tokenize_quotes():
    """Test that quoted spans stay together and are marked."""
    tokens = tokenize('echo "hello world" foo')
    assert [t.text for t in tokens] == ["echo", "hello world", "foo"]
    assert [t.quoted for t in tokens] == [False, True, False]
    assert tokens[1].quote_char == '"'

    print("[OK] Tokenize quotes test passed")


def test_tokenize_edge_cases():
    """Test blank input, joined quotes and unterminated quotes."""
    assert tokenize("   ") == []

    joined = tokenize('--name="a b"')
    assert len(joined) == 1
    assert joined[0].text == "--name=a b"
    assert joined[0].quoted

    unterminated = tokenize("grep 'a b")
    assert [t.text for t in unterminated] == ["grep", "a b"]

    windows = tokenize(r'copy "C:\Program Files\x.txt" D:\backup')
    assert windows[1].text == r"C:\Program Files\x.txt"
    assert windows[2].text == r"D:\backup"


def test_render_token():
    """Test quote handling when emitting tokens."""
    spaced = Token("a b", True, "'")
    assert render_token(spaced, Os.LINUX) == "'a b'"
    assert render_token(spaced, Os.WINDOWS) == '"a b"'
    assert render_token(Token("abc", True, '"'), Os.LINUX) == "abc"
    assert render_token(Token("it's here", True, "'"), Os.LINUX) == "\"it's here\""

    assert needs_quoting("a|b", Os.LINUX)
    assert needs_quoting("", Os.WINDOWS)
    assert not needs_quoting("plain", Os.WINDOWS)


def test_split_compound():
    """Test splitting on top-level operators."""
    assert split_compound("dir && cls") == [
        Segment("dir", Operator.AND),
        Segment("cls", None),
    ]

    segments = split_compound("a||b;c")
    assert [s.text for s in segments] == ["a", "b", "c"]
    assert [s.operator for s in segments] == [Operator.OR, Operator.SEQ, None]
    assert join_compound(segments) == "a || b ; c"


def test_split_compound_respects_quotes():
    """Test that operators inside quotes and lone & do not split."""
    segments = split_compound('echo "a && b" | grep a')
    assert len(segments) == 2
    assert segments[0] == Segment('echo "a && b"', Operator.PIPE)

    assert len(split_compound("sleep 1 & echo done")) == 1
