"""
Tests for command highlighting.
"""

import re

from pygments.token import Name, Operator

from cmdx.highlighting import ShellLexer, highlight

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _tokens(text):
    return [(tok, value) for tok, value in ShellLexer().get_tokens(text) if value.strip()]


def test_highlight_keeps_text():
    """Test that highlighting only adds colour codes."""
    text = "ls -la | grep foo"
    rendered = highlight(text)
    assert "\x1b[" in rendered
    assert not rendered.endswith("\n")
    assert ANSI.sub("", rendered) == text

    print("[OK] Highlight test passed")


def test_lexer_flags_and_switches():
    """Test that both flag conventions are recognised."""
    assert (Name.Tag, "-la") in _tokens("ls -la")
    assert (Name.Tag, "/s") in _tokens("dir /s")
    assert (Name.Tag, "--noconfirm") in _tokens("pacman -S --noconfirm vim")


def test_lexer_variables_and_operators():
    """Test variables in both syntaxes and control operators."""
    assert (Name.Variable, "$HOME") in _tokens("echo $HOME")
    assert (Name.Variable, "%USERPROFILE%") in _tokens("echo %USERPROFILE%")
    assert (Operator, "&&") in _tokens("dir && cls")
