"""
Syntax highlighting for translated commands.

Colours both conventions cmdx deals with:

  Flags      (-m, --verbose, /s)       grey
  Strings    ("...", '...')            green
  Variables  ($VAR, ${VAR}, %VAR%)     yellow
  Operators  (|, &&, ||, ;, >)         cyan
  Numbers                              purple
  Comments   (#..., REM ...)           dark grey / italic

Uses Pygments for lexing; the interactive prompt reuses the same lexer
through prompt_toolkit.
"""

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import RegexLexer
from pygments.style import Style as PygmentsStyle
from pygments.token import (
    Comment,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Token,
)


# ---------------------------------------------------------------------------
# Lexer for single command lines in either convention
# ---------------------------------------------------------------------------

class ShellLexer(RegexLexer):
    """
    Lightweight lexer for one-line commands, POSIX or cmd.exe style.

    Not meant for full scripts.  Recognises flags and switches, strings,
    variables, operators and numbers while leaving everything else as
    plain text.
    """

    name = "CmdxShell"
    aliases = ["cmdxshell"]

    tokens = {
        "root": [
            # comments
            (r"#.*$", Comment.Single),
            (r"(?i)^\s*(rem\s.*|::.*)$", Comment.Single),

            # strings
            (r'"(?:\\.|[^"\\])*"', String.Double),
            (r"'[^']*'", String.Single),
            (r"`[^`]*`", String.Backtick),

            # variables
            (r"\$\{[^}]+\}", Name.Variable),
            (r"\$[A-Za-z_]\w*", Name.Variable),
            (r"%[A-Za-z_]\w*%", Name.Variable),

            # flags: --long, -short, and /switch after whitespace
            (r"--[A-Za-z0-9][\w=-]*", Name.Tag),
            (r"(?<=\s)-[A-Za-z0-9]+", Name.Tag),
            (r"(?<=\s)/[A-Za-z?][\w:-]*(?=\s|$)", Name.Tag),

            # operators and redirects
            (r"\|{1,2}", Operator),
            (r"&&", Operator),
            (r"[12]?>{1,2}", Operator),
            (r"<", Operator),
            (r";", Punctuation),

            (r"\b\d+\b", Number.Integer),

            (r"[^\s|&;<>]+", Token.Text),
            (r"\s+", Token.Text),
            (r".", Token.Text),
        ],
    }


# ---------------------------------------------------------------------------
# Colour palette (Monokai-inspired)
# ---------------------------------------------------------------------------

class CmdxStyle(PygmentsStyle):
    """Pygments colour theme for translated command output."""

    default_style = ""
    styles = {
        Token.Text:        "",
        Comment.Single:    "#6a6a6a italic",
        String.Double:     "#a6e22e",
        String.Single:     "#a6e22e",
        String.Backtick:   "#a6e22e",
        Name.Variable:     "#e6db74",
        Name.Tag:          "#888888",
        Operator:          "#66d9ef",
        Punctuation:       "#66d9ef",
        Number.Integer:    "#ae81ff",
    }


# Prompt segment styles for the interactive session ("cmdx linux>windows >")
PROMPT_STYLE = {
    "prompt-name":  "#00d7d7 bold",
    "prompt-os":    "#ffffff",
    "prompt-sep":   "#888888",
    "prompt-arrow": "#6a6a6a",
}


def highlight(text: str) -> str:
    """Return *text* with ANSI colour codes for a 256-colour terminal."""
    rendered = pygments_highlight(text, ShellLexer(), Terminal256Formatter(style=CmdxStyle))
    # pygments always appends a newline
    if not text.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered
