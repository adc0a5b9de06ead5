"""
Quote-aware tokenizing and compound-command splitting.

This is deliberately not a shell parser.  It understands quoting well
enough to keep ``"C:\\Program Files"`` together and to avoid splitting on
an ``&&`` that sits inside a string, and nothing more.  Backslashes are
literal (they are path separators on Windows).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from cmdx.platforms import Os

QUOTES = ("'", '"')

# Characters that force a token to be quoted when it is emitted.
_SPECIAL_POSIX = set("|&;<>()")
_SPECIAL_WINDOWS = set("|&<>()^")


@dataclass(frozen=True)
class Token:
    """A single word of a command line, with its quotes stripped."""

    text: str
    quoted: bool = False
    quote_char: Optional[str] = None

    def __str__(self) -> str:
        return self.text


def tokenize(line: str) -> List[Token]:
    """
    Split *line* on unquoted whitespace.

    Quoted spans may appear anywhere inside a word (``--name="a b"``) and
    are joined to it.  An unterminated quote swallows the rest of the line
    into the current token.
    """
    tokens: List[Token] = []
    buf: List[str] = []
    in_token = False
    quoted = False
    quote_char: Optional[str] = None
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch in QUOTES:
            end = line.find(ch, i + 1)
            if end == -1:
                end = n
            buf.append(line[i + 1:end])
            in_token = True
            quoted = True
            quote_char = quote_char or ch
            i = end + 1
            continue
        if ch.isspace():
            if in_token:
                tokens.append(Token("".join(buf), quoted, quote_char))
                buf, in_token, quoted, quote_char = [], False, False, None
            i += 1
            continue
        buf.append(ch)
        in_token = True
        i += 1

    if in_token:
        tokens.append(Token("".join(buf), quoted, quote_char))
    return tokens


def needs_quoting(text: str, target: Os) -> bool:
    """True if *text* must be quoted to survive as one word on *target*."""
    if text == "":
        return True
    special = _SPECIAL_WINDOWS if target.is_windows else _SPECIAL_POSIX
    return any(ch.isspace() or ch in special for ch in text)


def render_token(token: Token, target: Os) -> str:
    """
    Emit *token* for a command line on *target*.

    Quotes are only kept when the text still needs them.  Windows always
    gets double quotes; POSIX keeps the original quote style unless the
    text itself contains that quote character.
    """
    text = token.text
    if not token.quoted or not needs_quoting(text, target):
        return text
    if target.is_windows:
        return f'"{text}"'
    quote = token.quote_char or '"'
    if quote in text:
        quote = "'" if quote == '"' else '"'
    return f"{quote}{text}{quote}"


# ---------------------------------------------------------------------------
# Compound commands
# ---------------------------------------------------------------------------

class Operator(Enum):
    """A top-level control operator joining two commands."""
    AND = "&&"
    OR = "||"
    PIPE = "|"
    SEQ = ";"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Segment:
    """One simple command of a compound line and the operator after it."""

    text: str
    operator: Optional[Operator] = None


def split_compound(line: str) -> List[Segment]:
    """
    Split *line* on top-level ``&&``, ``||``, ``|`` and ``;``.

    Operators inside quotes are ignored.  A lone ``&`` is left in the
    segment.  Segment text is stripped; the last segment has no operator.
    """
    segments: List[Segment] = []
    start = 0
    quote: Optional[str] = None
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if quote:
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in QUOTES:
            quote = ch
            i += 1
            continue

        op: Optional[Operator] = None
        two = line[i:i + 2]
        if two == "&&":
            op = Operator.AND
        elif two == "||":
            op = Operator.OR
        elif ch == "|":
            op = Operator.PIPE
        elif ch == ";":
            op = Operator.SEQ

        if op is None:
            i += 1
            continue

        segments.append(Segment(line[start:i].strip(), op))
        i += len(op.value)
        start = i

    segments.append(Segment(line[start:].strip(), None))
    return segments


def join_compound(segments: List[Segment]) -> str:
    """Reassemble segments with one space on each side of every operator."""
    parts: List[str] = []
    for segment in segments:
        parts.append(segment.text)
        if segment.operator is not None:
            parts.append(segment.operator.value)
    return " ".join(parts)
