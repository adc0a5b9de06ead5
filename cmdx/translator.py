"""
Command translation between operating systems.

The pipeline for one simple command is:

  tokenize -> passthrough check -> table lookup -> flag mapping -> reassembly

``translate_compound_command`` and ``translate_full`` run that pipeline
over each segment of a ``&&`` / ``||`` / ``|`` / ``;`` chain, and
``translate_full`` additionally rewrites path-like arguments and
environment variables.
"""

import json
import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple, Union

from thefuzz import fuzz

from cmdx.env_vars import translate_env_vars
from cmdx.errors import (
    EmptyCommand,
    InvalidCompoundSegment,
    TranslateError,
    UnknownCommand,
    UnresolvedPath,
)
from cmdx.flags import is_flag, map_flags, takes_value
from cmdx.lexer import Segment, Token, join_compound, render_token, split_compound, tokenize
from cmdx.paths import is_unix_path, is_windows_path, translate_path
from cmdx.platforms import Os
from cmdx.tables import CommandMapping, available_commands, lookup_command, native_commands

logger = logging.getLogger(__name__)

SUGGESTION_THRESHOLD = 70
MAX_SUGGESTIONS = 3

_WINDOWS_EXECUTABLE_SUFFIXES = (".exe", ".com")


@dataclass(frozen=True)
class TranslationResult:
    """The outcome of translating one command line."""

    original: str
    translated: str
    from_os: Os
    to_os: Os
    had_unmapped_flags: bool = False
    warnings: Tuple[str, ...] = ()

    @property
    def command(self) -> str:
        return self.translated

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "translated": self.translated,
            "from": self.from_os.value,
            "to": self.to_os.value,
            "had_unmapped_flags": self.had_unmapped_flags,
            "warnings": list(self.warnings),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


# A rewrite hook applied to positional arguments by translate_full.
# Returns the new token and an optional warning.
ArgRewriter = Callable[[Token], Tuple[Token, Optional[str]]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fold_name(name: str, os_: Os) -> str:
    """Normalise a command name the way *os_*'s shell would resolve it."""
    if not os_.is_windows:
        return name
    lowered = name.lower()
    for suffix in _WINDOWS_EXECUTABLE_SUFFIXES:
        if lowered.endswith(suffix):
            return lowered[:-len(suffix)]
    return lowered


def is_native_command(cmd: str, os_: Os) -> bool:
    """True if *cmd* is a canonical command on *os_* and needs no translation."""
    return _fold_name(cmd, os_) in native_commands(os_)


def suggest_commands(name: str, from_os: Os, to_os: Os) -> List[str]:
    """Return up to three known source commands that look like *name*."""
    query = name.lower().strip()
    candidates = {key.split()[0] for key in available_commands(from_os, to_os)}
    scored = []
    for candidate in candidates:
        score = fuzz.ratio(query, candidate)
        if score >= SUGGESTION_THRESHOLD:
            scored.append((score, candidate))
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [candidate for _, candidate in scored[:MAX_SUGGESTIONS]]


def _find_mapping(name: str, rest: List[Token], from_os: Os,
                  to_os: Os) -> Tuple[Optional[CommandMapping], Optional[int]]:
    """
    Find the mapping for *name*, preferring a two-token subcommand key.

    The subcommand is the first word after *name*, or a flag-like key
    (``taskkill /f /im``) reached by skipping only flags.  Returns the
    mapping and the index in *rest* of the token consumed as the
    subcommand, if any.
    """
    for index, token in enumerate(rest):
        if token.quoted:
            break
        sub = _fold_name(token.text, from_os) if from_os.is_windows else token.text
        mapping = lookup_command(f"{name} {sub}", from_os, to_os)
        if mapping is not None:
            return mapping, index
        if not is_flag(None, token.text, from_os.is_windows):
            break
    return lookup_command(name, from_os, to_os), None


def _unmapped_warning(flag: str, name: str, to_os: Os) -> str:
    return f"Flag '{flag}' has no equivalent for '{name}' on {to_os}; passed through unchanged"


def _rewrite_args(args: List[Token], rewrite: Optional[ArgRewriter],
                  warnings: List[str]) -> List[Token]:
    if rewrite is None:
        return args
    out = []
    for token in args:
        new_token, warning = rewrite(token)
        if warning:
            warnings.append(warning)
        out.append(new_token)
    return out


# ---------------------------------------------------------------------------
# Single command
# ---------------------------------------------------------------------------

def _passthrough(line: str, tokens: List[Token], from_os: Os, to_os: Os,
                 rewrite: Optional[ArgRewriter]) -> TranslationResult:
    """Keep a native command as-is, rewriting only its arguments if asked."""
    if rewrite is None:
        return TranslationResult(line, line, from_os, to_os)

    warnings: List[str] = []
    windows_source = from_os.is_windows
    pieces = [render_token(tokens[0], to_os)]
    changed = False
    end_of_flags = False
    for token in tokens[1:]:
        if token.text == "--" and not token.quoted:
            end_of_flags = True
        elif not end_of_flags and not token.quoted and is_flag(None, token.text, windows_source):
            pieces.append(token.text)
            continue
        new_token = _rewrite_args([token], rewrite, warnings)[0]
        changed = changed or new_token.text != token.text
        pieces.append(render_token(new_token, to_os))

    if not changed:
        return TranslationResult(line, line, from_os, to_os, False, tuple(warnings))
    return TranslationResult(line, " ".join(pieces), from_os, to_os, False, tuple(warnings))


def _translate_simple(line: str, from_os: Os, to_os: Os,
                      rewrite: Optional[ArgRewriter] = None) -> TranslationResult:
    if not line or not line.strip():
        raise EmptyCommand()
    if from_os is to_os:
        return TranslationResult(line, line, from_os, to_os)

    tokens = tokenize(line)
    raw_name = tokens[0].text
    name = _fold_name(raw_name, from_os)

    if is_native_command(name, to_os):
        logger.debug("'%s' is native to %s, passing through", raw_name, to_os)
        return _passthrough(line, tokens, from_os, to_os, rewrite)

    rest = tokens[1:]
    mapping, consumed = _find_mapping(name, rest, from_os, to_os)
    if mapping is None:
        logger.debug("No mapping for '%s' from %s to %s", raw_name, from_os, to_os)
        raise UnknownCommand(raw_name, from_os, to_os,
                             suggest_commands(raw_name, from_os, to_os))
    if consumed is not None:
        rest = rest[:consumed] + rest[consumed + 1:]

    windows_source = from_os.is_windows
    flag_items: List[Token] = []
    args: List[Token] = []
    end_of_flags = False
    i = 0
    while i < len(rest):
        token = rest[i]
        i += 1
        if end_of_flags or token.quoted:
            args.append(token)
            continue
        if token.text == "--":
            end_of_flags = True
            # cmd.exe has no end-of-options marker.
            if not to_os.is_windows:
                args.append(token)
            continue
        if not is_flag(mapping, token.text, windows_source):
            args.append(token)
            continue
        flag_items.append(token)
        if takes_value(mapping, token.text, windows_source) and i < len(rest):
            flag_items.append(rest[i])
            i += 1

    mapped = map_flags(mapping, flag_items, windows_source)
    args = mapped.arguments + args
    warnings = [_unmapped_warning(flag, raw_name, to_os) for flag in mapped.unmapped]

    pieces: List[str] = [mapping.target_command]
    for piece in mapped.flags:
        if isinstance(piece, Token):
            piece = _rewrite_args([piece], rewrite, warnings)[0]
            pieces.append(render_token(piece, to_os))
        else:
            pieces.append(piece)
    if args and mapping.arg_prefix:
        pieces.append(mapping.arg_prefix)
    for token in _rewrite_args(args, rewrite, warnings):
        pieces.append(render_token(token, to_os))

    return TranslationResult(
        original=line,
        translated=" ".join(piece for piece in pieces if piece != ""),
        from_os=from_os,
        to_os=to_os,
        had_unmapped_flags=bool(mapped.unmapped),
        warnings=tuple(warnings),
    )


def translate_command(line: str, from_os: Os, to_os: Os) -> TranslationResult:
    """
    Translate a single simple command from *from_os* to *to_os*.

    Raises:
        EmptyCommand: if *line* is blank
        UnknownCommand: if the command has no mapping for the OS pair
    """
    return _translate_simple(line, from_os, to_os)


# ---------------------------------------------------------------------------
# Compound and full translation
# ---------------------------------------------------------------------------

def _translate_segments(line: str, from_os: Os, to_os: Os,
                        rewrite: Optional[ArgRewriter]) -> TranslationResult:
    if not line or not line.strip():
        raise EmptyCommand()
    if from_os is to_os:
        return TranslationResult(line, line, from_os, to_os)

    segments = split_compound(line)
    if len(segments) == 1:
        result = _translate_simple(line.strip(), from_os, to_os, rewrite)
        return replace(result, original=line)

    translated: List[Segment] = []
    warnings: List[str] = []
    had_unmapped = False
    for index, segment in enumerate(segments):
        try:
            result = _translate_simple(segment.text, from_os, to_os, rewrite)
        except TranslateError as e:
            raise InvalidCompoundSegment(index, segment.text, e) from e
        translated.append(Segment(result.translated, segment.operator))
        warnings.extend(result.warnings)
        had_unmapped = had_unmapped or result.had_unmapped_flags

    return TranslationResult(line, join_compound(translated), from_os, to_os,
                             had_unmapped, tuple(warnings))


def translate_compound_command(line: str, from_os: Os, to_os: Os) -> TranslationResult:
    """
    Translate every segment of a compound command.

    Raises:
        InvalidCompoundSegment: wrapping the first segment that fails
    """
    return _translate_segments(line, from_os, to_os, None)


def _full_rewriter(from_os: Os, to_os: Os) -> ArgRewriter:
    looks_like_path = is_windows_path if from_os.is_windows else is_unix_path

    def rewrite(token: Token) -> Tuple[Token, Optional[str]]:
        text = token.text
        warning = None
        if looks_like_path(text):
            try:
                text = translate_path(text, from_os, to_os).path
            except UnresolvedPath as e:
                warning = str(e)
        text = translate_env_vars(text, from_os, to_os)
        return Token(text, token.quoted, token.quote_char), warning

    return rewrite


def translate_full(line: str, from_os: Os, to_os: Os) -> TranslationResult:
    """
    Translate a command line including its paths and environment variables.

    Commands and flags go through the regular command translator.
    Positional arguments that look like paths for *from_os* are passed
    through the path translator, and variable references are converted to
    *to_os* syntax.  Arguments of native commands are rewritten too.
    """
    return _translate_segments(line, from_os, to_os, _full_rewriter(from_os, to_os))


def translate_batch(lines: Sequence[str], from_os: Os, to_os: Os,
                    translator: Callable[[str, Os, Os], TranslationResult] = translate_command
                    ) -> List[Union[TranslationResult, TranslateError]]:
    """
    Translate many lines independently.

    Each entry of the returned list is either the result for that line or
    the ``TranslateError`` it raised; one failure never stops the batch.
    """
    results: List[Union[TranslationResult, TranslateError]] = []
    for line in lines:
        try:
            results.append(translator(line, from_os, to_os))
        except TranslateError as e:
            results.append(e)
    return results
