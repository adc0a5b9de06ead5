"""
Flag mapping for a single command.

Flags are translated in the order the user wrote them.  Anything the
mapping does not know is emitted unchanged and reported back so the
caller can warn about it.
"""

import logging
from typing import List, NamedTuple, Optional, Sequence, Union

from cmdx.lexer import Token
from cmdx.tables import CommandMapping

logger = logging.getLogger(__name__)

FlagItem = Union[str, Token]


def _split_target(target: str) -> List[str]:
    return target.split()


def _expand_cluster(mapping: CommandMapping, flag: str) -> Optional[List[str]]:
    """Expand ``-rf`` as ``-r -f`` when every letter has a mapping."""
    letters = flag[1:]
    if flag.startswith("--") or len(letters) < 2 or not letters.isalnum():
        return None
    out: List[str] = []
    for letter in letters:
        target = mapping.target_for("-" + letter)
        if target is None:
            return None
        out.extend(_split_target(target))
    return out


def map_flag(mapping: CommandMapping, flag: str,
             windows_source: bool = False) -> Optional[List[str]]:
    """
    Translate one flag token.

    Returns the target tokens (possibly empty, meaning the flag is dropped)
    or None when the flag has no mapping.  Windows ``/switches`` are
    matched case-insensitively because cmd.exe ignores their case.
    """
    target = mapping.target_for(flag)
    if target is None and windows_source and flag.startswith("/"):
        target = mapping.target_for(flag.lower())
    if target is not None:
        return _split_target(target)
    if not windows_source and flag.startswith("-"):
        return _expand_cluster(mapping, flag)
    return None


def is_flag(mapping: Optional[CommandMapping], token: str,
            windows_source: bool) -> bool:
    """
    Decide whether *token* is a flag for the given source convention.

    Windows sources use ``/x`` switches, but a few commands (ping,
    tracert, netstat) take ``-x`` options; those count as flags only when
    the mapping knows them.
    """
    if windows_source:
        if len(token) > 1 and token.startswith("/"):
            return True
        return (mapping is not None and token.startswith("-")
                and token in mapping.source_flags)
    return len(token) > 1 and token.startswith("-")


def _flag_key(flag: str, windows_source: bool) -> str:
    return flag.lower() if windows_source and flag.startswith("/") else flag


def takes_value(mapping: CommandMapping, flag: str,
                windows_source: bool = False) -> bool:
    """True if *flag* consumes the following token as its value."""
    return _flag_key(flag, windows_source) in mapping.value_flags


class MappedFlags(NamedTuple):
    """
    Result of map_flags.

    ``flags`` holds target flag strings plus any flag values, left as the
    caller's tokens so they can be re-quoted.  ``arguments`` holds values
    whose flag was dropped; they belong with the positional arguments.
    """

    flags: List[FlagItem]
    unmapped: List[str]
    arguments: List[FlagItem]


def map_flags(mapping: CommandMapping, source_flags: Sequence[FlagItem],
              windows_source: bool = False) -> MappedFlags:
    """
    Translate an ordered sequence of flag tokens.

    Args:
        mapping: The command mapping holding the flag table
        source_flags: Flag tokens in the order the user gave them.  A flag
            listed in the mapping's ``value_flags`` takes the next item as
            its value.
        windows_source: Whether the flags use Windows conventions

    Returns:
        MappedFlags of (flags, unmapped, arguments)
    """
    target_flags: List[FlagItem] = []
    unmapped: List[str] = []
    arguments: List[FlagItem] = []
    i = 0
    while i < len(source_flags):
        flag = str(source_flags[i])
        i += 1
        mapped = map_flag(mapping, flag, windows_source)
        if mapped is None:
            logger.debug("No mapping for flag %r of %r", flag,
                         mapping.source_command)
            target_flags.append(flag)
            unmapped.append(flag)
            continue
        target_flags.extend(mapped)
        if takes_value(mapping, flag, windows_source) and i < len(source_flags):
            # A dropped flag leaves its value behind as a plain argument.
            (target_flags if mapped else arguments).append(source_flags[i])
            i += 1
    return MappedFlags(target_flags, unmapped, arguments)
