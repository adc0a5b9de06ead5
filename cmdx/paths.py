"""
Path translation between Windows and POSIX conventions.

Rules are tried in a fixed order and the first match wins:

  drive      C:\\Users\\me          <->  /mnt/c/Users/me
  home       %USERPROFILE%\\docs    <->  ~/docs
  unc        \\\\server\\share\\x      <->  //server/share/x  (smb://... on Apple systems)
  separator  any other path, separators swapped

Only the separator fallback can fail, and only when the rewritten path
holds characters the target filesystem rejects.
"""

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Tuple, Union

from cmdx.errors import TranslateError, UnresolvedPath
from cmdx.platforms import Os

logger = logging.getLogger(__name__)

_WINDOWS_INVALID = re.compile(r'[<>"|\x00-\x1f]')
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


@dataclass(frozen=True)
class PathRule:
    """One prefix rewrite, applied when ``pattern`` matches the whole path."""

    name: str
    pattern: "re.Pattern"
    rewrite: Callable[["re.Match"], str]

    def apply(self, path: str) -> Optional[str]:
        m = self.pattern.match(path)
        if m is None:
            return None
        return self.rewrite(m)


@dataclass(frozen=True)
class PathResult:
    """The outcome of translating one path."""

    original: str
    path: str
    from_os: Os
    to_os: Os
    rule: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "path": self.path,
            "from": self.from_os.value,
            "to": self.to_os.value,
            "rule": self.rule,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


# ---------------------------------------------------------------------------
# Sniffing
# ---------------------------------------------------------------------------

def is_windows_path(path: str) -> bool:
    """True for drive-letter paths, UNC paths, or anything with a backslash."""
    return bool(_DRIVE_PREFIX.match(path)) or path.startswith("\\\\") or "\\" in path


def is_unix_path(path: str) -> bool:
    """True for absolute, home-relative or explicitly relative POSIX paths."""
    return path.startswith(("/", "~", "./", "../"))


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _uses_smb_urls(os_: Os) -> bool:
    return os_ in (Os.MACOS, Os.IOS)


def _tail(m: "re.Match", index: int, sep: str) -> str:
    rest = m.group(index)
    if rest is None:
        return ""
    return sep + rest.replace("\\", "/").replace("/", sep)


def _network_prefix(os_: Os) -> str:
    return "smb://" if _uses_smb_urls(os_) else "//"


def _windows_to_posix_rules(to_os: Os) -> List[PathRule]:
    return [
        PathRule(
            "drive",
            re.compile(r"^([A-Za-z]):(?:[\\/](.*))?$", re.DOTALL),
            lambda m: f"/mnt/{m.group(1).lower()}" + _tail(m, 2, "/"),
        ),
        PathRule(
            "home",
            re.compile(r"^%USERPROFILE%(?:[\\/](.*))?$", re.IGNORECASE | re.DOTALL),
            lambda m: "~" + _tail(m, 1, "/"),
        ),
        PathRule(
            "unc",
            re.compile(r"^\\\\([^\\/]+)\\([^\\/]+)(?:\\(.*))?$", re.DOTALL),
            lambda m: f"{_network_prefix(to_os)}{m.group(1)}/{m.group(2)}" + _tail(m, 3, "/"),
        ),
    ]


def _posix_to_windows_rules() -> List[PathRule]:
    return [
        PathRule(
            "drive",
            re.compile(r"^/mnt/([A-Za-z])(?:/(.*))?$", re.DOTALL),
            lambda m: f"{m.group(1).upper()}:" + _tail(m, 2, "\\"),
        ),
        PathRule(
            "home",
            re.compile(r"^~(?:/(.*))?$", re.DOTALL),
            lambda m: "%USERPROFILE%" + _tail(m, 1, "\\"),
        ),
        PathRule(
            "unc",
            re.compile(r"^(?:smb:)?//([^/]+)/([^/]+)(?:/(.*))?$", re.DOTALL),
            lambda m: f"\\\\{m.group(1)}\\{m.group(2)}" + _tail(m, 3, "\\"),
        ),
    ]


def _posix_to_posix_rules(to_os: Os) -> List[PathRule]:
    return [
        PathRule(
            "unc",
            re.compile(r"^(?:smb:)?//([^/]+)/([^/]+)(?:/(.*))?$", re.DOTALL),
            lambda m: f"{_network_prefix(to_os)}{m.group(1)}/{m.group(2)}" + _tail(m, 3, "/"),
        ),
    ]


def _separator_rule(to_os: Os) -> PathRule:
    sep, other = ("\\", "/") if to_os.is_windows else ("/", "\\")

    def rewrite(m: "re.Match") -> str:
        return m.group(0).replace(other, sep)

    return PathRule("separator", re.compile(r"^.*$", re.DOTALL), rewrite)


@lru_cache(maxsize=None)
def lookup_path_rules(from_os: Os, to_os: Os) -> Tuple[PathRule, ...]:
    """Return the rules for the OS pair in priority order, fallback last."""
    if from_os is to_os:
        return ()
    if from_os.is_windows and not to_os.is_windows:
        rules = _windows_to_posix_rules(to_os)
    elif to_os.is_windows and not from_os.is_windows:
        rules = _posix_to_windows_rules()
    else:
        rules = _posix_to_posix_rules(to_os)
    return tuple(rules) + (_separator_rule(to_os),)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _invalid_for(path: str, to_os: Os) -> Optional[str]:
    """Return why *path* cannot exist on *to_os*, or None if it can."""
    if to_os.is_windows:
        if _WINDOWS_INVALID.search(path):
            return "contains characters not allowed in Windows paths"
        body = path[2:] if _DRIVE_PREFIX.match(path) else path
        if ":" in body:
            return "contains ':' outside a drive prefix"
    elif "\x00" in path:
        return "contains a NUL byte"
    return None


def translate_path(path: str, from_os: Os, to_os: Os) -> PathResult:
    """
    Translate *path* from *from_os* conventions to *to_os* conventions.

    Raises:
        UnresolvedPath: if the path is empty, or only the separator
            fallback applies and the result is invalid on *to_os*
    """
    if not path:
        raise UnresolvedPath(path, "empty path")
    if from_os is to_os:
        return PathResult(path, path, from_os, to_os)

    for rule in lookup_path_rules(from_os, to_os):
        translated = rule.apply(path)
        if translated is None:
            continue
        if rule.name == "separator":
            reason = _invalid_for(translated, to_os)
            if reason:
                raise UnresolvedPath(path, reason)
        logger.debug("Path %r -> %r via %s rule", path, translated, rule.name)
        return PathResult(path, translated, from_os, to_os, rule.name)

    # The separator rule matches everything, so this is unreachable for
    # distinct OS pairs; keep the path as-is if it ever happens.
    return PathResult(path, path, from_os, to_os)


def translate_path_auto(path: str, to_os: Os) -> PathResult:
    """
    Translate *path* to *to_os*, guessing its source convention.

    Windows-looking paths are treated as Windows.  Anything else is POSIX:
    treated as Linux when the target is Windows, otherwise as already
    native to the target.
    """
    if is_windows_path(path):
        from_os = Os.WINDOWS
    elif to_os.is_windows:
        from_os = Os.LINUX
    else:
        from_os = to_os
    return translate_path(path, from_os, to_os)


def translate_paths(paths: Sequence[str], from_os: Os, to_os: Os
                    ) -> List[Union[PathResult, TranslateError]]:
    """Translate each path independently, collecting results or errors."""
    results: List[Union[PathResult, TranslateError]] = []
    for path in paths:
        try:
            results.append(translate_path(path, from_os, to_os))
        except TranslateError as e:
            results.append(e)
    return results
