"""
Script file translation: extensions, interpreter lines, and whole scripts.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from cmdx.errors import TranslateError
from cmdx.platforms import Os
from cmdx.tables import (
    UNIX_SCRIPT_EXTENSIONS,
    UNIX_SHEBANGS,
    WINDOWS_DEFAULT_SCRIPT_EXTENSION,
    WINDOWS_DIRECTIVES,
    WINDOWS_EXECUTABLE_EXTENSION,
    WINDOWS_SCRIPT_EXTENSIONS,
    shebang_for,
)
from cmdx.translator import translate_full

logger = logging.getLogger(__name__)

_WINDOWS_COMMENT = re.compile(r"^(?:rem(?=\s|$)|::)\s?(.*)$", re.IGNORECASE)
_POSIX_COMMENT = re.compile(r"^#\s?(.*)$")


def _split_name(filename: str) -> Tuple[str, str, str]:
    """Split *filename* into (directory prefix, stem, extension)."""
    cut = max(filename.rfind("/"), filename.rfind("\\")) + 1
    head, base = filename[:cut], filename[cut:]
    dot = base.rfind(".")
    if dot <= 0:
        return head, base, ""
    return head, base[:dot], base[dot:]


def translate_script_extension(filename: str, from_os: Os, to_os: Os) -> str:
    """
    Swap a script or executable extension for the target OS.

    ``.bat``/``.cmd``/``.ps1`` become ``.sh`` and ``.exe`` is dropped when
    going to POSIX; ``.sh`` becomes ``.bat`` and extensionless names gain
    ``.exe`` when going to Windows.  Anything else is returned unchanged.
    """
    if not filename or from_os.is_windows == to_os.is_windows:
        return filename

    head, stem, ext = _split_name(filename)
    if not stem:
        return filename

    if from_os.is_windows:
        lowered = ext.lower()
        if lowered in WINDOWS_SCRIPT_EXTENSIONS:
            return head + stem + UNIX_SCRIPT_EXTENSIONS[0]
        if lowered == WINDOWS_EXECUTABLE_EXTENSION:
            return head + stem
        return filename

    if ext in UNIX_SCRIPT_EXTENSIONS:
        return head + stem + WINDOWS_DEFAULT_SCRIPT_EXTENSION
    if ext == "" and not stem.startswith("."):
        return head + stem + WINDOWS_EXECUTABLE_EXTENSION
    return filename


def translate_shebang(line: str, from_os: Os, to_os: Os) -> str:
    """
    Translate a script's first line between ``@echo off`` and a shebang.

    Lines that are not a known directive are returned unchanged.
    """
    if from_os.is_windows == to_os.is_windows:
        return line
    stripped = line.strip()
    if from_os.is_windows:
        if stripped.lower() in WINDOWS_DIRECTIVES:
            return shebang_for(to_os)
        return line
    normalized = re.sub(r"^#!\s+", "#!", stripped)
    normalized = " ".join(normalized.split())
    if normalized in UNIX_SHEBANGS:
        return WINDOWS_DIRECTIVES[0]
    return line


@dataclass(frozen=True)
class ScriptTranslation:
    """A whole script rewritten for another OS."""

    original: str
    translated: str
    from_os: Os
    to_os: Os
    warnings: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "translated": self.translated,
            "from": self.from_os.value,
            "to": self.to_os.value,
            "warnings": list(self.warnings),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def _translate_comment(body: str, from_os: Os, to_os: Os) -> Optional[str]:
    """Return the comment rewritten for *to_os*, or None if *body* is not one."""
    if from_os.is_windows:
        m = _WINDOWS_COMMENT.match(body)
        if m is None:
            return None
        return f"# {m.group(1)}".rstrip() if not to_os.is_windows else body
    m = _POSIX_COMMENT.match(body)
    if m is None:
        return None
    return f"REM {m.group(1)}".rstrip() if to_os.is_windows else body


def translate_script(text: str, from_os: Os, to_os: Os) -> ScriptTranslation:
    """
    Rewrite a script line by line.

    The first line goes through :func:`translate_shebang`, comments change
    style, and every other non-blank line goes through ``translate_full``.
    Lines that cannot be translated are kept as they were and reported in
    ``warnings`` with their line number.
    """
    if from_os is to_os:
        return ScriptTranslation(text, text, from_os, to_os)

    out: List[str] = []
    warnings: List[str] = []
    for number, line in enumerate(text.splitlines(), start=1):
        body = line.strip()
        indent = line[:len(line) - len(line.lstrip())]

        if not body:
            out.append(line)
            continue

        if number == 1:
            shebang = translate_shebang(line, from_os, to_os)
            if shebang != line or body.startswith("#!"):
                out.append(shebang)
                continue

        comment = _translate_comment(body, from_os, to_os)
        if comment is not None:
            out.append(indent + comment)
            continue

        try:
            result = translate_full(body, from_os, to_os)
        except TranslateError as e:
            logger.debug("Keeping line %d untranslated: %s", number, e)
            warnings.append(f"line {number}: {e}")
            out.append(line)
            continue
        warnings.extend(f"line {number}: {warning}" for warning in result.warnings)
        out.append(indent + result.translated)

    translated = "\n".join(out)
    if text.endswith("\n"):
        translated += "\n"
    return ScriptTranslation(text, translated, from_os, to_os, tuple(warnings))
