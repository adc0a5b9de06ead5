"""
Environment variable syntax translation (``%NAME%`` <-> ``$NAME``).
"""

import re

from cmdx.platforms import Os
from cmdx.tables import lookup_env_var

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"
_WINDOWS_VAR = re.compile(r"%(" + _NAME + r")%")
_POSIX_VAR = re.compile(r"\$\{(" + _NAME + r")\}|\$(" + _NAME + r")")


def translate_env_vars(text: str, from_os: Os, to_os: Os) -> str:
    """
    Rewrite variable references in *text* for *to_os*.

    Known names are renamed (``%USERPROFILE%`` -> ``$HOME``); unknown
    names keep their name and only change syntax.  Text that is not a
    variable reference, including unterminated ``%``, is left alone.
    """
    if not text or from_os.is_windows == to_os.is_windows:
        return text

    if from_os.is_windows:
        def to_posix(m: "re.Match") -> str:
            name = m.group(1)
            target = lookup_env_var(name, from_os, to_os) or name
            following = text[m.end():m.end() + 1]
            if following and (following.isalnum() or following == "_"):
                return "${" + target + "}"
            return "$" + target

        return _WINDOWS_VAR.sub(to_posix, text)

    def to_windows(m: "re.Match") -> str:
        name = m.group(1) or m.group(2)
        target = lookup_env_var(name, from_os, to_os) or name
        return "%" + target + "%"

    return _POSIX_VAR.sub(to_windows, text)
