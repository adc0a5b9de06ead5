"""
cmdx - Translate shell commands between operating systems.

A table-driven engine that rewrites:
- Commands and their flags (dir /s <-> ls -R)
- Compound lines joined by &&, ||, | and ;
- File paths (C:\\Users\\me <-> /mnt/c/Users/me)
- Environment variables (%USERPROFILE% <-> $HOME)
- Package manager invocations (apt install -y <-> pacman -S --noconfirm)
- Script extensions and interpreter lines
"""

__version__ = "0.1.0"
__author__ = "cmdx Contributors"

from cmdx.env_vars import translate_env_vars
from cmdx.errors import (
    EmptyCommand,
    InvalidCompoundSegment,
    InvalidDistro,
    NotPackageManagerCommand,
    TranslateError,
    UnknownCommand,
    UnresolvedPath,
    UnsupportedOperation,
)
from cmdx.package_manager import (
    PackageTranslationResult,
    translate_package_command,
    translate_package_command_auto,
)
from cmdx.paths import (
    PathResult,
    is_unix_path,
    is_windows_path,
    translate_path,
    translate_path_auto,
    translate_paths,
)
from cmdx.platforms import Distro, Os, PackageManager, PackageOperation, current_os, detect_os
from cmdx.scripts import translate_script, translate_script_extension, translate_shebang
from cmdx.translator import (
    TranslationResult,
    is_native_command,
    translate_batch,
    translate_command,
    translate_compound_command,
    translate_full,
)

__all__ = [
    "Os", "Distro", "PackageManager", "PackageOperation", "detect_os", "current_os",
    "TranslationResult", "PathResult", "PackageTranslationResult",
    "translate_command", "translate_compound_command", "translate_full",
    "translate_batch", "is_native_command",
    "translate_path", "translate_path_auto", "translate_paths",
    "is_windows_path", "is_unix_path",
    "translate_env_vars",
    "translate_package_command", "translate_package_command_auto",
    "translate_script_extension", "translate_shebang", "translate_script",
    "TranslateError", "UnknownCommand", "UnresolvedPath", "InvalidCompoundSegment",
    "EmptyCommand", "NotPackageManagerCommand", "UnsupportedOperation", "InvalidDistro",
]
